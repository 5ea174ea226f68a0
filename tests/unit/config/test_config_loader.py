"""Unit tests for configuration loading."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from pydantic import ValidationError
import yaml

from transitory.core.config import (
    AppConfig,
    detect_format,
    load_app_config,
    load_config,
    load_transition_config,
)

TRANSITIONS = {
    "from": {"opacity": 0},
    "enter": {"opacity": 1},
    "update": {"opacity": 0.9},
    "leave": {"opacity": 0},
    "enter_duration_ms": 300,
    "leave_duration_ms": 600,
}


class TestDetectFormat:
    """Test format detection from file extensions."""

    @pytest.mark.parametrize(
        ("name", "expected"),
        [("a.json", "json"), ("a.yaml", "yaml"), ("a.YML", "yaml")],
    )
    def test_known_extensions(self, name: str, expected: str):
        assert detect_format(name) == expected

    def test_unknown_extension(self):
        with pytest.raises(ValueError, match="Unsupported config format"):
            detect_format("config.toml")


class TestLoadConfig:
    """Test raw config loading."""

    def test_load_json(self, tmp_path: Path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps(TRANSITIONS), encoding="utf-8")

        assert load_config(path) == TRANSITIONS

    def test_load_yaml(self, tmp_path: Path):
        path = tmp_path / "config.yaml"
        path.write_text(yaml.safe_dump(TRANSITIONS), encoding="utf-8")

        assert load_config(path) == TRANSITIONS

    def test_empty_yaml_is_empty_mapping(self, tmp_path: Path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")

        assert load_config(path) == {}

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path: Path):
        path = tmp_path / "bad.yaml"
        path.write_text("enter: [unclosed", encoding="utf-8")

        with pytest.raises(ValueError, match="Invalid YAML"):
            load_config(path)

    def test_yaml_list_rejected(self, tmp_path: Path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")

        with pytest.raises(ValueError, match="Expected a mapping"):
            load_config(path)

    def test_json_list_rejected(self, tmp_path: Path):
        path = tmp_path / "list.json"
        path.write_text("[1, 2]", encoding="utf-8")

        with pytest.raises(ValueError, match="Invalid JSON"):
            load_config(path)


class TestLoadTransitionConfig:
    """Test transition config loading."""

    def test_bare_document(self, tmp_path: Path):
        """A document holding only transition options is accepted."""
        path = tmp_path / "fade.yaml"
        path.write_text(yaml.safe_dump(TRANSITIONS), encoding="utf-8")

        config = load_transition_config(path)

        assert config.from_ == {"opacity": 0}
        assert config.settled == {"opacity": 0.9}
        assert config.leave_duration_ms == 600

    def test_transitions_section(self, tmp_path: Path):
        """A full app config contributes its transitions section."""
        path = tmp_path / "app.json"
        path.write_text(
            json.dumps({"logging": {"level": "DEBUG"}, "transitions": TRANSITIONS}),
            encoding="utf-8",
        )

        assert load_transition_config(path).enter_duration_ms == 300

    def test_invalid_options(self, tmp_path: Path):
        path = tmp_path / "fade.yaml"
        path.write_text(yaml.safe_dump({"enter": {"opacity": 1}}), encoding="utf-8")

        with pytest.raises(ValidationError):
            load_transition_config(path)


class TestLoadAppConfig:
    """Test app config loading."""

    def test_logging_defaults(self, tmp_path: Path):
        path = tmp_path / "transitory.yaml"
        path.write_text(yaml.safe_dump({"transitions": TRANSITIONS}), encoding="utf-8")

        config = load_app_config(path)

        assert isinstance(config, AppConfig)
        assert config.logging.level == "INFO"
        assert config.logging.structured is False
        assert config.transitions.enter == {"opacity": 1}

    def test_default_path(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        """Without a path, transitory.yaml in the working directory is used."""
        (tmp_path / "transitory.yaml").write_text(
            yaml.safe_dump({"logging": {"level": "ERROR"}, "transitions": TRANSITIONS}),
            encoding="utf-8",
        )
        monkeypatch.chdir(tmp_path)

        assert load_app_config().logging.level == "ERROR"

    def test_invalid_level(self, tmp_path: Path):
        path = tmp_path / "transitory.yaml"
        path.write_text(
            yaml.safe_dump({"logging": {"level": "LOUD"}, "transitions": TRANSITIONS}),
            encoding="utf-8",
        )

        with pytest.raises(ValidationError):
            load_app_config(path)
