"""Configuration loading utilities with JSON and YAML support."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from transitory.core.config.models import AppConfig
from transitory.core.transitions.config import TransitionConfig
from transitory.core.utils.json import read_json
from transitory.core.utils.logging import configure_logging as _configure_logging

logger = logging.getLogger(__name__)


def detect_format(file_path: Path | str) -> str:
    """Detect config file format from extension.

    Args:
        file_path: Path to config file

    Returns:
        Format string: "json" or "yaml"

    Raises:
        ValueError: If format cannot be determined

    Example:
        >>> detect_format("config.json")
        'json'
        >>> detect_format("config.yml")
        'yaml'
    """
    suffix = Path(file_path).suffix.lower()

    if suffix == ".json":
        return "json"
    elif suffix in [".yaml", ".yml"]:
        return "yaml"
    else:
        raise ValueError(f"Unsupported config format: {suffix}")


def load_config(path: str | Path) -> dict[str, Any]:
    """Load and return a raw configuration dictionary.

    Format is auto-detected from the file extension.

    Args:
        path: Path to config file (.json, .yaml, or .yml)

    Returns:
        Raw configuration dictionary

    Raises:
        FileNotFoundError: If config file does not exist
        ValueError: If format is not supported or file content is invalid
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Config file does not exist: {path}")

    fmt = detect_format(path)

    if fmt == "json":
        try:
            return read_json(path)
        except ValueError as e:
            raise ValueError(f"Invalid JSON in {path}: {e}") from e

    try:
        with path.open("r", encoding="utf-8") as f:
            content = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e

    # safe_load returns None for empty files
    if content is None:
        return {}
    if not isinstance(content, dict):
        raise ValueError(f"Expected a mapping in {path}, got {type(content).__name__}")
    return content


def load_app_config(path: str | Path | None = None) -> AppConfig:
    """Load and validate application configuration.

    A document without a ``transitions`` section is read as a bare
    transition config and gets the default logging settings.

    Args:
        path: Path to app config file. Defaults to ``AppConfig.default_path()``.

    Returns:
        Validated AppConfig

    Raises:
        FileNotFoundError: If config file does not exist
        ValidationError: If config is invalid
    """
    if path is None:
        path = AppConfig.default_path()

    raw_config = load_config(path)
    if "transitions" not in raw_config:
        raw_config = {"transitions": raw_config}
    config = AppConfig.model_validate(raw_config)
    logger.debug(f"Loaded app config from {path}")
    return config


def load_transition_config(path: str | Path) -> TransitionConfig:
    """Load transition styles and timings.

    Accepts either a bare transition config or a full app config with a
    ``transitions`` section.

    Args:
        path: Path to config file (.json, .yaml, or .yml)

    Returns:
        Validated TransitionConfig

    Raises:
        FileNotFoundError: If config file does not exist
        ValidationError: If config is invalid

    Example:
        >>> config = load_transition_config("fade.yaml")
    """
    return load_app_config(path).transitions


def configure_logging(config: AppConfig, level: str | None = None) -> None:
    """Configure Python logging from app config.

    Args:
        config: AppConfig instance
        level: Overrides ``config.logging.level`` when given.
    """
    _configure_logging(
        level=level or config.logging.level,
        format_string=config.logging.format,
        filename=config.logging.filename,
        structured=config.logging.structured,
    )
