"""Shared styles, timings and record helpers for transition tests."""

from __future__ import annotations

from typing import Any

from transitory.core.transitions import CollectionState, Stage, TransitionConfig, TransitionRecord

NOW = 1_700_000_000_000.0

FROM = {"opacity": 0.5}
ENTER = {"opacity": 1}
UPDATE = {"opacity": 0.9}
INITIAL = {"opacity": 0.75}
LEAVE = {"opacity": 0}

ENTER_MS = 500.0
LEAVE_MS = 1000.0


def config_options(**overrides: Any) -> dict[str, Any]:
    """Raw default config (500ms enter, 1000ms leave) with ``overrides`` applied."""
    options: dict[str, Any] = {
        "from": FROM,
        "enter": ENTER,
        "leave": LEAVE,
        "enter_duration_ms": ENTER_MS,
        "leave_duration_ms": LEAVE_MS,
    }
    options.update(overrides)
    return options


def make_config(**overrides: Any) -> TransitionConfig:
    """Validated default config with ``overrides`` applied (``from`` by its alias)."""
    return TransitionConfig.model_validate(config_options(**overrides))


def record(
    key: str,
    stage: Stage,
    style: Any,
    order: int,
    wake_at: float | None = None,
) -> TransitionRecord:
    """Record whose item is its key."""
    return TransitionRecord(
        item=key, key=key, stage=stage, style=style, wake_at=wake_at, order=order
    )


def state_of(*records: TransitionRecord) -> CollectionState:
    return CollectionState.from_records(records)


__all__ = [
    "ENTER",
    "ENTER_MS",
    "FROM",
    "INITIAL",
    "LEAVE",
    "LEAVE_MS",
    "NOW",
    "UPDATE",
    "config_options",
    "make_config",
    "record",
    "state_of",
]
