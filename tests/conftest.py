"""Shared pytest fixtures for transitory tests."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from tests.fixtures.transitions import NOW, config_options, make_config, record
from transitory.core.transitions import (
    ManualClock,
    ManualScheduler,
    TransitionConfig,
    TransitionRecord,
)

# ============================================================================
# Styles and Timing
# ============================================================================


@pytest.fixture
def now() -> float:
    """Fixed clock reading used as the start of every scenario."""
    return NOW


@pytest.fixture
def config_dict() -> dict[str, Any]:
    """Raw default transition config (no update/initial/common)."""
    return config_options()


@pytest.fixture
def config() -> TransitionConfig:
    """Default transition config: 500ms enter, 1000ms leave."""
    return make_config()


@pytest.fixture
def key_of() -> Callable[[Any], str]:
    """Items in most tests are their own keys."""
    return str


# ============================================================================
# Clock and Scheduler
# ============================================================================


@pytest.fixture
def clock() -> ManualClock:
    """Manual clock starting at NOW."""
    return ManualClock(NOW)


@pytest.fixture
def scheduler(clock: ManualClock) -> ManualScheduler:
    """Manual scheduler bound to the test clock."""
    return ManualScheduler(clock)


# ============================================================================
# Record Factory
# ============================================================================


@pytest.fixture
def make_record() -> Callable[..., TransitionRecord]:
    """Factory for records whose item is their key."""
    return record
