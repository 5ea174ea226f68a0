"""Keyed collection transitions.

Computes, tick by tick, which items of a keyed collection are entering,
settled or leaving, the style each should show and when the state must be
recomputed next.
"""

from transitory.core.transitions.clock import Clock, ManualClock, SystemClock, system_clock
from transitory.core.transitions.config import TransitionConfig
from transitory.core.transitions.driver import TransitionDriver
from transitory.core.transitions.engine import (
    initial,
    initial_state,
    next_state,
    reconcile,
)
from transitory.core.transitions.errors import (
    DuplicateKeyError,
    InvalidConfigError,
    TransitionError,
)
from transitory.core.transitions.models import (
    IMMEDIATE,
    CollectionState,
    Stage,
    TransitionRecord,
)
from transitory.core.transitions.scheduler import (
    AsyncioScheduler,
    ManualScheduler,
    ScheduledHandle,
    Scheduler,
)
from transitory.core.transitions.styles import StyleFn, StyleSpec, resolve_style

__all__ = [
    "IMMEDIATE",
    "AsyncioScheduler",
    "Clock",
    "CollectionState",
    "DuplicateKeyError",
    "InvalidConfigError",
    "ManualClock",
    "ManualScheduler",
    "ScheduledHandle",
    "Scheduler",
    "Stage",
    "StyleFn",
    "StyleSpec",
    "SystemClock",
    "TransitionConfig",
    "TransitionDriver",
    "TransitionError",
    "TransitionRecord",
    "initial",
    "initial_state",
    "next_state",
    "reconcile",
    "resolve_style",
    "system_clock",
]
