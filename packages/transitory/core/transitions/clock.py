"""Time sources for the transition engine.

All times are epoch milliseconds.
"""

from __future__ import annotations

import time
from typing import Protocol


class Clock(Protocol):
    """Source of the current time in milliseconds (monotonically non-decreasing)."""

    def now(self) -> float:
        """Return the current time in milliseconds."""
        ...


class SystemClock:
    """Wall clock in epoch milliseconds."""

    def now(self) -> float:
        return time.time() * 1000.0


class ManualClock:
    """Clock that only moves when told to. Used by tests and replays.

    Example:
        >>> clock = ManualClock(1_000.0)
        >>> clock.advance(500)
        >>> clock.now()
        1500.0
    """

    def __init__(self, start_ms: float = 1.0) -> None:
        if start_ms <= 0:
            raise ValueError(f"start_ms must be positive, got {start_ms}")
        self._now = float(start_ms)

    def now(self) -> float:
        return self._now

    def advance(self, delta_ms: float) -> None:
        """Move the clock forward by ``delta_ms``."""
        if delta_ms < 0:
            raise ValueError(f"Clock cannot go backwards (delta_ms={delta_ms})")
        self._now += delta_ms

    def set(self, now_ms: float) -> None:
        """Jump the clock to ``now_ms`` (must not be earlier than the current time)."""
        if now_ms < self._now:
            raise ValueError(f"Clock cannot go backwards ({now_ms} < {self._now})")
        self._now = float(now_ms)


system_clock = SystemClock()
