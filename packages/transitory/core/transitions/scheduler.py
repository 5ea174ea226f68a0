"""Schedulers that re-invoke the engine when a wake time is reached."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol

from transitory.core.transitions.clock import Clock

logger = logging.getLogger(__name__)

Callback = Callable[[], None]


class ScheduledHandle(Protocol):
    """Handle to a scheduled callback."""

    def cancel(self) -> None:
        """Prevent the callback from running."""
        ...


class Scheduler(Protocol):
    """Runs callbacks on behalf of a rendering host.

    ``call_soon`` must run the callback at the very next opportunity, not
    after any pending delayed callbacks.
    """

    def call_soon(self, callback: Callback) -> ScheduledHandle:
        """Schedule ``callback`` for the next scheduling opportunity."""
        ...

    def call_later(self, delay_ms: float, callback: Callback) -> ScheduledHandle:
        """Schedule ``callback`` after ``delay_ms`` milliseconds."""
        ...


class AsyncioScheduler:
    """Scheduler backed by an asyncio event loop.

    Args:
        loop: Event loop to schedule on. Defaults to the running loop at
            scheduling time.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        return self._loop if self._loop is not None else asyncio.get_running_loop()

    def call_soon(self, callback: Callback) -> ScheduledHandle:
        return self._get_loop().call_soon(callback)

    def call_later(self, delay_ms: float, callback: Callback) -> ScheduledHandle:
        return self._get_loop().call_later(max(delay_ms, 0.0) / 1000.0, callback)


@dataclass
class ManualHandle:
    """Callback registered with a ManualScheduler."""

    due_ms: float
    callback: Callback
    cancelled: bool = field(default=False)

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Scheduler driven explicitly against a clock. Used by tests and replays.

    Example:
        >>> from transitory.core.transitions import ManualClock, ManualScheduler
        >>> clock = ManualClock(1_000.0)
        >>> scheduler = ManualScheduler(clock)
        >>> _ = scheduler.call_later(250, lambda: print("tick"))
        >>> clock.advance(250)
        >>> scheduler.run_due()
        tick
        1
    """

    def __init__(self, clock: Clock) -> None:
        self._clock = clock
        self._handles: list[ManualHandle] = []

    @property
    def pending(self) -> list[ManualHandle]:
        """Callbacks that are neither cancelled nor run, soonest first."""
        return sorted(
            (h for h in self._handles if not h.cancelled), key=lambda h: h.due_ms
        )

    def call_soon(self, callback: Callback) -> ManualHandle:
        return self._register(self._clock.now(), callback)

    def call_later(self, delay_ms: float, callback: Callback) -> ManualHandle:
        return self._register(self._clock.now() + max(delay_ms, 0.0), callback)

    def run_due(self) -> int:
        """Run every callback due at the clock's current time.

        Callbacks scheduled while running are left for the next call.

        Returns:
            Number of callbacks run.
        """
        now = self._clock.now()
        due = [h for h in self.pending if h.due_ms <= now]
        ran = 0
        for handle in due:
            # An earlier callback may have cancelled this one.
            if handle.cancelled:
                continue
            self._handles.remove(handle)
            handle.callback()
            ran += 1
        logger.debug(f"Ran {ran} scheduled callback(s) at {now:.0f}ms")
        return ran

    def _register(self, due_ms: float, callback: Callback) -> ManualHandle:
        self._handles = [h for h in self._handles if not h.cancelled]
        handle = ManualHandle(due_ms=due_ms, callback=callback)
        self._handles.append(handle)
        return handle
