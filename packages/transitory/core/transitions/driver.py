"""Host binding that threads engine state across ticks.

``TransitionDriver`` owns the single live ``CollectionState`` for a rendering
host. Each ``update`` runs the engine, publishes the records and asks the
scheduler to call back at the state's next wake time, so entering and leaving
items progress without new input.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Any

from transitory.core.transitions.clock import Clock, system_clock
from transitory.core.transitions.config import TransitionConfig
from transitory.core.transitions.engine import ConfigLike, KeyFn, initial_state, next_state
from transitory.core.transitions.models import IMMEDIATE, CollectionState, TransitionRecord
from transitory.core.transitions.scheduler import ScheduledHandle, Scheduler

logger = logging.getLogger(__name__)


class TransitionDriver:
    """Keeps a collection's transition state current for a rendering host.

    Args:
        key_of: Returns the stable key of an item.
        config: TransitionConfig or a mapping validated into one.
        scheduler: Used to request re-evaluation at wake times.
        clock: Time source (system clock by default).
        on_change: Called with every new state, including those produced by
            scheduled wakes.

    Example:
        >>> driver = TransitionDriver(str, config, scheduler=AsyncioScheduler(), on_change=render)
        >>> driver.update(["foo", "bar"])
    """

    def __init__(
        self,
        key_of: KeyFn,
        config: ConfigLike,
        *,
        scheduler: Scheduler,
        clock: Clock | None = None,
        on_change: Callable[[CollectionState], None] | None = None,
    ) -> None:
        self._key_of = key_of
        self._config = TransitionConfig.coerce(config)
        self._scheduler = scheduler
        self._clock = clock or system_clock
        self._on_change = on_change
        self._items: list[Any] = []
        self._state: CollectionState | None = None
        self._handle: ScheduledHandle | None = None
        self._closed = False

    @property
    def state(self) -> CollectionState | None:
        """Current state, or None before the first update."""
        return self._state

    @property
    def records(self) -> tuple[TransitionRecord, ...]:
        """Records to render, in rendering order."""
        return self._state.records if self._state is not None else ()

    @property
    def wake_pending(self) -> bool:
        return self._handle is not None

    def update(self, items: Iterable[Any]) -> tuple[TransitionRecord, ...]:
        """Reconcile against new input and reschedule the next wake.

        Args:
            items: Latest input collection.

        Returns:
            Records to render.
        """
        if self._closed:
            raise RuntimeError("TransitionDriver is closed")
        return self._tick(list(items))

    def close(self) -> None:
        """Cancel any pending wake. Further updates are rejected."""
        self._cancel_wake()
        self._closed = True

    def _tick(self, items: list[Any]) -> tuple[TransitionRecord, ...]:
        # Nothing changes unless the engine accepts the input.
        if self._state is None:
            state = initial_state(items, self._key_of, self._config)
        else:
            state = next_state(
                self._state, items, self._key_of, self._config, now=self._clock.now()
            )
        self._items = items
        self._state = state
        self._schedule_wake(state.next_wake)
        if self._on_change is not None:
            self._on_change(state)
        return state.records

    def _schedule_wake(self, next_wake: float | None) -> None:
        self._cancel_wake()
        if next_wake is None:
            return

        now = self._clock.now()
        if next_wake == IMMEDIATE or next_wake <= now:
            self._handle = self._scheduler.call_soon(self._wake)
        else:
            logger.debug(f"Scheduling wake in {next_wake - now:.0f}ms")
            self._handle = self._scheduler.call_later(next_wake - now, self._wake)

    def _wake(self) -> None:
        self._handle = None
        if self._closed:
            return
        self._tick(self._items)

    def _cancel_wake(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
