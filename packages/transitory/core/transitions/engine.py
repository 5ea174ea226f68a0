"""Reconciliation engine for keyed collection transitions.

Given the previous ``CollectionState`` and a new input sequence, computes the
next state: each item's stage and style, a stable rendering order and the
earliest time the state must be recomputed without new input.

The merge is a single two-pointer pass over the previous records and the new
items. Items that moved are parked in a pending-move table and emitted when
the pointer over the previous records reaches their old slot, so they keep
their rendering position while ``order`` reflects their new logical position.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Any

from transitory.core.transitions.clock import Clock, system_clock
from transitory.core.transitions.config import TransitionConfig
from transitory.core.transitions.errors import DuplicateKeyError
from transitory.core.transitions.models import (
    IMMEDIATE,
    CollectionState,
    Stage,
    TransitionRecord,
)
from transitory.core.transitions.styles import StyleSpec, resolve_style

logger = logging.getLogger(__name__)

KeyFn = Callable[[Any], str]
ConfigLike = TransitionConfig | Mapping[str, Any]


def initial_state(
    items: Iterable[Any],
    key_of: KeyFn,
    config: ConfigLike,
) -> CollectionState:
    """Build the state for the very first tick.

    With ``config.initial`` set, items start settled (``ACTIVE``) and nothing
    is scheduled. Otherwise they start ``ENTERING`` from the ``from`` style and
    request an immediate wake so the enter transition starts on the next tick.

    Args:
        items: Input items in order.
        key_of: Returns the stable key of an item.
        config: TransitionConfig or a mapping validated into one.

    Returns:
        The first CollectionState.

    Raises:
        InvalidConfigError: If the config is invalid.
        DuplicateKeyError: If ``config.check_keys`` is set and a key repeats.
    """
    cfg = TransitionConfig.coerce(config)

    items = list(items)
    keys = [key_of(item) for item in items]
    if cfg.check_keys:
        _check_unique_keys(keys)
    if not items:
        return CollectionState.empty()

    if cfg.initial is not None:
        stage, spec, wake_at = Stage.ACTIVE, cfg.initial, None
    else:
        stage, spec, wake_at = Stage.ENTERING, cfg.from_, IMMEDIATE

    records = [
        TransitionRecord(
            item=item,
            key=key,
            stage=stage,
            style=resolve_style(spec, item, index, cfg.common),
            wake_at=wake_at,
            order=index,
        )
        for index, (item, key) in enumerate(zip(items, keys, strict=True))
    ]
    logger.debug(f"Initial state: {len(records)} records in stage {stage.value}")
    return CollectionState.from_records(records)


def next_state(
    prev: CollectionState,
    items: Iterable[Any],
    key_of: KeyFn,
    config: ConfigLike,
    *,
    now: float | None = None,
    clock: Clock | None = None,
) -> CollectionState:
    """Reconcile the previous state with a new input sequence.

    The output contains every input item exactly once, every previous record
    whose key is absent from the input as ``LEAVING`` until its leave timer
    runs out, and keeps moved items near their previous rendering slot.

    Args:
        prev: State returned by the previous call.
        items: New input items in order. Keys must be unique.
        key_of: Returns the stable key of an item.
        config: TransitionConfig or a mapping validated into one.
        now: Current time in ms. Read from ``clock`` when omitted.
        clock: Time source used when ``now`` is omitted (system clock by default).

    Returns:
        The next CollectionState.

    Raises:
        InvalidConfigError: If the config is invalid.
        DuplicateKeyError: If ``config.check_keys`` is set and a key repeats.
    """
    cfg = TransitionConfig.coerce(config)

    items = list(items)
    keys = [key_of(item) for item in items]
    if cfg.check_keys:
        _check_unique_keys(keys)
    if not items and not prev.records:
        return CollectionState.empty()

    if now is None:
        now = (clock or system_clock).now()

    builder = _StateBuilder(cfg, now)
    builder.merge(prev, items, keys)
    state = CollectionState.from_records(builder.records)
    logger.debug(
        f"Reconciled {len(prev.records)} -> {len(state.records)} records at {now:.0f}ms "
        f"({dict(builder.counts)}), next wake: {state.next_wake}"
    )
    return state


# Aliases matching the engine's operation names.
initial = initial_state
reconcile = next_state


class _StateBuilder:
    """Accumulates the output records of one reconciliation."""

    def __init__(self, config: TransitionConfig, now: float) -> None:
        self.config = config
        self.now = now
        self.records: list[TransitionRecord] = []
        self.counts: Counter[str] = Counter()
        self._next_order = 0

    def merge(self, prev: CollectionState, items: Sequence[Any], keys: Sequence[str]) -> None:
        input_keys = set(keys)
        prev_records = prev.records
        # key -> (order reserved at its new position, input item)
        pending: dict[str, tuple[int, Any]] = {}

        p = i = 0
        while p < len(prev_records) and i < len(items):
            prev_record = prev_records[p]
            key = keys[i]
            if prev_record.key in pending:
                order, item = pending.pop(prev_record.key)
                self.keep(prev_record, item, order)
                p += 1
            elif prev_record.key == key:
                self.keep(prev_record, items[i], self._take_order())
                p += 1
                i += 1
            elif prev_record.key not in input_keys:
                self.absent(prev_record)
                p += 1
            elif key not in prev.by_key:
                self.add(items[i], key)
                i += 1
            else:
                pending[key] = (self._take_order(), items[i])
                self.counts["moved"] += 1
                i += 1

        for prev_record in prev_records[p:]:
            if prev_record.key in pending:
                order, item = pending.pop(prev_record.key)
                self.keep(prev_record, item, order)
            else:
                self.absent(prev_record)

        for item, key in zip(items[i:], keys[i:], strict=True):
            self.add(item, key)

    def add(self, item: Any, key: str) -> None:
        """Emit a brand new item, starting from the ``from`` style."""
        order = self._take_order()
        self._emit(item, key, Stage.ENTERING, self.config.from_, IMMEDIATE, order)
        self.counts["added"] += 1

    def keep(self, prev: TransitionRecord, item: Any, order: int) -> None:
        """Emit an item present in both the previous state and the input."""
        cfg = self.config
        if prev.is_pending_enter:
            self._emit(
                item, prev.key, Stage.ENTERING, cfg.enter, self.now + cfg.enter_duration_ms, order
            )
        elif prev.stage == Stage.ENTERING and prev.wake_at is not None and prev.wake_at > self.now:
            self._emit(item, prev.key, Stage.ENTERING, cfg.enter, prev.wake_at, order)
        else:
            # Entering and due, already active, or re-adopted while leaving.
            self._emit(item, prev.key, Stage.ACTIVE, cfg.settled, None, order)
        self.counts["kept"] += 1

    def absent(self, prev: TransitionRecord) -> None:
        """Handle a previous record whose key is missing from the input."""
        if prev.stage != Stage.LEAVING:
            style = resolve_style(self.config.leave, prev.item, prev.order, self.config.common)
            self.records.append(
                prev.model_copy(
                    update={
                        "stage": Stage.LEAVING,
                        "style": style,
                        "wake_at": self.now + self.config.leave_duration_ms,
                    }
                )
            )
            self.counts["leaving"] += 1
        elif prev.wake_at is None or prev.wake_at <= self.now:
            self.counts["dropped"] += 1
        else:
            self.records.append(prev)
            self.counts["leaving"] += 1

    def _emit(
        self,
        item: Any,
        key: str,
        stage: Stage,
        spec: StyleSpec,
        wake_at: float | None,
        order: int,
    ) -> None:
        self.records.append(
            TransitionRecord(
                item=item,
                key=key,
                stage=stage,
                style=resolve_style(spec, item, order, self.config.common),
                wake_at=wake_at,
                order=order,
            )
        )

    def _take_order(self) -> int:
        order = self._next_order
        self._next_order += 1
        return order


def _check_unique_keys(keys: Sequence[str]) -> None:
    seen: set[str] = set()
    for key in keys:
        if key in seen:
            raise DuplicateKeyError(key)
        seen.add(key)
