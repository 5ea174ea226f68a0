"""State model for keyed collection transitions.

A ``CollectionState`` is the immutable snapshot of one tick: the records in
rendering order, a key index over them, and the earliest pending wake time.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Wake sentinel: "re-run as soon as possible". Real clocks report epoch
# milliseconds, so this is <= any real reading and always wins the minimum.
IMMEDIATE: float = 0.0


class Stage(str, Enum):
    """Lifecycle stage of a rendered item."""

    ENTERING = "entering"
    ACTIVE = "active"
    LEAVING = "leaving"


class TransitionRecord(BaseModel):
    """One rendered element of the collection.

    ``order`` is the element's logical position. It is not necessarily the
    record's index in ``CollectionState.records``: moved items keep their old
    rendering slot and leaving items keep the order they had when they left.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    item: Any
    key: str
    stage: Stage
    style: Any = None
    wake_at: float | None = None
    order: int = Field(ge=0)

    @property
    def is_pending_enter(self) -> bool:
        """True while the record shows its ``from`` style and waits to start entering."""
        return self.stage == Stage.ENTERING and self.wake_at == IMMEDIATE

    def is_due(self, now: float) -> bool:
        """Whether the record's timer has elapsed at ``now``."""
        return self.wake_at is not None and self.wake_at <= now


class CollectionState(BaseModel):
    """Snapshot of the whole collection for one tick.

    Build instances with ``from_records`` (or ``empty``) so ``by_key`` and
    ``next_wake`` are always derived from ``records``.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    records: tuple[TransitionRecord, ...] = ()
    by_key: dict[str, TransitionRecord] = Field(default_factory=dict)
    next_wake: float | None = None

    @classmethod
    def from_records(cls, records: Iterable[TransitionRecord]) -> CollectionState:
        """Build a state, deriving the key index and the earliest wake time.

        Args:
            records: Records in rendering order. Keys must be unique.

        Returns:
            New CollectionState.
        """
        ordered = tuple(records)
        by_key: dict[str, TransitionRecord] = {}
        next_wake: float | None = None
        for record in ordered:
            by_key[record.key] = record
            if record.wake_at is not None and (next_wake is None or record.wake_at < next_wake):
                next_wake = record.wake_at
        return cls(records=ordered, by_key=by_key, next_wake=next_wake)

    @classmethod
    def empty(cls) -> CollectionState:
        """The well-formed empty state."""
        return cls.from_records(())

    def __len__(self) -> int:
        return len(self.records)

    def __contains__(self, key: object) -> bool:
        return key in self.by_key

    def get(self, key: str) -> TransitionRecord | None:
        return self.by_key.get(key)

    def keys(self) -> list[str]:
        """Keys in rendering order."""
        return [record.key for record in self.records]

    def items(self) -> list[Any]:
        """Caller items in rendering order, leaving items included."""
        return [record.item for record in self.records]
