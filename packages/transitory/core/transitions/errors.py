"""Exceptions raised by the transition engine."""

from __future__ import annotations


class TransitionError(Exception):
    """Base class for transition engine errors."""


class InvalidConfigError(TransitionError, ValueError):
    """Transition configuration is missing required fields or is malformed.

    Raised on the first engine call that sees the bad config. Never retried.
    """


class DuplicateKeyError(TransitionError, KeyError):
    """The same key appeared twice in one input collection.

    Only raised when ``TransitionConfig.check_keys`` is enabled; otherwise key
    uniqueness is a caller precondition.
    """

    def __init__(self, key: str) -> None:
        super().__init__(key)
        self.key = key

    def __str__(self) -> str:
        return f"Duplicate key in input collection: {self.key!r}"
