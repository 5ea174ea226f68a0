"""Transition configuration model."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from transitory.core.transitions.errors import InvalidConfigError


class TransitionConfig(BaseModel):
    """Styles and timings applied to items as they enter, settle and leave.

    Every style field accepts either a constant style value or a callable
    ``(item, order) -> style``.

    Attributes:
        common: Merged underneath every other style (stage style wins).
        initial: Style for items present on the very first tick. When set,
            those items start settled instead of entering.
        from_: Style a new item starts from (alias ``from``). Required.
        enter: Style applied while an item is entering. Required.
        enter_duration_ms: How long the enter transition takes.
        update: Style for settled items. Defaults to ``enter``.
        leave: Style applied while an item is leaving. Required.
        leave_duration_ms: How long the leave transition takes.
        check_keys: Reject duplicate keys in each input collection.

    Example:
        >>> config = TransitionConfig.model_validate({
        ...     "from": {"opacity": 0},
        ...     "enter": {"opacity": 1},
        ...     "leave": {"opacity": 0},
        ...     "enter_duration_ms": 500,
        ...     "leave_duration_ms": 1000,
        ... })
        >>> config.from_
        {'opacity': 0}
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        populate_by_name=True,
        arbitrary_types_allowed=True,
    )

    common: Any = None
    initial: Any = None
    from_: Any = Field(default=None, alias="from")
    enter: Any = None
    enter_duration_ms: float = Field(ge=0.0, description="Enter transition duration (ms)")
    update: Any = None
    leave: Any = None
    leave_duration_ms: float = Field(ge=0.0, description="Leave transition duration (ms)")
    check_keys: bool = Field(default=False, description="Raise on duplicate input keys")

    @model_validator(mode="after")
    def _check_required_styles(self) -> TransitionConfig:
        missing = self.missing_styles()
        if missing:
            raise ValueError(f"Missing required style(s): {', '.join(missing)}")
        return self

    def missing_styles(self) -> list[str]:
        """Names of required styles that are unset.

        Copies made with ``model_copy(update=...)`` skip validation, so
        ``coerce`` checks this again for instances.
        """
        return [
            alias
            for alias, name in (("from", "from_"), ("enter", "enter"), ("leave", "leave"))
            if getattr(self, name) is None
        ]

    @property
    def settled(self) -> Any:
        """Style spec for settled items: ``update`` falling back to ``enter``."""
        return self.update if self.update is not None else self.enter

    @classmethod
    def coerce(cls, config: TransitionConfig | Mapping[str, Any]) -> TransitionConfig:
        """Return ``config`` as a validated TransitionConfig.

        Raises:
            InvalidConfigError: If the mapping fails validation or a required
                style is unset.
        """
        if isinstance(config, cls):
            missing = config.missing_styles()
            if missing:
                raise InvalidConfigError(f"Missing required style(s): {', '.join(missing)}")
            return config
        if not isinstance(config, Mapping):
            raise InvalidConfigError(
                f"Expected TransitionConfig or mapping, got {type(config).__name__}"
            )
        try:
            return cls.model_validate(dict(config))
        except ValidationError as e:
            raise InvalidConfigError(f"Invalid transition config: {e}") from e
