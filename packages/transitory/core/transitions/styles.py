"""Style resolution for transition stages."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from transitory.core.transitions.errors import InvalidConfigError

StyleFn = Callable[[Any, int], Any]
# A constant style value or a function of (item, order).
StyleSpec = Any


def resolve_style(spec: StyleSpec, item: Any, order: int, common: StyleSpec = None) -> Any:
    """Resolve a stage style for one item.

    Args:
        spec: Constant style or callable ``(item, order) -> style``.
        item: The caller's item.
        order: The item's logical order.
        common: Optional style merged underneath ``spec``.

    Returns:
        The resolved style. With ``common`` set, a new dict holding the
        common fields overlaid by the stage fields.

    Raises:
        InvalidConfigError: If ``common`` is set and either style is not a mapping.

    Example:
        >>> resolve_style(lambda item, order: {"width": order}, "a", 2, common={"height": 10})
        {'height': 10, 'width': 2}
    """
    style = spec(item, order) if callable(spec) else spec
    if common is None:
        return style

    base = resolve_style(common, item, order)
    if not isinstance(base, Mapping) or not isinstance(style, Mapping):
        raise InvalidConfigError(
            "A common style can only be merged with mapping styles, "
            f"got {type(base).__name__} and {type(style).__name__}"
        )
    return {**base, **style}
