"""Builders for database query filters and sorts.

Filters are plain dicts in the shape the ``/databases/{id}/query`` and
``/search`` endpoints expect; these helpers only save callers from
spelling the nesting by hand::

    from notionkit import filters

    flt = filters.and_(
        filters.property("Price", "number", greater_than_or_equal_to=10),
        filters.property("In stock", "checkbox", equals=True),
    )
    client.databases.query(db_id, filter=flt, sorts=[filters.sort("Price")])
"""

from __future__ import annotations

from typing import Any

_TIMESTAMPS = frozenset({"created_time", "last_edited_time"})
_DIRECTIONS = frozenset({"ascending", "descending"})


def property(name: str, type: str, condition: dict[str, Any] | None = None, **kwargs: Any) -> dict[str, Any]:  # noqa: A001
    """Filter on property *name* of the given property *type*.

    The condition may be passed as a dict or as keyword arguments
    (``equals=True``, ``contains="x"``...).  The two forms are merged.

    Raises
    ------
    ValueError
        When no condition is given.
    """
    merged = {**(condition or {}), **kwargs}
    if not merged:
        raise ValueError(f"filter on {name!r} needs a condition")
    return {"property": name, type: merged}


def timestamp(kind: str, condition: dict[str, Any] | None = None, **kwargs: Any) -> dict[str, Any]:
    """Filter on the page's ``created_time`` or ``last_edited_time``."""
    if kind not in _TIMESTAMPS:
        raise ValueError(f"timestamp must be one of {sorted(_TIMESTAMPS)}, got {kind!r}")
    merged = {**(condition or {}), **kwargs}
    if not merged:
        raise ValueError(f"filter on {kind!r} needs a condition")
    return {"timestamp": kind, kind: merged}


def and_(*filters: dict[str, Any]) -> dict[str, Any]:
    """All of *filters* must match."""
    return _compound("and", filters)


def or_(*filters: dict[str, Any]) -> dict[str, Any]:
    """Any of *filters* must match."""
    return _compound("or", filters)


def _compound(op: str, filters: tuple[dict[str, Any], ...]) -> dict[str, Any]:
    if not filters:
        raise ValueError(f"'{op}' filter needs at least one operand")
    return {op: list(filters)}


def sort(name: str, direction: str = "ascending") -> dict[str, Any]:
    """Sort by property *name*."""
    _check_direction(direction)
    return {"property": name, "direction": direction}


def timestamp_sort(kind: str, direction: str = "descending") -> dict[str, Any]:
    """Sort by ``created_time`` or ``last_edited_time``."""
    if kind not in _TIMESTAMPS:
        raise ValueError(f"timestamp must be one of {sorted(_TIMESTAMPS)}, got {kind!r}")
    _check_direction(direction)
    return {"timestamp": kind, "direction": direction}


def _check_direction(direction: str) -> None:
    if direction not in _DIRECTIONS:
        raise ValueError(f"direction must be 'ascending' or 'descending', got {direction!r}")


def search_filter(object_type: str) -> dict[str, Any]:
    """Restrict ``/search`` results to ``"page"`` or ``"database"``."""
    if object_type not in ("page", "database"):
        raise ValueError(f"search can only filter on 'page' or 'database', got {object_type!r}")
    return {"property": "object", "value": object_type}
