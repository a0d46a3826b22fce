"""Request body and query helpers shared by the endpoint wrappers."""

from __future__ import annotations

from typing import Any

from notionkit.models import OMITTED


def compact(**fields: Any) -> dict[str, Any]:
    """Keep the fields that were given: drops ``None`` and ``OMITTED``."""
    return {k: v for k, v in fields.items() if v is not None and v is not OMITTED}


def nullable(**fields: Any) -> dict[str, Any]:
    """Keep every field except ``OMITTED`` ones; ``None`` is sent as ``null``."""
    return {k: v for k, v in fields.items() if v is not OMITTED}


def page_query(start_cursor: str | None, page_size: int | None) -> dict[str, Any]:
    if page_size is not None and not 1 <= page_size <= 100:
        raise ValueError(f"page_size must be between 1 and 100, got {page_size}")
    return compact(start_cursor=start_cursor, page_size=page_size)
