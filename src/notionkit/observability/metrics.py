"""Metric names and the hook protocol that receives them.

The transport and the pagination helpers report counters and timings to
``NotionKitConfig(metrics=...)``; without one a :class:`NoopMetricsHook`
discards them.  Tags carry the HTTP ``method`` and the ``path`` collapsed by
:func:`route` so that every page, block and database shares one series.
"""

from __future__ import annotations

import re
from typing import Protocol, runtime_checkable

#: Counter per HTTP exchange, tagged with ``status`` (``"error"`` on network failure).
REQUESTS_TOTAL = "notionkit.requests_total"
#: Counter per scheduled retry, tagged with the failure ``code``.
RETRIES_TOTAL = "notionkit.retries_total"
#: Counter per ``rate_limited`` response that will be retried.
RATE_LIMITED_TOTAL = "notionkit.rate_limited_total"
#: Timing of one HTTP exchange in milliseconds.
REQUEST_DURATION_MS = "notionkit.request_duration_ms"
#: Time spent waiting for a rate-limit permit, only reported when non-zero.
RATE_LIMIT_WAIT_MS = "notionkit.rate_limit_wait_ms"
#: Counter per listing page fetched during pagination.
PAGES_FETCHED_TOTAL = "notionkit.pages_fetched_total"

# Notion object ids: a UUID with or without dashes.
_ID_SEGMENT = re.compile(
    r"^[0-9a-fA-F]{8}-?[0-9a-fA-F]{4}-?[0-9a-fA-F]{4}-?[0-9a-fA-F]{4}-?[0-9a-fA-F]{12}$"
)


def route(path: str) -> str:
    """Replace object ids in *path* with ``{id}``.

    >>> route("/blocks/59833787-2cf9-4fdf-8782-e53db20768a5/children")
    '/blocks/{id}/children'
    """
    path, _, _ = path.partition("?")
    return "/".join(
        "{id}" if _ID_SEGMENT.match(segment) else segment
        for segment in path.split("/")
    )


@runtime_checkable
class MetricsHook(Protocol):
    """What a metrics backend must provide; *tags* maps strings to strings."""

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        ...

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        ...


class NoopMetricsHook:
    __slots__ = ()

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass
