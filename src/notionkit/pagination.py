"""Cursor traversal over paginated list endpoints.

A *fetch* function takes a cursor (``None`` for the first page) and
returns a :class:`~notionkit.models.PaginatedList`.  The helpers here call
it repeatedly, passing back each ``next_cursor`` unmodified, until the
server reports ``has_more: false``.

A failure while fetching any page aborts the traversal and propagates;
results gathered so far are discarded by :func:`collect_all`.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable, Iterator
from typing import Any, TypeVar

from notionkit.errors import NotionPaginationLimitError
from notionkit.models import PaginatedList
from notionkit.observability import NoopMetricsHook, get_logger
from notionkit.observability.metrics import PAGES_FETCHED_TOTAL

log = get_logger("notionkit.pagination")

T = TypeVar("T")

Fetch = Callable[[str | None], PaginatedList[T]]
AsyncFetch = Callable[[str | None], Awaitable[PaginatedList[T]]]


class _PageCounter:
    """Tracks pages fetched against the ceiling."""

    def __init__(self, max_pages: int | None, metrics: Any | None) -> None:
        if max_pages is not None and max_pages < 1:
            raise ValueError(f"max_pages must be None or >= 1, got {max_pages}")
        self.max_pages = max_pages
        self.metrics = metrics if metrics is not None else NoopMetricsHook()
        self.pages = 0
        self.results = 0

    def before_fetch(self, cursor: str | None) -> None:
        if self.max_pages is not None and self.pages >= self.max_pages:
            log.warning(
                "Pagination ceiling reached",
                extra={
                    "extra_fields": {
                        "op": "paginate",
                        "max_pages": self.max_pages,
                        "results_so_far": self.results,
                    }
                },
            )
            raise NotionPaginationLimitError(
                message=f"Stopped after {self.max_pages} pages; the listing still has more",
                context={
                    "max_pages": self.max_pages,
                    "results_so_far": self.results,
                    "next_cursor": cursor,
                },
            )

    def after_fetch(self, page: PaginatedList) -> str | None:
        self.pages += 1
        self.results += len(page.results)
        self.metrics.increment(PAGES_FETCHED_TOTAL)
        if page.has_more and page.next_cursor is not None:
            return page.next_cursor
        return None


def iterate(
    fetch: Fetch[T],
    *,
    max_pages: int | None = None,
    metrics: Any | None = None,
) -> Iterator[T]:
    """Yield every item across all pages, fetching lazily.

    Parameters
    ----------
    fetch:
        Called with ``None`` first, then with each ``next_cursor``.
    max_pages:
        Ceiling on the number of fetches.  ``None`` means unbounded.
    metrics:
        Optional :class:`~notionkit.observability.MetricsHook`.

    Raises
    ------
    NotionPaginationLimitError
        When another page is needed after *max_pages* fetches.
    """
    counter = _PageCounter(max_pages, metrics)
    cursor: str | None = None
    while True:
        counter.before_fetch(cursor)
        page = fetch(cursor)
        yield from page.results
        cursor = counter.after_fetch(page)
        if cursor is None:
            return


def collect_all(
    fetch: Fetch[T],
    *,
    max_pages: int | None = None,
    metrics: Any | None = None,
) -> list[T]:
    """Fetch every page and return all items in order.

    See :func:`iterate` for the parameters.  Nothing is returned when any
    fetch fails.
    """
    return list(iterate(fetch, max_pages=max_pages, metrics=metrics))


async def async_iterate(
    fetch: AsyncFetch[T],
    *,
    max_pages: int | None = None,
    metrics: Any | None = None,
) -> AsyncIterator[T]:
    """Async twin of :func:`iterate`."""
    counter = _PageCounter(max_pages, metrics)
    cursor: str | None = None
    while True:
        counter.before_fetch(cursor)
        page = await fetch(cursor)
        for item in page.results:
            yield item
        cursor = counter.after_fetch(page)
        if cursor is None:
            return


async def async_collect_all(
    fetch: AsyncFetch[T],
    *,
    max_pages: int | None = None,
    metrics: Any | None = None,
) -> list[T]:
    """Async twin of :func:`collect_all`."""
    return [item async for item in async_iterate(fetch, max_pages=max_pages, metrics=metrics)]
