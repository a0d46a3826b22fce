"""Search API wrapper for the Notion API.

``/search`` returns pages and databases shared with the integration whose
title matches the query; an empty query matches everything.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from notionkit.models import Database, Page, PaginatedList, decode_page_or_database, paginated
from notionkit.pagination import async_collect_all, collect_all

from ._params import compact, page_query
from .transport import AsyncNotionTransport, NotionTransport

_decode_result_list = paginated(decode_page_or_database)


def _search_body(
    query: str | None,
    filter: Mapping[str, Any] | None,  # noqa: A002
    sort: Mapping[str, Any] | None,
    start_cursor: str | None,
    page_size: int | None,
) -> dict[str, Any]:
    body = compact(query=query, filter=filter, sort=sort)
    body.update(page_query(start_cursor, page_size))
    return body


class SearchAPI:
    """Synchronous wrapper for the Notion Search API.

    Instances are callable, so ``client.search(query="Roadmap")`` reads
    naturally; :meth:`all` follows every cursor.
    """

    def __init__(self, transport: NotionTransport) -> None:
        self._transport = transport

    def __call__(
        self,
        *,
        query: str | None = None,
        filter: Mapping[str, Any] | None = None,  # noqa: A002
        sort: Mapping[str, Any] | None = None,
        start_cursor: str | None = None,
        page_size: int | None = None,
    ) -> PaginatedList[Page | Database]:
        """Search one page of results.

        Parameters
        ----------
        query:
            Text to match against titles.
        filter:
            ``filters.search_filter("page")`` or ``("database")``.
        sort:
            ``filters.timestamp_sort("last_edited_time")``.
        """
        body = _search_body(query, filter, sort, start_cursor, page_size)
        return self._transport.request("POST", "/search", body=body, decode=_decode_result_list)

    def all(
        self,
        *,
        query: str | None = None,
        filter: Mapping[str, Any] | None = None,  # noqa: A002
        sort: Mapping[str, Any] | None = None,
        page_size: int | None = None,
    ) -> list[Page | Database]:
        config = self._transport.config
        return collect_all(
            lambda cursor: self(
                query=query, filter=filter, sort=sort, start_cursor=cursor, page_size=page_size
            ),
            max_pages=config.pagination_max_pages,
            metrics=config.metrics,
        )


class AsyncSearchAPI:
    """Asynchronous wrapper for the Notion Search API."""

    def __init__(self, transport: AsyncNotionTransport) -> None:
        self._transport = transport

    async def __call__(
        self,
        *,
        query: str | None = None,
        filter: Mapping[str, Any] | None = None,  # noqa: A002
        sort: Mapping[str, Any] | None = None,
        start_cursor: str | None = None,
        page_size: int | None = None,
    ) -> PaginatedList[Page | Database]:
        body = _search_body(query, filter, sort, start_cursor, page_size)
        return await self._transport.request(
            "POST", "/search", body=body, decode=_decode_result_list
        )

    async def all(
        self,
        *,
        query: str | None = None,
        filter: Mapping[str, Any] | None = None,  # noqa: A002
        sort: Mapping[str, Any] | None = None,
        page_size: int | None = None,
    ) -> list[Page | Database]:
        config = self._transport.config
        return await async_collect_all(
            lambda cursor: self(
                query=query, filter=filter, sort=sort, start_cursor=cursor, page_size=page_size
            ),
            max_pages=config.pagination_max_pages,
            metrics=config.metrics,
        )
