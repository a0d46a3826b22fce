"""Database API wrappers for the Notion API.

Provides :class:`DatabaseAPI` (sync) and :class:`AsyncDatabaseAPI` (async)
around the ``/databases`` endpoints.  ``query_all`` drives ``query``
across every cursor with :mod:`notionkit.pagination`.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from notionkit.models import (
    OMITTED,
    Database,
    Page,
    PaginatedList,
    decode_database,
    decode_page,
    paginated,
)
from notionkit.pagination import async_collect_all, collect_all

from ._params import compact, nullable, page_query
from .transport import AsyncNotionTransport, NotionTransport

_decode_page_list = paginated(decode_page)


def _create_body(
    parent: Any,
    title: Sequence[Any],
    properties: Mapping[str, Any],
    description: Sequence[Any] | None,
    icon: Any,
    cover: Any,
    is_inline: bool | None,
) -> dict[str, Any]:
    body: dict[str, Any] = {"parent": parent, "title": list(title), "properties": properties}
    body.update(compact(description=description, icon=icon, cover=cover, is_inline=is_inline))
    return body


def _update_body(
    title: Sequence[Any] | None,
    description: Sequence[Any] | None,
    icon: Any,
    cover: Any,
    properties: Mapping[str, Any] | None,
    archived: bool | None,
) -> dict[str, Any]:
    body = compact(title=title, description=description, properties=properties, archived=archived)
    body.update(nullable(icon=icon, cover=cover))
    return body


def _query_body(
    filter: Mapping[str, Any] | None,  # noqa: A002
    sorts: Sequence[Mapping[str, Any]] | None,
    start_cursor: str | None,
    page_size: int | None,
) -> dict[str, Any]:
    body = compact(filter=filter, sorts=list(sorts) if sorts is not None else None)
    body.update(page_query(start_cursor, page_size))
    return body


class DatabaseAPI:
    """Synchronous wrapper for the Notion Databases API.

    Parameters
    ----------
    transport:
        A configured :class:`NotionTransport` instance.
    """

    def __init__(self, transport: NotionTransport) -> None:
        self._transport = transport

    def retrieve(self, database_id: str) -> Database:
        """Retrieve a database and its property schema."""
        return self._transport.request(
            "GET", f"/databases/{database_id}", decode=decode_database
        )

    def create(
        self,
        parent: Any,
        title: Sequence[Any],
        properties: Mapping[str, Any],
        *,
        description: Sequence[Any] | None = None,
        icon: Any = OMITTED,
        cover: Any = OMITTED,
        is_inline: bool | None = None,
    ) -> Database:
        """Create a database.

        Parameters
        ----------
        parent:
            A page parent; databases cannot live at the workspace root
            through the public API.
        title:
            Rich-text spans, e.g. ``[text("Products")]``.
        properties:
            Property name to schema dict, e.g. ``{"Price": {"number": {}}}``.
        """
        body = _create_body(parent, title, properties, description, icon, cover, is_inline)
        return self._transport.request("POST", "/databases", body=body, decode=decode_database)

    def update(
        self,
        database_id: str,
        *,
        title: Sequence[Any] | None = None,
        description: Sequence[Any] | None = None,
        icon: Any = OMITTED,
        cover: Any = OMITTED,
        properties: Mapping[str, Any] | None = None,
        archived: bool | None = None,
    ) -> Database:
        """Update a database's title, description, icon, cover or schema."""
        body = _update_body(title, description, icon, cover, properties, archived)
        return self._transport.request(
            "PATCH", f"/databases/{database_id}", body=body, decode=decode_database
        )

    def query(
        self,
        database_id: str,
        *,
        filter: Mapping[str, Any] | None = None,  # noqa: A002
        sorts: Sequence[Mapping[str, Any]] | None = None,
        start_cursor: str | None = None,
        page_size: int | None = None,
    ) -> PaginatedList[Page]:
        """Query one page of database rows.

        Build *filter* and *sorts* with :mod:`notionkit.filters`.
        """
        body = _query_body(filter, sorts, start_cursor, page_size)
        return self._transport.request(
            "POST", f"/databases/{database_id}/query", body=body, decode=_decode_page_list
        )

    def query_all(
        self,
        database_id: str,
        *,
        filter: Mapping[str, Any] | None = None,  # noqa: A002
        sorts: Sequence[Mapping[str, Any]] | None = None,
        page_size: int | None = None,
    ) -> list[Page]:
        """Query every row matching *filter*, following cursors.

        Raises
        ------
        NotionPaginationLimitError
            When the listing is longer than ``pagination_max_pages``.
        """
        config = self._transport.config
        return collect_all(
            lambda cursor: self.query(
                database_id,
                filter=filter,
                sorts=sorts,
                start_cursor=cursor,
                page_size=page_size,
            ),
            max_pages=config.pagination_max_pages,
            metrics=config.metrics,
        )


class AsyncDatabaseAPI:
    """Asynchronous wrapper for the Notion Databases API.

    Mirrors :class:`DatabaseAPI` but all methods are coroutines.
    """

    def __init__(self, transport: AsyncNotionTransport) -> None:
        self._transport = transport

    async def retrieve(self, database_id: str) -> Database:
        return await self._transport.request(
            "GET", f"/databases/{database_id}", decode=decode_database
        )

    async def create(
        self,
        parent: Any,
        title: Sequence[Any],
        properties: Mapping[str, Any],
        *,
        description: Sequence[Any] | None = None,
        icon: Any = OMITTED,
        cover: Any = OMITTED,
        is_inline: bool | None = None,
    ) -> Database:
        """Create a database (async).

        See :meth:`DatabaseAPI.create` for parameter documentation.
        """
        body = _create_body(parent, title, properties, description, icon, cover, is_inline)
        return await self._transport.request(
            "POST", "/databases", body=body, decode=decode_database
        )

    async def update(
        self,
        database_id: str,
        *,
        title: Sequence[Any] | None = None,
        description: Sequence[Any] | None = None,
        icon: Any = OMITTED,
        cover: Any = OMITTED,
        properties: Mapping[str, Any] | None = None,
        archived: bool | None = None,
    ) -> Database:
        body = _update_body(title, description, icon, cover, properties, archived)
        return await self._transport.request(
            "PATCH", f"/databases/{database_id}", body=body, decode=decode_database
        )

    async def query(
        self,
        database_id: str,
        *,
        filter: Mapping[str, Any] | None = None,  # noqa: A002
        sorts: Sequence[Mapping[str, Any]] | None = None,
        start_cursor: str | None = None,
        page_size: int | None = None,
    ) -> PaginatedList[Page]:
        body = _query_body(filter, sorts, start_cursor, page_size)
        return await self._transport.request(
            "POST", f"/databases/{database_id}/query", body=body, decode=_decode_page_list
        )

    async def query_all(
        self,
        database_id: str,
        *,
        filter: Mapping[str, Any] | None = None,  # noqa: A002
        sorts: Sequence[Mapping[str, Any]] | None = None,
        page_size: int | None = None,
    ) -> list[Page]:
        """Query every matching row (async).

        See :meth:`DatabaseAPI.query_all`.
        """
        config = self._transport.config
        return await async_collect_all(
            lambda cursor: self.query(
                database_id,
                filter=filter,
                sorts=sorts,
                start_cursor=cursor,
                page_size=page_size,
            ),
            max_pages=config.pagination_max_pages,
            metrics=config.metrics,
        )
