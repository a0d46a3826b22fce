"""Page API wrappers for the Notion API.

Provides :class:`PageAPI` (sync) and :class:`AsyncPageAPI` (async) thin
wrappers around the ``/pages`` endpoints.  Both delegate all HTTP concerns
(auth, retries, rate limiting) to the underlying transport and decode the
response into a :class:`~notionkit.models.Page`.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from notionkit.models import OMITTED, Page, decode_page, encode_block_content

from ._params import compact, nullable
from .transport import AsyncNotionTransport, NotionTransport


def _create_body(
    parent: Any,
    properties: Mapping[str, Any],
    icon: Any,
    cover: Any,
    children: Sequence[Any] | None,
) -> dict[str, Any]:
    body: dict[str, Any] = {"parent": parent, "properties": properties}
    body.update(compact(icon=icon, cover=cover))
    if children is not None:
        body["children"] = [encode_block_content(c) for c in children]
    return body


def _update_body(
    properties: Mapping[str, Any] | None,
    icon: Any,
    cover: Any,
    archived: bool | None,
) -> dict[str, Any]:
    body = compact(properties=properties, archived=archived)
    body.update(nullable(icon=icon, cover=cover))
    return body


class PageAPI:
    """Synchronous wrapper for the Notion Pages API.

    Parameters
    ----------
    transport:
        A configured :class:`NotionTransport` instance.
    """

    def __init__(self, transport: NotionTransport) -> None:
        self._transport = transport

    def retrieve(self, page_id: str) -> Page:
        """Retrieve a page by its ID.

        Parameters
        ----------
        page_id:
            The UUID of the page to retrieve (with or without hyphens).
        """
        return self._transport.request("GET", f"/pages/{page_id}", decode=decode_page)

    def create(
        self,
        parent: Any,
        properties: Mapping[str, Any],
        *,
        icon: Any = OMITTED,
        cover: Any = OMITTED,
        children: Sequence[Any] | None = None,
    ) -> Page:
        """Create a new page.

        Parameters
        ----------
        parent:
            A :class:`~notionkit.models.Parent` or a raw dict such as
            ``{"database_id": "..."}``.
        properties:
            Property name to :class:`~notionkit.models.PropertyValue` (or
            raw dict).  Pages under another page only take a ``title``.
        icon, cover:
            Optional icon and cover.
        children:
            Blocks to add as page content (at most 100).
        """
        body = _create_body(parent, properties, icon, cover, children)
        return self._transport.request("POST", "/pages", body=body, decode=decode_page)

    def update(
        self,
        page_id: str,
        *,
        properties: Mapping[str, Any] | None = None,
        icon: Any = OMITTED,
        cover: Any = OMITTED,
        archived: bool | None = None,
    ) -> Page:
        """Update a page's properties, icon, cover or archive status.

        Only the properties given are changed.  ``icon=None`` or
        ``cover=None`` clears the value; leaving them out keeps it.
        """
        body = _update_body(properties, icon, cover, archived)
        return self._transport.request("PATCH", f"/pages/{page_id}", body=body, decode=decode_page)

    def archive(self, page_id: str) -> Page:
        """Move a page to the trash."""
        return self.update(page_id, archived=True)


class AsyncPageAPI:
    """Asynchronous wrapper for the Notion Pages API.

    Mirrors :class:`PageAPI` but all methods are coroutines.
    """

    def __init__(self, transport: AsyncNotionTransport) -> None:
        self._transport = transport

    async def retrieve(self, page_id: str) -> Page:
        """Retrieve a page by its ID (async)."""
        return await self._transport.request("GET", f"/pages/{page_id}", decode=decode_page)

    async def create(
        self,
        parent: Any,
        properties: Mapping[str, Any],
        *,
        icon: Any = OMITTED,
        cover: Any = OMITTED,
        children: Sequence[Any] | None = None,
    ) -> Page:
        """Create a new page (async).

        See :meth:`PageAPI.create` for parameter documentation.
        """
        body = _create_body(parent, properties, icon, cover, children)
        return await self._transport.request("POST", "/pages", body=body, decode=decode_page)

    async def update(
        self,
        page_id: str,
        *,
        properties: Mapping[str, Any] | None = None,
        icon: Any = OMITTED,
        cover: Any = OMITTED,
        archived: bool | None = None,
    ) -> Page:
        """Update a page (async).

        See :meth:`PageAPI.update` for parameter documentation.
        """
        body = _update_body(properties, icon, cover, archived)
        return await self._transport.request(
            "PATCH", f"/pages/{page_id}", body=body, decode=decode_page
        )

    async def archive(self, page_id: str) -> Page:
        return await self.update(page_id, archived=True)
