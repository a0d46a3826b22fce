"""Block API wrappers for the Notion API.

Provides :class:`BlockAPI` (sync) and :class:`AsyncBlockAPI` (async)
around the ``/blocks`` endpoints.  ``delete`` archives the block rather
than removing it: the API only ever moves blocks to the trash.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from notionkit.models import (
    Block,
    BlockContent,
    PaginatedList,
    decode_block,
    encode_block_content,
    paginated,
)
from notionkit.pagination import async_collect_all, collect_all

from ._params import compact, page_query
from .transport import AsyncNotionTransport, NotionTransport

_decode_block_list = paginated(decode_block)

# Limit of the append endpoint.
MAX_CHILDREN_PER_REQUEST = 100


def _update_body(content: BlockContent | None, archived: bool | None) -> dict[str, Any]:
    body: dict[str, Any] = {}
    if content is not None:
        body[content.type] = content.to_dict()[content.type]
    body.update(compact(archived=archived))
    if not body:
        raise ValueError("update needs content or archived")
    return body


def _append_body(children: Sequence[Any], after: str | None) -> dict[str, Any]:
    if not children:
        raise ValueError("append_children needs at least one child")
    if len(children) > MAX_CHILDREN_PER_REQUEST:
        raise ValueError(
            f"append_children accepts at most {MAX_CHILDREN_PER_REQUEST} children, "
            f"got {len(children)}"
        )
    body: dict[str, Any] = {"children": [encode_block_content(c) for c in children]}
    body.update(compact(after=after))
    return body


class BlockAPI:
    """Synchronous wrapper for the Notion Blocks API.

    Parameters
    ----------
    transport:
        A configured :class:`NotionTransport` instance.
    """

    def __init__(self, transport: NotionTransport) -> None:
        self._transport = transport

    def retrieve(self, block_id: str) -> Block:
        """Retrieve a single block by its ID."""
        return self._transport.request("GET", f"/blocks/{block_id}", decode=decode_block)

    def update(
        self,
        block_id: str,
        *,
        content: BlockContent | None = None,
        archived: bool | None = None,
    ) -> Block:
        """Replace a block's content or change its archive status.

        The kind of *content* must match the block's current kind.
        """
        body = _update_body(content, archived)
        return self._transport.request(
            "PATCH", f"/blocks/{block_id}", body=body, decode=decode_block
        )

    def delete(self, block_id: str) -> Block:
        """Archive a block (``PATCH`` with ``archived: true``)."""
        return self.update(block_id, archived=True)

    def list_children(
        self,
        block_id: str,
        *,
        start_cursor: str | None = None,
        page_size: int | None = None,
    ) -> PaginatedList[Block]:
        """List one page of a block's direct children."""
        return self._transport.request(
            "GET",
            f"/blocks/{block_id}/children",
            query=page_query(start_cursor, page_size),
            decode=_decode_block_list,
        )

    def list_all_children(self, block_id: str, *, page_size: int | None = None) -> list[Block]:
        """List every direct child of a block, following cursors."""
        config = self._transport.config
        return collect_all(
            lambda cursor: self.list_children(block_id, start_cursor=cursor, page_size=page_size),
            max_pages=config.pagination_max_pages,
            metrics=config.metrics,
        )

    def append_children(
        self,
        block_id: str,
        children: Sequence[BlockContent | dict[str, Any]],
        *,
        after: str | None = None,
    ) -> PaginatedList[Block]:
        """Append up to 100 children, at the end or after block *after*.

        Returns the list of created blocks.
        """
        body = _append_body(children, after)
        return self._transport.request(
            "PATCH", f"/blocks/{block_id}/children", body=body, decode=_decode_block_list
        )


class AsyncBlockAPI:
    """Asynchronous wrapper for the Notion Blocks API.

    Mirrors :class:`BlockAPI` but all methods are coroutines.
    """

    def __init__(self, transport: AsyncNotionTransport) -> None:
        self._transport = transport

    async def retrieve(self, block_id: str) -> Block:
        return await self._transport.request("GET", f"/blocks/{block_id}", decode=decode_block)

    async def update(
        self,
        block_id: str,
        *,
        content: BlockContent | None = None,
        archived: bool | None = None,
    ) -> Block:
        body = _update_body(content, archived)
        return await self._transport.request(
            "PATCH", f"/blocks/{block_id}", body=body, decode=decode_block
        )

    async def delete(self, block_id: str) -> Block:
        """Archive a block (async)."""
        return await self.update(block_id, archived=True)

    async def list_children(
        self,
        block_id: str,
        *,
        start_cursor: str | None = None,
        page_size: int | None = None,
    ) -> PaginatedList[Block]:
        return await self._transport.request(
            "GET",
            f"/blocks/{block_id}/children",
            query=page_query(start_cursor, page_size),
            decode=_decode_block_list,
        )

    async def list_all_children(
        self, block_id: str, *, page_size: int | None = None
    ) -> list[Block]:
        """List every direct child of a block (async)."""
        config = self._transport.config
        return await async_collect_all(
            lambda cursor: self.list_children(block_id, start_cursor=cursor, page_size=page_size),
            max_pages=config.pagination_max_pages,
            metrics=config.metrics,
        )

    async def append_children(
        self,
        block_id: str,
        children: Sequence[BlockContent | dict[str, Any]],
        *,
        after: str | None = None,
    ) -> PaginatedList[Block]:
        """Append children (async).

        See :meth:`BlockAPI.append_children`.
        """
        body = _append_body(children, after)
        return await self._transport.request(
            "PATCH", f"/blocks/{block_id}/children", body=body, decode=_decode_block_list
        )
