"""Comment API wrappers for the Notion API.

A comment is created either on a page (starting a new discussion) or as a
reply in an existing discussion; exactly one of ``parent`` and
``discussion_id`` must be given.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from notionkit.models import Comment, PaginatedList, decode_comment, paginated
from notionkit.pagination import async_collect_all, collect_all

from ._params import compact, page_query
from .transport import AsyncNotionTransport, NotionTransport

_decode_comment_list = paginated(decode_comment)


def _create_body(
    parent: Any | None,
    discussion_id: str | None,
    rich_text: Sequence[Any],
) -> dict[str, Any]:
    if (parent is None) == (discussion_id is None):
        raise ValueError("pass exactly one of parent and discussion_id")
    body = compact(parent=parent, discussion_id=discussion_id)
    body["rich_text"] = list(rich_text)
    return body


def _list_query(block_id: str, start_cursor: str | None, page_size: int | None) -> dict[str, Any]:
    return {"block_id": block_id, **page_query(start_cursor, page_size)}


class CommentAPI:
    """Synchronous wrapper for the Notion Comments API."""

    def __init__(self, transport: NotionTransport) -> None:
        self._transport = transport

    def create(
        self,
        *,
        rich_text: Sequence[Any],
        parent: Any | None = None,
        discussion_id: str | None = None,
    ) -> Comment:
        """Add a comment to a page or reply in a discussion thread.

        Raises
        ------
        ValueError
            Unless exactly one of *parent* and *discussion_id* is given.
        """
        body = _create_body(parent, discussion_id, rich_text)
        return self._transport.request("POST", "/comments", body=body, decode=decode_comment)

    def list(
        self,
        block_id: str,
        *,
        start_cursor: str | None = None,
        page_size: int | None = None,
    ) -> PaginatedList[Comment]:
        """List unresolved comments on a page or block."""
        return self._transport.request(
            "GET",
            "/comments",
            query=_list_query(block_id, start_cursor, page_size),
            decode=_decode_comment_list,
        )

    def list_all(self, block_id: str, *, page_size: int | None = None) -> list[Comment]:
        config = self._transport.config
        return collect_all(
            lambda cursor: self.list(block_id, start_cursor=cursor, page_size=page_size),
            max_pages=config.pagination_max_pages,
            metrics=config.metrics,
        )


class AsyncCommentAPI:
    """Asynchronous wrapper for the Notion Comments API."""

    def __init__(self, transport: AsyncNotionTransport) -> None:
        self._transport = transport

    async def create(
        self,
        *,
        rich_text: Sequence[Any],
        parent: Any | None = None,
        discussion_id: str | None = None,
    ) -> Comment:
        body = _create_body(parent, discussion_id, rich_text)
        return await self._transport.request(
            "POST", "/comments", body=body, decode=decode_comment
        )

    async def list(
        self,
        block_id: str,
        *,
        start_cursor: str | None = None,
        page_size: int | None = None,
    ) -> PaginatedList[Comment]:
        return await self._transport.request(
            "GET",
            "/comments",
            query=_list_query(block_id, start_cursor, page_size),
            decode=_decode_comment_list,
        )

    async def list_all(self, block_id: str, *, page_size: int | None = None) -> list[Comment]:
        config = self._transport.config
        return await async_collect_all(
            lambda cursor: self.list(block_id, start_cursor=cursor, page_size=page_size),
            max_pages=config.pagination_max_pages,
            metrics=config.metrics,
        )
