"""User API wrappers for the Notion API."""

from __future__ import annotations

from notionkit.models import PaginatedList, User, decode_user, paginated
from notionkit.pagination import async_collect_all, collect_all

from ._params import page_query
from .transport import AsyncNotionTransport, NotionTransport

_decode_user_list = paginated(decode_user)


class UserAPI:
    """Synchronous wrapper for the Notion Users API."""

    def __init__(self, transport: NotionTransport) -> None:
        self._transport = transport

    def retrieve(self, user_id: str) -> User:
        return self._transport.request("GET", f"/users/{user_id}", decode=decode_user)

    def me(self) -> User:
        """The bot user behind the integration token."""
        return self._transport.request("GET", "/users/me", decode=decode_user)

    def list(
        self,
        *,
        start_cursor: str | None = None,
        page_size: int | None = None,
    ) -> PaginatedList[User]:
        return self._transport.request(
            "GET", "/users", query=page_query(start_cursor, page_size), decode=_decode_user_list
        )

    def list_all(self, *, page_size: int | None = None) -> list[User]:
        """Every user of the workspace, following cursors."""
        config = self._transport.config
        return collect_all(
            lambda cursor: self.list(start_cursor=cursor, page_size=page_size),
            max_pages=config.pagination_max_pages,
            metrics=config.metrics,
        )


class AsyncUserAPI:
    """Asynchronous wrapper for the Notion Users API."""

    def __init__(self, transport: AsyncNotionTransport) -> None:
        self._transport = transport

    async def retrieve(self, user_id: str) -> User:
        return await self._transport.request("GET", f"/users/{user_id}", decode=decode_user)

    async def me(self) -> User:
        return await self._transport.request("GET", "/users/me", decode=decode_user)

    async def list(
        self,
        *,
        start_cursor: str | None = None,
        page_size: int | None = None,
    ) -> PaginatedList[User]:
        return await self._transport.request(
            "GET", "/users", query=page_query(start_cursor, page_size), decode=_decode_user_list
        )

    async def list_all(self, *, page_size: int | None = None) -> list[User]:
        config = self._transport.config
        return await async_collect_all(
            lambda cursor: self.list(start_cursor=cursor, page_size=page_size),
            max_pages=config.pagination_max_pages,
            metrics=config.metrics,
        )
