"""Asynchronous Notion client.

:class:`AsyncNotionClient` mirrors :class:`NotionClient` but every I/O
method is an ``async def`` coroutine.  It uses the async transport and an
:class:`AsyncTokenBucket` whose refill task runs on the client's event
loop.

Usage::

    import asyncio
    from notionkit import AsyncNotionClient

    async def main():
        async with AsyncNotionClient(token="ntn_xxx") as client:
            me = await client.users.me()
            print(me.id)

    asyncio.run(main())
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from typing import Any

import httpx

from notionkit.config import NotionKitConfig
from notionkit.models import Database, Page
from notionkit.notion_api.blocks import AsyncBlockAPI
from notionkit.notion_api.comments import AsyncCommentAPI
from notionkit.notion_api.databases import AsyncDatabaseAPI
from notionkit.notion_api.pages import AsyncPageAPI
from notionkit.notion_api.rate_limit import AsyncTokenBucket
from notionkit.notion_api.search import AsyncSearchAPI
from notionkit.notion_api.transport import AsyncNotionTransport
from notionkit.notion_api.users import AsyncUserAPI


class AsyncNotionClient:
    """Asynchronous Notion API client.

    Parameters
    ----------
    token:
        Notion integration token.  Ignored when *config* is given.
    config:
        A complete :class:`NotionKitConfig`.
    bucket:
        An :class:`AsyncTokenBucket` shared with other clients.
    http_client:
        An ``httpx.AsyncClient`` to send requests with.
    sleep:
        Coroutine function used to wait between retries.
    **kwargs:
        Forwarded to :class:`NotionKitConfig` when *config* is not given.
    """

    def __init__(
        self,
        token: str | None = None,
        *,
        config: NotionKitConfig | None = None,
        bucket: AsyncTokenBucket | None = None,
        http_client: httpx.AsyncClient | None = None,
        sleep: Callable[[float], Awaitable[None]] | None = None,
        **kwargs: Any,
    ) -> None:
        if config is None:
            if not token:
                raise ValueError("a token or a config is required")
            config = NotionKitConfig(token=token, **kwargs)
        self._config = config
        self._transport = AsyncNotionTransport(
            config, bucket, http_client=http_client, sleep=sleep
        )
        self.databases = AsyncDatabaseAPI(self._transport)
        self.pages = AsyncPageAPI(self._transport)
        self.blocks = AsyncBlockAPI(self._transport)
        self.users = AsyncUserAPI(self._transport)
        self.search = AsyncSearchAPI(self._transport)
        self.comments = AsyncCommentAPI(self._transport)

    @classmethod
    def from_env(
        cls, environ: Mapping[str, str] | None = None, **overrides: Any
    ) -> AsyncNotionClient:
        return cls(config=NotionKitConfig.from_env(environ, **overrides))

    @property
    def config(self) -> NotionKitConfig:
        return self._config

    @property
    def transport(self) -> AsyncNotionTransport:
        return self._transport

    async def search_all(self, **kwargs: Any) -> list[Page | Database]:
        return await self.search.all(**kwargs)

    async def close(self) -> None:
        """Release the HTTP client and stop the rate limiter if owned."""
        await self._transport.close()

    async def __aenter__(self) -> AsyncNotionClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()
