"""Synchronous Notion client.

:class:`NotionClient` composes a config, a rate limiter, a transport and
one endpoint wrapper per resource family.

Usage::

    from notionkit import NotionClient, filters

    with NotionClient(token="ntn_xxx") as client:
        rows = client.databases.query_all(
            "<database_id>",
            filter=filters.property("Done", "checkbox", equals=False),
        )
        for row in rows:
            print(row.title)
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import httpx

from notionkit.config import NotionKitConfig
from notionkit.models import Database, Page
from notionkit.notion_api.blocks import BlockAPI
from notionkit.notion_api.comments import CommentAPI
from notionkit.notion_api.databases import DatabaseAPI
from notionkit.notion_api.pages import PageAPI
from notionkit.notion_api.rate_limit import TokenBucket
from notionkit.notion_api.search import SearchAPI
from notionkit.notion_api.transport import NotionTransport
from notionkit.notion_api.users import UserAPI


class NotionClient:
    """Synchronous Notion API client.

    Parameters
    ----------
    token:
        Notion integration token.  Ignored when *config* is given.
    config:
        A complete :class:`NotionKitConfig`; use
        :meth:`NotionKitConfig.from_env` to build one from the environment.
    bucket:
        A :class:`TokenBucket` shared with other clients.  When omitted the
        client creates its own and stops it on :meth:`close`.
    http_client:
        An ``httpx.Client`` to send requests with.
    **kwargs:
        Forwarded to :class:`NotionKitConfig` when *config* is not given.

    Attributes
    ----------
    databases, pages, blocks, users, search, comments:
        Endpoint wrappers.  ``search`` is callable.
    """

    def __init__(
        self,
        token: str | None = None,
        *,
        config: NotionKitConfig | None = None,
        bucket: TokenBucket | None = None,
        http_client: httpx.Client | None = None,
        **kwargs: Any,
    ) -> None:
        if config is None:
            if not token:
                raise ValueError("a token or a config is required")
            config = NotionKitConfig(token=token, **kwargs)
        self._config = config
        self._transport = NotionTransport(config, bucket, http_client=http_client)
        self.databases = DatabaseAPI(self._transport)
        self.pages = PageAPI(self._transport)
        self.blocks = BlockAPI(self._transport)
        self.users = UserAPI(self._transport)
        self.search = SearchAPI(self._transport)
        self.comments = CommentAPI(self._transport)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None, **overrides: Any) -> NotionClient:
        """Build a client from ``NOTION_*`` environment variables."""
        return cls(config=NotionKitConfig.from_env(environ, **overrides))

    @property
    def config(self) -> NotionKitConfig:
        return self._config

    @property
    def transport(self) -> NotionTransport:
        return self._transport

    def search_all(self, **kwargs: Any) -> list[Page | Database]:
        """Every search result, following cursors.  See :meth:`SearchAPI.all`."""
        return self.search.all(**kwargs)

    def close(self) -> None:
        """Release the HTTP client and the rate limiter if this client owns them."""
        self._transport.close()

    def __enter__(self) -> NotionClient:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
