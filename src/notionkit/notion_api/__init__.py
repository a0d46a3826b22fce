"""notionkit.notion_api -- Notion API transport and endpoint wrappers.

This sub-package provides:

* :mod:`.rate_limit` -- Token bucket rate limiters (sync and async).
* :mod:`.retries` -- Retry predicate, exponential backoff, retry wrapper.
* :mod:`.transport` -- HTTP transport with auth, retries, and rate limiting.
* :mod:`.pages`, :mod:`.databases`, :mod:`.blocks`, :mod:`.users`,
  :mod:`.search`, :mod:`.comments` -- typed endpoint wrappers.
"""

from __future__ import annotations

from .blocks import AsyncBlockAPI, BlockAPI
from .comments import AsyncCommentAPI, CommentAPI
from .databases import AsyncDatabaseAPI, DatabaseAPI
from .pages import AsyncPageAPI, PageAPI
from .rate_limit import AsyncTokenBucket, TokenBucket
from .retries import RetryPolicy, async_retry_call, compute_backoff, is_retryable, retry_call
from .search import AsyncSearchAPI, SearchAPI
from .transport import AsyncNotionTransport, NotionTransport
from .users import AsyncUserAPI, UserAPI

__all__ = [
    "AsyncBlockAPI",
    "AsyncCommentAPI",
    "AsyncDatabaseAPI",
    "AsyncNotionTransport",
    "AsyncPageAPI",
    "AsyncSearchAPI",
    "AsyncTokenBucket",
    "AsyncUserAPI",
    "BlockAPI",
    "CommentAPI",
    "DatabaseAPI",
    "NotionTransport",
    "PageAPI",
    "RetryPolicy",
    "SearchAPI",
    "TokenBucket",
    "UserAPI",
    "async_retry_call",
    "compute_backoff",
    "is_retryable",
    "retry_call",
]
