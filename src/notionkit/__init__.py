"""notionkit: a resilient typed client for the Notion API.

Public re-exports
-----------------

* **Clients:** :class:`NotionClient`, :class:`AsyncNotionClient`
* **Configuration:** :class:`NotionKitConfig`
* **Errors:** :class:`ErrorCode` and every :class:`NotionKitError` subclass
* **Rate limiting:** :class:`TokenBucket`, :class:`AsyncTokenBucket`
* **Pagination:** :func:`collect_all`, :func:`async_collect_all`

Domain models live in :mod:`notionkit.models`, filter builders in
:mod:`notionkit.filters`.

Usage::

    from notionkit import NotionClient

    client = NotionClient(token="ntn_xxx")
    page = client.pages.retrieve("<page_id>")
    print(page.title)
"""

from __future__ import annotations

from notionkit import filters, models

# ── Clients ────────────────────────────────────────────────────────────
from notionkit.async_client import AsyncNotionClient
from notionkit.client import NotionClient

# ── Configuration ───────────────────────────────────────────────────────
from notionkit.config import DEFAULT_BASE_URL, DEFAULT_NOTION_VERSION, NotionKitConfig

# ── Errors ──────────────────────────────────────────────────────────────
from notionkit.errors import (
    RETRYABLE_CODES,
    ErrorCode,
    NotionConflictError,
    NotionInvalidJSONError,
    NotionKitError,
    NotionNetworkError,
    NotionObjectNotFoundError,
    NotionPaginationLimitError,
    NotionRateLimitedError,
    NotionRequestError,
    NotionRestrictedResourceError,
    NotionServerError,
    NotionUnauthorizedError,
    NotionValidationError,
)

# ── Transport building blocks ───────────────────────────────────────────
from notionkit.notion_api import (
    AsyncNotionTransport,
    AsyncTokenBucket,
    NotionTransport,
    RetryPolicy,
    TokenBucket,
)
from notionkit.pagination import async_collect_all, async_iterate, collect_all, iterate

# ── Public surface ──────────────────────────────────────────────────────

__all__ = [
    # Clients
    "NotionClient",
    "AsyncNotionClient",
    # Configuration
    "NotionKitConfig",
    "DEFAULT_BASE_URL",
    "DEFAULT_NOTION_VERSION",
    # Errors
    "ErrorCode",
    "RETRYABLE_CODES",
    "NotionKitError",
    "NotionRequestError",
    "NotionValidationError",
    "NotionUnauthorizedError",
    "NotionRestrictedResourceError",
    "NotionObjectNotFoundError",
    "NotionConflictError",
    "NotionRateLimitedError",
    "NotionServerError",
    "NotionNetworkError",
    "NotionInvalidJSONError",
    "NotionPaginationLimitError",
    # Transport
    "NotionTransport",
    "AsyncNotionTransport",
    "TokenBucket",
    "AsyncTokenBucket",
    "RetryPolicy",
    # Pagination
    "collect_all",
    "async_collect_all",
    "iterate",
    "async_iterate",
    # Sub-modules
    "filters",
    "models",
]
