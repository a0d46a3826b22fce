"""Error hierarchy for the notionkit client.

Every public error class inherits from :class:`NotionKitError`.  Each
carries a machine-readable ``code`` (from :class:`ErrorCode`), a
human-readable ``message``, an optional structured ``context`` dict, and an
optional ``cause`` (chained exception).

Failed API calls always surface as a :class:`NotionRequestError` (or one of
its subclasses) carrying the HTTP ``status``, the Notion error ``code``, the
``message`` and the optional ``request_id``.  Callers should branch on
``code``; the subclasses exist so that ``except`` clauses can be narrowed
when that reads better.

Error codes are defined as a :class:`str` enum so that they serialise
naturally to JSON and compare equal to the raw wire strings.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

# ---------------------------------------------------------------------------
# Error code enum
# ---------------------------------------------------------------------------

class ErrorCode(str, Enum):
    """Error codes reported by the Notion API, plus local failure codes."""

    INVALID_JSON = "invalid_json"
    INVALID_REQUEST_URL = "invalid_request_url"
    INVALID_REQUEST = "invalid_request"
    VALIDATION_ERROR = "validation_error"
    MISSING_VERSION = "missing_version"
    UNAUTHORIZED = "unauthorized"
    RESTRICTED_RESOURCE = "restricted_resource"
    OBJECT_NOT_FOUND = "object_not_found"
    CONFLICT_ERROR = "conflict_error"
    RATE_LIMITED = "rate_limited"
    INTERNAL_SERVER_ERROR = "internal_server_error"
    SERVICE_UNAVAILABLE = "service_unavailable"
    DATABASE_CONNECTION_UNAVAILABLE = "database_connection_unavailable"
    GATEWAY_TIMEOUT = "gateway_timeout"

    # Local codes, never sent by the server.
    PAGINATION_LIMIT = "pagination_limit"


# Codes the request pipeline retries with backoff.  Transport failures are
# reported as INTERNAL_SERVER_ERROR with status 0 and are retried too.
RETRYABLE_CODES: frozenset[ErrorCode] = frozenset({
    ErrorCode.RATE_LIMITED,
    ErrorCode.INTERNAL_SERVER_ERROR,
    ErrorCode.SERVICE_UNAVAILABLE,
    ErrorCode.GATEWAY_TIMEOUT,
})


# ---------------------------------------------------------------------------
# Base error
# ---------------------------------------------------------------------------

class NotionKitError(Exception):
    """Base exception for all notionkit errors.

    Parameters
    ----------
    code:
        A value from :class:`ErrorCode` identifying the error category.
    message:
        A developer-friendly description of what went wrong.
    context:
        Arbitrary structured data providing extra diagnostic detail.
    cause:
        The underlying exception, if this error wraps another.
    """

    def __init__(
        self,
        code: str,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.code: str = code
        self.message: str = message
        self.context: dict[str, Any] = context or {}
        self.cause: Exception | None = cause
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause

    def __repr__(self) -> str:
        ctx = f", context={self.context!r}" if self.context else ""
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r}{ctx})"


# ---------------------------------------------------------------------------
# Request errors
# ---------------------------------------------------------------------------

class NotionRequestError(NotionKitError):
    """A call to the Notion API failed.

    Constructed only by the request pipeline.  ``status`` is the HTTP status
    code, or ``0`` when no response was received (timeout, DNS failure,
    connection reset).

    Context keys: ``method``, ``path``, ``notion_code`` (raw server code when
    it is not a known :class:`ErrorCode`), ``retry_after``.
    """

    def __init__(
        self,
        status: int,
        code: ErrorCode,
        message: str,
        request_id: str | None = None,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(code=code, message=message, context=context, cause=cause)
        self.status: int = status
        self.request_id: str | None = request_id

    @property
    def retryable(self) -> bool:
        """``True`` when the pipeline would retry this failure."""
        return self.code in RETRYABLE_CODES

    def __repr__(self) -> str:
        rid = f", request_id={self.request_id!r}" if self.request_id else ""
        return (
            f"{type(self).__name__}(status={self.status!r}, code={self.code!r}, "
            f"message={self.message!r}{rid})"
        )


class NotionValidationError(NotionRequestError):
    """The request was malformed or failed schema validation (400)."""


class NotionUnauthorizedError(NotionRequestError):
    """The bearer token is invalid or expired (401)."""


class NotionRestrictedResourceError(NotionRequestError):
    """The integration lacks access to the resource (403)."""


class NotionObjectNotFoundError(NotionRequestError):
    """The resource does not exist or is not shared with the integration (404)."""


class NotionConflictError(NotionRequestError):
    """The transaction conflicted with a concurrent edit (409)."""


class NotionRateLimitedError(NotionRequestError):
    """The server rejected the request for exceeding its rate limit (429)."""


class NotionServerError(NotionRequestError):
    """The server failed or was unavailable (5xx)."""


class NotionNetworkError(NotionRequestError):
    """No response was received: timeout, DNS failure, connection reset."""


class NotionInvalidJSONError(NotionRequestError):
    """A response body could not be decoded into the expected type."""


_CODE_CLASSES: dict[ErrorCode, type[NotionRequestError]] = {
    ErrorCode.INVALID_JSON: NotionInvalidJSONError,
    ErrorCode.INVALID_REQUEST_URL: NotionValidationError,
    ErrorCode.INVALID_REQUEST: NotionValidationError,
    ErrorCode.VALIDATION_ERROR: NotionValidationError,
    ErrorCode.MISSING_VERSION: NotionValidationError,
    ErrorCode.UNAUTHORIZED: NotionUnauthorizedError,
    ErrorCode.RESTRICTED_RESOURCE: NotionRestrictedResourceError,
    ErrorCode.OBJECT_NOT_FOUND: NotionObjectNotFoundError,
    ErrorCode.CONFLICT_ERROR: NotionConflictError,
    ErrorCode.RATE_LIMITED: NotionRateLimitedError,
    ErrorCode.INTERNAL_SERVER_ERROR: NotionServerError,
    ErrorCode.SERVICE_UNAVAILABLE: NotionServerError,
    ErrorCode.DATABASE_CONNECTION_UNAVAILABLE: NotionServerError,
    ErrorCode.GATEWAY_TIMEOUT: NotionServerError,
}

_STATUS_FALLBACK: dict[int, ErrorCode] = {
    400: ErrorCode.INVALID_REQUEST,
    401: ErrorCode.UNAUTHORIZED,
    403: ErrorCode.RESTRICTED_RESOURCE,
    404: ErrorCode.OBJECT_NOT_FOUND,
    409: ErrorCode.CONFLICT_ERROR,
    429: ErrorCode.RATE_LIMITED,
    503: ErrorCode.SERVICE_UNAVAILABLE,
    504: ErrorCode.GATEWAY_TIMEOUT,
}


def _code_for(status: int, raw_code: str | ErrorCode) -> ErrorCode:
    try:
        return ErrorCode(raw_code)
    except ValueError:
        pass
    if status in _STATUS_FALLBACK:
        return _STATUS_FALLBACK[status]
    if 400 <= status < 500:
        return ErrorCode.INVALID_REQUEST
    return ErrorCode.INTERNAL_SERVER_ERROR


def request_error(
    status: int,
    code: str | ErrorCode,
    message: str,
    request_id: str | None = None,
    context: dict[str, Any] | None = None,
    cause: Exception | None = None,
) -> NotionRequestError:
    """Build the :class:`NotionRequestError` subclass matching *code*.

    A *code* the server sent that is not a known :class:`ErrorCode` is
    mapped from *status* instead; the raw value is kept in
    ``context["notion_code"]``.
    """
    resolved = _code_for(status, code)
    ctx = dict(context or {})
    if resolved != code:
        ctx.setdefault("notion_code", code)
    if status == 0:
        cls: type[NotionRequestError] = NotionNetworkError
    else:
        cls = _CODE_CLASSES.get(resolved, NotionRequestError)
    return cls(
        status=status,
        code=resolved,
        message=message,
        request_id=request_id,
        context=ctx,
        cause=cause,
    )


# ---------------------------------------------------------------------------
# Local errors
# ---------------------------------------------------------------------------

class NotionPaginationLimitError(NotionKitError):
    """A pagination traversal reached its configured page ceiling.

    Context keys: ``max_pages``, ``results_so_far``, ``next_cursor``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.PAGINATION_LIMIT,
            message=message,
            context=context,
            cause=cause,
        )
