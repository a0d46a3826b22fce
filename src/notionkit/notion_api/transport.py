"""Sync and async HTTP transports for the Notion API.

Each transport runs the full request pipeline:

1. Acquire a token from the shared rate limiter (wait if needed).
2. Build the absolute URL from ``base_url`` and the path, dropping query
   parameters whose value is ``None``.
3. Send ``Authorization`` and ``Notion-Version`` headers, plus
   ``Content-Type`` when there is a body.
4. On a transport failure (timeout, DNS, connection reset) -- fail with
   status ``0`` and code ``internal_server_error``.
5. On a non-``2xx`` status -- decode the error payload and fail with its
   code; an undecodable error body fails as ``internal_server_error``
   carrying the raw text.
6. On ``2xx`` -- parse JSON and run the caller's decoder; either step
   failing is ``invalid_json``.

Failures with a transient code are retried by
:func:`~notionkit.notion_api.retries.retry_call`, each attempt going back
through step 1.
"""

from __future__ import annotations

import json as _json
import sys
import time
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import httpx

from notionkit.config import NotionKitConfig
from notionkit.errors import ErrorCode, NotionRequestError, request_error
from notionkit.models import APIErrorPayload, ModelDecodeError, encode
from notionkit.observability import NoopMetricsHook, error_fields, get_logger, metrics, route
from notionkit.utils.redact import redact

from .rate_limit import AsyncTokenBucket, TokenBucket
from .retries import RetryPolicy, async_retry_call, retry_call

log = get_logger("notionkit.transport")

T = TypeVar("T")

Decoder = Callable[[Any], T]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def build_url(base_url: str, path: str) -> str:
    """Join *base_url* and *path* with exactly one slash."""
    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"


def clean_query(query: dict[str, Any] | None) -> dict[str, Any] | None:
    """Drop ``None`` values; ``None`` when nothing is left."""
    if not query:
        return None
    cleaned = {k: v for k, v in query.items() if v is not None}
    return cleaned or None


def build_headers(config: NotionKitConfig, has_body: bool) -> dict[str, str]:
    headers = {
        "Authorization": f"Bearer {config.token}",
        "Notion-Version": config.notion_version,
    }
    if has_body:
        headers["Content-Type"] = "application/json"
    return headers


def _parse_retry_after(response: httpx.Response) -> float | None:
    """Extract the ``Retry-After`` header value as a float, or ``None``."""
    raw = response.headers.get("retry-after")
    if raw is None:
        return None
    try:
        return float(raw)
    except (ValueError, TypeError):
        return None


def _error_from_response(response: httpx.Response, method: str, path: str) -> NotionRequestError:
    """Build the error for a non-``2xx`` response."""
    status = response.status_code
    raw_text = response.text
    context: dict[str, Any] = {"method": method, "path": path}
    retry_after = _parse_retry_after(response)
    if retry_after is not None:
        context["retry_after"] = retry_after

    fallback_message = raw_text or f"HTTP {status} on {method} {path}"
    try:
        payload = APIErrorPayload.from_dict(_json.loads(raw_text))
    except (ValueError, TypeError):
        # not JSON, or JSON without a usable string "code"
        return request_error(
            status,
            ErrorCode.INTERNAL_SERVER_ERROR,
            fallback_message,
            context=context,
        )
    if isinstance(payload.status, int) and payload.status != status:
        context["body_status"] = payload.status
    request_id = payload.request_id or response.headers.get("x-request-id")
    return request_error(
        status,
        payload.code,
        payload.message or fallback_message,
        request_id=request_id or None,
        context=context,
    )


def _decode_success(
    response: httpx.Response,
    method: str,
    path: str,
    decode: Decoder | None,
) -> Any:
    """Parse a ``2xx`` body and run *decode* over it."""
    raw_text = response.text
    context = {"method": method, "path": path}
    if not raw_text.strip():
        data: Any = {}
    else:
        try:
            data = _json.loads(raw_text)
        except ValueError as exc:
            raise request_error(
                response.status_code,
                ErrorCode.INVALID_JSON,
                f"Response to {method} {path} is not valid JSON: {raw_text[:200]!r}",
                context=context,
                cause=exc,
            ) from exc
    if decode is None:
        return data
    try:
        return decode(data)
    except (ModelDecodeError, KeyError, TypeError, ValueError) as exc:
        raise request_error(
            response.status_code,
            ErrorCode.INVALID_JSON,
            f"Response to {method} {path} does not match the expected shape: {exc}",
            context=context,
            cause=exc,
        ) from exc


def _network_error(method: str, path: str, exc: httpx.TransportError) -> NotionRequestError:
    log.warning(
        "Request network error",
        extra={
            "extra_fields": {
                "op": "request",
                "method": method,
                "path": path,
                **error_fields(exc),
            }
        },
    )
    return request_error(
        0,
        ErrorCode.INTERNAL_SERVER_ERROR,
        f"Network error on {method} {path}: {exc}",
        context={"method": method, "path": path},
        cause=exc,
    )


def _dump_payload(
    method: str,
    url: str,
    payload: Any | None,
    response_status: int | None,
    response_body: Any | None,
    token: str | None = None,
) -> None:
    """Write a redacted debug dump of the request/response to stderr."""
    dump: dict[str, Any] = {
        "method": method,
        "url": url,
    }
    if payload is not None:
        dump["request_body"] = payload
    if response_status is not None:
        dump["response_status"] = response_status
    if response_body is not None:
        dump["response_body"] = response_body
    safe_dump = redact(dump, token)
    print(
        _json.dumps(safe_dump, indent=2, default=str),
        file=sys.stderr,
    )


def _emit_debug_dump(
    config: NotionKitConfig,
    method: str,
    response: httpx.Response,
    payload: Any,
) -> None:
    """Emit a redacted debug dump of request/response if enabled."""
    if not config.debug_dump_payload:
        return
    try:
        resp_body = response.json()
    except ValueError:
        resp_body = response.text[:1000]
    _dump_payload(
        method, str(response.url), payload,
        response.status_code, resp_body,
        token=config.token,
    )


class _Instrumentation:
    """Metrics and retry logging shared by both transports."""

    def __init__(self, config: NotionKitConfig) -> None:
        self.config = config
        self.metrics = config.metrics if config.metrics is not None else NoopMetricsHook()

    def waited(self, method: str, path: str, wait: float) -> None:
        if wait > 0:
            self.metrics.timing(
                metrics.RATE_LIMIT_WAIT_MS,
                wait * 1000,
                tags={"method": method, "path": route(path)},
            )

    def responded(self, method: str, path: str, status: int | str, elapsed_ms: float) -> None:
        tags = {"method": method, "path": route(path), "status": str(status)}
        self.metrics.increment(metrics.REQUESTS_TOTAL, tags=tags)
        self.metrics.timing(metrics.REQUEST_DURATION_MS, elapsed_ms, tags=tags)

    def on_retry(self, method: str, path: str) -> Callable[[int, Exception, float], None]:
        def hook(attempt: int, exc: Exception, delay: float) -> None:
            fields = error_fields(exc)
            tags = {"method": method, "path": route(path)}
            if fields.get("code") == ErrorCode.RATE_LIMITED.value:
                self.metrics.increment(metrics.RATE_LIMITED_TOTAL, tags=tags)
            self.metrics.increment(
                metrics.RETRIES_TOTAL,
                tags={**tags, "code": str(fields.get("code", "unknown"))},
            )
            log.warning(
                "Retrying request",
                extra={
                    "extra_fields": {
                        "op": "request",
                        "method": method,
                        "path": path,
                        "attempt": attempt,
                        "delay": delay,
                        **fields,
                    }
                },
            )

        return hook


def _encode_body(body: Any | None) -> tuple[Any | None, bytes | None]:
    if body is None:
        return None, None
    payload = encode(body)
    return payload, _json.dumps(payload).encode("utf-8")


# ---------------------------------------------------------------------------
# Sync transport
# ---------------------------------------------------------------------------

class NotionTransport:
    """Synchronous HTTP transport with auth, retry, and rate limiting.

    Parameters
    ----------
    config:
        A :class:`NotionKitConfig` controlling all transport behaviour.
    bucket:
        The rate limiter to draw tokens from.  Pass the same bucket to
        several transports to make them share one budget.  When omitted a
        private bucket is created from the config and closed with the
        transport.
    http_client:
        An ``httpx.Client`` to send requests with (for instance one built on
        ``httpx.MockTransport``).  When omitted one is created and closed
        with the transport.
    sleep:
        Function used to wait between retries.
    """

    def __init__(
        self,
        config: NotionKitConfig,
        bucket: TokenBucket | None = None,
        *,
        http_client: httpx.Client | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._config = config
        self._owns_bucket = bucket is None
        self._bucket = bucket if bucket is not None else TokenBucket(
            rate_rps=config.rate_limit_rps,
            burst=config.rate_limit_burst,
        )
        self._owns_client = http_client is None
        self._client = http_client if http_client is not None else httpx.Client(
            timeout=httpx.Timeout(config.timeout_seconds),
            proxy=config.http_proxy,
        )
        self._policy = RetryPolicy.from_config(config)
        self._sleep = sleep
        self._instr = _Instrumentation(config)

    @property
    def config(self) -> NotionKitConfig:
        return self._config

    @property
    def bucket(self) -> TokenBucket:
        return self._bucket

    # -- public API --------------------------------------------------------

    def request(
        self,
        method: str,
        path: str,
        *,
        body: Any | None = None,
        query: dict[str, Any] | None = None,
        decode: Decoder[T] | None = None,
    ) -> T:
        """Execute a request against the Notion API.

        Parameters
        ----------
        method:
            HTTP method (``GET``, ``POST``, ``PATCH``, ``DELETE``).
        path:
            API path relative to ``base_url`` (e.g. ``/pages``).
        body:
            JSON body.  Models are encoded with ``to_dict``.
        query:
            Query parameters; ``None`` values are skipped.
        decode:
            Converts the parsed JSON into the result type.  Without it the
            parsed JSON is returned as is.

        Returns
        -------
        T
            The decoded response body.

        Raises
        ------
        NotionRequestError
            On any failure, after retries for transient codes.  The
            subclass matches the error code.
        """
        payload, content = _encode_body(body)
        return retry_call(
            lambda: self._attempt(method, path, payload, content, query, decode),
            self._policy,
            sleep=self._sleep,
            on_retry=self._instr.on_retry(method, path),
        )

    def _attempt(
        self,
        method: str,
        path: str,
        payload: Any | None,
        content: bytes | None,
        query: dict[str, Any] | None,
        decode: Decoder | None,
    ) -> Any:
        # 1. Rate-limit pacing
        self._instr.waited(method, path, self._bucket.acquire())

        # 2. Send request
        t0 = time.monotonic()
        try:
            response = self._client.request(
                method,
                build_url(self._config.base_url, path),
                params=clean_query(query),
                content=content,
                headers=build_headers(self._config, content is not None),
            )
        except httpx.TransportError as exc:
            self._instr.responded(method, path, "error", (time.monotonic() - t0) * 1000)
            raise _network_error(method, path, exc) from exc

        # 3. Process response
        self._instr.responded(method, path, response.status_code, (time.monotonic() - t0) * 1000)
        _emit_debug_dump(self._config, method, response, payload)
        if not response.is_success:
            raise _error_from_response(response, method, path)
        return _decode_success(response, method, path, decode)

    def close(self) -> None:
        """Release the HTTP client and bucket if this transport created them."""
        if self._owns_client:
            self._client.close()
        if self._owns_bucket:
            self._bucket.close()

    def __enter__(self) -> NotionTransport:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


# ---------------------------------------------------------------------------
# Async transport
# ---------------------------------------------------------------------------

class AsyncNotionTransport:
    """Asynchronous HTTP transport with auth, retry, and rate limiting.

    Mirrors :class:`NotionTransport` but uses ``httpx.AsyncClient``, an
    :class:`AsyncTokenBucket` and ``asyncio.sleep``.  Each in-flight
    request carries its own timeout; cancelling one leaves the bucket and
    other requests untouched.
    """

    def __init__(
        self,
        config: NotionKitConfig,
        bucket: AsyncTokenBucket | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
        sleep: Callable[[float], Awaitable[None]] | None = None,
    ) -> None:
        self._config = config
        self._owns_bucket = bucket is None
        self._bucket = bucket if bucket is not None else AsyncTokenBucket(
            rate_rps=config.rate_limit_rps,
            burst=config.rate_limit_burst,
        )
        self._owns_client = http_client is None
        self._client = http_client if http_client is not None else httpx.AsyncClient(
            timeout=httpx.Timeout(config.timeout_seconds),
            proxy=config.http_proxy,
        )
        self._policy = RetryPolicy.from_config(config)
        self._sleep = sleep
        self._instr = _Instrumentation(config)

    @property
    def config(self) -> NotionKitConfig:
        return self._config

    @property
    def bucket(self) -> AsyncTokenBucket:
        return self._bucket

    # -- public API --------------------------------------------------------

    async def request(
        self,
        method: str,
        path: str,
        *,
        body: Any | None = None,
        query: dict[str, Any] | None = None,
        decode: Decoder[T] | None = None,
    ) -> T:
        """Execute a request against the Notion API (async).

        See :meth:`NotionTransport.request`; the semantics are identical.
        """
        payload, content = _encode_body(body)
        kwargs: dict[str, Any] = {"on_retry": self._instr.on_retry(method, path)}
        if self._sleep is not None:
            kwargs["sleep"] = self._sleep
        return await async_retry_call(
            lambda: self._attempt(method, path, payload, content, query, decode),
            self._policy,
            **kwargs,
        )

    async def _attempt(
        self,
        method: str,
        path: str,
        payload: Any | None,
        content: bytes | None,
        query: dict[str, Any] | None,
        decode: Decoder | None,
    ) -> Any:
        self._instr.waited(method, path, await self._bucket.acquire())

        t0 = time.monotonic()
        try:
            response = await self._client.request(
                method,
                build_url(self._config.base_url, path),
                params=clean_query(query),
                content=content,
                headers=build_headers(self._config, content is not None),
            )
        except httpx.TransportError as exc:
            self._instr.responded(method, path, "error", (time.monotonic() - t0) * 1000)
            raise _network_error(method, path, exc) from exc

        self._instr.responded(method, path, response.status_code, (time.monotonic() - t0) * 1000)
        _emit_debug_dump(self._config, method, response, payload)
        if not response.is_success:
            raise _error_from_response(response, method, path)
        return _decode_success(response, method, path, decode)

    async def close(self) -> None:
        """Release the HTTP client and bucket if this transport created them."""
        if self._owns_client:
            await self._client.aclose()
        if self._owns_bucket:
            await self._bucket.aclose()

    async def __aenter__(self) -> AsyncNotionTransport:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()
