"""Tests for the request pipeline in notion_api/transport.py.

Every test drives a real transport through ``httpx.MockTransport`` with a
stub rate limiter and a recording ``sleep`` so nothing waits on the clock.
"""

from __future__ import annotations

import json
from typing import Any

import httpx
import pytest

from conftest import page_json
from notionkit.config import NotionKitConfig
from notionkit.errors import (
    ErrorCode,
    NotionInvalidJSONError,
    NotionNetworkError,
    NotionObjectNotFoundError,
    NotionRateLimitedError,
    NotionRequestError,
    NotionServerError,
    NotionValidationError,
)
from notionkit.models import Page, decode_page
from notionkit.notion_api.transport import (
    AsyncNotionTransport,
    NotionTransport,
    build_headers,
    build_url,
    clean_query,
)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

class _MockBucket:
    """Stands in for TokenBucket; never blocks."""

    def __init__(self, wait: float = 0.0) -> None:
        self.wait = wait
        self.acquired = 0

    def acquire(self) -> float:
        self.acquired += 1
        return self.wait

    def close(self) -> None:
        pass


class _MockAsyncBucket:
    def __init__(self, wait: float = 0.0) -> None:
        self.wait = wait
        self.acquired = 0

    async def acquire(self) -> float:
        self.acquired += 1
        return self.wait

    async def aclose(self) -> None:
        pass


def error_body(status: int, code: str, message: str = "boom", request_id: str | None = None) -> dict:
    body: dict[str, Any] = {"object": "error", "status": status, "code": code, "message": message}
    if request_id is not None:
        body["request_id"] = request_id
    return body


class Recorder:
    """A MockTransport handler that replays responses in order."""

    def __init__(self, *responses: httpx.Response | Exception) -> None:
        self.responses = list(responses)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        item = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(item, Exception):
            raise item
        return item


def make_config(**overrides: Any) -> NotionKitConfig:
    defaults: dict[str, Any] = {"token": "secret_test_token_abcd"}
    defaults.update(overrides)
    return NotionKitConfig(**defaults)


def make_transport(
    recorder: Recorder, config: NotionKitConfig | None = None
) -> tuple[NotionTransport, list[float]]:
    sleeps: list[float] = []
    transport = NotionTransport(
        config or make_config(),
        _MockBucket(),
        http_client=httpx.Client(transport=httpx.MockTransport(recorder)),
        sleep=sleeps.append,
    )
    return transport, sleeps


def make_async_transport(
    recorder: Recorder, config: NotionKitConfig | None = None
) -> tuple[AsyncNotionTransport, list[float]]:
    sleeps: list[float] = []

    async def fake_sleep(delay: float) -> None:
        sleeps.append(delay)

    transport = AsyncNotionTransport(
        config or make_config(),
        _MockAsyncBucket(),
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(recorder)),
        sleep=fake_sleep,
    )
    return transport, sleeps


# ---------------------------------------------------------------------------
# URL, query and header helpers
# ---------------------------------------------------------------------------

class TestRequestHelpers:
    def test_build_url_joins_with_one_slash(self):
        assert build_url("https://api.notion.com/v1/", "/pages/x") == "https://api.notion.com/v1/pages/x"
        assert build_url("https://api.notion.com/v1", "pages/x") == "https://api.notion.com/v1/pages/x"

    def test_clean_query_drops_none(self):
        assert clean_query({"a": 1, "b": None}) == {"a": 1}

    def test_clean_query_empty_is_none(self):
        assert clean_query({"a": None}) is None
        assert clean_query(None) is None

    def test_headers_without_body(self):
        headers = build_headers(make_config(), has_body=False)
        assert headers["Authorization"] == "Bearer secret_test_token_abcd"
        assert headers["Notion-Version"] == "2022-06-28"
        assert "Content-Type" not in headers

    def test_headers_with_body(self):
        headers = build_headers(make_config(), has_body=True)
        assert headers["Content-Type"] == "application/json"


# ---------------------------------------------------------------------------
# Sync pipeline
# ---------------------------------------------------------------------------

class TestSuccess:
    def test_decodes_page(self):
        rec = Recorder(httpx.Response(200, json=page_json("p1")))
        transport, _ = make_transport(rec)
        page = transport.request("GET", "/pages/p1", decode=decode_page)
        assert isinstance(page, Page)
        assert page.id == "p1"
        assert str(rec.requests[0].url) == "https://api.notion.com/v1/pages/p1"

    def test_without_decoder_returns_json(self):
        rec = Recorder(httpx.Response(200, json={"ok": True}))
        transport, _ = make_transport(rec)
        assert transport.request("GET", "/x") == {"ok": True}

    def test_empty_body_is_empty_object(self):
        rec = Recorder(httpx.Response(200, content=b""))
        transport, _ = make_transport(rec)
        assert transport.request("DELETE", "/x") == {}

    def test_get_sends_no_content_type(self):
        rec = Recorder(httpx.Response(200, json={}))
        transport, _ = make_transport(rec)
        transport.request("GET", "/users/me")
        req = rec.requests[0]
        assert "content-type" not in req.headers
        assert req.headers["authorization"] == "Bearer secret_test_token_abcd"
        assert req.headers["notion-version"] == "2022-06-28"

    def test_body_is_json_with_content_type(self):
        rec = Recorder(httpx.Response(200, json={}))
        transport, _ = make_transport(rec)
        transport.request("POST", "/search", body={"query": "roadmap"})
        req = rec.requests[0]
        assert req.headers["content-type"] == "application/json"
        assert json.loads(req.content) == {"query": "roadmap"}

    def test_none_query_values_skipped(self):
        rec = Recorder(httpx.Response(200, json={}))
        transport, _ = make_transport(rec)
        transport.request("GET", "/users", query={"start_cursor": None, "page_size": 10})
        params = rec.requests[0].url.params
        assert params.get("page_size") == "10"
        assert "start_cursor" not in params

    def test_custom_notion_version(self):
        rec = Recorder(httpx.Response(200, json={}))
        transport, _ = make_transport(rec, make_config(notion_version="2025-09-03"))
        transport.request("GET", "/x")
        assert rec.requests[0].headers["notion-version"] == "2025-09-03"

    def test_bucket_acquired_per_attempt(self):
        rec = Recorder(
            httpx.Response(500, json=error_body(500, "internal_server_error")),
            httpx.Response(200, json={}),
        )
        transport, _ = make_transport(rec)
        transport.request("GET", "/x")
        assert transport.bucket.acquired == 2


class TestInvalidJSON:
    def test_non_json_success_body(self):
        rec = Recorder(httpx.Response(200, content=b"not json"))
        transport, sleeps = make_transport(rec)
        with pytest.raises(NotionInvalidJSONError) as exc_info:
            transport.request("GET", "/pages/p1", decode=decode_page)
        err = exc_info.value
        assert err.code == ErrorCode.INVALID_JSON
        assert err.status == 200
        assert len(rec.requests) == 1
        assert sleeps == []

    def test_shape_mismatch_is_invalid_json(self):
        rec = Recorder(httpx.Response(200, json={"object": "page"}))
        transport, _ = make_transport(rec)
        with pytest.raises(NotionRequestError) as exc_info:
            transport.request("GET", "/pages/p1", decode=decode_page)
        assert exc_info.value.code == ErrorCode.INVALID_JSON
        assert len(rec.requests) == 1

    def test_wrong_object_kind_is_invalid_json(self):
        rec = Recorder(httpx.Response(200, json={"object": "database", "id": "x"}))
        transport, _ = make_transport(rec)
        with pytest.raises(NotionInvalidJSONError):
            transport.request("GET", "/pages/p1", decode=decode_page)


class TestErrorResponses:
    @pytest.mark.parametrize(
        ("status", "code", "exc_type"),
        [
            (400, "validation_error", NotionValidationError),
            (400, "invalid_request_url", NotionValidationError),
            (401, "unauthorized", NotionRequestError),
            (403, "restricted_resource", NotionRequestError),
            (404, "object_not_found", NotionObjectNotFoundError),
            (409, "conflict_error", NotionRequestError),
            (503, "database_connection_unavailable", NotionServerError),
        ],
    )
    def test_non_retryable_attempted_once(self, status, code, exc_type):
        rec = Recorder(httpx.Response(status, json=error_body(status, code)))
        transport, sleeps = make_transport(rec)
        with pytest.raises(exc_type) as exc_info:
            transport.request("GET", "/x")
        assert exc_info.value.code == code
        assert exc_info.value.status == status
        assert len(rec.requests) == 1
        assert sleeps == []

    def test_payload_fields_surface(self):
        rec = Recorder(
            httpx.Response(
                404,
                json=error_body(404, "object_not_found", "Could not find page", "req-42"),
            )
        )
        transport, _ = make_transport(rec)
        with pytest.raises(NotionObjectNotFoundError) as exc_info:
            transport.request("GET", "/pages/missing")
        err = exc_info.value
        assert err.message == "Could not find page"
        assert err.request_id == "req-42"
        assert err.context["method"] == "GET"
        assert err.context["path"] == "/pages/missing"

    def test_request_id_header_fallback(self):
        rec = Recorder(
            httpx.Response(
                400,
                json=error_body(400, "validation_error"),
                headers={"x-request-id": "hdr-1"},
            )
        )
        transport, _ = make_transport(rec)
        with pytest.raises(NotionValidationError) as exc_info:
            transport.request("GET", "/x")
        assert exc_info.value.request_id == "hdr-1"

    def test_unknown_code_mapped_from_status(self):
        rec = Recorder(httpx.Response(400, json=error_body(400, "brand_new_code")))
        transport, _ = make_transport(rec)
        with pytest.raises(NotionValidationError) as exc_info:
            transport.request("GET", "/x")
        err = exc_info.value
        assert err.code == ErrorCode.INVALID_REQUEST
        assert err.context["notion_code"] == "brand_new_code"

    def test_undecodable_error_body(self):
        rec = Recorder(httpx.Response(502, text="Bad gateway"))
        transport, _ = make_transport(rec, make_config(retry_max_attempts=1))
        with pytest.raises(NotionServerError) as exc_info:
            transport.request("GET", "/x")
        err = exc_info.value
        assert err.status == 502
        assert err.code == ErrorCode.INTERNAL_SERVER_ERROR
        assert err.message == "Bad gateway"

    @pytest.mark.parametrize(
        "body",
        [
            {"object": "error", "code": "validation_error", "message": "bad"},
            {"code": "validation_error", "message": "bad"},
        ],
    )
    def test_error_body_without_status_uses_http_status(self, body):
        rec = Recorder(httpx.Response(400, json=body))
        transport, sleeps = make_transport(rec)
        with pytest.raises(NotionValidationError) as exc_info:
            transport.request("POST", "/pages")
        err = exc_info.value
        assert err.code == ErrorCode.VALIDATION_ERROR
        assert err.status == 400
        assert err.message == "bad"
        assert len(rec.requests) == 1
        assert sleeps == []

    def test_error_body_with_only_a_code(self):
        rec = Recorder(httpx.Response(404, json={"code": "object_not_found"}))
        transport, _ = make_transport(rec)
        with pytest.raises(NotionObjectNotFoundError) as exc_info:
            transport.request("GET", "/pages/gone")
        assert "object_not_found" in exc_info.value.message
        assert len(rec.requests) == 1

    def test_json_error_body_without_code_is_server_error(self):
        rec = Recorder(httpx.Response(400, json={"message": "no code here"}))
        transport, _ = make_transport(rec, make_config(retry_max_attempts=1))
        with pytest.raises(NotionServerError) as exc_info:
            transport.request("GET", "/x")
        assert exc_info.value.code == ErrorCode.INTERNAL_SERVER_ERROR

    def test_empty_error_body_gets_a_message(self):
        rec = Recorder(httpx.Response(502, content=b""))
        transport, _ = make_transport(rec, make_config(retry_max_attempts=1))
        with pytest.raises(NotionServerError) as exc_info:
            transport.request("PATCH", "/blocks/b")
        assert "502" in exc_info.value.message


class TestRetries:
    @pytest.mark.parametrize(
        ("status", "code"),
        [
            (429, "rate_limited"),
            (500, "internal_server_error"),
            (503, "service_unavailable"),
            (504, "gateway_timeout"),
        ],
    )
    def test_retryable_code_exhausts_four_attempts(self, status, code):
        rec = Recorder(httpx.Response(status, json=error_body(status, code)))
        transport, sleeps = make_transport(rec)
        with pytest.raises(NotionRequestError) as exc_info:
            transport.request("GET", "/x")
        assert exc_info.value.code == code
        assert len(rec.requests) == 4
        assert sleeps == [1.0, 2.0, 4.0]

    def test_rate_limited_then_success(self):
        rec = Recorder(
            httpx.Response(429, json=error_body(429, "rate_limited")),
            httpx.Response(200, json=page_json("p1")),
        )
        transport, sleeps = make_transport(rec)
        page = transport.request("GET", "/pages/p1", decode=decode_page)
        assert isinstance(page, Page)
        assert len(rec.requests) == 2
        assert sleeps == [1.0]

    def test_retry_after_raises_delay(self):
        rec = Recorder(
            httpx.Response(
                429, json=error_body(429, "rate_limited"), headers={"retry-after": "5"}
            ),
            httpx.Response(200, json={}),
        )
        transport, sleeps = make_transport(rec)
        transport.request("GET", "/x")
        assert sleeps == [5.0]

    def test_configured_attempts(self):
        rec = Recorder(httpx.Response(503, json=error_body(503, "service_unavailable")))
        transport, sleeps = make_transport(rec, make_config(retry_max_attempts=2))
        with pytest.raises(NotionServerError):
            transport.request("GET", "/x")
        assert len(rec.requests) == 2
        assert sleeps == [1.0]

    def test_last_error_is_raised(self):
        rec = Recorder(
            httpx.Response(500, json=error_body(500, "internal_server_error", "first")),
            httpx.Response(503, json=error_body(503, "service_unavailable", "second")),
            httpx.Response(429, json=error_body(429, "rate_limited", "third")),
            httpx.Response(504, json=error_body(504, "gateway_timeout", "fourth")),
        )
        transport, _ = make_transport(rec)
        with pytest.raises(NotionServerError) as exc_info:
            transport.request("GET", "/x")
        assert exc_info.value.message == "fourth"


class TestNetworkErrors:
    def test_connect_error_is_status_zero(self):
        rec = Recorder(httpx.ConnectError("connection refused"))
        transport, sleeps = make_transport(rec)
        with pytest.raises(NotionNetworkError) as exc_info:
            transport.request("GET", "/x")
        err = exc_info.value
        assert err.status == 0
        assert err.code == ErrorCode.INTERNAL_SERVER_ERROR
        assert isinstance(err.__cause__, httpx.ConnectError)
        assert len(rec.requests) == 4
        assert sleeps == [1.0, 2.0, 4.0]

    def test_timeout_then_success(self):
        rec = Recorder(
            httpx.ReadTimeout("timed out"),
            httpx.Response(200, json={"ok": True}),
        )
        transport, _ = make_transport(rec)
        assert transport.request("GET", "/x") == {"ok": True}
        assert len(rec.requests) == 2


class TestDebugDump:
    def test_dump_is_redacted(self, capsys):
        token = "secret_test_token_abcd"
        rec = Recorder(httpx.Response(200, json={"echo": token}))
        transport, _ = make_transport(rec, make_config(token=token, debug_dump_payload=True))
        transport.request("POST", "/search", body={"query": token})
        err = capsys.readouterr().err
        assert '"method": "POST"' in err
        assert token not in err

    def test_no_dump_by_default(self, capsys):
        rec = Recorder(httpx.Response(200, json={}))
        transport, _ = make_transport(rec)
        transport.request("GET", "/x")
        assert capsys.readouterr().err == ""


class TestOwnership:
    def test_closes_only_owned_resources(self):
        client = httpx.Client(transport=httpx.MockTransport(Recorder(httpx.Response(200))))
        transport = NotionTransport(make_config(), _MockBucket(), http_client=client)
        transport.close()
        assert not client.is_closed

    def test_creates_and_closes_own_bucket(self):
        client = httpx.Client(transport=httpx.MockTransport(Recorder(httpx.Response(200))))
        with NotionTransport(make_config(), http_client=client) as transport:
            bucket = transport.bucket
            assert not bucket.closed
        assert bucket.closed


# ---------------------------------------------------------------------------
# Async pipeline
# ---------------------------------------------------------------------------

class TestAsyncTransport:
    @pytest.mark.asyncio
    async def test_decodes_page(self):
        rec = Recorder(httpx.Response(200, json=page_json("p9")))
        transport, _ = make_async_transport(rec)
        page = await transport.request("GET", "/pages/p9", decode=decode_page)
        assert page.id == "p9"

    @pytest.mark.asyncio
    async def test_rate_limited_then_success(self):
        rec = Recorder(
            httpx.Response(429, json=error_body(429, "rate_limited")),
            httpx.Response(200, json=page_json("p1")),
        )
        transport, sleeps = make_async_transport(rec)
        page = await transport.request("GET", "/pages/p1", decode=decode_page)
        assert page.id == "p1"
        assert sleeps == [1.0]

    @pytest.mark.asyncio
    async def test_retryable_exhausts(self):
        rec = Recorder(httpx.Response(503, json=error_body(503, "service_unavailable")))
        transport, sleeps = make_async_transport(rec)
        with pytest.raises(NotionServerError):
            await transport.request("GET", "/x")
        assert len(rec.requests) == 4
        assert sleeps == [1.0, 2.0, 4.0]

    @pytest.mark.asyncio
    async def test_not_found_attempted_once(self):
        rec = Recorder(httpx.Response(404, json=error_body(404, "object_not_found")))
        transport, sleeps = make_async_transport(rec)
        with pytest.raises(NotionObjectNotFoundError):
            await transport.request("GET", "/x")
        assert len(rec.requests) == 1
        assert sleeps == []

    @pytest.mark.asyncio
    async def test_network_error(self):
        rec = Recorder(httpx.ConnectError("refused"))
        transport, _ = make_async_transport(rec, make_config(retry_max_attempts=1))
        with pytest.raises(NotionNetworkError) as exc_info:
            await transport.request("GET", "/x")
        assert exc_info.value.status == 0

    @pytest.mark.asyncio
    async def test_invalid_json(self):
        rec = Recorder(httpx.Response(200, content=b"<html>"))
        transport, _ = make_async_transport(rec)
        with pytest.raises(NotionInvalidJSONError):
            await transport.request("GET", "/x")

    @pytest.mark.asyncio
    async def test_rate_limited_error_type(self):
        rec = Recorder(httpx.Response(429, json=error_body(429, "rate_limited")))
        transport, _ = make_async_transport(rec, make_config(retry_max_attempts=1))
        with pytest.raises(NotionRateLimitedError) as exc_info:
            await transport.request("GET", "/x")
        assert exc_info.value.retryable
