"""Tests for the JSON log lines: error fields, redaction and the pipeline's warnings."""
import io
import json
import logging
from unittest.mock import patch

import httpx
import pytest

from notionkit.config import NotionKitConfig
from notionkit.errors import (
    ErrorCode,
    NotionKitError,
    NotionNetworkError,
    NotionServerError,
    request_error,
)
from notionkit.notion_api.transport import NotionTransport
from notionkit.observability import StructuredFormatter, error_fields, get_logger


def _format(formatter=None, exc=None, **extra_fields):
    record = logging.LogRecord(
        name="notionkit.transport",
        level=logging.WARNING,
        pathname="",
        lineno=0,
        msg="Retrying request",
        args=(),
        exc_info=(type(exc), exc, exc.__traceback__) if exc is not None else None,
    )
    if extra_fields:
        record.extra_fields = extra_fields
    return json.loads((formatter or StructuredFormatter()).format(record))


class TestErrorFields:
    def test_request_error(self):
        exc = request_error(429, "rate_limited", "slow down", request_id="req-7")
        assert error_fields(exc) == {
            "error": str(exc),
            "error_type": type(exc).__name__,
            "code": "rate_limited",
            "status": 429,
            "request_id": "req-7",
            "retryable": True,
        }

    def test_network_error_has_status_zero(self):
        exc = request_error(0, ErrorCode.INTERNAL_SERVER_ERROR, "refused")
        fields = error_fields(exc)
        assert isinstance(exc, NotionNetworkError)
        assert fields["status"] == 0
        assert fields["request_id"] is None

    def test_local_error_has_code_only(self):
        fields = error_fields(NotionKitError(ErrorCode.INVALID_JSON, "bad"))
        assert fields["code"] == "invalid_json"
        assert "status" not in fields

    def test_plain_exception(self):
        assert error_fields(KeyError("x")) == {"error": "'x'", "error_type": "KeyError"}


class TestStructuredFormatter:
    def test_envelope(self):
        line = _format(attempt=2, path="/pages/abc")
        assert line["level"] == "WARNING"
        assert line["logger"] == "notionkit.transport"
        assert line["message"] == "Retrying request"
        assert line["attempt"] == 2
        assert "ts" in line

    def test_error_in_extra_fields_is_expanded(self):
        exc = request_error(409, "conflict_error", "Conflict", request_id="req-1")
        line = _format(error=exc, attempt=1)
        assert line["error_type"] == "NotionConflictError"
        assert line["code"] == "conflict_error"
        assert line["status"] == 409
        assert line["request_id"] == "req-1"
        assert line["retryable"] is False

    def test_exc_info_is_expanded_without_overriding_fields(self):
        try:
            raise request_error(503, "service_unavailable", "down", request_id="req-2")
        except NotionServerError as exc:
            line = _format(exc=exc, code="explicit")
        assert line["code"] == "explicit"
        assert line["status"] == 503
        assert line["request_id"] == "req-2"
        assert "NotionServerError" in line["exception"]

    def test_sensitive_keys_masked(self):
        line = _format(headers={"Authorization": "Bearer ntn_live"}, api_key="k")
        assert line["headers"]["Authorization"] == "Bearer <redacted>"
        assert line["api_key"] == "<redacted>"

    def test_known_token_scrubbed_everywhere(self):
        formatter = StructuredFormatter(token="ntn_secret_9999")
        exc = ValueError("rejected ntn_secret_9999")
        line = _format(formatter, exc=exc, url="https://x/?t=ntn_secret_9999")
        assert "ntn_secret_9999" not in json.dumps(line)
        assert line["url"].endswith("<redacted:...9999>")

    def test_enum_values_serialise_as_wire_strings(self):
        line = _format(code=ErrorCode.RATE_LIMITED, obj=object())
        assert line["code"] == "rate_limited"
        assert isinstance(line["obj"], str)


class TestGetLogger:
    def test_idempotent_and_isolated(self):
        stream = io.StringIO()
        logger = get_logger("notionkit.test_observability", level="info", stream=stream)
        assert get_logger("notionkit.test_observability") is logger
        assert len(logger.handlers) == 1
        assert logger.propagate is False
        assert logger.level == logging.INFO

        logger.debug("hidden")
        logger.info("Order price updated", extra={"extra_fields": {"page_id": "p", "price": 90.0}})
        line = json.loads(stream.getvalue().strip())
        assert line["page_id"] == "p"
        assert line["price"] == 90.0


class TestPipelineLogging:
    def _transport(self, handler, **overrides):
        config = NotionKitConfig(token="secret_log_token", retry_base_delay=0.0, **overrides)
        return NotionTransport(
            config,
            http_client=httpx.Client(transport=httpx.MockTransport(handler)),
            sleep=lambda d: None,
        )

    def test_retry_warning_carries_request_error(self):
        def handler(request):
            return httpx.Response(
                503,
                json={"object": "error", "status": 503, "code": "service_unavailable", "message": "x"},
                headers={"x-request-id": "req-503"},
            )

        transport = self._transport(handler, retry_max_attempts=2)
        with patch("notionkit.notion_api.transport.log") as mock_log:
            with pytest.raises(NotionServerError):
                transport.request("GET", "/pages/p1")
        transport.close()

        mock_log.warning.assert_called_once()
        assert mock_log.warning.call_args.args[0] == "Retrying request"
        fields = mock_log.warning.call_args.kwargs["extra"]["extra_fields"]
        assert fields["method"] == "GET"
        assert fields["path"] == "/pages/p1"
        assert fields["attempt"] == 1
        assert fields["code"] == "service_unavailable"
        assert fields["status"] == 503
        assert fields["request_id"] == "req-503"
        assert fields["retryable"] is True

    def test_network_warning_never_contains_token(self):
        def handler(request):
            raise httpx.ConnectError("refused")

        stream = io.StringIO()
        capture = logging.StreamHandler(stream)
        capture.setFormatter(StructuredFormatter(token="secret_log_token"))
        logger = logging.getLogger("notionkit.transport")
        logger.addHandler(capture)
        try:
            transport = self._transport(handler, retry_max_attempts=1)
            with pytest.raises(NotionNetworkError):
                transport.request("GET", "/users/me")
            transport.close()
        finally:
            logger.removeHandler(capture)

        lines = [json.loads(line) for line in stream.getvalue().splitlines()]
        network = [line for line in lines if line["message"] == "Request network error"]
        assert network
        assert network[0]["error_type"] == "ConnectError"
        assert "secret_log_token" not in stream.getvalue()
