"""JSON log lines for notionkit.

Each record becomes one JSON object.  Fields passed through
``extra={"extra_fields": {...}}`` are merged at the top level after
:func:`notionkit.utils.redact.redact` has masked anything that looks like a
credential.  When the record carries a notionkit error, either as
``exc_info`` or under ``extra_fields["error"]``, its code, status and
request id are lifted into their own keys so failed calls can be grouped
by ``code`` and traced to Notion support by ``request_id``::

    {"ts": "2025-07-01T12:00:00.123456+00:00", "level": "WARNING",
     "logger": "notionkit.transport", "message": "Retrying request",
     "method": "PATCH", "path": "/pages/abc", "attempt": 1, "delay": 1.0,
     "error": "Rate limited", "error_type": "NotionRateLimitedError",
     "code": "rate_limited", "status": 429, "request_id": "9f1c...",
     "retryable": true}
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from notionkit.errors import ErrorCode, NotionKitError, NotionRequestError
from notionkit.utils.redact import redact


def error_fields(exc: BaseException) -> dict[str, Any]:
    """Log fields describing *exc*.

    Every exception yields ``error`` and ``error_type``.  A
    :class:`NotionKitError` adds its ``code``; a :class:`NotionRequestError`
    also adds ``status``, ``request_id`` and ``retryable``.
    """
    fields: dict[str, Any] = {"error": str(exc), "error_type": type(exc).__name__}
    if isinstance(exc, NotionKitError):
        code = exc.code
        fields["code"] = code.value if isinstance(code, ErrorCode) else code
    if isinstance(exc, NotionRequestError):
        fields["status"] = exc.status
        fields["request_id"] = exc.request_id
        fields["retryable"] = exc.retryable
    return fields


class StructuredFormatter(logging.Formatter):
    """Format log records as single-line JSON objects.

    Parameters
    ----------
    token:
        The integration token.  Any occurrence inside the extra fields is
        masked; without it only sensitive keys and ``Bearer`` values are.
    """

    def __init__(self, token: str | None = None) -> None:
        super().__init__()
        self.token = token

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        extra_fields: dict[str, Any] | None = getattr(record, "extra_fields", None)
        if extra_fields:
            fields = dict(extra_fields)
            error = fields.get("error")
            if isinstance(error, BaseException):
                fields.update(error_fields(error))
            log_entry.update(redact(fields, self.token))

        exc = record.exc_info[1] if record.exc_info else None
        if exc is not None:
            fields = error_fields(exc)
            fields["exception"] = self.formatException(record.exc_info)
            for key, value in redact(fields, self.token).items():
                log_entry.setdefault(key, value)

        if record.stack_info:
            log_entry["stack_info"] = self.formatStack(record.stack_info)

        return json.dumps(log_entry, default=str)


# One handler per logger name so that ``get_logger`` is idempotent.
_configured_loggers: set[str] = set()


def get_logger(
    name: str = "notionkit",
    *,
    level: int | str = logging.DEBUG,
    stream: Any | None = None,
) -> logging.Logger:
    """Return the JSON logger *name*, attaching its handler on first use.

    Repeated calls with the same *name* return the same logger without
    adding handlers.  *level* may be an ``int`` or a case-insensitive name.
    """
    logger = logging.getLogger(name)

    if name not in _configured_loggers:
        resolved_level = (
            logging.getLevelName(level.upper())
            if isinstance(level, str)
            else level
        )
        logger.setLevel(resolved_level)

        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(StructuredFormatter())
        logger.addHandler(handler)
        logger.propagate = False

        _configured_loggers.add(name)

    return logger
