"""Client configuration for notionkit.

:class:`NotionKitConfig` is a dataclass that captures every tuneable knob
exposed by the client.  Instances are passed to both :class:`NotionClient`
and :class:`AsyncNotionClient`, or built from the process environment with
:meth:`NotionKitConfig.from_env`.
"""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

DEFAULT_NOTION_VERSION = "2022-06-28"
DEFAULT_BASE_URL = "https://api.notion.com/v1"

# Environment variable -> (field name, parser)
_ENV_FIELDS: dict[str, tuple[str, Any]] = {
    "NOTION_VERSION": ("notion_version", str),
    "NOTION_BASE_URL": ("base_url", str),
    "NOTION_TIMEOUT_MS": ("timeout_ms", int),
    "NOTION_RATE_LIMIT_PER_SECOND": ("rate_limit_rps", float),
    "NOTION_RATE_LIMIT_BURST": ("rate_limit_burst", int),
}


@dataclass
class NotionKitConfig:
    """Complete configuration for a notionkit client.

    Every parameter has a sensible default so that the only *required*
    value is ``token``.

    Parameters
    ----------
    token:
        Notion integration token.  **Required.**  Never logged.
    notion_version:
        Value of the ``Notion-Version`` header sent with every request.
    base_url:
        API root URL.  Override for proxy or testing environments.
    timeout_ms:
        Per-request timeout in milliseconds.  Each in-flight call carries
        its own timeout.
    rate_limit_rps:
        Sustained request rate of the client-side token bucket.
    rate_limit_burst:
        Number of requests the bucket lets through back-to-back.
    retry_max_attempts:
        Total attempts per request (first try included) for retryable
        failures.
    retry_base_delay:
        Delay in seconds before the first retry; doubled for each
        subsequent retry.
    retry_max_delay:
        Upper cap in seconds on a single backoff delay.
    retry_jitter:
        Randomly scale each backoff delay to 50-100 % of its value.
    pagination_max_pages:
        Ceiling on the number of pages a ``*_all`` traversal may fetch.
        ``None`` disables the ceiling.
    http_proxy:
        Optional HTTP/HTTPS proxy URL.
    metrics:
        Optional :class:`~notionkit.observability.MetricsHook` backend.
    debug_dump_payload:
        Write the (redacted) request and response of every call to
        *stderr*.
    """

    # ── Core ────────────────────────────────────────────────────────────
    token: str = ""

    notion_version: str = DEFAULT_NOTION_VERSION

    base_url: str = DEFAULT_BASE_URL

    # ── HTTP ────────────────────────────────────────────────────────────
    timeout_ms: int = 30_000

    http_proxy: str | None = None

    # ── Rate limiting ───────────────────────────────────────────────────
    rate_limit_rps: float = 3.0

    rate_limit_burst: int = 10

    # ── Retry ───────────────────────────────────────────────────────────
    retry_max_attempts: int = 4

    retry_base_delay: float = 1.0

    retry_max_delay: float = 60.0

    retry_jitter: bool = False

    # ── Pagination ──────────────────────────────────────────────────────
    pagination_max_pages: int | None = 1000

    # ── Observability ──────────────────────────────────────────────────
    metrics: Any | None = None

    debug_dump_payload: bool = False

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        from urllib.parse import urlparse

        parsed = urlparse(self.base_url)
        if parsed.scheme == "http" and parsed.hostname not in (
            "localhost",
            "127.0.0.1",
            "::1",
        ):
            raise ValueError(
                f"base_url uses insecure HTTP for non-local host '{parsed.hostname}'. "
                "Use HTTPS to protect your API token, or target localhost for testing."
            )
        if parsed.scheme not in ("http", "https"):
            raise ValueError(f"base_url must be an http(s) URL, got {self.base_url!r}")

        if self.timeout_ms <= 0:
            raise ValueError(f"timeout_ms must be > 0, got {self.timeout_ms}")
        if self.rate_limit_rps <= 0:
            raise ValueError(f"rate_limit_rps must be > 0, got {self.rate_limit_rps}")
        if self.rate_limit_burst < 1:
            raise ValueError(f"rate_limit_burst must be >= 1, got {self.rate_limit_burst}")
        if self.retry_max_attempts < 1:
            raise ValueError(f"retry_max_attempts must be >= 1, got {self.retry_max_attempts}")
        if self.retry_base_delay < 0:
            raise ValueError(f"retry_base_delay must be >= 0, got {self.retry_base_delay}")
        if self.retry_max_delay < 0:
            raise ValueError(f"retry_max_delay must be >= 0, got {self.retry_max_delay}")
        if self.pagination_max_pages is not None and self.pagination_max_pages < 1:
            raise ValueError(
                f"pagination_max_pages must be None or >= 1, got {self.pagination_max_pages}"
            )

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        **overrides: Any,
    ) -> NotionKitConfig:
        """Build a config from ``NOTION_*`` environment variables.

        ``NOTION_AUTH_TOKEN`` (or ``NOTION_TOKEN``) is required unless a
        ``token`` override is given.  Keyword *overrides* take precedence
        over the environment.

        Raises
        ------
        ValueError
            When no token is available or a numeric variable does not parse.
        """
        env = os.environ if environ is None else environ
        values: dict[str, Any] = {}

        token = env.get("NOTION_AUTH_TOKEN") or env.get("NOTION_TOKEN")
        if token:
            values["token"] = token

        for var, (name, parse) in _ENV_FIELDS.items():
            raw = env.get(var)
            if raw is None or raw == "":
                continue
            try:
                values[name] = parse(raw)
            except ValueError as exc:
                raise ValueError(f"{var} has an invalid value: {raw!r}") from exc

        values.update(overrides)
        if not values.get("token"):
            raise ValueError("NOTION_AUTH_TOKEN is not set")
        return cls(**values)

    def __repr__(self) -> str:
        """Mask the token to prevent accidental credential leakage."""
        parts: list[str] = []
        for f in dataclasses.fields(self):
            val = getattr(self, f.name)
            if f.name == "token":
                masked = f"...{val[-4:]}" if len(val) >= 4 else "****"
                parts.append(f"token='{masked}'")
            else:
                parts.append(f"{f.name}={val!r}")
        return f"NotionKitConfig({', '.join(parts)})"
