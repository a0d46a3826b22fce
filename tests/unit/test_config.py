"""Tests for config.py: defaults, validation and environment loading."""
from __future__ import annotations

import pytest

from notionkit.config import DEFAULT_BASE_URL, DEFAULT_NOTION_VERSION, NotionKitConfig


class TestDefaults:
    def test_values(self):
        config = NotionKitConfig(token="t")
        assert config.base_url == DEFAULT_BASE_URL == "https://api.notion.com/v1"
        assert config.notion_version == DEFAULT_NOTION_VERSION
        assert config.timeout_ms == 30_000
        assert config.timeout_seconds == 30.0
        assert config.retry_max_attempts == 4
        assert config.retry_base_delay == 1.0
        assert config.rate_limit_burst == 10
        assert config.pagination_max_pages == 1000
        assert config.debug_dump_payload is False


class TestValidation:
    @pytest.mark.parametrize(
        ("field", "value"),
        [
            ("timeout_ms", 0),
            ("rate_limit_rps", 0),
            ("rate_limit_burst", 0),
            ("retry_max_attempts", 0),
            ("retry_base_delay", -1),
            ("retry_max_delay", -1),
            ("pagination_max_pages", 0),
        ],
    )
    def test_rejects_out_of_range(self, field, value):
        with pytest.raises(ValueError, match=field):
            NotionKitConfig(token="t", **{field: value})

    def test_rejects_plain_http_remote(self):
        with pytest.raises(ValueError, match="insecure"):
            NotionKitConfig(token="t", base_url="http://api.example.com/v1")

    def test_allows_plain_http_localhost(self):
        config = NotionKitConfig(token="t", base_url="http://localhost:8080/v1")
        assert config.base_url.startswith("http://localhost")

    def test_rejects_other_schemes(self):
        with pytest.raises(ValueError):
            NotionKitConfig(token="t", base_url="ftp://api.notion.com")

    def test_unbounded_pagination_allowed(self):
        assert NotionKitConfig(token="t", pagination_max_pages=None).pagination_max_pages is None


class TestFromEnv:
    def test_reads_variables(self):
        config = NotionKitConfig.from_env({
            "NOTION_AUTH_TOKEN": "ntn_env",
            "NOTION_VERSION": "2025-09-03",
            "NOTION_BASE_URL": "https://proxy.example.com/v1",
            "NOTION_TIMEOUT_MS": "5000",
            "NOTION_RATE_LIMIT_PER_SECOND": "2.5",
            "NOTION_RATE_LIMIT_BURST": "4",
        })
        assert config.token == "ntn_env"
        assert config.notion_version == "2025-09-03"
        assert config.base_url == "https://proxy.example.com/v1"
        assert config.timeout_ms == 5000
        assert config.rate_limit_rps == 2.5
        assert config.rate_limit_burst == 4

    def test_token_fallback_name(self):
        assert NotionKitConfig.from_env({"NOTION_TOKEN": "legacy"}).token == "legacy"

    def test_missing_token(self):
        with pytest.raises(ValueError, match="NOTION_AUTH_TOKEN"):
            NotionKitConfig.from_env({})

    def test_overrides_win(self):
        config = NotionKitConfig.from_env({"NOTION_AUTH_TOKEN": "a"}, token="b", timeout_ms=10)
        assert config.token == "b"
        assert config.timeout_ms == 10

    def test_empty_values_ignored(self):
        config = NotionKitConfig.from_env({"NOTION_AUTH_TOKEN": "a", "NOTION_TIMEOUT_MS": ""})
        assert config.timeout_ms == 30_000

    def test_bad_number(self):
        with pytest.raises(ValueError, match="NOTION_TIMEOUT_MS"):
            NotionKitConfig.from_env({"NOTION_AUTH_TOKEN": "a", "NOTION_TIMEOUT_MS": "soon"})

    def test_reads_process_environment(self, monkeypatch):
        monkeypatch.setenv("NOTION_AUTH_TOKEN", "from_process")
        assert NotionKitConfig.from_env().token == "from_process"


class TestRepr:
    def test_token_masked(self):
        text = repr(NotionKitConfig(token="secret_abcdefgh1234"))
        assert "secret_abcdefgh1234" not in text
        assert "...1234" in text
