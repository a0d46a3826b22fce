"""Shared test fixtures for the notionkit test suite."""

from __future__ import annotations

from typing import Any

import pytest

from notionkit.config import NotionKitConfig

# ---------------------------------------------------------------------------
# Wire payload factories
# ---------------------------------------------------------------------------

def rich_text_json(content: str) -> dict[str, Any]:
    return {
        "type": "text",
        "text": {"content": content, "link": None},
        "annotations": {
            "bold": False,
            "italic": False,
            "strikethrough": False,
            "underline": False,
            "code": False,
            "color": "default",
        },
        "plain_text": content,
        "href": None,
    }


def page_json(
    page_id: str = "page-1",
    *,
    parent: dict[str, Any] | None = None,
    properties: dict[str, Any] | None = None,
) -> dict[str, Any]:
    return {
        "object": "page",
        "id": page_id,
        "created_time": "2024-01-01T00:00:00.000Z",
        "last_edited_time": "2024-01-02T00:00:00.000Z",
        "created_by": {"object": "user", "id": "user-1"},
        "last_edited_by": {"object": "user", "id": "user-1"},
        "archived": False,
        "in_trash": False,
        "icon": None,
        "cover": None,
        "parent": parent or {"type": "workspace", "workspace": True},
        "properties": properties if properties is not None else {
            "Name": {"id": "title", "type": "title", "title": [rich_text_json("Hello")]},
        },
        "url": f"https://www.notion.so/{page_id}",
        "public_url": None,
    }


def database_json(
    database_id: str = "db-1",
    *,
    parent: dict[str, Any] | None = None,
    title: str = "Tasks",
) -> dict[str, Any]:
    return {
        "object": "database",
        "id": database_id,
        "title": [rich_text_json(title)],
        "description": [],
        "parent": parent or {"type": "page_id", "page_id": "page-root"},
        "is_inline": False,
        "archived": False,
        "properties": {
            "Name": {"id": "title", "name": "Name", "type": "title", "title": {}},
            "Price": {"id": "abc", "name": "Price", "type": "number", "number": {"format": "dollar"}},
        },
    }


def block_json(
    block_id: str = "block-1",
    kind: str = "paragraph",
    payload: dict[str, Any] | None = None,
) -> dict[str, Any]:
    return {
        "object": "block",
        "id": block_id,
        "parent": {"type": "page_id", "page_id": "page-1"},
        "created_time": "2024-01-01T00:00:00.000Z",
        "last_edited_time": "2024-01-01T00:00:00.000Z",
        "has_children": False,
        "archived": False,
        "in_trash": False,
        "type": kind,
        kind: payload if payload is not None else {"rich_text": [rich_text_json("text")], "color": "default"},
    }


def list_json(
    results: list[Any],
    next_cursor: str | None = None,
) -> dict[str, Any]:
    return {
        "object": "list",
        "results": results,
        "next_cursor": next_cursor,
        "has_more": next_cursor is not None,
    }


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def config() -> NotionKitConfig:
    """Default test configuration with a dummy token."""
    return NotionKitConfig(token="test_token_1234")


@pytest.fixture
def fast_config() -> NotionKitConfig:
    """A config whose retries never wait and whose bucket never blocks."""
    return NotionKitConfig(
        token="test_token_1234",
        retry_base_delay=0.0,
        retry_max_delay=0.0,
        rate_limit_rps=10_000.0,
        rate_limit_burst=1_000,
    )
