"""Tests for models/common.py: users, rich text, files, icons and parents."""
from __future__ import annotations

import pytest

from conftest import rich_text_json
from notionkit.models import (
    OMITTED,
    Annotations,
    BotUser,
    DatabaseParent,
    DateRange,
    EmojiIcon,
    EquationRichText,
    ExternalFile,
    HostedFile,
    MentionRichText,
    ModelDecodeError,
    PageMention,
    PageParent,
    PartialUser,
    PersonUser,
    TextRichText,
    UserMention,
    WorkspaceParent,
    decode_file,
    decode_icon,
    decode_parent,
    decode_rich_text,
    decode_user,
    extract_plain_text,
    text,
)


class TestUsers:
    def test_partial_user(self):
        user = decode_user({"object": "user", "id": "u1"})
        assert isinstance(user, PartialUser)
        assert user.to_dict() == {"object": "user", "id": "u1"}

    def test_person(self):
        user = decode_user({
            "object": "user",
            "id": "u2",
            "type": "person",
            "name": "Ada",
            "avatar_url": None,
            "person": {"email": "ada@example.com"},
        })
        assert isinstance(user, PersonUser)
        assert user.email == "ada@example.com"
        assert user.avatar_url is None

    def test_bot_workspace_name(self):
        user = decode_user({"id": "b", "type": "bot", "bot": {"workspace_name": "Acme"}})
        assert isinstance(user, BotUser)
        assert user.workspace_name == "Acme"

    def test_unknown_type(self):
        with pytest.raises(ModelDecodeError, match="robot"):
            decode_user({"id": "x", "type": "robot"})


class TestRichText:
    def test_text_span(self):
        span = decode_rich_text(rich_text_json("Hello"))
        assert isinstance(span, TextRichText)
        assert span.content == "Hello"
        assert span.link is None
        assert span.annotations == Annotations()
        assert span.text == "Hello"

    def test_link_unwrapped(self):
        data = rich_text_json("site")
        data["text"]["link"] = {"url": "https://example.com"}
        span = decode_rich_text(data)
        assert span.link == "https://example.com"
        assert span.to_dict()["text"]["link"] == {"url": "https://example.com"}

    def test_page_mention(self):
        span = decode_rich_text({
            "type": "mention",
            "mention": {"type": "page", "page": {"id": "p1"}},
            "plain_text": "Roadmap",
        })
        assert isinstance(span, MentionRichText)
        assert span.mention == PageMention(page_id="p1")
        assert span.text == "Roadmap"

    def test_user_mention(self):
        span = decode_rich_text({
            "type": "mention",
            "mention": {"type": "user", "user": {"object": "user", "id": "u1"}},
        })
        assert isinstance(span.mention, UserMention)
        assert span.mention.user.id == "u1"

    def test_equation_local_text(self):
        span = EquationRichText(expression="e=mc^2")
        assert span.text == "e=mc^2"

    def test_unknown_type(self):
        with pytest.raises(ModelDecodeError):
            decode_rich_text({"type": "emoji", "emoji": {}})

    def test_builder_omits_default_annotations(self):
        assert text("plain").to_dict() == {"type": "text", "text": {"content": "plain"}}

    def test_builder_sends_changed_annotations(self):
        out = text("bold", bold=True).to_dict()
        assert out["annotations"]["bold"] is True

    def test_extract_plain_text(self):
        spans = [decode_rich_text(rich_text_json("a")), text("b")]
        assert extract_plain_text(spans) == "ab"


class TestDates:
    def test_end_three_states(self):
        assert DateRange.from_dict({"start": "2024-01-01"}).end is OMITTED
        assert DateRange.from_dict({"start": "2024-01-01", "end": None}).end is None
        assert DateRange.from_dict({"start": "2024-01-01", "end": "2024-01-02"}).end == "2024-01-02"

    def test_to_dict_keeps_null(self):
        date = DateRange.from_dict({"start": "2024-01-01", "end": None})
        assert date.to_dict() == {"start": "2024-01-01", "end": None}


class TestFilesAndIcons:
    def test_external(self):
        f = decode_file({"type": "external", "external": {"url": "https://x/y.png"}})
        assert f == ExternalFile(url="https://x/y.png")

    def test_hosted_with_expiry(self):
        f = decode_file({
            "type": "file",
            "file": {"url": "https://s3/y", "expiry_time": "2024-01-01T00:00:00.000Z"},
            "name": "y.pdf",
        })
        assert isinstance(f, HostedFile)
        assert f.name == "y.pdf"
        assert f.to_dict()["file"]["expiry_time"] == "2024-01-01T00:00:00.000Z"

    def test_emoji_icon(self):
        assert decode_icon({"type": "emoji", "emoji": "🧔"}) == EmojiIcon(emoji="🧔")

    def test_unknown_file_type(self):
        with pytest.raises(ModelDecodeError):
            decode_file({"type": "ftp", "ftp": {}})


class TestParents:
    def test_typed(self):
        assert decode_parent({"type": "database_id", "database_id": "d"}) == DatabaseParent(database_id="d")
        assert decode_parent({"type": "workspace", "workspace": True}) == WorkspaceParent()

    def test_request_style_inferred(self):
        assert decode_parent({"page_id": "p"}) == PageParent(page_id="p")

    def test_ambiguous(self):
        with pytest.raises(ModelDecodeError):
            decode_parent({"page_id": "p", "database_id": "d"})

    def test_to_dict(self):
        assert PageParent(page_id="p").to_dict() == {"type": "page_id", "page_id": "p"}
