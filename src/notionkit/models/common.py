"""Building blocks shared by pages, databases, blocks and comments.

Each family here is a closed tagged union: a base class plus one subclass
per discriminant value, and a ``decode_*`` function that dispatches on the
discriminant through a registry.  An unknown discriminant is a
:class:`ModelDecodeError`.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, ClassVar

from ._wire import (
    OMITTED,
    RAW_OBJECT,
    ModelDecodeError,
    _Omitted,
    decode_fields,
    discriminant,
    encode_fields,
    expect_object,
    model,
    seq,
    wire_field,
)

# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------

@dataclass(frozen=True, kw_only=True)
class User:
    """A Notion user reference.

    A bare ``{"object": "user", "id": ...}`` decodes to :class:`PartialUser`;
    full objects decode to :class:`PersonUser` or :class:`BotUser` by their
    ``type``.
    """

    object: ClassVar[str] = "user"
    type: ClassVar[str | None] = None

    id: str = wire_field(required=True)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"object": "user"}
        if self.type is not None:
            out["type"] = self.type
        out.update(encode_fields(self))
        return out


@dataclass(frozen=True, kw_only=True)
class PartialUser(User):
    pass


@dataclass(frozen=True, kw_only=True)
class PersonUser(User):
    type = "person"

    name: str | None | _Omitted = wire_field()
    avatar_url: str | None | _Omitted = wire_field()
    person: Mapping[str, Any] | _Omitted = wire_field(RAW_OBJECT)

    @property
    def email(self) -> str | None:
        if self.person is OMITTED:
            return None
        return self.person.get("email")


@dataclass(frozen=True, kw_only=True)
class BotUser(User):
    type = "bot"

    name: str | None | _Omitted = wire_field()
    avatar_url: str | None | _Omitted = wire_field()
    bot: Mapping[str, Any] | _Omitted = wire_field(RAW_OBJECT)

    @property
    def workspace_name(self) -> str | None:
        if not self.bot:
            return None
        return self.bot.get("workspace_name")


_USER_TYPES: dict[str, type[User]] = {
    "person": PersonUser,
    "bot": BotUser,
}


def decode_user(data: Any) -> User:
    data = expect_object(data, "user")
    user_type = data.get("type")
    if user_type is None:
        return PartialUser(**decode_fields(PartialUser, data))
    cls = _USER_TYPES.get(user_type)
    if cls is None:
        raise ModelDecodeError(f"unknown user type {user_type!r}")
    return cls(**decode_fields(cls, data))


# ---------------------------------------------------------------------------
# Dates and options
# ---------------------------------------------------------------------------

@dataclass(frozen=True, kw_only=True)
class DateRange:
    """A date or date range with an optional IANA time zone."""

    start: str = wire_field(required=True)
    end: str | None | _Omitted = wire_field()
    time_zone: str | None | _Omitted = wire_field()

    @classmethod
    def from_dict(cls, data: Any) -> DateRange:
        return cls(**decode_fields(cls, expect_object(data, "date")))

    def to_dict(self) -> dict[str, Any]:
        return encode_fields(self)


@dataclass(frozen=True, kw_only=True)
class SelectOption:
    """A select, multi-select or status option."""

    name: str = wire_field(required=True)
    id: str | _Omitted = wire_field()
    color: str | _Omitted = wire_field()

    @classmethod
    def from_dict(cls, data: Any) -> SelectOption:
        return cls(**decode_fields(cls, expect_object(data, "option")))

    def to_dict(self) -> dict[str, Any]:
        return encode_fields(self)


# ---------------------------------------------------------------------------
# Rich text
# ---------------------------------------------------------------------------

@dataclass(frozen=True, kw_only=True)
class Annotations:
    bold: bool = False
    italic: bool = False
    strikethrough: bool = False
    underline: bool = False
    code: bool = False
    color: str = "default"

    @classmethod
    def from_dict(cls, data: Any) -> Annotations:
        data = expect_object(data, "annotations")
        known = {k: data[k] for k in cls.__dataclass_fields__ if k in data}
        return cls(**known)

    def to_dict(self) -> dict[str, Any]:
        return {
            "bold": self.bold,
            "italic": self.italic,
            "strikethrough": self.strikethrough,
            "underline": self.underline,
            "code": self.code,
            "color": self.color,
        }


@dataclass(frozen=True, kw_only=True)
class Mention:
    """Target of a mention span, discriminated by ``type``."""

    type: ClassVar[str] = ""

    def _payload(self) -> Any:
        raise NotImplementedError

    @classmethod
    def _from_payload(cls, payload: Any) -> Mention:
        raise NotImplementedError

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, self.type: self._payload()}


@dataclass(frozen=True, kw_only=True)
class UserMention(Mention):
    type = "user"
    user: User

    def _payload(self) -> Any:
        return self.user.to_dict()

    @classmethod
    def _from_payload(cls, payload: Any) -> Mention:
        return cls(user=decode_user(payload))


@dataclass(frozen=True, kw_only=True)
class PageMention(Mention):
    type = "page"
    page_id: str

    def _payload(self) -> Any:
        return {"id": self.page_id}

    @classmethod
    def _from_payload(cls, payload: Any) -> Mention:
        return cls(page_id=payload["id"])


@dataclass(frozen=True, kw_only=True)
class DatabaseMention(Mention):
    type = "database"
    database_id: str

    def _payload(self) -> Any:
        return {"id": self.database_id}

    @classmethod
    def _from_payload(cls, payload: Any) -> Mention:
        return cls(database_id=payload["id"])


@dataclass(frozen=True, kw_only=True)
class DateMention(Mention):
    type = "date"
    date: DateRange

    def _payload(self) -> Any:
        return self.date.to_dict()

    @classmethod
    def _from_payload(cls, payload: Any) -> Mention:
        return cls(date=DateRange.from_dict(payload))


@dataclass(frozen=True, kw_only=True)
class LinkPreviewMention(Mention):
    type = "link_preview"
    url: str

    def _payload(self) -> Any:
        return {"url": self.url}

    @classmethod
    def _from_payload(cls, payload: Any) -> Mention:
        return cls(url=payload["url"])


_MENTION_TYPES: dict[str, type[Mention]] = {
    cls.type: cls
    for cls in (UserMention, PageMention, DatabaseMention, DateMention, LinkPreviewMention)
}


def decode_mention(data: Any) -> Mention:
    data = expect_object(data, "mention")
    kind = discriminant(data, "type", "mention")
    cls = _MENTION_TYPES.get(kind)
    if cls is None:
        raise ModelDecodeError(f"unknown mention type {kind!r}")
    try:
        return cls._from_payload(data[kind])
    except (KeyError, TypeError) as exc:
        raise ModelDecodeError(f"mention {kind!r}: {exc}") from exc


@dataclass(frozen=True, kw_only=True)
class RichText:
    """One styled span of text.

    ``plain_text`` is the server-computed flattened text; it is
    :data:`OMITTED` on spans built locally for request bodies.
    """

    type: ClassVar[str] = ""

    plain_text: str | _Omitted = wire_field()
    annotations: Annotations | _Omitted = wire_field(model(Annotations.from_dict))
    href: str | None | _Omitted = wire_field()

    def _payload(self) -> dict[str, Any]:
        raise NotImplementedError

    @classmethod
    def _payload_kwargs(cls, payload: Mapping[str, Any]) -> dict[str, Any]:
        raise NotImplementedError

    @property
    def text(self) -> str:
        """The span's text: ``plain_text`` when known, else derived locally."""
        if isinstance(self.plain_text, str):
            return self.plain_text
        return self._local_text()

    def _local_text(self) -> str:
        return ""

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"type": self.type, self.type: self._payload()}
        out.update(encode_fields(self))
        return out


@dataclass(frozen=True, kw_only=True)
class TextRichText(RichText):
    type = "text"

    content: str
    link: str | None | _Omitted = OMITTED

    def _payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"content": self.content}
        if self.link is not OMITTED:
            payload["link"] = None if self.link is None else {"url": self.link}
        return payload

    @classmethod
    def _payload_kwargs(cls, payload: Mapping[str, Any]) -> dict[str, Any]:
        link = payload.get("link", OMITTED)
        if isinstance(link, Mapping):
            link = link["url"]
        return {"content": payload["content"], "link": link}

    def _local_text(self) -> str:
        return self.content


@dataclass(frozen=True, kw_only=True)
class MentionRichText(RichText):
    type = "mention"

    mention: Mention

    def _payload(self) -> dict[str, Any]:
        return self.mention.to_dict()

    @classmethod
    def _payload_kwargs(cls, payload: Mapping[str, Any]) -> dict[str, Any]:
        return {"mention": decode_mention(payload)}


@dataclass(frozen=True, kw_only=True)
class EquationRichText(RichText):
    type = "equation"

    expression: str

    def _payload(self) -> dict[str, Any]:
        return {"expression": self.expression}

    @classmethod
    def _payload_kwargs(cls, payload: Mapping[str, Any]) -> dict[str, Any]:
        return {"expression": payload["expression"]}

    def _local_text(self) -> str:
        return self.expression


_RICH_TEXT_TYPES: dict[str, type[RichText]] = {
    "text": TextRichText,
    "mention": MentionRichText,
    "equation": EquationRichText,
}


def decode_rich_text(data: Any) -> RichText:
    data = expect_object(data, "rich_text")
    kind = discriminant(data, "type", "rich_text")
    cls = _RICH_TEXT_TYPES.get(kind)
    if cls is None:
        raise ModelDecodeError(f"unknown rich text type {kind!r}")
    payload = expect_object(data.get(kind), f"rich_text.{kind}")
    try:
        specific = cls._payload_kwargs(payload)
    except (KeyError, TypeError) as exc:
        raise ModelDecodeError(f"rich text {kind!r}: {exc}") from exc
    return cls(**specific, **decode_fields(cls, data))


RICH_TEXT = seq(model(decode_rich_text))


def text(
    content: str,
    *,
    link: str | None | _Omitted = OMITTED,
    bold: bool = False,
    italic: bool = False,
    strikethrough: bool = False,
    underline: bool = False,
    code: bool = False,
    color: str = "default",
) -> TextRichText:
    """Build a text span for a request body.

    Annotations are only sent when at least one differs from the default.
    """
    annotations = Annotations(
        bold=bold,
        italic=italic,
        strikethrough=strikethrough,
        underline=underline,
        code=code,
        color=color,
    )
    return TextRichText(
        content=content,
        link=link,
        annotations=OMITTED if annotations == Annotations() else annotations,
    )


def extract_plain_text(spans: Iterable[RichText]) -> str:
    """Concatenate the text of *spans*."""
    return "".join(span.text for span in spans)


# ---------------------------------------------------------------------------
# Files and icons
# ---------------------------------------------------------------------------

@dataclass(frozen=True, kw_only=True)
class File:
    """A file reference, either Notion-hosted or external.

    ``name`` and ``caption`` appear when the file is an entry of a files
    property or the payload of a media block.
    """

    type: ClassVar[str] = ""

    name: str | _Omitted = wire_field()
    caption: tuple[RichText, ...] | _Omitted = wire_field(RICH_TEXT)

    def _payload(self) -> dict[str, Any]:
        raise NotImplementedError

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"type": self.type, self.type: self._payload()}
        out.update(encode_fields(self))
        return out


@dataclass(frozen=True, kw_only=True)
class ExternalFile(File):
    type = "external"
    url: str

    def _payload(self) -> dict[str, Any]:
        return {"url": self.url}


@dataclass(frozen=True, kw_only=True)
class HostedFile(File):
    """A Notion-hosted file; its ``url`` stops working after ``expiry_time``."""

    type = "file"
    url: str
    expiry_time: str | _Omitted = OMITTED

    def _payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"url": self.url}
        if self.expiry_time is not OMITTED:
            payload["expiry_time"] = self.expiry_time
        return payload


def decode_file(data: Any) -> File:
    data = expect_object(data, "file")
    kind = discriminant(data, "type", "file")
    payload = expect_object(data.get(kind), f"file.{kind}")
    common = decode_fields(File, data)
    try:
        if kind == "external":
            return ExternalFile(url=payload["url"], **common)
        if kind == "file":
            return HostedFile(
                url=payload["url"],
                expiry_time=payload.get("expiry_time", OMITTED),
                **common,
            )
    except KeyError as exc:
        raise ModelDecodeError(f"file {kind!r}: missing {exc}") from exc
    raise ModelDecodeError(f"unknown file type {kind!r}")


@dataclass(frozen=True, kw_only=True)
class EmojiIcon:
    type: ClassVar[str] = "emoji"
    emoji: str

    def to_dict(self) -> dict[str, Any]:
        return {"type": "emoji", "emoji": self.emoji}


Icon = EmojiIcon | ExternalFile | HostedFile


def decode_icon(data: Any) -> Icon:
    data = expect_object(data, "icon")
    kind = discriminant(data, "type", "icon")
    if kind == "emoji":
        emoji = data.get("emoji")
        if not isinstance(emoji, str):
            raise ModelDecodeError("emoji icon without an emoji")
        return EmojiIcon(emoji=emoji)
    return decode_file(data)


# ---------------------------------------------------------------------------
# Parents
# ---------------------------------------------------------------------------

@dataclass(frozen=True, kw_only=True)
class Parent:
    """Where an object lives.  A foreign-key style reference, never a pointer."""

    type: ClassVar[str] = ""

    def to_dict(self) -> dict[str, Any]:
        raise NotImplementedError


@dataclass(frozen=True, kw_only=True)
class DatabaseParent(Parent):
    type = "database_id"
    database_id: str

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "database_id": self.database_id}


@dataclass(frozen=True, kw_only=True)
class PageParent(Parent):
    type = "page_id"
    page_id: str

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "page_id": self.page_id}


@dataclass(frozen=True, kw_only=True)
class WorkspaceParent(Parent):
    type = "workspace"

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "workspace": True}


@dataclass(frozen=True, kw_only=True)
class BlockParent(Parent):
    type = "block_id"
    block_id: str

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "block_id": self.block_id}


def decode_parent(data: Any) -> Parent:
    """Decode a parent reference.

    Request-style parents without a ``type`` key (``{"page_id": ...}``) are
    accepted; the variant is inferred from the single id key present.
    """
    data = expect_object(data, "parent")
    kind = data.get("type")
    if kind is None:
        present = [k for k in ("database_id", "page_id", "block_id", "workspace") if k in data]
        if len(present) != 1:
            raise ModelDecodeError(f"ambiguous parent {dict(data)!r}")
        kind = present[0]
    try:
        if kind == "database_id":
            return DatabaseParent(database_id=data["database_id"])
        if kind == "page_id":
            return PageParent(page_id=data["page_id"])
        if kind == "block_id":
            return BlockParent(block_id=data["block_id"])
    except KeyError as exc:
        raise ModelDecodeError(f"parent {kind!r}: missing {exc}") from exc
    if kind == "workspace":
        return WorkspaceParent()
    raise ModelDecodeError(f"unknown parent type {kind!r}")
