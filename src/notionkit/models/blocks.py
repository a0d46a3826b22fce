"""Blocks: a shared envelope around a per-kind content payload.

On the wire a block looks like::

    {"object": "block", "id": "...", "type": "to_do", "has_children": false,
     "archived": false, "parent": {...}, "to_do": {"rich_text": [...], "checked": true}}

:class:`Block` holds the envelope and a :class:`BlockContent` whose class is
selected by ``type``.  Request bodies for ``append_children`` take bare
:class:`BlockContent` values.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, ClassVar

from ._wire import (
    RAW_OBJECT,
    Codec,
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
from .common import (
    RICH_TEXT,
    File,
    Icon,
    Parent,
    RichText,
    User,
    decode_file,
    decode_icon,
    decode_parent,
    decode_user,
    extract_plain_text,
)

# ---------------------------------------------------------------------------
# Content union
# ---------------------------------------------------------------------------

@dataclass(frozen=True, kw_only=True)
class BlockContent:
    """Per-kind payload of a block, keyed on the wire by its ``type``."""

    type: ClassVar[str] = ""

    @classmethod
    def _from_payload(cls, payload: Mapping[str, Any]) -> BlockContent:
        return cls(**decode_fields(cls, payload))

    def _payload(self) -> dict[str, Any]:
        return encode_fields(self)

    def to_dict(self) -> dict[str, Any]:
        return {"object": "block", "type": self.type, self.type: self._payload()}


@dataclass(frozen=True, kw_only=True)
class _TextContent(BlockContent):
    rich_text: tuple[RichText, ...] = wire_field(RICH_TEXT, required=True)
    color: str | _Omitted = wire_field()

    @property
    def plain_text(self) -> str:
        return extract_plain_text(self.rich_text)


@dataclass(frozen=True, kw_only=True)
class Paragraph(_TextContent):
    type = "paragraph"


@dataclass(frozen=True, kw_only=True)
class BulletedListItem(_TextContent):
    type = "bulleted_list_item"


@dataclass(frozen=True, kw_only=True)
class NumberedListItem(_TextContent):
    type = "numbered_list_item"


@dataclass(frozen=True, kw_only=True)
class Toggle(_TextContent):
    type = "toggle"


@dataclass(frozen=True, kw_only=True)
class Quote(_TextContent):
    type = "quote"


@dataclass(frozen=True, kw_only=True)
class Template(_TextContent):
    type = "template"


@dataclass(frozen=True, kw_only=True)
class _Heading(_TextContent):
    is_toggleable: bool | _Omitted = wire_field()


@dataclass(frozen=True, kw_only=True)
class Heading1(_Heading):
    type = "heading_1"


@dataclass(frozen=True, kw_only=True)
class Heading2(_Heading):
    type = "heading_2"


@dataclass(frozen=True, kw_only=True)
class Heading3(_Heading):
    type = "heading_3"


@dataclass(frozen=True, kw_only=True)
class ToDo(_TextContent):
    type = "to_do"
    checked: bool | _Omitted = wire_field()


@dataclass(frozen=True, kw_only=True)
class Callout(_TextContent):
    type = "callout"
    icon: Icon | None | _Omitted = wire_field(model(decode_icon))


@dataclass(frozen=True, kw_only=True)
class Code(BlockContent):
    type = "code"
    rich_text: tuple[RichText, ...] = wire_field(RICH_TEXT, required=True)
    language: str = wire_field(required=True)
    caption: tuple[RichText, ...] | _Omitted = wire_field(RICH_TEXT)


@dataclass(frozen=True, kw_only=True)
class _Media(BlockContent):
    """Media blocks carry a :class:`File` (with caption) as their payload."""

    file: File

    @classmethod
    def _from_payload(cls, payload: Mapping[str, Any]) -> BlockContent:
        return cls(file=decode_file(payload))

    def _payload(self) -> dict[str, Any]:
        return self.file.to_dict()


@dataclass(frozen=True, kw_only=True)
class Image(_Media):
    type = "image"


@dataclass(frozen=True, kw_only=True)
class Video(_Media):
    type = "video"


@dataclass(frozen=True, kw_only=True)
class Audio(_Media):
    type = "audio"


@dataclass(frozen=True, kw_only=True)
class FileBlock(_Media):
    type = "file"


@dataclass(frozen=True, kw_only=True)
class Pdf(_Media):
    type = "pdf"


@dataclass(frozen=True, kw_only=True)
class Embed(BlockContent):
    type = "embed"
    url: str = wire_field(required=True)
    caption: tuple[RichText, ...] | _Omitted = wire_field(RICH_TEXT)


@dataclass(frozen=True, kw_only=True)
class Bookmark(BlockContent):
    type = "bookmark"
    url: str = wire_field(required=True)
    caption: tuple[RichText, ...] | _Omitted = wire_field(RICH_TEXT)


@dataclass(frozen=True, kw_only=True)
class LinkPreview(BlockContent):
    type = "link_preview"
    url: str = wire_field(required=True)


@dataclass(frozen=True, kw_only=True)
class LinkToPage(BlockContent):
    type = "link_to_page"
    target: Parent

    @classmethod
    def _from_payload(cls, payload: Mapping[str, Any]) -> BlockContent:
        return cls(target=decode_parent(payload))

    def _payload(self) -> dict[str, Any]:
        return self.target.to_dict()


@dataclass(frozen=True, kw_only=True)
class ChildPage(BlockContent):
    type = "child_page"
    title: str = wire_field(required=True)


@dataclass(frozen=True, kw_only=True)
class ChildDatabase(BlockContent):
    type = "child_database"
    title: str = wire_field(required=True)


@dataclass(frozen=True, kw_only=True)
class ColumnList(BlockContent):
    type = "column_list"


@dataclass(frozen=True, kw_only=True)
class Column(BlockContent):
    type = "column"


@dataclass(frozen=True, kw_only=True)
class Divider(BlockContent):
    type = "divider"


@dataclass(frozen=True, kw_only=True)
class Breadcrumb(BlockContent):
    type = "breadcrumb"


@dataclass(frozen=True, kw_only=True)
class TableOfContents(BlockContent):
    type = "table_of_contents"
    color: str | _Omitted = wire_field()


@dataclass(frozen=True, kw_only=True)
class Equation(BlockContent):
    type = "equation"
    expression: str = wire_field(required=True)


@dataclass(frozen=True, kw_only=True)
class Table(BlockContent):
    type = "table"
    table_width: int = wire_field(required=True)
    has_column_header: bool | _Omitted = wire_field()
    has_row_header: bool | _Omitted = wire_field()


@dataclass(frozen=True, kw_only=True)
class TableRow(BlockContent):
    type = "table_row"
    cells: tuple[tuple[RichText, ...], ...] = wire_field(seq(RICH_TEXT), required=True)


def _decode_synced_from(raw: Any) -> str:
    return expect_object(raw, "synced_from")["block_id"]


@dataclass(frozen=True, kw_only=True)
class SyncedBlock(BlockContent):
    """An original synced block (``synced_from is None``) or a reference to one."""

    type = "synced_block"
    synced_from: str | None = wire_field(
        Codec(_decode_synced_from, lambda block_id: {"type": "block_id", "block_id": block_id}),
        required=True,
    )


@dataclass(frozen=True, kw_only=True)
class Unsupported(BlockContent):
    """A block kind the API does not expose; the payload is kept verbatim."""

    type = "unsupported"
    payload: Mapping[str, Any]

    @classmethod
    def _from_payload(cls, payload: Mapping[str, Any]) -> BlockContent:
        return cls(payload=RAW_OBJECT.decode(payload))

    def _payload(self) -> dict[str, Any]:
        return dict(self.payload)


_BLOCK_TYPES: dict[str, type[BlockContent]] = {
    cls.type: cls
    for cls in (
        Paragraph,
        Heading1,
        Heading2,
        Heading3,
        BulletedListItem,
        NumberedListItem,
        ToDo,
        Toggle,
        Quote,
        Callout,
        Template,
        Code,
        Image,
        Video,
        Audio,
        FileBlock,
        Pdf,
        Embed,
        Bookmark,
        LinkPreview,
        LinkToPage,
        ChildPage,
        ChildDatabase,
        ColumnList,
        Column,
        Divider,
        Breadcrumb,
        TableOfContents,
        Equation,
        Table,
        TableRow,
        SyncedBlock,
        Unsupported,
    )
}

BLOCK_TYPES: frozenset[str] = frozenset(_BLOCK_TYPES)


def decode_block_content(data: Any) -> BlockContent:
    """Decode the content of a block from a full block or a request-style body."""
    data = expect_object(data, "block")
    kind = discriminant(data, "type", "block")
    cls = _BLOCK_TYPES.get(kind)
    if cls is None:
        raise ModelDecodeError(f"unknown block type {kind!r}")
    payload = expect_object(data.get(kind, {}), f"block.{kind}")
    try:
        return cls._from_payload(payload)
    except (KeyError, TypeError) as exc:
        raise ModelDecodeError(f"block {kind!r}: {exc}") from exc


# ---------------------------------------------------------------------------
# Envelope
# ---------------------------------------------------------------------------

_USER = model(decode_user)


@dataclass(frozen=True, kw_only=True)
class Block:
    """A block as returned by the API."""

    object: ClassVar[str] = "block"

    id: str = wire_field(required=True)
    content: BlockContent
    parent: Parent | _Omitted = wire_field(model(decode_parent))
    created_time: str | _Omitted = wire_field()
    created_by: User | _Omitted = wire_field(_USER)
    last_edited_time: str | _Omitted = wire_field()
    last_edited_by: User | _Omitted = wire_field(_USER)
    archived: bool | _Omitted = wire_field()
    in_trash: bool | _Omitted = wire_field()
    has_children: bool | _Omitted = wire_field()

    @property
    def type(self) -> str:
        return self.content.type

    @classmethod
    def from_dict(cls, data: Any) -> Block:
        return decode_block(data)

    def to_dict(self) -> dict[str, Any]:
        out = self.content.to_dict()
        out.update(encode_fields(self))
        return out


def decode_block(data: Any) -> Block:
    data = expect_object(data, "block")
    if data.get("object", "block") != "block":
        raise ModelDecodeError(f"expected a block, got object {data.get('object')!r}")
    content = decode_block_content(data)
    return Block(content=content, **decode_fields(Block, data))


def encode_block_content(value: BlockContent | Mapping[str, Any]) -> dict[str, Any]:
    """Encode a child block for an append/create body.

    Raw mappings pass through so callers can send shapes the model does not
    cover (nested ``children`` for instance).
    """
    if isinstance(value, BlockContent):
        return value.to_dict()
    return dict(value)


__all__ = [
    "BLOCK_TYPES",
    "Audio",
    "Block",
    "BlockContent",
    "Bookmark",
    "Breadcrumb",
    "BulletedListItem",
    "Callout",
    "ChildDatabase",
    "ChildPage",
    "Code",
    "Column",
    "ColumnList",
    "Divider",
    "Embed",
    "Equation",
    "FileBlock",
    "Heading1",
    "Heading2",
    "Heading3",
    "Image",
    "LinkPreview",
    "LinkToPage",
    "NumberedListItem",
    "Paragraph",
    "Pdf",
    "Quote",
    "SyncedBlock",
    "Table",
    "TableOfContents",
    "TableRow",
    "Template",
    "ToDo",
    "Toggle",
    "Unsupported",
    "Video",
    "decode_block",
    "decode_block_content",
    "encode_block_content",
]
