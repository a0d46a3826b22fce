"""Top-level remote objects: pages, databases, comments, lists and errors.

Every object the API returns carries an ``object`` discriminator.
:func:`decode_object` dispatches on it, so a caller that does not know in
advance what it is holding (a search result, a webhook payload) can still
get a typed value back.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, ClassVar, Generic, TypeVar

from ._wire import (
    OMITTED,
    RAW_OBJECT,
    ModelDecodeError,
    _Omitted,
    decode_fields,
    discriminant,
    encode_fields,
    expect_object,
    mapping,
    model,
    wire_field,
)
from .blocks import Block, decode_block
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
from .properties import PropertyValue, decode_property_value

T = TypeVar("T")

_USER = model(decode_user)
_PARENT = model(decode_parent)
_ICON = model(decode_icon)
_COVER = model(decode_file)


# ---------------------------------------------------------------------------
# Pages
# ---------------------------------------------------------------------------

@dataclass(frozen=True, kw_only=True)
class Page:
    """A page, standalone or a database row.

    ``properties`` maps property names to their values; for a page whose
    parent is another page it holds only the ``title``.
    """

    object: ClassVar[str] = "page"

    id: str = wire_field(required=True)
    parent: Parent = wire_field(_PARENT, required=True)
    properties: Mapping[str, PropertyValue] = wire_field(
        mapping(model(decode_property_value)), required=True
    )
    created_time: str | _Omitted = wire_field()
    created_by: User | _Omitted = wire_field(_USER)
    last_edited_time: str | _Omitted = wire_field()
    last_edited_by: User | _Omitted = wire_field(_USER)
    archived: bool | _Omitted = wire_field()
    in_trash: bool | _Omitted = wire_field()
    icon: Icon | None | _Omitted = wire_field(_ICON)
    cover: File | None | _Omitted = wire_field(_COVER)
    url: str | _Omitted = wire_field()
    public_url: str | None | _Omitted = wire_field()

    @classmethod
    def from_dict(cls, data: Any) -> Page:
        return decode_page(data)

    def to_dict(self) -> dict[str, Any]:
        return {"object": self.object, **encode_fields(self)}

    def get_property(self, name: str) -> PropertyValue | None:
        """Return the value of property *name*, or ``None`` if the page has none."""
        return self.properties.get(name)

    @property
    def title(self) -> str:
        """Plain text of the page's title property (empty if it has none)."""
        for value in self.properties.values():
            if value.type == "title":
                return value.plain_text  # type: ignore[attr-defined]
        return ""


def decode_page(data: Any) -> Page:
    data = _expect_kind(data, "page")
    return Page(**decode_fields(Page, data))


# ---------------------------------------------------------------------------
# Databases
# ---------------------------------------------------------------------------

@dataclass(frozen=True, kw_only=True)
class PropertySchema:
    """One column of a database schema.

    ``config`` is the type-specific configuration (select options, formula
    expression, relation target...) kept as received.
    """

    id: str | _Omitted = wire_field()
    name: str | _Omitted = wire_field()
    type: str = wire_field(required=True)
    config: Mapping[str, Any]

    @classmethod
    def from_dict(cls, data: Any) -> PropertySchema:
        data = expect_object(data, "property schema")
        kind = discriminant(data, "type", "property schema")
        config = data.get(kind) or {}
        return cls(config=RAW_OBJECT.decode(config), **decode_fields(cls, data))

    def to_dict(self) -> dict[str, Any]:
        out = encode_fields(self)
        out[self.type] = dict(self.config)
        return out


@dataclass(frozen=True, kw_only=True)
class Database:
    object: ClassVar[str] = "database"

    id: str = wire_field(required=True)
    title: tuple[RichText, ...] = wire_field(RICH_TEXT, required=True)
    properties: Mapping[str, PropertySchema] = wire_field(
        mapping(model(PropertySchema.from_dict)), required=True
    )
    parent: Parent | _Omitted = wire_field(_PARENT)
    description: tuple[RichText, ...] | _Omitted = wire_field(RICH_TEXT)
    created_time: str | _Omitted = wire_field()
    created_by: User | _Omitted = wire_field(_USER)
    last_edited_time: str | _Omitted = wire_field()
    last_edited_by: User | _Omitted = wire_field(_USER)
    archived: bool | _Omitted = wire_field()
    in_trash: bool | _Omitted = wire_field()
    is_inline: bool | _Omitted = wire_field()
    icon: Icon | None | _Omitted = wire_field(_ICON)
    cover: File | None | _Omitted = wire_field(_COVER)
    url: str | _Omitted = wire_field()
    public_url: str | None | _Omitted = wire_field()

    @classmethod
    def from_dict(cls, data: Any) -> Database:
        return decode_database(data)

    def to_dict(self) -> dict[str, Any]:
        return {"object": self.object, **encode_fields(self)}

    @property
    def plain_title(self) -> str:
        return extract_plain_text(self.title)


def decode_database(data: Any) -> Database:
    data = _expect_kind(data, "database")
    return Database(**decode_fields(Database, data))


# ---------------------------------------------------------------------------
# Comments
# ---------------------------------------------------------------------------

@dataclass(frozen=True, kw_only=True)
class Comment:
    object: ClassVar[str] = "comment"

    id: str = wire_field(required=True)
    parent: Parent = wire_field(_PARENT, required=True)
    discussion_id: str = wire_field(required=True)
    rich_text: tuple[RichText, ...] = wire_field(RICH_TEXT, required=True)
    created_time: str | _Omitted = wire_field()
    last_edited_time: str | _Omitted = wire_field()
    created_by: User | _Omitted = wire_field(_USER)

    @classmethod
    def from_dict(cls, data: Any) -> Comment:
        return decode_comment(data)

    def to_dict(self) -> dict[str, Any]:
        return {"object": self.object, **encode_fields(self)}


def decode_comment(data: Any) -> Comment:
    data = _expect_kind(data, "comment")
    return Comment(**decode_fields(Comment, data))


# ---------------------------------------------------------------------------
# Lists and errors
# ---------------------------------------------------------------------------

@dataclass(frozen=True, kw_only=True)
class PaginatedList(Generic[T]):
    """One page of a cursor-paginated listing.

    ``has_more`` is ``False`` exactly when ``next_cursor`` is ``None``.  The
    cursor is opaque: pass it back unmodified as ``start_cursor``.
    """

    object: ClassVar[str] = "list"

    results: tuple[T, ...]
    next_cursor: str | None = None
    has_more: bool = False
    type: str | _Omitted = wire_field()

    def __post_init__(self) -> None:
        if self.has_more != (self.next_cursor is not None):
            raise ModelDecodeError(
                f"inconsistent list: has_more={self.has_more!r} "
                f"with next_cursor={self.next_cursor!r}"
            )

    def __iter__(self):
        return iter(self.results)

    def __len__(self) -> int:
        return len(self.results)

    def to_dict(self) -> dict[str, Any]:
        return {
            "object": self.object,
            "results": [_encode_item(item) for item in self.results],
            "next_cursor": self.next_cursor,
            "has_more": self.has_more,
            **encode_fields(self),
        }


def _encode_item(item: Any) -> Any:
    return item.to_dict() if hasattr(item, "to_dict") else item


def paginated(decode_item: Callable[[Any], T]) -> Callable[[Any], PaginatedList[T]]:
    """Return a decoder for a list whose results are decoded by *decode_item*."""

    def decode(data: Any) -> PaginatedList[T]:
        data = _expect_kind(data, "list")
        results = data.get("results")
        if not isinstance(results, list):
            raise ModelDecodeError("list: 'results' must be an array")
        has_more = data.get("has_more", False)
        if not isinstance(has_more, bool):
            raise ModelDecodeError("list: 'has_more' must be a boolean")
        return PaginatedList(
            results=tuple(decode_item(item) for item in results),
            next_cursor=data.get("next_cursor"),
            has_more=has_more,
            **decode_fields(PaginatedList, data),
        )

    return decode


@dataclass(frozen=True, kw_only=True)
class APIErrorPayload:
    """The body of a failed API call.

    Only ``code`` is required.  Proxies and older API versions may leave out
    ``status`` (the HTTP status stands in) or ``message``.
    """

    object: ClassVar[str] = "error"

    status: int | _Omitted = wire_field()
    code: str = wire_field(required=True)
    message: str | _Omitted = wire_field()
    request_id: str | None | _Omitted = wire_field()

    @classmethod
    def from_dict(cls, data: Any) -> APIErrorPayload:
        data = _expect_kind(data, "error")
        payload = cls(**decode_fields(cls, data))
        if not isinstance(payload.code, str):
            raise ModelDecodeError("error: 'code' must be a string")
        if payload.message is not OMITTED and not isinstance(payload.message, str):
            raise ModelDecodeError("error: 'message' must be a string")
        return payload

    def to_dict(self) -> dict[str, Any]:
        return {"object": self.object, **encode_fields(self)}


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

def _expect_kind(data: Any, kind: str) -> Mapping[str, Any]:
    data = expect_object(data, kind)
    found = data.get("object", kind)
    if found != kind:
        raise ModelDecodeError(f"expected object {kind!r}, got {found!r}")
    return data


RemoteObject = Page | Database | Block | User | Comment | PaginatedList | APIErrorPayload


def _decode_list(data: Any) -> PaginatedList:
    return paginated(decode_object)(data)


_OBJECT_DECODERS: dict[str, Callable[[Any], Any]] = {
    "page": decode_page,
    "database": decode_database,
    "block": decode_block,
    "user": decode_user,
    "comment": decode_comment,
    "list": _decode_list,
    "error": APIErrorPayload.from_dict,
}


def decode_object(data: Any) -> RemoteObject:
    """Decode any remote object by its ``object`` discriminator."""
    data = expect_object(data, "object")
    kind = discriminant(data, "object", "object")
    decoder = _OBJECT_DECODERS.get(kind)
    if decoder is None:
        raise ModelDecodeError(f"unknown object type {kind!r}")
    return decoder(data)


def decode_page_or_database(data: Any) -> Page | Database:
    """Decode a search result, which is either a page or a database."""
    data = expect_object(data, "search result")
    kind = discriminant(data, "object", "search result")
    if kind == "page":
        return decode_page(data)
    if kind == "database":
        return decode_database(data)
    raise ModelDecodeError(f"unexpected search result object {kind!r}")


__all__ = [
    "APIErrorPayload",
    "Comment",
    "Database",
    "Page",
    "PaginatedList",
    "PropertySchema",
    "RemoteObject",
    "decode_comment",
    "decode_database",
    "decode_object",
    "decode_page",
    "decode_page_or_database",
    "paginated",
]
