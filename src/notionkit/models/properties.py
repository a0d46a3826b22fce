"""Page property values.

A property value is a tagged union keyed by ``type``; the payload lives
under the key named by the tag (``{"type": "number", "number": 3}``).
Formula and rollup results are nested unions keyed the same way.

Nullable payloads (``number``, ``select``, ``date``, ``url``...) hold
``None`` when the server sends ``null``.  Optional keys inside payloads
(``DateRange.end``, ``SelectOption.id``, ``RelationValue.has_more``...)
hold :data:`OMITTED` when absent.
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
    DateRange,
    File,
    RichText,
    SelectOption,
    User,
    decode_file,
    decode_user,
    extract_plain_text,
)

_DATE = model(DateRange.from_dict)
_OPTION = model(SelectOption.from_dict)
_USER = model(decode_user)

# ---------------------------------------------------------------------------
# Formula and rollup results
# ---------------------------------------------------------------------------

@dataclass(frozen=True, kw_only=True)
class FormulaResult:
    type: ClassVar[str] = ""

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, **encode_fields(self)}


@dataclass(frozen=True, kw_only=True)
class StringFormula(FormulaResult):
    type = "string"
    string: str | None = wire_field(required=True)


@dataclass(frozen=True, kw_only=True)
class NumberFormula(FormulaResult):
    type = "number"
    number: float | None = wire_field(required=True)


@dataclass(frozen=True, kw_only=True)
class BooleanFormula(FormulaResult):
    type = "boolean"
    boolean: bool | None = wire_field(required=True)


@dataclass(frozen=True, kw_only=True)
class DateFormula(FormulaResult):
    type = "date"
    date: DateRange | None = wire_field(_DATE, required=True)


_FORMULA_TYPES: dict[str, type[FormulaResult]] = {
    cls.type: cls for cls in (StringFormula, NumberFormula, BooleanFormula, DateFormula)
}


def decode_formula_result(data: Any) -> FormulaResult:
    data = expect_object(data, "formula")
    kind = discriminant(data, "type", "formula")
    cls = _FORMULA_TYPES.get(kind)
    if cls is None:
        raise ModelDecodeError(f"unknown formula type {kind!r}")
    return cls(**decode_fields(cls, data))


@dataclass(frozen=True, kw_only=True)
class RollupResult:
    type: ClassVar[str] = ""

    function: str | _Omitted = wire_field()

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, **encode_fields(self)}


@dataclass(frozen=True, kw_only=True)
class NumberRollup(RollupResult):
    type = "number"
    number: float | None = wire_field(required=True)


@dataclass(frozen=True, kw_only=True)
class DateRollup(RollupResult):
    type = "date"
    date: DateRange | None = wire_field(_DATE, required=True)


def _decode_rollup_array(raw: Any) -> tuple[PropertyValue, ...]:
    return seq(model(decode_property_value)).decode(raw)


def _encode_rollup_array(values: tuple[PropertyValue, ...]) -> list[dict[str, Any]]:
    return [value.to_dict() for value in values]


@dataclass(frozen=True, kw_only=True)
class ArrayRollup(RollupResult):
    """Rollup of ``show_original``: one property value per related page."""

    type = "array"
    array: tuple[PropertyValue, ...] = wire_field(
        Codec(_decode_rollup_array, _encode_rollup_array),
        required=True,
    )


@dataclass(frozen=True, kw_only=True)
class UnsupportedRollup(RollupResult):
    """A rollup result this client does not model, kept verbatim.

    Notion reports ``incomplete`` while a rollup is still being computed and
    ``unsupported`` for aggregations the API cannot return.
    """

    raw: Mapping[str, Any]

    @property
    def type(self) -> str:  # type: ignore[override]
        return self.raw["type"]

    def to_dict(self) -> dict[str, Any]:
        return dict(self.raw)


_ROLLUP_TYPES: dict[str, type[RollupResult]] = {
    cls.type: cls for cls in (NumberRollup, DateRollup, ArrayRollup)
}


def decode_rollup_result(data: Any) -> RollupResult:
    data = expect_object(data, "rollup")
    kind = discriminant(data, "type", "rollup")
    cls = _ROLLUP_TYPES.get(kind)
    if cls is None:
        return UnsupportedRollup(raw=RAW_OBJECT.decode(data), **decode_fields(UnsupportedRollup, data))
    return cls(**decode_fields(cls, data))


# ---------------------------------------------------------------------------
# Property values
# ---------------------------------------------------------------------------

@dataclass(frozen=True, kw_only=True)
class PropertyValue:
    """Base of the property value union.

    ``id`` is the property id reported by the server; it is omitted in
    request bodies built locally.
    """

    type: ClassVar[str] = ""

    id: str | _Omitted = wire_field()

    @classmethod
    def from_dict(cls, data: Any) -> PropertyValue:
        return decode_property_value(data)

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, **encode_fields(self)}


@dataclass(frozen=True, kw_only=True)
class NumberValue(PropertyValue):
    type = "number"
    number: float | None = wire_field(required=True)


@dataclass(frozen=True, kw_only=True)
class SelectValue(PropertyValue):
    type = "select"
    select: SelectOption | None = wire_field(_OPTION, required=True)


@dataclass(frozen=True, kw_only=True)
class MultiSelectValue(PropertyValue):
    type = "multi_select"
    multi_select: tuple[SelectOption, ...] = wire_field(seq(_OPTION), required=True)


@dataclass(frozen=True, kw_only=True)
class DateValue(PropertyValue):
    type = "date"
    date: DateRange | None = wire_field(_DATE, required=True)


@dataclass(frozen=True, kw_only=True)
class FormulaValue(PropertyValue):
    type = "formula"
    formula: FormulaResult = wire_field(model(decode_formula_result), required=True)

    @property
    def number(self) -> float | None:
        """The numeric result, or ``None`` for empty or non-numeric formulas."""
        if isinstance(self.formula, NumberFormula):
            return self.formula.number
        return None


def _decode_relation(raw: Any) -> tuple[str, ...]:
    if not isinstance(raw, list):
        raise ModelDecodeError("relation: expected a list")
    return tuple(expect_object(item, "relation item")["id"] for item in raw)


@dataclass(frozen=True, kw_only=True)
class RelationValue(PropertyValue):
    """Related page ids.  ``has_more`` is set when the list was truncated."""

    type = "relation"
    relation: tuple[str, ...] = wire_field(
        Codec(_decode_relation, lambda ids: [{"id": i} for i in ids]),
        required=True,
    )
    has_more: bool | _Omitted = wire_field()


@dataclass(frozen=True, kw_only=True)
class RollupValue(PropertyValue):
    type = "rollup"
    rollup: RollupResult = wire_field(model(decode_rollup_result), required=True)


@dataclass(frozen=True, kw_only=True)
class TitleValue(PropertyValue):
    type = "title"
    title: tuple[RichText, ...] = wire_field(RICH_TEXT, required=True)

    @property
    def plain_text(self) -> str:
        return extract_plain_text(self.title)


@dataclass(frozen=True, kw_only=True)
class RichTextValue(PropertyValue):
    type = "rich_text"
    rich_text: tuple[RichText, ...] = wire_field(RICH_TEXT, required=True)

    @property
    def plain_text(self) -> str:
        return extract_plain_text(self.rich_text)


@dataclass(frozen=True, kw_only=True)
class PeopleValue(PropertyValue):
    type = "people"
    people: tuple[User, ...] = wire_field(seq(_USER), required=True)


@dataclass(frozen=True, kw_only=True)
class FilesValue(PropertyValue):
    type = "files"
    files: tuple[File, ...] = wire_field(seq(model(decode_file)), required=True)


@dataclass(frozen=True, kw_only=True)
class CheckboxValue(PropertyValue):
    type = "checkbox"
    checkbox: bool = wire_field(required=True)


@dataclass(frozen=True, kw_only=True)
class UrlValue(PropertyValue):
    type = "url"
    url: str | None = wire_field(required=True)


@dataclass(frozen=True, kw_only=True)
class EmailValue(PropertyValue):
    type = "email"
    email: str | None = wire_field(required=True)


@dataclass(frozen=True, kw_only=True)
class PhoneNumberValue(PropertyValue):
    type = "phone_number"
    phone_number: str | None = wire_field(required=True)


@dataclass(frozen=True, kw_only=True)
class CreatedTimeValue(PropertyValue):
    type = "created_time"
    created_time: str = wire_field(required=True)


@dataclass(frozen=True, kw_only=True)
class CreatedByValue(PropertyValue):
    type = "created_by"
    created_by: User = wire_field(_USER, required=True)


@dataclass(frozen=True, kw_only=True)
class LastEditedTimeValue(PropertyValue):
    type = "last_edited_time"
    last_edited_time: str = wire_field(required=True)


@dataclass(frozen=True, kw_only=True)
class LastEditedByValue(PropertyValue):
    type = "last_edited_by"
    last_edited_by: User = wire_field(_USER, required=True)


@dataclass(frozen=True, kw_only=True)
class StatusValue(PropertyValue):
    type = "status"
    status: SelectOption | None = wire_field(_OPTION, required=True)


@dataclass(frozen=True, kw_only=True)
class UniqueId:
    number: int | None = wire_field(required=True)
    prefix: str | None | _Omitted = wire_field()

    @classmethod
    def from_dict(cls, data: Any) -> UniqueId:
        return cls(**decode_fields(cls, expect_object(data, "unique_id")))

    def to_dict(self) -> dict[str, Any]:
        return encode_fields(self)

    def __str__(self) -> str:
        return f"{self.prefix}-{self.number}" if self.prefix else str(self.number)


@dataclass(frozen=True, kw_only=True)
class UniqueIdValue(PropertyValue):
    type = "unique_id"
    unique_id: UniqueId = wire_field(model(UniqueId.from_dict), required=True)


@dataclass(frozen=True, kw_only=True)
class Verification:
    state: str = wire_field(required=True)
    verified_by: User | None | _Omitted = wire_field(_USER)
    date: DateRange | None | _Omitted = wire_field(_DATE)

    @classmethod
    def from_dict(cls, data: Any) -> Verification:
        return cls(**decode_fields(cls, expect_object(data, "verification")))

    def to_dict(self) -> dict[str, Any]:
        return encode_fields(self)


@dataclass(frozen=True, kw_only=True)
class VerificationValue(PropertyValue):
    type = "verification"
    verification: Verification | None = wire_field(model(Verification.from_dict), required=True)


@dataclass(frozen=True, kw_only=True)
class UnsupportedValue(PropertyValue):
    """A property type this client does not model (``button``...), kept verbatim."""

    raw: Mapping[str, Any]

    @property
    def type(self) -> str:  # type: ignore[override]
        return self.raw["type"]

    def to_dict(self) -> dict[str, Any]:
        return dict(self.raw)


_PROPERTY_TYPES: dict[str, type[PropertyValue]] = {
    cls.type: cls
    for cls in (
        NumberValue,
        SelectValue,
        MultiSelectValue,
        DateValue,
        FormulaValue,
        RelationValue,
        RollupValue,
        TitleValue,
        RichTextValue,
        PeopleValue,
        FilesValue,
        CheckboxValue,
        UrlValue,
        EmailValue,
        PhoneNumberValue,
        CreatedTimeValue,
        CreatedByValue,
        LastEditedTimeValue,
        LastEditedByValue,
        StatusValue,
        UniqueIdValue,
        VerificationValue,
    )
}

PROPERTY_TYPES: frozenset[str] = frozenset(_PROPERTY_TYPES)


def decode_property_value(data: Any) -> PropertyValue:
    """Decode one property value, dispatching on its ``type``.

    Types outside :data:`PROPERTY_TYPES` decode as :class:`UnsupportedValue`.
    """
    data = expect_object(data, "property value")
    kind = discriminant(data, "type", "property value")
    cls = _PROPERTY_TYPES.get(kind)
    if cls is None:
        return UnsupportedValue(raw=RAW_OBJECT.decode(data), **decode_fields(UnsupportedValue, data))
    return cls(**decode_fields(cls, data))


def encode_properties(properties: Mapping[str, Any]) -> dict[str, Any]:
    """Encode a name -> value mapping for a page create/update body."""
    return {
        name: value.to_dict() if isinstance(value, PropertyValue) else value
        for name, value in properties.items()
    }
