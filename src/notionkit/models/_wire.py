"""Wire-format plumbing shared by every model module.

Model fields that exist on the wire are declared with :func:`wire_field`,
which records a :class:`Codec` in the dataclass field metadata.
:func:`decode_fields` and :func:`encode_fields` walk those declarations so
each model only spells out what is special about its shape.

Three-state optionality
-----------------------
A wire field can be *omitted* (key absent), *null* (key present, value
``null``) or *set*.  Models keep the three apart: :data:`OMITTED` for the
first, ``None`` for the second, a real value for the third.  Encoding drops
``OMITTED`` fields and writes ``None`` as ``null``.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any


class ModelDecodeError(ValueError):
    """A wire payload does not match the shape of the model decoding it."""


class _Omitted:
    """Marker for a field that is absent from the wire payload."""

    _instance: _Omitted | None = None

    def __new__(cls) -> _Omitted:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "OMITTED"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> str:
        return "OMITTED"


OMITTED = _Omitted()


# ---------------------------------------------------------------------------
# Codecs
# ---------------------------------------------------------------------------

def _identity(value: Any) -> Any:
    return value


def _to_dict(value: Any) -> Any:
    return value.to_dict()


@dataclass(frozen=True)
class Codec:
    """A pair of functions converting one field between wire and model."""

    decode: Callable[[Any], Any]
    encode: Callable[[Any], Any]


PLAIN = Codec(_identity, _identity)


def model(decoder: Callable[[Any], Any]) -> Codec:
    """Codec for a nested model decoded by *decoder* and encoded by ``to_dict``."""
    return Codec(decoder, _to_dict)


def seq(item: Codec) -> Codec:
    """Codec for a JSON array, held as a tuple."""
    def decode(raw: Any) -> tuple:
        if not isinstance(raw, list):
            raise ModelDecodeError(f"expected a list, got {type(raw).__name__}")
        return tuple(item.decode(v) for v in raw)

    def encode(values: Sequence[Any]) -> list:
        return [item.encode(v) for v in values]

    return Codec(decode, encode)


def mapping(item: Codec) -> Codec:
    """Codec for a JSON object of homogeneous values, held read-only."""
    def decode(raw: Any) -> Mapping[str, Any]:
        if not isinstance(raw, Mapping):
            raise ModelDecodeError(f"expected an object, got {type(raw).__name__}")
        return MappingProxyType({k: item.decode(v) for k, v in raw.items()})

    def encode(values: Mapping[str, Any]) -> dict:
        return {k: item.encode(v) for k, v in values.items()}

    return Codec(decode, encode)


def frozen_mapping(raw: Any) -> Mapping[str, Any]:
    if not isinstance(raw, Mapping):
        raise ModelDecodeError(f"expected an object, got {type(raw).__name__}")
    return MappingProxyType(dict(raw))


RAW_OBJECT = Codec(frozen_mapping, dict)


def wire_field(codec: Codec = PLAIN, *, key: str | None = None, required: bool = False) -> Any:
    """Declare a dataclass field that maps to the wire key *key* (default: its name).

    Optional fields default to :data:`OMITTED`.
    """
    metadata = {"codec": codec, "key": key}
    if required:
        return dataclasses.field(metadata=metadata)
    return dataclasses.field(default=OMITTED, metadata=metadata)


# ---------------------------------------------------------------------------
# Generic decode / encode
# ---------------------------------------------------------------------------

def expect_object(data: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise ModelDecodeError(f"{what}: expected an object, got {type(data).__name__}")
    return data


def discriminant(data: Mapping[str, Any], key: str, what: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise ModelDecodeError(f"{what}: missing or invalid {key!r} discriminant")
    return value


def decode_fields(cls: type, data: Mapping[str, Any]) -> dict[str, Any]:
    """Decode every :func:`wire_field` of *cls* from *data* into constructor kwargs."""
    kwargs: dict[str, Any] = {}
    for f in dataclasses.fields(cls):
        codec: Codec | None = f.metadata.get("codec")
        if codec is None:
            continue
        key = f.metadata.get("key") or f.name
        if key not in data:
            if f.default is dataclasses.MISSING and f.default_factory is dataclasses.MISSING:
                raise ModelDecodeError(f"{cls.__name__}: missing required field {key!r}")
            continue
        raw = data[key]
        try:
            kwargs[f.name] = None if raw is None else codec.decode(raw)
        except (KeyError, TypeError, AttributeError) as exc:
            raise ModelDecodeError(f"{cls.__name__}.{key}: {exc}") from exc
    return kwargs


def encode_fields(obj: Any) -> dict[str, Any]:
    """Encode every :func:`wire_field` of *obj*, skipping omitted ones."""
    out: dict[str, Any] = {}
    for f in dataclasses.fields(obj):
        codec: Codec | None = f.metadata.get("codec")
        if codec is None:
            continue
        value = getattr(obj, f.name)
        if value is OMITTED:
            continue
        key = f.metadata.get("key") or f.name
        out[key] = None if value is None else codec.encode(value)
    return out


def encode(value: Any) -> Any:
    """Encode a request argument: models via ``to_dict``, containers recursively."""
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if isinstance(value, Mapping):
        return {k: encode(v) for k, v in value.items() if v is not OMITTED}
    if isinstance(value, (list, tuple)):
        return [encode(v) for v in value]
    raise TypeError(f"cannot encode {type(value).__name__} for the Notion API")
