"""Tests for models/_wire.py: the OMITTED marker, codecs and request encoding."""
from __future__ import annotations

import copy
from dataclasses import dataclass

import pytest

from notionkit.models import OMITTED, ModelDecodeError, NumberValue, encode
from notionkit.models._wire import (
    _Omitted,
    decode_fields,
    encode_fields,
    seq,
    wire_field,
)


@dataclass(frozen=True, kw_only=True)
class _Sample:
    name: str = wire_field(required=True)
    note: str | None | _Omitted = wire_field()
    renamed: int | _Omitted = wire_field(key="wireName")


class TestOmitted:
    def test_singleton(self):
        assert _Omitted() is OMITTED
        assert copy.deepcopy(OMITTED) is OMITTED

    def test_falsy_and_repr(self):
        assert not OMITTED
        assert repr(OMITTED) == "OMITTED"

    def test_distinct_from_none(self):
        assert OMITTED is not None
        assert OMITTED != None  # noqa: E711


class TestFieldCodecs:
    def test_three_states_decode(self):
        absent = _Sample(**decode_fields(_Sample, {"name": "a"}))
        null = _Sample(**decode_fields(_Sample, {"name": "a", "note": None}))
        present = _Sample(**decode_fields(_Sample, {"name": "a", "note": "hi"}))
        assert absent.note is OMITTED
        assert null.note is None
        assert present.note == "hi"

    def test_three_states_encode(self):
        assert encode_fields(_Sample(name="a")) == {"name": "a"}
        assert encode_fields(_Sample(name="a", note=None)) == {"name": "a", "note": None}
        assert encode_fields(_Sample(name="a", note="hi")) == {"name": "a", "note": "hi"}

    def test_wire_key(self):
        sample = _Sample(**decode_fields(_Sample, {"name": "a", "wireName": 3}))
        assert sample.renamed == 3
        assert encode_fields(sample) == {"name": "a", "wireName": 3}

    def test_missing_required(self):
        with pytest.raises(ModelDecodeError, match="name"):
            decode_fields(_Sample, {})

    def test_seq_requires_list(self):
        with pytest.raises(ModelDecodeError):
            seq(wire_field().metadata["codec"]).decode("nope")


class TestEncode:
    def test_models_use_to_dict(self):
        assert encode({"Price": NumberValue(number=2)}) == {"Price": {"type": "number", "number": 2}}

    def test_omitted_mapping_values_dropped(self):
        assert encode({"a": 1, "b": OMITTED, "c": None}) == {"a": 1, "c": None}

    def test_tuples_become_lists(self):
        assert encode((1, (2, 3))) == [1, [2, 3]]

    def test_unsupported_type(self):
        with pytest.raises(TypeError):
            encode(object())
