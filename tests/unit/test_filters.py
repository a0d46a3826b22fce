"""Tests for filters.py."""
from __future__ import annotations

import pytest

from notionkit import filters


class TestPropertyFilter:
    def test_keyword_condition(self):
        assert filters.property("Done", "checkbox", equals=True) == {
            "property": "Done",
            "checkbox": {"equals": True},
        }

    def test_dict_and_keywords_merge(self):
        flt = filters.property("Price", "number", {"greater_than": 1}, less_than=10)
        assert flt == {"property": "Price", "number": {"greater_than": 1, "less_than": 10}}

    def test_needs_condition(self):
        with pytest.raises(ValueError):
            filters.property("Price", "number")


class TestTimestampFilter:
    def test_created_time(self):
        assert filters.timestamp("created_time", after="2024-01-01") == {
            "timestamp": "created_time",
            "created_time": {"after": "2024-01-01"},
        }

    def test_rejects_other_kinds(self):
        with pytest.raises(ValueError):
            filters.timestamp("deleted_time", after="2024-01-01")


class TestCompound:
    def test_and_or_nest(self):
        a = filters.property("A", "checkbox", equals=True)
        b = filters.property("B", "checkbox", equals=False)
        assert filters.or_(filters.and_(a, b), a) == {"or": [{"and": [a, b]}, a]}

    def test_empty_rejected(self):
        with pytest.raises(ValueError):
            filters.and_()


class TestSorts:
    def test_property_sort(self):
        assert filters.sort("Price") == {"property": "Price", "direction": "ascending"}

    def test_timestamp_sort(self):
        assert filters.timestamp_sort("last_edited_time") == {
            "timestamp": "last_edited_time",
            "direction": "descending",
        }

    def test_bad_direction(self):
        with pytest.raises(ValueError):
            filters.sort("Price", "sideways")


class TestSearchFilter:
    def test_page(self):
        assert filters.search_filter("page") == {"property": "object", "value": "page"}

    def test_rejects_blocks(self):
        with pytest.raises(ValueError):
            filters.search_filter("block")
