"""
Tests for the structured converters: object, array, buffer and date.
"""

from datetime import datetime, timezone

import pytest

from remoting.coercion.array import ArrayConverter
from remoting.coercion.buffer import BufferConverter
from remoting.coercion.date import DateConverter
from remoting.coercion.object import ObjectConverter, coerce_nested


class TestObjectConverter:
    """Tests for the "object" type."""

    def test_sloppy_json_text(self):
        assert ObjectConverter().from_sloppy_value('{"a": 1, "b": [true]}').value == {"a": 1, "b": [True]}

    def test_sloppy_nested_query_leaves_are_coerced(self):
        """Bracketed query keys arrive as strings and are interpreted."""
        raw = {"active": "true", "limit": "10", "name": "x", "nested": {"ratio": "0.5"}}

        result = ObjectConverter().from_sloppy_value(raw)

        assert result.value == {"active": True, "limit": 10, "name": "x", "nested": {"ratio": 0.5}}

    def test_sloppy_array_text_rejected(self):
        assert ObjectConverter().from_sloppy_value("[1]").error.message == "Value is not an object."

    def test_typed_values_not_reinterpreted(self):
        result = ObjectConverter().from_typed_value({"limit": "10"})

        assert result.value == {"limit": "10"}

    def test_typed_list_rejected(self):
        assert ObjectConverter().from_typed_value([1, 2]).error is not None

    def test_coerce_nested_lists(self):
        assert coerce_nested(["1", "null", ["false"]]) == [1, None, [False]]


class TestArrayConverter:
    """Tests for the "array" type, with and without an item type."""

    def test_sloppy_json_text_with_items(self, coerce):
        result = coerce("[1, 2, 3]", type="array", item_type="number")

        assert result.value == [1, 2, 3]

    def test_repeated_query_keys(self, coerce):
        result = coerce(["1", "2"], type="array", item_type="number")

        assert result.value == [1, 2]

    def test_indexed_bracket_keys_keep_index_order(self, coerce):
        result = coerce({"1": "b", "0": "a", "10": "k"}, type="array", item_type="string")

        assert result.value == ["a", "b", "k"]

    def test_single_scalar_is_wrapped(self, coerce):
        result = coerce("5", type="array", item_type="number")

        assert result.value == [5]

    def test_untyped_items_use_any(self, coerce):
        result = coerce(["1", "x"], type="array")

        assert result.value == [1, "x"]

    def test_first_bad_item_fails_whole_array(self, coerce):
        result = coerce(["1", "x", "y"], type="array", item_type="number")

        assert result.error.message == "Could not convert array item at index 1: Value is not a number."

    @pytest.mark.parametrize("item_type", ["number", None])
    def test_empty_item_fails_array(self, coerce, item_type):
        """?xs=1&xs= carries an empty item, which is not a value."""
        result = coerce(["1", ""], type="array", item_type=item_type)

        assert result.error.message == "Could not convert array item at index 1: Value is empty."

    def test_typed_items_validated(self, coerce):
        result = coerce([1, "2"], type="array", item_type="number", typed=True)

        assert result.error.message == "Could not convert array item at index 1: Value is not a number."

    def test_typed_items_canonicalized(self, coerce):
        result = coerce([1, 2.0], type="array", item_type="integer", typed=True)

        assert result.value == [1, 2]
        assert all(isinstance(item, int) for item in result.value)

    def test_non_index_dict_rejected(self):
        assert ArrayConverter().from_sloppy_value({"a": "1"}).error.message == "Value is not an array."

    def test_typed_scalar_rejected(self):
        assert ArrayConverter().from_typed_value("x").error.message == "Value is not an array."

    def test_required_empty_array_rejected(self, coerce):
        assert coerce("[]", type="array", required=True).error.message == "arg is a required argument"


class TestBufferConverter:
    """Tests for the "buffer" type."""

    @pytest.mark.parametrize(
        "raw",
        [b"hi", bytearray(b"hi"), [104, 105], {"type": "Buffer", "data": [104, 105]}],
    )
    def test_typed_shapes(self, raw):
        result = BufferConverter().from_typed_value(raw)

        assert result.value == b"hi"
        assert isinstance(result.value, bytes)

    def test_sloppy_base64(self):
        assert BufferConverter().from_sloppy_value("aGk=").value == b"hi"

    def test_sloppy_json_byte_list(self):
        assert BufferConverter().from_sloppy_value("[104,105]").value == b"hi"

    @pytest.mark.parametrize("raw", ["not base64!", "[256]", '{"type": "Buffer", "data": ["a"]}'])
    def test_sloppy_invalid(self, raw):
        assert BufferConverter().from_sloppy_value(raw).error.message == "Value is not a valid buffer."

    def test_typed_out_of_range_byte(self):
        assert BufferConverter().from_typed_value([1, 300]).error is not None


class TestDateConverter:
    """Tests for the "date" type."""

    def test_iso_string(self):
        result = DateConverter().from_typed_value("2016-05-19T13:28:51.299Z")

        assert result.value == datetime(2016, 5, 19, 13, 28, 51, 299000, tzinfo=timezone.utc)

    def test_naive_values_are_utc(self):
        result = DateConverter().from_typed_value(datetime(2020, 1, 1, 12, 0))

        assert result.value.tzinfo == timezone.utc

    def test_sloppy_millisecond_timestamp(self):
        result = DateConverter().from_sloppy_value("1463664531299")

        assert result.value == datetime(2016, 5, 19, 13, 28, 51, 299000, tzinfo=timezone.utc)

    def test_sloppy_iso_string(self):
        result = DateConverter().from_sloppy_value("2016-05-19T13:28:51Z")

        assert result.value.year == 2016

    @pytest.mark.parametrize("raw", ["not a date", "2016-13-45T00:00:00Z", [2016]])
    def test_invalid_dates(self, raw):
        assert DateConverter().from_sloppy_value(raw).error.message == "Value is not a valid date."

    def test_typed_pass_is_idempotent(self):
        converter = DateConverter()
        first = converter.from_sloppy_value("1463664531299").value

        assert converter.from_typed_value(first).value == first
