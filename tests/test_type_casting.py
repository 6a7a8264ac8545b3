"""
Tests for field type casting.
"""

import logging
from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from restmachine_document import FieldType, UnsupportedFieldTypeError, cast_field
from restmachine_document.models.fields import FieldDescriptor, field_descriptor


def descriptor(field_type, **options):
    return field_descriptor("value", field_type, options)


class TestNoneAndUndeclared:
    """None and undeclared fields pass through."""

    @pytest.mark.parametrize("field_type", list(FieldType))
    def test_none_stays_none(self, field_type):
        """None casts to None for every built-in type."""
        assert cast_field(None, descriptor(field_type)) is None

    def test_no_descriptor_keeps_value(self):
        """Values of undeclared fields are stored as given."""
        value = object()
        assert cast_field(value, None) is value


class TestStringCasting:
    """Test string casting."""

    def test_string_unchanged(self):
        assert cast_field("hello", descriptor("string")) == "hello"

    def test_booleans(self):
        """Booleans become 't' and 'f'."""
        assert cast_field(True, descriptor("string")) == "t"
        assert cast_field(False, descriptor("string")) == "f"

    def test_other_values_use_str(self):
        assert cast_field(42, descriptor("string")) == "42"
        assert cast_field(Decimal("1.5"), descriptor("string")) == "1.5"


class TestIntegerCasting:
    """Test integer casting."""

    def test_numeric_string(self):
        assert cast_field("42", descriptor("integer")) == 42

    def test_decimal_string_truncates(self):
        assert cast_field("42.9", descriptor("integer")) == 42

    def test_float_truncates(self):
        assert cast_field(3.99, descriptor("integer")) == 3

    def test_booleans(self):
        assert cast_field(True, descriptor("integer")) == 1
        assert cast_field(False, descriptor("integer")) == 0

    def test_invalid_values_become_none(self):
        """Blank, unparseable, and non-finite values become None."""
        assert cast_field("", descriptor("integer")) is None
        assert cast_field("   ", descriptor("integer")) is None
        assert cast_field("abc", descriptor("integer")) is None
        assert cast_field(float("inf"), descriptor("integer")) is None
        assert cast_field(float("nan"), descriptor("integer")) is None
        assert cast_field([1], descriptor("integer")) is None

    def test_huge_exponent_becomes_none(self):
        """Exponents too large to expand into an int become None."""
        assert cast_field("1e999999999", descriptor("integer")) is None
        assert cast_field(Decimal("1e999999999"), descriptor("integer")) is None

    def test_small_exponent(self):
        assert cast_field("1e3", descriptor("integer")) == 1000


class TestNumberCasting:
    """Test number casting."""

    def test_string_to_decimal(self):
        assert cast_field("3.14", descriptor("number")) == Decimal("3.14")

    def test_float_to_decimal_keeps_short_repr(self):
        assert cast_field(0.1, descriptor("number")) == Decimal("0.1")

    def test_integer_to_decimal(self):
        result = cast_field(7, descriptor("number"))
        assert isinstance(result, Decimal)
        assert result == 7

    def test_invalid_values_become_none(self):
        assert cast_field("", descriptor("number")) is None
        assert cast_field("one", descriptor("number")) is None
        assert cast_field(float("inf"), descriptor("number")) is None


class TestDateTimeCasting:
    """Test datetime and date casting."""

    def test_iso_string(self):
        result = cast_field("2025-01-15T10:30:00", descriptor("datetime"))
        assert result == datetime(2025, 1, 15, 10, 30, 0)

    def test_iso_string_with_zone(self):
        result = cast_field("2025-01-15T10:30:00Z", descriptor("datetime"))
        assert result == datetime(2025, 1, 15, 10, 30, 0, tzinfo=timezone.utc)

    def test_epoch_seconds(self):
        result = cast_field(0, descriptor("datetime"))
        assert result == datetime(1970, 1, 1, tzinfo=timezone.utc)

    def test_date_becomes_midnight(self):
        result = cast_field(date(2025, 1, 15), descriptor("datetime"))
        assert result == datetime(2025, 1, 15)

    def test_datetime_unchanged(self):
        moment = datetime(2025, 1, 15, 10, 30)
        assert cast_field(moment, descriptor("datetime")) is moment

    def test_invalid_datetime_becomes_none(self):
        assert cast_field("not a date", descriptor("datetime")) is None
        assert cast_field("", descriptor("datetime")) is None
        assert cast_field(True, descriptor("datetime")) is None

    def test_date_from_string(self):
        assert cast_field("2025-01-15", descriptor("date")) == date(2025, 1, 15)

    def test_date_from_datetime_string(self):
        """Datetime strings are truncated to their date."""
        assert cast_field("2025-01-15T10:30:00", descriptor("date")) == date(2025, 1, 15)

    def test_date_from_datetime(self):
        assert cast_field(datetime(2025, 1, 15, 23, 59), descriptor("date")) == date(2025, 1, 15)

    def test_invalid_date_becomes_none(self):
        assert cast_field("someday", descriptor("date")) is None


class TestBooleanCasting:
    """Test boolean casting."""

    @pytest.mark.parametrize("value", [False, 0, "0", "f", "F", "false", "FALSE", "off", "OFF"])
    def test_falsy_tokens(self, value):
        assert cast_field(value, descriptor("boolean")) is False

    @pytest.mark.parametrize("value", [True, 1, "1", "t", "true", "yes", "anything"])
    def test_everything_else_is_true(self, value):
        assert cast_field(value, descriptor("boolean")) is True

    def test_empty_string_is_none(self):
        assert cast_field("", descriptor("boolean")) is None


class TestCollectionCasting:
    """Test set, array, and map casting."""

    def test_list_to_set(self):
        assert cast_field(["a", "b", "a"], descriptor("set")) == {"a", "b"}

    def test_set_elements_cast_with_of(self):
        assert cast_field(["1", "2"], descriptor("set", of="integer")) == {1, 2}

    def test_tuple_to_array(self):
        assert cast_field(("a", "b"), descriptor("array")) == ["a", "b"]

    def test_array_elements_cast_with_of(self):
        result = cast_field(["2025-01-15"], descriptor("array", of="date"))
        assert result == [date(2025, 1, 15)]

    def test_unhashable_set_elements_become_none(self):
        assert cast_field([{"a": 1}, {"b": 2}], descriptor("set")) is None
        assert cast_field([["a"]], descriptor("set")) is None

    def test_unhashable_array_elements_are_kept(self):
        assert cast_field([{"a": 1}], descriptor("array")) == [{"a": 1}]

    def test_element_type_is_normalized_once(self, caplog):
        """The deprecated 'float' element type warns at declaration only."""
        with caplog.at_level(logging.WARNING):
            array_descriptor = descriptor("array", of="float")
        assert array_descriptor.option("of") is FieldType.NUMBER
        assert "deprecated in favor of 'number'" in caplog.text

        caplog.clear()
        with caplog.at_level(logging.WARNING):
            result = cast_field(["1.5", 2], array_descriptor)
            cast_field(["3"], array_descriptor)

        assert result == [Decimal("1.5"), Decimal(2)]
        assert caplog.text == ""

    def test_strings_and_mappings_are_not_collections(self):
        assert cast_field("abc", descriptor("set")) is None
        assert cast_field({"a": 1}, descriptor("array")) is None
        assert cast_field(42, descriptor("array")) is None

    def test_map(self):
        result = cast_field({"a": 1}, descriptor("map"))
        assert result == {"a": 1}
        assert isinstance(result, dict)

    def test_non_mapping_map_is_none(self):
        assert cast_field([("a", 1)], descriptor("map")) is None


class TestPassThroughCasting:
    """Serialized and raw values are stored as given."""

    @pytest.mark.parametrize("field_type", ["serialized", "raw"])
    def test_value_unchanged(self, field_type):
        value = {"nested": [1, 2, {"deep": True}]}
        assert cast_field(value, descriptor(field_type)) is value


class Money:
    """Custom type strategy with cast, dump, and load."""

    def __init__(self, cents):
        self.cents = cents

    def __eq__(self, other):
        return isinstance(other, Money) and other.cents == self.cents

    @classmethod
    def cast(cls, value):
        if isinstance(value, Money):
            return value
        return Money(int(Decimal(str(value)) * 100))

    @staticmethod
    def dump(value):
        return value.cents

    @classmethod
    def load(cls, value):
        return Money(int(value))


class Tag:
    """Custom type strategy with only dump."""

    @staticmethod
    def dump(value):
        return str(value)


class TestCustomTypeCasting:
    """Custom strategies decide how their values are cast."""

    def test_cast_delegates_to_strategy(self):
        assert cast_field("12.50", descriptor(Money)) == Money(1250)

    def test_strategy_without_cast_keeps_value(self):
        value = ["as", "given"]
        assert cast_field(value, descriptor(Tag)) is value

    def test_strategy_instance(self):
        """Strategies may be instances as well as classes."""
        strategy = Tag()
        assert cast_field(5, descriptor(strategy)) == 5


class TestUnsupportedTypes:
    """Unknown type tags fail when a value is cast."""

    def test_unknown_tag_raises(self):
        with pytest.raises(UnsupportedFieldTypeError) as exc_info:
            cast_field("x", FieldDescriptor("value", "geometry"))
        assert "geometry" in str(exc_info.value)

    def test_unknown_tag_none_value(self):
        """None never reaches the caster."""
        assert cast_field(None, FieldDescriptor("value", "geometry")) is None
