"""
Type casting for document fields.

Converts a raw value written to a field into the field's canonical Python
representation. Casting never fails for a supported type: values that cannot
be converted become None. A field without a descriptor keeps the raw value.
"""

import math
from collections.abc import Iterable, Mapping
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from pydantic import TypeAdapter, ValidationError

from restmachine_document.errors import UnsupportedFieldTypeError
from restmachine_document.models.fields import FieldDescriptor, FieldType

_DATETIME_ADAPTER: TypeAdapter[datetime] = TypeAdapter(datetime)
_DATE_ADAPTER: TypeAdapter[date] = TypeAdapter(date)

FALSY_VALUES = (False, 0, "0", "f", "F", "false", "FALSE", "off", "OFF")

# Largest decimal exponent converted to int; matches the interpreter's default
# int/str digit limit
MAX_INTEGER_EXPONENT = 4300


def _is_blank_string(value: Any) -> bool:
    return isinstance(value, str) and not value.strip()


def _parse_decimal(value: str) -> Optional[Decimal]:
    try:
        return Decimal(value.strip())
    except InvalidOperation:
        return None


def _decimal_to_int(number: Decimal) -> Optional[int]:
    if not number.is_finite() or number.adjusted() > MAX_INTEGER_EXPONENT:
        return None
    return int(number)


class TypeCaster:
    """
    Base caster.

    Subclasses implement process(), which is only called with non-None values.
    """

    def __init__(self, descriptor: FieldDescriptor):
        self.descriptor = descriptor

    def process(self, value: Any) -> Any:
        return value


class StringTypeCaster(TypeCaster):
    def process(self, value: Any) -> Optional[str]:
        if value is True:
            return "t"
        if value is False:
            return "f"
        if isinstance(value, str):
            return value
        return str(value)


class IntegerTypeCaster(TypeCaster):
    def process(self, value: Any) -> Optional[int]:
        if isinstance(value, bool):
            return int(value)
        if isinstance(value, int):
            return value
        if isinstance(value, float):
            return int(value) if math.isfinite(value) else None
        if isinstance(value, Decimal):
            return _decimal_to_int(value)
        if isinstance(value, str):
            if _is_blank_string(value):
                return None
            number = _parse_decimal(value)
            return _decimal_to_int(number) if number is not None else None
        try:
            return int(value)
        except (TypeError, ValueError):
            return None


class NumberTypeCaster(TypeCaster):
    def process(self, value: Any) -> Optional[Decimal]:
        if isinstance(value, bool):
            return Decimal(int(value))
        if isinstance(value, int):
            return Decimal(value)
        if isinstance(value, float):
            # str() keeps the shortest repr, avoiding binary noise in the Decimal
            return Decimal(str(value)) if math.isfinite(value) else None
        if isinstance(value, Decimal):
            return value if value.is_finite() else None
        if isinstance(value, str):
            if _is_blank_string(value):
                return None
            number = _parse_decimal(value)
            return number if number is not None and number.is_finite() else None
        try:
            return Decimal(str(value))
        except InvalidOperation:
            return None


class DateTimeTypeCaster(TypeCaster):
    def process(self, value: Any) -> Optional[datetime]:
        if isinstance(value, datetime):
            return value
        if isinstance(value, date):
            return datetime(value.year, value.month, value.day)
        if isinstance(value, bool) or _is_blank_string(value):
            return None
        if isinstance(value, Decimal):
            value = float(value)
        try:
            return _DATETIME_ADAPTER.validate_python(value)
        except ValidationError:
            return None


class DateTypeCaster(TypeCaster):
    def process(self, value: Any) -> Optional[date]:
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        if isinstance(value, bool) or _is_blank_string(value):
            return None
        try:
            return _DATE_ADAPTER.validate_python(value)
        except ValidationError:
            pass
        moment = DateTimeTypeCaster(self.descriptor).process(value)
        return moment.date() if moment is not None else None


class BooleanTypeCaster(TypeCaster):
    def process(self, value: Any) -> Optional[bool]:
        if isinstance(value, str) and value == "":
            return None
        if value in FALSY_VALUES:
            return False
        return True


class _CollectionTypeCaster(TypeCaster):
    """Shared element handling for set and array fields."""

    def _elements(self, value: Any) -> Optional[list[Any]]:
        if isinstance(value, (str, bytes, Mapping)) or not isinstance(value, Iterable):
            return None

        elements = list(value)
        element_type = self.descriptor.option("of")
        if element_type is None:
            return elements

        # ``of`` was normalized when the field was declared
        element_descriptor = FieldDescriptor(self.descriptor.name, element_type)
        return [cast_field(element, element_descriptor) for element in elements]


class SetTypeCaster(_CollectionTypeCaster):
    def process(self, value: Any) -> Optional[set[Any]]:
        elements = self._elements(value)
        if elements is None:
            return None
        try:
            return set(elements)
        except TypeError:
            # Unhashable elements
            return None


class ArrayTypeCaster(_CollectionTypeCaster):
    def process(self, value: Any) -> Optional[list[Any]]:
        return self._elements(value)


class MapTypeCaster(TypeCaster):
    def process(self, value: Any) -> Optional[dict[Any, Any]]:
        if isinstance(value, Mapping):
            return dict(value)
        return None


class CustomTypeCaster(TypeCaster):
    """Delegates to the strategy's ``cast`` when it defines one."""

    def process(self, value: Any) -> Any:
        cast = getattr(self.descriptor.type, "cast", None)
        if callable(cast):
            return cast(value)
        return value


_CASTERS: dict[FieldType, type[TypeCaster]] = {
    FieldType.STRING: StringTypeCaster,
    FieldType.INTEGER: IntegerTypeCaster,
    FieldType.NUMBER: NumberTypeCaster,
    FieldType.DATETIME: DateTimeTypeCaster,
    FieldType.DATE: DateTypeCaster,
    FieldType.BOOLEAN: BooleanTypeCaster,
    FieldType.SET: SetTypeCaster,
    FieldType.ARRAY: ArrayTypeCaster,
    FieldType.MAP: MapTypeCaster,
    FieldType.SERIALIZED: TypeCaster,
    FieldType.RAW: TypeCaster,
}


def caster_for(descriptor: FieldDescriptor) -> TypeCaster:
    """
    Get the caster for a field descriptor.

    Raises:
        UnsupportedFieldTypeError: If the descriptor's type has no caster
    """
    if descriptor.is_custom:
        return CustomTypeCaster(descriptor)
    if isinstance(descriptor.type, FieldType):
        return _CASTERS[descriptor.type](descriptor)
    raise UnsupportedFieldTypeError(descriptor.type, descriptor.name)


def cast_field(value: Any, descriptor: Optional[FieldDescriptor]) -> Any:
    """
    Cast a raw value for a field.

    Args:
        value: Raw value as written by the caller
        descriptor: Field descriptor, or None for undeclared names

    Returns:
        Casted value; None stays None

    Raises:
        UnsupportedFieldTypeError: If the field type has no casting rule

    Example:
        >>> cast_field("42", FieldDescriptor("age", FieldType.INTEGER))
        42
    """
    if descriptor is None:
        return value
    if value is None:
        return None
    return caster_for(descriptor).process(value)
