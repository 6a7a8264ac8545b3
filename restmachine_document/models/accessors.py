"""
Generated accessors for document fields.

Each declared field ``name`` gets three class attributes:

- ``name``: data descriptor; reading calls read_attribute(), assignment calls
  write_attribute()
- ``has_name()``: presence predicate
- ``name_before_type_cast()``: last raw value written

The accessors check the class's current schema on every use, so a field
removed from a subclass is no longer reachable through accessors that the
subclass inherited.
"""

import inspect
import logging
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

_MISSING = object()


def getter_name(field_name: str) -> str:
    return field_name


def predicate_name(field_name: str) -> str:
    return f"has_{field_name}"


def before_type_cast_name(field_name: str) -> str:
    return f"{field_name}_before_type_cast"


def accessor_names(field_name: str) -> tuple[str, ...]:
    """Names of the attributes generated for a field (the setter shares the getter's name)."""
    return (
        getter_name(field_name),
        predicate_name(field_name),
        before_type_cast_name(field_name),
    )


def _ensure_declared(owner: type, field_name: str, attribute: str) -> None:
    if field_name not in owner.schema:  # type: ignore[attr-defined]
        raise AttributeError(f"'{owner.__name__}' object has no attribute '{attribute}'")


class GeneratedAccessor:
    """Base for attributes generated for a field."""

    def __init__(self, field_name: str, attribute: str):
        self.field_name = field_name
        self.attribute = attribute

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.attribute!r} for field {self.field_name!r}>"


class FieldAccessor(GeneratedAccessor):
    """Getter and setter for a field."""

    def __get__(self, instance: Any, owner: Optional[type] = None) -> Any:
        if instance is None:
            return self
        _ensure_declared(type(instance), self.field_name, self.attribute)
        return instance.read_attribute(self.field_name)

    def __set__(self, instance: Any, value: Any) -> None:
        _ensure_declared(type(instance), self.field_name, self.attribute)
        instance.write_attribute(self.field_name, value)


class FieldMethod(GeneratedAccessor):
    """Zero-argument method generated for a field."""

    def __init__(self, field_name: str, attribute: str, func: Callable[[Any, str], Any]):
        super().__init__(field_name, attribute)
        self.func = func

    def __get__(self, instance: Any, owner: Optional[type] = None) -> Any:
        if instance is None:
            return self
        _ensure_declared(type(instance), self.field_name, self.attribute)
        return lambda: self.func(instance, self.field_name)


def _presence(instance: Any, field_name: str) -> bool:
    value = instance.read_attribute(field_name)
    if value is True:
        return True
    if value is False or value is None:
        return False
    return value is not None


def _before_type_cast(instance: Any, field_name: str) -> Any:
    return instance.read_attribute_before_type_cast(field_name)


def warn_about_method_overriding(cls: type, method_name: str, field_name: str) -> None:
    """Log a warning if a generated accessor replaces an existing attribute."""
    existing = inspect.getattr_static(cls, method_name, _MISSING)
    if existing is _MISSING:
        return
    if isinstance(existing, GeneratedAccessor) and existing.field_name == field_name:
        # Re-declaration of the same field
        return
    logger.warning(
        f"Method {method_name} generated for the field {field_name} "
        f"overrides already existing method"
    )


def define_accessors(cls: type, field_name: str) -> None:
    """
    Generate the accessors for a field on a document class.

    Existing attributes with the same names are overwritten after a warning.
    """
    for name in accessor_names(field_name):
        warn_about_method_overriding(cls, name, field_name)

    setattr(cls, getter_name(field_name), FieldAccessor(field_name, getter_name(field_name)))
    setattr(
        cls,
        predicate_name(field_name),
        FieldMethod(field_name, predicate_name(field_name), _presence),
    )
    setattr(
        cls,
        before_type_cast_name(field_name),
        FieldMethod(field_name, before_type_cast_name(field_name), _before_type_cast),
    )


def remove_accessors(cls: type, field_name: str) -> None:
    """Delete the accessors a class generated for a field."""
    for name in accessor_names(field_name):
        existing = cls.__dict__.get(name)
        if isinstance(existing, GeneratedAccessor) and existing.field_name == field_name:
            delattr(cls, name)
