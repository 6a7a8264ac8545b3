"""
Field definitions for RestMachine Document.

Field types, the descriptor stored in a document schema, and the Field()
helper for declaring fields in a class body.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional

logger = logging.getLogger(__name__)


class FieldType(str, Enum):
    """Built-in field kinds."""

    STRING = "string"
    INTEGER = "integer"
    NUMBER = "number"
    DATETIME = "datetime"
    DATE = "date"
    BOOLEAN = "boolean"
    SET = "set"
    ARRAY = "array"
    MAP = "map"
    SERIALIZED = "serialized"
    RAW = "raw"

    def __str__(self) -> str:
        return self.value


# Types allowed for hash and range keys
PERMITTED_KEY_TYPES = frozenset({
    FieldType.NUMBER,
    FieldType.INTEGER,
    FieldType.STRING,
    FieldType.DATETIME,
    FieldType.SERIALIZED,
})

DEPRECATED_TYPE_ALIASES = {
    "float": FieldType.NUMBER,
}

_PYTHON_TYPES: dict[type, FieldType] = {
    str: FieldType.STRING,
    int: FieldType.INTEGER,
    Decimal: FieldType.NUMBER,
    datetime: FieldType.DATETIME,
    date: FieldType.DATE,
    bool: FieldType.BOOLEAN,
    set: FieldType.SET,
    frozenset: FieldType.SET,
    list: FieldType.ARRAY,
    tuple: FieldType.ARRAY,
    dict: FieldType.MAP,
}


def is_custom_type(field_type: Any) -> bool:
    """Check if a field type is a custom strategy (anything with a callable ``dump``)."""
    if isinstance(field_type, (str, Enum)):
        return False
    return callable(getattr(field_type, "dump", None))


def normalize_field_type(field_type: Any, field_name: str = "") -> Any:
    """
    Normalize a declared field type.

    Tags are matched case-sensitively against FieldType. The deprecated
    ``float`` alias (tag or builtin) becomes ``number`` and logs a warning.
    Custom strategies are returned unchanged, as are unknown tags: they fail
    later, when a value is cast.

    Args:
        field_type: Tag, FieldType, Python type, or custom strategy
        field_name: Field being declared (used in the warning)

    Returns:
        FieldType, custom strategy, or the unknown tag as given
    """
    if isinstance(field_type, FieldType):
        return field_type

    if field_type is float or (isinstance(field_type, str) and field_type in DEPRECATED_TYPE_ALIASES):
        alias = "float" if field_type is float else field_type
        replacement = DEPRECATED_TYPE_ALIASES[alias]
        logger.warning(
            f"Field type {alias!r}, which you declared for {field_name!r}, "
            f"is deprecated in favor of {replacement.value!r}."
        )
        return replacement

    if isinstance(field_type, type) and field_type in _PYTHON_TYPES:
        return _PYTHON_TYPES[field_type]

    if is_custom_type(field_type):
        return field_type

    if isinstance(field_type, str):
        try:
            return FieldType(field_type)
        except ValueError:
            return field_type

    return field_type


@dataclass(frozen=True)
class FieldDescriptor:
    """
    Schema entry for one field: its name, type, and options.

    Descriptors are immutable; re-declaring a field replaces its descriptor.
    Options are opaque here and read by casting (``of``) and by backends.
    """

    name: str
    type: Any = FieldType.STRING
    options: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    def __post_init__(self) -> None:
        if not isinstance(self.options, MappingProxyType):
            object.__setattr__(self, "options", MappingProxyType(dict(self.options)))

    @property
    def is_custom(self) -> bool:
        """True when the type is a custom strategy."""
        return is_custom_type(self.type)

    def option(self, key: str, default: Any = None) -> Any:
        """Get an option value."""
        return self.options.get(key, default)


class FieldDeclaration:
    """
    Pending field declaration created by Field() in a class body.

    Collected by Document.__init_subclass__ and replaced by generated
    accessors.
    """

    def __init__(self, type: Any = FieldType.STRING, *, range_key: bool = False, **options: Any):
        self.type = type
        self.range_key = range_key
        self.options = options

    def __repr__(self) -> str:
        return f"Field({self.type!r}, range_key={self.range_key!r}, **{self.options!r})"


def Field(  # noqa: N802 - Capitalized to match the declaration style of model fields
    type: Any = FieldType.STRING,
    *,
    range_key: bool = False,
    **options: Any,
) -> Any:
    """
    Declare a document field in a class body.

    Args:
        type: Field type: a tag (``"integer"``), FieldType member, Python type,
              or a custom strategy exposing ``dump`` (and optionally ``load``
              and ``cast``)
        range_key: Designate this field as the table's range (sort) key
        **options: Field options, e.g. ``of="integer"`` for sets and arrays

    Returns:
        FieldDeclaration consumed when the class is created

    Example:
        >>> class Order(Document, table={"key": "order_id"}):
        ...     order_id = Field()
        ...     placed_at = Field("datetime", range_key=True)
        ...     quantity = Field("integer")
        ...     tags = Field("set", of="string")
    """
    return FieldDeclaration(type, range_key=range_key, **options)


def field_descriptor(name: str, type: Any = FieldType.STRING, options: Optional[Mapping[str, Any]] = None) -> FieldDescriptor:
    """Build a descriptor, normalizing the type and the ``of`` element type."""
    options = dict(options or {})
    if options.get("of") is not None:
        options["of"] = normalize_field_type(options["of"], name)
    return FieldDescriptor(name=name, type=normalize_field_type(type, name), options=options)
