"""
Schema registry for RestMachine Document.

A Schema is an immutable snapshot of a document class's fields and keys.
Every declaration or removal produces a new snapshot, which the class then
holds; readers always see a consistent set of fields.
"""

from types import MappingProxyType
from typing import Any, Iterator, Mapping, Optional

from restmachine_document.errors import DocumentError, UnknownFieldError
from restmachine_document.models.fields import FieldDescriptor

DEFAULT_HASH_KEY = "id"


class Schema:
    """
    Immutable mapping of field name to FieldDescriptor, plus key designations.

    Iteration yields descriptors in declaration order. A re-declared field
    keeps its original position.

    Example:
        >>> schema = Schema().with_field(field_descriptor("name"))
        >>> "name" in schema
        True
        >>> schema.without_field("name").names()
        ()
    """

    __slots__ = ("_fields", "hash_key", "range_key")

    def __init__(
        self,
        fields: Optional[Mapping[str, FieldDescriptor]] = None,
        *,
        hash_key: str = DEFAULT_HASH_KEY,
        range_key: Optional[str] = None,
    ):
        self._fields: Mapping[str, FieldDescriptor] = MappingProxyType(dict(fields or {}))
        self.hash_key = hash_key
        self.range_key = range_key

    def __setattr__(self, name: str, value: Any) -> None:
        if hasattr(self, "range_key"):
            raise AttributeError(f"{type(self).__name__} is immutable")
        object.__setattr__(self, name, value)

    @property
    def fields(self) -> Mapping[str, FieldDescriptor]:
        """Read-only view of the field descriptors."""
        return self._fields

    def __contains__(self, name: object) -> bool:
        return name in self._fields

    def __iter__(self) -> Iterator[FieldDescriptor]:
        return iter(self._fields.values())

    def __len__(self) -> int:
        return len(self._fields)

    def __repr__(self) -> str:
        return (
            f"Schema(fields={list(self._fields)!r}, "
            f"hash_key={self.hash_key!r}, range_key={self.range_key!r})"
        )

    def get(self, name: str) -> Optional[FieldDescriptor]:
        """Get the descriptor for a field, or None."""
        return self._fields.get(name)

    def names(self) -> tuple[str, ...]:
        """Field names in declaration order."""
        return tuple(self._fields)

    def _replace(self, **changes: Any) -> "Schema":
        values: dict[str, Any] = {
            "fields": self._fields,
            "hash_key": self.hash_key,
            "range_key": self.range_key,
        }
        values.update(changes)
        fields = values.pop("fields")
        return Schema(fields, **values)

    def with_field(self, descriptor: FieldDescriptor) -> "Schema":
        """Return a snapshot with the descriptor added or replaced."""
        fields = dict(self._fields)
        fields[descriptor.name] = descriptor
        return self._replace(fields=fields)

    def without_field(self, name: str) -> "Schema":
        """
        Return a snapshot without a field.

        Removing the range key field also clears the range key designation.

        Raises:
            UnknownFieldError: If the field is not declared
        """
        if name not in self._fields:
            raise UnknownFieldError(name)

        fields = dict(self._fields)
        del fields[name]
        range_key = None if self.range_key == name else self.range_key
        return self._replace(fields=fields, range_key=range_key)

    def with_hash_key(self, name: str) -> "Schema":
        """Return a snapshot with a different hash key name."""
        return self._replace(hash_key=name)

    def with_range_key(self, name: Optional[str]) -> "Schema":
        """Return a snapshot with a different range key name."""
        return self._replace(range_key=name)

    def key_names(self) -> tuple[str, ...]:
        """Hash key name, followed by the range key name when there is one."""
        if self.range_key is None:
            return (self.hash_key,)
        return (self.hash_key, self.range_key)

    def require_key_fields(self) -> None:
        """
        Check that every key name refers to a declared field.

        Raises:
            DocumentError: If a key has no field
        """
        for key in self.key_names():
            if key not in self._fields:
                raise DocumentError(f"Key {key!r} has no declared field")
