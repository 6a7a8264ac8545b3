"""
Base backend interface for RestMachine Document.

Backends store items: plain dicts of field values, addressed by a key made
of the hash key value and, when the schema has one, the range key value.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional, TYPE_CHECKING

from restmachine_document.errors import MissingKeyError

if TYPE_CHECKING:
    from restmachine_document.models.base import Document

ItemKey = tuple[Any, ...]


class Backend(ABC):
    """
    Abstract base class for storage backends.

    Subclasses implement the item operations; this class turns documents
    into items and keys using the document's schema.
    """

    @property
    @abstractmethod
    def backend_name(self) -> str:
        """Backend identifier."""
        pass

    @abstractmethod
    def put_item(self, table: str, key: ItemKey, item: dict[str, Any]) -> None:
        """
        Write an item, replacing any item with the same key.

        Args:
            table: Table name
            key: Item key
            item: Field values
        """
        pass

    @abstractmethod
    def get_item(self, table: str, key: ItemKey) -> Optional[dict[str, Any]]:
        """
        Read an item.

        Returns:
            Field values, or None if not found
        """
        pass

    @abstractmethod
    def delete_item(self, table: str, key: ItemKey) -> bool:
        """
        Delete an item.

        Returns:
            True if deleted, False if not found
        """
        pass

    def key_for(self, document: "Document") -> ItemKey:
        """
        Build the item key of a document.

        Raises:
            MissingKeyError: If a key field has no value
        """
        document_class = type(document)
        document_class.schema.require_key_fields()

        values = []
        for name in document_class.schema.key_names():
            value = document.read_attribute(name)
            if value is None:
                raise MissingKeyError(f"{document_class.__name__} has no value for key {name!r}")
            values.append(value)
        return tuple(values)

    def serialize(self, document: "Document") -> dict[str, Any]:
        """
        Convert a document to an item.

        Only declared fields with a value are included. Fields with a custom
        type are dumped through their strategy.
        """
        item: dict[str, Any] = {}
        for descriptor in type(document).schema:
            value = document.read_attribute(descriptor.name)
            if value is None:
                continue
            if descriptor.is_custom:
                value = descriptor.type.dump(value)
            item[descriptor.name] = value
        return item

    def deserialize(self, document_class: type["Document"], item: dict[str, Any]) -> dict[str, Any]:
        """
        Convert an item back to raw field values.

        Keys that are not declared fields are dropped. Fields with a custom
        type are loaded through the strategy's ``load`` when it has one.
        """
        values: dict[str, Any] = {}
        for name, value in item.items():
            descriptor = document_class.schema.get(name)
            if descriptor is None:
                continue
            load = getattr(descriptor.type, "load", None) if descriptor.is_custom else None
            values[name] = load(value) if callable(load) and value is not None else value
        return values

    def save(self, document: "Document") -> dict[str, Any]:
        """Write a document; returns the stored item."""
        item = self.serialize(document)
        self.put_item(type(document).table_name(), self.key_for(document), item)
        return item

    def delete(self, document: "Document") -> bool:
        """Delete a document's item."""
        return self.delete_item(type(document).table_name(), self.key_for(document))
