"""
In-memory backend for RestMachine Document.

Simple dict-based storage for testing and examples without requiring
external services.
"""

from copy import deepcopy
from typing import Any, Optional

from restmachine_document.backends.base import Backend, ItemKey


class InMemoryBackend(Backend):
    """
    In-memory storage backend using Python dicts.

    Stores all data in memory. Data is lost when the process ends.
    Items are deep-copied on the way in and out, so stored data is never
    shared with documents.

    Example:
        >>> backend = InMemoryBackend()
        >>> class User(Document, document_backend=backend):
        ...     name = Field()
        >>> user = User.create(name="Alice")
        >>> User.find(user.id).name
        'Alice'
    """

    def __init__(self) -> None:
        # Storage: {table: {key: item}}
        self._storage: dict[str, dict[ItemKey, dict[str, Any]]] = {}

    @property
    def backend_name(self) -> str:
        """Backend identifier."""
        return 'memory'

    def _get_table(self, table: str) -> dict[ItemKey, dict[str, Any]]:
        """Get storage dict for a table."""
        return self._storage.setdefault(table, {})

    def put_item(self, table: str, key: ItemKey, item: dict[str, Any]) -> None:
        self._get_table(table)[key] = deepcopy(item)

    def get_item(self, table: str, key: ItemKey) -> Optional[dict[str, Any]]:
        item = self._get_table(table).get(key)
        return deepcopy(item) if item is not None else None

    def delete_item(self, table: str, key: ItemKey) -> bool:
        storage = self._get_table(table)
        if key in storage:
            del storage[key]
            return True
        return False

    def count(self, table: str) -> int:
        """Number of items in a table."""
        return len(self._get_table(table))

    def clear(self, table: Optional[str] = None) -> None:
        """
        Clear storage.

        Args:
            table: Optional table to clear. If None, clears all.
        """
        if table:
            self._storage.pop(table, None)
        else:
            self._storage.clear()
