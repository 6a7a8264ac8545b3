"""
DirtyTrackingMixin for change tracking.

Records the value a field had before its first write since the last save.
The document registers each declared field here and rebuilds the tracked
set whenever a field is removed.
"""

from typing import Any, ClassVar, Iterable


class DirtyTrackingMixin:
    """
    Mixin that tracks which fields changed since the last save.

    A field counts as changed as soon as it is written, even when the new
    value equals the old one.

    Example:
        >>> user = User(name="Alice")
        >>> user.changes_applied()
        >>> user.name = "Alice Smith"
        >>> user.changed
        ['name']
        >>> user.changes
        {'name': ('Alice', 'Alice Smith')}
    """

    _tracked_attributes: ClassVar[frozenset[str]] = frozenset()

    @classmethod
    def define_attribute_method(cls, name: str) -> None:
        """Start tracking a field."""
        cls._tracked_attributes = cls._tracked_attributes | {name}

    @classmethod
    def define_attribute_methods(cls, names: Iterable[str]) -> None:
        """Start tracking several fields."""
        cls._tracked_attributes = cls._tracked_attributes | frozenset(names)

    @classmethod
    def undefine_attribute_methods(cls) -> None:
        """Stop tracking all fields."""
        cls._tracked_attributes = frozenset()

    @classmethod
    def tracked_attributes(cls) -> frozenset[str]:
        return cls._tracked_attributes

    @property
    def _changed_attributes(self) -> dict[str, Any]:
        try:
            return self.__dict__['_changed_attributes_store']
        except KeyError:
            return self.__dict__.setdefault('_changed_attributes_store', {})

    def attribute_will_change(self, name: str) -> None:
        """Record the current value of a field before it is written."""
        if name not in self._changed_attributes:
            self._changed_attributes[name] = self.read_attribute(name)  # type: ignore[attr-defined]

    def attribute_changed(self, name: str) -> bool:
        """True if a tracked field was written since the last save."""
        return name in self._changed_attributes and name in self._tracked_attributes

    def attribute_was(self, name: str) -> Any:
        """Value of a field before the pending changes."""
        if name in self._changed_attributes:
            return self._changed_attributes[name]
        return self.read_attribute(name)  # type: ignore[attr-defined]

    @property
    def changed(self) -> list[str]:
        """Names of changed tracked fields, in write order."""
        return [name for name in self._changed_attributes if name in self._tracked_attributes]

    @property
    def changes(self) -> dict[str, tuple[Any, Any]]:
        """Mapping of changed field to ``(old, new)``."""
        return {
            name: (self._changed_attributes[name], self.read_attribute(name))  # type: ignore[attr-defined]
            for name in self.changed
        }

    def has_changes(self) -> bool:
        return bool(self.changed)

    def changes_applied(self) -> None:
        """Forget pending changes (called after a successful save)."""
        self._changed_attributes.clear()
