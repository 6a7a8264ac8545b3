"""
Per-instance attribute storage.

Holds two parallel mappings keyed by field name: casted values and the raw
values they were cast from. Writes notify an ordered list of observers
before anything is stored.
"""

from enum import Enum
from typing import Any, Callable, Optional, Sequence

from restmachine_document.models.fields import FieldDescriptor
from restmachine_document.type_casting import cast_field

WriteObserver = Callable[[str], None]


def normalize_field_name(name: Any) -> Optional[str]:
    """
    Convert a field name to the registry's key form.

    Returns:
        The name as a plain str, or None if it cannot be normalized
    """
    if isinstance(name, Enum):
        name = name.value
    if isinstance(name, str):
        return str(name)
    return None


class AttributeStore:
    """
    Casted and raw attribute values for one document instance.

    Write order: observers (in registration order), raw store, cast, casted
    store. Observers therefore see the old value.

    Args:
        descriptor_for: Returns the descriptor used to cast a field, or None
        observers: Called with the field name before each write
    """

    def __init__(
        self,
        descriptor_for: Callable[[str], Optional[FieldDescriptor]],
        observers: Sequence[WriteObserver] = (),
    ):
        self._descriptor_for = descriptor_for
        self._observers: list[WriteObserver] = list(observers)
        self.values: dict[str, Any] = {}
        self.raw_values: dict[str, Any] = {}

    def add_observer(self, observer: WriteObserver) -> None:
        """Append an observer; it runs after the existing ones."""
        self._observers.append(observer)

    def write(self, name: Any, value: Any) -> Any:
        """
        Store a raw value and its casted form.

        Returns:
            The casted value

        Raises:
            TypeError: If the name cannot be normalized
        """
        key = normalize_field_name(name)
        if key is None:
            raise TypeError(f"Attribute name must be a string, not {type(name).__name__}")

        for observer in self._observers:
            observer(key)

        self.raw_values[key] = value
        casted = cast_field(value, self._descriptor_for(key))
        self.values[key] = casted
        return casted

    def read(self, name: Any) -> Any:
        """Casted value, or None if never written."""
        key = normalize_field_name(name)
        if key is None:
            return None
        return self.values.get(key)

    def read_before_type_cast(self, name: Any) -> Any:
        """Raw value, or None if never written or the name cannot be normalized."""
        key = normalize_field_name(name)
        if key is None:
            return None
        return self.raw_values.get(key)
