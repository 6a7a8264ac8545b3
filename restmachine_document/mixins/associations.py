"""
AssociationsMixin for association caches.

Keeps the live association objects of a document keyed by the field that
backs them, so a write to that field can reset the cached association.
"""

from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class Association(Protocol):
    """An association object loaded for a document."""

    def reset(self) -> None:
        ...


class AssociationsMixin:
    """
    Mixin that holds materialized associations.

    Example:
        >>> post.register_association("author_ids", author_association)
        >>> post.author_ids = {"u2"}  # author_association.reset() is called
    """

    @property
    def associations(self) -> dict[str, Association]:
        try:
            return self.__dict__['_associations']
        except KeyError:
            return self.__dict__.setdefault('_associations', {})

    def register_association(self, name: str, association: Association) -> None:
        """Attach a live association object to the field that backs it."""
        self.associations[name] = association

    def association_for(self, name: str) -> Optional[Association]:
        return self.associations.get(name)

    def reset_association(self, name: str) -> None:
        """Reset the association backed by a field, if one is materialized."""
        association = self.associations.get(name)
        if association is not None:
            association.reset()
