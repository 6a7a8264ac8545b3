"""
InheritanceMixin for single-table inheritance.

Subclasses of a document share its table. The inheritance field stores the
concrete class name so records load as the right subclass.
"""

from typing import Any

from restmachine_document.models.hooks import before_save


class InheritanceMixin:
    """
    Mixin that tags records with their class name.

    Example:
        >>> class Animal(Document):
        ...     type = Field()
        >>> class Dog(Animal):
        ...     pass
        >>> dog = Dog()
        >>> dog.set_inheritance_field()
        >>> dog.type
        'Dog'
    """

    @before_save
    def set_inheritance_field(self: Any) -> None:
        """Set the inheritance field to the class name if it is declared and unset."""
        cls = type(self)
        name = cls.inheritance_field()
        if name in cls.schema and self.read_attribute(name) is None:
            self.write_attribute(name, cls.__name__)
