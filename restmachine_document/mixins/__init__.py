"""
Built-in mixins for RestMachine Document.

Document includes all of them; they are importable for type checks and for
building custom document bases.
"""

from restmachine_document.mixins.associations import Association, AssociationsMixin
from restmachine_document.mixins.dirty import DirtyTrackingMixin
from restmachine_document.mixins.expiration import ExpirationMixin
from restmachine_document.mixins.inheritance import InheritanceMixin
from restmachine_document.mixins.keys import HashKeyMixin
from restmachine_document.mixins.timestamp import TimestampMixin

__all__ = [
    'Association',
    'AssociationsMixin',
    'DirtyTrackingMixin',
    'ExpirationMixin',
    'HashKeyMixin',
    'InheritanceMixin',
    'TimestampMixin',
]
