"""
HashKeyMixin for generated primary keys.
"""

import uuid
from typing import Any

from restmachine_document.mixins.expiration import is_blank
from restmachine_document.models.fields import FieldType
from restmachine_document.models.hooks import before_create


class HashKeyMixin:
    """
    Mixin that assigns a UUID to a blank string hash key on create.

    Hash keys of other types must be set by the caller.
    """

    @before_create
    def set_hash_key(self: Any) -> None:
        cls = type(self)
        name = cls.schema.hash_key
        descriptor = cls.schema.get(name)
        if descriptor is None or descriptor.type is not FieldType.STRING:
            return
        if is_blank(self.read_attribute(name)):
            self.write_attribute(name, str(uuid.uuid4()))
