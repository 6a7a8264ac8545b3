"""Document definitions for RestMachine Document."""

from restmachine_document.models.fields import (
    Field,
    FieldDescriptor,
    FieldType,
    PERMITTED_KEY_TYPES,
)
from restmachine_document.models.schema import Schema
from restmachine_document.models.base import Document
from restmachine_document.models.hooks import before_create, before_save, after_save

__all__ = [
    "Document",
    "Field",
    "FieldDescriptor",
    "FieldType",
    "PERMITTED_KEY_TYPES",
    "Schema",
    "before_create",
    "before_save",
    "after_save",
]
