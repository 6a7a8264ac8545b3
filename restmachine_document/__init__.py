"""
RestMachine Document - typed attribute layer for document models.

Declare typed fields on a document class; every write is cast to the field's
type while the raw input is kept, changes are tracked, and timestamps,
expiration, keys, and single-table-inheritance tags are filled in on save.
"""

from restmachine_document.config import (
    DocumentConfig,
    TableOptions,
    configure,
    get_config,
)
from restmachine_document.errors import (
    BackendError,
    DocumentError,
    MissingKeyError,
    UnknownFieldError,
    UnsupportedFieldTypeError,
)
from restmachine_document.models import (
    Document,
    Field,
    FieldDescriptor,
    FieldType,
    PERMITTED_KEY_TYPES,
    Schema,
    after_save,
    before_create,
    before_save,
)
from restmachine_document.type_casting import cast_field

__version__ = "0.1.0"

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
    "cast_field",
    "DocumentConfig",
    "TableOptions",
    "configure",
    "get_config",
    "DocumentError",
    "UnknownFieldError",
    "UnsupportedFieldTypeError",
    "BackendError",
    "MissingKeyError",
]
