"""
Exceptions for RestMachine Document.
"""


class DocumentError(Exception):
    """Base exception for document errors."""
    pass


class UnknownFieldError(DocumentError):
    """A field name is not declared in the document schema."""

    def __init__(self, field_name: str, document_name: str = ""):
        self.field_name = field_name
        self.document_name = document_name
        where = f" on {document_name}" if document_name else ""
        super().__init__(f"No such field: {field_name!r}{where}")


class UnsupportedFieldTypeError(DocumentError):
    """A field was declared with a type that has no casting rule."""

    def __init__(self, field_type: object, field_name: str = ""):
        self.field_type = field_type
        self.field_name = field_name
        where = f" declared for {field_name!r}" if field_name else ""
        super().__init__(f"Unsupported field type {field_type!r}{where}")


class BackendError(DocumentError):
    """Base exception for backend errors."""
    pass


class MissingKeyError(BackendError):
    """A key attribute has no value, so the record cannot be addressed."""
    pass
