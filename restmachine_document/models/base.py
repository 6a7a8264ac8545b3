"""
Base document class for RestMachine Document.

A Document subclass owns a schema of typed fields. Reads and writes go
through an attribute store that casts each raw value to the field's type and
keeps the raw value alongside it.
"""

import logging
from types import MappingProxyType
from typing import Any, Callable, ClassVar, Iterator, Mapping, Optional, TYPE_CHECKING

from restmachine_document.config import DocumentConfig, TableOptions, get_config
from restmachine_document.errors import DocumentError, UnknownFieldError
from restmachine_document.mixins import (
    AssociationsMixin,
    DirtyTrackingMixin,
    ExpirationMixin,
    HashKeyMixin,
    InheritanceMixin,
    TimestampMixin,
)
from restmachine_document.mixins.timestamp import TIMESTAMP_FIELDS
from restmachine_document.models.accessors import define_accessors, remove_accessors
from restmachine_document.models.attributes import AttributeStore, normalize_field_name
from restmachine_document.models.fields import (
    FieldDeclaration,
    FieldDescriptor,
    FieldType,
    field_descriptor,
)
from restmachine_document.models.hooks import collect_hooks
from restmachine_document.models.schema import DEFAULT_HASH_KEY, Schema

if TYPE_CHECKING:
    from restmachine_document.backends.base import Backend

logger = logging.getLogger(__name__)


def _all_subclasses(cls: type) -> Iterator[type]:
    for subclass in cls.__subclasses__():
        yield subclass
        yield from _all_subclasses(subclass)


class Document(
    HashKeyMixin,
    TimestampMixin,
    ExpirationMixin,
    InheritanceMixin,
    AssociationsMixin,
    DirtyTrackingMixin,
):
    """
    Base class for documents.

    Fields are declared in the class body with Field(), or at any time with
    declare_field(). Every direct subclass of Document starts with an ``id``
    string field and, when the configuration enables timestamps,
    ``created_at`` and ``updated_at``. Further subclasses share their parent's
    schema and table (single-table inheritance) until they declare or remove
    fields of their own.

    Class keyword arguments:
        table: Table options, see TableOptions
        config: DocumentConfig to use instead of the global one
        document_backend: Backend used by save(), find(), and delete()

    Example:
        >>> class User(Document, table={"name": "users"}, document_backend=InMemoryBackend()):
        ...     name = Field()
        ...     age = Field("integer")
        ...
        >>> user = User(name="Alice", age="42")
        >>> user.age
        42
        >>> user.age_before_type_cast()
        '42'
        >>> user.has_name()
        True
        >>> user.save()
    """

    schema: ClassVar[Schema] = Schema()
    config: ClassVar[DocumentConfig] = DocumentConfig()
    table_options: ClassVar[TableOptions] = TableOptions()
    document_backend: ClassVar[Optional["Backend"]] = None

    # Populated by __init_subclass__
    _hooks: ClassVar[dict[str, list[Callable[["Document"], None]]]] = {}

    def __init_subclass__(
        cls,
        *,
        table: Optional[Mapping[str, Any]] = None,
        config: Optional[DocumentConfig] = None,
        document_backend: Optional["Backend"] = None,
        **kwargs: Any,
    ):
        """
        Build the schema when a document class is defined.

        Args:
            table: Table options passed to configure_table()
            config: Configuration for this class and its subclasses
            document_backend: Backend for this class and its subclasses
            **kwargs: Additional arguments passed to parent
        """
        super().__init_subclass__(**kwargs)

        is_root = Document in cls.__bases__

        # The configuration is captured once, at definition time
        if config is not None:
            cls.config = config
        elif is_root:
            cls.config = get_config()

        if document_backend is not None:
            cls.document_backend = document_backend

        # Take the Field() declarations out of the class body; accessors replace them
        declarations = [
            (name, value) for name, value in cls.__dict__.items()
            if isinstance(value, FieldDeclaration)
        ]
        for name, _ in declarations:
            delattr(cls, name)

        if is_root:
            cls._initialize_schema()

        if table is not None:
            cls.configure_table(**table)

        for name, declaration in declarations:
            if declaration.range_key:
                cls.declare_range_key(name, declaration.type, **declaration.options)
            else:
                cls.declare_field(name, declaration.type, **declaration.options)

        cls._hooks = collect_hooks(cls)

    @classmethod
    def _initialize_schema(cls) -> None:
        """Start a fresh schema with the implicit fields."""
        cls.schema = Schema()
        cls.table_options = TableOptions()
        cls.undefine_attribute_methods()

        # Timestamp fields can still be removed by configure_table()
        if cls.config.timestamps:
            for name in TIMESTAMP_FIELDS:
                cls.declare_field(name, FieldType.DATETIME)

        cls.declare_field(DEFAULT_HASH_KEY)

    # === Schema registry ===

    @classmethod
    def declare_field(cls, name: str, field_type: Any = FieldType.STRING, **options: Any) -> FieldDescriptor:
        """
        Declare a field, replacing any previous declaration of the same name.

        Generates the accessors ``name`` (get/set), ``has_name()``, and
        ``name_before_type_cast()``, logging a warning for each one that
        replaces an existing attribute.

        Args:
            name: Field name
            field_type: Field type (see Field()); ``"float"`` is a deprecated
                        alias of ``"number"``
            **options: Field options

        Returns:
            The new field descriptor

        Example:
            >>> User.declare_field("score", "number")
        """
        field_name = normalize_field_name(name)
        if field_name is None:
            raise TypeError(f"Field name must be a string, not {type(name).__name__}")

        descriptor = field_descriptor(field_name, field_type, options)
        cls.schema = cls.schema.with_field(descriptor)

        define_accessors(cls, field_name)
        cls.define_attribute_method(field_name)
        return descriptor

    @classmethod
    def declare_range_key(cls, name: str, field_type: Any = FieldType.STRING, **options: Any) -> FieldDescriptor:
        """Declare a field and make it the table's range key."""
        descriptor = cls.declare_field(name, field_type, **options)
        cls.schema = cls.schema.with_range_key(descriptor.name)
        return descriptor

    @classmethod
    def configure_table(cls, **options: Any) -> TableOptions:
        """
        Set table options and reconcile the implicit fields with them.

        - When ``key`` names a field other than ``id``, the implicit ``id``
          field is replaced by a string field with that name.
        - ``timestamps=True`` declares the timestamp fields if the class's
          configuration left them out; ``timestamps=False`` removes them if
          the configuration put them in.

        Raises:
            pydantic.ValidationError: If the options are invalid
        """
        cls.table_options = TableOptions(**options)

        hash_key = cls.table_options.key or DEFAULT_HASH_KEY
        if hash_key not in cls.schema:
            if DEFAULT_HASH_KEY in cls.schema:
                cls.remove_field(DEFAULT_HASH_KEY)
            cls.declare_field(hash_key)
        cls.schema = cls.schema.with_hash_key(hash_key)

        timestamps = cls.table_options.timestamps
        if timestamps and not cls.config.timestamps:
            for name in TIMESTAMP_FIELDS:
                cls.declare_field(name, FieldType.DATETIME)
        elif timestamps is False and cls.config.timestamps:
            for name in TIMESTAMP_FIELDS:
                if name in cls.schema:
                    cls.remove_field(name)

        return cls.table_options

    @classmethod
    def remove_field(cls, name: str) -> None:
        """
        Remove a field and its accessors.

        Values already stored on instances stay readable through
        read_attribute().

        Raises:
            UnknownFieldError: If the field is not declared
        """
        field_name = normalize_field_name(name)
        if field_name is None or field_name not in cls.schema:
            raise UnknownFieldError(str(name), cls.__name__)

        cls.schema = cls.schema.without_field(field_name)

        cls.undefine_attribute_methods()
        cls.define_attribute_methods(cls.schema.names())

        remove_accessors(cls, field_name)

    @classmethod
    def timestamps_enabled(cls) -> bool:
        """Table option when set explicitly, otherwise the configuration default."""
        if cls.table_options.timestamps is not None:
            return cls.table_options.timestamps
        return cls.config.timestamps

    @classmethod
    def fields(cls) -> tuple[FieldDescriptor, ...]:
        """Field descriptors in declaration order."""
        return tuple(cls.schema)

    @classmethod
    def inheritance_field(cls) -> str:
        """Name of the single-table-inheritance field."""
        return cls.table_options.inheritance_field or cls.config.inheritance_field

    @classmethod
    def _root_document(cls) -> type["Document"]:
        for klass in cls.__mro__:
            if Document in klass.__bases__:
                return klass
        return cls

    @classmethod
    def table_name(cls) -> str:
        """Table name; subclasses share their root document's table."""
        if cls.table_options.name:
            return cls.table_options.name
        return f"{cls._root_document().__name__.lower()}s"

    # === Instance attribute store ===

    def __init__(self, **attributes: Any):
        """
        Create a new, unsaved document.

        Args:
            **attributes: Initial field values, written through write_attribute()

        Raises:
            UnknownFieldError: If a name is not a declared field
        """
        self._attribute_store = AttributeStore(
            self._field_descriptor,
            observers=(self.reset_association, self.attribute_will_change),
        )
        self._new_record = True
        self._touch_record: Optional[bool] = None

        for name, value in attributes.items():
            if name not in type(self).schema:
                raise UnknownFieldError(name, type(self).__name__)
            self.write_attribute(name, value)

    def _field_descriptor(self, name: str) -> Optional[FieldDescriptor]:
        # Looked up per write so re-declared fields cast with their new type
        return type(self).schema.get(name)

    def write_attribute(self, name: str, value: Any) -> Any:
        """
        Write a field value.

        Resets the association backed by the field, records the old value
        for dirty tracking, stores the raw value, then stores the casted value.

        Returns:
            The casted value
        """
        return self._attribute_store.write(name, value)

    def read_attribute(self, name: str) -> Any:
        """Casted value of a field, or None if it was never written."""
        return self._attribute_store.read(name)

    def read_attribute_before_type_cast(self, name: Any) -> Any:
        """Raw value last written to a field, or None."""
        return self._attribute_store.read_before_type_cast(name)

    def __getitem__(self, name: str) -> Any:
        return self.read_attribute(name)

    def __setitem__(self, name: str, value: Any) -> None:
        self.write_attribute(name, value)

    @property
    def attributes(self) -> Mapping[str, Any]:
        """Read-only view of the casted values."""
        return MappingProxyType(self._attribute_store.values)

    raw_attributes = attributes

    @property
    def attributes_before_type_cast(self) -> Mapping[str, Any]:
        """Read-only view of the raw values."""
        return MappingProxyType(self._attribute_store.raw_values)

    def __repr__(self) -> str:
        values = ", ".join(f"{name}={value!r}" for name, value in self._attribute_store.values.items())
        return f"{type(self).__name__}({values})"

    # === Lifecycle ===

    @property
    def new_record(self) -> bool:
        return self._new_record

    @property
    def persisted(self) -> bool:
        return not self._new_record

    @classmethod
    def _get_backend(cls) -> "Backend":
        """
        Get the backend for this document.

        Raises:
            DocumentError: If no backend is configured
        """
        if cls.document_backend is not None:
            return cls.document_backend

        raise DocumentError(
            f"No backend configured for {cls.__name__}. "
            f"Pass document_backend=YourBackend() to the class definition."
        )

    def _run_hooks(self, kind: str) -> None:
        for hook in type(self)._hooks.get(kind, []):
            hook(self)

    def save(self, *, touch: bool = True) -> "Document":
        """
        Run the hooks and write this document to the backend.

        Hooks run in this order: before_save, before_create (new records
        only), then after_save once the write succeeded. Pending changes are
        cleared after the write.

        Args:
            touch: When False, updated_at is left alone

        Returns:
            Self for method chaining
        """
        backend = type(self)._get_backend()

        if not touch:
            self._touch_record = False
        try:
            self._run_hooks('before_save')
            if self._new_record:
                self._run_hooks('before_create')
            backend.save(self)
        finally:
            self._touch_record = None

        self._new_record = False
        self.changes_applied()
        logger.debug(f"Saved {type(self).__name__} to table {type(self).table_name()!r}")

        self._run_hooks('after_save')
        return self

    @classmethod
    def create(cls, **attributes: Any) -> "Document":
        """Create and save a new document in one operation."""
        document = cls(**attributes)
        document.save()
        return document

    @classmethod
    def _class_for_item(cls, item: Mapping[str, Any]) -> type["Document"]:
        type_name = item.get(cls.inheritance_field())
        if type_name is None or type_name == cls.__name__:
            return cls
        for subclass in _all_subclasses(cls):
            if subclass.__name__ == type_name:
                return subclass
        return cls

    @classmethod
    def find(cls, hash_value: Any, range_value: Any = None) -> Optional["Document"]:
        """
        Load a document by key.

        Records tagged with a subclass name by the inheritance field load as
        that subclass.

        Returns:
            The document, or None if not found
        """
        backend = cls._get_backend()
        key = (hash_value,) if range_value is None else (hash_value, range_value)
        item = backend.get_item(cls.table_name(), key)
        if item is None:
            return None

        document_class = cls._class_for_item(item)
        document = document_class()
        for name, value in backend.deserialize(document_class, item).items():
            document.write_attribute(name, value)
        document._new_record = False
        document.changes_applied()
        return document

    def delete(self) -> bool:
        """
        Delete this document from the backend.

        Returns:
            True if a record was deleted
        """
        deleted = type(self)._get_backend().delete(self)
        if deleted:
            logger.debug(f"Deleted {type(self).__name__} from table {type(self).table_name()!r}")
        return deleted
