"""
Tests for the auto-population hooks.
"""

import time
import uuid
from datetime import datetime, timezone

from restmachine_document import Document, DocumentConfig, Field, FieldType
from restmachine_document.mixins.expiration import is_blank


class TestTimestampHooks:
    """Test set_created_at and set_updated_at."""

    def test_set_created_at(self):
        class User(Document):
            pass

        user = User()
        before = datetime.now(timezone.utc)
        user.set_created_at()

        assert isinstance(user.created_at, datetime)
        assert user.created_at.tzinfo is not None
        assert user.created_at >= before

    def test_set_created_at_is_idempotent(self):
        """A second call leaves created_at unchanged."""
        class User(Document):
            pass

        user = User()
        user.set_created_at()
        first = user.created_at
        first_raw = user.created_at_before_type_cast()

        user.set_created_at()

        assert user.created_at == first
        assert user.created_at_before_type_cast() is first_raw

    def test_set_created_at_keeps_explicit_value(self):
        class User(Document):
            pass

        user = User(created_at="2020-01-01T00:00:00Z")
        user.set_created_at()
        assert user.created_at == datetime(2020, 1, 1, tzinfo=timezone.utc)

    def test_set_updated_at(self):
        class User(Document):
            pass

        user = User()
        user.set_updated_at()
        assert isinstance(user.updated_at, datetime)

    def test_set_updated_at_skips_explicit_change(self, monkeypatch):
        """The hook is a no-op when updated_at already changed."""
        class User(Document):
            pass

        user = User()
        monkeypatch.setattr(user, "attribute_changed", lambda name: True)

        user.set_updated_at()
        assert user.updated_at is None

    def test_set_updated_at_keeps_value_written_before_save(self):
        class User(Document):
            pass

        user = User()
        explicit = datetime(2020, 1, 1, tzinfo=timezone.utc)
        user.updated_at = explicit

        user.set_updated_at()
        assert user.updated_at == explicit

    def test_hooks_do_nothing_without_timestamps(self):
        class Log(Document, table={"timestamps": False}):
            pass

        log = Log()
        log.set_created_at()
        log.set_updated_at()

        assert log.read_attribute("created_at") is None
        assert log.read_attribute("updated_at") is None

    def test_timestamps_use_configured_time_zone(self):
        class User(Document, config=DocumentConfig(time_zone="UTC")):
            pass

        user = User()
        user.set_created_at()
        assert user.created_at.utcoffset().total_seconds() == 0


class TestExpirationHook:
    """Test set_expires_field."""

    def test_sets_expiration(self):
        """A blank expiration field is set to now + after."""
        class Session(Document, table={"expires": {"field": "expire_at", "after": 3600}}):
            expire_at = Field("integer")

        session = Session()
        now = int(time.time())
        session.set_expires_field()

        assert now + 3600 <= session.expire_at <= now + 3600 + 2

    def test_blank_string_counts_as_unset(self):
        class Session(Document, table={"expires": {"field": "expire_at", "after": 60}}):
            expire_at = Field("integer")

        session = Session(expire_at="")
        session.set_expires_field()
        assert session.expire_at is not None

    def test_keeps_existing_expiration(self):
        class Session(Document, table={"expires": {"field": "expire_at", "after": 3600}}):
            expire_at = Field("integer")

        session = Session(expire_at=1700000000)
        session.set_expires_field()
        assert session.expire_at == 1700000000

    def test_no_expires_option(self):
        class Session(Document):
            expire_at = Field("integer")

        session = Session()
        session.set_expires_field()
        assert session.expire_at is None

    def test_is_blank(self):
        assert is_blank(None)
        assert is_blank("  ")
        assert is_blank(set())
        assert not is_blank(0)
        assert not is_blank("x")


class TestInheritanceHook:
    """Test set_inheritance_field."""

    def test_sets_class_name_on_subclass(self):
        class Animal(Document):
            type = Field()

        class Dog(Animal):
            pass

        dog = Dog()
        assert dog.type is None

        dog.set_inheritance_field()
        assert dog.type == "Dog"

    def test_keeps_existing_value(self):
        class Animal(Document):
            type = Field()

        class Dog(Animal):
            pass

        dog = Dog(type="Puppy")
        dog.set_inheritance_field()
        assert dog.type == "Puppy"

    def test_no_inheritance_field_declared(self):
        class Animal(Document):
            pass

        animal = Animal()
        animal.set_inheritance_field()
        assert animal.read_attribute("type") is None

    def test_custom_inheritance_field(self):
        class Animal(Document, table={"inheritance_field": "kind"}):
            kind = Field()

        class Cat(Animal):
            pass

        cat = Cat()
        cat.set_inheritance_field()
        assert cat.kind == "Cat"

    def test_configured_inheritance_field(self):
        class Animal(Document, config=DocumentConfig(inheritance_field="species")):
            species = Field()

        class Cat(Animal):
            pass

        cat = Cat()
        cat.set_inheritance_field()
        assert cat.species == "Cat"


class TestHashKeyHook:
    """Test set_hash_key."""

    def test_generates_uuid_for_string_key(self):
        class User(Document):
            pass

        user = User()
        user.set_hash_key()
        assert uuid.UUID(user.id)

    def test_keeps_existing_key(self):
        class User(Document):
            pass

        user = User(id="u1")
        user.set_hash_key()
        assert user.id == "u1"

    def test_non_string_key_is_left_alone(self):
        class Counter(Document, table={"key": "number"}):
            number = Field("integer")

        assert Counter.schema.get("number").type is FieldType.INTEGER
        counter = Counter()
        counter.set_hash_key()
        assert counter.number is None
