"""
Example demonstrating typed document fields in RestMachine Document.

This example shows how to:
1. Declare typed fields and read casted and raw values
2. Track changes between saves
3. Let hooks fill in keys, timestamps, expiration, and subclass tags
4. Change a schema at runtime
"""

import logging

from restmachine_document import Document, Field
from restmachine_document.backends import InMemoryBackend

logging.basicConfig(level=logging.DEBUG, format="%(name)s %(levelname)s %(message)s")

# Initialize backend
backend = InMemoryBackend()


class Animal(Document, document_backend=backend):
    """Animals share one table; the type field records the subclass."""

    type = Field()
    name = Field()
    age = Field("integer")
    weight = Field("float")  # deprecated alias, logs a warning


class Dog(Animal):
    good_boy = Field("boolean")


class Session(
    Document,
    table={"expires": {"field": "expire_at", "after": 3600}, "timestamps": False},
    document_backend=backend,
):
    user_id = Field()
    expire_at = Field("integer")


def main():
    print("=" * 60)
    print("Casting")
    print("=" * 60)
    dog = Dog(name="Rex", age="4", weight="12.5", good_boy="t")
    print(f"age: {dog.age!r} (raw: {dog.age_before_type_cast()!r})")
    print(f"weight: {dog.weight!r}")
    print(f"good_boy: {dog.good_boy!r}, has_good_boy: {dog.has_good_boy()}")
    print(f"has_type before save: {dog.has_type()}")

    print()
    print("=" * 60)
    print("Saving")
    print("=" * 60)
    dog.save()
    print(f"id: {dog.id}")
    print(f"type: {dog.type}")
    print(f"created_at: {dog.created_at.isoformat()}")

    loaded = Animal.find(dog.id)
    print(f"loaded as {type(loaded).__name__}: {loaded!r}")

    print()
    print("=" * 60)
    print("Change tracking")
    print("=" * 60)
    loaded.age = 5
    print(f"changed: {loaded.changed}")
    print(f"changes: {loaded.changes}")
    loaded.save(touch=False)
    print(f"changed after save: {loaded.changed}")

    print()
    print("=" * 60)
    print("Expiration")
    print("=" * 60)
    session = Session.create(user_id=dog.id)
    print(f"expire_at: {session.expire_at}")

    print()
    print("=" * 60)
    print("Runtime schema changes")
    print("=" * 60)
    Dog.declare_field("nickname")
    dog.nickname = "Rexy"
    print(f"nickname: {dog.nickname}")
    Dog.remove_field("nickname")
    print(f"has accessor: {hasattr(dog, 'nickname')}")
    print(f"stored value: {dog.read_attribute('nickname')!r}")


if __name__ == "__main__":
    main()
