"""Backend implementations for RestMachine Document."""

from restmachine_document.backends.base import Backend, ItemKey
from restmachine_document.backends.memory import InMemoryBackend

__all__ = [
    "Backend",
    "InMemoryBackend",
    "ItemKey",
]
