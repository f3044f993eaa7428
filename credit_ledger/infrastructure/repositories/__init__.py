"""Repository implementations."""

from .key_value_repository import InMemoryKeyValueStore, SqlKeyValueStore

__all__ = [
    "InMemoryKeyValueStore",
    "SqlKeyValueStore",
]
