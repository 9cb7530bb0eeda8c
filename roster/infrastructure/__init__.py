"""
Infrastructure package for the student roster.

Centralizes durable storage concerns (key-value backends and the record
persistence adapter). Keep this layer focused on I/O, decoupled from the
record store and presentation logic.
"""

from roster.infrastructure.persistence import PersistenceAdapter
from roster.infrastructure.storage import (
    JsonFileKeyValueStore,
    KeyValueStore,
    MemoryKeyValueStore,
    PostgresKeyValueStore,
    StorageError,
    available_backends,
    open_key_value_store,
)

__all__ = [
    "JsonFileKeyValueStore",
    "KeyValueStore",
    "MemoryKeyValueStore",
    "PersistenceAdapter",
    "PostgresKeyValueStore",
    "StorageError",
    "available_backends",
    "open_key_value_store",
]
