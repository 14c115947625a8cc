"""
Storage Services Package

Provides the abstract record store interface and its implementations:
a REST backend for production and an in-memory store for tests.
"""

from pocketbook.services.storage.interface import (
    ConnectionError,
    NotFoundError,
    RecordStoreInterface,
    StorageError,
)
from pocketbook.services.storage.memory import InMemoryRecordStore
from pocketbook.services.storage.rest_store import RestRecordStore

__all__ = [
    # Interface
    "RecordStoreInterface",
    # Exceptions
    "ConnectionError",
    "NotFoundError",
    "StorageError",
    # Implementations
    "InMemoryRecordStore",
    "RestRecordStore",
]
