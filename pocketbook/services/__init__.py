"""Services package."""

from pocketbook.services.storage import (
    ConnectionError,
    InMemoryRecordStore,
    NotFoundError,
    RecordStoreInterface,
    RestRecordStore,
    StorageError,
)

__all__ = [
    "ConnectionError",
    "InMemoryRecordStore",
    "NotFoundError",
    "RecordStoreInterface",
    "RestRecordStore",
    "StorageError",
]
