"""Services package."""

from simplifinance.services.storage import (
    AuditStorageInterface,
    EntryStorageInterface,
    InMemoryAuditStorage,
    InMemoryEntryStorage,
    JsonFileEntryStorage,
    NotFoundError,
    SnapshotCorruptError,
    StorageError,
)

__all__ = [
    "AuditStorageInterface",
    "EntryStorageInterface",
    "InMemoryAuditStorage",
    "InMemoryEntryStorage",
    "JsonFileEntryStorage",
    "NotFoundError",
    "SnapshotCorruptError",
    "StorageError",
]
