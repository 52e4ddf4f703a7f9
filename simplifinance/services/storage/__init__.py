"""
Storage Services Package

Provides abstract interfaces and concrete implementations for data storage.
Currently implements a local JSON snapshot, designed to be swappable.
"""

from simplifinance.services.storage.interface import (
    AuditStorageInterface,
    EntryStorageInterface,
    NotFoundError,
    SnapshotCorruptError,
    StorageError,
)
from simplifinance.services.storage.json_file import JsonFileEntryStorage
from simplifinance.services.storage.memory import (
    InMemoryAuditStorage,
    InMemoryEntryStorage,
)

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "EntryStorageInterface",
    # Exceptions
    "NotFoundError",
    "SnapshotCorruptError",
    "StorageError",
    # Implementations
    "InMemoryAuditStorage",
    "InMemoryEntryStorage",
    "JsonFileEntryStorage",
]
