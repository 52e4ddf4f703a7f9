"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Swap the local JSON snapshot for another backend later
2. Use in-memory storage for testing
3. Keep the store and replication logic decoupled from file handling

The entry interface is deliberately whole-collection: load everything,
save everything. There is no incremental write path.
"""

from abc import ABC, abstractmethod
from uuid import UUID

from simplifinance.models.entry import FinancialEntry
from simplifinance.models.audit import AuditEvent


class EntryStorageInterface(ABC):
    """
    Abstract interface for the entry snapshot.

    Any storage implementation must implement these methods.
    """

    @property
    def location(self) -> str:
        """Human-readable description of where the snapshot lives."""
        return self.__class__.__name__

    @abstractmethod
    def load_all(self) -> list[FinancialEntry]:
        """
        Load the full entry collection, in stored order.

        Returns:
            All entries; an empty list when nothing has been saved yet

        Raises:
            SnapshotCorruptError: If the stored snapshot cannot be parsed
            StorageError: If the backend cannot be read
        """
        pass

    @abstractmethod
    def save_all(self, entries: list[FinancialEntry]) -> None:
        """
        Overwrite the stored snapshot with `entries`.

        Raises:
            StorageError: If the write fails
        """
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        """Get all events for a correlation ID, in chronological order."""
        pass

    @abstractmethod
    def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """Get the most recent audit events (newest first)."""
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class SnapshotCorruptError(StorageError):
    """Stored snapshot exists but could not be parsed or validated."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass
