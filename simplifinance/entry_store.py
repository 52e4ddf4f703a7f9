"""
Entry Store

The single owner of the in-memory entry collection.

Lifecycle:
1. load() at construction - restore the snapshot, or start empty if it
   is corrupt
2. Every mutation replaces the in-memory list and immediately saves the
   whole collection (no incremental writes)

Readers always get a copy of the ordered list, never the live one.
"""

from typing import Iterable, Optional

import structlog

from simplifinance.audit import AuditLogger
from simplifinance.models.entry import FinancialEntry
from simplifinance.services.storage import (
    EntryStorageInterface,
    NotFoundError,
    SnapshotCorruptError,
    StorageError,
)


logger = structlog.get_logger(__name__)


class EntryStore:
    """In-memory entry collection persisted verbatim on every mutation."""

    def __init__(
        self,
        storage: EntryStorageInterface,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._storage = storage
        self._audit_logger = audit_logger
        self._entries: list[FinancialEntry] = []
        self.load()

    def load(self) -> list[FinancialEntry]:
        """
        (Re)load the collection from storage.

        A corrupt snapshot is logged and replaced by an empty collection;
        it is never surfaced to the user. Other storage errors propagate,
        since overwriting an unreadable-but-valid file would lose data.
        """
        try:
            entries = self._storage.load_all()
        except SnapshotCorruptError as e:
            logger.warning(
                "snapshot_corrupt",
                location=self._storage.location,
                error=str(e),
            )
            if self._audit_logger:
                self._audit_logger.log_snapshot_corrupt(self._storage.location, str(e))
            entries = []
        else:
            if self._audit_logger:
                self._audit_logger.log_snapshot_loaded(len(entries), self._storage.location)

        self._entries = list(entries)
        return self.entries

    @property
    def entries(self) -> list[FinancialEntry]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, entry_id: str) -> Optional[FinancialEntry]:
        for entry in self._entries:
            if entry.id == entry_id:
                return entry
        return None

    def require(self, entry_id: str) -> FinancialEntry:
        entry = self.get(entry_id)
        if entry is None:
            raise NotFoundError(f"Entry not found: {entry_id}")
        return entry

    def replace_all(self, entries: Iterable[FinancialEntry]) -> None:
        """Replace the whole collection and persist it."""
        self._commit(list(entries))

    def append(self, batch: Iterable[FinancialEntry]) -> list[FinancialEntry]:
        """
        Append a batch in one write.

        An empty batch is a no-op: nothing is saved.
        """
        batch = list(batch)
        if not batch:
            return []
        self._commit(self._entries + batch)
        return batch

    def replace(self, entry: FinancialEntry) -> FinancialEntry:
        """Full replacement of the entry with the same id, in place."""
        updated = []
        found = False
        for current in self._entries:
            if current.id == entry.id:
                updated.append(entry)
                found = True
            else:
                updated.append(current)
        if not found:
            raise NotFoundError(f"Entry not found: {entry.id}")
        self._commit(updated)
        return entry

    def delete(self, entry_id: str) -> FinancialEntry:
        removed = self.require(entry_id)
        self._commit([e for e in self._entries if e.id != entry_id])
        return removed

    def _commit(self, entries: list[FinancialEntry]) -> None:
        # In-memory state advances even if the write fails; the next
        # mutation rewrites the full collection anyway.
        self._entries = entries
        try:
            self._storage.save_all(self.entries)
        except StorageError as e:
            logger.error("snapshot_save_failed", error=str(e), entry_count=len(entries))
            if self._audit_logger:
                self._audit_logger.log_save_failed(len(entries), str(e))
            raise
        if self._audit_logger:
            self._audit_logger.log_snapshot_saved(len(entries))
