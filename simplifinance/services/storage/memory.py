"""
In-Memory Storage

Used for tests and throwaway sessions. The entry backend keeps the
serialized snapshot rather than live objects, so a save/load cycle goes
through the same codec as the file backend.
"""

import json
from typing import Optional
from uuid import UUID

from simplifinance.models.audit import AuditEvent
from simplifinance.models.entry import FinancialEntry
from simplifinance.services.storage.interface import (
    AuditStorageInterface,
    EntryStorageInterface,
    SnapshotCorruptError,
)
from simplifinance.services.storage.json_file import decode_entries, encode_entries


class InMemoryEntryStorage(EntryStorageInterface):
    """Entry snapshot held as a JSON string."""

    def __init__(self, snapshot: Optional[str] = None):
        self._snapshot = snapshot
        self.save_count = 0

    @property
    def snapshot(self) -> Optional[str]:
        return self._snapshot

    def load_all(self) -> list[FinancialEntry]:
        if self._snapshot is None:
            return []
        try:
            raw = json.loads(self._snapshot)
        except json.JSONDecodeError as e:
            raise SnapshotCorruptError(f"Snapshot is not valid JSON: {e}")
        return decode_entries(raw)

    def save_all(self, entries: list[FinancialEntry]) -> None:
        self._snapshot = json.dumps(encode_entries(entries), ensure_ascii=False)
        self.save_count += 1


class InMemoryAuditStorage(AuditStorageInterface):
    """Append-only audit list."""

    def __init__(self):
        self._events: list[AuditEvent] = []

    @property
    def events(self) -> list[AuditEvent]:
        return list(self._events)

    def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        return True

    def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        return [e for e in self._events if e.correlation_id == correlation_id]

    def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        return list(reversed(self._events))[:limit]
