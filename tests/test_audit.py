"""Tests for the audit logger and its storage."""

import pytest

from simplifinance.audit import AuditLogger, create_correlation_id
from simplifinance.models.audit import AuditEventBuilder, AuditEventType
from simplifinance.services.storage import InMemoryAuditStorage


class FailingAuditStorage(InMemoryAuditStorage):
    def append_event(self, event):
        raise RuntimeError("disk full")


class TestAuditLogger:
    def test_without_storage(self):
        """Local-only logging always reports success."""
        assert AuditLogger().log(AuditEventBuilder.month_viewed("Março 2025"))

    def test_persists_events(self, audit_logger, audit_storage):
        audit_logger.log_payment_toggled("abc", True)
        events = audit_storage.events
        assert len(events) == 1
        assert events[0].event_type == AuditEventType.PAYMENT_TOGGLED
        assert events[0].entity_id == "abc"

    def test_storage_failure_is_swallowed(self):
        """A broken audit backend never breaks the caller."""
        logger = AuditLogger(FailingAuditStorage())
        assert logger.log(AuditEventBuilder.entry_deleted("abc", "Luz")) is False

    def test_correlation_id_groups_events(self, audit_logger, audit_storage):
        correlation_id = create_correlation_id()
        audit_logger.log_entry_created("a", "Luz", "90", correlation_id=correlation_id)
        audit_logger.log_entry_deleted("b", "Água")

        grouped = audit_storage.get_events_by_correlation_id(correlation_id)
        assert [e.entity_id for e in grouped] == ["a"]

    def test_recent_events_newest_first(self, audit_logger, audit_storage):
        for label in ("Janeiro 2025", "Fevereiro 2025", "Março 2025"):
            audit_logger.log_month_viewed(label)

        recent = audit_storage.get_recent_events(limit=2)
        assert [e.entity_id for e in recent] == ["Março 2025", "Fevereiro 2025"]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
