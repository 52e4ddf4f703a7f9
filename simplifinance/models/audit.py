"""
Audit Models for SimpliFinance

Every mutation of the entry collection is logged for audit purposes.
This provides:
1. Traceability of what the replication engine generated and why
2. Debugging information when a snapshot fails to load
3. Ability to reconstruct history

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Snapshot lifecycle
    SNAPSHOT_LOADED = "snapshot_loaded"
    SNAPSHOT_CORRUPT = "snapshot_corrupt"
    SNAPSHOT_SAVED = "snapshot_saved"
    SAVE_FAILED = "save_failed"

    # User actions
    ENTRY_CREATED = "entry_created"
    INSTALLMENTS_CREATED = "installments_created"
    ENTRY_UPDATED = "entry_updated"
    PAYMENT_TOGGLED = "payment_toggled"
    ENTRY_DELETED = "entry_deleted"
    MONTH_VIEWED = "month_viewed"
    VALIDATION_FAILED = "validation_failed"

    # Replication
    REPLICATION_APPLIED = "replication_applied"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'entry', 'snapshot', 'month')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = None

    description: str = Field(
        ...,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(default_factory=dict)

    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.entry_created(entry_id, "Rent", "1500.00")
        event = AuditEventBuilder.replication_applied("Março 2025", 3, 2, 1)
    """

    @staticmethod
    def snapshot_loaded(entry_count: int, location: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SNAPSHOT_LOADED,
            entity_type="snapshot",
            description=f"Snapshot loaded with {entry_count} entries",
            details={
                "entry_count": entry_count,
                "location": location,
            },
        )

    @staticmethod
    def snapshot_corrupt(location: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SNAPSHOT_CORRUPT,
            severity=AuditSeverity.WARNING,
            entity_type="snapshot",
            description="Snapshot could not be parsed; starting with an empty collection",
            error_message=error_message,
            details={"location": location},
        )

    @staticmethod
    def snapshot_saved(entry_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SNAPSHOT_SAVED,
            severity=AuditSeverity.DEBUG,
            entity_type="snapshot",
            description=f"Snapshot saved with {entry_count} entries",
            details={"entry_count": entry_count},
        )

    @staticmethod
    def save_failed(entry_count: int, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="snapshot",
            description="Snapshot save failed",
            error_message=error_message,
            details={"entry_count": entry_count},
        )

    @staticmethod
    def entry_created(
        entry_id: str,
        description: str,
        amount: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ENTRY_CREATED,
            entity_type="entry",
            entity_id=entry_id,
            correlation_id=correlation_id,
            description=f"Entry created: {description}",
            details={
                "description": description,
                "amount": amount,
            },
            is_user_action=True,
        )

    @staticmethod
    def installments_created(
        parent_id: str,
        description: str,
        total_amount: str,
        count: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INSTALLMENTS_CREATED,
            entity_type="installment_plan",
            entity_id=parent_id,
            correlation_id=correlation_id,
            description=f"Installment plan created: {description} in {count} parts",
            details={
                "description": description,
                "total_amount": total_amount,
                "installments": count,
            },
            is_user_action=True,
        )

    @staticmethod
    def entry_updated(
        entry_id: str,
        changed_fields: list[str],
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ENTRY_UPDATED,
            entity_type="entry",
            entity_id=entry_id,
            correlation_id=correlation_id,
            description="Entry edited",
            details={"changed_fields": changed_fields},
            is_user_action=True,
        )

    @staticmethod
    def payment_toggled(entry_id: str, is_paid: bool) -> AuditEvent:
        state = "paid" if is_paid else "unpaid"
        return AuditEvent(
            event_type=AuditEventType.PAYMENT_TOGGLED,
            entity_type="entry",
            entity_id=entry_id,
            description=f"Entry marked as {state}",
            details={"is_paid": is_paid},
            is_user_action=True,
        )

    @staticmethod
    def entry_deleted(entry_id: str, description: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ENTRY_DELETED,
            entity_type="entry",
            entity_id=entry_id,
            description=f"Entry deleted: {description}",
            is_user_action=True,
        )

    @staticmethod
    def month_viewed(label: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.MONTH_VIEWED,
            severity=AuditSeverity.DEBUG,
            entity_type="month",
            entity_id=label,
            description=f"Viewing {label}",
            is_user_action=True,
        )

    @staticmethod
    def replication_applied(
        target_label: str,
        created: int,
        templates: int,
        pendencies: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.REPLICATION_APPLIED,
            entity_type="month",
            entity_id=target_label,
            description=f"Replicated {created} entries into {target_label}",
            details={
                "created": created,
                "templates": templates,
                "pendencies": pendencies,
            },
        )

    @staticmethod
    def validation_failed(
        issues: list[dict],
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="submission",
            correlation_id=correlation_id,
            description=f"Submission rejected with {len(issues)} issues",
            details={"issues": issues},
            is_user_action=True,
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )
