"""
Audit Logger

DESIGN DECISION: Every mutation of the entry collection is logged.
This provides:
1. Complete traceability of user edits and generated entries
2. Debugging capability when a snapshot is lost or corrupted
3. A history the user can inspect

The audit logger:
- Always writes to the local structured log
- Gracefully handles storage failures (never crashes the app)
- Supports correlation IDs to trace related events
"""

import logging
import sys
from typing import Optional
from uuid import UUID, uuid4

import structlog

from simplifinance.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from simplifinance.services.storage import AuditStorageInterface


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """Route the package's stdlib loggers to stderr at `level`."""
    logger = logging.getLogger("simplifinance")
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
    logger.setLevel(level)


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. Audit storage, when one is configured
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger("simplifinance.audit")

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return self._storage.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    def log_snapshot_loaded(self, entry_count: int, location: str) -> None:
        self.log(AuditEventBuilder.snapshot_loaded(entry_count, location))

    def log_snapshot_corrupt(self, location: str, error_message: str) -> None:
        self.log(AuditEventBuilder.snapshot_corrupt(location, error_message))

    def log_snapshot_saved(self, entry_count: int) -> None:
        self.log(AuditEventBuilder.snapshot_saved(entry_count))

    def log_save_failed(self, entry_count: int, error_message: str) -> None:
        self.log(AuditEventBuilder.save_failed(entry_count, error_message))

    def log_entry_created(
        self,
        entry_id: str,
        description: str,
        amount: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a manually created entry."""
        self.log(AuditEventBuilder.entry_created(
            entry_id=entry_id,
            description=description,
            amount=amount,
            correlation_id=correlation_id,
        ))

    def log_installments_created(
        self,
        parent_id: str,
        description: str,
        total_amount: str,
        count: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an installment plan expansion."""
        self.log(AuditEventBuilder.installments_created(
            parent_id=parent_id,
            description=description,
            total_amount=total_amount,
            count=count,
            correlation_id=correlation_id,
        ))

    def log_entry_updated(
        self,
        entry_id: str,
        changed_fields: list[str],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.entry_updated(
            entry_id=entry_id,
            changed_fields=changed_fields,
            correlation_id=correlation_id,
        ))

    def log_payment_toggled(self, entry_id: str, is_paid: bool) -> None:
        self.log(AuditEventBuilder.payment_toggled(entry_id, is_paid))

    def log_entry_deleted(self, entry_id: str, description: str) -> None:
        self.log(AuditEventBuilder.entry_deleted(entry_id, description))

    def log_month_viewed(self, label: str) -> None:
        self.log(AuditEventBuilder.month_viewed(label))

    def log_replication_applied(
        self,
        target_label: str,
        created: int,
        templates: int,
        pendencies: int,
    ) -> None:
        """Log a committed replication batch."""
        self.log(AuditEventBuilder.replication_applied(
            target_label=target_label,
            created=created,
            templates=templates,
            pendencies=pendencies,
        ))

    def log_validation_failed(
        self,
        issues: list[dict],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a rejected form submission."""
        self.log(AuditEventBuilder.validation_failed(
            issues=issues,
            correlation_id=correlation_id,
        ))

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an error."""
        self.log(AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a new user action (e.g., a form submission).
    """
    return uuid4()
