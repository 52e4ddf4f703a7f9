"""
Main Orchestrator for SimpliFinance

This module ties together all the components and defines the flows the
presentation layer drives:
1. View change (navigate -> replicate into the viewed month)
2. Entry submission (validate -> build entries or edit -> persist)
3. Toggle paid / delete

DESIGN DECISION: Replication runs exactly once per view transition,
invoked explicitly by on_view_changed(). Its correctness does not depend
on that: the engine's existence checks make a repeated call a no-op.
"""

from typing import Any, Optional, Union

import structlog

from simplifinance.audit import AuditLogger, configure_logging, create_correlation_id
from simplifinance.config import get_settings
from simplifinance.entry_store import EntryStore
from simplifinance.installments import (
    apply_edit,
    build_entries,
    changed_fields,
    is_installment_plan,
)
from simplifinance.models.entry import (
    EntrySubmission,
    FinancialEntry,
    MonthSummary,
    MonthYear,
)
from simplifinance.queries import month_entries, summarize
from simplifinance.replication import ReplicationEngine
from simplifinance.services.storage import (
    AuditStorageInterface,
    EntryStorageInterface,
    JsonFileEntryStorage,
)
from simplifinance.validation import EntryValidationError, EntryValidator


logger = structlog.get_logger(__name__)


class FinanceTracker:
    """
    The boundary between the presentation layer and the core.

    Holds the currently viewed month. Every operation reads from and
    writes through the injected EntryStore.
    """

    def __init__(
        self,
        store: EntryStore,
        engine: Optional[ReplicationEngine] = None,
        validator: Optional[EntryValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
        view: Optional[MonthYear] = None,
    ):
        self._store = store
        self._audit_logger = audit_logger
        self._engine = engine or ReplicationEngine(store, audit_logger)
        self._validator = validator or EntryValidator()
        self._view = view or MonthYear.current()

    @property
    def view(self) -> MonthYear:
        return self._view

    @property
    def store(self) -> EntryStore:
        return self._store

    @property
    def validator(self) -> EntryValidator:
        return self._validator

    # -------------------------------------------------------------------------
    # Navigation
    # -------------------------------------------------------------------------

    def on_view_changed(self, month: int, year: int) -> list[FinancialEntry]:
        """
        Switch to (month, year) and replicate into it.

        Returns the replicated batch (possibly empty), already committed.
        """
        self._view = MonthYear(month=month, year=year)
        if self._audit_logger:
            self._audit_logger.log_month_viewed(self._view.label)
        return self._engine.replicate(self._view)

    def change_month(self, offset: int) -> list[FinancialEntry]:
        """Move the view `offset` months (negative goes back)."""
        target = self._view.shift(offset)
        return self.on_view_changed(target.month, target.year)

    # -------------------------------------------------------------------------
    # Submissions
    # -------------------------------------------------------------------------

    def on_submit_entry(
        self,
        form: Union[dict[str, Any], EntrySubmission],
        editing_id: Optional[str] = None,
    ) -> list[FinancialEntry]:
        """
        Validate a form submission and apply it.

        Creates one entry (or an installment plan) in the viewed month, or,
        with `editing_id`, replaces that entry with the edited fields.

        Returns:
            The created entries, or a single-item list with the edited entry

        Raises:
            EntryValidationError: If the submission has error-level issues
            NotFoundError: If `editing_id` does not exist
        """
        correlation_id = create_correlation_id()

        result = self._validator.validate(form)
        if not result.is_valid:
            if self._audit_logger:
                issues = [
                    {"field": i.field, "type": i.issue_type, "message": i.message}
                    for i in result.issues
                ]
                self._audit_logger.log_validation_failed(
                    issues=issues,
                    correlation_id=correlation_id,
                )
            raise EntryValidationError(result)

        submission = result.submission

        if editing_id is not None:
            current = self._store.require(editing_id)
            edited = apply_edit(current, submission)
            self._store.replace(edited)
            if self._audit_logger:
                self._audit_logger.log_entry_updated(
                    entry_id=edited.id,
                    changed_fields=changed_fields(current, edited),
                    correlation_id=correlation_id,
                )
            return [edited]

        created = self._store.append(build_entries(submission, self._view))

        if self._audit_logger:
            if is_installment_plan(submission):
                self._audit_logger.log_installments_created(
                    parent_id=created[0].parent_id,
                    description=submission.description,
                    total_amount=str(submission.amount),
                    count=len(created),
                    correlation_id=correlation_id,
                )
            else:
                self._audit_logger.log_entry_created(
                    entry_id=created[0].id,
                    description=created[0].description,
                    amount=str(created[0].amount),
                    correlation_id=correlation_id,
                )

        logger.info(
            "entries_created",
            count=len(created),
            view=self._view.label,
        )
        return created

    # -------------------------------------------------------------------------
    # Entry actions
    # -------------------------------------------------------------------------

    def toggle_paid(self, entry_id: str) -> FinancialEntry:
        current = self._store.require(entry_id)
        toggled = self._store.replace(current.with_changes(is_paid=not current.is_paid))
        if self._audit_logger:
            self._audit_logger.log_payment_toggled(toggled.id, toggled.is_paid)
        return toggled

    def delete_entry(self, entry_id: str) -> FinancialEntry:
        removed = self._store.delete(entry_id)
        if self._audit_logger:
            self._audit_logger.log_entry_deleted(removed.id, removed.description)
        return removed

    # -------------------------------------------------------------------------
    # Derived views
    # -------------------------------------------------------------------------

    def current_entries(self) -> list[FinancialEntry]:
        return month_entries(self._store.entries, self._view)

    def summary(self) -> MonthSummary:
        return summarize(self._store.entries, self._view)


def create_app_components(
    entry_storage: Optional[EntryStorageInterface] = None,
    audit_storage: Optional[AuditStorageInterface] = None,
    view: Optional[MonthYear] = None,
) -> FinanceTracker:
    """
    Factory function to wire all application components.

    Args:
        entry_storage: Snapshot backend; defaults to the configured JSON file
        audit_storage: Optional persistent audit backend
        view: Initial month; defaults to the current month

    Returns:
        A FinanceTracker with the initial view already replicated
    """
    settings = get_settings()
    configure_logging(settings.app.log_level)

    audit_logger = AuditLogger(audit_storage)
    store = EntryStore(entry_storage or JsonFileEntryStorage(), audit_logger)
    engine = ReplicationEngine(store, audit_logger, settings.app.pendency_marker)

    tracker = FinanceTracker(
        store=store,
        engine=engine,
        validator=EntryValidator(),
        audit_logger=audit_logger,
        view=view,
    )
    tracker.on_view_changed(tracker.view.month, tracker.view.year)
    return tracker
