"""
Month-to-Month Replication Engine

When a month is viewed, entries from the month before are carried
forward into it:

1. FIXED TEMPLATES - every fixed expense of the source month reappears
   as a fresh, unpaid occurrence (a standing bill recurs whether or not
   last month's instance was paid).
2. PENDENCIES - every unpaid expense (fixed or variable) of the source
   month is carried forward as an unpaid pendency that points back at
   it through original_id. Income never carries forward.

An unpaid fixed expense therefore yields BOTH a template and a pendency
in the same month; they are separate obligations.

IDEMPOTENCE: existence checks against the target month make planning a
no-op once its replications are present. Running it on every re-render
is safe; nothing relies on suppressing repeated calls.

KNOWN LIMITATIONS (kept deliberately):
- The secondary pendency match compares descriptions with the marker
  appended. Two distinct entries sharing a description can hide each
  other's pendency.
- Each pendency references its immediate predecessor, not the root.
  Anything needing "overdue since origin" must walk the chain
  (see simplifinance.queries.pendency_chain).
"""

import calendar
from datetime import datetime
from typing import Iterable, Optional

import structlog

from simplifinance.audit import AuditLogger
from simplifinance.config import get_settings
from simplifinance.entry_store import EntryStore
from simplifinance.models.entry import (
    EntryType,
    FinancialEntry,
    MonthYear,
    new_entry_id,
)


logger = structlog.get_logger(__name__)


class ReplicationError(Exception):
    """Source data the engine cannot carry forward (programmer error)."""
    pass


def shift_date(value: datetime, target: MonthYear) -> datetime:
    """
    Move `value` into the target month, keeping day-of-month and time.

    Days that do not exist in the target month are clamped to its last
    day (Jan 31 -> Feb 28/29), so the date never rolls into the month
    after.
    """
    last_day = calendar.monthrange(target.year, target.month + 1)[1]
    try:
        return value.replace(
            year=target.year,
            month=target.month + 1,
            day=min(value.day, last_day),
        )
    except ValueError as e:
        raise ReplicationError(f"Cannot shift {value!r} to {target.label}: {e}")


def mark_pendency(description: str, marker: str) -> str:
    """Append the pendency marker unless it is already present."""
    if marker in description:
        return description
    return f"{description} {marker}"


def _has_template(target_entries: list[FinancialEntry], source: FinancialEntry) -> bool:
    return any(
        current.type == EntryType.FIXED_EXPENSE
        and current.description == source.description
        and not current.is_replicated
        for current in target_entries
    )


def _has_pendency(
    target_entries: list[FinancialEntry],
    source: FinancialEntry,
    marker: str,
) -> bool:
    # original_id is the real key; the description match only catches
    # pendencies written before the link existed.
    fallback_description = f"{source.description} {marker}"
    return any(
        current.original_id == source.id
        or current.description == fallback_description
        for current in target_entries
    )


def plan_fixed_templates(
    source_entries: list[FinancialEntry],
    target_entries: list[FinancialEntry],
    target: MonthYear,
) -> list[FinancialEntry]:
    """Fresh unpaid occurrences for the source month's fixed expenses."""
    templates = []
    for source in source_entries:
        if source.type != EntryType.FIXED_EXPENSE:
            continue
        if _has_template(target_entries, source):
            continue
        templates.append(source.with_changes(
            id=new_entry_id(),
            month=target.month,
            year=target.year,
            date=shift_date(source.date, target),
            is_paid=False,
            is_replicated=False,
        ))
    return templates


def plan_pendencies(
    source_entries: list[FinancialEntry],
    target_entries: list[FinancialEntry],
    target: MonthYear,
    marker: str,
) -> list[FinancialEntry]:
    """Unpaid expenses of the source month, carried forward as pendencies."""
    pendencies = []
    for source in source_entries:
        if source.is_paid or source.type == EntryType.INCOME:
            continue
        if _has_pendency(target_entries, source, marker):
            continue
        # The date is left alone: a pendency keeps its original due date
        pendencies.append(source.with_changes(
            id=new_entry_id(),
            original_id=source.id,
            description=mark_pendency(source.description, marker),
            month=target.month,
            year=target.year,
            is_paid=False,
            is_replicated=True,
        ))
    return pendencies


def plan_replications(
    entries: Iterable[FinancialEntry],
    target: MonthYear,
    marker: Optional[str] = None,
) -> list[FinancialEntry]:
    """
    Compute the entries to append so `target` reflects what the month
    before it carries forward.

    Pure: reads `entries`, returns new entries, mutates nothing. Existence
    checks look at the target month as it is before this batch.
    """
    marker = marker or get_settings().app.pendency_marker
    entries = list(entries)
    source = target.previous()

    source_entries = [
        e for e in entries if e.month == source.month and e.year == source.year
    ]
    target_entries = [
        e for e in entries if e.month == target.month and e.year == target.year
    ]

    return (
        plan_fixed_templates(source_entries, target_entries, target)
        + plan_pendencies(source_entries, target_entries, target, marker)
    )


class ReplicationEngine:
    """
    Applies replication plans to an EntryStore.

    The plan is evaluated against the store's latest snapshot and
    committed in the same call, with no other writer in between, so a
    second trigger for the same month always sees the first batch.
    """

    def __init__(
        self,
        store: EntryStore,
        audit_logger: Optional[AuditLogger] = None,
        marker: Optional[str] = None,
    ):
        self._store = store
        self._audit_logger = audit_logger
        self._marker = marker or get_settings().app.pendency_marker

    @property
    def marker(self) -> str:
        return self._marker

    def plan(self, target: MonthYear) -> list[FinancialEntry]:
        return plan_replications(self._store.entries, target, self._marker)

    def replicate(self, target: MonthYear) -> list[FinancialEntry]:
        """
        Plan and commit replications for `target`.

        Returns the committed batch; an empty batch leaves the store (and
        its snapshot) untouched.
        """
        batch = self.plan(target)
        if not batch:
            logger.debug("replication_noop", target=target.label)
            return []

        self._store.append(batch)

        pendencies = sum(1 for e in batch if e.is_replicated)
        templates = len(batch) - pendencies
        logger.info(
            "replication_applied",
            target=target.label,
            templates=templates,
            pendencies=pendencies,
        )
        if self._audit_logger:
            self._audit_logger.log_replication_applied(
                target_label=target.label,
                created=len(batch),
                templates=templates,
                pendencies=pendencies,
            )
        return batch
