"""
Entry Construction from Form Submissions

Turns a validated EntrySubmission into the entries to append:
- a single entry bucketed into the viewed month, or
- an installment plan: a VARIABLE_EXPENSE with installments > 1 becomes
  N unpaid entries in consecutive months, starting at the viewed month,
  sharing a parent_id.

Installment counts on any other type are ignored.

REMAINDER POLICY: each share is amount / N rounded down to the cent;
the last installment absorbs whatever is left, so the shares always sum
to the submitted total.
"""

from datetime import datetime
from decimal import ROUND_DOWN, Decimal
from typing import Optional

from simplifinance.constants import DEFAULT_ENTRY_DAY_CAP
from simplifinance.models.entry import (
    EntrySubmission,
    EntryType,
    FinancialEntry,
    MonthYear,
    new_entry_id,
)
from simplifinance.replication.engine import shift_date


CENT = Decimal("0.01")


def split_amount(total: Decimal, count: int) -> list[Decimal]:
    """Split `total` into `count` cent-rounded shares summing to `total`."""
    if count < 1:
        raise ValueError("Installment count must be at least 1.")
    share = (total / count).quantize(CENT, rounding=ROUND_DOWN)
    shares = [share] * count
    shares[-1] = total - share * (count - 1)
    return shares


def default_entry_date(view: MonthYear, today: Optional[datetime] = None) -> datetime:
    """Today's day-of-month (capped at 28) inside the viewed month."""
    today = today or datetime.now()
    return datetime(view.year, view.month + 1, min(today.day, DEFAULT_ENTRY_DAY_CAP))


def is_installment_plan(submission: EntrySubmission) -> bool:
    return (
        submission.type == EntryType.VARIABLE_EXPENSE
        and submission.installments > 1
    )


def expand_installments(
    submission: EntrySubmission,
    view: MonthYear,
    today: Optional[datetime] = None,
) -> list[FinancialEntry]:
    count = submission.installments
    parent_id = new_entry_id()
    base_date = submission.date or default_entry_date(view, today)

    entries = []
    for index, amount in enumerate(split_amount(submission.amount, count)):
        bucket = view.shift(index)
        number = index + 1
        entries.append(FinancialEntry(
            type=submission.type,
            description=f"{submission.description} ({number}/{count})",
            amount=amount,
            date=shift_date(base_date, bucket),
            is_paid=False,
            month=bucket.month,
            year=bucket.year,
            is_installment=True,
            installment_number=number,
            total_installments=count,
            parent_id=parent_id,
        ))
    return entries


def build_entries(
    submission: EntrySubmission,
    view: MonthYear,
    today: Optional[datetime] = None,
) -> list[FinancialEntry]:
    """Entries to append for a new submission while `view` is displayed."""
    if is_installment_plan(submission):
        return expand_installments(submission, view, today)

    return [FinancialEntry(
        type=submission.type,
        description=submission.description,
        amount=submission.amount,
        date=submission.date or default_entry_date(view, today),
        is_paid=False,
        month=view.month,
        year=view.year,
    )]


def apply_edit(entry: FinancialEntry, submission: EntrySubmission) -> FinancialEntry:
    """
    Full replacement of `entry` with the submitted fields.

    Identity, bucket, payment status and replication/installment metadata
    are kept; the installment count is ignored for edits.
    """
    return entry.with_changes(
        description=submission.description,
        amount=submission.amount,
        type=submission.type,
        date=submission.date or entry.date,
    )


def changed_fields(before: FinancialEntry, after: FinancialEntry) -> list[str]:
    old = before.model_dump()
    new = after.model_dump()
    return sorted(name for name in new if old.get(name) != new[name])
