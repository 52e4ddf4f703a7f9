"""
Month View Queries

Pure, derived computations over the entry collection for one viewed
month: the display list, its totals, and pendency chain tracing.

Nothing here mutates entries or touches storage.
"""

from decimal import Decimal
from typing import Iterable, Optional

from simplifinance.models.entry import (
    TYPE_ORDER,
    EntryType,
    FinancialEntry,
    MonthSummary,
    MonthYear,
)


def _display_key(entry: FinancialEntry) -> tuple[bool, int]:
    return (entry.is_paid, TYPE_ORDER[entry.type])


def month_entries(
    entries: Iterable[FinancialEntry],
    view: MonthYear,
) -> list[FinancialEntry]:
    """
    Entries of the viewed month in display order.

    Unpaid first (income, then fixed, then variable); paid entries always
    last regardless of type. The sort is stable, so entries of the same
    rank keep their insertion order.
    """
    selected = [e for e in entries if e.month == view.month and e.year == view.year]
    return sorted(selected, key=_display_key)


def summarize(
    entries: Iterable[FinancialEntry],
    view: MonthYear,
) -> MonthSummary:
    """
    Totals for the viewed month.

    total_expenses counts paid and unpaid expenses; balance subtracts only
    the paid ones from income.
    """
    selected = month_entries(entries, view)

    income = sum(
        (e.amount for e in selected if e.type == EntryType.INCOME),
        Decimal("0"),
    )
    total_expenses = sum(
        (e.amount for e in selected if e.is_expense),
        Decimal("0"),
    )
    paid_expenses = sum(
        (e.amount for e in selected if e.is_expense and e.is_paid),
        Decimal("0"),
    )

    return MonthSummary(
        month=view,
        income=income,
        total_expenses=total_expenses,
        paid_expenses=paid_expenses,
        balance=income - paid_expenses,
        entry_count=len(selected),
    )


def pendency_chain(
    entries: Iterable[FinancialEntry],
    entry_id: str,
) -> list[FinancialEntry]:
    """
    Follow original_id links from `entry_id` back to the root occurrence.

    Returns the chain newest-first, starting with the entry itself. Stops
    at the first missing link (e.g. a deleted predecessor) or on a cycle.
    Returns an empty list when `entry_id` is unknown.
    """
    by_id = {e.id: e for e in entries}
    chain = []
    seen = set()
    current = by_id.get(entry_id)
    while current is not None and current.id not in seen:
        chain.append(current)
        seen.add(current.id)
        if not current.original_id:
            break
        current = by_id.get(current.original_id)
    return chain


def overdue_since(
    entries: Iterable[FinancialEntry],
    entry_id: str,
) -> Optional[MonthYear]:
    """Bucket of the oldest occurrence reachable through the pendency chain."""
    chain = pendency_chain(entries, entry_id)
    if not chain:
        return None
    return chain[-1].bucket
