"""Month view query package."""

from simplifinance.queries.month_view import (
    month_entries,
    overdue_since,
    pendency_chain,
    summarize,
)

__all__ = ["month_entries", "overdue_since", "pendency_chain", "summarize"]
