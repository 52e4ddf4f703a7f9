"""Tests for month view ordering, totals and pendency chains."""

import pytest
from decimal import Decimal

from simplifinance.models.entry import EntryType, MonthYear
from simplifinance.queries import (
    month_entries,
    overdue_since,
    pendency_chain,
    summarize,
)
from simplifinance.replication import plan_replications


MARCH_2025 = MonthYear(month=2, year=2025)


class TestMonthEntries:
    """Tests for display filtering and ordering."""

    def test_paid_last_unpaid_by_type(self, make_entry):
        paid_income = make_entry(type=EntryType.INCOME, description="Salary", is_paid=True)
        fixed = make_entry(type=EntryType.FIXED_EXPENSE, description="Rent")
        variable = make_entry(type=EntryType.VARIABLE_EXPENSE, description="Market")

        ordered = month_entries([paid_income, variable, fixed], MARCH_2025)

        assert [e.description for e in ordered] == ["Rent", "Market", "Salary"]

    def test_unpaid_income_comes_first(self, make_entry):
        variable = make_entry(type=EntryType.VARIABLE_EXPENSE, description="Market")
        income = make_entry(type=EntryType.INCOME, description="Salary")
        paid_fixed = make_entry(type=EntryType.FIXED_EXPENSE, description="Rent", is_paid=True)

        ordered = month_entries([paid_fixed, variable, income], MARCH_2025)

        assert [e.description for e in ordered] == ["Salary", "Market", "Rent"]

    def test_same_rank_keeps_insertion_order(self, make_entry):
        first = make_entry(description="A")
        second = make_entry(description="B")
        assert [e.description for e in month_entries([first, second], MARCH_2025)] == ["A", "B"]

    def test_filters_other_buckets(self, make_entry):
        entries = [
            make_entry(description="March"),
            make_entry(description="April", month=3),
            make_entry(description="March last year", year=2024),
        ]
        assert [e.description for e in month_entries(entries, MARCH_2025)] == ["March"]


class TestSummarize:
    """Tests for monthly totals."""

    def test_balance_excludes_unpaid_expenses(self, make_entry):
        entries = [
            make_entry(type=EntryType.INCOME, description="Salary", amount="5000"),
            make_entry(type=EntryType.FIXED_EXPENSE, description="Rent", amount="2000", is_paid=True),
            make_entry(type=EntryType.VARIABLE_EXPENSE, description="Market", amount="1000"),
        ]

        summary = summarize(entries, MARCH_2025)

        assert summary.income == Decimal("5000")
        assert summary.paid_expenses == Decimal("2000")
        assert summary.total_expenses == Decimal("3000")
        assert summary.balance == Decimal("3000")
        assert summary.unpaid_expenses == Decimal("1000")
        assert summary.entry_count == 3

    def test_income_counts_regardless_of_paid_flag(self, make_entry):
        entries = [
            make_entry(type=EntryType.INCOME, amount="100"),
            make_entry(type=EntryType.INCOME, amount="50", is_paid=True),
        ]
        assert summarize(entries, MARCH_2025).income == Decimal("150")

    def test_empty_month(self):
        summary = summarize([], MARCH_2025)
        assert summary.balance == Decimal("0")
        assert summary.entry_count == 0
        assert summary.month == MARCH_2025

    def test_negative_balance(self, make_entry):
        entries = [make_entry(type=EntryType.FIXED_EXPENSE, amount="700", is_paid=True)]
        assert summarize(entries, MARCH_2025).balance == Decimal("-700")


class TestPendencyChain:
    """Tests for walking original_id links back to the root."""

    def _three_generations(self, make_entry):
        root = make_entry(description="Pharmacy")
        entries = [root]
        for target in (MonthYear(month=3, year=2025), MonthYear(month=4, year=2025)):
            entries += plan_replications(entries, target, "(Pendente)")
        return entries

    def test_chain_is_newest_first(self, make_entry):
        entries = self._three_generations(make_entry)
        newest = entries[-1]

        chain = pendency_chain(entries, newest.id)

        assert [(e.month, e.year) for e in chain] == [(4, 2025), (3, 2025), (2, 2025)]
        assert chain[-1].original_id is None

    def test_overdue_since_root_bucket(self, make_entry):
        entries = self._three_generations(make_entry)
        assert overdue_since(entries, entries[-1].id) == MARCH_2025

    def test_chain_stops_at_missing_link(self, make_entry):
        entries = self._three_generations(make_entry)
        without_middle = [entries[0], entries[2]]
        chain = pendency_chain(without_middle, entries[2].id)
        assert [e.id for e in chain] == [entries[2].id]

    def test_chain_stops_on_cycle(self, make_entry):
        a = make_entry(id="a", original_id="b")
        b = make_entry(id="b", original_id="a")
        assert [e.id for e in pendency_chain([a, b], "a")] == ["a", "b"]

    def test_unknown_entry(self, make_entry):
        assert pendency_chain([make_entry()], "missing") == []
        assert overdue_since([make_entry()], "missing") is None


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
