"""Shared fixtures for the SimpliFinance test suite."""

from datetime import datetime
from decimal import Decimal

import pytest

from simplifinance.audit import AuditLogger
from simplifinance.entry_store import EntryStore
from simplifinance.models.entry import EntryType, FinancialEntry, MonthYear
from simplifinance.orchestrator import FinanceTracker
from simplifinance.services.storage import InMemoryAuditStorage, InMemoryEntryStorage


MARCH_2025 = MonthYear(month=2, year=2025)


@pytest.fixture
def make_entry():
    """Factory for entries bucketed by (month, year), dated on `day`."""
    def _make(
        type=EntryType.VARIABLE_EXPENSE,
        description="Groceries",
        amount="100",
        month=2,
        year=2025,
        day=15,
        is_paid=False,
        **extra,
    ) -> FinancialEntry:
        return FinancialEntry(
            type=type,
            description=description,
            amount=Decimal(amount),
            date=datetime(year, month + 1, day, 12, 0),
            is_paid=is_paid,
            month=month,
            year=year,
            **extra,
        )
    return _make


@pytest.fixture
def audit_storage():
    return InMemoryAuditStorage()


@pytest.fixture
def audit_logger(audit_storage):
    return AuditLogger(audit_storage)


@pytest.fixture
def entry_storage():
    return InMemoryEntryStorage()


@pytest.fixture
def store(entry_storage, audit_logger):
    return EntryStore(entry_storage, audit_logger)


@pytest.fixture
def tracker(store, audit_logger):
    return FinanceTracker(store=store, audit_logger=audit_logger, view=MARCH_2025)
