"""
Data Models Package

This package contains all Pydantic models used in SimpliFinance.
All data flowing through the system must conform to these schemas.
"""

from simplifinance.models.entry import (
    TYPE_ORDER,
    EntrySubmission,
    EntryType,
    FinancialEntry,
    MonthSummary,
    MonthYear,
    ValidationIssue,
    ValidationResult,
    new_entry_id,
)
from simplifinance.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Entry models
    "TYPE_ORDER",
    "EntrySubmission",
    "EntryType",
    "FinancialEntry",
    "MonthSummary",
    "MonthYear",
    "ValidationIssue",
    "ValidationResult",
    "new_entry_id",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
