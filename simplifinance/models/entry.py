"""
Core Data Models for SimpliFinance

These models define the schemas for everything that flows through the
tracker. They are designed to:
1. Enforce type safety at runtime
2. Round-trip through the local snapshot without loss
3. Stay compatible with snapshots written by earlier versions (camelCase keys)

DESIGN DECISION: FinancialEntry is the only persisted entity.
Replication, installments and summaries are all derived from it.
"""

import calendar
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Optional
from uuid import uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
)
from pydantic.alias_generators import to_camel

from simplifinance.constants import MONTHS


def new_entry_id() -> str:
    """Generate a fresh opaque entry identifier."""
    return str(uuid4())


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class EntryType(str, Enum):
    """
    Entry categories.

    Values are the upper-case names so snapshots written by older
    versions of the app load unchanged.
    """
    INCOME = "INCOME"
    FIXED_EXPENSE = "FIXED_EXPENSE"
    VARIABLE_EXPENSE = "VARIABLE_EXPENSE"


# Display/sort rank within the unpaid (and paid) group
TYPE_ORDER = {
    EntryType.INCOME: 0,
    EntryType.FIXED_EXPENSE: 1,
    EntryType.VARIABLE_EXPENSE: 2,
}


# =============================================================================
# MONTH BUCKET
# =============================================================================

class MonthYear(BaseModel):
    """
    A viewing bucket: month 0-11 plus year.

    Months are zero-based to match the persisted entry field.
    """
    model_config = ConfigDict(frozen=True)

    month: int = Field(..., ge=0, le=11)
    year: int = Field(..., ge=1, le=9999)

    @classmethod
    def current(cls) -> "MonthYear":
        today = datetime.now()
        return cls(month=today.month - 1, year=today.year)

    def previous(self) -> "MonthYear":
        """The preceding calendar month, rolling back a year from January."""
        return self.shift(-1)

    def shift(self, offset: int) -> "MonthYear":
        total = self.year * 12 + self.month + offset
        return MonthYear(month=total % 12, year=total // 12)

    @property
    def days_in_month(self) -> int:
        return calendar.monthrange(self.year, self.month + 1)[1]

    @property
    def label(self) -> str:
        return f"{MONTHS[self.month]} {self.year}"


# =============================================================================
# CORE ENTRY MODEL
# =============================================================================

class FinancialEntry(BaseModel):
    """
    One month-bucketed occurrence of an income or expense.

    (month, year) is fixed at creation; edits and payment toggles produce
    a full replacement via with_changes() and never move the bucket.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    # Identity
    id: str = Field(
        default_factory=new_entry_id,
        description="Opaque unique identifier"
    )

    type: EntryType
    description: str = Field(
        ...,
        description="User label, including generated suffixes"
    )
    amount: Decimal = Field(
        ...,
        ge=0,
        description="Monetary magnitude, never negative"
    )
    date: datetime = Field(
        ...,
        description="Nominal transaction date"
    )
    is_paid: bool = False

    # Bucket
    month: int = Field(..., ge=0, le=11)
    year: int = Field(..., ge=1, le=9999)

    # Replication metadata
    original_id: Optional[str] = Field(
        default=None,
        description="Entry this occurrence was carried forward from (reference only)"
    )
    is_replicated: Optional[bool] = Field(
        default=None,
        description="True for auto-generated pendencies"
    )

    # Installment plan metadata
    is_installment: Optional[bool] = None
    installment_number: Optional[int] = None
    total_installments: Optional[int] = None
    parent_id: Optional[str] = None

    @field_serializer("amount", when_used="json")
    def serialize_amount(self, value: Decimal) -> float:
        # Snapshots store plain JSON numbers
        return float(value)

    @property
    def bucket(self) -> MonthYear:
        return MonthYear(month=self.month, year=self.year)

    @property
    def is_expense(self) -> bool:
        return self.type != EntryType.INCOME

    @property
    def is_pendency(self) -> bool:
        return bool(self.is_replicated)

    def with_changes(self, **fields: Any) -> "FinancialEntry":
        """Return a validated full-replacement copy with `fields` updated."""
        data = self.model_dump()
        data.update(fields)
        return FinancialEntry.model_validate(data)

    def to_snapshot(self) -> dict:
        """Serialize for the local snapshot (camelCase, optional fields omitted)."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# =============================================================================
# SUBMISSION MODEL (form payload)
# =============================================================================

class EntrySubmission(BaseModel):
    """
    Data submitted from the entry form.

    Only the fields the user controls. Bucket, id and payment status are
    assigned by the tracker.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    description: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="User label"
    )
    amount: Decimal = Field(
        ...,
        gt=0,
        description="Total amount; split across installments when applicable"
    )
    type: EntryType = EntryType.VARIABLE_EXPENSE
    date: Optional[datetime] = Field(
        default=None,
        description="Nominal date; defaults to a day inside the viewed month"
    )
    installments: int = Field(
        default=1,
        ge=1,
        description="Number of monthly installments"
    )


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_format', 'suspicious_value')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )
    suggested_fix: Optional[str] = None


class ValidationResult(BaseModel):
    """
    Result of the two-stage submission validation.

    Stage 1: Schema validation (types, required fields, positivity)
    Stage 2: Semantic validation (limits and sanity checks)
    """

    validated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

    schema_valid: bool
    semantic_valid: bool
    is_valid: bool

    issues: list[ValidationIssue] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    # Parsed payload, present whenever stage 1 passed
    submission: Optional[EntrySubmission] = None

    @property
    def has_errors(self) -> bool:
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        return sum(1 for issue in self.issues if issue.severity == "error")


# =============================================================================
# SUMMARY MODELS
# =============================================================================

class MonthSummary(BaseModel):
    """
    Totals for one viewed month.

    balance = income - paid_expenses. Unpaid expenses are left out on
    purpose: money not yet spent is still available.
    """

    month: MonthYear
    income: Decimal = Decimal("0")
    total_expenses: Decimal = Decimal("0")
    paid_expenses: Decimal = Decimal("0")
    balance: Decimal = Decimal("0")
    entry_count: int = Field(default=0, ge=0)

    @property
    def unpaid_expenses(self) -> Decimal:
        return self.total_expenses - self.paid_expenses
