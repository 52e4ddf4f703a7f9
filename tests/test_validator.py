"""Tests for two-stage submission validation."""

import pytest
from decimal import Decimal

from simplifinance.models.entry import EntrySubmission, EntryType
from simplifinance.validation import EntryValidationError, EntryValidator


@pytest.fixture
def validator():
    return EntryValidator()


def _issue(result, field):
    return next(i for i in result.issues if i.field == field)


class TestSchemaStage:
    """Stage 1: required fields and formats."""

    def test_valid_form(self, validator):
        result = validator.validate({"description": "Mercado", "amount": "152.30"})
        assert result.is_valid
        assert result.submission.amount == Decimal("152.30")
        assert result.submission.type == EntryType.VARIABLE_EXPENSE
        assert result.issues == []

    def test_missing_description(self, validator):
        result = validator.validate({"description": "   ", "amount": "10"})
        assert not result.schema_valid
        assert not result.is_valid
        assert result.submission is None
        assert _issue(result, "description").issue_type == "missing"

    def test_non_numeric_amount(self, validator):
        result = validator.validate({"description": "Mercado", "amount": "abc"})
        issue = _issue(result, "amount")
        assert issue.issue_type == "invalid_format"
        assert issue.severity == "error"
        assert issue.suggested_fix

    def test_zero_amount(self, validator):
        result = validator.validate({"description": "Mercado", "amount": "0"})
        assert _issue(result, "amount").issue_type == "invalid_value"

    def test_absent_amount(self, validator):
        result = validator.validate({"description": "Mercado"})
        assert _issue(result, "amount").issue_type == "missing"

    def test_unknown_type(self, validator):
        result = validator.validate({"description": "Loan", "amount": "10", "type": "LOAN"})
        assert _issue(result, "type").issue_type == "invalid_value"

    def test_one_issue_per_field(self, validator):
        result = validator.validate({"description": "", "amount": "x", "installments": 0})
        assert sorted(i.field for i in result.issues) == ["amount", "description", "installments"]

    def test_semantic_stage_skipped_when_schema_fails(self, validator):
        result = validator.validate({"description": "", "amount": "10", "installments": 5000})
        assert not result.semantic_valid
        assert [i.field for i in result.issues] == ["description"]

    def test_accepts_submission_instance(self, validator):
        submission = EntrySubmission(description="Rent", amount=Decimal("10"))
        result = validator.validate(submission)
        assert result.is_valid
        assert result.submission is submission


class TestSemanticStage:
    """Stage 2: limits and sanity checks."""

    def test_too_many_installments(self, validator):
        result = validator.validate({"description": "TV", "amount": "1000", "installments": 361})
        assert result.schema_valid
        assert not result.is_valid
        assert _issue(result, "installments").issue_type == "out_of_range"

    def test_installments_on_fixed_expense_only_warn(self, validator):
        result = validator.validate({
            "description": "Rent",
            "amount": "1500",
            "type": "FIXED_EXPENSE",
            "installments": 3,
        })
        assert result.is_valid
        assert len(result.warnings) == 1
        assert _issue(result, "installments").severity == "warning"

    def test_amount_too_small_to_split(self, validator):
        result = validator.validate({"description": "Gum", "amount": "0.02", "installments": 3})
        assert not result.is_valid
        assert _issue(result, "amount").issue_type == "invalid_value"

    def test_huge_amount_warns(self, validator):
        result = validator.validate({"description": "House", "amount": "20000000"})
        assert result.is_valid
        assert _issue(result, "amount").issue_type == "suspicious_value"


class TestSummaryAndError:
    def test_summary_all_good(self, validator):
        result = validator.validate({"description": "Mercado", "amount": "10"})
        assert validator.get_user_friendly_summary(result) == "All checks passed."

    def test_summary_lists_errors(self, validator):
        result = validator.validate({"description": "", "amount": "10"})
        summary = validator.get_user_friendly_summary(result)
        assert "Please fix the following:" in summary
        assert "Description is required" in summary

    def test_validation_error_carries_result(self, validator):
        result = validator.validate({"description": "", "amount": "abc"})
        error = EntryValidationError(result)
        assert error.result is result
        assert "Description is required" in str(error)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
