"""
Two-Stage Submission Validation

Form input is validated here before it reaches the entry builder; the
builder and the replication engine assume well-formed input.

STAGE 1 - SCHEMA VALIDATION:
- Required fields present (description, amount)
- Amount is numeric and greater than zero
- Type, date and installment count parse

STAGE 2 - SEMANTIC VALIDATION:
- Installment count within the configured limit
- Installment shares not smaller than one cent
- Installments on non-variable types (ignored, so only a warning)
- Unusually large amounts

IMPORTANT: Validation NEVER silently fixes issues.
It reports them for the user to correct.
"""

from decimal import Decimal
from typing import Any, Optional, Union

from pydantic import ValidationError

from simplifinance.config import get_settings
from simplifinance.models.entry import (
    EntrySubmission,
    EntryType,
    ValidationIssue,
    ValidationResult,
)


FIELD_MESSAGES = {
    "description": "Description is required",
    "amount": "Amount must be a number greater than zero",
    "type": "Entry type must be income, fixed expense or variable expense",
    "date": "Date is not a valid date",
    "installments": "Installments must be a whole number of at least 1",
}

FIELD_FIXES = {
    "description": "Enter a short label such as 'Rent' or 'Groceries'",
    "amount": "Enter the amount using digits only, e.g. 150.90",
}

# pydantic error type -> issue_type
ERROR_TYPES = {
    "missing": "missing",
    "string_too_short": "missing",
    "greater_than": "invalid_value",
    "greater_than_equal": "invalid_value",
    "enum": "invalid_value",
}


class EntryValidationError(Exception):
    """A submission failed validation; carries the full result."""

    def __init__(self, result: ValidationResult):
        self.result = result
        messages = [i.message for i in result.issues if i.severity == "error"]
        super().__init__("; ".join(messages) or "Invalid submission")


class EntryValidator:
    """Validates entry form submissions through a two-stage pipeline."""

    def __init__(self):
        self._settings = get_settings().app

    def _validate_schema(
        self,
        form: Union[dict, EntrySubmission],
    ) -> tuple[Optional[EntrySubmission], list[ValidationIssue]]:
        """
        Stage 1: Schema validation.

        Returns: (parsed_submission_or_None, list_of_issues)
        """
        if isinstance(form, EntrySubmission):
            return form, []

        try:
            return EntrySubmission.model_validate(form), []
        except ValidationError as e:
            issues = []
            seen = set()
            for error in e.errors():
                field = str(error["loc"][0]) if error["loc"] else "submission"
                if field in seen:
                    continue
                seen.add(field)
                issues.append(ValidationIssue(
                    field=field,
                    issue_type=ERROR_TYPES.get(error["type"], "invalid_format"),
                    message=FIELD_MESSAGES.get(field, error["msg"]),
                    severity="error",
                    suggested_fix=FIELD_FIXES.get(field),
                ))
            return None, issues

    def _validate_semantic(
        self,
        submission: EntrySubmission,
    ) -> tuple[bool, list[ValidationIssue]]:
        """
        Stage 2: Semantic validation.

        Returns: (is_valid, list_of_issues)
        """
        issues = []
        installments = submission.installments

        if installments > self._settings.max_installments:
            issues.append(ValidationIssue(
                field="installments",
                issue_type="out_of_range",
                message=(
                    f"At most {self._settings.max_installments} installments "
                    f"are allowed (got {installments})"
                ),
                severity="error",
            ))

        if installments > 1 and submission.type != EntryType.VARIABLE_EXPENSE:
            issues.append(ValidationIssue(
                field="installments",
                issue_type="ignored",
                message="Only variable expenses can be split into installments",
                severity="warning",
                suggested_fix="The entry will be created as a single occurrence",
            ))
        elif installments > 1 and submission.amount < Decimal("0.01") * installments:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message=f"Amount is too small to split into {installments} installments",
                severity="error",
                suggested_fix="Use fewer installments or a larger amount",
            ))

        max_amount = Decimal(str(self._settings.max_entry_amount))
        if submission.amount > max_amount:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="suspicious_value",
                message=f"Amount ({submission.amount:,.2f}) seems unusually high",
                severity="warning",
                suggested_fix="Please verify this amount is correct",
            ))

        is_valid = not any(issue.severity == "error" for issue in issues)
        return is_valid, issues

    def validate(self, form: Union[dict[str, Any], EntrySubmission]) -> ValidationResult:
        """
        Run the full two-stage validation pipeline.

        Args:
            form: Raw form data or an already-built EntrySubmission

        Returns:
            ValidationResult; `submission` is set when stage 1 passed
        """
        submission, all_issues = self._validate_schema(form)
        schema_valid = submission is not None

        # Only run stage 2 if stage 1 passes
        semantic_valid = False
        if schema_valid:
            semantic_valid, semantic_issues = self._validate_semantic(submission)
            all_issues.extend(semantic_issues)

        warnings = [i.message for i in all_issues if i.severity == "warning"]

        return ValidationResult(
            schema_valid=schema_valid,
            semantic_valid=semantic_valid,
            is_valid=schema_valid and semantic_valid,
            issues=all_issues,
            warnings=warnings,
            submission=submission,
        )

    def get_user_friendly_summary(
        self,
        result: ValidationResult,
    ) -> str:
        """Short, plain-language summary suitable for the entry form."""
        if result.is_valid and not result.warnings:
            return "All checks passed."

        lines = []

        if result.has_errors:
            lines.append("Please fix the following:")
            for issue in result.issues:
                if issue.severity == "error":
                    lines.append(f"   • {issue.message}")
                    if issue.suggested_fix:
                        lines.append(f"     {issue.suggested_fix}")

        if result.warnings:
            if lines:
                lines.append("")
            lines.append("Please verify the following:")
            for warning in result.warnings:
                lines.append(f"   • {warning}")

        return "\n".join(lines)
