"""Submission validation package."""

from simplifinance.validation.validator import EntryValidationError, EntryValidator

__all__ = ["EntryValidationError", "EntryValidator"]
