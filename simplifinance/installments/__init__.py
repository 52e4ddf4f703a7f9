"""Entry construction and installment expansion package."""

from simplifinance.installments.builder import (
    apply_edit,
    build_entries,
    changed_fields,
    default_entry_date,
    expand_installments,
    is_installment_plan,
    split_amount,
)

__all__ = [
    "apply_edit",
    "build_entries",
    "changed_fields",
    "default_entry_date",
    "expand_installments",
    "is_installment_plan",
    "split_amount",
]
