"""
Ledger: compensation transactions, the transaction journal and fixed-expense edits.
"""

from .compensation import (
    AvailableSource,
    CompensationCheck,
    CompensationOutcome,
    check_overspend,
    apply_compensation,
    reverse_compensation,
)
from .journal import (
    add_transaction,
    edit_transaction,
    delete_transaction,
    allocate_extra_income,
    delete_extra_allocation,
    month_totals,
    clear_month,
)
from .fixed_changes import Split, FixedExpenseChange, apply_pending_changes, validate_split

__all__ = [
    "AvailableSource",
    "CompensationCheck",
    "CompensationOutcome",
    "check_overspend",
    "apply_compensation",
    "reverse_compensation",
    "add_transaction",
    "edit_transaction",
    "delete_transaction",
    "allocate_extra_income",
    "delete_extra_allocation",
    "month_totals",
    "clear_month",
    "Split",
    "FixedExpenseChange",
    "apply_pending_changes",
    "validate_split",
]
