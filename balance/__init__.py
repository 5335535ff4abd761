"""
Budget balance: imbalance detection and force rebalance.
"""

from .validator import BalanceCheck, BudgetIssues, IssueSummary, validate_balance, compute_issues
from .rebalance import RebalanceOutcome, extract_issue_indices, apply_across_months

__all__ = [
    "BalanceCheck",
    "BudgetIssues",
    "IssueSummary",
    "validate_balance",
    "compute_issues",
    "RebalanceOutcome",
    "extract_issue_indices",
    "apply_across_months",
]
