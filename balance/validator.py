"""
Budget balance validation: do a month's allocations add up to what is available?

available = income + extra income − Σ fixed expenses
allocated = planned savings + grocery total + entertainment total
            (category totals include bonus and extra)

Months outside ``tolerance`` become human-readable issues. Nothing here
mutates its inputs; correcting an imbalance is left to the caller
(see balance.rebalance).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence

import numpy as np

from core.config import DEFAULT_CONFIG
from core.models import DataItem, FixedExpense, MonthItem, VariableExpenses
from core.utils import check_month_index, fixed_total, fixed_totals_by_month, fmt_amount


@dataclass(frozen=True)
class BalanceCheck:
    valid: bool
    message: str
    deficit: float
    available: float
    total: float


@dataclass(frozen=True)
class IssueSummary:
    index: int
    savings_total: float
    grocery_total: float
    entertainment_total: float
    deficit: float
    available: float


@dataclass(frozen=True)
class BudgetIssues:
    issues: List[str] = field(default_factory=list)
    first_issue: Optional[IssueSummary] = None

    @property
    def is_balanced(self) -> bool:
        return not self.issues


def _imbalance_message(label: str, total: float, available: float, currency: str) -> str:
    diff = total - available
    if diff > 0:
        return (
            f"Month {label}: Total budgets ({fmt_amount(total)} {currency}) exceed available balance "
            f"({fmt_amount(available)} {currency}) by {fmt_amount(diff)} {currency}. Please rebalance."
        )
    return (
        f"Month {label}: Total budgets ({fmt_amount(total)} {currency}) are {fmt_amount(abs(diff))} "
        f"{currency} below available balance ({fmt_amount(available)} {currency}). "
        f"Please allocate all available funds."
    )


def available_funds(index: int, data: Sequence[DataItem], fixed: Sequence[FixedExpense]) -> float:
    item = data[index]
    return item.income + item.extra_income - fixed_total(fixed, index)


def validate_balance(
    index: int,
    savings: float,
    grocery: float,
    entertainment: float,
    data: Sequence[DataItem],
    fixed: Sequence[FixedExpense],
    months: Sequence[MonthItem],
    *,
    tolerance: float = DEFAULT_CONFIG.balance_tolerance,
    currency: str = DEFAULT_CONFIG.currency,
) -> BalanceCheck:
    """Check a proposed (savings, grocery, entertainment) allocation for one month."""
    check_month_index(index, min(len(data), len(months)))
    available = available_funds(index, data, fixed)
    total = savings + grocery + entertainment
    if abs(total - available) <= tolerance:
        return BalanceCheck(valid=True, message="", deficit=0.0, available=available, total=total)
    return BalanceCheck(
        valid=False,
        message=_imbalance_message(months[index].label, total, available, currency),
        deficit=abs(total - available),
        available=available,
        total=total,
    )


def compute_issues(
    data: Sequence[DataItem],
    variable_expenses: VariableExpenses,
    fixed: Sequence[FixedExpense],
    months: Sequence[MonthItem],
    indices: Optional[Iterable[int]] = None,
    *,
    tolerance: float = DEFAULT_CONFIG.balance_tolerance,
    currency: str = DEFAULT_CONFIG.currency,
) -> BudgetIssues:
    """
    Scan months (all of them, or just ``indices``) for allocation imbalances.

    Returns
    -------
    BudgetIssues with one message per flagged month and the numeric detail of
    the earliest flagged month in ``first_issue``.
    """
    n = min(len(data), len(months))
    if n == 0:
        return BudgetIssues()

    income = np.array([d.income + d.extra_income for d in data[:n]], dtype=float)
    available = income - fixed_totals_by_month(fixed, n)
    savings = np.array([d.planned_savings for d in data[:n]], dtype=float)
    grocery = np.asarray(variable_expenses.grocery_budget[:n], dtype=float) + np.array(
        [d.grocery_additions for d in data[:n]], dtype=float
    )
    entertainment = np.asarray(variable_expenses.entertainment_budget[:n], dtype=float) + np.array(
        [d.entertainment_additions for d in data[:n]], dtype=float
    )
    totals = savings + grocery + entertainment
    flagged = np.abs(totals - available) > tolerance

    scan = range(n) if indices is None else sorted({check_month_index(i, n) for i in indices})

    issues: List[str] = []
    first: Optional[IssueSummary] = None
    for i in scan:
        if not flagged[i]:
            continue
        issues.append(_imbalance_message(months[i].label, float(totals[i]), float(available[i]), currency))
        if first is None:
            first = IssueSummary(
                index=i,
                savings_total=float(savings[i]),
                grocery_total=float(grocery[i]),
                entertainment_total=float(entertainment[i]),
                deficit=float(abs(totals[i] - available[i])),
                available=float(available[i]),
            )
    return BudgetIssues(issues=issues, first_issue=first)
