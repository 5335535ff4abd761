"""
Force rebalance: batch-correct every month flagged by the balance validator.

Strategies:
  adjust-savings        savings absorbs the difference, budgets unchanged
  adjust-grocery        grocery budget absorbs the difference
  adjust-entertainment  entertainment budget absorbs the difference
  equal-split           available funds split in three
  manual                caller-supplied triple written to every flagged month

A rebalanced month has its bonus / extra fields folded into the written
budgets, so the allocation the validator sees is exactly the triple written.
The index list is fixed up front: fixing one month must not reorder the rest.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from core.config import DEFAULT_CONFIG
from core.errors import RebalanceError
from core.models import DataItem, FixedExpense, MonthItem, Split, VariableExpenses
from core.schema import REBALANCE_STRATEGIES
from core.utils import check_month_index, fmt_amount, month_index_of

from .validator import available_funds

logger = logging.getLogger(__name__)

_MONTH_RE = re.compile(r"Month ([^:]+):")


@dataclass(frozen=True)
class RebalanceOutcome:
    data: List[DataItem]
    variable_expenses: VariableExpenses


def extract_issue_indices(issues: Iterable[str], months: Sequence[MonthItem]) -> List[int]:
    """Month indices named by issue messages, first-seen order, no duplicates."""
    seen = set()
    indices = []
    for issue in issues:
        match = _MONTH_RE.search(issue)
        if not match:
            continue
        idx = month_index_of(match.group(1), months)
        if idx == -1 or idx in seen:
            continue
        seen.add(idx)
        indices.append(idx)
    return indices


def _shrink(a: float, b: float, budget: float) -> Tuple[float, float]:
    """Scale a and b down proportionally so they sum to ``budget``."""
    total = a + b
    if total <= 0:
        return 0.0, 0.0
    scale = budget / total
    return a * scale, b * scale


def solve_month(strategy: str, savings: float, grocery: float, entertainment: float,
                available: float, manual: Optional[Split] = None) -> Split:
    """
    Corrected triple for one month; category figures are totals (base + bonus + extra).

    When fixed expenses exceed income (``available < 0``) every automatic
    strategy writes the shortfall as *negative* planned savings with zero
    budgets, the only triple that balances. The projector then books that
    negative figure as the month's savings delta, so total savings drop by the
    shortfall, and any overspend in the month (plus the shortfall) is drawn
    from the carried total as a deficit.
    """
    if available < 0 and strategy != "manual":
        # nothing left to allocate: the shortfall is drawn from savings
        return Split(savings=available, grocery=0.0, entertainment=0.0)

    if strategy == "adjust-savings":
        s = available - grocery - entertainment
        if s >= 0:
            return Split(s, grocery, entertainment)
        g, e = _shrink(grocery, entertainment, available)
        return Split(0.0, g, e)
    if strategy == "adjust-grocery":
        g = available - savings - entertainment
        if g >= 0:
            return Split(savings, g, entertainment)
        s, e = _shrink(savings, entertainment, available)
        return Split(s, 0.0, e)
    if strategy == "adjust-entertainment":
        e = available - savings - grocery
        if e >= 0:
            return Split(savings, grocery, e)
        s, g = _shrink(savings, grocery, available)
        return Split(s, g, 0.0)
    if strategy == "equal-split":
        share = available / 3
        return Split(share, share, share)
    if strategy == "manual":
        if manual is None:
            raise ValueError("Manual rebalance requires manual_values.")
        return manual
    raise ValueError(f"Unknown rebalance strategy {strategy!r}; expected one of {REBALANCE_STRATEGIES}.")


def apply_across_months(
    indices: Sequence[int],
    strategy: str,
    data: Sequence[DataItem],
    variable_expenses: VariableExpenses,
    fixed: Sequence[FixedExpense],
    manual_values: Optional[Split] = None,
    *,
    tolerance: float = DEFAULT_CONFIG.balance_tolerance,
) -> RebalanceOutcome:
    """
    Rewrite the allocations of every month in ``indices``.

    Savings go to ``planned_savings``, grocery / entertainment to the
    variable-expense budget arrays; ``baseline_planned_savings`` is left alone.
    A manual triple that would leave any flagged month unbalanced raises
    RebalanceError before anything is written.
    """
    if strategy not in REBALANCE_STRATEGIES:
        raise ValueError(f"Unknown rebalance strategy {strategy!r}; expected one of {REBALANCE_STRATEGIES}.")
    n = len(data)
    for idx in indices:
        check_month_index(idx, n)

    if strategy == "manual":
        if manual_values is None:
            raise ValueError("Manual rebalance requires manual_values.")
        for idx in indices:
            available = available_funds(idx, data, fixed)
            if abs(manual_values.total - available) > tolerance:
                raise RebalanceError(
                    f"Manual allocation ({fmt_amount(manual_values.total)}) does not match available "
                    f"funds ({fmt_amount(available)}) for month index {idx}."
                )

    out = list(data)
    ve = variable_expenses.copy()
    for idx in indices:
        item = out[idx]
        available = available_funds(idx, out, fixed)
        if available < 0 and strategy != "manual":
            logger.warning("Month index %d: fixed expenses exceed income by %.2f; writing negative savings",
                           idx, -available)
        corrected = solve_month(
            strategy,
            savings=item.planned_savings,
            grocery=ve.grocery_budget[idx] + item.grocery_additions,
            entertainment=ve.entertainment_budget[idx] + item.entertainment_additions,
            available=available,
            manual=manual_values,
        )
        out[idx] = item.copy(
            planned_savings=corrected.savings,
            grocery_bonus=0.0,
            grocery_extra=0.0,
            entertainment_bonus=0.0,
            entertainment_extra=0.0,
            savings_extra=0.0,
        )
        ve.grocery_budget[idx] = corrected.grocery
        ve.entertainment_budget[idx] = corrected.entertainment

    logger.info("Force rebalance (%s) rewrote %d months", strategy, len(indices))
    return RebalanceOutcome(data=out, variable_expenses=ve)
