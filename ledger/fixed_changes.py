"""
Pending fixed-expense edits, applied in one batch when the user saves.

A change either sets a new amount or deletes the expense, for one month, from a
month onwards ("future") or entirely ("forever"). The money freed (or the extra
money needed, as negative parts) is redistributed through the change's split
into planned savings and grocery / entertainment bonuses over the same months.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Literal, Optional, Sequence, Tuple

from core.models import DataItem, FixedExpense, Split
from core.utils import check_month_index

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FixedExpenseChange:
    kind: Literal["amount", "delete"]
    scope: Literal["month", "future", "forever"]
    expense_id: int
    month_index: int = 0
    new_amount: float = 0.0
    split: Split = field(default_factory=Split)


def validate_split(split: Split, total: float, tolerance: float = 0.01) -> bool:
    """A split must account for the whole amount it redistributes."""
    return abs(split.total - total) < tolerance


def _carry_savings_forward(data: List[DataItem], start: int) -> None:
    src = data[start]
    keep_bonus = src.planned_savings < src.baseline_planned_savings
    for i in range(start + 1, len(data)):
        data[i] = data[i].copy(
            planned_savings=src.planned_savings,
            grocery_bonus=src.grocery_bonus if keep_bonus else 0.0,
            entertainment_bonus=src.entertainment_bonus if keep_bonus else 0.0,
        )


def apply_pending_changes(
    fixed: Sequence[FixedExpense],
    data: Sequence[DataItem],
    changes: Sequence[FixedExpenseChange],
    savings_forward_from: Optional[int] = None,
) -> Tuple[List[FixedExpense], List[DataItem]]:
    """
    Apply queued changes and return new (fixed, data) lists.

    ``savings_forward_from`` copies that month's planned savings (and, when
    savings were cut below the baseline, its bonuses) to every later month
    before the changes are applied.
    """
    new_fixed = [f.copy() for f in fixed]
    new_data = list(data)
    n = len(new_data)

    if savings_forward_from is not None:
        check_month_index(savings_forward_from, n)
        _carry_savings_forward(new_data, savings_forward_from)

    for c in changes:
        check_month_index(c.month_index, n)
        if c.kind not in ("amount", "delete"):
            raise ValueError(f"Unknown change kind {c.kind!r}.")
        matches = [f for f in new_fixed if f.id == c.expense_id]
        target = matches[0] if matches else None
        if target is None:
            logger.warning("Fixed expense %d no longer exists; applying split only", c.expense_id)

        if c.kind == "delete" and c.scope == "forever":
            new_fixed = [f for f in new_fixed if f.id != c.expense_id]
        elif target is not None:
            value = 0.0 if c.kind == "delete" else c.new_amount
            stop = c.month_index + 1 if c.scope == "month" else len(target.amounts)
            for i in range(c.month_index, stop):
                target.amounts[i] = value

        stop = c.month_index + 1 if c.scope == "month" else n
        for i in range(c.month_index, stop):
            item = new_data[i]
            new_data[i] = item.copy(
                planned_savings=item.planned_savings + c.split.savings,
                grocery_bonus=item.grocery_bonus + c.split.grocery,
                entertainment_bonus=item.entertainment_bonus + c.split.entertainment,
            )

    # fully zeroed expenses count as deleted
    kept = [f for f in new_fixed if any(a > 0 for a in f.amounts)]
    return kept, new_data
