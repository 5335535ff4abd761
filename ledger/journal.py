"""
Transaction journal: per-month purchase and extra-income records.

Booking, editing or deleting a purchase keeps the month's ``*_spent`` figure in
step with the journal; extra-income allocations bump the month's grocery /
entertainment / savings extras. Everything returns new objects.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import pandas as pd

from core.models import DataItem, ExtraAllocation, Transaction, Transactions, VariableExpenses
from core.schema import CATEGORIES
from core.utils import check_month_index


@dataclass(frozen=True)
class MonthTotals:
    grocery: float
    entertainment: float
    extra_grocery: float
    extra_entertainment: float
    extra_savings: float
    n_grocery: int
    n_entertainment: int
    n_extra: int


def _now_iso() -> str:
    return pd.Timestamp.now(tz="UTC").isoformat()


def _require(category: str) -> None:
    if category not in CATEGORIES:
        raise ValueError(f"Unknown category {category!r}; expected one of {CATEGORIES}.")


def _entry(transactions: Transactions, category: str, index: int, tx_index: int) -> Transaction:
    entries = getattr(transactions, category)[index]
    if not 0 <= tx_index < len(entries):
        raise IndexError(f"No {category} transaction #{tx_index} in month {index}.")
    return entries[tx_index]


def add_transaction(
    transactions: Transactions,
    variable_expenses: VariableExpenses,
    category: str,
    index: int,
    amount: float,
    timestamp: Optional[str] = None,
) -> Tuple[Transactions, VariableExpenses]:
    _require(category)
    check_month_index(index, len(transactions.grocery))
    tx = Transaction(amount=amount, timestamp=timestamp or _now_iso())
    new_tx = transactions.copy()
    getattr(new_tx, category)[index].append(tx)
    ve = variable_expenses.copy()
    ve.spent(category)[index] += amount
    return new_tx, ve


def edit_transaction(
    transactions: Transactions,
    variable_expenses: VariableExpenses,
    category: str,
    index: int,
    tx_index: int,
    new_amount: float,
) -> Tuple[Transactions, VariableExpenses]:
    _require(category)
    check_month_index(index, len(transactions.grocery))
    old = _entry(transactions, category, index, tx_index)
    new_tx = transactions.copy()
    getattr(new_tx, category)[index][tx_index] = Transaction(amount=new_amount, timestamp=old.timestamp)
    ve = variable_expenses.copy()
    ve.spent(category)[index] += new_amount - old.amount
    return new_tx, ve


def delete_transaction(
    transactions: Transactions,
    variable_expenses: VariableExpenses,
    category: str,
    index: int,
    tx_index: int,
) -> Tuple[Transactions, VariableExpenses]:
    _require(category)
    check_month_index(index, len(transactions.grocery))
    old = _entry(transactions, category, index, tx_index)
    new_tx = transactions.copy()
    del getattr(new_tx, category)[index][tx_index]
    ve = variable_expenses.copy()
    ve.spent(category)[index] -= old.amount
    return new_tx, ve


def allocate_extra_income(
    transactions: Transactions,
    data: Sequence[DataItem],
    index: int,
    grocery_part: float,
    entertainment_part: float,
    savings_part: float,
    timestamp: Optional[str] = None,
) -> Tuple[Transactions, List[DataItem]]:
    """Record how a month's extra income is split and raise that month's extras accordingly."""
    check_month_index(index, len(transactions.extra))
    alloc = ExtraAllocation(grocery_part, entertainment_part, savings_part, timestamp or _now_iso())
    new_tx = transactions.copy()
    new_tx.extra[index].append(alloc)
    out = list(data)
    item = data[index]
    out[index] = item.copy(
        grocery_extra=item.grocery_extra + grocery_part,
        entertainment_extra=item.entertainment_extra + entertainment_part,
        savings_extra=item.savings_extra + savings_part,
    )
    return new_tx, out


def delete_extra_allocation(
    transactions: Transactions,
    data: Sequence[DataItem],
    index: int,
    alloc_index: int,
) -> Tuple[Transactions, List[DataItem]]:
    check_month_index(index, len(transactions.extra))
    entries = transactions.extra[index]
    if not 0 <= alloc_index < len(entries):
        raise IndexError(f"No extra allocation #{alloc_index} in month {index}.")
    alloc = entries[alloc_index]
    new_tx = transactions.copy()
    del new_tx.extra[index][alloc_index]
    out = list(data)
    item = data[index]
    out[index] = item.copy(
        grocery_extra=item.grocery_extra - alloc.grocery_part,
        entertainment_extra=item.entertainment_extra - alloc.entertainment_part,
        savings_extra=item.savings_extra - alloc.savings_part,
    )
    return new_tx, out


def month_totals(transactions: Transactions, index: int) -> MonthTotals:
    check_month_index(index, len(transactions.grocery))
    extra = transactions.extra[index]
    return MonthTotals(
        grocery=sum(t.amount for t in transactions.grocery[index]),
        entertainment=sum(t.amount for t in transactions.entertainment[index]),
        extra_grocery=sum(a.grocery_part for a in extra),
        extra_entertainment=sum(a.entertainment_part for a in extra),
        extra_savings=sum(a.savings_part for a in extra),
        n_grocery=len(transactions.grocery[index]),
        n_entertainment=len(transactions.entertainment[index]),
        n_extra=len(extra),
    )


def clear_month(transactions: Transactions, index: int) -> Transactions:
    """Drop every journal entry of one month (budgets and spent figures are left alone)."""
    check_month_index(index, len(transactions.grocery))
    new_tx = transactions.copy()
    new_tx.grocery[index] = []
    new_tx.entertainment[index] = []
    new_tx.extra[index] = []
    return new_tx
