"""
Compensation ledger: fund an overspending transaction from another source.

Sources, in the order they are offered:
  1. the other variable category's remaining budget
  2. the month's planned savings
  3. previous (accumulated) savings

Budget and planned-savings sources move *room*: the target category's budget
grows. Previous savings pay for the purchase itself: the target's *spent*
shrinks instead. ``reverse_compensation`` is the exact inverse of
``apply_compensation`` for any amount ``check_overspend`` offered.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from core.models import Compensation, DataItem, VariableExpenses
from core.schema import CATEGORIES, COMPENSATION_SOURCES
from core.utils import check_month_index

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AvailableSource:
    source: str
    available: float


@dataclass(frozen=True)
class CompensationCheck:
    would_overspend: bool
    overspend_amount: float
    available_sources: List[AvailableSource] = field(default_factory=list)


@dataclass(frozen=True)
class CompensationOutcome:
    variable_expenses: VariableExpenses
    data_item: DataItem
    compensation: Compensation


def _other(category: str) -> str:
    return "entertainment" if category == "grocery" else "grocery"


def _require_category(category: str, what: str = "category") -> None:
    if category not in CATEGORIES:
        raise ValueError(f"Unknown {what} {category!r}; expected one of {CATEGORIES}.")


def _remaining(category: str, index: int, ve: VariableExpenses, item: DataItem) -> float:
    additions = item.grocery_additions if category == "grocery" else item.entertainment_additions
    return ve.budget(category)[index] + additions - ve.spent(category)[index]


def check_overspend(
    category: str,
    amount: float,
    index: int,
    variable_expenses: VariableExpenses,
    data_item: DataItem,
) -> CompensationCheck:
    """Would booking ``amount`` on ``category`` overspend it, and what could cover the gap."""
    _require_category(category)
    check_month_index(index, len(variable_expenses.grocery_budget))

    remaining = _remaining(category, index, variable_expenses, data_item)
    overspend = max(0.0, amount - remaining)
    if overspend <= 0:
        return CompensationCheck(would_overspend=False, overspend_amount=0.0)

    # No partial compensation: a source is offered only if it covers the whole gap
    candidates = [
        (_other(category), _remaining(_other(category), index, variable_expenses, data_item)),
        ("savings", data_item.planned_savings),
        ("previous_savings", data_item.previous_savings or 0.0),
    ]
    sources = [AvailableSource(s, avail) for s, avail in candidates if avail >= overspend]
    return CompensationCheck(would_overspend=True, overspend_amount=overspend, available_sources=sources)


def _validate_move(source: str, target: str) -> None:
    if source not in COMPENSATION_SOURCES:
        raise ValueError(f"Unknown compensation source {source!r}.")
    _require_category(target, "target")
    if source == target:
        raise ValueError("Compensation source and target must differ.")


def _taken(prior: float, amount: float) -> Tuple[float, float]:
    """(value left, amount actually removed) when ``amount`` is drawn from ``prior``, floored at 0."""
    left = max(0.0, prior - amount)
    return left, prior - left


def apply_compensation(
    source: str,
    amount: float,
    index: int,
    variable_expenses: VariableExpenses,
    data_item: DataItem,
    target: str,
) -> CompensationOutcome:
    """Fund ``amount`` of overspend on ``target`` from ``source``; returns fresh state."""
    _validate_move(source, target)
    check_month_index(index, len(variable_expenses.grocery_budget))

    ve = variable_expenses.copy()
    item = data_item.copy()

    if source in CATEGORIES:
        src = ve.budget(source)
        record = Compensation(source=source, amount=amount, prior_value=src[index])
        src[index], _ = _taken(src[index], amount)
        ve.budget(target)[index] += amount
    elif source == "savings":
        record = Compensation(source=source, amount=amount, prior_value=item.planned_savings)
        item.planned_savings, _ = _taken(item.planned_savings, amount)
        ve.budget(target)[index] += amount
    else:
        record = Compensation(
            source=source,
            amount=amount,
            prior_value=data_item.previous_savings,
            prior_is_manual=data_item.previous_savings_is_manual,
        )
        item.previous_savings, _ = _taken(item.previous_savings or 0.0, amount)
        item.previous_savings_is_manual = True
        ve.spent(target)[index] -= amount

    logger.debug("Compensated %.2f of %s overspend in month %d from %s", amount, target, index, source)
    return CompensationOutcome(variable_expenses=ve, data_item=item, compensation=record)


def _restore(prior: Optional[float], current: float, amount: float) -> Tuple[float, bool]:
    """
    Source value once the draw is undone, and whether the snapshot was restored.

    An untouched source gets its snapshot back; one edited since apply gets
    back only what was actually removed from it.
    """
    if prior is None:
        return current + amount, False
    left, removed = _taken(prior, amount)
    if current == left:
        return prior, True
    return current + removed, False


def reverse_compensation(
    compensation: Compensation,
    index: int,
    variable_expenses: VariableExpenses,
    data_item: DataItem,
    target: str,
) -> CompensationOutcome:
    """Undo ``compensation`` (e.g. when its transaction is edited or deleted)."""
    source, amount = compensation.source, compensation.amount
    _validate_move(source, target)
    check_month_index(index, len(variable_expenses.grocery_budget))

    ve = variable_expenses.copy()
    item = data_item.copy()

    if source in CATEGORIES:
        src = ve.budget(source)
        src[index], _ = _restore(compensation.prior_value, src[index], amount)
        ve.budget(target)[index] -= amount
    elif source == "savings":
        item.planned_savings, _ = _restore(compensation.prior_value, item.planned_savings, amount)
        ve.budget(target)[index] -= amount
    else:
        current = item.previous_savings or 0.0
        if compensation.prior_is_manual is None:
            item.previous_savings, restored = current + amount, False
        else:
            item.previous_savings, restored = _restore(compensation.prior_value or 0.0, current, amount)
        if restored:
            item.previous_savings = compensation.prior_value
            item.previous_savings_is_manual = compensation.prior_is_manual
        else:
            item.previous_savings_is_manual = True
        ve.spent(target)[index] += amount

    logger.debug("Reversed %.2f %s compensation in month %d", amount, source, index)
    return CompensationOutcome(variable_expenses=ve, data_item=item, compensation=compensation)
