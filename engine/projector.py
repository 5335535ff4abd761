"""
Monthly projector: pure fold over the month sequence.

Key design principles:
  1. Inputs are never mutated; entitlement locks come back as directives
  2. Pass 1 is an explicit fold: project_month(carried) -> (Projection, carried')
  3. One combined overspend figure per month (grocery + entertainment), not per category
  4. Overspend cascades: current savings -> carried total -> critical; the
     reduced carried total is what a non-manual month opens with
  5. Pass 2 needs the whole of pass 1 (previous-month remainders, rollover window)
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from typing import List, Optional, Sequence, Tuple

import pandas as pd

from core.config import DEFAULT_CONFIG, LedgerConfig
from core.models import DataItem, FixedExpense, MonthItem, Projection, VariableExpenses
from core.utils import as_timestamp, fixed_paid, fixed_total, fmt_amount

from .locks import LockDirective, entertainment_base

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProjectionResult:
    projections: List[Projection]
    locks: List[LockDirective]


def _require_horizon(n: int, data, variable_expenses: VariableExpenses, fixed) -> None:
    short = []
    if len(data) < n:
        short.append("data")
    for name in ("grocery_budget", "grocery_spent", "entertainment_spent"):
        if len(getattr(variable_expenses, name)) < n:
            short.append(f"variable_expenses.{name}")
    for f in fixed:
        if len(f.amounts) < n or len(f.paid_flags) < n:
            short.append(f"fixed[{f.id}]")
    if short:
        raise ValueError(f"Inputs shorter than the {n}-month sequence: {short}")


def project_month(
    index: int,
    carried: float,
    *,
    month: MonthItem,
    item: DataItem,
    fixed: Sequence[FixedExpense],
    variable_expenses: VariableExpenses,
    now: pd.Timestamp,
    config: LedgerConfig = DEFAULT_CONFIG,
) -> Tuple[Projection, float, Optional[LockDirective]]:
    """
    One step of the fold.

    ``carried`` is the previous month's total savings (the seed for index 0).
    Returns the month's projection, the total to carry forward and, when the
    month has just become lockable, a lock directive.
    """
    cur = config.currency
    fix_total = fixed_total(fixed, index)
    fix_paid = fixed_paid(fixed, index)

    groc_budget = variable_expenses.grocery_budget[index] + item.grocery_additions
    groc_spent = variable_expenses.grocery_spent[index]

    is_past = now >= month.calendar_date

    residual = (
        item.income + item.extra_income
        - item.planned_savings - item.savings_extra
        - groc_budget - fix_total
    )
    lock = None
    if is_past and not item.entertainment_lock.is_locked:
        lock = LockDirective(index=index, captured_value=residual)
    ent_budget = entertainment_base(item.entertainment_lock, residual) + item.entertainment_additions
    ent_spent = variable_expenses.entertainment_spent[index]

    overspend = max(0.0, (groc_spent - groc_budget) + (ent_spent - ent_budget))

    # Overspend cascade; a deficit is taken out of the carried total
    current_savings = item.planned_savings + item.savings_extra
    actual = current_savings - overspend
    consumed = 0.0
    critical = False
    warning = ""
    if overspend > 0:
        if overspend > current_savings:
            deficit = overspend - current_savings
            if carried >= deficit:
                consumed = deficit
                carried -= deficit
                actual = 0.0
                warning = (
                    f"Overspending by {fmt_amount(overspend)} {cur}. Current savings insufficient, "
                    f"consuming {fmt_amount(deficit)} {cur} from previous savings."
                )
            else:
                consumed = carried
                actual = -(deficit - carried)
                carried = 0.0
                critical = True
                warning = f"CRITICAL: Overspending by {fmt_amount(overspend)} {cur} exceeds all available savings!"
        else:
            warning = f"Overspending by {fmt_amount(overspend)} {cur}, reducing savings."

    # Opening balance for the month
    notes: List[str] = []
    stored_previous = item.previous_savings if item.previous_savings is not None else 0.0
    if index == 0:
        previous = stored_previous
    elif item.previous_savings_is_manual:
        previous = stored_previous
        if abs(previous - carried) > config.manual_discrepancy_tolerance:
            notes.append(
                f"Manual Previous ({fmt_amount(previous)}) differs from calculated ({fmt_amount(carried)})"
            )
    else:
        previous = carried

    computed_balance = item.income + item.extra_income + previous - groc_spent - ent_spent - fix_paid
    balance_is_manual = item.balance_override is not None
    balance = item.balance_override if balance_is_manual else computed_balance
    if balance_is_manual and abs(balance - computed_balance) > config.manual_discrepancy_tolerance:
        notes.append(
            f"Manual Balance ({fmt_amount(balance)}) differs from calculated ({fmt_amount(computed_balance)})"
        )

    total = previous + actual
    if total < 0 and not critical:
        critical = True
        warning = f"CRITICAL: Total savings cannot be negative ({fmt_amount(total)} {cur})"

    if critical:
        logger.info("Month %s critical: total savings %.2f", month.label, total)

    projection = Projection(
        label=month.label,
        calendar_date=month.calendar_date,
        income=item.income,
        resolved_previous=previous,
        planned_savings=item.planned_savings,
        actual_savings_delta=actual,
        total_savings=total,
        balance=balance,
        fixed_total=fix_total,
        fixed_paid=fix_paid,
        grocery_budget=groc_budget,
        grocery_spent=groc_spent,
        grocery_remaining=groc_budget - groc_spent,
        entertainment_budget=ent_budget,
        entertainment_spent=ent_spent,
        entertainment_remaining=ent_budget - ent_spent,
        overspend_amount=overspend,
        extra_income=item.extra_income,
        extra_savings_gap=max(0.0, item.baseline_planned_savings - item.planned_savings),
        is_past=is_past,
        previous_is_manual=item.previous_savings_is_manual,
        balance_is_manual=balance_is_manual,
        overspend_warning=" | ".join(p for p in [warning, *notes] if p),
        is_critical=critical,
        previous_savings_consumed=consumed,
    )
    return projection, total, lock


def rollover_days_remaining(
    month_date: pd.Timestamp, now: pd.Timestamp, grace_days: int = DEFAULT_CONFIG.rollover_grace_days
) -> int:
    deadline = pd.Timestamp(month_date) + pd.Timedelta(days=grace_days)
    return max(0, math.ceil((deadline - now) / pd.Timedelta(days=1)))


def _attach_rollover(
    projections: List[Projection],
    data: Sequence[DataItem],
    now: pd.Timestamp,
    config: LedgerConfig,
) -> List[Projection]:
    out = []
    for i, p in enumerate(projections):
        if i == 0:
            out.append(p)
            continue
        prior = projections[i - 1]
        groc_rem = max(0.0, prior.grocery_budget - prior.grocery_spent)
        ent_rem = max(0.0, prior.entertainment_budget - prior.entertainment_spent)
        out.append(replace(
            p,
            previous_month_grocery_remainder=groc_rem,
            previous_month_entertainment_remainder=ent_rem,
            has_rollover=p.is_past and not data[i].rollover_processed and (groc_rem > 0 or ent_rem > 0),
            rollover_days_remaining=rollover_days_remaining(p.calendar_date, now, config.rollover_grace_days),
        ))
    return out


def project_months(
    months: Sequence[MonthItem],
    data: Sequence[DataItem],
    fixed: Sequence[FixedExpense],
    variable_expenses: VariableExpenses,
    now=None,
    *,
    config: LedgerConfig = DEFAULT_CONFIG,
) -> ProjectionResult:
    """
    Project every month of the horizon.

    Parameters
    ----------
    months : sequence of MonthItem
        Month calendar; the output has one projection per entry
    data, fixed, variable_expenses
        Raw model, read only
    now : timestamp-like, optional
        Evaluation instant (defaults to the current time); decides which months
        are past, lockable and still inside their rollover window

    Returns
    -------
    ProjectionResult with ``projections`` and the newly triggered ``locks``.
    """
    n = len(months)
    _require_horizon(n, data, variable_expenses, fixed)
    now_ts = as_timestamp(now)

    carried = data[0].previous_savings if n and data[0].previous_savings is not None else 0.0
    projections: List[Projection] = []
    locks: List[LockDirective] = []
    for i in range(n):
        projection, carried, lock = project_month(
            i,
            carried,
            month=months[i],
            item=data[i],
            fixed=fixed,
            variable_expenses=variable_expenses,
            now=now_ts,
            config=config,
        )
        projections.append(projection)
        if lock is not None:
            locks.append(lock)

    if locks:
        logger.debug("Projection produced %d lock directives", len(locks))
    return ProjectionResult(projections=_attach_rollover(projections, data, now_ts, config), locks=locks)
