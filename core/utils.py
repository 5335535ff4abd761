from __future__ import annotations

from typing import Iterable, List, Sequence

import numpy as np
import pandas as pd
from dateutil.relativedelta import relativedelta

from .config import DEFAULT_CONFIG
from .errors import MonthRangeError
from .models import FixedExpense, MonthItem
from .schema import HORIZON_MONTHS


def build_months(
    anchor: pd.Timestamp = DEFAULT_CONFIG.anchor_date,
    n_months: int = DEFAULT_CONFIG.horizon_months,
) -> List[MonthItem]:
    """Generate the month sequence, stepping one calendar month from the anchor date."""
    base = pd.Timestamp(anchor).normalize()
    months = []
    for k in range(n_months):
        d = pd.Timestamp(base + relativedelta(months=k))
        months.append(MonthItem(label=d.strftime("%b %Y"), calendar_date=d, day_of_month=d.day))
    return months


def check_month_index(index: int, horizon: int = HORIZON_MONTHS) -> int:
    if not 0 <= index < horizon:
        raise MonthRangeError(index, horizon)
    return index


def month_index_of(label: str, months: Sequence[MonthItem]) -> int:
    """Index of the month carrying ``label``, or -1."""
    for i, m in enumerate(months):
        if m.label == label:
            return i
    return -1


def fixed_total(fixed: Iterable[FixedExpense], index: int) -> float:
    return sum(f.amounts[index] for f in fixed)


def fixed_paid(fixed: Iterable[FixedExpense], index: int) -> float:
    return sum(f.amounts[index] for f in fixed if f.paid_flags[index])


def fixed_totals_by_month(fixed: Sequence[FixedExpense], n_months: int) -> np.ndarray:
    """Vector of Σ fixed amounts per month (zeros when there are no fixed expenses)."""
    if not fixed:
        return np.zeros(n_months, dtype=float)
    mat = np.array([f.amounts[:n_months] for f in fixed], dtype=float)
    return mat.sum(axis=0)


def as_timestamp(now=None) -> pd.Timestamp:
    return pd.Timestamp.now() if now is None else pd.Timestamp(now)


def fmt_amount(x: float) -> str:
    """Whole-unit display used in warnings and issue messages."""
    return f"{x:.0f}"
