"""
Per-month data model shared by every component.

Raw inputs (DataItem, FixedExpense, VariableExpenses, Transactions) are what the
storage collaborator persists; Projection is derived and never written back.
Operations that change raw state build new objects through the ``copy`` helpers
below, so callers can keep the previous state around for undo.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import List, Optional, Union

import pandas as pd

from .schema import HORIZON_MONTHS


@dataclass(frozen=True)
class MonthItem:
    label: str
    calendar_date: pd.Timestamp
    day_of_month: int


# --- Entitlement lock: tagged state, a locked month always carries its value ---

@dataclass(frozen=True)
class Unlocked:
    @property
    def is_locked(self) -> bool:
        return False


@dataclass(frozen=True)
class Locked:
    value: float

    @property
    def is_locked(self) -> bool:
        return True


EntitlementLock = Union[Unlocked, Locked]
UNLOCKED = Unlocked()


@dataclass
class DataItem:
    income: float = 0.0
    previous_savings: Optional[float] = None
    previous_savings_is_manual: bool = False
    planned_savings: float = 0.0
    baseline_planned_savings: float = 0.0
    extra_income: float = 0.0
    grocery_bonus: float = 0.0
    entertainment_bonus: float = 0.0
    grocery_extra: float = 0.0
    entertainment_extra: float = 0.0
    savings_extra: float = 0.0
    rollover_processed: bool = False
    entertainment_lock: EntitlementLock = UNLOCKED
    balance_override: Optional[float] = None

    def copy(self, **changes) -> "DataItem":
        return replace(self, **changes)

    @property
    def grocery_additions(self) -> float:
        return self.grocery_bonus + self.grocery_extra

    @property
    def entertainment_additions(self) -> float:
        return self.entertainment_bonus + self.entertainment_extra


@dataclass
class FixedExpense:
    id: int
    name: str
    amounts: List[float] = field(default_factory=lambda: [0.0] * HORIZON_MONTHS)
    paid_flags: List[bool] = field(default_factory=lambda: [False] * HORIZON_MONTHS)

    def copy(self) -> "FixedExpense":
        return FixedExpense(self.id, self.name, list(self.amounts), list(self.paid_flags))


@dataclass
class VariableExpenses:
    grocery_budget: List[float] = field(default_factory=lambda: [0.0] * HORIZON_MONTHS)
    grocery_spent: List[float] = field(default_factory=lambda: [0.0] * HORIZON_MONTHS)
    entertainment_budget: List[float] = field(default_factory=lambda: [0.0] * HORIZON_MONTHS)
    entertainment_spent: List[float] = field(default_factory=lambda: [0.0] * HORIZON_MONTHS)

    def copy(self) -> "VariableExpenses":
        return VariableExpenses(
            grocery_budget=list(self.grocery_budget),
            grocery_spent=list(self.grocery_spent),
            entertainment_budget=list(self.entertainment_budget),
            entertainment_spent=list(self.entertainment_spent),
        )

    def budget(self, category: str) -> List[float]:
        return getattr(self, f"{category}_budget")

    def spent(self, category: str) -> List[float]:
        return getattr(self, f"{category}_spent")


@dataclass(frozen=True)
class Split:
    """A (savings, grocery, entertainment) allocation triple."""
    savings: float = 0.0
    grocery: float = 0.0
    entertainment: float = 0.0

    @property
    def total(self) -> float:
        return self.savings + self.grocery + self.entertainment


@dataclass(frozen=True)
class Transaction:
    amount: float
    timestamp: str


@dataclass(frozen=True)
class ExtraAllocation:
    grocery_part: float
    entertainment_part: float
    savings_part: float
    timestamp: str


def _empty_months() -> list:
    return [[] for _ in range(HORIZON_MONTHS)]


@dataclass
class Transactions:
    grocery: List[List[Transaction]] = field(default_factory=_empty_months)
    entertainment: List[List[Transaction]] = field(default_factory=_empty_months)
    extra: List[List[ExtraAllocation]] = field(default_factory=_empty_months)

    def copy(self) -> "Transactions":
        return Transactions(
            grocery=[list(m) for m in self.grocery],
            entertainment=[list(m) for m in self.entertainment],
            extra=[list(m) for m in self.extra],
        )


@dataclass(frozen=True)
class Compensation:
    """
    A reversible funding record.

    ``prior_value`` snapshots the source's stored value before the move (the
    category's base budget, planned savings or previous savings) and
    ``prior_is_manual`` the previous-savings manual flag, so the reversal can
    restore them exactly (including a None "auto" previous savings).
    """
    source: str
    amount: float
    prior_value: Optional[float] = None
    prior_is_manual: Optional[bool] = None


@dataclass
class FinancialDocument:
    data: List[DataItem]
    fixed: List[FixedExpense]
    variable_expenses: VariableExpenses
    transactions: Transactions = field(default_factory=Transactions)
    auto_rollover_enabled: bool = False


@dataclass(frozen=True)
class Projection:
    """Derived, read-only snapshot of one month."""
    label: str
    calendar_date: pd.Timestamp
    income: float
    resolved_previous: float
    planned_savings: float
    actual_savings_delta: float
    total_savings: float
    balance: float
    fixed_total: float
    fixed_paid: float
    grocery_budget: float
    grocery_spent: float
    grocery_remaining: float
    entertainment_budget: float
    entertainment_spent: float
    entertainment_remaining: float
    overspend_amount: float
    extra_income: float
    extra_savings_gap: float
    is_past: bool
    previous_is_manual: bool
    balance_is_manual: bool
    overspend_warning: str
    is_critical: bool
    previous_savings_consumed: float = 0.0
    previous_month_grocery_remainder: Optional[float] = None
    previous_month_entertainment_remainder: Optional[float] = None
    has_rollover: bool = False
    rollover_days_remaining: Optional[int] = None

    @property
    def rollover_amount(self) -> float:
        return (self.previous_month_grocery_remainder or 0.0) + (
            self.previous_month_entertainment_remainder or 0.0
        )
