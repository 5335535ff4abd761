from __future__ import annotations

from typing import Tuple

# Fixed planning horizon: every per-month array carries exactly this many entries.
HORIZON_MONTHS: int = 60

# Variable-expense categories a transaction can be booked against.
CATEGORIES: Tuple[str, ...] = ("grocery", "entertainment")

# Funding sources a compensation can draw from, in check priority order
# (the "other category" slot is resolved per transaction).
COMPENSATION_SOURCES: Tuple[str, ...] = (
    "grocery",
    "entertainment",
    "savings",
    "previous_savings",
)

REBALANCE_STRATEGIES: Tuple[str, ...] = (
    "adjust-savings",
    "adjust-grocery",
    "adjust-entertainment",
    "equal-split",
    "manual",
)

# Persisted document keys (camelCase, as written by the storage collaborator).
DATA_ITEM_NUMERIC_FIELDS: Tuple[Tuple[str, str], ...] = (
    ("income", "income"),
    ("plannedSavings", "planned_savings"),
    ("baselinePlannedSavings", "baseline_planned_savings"),
    ("extraIncome", "extra_income"),
    ("groceryBonus", "grocery_bonus"),
    ("entertainmentBonus", "entertainment_bonus"),
    ("groceryExtra", "grocery_extra"),
    ("entertainmentExtra", "entertainment_extra"),
    ("savingsExtra", "savings_extra"),
)

DATA_ITEM_BOOL_FIELDS: Tuple[Tuple[str, str], ...] = (
    ("previousSavingsIsManual", "previous_savings_is_manual"),
    ("rolloverProcessed", "rollover_processed"),
)

VARIABLE_EXPENSE_FIELDS: Tuple[Tuple[str, str], ...] = (
    ("groceryBudget", "grocery_budget"),
    ("grocerySpent", "grocery_spent"),
    ("entertainmentBudget", "entertainment_budget"),
    ("entertainmentSpent", "entertainment_spent"),
)
