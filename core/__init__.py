"""
Core package: schema constants, configuration, data model and shared utilities.
No business logic lives here.
"""

from .schema import HORIZON_MONTHS, CATEGORIES, COMPENSATION_SOURCES, REBALANCE_STRATEGIES
from .config import LedgerConfig, DEFAULT_CONFIG
from .errors import MonthRangeError, RebalanceError
from .models import (
    MonthItem,
    DataItem,
    FixedExpense,
    VariableExpenses,
    Transaction,
    ExtraAllocation,
    Transactions,
    Compensation,
    FinancialDocument,
    Projection,
    Split,
    Unlocked,
    Locked,
    UNLOCKED,
)
from .utils import build_months, check_month_index, fixed_total, fixed_paid

__all__ = [
    "HORIZON_MONTHS",
    "CATEGORIES",
    "COMPENSATION_SOURCES",
    "REBALANCE_STRATEGIES",
    "LedgerConfig",
    "DEFAULT_CONFIG",
    "MonthRangeError",
    "RebalanceError",
    "MonthItem",
    "DataItem",
    "FixedExpense",
    "VariableExpenses",
    "Transaction",
    "ExtraAllocation",
    "Transactions",
    "Compensation",
    "FinancialDocument",
    "Projection",
    "Split",
    "Unlocked",
    "Locked",
    "UNLOCKED",
    "build_months",
    "check_month_index",
    "fixed_total",
    "fixed_paid",
]
