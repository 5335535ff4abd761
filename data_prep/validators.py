"""
Sanitizing validation for persisted financial documents.

A corrupted or incomplete document must never crash the ledger:
- malformed numeric fields fall back to 0 (None for nullable ones)
- per-month arrays are padded / truncated to the horizon
- malformed fixed-expense records get sequential ids
- a non-boolean auto-rollover flag becomes False

Every substitution is reported in ``errors``; ``value`` is always usable.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import numpy as np

from core.models import (
    DataItem,
    ExtraAllocation,
    FinancialDocument,
    FixedExpense,
    Transaction,
    Transactions,
    VariableExpenses,
)
from core.schema import (
    DATA_ITEM_BOOL_FIELDS,
    DATA_ITEM_NUMERIC_FIELDS,
    HORIZON_MONTHS,
    VARIABLE_EXPENSE_FIELDS,
)
from engine.locks import lock_from_persisted

logger = logging.getLogger(__name__)

# extras are added later in a document's life; absent is fine, malformed is not
_OPTIONAL_NUMERIC = {"groceryExtra", "entertainmentExtra", "savingsExtra"}


@dataclass
class ValidationResult:
    """Collects all validation errors/warnings plus the sanitized value."""
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    value: Any = None

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def summary(self) -> str:
        lines = []
        if self.errors:
            lines.append(f"ERRORS ({len(self.errors)}):")
            for e in self.errors:
                lines.append(f"  ✗ {e}")
        if self.warnings:
            lines.append(f"WARNINGS ({len(self.warnings)}):")
            for w in self.warnings:
                lines.append(f"  ⚠ {w}")
        if not lines:
            lines.append("✓ All checks passed.")
        return "\n".join(lines)


def _is_number(v: Any) -> bool:
    if not isinstance(v, (int, float)) or isinstance(v, bool):
        return False
    try:
        return bool(np.isfinite(float(v)))
    except OverflowError:  # ints beyond float range
        return False


def _number_array(raw: Any, ctx: str, errors: List[str], n: int) -> List[float]:
    if not isinstance(raw, list):
        errors.append(f"{ctx} missing or invalid")
        return [0.0] * n
    if len(raw) != n:
        errors.append(f"{ctx} length {len(raw)}, expected {n}")
    vals = [float(v) if _is_number(v) else 0.0 for v in raw[:n]]
    n_bad = sum(1 for v in raw[:n] if not _is_number(v))
    if n_bad:
        errors.append(f"{ctx} has {n_bad} non-numeric entries")
    return vals + [0.0] * (n - len(vals))


def _bool_array(raw: Any, ctx: str, errors: List[str], n: int) -> List[bool]:
    if not isinstance(raw, list):
        errors.append(f"{ctx} missing or invalid")
        return [False] * n
    if len(raw) != n:
        errors.append(f"{ctx} length {len(raw)}, expected {n}")
    vals = [v if isinstance(v, bool) else False for v in raw[:n]]
    return vals + [False] * (n - len(vals))


def _nullable_number(obj: Dict[str, Any], key: str, ctx: str, errors: List[str]) -> Optional[float]:
    v = obj.get(key)
    if v is None:
        return None
    if _is_number(v):
        return float(v)
    errors.append(f"{ctx}.{key} invalid")
    return None


def sanitize_data_item(raw: Any, idx: int, errors: List[str]) -> DataItem:
    ctx = f"DataItem[{idx}]"
    if not isinstance(raw, dict):
        errors.append(f"{ctx} is not an object")
        raw = {}

    kwargs: Dict[str, Any] = {}
    for key, attr in DATA_ITEM_NUMERIC_FIELDS:
        v = raw.get(key)
        if _is_number(v):
            kwargs[attr] = float(v)
            continue
        kwargs[attr] = 0.0
        if key not in _OPTIONAL_NUMERIC or v is not None:
            errors.append(f"{ctx}.{key} missing or invalid")

    for key, attr in DATA_ITEM_BOOL_FIELDS:
        v = raw.get(key)
        kwargs[attr] = v if isinstance(v, bool) else False
        if not isinstance(v, bool):
            errors.append(f"{ctx}.{key} missing or invalid")

    kwargs["previous_savings"] = _nullable_number(raw, "previousSavings", ctx, errors)
    kwargs["balance_override"] = _nullable_number(raw, "balanceOverride", ctx, errors)

    locked_flag = raw.get("entertainmentBudgetLocked", False)
    locked_value = raw.get("lockedEntertainmentBudget")
    if locked_flag is True and not _is_number(locked_value):
        errors.append(f"{ctx} is locked without a valid lockedEntertainmentBudget; unlocking")
    kwargs["entertainment_lock"] = lock_from_persisted(
        locked_flag, float(locked_value) if _is_number(locked_value) else None
    )
    return DataItem(**kwargs)


def sanitize_fixed_expense(raw: Any, idx: int, errors: List[str], n: int = HORIZON_MONTHS) -> FixedExpense:
    ctx = f"FixedExpense[{idx}]"
    if not isinstance(raw, dict):
        errors.append(f"{ctx} is not an object")
        raw = {}
    fid = raw.get("id")
    if not (_is_number(fid) and float(fid).is_integer()):
        errors.append(f"{ctx}.id missing or invalid")
        fid = idx + 1
    name = raw.get("name")
    if not isinstance(name, str):
        errors.append(f"{ctx}.name missing or invalid")
        name = f"Expense {idx + 1}"
    return FixedExpense(
        id=int(fid),
        name=name,
        amounts=_number_array(raw.get("amounts"), f"{ctx}.amounts", errors, n),
        paid_flags=_bool_array(raw.get("paidFlags"), f"{ctx}.paidFlags", errors, n),
    )


def sanitize_variable_expenses(raw: Any, errors: List[str], n: int = HORIZON_MONTHS) -> VariableExpenses:
    if not isinstance(raw, dict):
        errors.append("VariableExpenses is not an object")
        raw = {}
    return VariableExpenses(**{
        attr: _number_array(raw.get(key), f"VariableExpenses.{key}", errors, n)
        for key, attr in VARIABLE_EXPENSE_FIELDS
    })


def _month_lists(raw: Any, ctx: str, errors: List[str], n: int) -> List[list]:
    """Accept both list-per-month and {"<month>": [...]} layouts."""
    months: List[list] = [[] for _ in range(n)]
    if raw is None:
        return months
    if isinstance(raw, list):
        items = enumerate(raw)
    elif isinstance(raw, dict):
        items = []
        for k, v in raw.items():
            if isinstance(k, str) and k.isdigit():
                items.append((int(k), v))
            else:
                errors.append(f"{ctx} has non-month key {k!r}")
    else:
        errors.append(f"{ctx} invalid shape")
        return months
    for i, entries in items:
        if not 0 <= i < n:
            errors.append(f"{ctx} month {i} outside horizon")
            continue
        if isinstance(entries, list):
            months[i] = list(entries)
        else:
            errors.append(f"{ctx}[{i}] is not a list")
    return months


def _transaction(raw: Any) -> Optional[Transaction]:
    if _is_number(raw):  # legacy: bare amounts
        return Transaction(amount=float(raw), timestamp="")
    if isinstance(raw, dict) and _is_number(raw.get("amount")):
        ts = raw.get("timestamp")
        return Transaction(amount=float(raw["amount"]), timestamp=ts if isinstance(ts, str) else "")
    return None


def _allocation(raw: Any) -> Optional[ExtraAllocation]:
    if not isinstance(raw, dict):
        return None
    parts = [raw.get(k) for k in ("groceryPart", "entertainmentPart", "savingsPart")]
    if not all(_is_number(p) for p in parts):
        return None
    ts = raw.get("timestamp")
    return ExtraAllocation(*(float(p) for p in parts), timestamp=ts if isinstance(ts, str) else "")


def sanitize_transactions(raw: Any, errors: List[str], n: int = HORIZON_MONTHS) -> Transactions:
    if raw is None:
        return Transactions()
    if not isinstance(raw, dict):
        errors.append("Transactions invalid shape")
        return Transactions()

    out = {}
    for key, parse in (("grocery", _transaction), ("entertainment", _transaction), ("extra", _allocation)):
        ctx = f"Transactions.{key}"
        per_month = _month_lists(raw.get(key), ctx, errors, n)
        parsed = []
        for i, entries in enumerate(per_month):
            good = [p for p in (parse(e) for e in entries) if p is not None]
            if len(good) != len(entries):
                errors.append(f"{ctx}[{i}] dropped {len(entries) - len(good)} malformed entries")
            parsed.append(good)
        out[key] = parsed
    return Transactions(**out)


def sanitize_document(raw: Any, n: int = HORIZON_MONTHS) -> ValidationResult:
    """
    Coerce a persisted document into a well-formed FinancialDocument.

    Returns a ValidationResult whose ``value`` is always fully usable; ``errors``
    lists every default that had to be substituted.
    """
    result = ValidationResult()
    errors = result.errors

    if not isinstance(raw, dict):
        errors.append("Financial document is not an object")
        result.value = FinancialDocument(
            data=[DataItem() for _ in range(n)],
            fixed=[],
            variable_expenses=VariableExpenses(**{a: [0.0] * n for _, a in VARIABLE_EXPENSE_FIELDS}),
        )
        return result

    raw_data = raw.get("data")
    if not isinstance(raw_data, list):
        errors.append("data missing or invalid")
        raw_data = []
    elif len(raw_data) != n:
        errors.append(f"data length {len(raw_data)}, expected {n}")
    data = [sanitize_data_item(raw_data[i] if i < len(raw_data) else {}, i, errors) for i in range(n)]

    raw_fixed = raw.get("fixed", [])
    if not isinstance(raw_fixed, list):
        errors.append("fixed invalid")
        raw_fixed = []
    fixed = [sanitize_fixed_expense(f, i, errors, n) for i, f in enumerate(raw_fixed)]
    ids = [f.id for f in fixed]
    if len(set(ids)) != len(ids):
        result.warnings.append("Duplicate fixed expense ids found.")

    auto = raw.get("autoRolloverEnabled", False)
    if not isinstance(auto, bool):
        errors.append("autoRolloverEnabled invalid")
        auto = False

    result.value = FinancialDocument(
        data=data,
        fixed=fixed,
        variable_expenses=sanitize_variable_expenses(raw.get("variableExpenses"), errors, n),
        transactions=sanitize_transactions(raw.get("transactions"), errors, n),
        auto_rollover_enabled=auto,
    )
    if errors:
        logger.warning("Sanitized financial document: %d problems", len(errors))
    return result
