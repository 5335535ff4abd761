from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Union

from core.models import DataItem, FinancialDocument, FixedExpense
from core.schema import DATA_ITEM_BOOL_FIELDS, DATA_ITEM_NUMERIC_FIELDS, VARIABLE_EXPENSE_FIELDS
from engine.locks import lock_to_persisted

from .validators import ValidationResult, sanitize_document


def load_document(path: Union[str, Path]) -> ValidationResult:
    """
    Load a persisted financial document (JSON) and sanitize it.
    """
    with open(path, "r", encoding="utf-8") as fh:
        raw = json.load(fh)
    return sanitize_document(raw)


def _data_item_to_dict(item: DataItem) -> Dict[str, Any]:
    out: Dict[str, Any] = {key: getattr(item, attr) for key, attr in DATA_ITEM_NUMERIC_FIELDS}
    out.update({key: getattr(item, attr) for key, attr in DATA_ITEM_BOOL_FIELDS})
    out["previousSavings"] = item.previous_savings
    out["balanceOverride"] = item.balance_override
    out.update(lock_to_persisted(item.entertainment_lock))
    return out


def _fixed_to_dict(f: FixedExpense) -> Dict[str, Any]:
    return {"id": f.id, "name": f.name, "amounts": list(f.amounts), "paidFlags": list(f.paid_flags)}


def document_to_dict(doc: FinancialDocument) -> Dict[str, Any]:
    """Inverse of sanitize_document for a well-formed document; transactions keyed by month."""
    tx = doc.transactions
    return {
        "data": [_data_item_to_dict(d) for d in doc.data],
        "fixed": [_fixed_to_dict(f) for f in doc.fixed],
        "variableExpenses": {
            key: list(getattr(doc.variable_expenses, attr)) for key, attr in VARIABLE_EXPENSE_FIELDS
        },
        "transactions": {
            "grocery": {
                str(i): [{"amount": t.amount, "timestamp": t.timestamp} for t in m]
                for i, m in enumerate(tx.grocery) if m
            },
            "entertainment": {
                str(i): [{"amount": t.amount, "timestamp": t.timestamp} for t in m]
                for i, m in enumerate(tx.entertainment) if m
            },
            "extra": {
                str(i): [
                    {
                        "groceryPart": a.grocery_part,
                        "entertainmentPart": a.entertainment_part,
                        "savingsPart": a.savings_part,
                        "timestamp": a.timestamp,
                    }
                    for a in m
                ]
                for i, m in enumerate(tx.extra) if m
            },
        },
        "autoRolloverEnabled": doc.auto_rollover_enabled,
    }


def dump_document(doc: FinancialDocument, path: Union[str, Path]) -> None:
    with open(path, "w", encoding="utf-8") as fh:
        json.dump(document_to_dict(doc), fh, indent=2)
