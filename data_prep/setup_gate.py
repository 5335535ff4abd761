from __future__ import annotations

from core.models import FinancialDocument


def has_any_financial_data(doc: FinancialDocument) -> bool:
    """
    True once the document holds anything a user entered.
    The host uses this to decide whether to open the setup wizard.
    """
    has_data = any(
        d.income > 0
        or d.planned_savings > 0
        or (d.previous_savings or 0) > 0
        or d.extra_income > 0
        or d.grocery_bonus > 0
        or d.entertainment_bonus > 0
        for d in doc.data
    )
    has_fixed = any(a > 0 for f in doc.fixed for a in f.amounts)
    ve = doc.variable_expenses
    has_var = any(
        v > 0
        for arr in (ve.grocery_budget, ve.entertainment_budget, ve.grocery_spent, ve.entertainment_spent)
        for v in arr
    )
    tx = doc.transactions
    has_tx = any(m for m in tx.grocery) or any(m for m in tx.entertainment) or any(m for m in tx.extra)
    return has_data or has_fixed or has_var or has_tx
