import pandas as pd
import pytest

from core import DataItem, FixedExpense, VariableExpenses, build_months

ANCHOR = pd.Timestamp(2025, 12, 25)


@pytest.fixture
def months():
    return build_months(ANCHOR)


@pytest.fixture
def make_data():
    def _make(n=60, **fields):
        return [DataItem(**fields) for _ in range(n)]
    return _make


@pytest.fixture
def make_ve():
    def _make(n=60):
        return VariableExpenses(
            grocery_budget=[0.0] * n,
            grocery_spent=[0.0] * n,
            entertainment_budget=[0.0] * n,
            entertainment_spent=[0.0] * n,
        )
    return _make


@pytest.fixture
def make_fixed():
    def _make(expense_id=1, name="Rent", amount=0.0, n=60, paid=False):
        return FixedExpense(expense_id, name, [float(amount)] * n, [paid] * n)
    return _make
