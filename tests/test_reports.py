import pandas as pd
import pytest

from balance import compute_issues
from core import DataItem
from engine import project_months
from reports import issues_to_frame, projections_to_frame, summarize_horizon

BEFORE_ANCHOR = pd.Timestamp(2025, 1, 1)


@pytest.fixture
def projections(months, make_data, make_ve):
    data = make_data(income=10000, planned_savings=2000)
    data[0] = data[0].copy(previous_savings=500)
    ve = make_ve()
    ve.grocery_budget = [3000.0] * 60
    ve.grocery_spent[4] = 16000  # 8000 over once the unused entertainment budget is netted
    return project_months(months, data, [], ve, now=BEFORE_ANCHOR).projections


def test_projections_to_frame(projections):
    df = projections_to_frame(projections)
    assert len(df) == 60
    assert df.index[0] == "Dec 2025"
    assert df.loc["Apr 2026", "overspend_amount"] == 8000
    assert df["grocery_remaining"].iloc[0] == 3000


def test_empty_projection_frame():
    df = projections_to_frame([])
    assert df.empty
    assert "total_savings" in df.columns


def test_summarize_horizon(projections):
    summary = summarize_horizon(projections)

    assert summary.n_months == 60
    assert summary.overspend_months == ["Apr 2026"]
    assert summary.total_overspend == 8000
    assert summary.final_total_savings == projections[-1].total_savings
    assert summary.lowest_savings_month == "Dec 2025"

    table = summary.to_dataframe()
    assert list(table.columns) == ["Metric", "Value"]
    assert "Final Total Savings" in set(table["Metric"])


def test_summarize_rejects_empty():
    with pytest.raises(ValueError):
        summarize_horizon([])


def test_issues_to_frame(months, make_data, make_ve):
    data = make_data()
    data[2] = DataItem(income=100)
    frame = issues_to_frame(compute_issues(data, make_ve(), [], months))
    assert list(frame["Issue"]) == [
        "Month Feb 2026: Total budgets (0 SEK) are 100 SEK below available balance (100 SEK). "
        "Please allocate all available funds."
    ]
