import numpy as np
import pandas as pd
import pytest

from core import DEFAULT_CONFIG, MonthRangeError, build_months, check_month_index
from core.utils import fixed_totals_by_month, month_index_of


def test_default_month_sequence():
    months = build_months()

    assert len(months) == DEFAULT_CONFIG.horizon_months
    assert months[0].label == "Dec 2025"
    assert months[1].label == "Jan 2026"
    assert months[-1].label == "Nov 2030"
    assert all(m.day_of_month == 25 for m in months)
    assert months[2].calendar_date == pd.Timestamp(2026, 2, 25)


def test_month_end_anchor_clamps_to_short_months():
    months = build_months(pd.Timestamp(2026, 1, 31), 3)
    assert [m.calendar_date.day for m in months] == [31, 28, 31]


def test_month_index_lookup(months):
    assert month_index_of("Mar 2026", months) == 3
    assert month_index_of("Mar 1999", months) == -1


def test_check_month_index():
    assert check_month_index(59) == 59
    with pytest.raises(MonthRangeError) as exc:
        check_month_index(60)
    assert exc.value.index == 60
    assert isinstance(exc.value, IndexError)


def test_fixed_totals_by_month(make_fixed):
    fixed = [make_fixed(1, "Rent", 9000), make_fixed(2, "Phone", 300)]
    totals = fixed_totals_by_month(fixed, 60)
    assert totals.shape == (60,)
    assert np.all(totals == 9300)
    assert np.all(fixed_totals_by_month([], 4) == 0)
