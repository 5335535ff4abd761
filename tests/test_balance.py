import pytest

from balance import apply_across_months, compute_issues, extract_issue_indices, validate_balance
from core import DataItem, MonthRangeError, RebalanceError, Split


@pytest.fixture
def unbalanced(make_data, make_ve, make_fixed):
    """Months 1 and 3 allocate 22000 against 20000 available."""
    data = make_data()
    ve = make_ve()
    fixed = [make_fixed(amount=0)]
    for i in (1, 3):
        data[i] = DataItem(income=25000, planned_savings=5000)
        fixed[0].amounts[i] = 5000
        ve.grocery_budget[i] = 8000
        ve.entertainment_budget[i] = 9000
    return data, ve, fixed


def test_validate_balance_within_tolerance(months, make_data, make_fixed):
    data = make_data()
    data[0] = DataItem(income=30000)
    fixed = [make_fixed(amount=10000)]

    check = validate_balance(0, 5000, 8000, 7000.4, data, fixed, months)

    assert check.valid
    assert check.message == ""
    assert check.available == 20000


def test_validate_balance_messages(months, make_data, make_fixed):
    data = make_data()
    data[0] = DataItem(income=30000)
    fixed = [make_fixed(amount=10000)]

    over = validate_balance(0, 5000, 8000, 9000, data, fixed, months)
    assert not over.valid
    assert over.deficit == 2000
    assert over.message == (
        "Month Dec 2025: Total budgets (22000 SEK) exceed available balance (20000 SEK) "
        "by 2000 SEK. Please rebalance."
    )

    under = validate_balance(0, 5000, 8000, 5000, data, fixed, months)
    assert under.message == (
        "Month Dec 2025: Total budgets (18000 SEK) are 2000 SEK below available balance "
        "(20000 SEK). Please allocate all available funds."
    )


def test_validate_balance_rejects_bad_index(months, make_data):
    with pytest.raises(MonthRangeError):
        validate_balance(60, 0, 0, 0, make_data(), [], months)


def test_compute_issues_flags_each_unbalanced_month(months, unbalanced):
    data, ve, fixed = unbalanced

    result = compute_issues(data, ve, fixed, months)

    assert not result.is_balanced
    assert len(result.issues) == 2
    assert result.issues[0].startswith("Month Jan 2026:")
    assert result.issues[1].startswith("Month Mar 2026:")
    first = result.first_issue
    assert first.index == 1
    assert first.savings_total == 5000
    assert first.grocery_total == 8000
    assert first.entertainment_total == 9000
    assert first.deficit == 2000
    assert first.available == 20000


def test_compute_issues_counts_bonus_and_extra(months, make_data, make_ve):
    data = make_data()
    data[0] = DataItem(income=1000, planned_savings=1000, entertainment_extra=300)
    result = compute_issues(data, make_ve(), [], months)
    assert result.first_issue.entertainment_total == 300
    assert "exceed" in result.issues[0]


def test_compute_issues_restricted_to_indices(months, unbalanced):
    data, ve, fixed = unbalanced
    assert compute_issues(data, ve, fixed, months, indices=[0, 2]).is_balanced
    assert len(compute_issues(data, ve, fixed, months, indices=[3]).issues) == 1


def test_extract_issue_indices_dedupes_and_skips_unknown(months):
    issues = [
        "Month Mar 2026: Total budgets (1 SEK) exceed available balance (0 SEK) by 1 SEK. Please rebalance.",
        "Month Jan 2026: something else",
        "Month Mar 2026: again",
        "Month Foo 1999: unknown month",
        "no month here",
    ]
    assert extract_issue_indices(issues, months) == [3, 1]


@pytest.mark.parametrize(
    "strategy, expected",
    [
        ("adjust-savings", Split(3000, 8000, 9000)),
        ("adjust-grocery", Split(5000, 6000, 9000)),
        ("adjust-entertainment", Split(5000, 8000, 7000)),
    ],
)
def test_single_field_strategies(months, unbalanced, strategy, expected):
    data, ve, fixed = unbalanced

    out = apply_across_months([1, 3], strategy, data, ve, fixed)

    for i in (1, 3):
        written = Split(
            out.data[i].planned_savings,
            out.variable_expenses.grocery_budget[i],
            out.variable_expenses.entertainment_budget[i],
        )
        assert written == expected
    assert compute_issues(out.data, out.variable_expenses, fixed, months).is_balanced
    # originals untouched
    assert data[1].planned_savings == 5000
    assert ve.grocery_budget[1] == 8000


def test_equal_split(months, unbalanced):
    data, ve, fixed = unbalanced
    out = apply_across_months([1, 3], "equal-split", data, ve, fixed)

    assert out.data[1].planned_savings == pytest.approx(20000 / 3)
    assert out.variable_expenses.grocery_budget[3] == pytest.approx(20000 / 3)
    assert out.variable_expenses.entertainment_budget[3] == pytest.approx(20000 / 3)
    assert compute_issues(out.data, out.variable_expenses, fixed, months, indices=[1, 3]).is_balanced


def test_rebalance_folds_in_bonus_and_keeps_baseline(months, unbalanced):
    data, ve, fixed = unbalanced
    data[1] = data[1].copy(grocery_bonus=500, baseline_planned_savings=4000)

    out = apply_across_months([1], "adjust-savings", data, ve, fixed)

    assert out.data[1].planned_savings == 2500
    assert out.data[1].grocery_bonus == 0
    assert out.data[1].baseline_planned_savings == 4000
    assert out.variable_expenses.grocery_budget[1] == 8500
    assert compute_issues(out.data, out.variable_expenses, fixed, months, indices=[1]).is_balanced


def test_adjusted_field_never_goes_negative(months, make_data, make_ve):
    data = make_data()
    data[0] = DataItem(income=20000, planned_savings=1000)
    ve = make_ve()
    ve.grocery_budget[0] = 15000
    ve.entertainment_budget[0] = 10000

    out = apply_across_months([0], "adjust-savings", data, ve, [])

    assert out.data[0].planned_savings == 0
    assert out.variable_expenses.grocery_budget[0] == pytest.approx(12000)
    assert out.variable_expenses.entertainment_budget[0] == pytest.approx(8000)
    assert compute_issues(out.data, out.variable_expenses, [], months, indices=[0]).is_balanced


def test_negative_available_goes_to_savings(months, make_data, make_ve, make_fixed):
    data = make_data()
    data[0] = DataItem(income=1000, planned_savings=500)
    ve = make_ve()
    ve.grocery_budget[0] = 500
    fixed = [make_fixed(amount=3000)]

    out = apply_across_months([0], "adjust-grocery", data, ve, fixed)

    assert out.data[0].planned_savings == -2000
    assert out.variable_expenses.grocery_budget[0] == 0
    assert compute_issues(out.data, out.variable_expenses, fixed, months, indices=[0]).is_balanced


@pytest.mark.parametrize("strategy", ["adjust-savings", "adjust-entertainment", "equal-split"])
def test_fixed_costs_above_income_are_flagged(caplog, make_data, make_ve, make_fixed, strategy):
    data = make_data()
    data[2] = DataItem(income=1000, planned_savings=500)
    fixed = [make_fixed(amount=3000)]

    with caplog.at_level("WARNING", logger="balance.rebalance"):
        out = apply_across_months([2], strategy, data, make_ve(), fixed)

    assert out.data[2].planned_savings == pytest.approx(-2000)
    assert out.variable_expenses.grocery_budget[2] == 0
    assert out.variable_expenses.entertainment_budget[2] == 0
    assert "Month index 2: fixed expenses exceed income by 2000.00" in caplog.text


def test_manual_values_written_verbatim(months, unbalanced):
    data, ve, fixed = unbalanced
    out = apply_across_months([1, 3], "manual", data, ve, fixed, manual_values=Split(4000, 8000, 8000))
    assert out.data[3].planned_savings == 4000
    assert out.variable_expenses.entertainment_budget[1] == 8000
    assert compute_issues(out.data, out.variable_expenses, fixed, months).is_balanced


def test_unbalanced_manual_values_raise_before_writing(unbalanced):
    data, ve, fixed = unbalanced
    with pytest.raises(RebalanceError):
        apply_across_months([1, 3], "manual", data, ve, fixed, manual_values=Split(1, 1, 1))
    assert data[1].planned_savings == 5000
    with pytest.raises(ValueError):
        apply_across_months([1], "manual", data, ve, fixed)


def test_unknown_strategy_and_bad_index(unbalanced):
    data, ve, fixed = unbalanced
    with pytest.raises(ValueError):
        apply_across_months([1], "adjust-rent", data, ve, fixed)
    with pytest.raises(MonthRangeError):
        apply_across_months([75], "equal-split", data, ve, fixed)


def test_validator_to_rebalance_round_trip(months, unbalanced):
    data, ve, fixed = unbalanced
    issues = compute_issues(data, ve, fixed, months).issues
    indices = extract_issue_indices(issues, months)
    assert indices == [1, 3]

    out = apply_across_months(indices, "adjust-entertainment", data, ve, fixed)
    assert compute_issues(out.data, out.variable_expenses, fixed, months).is_balanced
