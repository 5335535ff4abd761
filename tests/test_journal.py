import pytest

from core import MonthRangeError, Transactions
from ledger import (
    add_transaction,
    allocate_extra_income,
    clear_month,
    delete_extra_allocation,
    delete_transaction,
    edit_transaction,
    month_totals,
)


def test_add_edit_delete_keep_spent_in_step(make_ve):
    tx, ve = Transactions(), make_ve()

    tx1, ve1 = add_transaction(tx, ve, "grocery", 2, 120, timestamp="2026-02-01T08:00:00")
    tx2, ve2 = add_transaction(tx1, ve1, "grocery", 2, 80)
    assert ve2.grocery_spent[2] == 200
    assert tx2.grocery[2][0].timestamp == "2026-02-01T08:00:00"
    assert tx2.grocery[2][1].timestamp != ""

    tx3, ve3 = edit_transaction(tx2, ve2, "grocery", 2, 0, 20)
    assert ve3.grocery_spent[2] == 100
    assert tx3.grocery[2][0].amount == 20
    assert tx3.grocery[2][0].timestamp == "2026-02-01T08:00:00"

    tx4, ve4 = delete_transaction(tx3, ve3, "grocery", 2, 1)
    assert ve4.grocery_spent[2] == 20
    assert len(tx4.grocery[2]) == 1

    # every step returned fresh objects
    assert tx.grocery[2] == [] and ve.grocery_spent[2] == 0
    assert len(tx2.grocery[2]) == 2 and ve2.grocery_spent[2] == 200


def test_journal_rejects_bad_input(make_ve):
    tx, ve = Transactions(), make_ve()
    with pytest.raises(ValueError):
        add_transaction(tx, ve, "rent", 0, 10)
    with pytest.raises(MonthRangeError):
        add_transaction(tx, ve, "grocery", 60, 10)
    with pytest.raises(IndexError):
        delete_transaction(tx, ve, "entertainment", 0, 0)


def test_extra_income_allocation(make_data):
    data = make_data(extra_income=1000)
    tx, out = allocate_extra_income(Transactions(), data, 1, 200, 300, 500, timestamp="t1")

    assert out[1].grocery_extra == 200
    assert out[1].entertainment_extra == 300
    assert out[1].savings_extra == 500
    assert data[1].grocery_extra == 0

    totals = month_totals(tx, 1)
    assert (totals.extra_grocery, totals.extra_entertainment, totals.extra_savings) == (200, 300, 500)
    assert totals.n_extra == 1

    tx2, out2 = delete_extra_allocation(tx, out, 1, 0)
    assert out2[1] == data[1]
    assert tx2.extra[1] == []


def test_month_totals_and_clear(make_ve):
    tx, _ = add_transaction(Transactions(), make_ve(), "entertainment", 0, 45, timestamp="a")
    totals = month_totals(tx, 0)
    assert totals.entertainment == 45
    assert totals.n_entertainment == 1
    assert totals.grocery == 0

    cleared = clear_month(tx, 0)
    assert month_totals(cleared, 0).n_entertainment == 0
    assert month_totals(tx, 0).n_entertainment == 1
