from core import UNLOCKED, DataItem, Locked
from engine import LockDirective, apply_lock_directives
from engine.locks import entertainment_base, latch, lock_from_persisted, lock_to_persisted


def test_latch_keeps_first_value():
    lock = latch(UNLOCKED, 1200)
    assert lock == Locked(1200.0)
    assert latch(lock, 900) is lock


def test_entertainment_base_prefers_locked_value():
    assert entertainment_base(UNLOCKED, 750) == 750
    assert entertainment_base(Locked(300), 750) == 300


def test_persisted_flag_without_value_is_unlocked():
    assert lock_from_persisted(True, None) == UNLOCKED
    assert lock_from_persisted(False, 400) == UNLOCKED
    assert lock_from_persisted(True, 400) == Locked(400.0)


def test_persisted_form_round_trips():
    for lock in (UNLOCKED, Locked(321.5)):
        stored = lock_to_persisted(lock)
        assert lock_from_persisted(stored["entertainmentBudgetLocked"], stored["lockedEntertainmentBudget"]) == lock


def test_apply_directives_returns_new_list_and_keeps_existing_locks():
    data = [DataItem(), DataItem(entertainment_lock=Locked(50)), DataItem()]
    directives = [LockDirective(0, 100), LockDirective(1, 999), LockDirective(0, 200)]

    out = apply_lock_directives(data, directives)

    assert out is not data
    assert out[0].entertainment_lock == Locked(100)
    assert out[1].entertainment_lock == Locked(50)
    assert out[2].entertainment_lock == UNLOCKED
    assert data[0].entertainment_lock == UNLOCKED
