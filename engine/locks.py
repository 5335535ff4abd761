"""
Entitlement lock policy: the entertainment budget of a month freezes once its date passes.

The latch is write-once: the first residual observed after the month starts is
kept, and later edits to that month's savings, grocery budget or fixed expenses
no longer move it. The projector only *reports* lock directives; merging them
into the raw model is the caller's job (see ``apply_lock_directives``).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Sequence

from core.models import UNLOCKED, DataItem, EntitlementLock, Locked

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LockDirective:
    index: int
    captured_value: float


def latch(lock: EntitlementLock, value: float) -> EntitlementLock:
    """Lock at ``value`` unless already locked (first one wins)."""
    if lock.is_locked:
        return lock
    return Locked(float(value))


def entertainment_base(lock: EntitlementLock, residual: float) -> float:
    return lock.value if isinstance(lock, Locked) else residual


def lock_from_persisted(locked_flag, locked_value) -> EntitlementLock:
    """Map the persisted (value, flag) pair onto the tagged state."""
    if locked_flag is True and locked_value is not None:
        return Locked(float(locked_value))
    return UNLOCKED


def lock_to_persisted(lock: EntitlementLock) -> dict:
    if isinstance(lock, Locked):
        return {"lockedEntertainmentBudget": lock.value, "entertainmentBudgetLocked": True}
    return {"lockedEntertainmentBudget": None, "entertainmentBudgetLocked": False}


def apply_lock_directives(
    data: Sequence[DataItem],
    directives: Iterable[LockDirective],
) -> List[DataItem]:
    """Return a new data list with the directives latched in; existing locks are kept."""
    out = list(data)
    for d in directives:
        item = out[d.index]
        if item.entertainment_lock.is_locked:
            continue
        out[d.index] = item.copy(entertainment_lock=latch(item.entertainment_lock, d.captured_value))
        logger.debug("Locked entertainment budget for month %d at %.2f", d.index, d.captured_value)
    return out
