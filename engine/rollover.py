"""
Rollover: carry the previous month's unspent variable budget into savings.

A month offers a rollover once it has started, has not been processed yet and
the month before it left grocery or entertainment budget unspent. The user
confirms it (``apply_rollover``), or, with auto-rollover enabled, it is applied
once the grace window after the month start has elapsed (``auto_rollover``).
"""

from __future__ import annotations

import logging
from typing import List, Sequence, Tuple

import pandas as pd

from core.config import DEFAULT_CONFIG, LedgerConfig
from core.models import DataItem, Projection
from core.utils import as_timestamp, check_month_index

logger = logging.getLogger(__name__)


def _credit(item: DataItem, amount: float) -> DataItem:
    return item.copy(planned_savings=item.planned_savings + amount, rollover_processed=True)


def apply_rollover(
    index: int,
    projections: Sequence[Projection],
    data: Sequence[DataItem],
) -> List[DataItem]:
    """Credit the offered rollover of month ``index`` to its planned savings."""
    check_month_index(index, len(projections))
    p = projections[index]
    if not p.has_rollover:
        raise ValueError(f"No rollover available for {p.label}.")
    out = list(data)
    out[index] = _credit(data[index], p.rollover_amount)
    logger.debug("Rolled over %.2f into %s", p.rollover_amount, p.label)
    return out


def auto_rollover(
    projections: Sequence[Projection],
    data: Sequence[DataItem],
    now=None,
    *,
    config: LedgerConfig = DEFAULT_CONFIG,
) -> Tuple[List[DataItem], List[int]]:
    """
    Apply every rollover whose grace window has closed.

    Returns the new data list and the indices that were credited.
    """
    now_ts = as_timestamp(now)
    grace = pd.Timedelta(days=config.rollover_grace_days)
    out = list(data)
    applied = []
    for i, p in enumerate(projections):
        if i == 0 or data[i].rollover_processed:
            continue
        if now_ts < p.calendar_date + grace:
            continue
        amount = p.rollover_amount
        if amount > 0:
            out[i] = _credit(data[i], amount)
            applied.append(i)
    if applied:
        logger.info("Auto-rollover credited months %s", applied)
    return out, applied
