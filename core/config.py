"""
Ledger configuration.
Tolerances and calendar settings shared by the projector, validator and solver.
"""

from __future__ import annotations

from dataclasses import dataclass

import pandas as pd

from .schema import HORIZON_MONTHS


@dataclass(frozen=True)
class LedgerConfig:
    horizon_months: int = HORIZON_MONTHS
    anchor_date: pd.Timestamp = pd.Timestamp(2025, 12, 25)

    # allocation totals may differ from available funds by this much
    balance_tolerance: float = 0.5
    # manual previous savings / balance overrides warn beyond this gap
    manual_discrepancy_tolerance: float = 1.0

    # unspent budget can be rolled over for this many days after the month starts
    rollover_grace_days: int = 5

    currency: str = "SEK"


DEFAULT_CONFIG = LedgerConfig()
