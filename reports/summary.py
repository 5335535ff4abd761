"""
Horizon reports: projections and balance issues as display-ready tables.

Answers the questions a household asks of the projection:
  Q1: "Where do my savings end up?"        → final / lowest total savings
  Q2: "Which months break the plan?"       → critical months, overspend months
  Q3: "Is there money left to roll over?"  → rollover months
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import List, Sequence

import numpy as np
import pandas as pd

from balance.validator import BudgetIssues
from core.models import Projection

_PROJECTION_COLUMNS = [
    "label", "calendar_date", "income", "extra_income", "fixed_total", "fixed_paid",
    "grocery_budget", "grocery_spent", "grocery_remaining",
    "entertainment_budget", "entertainment_spent", "entertainment_remaining",
    "planned_savings", "overspend_amount", "actual_savings_delta",
    "resolved_previous", "previous_savings_consumed", "total_savings", "balance",
    "extra_savings_gap", "is_past", "is_critical", "has_rollover",
    "rollover_days_remaining", "overspend_warning",
]


def projections_to_frame(projections: Sequence[Projection]) -> pd.DataFrame:
    """One row per month, indexed by month label."""
    if not projections:
        return pd.DataFrame(columns=_PROJECTION_COLUMNS).set_index("label")
    df = pd.DataFrame([asdict(p) for p in projections])
    return df[_PROJECTION_COLUMNS].set_index("label")


def issues_to_frame(issues: BudgetIssues) -> pd.DataFrame:
    return pd.DataFrame({"Issue": issues.issues})


@dataclass
class HorizonSummary:
    """Structured summary of a full projection."""
    n_months: int
    final_total_savings: float
    lowest_total_savings: float
    lowest_savings_month: str
    total_overspend: float
    critical_months: List[str] = field(default_factory=list)
    overspend_months: List[str] = field(default_factory=list)
    rollover_months: List[str] = field(default_factory=list)

    def to_dataframe(self) -> pd.DataFrame:
        rows = [
            {"Metric": "Months", "Value": str(self.n_months)},
            {"Metric": "Final Total Savings", "Value": f"{self.final_total_savings:,.0f}"},
            {"Metric": "Lowest Total Savings", "Value": f"{self.lowest_total_savings:,.0f} ({self.lowest_savings_month})"},
            {"Metric": "Total Overspend", "Value": f"{self.total_overspend:,.0f}"},
            {"Metric": "Overspend Months", "Value": str(len(self.overspend_months))},
        ]
        if self.critical_months:
            rows.append({"Metric": "CRITICAL", "Value": " | ".join(self.critical_months)})
        if self.rollover_months:
            rows.append({"Metric": "Rollover Available", "Value": " | ".join(self.rollover_months)})
        return pd.DataFrame(rows)


def summarize_horizon(projections: Sequence[Projection]) -> HorizonSummary:
    if not projections:
        raise ValueError("No projections to summarize.")
    totals = np.array([p.total_savings for p in projections], dtype=float)
    lowest = int(np.argmin(totals))
    return HorizonSummary(
        n_months=len(projections),
        final_total_savings=float(totals[-1]),
        lowest_total_savings=float(totals[lowest]),
        lowest_savings_month=projections[lowest].label,
        total_overspend=float(sum(p.overspend_amount for p in projections)),
        critical_months=[p.label for p in projections if p.is_critical],
        overspend_months=[p.label for p in projections if p.overspend_amount > 0],
        rollover_months=[p.label for p in projections if p.has_rollover],
    )
