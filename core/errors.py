from __future__ import annotations


class MonthRangeError(IndexError):
    """Raised when a month index falls outside the planning horizon."""

    def __init__(self, index: int, horizon: int):
        super().__init__(f"Month index {index} outside horizon [0, {horizon - 1}].")
        self.index = index
        self.horizon = horizon


class RebalanceError(ValueError):
    """Raised when a force rebalance cannot leave every flagged month balanced."""
