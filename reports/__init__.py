"""
Reports: tabular views of projections, balance issues and horizon summaries.
"""

from .summary import HorizonSummary, projections_to_frame, issues_to_frame, summarize_horizon

__all__ = [
    "HorizonSummary",
    "projections_to_frame",
    "issues_to_frame",
    "summarize_horizon",
]
