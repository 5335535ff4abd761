"""
Projection engine: monthly fold, entitlement locks and rollover.
"""

from .projector import ProjectionResult, project_month, project_months
from .locks import LockDirective, apply_lock_directives
from .rollover import apply_rollover, auto_rollover

__all__ = [
    "ProjectionResult",
    "project_month",
    "project_months",
    "LockDirective",
    "apply_lock_directives",
    "apply_rollover",
    "auto_rollover",
]
