"""
Lifecycle Package

Client diagnostic stage derived from movements and debts.
"""

from .status import derive_status, mark_projection_complete, recompute_status, status_after_debt_added

__all__ = ["derive_status", "mark_projection_complete", "recompute_status", "status_after_debt_added"]
