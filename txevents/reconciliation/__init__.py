"""
reconciliation/ - Releasing or dropping buffered events
"""

from .policies import (
    FlushFailurePolicy,
    FlushFailure,
    FlushReport,
)

from .engine import (
    ReconciliationState,
    ReconciliationEngine,
)

__all__ = [
    "FlushFailurePolicy",
    "FlushFailure",
    "FlushReport",
    "ReconciliationState",
    "ReconciliationEngine",
]
