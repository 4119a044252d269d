"""
transactions/ - Transaction tracking

Frame stack tracking for the event buffer, plus a small host transaction
manager that emits lifecycle notifications.
"""

from .schemas import (
    DEFAULT_CONNECTION,
    TransactionStatus,
    TransactionContext,
    Transaction,
)

from .tracker import TransactionStackTracker

from .manager import (
    TransactionLifecycleListener,
    TransactionManager,
)

__all__ = [
    # Schemas
    "DEFAULT_CONNECTION",
    "TransactionStatus",
    "TransactionContext",
    "Transaction",
    # Tracker
    "TransactionStackTracker",
    # Manager
    "TransactionLifecycleListener",
    "TransactionManager",
]
