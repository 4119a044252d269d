"""
buffer/ - Transaction-scoped event buffer
"""

from .schemas import PendingEvent
from .queue import TransactionalEventBuffer

__all__ = [
    "PendingEvent",
    "TransactionalEventBuffer",
]
