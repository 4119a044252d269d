"""
events/ - Application events and listener dispatch
"""

from .schemas import (
    Event,
    TransactionalEvent,
    is_transactional,
    event_name,
    DEFERRED,
)

from .dispatcher import (
    EventHandler,
    EventDispatcher,
)

__all__ = [
    "Event",
    "TransactionalEvent",
    "is_transactional",
    "event_name",
    "DEFERRED",
    "EventHandler",
    "EventDispatcher",
]
