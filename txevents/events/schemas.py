"""
events/schemas.py - Application event model

Any object, or a plain string name, can be raised as an event. This module
provides an optional dataclass base, the marker that makes an event
transactional regardless of configuration, and the helpers the rest of the
package uses to name and inspect events.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict
import uuid


# =============================================================================
# CAPABILITY MARKER
# =============================================================================

class TransactionalEvent:
    """
    Marker mixin for events that must only be delivered after commit.

    Events carrying this marker are buffered whenever a transaction is
    active, even if their name matches an exclusion pattern or the
    feature flag is off.
    """
    __slots__ = ()


def is_transactional(event: Any) -> bool:
    """Check whether an event carries the transactional marker."""
    return isinstance(event, TransactionalEvent)


# =============================================================================
# NAMING
# =============================================================================

def event_name(event: Any) -> str:
    """
    Resolve the name used for classification and listener lookup.

    - A string is its own name.
    - An object with a string `event_name` attribute uses that.
    - Anything else is named by its class: `module.QualName`.
    """
    if isinstance(event, str):
        return event

    declared = getattr(event, "event_name", None)
    if isinstance(declared, str) and declared:
        return declared

    cls = type(event)
    return f"{cls.__module__}.{cls.__qualname__}"


# =============================================================================
# BASE EVENT
# =============================================================================

@dataclass
class Event:
    """
    Base class for application events.

    All events have:
    - event_id: Unique identifier
    - timestamp: When the event was raised
    """
    event_id: str = field(default_factory=lambda: str(uuid.uuid4())[:12])
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def name(self) -> str:
        return event_name(self)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "event_id": self.event_id,
            "event_name": self.name,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
            "transactional": is_transactional(self),
        }


# =============================================================================
# DEFERRED SENTINEL
# =============================================================================

class _Deferred:
    """Result of dispatching an event that was buffered instead of delivered."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "DEFERRED"

    def __reduce__(self):
        return (_Deferred, ())


DEFERRED = _Deferred()
