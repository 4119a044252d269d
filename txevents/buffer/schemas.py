"""
buffer/schemas.py - Buffered event record
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Tuple

from txevents.events.schemas import event_name
from txevents.transactions.schemas import DEFAULT_CONNECTION


@dataclass
class PendingEvent:
    """
    An event held until its transaction's outcome is known.

    `sequence` is assigned at enqueue time and never reused, so sorting by
    it restores raise order across nesting levels.
    """
    event: Any
    nesting_level: int
    sequence: int

    payload: Tuple[Any, ...] = ()
    connection: str = DEFAULT_CONNECTION
    enqueued_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def name(self) -> str:
        return event_name(self.event)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event_name": self.name,
            "nesting_level": self.nesting_level,
            "sequence": self.sequence,
            "connection": self.connection,
            "enqueued_at": self.enqueued_at.isoformat(),
        }
