"""
reconciliation/policies.py - Flush failure handling
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List

from txevents.buffer.schemas import PendingEvent
from txevents.errors.taxonomy import TxEventsError
from txevents.transactions.schemas import DEFAULT_CONNECTION


class FlushFailurePolicy(str, Enum):
    """What to do when a listener raises while a commit is being flushed."""

    CONTINUE = "continue"
    """Attempt every remaining event, then report all failures together."""

    FAIL_FAST = "fail_fast"
    """Stop at the first failure; the remaining events are never delivered."""


@dataclass
class FlushFailure:
    """One event whose listeners raised during a flush."""
    pending: PendingEvent
    exception: BaseException
    error: TxEventsError


@dataclass
class FlushReport:
    """Outcome of releasing one committed transaction's events."""

    connection: str = DEFAULT_CONNECTION
    policy: FlushFailurePolicy = FlushFailurePolicy.CONTINUE

    delivered: List[PendingEvent] = field(default_factory=list)
    failures: List[FlushFailure] = field(default_factory=list)
    skipped: List[PendingEvent] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.delivered) + len(self.failures) + len(self.skipped)

    @property
    def ok(self) -> bool:
        return not self.failures

    def to_dict(self) -> Dict[str, Any]:
        return {
            "connection": self.connection,
            "policy": self.policy.value,
            "total": self.total,
            "delivered": len(self.delivered),
            "failed": len(self.failures),
            "skipped": len(self.skipped),
            "errors": [f.error.to_dict() for f in self.failures],
        }
