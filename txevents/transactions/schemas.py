"""
transactions/schemas.py - Transaction frame data structures
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Optional
from datetime import datetime, timezone
from enum import Enum
import uuid


DEFAULT_CONNECTION = "default"


class TransactionStatus(Enum):
    """Transaction frame status."""
    ACTIVE = "active"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"


@dataclass
class TransactionContext:
    """
    One open transaction frame.

    Level 1 is the outermost transaction; deeper levels are savepoints.
    """

    level: int = 1
    active: bool = True

    connection: str = DEFAULT_CONNECTION
    transaction_id: str = field(default_factory=lambda: uuid.uuid4().hex[:8])
    status: TransactionStatus = TransactionStatus.ACTIVE

    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    completed_at: Optional[datetime] = None

    @property
    def is_outermost(self) -> bool:
        return self.level == 1

    def close(self, status: TransactionStatus) -> None:
        """Mark the frame as finished."""
        self.active = False
        self.status = status
        self.completed_at = datetime.now(timezone.utc)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "transaction_id": self.transaction_id,
            "connection": self.connection,
            "level": self.level,
            "active": self.active,
            "status": self.status.value,
            "started_at": self.started_at.isoformat(),
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
        }


@dataclass
class Transaction:
    """Transaction record kept by the host TransactionManager."""

    transaction_id: str = field(default_factory=lambda: uuid.uuid4().hex[:8])
    connection: str = DEFAULT_CONNECTION

    status: TransactionStatus = TransactionStatus.ACTIVE

    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    completed_at: Optional[datetime] = None

    # Parent transaction (for savepoints)
    parent_transaction_id: Optional[str] = None

    # Metadata
    source: str = ""
    description: str = ""

    @property
    def is_savepoint(self) -> bool:
        return self.parent_transaction_id is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "transaction_id": self.transaction_id,
            "connection": self.connection,
            "status": self.status.value,
            "parent_transaction_id": self.parent_transaction_id,
            "started_at": self.started_at.isoformat(),
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "source": self.source,
            "description": self.description,
        }
