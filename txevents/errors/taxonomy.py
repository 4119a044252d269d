"""
errors/taxonomy.py - Error classification for transactional event buffering

Structured records for the three failure families the core can observe:
protocol violations from the host transaction manager, listener failures
during a flush, and malformed configuration.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Optional
from datetime import datetime, timezone
from enum import Enum
import uuid


class ErrorSeverity(Enum):
    """Error severity levels."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(Enum):
    """Error categories."""
    # Lifecycle notifications out of order (1xxx)
    PROTOCOL = "protocol"

    # Listener failures while flushing (2xxx)
    DELIVERY = "delivery"

    # Bad configuration values (3xxx)
    CONFIGURATION = "configuration"


class ErrorCode(Enum):
    """Specific error codes."""

    # Protocol (1xxx)
    PRO_UNMATCHED_COMMIT = 1001
    PRO_UNMATCHED_ROLLBACK = 1002

    # Delivery (2xxx)
    DLV_LISTENER_FAILED = 2001
    DLV_FLUSH_ABORTED = 2002

    # Configuration (3xxx)
    CFG_INVALID_PATTERN = 3001


@dataclass
class TxEventsError:
    """Structured error representation."""

    error_id: str = field(default_factory=lambda: uuid.uuid4().hex[:8])

    code: ErrorCode = ErrorCode.PRO_UNMATCHED_COMMIT
    category: ErrorCategory = ErrorCategory.PROTOCOL
    severity: ErrorSeverity = ErrorSeverity.WARNING

    message: str = ""
    detail: str = ""

    # Context
    source: str = ""
    connection: Optional[str] = None
    level: Optional[int] = None
    event_name: Optional[str] = None

    recoverable: bool = True

    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error_id": self.error_id,
            "code": self.code.value,
            "category": self.category.value,
            "severity": self.severity.value,
            "message": self.message,
            "detail": self.detail,
            "source": self.source,
            "connection": self.connection,
            "level": self.level,
            "event_name": self.event_name,
            "recoverable": self.recoverable,
            "created_at": self.created_at.isoformat(),
        }


def create_protocol_error(
    message: str,
    code: ErrorCode = ErrorCode.PRO_UNMATCHED_COMMIT,
    connection: str = None,
    source: str = "transaction_tracker",
) -> TxEventsError:
    """Factory for unmatched commit/rollback notifications."""
    return TxEventsError(
        code=code,
        category=ErrorCategory.PROTOCOL,
        severity=ErrorSeverity.WARNING,
        message=message,
        source=source,
        connection=connection,
    )


def create_delivery_error(
    message: str,
    event_name: str,
    exc: BaseException = None,
    connection: str = None,
    level: int = None,
    aborted: bool = False,
    source: str = "reconciliation_engine",
) -> TxEventsError:
    """Factory for listener failures while flushing."""
    return TxEventsError(
        code=ErrorCode.DLV_FLUSH_ABORTED if aborted else ErrorCode.DLV_LISTENER_FAILED,
        category=ErrorCategory.DELIVERY,
        severity=ErrorSeverity.ERROR,
        message=message,
        detail=repr(exc) if exc is not None else "",
        source=source,
        connection=connection,
        level=level,
        event_name=event_name,
        recoverable=False,
    )


def create_configuration_error(
    message: str,
    code: ErrorCode = ErrorCode.CFG_INVALID_PATTERN,
    detail: str = "",
    source: str = "classifier",
) -> TxEventsError:
    """Factory for configuration problems."""
    return TxEventsError(
        code=code,
        category=ErrorCategory.CONFIGURATION,
        severity=ErrorSeverity.WARNING,
        message=message,
        detail=detail,
        source=source,
    )
