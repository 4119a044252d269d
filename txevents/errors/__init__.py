"""
errors/ - Error taxonomy and exceptions

Structured error records plus the exceptions the core raises.
"""

from .taxonomy import (
    ErrorSeverity,
    ErrorCategory,
    ErrorCode,
    TxEventsError,
    create_protocol_error,
    create_delivery_error,
    create_configuration_error,
)

from .exceptions import (
    TransactionalEventsError,
    ConfigurationError,
    FlushError,
)

__all__ = [
    # Taxonomy
    "ErrorSeverity",
    "ErrorCategory",
    "ErrorCode",
    "TxEventsError",
    "create_protocol_error",
    "create_delivery_error",
    "create_configuration_error",
    # Exceptions
    "TransactionalEventsError",
    "ConfigurationError",
    "FlushError",
]
