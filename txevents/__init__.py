"""
txevents - Transaction-aware event buffering

Holds application events raised inside a database transaction until the
transaction's outcome is known: delivered after the outermost commit,
dropped on rollback.
"""

from .events import (
    Event,
    TransactionalEvent,
    is_transactional,
    event_name,
    DEFERRED,
    EventDispatcher,
)

from .transactions import (
    TransactionContext,
    TransactionStackTracker,
    TransactionLifecycleListener,
    TransactionManager,
)

from .classifier import (
    EventDisposition,
    EventClassifier,
)

from .buffer import (
    PendingEvent,
    TransactionalEventBuffer,
)

from .reconciliation import (
    FlushFailurePolicy,
    FlushReport,
    ReconciliationState,
    ReconciliationEngine,
)

from .dispatch import TransactionalDispatcher

from .bootstrap import (
    TransactionalEventsConfig,
    load_config,
    build_dispatcher,
)

from .errors import (
    TransactionalEventsError,
    ConfigurationError,
    FlushError,
)

__version__ = "1.0.0"

__all__ = [
    # Events
    "Event",
    "TransactionalEvent",
    "is_transactional",
    "event_name",
    "DEFERRED",
    "EventDispatcher",
    # Transactions
    "TransactionContext",
    "TransactionStackTracker",
    "TransactionLifecycleListener",
    "TransactionManager",
    # Classifier
    "EventDisposition",
    "EventClassifier",
    # Buffer
    "PendingEvent",
    "TransactionalEventBuffer",
    # Reconciliation
    "FlushFailurePolicy",
    "FlushReport",
    "ReconciliationState",
    "ReconciliationEngine",
    # Facade
    "TransactionalDispatcher",
    # Bootstrap
    "TransactionalEventsConfig",
    "load_config",
    "build_dispatcher",
    # Errors
    "TransactionalEventsError",
    "ConfigurationError",
    "FlushError",
]
