"""
dispatch/facade.py - Transaction-aware dispatcher

The single entry point application code raises events through. Each event
is either delivered now, through the real dispatcher, or buffered on the
connection's open transaction until that transaction's outcome is known.

One ReconciliationEngine (tracker + buffer) exists per connection name,
created on first use.

INVARIANT: An instance belongs to one execution context. No locking is
done; the host keeps each connection's notifications on one thread.
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional, Sequence
import logging

from txevents.classifier.classifier import EventClassifier, EventDisposition
from txevents.events.dispatcher import EventDispatcher, EventHandler
from txevents.events.schemas import DEFERRED, event_name
from txevents.reconciliation.engine import ReconciliationEngine
from txevents.reconciliation.policies import FlushFailurePolicy, FlushReport
from txevents.transactions.manager import TransactionLifecycleListener
from txevents.transactions.schemas import DEFAULT_CONNECTION, TransactionContext

logger = logging.getLogger("dispatch.facade")


class TransactionalDispatcher(TransactionLifecycleListener):
    """
    Decides, per event, whether to buffer it or forward it immediately.

    Usage:
        dispatcher = TransactionalDispatcher(
            EventDispatcher(),
            EventClassifier(included_patterns=["orders.*"]),
        )
        manager.add_listener(dispatcher)

        with manager.transaction():
            dispatcher.dispatch("orders.placed", payload=(order,))  # DEFERRED
        # delivered here, after commit
    """

    def __init__(
        self,
        dispatcher: EventDispatcher,
        classifier: EventClassifier,
        policy: FlushFailurePolicy = FlushFailurePolicy.CONTINUE,
        default_connection: str = DEFAULT_CONNECTION,
    ):
        self.dispatcher = dispatcher
        self.classifier = classifier
        self.policy = policy
        self.default_connection = default_connection
        self._engines: Dict[str, ReconciliationEngine] = {}

    # =========================================================================
    # STACKS
    # =========================================================================

    def engine(self, connection: str = None) -> ReconciliationEngine:
        """Get the engine for a connection, creating it on first use."""
        connection = connection or self.default_connection
        engine = self._engines.get(connection)
        if engine is None:
            engine = ReconciliationEngine(
                self.dispatcher,
                connection=connection,
                policy=self.policy,
            )
            self._engines[connection] = engine
        return engine

    @property
    def connections(self) -> List[str]:
        return list(self._engines)

    def current_level(self, connection: str = None) -> int:
        engine = self._engines.get(connection or self.default_connection)
        return engine.level if engine else 0

    def pending_count(self, connection: str = None) -> int:
        engine = self._engines.get(connection or self.default_connection)
        return len(engine.buffer) if engine else 0

    # =========================================================================
    # LIFECYCLE NOTIFICATIONS
    # =========================================================================

    def notify_begin(self, connection: str = None) -> TransactionContext:
        return self.engine(connection).on_begin()

    def notify_commit(self, connection: str = None) -> Optional[FlushReport]:
        """
        Raises:
            FlushError: If listeners failed while flushing an outermost commit
        """
        return self.engine(connection).on_commit()

    def notify_rollback(self, connection: str = None) -> int:
        return self.engine(connection).on_rollback()

    # =========================================================================
    # DISPATCH
    # =========================================================================

    def dispatch(
        self,
        event: Any,
        payload: Sequence[Any] = (),
        halt: bool = False,
        connection: str = None,
    ) -> Any:
        """
        Raise an event.

        Args:
            event: Event object or name
            payload: Extra positional arguments for the listeners
            halt: Caller wants the first listener result back; never buffered
            connection: Connection whose transaction applies

        Returns:
            DEFERRED if buffered, else whatever the real dispatcher returns
        """
        if halt:
            return self.dispatcher.dispatch(event, payload, halt=True)

        engine = self.engine(connection)
        if engine.level == 0:
            return self.dispatcher.dispatch(event, payload)

        if self.classifier.classify(event) == EventDisposition.BYPASS:
            return self.dispatcher.dispatch(event, payload)

        engine.defer(event, payload)
        logger.debug(f"Deferred {event_name(event)} on {engine.connection} at level {engine.level}")
        return DEFERRED

    # =========================================================================
    # LISTENER PASS-THROUGH
    # =========================================================================

    def listen(self, pattern: str, handler: EventHandler) -> None:
        self.dispatcher.listen(pattern, handler)

    def forget(self, pattern: str) -> bool:
        return self.dispatcher.forget(pattern)

    def has_listeners(self, name: str) -> bool:
        return self.dispatcher.has_listeners(name)
