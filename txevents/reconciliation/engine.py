"""
reconciliation/engine.py - Commit/rollback reconciliation

State machine per connection:

    IDLE      --begin-->     ACTIVE(1)
    ACTIVE(n) --begin-->     ACTIVE(n+1)
    ACTIVE(n) --commit-->    n > 1: demote n -> n-1, ACTIVE(n-1)
                             n = 1: flush everything, IDLE
    ACTIVE(n) --rollback-->  discard level n and deeper,
                             ACTIVE(n-1) or IDLE

INVARIANT: The buffer is empty whenever the tracker is idle.
INVARIANT: A buffered event is forwarded at most once.
"""

from __future__ import annotations
from enum import Enum
from typing import Any, List, Optional, Sequence
import logging

from txevents.buffer.queue import TransactionalEventBuffer
from txevents.buffer.schemas import PendingEvent
from txevents.errors.exceptions import FlushError
from txevents.errors.taxonomy import create_delivery_error
from txevents.transactions.schemas import DEFAULT_CONNECTION, TransactionContext
from txevents.transactions.tracker import TransactionStackTracker
from .policies import FlushFailure, FlushFailurePolicy, FlushReport

logger = logging.getLogger("reconciliation.engine")


class ReconciliationState(Enum):
    """Engine state for one connection."""
    IDLE = "idle"
    ACTIVE = "active"


class ReconciliationEngine:
    """
    Couples a tracker and a buffer for one connection and releases or
    drops buffered events as transactions finish.

    `dispatcher` is the real delivery mechanism: anything with a
    `dispatch(event, payload)` method.
    """

    def __init__(
        self,
        dispatcher: Any,
        connection: str = DEFAULT_CONNECTION,
        policy: FlushFailurePolicy = FlushFailurePolicy.CONTINUE,
        tracker: Optional[TransactionStackTracker] = None,
        buffer: Optional[TransactionalEventBuffer] = None,
    ):
        self.dispatcher = dispatcher
        self.connection = connection
        self.policy = policy
        self.tracker = tracker or TransactionStackTracker(connection)
        self.buffer = buffer or TransactionalEventBuffer(connection)
        self.last_report: Optional[FlushReport] = None

    @property
    def state(self) -> ReconciliationState:
        return ReconciliationState.ACTIVE if self.tracker.is_active else ReconciliationState.IDLE

    @property
    def level(self) -> int:
        return self.tracker.current_level

    def defer(self, event: Any, payload: Sequence[Any] = ()) -> PendingEvent:
        """Buffer an event at the current level."""
        return self.buffer.enqueue(event, self.tracker.current_level, payload)

    def on_begin(self) -> TransactionContext:
        return self.tracker.on_begin()

    def on_commit(self) -> Optional[FlushReport]:
        """
        Handle a commit notification.

        Returns:
            FlushReport when the outermost transaction committed, else None

        Raises:
            FlushError: If listeners failed while flushing
        """
        frame = self.tracker.on_commit()
        if frame is None:
            return None

        if not frame.is_outermost:
            self.buffer.demote(frame.level, frame.level - 1)
            return None

        # Drained before forwarding, so listeners see an idle connection
        return self._forward(self.buffer.flush_all())

    def on_rollback(self) -> int:
        """
        Handle a rollback notification.

        Returns:
            Number of events discarded
        """
        frame = self.tracker.on_rollback()
        if frame is None:
            return 0

        discarded = self.buffer.discard_from(frame.level)
        if discarded:
            logger.info(
                f"[{self.connection}] rollback at level {frame.level} "
                f"discarded {discarded} event(s)"
            )
        return discarded

    def _forward(self, drained: List[PendingEvent]) -> FlushReport:
        report = FlushReport(connection=self.connection, policy=self.policy)

        for index, pending in enumerate(drained):
            try:
                self.dispatcher.dispatch(pending.event, pending.payload)
            except Exception as e:
                logger.error(f"[{self.connection}] listener failed for {pending.name}: {e}")
                aborting = self.policy == FlushFailurePolicy.FAIL_FAST
                report.failures.append(FlushFailure(
                    pending=pending,
                    exception=e,
                    error=create_delivery_error(
                        message=f"Listener failed for {pending.name}",
                        event_name=pending.name,
                        exc=e,
                        connection=self.connection,
                        level=pending.nesting_level,
                        aborted=aborting,
                    ),
                ))
                if aborting:
                    report.skipped = drained[index + 1:]
                    if report.skipped:
                        logger.error(
                            f"[{self.connection}] flush aborted, "
                            f"{len(report.skipped)} event(s) not delivered"
                        )
                    break
            else:
                report.delivered.append(pending)

        self.last_report = report
        logger.debug(
            f"[{self.connection}] flush delivered {len(report.delivered)}/{report.total}"
        )

        if report.failures:
            first = report.failures[0]
            raise FlushError(
                f"{len(report.failures)} event(s) failed during flush on {self.connection}",
                report,
            ) from first.exception

        return report

    def reset(self) -> int:
        """
        Abandon every open frame and drop buffered events.

        Returns:
            Number of events dropped
        """
        self.tracker.reset()
        return self.buffer.clear()
