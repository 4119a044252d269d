"""
transactions/tracker.py - Transaction nesting tracker

Keeps the stack of open transaction frames for one connection, fed by
begin/commit/rollback notifications from the host transaction manager.

INVARIANT: Frame levels are contiguous starting at 1.
INVARIANT: The stack never pops below empty; an unmatched commit or
rollback is recorded as an anomaly and otherwise ignored.
"""

from __future__ import annotations
from typing import List, Optional
import logging

from txevents.errors.taxonomy import ErrorCode, TxEventsError, create_protocol_error
from .schemas import DEFAULT_CONNECTION, TransactionContext, TransactionStatus

logger = logging.getLogger("transactions.tracker")


class TransactionStackTracker:
    """
    Tracks the depth and identity of open transactions on one connection.

    Not thread-safe: a tracker belongs to the execution context that owns
    the connection.
    """

    def __init__(self, connection: str = DEFAULT_CONNECTION):
        self.connection = connection
        self._stack: List[TransactionContext] = []
        self._anomalies: List[TxEventsError] = []

    @property
    def current_level(self) -> int:
        """Level of the innermost open frame, or 0 when idle."""
        return self._stack[-1].level if self._stack else 0

    @property
    def depth(self) -> int:
        return len(self._stack)

    @property
    def is_active(self) -> bool:
        return bool(self._stack)

    @property
    def current(self) -> Optional[TransactionContext]:
        """Get the innermost open frame."""
        return self._stack[-1] if self._stack else None

    @property
    def frames(self) -> List[TransactionContext]:
        """Open frames, outermost first."""
        return list(self._stack)

    @property
    def anomalies(self) -> List[TxEventsError]:
        """Protocol violations seen so far."""
        return list(self._anomalies)

    def on_begin(self) -> TransactionContext:
        """Push a frame one level deeper than the current top."""
        frame = TransactionContext(
            level=self.current_level + 1,
            connection=self.connection,
        )
        self._stack.append(frame)
        logger.debug(f"[{self.connection}] begin level {frame.level}")
        return frame

    def on_commit(self) -> Optional[TransactionContext]:
        """
        Pop the innermost frame as committed.

        Returns:
            The popped frame, or None if no transaction was open
        """
        return self._pop(TransactionStatus.COMMITTED, ErrorCode.PRO_UNMATCHED_COMMIT)

    def on_rollback(self) -> Optional[TransactionContext]:
        """
        Pop the innermost frame as rolled back.

        Outer frames are untouched; a rollback with frames remaining is a
        savepoint rollback.

        Returns:
            The popped frame, or None if no transaction was open
        """
        return self._pop(TransactionStatus.ROLLED_BACK, ErrorCode.PRO_UNMATCHED_ROLLBACK)

    def _pop(self, status: TransactionStatus, code: ErrorCode) -> Optional[TransactionContext]:
        verb = "commit" if status == TransactionStatus.COMMITTED else "rollback"

        if not self._stack:
            logger.warning(f"[{self.connection}] {verb} received with no active transaction, ignoring")
            self._anomalies.append(create_protocol_error(
                message=f"Unmatched {verb} notification",
                code=code,
                connection=self.connection,
            ))
            return None

        frame = self._stack.pop()
        frame.close(status)
        logger.debug(f"[{self.connection}] {verb} level {frame.level}")
        return frame

    def reset(self) -> None:
        """Drop every open frame."""
        if self._stack:
            logger.warning(f"[{self.connection}] resetting with {len(self._stack)} open frame(s)")
        self._stack.clear()
