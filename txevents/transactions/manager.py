"""
transactions/manager.py - Host transaction manager

A synchronous transaction manager with savepoint nesting. It owns no data;
its job is to produce well-nested begin/commit/rollback notifications for
the listeners attached to it, the way a database layer would.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator, List, Optional
import logging

from .schemas import DEFAULT_CONNECTION, Transaction, TransactionStatus


class TransactionLifecycleListener(ABC):
    """Receives transaction lifecycle notifications."""

    @abstractmethod
    def notify_begin(self, connection: str = None) -> None:
        """Called after a transaction or savepoint begins."""

    @abstractmethod
    def notify_commit(self, connection: str = None) -> None:
        """Called after a transaction commits or a savepoint is released."""

    @abstractmethod
    def notify_rollback(self, connection: str = None) -> None:
        """Called after a transaction or savepoint rolls back."""


class TransactionManager:
    """
    Manages nested transactions on one connection.

    Usage:
        manager = TransactionManager()
        manager.add_listener(transactional_dispatcher)

        with manager.transaction(source="checkout"):
            ...
            with manager.transaction(source="reserve_stock"):
                ...
    """

    def __init__(self, connection: str = DEFAULT_CONNECTION, max_history: int = 100):
        self.connection = connection
        self.logger = logging.getLogger("transactions.manager")

        # Transaction stack (for nesting)
        self._stack: List[Transaction] = []

        self._listeners: List[TransactionLifecycleListener] = []

        # Completed transactions (for audit)
        self._history: List[Transaction] = []
        self._max_history = max_history

    @property
    def active_transaction(self) -> Optional[Transaction]:
        """Get current active transaction."""
        return self._stack[-1] if self._stack else None

    @property
    def level(self) -> int:
        """Number of open transactions, 0 when idle."""
        return len(self._stack)

    def is_active(self) -> bool:
        """Check if a transaction is active."""
        return bool(self._stack)

    def add_listener(self, listener: TransactionLifecycleListener) -> None:
        """Attach a lifecycle listener."""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: TransactionLifecycleListener) -> bool:
        """Detach a lifecycle listener."""
        try:
            self._listeners.remove(listener)
            return True
        except ValueError:
            return False

    def begin(self, source: str = "", description: str = "") -> Transaction:
        """Begin a transaction, or a savepoint if one is already open."""
        tx = Transaction(
            connection=self.connection,
            source=source,
            description=description,
        )

        # Set parent if nested
        if self._stack:
            tx.parent_transaction_id = self._stack[-1].transaction_id

        self._stack.append(tx)

        kind = "Savepoint" if tx.is_savepoint else "Transaction"
        self.logger.info(f"{kind} {tx.transaction_id} started (level {self.level})")

        self._notify("notify_begin")

        return tx

    def commit(self) -> bool:
        """Commit the innermost transaction."""
        tx = self._finish(TransactionStatus.COMMITTED)
        if tx is None:
            return False

        self.logger.info(f"Transaction {tx.transaction_id} committed")

        self._notify("notify_commit")

        return True

    def rollback(self) -> bool:
        """Roll back the innermost transaction."""
        tx = self._finish(TransactionStatus.ROLLED_BACK)
        if tx is None:
            return False

        self.logger.info(f"Transaction {tx.transaction_id} rolled back")

        self._notify("notify_rollback")

        return True

    def _notify(self, method: str) -> None:
        """
        Call a lifecycle method on every listener.

        Every listener is notified even if an earlier one raises, so each
        keeps its stack in step with this manager. The first error is
        re-raised once all listeners have run.
        """
        first: Optional[Exception] = None

        for listener in list(self._listeners):
            try:
                getattr(listener, method)(self.connection)
            except Exception as e:
                self.logger.error(f"{type(listener).__name__}.{method} failed: {e}")
                if first is None:
                    first = e

        if first is not None:
            raise first

    def _finish(self, status: TransactionStatus) -> Optional[Transaction]:
        if not self._stack:
            verb = "commit" if status == TransactionStatus.COMMITTED else "rollback"
            self.logger.error(f"Cannot {verb}: no active transaction")
            return None

        tx = self._stack.pop()
        tx.status = status
        tx.completed_at = datetime.now(timezone.utc)
        self._add_to_history(tx)
        return tx

    @contextmanager
    def transaction(self, source: str = "", description: str = "") -> Iterator[Transaction]:
        """
        Context manager for transactions.

        Commits on normal exit; rolls back and re-raises on exception.
        An error raised while notifying listeners of the commit is not
        turned into a rollback: the transaction is already committed. An
        error raised while notifying a rollback is logged and the body's
        exception propagates.
        """
        tx = self.begin(source=source, description=description)
        try:
            yield tx
        except BaseException:
            try:
                self.rollback()
            except Exception as e:
                # The body's exception takes precedence
                self.logger.error(f"Rollback notification failed: {e}")
            raise
        self.commit()

    def _add_to_history(self, tx: Transaction) -> None:
        """Add transaction to history."""
        self._history.append(tx)

        # Trim history
        if len(self._history) > self._max_history:
            self._history = self._history[-self._max_history:]

    def get_history(self, limit: int = 20) -> List[Transaction]:
        """Get transaction history."""
        return self._history[-limit:]
