"""
buffer/queue.py - Per-connection pending event queue

Entries are kept in a single list in sequence order. Demotion re-tags in
place and discard filters, so the list order always equals sequence order
and a flush is a plain drain.
"""

from __future__ import annotations
from itertools import count
from typing import Any, List, Optional, Sequence
import logging

from txevents.transactions.schemas import DEFAULT_CONNECTION
from .schemas import PendingEvent

logger = logging.getLogger("buffer.queue")


class TransactionalEventBuffer:
    """
    Holds events raised inside open transactions.

    All operations are synchronous and assume a single writer.
    """

    def __init__(self, connection: str = DEFAULT_CONNECTION):
        self.connection = connection
        self._entries: List[PendingEvent] = []
        self._sequence = count(1)

    def enqueue(self, event: Any, level: int, payload: Sequence[Any] = ()) -> PendingEvent:
        """
        Append an event tagged with its nesting level.

        Raises:
            ValueError: If level is below 1
        """
        if level < 1:
            raise ValueError(f"Cannot buffer an event outside a transaction (level={level})")

        pending = PendingEvent(
            event=event,
            nesting_level=level,
            sequence=next(self._sequence),
            payload=tuple(payload),
            connection=self.connection,
        )
        self._entries.append(pending)
        logger.debug(f"[{self.connection}] buffered {pending.name} #{pending.sequence} at level {level}")
        return pending

    def flush_all(self) -> List[PendingEvent]:
        """Remove and return every entry, in sequence order."""
        drained = sorted(self._entries, key=lambda p: p.sequence)
        self._entries = []
        if drained:
            logger.debug(f"[{self.connection}] flushing {len(drained)} event(s)")
        return drained

    def discard_from(self, level: int) -> int:
        """
        Remove entries raised at `level` or deeper.

        Returns:
            Number of entries discarded
        """
        kept = [p for p in self._entries if p.nesting_level < level]
        discarded = len(self._entries) - len(kept)
        self._entries = kept
        if discarded:
            logger.debug(f"[{self.connection}] discarded {discarded} event(s) from level {level}")
        return discarded

    def demote(self, from_level: int, to_level: int) -> int:
        """
        Hand entries at `from_level` to the parent level `to_level`.

        Returns:
            Number of entries re-tagged

        Raises:
            ValueError: If to_level is not a shallower, valid level
        """
        if to_level < 1 or to_level >= from_level:
            raise ValueError(f"Cannot demote from level {from_level} to level {to_level}")

        moved = 0
        for pending in self._entries:
            if pending.nesting_level == from_level:
                pending.nesting_level = to_level
                moved += 1
        if moved:
            logger.debug(f"[{self.connection}] demoted {moved} event(s) {from_level} -> {to_level}")
        return moved

    def pending(self, level: Optional[int] = None) -> List[PendingEvent]:
        """Snapshot of buffered entries, optionally for one level."""
        if level is None:
            return list(self._entries)
        return [p for p in self._entries if p.nesting_level == level]

    def clear(self) -> int:
        """Drop everything without delivering it."""
        dropped = len(self._entries)
        self._entries = []
        return dropped

    @property
    def is_empty(self) -> bool:
        return not self._entries

    def __len__(self) -> int:
        return len(self._entries)
