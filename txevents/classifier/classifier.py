"""
classifier/classifier.py - Event disposition

Decides whether an event is held until commit or delivered immediately.

Rule precedence, highest first:
1. The event carries the TransactionalEvent marker -> TRANSACTIONAL
2. The feature is disabled -> BYPASS
3. The name matches an excluded pattern -> BYPASS
4. The name matches an included pattern -> TRANSACTIONAL
5. Otherwise -> BYPASS
"""

from __future__ import annotations
from enum import Enum
from typing import TYPE_CHECKING, Any, List, Optional
import logging

from txevents.errors.taxonomy import TxEventsError
from txevents.events.schemas import event_name, is_transactional
from .patterns import PatternMatcher

if TYPE_CHECKING:
    from txevents.bootstrap.config import TransactionalEventsConfig

logger = logging.getLogger("classifier")


class EventDisposition(str, Enum):
    """How an event is handled while a transaction is active."""
    TRANSACTIONAL = "transactional"
    BYPASS = "bypass"


class EventClassifier:
    """
    Pure classification over a static configuration.

    Patterns are compiled once, when the classifier is built.
    """

    def __init__(
        self,
        enabled: bool = True,
        included_patterns: Optional[List[Any]] = None,
        excluded_patterns: Optional[List[Any]] = None,
    ):
        self.enabled = enabled
        self._included = PatternMatcher.from_patterns(included_patterns, label="included_patterns")
        self._excluded = PatternMatcher.from_patterns(excluded_patterns, label="excluded_patterns")

    @classmethod
    def from_config(cls, config: "TransactionalEventsConfig") -> "EventClassifier":
        return cls(
            enabled=config.enabled,
            included_patterns=config.included_patterns,
            excluded_patterns=config.excluded_patterns,
        )

    @property
    def included(self) -> PatternMatcher:
        return self._included

    @property
    def excluded(self) -> PatternMatcher:
        return self._excluded

    @property
    def config_errors(self) -> List[TxEventsError]:
        """Malformed patterns dropped while compiling."""
        return self._included.errors + self._excluded.errors

    def classify(self, event: Any) -> EventDisposition:
        """Classify an event object or name."""
        return self.classify_name(event_name(event), transactional=is_transactional(event))

    def classify_name(self, name: str, transactional: bool = False) -> EventDisposition:
        """
        Classify an event by name.

        Args:
            name: Event name
            transactional: Whether the event carries the transactional marker

        Returns:
            EventDisposition
        """
        if transactional:
            return EventDisposition.TRANSACTIONAL

        if not self.enabled:
            return EventDisposition.BYPASS

        excluded_by = self._excluded.match(name)
        if excluded_by is not None:
            logger.debug(f"{name} excluded by {excluded_by}")
            return EventDisposition.BYPASS

        included_by = self._included.match(name)
        if included_by is not None:
            logger.debug(f"{name} included by {included_by}")
            return EventDisposition.TRANSACTIONAL

        return EventDisposition.BYPASS
