"""
events/dispatcher.py - Listener invocation

Instance-scoped event dispatcher. This is the delivery mechanism that the
transactional layer sits in front of: it knows nothing about transactions
and calls listeners as soon as an event reaches it.

INVARIANT: Each host context owns its own EventDispatcher instance.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Pattern, Sequence
import logging

from txevents.classifier.patterns import compile_pattern, is_wildcard
from txevents.events.schemas import event_name


logger = logging.getLogger("events.dispatcher")


# Handlers are called as handler(event, *payload)
EventHandler = Callable[..., Any]


@dataclass
class WildcardListener:
    """A handler registered against a `*` pattern."""
    pattern: str
    regex: Pattern[str]
    handler: EventHandler


class EventDispatcher:
    """
    Instance-scoped dispatcher.

    Features:
    - Exact-name listeners and `*` wildcard listeners
    - Listeners run in registration order, exact before wildcard
    - A listener returning False stops propagation
    - `halt=True` returns the first non-None result instead of a list
    - Listener exceptions propagate to the caller
    - Dispatch history (configurable depth)

    Usage:
        dispatcher = EventDispatcher()
        dispatcher.listen("orders.placed", send_receipt)
        dispatcher.listen("orders.*", audit)
        dispatcher.dispatch("orders.placed", payload=(order,))
    """

    def __init__(self, max_history: int = 100):
        """
        Initialize the event dispatcher.

        Args:
            max_history: Maximum event names to retain in history
        """
        self._max_history = max_history

        # Exact listeners: event name -> list of handlers
        self._listeners: Dict[str, List[EventHandler]] = {}

        self._wildcards: List[WildcardListener] = []

        self._history: List[str] = []

    def listen(self, pattern: str, handler: EventHandler) -> None:
        """
        Register a listener.

        Args:
            pattern: Event name, or a pattern containing `*`
            handler: Callback handler(event, *payload)
        """
        if is_wildcard(pattern):
            self._wildcards.append(WildcardListener(pattern, compile_pattern(pattern), handler))
            logger.debug(f"Listening on wildcard {pattern}")
            return

        self._listeners.setdefault(pattern, []).append(handler)
        logger.debug(f"Listening on {pattern}")

    def forget(self, pattern: str) -> bool:
        """
        Remove every listener registered under a name or pattern.

        Returns:
            True if anything was removed
        """
        if is_wildcard(pattern):
            before = len(self._wildcards)
            self._wildcards = [w for w in self._wildcards if w.pattern != pattern]
            return len(self._wildcards) != before
        return self._listeners.pop(pattern, None) is not None

    def get_listeners(self, name: str) -> List[EventHandler]:
        """Get the handlers that would receive an event name, in call order."""
        handlers = list(self._listeners.get(name, []))
        handlers.extend(w.handler for w in self._wildcards if w.regex.fullmatch(name))
        return handlers

    def has_listeners(self, name: str) -> bool:
        """Check if any listener would receive an event name."""
        return bool(self.get_listeners(name))

    def dispatch(self, event: Any, payload: Sequence[Any] = (), halt: bool = False) -> Any:
        """
        Deliver an event to its listeners.

        Args:
            event: Event object or name
            payload: Extra positional arguments for the handlers
            halt: Stop at the first non-None result and return it

        Returns:
            List of handler results, or a single result when halting
        """
        name = event_name(event)

        self._history.append(name)
        if len(self._history) > self._max_history:
            self._history = self._history[-self._max_history:]

        logger.debug(f"Dispatching {name}")

        results: List[Any] = []
        for handler in self.get_listeners(name):
            result = handler(event, *payload)

            if halt and result is not None:
                return result

            if result is False:
                break

            results.append(result)

        return None if halt else results

    @property
    def handler_count(self) -> int:
        """Get total number of registered handlers."""
        count = sum(len(handlers) for handlers in self._listeners.values())
        return count + len(self._wildcards)

    def get_history(self, limit: int = 20) -> List[str]:
        """Get the names of recently dispatched events."""
        return self._history[-limit:]

    def clear_history(self) -> None:
        """Clear dispatch history."""
        self._history.clear()

    @property
    def event_count(self) -> int:
        """Get number of events in history."""
        return len(self._history)
