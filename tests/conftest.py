"""
Test configuration and shared fixtures.

Provides a real dispatcher with a recording wildcard listener, a
classifier with a small pattern set, and a transaction manager wired to a
TransactionalDispatcher.
"""

import pytest
from unittest.mock import Mock

from txevents.classifier import EventClassifier
from txevents.dispatch import TransactionalDispatcher
from txevents.events import EventDispatcher, event_name
from txevents.transactions import TransactionManager


def delivered_names(handler: Mock) -> list:
    """Names of the events a recording handler received, in order."""
    return [event_name(call.args[0]) for call in handler.call_args_list]


@pytest.fixture
def event_dispatcher():
    """Real dispatcher with no listeners."""
    return EventDispatcher()


@pytest.fixture
def received(event_dispatcher):
    """Wildcard handler recording every delivered event."""
    handler = Mock(return_value=None)
    event_dispatcher.listen("*", handler)
    return handler


@pytest.fixture
def classifier():
    """Buffers orders.* and the app.events namespace, except audit events."""
    return EventClassifier(
        included_patterns=["orders.*", "app.events"],
        excluded_patterns=["orders.audit.*"],
    )


@pytest.fixture
def facade(event_dispatcher, classifier):
    """TransactionalDispatcher over the real dispatcher."""
    return TransactionalDispatcher(event_dispatcher, classifier)


@pytest.fixture
def manager(facade):
    """Host transaction manager notifying the facade."""
    tx_manager = TransactionManager()
    tx_manager.add_listener(facade)
    return tx_manager


@pytest.fixture
def delivered(received):
    """Callable returning the names delivered so far."""
    return lambda: delivered_names(received)
