"""
bootstrap/app.py - Wiring

Builds a TransactionalDispatcher from configuration and attaches it to the
host transaction managers that should drive it.
"""

from __future__ import annotations
from typing import Iterable, Optional
import logging

from txevents.classifier.classifier import EventClassifier
from txevents.dispatch.facade import TransactionalDispatcher
from txevents.events.dispatcher import EventDispatcher
from txevents.transactions.manager import TransactionManager
from .config import TransactionalEventsConfig, load_config

logger = logging.getLogger("bootstrap.app")


def build_dispatcher(
    config: Optional[TransactionalEventsConfig] = None,
    dispatcher: Optional[EventDispatcher] = None,
    managers: Iterable[TransactionManager] = (),
) -> TransactionalDispatcher:
    """
    Build a transactional dispatcher.

    Args:
        config: Settings (loaded with load_config() if omitted)
        dispatcher: Real dispatcher to wrap (a new one if omitted)
        managers: Transaction managers to subscribe to

    Returns:
        TransactionalDispatcher
    """
    if config is None:
        config = load_config()

    classifier = EventClassifier.from_config(config)
    for error in classifier.config_errors:
        logger.warning(f"{error.message}: {error.detail}")

    facade = TransactionalDispatcher(
        dispatcher or EventDispatcher(),
        classifier,
        policy=config.flush_failure_policy,
        default_connection=config.default_connection,
    )

    for manager in managers:
        manager.add_listener(facade)
        logger.debug(f"Attached to transaction manager on {manager.connection}")

    return facade
