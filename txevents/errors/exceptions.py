"""
errors/exceptions.py - Exceptions raised by the transactional event layer
"""

from __future__ import annotations
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from txevents.reconciliation.policies import FlushReport


class TransactionalEventsError(Exception):
    """Base exception for the transactional event layer."""
    pass


class ConfigurationError(TransactionalEventsError):
    """Raised when a configuration source cannot be loaded."""
    pass


class FlushError(TransactionalEventsError):
    """
    Raised after an outermost commit when one or more listeners failed.

    The transaction is already committed when this is raised. `report`
    says which events were delivered, which failed and which were never
    attempted.
    """

    def __init__(self, message: str, report: "FlushReport"):
        super().__init__(message)
        self.report = report

    @property
    def failures(self):
        return self.report.failures
