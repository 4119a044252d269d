"""
dispatch/ - Transaction-aware event entry point
"""

from .facade import TransactionalDispatcher

__all__ = ["TransactionalDispatcher"]
