"""
bootstrap/ - Configuration, wiring and entry points
"""

from .config import (
    TransactionalEventsConfig,
    LoggingConfig,
    load_config,
)

from .app import build_dispatcher

from .entrypoints import (
    setup_logging,
    cli_main,
)

__all__ = [
    "TransactionalEventsConfig",
    "LoggingConfig",
    "load_config",
    "build_dispatcher",
    "setup_logging",
    "cli_main",
]
