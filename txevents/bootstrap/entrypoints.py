"""
bootstrap/entrypoints.py - Logging setup and command line entry point
"""

from __future__ import annotations
from typing import List, Optional
import argparse
import json
import logging
import sys

from txevents.classifier.classifier import EventClassifier
from txevents.errors.exceptions import ConfigurationError
from .config import LoggingConfig, load_config

logger = logging.getLogger("bootstrap.entrypoints")


class JSONFormatter(logging.Formatter):
    def format(self, record):
        return json.dumps({
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        })


def setup_logging(level: str = "INFO", log_file: str = None, json_format: bool = False) -> None:
    """
    Configure application logging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional log file path
        json_format: Use JSON format for logs
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    if json_format:
        formatter = JSONFormatter()
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )

    # Console handler
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(log_level)

    # Root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.addHandler(console_handler)

    # File handler
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        file_handler.setLevel(log_level)
        root_logger.addHandler(file_handler)


def cli_main(args: Optional[List[str]] = None) -> int:
    """
    CLI entry point.

    Args:
        args: Command line arguments (defaults to sys.argv)

    Returns:
        Exit code
    """
    parser = argparse.ArgumentParser(
        description="Transactional event buffering tools",
        prog="txevents",
    )
    parser.add_argument("--config", "-c", help="Path to JSON config file")
    parser.add_argument("--log-level", default=None, help="Log level")

    subparsers = parser.add_subparsers(dest="command")

    classify = subparsers.add_parser("classify", help="Show how event names are classified")
    classify.add_argument("names", nargs="+", help="Event names")
    classify.add_argument(
        "--transactional",
        action="store_true",
        help="Treat the events as carrying the transactional marker",
    )

    parsed = parser.parse_args(args)

    log_config = LoggingConfig.from_env()
    setup_logging(
        level=parsed.log_level or log_config.level,
        log_file=log_config.log_file,
        json_format=log_config.json_logs,
    )

    if parsed.command != "classify":
        parser.print_help()
        return 1

    try:
        config = load_config(parsed.config)
    except ConfigurationError as e:
        logger.error(str(e))
        return 2

    classifier = EventClassifier.from_config(config)
    if classifier.config_errors:
        for error in classifier.config_errors:
            logger.error(f"{error.message}: {error.detail}")
        return 2

    for name in parsed.names:
        disposition = classifier.classify_name(name, transactional=parsed.transactional)
        print(f"{name}\t{disposition.value}")

    return 0


def main() -> None:
    sys.exit(cli_main())
