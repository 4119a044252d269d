"""
bootstrap/config.py - Configuration loading

Configuration comes from a JSON file, environment variables, or defaults.
The event-buffering section is validated by pydantic and frozen once
loaded; it is passed to the components that need it rather than kept in
a module global.
"""

from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional
import json
import logging
import os

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from txevents.errors.exceptions import ConfigurationError
from txevents.reconciliation.policies import FlushFailurePolicy
from txevents.transactions.schemas import DEFAULT_CONNECTION

logger = logging.getLogger("bootstrap.config")


DEFAULT_CONFIG_PATHS = (
    "./txevents.json",
    "./config/txevents.json",
)


class TransactionalEventsConfig(BaseModel):
    """Settings for the transactional event layer."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    enabled: bool = Field(default=True, description="Buffer configured events during transactions")
    included_patterns: List[Any] = Field(
        default_factory=list,
        description="Event names, namespaces or globs to buffer",
    )
    excluded_patterns: List[Any] = Field(
        default_factory=list,
        description="Event names, namespaces or globs never to buffer",
    )
    flush_failure_policy: FlushFailurePolicy = Field(
        default=FlushFailurePolicy.CONTINUE,
        description="Behaviour when a listener raises during a flush",
    )
    default_connection: str = Field(default=DEFAULT_CONNECTION, min_length=1)

    @field_validator("included_patterns", "excluded_patterns", mode="before")
    @classmethod
    def _split_patterns(cls, value: Any) -> Any:
        # Entries are not checked here; the classifier drops malformed ones
        if value is None:
            return []
        if isinstance(value, str):
            return [part.strip() for part in value.split(",") if part.strip()]
        return value

    @classmethod
    def from_env(cls) -> "TransactionalEventsConfig":
        """Create configuration from environment variables."""
        data: Dict[str, Any] = {}

        if "TXEVENTS_ENABLED" in os.environ:
            data["enabled"] = os.environ["TXEVENTS_ENABLED"].lower() == "true"
        if "TXEVENTS_INCLUDED" in os.environ:
            data["included_patterns"] = os.environ["TXEVENTS_INCLUDED"]
        if "TXEVENTS_EXCLUDED" in os.environ:
            data["excluded_patterns"] = os.environ["TXEVENTS_EXCLUDED"]
        if "TXEVENTS_FLUSH_POLICY" in os.environ:
            data["flush_failure_policy"] = os.environ["TXEVENTS_FLUSH_POLICY"].lower()
        if "TXEVENTS_DEFAULT_CONNECTION" in os.environ:
            data["default_connection"] = os.environ["TXEVENTS_DEFAULT_CONNECTION"]

        return cls._from_dict(data, source="environment")

    @classmethod
    def from_file(cls, filepath: str) -> "TransactionalEventsConfig":
        """Load configuration from JSON file."""
        path = Path(filepath)
        if not path.exists():
            logger.warning(f"Config file not found: {filepath}, using environment")
            return cls.from_env()

        try:
            with open(path) as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in {filepath}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Config file {filepath} must contain a JSON object")

        return cls._from_dict(data, source=str(path))

    @classmethod
    def _from_dict(cls, data: Dict[str, Any], source: str) -> "TransactionalEventsConfig":
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration from {source}: {e}") from e

    def to_dict(self) -> Dict[str, Any]:
        """Serialize config to dictionary."""
        return self.model_dump(mode="json")


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    log_file: Optional[str] = None
    json_logs: bool = False

    @classmethod
    def from_env(cls) -> "LoggingConfig":
        return cls(
            level=os.getenv("TXEVENTS_LOG_LEVEL", "INFO"),
            format=os.getenv("TXEVENTS_LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"),
            log_file=os.getenv("TXEVENTS_LOG_FILE"),
            json_logs=os.getenv("TXEVENTS_JSON_LOGS", "false").lower() == "true",
        )


def load_config(filepath: str = None) -> TransactionalEventsConfig:
    """
    Load configuration from file or environment.

    Args:
        filepath: Optional path to JSON config file

    Returns:
        TransactionalEventsConfig instance
    """
    if not filepath:
        filepath = next((path for path in DEFAULT_CONFIG_PATHS if Path(path).exists()), None)

    if filepath:
        logger.info(f"Loading config from: {filepath}")
        config = TransactionalEventsConfig.from_file(filepath)
    else:
        config = TransactionalEventsConfig.from_env()

    logger.info(
        f"Configuration loaded: enabled={config.enabled}, "
        f"included={len(config.included_patterns)}, excluded={len(config.excluded_patterns)}"
    )
    return config
