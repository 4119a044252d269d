"""
Unit tests for configuration loading.
"""

import json

import pytest
from pydantic import ValidationError

from txevents.bootstrap.config import (
    LoggingConfig,
    TransactionalEventsConfig,
    load_config,
)
from txevents.errors import ConfigurationError
from txevents.reconciliation import FlushFailurePolicy


ENV_VARS = [
    "TXEVENTS_ENABLED",
    "TXEVENTS_INCLUDED",
    "TXEVENTS_EXCLUDED",
    "TXEVENTS_FLUSH_POLICY",
    "TXEVENTS_DEFAULT_CONNECTION",
    "TXEVENTS_LOG_LEVEL",
    "TXEVENTS_LOG_FILE",
    "TXEVENTS_JSON_LOGS",
]


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """No TXEVENTS_* variables and no config file in the working directory."""
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    return monkeypatch


class TestDefaults:
    def test_defaults(self):
        config = TransactionalEventsConfig()

        assert config.enabled is True
        assert config.included_patterns == []
        assert config.excluded_patterns == []
        assert config.flush_failure_policy == FlushFailurePolicy.CONTINUE
        assert config.default_connection == "default"

    def test_config_is_frozen(self):
        config = TransactionalEventsConfig()

        with pytest.raises(ValidationError):
            config.enabled = False

    def test_comma_separated_patterns(self):
        config = TransactionalEventsConfig(included_patterns="orders.*, app.events ,")

        assert config.included_patterns == ["orders.*", "app.events"]

    def test_none_patterns_become_empty(self):
        config = TransactionalEventsConfig(excluded_patterns=None)

        assert config.excluded_patterns == []

    def test_malformed_entries_kept_for_classifier(self):
        config = TransactionalEventsConfig(included_patterns=["orders.*", ""])

        assert config.included_patterns == ["orders.*", ""]

    def test_to_dict(self):
        data = TransactionalEventsConfig(flush_failure_policy="fail_fast").to_dict()

        assert data["flush_failure_policy"] == "fail_fast"
        assert data["enabled"] is True


class TestFromEnv:
    def test_empty_env_gives_defaults(self, clean_env):
        assert TransactionalEventsConfig.from_env() == TransactionalEventsConfig()

    def test_reads_variables(self, clean_env):
        clean_env.setenv("TXEVENTS_ENABLED", "false")
        clean_env.setenv("TXEVENTS_INCLUDED", "orders.*,billing")
        clean_env.setenv("TXEVENTS_EXCLUDED", "orders.audit.*")
        clean_env.setenv("TXEVENTS_FLUSH_POLICY", "FAIL_FAST")
        clean_env.setenv("TXEVENTS_DEFAULT_CONNECTION", "primary")

        config = TransactionalEventsConfig.from_env()

        assert config.enabled is False
        assert config.included_patterns == ["orders.*", "billing"]
        assert config.excluded_patterns == ["orders.audit.*"]
        assert config.flush_failure_policy == FlushFailurePolicy.FAIL_FAST
        assert config.default_connection == "primary"

    def test_invalid_policy_raises(self, clean_env):
        clean_env.setenv("TXEVENTS_FLUSH_POLICY", "retry")

        with pytest.raises(ConfigurationError):
            TransactionalEventsConfig.from_env()


class TestFromFile:
    def test_loads_json(self, tmp_path):
        path = tmp_path / "txevents.json"
        path.write_text(json.dumps({
            "included_patterns": ["orders.*"],
            "flush_failure_policy": "fail_fast",
            "unrelated": 1,
        }))

        config = TransactionalEventsConfig.from_file(str(path))

        assert config.included_patterns == ["orders.*"]
        assert config.flush_failure_policy == FlushFailurePolicy.FAIL_FAST

    def test_missing_file_falls_back_to_env(self, clean_env, tmp_path):
        clean_env.setenv("TXEVENTS_INCLUDED", "orders.*")

        config = TransactionalEventsConfig.from_file(str(tmp_path / "missing.json"))

        assert config.included_patterns == ["orders.*"]

    def test_invalid_json_raises(self, tmp_path):
        path = tmp_path / "txevents.json"
        path.write_text("{not json")

        with pytest.raises(ConfigurationError):
            TransactionalEventsConfig.from_file(str(path))

    def test_non_object_raises(self, tmp_path):
        path = tmp_path / "txevents.json"
        path.write_text("[1, 2]")

        with pytest.raises(ConfigurationError):
            TransactionalEventsConfig.from_file(str(path))

    def test_empty_connection_raises(self, tmp_path):
        path = tmp_path / "txevents.json"
        path.write_text(json.dumps({"default_connection": ""}))

        with pytest.raises(ConfigurationError):
            TransactionalEventsConfig.from_file(str(path))


class TestLoadConfig:
    def test_explicit_path(self, tmp_path):
        path = tmp_path / "custom.json"
        path.write_text(json.dumps({"enabled": False}))

        assert load_config(str(path)).enabled is False

    def test_default_path_discovered(self, clean_env, tmp_path):
        (tmp_path / "config").mkdir()
        (tmp_path / "config" / "txevents.json").write_text(
            json.dumps({"excluded_patterns": ["users.*"]})
        )

        assert load_config().excluded_patterns == ["users.*"]

    def test_environment_when_no_file(self, clean_env):
        clean_env.setenv("TXEVENTS_ENABLED", "false")

        assert load_config().enabled is False


class TestLoggingConfig:
    def test_from_env(self, clean_env):
        clean_env.setenv("TXEVENTS_LOG_LEVEL", "DEBUG")
        clean_env.setenv("TXEVENTS_JSON_LOGS", "true")

        config = LoggingConfig.from_env()

        assert config.level == "DEBUG"
        assert config.json_logs is True
        assert config.log_file is None


class TestLoadConfigLogging:
    def test_summary_logged_for_discovered_file(self, clean_env, tmp_path, caplog):
        (tmp_path / "txevents.json").write_text(json.dumps({"included_patterns": ["orders.*"]}))

        with caplog.at_level("INFO", logger="bootstrap.config"):
            config = load_config()

        assert config.included_patterns == ["orders.*"]
        assert "Loading config from: ./txevents.json" in caplog.text
        assert "Configuration loaded: enabled=True, included=1" in caplog.text
