"""Tests for configuration models, env-driven settings and setup validation."""

from __future__ import annotations

from pathlib import Path

import pytest

from logcourier.config import LoggerSettings, validate_config
from logcourier.errors import ConfigurationError
from logcourier.models.config import (
    EventLoggingPolicy,
    KeyNames,
    LoggerConfig,
    LogstashConfig,
    MergePolicy,
)


class TestLoggerConfig:
    def test_defaults(self):
        config = LoggerConfig()
        assert config.enable_console_logging is True
        assert config.enable_file_logging is True
        assert config.enable_network_logging is True
        assert config.flush_interval == 5.0
        assert config.event_logging_policy is EventLoggingPolicy.SINGLE_EVENT
        assert config.logstash.port == 9300
        assert config.logstash.timeout == 20.0

    def test_default_key_names(self):
        keys = KeyNames()
        assert (keys.file, keys.function, keys.line) == ("file", "function", "line")
        assert (keys.app_version, keys.os_version, keys.device_type) == (
            "app_version",
            "ios_version",
            "ios_device",
        )
        assert keys.log_type == "log_type"

    def test_frozen(self):
        config = LoggerConfig()
        with pytest.raises(Exception):
            config.flush_interval = 1.0  # type: ignore[misc]

    def test_policy_maps_to_merge_policy(self):
        assert EventLoggingPolicy.SINGLE_EVENT.merge_policy is MergePolicy.ENCAPSULATE_FLATTEN
        assert EventLoggingPolicy.MULTIPLE_EVENTS.merge_policy is MergePolicy.OVERRIDE


class TestValidateConfig:
    def test_network_without_host_is_rejected(self):
        with pytest.raises(ConfigurationError, match="no Logstash host"):
            validate_config(LoggerConfig())

    def test_network_disabled_needs_no_host(self):
        validate_config(LoggerConfig(enable_network_logging=False))

    def test_custom_network_sink_needs_no_host(self):
        validate_config(LoggerConfig(), require_network_host=False)

    def test_all_violations_are_listed(self):
        config = LoggerConfig(
            flush_interval=0,
            logstash=LogstashConfig(host="h", port=70000, timeout=-1),
        )
        with pytest.raises(ConfigurationError) as excinfo:
            validate_config(config)
        message = str(excinfo.value)
        assert "flush_interval" in message
        assert "port" in message
        assert "timeout" in message

    def test_duplicate_key_names(self):
        config = LoggerConfig(enable_network_logging=False, keys=KeyNames(file="line"))
        with pytest.raises(ConfigurationError, match="Duplicate key names: line"):
            validate_config(config)


class TestLoggerSettings:
    def test_env_overrides(self, monkeypatch, tmp_path: Path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("LOGCOURIER_LOGSTASH_HOST", "listener.example.com")
        monkeypatch.setenv("LOGCOURIER_LOGSTASH_PORT", "5052")
        monkeypatch.setenv("LOGCOURIER_EVENT_LOGGING_POLICY", "multiple_events")
        monkeypatch.setenv("LOGCOURIER_DEFAULT_USER_INFO", '{"app": "checkout"}')
        monkeypatch.setenv("LOGCOURIER_ENABLE_FILE_LOGGING", "false")

        config = LoggerSettings().to_logger_config()
        assert config.logstash.host == "listener.example.com"
        assert config.logstash.port == 5052
        assert config.event_logging_policy is EventLoggingPolicy.MULTIPLE_EVENTS
        assert config.default_user_info == {"app": "checkout"}
        assert config.enable_file_logging is False

    def test_defaults_match_logger_config(self, monkeypatch, tmp_path: Path):
        monkeypatch.chdir(tmp_path)
        config = LoggerSettings().to_logger_config()
        assert config == LoggerConfig()

    def test_custom_keys_are_passed_through(self, monkeypatch, tmp_path: Path):
        monkeypatch.chdir(tmp_path)
        keys = KeyNames(log_type="type")
        assert LoggerSettings().to_logger_config(keys=keys).keys.log_type == "type"
