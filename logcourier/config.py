"""Environment-driven settings.

Reads ``LOGCOURIER_*`` environment variables and an optional ``.env`` file
via pydantic-settings, then produces the frozen ``LoggerConfig`` a
``Logger`` is constructed with.

Examples
--------
Override via environment::

    export LOGCOURIER_LOGSTASH_HOST=listener.logz.io
    export LOGCOURIER_LOGSTASH_PORT=5052
    export LOGCOURIER_EVENT_LOGGING_POLICY=multiple_events
    export LOGCOURIER_DEFAULT_USER_INFO='{"app": "checkout"}'
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from pydantic_settings import BaseSettings, SettingsConfigDict

from logcourier.errors import ConfigurationError
from logcourier.models.config import (
    EventLoggingPolicy,
    KeyNames,
    LoggerConfig,
    LogstashConfig,
)


class LoggerSettings(BaseSettings):
    """Flat, env-overridable view of ``LoggerConfig``."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="LOGCOURIER_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Internal diagnostics
    log_level: str = "WARNING"

    # Sinks
    enable_console_logging: bool = True
    enable_file_logging: bool = True
    enable_network_logging: bool = True
    log_file_path: Path = Path(".logcourier/logcourier.log")
    console_colors: bool = True

    # Composition
    event_logging_policy: EventLoggingPolicy = EventLoggingPolicy.SINGLE_EVENT
    default_user_info: dict[str, Any] = {}

    # Delivery
    flush_interval: float = 5.0
    logstash_host: str | None = None
    logstash_port: int = 9300
    logstash_timeout: float = 20.0
    logstash_use_tls: bool = True
    logstash_log_activity: bool = False
    logzio_token: str | None = None

    def to_logger_config(self, keys: KeyNames | None = None) -> LoggerConfig:
        """Build the frozen ``LoggerConfig`` these settings describe."""
        return LoggerConfig(
            keys=keys or KeyNames(),
            enable_console_logging=self.enable_console_logging,
            enable_file_logging=self.enable_file_logging,
            enable_network_logging=self.enable_network_logging,
            default_user_info=dict(self.default_user_info),
            event_logging_policy=self.event_logging_policy,
            flush_interval=self.flush_interval,
            log_file_path=self.log_file_path,
            console_colors=self.console_colors,
            logstash=LogstashConfig(
                host=self.logstash_host,
                port=self.logstash_port,
                timeout=self.logstash_timeout,
                use_tls=self.logstash_use_tls,
                log_activity=self.logstash_log_activity,
                logzio_token=self.logzio_token,
            ),
        )

    def configure_logging(self) -> None:
        """Apply ``log_level`` to the package's internal stdlib logger."""
        logging.getLogger("logcourier").setLevel(self.log_level.upper())


def validate_config(config: LoggerConfig, require_network_host: bool = True) -> None:
    """Check that *config* can start a pipeline.

    *require_network_host* is false when a custom network sink is supplied,
    since the Logstash connection settings are then unused.

    Raises
    ------
    ConfigurationError
        Listing every violation found, not just the first.
    """
    violations: list[str] = []

    if config.flush_interval <= 0:
        violations.append(
            f"flush_interval must be positive (got {config.flush_interval})."
        )

    if config.enable_network_logging:
        if require_network_host and not config.logstash.host:
            violations.append(
                "Network logging is enabled but no Logstash host is configured. "
                "Set LOGCOURIER_LOGSTASH_HOST or disable network logging."
            )
        if not 0 < config.logstash.port < 65536:
            violations.append(f"Invalid Logstash port {config.logstash.port}.")
        if config.logstash.timeout <= 0:
            violations.append(
                f"Logstash timeout must be positive (got {config.logstash.timeout})."
            )

    key_values = list(config.keys.model_dump().values())
    if any(not key for key in key_values):
        violations.append("Key names must be non-empty strings.")
    duplicates = sorted({key for key in key_values if key_values.count(key) > 1})
    if duplicates:
        violations.append(f"Duplicate key names: {', '.join(duplicates)}.")

    if violations:
        raise ConfigurationError(
            "Invalid logger configuration:\n"
            + "\n".join(f"  - {v}" for v in violations)
        )
