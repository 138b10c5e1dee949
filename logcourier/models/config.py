"""Logger configuration models — key names, sink toggles, Logstash connection."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict


class MergePolicy(str, Enum):
    """How colliding keys are resolved when two mappings are merged."""

    ENCAPSULATE_FLATTEN = "encapsulate_flatten"
    OVERRIDE = "override"


class EventLoggingPolicy(str, Enum):
    """How a log call carrying an error is turned into events."""

    SINGLE_EVENT = "single_event"
    MULTIPLE_EVENTS = "multiple_events"

    @property
    def merge_policy(self) -> MergePolicy:
        if self is EventLoggingPolicy.SINGLE_EVENT:
            return MergePolicy.ENCAPSULATE_FLATTEN
        return MergePolicy.OVERRIDE


class KeyNames(BaseModel):
    """Names of the keys written into ``metadata`` and ``userInfo``."""

    model_config = ConfigDict(frozen=True)

    log_type: str = "log_type"
    file: str = "file"
    function: str = "function"
    line: str = "line"
    app_version: str = "app_version"
    os_version: str = "ios_version"
    device_type: str = "ios_device"
    error_domain: str = "error_domain"
    error_code: str = "error_code"


class LogstashConfig(BaseModel):
    """Connection parameters for the network sink."""

    model_config = ConfigDict(frozen=True)

    host: str | None = None
    port: int = 9300
    timeout: float = 20.0
    use_tls: bool = True
    log_activity: bool = False
    logzio_token: str | None = None


class LoggerConfig(BaseModel):
    """Complete configuration for one ``Logger`` instance.

    Frozen: a running logger is only ever reconfigured by swapping the whole
    value through ``Logger.reconfigure``.
    """

    model_config = ConfigDict(frozen=True)

    keys: KeyNames = KeyNames()
    enable_console_logging: bool = True
    enable_file_logging: bool = True
    enable_network_logging: bool = True
    default_user_info: dict[str, Any] = {}
    event_logging_policy: EventLoggingPolicy = EventLoggingPolicy.SINGLE_EVENT
    flush_interval: float = 5.0
    log_file_path: Path = Path(".logcourier/logcourier.log")
    logstash: LogstashConfig = LogstashConfig()
    console_colors: bool = True
