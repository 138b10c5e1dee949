"""logcourier data models — all Pydantic v2, all frozen (immutable)."""

from logcourier.models.config import (
    EventLoggingPolicy,
    KeyNames,
    LoggerConfig,
    LogstashConfig,
    MergePolicy,
)
from logcourier.models.errors import CompositeError, LeafError, LogError, WrappedError
from logcourier.models.events import CallSite, ErrorRecord, LogEvent, LogLevel

__all__ = [
    # config
    "EventLoggingPolicy",
    "KeyNames",
    "LoggerConfig",
    "LogstashConfig",
    "MergePolicy",
    # errors
    "CompositeError",
    "LeafError",
    "LogError",
    "WrappedError",
    # events
    "CallSite",
    "ErrorRecord",
    "LogEvent",
    "LogLevel",
]
