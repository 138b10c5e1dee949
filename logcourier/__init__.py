"""logcourier: structured log events for console, file and Logstash.

Composes events from a message, an optional error chain and caller/process
userInfo, then routes them to the enabled sinks:

  - Two error policies: one event per call with every cause merged in
    without losing colliding keys, or one event per independent error
  - Console (rich) and file sinks written synchronously
  - Logstash/Logz.io network sink flushed in periodic batches, on demand,
    or cancelled in flight
  - Env-driven configuration via pydantic-settings
"""

__version__ = "0.1.0"

from logcourier.core.logger import Logger, shared
from logcourier.models.config import (
    EventLoggingPolicy,
    KeyNames,
    LoggerConfig,
    LogstashConfig,
)
from logcourier.models.errors import CompositeError, LeafError, WrappedError
from logcourier.models.events import LogLevel

__all__ = [
    "Logger",
    "shared",
    "EventLoggingPolicy",
    "KeyNames",
    "LoggerConfig",
    "LogstashConfig",
    "CompositeError",
    "LeafError",
    "WrappedError",
    "LogLevel",
    "__version__",
]
