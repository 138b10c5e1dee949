"""Log event models — levels, call sites, error records and composed events."""

from __future__ import annotations

import json
import sys
import threading
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class LogLevel(str, Enum):
    """Severity of a log call, also injected into userInfo as ``log_type``."""

    VERBOSE = "verbose"
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class CallSite(BaseModel):
    """Where a log call was made."""

    model_config = ConfigDict(frozen=True)

    file: str
    function: str
    line: int

    @classmethod
    def capture(cls, stacklevel: int = 1) -> CallSite:
        """Return the call site *stacklevel* frames above the caller of this method.

        ``stacklevel=1`` is the function that called ``capture``; the
        ``Logger`` level methods pass ``2`` so that the user's code is
        reported instead of the logger itself.
        """
        try:
            frame = sys._getframe(stacklevel)
        except ValueError:
            return cls(file="<unknown>", function="<unknown>", line=0)
        code = frame.f_code
        return cls(file=code.co_filename, function=code.co_name, line=frame.f_lineno)


class ErrorRecord(BaseModel):
    """One link of an error's cause chain, flattened for merging."""

    model_config = ConfigDict(frozen=True)

    domain: str
    code: int = 0
    user_info: dict[str, Any] = {}


class LogEvent(BaseModel):
    """A fully composed, immutable log event ready for the sinks.

    ``payload`` is the canonical JSON text of ``{message, metadata, userInfo}``.
    """

    model_config = ConfigDict(frozen=True)

    level: LogLevel
    payload: str
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    thread_name: str = Field(default_factory=lambda: threading.current_thread().name)

    def as_dict(self) -> dict[str, Any]:
        """Parse the payload back into a mapping."""
        return json.loads(self.payload)
