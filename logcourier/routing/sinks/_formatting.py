"""Shared line formatting for the console and file sinks."""

from __future__ import annotations

from datetime import datetime

from logcourier.models.events import LogLevel

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S.%f"

LEVEL_STYLES: dict[LogLevel, str] = {
    LogLevel.VERBOSE: "dim",
    LogLevel.DEBUG: "green",
    LogLevel.INFO: "cyan",
    LogLevel.WARNING: "yellow",
    LogLevel.ERROR: "bold red",
}


def format_timestamp(moment: datetime) -> str:
    """Render *moment* in local time with millisecond precision."""
    return moment.astimezone().strftime(TIMESTAMP_FORMAT)[:-3]


def format_line(payload: str, level: LogLevel, moment: datetime, thread_name: str) -> str:
    """``"<timestamp> <thread> <LEVEL>: <payload>"``"""
    return f"{format_timestamp(moment)} {thread_name} {level.value.upper()}: {payload}"
