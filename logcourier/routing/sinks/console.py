"""Console sink — prints formatted payloads through a rich ``Console``."""

from __future__ import annotations

import threading
from datetime import datetime, timezone

from rich.console import Console
from rich.markup import escape

from logcourier.models.events import LogLevel
from logcourier.routing.sinks._formatting import LEVEL_STYLES, format_timestamp


class ConsoleSink:
    """Writes one line per event to the terminal.

    Parameters
    ----------
    console:
        The rich console to print to.  Defaults to one writing to stderr.
    colors:
        Colour the level label by severity.
    """

    def __init__(self, console: Console | None = None, colors: bool = True) -> None:
        self._console = console or Console(stderr=True)
        self._colors = colors

    @property
    def sink_name(self) -> str:
        return "console"

    @property
    def console(self) -> Console:
        return self._console

    def send(self, payload: str, level: LogLevel) -> None:
        timestamp = format_timestamp(datetime.now(timezone.utc))
        label = level.value.upper()
        if self._colors:
            label = f"[{LEVEL_STYLES[level]}]{label}[/]"
        self._console.print(
            f"[dim]{timestamp}[/dim] {escape(threading.current_thread().name)} "
            f"{label}: {escape(payload)}",
            soft_wrap=True,
            highlight=False,
        )
