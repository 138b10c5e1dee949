"""Local file sink — appends formatted payloads to a log file."""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from pathlib import Path

from logcourier.models.events import LogLevel
from logcourier.routing.sinks._formatting import format_line

logger = logging.getLogger(__name__)


class LocalFileSink:
    """Appends one line per event to *path*.

    Parameters
    ----------
    path:
        Target log file.  Parent directories are created on construction.
    """

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()

    @property
    def sink_name(self) -> str:
        return "file"

    @property
    def path(self) -> Path:
        return self._path

    def send(self, payload: str, level: LogLevel) -> None:
        line = format_line(
            payload, level, datetime.now(timezone.utc), threading.current_thread().name
        )
        with self._lock, self._path.open("a", encoding="utf-8") as handle:
            handle.write(line + "\n")
        logger.debug("LocalFileSink: appended %s event to %s", level.value, self._path)

    def read_lines(self) -> list[str]:
        """Return every line written so far (empty if the file does not exist)."""
        if not self._path.exists():
            return []
        return self._path.read_text(encoding="utf-8").splitlines()
