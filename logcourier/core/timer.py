"""Repeating timer backed by a daemon thread."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

logger = logging.getLogger(__name__)


class RepeatingTimer:
    """Calls *callback* every *interval* seconds until ``stop()``.

    The first call happens one interval after ``start()``.  A callback that
    raises is logged and the timer keeps running.
    """

    def __init__(
        self,
        interval: float,
        callback: Callable[[], object],
        name: str = "logcourier-timer",
    ) -> None:
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self._interval = interval
        self._callback = callback
        self._stop_event = threading.Event()
        self._thread = threading.Thread(target=self._run, name=name, daemon=True)

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def running(self) -> bool:
        return self._thread.is_alive() and not self._stop_event.is_set()

    def start(self) -> RepeatingTimer:
        self._thread.start()
        return self

    def stop(self, timeout: float | None = 5.0) -> None:
        """Stop firing and wait for the timer thread to exit."""
        self._stop_event.set()
        if self._thread.is_alive() and self._thread is not threading.current_thread():
            self._thread.join(timeout=timeout)

    def _run(self) -> None:
        while not self._stop_event.wait(timeout=self._interval):
            try:
                self._callback()
            except Exception:
                logger.exception("Timer callback failed")


def every(interval: float, callback: Callable[[], object]) -> RepeatingTimer:
    """Start and return a ``RepeatingTimer`` firing *callback* every *interval* seconds."""
    return RepeatingTimer(interval, callback).start()
