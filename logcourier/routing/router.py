"""SinkRouter — forwards composed events to every enabled sink.

Console and file sinks are written synchronously, console first, then file.
The network sink is never written directly: events are enqueued into the
``DeliveryScheduler`` and leave with the next flush.  A failing local sink
is logged and does not stop delivery to the others.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from logcourier.core.scheduler import DeliveryScheduler
from logcourier.models.events import LogEvent
from logcourier.routing.sinks import Sink

logger = logging.getLogger(__name__)


class SinkRouter:
    """Routes events to the console, file and network slots.

    A slot receives events only when it is both present and enabled.

    Usage
    -----
    >>> router = SinkRouter(console=ConsoleSink(), scheduler=scheduler)
    >>> router.route(event)
    ['console', 'logstash']
    """

    def __init__(
        self,
        console: Sink | None = None,
        file: Sink | None = None,
        scheduler: DeliveryScheduler | None = None,
        *,
        console_enabled: bool = True,
        file_enabled: bool = True,
        network_enabled: bool = True,
    ) -> None:
        self._console = console
        self._file = file
        self._scheduler = scheduler
        self._console_enabled = console_enabled and console is not None
        self._file_enabled = file_enabled and file is not None
        self._network_enabled = network_enabled and scheduler is not None

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def console_enabled(self) -> bool:
        return self._console_enabled

    @property
    def file_enabled(self) -> bool:
        return self._file_enabled

    @property
    def network_enabled(self) -> bool:
        return self._network_enabled

    @property
    def scheduler(self) -> DeliveryScheduler | None:
        return self._scheduler

    @property
    def local_sinks(self) -> list[Sink]:
        """Enabled synchronous sinks, in delivery order."""
        sinks: list[Sink] = []
        if self._console_enabled and self._console is not None:
            sinks.append(self._console)
        if self._file_enabled and self._file is not None:
            sinks.append(self._file)
        return sinks

    # ------------------------------------------------------------------
    # Routing
    # ------------------------------------------------------------------

    def route(self, event: LogEvent) -> list[str]:
        """Deliver *event* to every enabled sink.

        Returns the names of the sinks that accepted it.
        """
        delivered = self._send_local(event)
        if self._network_enabled and self._scheduler is not None:
            self._scheduler.enqueue(event)
            delivered.append(self._scheduler.network.sink_name)
        return delivered

    def route_all(self, events: Sequence[LogEvent]) -> None:
        """Deliver *events* in order; network events stay contiguous in the buffer."""
        for event in events:
            self._send_local(event)
        if events and self._network_enabled and self._scheduler is not None:
            self._scheduler.enqueue_all(events)

    def _send_local(self, event: LogEvent) -> list[str]:
        delivered: list[str] = []
        for sink in self.local_sinks:
            try:
                sink.send(event.payload, event.level)
                delivered.append(sink.sink_name)
            except Exception as exc:  # noqa: BLE001
                logger.error(
                    "Sink %s failed for %s event: %s",
                    sink.sink_name,
                    event.level.value,
                    exc,
                )
        return delivered
