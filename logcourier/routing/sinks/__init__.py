"""Sink protocols for logcourier event routing.

Local sinks implement ``Sink``: a ``sink_name`` property and a synchronous
``send(payload, level)``.  The network sink implements ``NetworkSink``
instead and is only ever driven by the ``DeliveryScheduler``.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from logcourier.models.events import LogEvent, LogLevel


@runtime_checkable
class Sink(Protocol):
    """A local, synchronous consumer of composed payloads.

    Attributes
    ----------
    sink_name : str
        A unique human-readable identifier (e.g. ``"console"``, ``"file"``).
    """

    @property
    def sink_name(self) -> str:
        """Return the unique name of this sink."""
        ...

    def send(self, payload: str, level: LogLevel) -> None:
        """Write one serialized payload.

        Implementations may raise; the router logs the failure and carries
        on with the remaining sinks.
        """
        ...


@runtime_checkable
class NetworkSink(Protocol):
    """A remote consumer that receives events in batches."""

    @property
    def sink_name(self) -> str:
        """Return the unique name of this sink."""
        ...

    def deliver_batch(self, events: Sequence[LogEvent]) -> None:
        """Deliver *events* in order.

        Raises
        ------
        TransportError
            If the batch could not be delivered.
        """
        ...

    def abort(self) -> None:
        """Abort the delivery currently in progress, if any."""
        ...
