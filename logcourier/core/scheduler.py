"""DeliveryScheduler — batches network events, force-flushes and cancels.

The scheduler owns the outbound buffer of events waiting for the network
sink.  Three callers share it:

* log calls, through ``enqueue`` / ``enqueue_all``;
* the periodic timer started by ``start()``;
* explicit ``flush()`` / ``cancel()`` calls.

The buffer lock only guards append and the cutoff swap in ``flush``, so
composition and network I/O never run while it is held.  Each ``flush``
takes the whole buffer at its cutoff; events enqueued afterwards belong to
the next flush.  Delivery runs on a single worker thread, so batches reach
the network sink in flush order.  Delivery is at-most-once: a failed or
cancelled batch is reported and then dropped, never re-buffered.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError

from logcourier.core.timer import RepeatingTimer
from logcourier.errors import FlushCancelledError, TransportError
from logcourier.models.events import LogEvent
from logcourier.routing.sinks import NetworkSink

logger = logging.getLogger(__name__)

Completion = Callable[[TransportError | None], object]


class _FlushAttempt:
    """One batch on its way to the network sink.

    ``finish`` resolves the future and calls the completion exactly once,
    whichever of the worker thread or ``cancel()`` gets there first.
    """

    def __init__(self, batch: list[LogEvent], completion: Completion | None) -> None:
        self.batch = batch
        self.future: Future[TransportError | None] = Future()
        self.cancelled = threading.Event()
        self._completion = completion
        self._lock = threading.Lock()
        self._finished = False

    def finish(self, error: TransportError | None) -> bool:
        with self._lock:
            if self._finished:
                return False
            self._finished = True
        self.future.set_result(error)
        if self._completion is not None:
            try:
                self._completion(error)
            except Exception:
                logger.exception("Flush completion handler raised")
        return True


class DeliveryScheduler:
    """Outbound buffer and delivery coordinator for a network sink.

    Parameters
    ----------
    network:
        The sink that receives batches via ``deliver_batch``.
    flush_interval:
        Seconds between periodic flushes once ``start()`` is called.

    Usage
    -----
    >>> scheduler = DeliveryScheduler(network_sink, flush_interval=5.0)
    >>> scheduler.start()
    >>> scheduler.enqueue(event)
    >>> error = scheduler.flush().result()   # None on success
    >>> scheduler.shutdown()
    """

    def __init__(self, network: NetworkSink, flush_interval: float = 5.0) -> None:
        self._network = network
        self._flush_interval = flush_interval
        self._lock = threading.Lock()
        self._buffer: list[LogEvent] = []
        self._in_flight: set[_FlushAttempt] = set()
        self._executor = ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="logcourier-flush"
        )
        self._timer: RepeatingTimer | None = None
        self._closed = False
        self._successor: DeliveryScheduler | None = None

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def network(self) -> NetworkSink:
        return self._network

    @property
    def flush_interval(self) -> float:
        return self._flush_interval

    @property
    def pending_count(self) -> int:
        """Number of buffered events not yet taken by a flush."""
        with self._lock:
            return len(self._buffer)

    @property
    def in_flight_count(self) -> int:
        """Number of flush attempts that have not finished yet."""
        with self._lock:
            return len(self._in_flight)

    @property
    def running(self) -> bool:
        return self._timer is not None and self._timer.running

    # ------------------------------------------------------------------
    # Buffer
    # ------------------------------------------------------------------

    def enqueue(self, event: LogEvent) -> None:
        """Append *event* to the outbound buffer."""
        self.enqueue_all([event])

    def enqueue_all(self, events: Iterable[LogEvent]) -> None:
        """Append *events* contiguously, keeping their order.

        After ``shutdown()`` the events are handed to the successor
        scheduler, if one was given; otherwise they are dropped with a
        warning.
        """
        events = list(events)
        with self._lock:
            if not self._closed:
                self._buffer.extend(events)
                return
            successor = self._successor
        if successor is not None:
            successor.enqueue_all(events)
        elif events:
            logger.warning(
                "Dropped %d event(s) enqueued after %s scheduler shut down",
                len(events),
                self._network.sink_name,
            )

    # ------------------------------------------------------------------
    # Flush / cancel
    # ------------------------------------------------------------------

    def flush(self, completion: Completion | None = None) -> Future[TransportError | None]:
        """Deliver everything buffered so far.

        Returns a future resolving to ``None`` on success or to the
        ``TransportError`` describing the failure; *completion*, if given,
        is called once with the same value.  An empty buffer completes
        immediately without touching the network.
        """
        with self._lock:
            if self._closed:
                batch = None
            else:
                batch, self._buffer = self._buffer, []
            attempt = _FlushAttempt(batch or [], completion)
            if batch:
                # shutdown() sets _closed under this lock before closing the executor
                self._in_flight.add(attempt)
                self._executor.submit(self._deliver, attempt)

        if batch is None:
            attempt.finish(TransportError("Delivery scheduler is shut down"))
        elif not batch:
            attempt.finish(None)
        else:
            logger.debug("Flushing %d event(s) to %s", len(batch), self._network.sink_name)
        return attempt.future

    def cancel(self) -> int:
        """Cancel every in-flight flush.

        Each cancelled attempt completes with ``FlushCancelledError`` and the
        network sink is asked to ``abort()``.  Events still in the buffer are
        left for the next flush.  Returns the number of attempts cancelled.
        """
        with self._lock:
            attempts = list(self._in_flight)

        cancelled = 0
        for attempt in attempts:
            attempt.cancelled.set()
            if attempt.finish(FlushCancelledError("Flush cancelled")):
                cancelled += 1

        if attempts:
            try:
                self._network.abort()
            except Exception:
                logger.exception("Aborting %s failed", self._network.sink_name)
            logger.info("Cancelled %d in-flight flush(es)", cancelled)
        return cancelled

    def _deliver(self, attempt: _FlushAttempt) -> None:
        try:
            if attempt.cancelled.is_set():
                return
            error: TransportError | None = None
            try:
                self._network.deliver_batch(attempt.batch)
            except TransportError as exc:
                error = exc
            except Exception as exc:
                error = TransportError(f"{self._network.sink_name} delivery failed: {exc}")
                error.__cause__ = exc

            if attempt.cancelled.is_set():
                error = FlushCancelledError("Flush cancelled")
            if error is not None:
                logger.warning(
                    "Lost batch of %d event(s): %s", len(attempt.batch), error
                )
            attempt.finish(error)
        finally:
            with self._lock:
                self._in_flight.discard(attempt)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Start the periodic flush.  Calling it twice is a no-op."""
        if self._timer is not None:
            return
        self._timer = RepeatingTimer(
            self._flush_interval, self._scheduled_flush, name="logcourier-flush-timer"
        ).start()
        logger.info("Periodic flush every %.1fs started", self._flush_interval)

    def stop(self) -> None:
        """Stop the periodic flush and wait for the timer thread to exit."""
        timer, self._timer = self._timer, None
        if timer is not None:
            timer.stop()
            logger.info("Periodic flush stopped")

    def shutdown(
        self,
        flush: bool = True,
        timeout: float | None = None,
        successor: DeliveryScheduler | None = None,
    ) -> None:
        """Stop the timer, optionally deliver what is left, release the worker.

        With a *successor*, events still buffered at close (and any enqueued
        later) move to it instead of being dropped.
        """
        self.stop()
        if flush:
            try:
                self.flush().result(timeout=timeout)
            except FutureTimeoutError:
                logger.warning("Final flush did not finish within %ss", timeout)
        with self._lock:
            self._closed = True
            self._successor = successor
            leftover, self._buffer = self._buffer, []
        if leftover:
            if successor is not None:
                successor.enqueue_all(leftover)
            else:
                logger.warning(
                    "Dropped %d undelivered event(s) at shutdown", len(leftover)
                )
        self._executor.shutdown(wait=True)

    def _scheduled_flush(self) -> None:
        self.flush()

    def __enter__(self) -> DeliveryScheduler:
        return self

    def __exit__(self, *exc: object) -> None:
        self.shutdown()
