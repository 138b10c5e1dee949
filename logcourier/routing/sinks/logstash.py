"""Logstash network sink — ships batches as newline-delimited JSON over TCP/TLS.

One connection is opened per batch and closed when the batch is written.
``abort()`` closes the active connection from another thread, which makes
the pending write fail with a ``TransportError``.
"""

from __future__ import annotations

import json
import logging
import socket
import ssl
import threading
from collections.abc import Sequence

from logcourier.core.serializer import canonical_json
from logcourier.errors import TransportError
from logcourier.models.config import LogstashConfig
from logcourier.models.events import LogEvent

logger = logging.getLogger(__name__)

TIMESTAMP_KEY = "@timestamp"
TOKEN_KEY = "token"


class LogstashSink:
    """Delivers event batches to a Logstash (or Logz.io) TCP listener.

    Parameters
    ----------
    config:
        Host, port, timeout, TLS and token settings.
    ssl_context:
        Context used when ``config.use_tls`` is set.  Defaults to
        ``ssl.create_default_context()``.
    """

    def __init__(self, config: LogstashConfig, ssl_context: ssl.SSLContext | None = None) -> None:
        if not config.host:
            raise ValueError("LogstashSink requires a host")
        self._config = config
        self._ssl_context = ssl_context
        self._lock = threading.Lock()
        self._active: socket.socket | None = None

    @property
    def sink_name(self) -> str:
        return "logstash"

    @property
    def address(self) -> tuple[str, int]:
        return (self._config.host or "", self._config.port)

    def encode(self, event: LogEvent) -> bytes:
        """Newline-terminated JSON line for one event."""
        document = json.loads(event.payload)
        document[TIMESTAMP_KEY] = event.created_at.isoformat()
        if self._config.logzio_token:
            document[TOKEN_KEY] = self._config.logzio_token
        return (canonical_json(document) + "\n").encode("utf-8")

    def deliver_batch(self, events: Sequence[LogEvent]) -> None:
        if not events:
            return
        data = b"".join(self.encode(event) for event in events)
        sock = self._connect()
        try:
            sock.sendall(data)
        except OSError as exc:
            raise TransportError(
                f"Sending {len(events)} event(s) to {self._describe()} failed: {exc}"
            ) from exc
        finally:
            self._release(sock)

        if self._config.log_activity:
            logger.info("Delivered %d event(s) to %s", len(events), self._describe())

    def abort(self) -> None:
        with self._lock:
            sock, self._active = self._active, None
        if sock is None:
            return
        try:
            sock.shutdown(socket.SHUT_RDWR)
        except OSError:
            pass
        sock.close()
        if self._config.log_activity:
            logger.info("Aborted delivery to %s", self._describe())

    def _connect(self) -> socket.socket:
        host, port = self.address
        try:
            sock = socket.create_connection((host, port), timeout=self._config.timeout)
            if self._config.use_tls:
                context = self._ssl_context or ssl.create_default_context()
                sock = context.wrap_socket(sock, server_hostname=host)
        except OSError as exc:
            raise TransportError(f"Could not connect to {self._describe()}: {exc}") from exc

        with self._lock:
            self._active = sock
        if self._config.log_activity:
            logger.info("Connected to %s", self._describe())
        return sock

    def _release(self, sock: socket.socket) -> None:
        with self._lock:
            if self._active is sock:
                self._active = None
        try:
            sock.close()
        except OSError:
            pass

    def _describe(self) -> str:
        host, port = self.address
        scheme = "tls" if self._config.use_tls else "tcp"
        return f"{scheme}://{host}:{port}"
