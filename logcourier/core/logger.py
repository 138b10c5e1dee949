"""Logger — the public entry point of logcourier.

Wires the composer, router and delivery scheduler together::

    logger = Logger(LoggerConfig(logstash=LogstashConfig(host="logs.example.com")))
    logger.setup()
    logger.info("Checkout started", user_info={"basket": basket_id})
    logger.error("Payment failed", error=exc)
    logger.force_send().result()
    logger.shutdown()

Configuration is a frozen ``LoggerConfig``.  The only way to change it on a
live logger is ``reconfigure()``, which swaps the whole value under a lock.
Known races:

* A log call that already read the previous configuration finishes
  composing with it, so events in flight during a reconfiguration may still
  carry the old key names or default userInfo.
* A log call that already read the previous router enqueues into the
  retired scheduler.  Those events are forwarded to the new scheduler.  When
  the reconfiguration disables network logging, or after ``shutdown()``,
  there is no successor and they are dropped with a warning.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future
from typing import Any

from logcourier.config import LoggerSettings, validate_config
from logcourier.core.composer import CompositionResult, EventComposer
from logcourier.core.platform_info import PlatformInfo, SystemPlatformInfo
from logcourier.core.scheduler import Completion, DeliveryScheduler
from logcourier.errors import TransportError
from logcourier.models.config import EventLoggingPolicy, LoggerConfig
from logcourier.models.events import CallSite, LogLevel
from logcourier.routing.router import SinkRouter
from logcourier.routing.sinks import NetworkSink, Sink
from logcourier.routing.sinks.console import ConsoleSink
from logcourier.routing.sinks.local_file import LocalFileSink
from logcourier.routing.sinks.logstash import LogstashSink

logger = logging.getLogger(__name__)

# Fields whose change requires rebuilding sinks and the scheduler.
_ROUTING_FIELDS = frozenset(
    {
        "enable_console_logging",
        "enable_file_logging",
        "enable_network_logging",
        "flush_interval",
        "log_file_path",
        "logstash",
        "console_colors",
    }
)


class Logger:
    """Structured logger routing events to console, file and Logstash.

    Parameters
    ----------
    config:
        Logger configuration.  Defaults to ``LoggerConfig()``.
    platform_info:
        Provider of app/OS metadata.  Defaults to ``SystemPlatformInfo()``.
    console_sink, file_sink, network_sink:
        Replace the built-in sinks.  A slot is still only used when its
        ``enable_*`` flag is set.
    """

    def __init__(
        self,
        config: LoggerConfig | None = None,
        *,
        platform_info: PlatformInfo | None = None,
        console_sink: Sink | None = None,
        file_sink: Sink | None = None,
        network_sink: NetworkSink | None = None,
    ) -> None:
        self._config = config or LoggerConfig()
        self._platform = platform_info or SystemPlatformInfo()
        self._console_sink = console_sink
        self._file_sink = file_sink
        self._network_sink = network_sink

        self._lock = threading.RLock()
        self._composer = EventComposer(self._config, self._platform)
        self._router: SinkRouter | None = None
        self._scheduler: DeliveryScheduler | None = None

    @classmethod
    def from_settings(cls, settings: LoggerSettings | None = None, **kwargs: Any) -> Logger:
        """Build a logger from ``LOGCOURIER_*`` environment settings."""
        settings = settings or LoggerSettings()
        settings.configure_logging()
        return cls(settings.to_logger_config(), **kwargs)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def config(self) -> LoggerConfig:
        return self._config

    @property
    def router(self) -> SinkRouter | None:
        return self._router

    @property
    def scheduler(self) -> DeliveryScheduler | None:
        return self._scheduler

    @property
    def running(self) -> bool:
        return self._router is not None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def setup(self) -> None:
        """Validate the configuration, build the sinks and start the periodic flush.

        Raises
        ------
        ConfigurationError
            If the configuration cannot start a pipeline.  Nothing is
            started in that case.
        """
        with self._lock:
            if self._router is not None:
                logger.warning("Logger.setup() called on a running logger; ignoring.")
                return
            self._router, self._scheduler = self._build_routing(self._config)
            if self._scheduler is not None:
                self._scheduler.start()

    def shutdown(self, flush: bool = True, timeout: float | None = 30.0) -> None:
        """Stop the periodic flush, optionally deliver pending events, tear down."""
        with self._lock:
            scheduler, self._scheduler = self._scheduler, None
            self._router = None
        if scheduler is not None:
            scheduler.shutdown(flush=flush, timeout=timeout)
            logger.info("Logger shut down")

    def reconfigure(self, config: LoggerConfig | None = None, **changes: Any) -> LoggerConfig:
        """Replace the configuration, atomically with respect to other reconfigurations.

        Either pass a complete ``config`` or individual field ``changes``.
        On a running logger, changes to sinks, flush interval or Logstash
        settings rebuild the routing; pending network events are flushed
        through the old scheduler first.
        """
        with self._lock:
            if config is None:
                config = LoggerConfig.model_validate({**self._config.model_dump(), **changes})
            old = self._config
            rebuild = self._router is not None and any(
                getattr(old, name) != getattr(config, name) for name in _ROUTING_FIELDS
            )

            if rebuild:
                router, scheduler = self._build_routing(config)
                old_scheduler = self._scheduler
                self._router, self._scheduler = router, scheduler
                if old_scheduler is not None:
                    old_scheduler.shutdown(flush=True, timeout=30.0, successor=scheduler)
                if scheduler is not None:
                    scheduler.start()

            self._config = config
            self._composer = EventComposer(config, self._platform)
            logger.debug("Logger reconfigured (routing rebuilt: %s)", rebuild)
            return config

    def _build_routing(
        self, config: LoggerConfig
    ) -> tuple[SinkRouter, DeliveryScheduler | None]:
        validate_config(config, require_network_host=self._network_sink is None)

        console = None
        if config.enable_console_logging:
            console = self._console_sink or ConsoleSink(colors=config.console_colors)
        file = None
        if config.enable_file_logging:
            file = self._file_sink or LocalFileSink(config.log_file_path)
        scheduler = None
        if config.enable_network_logging:
            network = self._network_sink or LogstashSink(config.logstash)
            scheduler = DeliveryScheduler(network, flush_interval=config.flush_interval)

        router = SinkRouter(
            console=console,
            file=file,
            scheduler=scheduler,
            console_enabled=config.enable_console_logging,
            file_enabled=config.enable_file_logging,
            network_enabled=config.enable_network_logging,
        )
        return router, scheduler

    def __enter__(self) -> Logger:
        self.setup()
        return self

    def __exit__(self, *exc: object) -> None:
        self.shutdown()

    # ------------------------------------------------------------------
    # Delivery
    # ------------------------------------------------------------------

    def force_send(self, completion: Completion | None = None) -> Future[TransportError | None]:
        """Flush the network buffer now.

        Without an enabled network sink the returned future is already
        resolved to ``None`` and *completion* is called with ``None``.
        """
        scheduler = self._scheduler
        if scheduler is not None:
            return scheduler.flush(completion)

        future: Future[TransportError | None] = Future()
        future.set_result(None)
        if completion is not None:
            completion(None)
        return future

    def cancel_sending(self) -> int:
        """Cancel in-flight network flushes; returns how many were cancelled."""
        scheduler = self._scheduler
        if scheduler is None:
            return 0
        return scheduler.cancel()

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------

    def verbose(
        self,
        message: str,
        error: Any = None,
        user_info: dict[str, Any] | None = None,
        *,
        call_site: CallSite | None = None,
    ) -> CompositionResult:
        return self.log(
            LogLevel.VERBOSE, message, error, user_info,
            call_site=call_site or CallSite.capture(stacklevel=2),
        )

    def debug(
        self,
        message: str,
        error: Any = None,
        user_info: dict[str, Any] | None = None,
        *,
        call_site: CallSite | None = None,
    ) -> CompositionResult:
        return self.log(
            LogLevel.DEBUG, message, error, user_info,
            call_site=call_site or CallSite.capture(stacklevel=2),
        )

    def info(
        self,
        message: str,
        error: Any = None,
        user_info: dict[str, Any] | None = None,
        *,
        call_site: CallSite | None = None,
    ) -> CompositionResult:
        return self.log(
            LogLevel.INFO, message, error, user_info,
            call_site=call_site or CallSite.capture(stacklevel=2),
        )

    def warning(
        self,
        message: str,
        error: Any = None,
        user_info: dict[str, Any] | None = None,
        *,
        call_site: CallSite | None = None,
    ) -> CompositionResult:
        return self.log(
            LogLevel.WARNING, message, error, user_info,
            call_site=call_site or CallSite.capture(stacklevel=2),
        )

    def error(
        self,
        message: str,
        error: Any = None,
        user_info: dict[str, Any] | None = None,
        *,
        call_site: CallSite | None = None,
    ) -> CompositionResult:
        return self.log(
            LogLevel.ERROR, message, error, user_info,
            call_site=call_site or CallSite.capture(stacklevel=2),
        )

    def log(
        self,
        level: LogLevel,
        message: str,
        error: Any = None,
        user_info: dict[str, Any] | None = None,
        *,
        call_site: CallSite | None = None,
        policy: EventLoggingPolicy | None = None,
    ) -> CompositionResult:
        """Compose the events for one log call and route them.

        Returns the ``CompositionResult`` so callers can inspect the events
        or call ``raise_for_errors()``.  Before ``setup()`` the events are
        composed but not routed anywhere.
        """
        composer, router = self._composer, self._router
        result = composer.compose(
            level,
            message,
            call_site=call_site or CallSite.capture(stacklevel=2),
            error=error,
            user_info=user_info,
            policy=policy,
        )
        if router is None:
            logger.debug("Logger not set up; %d event(s) not routed", len(result.events))
        else:
            router.route_all(result.events)
        return result


shared = Logger()
