"""Shared test fixtures for logcourier."""

from __future__ import annotations

import threading
from collections.abc import Callable, Sequence
from typing import Any

import pytest

from logcourier.core.composer import EventComposer
from logcourier.core.platform_info import StaticPlatformInfo
from logcourier.errors import TransportError
from logcourier.models.config import EventLoggingPolicy, LoggerConfig
from logcourier.models.events import CallSite, LogEvent, LogLevel


class RecordingSink:
    """A local sink that keeps every payload it receives."""

    def __init__(self, name: str = "recording") -> None:
        self._name = name
        self.received: list[tuple[str, LogLevel]] = []

    @property
    def sink_name(self) -> str:
        return self._name

    def send(self, payload: str, level: LogLevel) -> None:
        self.received.append((payload, level))


class FailingSink:
    """A local sink that always raises."""

    @property
    def sink_name(self) -> str:
        return "failing"

    def send(self, payload: str, level: LogLevel) -> None:
        raise RuntimeError("Sink failure for testing")


class RecordingNetworkSink:
    """A network sink that records batches.

    ``gate`` (when set) makes ``deliver_batch`` block until it is released
    or ``abort()`` is called; ``fail`` makes every delivery raise.
    """

    def __init__(self, *, blocking: bool = False, fail: bool = False) -> None:
        self.batches: list[list[LogEvent]] = []
        self.fail = fail
        self.abort_calls = 0
        self.started = threading.Event()
        self.gate = threading.Event()
        self._aborted = threading.Event()
        if not blocking:
            self.gate.set()

    @property
    def sink_name(self) -> str:
        return "recording_network"

    @property
    def delivered(self) -> list[LogEvent]:
        return [event for batch in self.batches for event in batch]

    def deliver_batch(self, events: Sequence[LogEvent]) -> None:
        self.started.set()
        while not self.gate.wait(timeout=0.01):
            if self._aborted.is_set():
                self._aborted.clear()
                raise TransportError("aborted")
        if self.fail:
            raise TransportError("network unreachable")
        self.batches.append(list(events))

    def abort(self) -> None:
        self.abort_calls += 1
        self._aborted.set()


@pytest.fixture
def platform_info() -> StaticPlatformInfo:
    """Deterministic platform metadata."""
    return StaticPlatformInfo(
        app_version_value="1.4.0",
        app_build_value="812",
        os_version_value="17.2",
        device_type_value="iPhone15,2",
    )


@pytest.fixture
def call_site() -> CallSite:
    return CallSite(file="/Users/dev/project/Sources/Checkout/Basket.swift", function="add(item:)", line=42)


@pytest.fixture
def make_composer(platform_info: StaticPlatformInfo) -> Callable[..., EventComposer]:
    """Factory fixture: an EventComposer with test platform info."""

    def _factory(**overrides: Any) -> EventComposer:
        return EventComposer(LoggerConfig(**overrides), platform_info)

    return _factory


@pytest.fixture
def composer(make_composer: Callable[..., EventComposer]) -> EventComposer:
    return make_composer()


@pytest.fixture
def multi_composer(make_composer: Callable[..., EventComposer]) -> EventComposer:
    return make_composer(event_logging_policy=EventLoggingPolicy.MULTIPLE_EVENTS)


@pytest.fixture
def make_event() -> Callable[..., LogEvent]:
    """Factory fixture: a LogEvent with a small JSON payload."""

    def _factory(seq: int = 0, level: LogLevel = LogLevel.INFO) -> LogEvent:
        return LogEvent(level=level, payload=f'{{"message":"log-{seq}"}}')

    return _factory


@pytest.fixture
def network_sink() -> RecordingNetworkSink:
    return RecordingNetworkSink()


@pytest.fixture
def make_network_sink() -> Callable[..., RecordingNetworkSink]:
    """Factory fixture: RecordingNetworkSink(blocking=..., fail=...)."""
    return RecordingNetworkSink


@pytest.fixture
def make_sink() -> Callable[..., RecordingSink]:
    """Factory fixture: RecordingSink(name)."""
    return RecordingSink


@pytest.fixture
def failing_sink() -> FailingSink:
    return FailingSink()
