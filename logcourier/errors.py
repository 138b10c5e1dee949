"""Exception taxonomy for logcourier.

Composition, transport and configuration failures each have their own type
so callers can tell a bad payload from a lost batch from a broken setup.
"""

from __future__ import annotations


class LogCourierError(RuntimeError):
    """Base class for every error raised by logcourier."""


class CompositionError(LogCourierError):
    """Raised when a composed payload cannot be serialized.

    Never logged through the pipeline itself (that would recurse); it is
    surfaced to the immediate caller via ``CompositionResult``.
    """


class TransportError(LogCourierError):
    """A network delivery attempt failed.

    Only ever reported through a flush future / completion callback, never
    raised synchronously from ``enqueue`` or a log call.
    """


class FlushCancelledError(TransportError):
    """The flush attempt was cancelled before it could finish."""


class ConfigurationError(LogCourierError):
    """Raised at setup when the configuration cannot start a pipeline.

    This error must not be caught and ignored: the pipeline stays stopped.
    """
