"""Error chain walking — cause chains and aggregate disassociation.

Works on the structured variants in ``logcourier.models.errors`` and on
native Python exceptions:

* the caused-by relation of an exception is ``__cause__``, falling back to
  ``__context__`` unless the context was suppressed (``raise ... from None``);
* ``BaseExceptionGroup`` is the aggregate, split like ``CompositeError``.

Neither function raises, whatever it is handed.
"""

from __future__ import annotations

import builtins
from collections.abc import Mapping
from typing import Any

from logcourier.models.errors import CompositeError, LeafError, WrappedError
from logcourier.models.events import ErrorRecord

LOCALIZED_DESCRIPTION_KEY = "localized_description"


def _human_readable(info: Mapping[Any, Any], description: str | None) -> dict[str, Any]:
    """Copy *info* with string keys and the description resolved into it."""
    readable = {str(key): value for key, value in info.items()}
    if description and LOCALIZED_DESCRIPTION_KEY not in readable:
        readable[LOCALIZED_DESCRIPTION_KEY] = description
    return readable


def _exception_domain(exc: BaseException) -> str:
    cls = type(exc)
    if cls.__module__ == builtins.__name__:
        return cls.__qualname__
    return f"{cls.__module__}.{cls.__qualname__}"


def _exception_code(exc: BaseException) -> int:
    for attr in ("code", "errno"):
        value = getattr(exc, attr, None)
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    return 0


def _description(error: Any) -> str | None:
    try:
        return str(error) or None
    except Exception:  # noqa: BLE001
        return None


def to_record(error: Any) -> ErrorRecord:
    """Convert a single error value (ignoring its cause) into an ``ErrorRecord``."""
    if isinstance(error, (LeafError, WrappedError, CompositeError)):
        return ErrorRecord(
            domain=error.domain,
            code=error.code,
            user_info=_human_readable(error.info, error.description),
        )
    if isinstance(error, BaseException):
        info = getattr(error, "user_info", None)
        return ErrorRecord(
            domain=_exception_domain(error),
            code=_exception_code(error),
            user_info=_human_readable(
                info if isinstance(info, Mapping) else {}, _description(error)
            ),
        )
    return ErrorRecord(
        domain=type(error).__qualname__,
        user_info=_human_readable({}, _description(error)),
    )


def _next_cause(error: Any) -> Any:
    if isinstance(error, WrappedError):
        return error.cause
    if isinstance(error, BaseException):
        if error.__cause__ is not None:
            return error.__cause__
        if not error.__suppress_context__:
            return error.__context__
    return None


def cause_chain(error: Any) -> list[ErrorRecord]:
    """Return the records of *error* and every cause below it, outermost first.

    ``None`` yields an empty list.  Exception chains that loop back on
    themselves are cut at the first repeated exception.
    """
    records: list[ErrorRecord] = []
    seen: set[int] = set()
    current = error
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        records.append(to_record(current))
        current = _next_cause(current)
    return records


def disassociate(error: Any) -> list[Any]:
    """Split an aggregate error into its independent constituents.

    Nested aggregates are expanded in place, so the result never contains a
    ``CompositeError`` or ``BaseExceptionGroup``.  A non-aggregate yields
    ``[error]``; an empty aggregate (or ``None``) yields ``[]``.
    """
    if error is None:
        return []
    if isinstance(error, CompositeError):
        parts: list[Any] = list(error.parts)
    elif isinstance(error, BaseExceptionGroup):
        parts = list(error.exceptions)
    else:
        return [error]

    independent: list[Any] = []
    for part in parts:
        independent.extend(disassociate(part))
    return independent
