"""Option parsing shared by the CLI commands."""

from __future__ import annotations

from typing import Any

import typer

from logcourier.models.errors import CompositeError, LeafError, LogError, WrappedError


def parse_user_info(pairs: list[str] | None) -> dict[str, Any]:
    """Turn ``["key=value", ...]`` into a mapping; dotted keys nest."""
    info: dict[str, Any] = {}
    for pair in pairs or []:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"Expected key=value, got {pair!r}")
        target = info
        *parents, leaf = key.split(".")
        for parent in parents:
            target = target.setdefault(parent, {})
            if not isinstance(target, dict):
                raise typer.BadParameter(f"Key {key!r} conflicts with a scalar value")
        target[leaf] = value
    return info


def _parse_error_spec(spec: str) -> tuple[str, int]:
    domain, _, code = spec.partition(":")
    if not domain:
        raise typer.BadParameter(f"Expected DOMAIN[:CODE], got {spec!r}")
    try:
        return domain, int(code or 0)
    except ValueError as exc:
        raise typer.BadParameter(f"Error code must be an integer in {spec!r}") from exc


def build_error(specs: list[str] | None, aggregate: bool = False) -> LogError | None:
    """Build an error from ``DOMAIN[:CODE]`` specs.

    By default the specs form a cause chain, outermost first.  With
    *aggregate* they become the independent parts of a ``CompositeError``.
    """
    if not specs:
        return None
    parsed = [_parse_error_spec(spec) for spec in specs]
    if aggregate:
        return CompositeError(
            parts=[LeafError(domain=domain, code=code) for domain, code in parsed]
        )

    domain, code = parsed[-1]
    error: LogError = LeafError(domain=domain, code=code)
    for domain, code in reversed(parsed[:-1]):
        error = WrappedError(domain=domain, code=code, cause=error)
    return error
