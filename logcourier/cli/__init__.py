"""logcourier CLI — Typer application for emitting and previewing events."""

from logcourier.cli.app import app

__all__ = ["app"]
