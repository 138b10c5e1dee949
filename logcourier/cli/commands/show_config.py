"""``logcourier show-config`` — display the effective settings."""

from __future__ import annotations

from rich.console import Console
from rich.table import Table

from logcourier.config import LoggerSettings

console = Console()

_SECRET_FIELDS = frozenset({"logzio_token"})


def show_config_cmd() -> None:
    """Show the settings resolved from LOGCOURIER_* variables and .env."""
    settings = LoggerSettings()

    table = Table(title="logcourier settings")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")
    for name, value in settings.model_dump(mode="json").items():
        if name in _SECRET_FIELDS and value:
            value = "********"
        table.add_row(name, str(value))
    console.print(table)
