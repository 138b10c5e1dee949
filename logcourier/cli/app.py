"""Main Typer application — registers all CLI commands.

Entry point: ``logcourier`` (configured via pyproject.toml scripts).
"""

from __future__ import annotations

import typer

from logcourier.cli.commands.emit import emit_cmd
from logcourier.cli.commands.preview import preview_cmd
from logcourier.cli.commands.show_config import show_config_cmd

app = typer.Typer(
    name="logcourier",
    help="logcourier: structured log events for console, file and Logstash.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

app.command(name="emit", help="Log one message and flush it to the network sink.")(emit_cmd)
app.command(name="preview", help="Print the payload(s) a log call would produce.")(preview_cmd)
app.command(name="show-config", help="Show the effective settings.")(show_config_cmd)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
