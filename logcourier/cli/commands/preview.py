"""``logcourier preview`` — print the events a log call would produce."""

from __future__ import annotations

import json

import typer
from rich.console import Console
from rich.syntax import Syntax

from logcourier.cli.commands._parsing import build_error, parse_user_info
from logcourier.config import LoggerSettings
from logcourier.core.composer import EventComposer
from logcourier.models.config import EventLoggingPolicy
from logcourier.models.events import CallSite, LogLevel

console = Console()


def preview_cmd(
    message: str = typer.Argument(..., help="Log message."),
    level: LogLevel = typer.Option(LogLevel.INFO, "--level", "-l", help="Log level."),
    user_info: list[str] = typer.Option(
        None, "--user-info", "-u", help="userInfo entry as key=value (repeatable)."
    ),
    error: list[str] = typer.Option(
        None, "--error", "-e", help="Error as DOMAIN[:CODE], outermost first (repeatable)."
    ),
    aggregate: bool = typer.Option(
        False, "--aggregate", help="Treat the --error values as independent errors."
    ),
    policy: EventLoggingPolicy = typer.Option(
        None, "--policy", "-p", help="Override the configured event logging policy."
    ),
) -> None:
    """Compose a log call and print the resulting payload(s) without sending."""
    composer = EventComposer(LoggerSettings().to_logger_config())
    result = composer.compose(
        level,
        message,
        call_site=CallSite(file="cli.py", function="preview", line=0),
        error=build_error(error, aggregate=aggregate),
        user_info=parse_user_info(user_info),
        policy=policy,
    )

    for index, event in enumerate(result.events, start=1):
        console.print(f"[bold cyan]Event {index}/{len(result.events)}[/bold cyan]")
        console.print(Syntax(json.dumps(event.as_dict(), indent=2, sort_keys=True), "json"))
    for exc in result.errors:
        console.print(f"[red]Composition failed:[/red] {exc}")
    if result.errors:
        raise typer.Exit(code=1)
