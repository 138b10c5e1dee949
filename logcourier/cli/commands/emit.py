"""``logcourier emit`` — log one message through the configured sinks."""

from __future__ import annotations

from concurrent.futures import TimeoutError as FutureTimeoutError

import typer
from rich.console import Console

from logcourier.cli.commands._parsing import build_error, parse_user_info
from logcourier.core.logger import Logger
from logcourier.errors import ConfigurationError
from logcourier.models.events import CallSite, LogLevel

console = Console()


def emit_cmd(
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
    timeout: float = typer.Option(
        30.0, "--timeout", help="Seconds to wait for the network flush."
    ),
) -> None:
    """Emit a single log call and flush it to the network sink."""
    log = Logger.from_settings()
    try:
        log.setup()
    except ConfigurationError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=2) from exc

    try:
        result = log.log(
            level,
            message,
            build_error(error, aggregate=aggregate),
            parse_user_info(user_info),
            call_site=CallSite(file="cli.py", function="emit", line=0),
        )
        transport_error = log.force_send().result(timeout=timeout)
    except FutureTimeoutError as exc:
        console.print(f"[red]Network delivery did not finish within {timeout}s.[/red]")
        raise typer.Exit(code=1) from exc
    finally:
        log.shutdown(flush=False)

    console.print(f"Composed {len(result.events)} event(s).")
    if result.errors:
        console.print(f"[red]{len(result.errors)} event(s) could not be serialized.[/red]")
    if transport_error is not None:
        console.print(f"[red]Network delivery failed:[/red] {transport_error}")
        raise typer.Exit(code=1)
