"""Status command: show the resolved configuration."""

from __future__ import annotations

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from stdrpc import __logo__
from stdrpc.config.loader import get_config_path, load_config


def status_command(console: Console) -> None:
    """Show stdrpc status."""
    config_path = get_config_path()
    try:
        config = load_config()
    except ValueError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)

    console.print(f"{__logo__} stdrpc Status\n")
    console.print(f"Config: {config_path} {'[green]✓[/green]' if config_path.exists() else '[dim](defaults)[/dim]'}")

    table = Table(show_header=True)
    table.add_column("Setting")
    table.add_column("Value")
    table.add_row("codec.intOverflow", config.codec.int_overflow)
    table.add_row("dispatch.unknownFunctionMessage", escape(config.dispatch.unknown_function_message))
    table.add_row("dispatch.sanitizeErrors", str(config.dispatch.sanitize_errors))
    table.add_row("logging.level", config.logging.level)
    table.add_row("logging.fileSink", str(config.logging.file_sink))
    console.print(table)
