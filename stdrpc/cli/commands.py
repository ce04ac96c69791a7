"""CLI commands for stdrpc.

Top-level commands: encode, decode, call, demo, status, init.
"""

import uuid

import typer
from rich.console import Console
from rich.markup import escape

from stdrpc import __logo__, __version__
from stdrpc.cli.command_groups.demo_command import demo_command
from stdrpc.cli.command_groups.status_command import status_command
from stdrpc.cli.shared.logging_utils import configure_stderr_logging, ensure_rotating_log_file
from stdrpc.cli.shared.message_utils import message_table, parse_hex, parse_param
from stdrpc.cli.shared.sample_handlers import build_sample_registry
from stdrpc.config.loader import get_config_path, load_config, save_config
from stdrpc.config.schema import Config
from stdrpc.protocol.codec import decode_message, encode_message
from stdrpc.protocol.dispatch import call_function
from stdrpc.protocol.types import Message
from stdrpc.utils.exceptions import CodecError

app = typer.Typer(
    name="stdrpc",
    help=f"{__logo__} stdrpc - binary framing for remote function calls",
    no_args_is_help=True,
)

console = Console()


def _load(command: str) -> Config:
    """Load config and set up logging sinks for a command."""
    try:
        config = load_config()
        configure_stderr_logging(config.logging.level)
        if config.logging.file_sink:
            ensure_rotating_log_file(command, level=config.logging.level)
    except ValueError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)
    return config


def _decode_or_exit(payload: str) -> Message:
    try:
        return decode_message(parse_hex(payload))
    except ValueError as e:
        console.print(f"[red]Not a hex payload:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    except CodecError as e:
        console.print(f"[red]Decode failed:[/red] {escape(str(e))}")
        raise typer.Exit(1)


def version_callback(value: bool):
    if value:
        console.print(f"{__logo__} stdrpc v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None, "--version", "-v", callback=version_callback, is_eager=True
    ),
):
    """stdrpc - binary framing for remote function calls."""
    pass


@app.command()
def init(
    force: bool = typer.Option(False, "--force", help="Overwrite an existing config"),
):
    """Write a default config to ~/.stdrpc/config.json."""
    config_path = get_config_path()
    if config_path.exists() and not force:
        console.print(f"[yellow]Config already exists at {config_path}[/yellow] (use --force to overwrite)")
        raise typer.Exit(1)
    save_config(Config(), config_path)
    console.print(f"[green]✓[/green] Created config at {config_path}")


@app.command()
def encode(
    function: str = typer.Argument(..., help="Function name"),
    params: list[str] = typer.Argument(None, help="Parameters as str:TEXT, bool:true|false or int:N"),
    msg_id: str = typer.Option(None, "--id", help="Correlation id (UUID); random if omitted"),
):
    """Encode a request and print it as hex."""
    config = _load("encode")
    try:
        parameters = tuple(parse_param(p) for p in params or [])
        request_id = uuid.UUID(msg_id) if msg_id else uuid.uuid4()
    except ValueError as e:
        console.print(f"[red]Invalid argument:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    request = Message(id=request_id, function=function, parameters=parameters)
    try:
        wire = encode_message(request, int_overflow=config.codec.int_overflow)
    except CodecError as e:
        console.print(f"[red]Encode failed:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    console.print(wire.hex(), soft_wrap=True)


@app.command()
def decode(
    payload: str = typer.Argument(..., help="Hex-encoded message"),
):
    """Decode a hex payload and show the message."""
    _load("decode")
    console.print(message_table(_decode_or_exit(payload)))


@app.command()
def call(
    payload: str = typer.Argument(..., help="Hex-encoded request"),
):
    """Dispatch a hex request against the sample handlers (length, add, print)."""
    config = _load("call")
    request = _decode_or_exit(payload)
    registry = build_sample_registry(lambda text: console.print(f"[cyan]print:[/cyan] {escape(text)}"))
    response = call_function(
        request,
        registry,
        unknown_function_text=config.dispatch.unknown_function_message,
        sanitize_errors=config.dispatch.sanitize_errors,
    )
    try:
        wire = encode_message(response, int_overflow=config.codec.int_overflow)
    except CodecError as e:
        console.print(f"[red]Encode failed:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    console.print(wire.hex(), soft_wrap=True)
    console.print(message_table(response, title="Response"))


@app.command()
def demo():
    """Round-trip the sample requests through the codec and dispatch."""
    config = _load("demo")
    try:
        demo_command(console, config)
    except CodecError as e:
        console.print(f"[red]Demo failed:[/red] {escape(str(e))}")
        raise typer.Exit(1)


@app.command()
def status():
    """Show stdrpc status."""
    status_command(console)


if __name__ == "__main__":
    app()
