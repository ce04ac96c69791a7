"""Demo command: round-trip sample requests through codec and dispatch."""

from __future__ import annotations

import uuid

from rich.console import Console
from rich.markup import escape

from stdrpc.cli.shared.message_utils import message_table
from stdrpc.cli.shared.sample_handlers import build_sample_registry
from stdrpc.config.schema import Config
from stdrpc.protocol.codec import decode_message, encode_message
from stdrpc.protocol.dispatch import call_function
from stdrpc.protocol.types import Message, Parameter

DEMO_REQUESTS: tuple[tuple[str, tuple[Parameter, ...]], ...] = (
    ("print", (Parameter.string("Hello, World!"),)),
    ("length", (Parameter.string("Hello, World!"),)),
    ("add", (Parameter.integer(10), Parameter.integer(20))),
)


def run_roundtrip(request: Message, registry, config: Config, console: Console) -> Message:
    """Encode, decode, dispatch and re-encode one request; print every stage."""
    overflow = config.codec.int_overflow
    wire = encode_message(request, int_overflow=overflow)
    console.print(f"[bold]{request.function}[/bold] request: {wire.hex()}", soft_wrap=True)
    decoded = decode_message(wire)
    console.print(message_table(decoded, title="Request"))

    response = call_function(
        decoded,
        registry,
        unknown_function_text=config.dispatch.unknown_function_message,
        sanitize_errors=config.dispatch.sanitize_errors,
    )
    wire = encode_message(response, int_overflow=overflow)
    console.print(f"[bold]{request.function}[/bold] response: {wire.hex()}", soft_wrap=True)
    decoded = decode_message(wire)
    console.print(message_table(decoded, title="Response"))
    return decoded


def demo_command(console: Console, config: Config) -> list[Message]:
    """Run the sample requests and return the decoded responses."""
    registry = build_sample_registry(lambda text: console.print(f"[cyan]print:[/cyan] {escape(text)}"))
    responses = []
    for function, params in DEMO_REQUESTS:
        request = Message(id=uuid.uuid4(), function=function, parameters=params)
        responses.append(run_roundtrip(request, registry, config, console))
    return responses
