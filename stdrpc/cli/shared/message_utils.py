"""Parsing and rendering helpers for messages on the command line."""

from __future__ import annotations

from rich.markup import escape
from rich.table import Table

from stdrpc.protocol.types import Message, Parameter

_BOOL_WORDS = {"true": True, "1": True, "yes": True, "false": False, "0": False, "no": False}


def parse_param(text: str) -> Parameter:
    """
    Parse a ``type:value`` command-line parameter.

    ``str:`` / ``bool:`` / ``int:`` select the tag; text without a known
    prefix is a string parameter.
    """
    kind, sep, raw = text.partition(":")
    if not sep or kind not in ("str", "bool", "int"):
        return Parameter.string(text)
    if kind == "str":
        return Parameter.string(raw)
    if kind == "bool":
        try:
            return Parameter.boolean(_BOOL_WORDS[raw.strip().lower()])
        except KeyError:
            raise ValueError(f"not a boolean: {raw!r}") from None
    try:
        return Parameter.integer(int(raw, 0))
    except ValueError:
        raise ValueError(f"not an integer: {raw!r}") from None


def parse_hex(text: str) -> bytes:
    """Hex payload as printed by ``encode``; whitespace and an ``0x`` prefix are allowed."""
    cleaned = "".join(text.split())
    if cleaned[:2].lower() == "0x":
        cleaned = cleaned[2:]
    return bytes.fromhex(cleaned)


def message_table(msg: Message, title: str = "Message") -> Table:
    """Render a message as a rich table, one row per parameter."""
    function = escape(msg.function) if msg.function else "[dim](none)[/dim]"
    table = Table(title=f"{title} {msg.id} {function}")
    table.add_column("#", justify="right")
    table.add_column("Type")
    table.add_column("Value")
    for i, param in enumerate(msg.parameters):
        tag = getattr(param.tag, "name", str(param.tag))
        table.add_row(str(i), tag, escape(repr(param.value)))
    return table
