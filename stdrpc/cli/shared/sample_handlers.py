"""Sample handlers used by the ``call`` and ``demo`` commands."""

from __future__ import annotations

from types import MappingProxyType
from typing import Callable

from stdrpc.protocol.types import HandlerRegistry
from stdrpc.utils.exceptions import HandlerError


def _expect(params: tuple, count: int) -> None:
    if len(params) != count:
        raise HandlerError("Invalid number of parameters")


def length_handler(*params):
    _expect(params, 1)
    if not isinstance(params[0], str):
        raise HandlerError("Invalid parameter type")
    return len(params[0])


def add_handler(*params):
    _expect(params, 2)
    if not all(isinstance(p, int) and not isinstance(p, bool) for p in params):
        raise HandlerError("Invalid parameter type")
    return params[0] + params[1]


def make_print_handler(emit: Callable[[str], None]):
    def print_handler(*params):
        _expect(params, 1)
        if not isinstance(params[0], str):
            raise HandlerError("Invalid parameter type")
        emit(params[0])
        return None

    return print_handler


def build_sample_registry(emit: Callable[[str], None] = print) -> HandlerRegistry:
    """Read-only registry with ``length``, ``add`` and ``print``."""
    return MappingProxyType({
        "length": length_handler,
        "add": add_handler,
        "print": make_print_handler(emit),
    })
