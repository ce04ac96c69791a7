"""Message and parameter value types shared by the codec and dispatch."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Callable, Mapping, Union

Value = Union[str, bool, int]
Handler = Callable[..., Any]
HandlerRegistry = Mapping[str, Handler]

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1
MAX_FIELD_LEN = 255


class ParamType(IntEnum):
    """One-byte type tag written in front of every parameter value."""
    STRING = 1
    BOOL = 2
    INT = 3


def infer_param_type(value: Any) -> ParamType:
    """Tag for a handler result. Unrecognized kinds fall back to STRING."""
    # bool is a subclass of int, check it first
    if isinstance(value, bool):
        return ParamType.BOOL
    if isinstance(value, int):
        return ParamType.INT
    return ParamType.STRING


@dataclass(frozen=True)
class Parameter:
    """A tagged value. ``tag`` is kept as given so encode can reject unknown tags."""
    tag: ParamType | int
    value: Value

    @classmethod
    def string(cls, value: str) -> "Parameter":
        return cls(ParamType.STRING, value)

    @classmethod
    def boolean(cls, value: bool) -> "Parameter":
        return cls(ParamType.BOOL, value)

    @classmethod
    def integer(cls, value: int) -> "Parameter":
        return cls(ParamType.INT, value)

    @classmethod
    def from_value(cls, value: Any) -> "Parameter":
        """Build a parameter with an inferred tag; other kinds are stringified."""
        tag = infer_param_type(value)
        if tag is ParamType.STRING and not isinstance(value, str):
            value = str(value)
        return cls(tag, value)


@dataclass(frozen=True)
class Message:
    """The protocol unit: correlation id, function name, ordered parameters."""
    id: uuid.UUID
    function: str = ""
    parameters: tuple[Parameter, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not isinstance(self.parameters, tuple):
            object.__setattr__(self, "parameters", tuple(self.parameters))

    @classmethod
    def request(cls, function: str, *values: Any, id: uuid.UUID | None = None) -> "Message":
        """New request with a fresh id and inferred parameter tags."""
        return cls(
            id=id or uuid.uuid4(),
            function=function,
            parameters=tuple(Parameter.from_value(v) for v in values),
        )

    @property
    def values(self) -> list[Value]:
        """Bare parameter values in order, tags dropped."""
        return [p.value for p in self.parameters]
