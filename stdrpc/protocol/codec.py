"""
Binary wire codec for stdrpc messages.

Layout (all integers big-endian, all lengths single unsigned bytes):

    id (16) | name_len (1) | name | param_count (1) | params...

Each parameter is a 1-byte tag followed by its value:

    STRING: len (1) + bytes
    BOOL:   1 byte (1 = true)
    INT:    4 bytes, two's complement
"""

from __future__ import annotations

import struct
import uuid
from typing import Literal

from stdrpc.protocol.types import (
    INT32_MAX,
    INT32_MIN,
    MAX_FIELD_LEN,
    Message,
    Parameter,
    ParamType,
)
from stdrpc.utils.exceptions import (
    FieldTooLongError,
    InvalidMessageLengthError,
    InvalidParameterTypeError,
    InvalidParameterValueError,
)

ID_SIZE = 16
INT_FMT = "!i"
INT_SIZE = 4
TEXT_ENCODING = "utf-8"
# Invalid UTF-8 survives a decode/encode cycle unchanged
TEXT_ERRORS = "surrogateescape"

IntOverflow = Literal["reject", "wrap"]

_VALID_TAGS = frozenset(int(t) for t in ParamType)


def encoded_length(text: str) -> int:
    """Number of bytes ``text`` occupies on the wire, without its length prefix."""
    return len(text.encode(TEXT_ENCODING, TEXT_ERRORS))


def fit_text(text: str, limit: int = MAX_FIELD_LEN) -> str:
    """
    Cut ``text`` to at most ``limit`` encoded bytes on a character boundary.

    Characters that cannot be encoded at all (lone surrogates outside the
    escape range) are replaced with ``?``.
    """
    try:
        size = encoded_length(text)
    except UnicodeEncodeError:
        text = text.encode(TEXT_ENCODING, "replace").decode(TEXT_ENCODING, TEXT_ERRORS)
        size = encoded_length(text)
    if size <= limit:
        return text

    size = 0
    for i, char in enumerate(text):
        size += encoded_length(char)
        if size > limit:
            return text[:i]
    return text


def _encode_text(text: str, field: str) -> bytes:
    raw = text.encode(TEXT_ENCODING, TEXT_ERRORS)
    if len(raw) > MAX_FIELD_LEN:
        raise FieldTooLongError(field, len(raw))
    return bytes([len(raw)]) + raw


def _encode_int(value: int, index: int, int_overflow: IntOverflow) -> bytes:
    if INT32_MIN <= value <= INT32_MAX:
        return struct.pack(INT_FMT, value)
    if int_overflow == "wrap":
        return struct.pack("!I", value & 0xFFFFFFFF)
    raise InvalidParameterValueError(value, index)


def _encode_parameter(param: Parameter, index: int, int_overflow: IntOverflow) -> bytes:
    tag = param.tag
    value = param.value
    if tag not in _VALID_TAGS:
        raise InvalidParameterTypeError(tag, index)

    tag = ParamType(tag)
    if tag is ParamType.STRING:
        if not isinstance(value, str):
            raise InvalidParameterTypeError(int(tag), index, type(value).__name__)
        body = _encode_text(value, f"parameters[{index}]")
    elif tag is ParamType.BOOL:
        if not isinstance(value, bool):
            raise InvalidParameterTypeError(int(tag), index, type(value).__name__)
        body = b"\x01" if value else b"\x00"
    else:
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidParameterTypeError(int(tag), index, type(value).__name__)
        body = _encode_int(value, index, int_overflow)
    return bytes([tag]) + body


def encode_message(msg: Message, *, int_overflow: IntOverflow = "reject") -> bytes:
    """
    Encode a message to its wire form.

    Args:
        msg: Message to encode.
        int_overflow: ``"reject"`` raises on ints outside the signed 32-bit
            range, ``"wrap"`` truncates them to their low 32 bits.

    Raises:
        InvalidParameterTypeError: unknown tag or value not matching its tag.
        InvalidParameterValueError: int out of range with ``"reject"``.
        FieldTooLongError: name, string value or parameter count above 255.
    """
    if len(msg.parameters) > MAX_FIELD_LEN:
        raise FieldTooLongError("parameters", len(msg.parameters))

    out = bytearray(msg.id.bytes)
    out += _encode_text(msg.function, "function")
    out.append(len(msg.parameters))
    for index, param in enumerate(msg.parameters):
        out += _encode_parameter(param, index, int_overflow)
    return bytes(out)


class _Reader:
    """Sequential reader that checks remaining length before every field."""

    def __init__(self, data: bytes):
        self._data = memoryview(data)
        self.offset = 0

    def take(self, size: int, field: str) -> bytes:
        available = len(self._data) - self.offset
        if available < size:
            raise InvalidMessageLengthError(field, self.offset, size, available)
        chunk = self._data[self.offset:self.offset + size].tobytes()
        self.offset += size
        return chunk

    def byte(self, field: str) -> int:
        return self.take(1, field)[0]

    def text(self, field: str) -> str:
        size = self.byte(f"{field}.length")
        return self.take(size, field).decode(TEXT_ENCODING, TEXT_ERRORS)


def _decode_parameter(reader: _Reader, index: int) -> Parameter:
    field = f"parameters[{index}]"
    tag = reader.byte(f"{field}.tag")
    if tag not in _VALID_TAGS:
        raise InvalidParameterTypeError(tag, index)

    tag = ParamType(tag)
    if tag is ParamType.STRING:
        return Parameter(tag, reader.text(field))
    if tag is ParamType.BOOL:
        return Parameter(tag, reader.byte(field) == 1)
    (value,) = struct.unpack(INT_FMT, reader.take(INT_SIZE, field))
    return Parameter(tag, value)


def decode_message(data: bytes) -> Message:
    """
    Decode wire bytes into a message.

    Trailing bytes after the last parameter are ignored.

    Raises:
        InvalidMessageLengthError: the buffer ends before a field is complete.
        InvalidParameterTypeError: a parameter tag is not 1, 2 or 3.
    """
    reader = _Reader(data)
    msg_id = uuid.UUID(bytes=reader.take(ID_SIZE, "id"))
    function = reader.text("function")
    count = reader.byte("parameters.count")
    parameters = tuple(_decode_parameter(reader, i) for i in range(count))
    return Message(id=msg_id, function=function, parameters=parameters)
