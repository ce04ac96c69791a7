"""
stdrpc - minimal binary framing for remote function calls.
"""

__version__ = "0.1.0"
__logo__ = "⇄"

from stdrpc.protocol import (
    Message,
    Parameter,
    ParamType,
    call_function,
    create_error_response,
    decode_message,
    encode_message,
)

__all__ = [
    "Message",
    "Parameter",
    "ParamType",
    "call_function",
    "create_error_response",
    "decode_message",
    "encode_message",
]
