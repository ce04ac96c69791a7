"""Wire codec and dispatch for stdrpc messages."""

from stdrpc.protocol.codec import decode_message, encode_message
from stdrpc.protocol.dispatch import call_function
from stdrpc.protocol.error_boundary import create_error_response
from stdrpc.protocol.types import (
    Handler,
    HandlerRegistry,
    Message,
    Parameter,
    ParamType,
    Value,
    infer_param_type,
)

__all__ = [
    "Handler",
    "HandlerRegistry",
    "Message",
    "Parameter",
    "ParamType",
    "Value",
    "call_function",
    "create_error_response",
    "decode_message",
    "encode_message",
    "infer_param_type",
]
