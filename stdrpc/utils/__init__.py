"""Utility functions for stdrpc."""

from stdrpc.utils.exceptions import (
    StdRpcError,
    CodecError,
    InvalidMessageLengthError,
    InvalidParameterTypeError,
    InvalidParameterValueError,
    FieldTooLongError,
    HandlerNotFoundError,
    HandlerError,
    ErrorCategory,
    classify_exception,
    describe_exception,
    sanitize_error_message,
)

__all__ = [
    "StdRpcError",
    "CodecError",
    "InvalidMessageLengthError",
    "InvalidParameterTypeError",
    "InvalidParameterValueError",
    "FieldTooLongError",
    "HandlerNotFoundError",
    "HandlerError",
    "ErrorCategory",
    "classify_exception",
    "describe_exception",
    "sanitize_error_message",
]
