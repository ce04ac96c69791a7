"""
Exception hierarchy and error handling utilities for stdrpc.

Provides:
- Codec and dispatch exception classes with error codes
- Error categorization (validation, not found, recoverable, fatal)
- Safe error message formatting (no sensitive data leak)
"""

from __future__ import annotations

import json
import re
import struct
from enum import Enum
from typing import Any


class ErrorCategory(Enum):
    """Error categories for classification."""
    RECOVERABLE = "recoverable"
    FATAL = "fatal"
    VALIDATION = "validation"
    NOT_FOUND = "not_found"


class StdRpcError(Exception):
    """Base exception for all stdrpc errors."""

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        category: ErrorCategory = ErrorCategory.FATAL,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.code,
            "message": self.message,
            "category": self.category.value,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class CodecError(StdRpcError):
    """Raised by encode/decode; the only hard failures of the core."""


class InvalidMessageLengthError(CodecError):
    """Decode ran out of bytes while reading a field."""

    def __init__(self, field: str, offset: int, needed: int, available: int):
        super().__init__(
            "Invalid message length",
            code="INVALID_MESSAGE_LENGTH",
            category=ErrorCategory.VALIDATION,
            details={"field": field, "offset": offset, "needed": needed, "available": available},
        )


class InvalidParameterTypeError(CodecError):
    """Unknown type tag, or a value that does not match its tag."""

    def __init__(self, tag: Any, index: int | None = None, value_type: str | None = None):
        details: dict[str, Any] = {"tag": tag}
        if index is not None:
            details["index"] = index
        if value_type is not None:
            details["value_type"] = value_type
        super().__init__(
            "Invalid parameter type",
            code="INVALID_PARAMETER_TYPE",
            category=ErrorCategory.VALIDATION,
            details=details,
        )


class InvalidParameterValueError(CodecError):
    """Int parameter outside the signed 32-bit range."""

    def __init__(self, value: int, index: int | None = None):
        super().__init__(
            f"Integer {value} does not fit in 32 bits",
            code="INVALID_PARAMETER_VALUE",
            category=ErrorCategory.VALIDATION,
            details={"value": value, "index": index},
        )


class FieldTooLongError(CodecError):
    """A length-prefixed field does not fit its one-byte prefix."""

    def __init__(self, field: str, length: int, limit: int = 255):
        super().__init__(
            f"{field} is {length} long, limit is {limit}",
            code="FIELD_TOO_LONG",
            category=ErrorCategory.VALIDATION,
            details={"field": field, "length": length, "limit": limit},
        )


class HandlerNotFoundError(StdRpcError):
    """Requested function is not in the registry."""

    def __init__(self, function: str):
        super().__init__(
            f"Handler not found: {function}",
            code="HANDLER_NOT_FOUND",
            category=ErrorCategory.NOT_FOUND,
            details={"function": function},
        )


class HandlerError(StdRpcError):
    """Raised by a handler to report a descriptive failure.

    The message is sent back to the caller verbatim.
    """

    def __init__(self, message: str, function: str | None = None):
        details = {"function": function} if function else {}
        super().__init__(
            message,
            code="HANDLER_ERROR",
            category=ErrorCategory.RECOVERABLE,
            details=details,
        )


_SENSITIVE_PATTERNS = [
    re.compile(r"(api[_-]?key|token|secret|password|auth)[=:]\s*['\"]?([^\s'\"]+)['\"]?", re.IGNORECASE),
    re.compile(r"bearer\s+[a-zA-Z0-9\-._~+/]+=*", re.IGNORECASE),
    re.compile(r"[a-zA-Z0-9]{32,}"),
    re.compile(r"sk-[a-zA-Z0-9]{20,}"),
]


def sanitize_error_message(message: str, replacement: str = "[REDACTED]") -> str:
    """Remove sensitive information from error messages."""
    sanitized = message
    for pattern in _SENSITIVE_PATTERNS:
        sanitized = pattern.sub(replacement, sanitized)
    return sanitized


def _safe_str(exc: Exception) -> str:
    try:
        return str(exc)
    except Exception:
        return ""


def classify_exception(exc: Exception) -> tuple[str, ErrorCategory]:
    """
    Classify an exception raised inside a handler.

    Returns:
        Tuple of (error_code, category)
    """
    if isinstance(exc, StdRpcError):
        return exc.code, exc.category

    if isinstance(exc, (json.JSONDecodeError, struct.error)):
        return "PARSE_ERROR", ErrorCategory.VALIDATION

    if isinstance(exc, ValueError):
        return "INVALID_VALUE", ErrorCategory.VALIDATION

    if isinstance(exc, KeyError):
        return "MISSING_KEY", ErrorCategory.NOT_FOUND

    if isinstance(exc, (TypeError, IndexError)):
        return "TYPE_ERROR", ErrorCategory.VALIDATION

    if "not found" in _safe_str(exc).lower():
        return "NOT_FOUND", ErrorCategory.NOT_FOUND

    return "INTERNAL_ERROR", ErrorCategory.FATAL


def describe_exception(exc: Exception, *, sanitize: bool = True) -> str:
    """Text placed into an error response for a failed handler."""
    if isinstance(exc, StdRpcError):
        return exc.message
    text = _safe_str(exc) or type(exc).__name__
    return sanitize_error_message(text) if sanitize else text
