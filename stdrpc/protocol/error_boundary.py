"""Error-response helpers shared by the dispatch paths."""

from __future__ import annotations

import uuid
from typing import Any, Callable

from stdrpc.protocol.codec import fit_text
from stdrpc.protocol.types import Message, Parameter
from stdrpc.utils.exceptions import (
    HandlerError,
    HandlerNotFoundError,
    classify_exception,
    describe_exception,
)

UNKNOWN_FUNCTION_TEXT = "Unknown function"


def create_error_response(id: uuid.UUID, text: str) -> Message:
    """
    Build the uniform error shape: empty function, one STRING parameter.

    Text longer than the 255-byte string limit is cut so the response stays
    encodable.
    """
    return Message(id=id, function="", parameters=(Parameter.string(fit_text(text)),))


def unknown_function_response(
    *,
    request: Message,
    log_info: Callable[[str, Any], None],
    text: str = UNKNOWN_FUNCTION_TEXT,
) -> Message:
    """Map a registry miss to an error response."""
    exc = HandlerNotFoundError(request.function)
    log_info("RPC call rejected: {}", exc)
    return create_error_response(request.id, text)


def handler_error_response(
    *,
    request: Message,
    exc: HandlerError,
    log_warning: Callable[[str, Any, Any], None],
) -> Message:
    """Map an explicit handler failure to an error response carrying its text."""
    log_warning("RPC call {} failed: {}", request.function, exc.message)
    return create_error_response(request.id, exc.message)


def unhandled_exception_response(
    *,
    request: Message,
    exc: Exception,
    log_exception: Callable[[str, Any, Any, Any], None],
    sanitize: bool = True,
) -> Message:
    """Map any other handler exception to an error response."""
    code, _ = classify_exception(exc)
    text = describe_exception(exc, sanitize=sanitize)
    log_exception("RPC call {} failed with [{}]: {}", request.function, code, text)
    return create_error_response(request.id, text)
