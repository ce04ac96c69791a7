"""Synchronous dispatch of decoded requests to registered handlers."""

from __future__ import annotations

from loguru import logger

from stdrpc.protocol.codec import encoded_length
from stdrpc.protocol.error_boundary import (
    UNKNOWN_FUNCTION_TEXT,
    create_error_response,
    handler_error_response,
    unhandled_exception_response,
    unknown_function_response,
)
from stdrpc.protocol.types import (
    INT32_MAX,
    INT32_MIN,
    MAX_FIELD_LEN,
    HandlerRegistry,
    Message,
    Parameter,
    ParamType,
)
from stdrpc.utils.exceptions import (
    CodecError,
    FieldTooLongError,
    HandlerError,
    InvalidParameterValueError,
)


def _result_parameters(result) -> tuple[Parameter, ...]:
    if result is None:
        return ()
    param = Parameter.from_value(result)
    if param.tag is ParamType.INT and not INT32_MIN <= param.value <= INT32_MAX:
        raise InvalidParameterValueError(param.value)
    if param.tag is ParamType.STRING:
        size = encoded_length(param.value)
        if size > MAX_FIELD_LEN:
            raise FieldTooLongError("result", size)
    return (param,)


def call_function(
    request: Message,
    registry: HandlerRegistry,
    *,
    unknown_function_text: str = UNKNOWN_FUNCTION_TEXT,
    sanitize_errors: bool = True,
) -> Message:
    """
    Resolve ``request.function`` in ``registry``, invoke it and wrap the result.

    Never raises: a missing function, a failing handler or a result that
    cannot be encoded yields an error response built by
    ``create_error_response``. The response always carries ``request.id``.

    Args:
        request: Decoded request message.
        registry: Read-only mapping of function name to handler. Handlers are
            called with the bare parameter values as positional arguments.
        unknown_function_text: Error text for a registry miss.
        sanitize_errors: Redact secrets from unexpected exception text.
    """
    handler = registry.get(request.function)
    if handler is None:
        return unknown_function_response(
            request=request,
            log_info=logger.info,
            text=unknown_function_text,
        )

    try:
        result = handler(*request.values)
    except HandlerError as e:
        return handler_error_response(request=request, exc=e, log_warning=logger.warning)
    except Exception as e:
        return unhandled_exception_response(
            request=request,
            exc=e,
            log_exception=logger.warning,
            sanitize=sanitize_errors,
        )

    try:
        parameters = _result_parameters(result)
    except CodecError as e:
        logger.warning("RPC call {} returned unencodable result: {}", request.function, e.message)
        return create_error_response(request.id, e.message)
    except Exception as e:
        return unhandled_exception_response(
            request=request,
            exc=e,
            log_exception=logger.warning,
            sanitize=sanitize_errors,
        )

    logger.debug("RPC call {} ok ({} result)", request.function, len(parameters))
    return Message(id=request.id, function=request.function, parameters=parameters)
