"""Exception handlers that turn FastAPI errors into JSend envelopes."""

from typing import Union

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException

from jsend.errors import InvalidEnvelopeError, MalformedTextError
from jsend.http import JSendJSONResponse
from jsend.logging_config import get_logger
from jsend.response import JSendResponse

logger = get_logger(__name__)

_DEFAULT_FAIL_MESSAGES = {
    status.HTTP_401_UNAUTHORIZED: "Authentication required",
    status.HTTP_403_FORBIDDEN: "Access forbidden",
    status.HTTP_404_NOT_FOUND: "Resource not found",
    status.HTTP_413_REQUEST_ENTITY_TOO_LARGE: "Request too large",
    status.HTTP_429_TOO_MANY_REQUESTS: "Rate limit exceeded",
}


def _fail_for_4xx(exc: HTTPException) -> JSendResponse:
    detail = exc.detail

    if isinstance(detail, dict):
        data = detail
    elif isinstance(detail, list):
        data = {"validation_errors": detail}
    else:
        data = {"message": detail or _DEFAULT_FAIL_MESSAGES.get(exc.status_code, "Bad request")}
    return JSendResponse.fail(data)


async def http_exception_handler(request: Request, exc: HTTPException):
    """
    Convert HTTPExceptions to JSend.
    - 4xx -> fail status
    - 5xx -> error status, HTTP status as code
    """
    if 400 <= exc.status_code < 500:
        response = _fail_for_4xx(exc)
    else:
        response = JSendResponse.error(str(exc.detail or "Internal server error"), exc.status_code)

    return JSendJSONResponse(response, status_code=exc.status_code, headers=getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Convert request validation errors to a 422 fail envelope keyed by field path."""
    errors = {}
    for error in exc.errors():
        field_path = ".".join(str(loc) for loc in error["loc"] if loc != "body") or "request"
        errors.setdefault(field_path, []).append(error["msg"])

    data = {field: messages[0] if len(messages) == 1 else messages for field, messages in errors.items()}
    return JSendJSONResponse(JSendResponse.fail(data), status_code=status.HTTP_422_UNPROCESSABLE_ENTITY)


async def envelope_exception_handler(request: Request, exc: Union[InvalidEnvelopeError, MalformedTextError]):
    """Rejected JSend input is the client's fault: answer with a 400 fail envelope."""
    logger.warning(
        f"Rejected JSend payload on {request.method} {request.url.path}: {exc}",
        extra={"extra_fields": {"method": request.method, "path": request.url.path, "error": type(exc).__name__}},
    )
    return JSendJSONResponse(JSendResponse.fail({"message": str(exc)}), status_code=status.HTTP_400_BAD_REQUEST)


async def general_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    response = JSendResponse.error("An unexpected error occurred", status.HTTP_500_INTERNAL_SERVER_ERROR)
    return JSendJSONResponse(response, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(InvalidEnvelopeError, envelope_exception_handler)
    app.add_exception_handler(MalformedTextError, envelope_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
