"""Centralized exception handlers for the FastAPI app.

Register with register_exception_handlers(app). Maps domain and framework
exceptions to the failure envelope {statusCode, message, responseCode}.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import get_settings
from app.domain.enums import ResponseCode
from app.domain.exceptions import CommunicationsException

logger = logging.getLogger(__name__)

# Map domain error_code to HTTP status
_ERROR_CODE_STATUS: dict[str, int] = {
    "VALIDATION_ERROR": 400,
    "USER_NOT_FOUND": 404,
    "INVALID_USER": 400,
    "DUPLICATE_KEY": 409,
    "UNAUTHORIZED": 401,
    "SEND_FAILED": 502,
    "AVATAR_FAILED": 502,
    "CHAT_TIMEOUT": 504,
    "REMOTE_ERROR": 502,
    "CONFIGURATION_ERROR": 500,
    "SERVICE_UNAVAILABLE": 503,
}


def response_code_for_status(status_code: int) -> ResponseCode:
    """Classify an HTTP status into the envelope's responseCode."""
    if status_code == 401:
        return ResponseCode.UNAUTHORIZED
    if status_code >= 500:
        return ResponseCode.SERVER_ERROR
    return ResponseCode.CLIENT_ERROR


def failure_response(
    status_code: int, message: Any, headers: dict[str, str] | None = None
) -> JSONResponse:
    """Build the failure envelope."""
    return JSONResponse(
        status_code=status_code,
        content={
            "statusCode": status_code,
            "message": message,
            "responseCode": response_code_for_status(status_code).value,
        },
        headers=headers,
    )


def _communications_exception_handler(
    request: Request, exc: CommunicationsException
) -> JSONResponse:
    """Envelope for domain exceptions; status from error_code (default 500)."""
    status = _ERROR_CODE_STATUS.get(exc.error_code, 500)
    if status >= 500:
        logger.error("%s on %s: %s", exc.error_code, request.url.path, exc.details)
    else:
        logger.info("%s on %s", exc.error_code, request.url.path)
    return failure_response(status, exc.message)


def _validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return 422 with the first validation error as message."""
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg')}" if location else first.get("msg")
    else:
        message = "Request validation failed"
    return failure_response(422, message)


def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Envelope for Starlette HTTP exceptions (status + detail)."""
    return failure_response(exc.status_code, exc.detail, getattr(exc, "headers", None))


def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return 500; include detail only when debug is True."""
    logger.exception("Unhandled exception: %s", exc)
    settings = get_settings()
    detail: Any = str(exc) if settings.debug else "Internal server error"
    return failure_response(500, detail)


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app.

    Call once after creating the app. Handlers: CommunicationsException (and
    subclasses), RequestValidationError, StarletteHTTPException, generic Exception.
    """
    app.add_exception_handler(CommunicationsException, _communications_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _generic_exception_handler)
