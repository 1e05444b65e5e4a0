"""Domain exceptions and the handlers that render them as JSON envelopes.

Every error response has the shape ``{"code", "message", "details"}``; the
request id is always folded into ``details`` and echoed in ``X-Request-ID``.
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Awaitable, Callable, Mapping
from http import HTTPStatus
from typing import Any

from fastapi import FastAPI, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.requests import Request

from .core.context import REQUEST_ID_HEADER, bind_request_id, reset_request_id
from .schemas.system import ErrorResponse

logger = logging.getLogger(__name__)

_VALUE_ERROR_PREFIX = "Value error, "


class ApplicationError(Exception):
    """Base class for errors raised deliberately by services and dependencies.

    Subclasses only override the class attributes; callers may still
    override ``code`` or ``status_code`` per instance.
    """

    code = "application_error"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "The request could not be processed."
    default_headers: Mapping[str, str] | None = None

    def __init__(
        self,
        message: str | None = None,
        *,
        code: str | None = None,
        status_code: int | None = None,
        details: Any | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)
        self.code = code or self.code
        self.status_code = status_code or self.status_code
        self.details = details
        merged = headers if headers is not None else self.default_headers
        self.headers = dict(merged) if merged else None


class ValidationError(ApplicationError):
    """Malformed input, or a request that breaks a business rule."""

    code = "validation_error"
    default_message = "Validation failed."


class AuthenticationError(ApplicationError):
    code = "unauthorized"
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Could not validate credentials."
    default_headers = {"WWW-Authenticate": "Bearer"}


class AuthorizationError(ApplicationError):
    code = "forbidden"
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Not enough permissions."


class NotFoundError(ApplicationError):
    code = "not_found"
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found."


class ConflictError(ApplicationError):
    """Duplicate email, duplicate membership and similar uniqueness clashes."""

    code = "conflict"
    status_code = status.HTTP_409_CONFLICT
    default_message = "Resource already exists."


class ResourceExhaustedError(ApplicationError):
    """No pooled database connection became free within the pool timeout."""

    code = "resource_exhausted"
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = "Service is busy, please retry shortly."
    default_headers = {"Retry-After": "1"}


class ServerError(ApplicationError):
    code = "server_error"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error."


def _request_id(request: Request) -> str | None:
    return getattr(request.state, "request_id", None)


def _status_phrase(status_code: int) -> str | None:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return None


def _status_code_name(status_code: int) -> str:
    phrase = _status_phrase(status_code)
    return phrase.lower().replace(" ", "_") if phrase else "http_error"


def _with_request_id(request: Request, details: Any | None) -> Any | None:
    request_id = _request_id(request)
    if not request_id:
        return details
    if details is None:
        return {"request_id": request_id}
    if isinstance(details, dict):
        return {"request_id": request_id, **details} if "request_id" not in details else details
    return {"request_id": request_id, "detail": details}


def render_error(
    request: Request,
    *,
    status_code: int,
    code: str,
    message: str,
    details: Any | None = None,
    headers: Mapping[str, str] | None = None,
) -> JSONResponse:
    """Build the JSON error envelope for ``request``."""
    body = ErrorResponse(code=code, message=message, details=_with_request_id(request, details))
    response = JSONResponse(status_code=status_code, content=jsonable_encoder(body), headers=headers)
    request_id = _request_id(request)
    if request_id:
        response.headers.setdefault(REQUEST_ID_HEADER, request_id)
    return response


def _render_application_error(request: Request, exc: ApplicationError) -> JSONResponse:
    return render_error(
        request,
        status_code=exc.status_code,
        code=exc.code,
        message=exc.message,
        details=exc.details,
        headers=exc.headers,
    )


ExceptionHandler = Callable[[Request, Any], Awaitable[JSONResponse]]


def _in_request_context(handler: ExceptionHandler) -> ExceptionHandler:
    """Re-bind the request id while ``handler`` logs.

    Handlers for unhandled errors run outside the middleware's context, so
    the id is restored from ``request.state``.
    """

    @functools.wraps(handler)
    async def wrapper(request: Request, exc: Exception) -> JSONResponse:
        request_id = _request_id(request)
        token = bind_request_id(request_id) if request_id else None
        try:
            return await handler(request, exc)
        finally:
            if token is not None:
                reset_request_id(token)

    return wrapper


async def handle_application_error(request: Request, exc: ApplicationError) -> JSONResponse:
    log = logger.error if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR else logger.warning
    log(
        "Application error encountered",
        extra={"code": exc.code, "status_code": exc.status_code, "path": request.url.path},
    )
    return _render_application_error(request, exc)


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed input as 400 with the first problem as the message."""
    errors = [
        {"loc": list(error.get("loc", ())), "msg": str(error.get("msg", "")), "type": str(error.get("type", ""))}
        for error in exc.errors()
    ]
    logger.warning("Request validation failed", extra={"errors": errors})
    message = errors[0]["msg"].removeprefix(_VALUE_ERROR_PREFIX) if errors else "Request validation failed."
    return render_error(
        request,
        status_code=status.HTTP_400_BAD_REQUEST,
        code="validation_error",
        message=message,
        details={"errors": errors},
    )


async def handle_integrity_error(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.error("Database integrity error encountered.", exc_info=exc)
    return render_error(
        request,
        status_code=status.HTTP_409_CONFLICT,
        code="db_integrity_error",
        message="Database integrity violation.",
    )


async def handle_pool_timeout(request: Request, exc: PoolTimeoutError) -> JSONResponse:
    logger.error("Database connection pool exhausted.", exc_info=exc)
    return _render_application_error(request, ResourceExhaustedError())


async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    code = _status_code_name(exc.status_code)
    if isinstance(exc.detail, str):
        message, details = exc.detail, None
    else:
        message = _status_phrase(exc.status_code) or "Error"
        details = {"errors": exc.detail} if isinstance(exc.detail, list) else exc.detail
    log = logger.error if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR else logger.warning
    log("HTTP exception raised", extra={"code": code, "status_code": exc.status_code, "path": request.url.path})
    return render_error(
        request,
        status_code=exc.status_code,
        code=code,
        message=message,
        details=details,
        headers=exc.headers or None,
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    # Never leak the exception text to the client.
    logger.exception("Unhandled application error.", exc_info=exc)
    return _render_application_error(request, ServerError())


_HANDLERS: tuple[tuple[type[Exception], ExceptionHandler], ...] = (
    (ApplicationError, handle_application_error),
    (RequestValidationError, handle_request_validation_error),
    (IntegrityError, handle_integrity_error),
    (PoolTimeoutError, handle_pool_timeout),
    (StarletteHTTPException, handle_http_exception),
    (Exception, handle_unexpected_error),
)


def register_exception_handlers(app: FastAPI) -> None:
    """Register every error handler on ``app``."""
    for exc_class, handler in _HANDLERS:
        app.add_exception_handler(exc_class, _in_request_context(handler))


__all__ = [
    "ApplicationError",
    "AuthenticationError",
    "AuthorizationError",
    "ConflictError",
    "NotFoundError",
    "ResourceExhaustedError",
    "ServerError",
    "ValidationError",
    "register_exception_handlers",
    "render_error",
]
