"""Centralized error handling for the presentation layer.

Every error leaves the API as ``{"status": ..., "message": ...}``. Internal
details (stack traces, SQL) are logged, never returned.
"""

from typing import Final

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..domain.exceptions import (
    DomainError,
    NotFoundError,
    PersistenceError,
    PoolExhaustedError,
    ValidationError,
)
from ..logging_config import get_logger
from .schemas import ErrorResponse, FieldError

logger = get_logger(__name__)

NOT_FOUND_MESSAGE: Final = "The requested resource was not found"
PERSISTENCE_MESSAGE: Final = "A database error occurred. Please try again."
POOL_EXHAUSTED_MESSAGE: Final = "The service is busy. Please try again."
UNEXPECTED_MESSAGE: Final = "An unexpected error occurred. Please try again."


class ErrorStatus:
    """Values of the ``status`` field in error bodies."""

    BAD_REQUEST: Final = "bad_request"
    NOT_FOUND: Final = "not_found"
    METHOD_NOT_ALLOWED: Final = "method_not_allowed"
    INTERNAL_ERROR: Final = "internal_error"
    HTTP_ERROR: Final = "error"


def error_response(
    status_code: int,
    error_status: str,
    message: str,
    errors: list[FieldError] | None = None,
) -> JSONResponse:
    body = ErrorResponse(status=error_status, message=message, errors=errors)
    return JSONResponse(
        status_code=status_code, content=body.model_dump(exclude_none=True)
    )


def domain_error_to_response(error: DomainError) -> JSONResponse:
    """Convert domain errors to appropriate HTTP responses."""
    if isinstance(error, ValidationError):
        field_errors = (
            [FieldError(field=error.field, message=str(error))] if error.field else None
        )
        return error_response(
            status.HTTP_400_BAD_REQUEST, ErrorStatus.BAD_REQUEST, str(error), field_errors
        )
    if isinstance(error, NotFoundError):
        return error_response(
            status.HTTP_404_NOT_FOUND, ErrorStatus.NOT_FOUND, str(error)
        )
    if isinstance(error, PoolExhaustedError):
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            ErrorStatus.INTERNAL_ERROR,
            POOL_EXHAUSTED_MESSAGE,
        )
    if isinstance(error, PersistenceError):
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            ErrorStatus.INTERNAL_ERROR,
            PERSISTENCE_MESSAGE,
        )
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        ErrorStatus.INTERNAL_ERROR,
        UNEXPECTED_MESSAGE,
    )


def request_validation_to_response(exc: RequestValidationError) -> JSONResponse:
    """Convert pydantic request errors to a 400 with per-field details."""
    field_errors = []
    for error in exc.errors():
        field_name = ".".join(
            str(loc) for loc in error["loc"] if loc not in ("body", "path", "query")
        )
        field_errors.append(FieldError(field=field_name or "body", message=error["msg"]))

    if field_errors:
        first = field_errors[0]
        message = f"Invalid request: {first.field}: {first.message}"
    else:
        message = "Invalid request"
    return error_response(
        status.HTTP_400_BAD_REQUEST, ErrorStatus.BAD_REQUEST, message, field_errors
    )


def http_exception_to_response(exc: StarletteHTTPException) -> JSONResponse:
    """Routing errors (unknown path, wrong method) in the common error shape."""
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        response = error_response(exc.status_code, ErrorStatus.NOT_FOUND, NOT_FOUND_MESSAGE)
    elif exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        response = error_response(
            exc.status_code, ErrorStatus.METHOD_NOT_ALLOWED, "Method not allowed"
        )
    else:
        response = error_response(
            exc.status_code, ErrorStatus.HTTP_ERROR, str(exc.detail)
        )
    if exc.headers:
        response.headers.update(exc.headers)
    return response


def register_error_handlers(app: FastAPI) -> None:
    """Install the global exception handlers on the application."""

    @app.exception_handler(DomainError)
    async def domain_error_handler(request: Request, exc: DomainError):
        """Global handler for domain-specific errors."""
        log = logger.error if isinstance(exc, PersistenceError) else logger.warning
        log(
            "Domain error occurred",
            error_type=type(exc).__name__,
            error_message=str(exc),
            path=request.url.path,
            method=request.method,
        )
        return domain_error_to_response(exc)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ):
        """Global handler for pydantic validation errors."""
        logger.warning(
            "Request validation error occurred",
            errors=[{"loc": e["loc"], "msg": e["msg"]} for e in exc.errors()],
            path=request.url.path,
            method=request.method,
        )
        return request_validation_to_response(exc)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return http_exception_to_response(exc)

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(request: Request, exc: SQLAlchemyError):
        """Global handler for database errors that escaped translation."""
        logger.error(
            "Database error occurred",
            error_type=type(exc).__name__,
            error_message=str(exc),
            path=request.url.path,
            method=request.method,
        )
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            ErrorStatus.INTERNAL_ERROR,
            PERSISTENCE_MESSAGE,
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Global handler for unexpected errors."""
        logger.error(
            "Unexpected error occurred",
            error_type=type(exc).__name__,
            error_message=str(exc),
            path=request.url.path,
            method=request.method,
        )
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            ErrorStatus.INTERNAL_ERROR,
            UNEXPECTED_MESSAGE,
        )
