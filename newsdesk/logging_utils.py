"""Structured log events shared by the HTTP, service and bootstrap layers."""

from typing import Any, Final

from fastapi import Request
from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError

from .logging_config import get_logger

_MAX_LOGGED_VALUE: Final = 100

_SENSITIVE_MARKERS: Final = ("password", "secret", "token", "credential", "url")


def log_api_request(
    request: Request,
    response_status: int,
    process_time_ms: float | None = None,
    route: str | None = None,
) -> None:
    """Log one served request; 4xx as warnings, 5xx as errors.

    Args:
        request: Incoming request
        response_status: Status code that was sent
        process_time_ms: Time spent in the handler chain
        route: Matched route template (``/post/get_post/{post_id}``), if any
    """
    logger = get_logger("newsdesk.api")

    if response_status >= 500:
        log = logger.error
    elif response_status >= 400:
        log = logger.warning
    else:
        log = logger.info

    log(
        f"{request.method} {request.url.path} - {response_status}",
        method=request.method,
        path=request.url.path,
        route=route or "unmatched",
        status_code=response_status,
        process_time_ms=round(process_time_ms, 2) if process_time_ms else None,
        client_ip=request.client.host if request.client else None,
    )


def log_record_change(
    operation: str, table: str, record_id: object, **context: Any
) -> None:
    """Log a committed write (create, update, soft_delete, restore, delete)."""
    get_logger("newsdesk.database").info(
        f"{operation} on {table}",
        operation=operation,
        table=table,
        record_id=str(record_id),
        **context,
    )


def log_startup(
    hostname: str,
    ip_address: str,
    database_url: str,
    pool_status: str,
    debug_mode: bool,
) -> None:
    """Log where the service runs and which database it talks to."""
    get_logger("newsdesk.system").info(
        "Application startup",
        hostname=hostname,
        ip_address=ip_address,
        database=redact_database_url(database_url),
        pool=pool_status,
        debug_mode=debug_mode,
    )


def log_validation_error(field: str, value: Any, error_message: str) -> None:
    """Log a rejected input value, truncated and with secrets masked."""
    if _is_sensitive_field(field):
        safe_value = "[REDACTED]"
    else:
        safe_value = str(value)[:_MAX_LOGGED_VALUE]

    get_logger("newsdesk.validation").warning(
        f"Validation failed for field '{field}': {error_message}",
        field=field,
        value=safe_value,
    )


def redact_database_url(database_url: str) -> str:
    """Connection string with the password masked, for logs and messages."""
    try:
        return make_url(database_url).render_as_string(hide_password=True)
    except ArgumentError:
        return "[unparseable database url]"


def _is_sensitive_field(field_name: str) -> bool:
    field_lower = field_name.lower()
    return any(marker in field_lower for marker in _SENSITIVE_MARKERS)
