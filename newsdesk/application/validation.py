"""Shared validation utilities for the application layer.

Domain entities validate themselves on construction; these helpers build
them from request data and log the failures for monitoring.
"""

from collections.abc import Callable
from typing import TypeVar

from ..domain.exceptions import ValidationError
from ..logging_utils import log_validation_error

T = TypeVar("T")


def build_with_logging(factory: Callable[..., T], entity_type: str, **fields) -> T:
    """Construct a domain object, logging validation failures.

    Args:
        factory: Domain class (or callable) that validates its input
        entity_type: Entity name used in the log message
        **fields: Field values passed through to the factory

    Raises:
        ValidationError: Re-raised unchanged after logging
    """
    try:
        return factory(**fields)
    except ValidationError as e:
        field = e.field or "unknown"
        log_validation_error(
            field=f"{entity_type}.{field}",
            value=fields.get(field),
            error_message=str(e),
        )
        raise


def strip_or_none(value: str | None) -> str | None:
    return value.strip() if value is not None else None
