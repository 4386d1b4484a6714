"""Domain-specific exceptions."""


class DomainError(Exception):
    """Base exception for domain errors."""

    pass


class ValidationError(DomainError):
    """Raised when request or entity fields are malformed or missing."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


class NotFoundError(DomainError):
    """Raised when no stored record matches an identifier."""

    def __init__(self, resource: str, identifier: object):
        super().__init__(f"{resource.title()} '{identifier}' not found")
        self.resource = resource
        self.identifier = identifier


class PersistenceError(DomainError):
    """Raised when the backing store fails (connectivity, constraints)."""

    pass


class PoolExhaustedError(PersistenceError):
    """Raised when no pooled connection became free within the timeout."""

    pass


class StartupError(DomainError):
    """Fatal bootstrap failure: bad configuration or a failed migration."""

    pass
