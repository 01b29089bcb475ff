"""
Domain exceptions - Semantic error types for InfoVoto services.

This module defines domain-specific exceptions that communicate
business rule violations without leaking infrastructure details.
The API layer maps each type to an HTTP status and renders the
uniform response envelope.
"""


class ServiceError(Exception):
    """Base class for domain errors. Carries a human-readable message."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFound(ServiceError):
    """Referenced or requested entity does not exist."""

    pass


class Conflict(ServiceError):
    """A uniqueness invariant would be violated."""

    pass


class Unauthorized(ServiceError):
    """Credential verification failed or account is not active."""

    pass


class BadRequest(ServiceError):
    """Invalid activation token flow or invalid cross-field combination."""

    pass
