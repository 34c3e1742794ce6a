"""
Custom exceptions for service layer.

Provides specific exception types for business logic errors
that can be translated to appropriate HTTP responses.

Mapping used by the API layer:
    ValidationError      -> 400
    AuthenticationError  -> 401
    ForbiddenError       -> 403
    NotFoundError        -> 404
    ConflictError        -> 409
"""

from typing import Any, Optional


class ServiceError(Exception):
    """Base exception for service layer errors."""
    pass


class NotFoundError(ServiceError):
    """Raised when a requested resource is not found (or not visible)."""

    def __init__(self, resource: str, identifier: Any):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} {identifier} not found")


class ConflictError(ServiceError):
    """Raised when an operation conflicts with existing state."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(ServiceError):
    """Raised when input validation fails."""

    def __init__(self, message: str, field: Optional[str] = None):
        self.message = message
        self.field = field
        super().__init__(message)


class AuthenticationError(ServiceError):
    """Raised when credentials are missing or invalid."""

    def __init__(self, message: str = "Invalid credentials"):
        self.message = message
        super().__init__(message)


class ForbiddenError(ServiceError):
    """Raised when an authenticated actor is not permitted to act."""

    def __init__(self, message: str = "You are not allowed to perform this action"):
        self.message = message
        super().__init__(message)
