"""
Service layer for business logic.

Service classes live in their own modules (event_service, series_service,
...) and are imported from there; this package only re-exports the shared
exception types and the GUID helper, which models depend on.
"""

from backend.src.services.exceptions import (
    ServiceError,
    NotFoundError,
    ConflictError,
    ValidationError,
    AuthenticationError,
    ForbiddenError,
)
from backend.src.services.guid import GuidService

__all__ = [
    "ServiceError",
    "NotFoundError",
    "ConflictError",
    "ValidationError",
    "AuthenticationError",
    "ForbiddenError",
    "GuidService",
]
