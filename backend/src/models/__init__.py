"""
SQLAlchemy models for the Eventcal application.

This module provides the declarative base class and imports all models
to ensure they are registered with SQLAlchemy's metadata.
"""

from sqlalchemy.orm import declarative_base

# All models inherit from this Base class
Base = declarative_base()


# Import all models here so they are registered with Base.metadata
# This is required for Alembic autogenerate to detect models
from backend.src.models.user import User, UserRole, DEFAULT_AVATAR_URL
from backend.src.models.event import (
    Event,
    EventType,
    RecurrenceFrequency,
    event_participants,
    event_invitations,
)
from backend.src.models.event_series import EventSeries, SeriesType, SeriesFrequency
from backend.src.models.contact_list import ContactList, contact_list_members
from backend.src.models.delete_request import (
    DeleteRequest,
    DeleteRequestStatus,
    DEFAULT_DELETE_REASON,
)

__all__ = [
    "Base",
    "User",
    "UserRole",
    "DEFAULT_AVATAR_URL",
    "Event",
    "EventType",
    "RecurrenceFrequency",
    "event_participants",
    "event_invitations",
    "EventSeries",
    "SeriesType",
    "SeriesFrequency",
    "ContactList",
    "contact_list_members",
    "DeleteRequest",
    "DeleteRequestStatus",
    "DEFAULT_DELETE_REASON",
]
