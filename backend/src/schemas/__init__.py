"""
Pydantic schemas for API request/response validation.

This module exports all schema classes for use in API endpoints.
"""

from backend.src.schemas.user import (
    UserSummary,
    UserResponse,
    UserListResponse,
    UserPageResponse,
    user_to_summary,
    user_to_response,
)
from backend.src.schemas.auth import (
    RegisterRequest,
    LoginRequest,
    TokenResponse,
    MessageResponse,
)
from backend.src.schemas.event import (
    EventTypeEnum,
    RecurrenceFrequencyEnum,
    LocationSchema,
    RecurrenceRuleSchema,
    EventCreate,
    EventUpdate,
    AdminEventUpdate,
    InviteRequest,
    EventResponse,
    EventPageResponse,
    event_to_response,
)
from backend.src.schemas.event_series import (
    SeriesTypeEnum,
    SeriesFrequencyEnum,
    TimeOfDay,
    EventTemplate,
    SeriesRecurrenceRule,
    EventSeriesCreate,
    EventSeriesUpdate,
    EventSeriesResponse,
    series_to_response,
)
from backend.src.schemas.calendar import OccurrenceResponse, CalendarResponse
from backend.src.schemas.contact_list import (
    ContactListCreate,
    ContactListResponse,
    contact_list_to_response,
)
from backend.src.schemas.delete_request import (
    DeleteRequestCreate,
    DeleteRequestResponse,
    DeleteRequestListResponse,
    delete_request_to_response,
)

__all__ = [
    # User schemas
    "UserSummary",
    "UserResponse",
    "UserListResponse",
    "UserPageResponse",
    "user_to_summary",
    "user_to_response",
    # Auth schemas
    "RegisterRequest",
    "LoginRequest",
    "TokenResponse",
    "MessageResponse",
    # Event schemas
    "EventTypeEnum",
    "RecurrenceFrequencyEnum",
    "LocationSchema",
    "RecurrenceRuleSchema",
    "EventCreate",
    "EventUpdate",
    "AdminEventUpdate",
    "InviteRequest",
    "EventResponse",
    "EventPageResponse",
    "event_to_response",
    # Series schemas
    "SeriesTypeEnum",
    "SeriesFrequencyEnum",
    "TimeOfDay",
    "EventTemplate",
    "SeriesRecurrenceRule",
    "EventSeriesCreate",
    "EventSeriesUpdate",
    "EventSeriesResponse",
    "series_to_response",
    # Calendar schemas
    "OccurrenceResponse",
    "CalendarResponse",
    # Contact list schemas
    "ContactListCreate",
    "ContactListResponse",
    "contact_list_to_response",
    # Delete request schemas
    "DeleteRequestCreate",
    "DeleteRequestResponse",
    "DeleteRequestListResponse",
    "delete_request_to_response",
]
