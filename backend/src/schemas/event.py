"""
Pydantic schemas for event API request/response validation.

Provides data validation and serialization for:
- Event creation requests (with participants by username)
- Event update requests (allow-listed fields only)
- Invitations
- Event API responses and the admin paginated listing

Design:
- Unknown fields in update bodies are ignored, so ownership, participants
  and invitations can never be changed through an update
- start < end is re-checked by the service after merging an update
- GUIDs are exposed via guid property, never internal IDs
"""

import enum
from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, Field, field_validator

from backend.src.schemas.user import UserSummary, user_to_summary


# ============================================================================
# Enums
# ============================================================================


class EventTypeEnum(str, enum.Enum):
    """Event visibility."""
    PUBLIC = "public"
    PRIVATE = "private"


class RecurrenceFrequencyEnum(str, enum.Enum):
    """Repeat unit for recurring events."""
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


# ============================================================================
# Shared Schemas
# ============================================================================


class LocationSchema(BaseModel):
    """Free-text event location."""

    address: Optional[str] = Field(default=None, max_length=255)
    city: Optional[str] = Field(default=None, max_length=100)
    country: Optional[str] = Field(default=None, max_length=100)


class RecurrenceRuleSchema(BaseModel):
    """
    Recurrence rule of an event.

    interval is the number of occurrences to generate, the base event
    included.
    """

    frequency: RecurrenceFrequencyEnum = Field(default=RecurrenceFrequencyEnum.DAILY)
    interval: int = Field(default=1, ge=1, le=1000)
    end_date: Optional[datetime] = Field(default=None)


# ============================================================================
# Request Schemas
# ============================================================================


class EventCreate(BaseModel):
    """
    Schema for creating a new event.

    Required:
        title, description, start_date_time, end_date_time

    Optional:
        type: public or private (default: private)
        cover_photo: Cover photo URL
        location: Address, city and country
        participants: Usernames added as participants (owner is added
            automatically)
        is_recurring: Whether the event repeats
        recurrence_rule: Repeat frequency, count and optional end date
    """

    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(default="", max_length=5000)
    type: EventTypeEnum = Field(default=EventTypeEnum.PRIVATE)
    start_date_time: datetime
    end_date_time: datetime
    cover_photo: Optional[str] = Field(default=None, max_length=1024)
    location: Optional[LocationSchema] = Field(default=None)
    participants: List[str] = Field(default_factory=list)
    is_recurring: bool = Field(default=False)
    recurrence_rule: Optional[RecurrenceRuleSchema] = Field(default=None)

    @field_validator("title")
    @classmethod
    def validate_title_not_whitespace(cls, v: str) -> str:
        """Ensure title is not just whitespace."""
        if not v.strip():
            raise ValueError("Title cannot be empty or whitespace")
        return v.strip()

    model_config = {
        "json_schema_extra": {
            "example": {
                "title": "Team offsite",
                "description": "Quarterly planning",
                "type": "private",
                "start_date_time": "2026-03-15T09:00:00",
                "end_date_time": "2026-03-15T17:00:00",
                "location": {"city": "Sofia", "country": "Bulgaria"},
                "participants": ["alice", "bob"],
                "is_recurring": True,
                "recurrence_rule": {"frequency": "weekly", "interval": 4},
            }
        }
    }


class EventUpdate(BaseModel):
    """
    Schema for updating an existing event.

    All fields are optional - only provided fields will be updated.
    Participants, invitations and ownership are not updatable here.
    """

    title: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = Field(default=None, max_length=5000)
    type: Optional[EventTypeEnum] = Field(default=None)
    start_date_time: Optional[datetime] = Field(default=None)
    end_date_time: Optional[datetime] = Field(default=None)
    cover_photo: Optional[str] = Field(default=None, max_length=1024)
    location: Optional[LocationSchema] = Field(default=None)
    is_recurring: Optional[bool] = Field(default=None)
    recurrence_rule: Optional[RecurrenceRuleSchema] = Field(default=None)

    @field_validator("title")
    @classmethod
    def validate_title_not_whitespace(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("Title cannot be empty or whitespace")
        return v.strip() if v else None


class AdminEventUpdate(BaseModel):
    """Admin edit of an arbitrary event: title and description only."""

    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=5000)


class InviteRequest(BaseModel):
    """Invite a user to an event by username."""

    username: str = Field(..., min_length=1, max_length=50)


# ============================================================================
# Response Schemas
# ============================================================================


class EventResponse(BaseModel):
    """Schema for event API responses."""

    guid: str = Field(..., description="Event GUID (evt_xxx)")
    title: str
    description: str
    type: str
    start_date_time: datetime
    end_date_time: datetime
    cover_photo: Optional[str]
    location: Optional[LocationSchema]
    owner: UserSummary
    participants: List[UserSummary]
    invitations: List[UserSummary]
    is_recurring: bool
    recurrence_rule: Optional[RecurrenceRuleSchema]
    series_guid: Optional[str] = Field(None, description="Series GUID (ser_xxx)")
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class EventPageResponse(BaseModel):
    """Paginated event listing for the admin panel."""

    events: List[EventResponse]
    total: int
    page: int
    limit: int
    pages: int


# ============================================================================
# Adapter Functions
# ============================================================================


def event_to_response(event) -> EventResponse:
    """
    Convert Event model to EventResponse schema.

    Args:
        event: Event model instance

    Returns:
        EventResponse schema
    """
    location = None
    if event.has_location:
        location = LocationSchema(
            address=event.location_address,
            city=event.location_city,
            country=event.location_country,
        )

    rule = None
    if event.recurrence_frequency:
        rule = RecurrenceRuleSchema(
            frequency=event.recurrence_frequency,
            interval=event.recurrence_interval or 1,
            end_date=event.recurrence_end_date,
        )

    return EventResponse(
        guid=event.guid,
        title=event.title,
        description=event.description,
        type=event.type,
        start_date_time=event.start_date_time,
        end_date_time=event.end_date_time,
        cover_photo=event.cover_photo,
        location=location,
        owner=user_to_summary(event.owner),
        participants=[user_to_summary(u) for u in event.participants],
        invitations=[user_to_summary(u) for u in event.invitations],
        is_recurring=event.is_recurring,
        recurrence_rule=rule,
        series_guid=event.series.guid if event.series else None,
        created_at=event.created_at,
        updated_at=event.updated_at,
    )
