"""
Pydantic schemas for event series.

A series is described by a starting template, an optional ending template
and a recurrence rule. Templates carry a date (start_date_time) plus the
time of day the generated occurrences start and end at.
"""

import enum
from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, Field, field_validator

from backend.src.schemas.event import LocationSchema
from backend.src.schemas.user import UserSummary, user_to_summary


class SeriesTypeEnum(str, enum.Enum):
    """How the series produces its events."""
    RECURRING = "recurring"
    MANUAL = "manual"


class SeriesFrequencyEnum(str, enum.Enum):
    """Repeat unit for recurring series."""
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class TimeOfDay(BaseModel):
    """Hour and minute of a template occurrence."""

    hour: int = Field(..., ge=0, le=23)
    minute: int = Field(..., ge=0, le=59)


class EventTemplate(BaseModel):
    """Template of the first or last occurrence of a series."""

    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(default="", max_length=5000)
    start_date_time: datetime
    start_time: TimeOfDay
    end_time: TimeOfDay
    location: Optional[LocationSchema] = Field(default=None)

    @field_validator("title")
    @classmethod
    def validate_title_not_whitespace(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Title cannot be empty or whitespace")
        return v.strip()


class SeriesRecurrenceRule(BaseModel):
    """Repeat unit and optional hard stop of a recurring series."""

    frequency: SeriesFrequencyEnum
    end_date: Optional[datetime] = Field(default=None)


# ============================================================================
# Request Schemas
# ============================================================================


class EventSeriesCreate(BaseModel):
    """
    Schema for creating an event series.

    Exactly one of is_indefinite / ending_event must hold, and recurring
    series require a recurrence rule. These rules are checked by the
    service so violations return 400.
    """

    name: str = Field(..., min_length=1, max_length=255)
    series_type: SeriesTypeEnum = Field(default=SeriesTypeEnum.RECURRING)
    is_indefinite: bool = Field(default=False)
    starting_event: EventTemplate
    ending_event: Optional[EventTemplate] = Field(default=None)
    recurrence_rule: Optional[SeriesRecurrenceRule] = Field(default=None)
    event_guids: List[str] = Field(
        default_factory=list,
        description="Events linked to a manual series (must be owned by the creator)"
    )

    @field_validator("name")
    @classmethod
    def validate_name_not_whitespace(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Name cannot be empty or whitespace")
        return v.strip()

    model_config = {
        "json_schema_extra": {
            "example": {
                "name": "Morning standup",
                "series_type": "recurring",
                "is_indefinite": False,
                "starting_event": {
                    "title": "Standup",
                    "description": "Daily sync",
                    "start_date_time": "2026-03-02T00:00:00",
                    "start_time": {"hour": 9, "minute": 0},
                    "end_time": {"hour": 9, "minute": 15},
                },
                "ending_event": {
                    "title": "Standup",
                    "description": "Daily sync",
                    "start_date_time": "2026-03-06T00:00:00",
                    "start_time": {"hour": 9, "minute": 0},
                    "end_time": {"hour": 9, "minute": 15},
                },
                "recurrence_rule": {"frequency": "daily"},
            }
        }
    }


class EventSeriesUpdate(BaseModel):
    """
    Schema for updating an event series.

    All fields are optional - only provided fields will be updated. The
    indefinite/ending invariant is re-checked after merging.
    """

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    is_indefinite: Optional[bool] = Field(default=None)
    starting_event: Optional[EventTemplate] = Field(default=None)
    ending_event: Optional[EventTemplate] = Field(default=None)
    recurrence_rule: Optional[SeriesRecurrenceRule] = Field(default=None)
    event_guids: Optional[List[str]] = Field(default=None)


# ============================================================================
# Response Schemas
# ============================================================================


class EventSeriesResponse(BaseModel):
    """Schema for event series API responses."""

    guid: str = Field(..., description="Series GUID (ser_xxx)")
    name: str
    series_type: str
    is_indefinite: bool
    starting_event: EventTemplate
    ending_event: Optional[EventTemplate]
    recurrence_rule: Optional[SeriesRecurrenceRule]
    creator: UserSummary
    event_guids: List[str]
    created_at: datetime
    updated_at: datetime


def series_to_response(series) -> EventSeriesResponse:
    """Convert EventSeries model to EventSeriesResponse schema."""
    rule = None
    if series.recurrence_frequency:
        rule = SeriesRecurrenceRule(
            frequency=series.recurrence_frequency,
            end_date=series.recurrence_end_date,
        )

    return EventSeriesResponse(
        guid=series.guid,
        name=series.name,
        series_type=series.series_type,
        is_indefinite=series.is_indefinite,
        starting_event=EventTemplate.model_validate(series.starting_event),
        ending_event=(
            EventTemplate.model_validate(series.ending_event)
            if series.ending_event else None
        ),
        recurrence_rule=rule,
        creator=user_to_summary(series.creator),
        event_guids=[e.guid for e in series.events],
        created_at=series.created_at,
        updated_at=series.updated_at,
    )
