"""
Pydantic schemas for the aggregated calendar view.
"""

from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, Field

from backend.src.schemas.event import LocationSchema


class OccurrenceResponse(BaseModel):
    """One rendered occurrence of an event or series."""

    source_type: str = Field(..., description="event or series")
    source_guid: str = Field(..., description="GUID of the event (evt_) or series (ser_)")
    index: int = Field(..., description="0 for the base occurrence")
    title: str
    description: str
    start: datetime
    end: datetime
    is_recurring: bool
    type: Optional[str] = Field(None, description="Event visibility (events only)")
    location: Optional[LocationSchema] = None


class CalendarResponse(BaseModel):
    """Occurrences visible to the actor, sorted by start."""

    occurrences: List[OccurrenceResponse]
    total: int
    range_start: Optional[datetime] = None
    range_end: Optional[datetime] = None
