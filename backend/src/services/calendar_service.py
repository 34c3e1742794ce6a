"""
Calendar service building the merged occurrence view for an actor.

Combines every event visible to the actor (owned, participating, public)
with the actor's recurring series, expands both through the recurrence
expander and returns one chronologically sorted list.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from backend.src.middleware.actor import ActorContext
from backend.src.schemas.calendar import OccurrenceResponse
from backend.src.schemas.event import LocationSchema
from backend.src.services.event_service import EventService
from backend.src.services.exceptions import ValidationError
from backend.src.services.recurrence import (
    occurrences_for_event,
    occurrences_for_series,
    to_naive_utc,
)
from backend.src.services.series_service import SeriesService
from backend.src.utils.logging_config import get_logger


logger = get_logger("services")


class CalendarService:
    """
    Service aggregating events and series into calendar occurrences.

    Usage:
        >>> service = CalendarService(db_session, max_occurrences=366)
        >>> occurrences = service.build_calendar(actor, range_start, range_end)
    """

    def __init__(self, db: Session, max_occurrences: int = 366):
        """
        Initialize calendar service.

        Args:
            db: SQLAlchemy database session
            max_occurrences: Cap on generated occurrences per indefinite series
        """
        self.db = db
        self.max_occurrences = max_occurrences
        self.event_service = EventService(db)
        self.series_service = SeriesService(db)

    def build_calendar(
        self,
        actor: ActorContext,
        range_start: Optional[datetime] = None,
        range_end: Optional[datetime] = None,
    ) -> List[OccurrenceResponse]:
        """
        Build the actor's calendar.

        Args:
            actor: Authenticated actor
            range_start: Optional lower bound; occurrences ending before it
                are dropped
            range_end: Optional upper bound; occurrences starting after it
                are dropped

        Returns:
            Occurrences sorted by start

        Raises:
            ValidationError: If range_start is after range_end
        """
        range_start = to_naive_utc(range_start)
        range_end = to_naive_utc(range_end)
        if range_start and range_end and range_start > range_end:
            raise ValidationError("Range start must not be after range end", field="start")

        occurrences: List[OccurrenceResponse] = []

        for event in self.event_service.list_all_visible(actor):
            location = None
            if event.has_location:
                location = LocationSchema(
                    address=event.location_address,
                    city=event.location_city,
                    country=event.location_country,
                )
            for occurrence in occurrences_for_event(event):
                occurrences.append(OccurrenceResponse(
                    source_type="event",
                    source_guid=event.guid,
                    index=occurrence.index,
                    title=event.title,
                    description=event.description,
                    start=occurrence.start,
                    end=occurrence.end,
                    is_recurring=occurrence.is_recurring,
                    type=event.type,
                    location=location,
                ))

        for series in self.series_service.list_mine(actor):
            template = series.starting_event or {}
            location = template.get("location")
            for occurrence in occurrences_for_series(series, self.max_occurrences):
                occurrences.append(OccurrenceResponse(
                    source_type="series",
                    source_guid=series.guid,
                    index=occurrence.index,
                    title=template.get("title") or series.name,
                    description=template.get("description") or "",
                    start=occurrence.start,
                    end=occurrence.end,
                    is_recurring=occurrence.is_recurring,
                    location=LocationSchema(**location) if location else None,
                ))

        if range_start is not None:
            occurrences = [o for o in occurrences if o.end >= range_start]
        if range_end is not None:
            occurrences = [o for o in occurrences if o.start <= range_end]

        occurrences.sort(key=lambda o: (o.start, o.source_guid, o.index))
        logger.debug(
            f"Built calendar with {len(occurrences)} occurrences",
            extra={"user_guid": actor.user_guid}
        )
        return occurrences
