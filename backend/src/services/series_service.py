"""
Series service for managing event series.

Provides business logic for creating, reading, updating and deleting
template-based event series.

Design:
- Exactly one of is_indefinite / ending_event holds, at creation and after
  every update
- Recurring series require a recurrence rule
- Each template must end after it starts on the same day, and the ending
  template cannot be dated before the starting template
- Manual series link existing events owned by the creator
- A series is only visible to its creator; everyone else gets not found
- Templates are stored as JSON documents
"""

from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from backend.src.middleware.actor import ActorContext
from backend.src.models import Event, EventSeries, SeriesType
from backend.src.schemas.event_series import (
    EventSeriesCreate,
    EventTemplate,
    SeriesRecurrenceRule,
)
from backend.src.services.exceptions import ForbiddenError, NotFoundError, ValidationError
from backend.src.services.guid import GuidService
from backend.src.services.recurrence import to_naive_utc
from backend.src.utils.logging_config import get_logger


logger = get_logger("services")


EDITABLE_FIELDS = frozenset({
    "name",
    "is_indefinite",
    "starting_event",
    "ending_event",
    "recurrence_rule",
    "event_guids",
})


def _template(value: Any) -> Optional[EventTemplate]:
    if value is None or isinstance(value, EventTemplate):
        return value
    return EventTemplate.model_validate(value)


def _rule(value: Any) -> Optional[SeriesRecurrenceRule]:
    if value is None or isinstance(value, SeriesRecurrenceRule):
        return value
    return SeriesRecurrenceRule.model_validate(value)


def _minutes(time_of_day) -> int:
    return time_of_day.hour * 60 + time_of_day.minute


class SeriesService:
    """
    Service for managing event series.

    Usage:
        >>> service = SeriesService(db_session)
        >>> series = service.create(actor, EventSeriesCreate(...))
        >>> service.list_mine(actor)
    """

    def __init__(self, db: Session):
        """
        Initialize series service.

        Args:
            db: SQLAlchemy database session
        """
        self.db = db

    # =========================================================================
    # Validation
    # =========================================================================

    @staticmethod
    def _validate(
        series_type: str,
        is_indefinite: bool,
        starting: Optional[EventTemplate],
        ending: Optional[EventTemplate],
        rule: Optional[SeriesRecurrenceRule],
    ) -> None:
        """
        Check the series invariants.

        Raises:
            ValidationError: On the first broken rule
        """
        if starting is None:
            raise ValidationError("A starting event is required", field="starting_event")
        if is_indefinite and ending is not None:
            raise ValidationError(
                "An indefinite series cannot have an ending event",
                field="ending_event",
            )
        if not is_indefinite and ending is None:
            raise ValidationError(
                "A series must either be indefinite or have an ending event",
                field="ending_event",
            )
        if series_type == SeriesType.RECURRING.value and rule is None:
            raise ValidationError(
                "Recurring series require a recurrence rule",
                field="recurrence_rule",
            )

        for name, template in (("starting_event", starting), ("ending_event", ending)):
            if template is not None and _minutes(template.start_time) >= _minutes(template.end_time):
                raise ValidationError(
                    "Template start time must be before its end time",
                    field=name,
                )

        first_day = to_naive_utc(starting.start_date_time).date()
        if ending is not None and to_naive_utc(ending.start_date_time).date() < first_day:
            raise ValidationError(
                "The ending event cannot be dated before the starting event",
                field="ending_event",
            )
        if rule is not None and rule.end_date is not None:
            if to_naive_utc(rule.end_date).date() < first_day:
                raise ValidationError(
                    "Recurrence end date cannot be before the starting event",
                    field="recurrence_rule",
                )

    def _resolve_events(self, actor: ActorContext, guids: List[str]) -> List[Event]:
        """
        Resolve event GUIDs owned by the actor.

        Raises:
            ValidationError: If an event does not exist or is not owned by
                the actor
        """
        events = []
        for guid in dict.fromkeys(guids):
            try:
                uuid_value = GuidService.parse_guid(guid, "evt")
            except ValueError:
                raise ValidationError(f"Invalid event identifier: {guid}", field="event_guids")
            event = self.db.query(Event).filter(Event.uuid == uuid_value).first()
            if event is None or event.owner_id != actor.user_id:
                raise ValidationError(
                    f"Event {guid} not found among your events",
                    field="event_guids",
                )
            events.append(event)
        return events

    def _load_series(self, guid: str) -> EventSeries:
        try:
            uuid_value = GuidService.parse_guid(guid, "ser")
        except ValueError:
            raise NotFoundError("EventSeries", guid)

        series = self.db.query(EventSeries).filter(EventSeries.uuid == uuid_value).first()
        if not series:
            raise NotFoundError("EventSeries", guid)
        return series

    @staticmethod
    def _dump(template: Optional[EventTemplate]) -> Optional[Dict[str, Any]]:
        return template.model_dump(mode="json") if template is not None else None

    # =========================================================================
    # Operations
    # =========================================================================

    def create(self, actor: ActorContext, data: EventSeriesCreate) -> EventSeries:
        """
        Create a new series owned by the actor.

        Returns:
            Created EventSeries instance

        Raises:
            ValidationError: If an invariant is broken or a linked event is
                unknown or not owned by the actor
        """
        series_type = data.series_type.value
        self._validate(
            series_type,
            data.is_indefinite,
            data.starting_event,
            data.ending_event,
            data.recurrence_rule,
        )
        if data.event_guids and series_type != SeriesType.MANUAL.value:
            raise ValidationError(
                "Only manual series can link events",
                field="event_guids",
            )
        events = self._resolve_events(actor, data.event_guids)

        rule = data.recurrence_rule
        series = EventSeries(
            name=data.name,
            creator_id=actor.user_id,
            series_type=series_type,
            is_indefinite=data.is_indefinite,
            starting_event=self._dump(data.starting_event),
            ending_event=self._dump(data.ending_event),
            recurrence_frequency=rule.frequency.value if rule else None,
            recurrence_end_date=to_naive_utc(rule.end_date) if rule else None,
        )
        series.events = events

        self.db.add(series)
        self.db.commit()
        self.db.refresh(series)

        logger.info(
            f"Created series: {series.name} ({series.guid})",
            extra={"user_guid": actor.user_guid, "series_type": series_type}
        )
        return series

    def list_mine(self, actor: ActorContext) -> List[EventSeries]:
        """List series created by the actor, newest first."""
        return (
            self.db.query(EventSeries)
            .filter(EventSeries.creator_id == actor.user_id)
            .order_by(EventSeries.created_at.desc(), EventSeries.id.desc())
            .all()
        )

    def get_by_guid(self, actor: ActorContext, guid: str) -> EventSeries:
        """
        Get a series created by the actor.

        Raises:
            NotFoundError: If the series does not exist or belongs to
                someone else
        """
        series = self._load_series(guid)
        if series.creator_id != actor.user_id:
            raise NotFoundError("EventSeries", guid)
        return series

    def update(self, actor: ActorContext, guid: str, **updates: Any) -> EventSeries:
        """
        Update a series created by the actor.

        The invariants are checked against the merged result, so switching
        to indefinite requires clearing ending_event in the same request.

        Raises:
            NotFoundError: If series not found
            ForbiddenError: If the actor is not the creator
            ValidationError: If a field is not editable or the merged series
                breaks an invariant
        """
        series = self._load_series(guid)
        if series.creator_id != actor.user_id:
            raise ForbiddenError("Only the series creator can update this series")

        rejected = sorted(set(updates) - EDITABLE_FIELDS)
        if rejected:
            raise ValidationError(
                f"Fields cannot be updated: {', '.join(rejected)}",
                field=rejected[0],
            )

        if "name" in updates and updates["name"] is not None:
            if not updates["name"].strip():
                raise ValidationError("Name cannot be empty", field="name")

        is_indefinite = updates.get("is_indefinite")
        if is_indefinite is None:
            is_indefinite = series.is_indefinite
        starting = _template(updates.get("starting_event", series.starting_event))
        ending = _template(
            updates["ending_event"] if "ending_event" in updates else series.ending_event
        )
        if "recurrence_rule" in updates:
            rule = _rule(updates["recurrence_rule"])
        elif series.recurrence_frequency:
            rule = SeriesRecurrenceRule(
                frequency=series.recurrence_frequency,
                end_date=series.recurrence_end_date,
            )
        else:
            rule = None

        self._validate(series.series_type, is_indefinite, starting, ending, rule)

        events = None
        if updates.get("event_guids") is not None:
            if series.series_type != SeriesType.MANUAL.value:
                raise ValidationError(
                    "Only manual series can link events",
                    field="event_guids",
                )
            events = self._resolve_events(actor, updates["event_guids"])

        if updates.get("name"):
            series.name = updates["name"].strip()
        series.is_indefinite = is_indefinite
        series.starting_event = self._dump(starting)
        series.ending_event = self._dump(ending)
        series.recurrence_frequency = rule.frequency.value if rule else None
        series.recurrence_end_date = to_naive_utc(rule.end_date) if rule else None
        if events is not None:
            series.events = events

        self.db.commit()
        self.db.refresh(series)

        logger.info(f"Updated series: {series.name} ({series.guid})")
        return series

    def delete(self, actor: ActorContext, guid: str) -> None:
        """
        Delete a series created by the actor.

        Linked events of a manual series are kept and unlinked.

        Raises:
            NotFoundError: If series not found
            ForbiddenError: If the actor is not the creator
        """
        series = self._load_series(guid)
        if series.creator_id != actor.user_id:
            raise ForbiddenError("Only the series creator can delete this series")

        name = series.name
        self.db.delete(series)
        self.db.commit()
        logger.info(f"Deleted series: {name} ({guid})")
