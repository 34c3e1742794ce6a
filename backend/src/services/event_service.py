"""
Event service for managing calendar events.

Provides business logic for:
- Creating events with participants resolved by username
- Listing owned, participating, public and all visible events
- Updating and deleting events (owner only)
- Joining and leaving public events
- Inviting users, removing participants, answering invitations
- Admin listing, editing and deletion

Design:
- Visibility of a single event: the owner, or anyone when it is public.
  Anything else is reported as not found so private events do not leak
- The owner is always a participant; participants and invitations are
  kept disjoint
- start_date_time < end_date_time is enforced on every write
- Updates are allow-listed by EDITABLE_FIELDS
- No locking: concurrent join/leave/invite is last writer wins
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from backend.src.middleware.actor import ActorContext
from backend.src.models import Event, EventType, User
from backend.src.schemas.event import EventCreate
from backend.src.services.exceptions import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from backend.src.services.guid import GuidService
from backend.src.services.recurrence import to_naive_utc
from backend.src.services.user_service import UserService
from backend.src.utils.logging_config import get_logger
from backend.src.utils.search import LIKE_ESCAPE, contains_pattern


logger = get_logger("services")


# Fields an owner may change through update(); everything else is rejected
EDITABLE_FIELDS = frozenset({
    "title",
    "description",
    "type",
    "start_date_time",
    "end_date_time",
    "cover_photo",
    "location",
    "is_recurring",
    "recurrence_rule",
})


def _enum_value(value: Any) -> Any:
    return getattr(value, "value", value)


def _as_dict(value: Any) -> Optional[Dict[str, Any]]:
    if value is None:
        return None
    if isinstance(value, dict):
        return value
    return value.model_dump()


class EventService:
    """
    Service for managing calendar events.

    Usage:
        >>> service = EventService(db_session)
        >>> event = service.create(actor, EventCreate(
        ...     title="Standup",
        ...     start_date_time=datetime(2026, 3, 2, 9, 0),
        ...     end_date_time=datetime(2026, 3, 2, 9, 15),
        ...     participants=["alice"],
        ... ))
        >>> service.join(other_actor, event.guid)
    """

    def __init__(self, db: Session):
        """
        Initialize event service.

        Args:
            db: SQLAlchemy database session
        """
        self.db = db
        self.user_service = UserService(db)

    # =========================================================================
    # Internal helpers
    # =========================================================================

    def _load_event(self, guid: str) -> Event:
        """Load an event by GUID without any visibility check."""
        try:
            uuid_value = GuidService.parse_guid(guid, "evt")
        except ValueError:
            raise NotFoundError("Event", guid)

        event = self.db.query(Event).filter(Event.uuid == uuid_value).first()
        if not event:
            raise NotFoundError("Event", guid)
        return event

    def _load_user(self, user_id: int) -> User:
        user = self.db.get(User, user_id)
        if not user:
            raise NotFoundError("User", user_id)
        return user

    @staticmethod
    def _validate_times(start: datetime, end: datetime) -> None:
        if start >= end:
            raise ValidationError(
                "Event start must be before its end",
                field="end_date_time",
            )

    @staticmethod
    def _apply_location(event: Event, location: Optional[Dict[str, Any]]) -> None:
        location = location or {}
        event.location_address = location.get("address")
        event.location_city = location.get("city")
        event.location_country = location.get("country")

    @staticmethod
    def _apply_rule(event: Event, rule: Optional[Dict[str, Any]]) -> None:
        if rule is None:
            event.recurrence_frequency = None
            event.recurrence_interval = None
            event.recurrence_end_date = None
            return
        event.recurrence_frequency = _enum_value(rule.get("frequency")) or "daily"
        event.recurrence_interval = rule.get("interval") or 1
        event.recurrence_end_date = to_naive_utc(rule.get("end_date"))

    @staticmethod
    def _validate_rule(event: Event) -> None:
        if event.is_recurring and not event.recurrence_frequency:
            raise ValidationError(
                "Recurring events require a recurrence rule",
                field="recurrence_rule",
            )
        if (
            event.recurrence_end_date is not None
            and event.recurrence_end_date < event.start_date_time
        ):
            raise ValidationError(
                "Recurrence end date must not be before the event start",
                field="recurrence_rule",
            )

    def _require_owner(self, event: Event, actor: ActorContext, action: str) -> None:
        if event.owner_id != actor.user_id:
            logger.warning(
                f"Rejected {action} on event by non-owner",
                extra={"event_guid": event.guid, "user_guid": actor.user_guid}
            )
            raise ForbiddenError(f"Only the event owner can {action} this event")

    # =========================================================================
    # Create / read
    # =========================================================================

    def create(self, actor: ActorContext, data: EventCreate) -> Event:
        """
        Create a new event owned by the actor.

        Participant usernames are resolved before anything is written; one
        unknown username fails the whole request. The owner is appended to
        the participants.

        Args:
            actor: Authenticated actor (becomes the owner)
            data: Validated creation payload

        Returns:
            Created Event instance

        Raises:
            ValidationError: If a participant is unknown, start >= end or the
                recurrence rule is inconsistent
        """
        start = to_naive_utc(data.start_date_time)
        end = to_naive_utc(data.end_date_time)
        self._validate_times(start, end)

        participants = self.user_service.resolve_usernames(data.participants)
        owner = self._load_user(actor.user_id)
        if all(p.id != owner.id for p in participants):
            participants.append(owner)

        event = Event(
            title=data.title,
            description=data.description,
            type=_enum_value(data.type),
            start_date_time=start,
            end_date_time=end,
            cover_photo=data.cover_photo,
            is_recurring=data.is_recurring,
            owner_id=owner.id,
        )
        self._apply_location(event, _as_dict(data.location))
        self._apply_rule(event, _as_dict(data.recurrence_rule))
        self._validate_rule(event)
        event.participants = participants

        self.db.add(event)
        self.db.commit()
        self.db.refresh(event)

        logger.info(
            f"Created event: {event.title} ({event.guid})",
            extra={"user_guid": actor.user_guid, "participants": len(participants)}
        )
        return event

    def get_by_guid(self, actor: ActorContext, guid: str) -> Event:
        """
        Get an event visible to the actor.

        Raises:
            NotFoundError: If the event does not exist, or it is private and
                the actor is not its owner
        """
        event = self._load_event(guid)
        if event.owner_id != actor.user_id and not event.is_public:
            raise NotFoundError("Event", guid)
        return event

    def list_mine(self, actor: ActorContext) -> List[Event]:
        """List events owned by the actor, ordered by start."""
        return (
            self.db.query(Event)
            .filter(Event.owner_id == actor.user_id)
            .order_by(Event.start_date_time, Event.id)
            .all()
        )

    def list_participating(self, actor: ActorContext) -> List[Event]:
        """List events the actor takes part in but does not own."""
        return (
            self.db.query(Event)
            .filter(Event.participants.any(User.id == actor.user_id))
            .filter(Event.owner_id != actor.user_id)
            .order_by(Event.start_date_time, Event.id)
            .all()
        )

    def list_public(self) -> List[Event]:
        """List all public events, ordered by start."""
        return (
            self.db.query(Event)
            .filter(Event.type == EventType.PUBLIC.value)
            .order_by(Event.start_date_time, Event.id)
            .all()
        )

    def list_all_visible(self, actor: ActorContext) -> List[Event]:
        """
        List owned, participating and public events, each event once.

        Returns:
            Events ordered by start
        """
        merged: Dict[int, Event] = {}
        for event in (
            self.list_mine(actor)
            + self.list_participating(actor)
            + self.list_public()
        ):
            merged[event.id] = event
        return sorted(merged.values(), key=lambda e: (e.start_date_time, e.id))

    def list_invitations(self, actor: ActorContext) -> List[Event]:
        """List events the actor is invited to and has not answered."""
        return (
            self.db.query(Event)
            .filter(Event.invitations.any(User.id == actor.user_id))
            .order_by(Event.start_date_time, Event.id)
            .all()
        )

    # =========================================================================
    # Update / delete
    # =========================================================================

    def update(self, actor: ActorContext, guid: str, **updates: Any) -> Event:
        """
        Update an event owned by the actor.

        Args:
            actor: Authenticated actor
            guid: Event GUID (evt_xxx)
            **updates: Fields from EDITABLE_FIELDS

        Returns:
            Updated Event instance

        Raises:
            NotFoundError: If event not found
            ForbiddenError: If the actor is not the owner
            ValidationError: If a field is not editable or the merged event
                has start >= end
        """
        event = self._load_event(guid)
        self._require_owner(event, actor, "update")

        rejected = sorted(set(updates) - EDITABLE_FIELDS)
        if rejected:
            raise ValidationError(
                f"Fields cannot be updated: {', '.join(rejected)}",
                field=rejected[0],
            )

        start = to_naive_utc(updates.get("start_date_time")) or event.start_date_time
        end = to_naive_utc(updates.get("end_date_time")) or event.end_date_time
        self._validate_times(start, end)

        for field in ("title", "description", "cover_photo", "is_recurring"):
            if field in updates and updates[field] is not None:
                setattr(event, field, updates[field])
        if updates.get("type") is not None:
            event.type = _enum_value(updates["type"])
        event.start_date_time = start
        event.end_date_time = end
        if "location" in updates:
            self._apply_location(event, _as_dict(updates["location"]))
        if "recurrence_rule" in updates:
            self._apply_rule(event, _as_dict(updates["recurrence_rule"]))

        try:
            self._validate_rule(event)
        except ValidationError:
            self.db.rollback()
            raise

        self.db.commit()
        self.db.refresh(event)

        logger.info(f"Updated event: {event.title} ({event.guid})")
        return event

    def delete(self, actor: ActorContext, guid: str) -> None:
        """
        Delete an event owned by the actor.

        Raises:
            NotFoundError: If event not found
            ForbiddenError: If the actor is not the owner
        """
        event = self._load_event(guid)
        self._require_owner(event, actor, "delete")

        title = event.title
        self.db.delete(event)
        self.db.commit()
        logger.info(f"Deleted event: {title} ({guid})")

    # =========================================================================
    # Participation
    # =========================================================================

    def join(self, actor: ActorContext, guid: str) -> Event:
        """
        Join a public event.

        Raises:
            NotFoundError: If event not found
            ConflictError: If the actor owns the event or already participates
            ForbiddenError: If the event is private
        """
        event = self._load_event(guid)
        if event.owner_id == actor.user_id:
            raise ConflictError("Owner cannot join own event")
        if event.is_participant(actor.user_id):
            raise ConflictError("Already joined this event")
        if not event.is_public:
            raise ForbiddenError("Cannot join a private event")

        user = self._load_user(actor.user_id)
        event.participants.append(user)
        if event.is_invited(user.id):
            event.invitations.remove(user)
        self.db.commit()
        self.db.refresh(event)

        logger.info(f"User {actor.username} joined event {event.guid}")
        return event

    def leave(self, actor: ActorContext, guid: str) -> Event:
        """
        Leave an event the actor participates in.

        Only the actor is removed; all other participants stay.

        Raises:
            NotFoundError: If event not found
            ConflictError: If the actor is not a participant
        """
        event = self._load_event(guid)
        if not event.is_participant(actor.user_id):
            raise ConflictError("Not a participant of this event")

        event.participants = [p for p in event.participants if p.id != actor.user_id]
        self.db.commit()
        self.db.refresh(event)

        logger.info(f"User {actor.username} left event {event.guid}")
        return event

    def invite(self, actor: ActorContext, guid: str, username: str) -> Event:
        """
        Invite a user to an event owned by the actor.

        Raises:
            NotFoundError: If the event or the username does not exist
            ForbiddenError: If the actor is not the owner
            ConflictError: If the user already participates or is invited
        """
        event = self._load_event(guid)
        self._require_owner(event, actor, "invite to")

        target = self.user_service.get_by_username(username)
        if event.is_participant(target.id):
            raise ConflictError(f"User {target.username} is already a participant")
        if event.is_invited(target.id):
            raise ConflictError(f"User {target.username} is already invited")

        event.invitations.append(target)
        self.db.commit()
        self.db.refresh(event)

        logger.info(
            f"Invited {target.username} to event {event.guid}",
            extra={"user_guid": actor.user_guid}
        )
        return event

    def remove_participant(
        self,
        actor: ActorContext,
        guid: str,
        participant_guid: str,
    ) -> Event:
        """
        Remove a participant from an event owned by the actor.

        Raises:
            NotFoundError: If event not found or the user is not a participant
            ForbiddenError: If the actor is not the owner
            ValidationError: If the owner tries to remove themselves
        """
        event = self._load_event(guid)
        self._require_owner(event, actor, "remove participants from")

        participant = next(
            (p for p in event.participants if p.guid == participant_guid),
            None,
        )
        if participant is None:
            raise NotFoundError("Participant", participant_guid)
        if participant.id == event.owner_id:
            raise ValidationError("The owner cannot be removed from the event")

        event.participants.remove(participant)
        self.db.commit()
        self.db.refresh(event)

        logger.info(f"Removed {participant.username} from event {event.guid}")
        return event

    def accept_invitation(self, actor: ActorContext, guid: str) -> Event:
        """
        Accept a pending invitation: move the actor to the participants.

        Raises:
            NotFoundError: If event not found or the actor is not invited
        """
        event = self._load_event(guid)
        user = next((u for u in event.invitations if u.id == actor.user_id), None)
        if user is None:
            raise NotFoundError("Invitation", guid)

        event.invitations.remove(user)
        if not event.is_participant(user.id):
            event.participants.append(user)
        self.db.commit()
        self.db.refresh(event)

        logger.info(f"User {actor.username} accepted invitation to {event.guid}")
        return event

    def reject_invitation(self, actor: ActorContext, guid: str) -> Event:
        """
        Reject a pending invitation.

        Raises:
            NotFoundError: If event not found or the actor is not invited
        """
        event = self._load_event(guid)
        user = next((u for u in event.invitations if u.id == actor.user_id), None)
        if user is None:
            raise NotFoundError("Invitation", guid)

        event.invitations.remove(user)
        self.db.commit()
        self.db.refresh(event)

        logger.info(f"User {actor.username} rejected invitation to {event.guid}")
        return event

    # =========================================================================
    # Admin operations
    # =========================================================================

    def admin_list(
        self,
        page: int = 1,
        limit: int = 10,
        search: Optional[str] = None,
    ) -> Tuple[List[Event], int]:
        """
        List all events a page at a time, newest first.

        Args:
            page: 1-based page number
            limit: Page size
            search: Optional case-insensitive title filter

        Returns:
            Tuple of (events on the page, total matching events)
        """
        page = max(page, 1)
        limit = max(limit, 1)

        query = self.db.query(Event)
        if search:
            query = query.filter(
                func.lower(Event.title).like(contains_pattern(search), escape=LIKE_ESCAPE)
            )

        total = query.count()
        events = (
            query.order_by(Event.created_at.desc(), Event.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return events, total

    def admin_update(
        self,
        guid: str,
        title: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Event:
        """
        Edit the title and/or description of any event.

        Raises:
            NotFoundError: If event not found
            ValidationError: If neither field is provided
        """
        if title is None and description is None:
            raise ValidationError("Nothing to update: provide title or description")

        event = self._load_event(guid)
        if title is not None:
            if not title.strip():
                raise ValidationError("Title cannot be empty", field="title")
            event.title = title.strip()
        if description is not None:
            event.description = description
        self.db.commit()
        self.db.refresh(event)

        logger.info(f"Admin updated event {event.guid}")
        return event

    def admin_delete(self, guid: str) -> None:
        """
        Delete any event.

        Raises:
            NotFoundError: If event not found
        """
        event = self._load_event(guid)
        self.db.delete(event)
        self.db.commit()
        logger.info(f"Admin deleted event {guid}")
