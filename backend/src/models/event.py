"""
Event model for calendar events.

Events represent individual calendar entries owned by one user. An event
can carry a recurrence rule; the stored row is the base occurrence and the
repeats are generated on read by services.recurrence.

Design Rationale:
- owner_id is a foreign key, never an embedded copy of the user
- participants and invitations are association tables so a user can only
  appear once in each; the service keeps the two sets disjoint
- The owner is added to participants when the event is created
- Datetimes are stored as naive UTC
"""

import enum
from datetime import datetime

from sqlalchemy import (
    Column, Integer, String, Boolean, DateTime, Text,
    ForeignKey, Index, Table
)
from sqlalchemy.orm import relationship

from backend.src.models import Base
from backend.src.models.mixins import GuidMixin


class EventType(enum.Enum):
    """Event visibility."""
    PUBLIC = "public"
    PRIVATE = "private"


class RecurrenceFrequency(enum.Enum):
    """Repeat unit for recurring events."""
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


event_participants = Table(
    "event_participants",
    Base.metadata,
    Column(
        "event_id",
        Integer,
        ForeignKey("events.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "user_id",
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


event_invitations = Table(
    "event_invitations",
    Base.metadata,
    Column(
        "event_id",
        Integer,
        ForeignKey("events.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "user_id",
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class Event(Base, GuidMixin):
    """
    Calendar event model.

    Attributes:
        id: Primary key (internal, never exposed)
        uuid: UUIDv7 for external identification (inherited from GuidMixin)
        guid: GUID string property (evt_xxx, inherited from GuidMixin)

        Core Fields:
            title: Event title
            description: Event description
            type: "public" or "private"
            start_date_time: Start instant (naive UTC)
            end_date_time: End instant (naive UTC), after start_date_time
            cover_photo: Optional cover photo URL

        Location Fields:
            location_address, location_city, location_country

        Recurrence Fields:
            is_recurring: Whether the event repeats
            recurrence_frequency: daily, weekly or monthly
            recurrence_interval: Number of occurrences to generate (>= 1)
            recurrence_end_date: Optional last date for generated occurrences

        Ownership:
            owner_id: FK to the owning user
            series_id: Optional FK to a manual EventSeries

        Timestamps:
            created_at, updated_at

    Relationships:
        owner: Owning user (many-to-one, CASCADE on delete)
        series: Parent series (many-to-one, SET NULL on delete)
        participants: Users taking part (many-to-many)
        invitations: Users invited but not yet answered (many-to-many)
    """

    __tablename__ = "events"

    GUID_PREFIX = "evt"

    id = Column(Integer, primary_key=True, autoincrement=True)

    owner_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    series_id = Column(
        Integer,
        ForeignKey("event_series.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    type = Column(String(20), nullable=False, default=EventType.PRIVATE.value)

    start_date_time = Column(DateTime, nullable=False)
    end_date_time = Column(DateTime, nullable=False)

    cover_photo = Column(String(1024), nullable=True)

    location_address = Column(String(255), nullable=True)
    location_city = Column(String(100), nullable=True)
    location_country = Column(String(100), nullable=True)

    is_recurring = Column(Boolean, nullable=False, default=False)
    recurrence_frequency = Column(String(20), nullable=True)
    recurrence_interval = Column(Integer, nullable=True)
    recurrence_end_date = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False
    )

    owner = relationship("User", back_populates="owned_events")
    series = relationship("EventSeries", back_populates="events")
    participants = relationship(
        "User",
        secondary=event_participants,
        lazy="selectin",
        order_by="User.id",
    )
    invitations = relationship(
        "User",
        secondary=event_invitations,
        lazy="selectin",
        order_by="User.id",
    )

    __table_args__ = (
        Index("ix_events_type_start", "type", "start_date_time"),
    )

    @property
    def has_location(self) -> bool:
        """Check if any location field is set."""
        return any((self.location_address, self.location_city, self.location_country))

    @property
    def is_public(self) -> bool:
        """Check if the event is visible to everyone."""
        return self.type == EventType.PUBLIC.value

    def is_participant(self, user_id: int) -> bool:
        """Check if the user id is among the participants."""
        return any(p.id == user_id for p in self.participants)

    def is_invited(self, user_id: int) -> bool:
        """Check if the user id has a pending invitation."""
        return any(u.id == user_id for u in self.invitations)

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"<Event("
            f"id={self.id}, "
            f"title='{self.title}', "
            f"type='{self.type}', "
            f"start={self.start_date_time}"
            f")>"
        )

    def __str__(self) -> str:
        """Human-readable string representation."""
        return f"{self.title} ({self.start_date_time:%Y-%m-%d %H:%M})"
