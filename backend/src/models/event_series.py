"""
EventSeries model for template-based event series.

A series does not store its occurrences. It stores a starting template, an
optional ending template and a recurrence rule; the calendar expands these
through services.recurrence when rendering. Manual series instead link to
concrete Event rows through Event.series_id.

Design Rationale:
- Templates are JSON documents (title, description, start_date_time,
  start_time, end_time, location) validated by schemas.event_series
- Exactly one of is_indefinite / ending_event holds; the service enforces it
- recurrence_frequency is required for recurring series only
- Deleting a series leaves manual events in place (series_id SET NULL)
"""

import enum
from datetime import datetime

from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship

from backend.src.models import Base
from backend.src.models.mixins import GuidMixin


class SeriesType(enum.Enum):
    """How the series produces its events."""
    RECURRING = "recurring"
    MANUAL = "manual"


class SeriesFrequency(enum.Enum):
    """Repeat unit for recurring series."""
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class EventSeries(Base, GuidMixin):
    """
    Event series model.

    Attributes:
        id: Primary key (internal, never exposed)
        uuid: UUIDv7 for external identification (inherited from GuidMixin)
        guid: GUID string property (ser_xxx, inherited from GuidMixin)
        name: Series name
        creator_id: FK to the creating user
        series_type: "recurring" or "manual"
        is_indefinite: Series without an ending template
        starting_event: Template of the first occurrence (JSON)
        ending_event: Template of the last occurrence (JSON, None if indefinite)
        recurrence_frequency: daily, weekly, monthly or yearly
        recurrence_end_date: Optional hard stop for generated occurrences
        created_at: Creation timestamp
        updated_at: Last update timestamp

    Relationships:
        creator: Creating user (many-to-one, CASCADE on delete)
        events: Linked events of a manual series (one-to-many)
    """

    __tablename__ = "event_series"

    GUID_PREFIX = "ser"

    id = Column(Integer, primary_key=True, autoincrement=True)

    creator_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    name = Column(String(255), nullable=False)
    series_type = Column(String(20), nullable=False, default=SeriesType.RECURRING.value)
    is_indefinite = Column(Boolean, nullable=False, default=False)

    starting_event = Column(JSON, nullable=False)
    ending_event = Column(JSON, nullable=True)

    recurrence_frequency = Column(String(20), nullable=True)
    recurrence_end_date = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False
    )

    creator = relationship("User", back_populates="series")
    events = relationship(
        "Event",
        back_populates="series",
        order_by="Event.start_date_time",
    )

    @property
    def is_recurring(self) -> bool:
        """Check if occurrences are generated from the recurrence rule."""
        return self.series_type == SeriesType.RECURRING.value

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"<EventSeries("
            f"id={self.id}, "
            f"name='{self.name}', "
            f"series_type='{self.series_type}'"
            f")>"
        )

    def __str__(self) -> str:
        """Human-readable string representation."""
        return self.name
