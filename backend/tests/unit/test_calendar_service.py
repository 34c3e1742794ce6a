"""
Unit tests for CalendarService.

Tests the merge of visible events and own series into one sorted list of
expanded occurrences, plus range filtering.
"""

import pytest
from datetime import datetime

from backend.src.schemas.event import EventCreate
from backend.src.schemas.event_series import EventSeriesCreate
from backend.src.services.calendar_service import CalendarService
from backend.src.services.event_service import EventService
from backend.src.services.exceptions import ValidationError
from backend.src.services.series_service import SeriesService


@pytest.fixture
def calendar_service(test_db_session):
    """Create a CalendarService with a small occurrence cap."""
    return CalendarService(test_db_session, max_occurrences=20)


@pytest.fixture
def populated(test_db_session, alice, bob, carol, actor_for, event_payload, series_payload):
    """Events and series owned by different users."""
    events = EventService(test_db_session)
    events.create(actor_for(alice), EventCreate(**event_payload(
        title="Weekly review",
        start=datetime(2026, 3, 2, 14, 0),
        is_recurring=True,
        recurrence_rule={"frequency": "weekly", "interval": 3},
    )))
    events.create(actor_for(bob), EventCreate(**event_payload(
        title="Bob public", event_type="public", start=datetime(2026, 3, 3, 9, 0),
    )))
    events.create(actor_for(carol), EventCreate(**event_payload(
        title="Carol private", start=datetime(2026, 3, 4, 9, 0),
    )))
    SeriesService(test_db_session).create(
        actor_for(alice), EventSeriesCreate(**series_payload())
    )


class TestBuildCalendar:
    """Tests for calendar aggregation."""

    def test_merges_events_and_series(self, calendar_service, populated, alice, actor_for):
        occurrences = calendar_service.build_calendar(actor_for(alice))

        titles = [o.title for o in occurrences]
        assert titles.count("Weekly review") == 3
        assert titles.count("Standup") == 5
        assert titles.count("Bob public") == 1
        assert "Carol private" not in titles

        starts = [o.start for o in occurrences]
        assert starts == sorted(starts)

    def test_occurrence_fields(self, calendar_service, populated, alice, actor_for):
        occurrences = calendar_service.build_calendar(actor_for(alice))

        review = [o for o in occurrences if o.title == "Weekly review"]
        assert [o.index for o in review] == [0, 1, 2]
        assert review[2].start == datetime(2026, 3, 16, 14, 0)
        assert review[2].end == datetime(2026, 3, 16, 16, 0)
        assert all(o.source_type == "event" for o in review)

        standup = [o for o in occurrences if o.source_type == "series"]
        assert standup[0].source_guid.startswith("ser_")
        assert standup[0].start == datetime(2026, 3, 2, 9, 0)
        assert standup[0].end == datetime(2026, 3, 2, 10, 0)

    def test_series_of_other_users_excluded(
        self, calendar_service, populated, bob, actor_for
    ):
        occurrences = calendar_service.build_calendar(actor_for(bob))

        assert [o.title for o in occurrences] == ["Bob public"]

    def test_range_filter(self, calendar_service, populated, alice, actor_for):
        occurrences = calendar_service.build_calendar(
            actor_for(alice),
            range_start=datetime(2026, 3, 9, 0, 0),
            range_end=datetime(2026, 3, 31, 0, 0),
        )

        assert [o.title for o in occurrences] == ["Weekly review", "Weekly review"]

    def test_inverted_range_rejected(self, calendar_service, alice, actor_for):
        with pytest.raises(ValidationError):
            calendar_service.build_calendar(
                actor_for(alice),
                range_start=datetime(2026, 3, 31),
                range_end=datetime(2026, 3, 1),
            )

    def test_indefinite_series_capped(
        self, calendar_service, alice, actor_for, series_payload, test_db_session
    ):
        SeriesService(test_db_session).create(
            actor_for(alice), EventSeriesCreate(**series_payload(is_indefinite=True))
        )

        occurrences = calendar_service.build_calendar(actor_for(alice))

        assert len(occurrences) == 20
