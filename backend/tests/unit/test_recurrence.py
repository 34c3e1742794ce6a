"""
Unit tests for the recurrence expander.

Covers count and duration preservation, month and year rollover into the
next month, until cut-off, flags, and the event/series call sites.
"""

import pytest
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

from backend.src.services.recurrence import (
    Occurrence,
    expand_occurrences,
    occurrences_for_event,
    occurrences_for_series,
    to_naive_utc,
)


# ============================================================================
# expand_occurrences
# ============================================================================


class TestExpandOccurrences:
    """Tests for the core expander."""

    def test_count_and_duration_preserved(self):
        """Each occurrence keeps the base duration; one per repeat."""
        start = datetime(2026, 3, 2, 9, 0)
        end = datetime(2026, 3, 2, 10, 30)

        result = expand_occurrences(start, end, unit="daily", repeat_count=5)

        assert len(result) == 5
        assert [o.index for o in result] == [0, 1, 2, 3, 4]
        for i, occurrence in enumerate(result):
            assert occurrence.start == start + timedelta(days=i)
            assert occurrence.end - occurrence.start == timedelta(hours=1, minutes=30)

    def test_weekly_steps(self):
        start = datetime(2026, 3, 2, 18, 0)
        result = expand_occurrences(
            start, start + timedelta(hours=1), unit="weekly", repeat_count=3
        )

        assert [o.start for o in result] == [
            datetime(2026, 3, 2, 18, 0),
            datetime(2026, 3, 9, 18, 0),
            datetime(2026, 3, 16, 18, 0),
        ]

    def test_monthly_rolls_over_short_month(self):
        """2025-01-31 monthly spills into March, then returns to the 31st."""
        start = datetime(2025, 1, 31, 10, 0)
        end = datetime(2025, 1, 31, 11, 0)

        result = expand_occurrences(start, end, unit="monthly", repeat_count=3)

        assert [o.start for o in result] == [
            datetime(2025, 1, 31, 10, 0),
            datetime(2025, 3, 3, 10, 0),
            datetime(2025, 3, 31, 10, 0),
        ]
        assert all(o.end - o.start == timedelta(hours=1) for o in result)

    @pytest.mark.parametrize("base, expected", [
        (datetime(2025, 1, 30, 10, 0), datetime(2025, 3, 2, 10, 0)),
        (datetime(2025, 1, 29, 10, 0), datetime(2025, 3, 1, 10, 0)),
        (datetime(2025, 1, 28, 10, 0), datetime(2025, 2, 28, 10, 0)),
        (datetime(2024, 1, 31, 10, 0), datetime(2024, 3, 2, 10, 0)),
        (datetime(2024, 1, 30, 10, 0), datetime(2024, 3, 1, 10, 0)),
        (datetime(2025, 3, 31, 10, 0), datetime(2025, 5, 1, 10, 0)),
        (datetime(2025, 12, 31, 10, 0), datetime(2026, 1, 31, 10, 0)),
    ])
    def test_monthly_rollover_edge_dates(self, base, expected):
        result = expand_occurrences(
            base, base + timedelta(hours=1), unit="monthly", repeat_count=2
        )

        assert result[1].start == expected
        assert result[1].end == expected + timedelta(hours=1)

    def test_monthly_offsets_not_chained(self):
        """Index 2 is computed from the base, not from the rolled-over index 1."""
        start = datetime(2025, 1, 31, 10, 0)
        result = expand_occurrences(
            start, start + timedelta(hours=1), unit="monthly", repeat_count=4
        )

        assert [o.start.date().isoformat() for o in result] == [
            "2025-01-31", "2025-03-03", "2025-03-31", "2025-05-01",
        ]

    def test_yearly_leap_day_rolls_over(self):
        start = datetime(2024, 2, 29, 8, 0)
        result = expand_occurrences(
            start, start + timedelta(hours=2), unit="yearly", repeat_count=5
        )

        assert result[1].start == datetime(2025, 3, 1, 8, 0)
        assert result[4].start == datetime(2028, 2, 29, 8, 0)

    @pytest.mark.parametrize("count", [None, 0, -3])
    def test_missing_or_invalid_count_yields_base_only(self, count):
        start = datetime(2026, 1, 1, 9, 0)
        result = expand_occurrences(
            start, start + timedelta(hours=1), repeat_count=count
        )

        assert len(result) == 1
        assert result[0].start == start

    def test_unknown_unit_falls_back_to_daily(self):
        start = datetime(2026, 1, 1, 9, 0)
        result = expand_occurrences(
            start, start + timedelta(hours=1), unit="fortnightly", repeat_count=2
        )

        assert result[1].start == datetime(2026, 1, 2, 9, 0)

    def test_unparsable_dates_yield_nothing(self):
        assert expand_occurrences("not-a-date", "2026-01-01T10:00:00") == []
        assert expand_occurrences("2026-01-01T09:00:00", None) == []

    def test_iso_strings_accepted(self):
        result = expand_occurrences(
            "2026-01-01T09:00:00Z", "2026-01-01T10:00:00Z", unit="daily", repeat_count=2
        )

        assert result[0].start == datetime(2026, 1, 1, 9, 0)
        assert result[0].start.tzinfo is None

    def test_flags(self):
        """Only generated repeats are flagged as recurring."""
        start = datetime(2026, 1, 1, 9, 0)
        result = expand_occurrences(start, start + timedelta(hours=1), repeat_count=3)

        assert [o.is_recurring for o in result] == [False, True, True]

    def test_until_stops_generation(self):
        start = datetime(2026, 1, 1, 9, 0)
        result = expand_occurrences(
            start,
            start + timedelta(hours=1),
            unit="daily",
            repeat_count=10,
            until=datetime(2026, 1, 3, 23, 59),
        )

        assert len(result) == 3
        assert result[-1].start == datetime(2026, 1, 3, 9, 0)

    def test_until_never_drops_base(self):
        start = datetime(2026, 1, 5, 9, 0)
        result = expand_occurrences(
            start, start + timedelta(hours=1), repeat_count=3, until=datetime(2026, 1, 1)
        )

        assert result == [Occurrence(0, start, start + timedelta(hours=1), False)]

    def test_expander_is_pure(self):
        start = datetime(2026, 1, 1, 9, 0)
        args = (start, start + timedelta(hours=1), "monthly", 4)

        assert expand_occurrences(*args) == expand_occurrences(*args)


class TestToNaiveUtc:
    def test_aware_converted(self):
        aware = datetime(2026, 1, 1, 12, 0, tzinfo=timezone(timedelta(hours=2)))
        assert to_naive_utc(aware) == datetime(2026, 1, 1, 10, 0)

    def test_naive_and_none_kept(self):
        naive = datetime(2026, 1, 1, 12, 0)
        assert to_naive_utc(naive) is naive
        assert to_naive_utc(None) is None


# ============================================================================
# Call sites
# ============================================================================


def _event(**overrides):
    values = dict(
        start_date_time=datetime(2026, 3, 2, 9, 0),
        end_date_time=datetime(2026, 3, 2, 10, 0),
        is_recurring=False,
        recurrence_frequency=None,
        recurrence_interval=None,
        recurrence_end_date=None,
    )
    values.update(overrides)
    return SimpleNamespace(**values)


def _series(**overrides):
    values = dict(
        guid="ser_test",
        is_recurring=True,
        is_indefinite=False,
        starting_event={
            "title": "Standup",
            "start_date_time": "2026-03-02T00:00:00",
            "start_time": {"hour": 9, "minute": 0},
            "end_time": {"hour": 9, "minute": 15},
        },
        ending_event={
            "title": "Standup",
            "start_date_time": "2026-03-06T00:00:00",
            "start_time": {"hour": 9, "minute": 0},
            "end_time": {"hour": 9, "minute": 15},
        },
        recurrence_frequency="daily",
        recurrence_end_date=None,
    )
    values.update(overrides)
    return SimpleNamespace(**values)


class TestOccurrencesForEvent:
    def test_non_recurring_event_single_occurrence(self):
        result = occurrences_for_event(_event())

        assert len(result) == 1
        assert result[0].is_recurring is False

    def test_recurring_event_uses_interval_as_count(self):
        event = _event(
            is_recurring=True, recurrence_frequency="weekly", recurrence_interval=4
        )

        result = occurrences_for_event(event)

        assert len(result) == 4
        assert result[-1].start == datetime(2026, 3, 23, 9, 0)
        assert [o.is_recurring for o in result] == [False, True, True, True]

    def test_end_date_inclusive_of_whole_day(self):
        event = _event(
            is_recurring=True,
            recurrence_frequency="daily",
            recurrence_interval=30,
            recurrence_end_date=datetime(2026, 3, 4, 0, 0),
        )

        result = occurrences_for_event(event)

        assert [o.start.day for o in result] == [2, 3, 4]


class TestOccurrencesForSeries:
    def test_bounded_by_ending_template(self):
        result = occurrences_for_series(_series(), max_occurrences=366)

        assert len(result) == 5
        assert result[0].start == datetime(2026, 3, 2, 9, 0)
        assert result[0].end == datetime(2026, 3, 2, 9, 15)
        assert result[-1].start == datetime(2026, 3, 6, 9, 0)

    def test_rule_end_date_wins_when_earlier(self):
        series = _series(recurrence_end_date=datetime(2026, 3, 3))
        result = occurrences_for_series(series, max_occurrences=366)

        assert len(result) == 2

    def test_indefinite_series_capped(self):
        series = _series(is_indefinite=True, ending_event=None)
        result = occurrences_for_series(series, max_occurrences=10)

        assert len(result) == 10

    def test_manual_series_yields_nothing(self):
        assert occurrences_for_series(_series(is_recurring=False), 366) == []

    def test_invalid_template_yields_nothing(self):
        series = _series(starting_event={"title": "Broken"})
        assert occurrences_for_series(series, 366) == []
