"""
Recurrence expansion for events and event series.

Turns a base occurrence (start, end) plus a repeat unit and count into the
list of concrete occurrences shown on the calendar. The expander is pure:
it reads nothing but its arguments, so it can be re-run at any time and
always produces the same result.

Rules:
- daily: start + i days
- weekly: start + 7*i days
- monthly: start + i calendar months
- yearly: start + i calendar years
- Month and year steps keep the day of month and roll over into the
  following month when the target month is shorter (2025-01-31 + 1 month =
  2025-03-03, + 2 months = 2025-03-31; 2024-02-29 + 1 year = 2025-03-01)
- Every offset is computed from the base start, never chained from the
  previous occurrence
- The duration (end - start) of the base is kept for every occurrence
- Only generated repeats (index > 0) are flagged is_recurring

Both call sites, occurrences_for_event() and occurrences_for_series(), go
through expand_occurrences().
"""

from dataclasses import dataclass
from datetime import datetime, time, timedelta, timezone
from typing import Any, List, Optional, Union

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

from backend.src.utils.logging_config import get_logger


logger = get_logger("services")

DateLike = Union[datetime, str, None]

REPEAT_UNITS = ("daily", "weekly", "monthly", "yearly")


@dataclass(frozen=True)
class Occurrence:
    """
    One generated occurrence.

    Attributes:
        index: Position in the expansion, 0 for the base occurrence
        start: Occurrence start (naive UTC)
        end: Occurrence end (naive UTC)
        is_recurring: True for generated repeats, False for the base
    """

    index: int
    start: datetime
    end: datetime
    is_recurring: bool


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Convert an aware datetime to naive UTC; naive values are kept as-is."""
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def _to_datetime(value: DateLike) -> Optional[datetime]:
    """
    Parse a datetime or ISO 8601 string to a naive UTC datetime.

    Returns None when the value cannot be interpreted.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        try:
            parsed = date_parser.isoparse(value)
        except (ValueError, OverflowError):
            return None
    else:
        return None

    return to_naive_utc(parsed)


def _add_months(base: datetime, months: int) -> datetime:
    # day 1 exists in every month; surplus days spill into the next month
    first = base.replace(day=1) + relativedelta(months=months)
    return first + timedelta(days=base.day - 1)


def _step(base: datetime, unit: str, i: int) -> datetime:
    if unit == "weekly":
        return base + timedelta(days=7 * i)
    if unit == "monthly":
        return _add_months(base, i)
    if unit == "yearly":
        return _add_months(base, 12 * i)
    return base + timedelta(days=i)


def expand_occurrences(
    start: DateLike,
    end: DateLike,
    unit: Optional[str] = "daily",
    repeat_count: Optional[int] = 1,
    until: DateLike = None,
) -> List[Occurrence]:
    """
    Expand a base occurrence into its repeats.

    Args:
        start: Base start (datetime or ISO 8601 string)
        end: Base end (datetime or ISO 8601 string)
        unit: daily, weekly, monthly or yearly (unknown or None means daily)
        repeat_count: Number of occurrences including the base; None or
            values below 1 produce only the base
        until: Optional last allowed start; generation stops at the first
            start after it

    Returns:
        Occurrences ordered by index. Empty when start or end cannot be
        parsed.
    """
    base_start = _to_datetime(start)
    base_end = _to_datetime(end)
    if base_start is None or base_end is None:
        logger.warning(
            "Skipping recurrence expansion for unparsable dates",
            extra={"start": str(start), "end": str(end)}
        )
        return []

    if unit not in REPEAT_UNITS:
        if unit is not None:
            logger.warning(
                f"Unknown repeat unit '{unit}', falling back to daily"
            )
        unit = "daily"

    count = repeat_count if isinstance(repeat_count, int) and repeat_count >= 1 else 1
    limit = _to_datetime(until)
    duration = base_end - base_start

    occurrences = []
    for i in range(count):
        occurrence_start = _step(base_start, unit, i)
        if limit is not None and i > 0 and occurrence_start > limit:
            break
        occurrences.append(Occurrence(
            index=i,
            start=occurrence_start,
            end=occurrence_start + duration,
            is_recurring=i > 0,
        ))

    return occurrences


def _end_of_day(value: DateLike) -> Optional[datetime]:
    parsed = _to_datetime(value)
    if parsed is None:
        return None
    return datetime.combine(parsed.date(), time.max)


def occurrences_for_event(event) -> List[Occurrence]:
    """
    Expand an Event according to its recurrence rule.

    Non-recurring events, or recurring events without a frequency, yield
    their single base occurrence. The rule end date is inclusive of the
    whole day.
    """
    if not event.is_recurring or not event.recurrence_frequency:
        return expand_occurrences(
            event.start_date_time,
            event.end_date_time,
        )

    return expand_occurrences(
        event.start_date_time,
        event.end_date_time,
        unit=event.recurrence_frequency,
        repeat_count=event.recurrence_interval,
        until=_end_of_day(event.recurrence_end_date),
    )


def _template_bounds(template: dict[str, Any]) -> tuple[Optional[datetime], Optional[datetime]]:
    """Combine a template's date with its start and end time of day."""
    day = _to_datetime(template.get("start_date_time"))
    if day is None:
        return None, None
    try:
        start_time = template["start_time"]
        end_time = template["end_time"]
        start = datetime.combine(
            day.date(), time(start_time["hour"], start_time["minute"])
        )
        end = datetime.combine(
            day.date(), time(end_time["hour"], end_time["minute"])
        )
    except (KeyError, TypeError, ValueError):
        return None, None
    return start, end


def occurrences_for_series(series, max_occurrences: int) -> List[Occurrence]:
    """
    Expand a recurring EventSeries into occurrences.

    The base occurrence is built from the starting template's date and its
    start/end time of day. Generation stops at the ending template's date
    or the rule end date (whichever comes first, both inclusive of the whole
    day); indefinite series without an end date are capped at
    max_occurrences. Manual series yield nothing here since their events are
    stored rows.
    """
    if not series.is_recurring:
        return []

    starting = series.starting_event or {}
    start, end = _template_bounds(starting)
    if start is None:
        logger.warning(
            "Series has an invalid starting template",
            extra={"series_guid": series.guid}
        )
        return []

    limits = []
    if series.ending_event and not series.is_indefinite:
        limits.append(_end_of_day(series.ending_event.get("start_date_time")))
    if series.recurrence_end_date is not None:
        limits.append(_end_of_day(series.recurrence_end_date))
    limits = [limit for limit in limits if limit is not None]

    return expand_occurrences(
        start,
        end,
        unit=series.recurrence_frequency,
        repeat_count=max_occurrences,
        until=min(limits) if limits else None,
    )
