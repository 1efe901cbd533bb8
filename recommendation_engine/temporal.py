"""Date and time normalization helpers."""

from __future__ import annotations

import math
from datetime import date, datetime, time, timedelta

from recommendation_engine.errors import InvalidInputError
from recommendation_engine.schema import WorkHours

_SECONDS_PER_DAY = 86400.0


def parse_datetime(value, field: str = "date") -> datetime:
    """Normalize a datetime, date or ISO-8601 string to a datetime."""

    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(text)
        except ValueError as exc:
            raise InvalidInputError(f"{field}: malformed date {value!r}") from exc
    raise InvalidInputError(f"{field}: expected a date, got {type(value).__name__}")


def parse_date(value, field: str = "date") -> date:
    """Normalize to a calendar date. Datetimes keep their local calendar day."""

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return parse_datetime(value, field).date()


def now_like(reference: datetime | None = None) -> datetime:
    """Current time, timezone-aware exactly when ``reference`` is."""

    if reference is not None and reference.tzinfo is not None:
        return datetime.now(reference.tzinfo)
    return datetime.now()


def _check_comparable(a: datetime, b: datetime) -> None:
    if (a.tzinfo is None) != (b.tzinfo is None):
        raise InvalidInputError("cannot compare timezone-aware and naive datetimes")


def days_between(later: datetime, earlier: datetime) -> float:
    """Signed fractional days from ``earlier`` to ``later``."""

    _check_comparable(later, earlier)
    return (later - earlier).total_seconds() / _SECONDS_PER_DAY


def whole_days_between(later: datetime, earlier: datetime) -> int:
    """Signed whole days, floored."""

    return math.floor(days_between(later, earlier))


def hours_between(later: datetime, earlier: datetime) -> float:
    _check_comparable(later, earlier)
    return (later - earlier).total_seconds() / 3600.0


def day_offset(day: date, offset: int) -> date:
    return day + timedelta(days=offset)


def at_hour(day: date, hour: int, tzinfo=None) -> datetime:
    return datetime.combine(day, time(hour=hour), tzinfo=tzinfo)


def day_of_year(day: date) -> int:
    """1-based ordinal day within the year (1 January is 1)."""

    return day.timetuple().tm_yday


def calendar_key(day: date) -> str:
    return day.isoformat()


def validate_work_hours(work_hours: WorkHours) -> None:
    start, end = work_hours.start, work_hours.end
    if not (isinstance(start, int) and isinstance(end, int)):
        raise InvalidInputError("work hours must be whole hours")
    if not 0 <= start < end <= 23:
        raise InvalidInputError(f"work hours must satisfy 0 <= start < end <= 23, got {start}-{end}")


def clamp_to_work_hours(moment: datetime, work_hours: WorkHours) -> datetime:
    """Move a moment into the working window.

    Before the start hour it snaps to the start of the same day; past the end
    hour it rolls over to the start of the next day.
    """

    validate_work_hours(work_hours)
    if moment.hour < work_hours.start:
        return moment.replace(hour=work_hours.start, minute=0, second=0, microsecond=0)
    if moment.hour > work_hours.end:
        next_day = moment.date() + timedelta(days=1)
        return at_hour(next_day, work_hours.start, tzinfo=moment.tzinfo)
    return moment
