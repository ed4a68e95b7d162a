"""Wall-clock time helpers.

Times of day travel as zero-padded 24-hour ``HH:mm`` strings. Because the
width is fixed, comparing two canonical strings lexicographically gives the
same answer as comparing their minute values; anything that does arithmetic
converts to minutes since midnight first.
"""

import re
from datetime import date, time
from typing import Union

from trimly.core.errors import InvalidInputError

SLOT_INTERVAL_MINUTES = 15
MINUTES_PER_DAY = 24 * 60

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")

_TIME_RE = re.compile(r"^([01][0-9]|2[0-3]):[0-5][0-9]$")
_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def is_valid_time(value: str) -> bool:
    return isinstance(value, str) and bool(_TIME_RE.match(value))


def time_to_minutes(value: str) -> int:
    """Convert HH:mm string to minutes since midnight."""
    if not is_valid_time(value):
        raise InvalidInputError(f"Invalid time '{value}', expected HH:mm", field="time")
    h, m = map(int, value.split(":"))
    return h * 60 + m


def minutes_to_time(minutes: int) -> str:
    """Convert minutes since midnight to HH:mm string."""
    if not 0 <= minutes < MINUTES_PER_DAY:
        raise InvalidInputError(f"{minutes} minutes is outside a single day", field="time")
    h = minutes // 60
    m = minutes % 60
    return f"{h:02d}:{m:02d}"


def add_minutes(value: str, minutes: int) -> str:
    """Shift an HH:mm time by ``minutes``; the result must stay within the same day."""
    return minutes_to_time(time_to_minutes(value) + minutes)


def duration_between(start: str, end: str) -> int:
    return time_to_minutes(end) - time_to_minutes(start)


def intervals_overlap(start_a: int, end_a: int, start_b: int, end_b: int) -> bool:
    """Half-open [start, end) intersection test."""
    return start_a < end_b and end_a > start_b


def validate_service_duration(duration_minutes) -> int:
    """Single gate for service durations: a positive whole multiple of the slot interval."""
    if isinstance(duration_minutes, bool) or not isinstance(duration_minutes, int):
        raise InvalidInputError(
            f"Service duration must be an integer number of minutes, got {duration_minutes!r}",
            field="duration_minutes",
        )
    if duration_minutes <= 0 or duration_minutes % SLOT_INTERVAL_MINUTES != 0:
        raise InvalidInputError(
            f"Service duration must be a positive multiple of {SLOT_INTERVAL_MINUTES} minutes, "
            f"got {duration_minutes}",
            field="duration_minutes",
        )
    return duration_minutes


def parse_date(value: Union[str, date]) -> date:
    """Accept a date or a YYYY-MM-DD string, read as a naive calendar date."""
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not _DATE_RE.match(value):
        raise InvalidInputError(f"Invalid date {value!r}, expected YYYY-MM-DD", field="date")
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise InvalidInputError(f"Invalid date {value!r}", field="date")


def weekday_name(day: Union[str, date]) -> str:
    return WEEKDAYS[parse_date(day).weekday()]


def time_from_db(value: time) -> str:
    return value.strftime("%H:%M")


def time_to_db(value: str) -> time:
    minutes = time_to_minutes(value)
    return time(minutes // 60, minutes % 60)
