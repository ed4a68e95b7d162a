"""Appointment availability engine.

Pure functions: everything they need (schedules, bookings, duration) is
passed in, nothing is fetched, and the same inputs always give the same
output list.
"""

from datetime import date, datetime, timedelta
from typing import Iterable, Optional, Sequence, Union

from trimly.schemas.availability import BookedInterval
from trimly.schemas.schedule import BarberSchedule, Open, OpeningHours, TimeRange
from trimly.utils.time_utils import (
    SLOT_INTERVAL_MINUTES,
    intervals_overlap,
    minutes_to_time,
    parse_date,
    time_to_minutes,
    validate_service_duration,
    weekday_name,
)


def clip_to_opening_hours(barber_range: TimeRange, shop_hours: TimeRange) -> Optional[tuple[int, int]]:
    """Intersect one barber shift with the shop's open interval, in minutes.

    Returns None when the two don't overlap.
    """
    start = max(time_to_minutes(barber_range.start), time_to_minutes(shop_hours.start))
    end = min(time_to_minutes(barber_range.end), time_to_minutes(shop_hours.end))
    if start >= end:
        return None
    return start, end


def generate_candidates(start: int, end: int, duration: int) -> list[int]:
    """Start minutes every SLOT_INTERVAL_MINUTES from ``start`` whose service fits before ``end``."""
    candidates = []
    current = start
    while current + duration <= end:
        candidates.append(current)
        current += SLOT_INTERVAL_MINUTES
    return candidates


def is_slot_free(start: int, duration: int, booked: Sequence[tuple[int, int]]) -> bool:
    end = start + duration
    return not any(intervals_overlap(start, end, b_start, b_end) for b_start, b_end in booked)


def _booked_minutes(existing: Iterable[BookedInterval]) -> list[tuple[int, int]]:
    return [(time_to_minutes(a.start_time), time_to_minutes(a.end_time)) for a in existing]


def compute_available_slots(
    day: Union[str, date],
    barber_schedule: BarberSchedule,
    opening_hours: OpeningHours,
    existing_appointments: Iterable[BookedInterval],
    service_duration_minutes: int,
) -> list[str]:
    """Bookable HH:mm start times for a barber on ``day``.

    Each barber shift is clipped to the shop's hours, candidates are laid out
    on a 15-minute grid from the clipped start, and any candidate whose
    [start, start + duration) intersects an existing booking is dropped.
    Shifts are walked in the order given; the result is not re-sorted.

    ``existing_appointments`` should hold only bookings that still occupy
    time (pending and confirmed).
    """
    duration = validate_service_duration(service_duration_minutes)
    weekday = weekday_name(day)

    barber_day = barber_schedule.for_day(weekday)
    if not isinstance(barber_day, Open):
        return []  # Barber not working this day

    shop_interval = opening_hours.interval(weekday)
    if shop_interval is None:
        return []  # Shop closed this day

    booked = _booked_minutes(existing_appointments)

    slots = []
    for barber_range in barber_day.ranges:
        window = clip_to_opening_hours(barber_range, shop_interval)
        if window is None:
            continue
        for candidate in generate_candidates(window[0], window[1], duration):
            if is_slot_free(candidate, duration, booked):
                slots.append(minutes_to_time(candidate))

    return slots


def next_available_date(
    start: Union[str, date],
    barber_schedule: BarberSchedule,
    opening_hours: OpeningHours,
    max_days: int = 30,
) -> Optional[date]:
    """First day from ``start`` (inclusive) on which both barber and shop are open."""
    first = parse_date(start)
    for offset in range(max_days):
        candidate = first + timedelta(days=offset)
        weekday = weekday_name(candidate)
        if barber_schedule.is_open_on(weekday) and opening_hours.is_open_on(weekday):
            return candidate
    return None


def drop_past_slots(slots: Sequence[str], day: Union[str, date], now: datetime) -> list[str]:
    """Remove start times that have already passed when ``day`` is today.

    ``now`` is the shop's local wall-clock time. Past days yield nothing,
    future days are returned untouched.
    """
    target = parse_date(day)
    today = now.date()
    if target < today:
        return []
    if target > today:
        return list(slots)
    current = now.hour * 60 + now.minute
    return [s for s in slots if time_to_minutes(s) >= current]


def slot_period(slot: str) -> str:
    """Morning before 12:00, afternoon before 17:00, evening after that."""
    hour = time_to_minutes(slot) // 60
    if hour < 12:
        return "morning"
    if hour < 17:
        return "afternoon"
    return "evening"


def group_slots_by_period(slots: Sequence[str]) -> dict[str, list[str]]:
    groups = {"morning": [], "afternoon": [], "evening": []}
    for slot in slots:
        groups[slot_period(slot)].append(slot)
    return groups
