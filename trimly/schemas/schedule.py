"""Pydantic schemas for weekly working hours.

A day is either ``Closed`` or ``Open`` with one or more time ranges. Storage
keeps the older JSON layout the mobile clients already send:

    barber: {"monday": [{"start": "09:00", "end": "13:00"}, ...], "sunday": null}
    shop:   {"monday": {"open": "09:00", "close": "18:00"}, "sunday": null}

``from_raw`` / ``to_raw`` translate between the two so the rest of the code
never has to tell "no data" apart from "closed".
"""

from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from trimly.core.errors import InvalidInputError
from trimly.utils.time_utils import WEEKDAYS, is_valid_time, time_to_minutes

Weekday = Literal["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]


class TimeRange(BaseModel):
    """One contiguous working interval, HH:mm to HH:mm."""
    start: str
    end: str

    @field_validator("start", "end")
    @classmethod
    def _check_format(cls, v: str) -> str:
        if not is_valid_time(v):
            raise ValueError(f"'{v}' is not a valid HH:mm time")
        return v

    @model_validator(mode="after")
    def _check_order(self):
        if self.start >= self.end:
            raise ValueError(f"start {self.start} must be before end {self.end}")
        return self


class Closed(BaseModel):
    kind: Literal["closed"] = "closed"


class Open(BaseModel):
    kind: Literal["open"] = "open"
    ranges: list[TimeRange] = Field(min_length=1)


DayWorkingHours = Annotated[Union[Closed, Open], Field(discriminator="kind")]

CLOSED = Closed()


class WeeklyHours(BaseModel):
    """Weekday -> working hours. A weekday that is not listed is closed."""
    days: dict[Weekday, DayWorkingHours] = Field(default_factory=dict)

    def for_day(self, weekday: str) -> Union[Closed, Open]:
        return self.days.get(weekday, CLOSED)

    def is_open_on(self, weekday: str) -> bool:
        return isinstance(self.for_day(weekday), Open)

    @classmethod
    def _raw_day(cls, weekday: str, value: Any) -> Union[Closed, Open]:
        raise NotImplementedError

    @classmethod
    def from_raw(cls, raw: Optional[dict]):
        """Build from the stored JSON layout; raises InvalidInputError on bad data."""
        if raw is None:
            return cls()
        if not isinstance(raw, dict):
            raise InvalidInputError("Weekly hours must be an object keyed by weekday", field="schedule")
        unknown = set(raw) - set(WEEKDAYS)
        if unknown:
            raise InvalidInputError(f"Unknown weekday(s): {', '.join(sorted(unknown))}", field="schedule")
        try:
            return cls(days={day: cls._raw_day(day, value) for day, value in raw.items()})
        except ValidationError as e:
            raise InvalidInputError(f"Invalid working hours: {e.errors()[0]['msg']}", field="schedule")


class BarberSchedule(WeeklyHours):
    """A barber may split a day into several shifts, e.g. morning and afternoon."""

    @classmethod
    def _raw_day(cls, weekday: str, value: Any) -> Union[Closed, Open]:
        if not value:
            return CLOSED
        if not isinstance(value, list):
            raise InvalidInputError(f"{weekday}: expected a list of time ranges or null", field="schedule")
        return Open(ranges=[TimeRange.model_validate(r) for r in value])

    @model_validator(mode="after")
    def _disjoint_shifts(self) -> "BarberSchedule":
        # Shifts may touch (13:00-14:00 then 14:00-18:00) but not overlap
        for day in WEEKDAYS:
            if not self.is_open_on(day):
                continue
            ranges = sorted(self.for_day(day).ranges, key=lambda r: time_to_minutes(r.start))
            for prev, nxt in zip(ranges, ranges[1:]):
                if time_to_minutes(prev.end) > time_to_minutes(nxt.start):
                    raise ValueError(
                        f"{day}: {prev.start}-{prev.end} overlaps {nxt.start}-{nxt.end}"
                    )
        return self

    def to_raw(self) -> dict:
        return {
            day: [r.model_dump() for r in self.for_day(day).ranges] if self.is_open_on(day) else None
            for day in WEEKDAYS
        }


class OpeningHours(WeeklyHours):
    """Shop hours: at most one open/close pair per day."""

    @model_validator(mode="after")
    def _single_interval(self):
        for day, hours in self.days.items():
            if isinstance(hours, Open) and len(hours.ranges) != 1:
                raise ValueError(f"{day}: a shop has exactly one opening interval per day")
        return self

    @classmethod
    def _raw_day(cls, weekday: str, value: Any) -> Union[Closed, Open]:
        if value is None:
            return CLOSED
        if not isinstance(value, dict):
            raise InvalidInputError(f"{weekday}: expected {{open, close}} or null", field="opening_hours")
        return Open(ranges=[TimeRange(start=value.get("open"), end=value.get("close"))])

    def to_raw(self) -> dict:
        raw = {}
        for day in WEEKDAYS:
            hours = self.for_day(day)
            if isinstance(hours, Open):
                raw[day] = {"open": hours.ranges[0].start, "close": hours.ranges[0].end}
            else:
                raw[day] = None
        return raw

    def interval(self, weekday: str) -> Optional[TimeRange]:
        hours = self.for_day(weekday)
        return hours.ranges[0] if isinstance(hours, Open) else None
