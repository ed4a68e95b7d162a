"""Pydantic schemas for availability queries."""

from datetime import date
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, field_validator

from trimly.utils.time_utils import is_valid_time


class BookedInterval(BaseModel):
    """The [start_time, end_time) span an active appointment occupies."""
    start_time: str
    end_time: str

    @field_validator("start_time", "end_time")
    @classmethod
    def _check_format(cls, v: str) -> str:
        if not is_valid_time(v):
            raise ValueError(f"'{v}' is not a valid HH:mm time")
        return v


class TimeSlot(BaseModel):
    """A bookable start time; only free slots are ever returned."""
    time: str  # "09:00", "09:15", etc.
    available: bool = True
    barber_id: UUID


class AvailableSlotsResponse(BaseModel):
    date: date
    barber_id: UUID
    service_id: UUID
    slots: list[TimeSlot]


class GroupedSlotsResponse(BaseModel):
    date: date
    barber_id: UUID
    service_id: UUID
    morning: list[TimeSlot]
    afternoon: list[TimeSlot]
    evening: list[TimeSlot]


class NextAvailableDateResponse(BaseModel):
    barber_id: UUID
    next_available_date: Optional[date] = None
