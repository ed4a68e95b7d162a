"""Pydantic schemas for barbershops, barbers and services.

Weekly hours are accepted in their raw JSON layout and validated by
``BarberSchedule.from_raw`` / ``OpeningHours.from_raw`` in the service layer.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Optional
from uuid import UUID
from pydantic import BaseModel


class BarbershopCreate(BaseModel):
    name: str
    opening_hours: Optional[dict[str, Any]] = None  # {"monday": {"open": "09:00", "close": "18:00"}, ...}


class OpeningHoursUpdate(BaseModel):
    opening_hours: dict[str, Any]


class BarbershopOut(BaseModel):
    id: UUID
    name: str
    opening_hours: Optional[dict[str, Any]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class BarberCreate(BaseModel):
    barbershop_id: UUID
    name: str
    schedule: Optional[dict[str, Any]] = None  # {"monday": [{"start": "09:00", "end": "13:00"}], ...}


class ScheduleUpdate(BaseModel):
    schedule: dict[str, Any]


class BarberOut(BaseModel):
    id: UUID
    barbershop_id: UUID
    name: str
    schedule: Optional[dict[str, Any]] = None
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ServiceCreate(BaseModel):
    barbershop_id: UUID
    name: str
    duration_minutes: int
    price: Decimal


class ServiceUpdate(BaseModel):
    name: Optional[str] = None
    duration_minutes: Optional[int] = None
    price: Optional[Decimal] = None
    is_active: Optional[bool] = None


class ServiceOut(BaseModel):
    id: UUID
    barbershop_id: UUID
    name: str
    duration_minutes: int
    price: Decimal
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
