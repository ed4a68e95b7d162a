"""Pydantic schemas for Appointments."""

from datetime import datetime, date, time
from decimal import Decimal
from uuid import UUID
from pydantic import BaseModel, field_validator
from typing import Optional
from trimly.models.appointment import AppointmentStatus, PaymentMethod, PaymentStatus
from trimly.utils.time_utils import is_valid_time, time_from_db


class AppointmentCreate(BaseModel):
    """Schema for booking an appointment."""
    client_id: UUID
    barbershop_id: UUID
    barber_id: UUID
    service_id: UUID
    appointment_date: date
    start_time: str  # "10:30"
    payment_method: Optional[PaymentMethod] = None
    notes: Optional[str] = None

    @field_validator("start_time")
    @classmethod
    def _check_start_time(cls, v: str) -> str:
        if not is_valid_time(v):
            raise ValueError(f"'{v}' is not a valid HH:mm time")
        return v


class AppointmentUpdate(BaseModel):
    """Fields that can change without a status transition."""
    notes: Optional[str] = None
    payment_status: Optional[PaymentStatus] = None
    payment_method: Optional[PaymentMethod] = None


class AppointmentCancel(BaseModel):
    reason: Optional[str] = None


class AppointmentFilters(BaseModel):
    barbershop_id: Optional[UUID] = None
    barber_id: Optional[UUID] = None
    client_id: Optional[UUID] = None
    status: Optional[AppointmentStatus] = None
    payment_status: Optional[PaymentStatus] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None


class AppointmentOut(BaseModel):
    """Schema for returning appointment details."""
    id: UUID
    barbershop_id: UUID
    barber_id: UUID
    client_id: UUID
    service_id: UUID
    appointment_date: date
    start_time: str
    end_time: str
    status: AppointmentStatus
    payment_status: PaymentStatus
    payment_method: Optional[PaymentMethod] = None
    total_price: Decimal
    notes: Optional[str] = None
    cancellation_reason: Optional[str] = None
    cancelled_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def _format_time(cls, v):
        if isinstance(v, time):
            return time_from_db(v)
        return v

    class Config:
        from_attributes = True
