"""Appointment booking and lifecycle endpoints.

- POST /api/v1/appointments/ → Book (pending)
- GET  /api/v1/appointments/ → List with filters
- GET  /api/v1/appointments/today | /upcoming | /history
- GET  /api/v1/appointments/{id}
- PUT  /api/v1/appointments/{id}/confirm | /complete | /cancel
- PATCH /api/v1/appointments/{id} → Notes / payment fields
"""

from datetime import date
from typing import Optional
from uuid import UUID
from fastapi import APIRouter, Body, Depends, Query

from trimly.core.deps import get_lifecycle, get_queries
from trimly.models.appointment import AppointmentStatus, PaymentStatus
from trimly.schemas.appointment import (
    AppointmentCancel,
    AppointmentCreate,
    AppointmentFilters,
    AppointmentOut,
    AppointmentUpdate,
)
from trimly.services.appointment_lifecycle import AppointmentLifecycle
from trimly.services.appointment_queries import AppointmentQueries

router = APIRouter()


def appointment_filters(
    barbershop_id: Optional[UUID] = Query(None),
    barber_id: Optional[UUID] = Query(None),
    client_id: Optional[UUID] = Query(None),
    status: Optional[AppointmentStatus] = Query(None),
    payment_status: Optional[PaymentStatus] = Query(None),
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
) -> AppointmentFilters:
    return AppointmentFilters(
        barbershop_id=barbershop_id,
        barber_id=barber_id,
        client_id=client_id,
        status=status,
        payment_status=payment_status,
        date_from=date_from,
        date_to=date_to,
    )


@router.post("/", response_model=AppointmentOut, status_code=201)
async def book_appointment(
    appointment: AppointmentCreate,
    lifecycle: AppointmentLifecycle = Depends(get_lifecycle),
):
    """Book a new appointment; 409 if the slot was taken meanwhile."""
    return await lifecycle.create(appointment.client_id, appointment)


@router.get("/", response_model=list[AppointmentOut])
async def list_appointments(
    filters: AppointmentFilters = Depends(appointment_filters),
    queries: AppointmentQueries = Depends(get_queries),
):
    return await queries.list_appointments(filters)


@router.get("/today", response_model=list[AppointmentOut])
async def list_today(
    filters: AppointmentFilters = Depends(appointment_filters),
    queries: AppointmentQueries = Depends(get_queries),
):
    return await queries.today(filters)


@router.get("/upcoming", response_model=list[AppointmentOut])
async def list_upcoming(
    filters: AppointmentFilters = Depends(appointment_filters),
    queries: AppointmentQueries = Depends(get_queries),
):
    return await queries.upcoming(filters)


@router.get("/history", response_model=list[AppointmentOut])
async def list_history(
    filters: AppointmentFilters = Depends(appointment_filters),
    queries: AppointmentQueries = Depends(get_queries),
):
    return await queries.history(filters)


@router.get("/{appointment_id}", response_model=AppointmentOut)
async def get_appointment(
    appointment_id: UUID,
    queries: AppointmentQueries = Depends(get_queries),
):
    return await queries.get(appointment_id)


@router.put("/{appointment_id}/confirm", response_model=AppointmentOut)
async def confirm_appointment(
    appointment_id: UUID,
    lifecycle: AppointmentLifecycle = Depends(get_lifecycle),
):
    """Barber/admin accepts a pending appointment."""
    return await lifecycle.confirm(appointment_id)


@router.put("/{appointment_id}/complete", response_model=AppointmentOut)
async def complete_appointment(
    appointment_id: UUID,
    lifecycle: AppointmentLifecycle = Depends(get_lifecycle),
):
    """Mark a confirmed appointment as completed."""
    return await lifecycle.complete(appointment_id)


@router.put("/{appointment_id}/cancel", response_model=AppointmentOut)
async def cancel_appointment(
    appointment_id: UUID,
    body: Optional[AppointmentCancel] = Body(None),
    lifecycle: AppointmentLifecycle = Depends(get_lifecycle),
):
    """Cancel (sets status to cancelled, keeps the row)."""
    reason = body.reason if body else None
    return await lifecycle.cancel(appointment_id, reason)


@router.patch("/{appointment_id}", response_model=AppointmentOut)
async def update_appointment(
    appointment_id: UUID,
    changes: AppointmentUpdate,
    lifecycle: AppointmentLifecycle = Depends(get_lifecycle),
):
    return await lifecycle.update(appointment_id, changes)
