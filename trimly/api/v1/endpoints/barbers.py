"""Barber profile, schedule and availability endpoints."""

from datetime import date
from typing import Optional, Union
from uuid import UUID
from fastapi import APIRouter, Depends, Query

from trimly.core.deps import get_availability_service, get_catalog_service
from trimly.schemas.availability import (
    AvailableSlotsResponse,
    GroupedSlotsResponse,
    NextAvailableDateResponse,
)
from trimly.schemas.catalog import BarberCreate, BarberOut, ScheduleUpdate
from trimly.services.availability_service import AvailabilityService
from trimly.services.catalog_service import CatalogService

router = APIRouter()


@router.post("/", response_model=BarberOut, status_code=201)
async def create_barber(
    barber: BarberCreate,
    catalog: CatalogService = Depends(get_catalog_service),
):
    """Create a barber profile with its initial weekly schedule."""
    return await catalog.create_barber(barber)


@router.put("/{barber_id}/schedule", response_model=BarberOut)
async def update_schedule(
    barber_id: UUID,
    body: ScheduleUpdate,
    catalog: CatalogService = Depends(get_catalog_service),
):
    return await catalog.update_barber_schedule(barber_id, body.schedule)


@router.put("/{barber_id}/deactivate", response_model=BarberOut)
async def deactivate_barber(
    barber_id: UUID,
    catalog: CatalogService = Depends(get_catalog_service),
):
    """Stop offering this barber for new bookings."""
    return await catalog.deactivate_barber(barber_id)


@router.put("/{barber_id}/activate", response_model=BarberOut)
async def activate_barber(
    barber_id: UUID,
    catalog: CatalogService = Depends(get_catalog_service),
):
    return await catalog.activate_barber(barber_id)


@router.get(
    "/{barber_id}/available-slots",
    response_model=Union[GroupedSlotsResponse, AvailableSlotsResponse],
)
async def get_available_slots(
    barber_id: UUID,
    day: date = Query(..., alias="date"),
    service_id: UUID = Query(...),
    grouped: bool = Query(False),
    availability: AvailabilityService = Depends(get_availability_service),
):
    """Free start times for a service with this barber on a date.

    With ``grouped=true`` the slots come back split into morning,
    afternoon and evening.
    """
    if grouped:
        groups = await availability.grouped_slots(barber_id, day, service_id)
        return GroupedSlotsResponse(date=day, barber_id=barber_id, service_id=service_id, **groups)

    slots = await availability.available_slots(barber_id, day, service_id)
    return AvailableSlotsResponse(date=day, barber_id=barber_id, service_id=service_id, slots=slots)


@router.get("/{barber_id}/next-available-date", response_model=NextAvailableDateResponse)
async def get_next_available_date(
    barber_id: UUID,
    start: Optional[date] = Query(None),
    availability: AvailabilityService = Depends(get_availability_service),
):
    next_date = await availability.next_available_date(barber_id, start)
    return NextAvailableDateResponse(barber_id=barber_id, next_available_date=next_date)
