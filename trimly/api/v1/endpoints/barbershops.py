"""Barbershop endpoints."""

from uuid import UUID
from fastapi import APIRouter, Depends

from trimly.core.deps import get_catalog_service
from trimly.schemas.catalog import BarbershopCreate, BarbershopOut, OpeningHoursUpdate
from trimly.services.catalog_service import CatalogService

router = APIRouter()


@router.post("/", response_model=BarbershopOut, status_code=201)
async def create_barbershop(
    barbershop: BarbershopCreate,
    catalog: CatalogService = Depends(get_catalog_service),
):
    return await catalog.create_barbershop(barbershop)


@router.put("/{barbershop_id}/opening-hours", response_model=BarbershopOut)
async def update_opening_hours(
    barbershop_id: UUID,
    body: OpeningHoursUpdate,
    catalog: CatalogService = Depends(get_catalog_service),
):
    """Replace the shop's weekly opening hours."""
    return await catalog.update_opening_hours(barbershop_id, body.opening_hours)
