"""Service catalog endpoints."""

from uuid import UUID
from fastapi import APIRouter, Depends

from trimly.core.deps import get_catalog_service
from trimly.schemas.catalog import ServiceCreate, ServiceOut, ServiceUpdate
from trimly.services.catalog_service import CatalogService

router = APIRouter()


@router.post("/", response_model=ServiceOut, status_code=201)
async def create_service(
    service: ServiceCreate,
    catalog: CatalogService = Depends(get_catalog_service),
):
    """Add a service; duration must be a positive multiple of 15 minutes."""
    return await catalog.create_service(service)


@router.patch("/{service_id}", response_model=ServiceOut)
async def update_service(
    service_id: UUID,
    changes: ServiceUpdate,
    catalog: CatalogService = Depends(get_catalog_service),
):
    return await catalog.update_service(service_id, changes)
