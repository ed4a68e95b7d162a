from fastapi import APIRouter
from trimly.api.v1.endpoints import appointments, barbers, barbershops, services

api_router = APIRouter()
api_router.include_router(barbershops.router, prefix="/barbershops", tags=["barbershops"])
api_router.include_router(barbers.router, prefix="/barbers", tags=["barbers"])
api_router.include_router(services.router, prefix="/services", tags=["services"])
api_router.include_router(appointments.router, prefix="/appointments", tags=["appointments"])
