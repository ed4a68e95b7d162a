"""FastAPI dependencies wiring repositories, clock and services per request."""

from functools import lru_cache
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from trimly.core.clock import Clock, SystemClock
from trimly.core.config import settings
from trimly.core.database import get_db
from trimly.repositories.sql import SqlAppointmentRepository, SqlScheduleRepository
from trimly.services.appointment_lifecycle import AppointmentLifecycle
from trimly.services.appointment_queries import AppointmentQueries
from trimly.services.availability_service import AvailabilityService
from trimly.services.catalog_service import CatalogService


@lru_cache
def get_clock() -> Clock:
    return SystemClock(settings.SHOP_TIMEZONE)


def get_schedule_repository(db: AsyncSession = Depends(get_db)) -> SqlScheduleRepository:
    return SqlScheduleRepository(db)


def get_appointment_repository(db: AsyncSession = Depends(get_db)) -> SqlAppointmentRepository:
    return SqlAppointmentRepository(db)


def get_lifecycle(
    schedules: SqlScheduleRepository = Depends(get_schedule_repository),
    appointments: SqlAppointmentRepository = Depends(get_appointment_repository),
    clock: Clock = Depends(get_clock),
) -> AppointmentLifecycle:
    return AppointmentLifecycle(schedules, appointments, clock)


def get_queries(
    appointments: SqlAppointmentRepository = Depends(get_appointment_repository),
    clock: Clock = Depends(get_clock),
) -> AppointmentQueries:
    return AppointmentQueries(appointments, clock)


def get_availability_service(
    schedules: SqlScheduleRepository = Depends(get_schedule_repository),
    appointments: SqlAppointmentRepository = Depends(get_appointment_repository),
    clock: Clock = Depends(get_clock),
) -> AvailabilityService:
    return AvailabilityService(schedules, appointments, clock, settings.AVAILABILITY_LOOKAHEAD_DAYS)


def get_catalog_service(
    schedules: SqlScheduleRepository = Depends(get_schedule_repository),
    clock: Clock = Depends(get_clock),
) -> CatalogService:
    return CatalogService(schedules, clock)
