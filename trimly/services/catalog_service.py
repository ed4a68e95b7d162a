"""Barbershop, barber and service catalog management.

Opening hours and barber schedules are validated and normalised here before
they are stored, so the availability engine only ever reads well-formed data.
"""

import logging
from decimal import Decimal
from uuid import UUID

from trimly.core.clock import Clock
from trimly.core.errors import InvalidInputError, NotFoundError
from trimly.models import Barber, Barbershop, Service
from trimly.repositories.base import ScheduleRepository
from trimly.schemas.catalog import BarberCreate, BarbershopCreate, ServiceCreate, ServiceUpdate
from trimly.schemas.schedule import BarberSchedule, OpeningHours
from trimly.utils.time_utils import validate_service_duration

logger = logging.getLogger(__name__)


def _validate_price(price: Decimal) -> Decimal:
    if price < 0:
        raise InvalidInputError("Price cannot be negative", field="price")
    return price


class CatalogService:
    def __init__(self, schedules: ScheduleRepository, clock: Clock):
        self.schedules = schedules
        self.clock = clock

    async def create_barbershop(self, data: BarbershopCreate) -> Barbershop:
        hours = OpeningHours.from_raw(data.opening_hours)
        barbershop = Barbershop(name=data.name, opening_hours=hours.to_raw())
        return await self.schedules.save(barbershop)

    async def update_opening_hours(self, barbershop_id: UUID, raw_hours: dict) -> Barbershop:
        barbershop = await self.schedules.get_barbershop(barbershop_id)
        if not barbershop:
            raise NotFoundError("Barbershop", barbershop_id)

        barbershop.opening_hours = OpeningHours.from_raw(raw_hours).to_raw()
        barbershop.updated_at = self.clock.now()
        logger.info("Opening hours updated for barbershop %s", barbershop_id)
        return await self.schedules.save(barbershop)

    async def create_barber(self, data: BarberCreate) -> Barber:
        if not await self.schedules.get_barbershop(data.barbershop_id):
            raise NotFoundError("Barbershop", data.barbershop_id)

        schedule = BarberSchedule.from_raw(data.schedule)
        barber = Barber(
            barbershop_id=data.barbershop_id,
            name=data.name,
            schedule=schedule.to_raw(),
            is_active=True,
        )
        return await self.schedules.save(barber)

    async def update_barber_schedule(self, barber_id: UUID, raw_schedule: dict) -> Barber:
        barber = await self.schedules.get_barber(barber_id)
        if not barber:
            raise NotFoundError("Barber", barber_id)

        barber.schedule = BarberSchedule.from_raw(raw_schedule).to_raw()
        barber.updated_at = self.clock.now()
        logger.info("Schedule updated for barber %s", barber_id)
        return await self.schedules.save(barber)

    async def create_service(self, data: ServiceCreate) -> Service:
        if not await self.schedules.get_barbershop(data.barbershop_id):
            raise NotFoundError("Barbershop", data.barbershop_id)

        service = Service(
            barbershop_id=data.barbershop_id,
            name=data.name,
            duration_minutes=validate_service_duration(data.duration_minutes),
            price=_validate_price(data.price),
            is_active=True,
        )
        return await self.schedules.save(service)

    async def update_service(self, service_id: UUID, changes: ServiceUpdate) -> Service:
        """Edit a service. Existing appointments keep their own price and end time."""
        service = await self.schedules.get_service(service_id)
        if not service:
            raise NotFoundError("Service", service_id)

        update_data = changes.model_dump(exclude_unset=True, exclude_none=True)
        if "duration_minutes" in update_data:
            validate_service_duration(update_data["duration_minutes"])
        if "price" in update_data:
            _validate_price(update_data["price"])

        for key, value in update_data.items():
            setattr(service, key, value)
        service.updated_at = self.clock.now()
        return await self.schedules.save(service)

    async def deactivate_barber(self, barber_id: UUID) -> Barber:
        """Hide a barber from availability and new bookings. Existing appointments stay."""
        return await self._set_barber_active(barber_id, False)

    async def activate_barber(self, barber_id: UUID) -> Barber:
        return await self._set_barber_active(barber_id, True)

    async def _set_barber_active(self, barber_id: UUID, active: bool) -> Barber:
        barber = await self.schedules.get_barber(barber_id)
        if not barber:
            raise NotFoundError("Barber", barber_id)

        barber.is_active = active
        barber.updated_at = self.clock.now()
        logger.info("Barber %s %s", barber_id, "activated" if active else "deactivated")
        return await self.schedules.save(barber)
