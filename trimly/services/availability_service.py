"""Fetches everything the availability engine needs and runs it."""

import logging
from datetime import date
from typing import Optional, Union
from uuid import UUID

from trimly.core.clock import Clock
from trimly.core.errors import NotFoundError
from trimly.repositories.base import AppointmentRepository, ScheduleRepository
from trimly.schemas.availability import TimeSlot
from trimly.services.availability import (
    compute_available_slots,
    drop_past_slots,
    next_available_date,
    slot_period,
)
from trimly.utils.time_utils import parse_date

logger = logging.getLogger(__name__)


class AvailabilityService:
    def __init__(
        self,
        schedules: ScheduleRepository,
        appointments: AppointmentRepository,
        clock: Clock,
        lookahead_days: int = 30,
    ):
        self.schedules = schedules
        self.appointments = appointments
        self.clock = clock
        self.lookahead_days = lookahead_days

    async def available_slots(
        self,
        barber_id: UUID,
        day: Union[str, date],
        service_id: UUID,
    ) -> list[TimeSlot]:
        """Free start times for a barber and service on ``day``, minus times already past."""
        target = parse_date(day)

        service = await self.schedules.get_service(service_id)
        if not service or not service.is_active:
            raise NotFoundError("Service", service_id)

        barber = await self.schedules.get_barber(barber_id)
        if not barber or not barber.is_active:
            raise NotFoundError("Barber", barber_id)
        if service.barbershop_id != barber.barbershop_id:
            raise NotFoundError("Service", service_id)

        schedule = await self.schedules.get_barber_schedule(barber_id)
        opening_hours = await self.schedules.get_opening_hours(barber.barbershop_id)
        if opening_hours is None:
            raise NotFoundError("Barbershop", barber.barbershop_id)

        booked = await self.appointments.list_active_intervals(barber_id, target)

        slots = compute_available_slots(target, schedule, opening_hours, booked, service.duration_minutes)
        slots = drop_past_slots(slots, target, self.clock.local_now())
        logger.debug("Barber %s has %d free slots on %s", barber_id, len(slots), target)

        return [TimeSlot(time=s, available=True, barber_id=barber_id) for s in slots]

    async def grouped_slots(
        self,
        barber_id: UUID,
        day: Union[str, date],
        service_id: UUID,
    ) -> dict[str, list[TimeSlot]]:
        groups: dict[str, list[TimeSlot]] = {"morning": [], "afternoon": [], "evening": []}
        for slot in await self.available_slots(barber_id, day, service_id):
            groups[slot_period(slot.time)].append(slot)
        return groups

    async def next_available_date(
        self,
        barber_id: UUID,
        start: Optional[Union[str, date]] = None,
    ) -> Optional[date]:
        """First day, from ``start`` or today, on which both barber and shop work."""
        barber = await self.schedules.get_barber(barber_id)
        if not barber or not barber.is_active:
            raise NotFoundError("Barber", barber_id)

        schedule = await self.schedules.get_barber_schedule(barber_id)
        opening_hours = await self.schedules.get_opening_hours(barber.barbershop_id)
        if opening_hours is None:
            raise NotFoundError("Barbershop", barber.barbershop_id)

        first = parse_date(start) if start is not None else self.clock.today()
        return next_available_date(first, schedule, opening_hours, self.lookahead_days)
