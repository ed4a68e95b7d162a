"""Appointment lifecycle: overlap-checked creation and status transitions.

    pending ──confirm──▶ confirmed ──complete──▶ completed
       │                     │
       └───────cancel────────┴──────────────────▶ cancelled

completed and cancelled are terminal. Appointments are never deleted;
cancelling frees the interval for new bookings but keeps the row.
"""

import logging
from typing import Optional
from uuid import UUID

from trimly.core.clock import Clock
from trimly.core.errors import InvalidInputError, InvalidTransitionError, NotFoundError, SlotUnavailableError
from trimly.models import Appointment, AppointmentStatus, PaymentStatus
from trimly.repositories.base import AppointmentRepository, ScheduleRepository
from trimly.schemas.appointment import AppointmentCreate, AppointmentUpdate
from trimly.services.availability import is_slot_free
from trimly.utils.time_utils import (
    MINUTES_PER_DAY,
    minutes_to_time,
    time_to_db,
    time_to_minutes,
    validate_service_duration,
)

logger = logging.getLogger(__name__)

# target status -> statuses it may be reached from
ALLOWED_TRANSITIONS = {
    AppointmentStatus.CONFIRMED: (AppointmentStatus.PENDING,),
    AppointmentStatus.COMPLETED: (AppointmentStatus.CONFIRMED,),
    AppointmentStatus.CANCELLED: (AppointmentStatus.PENDING, AppointmentStatus.CONFIRMED),
}


class AppointmentLifecycle:
    def __init__(self, schedules: ScheduleRepository, appointments: AppointmentRepository, clock: Clock):
        self.schedules = schedules
        self.appointments = appointments
        self.clock = clock

    async def create(self, client_id: UUID, data: AppointmentCreate) -> Appointment:
        """Book a pending appointment if the slot is still free.

        The overlap check runs against the barber's live bookings inside
        ``locked_day``, not against whatever availability list the client saw
        earlier, so two racing requests cannot both win.
        """
        service = await self.schedules.get_service(data.service_id)
        if not service or not service.is_active or service.barbershop_id != data.barbershop_id:
            raise NotFoundError("Service", data.service_id)

        barber = await self.schedules.get_barber(data.barber_id)
        if not barber or not barber.is_active or barber.barbershop_id != data.barbershop_id:
            raise NotFoundError("Barber", data.barber_id)

        duration = validate_service_duration(service.duration_minutes)
        start = time_to_minutes(data.start_time)
        if start + duration >= MINUTES_PER_DAY:
            raise InvalidInputError(
                f"A {duration}-minute service starting at {data.start_time} would run past midnight",
                field="start_time",
            )
        end_time = minutes_to_time(start + duration)

        async with self.appointments.locked_day(data.barber_id, data.appointment_date):
            booked = await self.appointments.list_active_intervals(data.barber_id, data.appointment_date)
            taken = [(time_to_minutes(b.start_time), time_to_minutes(b.end_time)) for b in booked]
            if not is_slot_free(start, duration, taken):
                logger.info(
                    "Slot %s-%s on %s already taken for barber %s",
                    data.start_time, end_time, data.appointment_date, data.barber_id,
                )
                raise SlotUnavailableError(
                    f"Time slot {data.start_time}-{end_time} on {data.appointment_date} is not available"
                )

            now = self.clock.now()
            appointment = await self.appointments.insert({
                "barbershop_id": data.barbershop_id,
                "barber_id": data.barber_id,
                "client_id": client_id,
                "service_id": data.service_id,
                "appointment_date": data.appointment_date,
                "start_time": time_to_db(data.start_time),
                "end_time": time_to_db(end_time),
                "status": AppointmentStatus.PENDING,
                "payment_status": PaymentStatus.PENDING,
                "payment_method": data.payment_method,
                "total_price": service.price,
                "notes": data.notes,
                "created_at": now,
                "updated_at": now,
            })

        logger.info(
            "Appointment %s booked: barber=%s date=%s %s-%s",
            appointment.id, data.barber_id, data.appointment_date, data.start_time, end_time,
        )
        return appointment

    async def confirm(self, appointment_id: UUID) -> Appointment:
        return await self._transition(appointment_id, AppointmentStatus.CONFIRMED)

    async def complete(self, appointment_id: UUID) -> Appointment:
        return await self._transition(appointment_id, AppointmentStatus.COMPLETED)

    async def cancel(self, appointment_id: UUID, reason: Optional[str] = None) -> Appointment:
        now = self.clock.now()
        return await self._transition(
            appointment_id,
            AppointmentStatus.CANCELLED,
            {"cancellation_reason": reason, "cancelled_at": now},
        )

    async def update(self, appointment_id: UUID, changes: AppointmentUpdate) -> Appointment:
        """Change non-status fields (notes, payment); always stamps updated_at."""
        values = changes.model_dump(exclude_unset=True)
        if "payment_status" in values and values["payment_status"] is None:
            raise InvalidInputError("payment_status cannot be null", field="payment_status")
        values["updated_at"] = self.clock.now()

        appointment = await self.appointments.update(appointment_id, values)
        if appointment is None:
            raise NotFoundError("Appointment", appointment_id)
        return appointment

    async def _transition(
        self,
        appointment_id: UUID,
        target: AppointmentStatus,
        extra: Optional[dict] = None,
    ) -> Appointment:
        appointment = await self.appointments.get(appointment_id)
        if appointment is None:
            raise NotFoundError("Appointment", appointment_id)

        previous = appointment.status
        allowed = ALLOWED_TRANSITIONS[target]
        if previous not in allowed:
            raise InvalidTransitionError(appointment_id, previous.value, target.value)

        values = {"status": target, "updated_at": self.clock.now()}
        if extra:
            values.update(extra)

        updated = await self.appointments.update(appointment_id, values, expected_statuses=allowed)
        if updated is None:
            # Someone else moved it between our read and the guarded write
            current = await self.appointments.get(appointment_id)
            if current is None:
                raise NotFoundError("Appointment", appointment_id)
            raise InvalidTransitionError(appointment_id, current.status.value, target.value)

        logger.info("Appointment %s %s -> %s", appointment_id, previous.value, target.value)
        return updated
