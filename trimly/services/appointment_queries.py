"""Read-side helpers for appointment lists (today / upcoming / history views)."""

from typing import Optional
from uuid import UUID

from trimly.core.clock import Clock
from trimly.core.errors import NotFoundError
from trimly.models import Appointment, AppointmentStatus
from trimly.repositories.base import AppointmentRepository
from trimly.schemas.appointment import AppointmentFilters


class AppointmentQueries:
    def __init__(self, appointments: AppointmentRepository, clock: Clock):
        self.appointments = appointments
        self.clock = clock

    async def get(self, appointment_id: UUID) -> Appointment:
        appointment = await self.appointments.get(appointment_id)
        if appointment is None:
            raise NotFoundError("Appointment", appointment_id)
        return appointment

    async def list_appointments(self, filters: Optional[AppointmentFilters] = None) -> list[Appointment]:
        return await self.appointments.list_appointments(filters or AppointmentFilters())

    async def today(self, filters: Optional[AppointmentFilters] = None) -> list[Appointment]:
        today = self.clock.today()
        return await self.list_appointments(_with(filters, date_from=today, date_to=today))

    async def upcoming(self, filters: Optional[AppointmentFilters] = None) -> list[Appointment]:
        """Confirmed appointments from today onwards."""
        return await self.list_appointments(
            _with(filters, date_from=self.clock.today(), status=AppointmentStatus.CONFIRMED)
        )

    async def history(self, filters: Optional[AppointmentFilters] = None) -> list[Appointment]:
        """Completed appointments up to and including today."""
        return await self.list_appointments(
            _with(filters, date_to=self.clock.today(), status=AppointmentStatus.COMPLETED)
        )


def _with(filters: Optional[AppointmentFilters], **overrides) -> AppointmentFilters:
    base = filters or AppointmentFilters()
    return base.model_copy(update=overrides)
