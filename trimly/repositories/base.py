"""Persistence interfaces the booking services depend on.

Services receive these through their constructors, so tests can swap in
in-memory versions without a database.
"""

from datetime import date
from typing import AsyncContextManager, Iterable, Optional, Protocol
from uuid import UUID

from trimly.models import Appointment, AppointmentStatus, Barber, Barbershop, Service
from trimly.schemas.appointment import AppointmentFilters
from trimly.schemas.availability import BookedInterval
from trimly.schemas.schedule import BarberSchedule, OpeningHours


class ScheduleRepository(Protocol):
    async def get_barbershop(self, barbershop_id: UUID) -> Optional[Barbershop]: ...

    async def get_barber(self, barber_id: UUID) -> Optional[Barber]: ...

    async def get_service(self, service_id: UUID) -> Optional[Service]: ...

    async def get_barber_schedule(self, barber_id: UUID) -> Optional[BarberSchedule]: ...

    async def get_opening_hours(self, barbershop_id: UUID) -> Optional[OpeningHours]: ...

    async def save(self, entity):
        """Insert or update a catalog row and return it refreshed."""
        ...


class AppointmentRepository(Protocol):
    async def get(self, appointment_id: UUID) -> Optional[Appointment]: ...

    async def list_appointments(self, filters: AppointmentFilters) -> list[Appointment]: ...

    async def list_active_intervals(self, barber_id: UUID, day: date) -> list[BookedInterval]:
        """[start, end) of every pending/confirmed appointment for the barber that day."""
        ...

    def locked_day(self, barber_id: UUID, day: date) -> AsyncContextManager[None]:
        """Serialize check-then-insert for one barber/day.

        Everything done inside the block is committed on a clean exit and
        rolled back otherwise. A storage-level overlap violation raised while
        inside surfaces as SlotUnavailableError.
        """
        ...

    async def insert(self, values: dict) -> Appointment:
        """Add a new appointment; only valid inside ``locked_day``."""
        ...

    async def update(
        self,
        appointment_id: UUID,
        values: dict,
        expected_statuses: Optional[Iterable[AppointmentStatus]] = None,
    ) -> Optional[Appointment]:
        """Apply ``values`` and commit.

        With ``expected_statuses`` the write only happens while the row is
        still in one of them; returns None when it isn't.
        """
        ...
