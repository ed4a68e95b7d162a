"""SQLAlchemy-backed repositories."""

import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import date
from typing import Iterable, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from trimly.core.errors import BackendError, SlotUnavailableError
from trimly.models import Appointment, AppointmentStatus, Barber, Barbershop, Service
from trimly.models.appointment import ACTIVE_STATUSES
from trimly.schemas.appointment import AppointmentFilters
from trimly.schemas.availability import BookedInterval
from trimly.schemas.schedule import BarberSchedule, OpeningHours
from trimly.utils.time_utils import time_from_db

logger = logging.getLogger(__name__)

# Name of the btree_gist exclusion constraint created by migration 001
OVERLAP_CONSTRAINT = "appointments_no_overlap"


@asynccontextmanager
async def backend_errors(action: str):
    """Report connection loss and timeouts as retryable BackendError."""
    try:
        yield
    except (OperationalError, InterfaceError, asyncio.TimeoutError) as e:
        logger.warning("Database failure while %s: %s", action, e)
        raise BackendError(f"Database unavailable while {action}; please retry") from e


class SqlScheduleRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_barbershop(self, barbershop_id: UUID) -> Optional[Barbershop]:
        async with backend_errors("loading barbershop"):
            return await self.db.get(Barbershop, barbershop_id)

    async def get_barber(self, barber_id: UUID) -> Optional[Barber]:
        async with backend_errors("loading barber"):
            return await self.db.get(Barber, barber_id)

    async def get_service(self, service_id: UUID) -> Optional[Service]:
        async with backend_errors("loading service"):
            return await self.db.get(Service, service_id)

    async def get_barber_schedule(self, barber_id: UUID) -> Optional[BarberSchedule]:
        barber = await self.get_barber(barber_id)
        if barber is None:
            return None
        return BarberSchedule.from_raw(barber.schedule)

    async def get_opening_hours(self, barbershop_id: UUID) -> Optional[OpeningHours]:
        barbershop = await self.get_barbershop(barbershop_id)
        if barbershop is None:
            return None
        return OpeningHours.from_raw(barbershop.opening_hours)

    async def save(self, entity):
        async with backend_errors("saving catalog entry"):
            self.db.add(entity)
            await self.db.commit()
            await self.db.refresh(entity)
        return entity


class SqlAppointmentRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, appointment_id: UUID) -> Optional[Appointment]:
        async with backend_errors("loading appointment"):
            return await self.db.get(Appointment, appointment_id)

    async def list_appointments(self, filters: AppointmentFilters) -> list[Appointment]:
        query = select(Appointment)

        if filters.barbershop_id:
            query = query.where(Appointment.barbershop_id == filters.barbershop_id)
        if filters.barber_id:
            query = query.where(Appointment.barber_id == filters.barber_id)
        if filters.client_id:
            query = query.where(Appointment.client_id == filters.client_id)
        if filters.status:
            query = query.where(Appointment.status == filters.status)
        if filters.payment_status:
            query = query.where(Appointment.payment_status == filters.payment_status)
        if filters.date_from:
            query = query.where(Appointment.appointment_date >= filters.date_from)
        if filters.date_to:
            query = query.where(Appointment.appointment_date <= filters.date_to)

        query = query.order_by(Appointment.appointment_date, Appointment.start_time)

        async with backend_errors("listing appointments"):
            result = await self.db.execute(query)
            return list(result.scalars().all())

    async def list_active_intervals(self, barber_id: UUID, day: date) -> list[BookedInterval]:
        query = (
            select(Appointment.start_time, Appointment.end_time)
            .where(
                Appointment.barber_id == barber_id,
                Appointment.appointment_date == day,
                Appointment.status.in_(ACTIVE_STATUSES),
            )
            .order_by(Appointment.start_time)
        )
        async with backend_errors("loading booked intervals"):
            result = await self.db.execute(query)
            rows = result.all()
        return [BookedInterval(start_time=time_from_db(s), end_time=time_from_db(e)) for s, e in rows]

    @asynccontextmanager
    async def locked_day(self, barber_id: UUID, day: date):
        # FOR UPDATE on the barber row queues concurrent bookings for the same
        # barber; the exclusion constraint still rejects anything that slips by.
        try:
            async with backend_errors("booking appointment"):
                await self.db.execute(
                    select(Barber.id).where(Barber.id == barber_id).with_for_update()
                )
                yield
                await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            if OVERLAP_CONSTRAINT not in str(e.orig):
                raise
            logger.info("Overlap constraint rejected booking for barber %s on %s", barber_id, day)
            raise SlotUnavailableError("Selected time slot is not available") from e
        except Exception:
            await self.db.rollback()
            raise

    async def insert(self, values: dict) -> Appointment:
        appointment = Appointment(**values)
        self.db.add(appointment)
        await self.db.flush()
        return appointment

    async def update(
        self,
        appointment_id: UUID,
        values: dict,
        expected_statuses: Optional[Iterable[AppointmentStatus]] = None,
    ) -> Optional[Appointment]:
        query = (
            select(Appointment)
            .where(Appointment.id == appointment_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        if expected_statuses is not None:
            query = query.where(Appointment.status.in_(list(expected_statuses)))

        async with backend_errors("updating appointment"):
            result = await self.db.execute(query)
            appointment = result.scalar_one_or_none()
            if appointment is None:
                await self.db.rollback()
                return None

            for key, value in values.items():
                setattr(appointment, key, value)
            await self.db.commit()
        return appointment
