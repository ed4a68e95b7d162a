"""Tests for booking and status transitions, against in-memory repositories."""

import asyncio
import uuid
from datetime import date, time
from decimal import Decimal

import pytest

from trimly.core.errors import (
    InvalidInputError,
    InvalidTransitionError,
    NotFoundError,
    SlotUnavailableError,
)
from trimly.models import AppointmentStatus, PaymentMethod, PaymentStatus
from trimly.schemas.appointment import AppointmentCreate, AppointmentFilters, AppointmentUpdate
from trimly.services.appointment_lifecycle import AppointmentLifecycle
from trimly.services.appointment_queries import AppointmentQueries
from trimly.services.availability_service import AvailabilityService

MONDAY = date(2026, 10, 19)
NEXT_MONDAY = date(2026, 10, 26)


@pytest.fixture
def setup(schedules, appointments, clock):
    shop = schedules.add_barbershop({"monday": {"open": "09:00", "close": "18:00"}})
    barber = schedules.add_barber(shop.id, {"monday": [{"start": "09:00", "end": "12:00"}]})
    service = schedules.add_service(shop.id, duration_minutes=30, price="150.00")
    lifecycle = AppointmentLifecycle(schedules, appointments, clock)
    return lifecycle, shop, barber, service


def booking(shop, barber, service, start_time="10:00", day=NEXT_MONDAY, **extra):
    return AppointmentCreate(
        client_id=uuid.uuid4(),
        barbershop_id=shop.id,
        barber_id=barber.id,
        service_id=service.id,
        appointment_date=day,
        start_time=start_time,
        **extra,
    )


@pytest.mark.asyncio
async def test_create_books_pending_appointment(setup):
    lifecycle, shop, barber, service = setup
    data = booking(shop, barber, service, payment_method=PaymentMethod.CASH, notes="Degradado")

    appointment = await lifecycle.create(data.client_id, data)

    assert appointment.status == AppointmentStatus.PENDING
    assert appointment.payment_status == PaymentStatus.PENDING
    assert appointment.start_time == time(10, 0)
    assert appointment.end_time == time(10, 30)
    assert appointment.total_price == Decimal("150.00")
    assert appointment.notes == "Degradado"


@pytest.mark.asyncio
async def test_price_is_snapshotted_at_booking(setup):
    lifecycle, shop, barber, service = setup
    data = booking(shop, barber, service)
    appointment = await lifecycle.create(data.client_id, data)

    service.price = Decimal("200.00")

    assert appointment.total_price == Decimal("150.00")


@pytest.mark.asyncio
async def test_overlapping_create_is_rejected(setup):
    lifecycle, shop, barber, service = setup
    first = booking(shop, barber, service, "10:00")
    await lifecycle.create(first.client_id, first)

    second = booking(shop, barber, service, "10:15")
    with pytest.raises(SlotUnavailableError):
        await lifecycle.create(second.client_id, second)

    adjacent = booking(shop, barber, service, "10:30")
    assert (await lifecycle.create(adjacent.client_id, adjacent)).status == AppointmentStatus.PENDING


@pytest.mark.asyncio
async def test_concurrent_creates_for_same_slot_only_one_wins(setup, appointments):
    lifecycle, shop, barber, service = setup
    a = booking(shop, barber, service, "11:00")
    b = booking(shop, barber, service, "11:00")

    results = await asyncio.gather(
        lifecycle.create(a.client_id, a),
        lifecycle.create(b.client_id, b),
        return_exceptions=True,
    )

    failures = [r for r in results if isinstance(r, Exception)]
    assert len(failures) == 1
    assert isinstance(failures[0], SlotUnavailableError)
    assert len(appointments.rows) == 1


@pytest.mark.asyncio
async def test_other_barber_is_not_blocked(setup, schedules):
    lifecycle, shop, barber, service = setup
    other = schedules.add_barber(shop.id, {"monday": [{"start": "09:00", "end": "12:00"}]}, name="Ana")
    first = booking(shop, barber, service, "10:00")
    await lifecycle.create(first.client_id, first)

    second = booking(shop, other, service, "10:00")
    assert (await lifecycle.create(second.client_id, second)).barber_id == other.id


@pytest.mark.asyncio
async def test_create_with_unknown_service_or_barber(setup, schedules):
    lifecycle, shop, barber, service = setup
    data = booking(shop, barber, service)

    with pytest.raises(NotFoundError):
        await lifecycle.create(data.client_id, data.model_copy(update={"service_id": uuid.uuid4()}))
    with pytest.raises(NotFoundError):
        await lifecycle.create(data.client_id, data.model_copy(update={"barber_id": uuid.uuid4()}))

    other_shop = schedules.add_barbershop({"monday": {"open": "09:00", "close": "18:00"}}, name="Otra")
    foreign = schedules.add_service(other_shop.id)
    with pytest.raises(NotFoundError):
        await lifecycle.create(data.client_id, data.model_copy(update={"service_id": foreign.id}))


@pytest.mark.asyncio
async def test_create_past_midnight_is_rejected(setup, schedules):
    lifecycle, shop, barber, _ = setup
    long_service = schedules.add_service(shop.id, duration_minutes=60)
    data = booking(shop, barber, long_service, "23:30")

    with pytest.raises(InvalidInputError):
        await lifecycle.create(data.client_id, data)


@pytest.mark.asyncio
async def test_full_lifecycle(setup):
    lifecycle, shop, barber, service = setup
    data = booking(shop, barber, service)
    appointment = await lifecycle.create(data.client_id, data)

    confirmed = await lifecycle.confirm(appointment.id)
    assert confirmed.status == AppointmentStatus.CONFIRMED

    completed = await lifecycle.complete(appointment.id)
    assert completed.status == AppointmentStatus.COMPLETED


@pytest.mark.asyncio
async def test_confirm_twice_is_invalid(setup):
    lifecycle, shop, barber, service = setup
    data = booking(shop, barber, service)
    appointment = await lifecycle.create(data.client_id, data)
    await lifecycle.confirm(appointment.id)

    with pytest.raises(InvalidTransitionError) as exc:
        await lifecycle.confirm(appointment.id)
    assert exc.value.current == "confirmed"


@pytest.mark.asyncio
async def test_complete_requires_confirmed(setup):
    lifecycle, shop, barber, service = setup
    data = booking(shop, barber, service)
    appointment = await lifecycle.create(data.client_id, data)

    with pytest.raises(InvalidTransitionError):
        await lifecycle.complete(appointment.id)


@pytest.mark.asyncio
async def test_cancel_after_complete_is_invalid(setup):
    lifecycle, shop, barber, service = setup
    data = booking(shop, barber, service)
    appointment = await lifecycle.create(data.client_id, data)
    await lifecycle.confirm(appointment.id)
    await lifecycle.complete(appointment.id)

    with pytest.raises(InvalidTransitionError):
        await lifecycle.cancel(appointment.id, "Too late")


@pytest.mark.asyncio
async def test_cancelled_is_terminal(setup):
    lifecycle, shop, barber, service = setup
    data = booking(shop, barber, service)
    appointment = await lifecycle.create(data.client_id, data)
    await lifecycle.cancel(appointment.id)

    for transition in (lifecycle.confirm, lifecycle.complete, lifecycle.cancel):
        with pytest.raises(InvalidTransitionError):
            await transition(appointment.id)


@pytest.mark.asyncio
async def test_transitions_on_unknown_id(setup):
    lifecycle, *_ = setup
    missing = uuid.uuid4()
    for transition in (lifecycle.confirm, lifecycle.complete, lifecycle.cancel):
        with pytest.raises(NotFoundError):
            await transition(missing)
    with pytest.raises(NotFoundError):
        await lifecycle.update(missing, AppointmentUpdate(notes="x"))


@pytest.mark.asyncio
async def test_cancel_records_reason_and_frees_slot(setup, clock):
    lifecycle, shop, barber, service = setup
    data = booking(shop, barber, service, "10:00")
    appointment = await lifecycle.create(data.client_id, data)

    cancelled = await lifecycle.cancel(appointment.id, "Client sick")
    assert cancelled.status == AppointmentStatus.CANCELLED
    assert cancelled.cancellation_reason == "Client sick"
    assert cancelled.cancelled_at == clock.now()

    again = booking(shop, barber, service, "10:00")
    rebooked = await lifecycle.create(again.client_id, again)
    assert rebooked.status == AppointmentStatus.PENDING


@pytest.mark.asyncio
async def test_update_changes_fields_not_status(setup, clock):
    lifecycle, shop, barber, service = setup
    data = booking(shop, barber, service)
    appointment = await lifecycle.create(data.client_id, data)
    created_at = appointment.created_at

    clock.advance(minutes=5)
    updated = await lifecycle.update(
        appointment.id,
        AppointmentUpdate(notes="Bring photo", payment_status=PaymentStatus.PAID, payment_method=PaymentMethod.CARD),
    )

    assert updated.status == AppointmentStatus.PENDING
    assert updated.notes == "Bring photo"
    assert updated.payment_status == PaymentStatus.PAID
    assert updated.payment_method == PaymentMethod.CARD
    assert updated.updated_at > created_at


@pytest.mark.asyncio
async def test_update_rejects_null_payment_status(setup):
    lifecycle, shop, barber, service = setup
    data = booking(shop, barber, service)
    appointment = await lifecycle.create(data.client_id, data)

    with pytest.raises(InvalidInputError):
        await lifecycle.update(appointment.id, AppointmentUpdate(payment_status=None))


@pytest.mark.asyncio
async def test_availability_reflects_bookings_and_cancellations(setup, schedules, appointments, clock):
    lifecycle, shop, barber, service = setup
    availability = AvailabilityService(schedules, appointments, clock)

    before = [s.time for s in await availability.available_slots(barber.id, NEXT_MONDAY, service.id)]
    assert "10:00" in before

    data = booking(shop, barber, service, "10:00")
    appointment = await lifecycle.create(data.client_id, data)
    during = [s.time for s in await availability.available_slots(barber.id, NEXT_MONDAY, service.id)]
    assert "09:45" not in during and "10:00" not in during and "10:15" not in during

    await lifecycle.cancel(appointment.id)
    after = [s.time for s in await availability.available_slots(barber.id, NEXT_MONDAY, service.id)]
    assert after == before


@pytest.mark.asyncio
async def test_availability_today_drops_past_times(setup, schedules, appointments, clock):
    _, _, barber, service = setup
    clock.advance(hours=2, minutes=10)  # 10:10 local
    availability = AvailabilityService(schedules, appointments, clock)

    slots = [s.time for s in await availability.available_slots(barber.id, MONDAY, service.id)]
    assert slots[0] == "10:15"
    assert await availability.available_slots(barber.id, date(2026, 10, 12), service.id) == []


@pytest.mark.asyncio
async def test_availability_unknown_ids(setup, schedules, appointments, clock):
    _, _, barber, service = setup
    availability = AvailabilityService(schedules, appointments, clock)
    with pytest.raises(NotFoundError):
        await availability.available_slots(uuid.uuid4(), NEXT_MONDAY, service.id)
    with pytest.raises(NotFoundError):
        await availability.available_slots(barber.id, NEXT_MONDAY, uuid.uuid4())


@pytest.mark.asyncio
async def test_next_available_date_defaults_to_today(setup, schedules, appointments, clock):
    _, _, barber, _ = setup
    availability = AvailabilityService(schedules, appointments, clock)
    assert await availability.next_available_date(barber.id) == MONDAY
    assert await availability.next_available_date(barber.id, "2026-10-20") == NEXT_MONDAY


@pytest.mark.asyncio
async def test_queries_views(setup, appointments, clock):
    lifecycle, shop, barber, service = setup
    queries = AppointmentQueries(appointments, clock)

    today = booking(shop, barber, service, "11:00", day=MONDAY)
    later = booking(shop, barber, service, "09:00", day=NEXT_MONDAY)
    done = booking(shop, barber, service, "09:00", day=MONDAY)
    today_appt = await lifecycle.create(today.client_id, today)
    later_appt = await lifecycle.create(later.client_id, later)
    done_appt = await lifecycle.create(done.client_id, done)

    await lifecycle.confirm(later_appt.id)
    await lifecycle.confirm(done_appt.id)
    await lifecycle.complete(done_appt.id)

    assert [a.id for a in await queries.today()] == [done_appt.id, today_appt.id]
    assert [a.id for a in await queries.upcoming()] == [later_appt.id]
    assert [a.id for a in await queries.history()] == [done_appt.id]
    assert [a.id for a in await queries.list_appointments(AppointmentFilters(client_id=later.client_id))] == [later_appt.id]

    with pytest.raises(NotFoundError):
        await queries.get(uuid.uuid4())


@pytest.mark.asyncio
async def test_inactive_service_cannot_be_booked_or_listed(setup, schedules, appointments, clock):
    lifecycle, shop, barber, service = setup
    availability = AvailabilityService(schedules, appointments, clock)
    service.is_active = False

    data = booking(shop, barber, service)
    with pytest.raises(NotFoundError):
        await lifecycle.create(data.client_id, data)
    with pytest.raises(NotFoundError):
        await availability.available_slots(barber.id, NEXT_MONDAY, service.id)
    assert appointments.rows == {}


@pytest.mark.asyncio
async def test_inactive_barber_cannot_be_booked_or_listed(setup, schedules, appointments, clock):
    lifecycle, shop, barber, service = setup
    availability = AvailabilityService(schedules, appointments, clock)
    barber.is_active = False

    data = booking(shop, barber, service)
    with pytest.raises(NotFoundError):
        await lifecycle.create(data.client_id, data)
    with pytest.raises(NotFoundError):
        await availability.available_slots(barber.id, NEXT_MONDAY, service.id)
    with pytest.raises(NotFoundError):
        await availability.next_available_date(barber.id)


@pytest.mark.asyncio
async def test_grouped_slots_match_flat_list(schedules, appointments, clock):
    shop = schedules.add_barbershop({"monday": {"open": "09:00", "close": "20:00"}})
    barber = schedules.add_barber(shop.id, {"monday": [
        {"start": "09:00", "end": "13:00"},
        {"start": "13:00", "end": "20:00"},
    ]})
    service = schedules.add_service(shop.id, duration_minutes=30)
    availability = AvailabilityService(schedules, appointments, clock)

    flat = await availability.available_slots(barber.id, NEXT_MONDAY, service.id)
    grouped = await availability.grouped_slots(barber.id, NEXT_MONDAY, service.id)

    regrouped = grouped["morning"] + grouped["afternoon"] + grouped["evening"]
    assert [s.time for s in regrouped] == [s.time for s in flat]
    assert grouped["morning"][0].time == "09:00"
    assert grouped["afternoon"][0].time == "12:00"
    assert grouped["evening"][-1].time == "19:30"
