"""Shared test fixtures for Trimly API tests.

Uses an in-memory SQLite async engine so tests run without PostgreSQL.
The clock is pinned to Monday 2026-10-19 08:00 shop time.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from datetime import datetime
from decimal import Decimal

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from trimly.core.database import Base, get_db
from trimly.core.deps import get_clock
from trimly.main import app

# Import all models to ensure they're registered with Base.metadata
from trimly.models import Barber, Barbershop, Service

from tests.fakes import FixedClock, FakeAppointmentRepository, FakeScheduleRepository


# Use aiosqlite for fast, isolated tests
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=StaticPool)
TestSession = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

MONDAY_MORNING = datetime(2026, 10, 19, 8, 0)

SHOP_HOURS = {
    "monday": {"open": "09:00", "close": "18:00"},
    "tuesday": {"open": "09:00", "close": "18:00"},
    "wednesday": {"open": "09:00", "close": "18:00"},
    "thursday": {"open": "09:00", "close": "18:00"},
    "friday": {"open": "09:00", "close": "18:00"},
    "saturday": {"open": "10:00", "close": "14:00"},
    "sunday": None,
}

BARBER_SCHEDULE = {
    "monday": [{"start": "09:00", "end": "12:00"}],
    "tuesday": [{"start": "09:00", "end": "13:00"}, {"start": "15:00", "end": "19:00"}],
    "sunday": None,
}


@pytest_asyncio.fixture(autouse=True)
async def setup_db():
    """Create all tables before each test, drop after."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


async def override_get_db():
    async with TestSession() as session:
        yield session


@pytest.fixture
def clock():
    return FixedClock(MONDAY_MORNING)


@pytest_asyncio.fixture
async def client(clock):
    """Async HTTP test client."""
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: clock
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def db():
    """Direct DB session for test setup/assertions."""
    async with TestSession() as session:
        yield session


@pytest_asyncio.fixture
async def shop(db):
    """A barbershop with one barber and a 30-minute haircut."""
    barbershop = Barbershop(name="Barbería Centro", opening_hours=SHOP_HOURS)
    db.add(barbershop)
    await db.flush()

    barber = Barber(barbershop_id=barbershop.id, name="Luis", schedule=BARBER_SCHEDULE, is_active=True)
    service = Service(
        barbershop_id=barbershop.id,
        name="Corte clásico",
        duration_minutes=30,
        price=Decimal("150.00"),
        is_active=True,
    )
    db.add_all([barber, service])
    await db.commit()

    return {
        "barbershop_id": str(barbershop.id),
        "barber_id": str(barber.id),
        "service_id": str(service.id),
    }


@pytest.fixture
def schedules():
    return FakeScheduleRepository()


@pytest.fixture
def appointments():
    return FakeAppointmentRepository()
