"""Async SQLAlchemy engine, session factory and declarative base."""

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from trimly.core.config import settings


def _engine_kwargs(url: str) -> dict:
    """Pool and driver options; SQLite (tests, local runs) takes none of them."""
    if not url.startswith("postgresql"):
        return {}
    return {
        "pool_pre_ping": True,
        "pool_size": settings.DB_POOL_SIZE,
        # asyncpg aborts any single statement that runs longer than this
        "connect_args": {"command_timeout": settings.DB_COMMAND_TIMEOUT_SECONDS},
    }


engine = create_async_engine(settings.DATABASE_URL, echo=False, **_engine_kwargs(settings.DATABASE_URL))
async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


class Base(DeclarativeBase):
    pass


async def get_db():
    """FastAPI dependency yielding one session per request."""
    async with async_session() as session:
        yield session
