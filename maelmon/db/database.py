"""
Database engine and session management.

Provides the async SQLAlchemy engine, the session factory, a FastAPI session
dependency and a context-managed unit of work for non-HTTP callers (chat
bot, jobs).
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from maelmon.config import settings
from maelmon.models.db import Base
from maelmon.models.failure import KnownError


def _engine_options(database_url: str) -> dict[str, Any]:
    options: dict[str, Any] = {"echo": settings.debug, "pool_pre_ping": True}
    # SQLite uses a static/singleton pool that takes no queue timeout
    if not database_url.startswith("sqlite"):
        options["pool_timeout"] = settings.database_pool_timeout
    return options


# Create async engine
engine = create_async_engine(settings.database_url, **_engine_options(settings.database_url))

# Session factory
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency that provides a database session.

    Commits when the endpoint returns normally. Rolls back on storage
    errors and on known domain failures so a refused claim leaves no
    partial writes behind.

    Usage in FastAPI:
        @app.get("/items")
        async def get_items(session: AsyncSession = Depends(get_session)):
            ...
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except (SQLAlchemyError, KnownError):
            await session.rollback()
            raise


@asynccontextmanager
async def session_scope(
    factory: async_sessionmaker[AsyncSession] | None = None,
) -> AsyncGenerator[AsyncSession, None]:
    """
    Unit of work for callers outside a request.

    Same commit/rollback rules as get_session.
    """
    async with (factory or async_session_factory)() as session:
        try:
            yield session
            await session.commit()
        except (SQLAlchemyError, KnownError):
            await session.rollback()
            raise


async def init_db() -> None:
    """
    Initialize database tables.

    Creates all tables defined in the ORM models.
    Should be called once at application startup.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def drop_db() -> None:
    """
    Drop all database tables.

    WARNING: Destroys all data. Use only for testing.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
