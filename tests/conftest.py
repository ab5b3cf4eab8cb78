from collections.abc import Awaitable, Callable
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from maelmon.db.database import get_session
from maelmon.models.db import Base, CardDefinitionDB, UserAccountDB
from maelmon.services import cooldown as cooldown_module


@pytest.fixture(autouse=True)
def reset_cooldown_tracker():
    """Give every test a fresh process-wide cooldown tracker.

    The tracker caches per-user locks, which are bound to the event loop
    of the test that created them.
    """
    cooldown_module.reset_cooldown_tracker()
    yield
    cooldown_module.reset_cooldown_tracker()


@pytest.fixture
async def async_engine():
    """Create an in-memory SQLite engine for testing.

    StaticPool keeps one connection so every session sees the same database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(async_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(session_factory) -> AsyncSession:
    """Provide a database session for tests."""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def file_engine(tmp_path):
    """Create a file-backed SQLite engine for concurrency tests.

    Each session gets its own connection and transaction, so one session's
    rollback cannot undo another session's committed work.
    """
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'maelmon.db'}", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def file_session_factory(file_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(file_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def client(session_factory):
    """Provide an async test client with overridden database session."""
    from maelmon.main import app

    async def override_get_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_session] = override_get_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def make_user(session: AsyncSession) -> Callable[..., Awaitable[UserAccountDB]]:
    """Insert a user account and commit."""

    async def _make_user(twitch_id: str = "1001", **overrides: Any) -> UserAccountDB:
        fields: dict[str, Any] = {
            "twitch_id": twitch_id,
            "username": f"viewer{twitch_id}",
            "display_name": f"Viewer{twitch_id}",
            "currency": 100,
            "is_admin": False,
        }
        fields.update(overrides)
        user = UserAccountDB(**fields)
        session.add(user)
        await session.commit()
        return user

    return _make_user


@pytest.fixture
def make_definition(session: AsyncSession) -> Callable[..., Awaitable[CardDefinitionDB]]:
    """Insert a card definition and commit."""

    async def _make_definition(name: str = "Maelstrom", **overrides: Any) -> CardDefinitionDB:
        fields: dict[str, Any] = {
            "name": name,
            "type": "Attack",
            "rarity": "Common",
            "attack": 3,
            "defense": 2,
            "character_image_url": f"https://img.example/{name.lower()}.png",
            "max_supply": -1,
            "current_supply": 0,
        }
        fields.update(overrides)
        definition = CardDefinitionDB(**fields)
        session.add(definition)
        await session.commit()
        return definition

    return _make_definition
