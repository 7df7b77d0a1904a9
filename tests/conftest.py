"""Pytest configuration and fixtures."""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from app.persistence.database import Base, get_db
from app.persistence.models import *  # noqa: F401, F403
from app.persistence.seed import seed_defaults


@pytest.fixture
async def db_session():
    """Create a test database session."""
    # Use in-memory SQLite for testing
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session = sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )

    async with async_session() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
async def seeded_session(db_session):
    """Database session holding the built-in profiles, templates and variables."""
    await seed_defaults(db_session)
    return db_session


@pytest.fixture
async def client(seeded_session):
    """Create a test API client bound to the seeded session."""
    from httpx import ASGITransport, AsyncClient

    from app.domain.services.configuration_service import ActiveProfileCache
    from app.main import app

    app.dependency_overrides[get_db] = lambda: seeded_session
    app.state.active_profile_cache = ActiveProfileCache()

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as test_client:
        yield test_client

    app.dependency_overrides.clear()
    app.state.active_profile_cache.invalidate()


@pytest.fixture
async def session_factory(tmp_path):
    """Sessionmaker over a seeded file database, for tests that need two sessions."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'widget_console.db'}",
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session = sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )

    async with async_session() as session:
        await seed_defaults(session)

    yield async_session

    await engine.dispose()
