"""Database connection and session management."""

import logging
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from app.settings import get_async_database_url, settings

logger = logging.getLogger(__name__)

# Create async engine
engine = create_async_engine(
    get_async_database_url(),
    echo=settings.database_echo,
    future=True,
)

# Create async session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)

# Base class for models
Base = declarative_base()


async def get_db() -> AsyncIterator[AsyncSession]:
    """Dependency for getting database session."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception as e:
            logger.error(
                "Database session error",
                extra={"error_type": type(e).__name__, "error_message": str(e)},
            )
            raise
        finally:
            await session.close()


async def create_all_tables() -> None:
    """Create any missing tables (local and test databases)."""
    # Import models so they register with Base.metadata
    import app.persistence.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
