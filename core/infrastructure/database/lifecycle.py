"""Database Lifecycle Management - Async Version"""

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from core.infrastructure.database.config import create_engine
from core.settings.modules.database_settings import DatabaseSettings

logger = logging.getLogger(__name__)

_async_engine: Optional[AsyncEngine] = None
_async_session_factory: Optional[async_sessionmaker[AsyncSession]] = None


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory with the settings every unit of work relies on."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async def init_database(settings: Optional[DatabaseSettings] = None) -> None:
    """Initialize async database engine and session factory, creating tables."""
    global _async_engine, _async_session_factory

    if _async_engine is not None:
        return

    from core.data.models import Base

    settings = settings or DatabaseSettings()
    _async_engine = create_engine(settings)
    _async_session_factory = build_session_factory(_async_engine)

    # Create tables
    async with _async_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    logger.info("✅ Database initialized successfully")


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get async session factory."""
    if _async_session_factory is None:
        raise RuntimeError(
            "Database not initialized. Call init_database() first."
        )
    return _async_session_factory


async def close_database() -> None:
    """Close async database engine."""
    global _async_engine, _async_session_factory

    if _async_engine is not None:
        await _async_engine.dispose()
        logger.info("✅ Database connections closed")

    _async_engine = None
    _async_session_factory = None
