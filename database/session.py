"""
Async SQLAlchemy engine / session lifecycle for PostgreSQL.

The engine is created once at startup by ``init_engine``.  A missing
``DATABASE_URL`` is a startup error rather than a silently disabled backend.
"""

from __future__ import annotations

import logging
from typing import AsyncGenerator, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from config.settings import config
from connectors.errors import BackendUnavailableError, ConfigMissingError

logger = logging.getLogger(__name__)

_engine: Optional[AsyncEngine] = None
_session_factory: Optional[async_sessionmaker[AsyncSession]] = None


def init_engine(database_url: Optional[str] = None) -> async_sessionmaker[AsyncSession]:
    """Create the engine and session factory (idempotent)."""
    global _engine, _session_factory

    if _session_factory is not None:
        return _session_factory

    url = database_url if database_url is not None else config.database_url
    if not url:
        raise ConfigMissingError("DATABASE_URL is not set; the dashboard cannot start without a database.")

    _engine = create_async_engine(
        url,
        echo=False,
        pool_size=10,
        max_overflow=20,
        pool_recycle=3600,
        pool_pre_ping=True,
    )
    _session_factory = async_sessionmaker(
        _engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    logger.info("Database engine initialised")
    return _session_factory


async def dispose_engine() -> None:
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _session_factory = None


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Dependency function — use in FastAPI `Depends(get_db_session)`."""
    if _session_factory is None:
        raise BackendUnavailableError()
    async with _session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
