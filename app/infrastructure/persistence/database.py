"""Persistence: async engine, session factory, and Base for SQLAlchemy ORM.

The schema is owned by the write side of the platform; this service only
reads it. Engine and session factory are created lazily on first use
(get_engine / get_session_factory) so import does not trigger Settings
validation.

Analytics and search issue several queries concurrently within one
request. An AsyncSession must not be shared between concurrent tasks, so
read stores receive the session factory and open one short-lived session
per query.
"""

import logging
from typing import Any

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from app.core.config import get_settings

logger = logging.getLogger(__name__)

# Set by _ensure_engine() on first use; avoids get_settings() at import time.
engine: AsyncEngine | None = None
AsyncSessionLocal: async_sessionmaker[AsyncSession] | None = None


def build_session_factory(engine_: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory configured for read paths (no expiry, no autoflush)."""
    return async_sessionmaker(
        bind=engine_,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


def _ensure_engine() -> None:
    """Create engine and AsyncSessionLocal on first use."""
    global engine, AsyncSessionLocal
    if AsyncSessionLocal is not None:
        return
    settings = get_settings()
    engine_kwargs: dict[str, Any] = {
        "echo": settings.database_echo,
        "pool_pre_ping": True,
    }
    if settings.database_url.startswith("postgresql"):
        connect_args: dict[str, Any] = {
            "command_timeout": settings.db_command_timeout or 60,
        }
        if settings.db_disable_jit:
            connect_args["server_settings"] = {"jit": "off"}
        engine_kwargs.update(
            pool_size=settings.db_pool_size or 20,
            max_overflow=settings.db_max_overflow or 30,
            pool_recycle=3600,
            connect_args=connect_args,
        )
    engine = create_async_engine(settings.database_url, **engine_kwargs)
    AsyncSessionLocal = build_session_factory(engine)
    logger.info("Database engine created (echo=%s)", settings.database_echo)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy declarative models."""


def get_engine() -> AsyncEngine:
    """Return the process-wide engine, creating it if needed."""
    _ensure_engine()
    assert engine is not None
    return engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Return the process-wide session factory, creating the engine if needed."""
    _ensure_engine()
    assert AsyncSessionLocal is not None
    return AsyncSessionLocal


async def dispose_engine() -> None:
    """Dispose the engine (if created) and reset the lazy globals."""
    global engine, AsyncSessionLocal
    if engine is not None:
        await engine.dispose()
        logger.info("Database engine disposed")
    engine = None
    AsyncSessionLocal = None
