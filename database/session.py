"""
Async SQLAlchemy engine and session factory.

The engine is built by the application lifespan (see ``main.create_app``)
and lives on ``app.state``; nothing here holds a module-level connection.
"""

from __future__ import annotations

from typing import Any, Dict

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from config.settings import Settings
from database.models import Base


def build_engine(settings: Settings) -> AsyncEngine:
    """Create the process-wide engine; pool sizing is skipped for SQLite."""
    kwargs: Dict[str, Any] = {"echo": False}
    if not settings.database_url.startswith("sqlite"):
        kwargs.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_recycle=settings.db_pool_recycle,
            pool_pre_ping=True,
        )
    return create_async_engine(settings.database_url, **kwargs)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def init_models(engine: AsyncEngine) -> None:
    """Create missing tables.  No-op for tables that already exist."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
