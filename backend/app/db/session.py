############################################################
#
# xarwiz-cms - Marketing Site Content Backend
#
# session.py: Async engine, session factory and FastAPI dependency
#
############################################################

"""Database engine and session management."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from backend.app.settings import get_settings


def _engine_kwargs(url: str) -> dict:
    settings = get_settings()
    kwargs = {"echo": settings.database_echo}
    # SQLite (tests, local dev) uses a static/null pool without sizing options
    if not url.startswith("sqlite"):
        kwargs.update(
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
            pool_pre_ping=True,
            pool_recycle=3600,
        )
    return kwargs


_settings = get_settings()
engine = create_async_engine(_settings.database_url, **_engine_kwargs(_settings.database_url))

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_async_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding a request-scoped session."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


@asynccontextmanager
async def get_async_db_context() -> AsyncGenerator[AsyncSession, None]:
    """Session context manager for scripts and startup tasks."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


async def check_database_connection() -> None:
    """Run a trivial query; raises if the database is unreachable."""
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))


async def create_all_tables() -> None:
    """Create tables directly from the models (dev only; production uses Alembic)."""
    from backend.app.db.base import Base
    from backend.app.db import models  # noqa: F401  register mappers

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
