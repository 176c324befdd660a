"""
Resourceful — Async SQLAlchemy Helpers
=======================================

What:  Engine and session factories plus the declarative Base used by the
       SQL data source.
Why:   Applications that back resources with a relational store share one
       engine and get the same commit/rollback discipline on every call.
How:   Nothing connects at import time. create_engine_from_settings() builds
       an async engine from settings.database_url; session_scope() commits on
       success and rolls back on any error.

Connection pooling (non-SQLite URLs):
    pool_size / max_overflow / pool_pre_ping come from settings
    pool_recycle=3600 recycles connections every hour
SQLite URLs keep the dialect's own pool (in-memory databases need a single
shared connection).
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from resourceful.config import settings


class Base(DeclarativeBase):
    """Declarative base for ORM models backing resources."""
    pass


def create_engine_from_settings(url: Optional[str] = None) -> AsyncEngine:
    """Async engine for `url`, defaulting to settings.database_url."""
    url = url or settings.database_url
    options = {"echo": settings.log_level == "DEBUG"}
    if not url.startswith("sqlite"):
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return create_async_engine(url, **options)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # expire_on_commit=False: records are built from ORM rows after commit
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@asynccontextmanager
async def session_scope(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncSession]:
    """
    One unit of work.

    Commits when the block completes, rolls back and re-raises on any
    exception, always closes the session.
    """
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def create_tables(engine: AsyncEngine) -> None:
    """Create every table registered on Base.metadata (development and tests)."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine(engine: AsyncEngine) -> None:
    """Close all pooled connections; call on application shutdown."""
    await engine.dispose()
