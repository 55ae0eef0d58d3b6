"""
Database connection management.

Provides the async SQLAlchemy engine, session factory, and schema setup
used by the service container.

Dependencies: sqlalchemy, docuchat.configs
System role: Database connection lifecycle management
"""

import logging
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from docuchat.boundary.db.base import Base
from docuchat.configs.database import DatabaseSettings

logger = logging.getLogger(__name__)


def get_async_engine(db_config: DatabaseSettings) -> AsyncEngine:
    """
    Create async SQLAlchemy engine with connection pooling.

    Pool sizing applies to server databases only; SQLite URLs get the
    driver's default pool. pool_pre_ping=True verifies connections before
    use to detect stale connections early.

    Args:
        db_config: Database settings

    Returns:
        AsyncEngine: Configured async SQLAlchemy engine

    Raises:
        ArgumentError: If database URL is invalid or engine creation fails
    """
    url = db_config.async_database_url
    if url.startswith("sqlite"):
        return create_async_engine(url, echo=db_config.echo_sql)

    return create_async_engine(
        url,
        echo=db_config.echo_sql,
        pool_size=db_config.pool_size,
        max_overflow=db_config.max_overflow,
        pool_timeout=db_config.pool_timeout,
        pool_pre_ping=True,
    )


def get_async_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Create async session factory for database operations.

    Args:
        engine: Async engine to bind

    Returns:
        async_sessionmaker: Factory configured for manual transaction control

    Usage:
        SessionFactory = get_async_session_factory(engine)
        async with SessionFactory() as session:
            session.add(obj)
            await session.commit()
    """
    return async_sessionmaker(
        bind=engine,
        autoflush=False,
        expire_on_commit=False,
    )


async def session_scope(
    factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """
    Yield a session from the factory and close it afterwards.

    Args:
        factory: Async session factory

    Yields:
        AsyncSession: Session scoped to the caller's lifetime
    """
    async with factory() as session:
        yield session


async def create_tables(engine: AsyncEngine) -> None:
    """
    Create all tables registered with Base.metadata.

    Idempotent: existing tables remain unchanged.

    Args:
        engine: Async engine to run DDL on
    """
    # Register models with the metadata
    from docuchat.boundary.db.models import ChatMessageModel, ChatSessionModel  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info(f"{__name__}:create_tables - Tables ensured")
