"""
Async database session management with connection pooling.

This module provides the asyncio SQLAlchemy engine and sessions used by the
postgres record store. The journey engine only reads, so sessions are never
committed; they are rolled back on error and always closed.

Connection Pooling:
    - Pool size and overflow come from DATABASE_POOL_SIZE / DATABASE_MAX_OVERFLOW
    - Connections are recycled after one hour
    - Pre-ping is enabled for connection validation

Usage:
    ```python
    from common.database import get_async_db_session

    async with get_async_db_session("journey-service") as session:
        result = await session.execute(select(Event).limit(10))
        events = result.scalars().all()
    ```
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from functools import lru_cache
import os
from typing import Any

from dotenv import load_dotenv
from loguru import logger
from sqlalchemy.engine import URL
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from common.config import get_settings

load_dotenv()


def create_sqlalchemy_url(service_name: str | None = None) -> URL:
    """
    Create the asyncpg SQLAlchemy URL from service settings.

    Args:
        service_name: Service whose settings hold the POSTGRES_* values.

    Returns:
        SQLAlchemy URL object using the ``postgresql+asyncpg`` driver.

    Raises:
        ValueError: If the settings define no POSTGRES_DATABASE.
    """
    settings = get_settings(service_name)
    database_name = getattr(settings, "POSTGRES_DATABASE", "")
    if not database_name:
        msg = "POSTGRES_DATABASE must be configured for the postgres record store."
        raise ValueError(msg)

    return URL.create(
        drivername="postgresql+asyncpg",
        username=settings.POSTGRES_USER,
        password=settings.POSTGRES_PASSWORD,
        host=settings.POSTGRES_HOST,
        port=int(settings.POSTGRES_PORT),
        database=database_name,
    )


@lru_cache(maxsize=10)
def get_async_engine(service_name: str | None = None) -> AsyncEngine:
    """
    Get cached async database engine with connection pooling.

    Args:
        service_name: Name of the service (for settings and connection naming).

    Returns:
        SQLAlchemy AsyncEngine instance, one per service name.
    """
    settings = get_settings(service_name)
    url = create_sqlalchemy_url(service_name)

    pool_size = settings.DATABASE_POOL_SIZE
    max_overflow = settings.DATABASE_MAX_OVERFLOW
    pool_recycle = int(os.getenv("DATABASE_POOL_RECYCLE", 3600))  # 1 hour

    async_engine = create_async_engine(
        url,
        pool_size=pool_size,
        max_overflow=max_overflow,
        pool_recycle=pool_recycle,
        pool_pre_ping=True,
        echo=os.getenv("DATABASE_ECHO", "false").lower() == "true",
        connect_args={
            "server_settings": {
                "application_name": f"async-{service_name or 'journey-service'}",
                "jit": "off",
            }
        },
    )

    logger.info(
        f"Created async database engine for {service_name or 'default'} with pool_size={pool_size}, max_overflow={max_overflow}"
    )

    return async_engine


@lru_cache(maxsize=10)
def get_async_session_maker(service_name: str | None = None) -> async_sessionmaker:
    """Get cached session maker for async operations."""
    async_engine = get_async_engine(service_name)
    return async_sessionmaker(
        bind=async_engine,
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )


@asynccontextmanager
async def get_async_db_session(service_name: str | None = None) -> Any:
    """
    Async context manager for read-only database sessions.

    Args:
        service_name: Optional name of the service (for settings lookup and
            connection naming).

    Yields:
        SQLAlchemy AsyncSession object ready for async queries.

    Note:
        - Sessions are rolled back and the error re-raised on exceptions
        - Sessions are always closed when exiting the context
        - Nothing is committed; the journey engine never writes
    """
    session_maker = get_async_session_maker(service_name)
    session = session_maker()
    try:
        yield session
    except Exception as e:
        await session.rollback()
        logger.error(f"Async database session error: {e}")
        raise
    finally:
        await session.close()
