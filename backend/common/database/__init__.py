"""
Common database utilities and session management.

This module provides the database layer shared by the journey service: the
SQLAlchemy declarative base for the record models and the async session
management used by the postgres record store.

Main Components:
    - Base: SQLAlchemy declarative base class for all ORM models
    - session: Async engine, session maker and session context manager

Usage:
    ```python
    from common.database import get_async_db_session

    async with get_async_db_session("journey-service") as session:
        result = await session.execute(select(Event))
    ```
"""

from .base import Base
from .session import (
    create_sqlalchemy_url,
    get_async_db_session,
    get_async_engine,
    get_async_session_maker,
)

__all__ = [
    "Base",
    "create_sqlalchemy_url",
    "get_async_db_session",
    "get_async_engine",
    "get_async_session_maker",
]
