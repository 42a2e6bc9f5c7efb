"""
Base declarative class for all ORM models.

This module provides the base SQLAlchemy declarative class that the record
models (events, leads, payments) inherit from. It contributes the creation
timestamp that every record collection is ordered by, plus automatic table
name generation.

Usage:
    ```python
    from common.database import Base
    from sqlalchemy.orm import Mapped, mapped_column
    from sqlalchemy import String

    class Event(Base):
        __tablename__ = "events"
        id: Mapped[str] = mapped_column(String(50), primary_key=True)
    ```

Note:
    - Table names default to the lowercase class name; the record models set
      explicit plural names to match the upstream tracking schema
    - Timestamps use PostgreSQL TIMESTAMP WITH TIME ZONE
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import TIMESTAMP, text
from sqlalchemy.orm import DeclarativeBase, Mapped, declared_attr, mapped_column


class Base(DeclarativeBase):
    """
    Base declarative class for all SQLAlchemy ORM models.

    Attributes:
        created_at (Mapped[datetime]): Timestamp when the record was created.
            Set by the database server using NOW() when not provided. This is
            the ordering key of every journey timeline.

    Note:
        - Timestamps are timezone-aware (TIMESTAMP WITH TIME ZONE)
        - This uses SQLAlchemy 2.0 declarative style with Mapped type hints
    """

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=text("NOW()"), index=True
    )

    @declared_attr.directive
    def __tablename__(cls) -> str:  # type: ignore[override]
        """Generate table name from class name."""
        return cls.__name__.lower()
