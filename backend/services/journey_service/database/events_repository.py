"""
Events Repository for Journey Service

This module provides read-only database operations over the ``events`` table:
discovering recent visitors, resolving visitors from session ids and loading
a visitor's complete event timeline.

Example:
    ```python
    repo = EventsRepository()
    events = await repo.get_visitor_events("proj-123", "visitor-abc")
    ```

See Also:
    - services.journey_service.database.base: Shared constants
    - common.database.get_async_db_session: Database session management
"""

from datetime import datetime

from sqlalchemy import select

from common.database import get_async_db_session
from common.models import Event
from services.journey_service.models import EventRecord

from .base import SERVICE_NAME


class EventsRepository:
    """
    Repository for event database operations.

    Thread Safety:
        This repository is safe to use concurrently across multiple async
        tasks. Each method creates its own database session.
    """

    async def get_recent_visitor_ids(
        self, project_id: str, since: datetime, limit: int
    ) -> list[str]:
        """
        Retrieve the visitor ids of the most recent events in a time window.

        Args:
            project_id: Project scope.
            since: Only events created at or after this instant are scanned.
            limit: Maximum number of events scanned.

        Returns:
            list[str]: One visitor id per scanned event, newest event first.
                The same visitor appears once per event; callers de-duplicate.
        """
        async with get_async_db_session(SERVICE_NAME) as session:
            result = await session.execute(
                select(Event.visitor_id)
                .where(
                    Event.project_id == project_id,
                    Event.visitor_id.is_not(None),
                    Event.created_at >= since,
                )
                .order_by(Event.created_at.desc())
                .limit(limit)
            )
            return list(result.scalars().all())

    async def get_visitor_ids_for_sessions(
        self, project_id: str, session_ids: list[str]
    ) -> list[str]:
        """Retrieve the non-null visitor ids of events belonging to any of the sessions."""
        if not session_ids:
            return []
        async with get_async_db_session(SERVICE_NAME) as session:
            result = await session.execute(
                select(Event.visitor_id).where(
                    Event.project_id == project_id,
                    Event.session_id.in_(session_ids),
                    Event.visitor_id.is_not(None),
                )
            )
            return list(result.scalars().all())

    async def get_visitor_events(self, project_id: str, visitor_id: str) -> list[EventRecord]:
        """
        Retrieve every event of one visitor in chronological order.

        Args:
            project_id: Project scope.
            visitor_id: Visitor whose timeline is loaded.

        Returns:
            list[EventRecord]: Events ordered by created_at ascending. Empty if
                the visitor has no events in the project.
        """
        async with get_async_db_session(SERVICE_NAME) as session:
            result = await session.execute(
                select(Event)
                .where(Event.project_id == project_id, Event.visitor_id == visitor_id)
                .order_by(Event.created_at.asc())
            )
            return [EventRecord.model_validate(row) for row in result.scalars().all()]
