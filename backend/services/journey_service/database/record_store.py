"""
Record Store Clients for the Journey Service

This module provides the record store implementations consumed by the journey
engine:

    - PostgresRecordStore: SQLAlchemy async repositories over the events,
      leads and payments tables
    - TimedRecordStore: wraps any store, applies a per-query timeout and
      converts every failure into RecordStoreError

The supabase implementation lives in
services.journey_service.database.supabase_store.

Error Handling:
    No retries are attempted. A timeout, a dropped connection or a malformed
    filter all surface as the same RecordStoreError, which aborts the whole
    journey query.

Example:
    ```python
    store = TimedRecordStore(PostgresRecordStore(), timeout_seconds=30)
    events = await store.fetch_visitor_events("proj-123", "visitor-abc")
    ```
"""

import asyncio
from collections.abc import Awaitable
from datetime import datetime
from typing import TypeVar

from loguru import logger

from common.exceptions import RecordStoreError
from services.journey_service.models import EventRecord, Lead, Payment

from .base import RecordStore
from .events_repository import EventsRepository
from .leads_repository import LeadsRepository
from .payments_repository import PaymentsRepository

T = TypeVar("T")


class PostgresRecordStore:
    """
    Record store backed by the PostgreSQL repositories.

    Attributes:
        events: Repository for the events table.
        leads: Repository for the leads table.
        payments: Repository for the payments table.
    """

    def __init__(
        self,
        events: EventsRepository | None = None,
        leads: LeadsRepository | None = None,
        payments: PaymentsRepository | None = None,
    ) -> None:
        self.events = events or EventsRepository()
        self.leads = leads or LeadsRepository()
        self.payments = payments or PaymentsRepository()
        logger.info("Initialized postgres record store")

    async def fetch_recent_event_visitor_ids(
        self, project_id: str, since: datetime, limit: int
    ) -> list[str]:
        return await self.events.get_recent_visitor_ids(project_id, since, limit)

    async def fetch_visitor_ids_for_sessions(
        self, project_id: str, session_ids: list[str]
    ) -> list[str]:
        return await self.events.get_visitor_ids_for_sessions(project_id, session_ids)

    async def fetch_visitor_events(self, project_id: str, visitor_id: str) -> list[EventRecord]:
        return await self.events.get_visitor_events(project_id, visitor_id)

    async def search_lead_session_ids(
        self, project_id: str, email_fragment: str, limit: int
    ) -> list[str | None]:
        return await self.leads.search_session_ids_by_email(project_id, email_fragment, limit)

    async def fetch_lead_for_sessions(
        self, project_id: str, session_ids: list[str]
    ) -> Lead | None:
        return await self.leads.get_lead_for_sessions(project_id, session_ids)

    async def fetch_visitor_payments(self, project_id: str, visitor_id: str) -> list[Payment]:
        return await self.payments.get_visitor_payments(project_id, visitor_id)


class TimedRecordStore:
    """
    Applies a timeout to every query of an inner store.

    Any exception raised by the inner store, and any timeout, is re-raised as
    RecordStoreError with the original exception chained. Cancellation is
    propagated untouched so that fail-fast fan-out can cancel sibling queries.

    Args:
        inner: The store to delegate to.
        timeout_seconds: Timeout applied to each single query.
    """

    def __init__(self, inner: RecordStore, timeout_seconds: float) -> None:
        self.inner = inner
        self.timeout_seconds = timeout_seconds

    async def _guard(self, operation: str, query: Awaitable[T]) -> T:
        try:
            return await asyncio.wait_for(query, timeout=self.timeout_seconds)
        except asyncio.TimeoutError as e:
            logger.warning(f"Record store query timed out after {self.timeout_seconds}s while {operation}")
            raise RecordStoreError(operation, e) from e
        except RecordStoreError:
            raise
        except Exception as e:
            logger.warning(f"Record store query failed while {operation}: {e}")
            raise RecordStoreError(operation, e) from e

    async def fetch_recent_event_visitor_ids(
        self, project_id: str, since: datetime, limit: int
    ) -> list[str]:
        return await self._guard(
            "loading recent visitors",
            self.inner.fetch_recent_event_visitor_ids(project_id, since, limit),
        )

    async def fetch_visitor_ids_for_sessions(
        self, project_id: str, session_ids: list[str]
    ) -> list[str]:
        return await self._guard(
            "resolving visitors from lead sessions",
            self.inner.fetch_visitor_ids_for_sessions(project_id, session_ids),
        )

    async def fetch_visitor_events(self, project_id: str, visitor_id: str) -> list[EventRecord]:
        return await self._guard(
            f"loading events for visitor {visitor_id}",
            self.inner.fetch_visitor_events(project_id, visitor_id),
        )

    async def search_lead_session_ids(
        self, project_id: str, email_fragment: str, limit: int
    ) -> list[str | None]:
        return await self._guard(
            "searching leads by email",
            self.inner.search_lead_session_ids(project_id, email_fragment, limit),
        )

    async def fetch_lead_for_sessions(
        self, project_id: str, session_ids: list[str]
    ) -> Lead | None:
        return await self._guard(
            "loading lead for visitor sessions",
            self.inner.fetch_lead_for_sessions(project_id, session_ids),
        )

    async def fetch_visitor_payments(self, project_id: str, visitor_id: str) -> list[Payment]:
        return await self._guard(
            f"loading payments for visitor {visitor_id}",
            self.inner.fetch_visitor_payments(project_id, visitor_id),
        )
