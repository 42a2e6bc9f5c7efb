"""
Base Utilities for Journey Service Database Layer

This module provides shared constants and the record store contract used by
every repository and record store client in the Journey Service.

Constants:
    SERVICE_NAME: The service name used for settings and database session routing

See Also:
    - services.journey_service.database.events_repository: Event queries
    - services.journey_service.database.leads_repository: Lead queries
    - services.journey_service.database.payments_repository: Payment queries
    - services.journey_service.database.record_store: Store implementations
"""

from datetime import datetime
from typing import Protocol

from services.journey_service.models import EventRecord, Lead, Payment

# Service name constant for settings and database session routing
SERVICE_NAME = "journey-service"


class RecordStore(Protocol):
    """
    Read-only queries the journey engine needs from the record store.

    Every method is scoped by an opaque project id supplied by the caller and
    raises common.exceptions.RecordStoreError on failure.
    """

    async def fetch_recent_event_visitor_ids(
        self, project_id: str, since: datetime, limit: int
    ) -> list[str]:
        """Visitor ids of the most recent events since ``since``, newest first, duplicates kept."""
        ...

    async def fetch_visitor_ids_for_sessions(
        self, project_id: str, session_ids: list[str]
    ) -> list[str]:
        """Non-null visitor ids of events carrying any of the session ids, duplicates kept."""
        ...

    async def fetch_visitor_events(self, project_id: str, visitor_id: str) -> list[EventRecord]:
        """All events of a visitor, oldest first."""
        ...

    async def search_lead_session_ids(
        self, project_id: str, email_fragment: str, limit: int
    ) -> list[str | None]:
        """Session ids of leads whose email contains the fragment, case-insensitively."""
        ...

    async def fetch_lead_for_sessions(
        self, project_id: str, session_ids: list[str]
    ) -> Lead | None:
        """Any one lead captured in one of the sessions, or None."""
        ...

    async def fetch_visitor_payments(self, project_id: str, visitor_id: str) -> list[Payment]:
        """All payments of a visitor, oldest first."""
        ...
