"""
Supabase record store for the journey service.

Reads the events, leads and payments tables through the Supabase PostgREST
API. The supabase client is synchronous, so every query runs in the default
thread executor to keep the journey fan-out concurrent.
"""

from datetime import datetime
from typing import Any

import httpx
from loguru import logger
from supabase import Client, create_client
from supabase.lib.client_options import ClientOptions

from services.journey_service.models import EventRecord, Lead, Payment
from services.journey_service.utils import run_sync_in_executor


class SupabaseRecordStore:
    """Record store backed by a Supabase project."""

    def __init__(self, project_url: str, service_role_key: str, timeout_seconds: float = 30.0) -> None:
        """
        Initialize the Supabase client.

        Args:
            project_url: Supabase project URL.
            service_role_key: Service role key used to read across row level security.
            timeout_seconds: HTTP timeout for PostgREST requests.

        Raises:
            EnvironmentError: If the URL or the key is missing.
        """
        if not project_url or not service_role_key:
            raise EnvironmentError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must be set")

        options = ClientOptions(postgrest_client_timeout=httpx.Timeout(timeout_seconds))
        self.client: Client = create_client(project_url, service_role_key, options=options)
        logger.info(f"Initialized supabase record store for {project_url}")

    @staticmethod
    def _rows(response: Any) -> list[dict[str, Any]]:
        return list(getattr(response, "data", None) or [])

    def _recent_event_visitor_ids(self, project_id: str, since: datetime, limit: int) -> list[str]:
        response = (
            self.client.table("events")
            .select("visitor_id")
            .eq("project_id", project_id)
            .not_.is_("visitor_id", "null")
            .gte("created_at", since.isoformat())
            .order("created_at", desc=True)
            .limit(limit)
            .execute()
        )
        return [row["visitor_id"] for row in self._rows(response)]

    def _visitor_ids_for_sessions(self, project_id: str, session_ids: list[str]) -> list[str]:
        if not session_ids:
            return []
        response = (
            self.client.table("events")
            .select("visitor_id")
            .eq("project_id", project_id)
            .in_("session_id", session_ids)
            .not_.is_("visitor_id", "null")
            .execute()
        )
        return [row["visitor_id"] for row in self._rows(response)]

    def _visitor_events(self, project_id: str, visitor_id: str) -> list[EventRecord]:
        response = (
            self.client.table("events")
            .select("*")
            .eq("project_id", project_id)
            .eq("visitor_id", visitor_id)
            .order("created_at", desc=False)
            .execute()
        )
        return [EventRecord.model_validate(row) for row in self._rows(response)]

    def _lead_session_ids(self, project_id: str, email_fragment: str, limit: int) -> list[str | None]:
        response = (
            self.client.table("leads")
            .select("session_id")
            .eq("project_id", project_id)
            .ilike("email", f"%{email_fragment}%")
            .limit(limit)
            .execute()
        )
        return [row.get("session_id") for row in self._rows(response)]

    def _lead_for_sessions(self, project_id: str, session_ids: list[str]) -> Lead | None:
        if not session_ids:
            return None
        response = (
            self.client.table("leads")
            .select("*")
            .eq("project_id", project_id)
            .in_("session_id", session_ids)
            .limit(1)
            .execute()
        )
        rows = self._rows(response)
        return Lead.model_validate(rows[0]) if rows else None

    def _visitor_payments(self, project_id: str, visitor_id: str) -> list[Payment]:
        response = (
            self.client.table("payments")
            .select("*")
            .eq("project_id", project_id)
            .eq("visitor_id", visitor_id)
            .order("created_at", desc=False)
            .execute()
        )
        return [Payment.model_validate(row) for row in self._rows(response)]

    async def fetch_recent_event_visitor_ids(
        self, project_id: str, since: datetime, limit: int
    ) -> list[str]:
        return await run_sync_in_executor(self._recent_event_visitor_ids, project_id, since, limit)

    async def fetch_visitor_ids_for_sessions(
        self, project_id: str, session_ids: list[str]
    ) -> list[str]:
        return await run_sync_in_executor(self._visitor_ids_for_sessions, project_id, session_ids)

    async def fetch_visitor_events(self, project_id: str, visitor_id: str) -> list[EventRecord]:
        return await run_sync_in_executor(self._visitor_events, project_id, visitor_id)

    async def search_lead_session_ids(
        self, project_id: str, email_fragment: str, limit: int
    ) -> list[str | None]:
        return await run_sync_in_executor(self._lead_session_ids, project_id, email_fragment, limit)

    async def fetch_lead_for_sessions(
        self, project_id: str, session_ids: list[str]
    ) -> Lead | None:
        return await run_sync_in_executor(self._lead_for_sessions, project_id, session_ids)

    async def fetch_visitor_payments(self, project_id: str, visitor_id: str) -> list[Payment]:
        return await run_sync_in_executor(self._visitor_payments, project_id, visitor_id)
