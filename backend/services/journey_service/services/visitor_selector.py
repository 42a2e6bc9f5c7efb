"""
Visitor Selection for Customer Journeys.

This module decides which visitors a journey query covers. A query takes one
of three modes depending on the search string:

    - Email search (contains ``@``): leads whose email contains the fragment
      are resolved to visitors through the sessions they were captured in
    - Literal visitor id (any other non-empty search): used as-is, without
      checking that the visitor exists
    - Recent activity (no search): the newest events inside the date window
      are scanned and their distinct visitors kept, newest first

Every mode returns an ordered, de-duplicated list of visitor ids. Store
failures propagate as RecordStoreError; there is no partial selection.
"""

from datetime import datetime, timedelta, timezone
from typing import Callable

from loguru import logger

from services.journey_service.database.base import RecordStore
from services.journey_service.models import DateRangePreset
from services.journey_service.utils import unique_in_order


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class VisitorSelector:
    """Resolves a search string and date window into visitor ids.

    Args:
        record_store: Store to query events and leads from.
        visitor_cap: Maximum visitors returned in recent-activity mode.
        recent_event_scan: Number of newest events scanned in recent-activity mode.
        lead_search_limit: Maximum leads matched by an email search.
        clock: Returns the current time; replaced in tests.
    """

    def __init__(
        self,
        record_store: RecordStore,
        visitor_cap: int = 20,
        recent_event_scan: int = 100,
        lead_search_limit: int = 20,
        clock: Callable[[], datetime] = _utc_now,
    ):
        self.record_store = record_store
        self.visitor_cap = visitor_cap
        self.recent_event_scan = recent_event_scan
        self.lead_search_limit = lead_search_limit
        self.clock = clock

    async def select(
        self,
        project_id: str,
        search: str | None = None,
        date_range: DateRangePreset = DateRangePreset.LAST_30_DAYS,
    ) -> list[str]:
        """
        Select the visitors covered by a journey query.

        Args:
            project_id: Project scope for every store query.
            search: Email fragment, literal visitor id, or None.
            date_range: Look-back window for recent-activity mode.

        Returns:
            list[str]: Distinct visitor ids in discovery order.

        Raises:
            RecordStoreError: If any store query fails.
        """
        term = (search or "").strip()

        if "@" in term:
            logger.debug(f"Selecting visitors by lead email fragment '{term}'")
            return await self._select_by_email(project_id, term)

        if term:
            logger.debug(f"Selecting literal visitor id '{term}'")
            return [term]

        logger.debug(f"Selecting recent visitors for the last {date_range.days} days")
        return await self._select_recent(project_id, date_range)

    async def _select_by_email(self, project_id: str, email_fragment: str) -> list[str]:
        session_ids = await self.record_store.search_lead_session_ids(
            project_id, email_fragment, self.lead_search_limit
        )
        # Leads captured outside a session cannot be linked to a visitor
        session_ids = unique_in_order(session_ids)
        if not session_ids:
            return []

        visitor_ids = await self.record_store.fetch_visitor_ids_for_sessions(project_id, session_ids)
        return unique_in_order(visitor_ids)

    async def _select_recent(self, project_id: str, date_range: DateRangePreset) -> list[str]:
        since = self.clock() - timedelta(days=date_range.days)
        visitor_ids = await self.record_store.fetch_recent_event_visitor_ids(
            project_id, since, self.recent_event_scan
        )
        return unique_in_order(visitor_ids)[: self.visitor_cap]
