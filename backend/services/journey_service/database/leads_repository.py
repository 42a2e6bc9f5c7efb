"""
Leads Repository for Journey Service

Read-only queries over the ``leads`` table. Leads carry no visitor id; they
are matched to visitors through the session they were captured in.
"""

from sqlalchemy import select

from common.database import get_async_db_session
from common.models import Lead as LeadRow
from services.journey_service.models import Lead

from .base import SERVICE_NAME


class LeadsRepository:
    """Repository for lead database operations."""

    async def search_session_ids_by_email(
        self, project_id: str, email_fragment: str, limit: int
    ) -> list[str | None]:
        """
        Find the session ids of leads whose email contains a fragment.

        The match is a case-insensitive substring match (``ILIKE '%fragment%'``).

        Args:
            project_id: Project scope.
            email_fragment: Part of an email address, e.g. "ana@".
            limit: Maximum number of leads matched.

        Returns:
            list[str | None]: Session id of each matched lead. Leads captured
                outside a session yield None.
        """
        async with get_async_db_session(SERVICE_NAME) as session:
            result = await session.execute(
                select(LeadRow.session_id)
                .where(
                    LeadRow.project_id == project_id,
                    LeadRow.email.ilike(f"%{email_fragment}%"),
                )
                .limit(limit)
            )
            return list(result.scalars().all())

    async def get_lead_for_sessions(
        self, project_id: str, session_ids: list[str]
    ) -> Lead | None:
        """Return any one lead captured in one of the sessions, or None."""
        if not session_ids:
            return None
        async with get_async_db_session(SERVICE_NAME) as session:
            result = await session.execute(
                select(LeadRow)
                .where(LeadRow.project_id == project_id, LeadRow.session_id.in_(session_ids))
                .limit(1)
            )
            row = result.scalars().first()
            return Lead.model_validate(row) if row is not None else None
