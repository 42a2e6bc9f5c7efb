"""
Payments Repository for Journey Service

Read-only queries over the ``payments`` table.
"""

from sqlalchemy import select

from common.database import get_async_db_session
from common.models import Payment as PaymentRow
from services.journey_service.models import Payment

from .base import SERVICE_NAME


class PaymentsRepository:
    """Repository for payment database operations."""

    async def get_visitor_payments(self, project_id: str, visitor_id: str) -> list[Payment]:
        """Retrieve every payment of a visitor, ordered by created_at ascending."""
        async with get_async_db_session(SERVICE_NAME) as session:
            result = await session.execute(
                select(PaymentRow)
                .where(PaymentRow.project_id == project_id, PaymentRow.visitor_id == visitor_id)
                .order_by(PaymentRow.created_at.asc())
            )
            return [Payment.model_validate(row) for row in result.scalars().all()]
