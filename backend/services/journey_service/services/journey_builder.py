"""
Journey Reconstruction for a Single Visitor.

Loads every event of one visitor, orders it into a timeline of touchpoints and
attaches the visitor's lead and payments. The lead is linked through the
visitor's sessions since leads carry no visitor id of their own.
"""

from decimal import Decimal

from loguru import logger

from services.journey_service.database.base import RecordStore
from services.journey_service.models import EventRecord, FirstSource, Journey, Touchpoint
from services.journey_service.utils import gather_or_cancel, unique_in_order


def to_touchpoint(event: EventRecord) -> Touchpoint:
    """Map an event field-for-field into a touchpoint."""
    return Touchpoint(
        id=event.id,
        visitor_id=event.visitor_id,
        session_id=event.session_id,
        touchpoint_type=event.event_type,
        page_url=event.page_url or "",
        referrer=event.referrer or "",
        utm_source=event.utm_source,
        utm_medium=event.utm_medium,
        utm_campaign=event.utm_campaign,
        utm_term=event.utm_term,
        utm_content=event.utm_content,
        device_type=event.device_type,
        browser=event.browser,
        os=event.os,
        country_code=event.country_code,
        city=event.city,
        created_at=event.created_at,
    )


class JourneyBuilder:
    """Builds the Journey of one visitor from the record store."""

    def __init__(self, record_store: RecordStore):
        self.record_store = record_store

    async def build(self, project_id: str, visitor_id: str) -> Journey | None:
        """
        Reconstruct the journey of a visitor.

        Args:
            project_id: Project scope for every store query.
            visitor_id: Visitor to reconstruct.

        Returns:
            Journey | None: The journey, or None when the visitor has no events.

        Raises:
            RecordStoreError: If any store query fails.
        """
        events = await self.record_store.fetch_visitor_events(project_id, visitor_id)
        if not events:
            logger.debug(f"No events for visitor {visitor_id}, skipping")
            return None

        # sorted() is stable, equal timestamps keep the store order
        events = sorted(events, key=lambda event: event.created_at)
        session_ids = unique_in_order(event.session_id for event in events)

        lead, payments = await gather_or_cancel(
            self.record_store.fetch_lead_for_sessions(project_id, session_ids),
            self.record_store.fetch_visitor_payments(project_id, visitor_id),
        )

        total_revenue = sum((payment.amount or Decimal("0") for payment in payments), Decimal("0"))
        first, last = events[0], events[-1]

        journey = Journey(
            visitor_id=visitor_id,
            first_seen=first.created_at,
            last_seen=last.created_at,
            touchpoints=[to_touchpoint(event) for event in events],
            events_count=len(events),
            lead=lead,
            payments=payments,
            total_revenue=total_revenue,
            first_source=FirstSource(
                utm_source=first.utm_source or None,
                utm_medium=first.utm_medium or None,
                utm_campaign=first.utm_campaign or None,
            ),
            devices=unique_in_order(event.device_type for event in events),
            countries=unique_in_order(event.country_code for event in events),
        )
        logger.debug(
            f"Built journey for visitor {visitor_id}: {journey.events_count} events, "
            f"{len(payments)} payments, status={journey.status.value}"
        )
        return journey
