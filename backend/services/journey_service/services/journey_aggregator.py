"""
Journey Aggregation Service.

This module fans out journey reconstruction over the selected visitors, applies
the status filter and summarizes the population in JourneyStats.

Key Features:
    - Concurrent journey builds with fail-fast semantics: the first failure
      cancels every build still in flight and aborts the whole query
    - Status filtering applied after reconstruction
    - Stats computed over the unfiltered population, so filtering the view
      never changes the totals

Example:
    ```python
    aggregator = JourneyAggregator(selector, builder)
    result = await aggregator.run_query(
        JourneyQuery(project_id="proj-123", status_filter=StatusFilter.CUSTOMERS)
    )
    print(result.stats.total_visitors, len(result.journeys))
    ```

Note:
    There is no partial-success path. A RecordStoreError raised by any single
    visitor's build is raised by ``aggregate`` and ``run_query`` unchanged.
"""

import math
from collections.abc import Iterable, Sequence
from decimal import Decimal

from loguru import logger

from services.journey_service.models import (
    Journey,
    JourneyQuery,
    JourneyQueryResult,
    JourneyStats,
    StatusFilter,
)
from services.journey_service.utils import gather_or_cancel

from .journey_builder import JourneyBuilder
from .visitor_selector import VisitorSelector

EMPTY_RESULT_MESSAGE = "No journeys found"


def round_half_up(value: float, digits: int = 1) -> float:
    """Round halves upward, as the dashboard does for average touchpoints."""
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def filter_by_status(journeys: Iterable[Journey], status_filter: StatusFilter) -> list[Journey]:
    """
    Keep the journeys matching a status filter.

    ``customers`` keeps every journey with a payment, with or without a lead.
    ``leads`` and ``visitors`` exclude journeys with payments.
    """
    journeys = list(journeys)
    if status_filter == StatusFilter.VISITORS:
        return [j for j in journeys if j.lead is None and not j.payments]
    if status_filter == StatusFilter.LEADS:
        return [j for j in journeys if j.lead is not None and not j.payments]
    if status_filter == StatusFilter.CUSTOMERS:
        return [j for j in journeys if j.payments]
    return journeys


def compute_stats(journeys: Sequence[Journey]) -> JourneyStats:
    """Summarize a journey population. Safe on an empty population."""
    total_visitors = len(journeys)
    if total_visitors == 0:
        return JourneyStats()

    total_leads = sum(1 for j in journeys if j.lead is not None)
    total_customers = sum(1 for j in journeys if j.payments)
    total_revenue = sum((j.total_revenue for j in journeys), Decimal("0"))
    avg_touchpoints = sum(len(j.touchpoints) for j in journeys) / total_visitors

    return JourneyStats(
        total_visitors=total_visitors,
        total_leads=total_leads,
        total_customers=total_customers,
        total_revenue=total_revenue,
        avg_touchpoints=round_half_up(avg_touchpoints),
        conversion_rate=total_leads / total_visitors * 100,
    )


class JourneyAggregator:
    """Runs journey queries end to end.

    Args:
        selector: Resolves a query into visitor ids.
        builder: Reconstructs one visitor's journey.
    """

    def __init__(self, selector: VisitorSelector, builder: JourneyBuilder):
        self.selector = selector
        self.builder = builder

    async def build_all(self, project_id: str, visitor_ids: Sequence[str]) -> list[Journey]:
        """
        Build every visitor's journey concurrently.

        Visitors without events are dropped. Results keep the order of
        ``visitor_ids``.

        Raises:
            RecordStoreError: From the first failing build. Builds still
                running at that point are cancelled.
        """
        results = await gather_or_cancel(
            *(self.builder.build(project_id, visitor_id) for visitor_id in visitor_ids)
        )

        return [journey for journey in results if journey is not None]

    async def aggregate(
        self,
        project_id: str,
        visitor_ids: Sequence[str],
        status_filter: StatusFilter = StatusFilter.ALL,
    ) -> JourneyQueryResult:
        """
        Build, filter and summarize the journeys of the given visitors.

        Args:
            project_id: Project scope for every store query.
            visitor_ids: Visitors to reconstruct.
            status_filter: Filter applied to the returned journeys only.

        Returns:
            JourneyQueryResult: Filtered journeys with stats over all of them.
                An empty filtered list is flagged with ``is_empty`` and a message.
        """
        journeys = await self.build_all(project_id, visitor_ids)
        stats = compute_stats(journeys)
        filtered = filter_by_status(journeys, status_filter)

        logger.info(
            f"Aggregated {len(visitor_ids)} visitors into {len(journeys)} journeys, "
            f"{len(filtered)} after '{status_filter.value}' filter"
        )

        if not filtered:
            logger.info(f"No journeys matched for project {project_id}")
            return JourneyQueryResult(
                journeys=[], stats=stats, is_empty=True, message=EMPTY_RESULT_MESSAGE
            )

        return JourneyQueryResult(journeys=filtered, stats=stats)

    async def run_query(self, query: JourneyQuery, query_token: int | None = None) -> JourneyQueryResult:
        """
        Run the full pipeline for a journey query.

        Args:
            query: Explicit query parameters.
            query_token: Generation token echoed back in the result.

        Returns:
            JourneyQueryResult: The query result tagged with ``query_token``.

        Raises:
            RecordStoreError: If any store query fails.
        """
        logger.info(
            f"Running journey query for project {query.project_id} "
            f"(search={query.search!r}, range={query.date_range.value}, "
            f"status={query.status_filter.value})"
        )
        visitor_ids = await self.selector.select(query.project_id, query.search, query.date_range)
        result = await self.aggregate(query.project_id, visitor_ids, query.status_filter)
        return result.model_copy(update={"query_token": query_token})
