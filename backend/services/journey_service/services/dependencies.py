"""
Service Dependency Injection for Journey Service

FastAPI dependencies that wire the journey engine to the configured record
store. The query tracker is a process-wide singleton since query tokens must
be shared by every request for the same view.
"""

from functools import lru_cache

from fastapi import Depends

from common.config import get_settings
from services.journey_service.database.base import SERVICE_NAME, RecordStore
from services.journey_service.database.dependencies import get_record_store

from .attribution_service import AttributionCalculator
from .export_service import ExportFormatter
from .journey_aggregator import JourneyAggregator
from .journey_builder import JourneyBuilder
from .query_tracker import QueryGenerationTracker
from .visitor_selector import VisitorSelector


def build_aggregator(record_store: RecordStore, service_name: str = SERVICE_NAME) -> JourneyAggregator:
    """Assemble selector, builder and aggregator over a record store."""
    settings = get_settings(service_name)
    selector = VisitorSelector(
        record_store,
        visitor_cap=settings.JOURNEY_VISITOR_CAP,
        recent_event_scan=settings.JOURNEY_RECENT_EVENT_SCAN,
        lead_search_limit=settings.LEAD_SEARCH_LIMIT,
    )
    return JourneyAggregator(selector, JourneyBuilder(record_store))


def get_journey_aggregator(record_store: RecordStore = Depends(get_record_store)) -> JourneyAggregator:
    return build_aggregator(record_store)


def get_journey_builder(record_store: RecordStore = Depends(get_record_store)) -> JourneyBuilder:
    return JourneyBuilder(record_store)


def get_attribution_calculator() -> AttributionCalculator:
    return AttributionCalculator()


def get_export_formatter() -> ExportFormatter:
    return ExportFormatter()


@lru_cache(maxsize=1)
def get_query_tracker() -> QueryGenerationTracker:
    return QueryGenerationTracker()
