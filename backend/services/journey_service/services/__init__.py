"""
Business Logic Services for Journey Service.

This package contains the journey engine: visitor selection, journey
reconstruction and aggregation, revenue attribution, CSV export and stale
query suppression.
"""

from .attribution_service import AttributionCalculator
from .export_service import ExportFormatter
from .journey_aggregator import JourneyAggregator, compute_stats, filter_by_status
from .journey_builder import JourneyBuilder
from .query_tracker import QueryGenerationTracker, build_view_key
from .visitor_selector import VisitorSelector

__all__ = [
    "AttributionCalculator",
    "ExportFormatter",
    "JourneyAggregator",
    "JourneyBuilder",
    "QueryGenerationTracker",
    "VisitorSelector",
    "build_view_key",
    "compute_stats",
    "filter_by_status",
]
