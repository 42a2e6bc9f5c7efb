"""
Domain models for the customer journey service.
"""

from .journey import (
    AttributionEntry,
    AttributionReport,
    DateRangePreset,
    EventRecord,
    FirstSource,
    Journey,
    JourneyExport,
    JourneyQuery,
    JourneyQueryResult,
    JourneyStats,
    JourneyStatus,
    Lead,
    Payment,
    StatusFilter,
    Touchpoint,
)

__all__ = [
    "AttributionEntry",
    "AttributionReport",
    "DateRangePreset",
    "EventRecord",
    "FirstSource",
    "Journey",
    "JourneyExport",
    "JourneyQuery",
    "JourneyQueryResult",
    "JourneyStats",
    "JourneyStatus",
    "Lead",
    "Payment",
    "StatusFilter",
    "Touchpoint",
]
