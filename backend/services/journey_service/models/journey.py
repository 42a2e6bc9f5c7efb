"""
Journey Domain Models

This module defines the immutable Pydantic models the journey engine works
with. Records read from the store (EventRecord, Lead, Payment) are validated
into these models at the store boundary, so the rest of the engine never
handles raw rows or dictionaries.

Models:
    - EventRecord / Lead / Payment: records as read from the store
    - Touchpoint: one event positioned in a visitor's timeline
    - Journey: all touchpoints, the lead and the payments of one visitor
    - JourneyStats: summary over every reconstructed journey of a query
    - JourneyQuery / JourneyQueryResult: explicit query parameters and result
    - AttributionEntry / AttributionReport: revenue attribution views
    - JourneyExport: CSV export payload

Example:
    ```python
    from services.journey_service.models import JourneyQuery, StatusFilter

    query = JourneyQuery(project_id="proj-1", search="ana@", status_filter=StatusFilter.LEADS)
    ```
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator


class StatusFilter(str, Enum):
    """Post-hoc filter applied to reconstructed journeys."""

    ALL = "all"
    VISITORS = "visitors"
    LEADS = "leads"
    CUSTOMERS = "customers"


class JourneyStatus(str, Enum):
    """Funnel stage reached by a visitor."""

    VISITOR = "visitor"
    LEAD = "lead"
    CUSTOMER = "customer"


class DateRangePreset(str, Enum):
    """Look-back window used to discover recent visitors."""

    LAST_7_DAYS = "7d"
    LAST_30_DAYS = "30d"
    LAST_90_DAYS = "90d"

    @property
    def days(self) -> int:
        return int(self.value.rstrip("d"))

    @classmethod
    def parse(cls, value: Any) -> "DateRangePreset":
        """Parse a preset, falling back to 30 days for unknown values."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.LAST_30_DAYS


class EventRecord(BaseModel):
    """Raw tracking event as read from the record store."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: str
    visitor_id: str | None = None
    session_id: str | None = None
    event_type: str
    page_url: str | None = None
    referrer: str | None = None
    utm_source: str | None = None
    utm_medium: str | None = None
    utm_campaign: str | None = None
    utm_term: str | None = None
    utm_content: str | None = None
    device_type: str | None = None
    browser: str | None = None
    os: str | None = None
    country_code: str | None = None
    city: str | None = None
    created_at: datetime


class Lead(BaseModel):
    """Captured lead. Linked to a visitor only through its session id."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: str
    email: str
    name: str | None = None
    created_at: datetime


class Payment(BaseModel):
    """Payment received from a visitor. A missing amount counts as zero."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: str
    amount: Decimal | None = None
    currency: str = "BRL"
    status: str
    customer_email: str | None = None
    visitor_id: str | None = None
    created_at: datetime


class Touchpoint(BaseModel):
    """
    One interaction in a visitor's journey, derived 1:1 from an EventRecord.

    ``page_url`` and ``referrer`` are normalized to empty strings when the
    event carried none.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    visitor_id: str | None = None
    session_id: str | None = None
    touchpoint_type: str
    page_url: str = ""
    referrer: str = ""
    utm_source: str | None = None
    utm_medium: str | None = None
    utm_campaign: str | None = None
    utm_term: str | None = None
    utm_content: str | None = None
    device_type: str | None = None
    browser: str | None = None
    os: str | None = None
    country_code: str | None = None
    city: str | None = None
    created_at: datetime


class FirstSource(BaseModel):
    """UTM attribution copied from the earliest touchpoint. All-null means direct."""

    model_config = ConfigDict(frozen=True)

    utm_source: str | None = None
    utm_medium: str | None = None
    utm_campaign: str | None = None


class Journey(BaseModel):
    """
    Chronological journey of one visitor within a query.

    A journey always has at least one touchpoint; validation rejects an
    empty timeline, so visitors without events are represented by the
    absence of a Journey rather than an empty one.

    Attributes:
        visitor_id: Opaque visitor identifier.
        first_seen / last_seen: Timestamps of the earliest and latest touchpoint.
        touchpoints: Touchpoints in ascending time order.
        events_count: Number of events the journey was built from.
        lead: The lead captured in one of the visitor's sessions, if any.
        payments: Payments in ascending time order.
        total_revenue: Sum of payment amounts.
        first_source: UTM attribution of the earliest touchpoint.
        devices / countries: Distinct values in discovery order.
    """

    model_config = ConfigDict(frozen=True)

    visitor_id: str
    first_seen: datetime
    last_seen: datetime
    touchpoints: list[Touchpoint] = Field(min_length=1)
    events_count: int
    lead: Lead | None = None
    payments: list[Payment] = Field(default_factory=list)
    total_revenue: Decimal = Decimal("0")
    first_source: FirstSource = Field(default_factory=FirstSource)
    devices: list[str] = Field(default_factory=list)
    countries: list[str] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def status(self) -> JourneyStatus:
        if self.payments:
            return JourneyStatus.CUSTOMER
        if self.lead is not None:
            return JourneyStatus.LEAD
        return JourneyStatus.VISITOR


class JourneyStats(BaseModel):
    """Summary over the unfiltered set of journeys of one query."""

    model_config = ConfigDict(frozen=True)

    total_visitors: int = 0
    total_leads: int = 0
    total_customers: int = 0
    total_revenue: Decimal = Decimal("0")
    avg_touchpoints: float = 0.0
    conversion_rate: float = 0.0


class JourneyQuery(BaseModel):
    """Explicit parameters of one journey query."""

    model_config = ConfigDict(frozen=True)

    project_id: str = Field(min_length=1)
    search: str | None = None
    date_range: DateRangePreset = DateRangePreset.LAST_30_DAYS
    status_filter: StatusFilter = StatusFilter.ALL

    @field_validator("date_range", mode="before")
    @classmethod
    def parse_date_range(cls, v: Any) -> DateRangePreset:
        return DateRangePreset.parse(v)

    @field_validator("search", mode="before")
    @classmethod
    def normalize_search(cls, v: Any) -> str | None:
        if v is None:
            return None
        stripped = str(v).strip()
        return stripped or None


class JourneyQueryResult(BaseModel):
    """Filtered journeys plus stats computed before filtering."""

    model_config = ConfigDict(frozen=True)

    journeys: list[Journey] = Field(default_factory=list)
    stats: JourneyStats = Field(default_factory=JourneyStats)
    is_empty: bool = False
    message: str | None = None
    query_token: int | None = None


class AttributionEntry(BaseModel):
    """Share of a journey's revenue credited to one source."""

    model_config = ConfigDict(frozen=True)

    source: str
    medium: str | None = None
    campaign: str | None = None
    percentage: float
    revenue: Decimal


class AttributionReport(BaseModel):
    """The four attribution views of one journey."""

    model_config = ConfigDict(frozen=True)

    visitor_id: str
    total_revenue: Decimal
    first_touch: AttributionEntry
    last_touch: AttributionEntry
    linear: list[AttributionEntry]
    time_decay: list[AttributionEntry]
    touchpoint_count: int
    payment_count: int


class JourneyExport(BaseModel):
    """Rendered CSV export of a journey list."""

    model_config = ConfigDict(frozen=True)

    filename: str
    content: bytes
    media_type: str = "text/csv"
    row_count: int
