"""
Pytest configuration and fixtures for journey service tests.
"""

import os
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any, Callable
from unittest.mock import AsyncMock

import pytest

# Set test environment variables before importing modules
os.environ.setdefault("ENVIRONMENT", "DEV")
os.environ.setdefault("RECORD_STORE_BACKEND", "postgres")
os.environ.setdefault("POSTGRES_HOST", "localhost")
os.environ.setdefault("POSTGRES_PORT", "5432")
os.environ.setdefault("POSTGRES_USER", "postgres")
os.environ.setdefault("POSTGRES_PASSWORD", "postgres")
os.environ.setdefault("POSTGRES_DATABASE", "journeys_test")

from services.journey_service.models import EventRecord, FirstSource, Journey, Lead, Payment  # noqa: E402
from services.journey_service.services.journey_builder import to_touchpoint  # noqa: E402

BASE_TIME = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def sample_project_id() -> str:
    """Return a sample project ID for testing."""
    return "123e4567-e89b-12d3-a456-426614174000"


@pytest.fixture
def base_time() -> datetime:
    return BASE_TIME


@pytest.fixture
def make_event() -> Callable[..., EventRecord]:
    """Return a factory building events a given number of minutes after BASE_TIME."""
    counter = {"n": 0}

    def _make(minutes: int = 0, **fields: Any) -> EventRecord:
        counter["n"] += 1
        data: dict[str, Any] = {
            "id": f"evt-{counter['n']}",
            "visitor_id": "visitor-1",
            "session_id": "session-1",
            "event_type": "page_view",
            "page_url": "https://shop.example.com/",
            "created_at": BASE_TIME + timedelta(minutes=minutes),
        }
        data.update(fields)
        return EventRecord(**data)

    return _make


@pytest.fixture
def make_lead() -> Callable[..., Lead]:
    def _make(email: str = "ana@example.com", **fields: Any) -> Lead:
        data: dict[str, Any] = {"id": "lead-1", "email": email, "name": "Ana", "created_at": BASE_TIME}
        data.update(fields)
        return Lead(**data)

    return _make


@pytest.fixture
def make_payment() -> Callable[..., Payment]:
    counter = {"n": 0}

    def _make(amount: str | None = "100.00", minutes: int = 60, **fields: Any) -> Payment:
        counter["n"] += 1
        data: dict[str, Any] = {
            "id": f"pay-{counter['n']}",
            "amount": Decimal(amount) if amount is not None else None,
            "status": "approved",
            "visitor_id": "visitor-1",
            "created_at": BASE_TIME + timedelta(minutes=minutes),
        }
        data.update(fields)
        return Payment(**data)

    return _make


@pytest.fixture
def mock_record_store() -> AsyncMock:
    """Return a mock record store with empty results by default."""
    mock = AsyncMock()
    mock.fetch_recent_event_visitor_ids.return_value = []
    mock.fetch_visitor_ids_for_sessions.return_value = []
    mock.fetch_visitor_events.return_value = []
    mock.search_lead_session_ids.return_value = []
    mock.fetch_lead_for_sessions.return_value = None
    mock.fetch_visitor_payments.return_value = []
    return mock


@pytest.fixture
def make_journey(make_event) -> Callable[..., Journey]:
    """Return a factory assembling a Journey without going through the record store."""

    def _make(
        visitor_id: str = "visitor-1",
        events: list[EventRecord] | None = None,
        lead: Lead | None = None,
        payments: list[Payment] | None = None,
    ) -> Journey:
        events = events or [make_event(0, visitor_id=visitor_id)]
        payments = payments or []
        first = events[0]
        return Journey(
            visitor_id=visitor_id,
            first_seen=first.created_at,
            last_seen=events[-1].created_at,
            touchpoints=[to_touchpoint(event) for event in events],
            events_count=len(events),
            lead=lead,
            payments=payments,
            total_revenue=sum((p.amount or Decimal("0") for p in payments), Decimal("0")),
            first_source=FirstSource(
                utm_source=first.utm_source,
                utm_medium=first.utm_medium,
                utm_campaign=first.utm_campaign,
            ),
        )

    return _make
