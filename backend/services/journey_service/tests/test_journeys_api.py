"""
Tests for the journey HTTP endpoints.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from common.exceptions import RecordStoreError
from services.journey_service.main import app
from services.journey_service.models import JourneyQueryResult, JourneyStats
from services.journey_service.services import QueryGenerationTracker
from services.journey_service.services.dependencies import (
    get_journey_aggregator,
    get_journey_builder,
    get_query_tracker,
)


@pytest.fixture
def headers(sample_project_id):
    return {"X-Project-Id": sample_project_id}


@pytest.fixture
def aggregator():
    mock = MagicMock()
    mock.run_query = AsyncMock()
    return mock


@pytest.fixture
def builder():
    mock = MagicMock()
    mock.build = AsyncMock(return_value=None)
    return mock


@pytest.fixture
def client(aggregator, builder):
    app.dependency_overrides[get_journey_aggregator] = lambda: aggregator
    app.dependency_overrides[get_journey_builder] = lambda: builder
    app.dependency_overrides[get_query_tracker] = QueryGenerationTracker
    yield TestClient(app)
    app.dependency_overrides.clear()


def result_with(journeys, **fields):
    return JourneyQueryResult(journeys=journeys, stats=JourneyStats(total_visitors=len(journeys)), **fields)


class TestListJourneys:

    def test_missing_project_header_is_rejected(self, client):
        response = client.get("/api/v1/journeys")

        assert response.status_code == 400
        assert response.json()["detail"] == "X-Project-Id header is required"

    def test_returns_journeys_and_stats(self, client, aggregator, headers, make_journey, make_payment):
        async def run_query(query, token):
            return result_with([make_journey(payments=[make_payment("99.90")])], query_token=token)

        aggregator.run_query.side_effect = run_query

        response = client.get(
            "/api/v1/journeys",
            headers=headers,
            params={"search": "ana@", "date_range": "7d", "status": "customers"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["is_empty"] is False
        assert body["query_token"] == 1
        assert set(body) == {"journeys", "stats", "is_empty", "message", "query_token"}
        assert body["stats"]["total_visitors"] == 1
        assert body["journeys"][0]["status"] == "customer"
        assert body["journeys"][0]["total_revenue"] == "99.90"

        query = aggregator.run_query.call_args.args[0]
        assert query.search == "ana@"
        assert query.date_range.value == "7d"
        assert query.status_filter.value == "customers"

    def test_unknown_date_range_falls_back_to_30_days(self, client, aggregator, headers):
        aggregator.run_query.return_value = result_with([], is_empty=True, message="No journeys found")

        response = client.get("/api/v1/journeys", headers=headers, params={"date_range": "365d"})

        assert response.status_code == 200
        assert response.json()["is_empty"] is True
        assert response.json()["message"] == "No journeys found"
        assert aggregator.run_query.call_args.args[0].date_range.value == "30d"

    def test_invalid_status_is_rejected(self, client, headers):
        response = client.get("/api/v1/journeys", headers=headers, params={"status": "churned"})

        assert response.status_code == 422

    def test_store_failure_returns_503(self, client, aggregator, headers):
        aggregator.run_query.side_effect = RecordStoreError("loading recent visitors", TimeoutError())

        response = client.get("/api/v1/journeys", headers=headers)

        assert response.status_code == 503
        assert response.json()["detail"] == "Unable to connect to record store. Please try again later."

    def test_superseded_query_returns_409(self, client, aggregator, headers):
        tracker = MagicMock()
        tracker.run_latest = AsyncMock(return_value=None)
        app.dependency_overrides[get_query_tracker] = lambda: tracker

        response = client.get("/api/v1/journeys", headers={**headers, "X-Dashboard-View": "tab-1"})

        assert response.status_code == 409
        assert tracker.run_latest.call_args.args[0].endswith(":tab-1")


class TestVisitorAttribution:

    def test_unknown_visitor_returns_404(self, client, headers):
        response = client.get("/api/v1/journeys/v-missing/attribution", headers=headers)

        assert response.status_code == 404

    def test_returns_four_models(self, client, builder, headers, make_journey, make_event, make_payment):
        builder.build.return_value = make_journey(
            events=[make_event(0, utm_source="google"), make_event(5, referrer="https://partner.com/x")],
            payments=[make_payment("100.00")],
        )

        response = client.get("/api/v1/journeys/visitor-1/attribution", headers=headers)

        assert response.status_code == 200
        body = response.json()
        assert body["first_touch"]["source"] == "google"
        assert body["last_touch"]["source"] == "partner.com"
        assert [e["source"] for e in body["linear"]] == ["google", "partner.com"]
        assert [round(e["percentage"], 1) for e in body["time_decay"]] == [33.3, 66.7]
        builder.build.assert_awaited_once()

    def test_store_failure_returns_503(self, client, builder, headers):
        builder.build.side_effect = RecordStoreError("loading events for visitor visitor-1")

        response = client.get("/api/v1/journeys/visitor-1/attribution", headers=headers)

        assert response.status_code == 503


class TestExportJourneys:

    def test_empty_export_returns_404(self, client, aggregator, headers):
        aggregator.run_query.return_value = result_with([], is_empty=True, message="No journeys found")

        response = client.get("/api/v1/journeys/export", headers=headers)

        assert response.status_code == 404
        assert response.json()["detail"] == "No journeys to export"

    def test_returns_csv_attachment(self, client, aggregator, headers, make_journey):
        aggregator.run_query.return_value = result_with([make_journey("v-1"), make_journey("v-2")])

        response = client.get("/api/v1/journeys/export", headers=headers, params={"status": "all"})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        disposition = response.headers["content-disposition"]
        assert disposition.startswith("attachment; filename=customer-journeys-")
        assert disposition.endswith(".csv")
        lines = response.text.split("\n")
        assert lines[0] == "Visitor ID,Email,First Source,Touchpoints,Revenue,First Seen,Last Seen"
        assert [line.split(",")[0] for line in lines[1:]] == ["v-1", "v-2"]


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["service"] == "journey-service"
