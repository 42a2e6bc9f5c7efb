"""
Tests for visitor selection.
"""

from datetime import timedelta

import pytest

from common.exceptions import RecordStoreError
from services.journey_service.models import DateRangePreset
from services.journey_service.services.visitor_selector import VisitorSelector


@pytest.fixture
def selector(mock_record_store, base_time):
    return VisitorSelector(mock_record_store, clock=lambda: base_time)


class TestEmailSearch:
    """Searches containing @ go through leads."""

    @pytest.mark.asyncio
    async def test_resolves_lead_sessions_to_visitors(self, selector, mock_record_store, sample_project_id):
        mock_record_store.search_lead_session_ids.return_value = ["s-1", None, "s-2", "s-1"]
        mock_record_store.fetch_visitor_ids_for_sessions.return_value = ["v-2", "v-1", "v-2"]

        visitors = await selector.select(sample_project_id, "  ana@  ")

        assert visitors == ["v-2", "v-1"]
        mock_record_store.search_lead_session_ids.assert_awaited_once_with(sample_project_id, "ana@", 20)
        mock_record_store.fetch_visitor_ids_for_sessions.assert_awaited_once_with(
            sample_project_id, ["s-1", "s-2"]
        )

    @pytest.mark.asyncio
    async def test_no_matching_leads_skips_event_query(self, selector, mock_record_store, sample_project_id):
        mock_record_store.search_lead_session_ids.return_value = []

        visitors = await selector.select(sample_project_id, "nobody@example.com")

        assert visitors == []
        mock_record_store.fetch_visitor_ids_for_sessions.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_lead_search_limit_is_configurable(self, mock_record_store, sample_project_id):
        selector = VisitorSelector(mock_record_store, lead_search_limit=5)

        await selector.select(sample_project_id, "@acme.com")

        mock_record_store.search_lead_session_ids.assert_awaited_once_with(sample_project_id, "@acme.com", 5)


class TestLiteralSearch:

    @pytest.mark.asyncio
    async def test_returns_search_as_visitor_id_without_queries(
        self, selector, mock_record_store, sample_project_id
    ):
        visitors = await selector.select(sample_project_id, " visitor-xyz ")

        assert visitors == ["visitor-xyz"]
        mock_record_store.search_lead_session_ids.assert_not_awaited()
        mock_record_store.fetch_recent_event_visitor_ids.assert_not_awaited()


class TestRecentVisitors:
    """No search scans the newest events of the date window."""

    @pytest.mark.asyncio
    async def test_uses_date_window_and_scan_size(self, selector, mock_record_store, sample_project_id, base_time):
        await selector.select(sample_project_id, None, DateRangePreset.LAST_7_DAYS)

        mock_record_store.fetch_recent_event_visitor_ids.assert_awaited_once_with(
            sample_project_id, base_time - timedelta(days=7), 100
        )

    @pytest.mark.asyncio
    async def test_blank_search_is_treated_as_no_search(self, selector, mock_record_store, sample_project_id):
        mock_record_store.fetch_recent_event_visitor_ids.return_value = ["v-1"]

        assert await selector.select(sample_project_id, "   ") == ["v-1"]

    @pytest.mark.asyncio
    async def test_deduplicates_newest_first_and_caps(self, mock_record_store, sample_project_id, base_time):
        mock_record_store.fetch_recent_event_visitor_ids.return_value = ["v-3", "v-3", "v-1", "v-2", "v-1", "v-4"]
        selector = VisitorSelector(mock_record_store, visitor_cap=3, clock=lambda: base_time)

        visitors = await selector.select(sample_project_id)

        assert visitors == ["v-3", "v-1", "v-2"]

    @pytest.mark.asyncio
    async def test_store_failure_propagates(self, selector, mock_record_store, sample_project_id):
        mock_record_store.fetch_recent_event_visitor_ids.side_effect = RecordStoreError("loading recent visitors")

        with pytest.raises(RecordStoreError):
            await selector.select(sample_project_id)
