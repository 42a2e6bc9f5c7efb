"""
Tests for journey service settings.
"""

import pytest
from pydantic import ValidationError

from common.config import BaseServiceSettings, JourneyServiceSettings, get_settings


class TestJourneyServiceSettings:

    def test_get_settings_matches_journey_service(self):
        assert isinstance(get_settings("journey-service"), JourneyServiceSettings)
        assert type(get_settings("other")) is BaseServiceSettings

    def test_defaults(self, monkeypatch):
        for name in ("STORE_QUERY_TIMEOUT_SECONDS", "JOURNEY_VISITOR_CAP", "JOURNEY_RECENT_EVENT_SCAN",
                     "LEAD_SEARCH_LIMIT", "PORT"):
            monkeypatch.delenv(name, raising=False)

        settings = JourneyServiceSettings(_env_file=None)

        assert settings.SERVICE_NAME == "journey-service"
        assert settings.PORT == 8004
        assert settings.STORE_QUERY_TIMEOUT_SECONDS == 30.0
        assert settings.JOURNEY_VISITOR_CAP == 20
        assert settings.JOURNEY_RECENT_EVENT_SCAN == 100
        assert settings.LEAD_SEARCH_LIMIT == 20

    def test_backend_is_normalized(self, monkeypatch):
        monkeypatch.setenv("RECORD_STORE_BACKEND", " Supabase ")
        assert JourneyServiceSettings(_env_file=None).RECORD_STORE_BACKEND == "supabase"

    def test_unknown_backend_is_rejected(self, monkeypatch):
        monkeypatch.setenv("RECORD_STORE_BACKEND", "mongodb")
        with pytest.raises(ValidationError):
            JourneyServiceSettings(_env_file=None)

    @pytest.mark.parametrize("name,value", [
        ("STORE_QUERY_TIMEOUT_SECONDS", "0"),
        ("JOURNEY_VISITOR_CAP", "0"),
        ("LEAD_SEARCH_LIMIT", "5000"),
    ])
    def test_invalid_bounds_are_rejected(self, monkeypatch, name, value):
        monkeypatch.setenv(name, value)
        with pytest.raises(ValidationError):
            JourneyServiceSettings(_env_file=None)

    @pytest.mark.parametrize("value,expected", [
        ("PROD", "PROD"),
        ("production", "PROD"),
        (" dev ", "DEV"),
        ("Development", "DEV"),
    ])
    def test_environment_is_normalized(self, monkeypatch, value, expected):
        monkeypatch.setenv("ENVIRONMENT", value)
        assert JourneyServiceSettings(_env_file=None).ENVIRONMENT == expected
