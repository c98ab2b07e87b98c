"""Tests for build_orchestrator."""

from __future__ import annotations

import pytest

from services.weather_lookup.cache.store import MemoryCacheStore
from services.weather_lookup.config import Settings
from services.weather_lookup.errors import UsageError
from services.weather_lookup.lookup.factory import build_orchestrator
from services.weather_lookup.lookup.orchestrator import LookupOrchestrator


class TestBuildOrchestrator:
    def test_builds_with_key(self):
        config = Settings(openweather_api_key="test-key-123", cache_expiration_mins=5, _env_file=None)
        orchestrator = build_orchestrator(config, MemoryCacheStore())

        assert isinstance(orchestrator, LookupOrchestrator)
        assert orchestrator._ttl.total_seconds() == 300

    def test_missing_key_raises(self):
        config = Settings(openweather_api_key="", _env_file=None)

        with pytest.raises(UsageError, match="API key is required"):
            build_orchestrator(config, MemoryCacheStore())

    def test_units_passed_through(self):
        config = Settings(openweather_api_key="k", weather_units="metric", _env_file=None)
        orchestrator = build_orchestrator(config, MemoryCacheStore())

        assert orchestrator._weather.units == "metric"
