"""Tests for the WeatherSuccess JSON encoding shared by the cache and the API."""

from __future__ import annotations

import json
from datetime import date, timedelta

import pytest

from services.weather_lookup.weather.serialization import from_payload, to_payload
from services.weather_lookup.tests.conftest import make_weather


class TestToPayload:
    def test_shape(self):
        payload = to_payload(make_weather(slot_count=5))

        assert payload["units"] == "imperial"
        assert payload["current"]["temp"] == 75.0
        assert payload["current"]["location_name"] == "Mount Morris"
        assert payload["current"]["timestamp"] == "2024-05-31T20:00:00-04:00"
        assert [b["date"] for b in payload["forecast"]] == ["2024-05-31", "2024-06-01"]
        assert len(payload["forecast"][1]["slots"]) == 3

    def test_json_serializable(self):
        json.dumps(to_payload(make_weather()))


class TestFromPayload:
    def test_restores_dates_and_offsets(self):
        original = make_weather(slot_count=5)
        restored = from_payload(json.loads(json.dumps(to_payload(original))))

        assert restored == original
        assert list(restored.forecast) == [date(2024, 5, 31), date(2024, 6, 1)]
        assert restored.current.timestamp.utcoffset() == timedelta(hours=-4)

    def test_missing_current_raises(self):
        with pytest.raises(KeyError):
            from_payload({"forecast": [], "units": "imperial"})

    def test_bad_date_raises(self):
        payload = to_payload(make_weather())
        payload["forecast"][0]["date"] = "not-a-date"
        with pytest.raises(ValueError):
            from_payload(payload)
