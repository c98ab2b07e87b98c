"""
JSON-compatible encoding for WeatherSuccess.

Shared by the Redis cache backend and the /weather response body.

Payload shape:
  {
    "current":  {"timestamp": "2024-06-01T00:00:00-04:00", "temp": 75.0, ...},
    "forecast": [{"date": "2024-05-31", "slots": [{...}, {...}]}, ...],
    "units":    "imperial"
  }

The forecast is a list rather than an object so date order survives any
JSON consumer, not just ones that preserve key order.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from services.weather_lookup.weather.types import WeatherSample, WeatherSuccess


def sample_to_dict(sample: WeatherSample) -> dict[str, Any]:
    return {
        "timestamp": sample.timestamp.isoformat(),
        "temp": sample.temp,
        "description": sample.description,
        "icon_url": sample.icon_url,
        "high_temp": sample.high_temp,
        "low_temp": sample.low_temp,
        "location_name": sample.location_name,
    }


def sample_from_dict(raw: dict[str, Any]) -> WeatherSample:
    return WeatherSample(
        timestamp=datetime.fromisoformat(raw["timestamp"]),
        temp=raw.get("temp"),
        description=raw.get("description"),
        icon_url=raw.get("icon_url"),
        high_temp=raw.get("high_temp"),
        low_temp=raw.get("low_temp"),
        location_name=raw.get("location_name"),
    )


def to_payload(result: WeatherSuccess) -> dict[str, Any]:
    return {
        "current": sample_to_dict(result.current),
        "forecast": [
            {"date": day.isoformat(), "slots": [sample_to_dict(s) for s in slots]}
            for day, slots in result.forecast.items()
        ],
        "units": result.units,
    }


def from_payload(payload: dict[str, Any]) -> WeatherSuccess:
    """
    Rebuild a WeatherSuccess from to_payload() output.

    Raises KeyError / ValueError on malformed payloads; the cache backend
    treats those as a miss.
    """
    forecast = {
        date.fromisoformat(bucket["date"]): [sample_from_dict(s) for s in bucket["slots"]]
        for bucket in payload.get("forecast", [])
    }
    return WeatherSuccess(
        current=sample_from_dict(payload["current"]),
        forecast=forecast,
        units=payload.get("units", "imperial"),
    )
