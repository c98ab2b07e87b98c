"""
Shared test fixtures for the weather lookup test suite.

Provides:
- async FastAPI test client with the orchestrator mocked out
- factories for Location / WeatherSample / WeatherSuccess
- OpenWeatherMap and Nominatim response factories

No external services: Nominatim, OpenWeatherMap and Redis are all mocked.
"""

import os
from datetime import datetime, timedelta, timezone
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

# Ensure test env vars before any app imports
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("OPENWEATHER_API_KEY", "test-key-123")
os.environ.setdefault("REDIS_URL", "")
os.environ.setdefault("SENTRY_DSN", "")

from services.weather_lookup.cache.store import MemoryCacheStore  # noqa: E402
from services.weather_lookup.geocoding.types import Location  # noqa: E402
from services.weather_lookup.lookup.types import LookupOutcome  # noqa: E402
from services.weather_lookup.weather.grouping import group_by_date  # noqa: E402
from services.weather_lookup.weather.types import WeatherSample, WeatherSuccess  # noqa: E402

# 2024-06-01T00:00:00Z
BASE_EPOCH = 1717200000
# US Eastern daylight time
EDT_OFFSET_S = -14400
EDT = timezone(timedelta(seconds=EDT_OFFSET_S))


# ---------------------------------------------------------------------------
# FastAPI test client: orchestrator mocked, in-process cache
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_lookup():
    """Orchestrator stand-in. Tests set lookup.return_value per scenario."""
    orchestrator = MagicMock()
    orchestrator.lookup = AsyncMock(return_value=LookupOutcome.no_query())
    return orchestrator


@pytest.fixture
async def app(mock_lookup):
    """Test FastAPI app with mocked dependencies. Lifespan is not run."""
    from services.weather_lookup.main import app as _app

    _app.state.redis = None
    _app.state.cache = MemoryCacheStore()
    _app.state.lookup = mock_lookup
    _app.state.settings = __import__(
        "services.weather_lookup.config", fromlist=["settings"]
    ).settings
    return _app


@pytest.fixture
async def client(app):
    """Async HTTP client bound to the test app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# ---------------------------------------------------------------------------
# Domain factories
# ---------------------------------------------------------------------------

def make_location(**overrides: Any) -> Location:
    base = {
        "lat": 42.7256219,
        "lon": -77.8750134,
        "display_name": "Chapel Street, Mount Morris, Livingston County, New York, 14510, United States",
        "place_id": 297926345,
        "zip_code": "14510",
    }
    base.update(overrides)
    return Location(**base)


def make_sample(offset_hours: int = 0, **overrides: Any) -> WeatherSample:
    base = {
        "timestamp": datetime.fromtimestamp(BASE_EPOCH + offset_hours * 3600, tz=EDT),
        "temp": 75.0,
        "description": "clear sky",
        "icon_url": "http://openweathermap.org/img/w/01n.png",
        "high_temp": 78.1,
        "low_temp": 71.3,
    }
    base.update(overrides)
    return WeatherSample(**base)


def make_weather(slot_count: int = 5) -> WeatherSuccess:
    """Current conditions plus `slot_count` 3-hourly slots from BASE_EPOCH (local 20:00 May 31)."""
    current = make_sample(location_name="Mount Morris")
    slots = [make_sample(offset_hours=3 * k, temp=70.0 + k) for k in range(slot_count)]
    return WeatherSuccess(current=current, forecast=group_by_date(slots), units="imperial")


# ---------------------------------------------------------------------------
# Upstream response factories
# ---------------------------------------------------------------------------

def make_owm_record(
    dt: int = BASE_EPOCH,
    temp: float = 75.0,
    description: str = "clear sky",
    icon: str = "01n",
    **extra: Any,
) -> dict[str, Any]:
    """One OWM record as it appears in /weather or forecast list[]."""
    record = {
        "dt": dt,
        "weather": [{"id": 800, "main": "Clear", "description": description, "icon": icon}],
        "main": {"temp": temp, "temp_min": temp - 3.7, "temp_max": temp + 3.1, "humidity": 60},
    }
    record.update(extra)
    return record


def make_owm_current(**overrides: Any) -> dict[str, Any]:
    payload = make_owm_record(name="Mount Morris", timezone=EDT_OFFSET_S, cod=200)
    payload.update(overrides)
    return payload


def make_owm_forecast(slot_count: int = 5, tz_offset: int = EDT_OFFSET_S) -> dict[str, Any]:
    return {
        "cod": "200",
        "message": 0,
        "cnt": slot_count,
        "list": [
            make_owm_record(dt=BASE_EPOCH + k * 10800, temp=70.0 + k)
            for k in range(slot_count)
        ],
        "city": {"id": 5128581, "name": "Mount Morris", "timezone": tz_offset},
    }


def make_nominatim_match(**overrides: Any) -> dict[str, Any]:
    """Factory for one Nominatim /search result (addressdetails=1)."""
    match = {
        "place_id": 297926345,
        "lat": "42.7256219",
        "lon": "-77.8750134",
        "display_name": "Chapel Street, Mount Morris, Livingston County, New York, 14510, United States",
        "address": {
            "road": "Chapel Street",
            "village": "Mount Morris",
            "state": "New York",
            "postcode": "14510",
            "country_code": "us",
        },
    }
    match.update(overrides)
    return match


def make_http_response(payload: Any = None, status_code: int = 200) -> MagicMock:
    """httpx.Response stand-in. payload=ValueError makes .json() raise."""
    response = MagicMock()
    response.status_code = status_code
    response.text = "" if payload is None else str(payload)
    if payload is ValueError:
        response.json = MagicMock(side_effect=ValueError("Expecting value"))
    else:
        response.json = MagicMock(return_value=payload)
    response.raise_for_status = MagicMock()
    return response


def make_http_client(**get_kwargs: Any) -> AsyncMock:
    """Async-context-manager httpx.AsyncClient mock; get_kwargs configure .get."""
    mock_client = AsyncMock()
    mock_client.__aenter__ = AsyncMock(return_value=mock_client)
    mock_client.__aexit__ = AsyncMock(return_value=False)
    mock_client.get = AsyncMock(**get_kwargs)
    return mock_client
