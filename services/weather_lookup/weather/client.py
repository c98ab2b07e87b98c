"""
WeatherClient: OpenWeatherMap current conditions + 5 day / 3 hour forecast.

Two sequential calls per fetch:
  1. GET /weather   -> one current-conditions record
  2. GET /forecast  -> {"city": {...}, "list": [record, record, ...]}

The forecast call is only made after the current call succeeds, and a failed
forecast discards the current conditions, so callers get all or nothing.

Both endpoints report status in the body as "cod" (an int on /weather, a
string on /forecast):
  {"cod": 401, "message": "Invalid API key. Please see ..."}

Provider messages are logged and kept on WeatherFailure.provider_message;
WeatherFailure.error is always one of the two generic strings below.
A record that passes the status check but cannot be normalised (non-dict
entries, out-of-range "dt") fails that call the same way.

Record shape (both endpoints):
  {
    "dt":      1717214400,
    "weather": [{"id": 800, "main": "Clear", "description": "clear sky", "icon": "01n"}],
    "main":    {"temp": 75.0, "temp_min": 71.3, "temp_max": 78.1, ...},
    "name":    "Mount Morris"          # /weather only
  }
"""

from __future__ import annotations

import logging
import math
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Any

import httpx

from services.weather_lookup.errors import UsageError
from services.weather_lookup.weather.grouping import group_by_date
from services.weather_lookup.weather.types import (
    WeatherFailure,
    WeatherResult,
    WeatherSample,
    WeatherSuccess,
)

logger = logging.getLogger(__name__)

CURRENT_FAILED = "Failed to fetch current weather"
FORECAST_FAILED = "Failed to fetch forecast weather"

# API endpoint
_OWM_BASE = "https://api.openweathermap.org/data/2.5"
_CURRENT_ENDPOINT = "/weather"
_FORECAST_ENDPOINT = "/forecast"
_ICON_BASE = "http://openweathermap.org/img/w"

# HTTP timeout for OpenWeatherMap calls
_API_TIMEOUT_S = 8.0

# Raised by _build_sample on records that passed the cod check but are
# structurally wrong (non-dict entries, out-of-range "dt")
_MALFORMED = (AttributeError, TypeError, ValueError, OverflowError, OSError, IndexError, KeyError)


def icon_url(icon: str | None) -> str | None:
    """Map an OWM icon code ('01d') to its image URL. No network call."""
    if not icon:
        return None
    return f"{_ICON_BASE}/{icon}.png"


def _optional_float(value: Any) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _utc_offset(seconds: Any) -> tzinfo:
    """OWM reports the location's shift from UTC in seconds; default to UTC."""
    try:
        return timezone(timedelta(seconds=int(seconds)))
    except (TypeError, ValueError):
        return timezone.utc


def _provider_status(payload: dict[str, Any], http_status: int) -> int | None:
    cod = payload.get("cod", http_status)
    try:
        return int(cod)
    except (TypeError, ValueError):
        return None


def _build_sample(raw: dict[str, Any], tz: tzinfo) -> WeatherSample:
    """
    Normalise one OWM record into a WeatherSample.

    A missing "dt" means "now"; only the current-conditions record can
    legitimately lack it.
    """
    epoch = _optional_float(raw.get("dt"))
    timestamp = datetime.fromtimestamp(epoch, tz=tz) if epoch is not None else datetime.now(tz)

    weather_list = raw.get("weather") or [{}]
    primary = weather_list[0] or {}
    main = raw.get("main") or {}

    return WeatherSample(
        timestamp=timestamp,
        description=primary.get("description"),
        icon_url=icon_url(primary.get("icon")),
        temp=_optional_float(main.get("temp")),
        high_temp=_optional_float(main.get("temp_max")),
        low_temp=_optional_float(main.get("temp_min")),
        location_name=raw.get("name"),
    )


def _require_coordinate(value: Any, label: str) -> None:
    if not isinstance(value, float) or not math.isfinite(value):
        raise UsageError(f"{label} is required float value")


class WeatherClient:
    """
    OpenWeatherMap client. One unit system per instance.

    Usage:
        client = WeatherClient(api_key="...", units="imperial")
        result = await client.fetch(42.7256, -77.8750)
        if isinstance(result, WeatherFailure):
            ...
    """

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = _OWM_BASE,
        units: str = "imperial",
        timeout_s: float = _API_TIMEOUT_S,
    ) -> None:
        """
        Args:
            api_key:   OpenWeatherMap API key (OPENWEATHER_API_KEY env var).
            base_url:  API root, overridable for tests / proxies.
            units:     'imperial', 'metric' or 'standard' (Kelvin).
            timeout_s: Per-request timeout; a timeout becomes a WeatherFailure.

        Raises:
            UsageError: api_key is empty.
        """
        if not api_key:
            raise UsageError("API key is required")
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._units = units
        self._timeout_s = timeout_s

    @property
    def units(self) -> str:
        return self._units

    async def fetch(self, lat: float, lon: float) -> WeatherResult:
        """
        Fetch current conditions, then the forecast, for one coordinate pair.

        Raises:
            UsageError: lat/lon is not a finite float. Checked before any call.
        """
        _require_coordinate(lat, "Latitude")
        _require_coordinate(lon, "Longitude")

        params = {"appid": self._api_key, "lat": lat, "lon": lon, "units": self._units}

        async with httpx.AsyncClient(timeout=self._timeout_s) as client:
            current_raw = await self._get(client, _CURRENT_ENDPOINT, params, CURRENT_FAILED)
            if isinstance(current_raw, WeatherFailure):
                return current_raw

            forecast_raw = await self._get(client, _FORECAST_ENDPOINT, params, FORECAST_FAILED)
            if isinstance(forecast_raw, WeatherFailure):
                return forecast_raw

        try:
            current = _build_sample(current_raw, _utc_offset(current_raw.get("timezone")))
        except _MALFORMED as exc:
            logger.warning("OpenWeatherMap %s returned a malformed record: %r", _CURRENT_ENDPOINT, exc)
            return WeatherFailure(CURRENT_FAILED, provider_status=200, provider_message="malformed record")

        try:
            forecast_tz = _utc_offset((forecast_raw.get("city") or {}).get("timezone"))
            slots = [_build_sample(record, forecast_tz) for record in forecast_raw.get("list") or []]
        except _MALFORMED as exc:
            logger.warning("OpenWeatherMap %s returned a malformed record: %r", _FORECAST_ENDPOINT, exc)
            return WeatherFailure(FORECAST_FAILED, provider_status=200, provider_message="malformed record")

        return WeatherSuccess(current=current, forecast=group_by_date(slots), units=self._units)

    async def _get(
        self,
        client: httpx.AsyncClient,
        endpoint: str,
        params: dict[str, Any],
        failure_message: str,
    ) -> dict[str, Any] | WeatherFailure:
        """GET one endpoint; return its JSON body or a WeatherFailure."""
        try:
            resp = await client.get(f"{self._base_url}{endpoint}", params=params)
        except httpx.HTTPError as exc:
            logger.warning("OpenWeatherMap %s request failed: %r", endpoint, exc)
            return WeatherFailure(failure_message, provider_message=type(exc).__name__)

        try:
            payload = resp.json()
        except ValueError:
            logger.warning(
                "OpenWeatherMap %s returned a non-JSON body (HTTP %d)",
                endpoint,
                resp.status_code,
            )
            return WeatherFailure(failure_message, provider_status=resp.status_code)

        if not isinstance(payload, dict):
            logger.warning("OpenWeatherMap %s returned unexpected body type %s", endpoint, type(payload).__name__)
            return WeatherFailure(failure_message, provider_status=resp.status_code)

        status = _provider_status(payload, resp.status_code)
        if status != 200:
            provider_message = payload.get("message")
            logger.warning(
                "%s: OpenWeatherMap %s cod=%s message=%r",
                failure_message,
                endpoint,
                status,
                provider_message,
            )
            return WeatherFailure(
                failure_message,
                provider_status=status,
                provider_message=str(provider_message) if provider_message is not None else None,
            )

        return payload
