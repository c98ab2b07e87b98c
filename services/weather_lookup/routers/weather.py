"""
GET /weather?address=...: current conditions + forecast for a free-text address.

Outcomes:
  no address          200  {"success": true, "data": null}
  lookup succeeded    200  {"success": true, "data": {location, weather, cached}}
  geocode failed      502  {"success": false, "error": {"code": "GEOCODE_FAILED", ...}}
  weather failed      502  {"success": false, "error": {"code": "WEATHER_FAILED", ...}}
  no API key at boot  503  {"success": false, "error": {"code": "SERVICE_UNAVAILABLE", ...}}

Error messages are the generic ones from the orchestrator; provider detail
stays in the logs.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Query, Request

from services.weather_lookup.geocoding.types import Location
from services.weather_lookup.lookup.types import LookupOutcome, LookupState
from services.weather_lookup.responses import error, ok
from services.weather_lookup.weather.serialization import to_payload

logger = logging.getLogger(__name__)

router = APIRouter(tags=["weather"])

_FAILURE_CODES = {
    LookupState.GEOCODE_FAILED: "GEOCODE_FAILED",
    LookupState.WEATHER_FAILED: "WEATHER_FAILED",
}


def _location_payload(location: Location) -> dict[str, Any]:
    return {
        "name": location.display_name,
        "lat": location.lat,
        "lon": location.lon,
        "zipCode": location.zip_code,
        "placeId": location.place_id,
    }


def _outcome_payload(outcome: LookupOutcome) -> dict[str, Any]:
    return {
        "location": _location_payload(outcome.location),
        "weather": to_payload(outcome.weather),
        "cached": outcome.cache_hit,
    }


@router.get("/weather")
async def get_weather(
    request: Request,
    address: str | None = Query(default=None, max_length=256),
):
    orchestrator = request.app.state.lookup
    if orchestrator is None:
        logger.warning("GET /weather rejected: OPENWEATHER_API_KEY not set at startup")
        return error(request, 503, "SERVICE_UNAVAILABLE", "Weather lookup is not configured.")

    outcome = await orchestrator.lookup(address)

    if outcome.state is LookupState.NO_QUERY:
        return ok(request, None)

    if outcome.state is not LookupState.DONE:
        return error(request, 502, _FAILURE_CODES[outcome.state], outcome.error_message)

    return ok(request, _outcome_payload(outcome))
