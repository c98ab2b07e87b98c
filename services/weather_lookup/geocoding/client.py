"""
GeocodeClient: free-text address to Location via OpenStreetMap Nominatim.

One remote query per call, first match only. No ranking or disambiguation:
"Springfield" resolves to whatever Nominatim ranks first.

Nominatim /search?format=json&addressdetails=1 returns:
  [
    {
      "place_id": 297926345,
      "lat": "42.7256219",
      "lon": "-77.8750134",
      "display_name": "Chapel Street, Mount Morris, ...",
      "address": {"road": "Chapel Street", "postcode": "14510", ...}
    }
  ]

Note lat/lon arrive as strings.
"""

from __future__ import annotations

import logging
import math
from typing import Any

import httpx

from services.weather_lookup.errors import UsageError
from services.weather_lookup.geocoding.types import GeocodeFailure, GeocodeResult, Location

logger = logging.getLogger(__name__)

GEOCODE_FAILED = "Failed to geocode address"

_NOMINATIM_BASE = "https://nominatim.openstreetmap.org"
_DEFAULT_USER_AGENT = "weather-lookup/0.1.0"
_API_TIMEOUT_S = 8.0


def _to_float(value: Any) -> float:
    """Parse a coordinate, falling back to 0.0 for missing or garbage values."""
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return 0.0
    return parsed if math.isfinite(parsed) else 0.0


def _parse_match(match: dict[str, Any]) -> Location:
    address = match.get("address") or {}
    return Location(
        place_id=match.get("place_id"),
        lat=_to_float(match.get("lat")),
        lon=_to_float(match.get("lon")),
        display_name=match.get("display_name") or "",
        zip_code=address.get("postcode") or None,
    )


class GeocodeClient:
    """
    Nominatim geocoder.

    Usage:
        client = GeocodeClient(user_agent="my-app/1.0")
        result = await client.resolve("123 Chapel Street, Mount Morris, NY")
        if isinstance(result, GeocodeFailure):
            ...
    """

    def __init__(
        self,
        base_url: str = _NOMINATIM_BASE,
        user_agent: str = _DEFAULT_USER_AGENT,
        timeout_s: float = _API_TIMEOUT_S,
    ) -> None:
        self._search_url = f"{base_url.rstrip('/')}/search"
        self._user_agent = user_agent
        self._timeout_s = timeout_s

    async def resolve(self, address: str | None) -> GeocodeResult:
        """
        Geocode `address` and return the first match.

        Raises:
            UsageError: address is None, empty or whitespace.

        Returns GeocodeFailure (never raises) when there is no match or the
        provider is unreachable.
        """
        if address is None or not address.strip():
            raise UsageError("Address is required")

        try:
            async with httpx.AsyncClient(timeout=self._timeout_s) as client:
                resp = await client.get(
                    self._search_url,
                    params={
                        "q": address,
                        "format": "json",
                        "addressdetails": 1,
                        "limit": 1,
                    },
                    headers={"User-Agent": self._user_agent},
                )
                resp.raise_for_status()
                matches = resp.json()
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "Geocoder returned %d for address=%r: %s",
                exc.response.status_code,
                address,
                exc.response.text[:200],
            )
            return GeocodeFailure(GEOCODE_FAILED, detail=f"HTTP {exc.response.status_code}")
        except httpx.HTTPError as exc:
            logger.warning("Geocoder request failed for address=%r: %r", address, exc)
            return GeocodeFailure(GEOCODE_FAILED, detail=type(exc).__name__)
        except ValueError:
            logger.warning("Geocoder returned a non-JSON body for address=%r", address)
            return GeocodeFailure(GEOCODE_FAILED, detail="invalid JSON")

        if not isinstance(matches, list) or not matches:
            logger.info("No geocoding match for address=%r", address)
            return GeocodeFailure(GEOCODE_FAILED, detail="no match")

        try:
            location = _parse_match(matches[0])
        except (AttributeError, TypeError) as exc:
            logger.warning("Geocoder returned a malformed match for address=%r: %r", address, exc)
            return GeocodeFailure(GEOCODE_FAILED, detail="malformed match")

        logger.debug(
            "Geocoded %r -> (%s, %s) zip=%s place_id=%s",
            address,
            location.lat,
            location.lon,
            location.zip_code,
            location.place_id,
        )
        return location
