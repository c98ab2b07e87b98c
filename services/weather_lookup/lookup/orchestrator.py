"""
LookupOrchestrator: address -> geocode -> cache key -> cached-or-fresh weather.

State machine per request:

  blank address                          -> NO_QUERY
  geocode returns GeocodeFailure         -> GEOCODE_FAILED
  derive key, fetch_or_compute(key, ttl, weather.fetch):
    loader returns WeatherFailure        -> WEATHER_FAILED (nothing cached)
    cached or fresh WeatherSuccess       -> DONE (cache_hit set accordingly)

Cache key: zip code first, place id second. A zip code covers every address
in it and they share the same weather, so nearby lookups reuse one entry.
With neither available the cache is bypassed for that request.
"""

from __future__ import annotations

import logging
from datetime import timedelta

from services.weather_lookup.cache.store import CacheStore
from services.weather_lookup.geocoding.client import GeocodeClient
from services.weather_lookup.geocoding.types import GeocodeFailure, Location
from services.weather_lookup.lookup.types import LookupOutcome
from services.weather_lookup.weather.client import WeatherClient
from services.weather_lookup.weather.types import WeatherFailure, WeatherSuccess

logger = logging.getLogger(__name__)


def derive_cache_key(location: Location) -> str | None:
    """Return the zip code, else the place id, else None."""
    if location.zip_code:
        return location.zip_code
    if location.place_id is not None and location.place_id != "":
        return str(location.place_id)
    return None


class LookupOrchestrator:
    """
    Drives one lookup end to end. Never raises for upstream failures.

    Usage:
        orchestrator = LookupOrchestrator(geocoder, weather, cache, ttl=timedelta(minutes=30))
        outcome = await orchestrator.lookup("123 Chapel Street, Mount Morris, NY")
    """

    def __init__(
        self,
        geocoder: GeocodeClient,
        weather: WeatherClient,
        cache: CacheStore,
        ttl: timedelta,
    ) -> None:
        self._geocoder = geocoder
        self._weather = weather
        self._cache = cache
        self._ttl = ttl

    async def lookup(self, address: str | None) -> LookupOutcome:
        if address is None or not address.strip():
            return LookupOutcome.no_query()

        location = await self._geocoder.resolve(address)
        if isinstance(location, GeocodeFailure):
            logger.info("Lookup %r: geocode failed (%s)", address, location.detail)
            return LookupOutcome.geocode_failed(location.error)

        key = derive_cache_key(location)

        failure: WeatherFailure | None = None
        loaded = False

        async def load() -> WeatherSuccess | None:
            nonlocal failure, loaded
            loaded = True
            result = await self._weather.fetch(location.lat, location.lon)
            if isinstance(result, WeatherFailure):
                failure = result
                return None
            return result

        if key is None:
            logger.info("Lookup %r: no zip code or place id, bypassing cache", address)
            weather = await load()
        else:
            weather = await self._cache.fetch_or_compute(key, self._ttl, load)

        if weather is None:
            logger.info(
                "Lookup %r: weather failed (provider status=%s)",
                address,
                failure.provider_status if failure else None,
            )
            return LookupOutcome.weather_failed(failure.error)

        logger.info("Lookup %r: done key=%s cache_hit=%s", address, key, not loaded)
        return LookupOutcome.done(location, weather, cache_hit=not loaded, cache_key=key)
