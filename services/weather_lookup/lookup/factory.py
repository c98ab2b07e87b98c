"""Wire a LookupOrchestrator from Settings. Used by the app lifespan and the CLI."""

from __future__ import annotations

from datetime import timedelta

from services.weather_lookup.cache.store import CacheStore
from services.weather_lookup.config import Settings
from services.weather_lookup.geocoding.client import GeocodeClient
from services.weather_lookup.lookup.orchestrator import LookupOrchestrator
from services.weather_lookup.weather.client import WeatherClient


def build_orchestrator(config: Settings, cache: CacheStore) -> LookupOrchestrator:
    """
    Raises:
        UsageError: OPENWEATHER_API_KEY is not set.
    """
    return LookupOrchestrator(
        geocoder=GeocodeClient(
            base_url=config.geocoder_base_url,
            user_agent=config.geocoder_user_agent,
            timeout_s=config.geocoder_timeout_s,
        ),
        weather=WeatherClient(
            api_key=config.openweather_api_key,
            base_url=config.openweather_base_url,
            units=config.weather_units,
            timeout_s=config.weather_api_timeout_s,
        ),
        cache=cache,
        ttl=timedelta(minutes=config.cache_expiration_mins),
    )
