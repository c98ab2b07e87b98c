"""
LookupState and LookupOutcome.

Each outcome is built through one of the four classmethod constructors, so a
data payload and an error message can never be set together.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from services.weather_lookup.geocoding.types import Location
from services.weather_lookup.weather.types import WeatherSuccess


class LookupState(str, Enum):
    NO_QUERY = "no_query"
    GEOCODE_FAILED = "geocode_failed"
    WEATHER_FAILED = "weather_failed"
    DONE = "done"


@dataclass(frozen=True)
class LookupOutcome:
    state: LookupState

    location: Location | None = None
    """Set only when state is DONE."""

    weather: WeatherSuccess | None = None
    """Set only when state is DONE."""

    cache_hit: bool = False
    """True if weather was served from the cache without calling OpenWeatherMap."""

    cache_key: str | None = None
    """Key the weather was stored under; None when caching was bypassed."""

    error_message: str | None = None
    """Generic user-facing message. Set only for the two *_FAILED states."""

    @classmethod
    def no_query(cls) -> LookupOutcome:
        return cls(state=LookupState.NO_QUERY)

    @classmethod
    def geocode_failed(cls, message: str) -> LookupOutcome:
        return cls(state=LookupState.GEOCODE_FAILED, error_message=message)

    @classmethod
    def weather_failed(cls, message: str) -> LookupOutcome:
        return cls(state=LookupState.WEATHER_FAILED, error_message=message)

    @classmethod
    def done(
        cls,
        location: Location,
        weather: WeatherSuccess,
        *,
        cache_hit: bool,
        cache_key: str | None,
    ) -> LookupOutcome:
        return cls(
            state=LookupState.DONE,
            location=location,
            weather=weather,
            cache_hit=cache_hit,
            cache_key=cache_key,
        )

    @property
    def succeeded(self) -> bool:
        return self.state is LookupState.DONE
