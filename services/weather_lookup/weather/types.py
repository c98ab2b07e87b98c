"""
WeatherSample, WeatherSuccess and WeatherFailure dataclasses.

WeatherClient.fetch() returns exactly one of WeatherSuccess / WeatherFailure.
Only WeatherSuccess is ever cached.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime


@dataclass(frozen=True)
class WeatherSample:
    """One observation (current conditions) or one forecast slot."""

    timestamp: datetime
    """Timezone-aware, in the location's UTC offset."""

    temp: float | None
    """Temperature in the request's unit system. None only if the provider omitted main.temp."""

    description: str | None = None
    """e.g. 'clear sky', 'moderate rain'."""

    icon_url: str | None = None

    high_temp: float | None = None

    low_temp: float | None = None

    location_name: str | None = None
    """Provider's name for the station/area. Set on current conditions only."""


ForecastMap = dict[date, list[WeatherSample]]
"""Calendar date -> slots, both in first-seen order. See grouping.group_by_date."""


@dataclass(frozen=True)
class WeatherSuccess:
    current: WeatherSample
    forecast: ForecastMap = field(default_factory=dict)
    units: str = "imperial"


@dataclass(frozen=True)
class WeatherFailure:
    error: str
    """Generic user-facing message."""

    provider_status: int | None = None
    """Provider `cod` (or HTTP status). None for transport errors."""

    provider_message: str | None = None
    """Provider's raw error text. Logged, never shown to the user."""


WeatherResult = WeatherSuccess | WeatherFailure
