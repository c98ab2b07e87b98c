"""
Weather package.

OpenWeatherMap client (current + forecast), forecast grouping by calendar
date, and the JSON encoding used by the cache and the HTTP surface.
"""

from services.weather_lookup.weather.client import CURRENT_FAILED, FORECAST_FAILED, WeatherClient
from services.weather_lookup.weather.grouping import group_by_date
from services.weather_lookup.weather.types import (
    ForecastMap,
    WeatherFailure,
    WeatherResult,
    WeatherSample,
    WeatherSuccess,
)

__all__ = [
    "CURRENT_FAILED",
    "FORECAST_FAILED",
    "ForecastMap",
    "WeatherClient",
    "WeatherFailure",
    "WeatherResult",
    "WeatherSample",
    "WeatherSuccess",
    "group_by_date",
]
