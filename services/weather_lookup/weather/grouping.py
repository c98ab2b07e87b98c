"""Bucket a flat forecast list by calendar date."""

from __future__ import annotations

from collections.abc import Iterable

from services.weather_lookup.weather.types import ForecastMap, WeatherSample


def group_by_date(samples: Iterable[WeatherSample]) -> ForecastMap:
    """
    Group samples by the local calendar date of their timestamp.

    Stable: buckets appear in first-occurrence order and keep input order
    inside each bucket. Nothing is sorted or deduplicated, so an unordered
    input yields the same (unordered) bucket sequence every time.
    """
    grouped: ForecastMap = {}
    for sample in samples:
        grouped.setdefault(sample.timestamp.date(), []).append(sample)
    return grouped
