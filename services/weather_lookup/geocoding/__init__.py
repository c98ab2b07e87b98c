"""
Geocoding package.

Resolves free-text addresses to coordinates plus the postal code and place
id used for weather cache keys.
"""

from services.weather_lookup.geocoding.client import GEOCODE_FAILED, GeocodeClient
from services.weather_lookup.geocoding.types import GeocodeFailure, GeocodeResult, Location

__all__ = ["GEOCODE_FAILED", "GeocodeClient", "GeocodeFailure", "GeocodeResult", "Location"]
