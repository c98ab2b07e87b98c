"""
Location and GeocodeFailure dataclasses.

resolve() returns exactly one of the two; callers discriminate with
isinstance(result, GeocodeFailure).
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Location:
    """First geocoding match for an address."""

    lat: float
    """Latitude in decimal degrees. 0.0 when the provider value was unparsable."""

    lon: float
    """Longitude in decimal degrees. 0.0 when the provider value was unparsable."""

    display_name: str
    """Full human-readable name, e.g. 'Mount Morris, Livingston County, New York, United States'."""

    place_id: str | int | None = None
    """Provider place identifier (Nominatim returns an int)."""

    zip_code: str | None = None
    """Postal code. Absent for areas spanning several zip codes (e.g. 'Albany, NY')."""


@dataclass(frozen=True)
class GeocodeFailure:
    error: str
    """User-facing message. Always generic."""

    detail: str | None = None
    """Underlying cause (transport error, HTTP status). Logged, never shown."""


GeocodeResult = Location | GeocodeFailure
