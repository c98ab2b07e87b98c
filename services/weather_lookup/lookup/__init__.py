"""
Lookup package.

Orchestrates geocoding, cache-key selection and weather fetching for one
address.
"""

from services.weather_lookup.lookup.orchestrator import LookupOrchestrator, derive_cache_key
from services.weather_lookup.lookup.types import LookupOutcome, LookupState

__all__ = ["LookupOrchestrator", "LookupOutcome", "LookupState", "derive_cache_key"]
