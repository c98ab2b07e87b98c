"""
Cache package.

Weather results keyed by zip code (or place id), Redis-backed in deployed
environments and in-memory otherwise.
"""

from services.weather_lookup.cache.store import CacheStore, MemoryCacheStore, RedisCacheStore

__all__ = ["CacheStore", "MemoryCacheStore", "RedisCacheStore"]
