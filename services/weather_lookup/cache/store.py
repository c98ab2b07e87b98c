"""
Weather result cache: fetch-or-compute with TTL, failures never stored.

Two backends:
  RedisCacheStore   shared across processes; keys weather_lookup:{key}, JSON values
  MemoryCacheStore  process-local dict; used when REDIS_URL is empty and in tests

Only WeatherSuccess values are written. A loader returning None is a miss
signal: nothing is stored and the next call runs the loader again.

No single-flight: two concurrent misses on the same key both run the loader
and both write, last write wins. Loaders are idempotent reads of upstream
weather, so the cost is a duplicate API call, not a wrong answer.
"""

from __future__ import annotations

import json
import logging
import math
import time
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from dataclasses import replace
from datetime import timedelta

from services.weather_lookup.weather.serialization import from_payload, to_payload
from services.weather_lookup.weather.types import WeatherSuccess

logger = logging.getLogger(__name__)

_KEY_PREFIX = "weather_lookup"

# In-process store bounds
_MEMORY_SWEEP_INTERVAL_S = 60.0
_MEMORY_MAX_ENTRIES = 10_000

Loader = Callable[[], Awaitable[WeatherSuccess | None]]


def _redis_key(key: str) -> str:
    return f"{_KEY_PREFIX}:{key}"


class CacheStore(ABC):
    """
    Key -> WeatherSuccess store with per-entry TTL.

    Usage:
        result = await store.fetch_or_compute("14510", timedelta(minutes=30), loader)
    """

    @abstractmethod
    async def get(self, key: str) -> WeatherSuccess | None:
        """Return the live entry for key, or None on miss / expiry / backend error."""

    @abstractmethod
    async def set(self, key: str, value: WeatherSuccess, ttl: timedelta) -> None:
        """Store value until now + ttl. A non-positive ttl stores nothing."""

    @abstractmethod
    async def invalidate(self, key: str) -> None:
        """Drop the entry for key, if any."""

    async def fetch_or_compute(
        self,
        key: str,
        ttl: timedelta,
        loader: Loader,
    ) -> WeatherSuccess | None:
        """
        Serve key from cache, or run loader once and cache its result.

        Returns None (and caches nothing) when the loader returns None.
        """
        cached = await self.get(key)
        if cached is not None:
            logger.debug("Weather cache hit: %s", key)
            return cached

        logger.debug("Weather cache miss: %s", key)
        value = await loader()
        if value is None:
            return None

        await self.set(key, value, ttl)
        return value


def _detached(value: WeatherSuccess) -> WeatherSuccess:
    """Copy the forecast containers; samples are frozen and can be shared."""
    return replace(value, forecast={day: list(slots) for day, slots in value.forecast.items()})


class MemoryCacheStore(CacheStore):
    """
    In-process store.

    Expired entries are dropped when read, and swept in bulk on write once
    the earliest expiry has passed (at most once per sweep interval). Past
    max_entries the oldest write is evicted.

    Values are copied on the way in and out, so callers may mutate the
    forecast they get back without touching the cached entry.
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        max_entries: int = _MEMORY_MAX_ENTRIES,
    ) -> None:
        """
        Args:
            clock:       Monotonic seconds source; injectable so tests can advance time.
            max_entries: Hard cap on stored keys.
        """
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self._clock = clock
        self._max_entries = max_entries
        self._entries: dict[str, tuple[float, WeatherSuccess]] = {}
        self._next_expiry = math.inf
        self._last_sweep = clock()

    def __len__(self) -> int:
        return len(self._entries)

    async def get(self, key: str) -> WeatherSuccess | None:
        entry = self._entries.get(key)
        if entry is None:
            return None

        expires_at, value = entry
        if self._clock() >= expires_at:
            self._entries.pop(key, None)
            return None
        return _detached(value)

    async def set(self, key: str, value: WeatherSuccess, ttl: timedelta) -> None:
        seconds = ttl.total_seconds()
        if seconds <= 0:
            return

        now = self._clock()
        # Re-inserting moves the key to the back of the eviction order
        self._entries.pop(key, None)
        if now >= self._next_expiry and now - self._last_sweep >= _MEMORY_SWEEP_INTERVAL_S:
            self._sweep(now)

        while len(self._entries) >= self._max_entries:
            oldest = next(iter(self._entries))
            del self._entries[oldest]
            logger.debug("Weather memory cache full, evicted: %s", oldest)

        expires_at = now + seconds
        self._entries[key] = (expires_at, _detached(value))
        self._next_expiry = min(self._next_expiry, expires_at)
        logger.debug("Weather cached: key=%s ttl=%ds", key, seconds)

    async def invalidate(self, key: str) -> None:
        self._entries.pop(key, None)

    def _sweep(self, now: float) -> None:
        expired = [k for k, (expires_at, _) in self._entries.items() if now >= expires_at]
        for k in expired:
            del self._entries[k]

        self._last_sweep = now
        self._next_expiry = min((expires_at for expires_at, _ in self._entries.values()), default=math.inf)
        logger.debug("Weather memory cache swept: expired=%d live=%d", len(expired), len(self._entries))


class RedisCacheStore(CacheStore):
    """
    Redis-backed store.

    All operations degrade gracefully: a None client or a Redis error is a
    miss on read and a skipped write on set.
    """

    def __init__(self, redis) -> None:
        """
        Args:
            redis: An async Redis client (redis.asyncio compatible), created
                   with decode_responses=True. May be None.
        """
        self._redis = redis

    async def get(self, key: str) -> WeatherSuccess | None:
        if self._redis is None:
            return None

        redis_key = _redis_key(key)
        try:
            raw = await self._redis.get(redis_key)
        except Exception:
            logger.warning("Weather cache GET failed for key=%s", redis_key, exc_info=True)
            return None

        if raw is None:
            return None

        try:
            return from_payload(json.loads(raw))
        except (KeyError, TypeError, ValueError):
            logger.warning("Weather cache entry unreadable, ignoring: key=%s", redis_key, exc_info=True)
            return None

    async def set(self, key: str, value: WeatherSuccess, ttl: timedelta) -> None:
        if self._redis is None:
            return

        seconds = int(ttl.total_seconds())
        if seconds <= 0:
            return

        redis_key = _redis_key(key)
        try:
            await self._redis.set(redis_key, json.dumps(to_payload(value)), ex=seconds)
            logger.debug("Weather cached: key=%s ttl=%ds", redis_key, seconds)
        except Exception:
            logger.warning("Weather cache SET failed for key=%s", redis_key, exc_info=True)

    async def invalidate(self, key: str) -> None:
        if self._redis is None:
            return

        redis_key = _redis_key(key)
        try:
            await self._redis.delete(redis_key)
            logger.debug("Weather cache invalidated: %s", redis_key)
        except Exception:
            logger.warning("Weather cache DELETE failed for key=%s", redis_key, exc_info=True)
