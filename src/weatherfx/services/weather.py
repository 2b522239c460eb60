"""
Weather service.

Snapshots are served from the durable cache while fresh and otherwise
refreshed through the endpoint, subject to the refetch cooldown. This domain
has no memory tier.
"""

import logging
from typing import Optional

from weatherfx.cache.durable import DurableCache
from weatherfx.core.config import HOUR_MS
from weatherfx.core.models import WeatherSnapshot
from weatherfx.core.validation import validate_city
from weatherfx.services.base import CachedResourceService
from weatherfx.services.endpoint import Endpoint
from weatherfx.services.inflight import InflightRequests
from weatherfx.services.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)

WEATHER_PREFIX = "weather_"


def weather_key(city: str) -> str:
    return f"{WEATHER_PREFIX}{city}"


class WeatherService(CachedResourceService):
    """Produces current weather for a city."""

    def __init__(
        self,
        endpoint: Endpoint,
        store: DurableCache,
        limiter: RateLimiter,
        cache_ttl_ms: int = HOUR_MS,
        min_interval_ms: int = HOUR_MS,
        inflight: Optional[InflightRequests] = None,
    ):
        super().__init__(endpoint, store, limiter, cache_ttl_ms, min_interval_ms, inflight)

    async def get_weather(self, city: str) -> WeatherSnapshot:
        """Get current weather for city.

        Args:
            city: City name as selected by the user.

        Returns:
            WeatherSnapshot, possibly from cache.

        Raises:
            ValidationError: If the city name is empty or invalid.
            RateLimitedError: If a refresh is needed but the cooldown is active.
            CityNotFoundError: If the city cannot be geocoded.
            FetchFailedError: If the provider or the network fails.
        """
        city = validate_city(city)
        key = weather_key(city)

        entry = self._read_fresh(key)
        if entry is not None:
            try:
                snapshot = WeatherSnapshot.from_dict(entry.payload)
            except (KeyError, TypeError, ValueError):
                logger.debug("Cached weather for %s is malformed, refreshing", city)
            else:
                logger.debug("Using cached weather for %s", city)
                return snapshot

        return await self.inflight.run(key, lambda: self._refresh(city, key))

    async def _refresh(self, city: str, key: str) -> WeatherSnapshot:
        self._ensure_allowed(key)

        logger.info("Fetching weather for %s", city)
        snapshot = await self.endpoint.fetch_weather(city)

        fetched_at = self._now()
        self._write(key, snapshot.to_dict(), fetched_at)
        self.limiter.mark_attempted(key, fetched_at)
        return snapshot
