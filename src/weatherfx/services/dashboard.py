"""
Dashboard session.

A Dashboard owns the caches, the rate limiter, and both data services for
one client session. It is constructed once, swept at startup before any
fetch runs, and torn down on exit or on an explicit cache clear.
"""

import logging
from typing import Any, Optional

from weatherfx.cache.durable import DurableCache
from weatherfx.cache.memory import MemoryCache
from weatherfx.core.config import Settings
from weatherfx.core.exceptions import CacheError
from weatherfx.core.models import ConversionRow, ExchangeRateSet, WeatherSnapshot
from weatherfx.services.currency import RATES_PREFIX, CurrencyRateService
from weatherfx.services.endpoint import Endpoint
from weatherfx.services.inflight import InflightRequests
from weatherfx.services.rate_limiter import MARKER_PREFIX, RateLimiter
from weatherfx.services.weather import WEATHER_PREFIX, WeatherService

logger = logging.getLogger(__name__)

RATES_MARKER_PREFIX = f"{MARKER_PREFIX}{RATES_PREFIX}"
WEATHER_MARKER_PREFIX = f"{MARKER_PREFIX}{WEATHER_PREFIX}"


def create_endpoint(settings: Settings, direct: bool = False) -> Endpoint:
    """Create the endpoint a dashboard fetches through.

    Args:
        settings: Active settings.
        direct: Call the upstream providers directly instead of the proxy.
            Requires both API keys in settings.
    """
    if direct:
        from weatherfx.proxy.backend import ProxyBackend

        return ProxyBackend.from_settings(settings)

    from weatherfx.collectors.proxy import ProxyClient

    return ProxyClient(settings.proxy_url, timeout=settings.request_timeout)


def sweep_expired(store: DurableCache, settings: Settings) -> int:
    """Remove expired entries and rate limit markers of both domains.

    Cached data expires with the freshness window; markers expire with the
    refetch interval, so a marker outlives its entry when the interval is
    longer.

    Returns:
        Number of entries removed.

    Raises:
        CacheError: If the store cannot be read or written.
    """
    removed = store.sweep((RATES_PREFIX,), settings.rates_cache_ttl_ms)
    removed += store.sweep((RATES_MARKER_PREFIX,), settings.rates_min_interval_ms)
    removed += store.sweep((WEATHER_PREFIX,), settings.weather_cache_ttl_ms)
    removed += store.sweep((WEATHER_MARKER_PREFIX,), settings.weather_min_interval_ms)
    if removed:
        logger.info("Removed %d expired cache entries", removed)
    return removed


class Dashboard:
    """One client session of the weather and exchange-rate dashboard."""

    def __init__(
        self,
        endpoint: Endpoint,
        store: DurableCache,
        settings: Optional[Settings] = None,
    ):
        """Initialize the dashboard.

        Args:
            endpoint: Source of fresh data.
            store: Durable cache for this session.
            settings: Cache windows and target currencies. Defaults apply
                when omitted.
        """
        self.settings = settings or Settings()
        self.endpoint = endpoint
        self.store = store
        self.memory = MemoryCache()
        self.limiter = RateLimiter(store)
        self.inflight = InflightRequests()

        self.currency = CurrencyRateService(
            endpoint,
            store,
            self.limiter,
            memory=self.memory,
            target_currencies=self.settings.target_currencies,
            cache_ttl_ms=self.settings.rates_cache_ttl_ms,
            min_interval_ms=self.settings.rates_min_interval_ms,
            inflight=self.inflight,
        )
        self.weather = WeatherService(
            endpoint,
            store,
            self.limiter,
            cache_ttl_ms=self.settings.weather_cache_ttl_ms,
            min_interval_ms=self.settings.weather_min_interval_ms,
            inflight=self.inflight,
        )
        self._started = False

    @classmethod
    def from_settings(cls, settings: Settings, direct: bool = False) -> "Dashboard":
        """Build a dashboard with a durable cache at settings.cache_path."""
        store = DurableCache(settings.cache_path)
        return cls(create_endpoint(settings, direct=direct), store, settings)

    def startup(self) -> int:
        """Sweep expired entries of both domains. Runs at most once.

        Returns:
            Number of entries removed.
        """
        if self._started:
            return 0

        self._started = True
        try:
            return sweep_expired(self.store, self.settings)
        except CacheError as e:
            logger.warning("Startup sweep failed: %s", e)
            return 0

    async def weather_for(self, city: str) -> WeatherSnapshot:
        self.startup()
        return await self.weather.get_weather(city)

    async def rates_for(self, base: str) -> ExchangeRateSet:
        self.startup()
        return await self.currency.get_rates(base)

    async def conversions(self, base: str, amount: Optional[float] = None) -> list[ConversionRow]:
        """Fetch rates for base and build the conversion rows for display."""
        rates = await self.rates_for(base)
        return self.currency.convert(rates, amount)

    def clear_cache(self) -> int:
        """Remove every durable entry and drop the memory tier.

        Dependent views fetch again on their next use.

        Returns:
            Number of durable entries removed.
        """
        removed = self.store.clear_all()
        self.memory.clear()
        logger.info("Cache cleared, removed %d entries", removed)
        return removed

    async def close(self) -> None:
        await self.endpoint.close()

    async def __aenter__(self) -> "Dashboard":
        self.startup()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()
