"""
Exchange-rate service.

Rates for a base currency are served from a session memory tier, then from
the durable cache while fresh, and only then refreshed through the endpoint,
subject to the refetch cooldown.
"""

import logging
from typing import Any, Iterable, Mapping, Optional, Sequence

from weatherfx.cache.durable import DurableCache
from weatherfx.cache.memory import MemoryCache
from weatherfx.core.config import MINUTE_MS
from weatherfx.core.models import (
    DEFAULT_TARGET_CURRENCIES,
    ConversionRow,
    ExchangeRateSet,
)
from weatherfx.core.validation import validate_currency_code
from weatherfx.services.base import CachedResourceService
from weatherfx.services.endpoint import Endpoint
from weatherfx.services.inflight import InflightRequests
from weatherfx.services.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)

RATES_PREFIX = "rates_"


def rates_key(base: str) -> str:
    return f"{RATES_PREFIX}{base}"


def filter_rates(rates: Mapping[str, Any], symbols: Iterable[str]) -> ExchangeRateSet:
    """Keep only the requested symbols that carry a positive numeric rate.

    Symbols the provider did not return are dropped without error.
    """
    filtered: ExchangeRateSet = {}
    for symbol in symbols:
        value = rates.get(symbol)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            continue
        if value > 0:
            filtered[symbol] = float(value)
    return filtered


class CurrencyRateService(CachedResourceService):
    """Produces exchange rates for a base currency against the target set."""

    def __init__(
        self,
        endpoint: Endpoint,
        store: DurableCache,
        limiter: RateLimiter,
        memory: Optional[MemoryCache] = None,
        target_currencies: Sequence[str] = DEFAULT_TARGET_CURRENCIES,
        cache_ttl_ms: int = 30 * MINUTE_MS,
        min_interval_ms: int = 30 * MINUTE_MS,
        inflight: Optional[InflightRequests] = None,
    ):
        """Initialize the currency service.

        Args:
            endpoint: Source of fresh rates.
            store: Durable cache shared with the rest of the session.
            limiter: Refetch cooldown guard.
            memory: Session memory tier. A private one is created if omitted.
            target_currencies: Currencies requested for every base.
            cache_ttl_ms: How long durable entries count as fresh.
            min_interval_ms: Minimum time between refreshes of one base.
            inflight: Shared in-flight request map.
        """
        super().__init__(endpoint, store, limiter, cache_ttl_ms, min_interval_ms, inflight)
        self.memory = memory if memory is not None else MemoryCache()
        self.target_currencies = tuple(target_currencies)

    async def get_rates(self, base: str) -> ExchangeRateSet:
        """Get exchange rates for base.

        Args:
            base: Base currency code (case-insensitive).

        Returns:
            Mapping of target currency code to rate.

        Raises:
            ValidationError: If base is not a currency code.
            RateLimitedError: If a refresh is needed but the cooldown is active.
            FetchFailedError: If the refresh fails.
        """
        base = validate_currency_code(base)
        key = rates_key(base)

        cached = self.memory.get(key)
        if cached is not None:
            logger.debug("Using in-memory rates for %s", base)
            return dict(cached)

        entry = self._read_fresh(key)
        if entry is not None and isinstance(entry.payload, dict):
            logger.debug("Using cached rates for %s", base)
            rates = filter_rates(entry.payload, entry.payload.keys())
            self.memory.set(key, rates)
            return dict(rates)

        rates = await self.inflight.run(key, lambda: self._refresh(base, key))
        return dict(rates)

    async def _refresh(self, base: str, key: str) -> ExchangeRateSet:
        self._ensure_allowed(key)

        logger.info("Fetching rates for %s", base)
        raw = await self.endpoint.fetch_rates(base, self.target_currencies)
        rates = filter_rates(raw, self.target_currencies)

        fetched_at = self._now()
        self.memory.set(key, rates)
        self._write(key, rates, fetched_at)
        self.limiter.mark_attempted(key, fetched_at)
        return rates

    def convert(
        self,
        rates: Mapping[str, float],
        amount: Optional[float] = None,
    ) -> list[ConversionRow]:
        """Build display rows for every target currency that has a rate.

        Args:
            rates: Rates as returned by get_rates().
            amount: Optional amount of the base currency to convert.

        Returns:
            ConversionRow per target currency, in target order.
        """
        return [
            ConversionRow(currency=code, rate=rates[code], amount=amount)
            for code in self.target_currencies
            if code in rates
        ]
