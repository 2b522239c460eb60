"""
Shared cache and cooldown plumbing for the dashboard services.
"""

import logging
from typing import Any, Optional

from weatherfx.cache.durable import DurableCache
from weatherfx.core.exceptions import CacheError, RateLimitedError
from weatherfx.core.models import CacheEntry
from weatherfx.services.endpoint import Endpoint
from weatherfx.services.inflight import InflightRequests
from weatherfx.services.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)


class CachedResourceService:
    """Base class for services that cache one resource per key.

    Cache freshness and the refetch cooldown are configured separately even
    where their values coincide.
    """

    def __init__(
        self,
        endpoint: Endpoint,
        store: DurableCache,
        limiter: RateLimiter,
        cache_ttl_ms: int,
        min_interval_ms: int,
        inflight: Optional[InflightRequests] = None,
    ):
        self.endpoint = endpoint
        self.store = store
        self.limiter = limiter
        self.cache_ttl_ms = cache_ttl_ms
        self.min_interval_ms = min_interval_ms
        self.inflight = inflight or InflightRequests()

    def _now(self) -> int:
        return self.store.clock()

    def _read_fresh(self, key: str) -> Optional[CacheEntry]:
        """Return the durable entry for key if it is still fresh."""
        try:
            entry = self.store.get(key)
        except CacheError as e:
            logger.warning("Durable cache read failed for %s: %s", key, e)
            return None

        if entry is None:
            return None
        if not entry.is_fresh(self._now(), self.cache_ttl_ms):
            logger.debug("Cached %s expired", key)
            return None
        return entry

    def _write(self, key: str, payload: Any, fetched_at: int) -> None:
        try:
            self.store.set(key, CacheEntry(timestamp=fetched_at, payload=payload))
        except CacheError as e:
            logger.warning("Durable cache write failed for %s: %s", key, e)

    def _ensure_allowed(self, key: str) -> None:
        """Raise RateLimitedError if key was refreshed too recently."""
        decision = self.limiter.check(key, self.min_interval_ms)
        if not decision.allowed:
            logger.info("Refresh of %s rate limited for %d ms", key, decision.retry_after_ms)
            raise RateLimitedError(key, decision.retry_after_ms)
