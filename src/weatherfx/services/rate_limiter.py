"""
Per-resource refresh cooldown.

Markers live in the durable cache next to the entries they guard, under
``rateLimit_<resource key>``. Checking never writes; the caller marks a
resource only after its fetch-and-cache cycle has succeeded.
"""

import logging
from typing import Optional

from weatherfx.cache.durable import DurableCache
from weatherfx.core.exceptions import CacheError
from weatherfx.core.models import RateLimitDecision, RateLimitMarker

logger = logging.getLogger(__name__)

MARKER_PREFIX = "rateLimit_"


def marker_key(resource_key: str) -> str:
    return f"{MARKER_PREFIX}{resource_key}"


class RateLimiter:
    """Rejects refreshes of a resource that was refreshed too recently."""

    def __init__(self, store: DurableCache):
        self.store = store

    def _last_attempt(self, resource_key: str) -> Optional[int]:
        try:
            data = self.store.get_json(marker_key(resource_key))
        except CacheError as e:
            logger.warning("Rate limit marker unreadable for %s: %s", resource_key, e)
            return None

        if data is None:
            return None

        try:
            return RateLimitMarker.from_dict(data).last_attempt
        except ValueError:
            logger.debug("Ignoring malformed rate limit marker for %s", resource_key)
            return None

    def check(self, resource_key: str, min_interval_ms: int) -> RateLimitDecision:
        """Decide whether a refresh of resource_key may proceed.

        Args:
            resource_key: Key of the guarded resource, e.g. ``rates_USD``.
            min_interval_ms: Minimum time between successful refreshes.

        Returns:
            RateLimitDecision; when not allowed, ``retry_after_ms`` is the
            remaining cooldown.
        """
        last_attempt = self._last_attempt(resource_key)
        if last_attempt is None:
            return RateLimitDecision(allowed=True)

        elapsed = self.store.clock() - last_attempt
        if elapsed < min_interval_ms:
            return RateLimitDecision(allowed=False, retry_after_ms=min_interval_ms - elapsed)
        return RateLimitDecision(allowed=True)

    def is_allowed(self, resource_key: str, min_interval_ms: int) -> bool:
        return self.check(resource_key, min_interval_ms).allowed

    def retry_after(self, resource_key: str, min_interval_ms: int) -> int:
        """Return milliseconds until a refresh is allowed (0 if it already is)."""
        return self.check(resource_key, min_interval_ms).retry_after_ms

    def mark_attempted(self, resource_key: str, now: Optional[int] = None) -> None:
        """Record a successful refresh of resource_key.

        Args:
            resource_key: Key of the refreshed resource.
            now: Attempt time in epoch ms. Defaults to the store's clock.
        """
        if now is None:
            now = self.store.clock()
        try:
            self.store.set_json(marker_key(resource_key), RateLimitMarker(now).to_dict())
        except CacheError as e:
            logger.warning("Could not record rate limit marker for %s: %s", resource_key, e)
