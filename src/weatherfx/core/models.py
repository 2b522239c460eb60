"""
Core data models for weatherfx.

This module defines the cached entry shapes, rate-limit markers, and the
normalized weather and exchange-rate payloads passed between the proxy,
the services, and the views.
"""

import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

# Currency code -> rate relative to an implicit base currency
ExchangeRateSet = dict[str, float]

DEFAULT_TARGET_CURRENCIES = (
    "CAD", "USD", "EUR", "JPY", "GBP", "AUD", "CHF", "HKD", "SGD", "SEK",
)


def epoch_ms() -> int:
    """Return the current time in epoch milliseconds."""
    return int(time.time() * 1000)


@dataclass(frozen=True)
class CacheEntry:
    """A payload together with the moment it was fetched."""

    timestamp: int  # epoch ms at fetch time, never read time
    payload: Any

    def age_ms(self, now: int) -> int:
        return now - self.timestamp

    def is_fresh(self, now: int, max_age_ms: int) -> bool:
        """Return True if the entry is younger than max_age_ms.

        Entries stamped in the future are never fresh.
        """
        return 0 <= self.age_ms(now) < max_age_ms

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {"timestamp": self.timestamp, "payload": self.payload}

    @classmethod
    def from_dict(cls, data: Any) -> "CacheEntry":
        """Create from a stored dictionary.

        Raises:
            ValueError: If the data is not shaped like a cache entry.
        """
        if not isinstance(data, dict) or "payload" not in data:
            raise ValueError("not a cache entry")
        timestamp = data.get("timestamp")
        if isinstance(timestamp, bool) or not isinstance(timestamp, (int, float)):
            raise ValueError("cache entry has no numeric timestamp")
        return cls(timestamp=int(timestamp), payload=data["payload"])


@dataclass(frozen=True)
class RateLimitMarker:
    """Records when a resource was last successfully refreshed."""

    last_attempt: int  # epoch ms

    def to_dict(self) -> dict:
        return {"last_attempt": self.last_attempt}

    @classmethod
    def from_dict(cls, data: Any) -> "RateLimitMarker":
        """Create from a stored dictionary.

        Raises:
            ValueError: If the data is not shaped like a marker.
        """
        if not isinstance(data, dict):
            raise ValueError("not a rate limit marker")
        last_attempt = data.get("last_attempt")
        if isinstance(last_attempt, bool) or not isinstance(last_attempt, (int, float)):
            raise ValueError("rate limit marker has no numeric last_attempt")
        return cls(last_attempt=int(last_attempt))


@dataclass(frozen=True)
class RateLimitDecision:
    """Outcome of a rate limit check."""

    allowed: bool
    retry_after_ms: int = 0


@dataclass(frozen=True)
class WeatherSnapshot:
    """Normalized subset of current-conditions provider data."""

    name: str
    main_temp: float  # Celsius
    description: str
    observed_at: int  # unix seconds

    @property
    def rounded_temp(self) -> int:
        return round(self.main_temp)

    @property
    def observed_datetime(self) -> datetime:
        """Return the observation time as a local datetime."""
        return datetime.fromtimestamp(self.observed_at)

    def to_dict(self) -> dict:
        """Convert to dictionary for caching and the proxy wire format."""
        return {
            "name": self.name,
            "main_temp": self.main_temp,
            "description": self.description,
            "observed_at": self.observed_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "WeatherSnapshot":
        """Create from dictionary (cache or proxy response).

        Raises:
            KeyError, TypeError, ValueError: If required fields are missing
                or have the wrong type.
        """
        return cls(
            name=str(data["name"]),
            main_temp=float(data["main_temp"]),
            description=str(data["description"]),
            observed_at=int(data["observed_at"]),
        )


@dataclass(frozen=True)
class ConversionRow:
    """One displayed conversion from the base currency into a target."""

    currency: str
    rate: float
    amount: float | None = None

    @property
    def converted(self) -> float | None:
        if self.amount is None:
            return None
        return round(self.amount * self.rate, 2)


@dataclass
class CacheStats:
    """Summary of the durable cache contents."""

    total_entries: int
    db_size_bytes: int
    db_path: str
    entries_by_prefix: dict[str, int] = field(default_factory=dict)
