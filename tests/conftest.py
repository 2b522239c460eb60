"""
Pytest fixtures and configuration for weatherfx tests.

Provides a controllable clock, temporary caches, mock endpoints, and mock
provider responses.
"""

from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from weatherfx.cache.durable import DurableCache
from weatherfx.cache.memory import MemoryCache
from weatherfx.core.config import Settings
from weatherfx.core.models import WeatherSnapshot
from weatherfx.services.currency import CurrencyRateService
from weatherfx.services.rate_limiter import RateLimiter
from weatherfx.services.weather import WeatherService

# 2024-03-01T12:00:00Z in epoch ms
START_MS = 1_709_294_400_000


class FakeClock:
    """Callable clock returning a settable epoch-ms time."""

    def __init__(self, now: int = START_MS):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


def make_response(status: int, payload: Any) -> MagicMock:
    """Build an async context manager standing in for session.get(...)."""
    resp = MagicMock()
    resp.status = status
    resp.json = AsyncMock(return_value=payload)

    ctx = MagicMock()
    ctx.__aenter__ = AsyncMock(return_value=resp)
    ctx.__aexit__ = AsyncMock(return_value=False)
    return ctx


def make_session(*responses: MagicMock) -> MagicMock:
    """Build a mock aiohttp session answering get() calls in order."""
    session = MagicMock()
    session.get = MagicMock(side_effect=list(responses))
    session.close = AsyncMock()
    return session


# =============================================================================
# Test Data Fixtures
# =============================================================================


@pytest.fixture
def sample_snapshot() -> WeatherSnapshot:
    """Create a sample weather snapshot."""
    return WeatherSnapshot(
        name="Paris",
        main_temp=18.4,
        description="scattered clouds",
        observed_at=1_709_294_000,
    )


@pytest.fixture
def sample_rates() -> dict[str, float]:
    """Create a sample upstream rate mapping for base USD."""
    return {
        "USD": 1.0,
        "CAD": 1.35,
        "EUR": 0.91,
        "GBP": 0.79,
        "JPY": 149.8,
        "AUD": 1.52,
        "CHF": 0.88,
        "HKD": 7.82,
        "SGD": 1.34,
        "SEK": 10.4,
        "NZD": 1.64,
    }


# =============================================================================
# Mock API Response Fixtures
# =============================================================================


@pytest.fixture
def mock_geocode_response() -> list[dict[str, Any]]:
    """Create a mock OpenWeatherMap geocoding response."""
    return [
        {
            "name": "Paris",
            "lat": 48.8589,
            "lon": 2.32,
            "country": "FR",
        }
    ]


@pytest.fixture
def mock_weather_response() -> dict[str, Any]:
    """Create a mock OpenWeatherMap current weather response."""
    return {
        "coord": {"lon": 2.32, "lat": 48.8589},
        "weather": [{"id": 802, "main": "Clouds", "description": "scattered clouds"}],
        "main": {"temp": 18.4, "feels_like": 17.9, "humidity": 60},
        "dt": 1_709_294_000,
        "name": "Paris",
        "cod": 200,
    }


@pytest.fixture
def mock_exchange_response(sample_rates: dict[str, float]) -> dict[str, Any]:
    """Create a mock exchangerate-api.com latest response."""
    return {
        "result": "success",
        "base_code": "USD",
        "conversion_rates": sample_rates,
    }


# =============================================================================
# Cache and Service Fixtures
# =============================================================================


@pytest.fixture
def clock() -> FakeClock:
    """Create a controllable clock."""
    return FakeClock()


@pytest.fixture
def tmp_cache_db(tmp_path: Path) -> Path:
    """Create a temporary cache database path."""
    return tmp_path / "test_cache.db"


@pytest.fixture
def store(tmp_cache_db: Path, clock: FakeClock) -> DurableCache:
    """Create a durable cache backed by a temporary database."""
    return DurableCache(tmp_cache_db, clock=clock)


@pytest.fixture
def limiter(store: DurableCache) -> RateLimiter:
    return RateLimiter(store)


@pytest.fixture
def mock_endpoint(sample_snapshot: WeatherSnapshot, sample_rates: dict) -> MagicMock:
    """Create a mock endpoint returning sample data."""
    endpoint = MagicMock()
    endpoint.fetch_weather = AsyncMock(return_value=sample_snapshot)
    endpoint.fetch_rates = AsyncMock(return_value=dict(sample_rates))
    endpoint.close = AsyncMock()
    return endpoint


@pytest.fixture
def currency_service(
    mock_endpoint: MagicMock,
    store: DurableCache,
    limiter: RateLimiter,
) -> CurrencyRateService:
    """Create a currency service with the default target currencies."""
    return CurrencyRateService(mock_endpoint, store, limiter, memory=MemoryCache())


@pytest.fixture
def weather_service(
    mock_endpoint: MagicMock,
    store: DurableCache,
    limiter: RateLimiter,
) -> WeatherService:
    """Create a weather service."""
    return WeatherService(mock_endpoint, store, limiter)


@pytest.fixture
def settings(tmp_cache_db: Path) -> Settings:
    """Create settings pointing at the temporary cache database."""
    return Settings(
        weather_api_key="weather-key",
        exchange_api_key="exchange-key",
        cache_path=tmp_cache_db,
    )
