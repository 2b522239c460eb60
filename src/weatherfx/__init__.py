"""
weatherfx

A weather and currency-exchange dashboard. A small aiohttp proxy keeps the
provider API keys on the server; dashboard sessions cache results in a
durable SQLite store and rate limit their refreshes.

Quick Start:
    >>> import asyncio
    >>> from weatherfx import get_weather
    >>> snapshot = asyncio.run(get_weather("Paris"))
    >>> print(f"{snapshot.name}: {snapshot.description}")
    Paris: clear sky

    # Or use synchronous API:
    >>> from weatherfx import get_rates_sync
    >>> rates = get_rates_sync("USD")
"""

__version__ = "0.1.0"

# High-level API (recommended for most users)
from weatherfx.api import (
    get_rates,
    get_rates_sync,
    get_weather,
    get_weather_sync,
)

# Configuration
from weatherfx.core.config import Settings

# Exceptions
from weatherfx.core.exceptions import (
    CacheError,
    CityNotFoundError,
    FetchFailedError,
    MissingParamsError,
    ProviderError,
    RateLimitedError,
    UpstreamUnavailableError,
    WeatherFXError,
)

# Data models
from weatherfx.core.models import (
    CacheEntry,
    ConversionRow,
    ExchangeRateSet,
    RateLimitMarker,
    WeatherSnapshot,
)

# Session
from weatherfx.services.dashboard import Dashboard

__all__ = [
    # Version
    "__version__",
    # High-level API
    "get_weather",
    "get_weather_sync",
    "get_rates",
    "get_rates_sync",
    # Models
    "CacheEntry",
    "ConversionRow",
    "ExchangeRateSet",
    "RateLimitMarker",
    "WeatherSnapshot",
    # Core
    "Dashboard",
    "Settings",
    # Exceptions
    "WeatherFXError",
    "RateLimitedError",
    "CityNotFoundError",
    "MissingParamsError",
    "FetchFailedError",
    "ProviderError",
    "UpstreamUnavailableError",
    "CacheError",
]
