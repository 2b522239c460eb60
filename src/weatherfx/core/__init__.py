"""
Core module for weatherfx.

Contains data models, configuration, input validation, and exceptions.
"""

from weatherfx.core.config import Settings
from weatherfx.core.exceptions import (
    CacheError,
    CityNotFoundError,
    ConfigurationError,
    FetchFailedError,
    MissingParamsError,
    ProviderError,
    RateLimitedError,
    UpstreamUnavailableError,
    ValidationError,
    WeatherFXError,
)
from weatherfx.core.models import (
    CacheEntry,
    CacheStats,
    ConversionRow,
    ExchangeRateSet,
    RateLimitDecision,
    RateLimitMarker,
    WeatherSnapshot,
)

__all__ = [
    # Models
    "CacheEntry",
    "CacheStats",
    "ConversionRow",
    "ExchangeRateSet",
    "RateLimitDecision",
    "RateLimitMarker",
    "WeatherSnapshot",
    # Config
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
    "ConfigurationError",
    "ValidationError",
]
