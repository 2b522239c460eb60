"""
Dashboard services: caching, rate limiting, and orchestration of fetches.
"""

from weatherfx.services.currency import CurrencyRateService
from weatherfx.services.dashboard import Dashboard
from weatherfx.services.endpoint import Endpoint
from weatherfx.services.inflight import InflightRequests
from weatherfx.services.rate_limiter import RateLimiter
from weatherfx.services.weather import WeatherService

__all__ = [
    "CurrencyRateService",
    "Dashboard",
    "Endpoint",
    "InflightRequests",
    "RateLimiter",
    "WeatherService",
]
