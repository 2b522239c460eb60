"""
Proxy operations over the upstream providers.

The backend holds the server-side API keys. The HTTP server exposes it to
dashboard clients; direct mode lets a dashboard use it in-process.
"""

import logging
from typing import Optional, Sequence

from weatherfx.collectors.exchangerate import ExchangeRateClient
from weatherfx.collectors.openweather import OpenWeatherClient
from weatherfx.core.config import Settings
from weatherfx.core.exceptions import (
    CityNotFoundError,
    ConfigurationError,
    MissingParamsError,
)
from weatherfx.core.models import ExchangeRateSet, WeatherSnapshot
from weatherfx.services.currency import filter_rates
from weatherfx.services.endpoint import Endpoint

logger = logging.getLogger(__name__)


class ProxyBackend(Endpoint):
    """Weather and rates lookups that keep API keys server-side."""

    def __init__(
        self,
        weather_client: OpenWeatherClient,
        exchange_client: ExchangeRateClient,
    ):
        self.weather_client = weather_client
        self.exchange_client = exchange_client

    @classmethod
    def from_settings(cls, settings: Settings) -> "ProxyBackend":
        """Create a backend with both API keys taken from settings.

        Raises:
            ConfigurationError: If either API key is missing.
        """
        if not settings.weather_api_key:
            raise ConfigurationError("WEATHER_API_KEY", "weather provider API key is not set")
        if not settings.exchange_api_key:
            raise ConfigurationError("EXCHANGE_API_KEY", "exchange-rate API key is not set")

        return cls(
            OpenWeatherClient(settings.weather_api_key, timeout=settings.request_timeout),
            ExchangeRateClient(settings.exchange_api_key, timeout=settings.request_timeout),
        )

    async def fetch_weather(self, city: Optional[str]) -> WeatherSnapshot:
        """Geocode city and return its current conditions.

        An empty city name is reported as not found without contacting
        the provider.
        """
        city = (city or "").strip()
        if not city:
            raise CityNotFoundError(city)

        logger.info("Fetching weather data for city: %s", city)
        return await self.weather_client.fetch_weather(city)

    async def fetch_rates(
        self,
        base: Optional[str],
        symbols: Optional[Sequence[str]],
    ) -> ExchangeRateSet:
        """Return rates for base limited to symbols.

        Raises:
            MissingParamsError: If base or symbols are empty. Checked before
                any upstream request.
        """
        base = (base or "").strip().upper()
        if not base or not symbols:
            raise MissingParamsError(["base", "symbols"])

        rates = await self.exchange_client.latest(base)
        return filter_rates(rates, symbols)

    async def close(self) -> None:
        await self.weather_client.close()
        await self.exchange_client.close()
