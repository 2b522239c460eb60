"""
Client for the weatherfx proxy server.

Maps the proxy's HTTP error responses back onto typed errors so the
dashboard can handle them the same way as direct upstream failures.
"""

from typing import Any, Optional, Sequence

import aiohttp

from weatherfx.collectors.base import Collector
from weatherfx.core.config import DEFAULT_PROXY_URL, DEFAULT_TIMEOUT
from weatherfx.core.exceptions import (
    CityNotFoundError,
    MissingParamsError,
    ProviderError,
    UpstreamUnavailableError,
)
from weatherfx.core.models import ExchangeRateSet, WeatherSnapshot
from weatherfx.services.endpoint import Endpoint


class ProxyClient(Collector, Endpoint):
    """Fetches weather and rates through the proxy's ``/api`` routes."""

    def __init__(
        self,
        base_url: str = DEFAULT_PROXY_URL,
        session: Optional[aiohttp.ClientSession] = None,
        timeout: int = DEFAULT_TIMEOUT,
    ):
        super().__init__(session, timeout)
        self.base_url = base_url.rstrip("/")

    async def fetch_weather(self, city: str) -> WeatherSnapshot:
        url = f"{self.base_url}/api/weather"
        status, data = await self._get_json(url, params={"city": city})

        if status == 404:
            raise CityNotFoundError(city)
        if status != 200:
            raise UpstreamUnavailableError(url, status, details=_error_message(data))

        try:
            return WeatherSnapshot.from_dict(data)
        except (KeyError, TypeError, ValueError) as e:
            raise ProviderError("weatherfx proxy", details=f"unexpected weather payload: {e}")

    async def fetch_rates(self, base: str, symbols: Sequence[str]) -> ExchangeRateSet:
        url = f"{self.base_url}/api/rates"
        status, data = await self._get_json(
            url,
            params={"base": base, "symbols": ",".join(symbols)},
        )

        if status == 400:
            raise MissingParamsError(["base", "symbols"])
        if status != 200:
            raise UpstreamUnavailableError(url, status, details=_error_message(data))

        rates = data.get("rates") if isinstance(data, dict) else None
        if not isinstance(rates, dict):
            raise ProviderError("weatherfx proxy", details="response has no rates")
        return rates


def _error_message(data: Any) -> Optional[str]:
    if isinstance(data, dict) and data.get("error"):
        return str(data["error"])
    return None
