"""
Abstract data endpoint used by the dashboard services.

Two implementations exist: ProxyClient talks to the proxy server over HTTP,
ProxyBackend calls the upstream providers directly with local API keys.
"""

from abc import ABC, abstractmethod
from typing import Any, Sequence

from weatherfx.core.models import ExchangeRateSet, WeatherSnapshot


class Endpoint(ABC):
    """Source of weather snapshots and exchange rates."""

    @abstractmethod
    async def fetch_weather(self, city: str) -> WeatherSnapshot:
        """Fetch current conditions for a city.

        Raises:
            CityNotFoundError: If the city cannot be geocoded.
            FetchFailedError: If the provider or the network fails.
        """

    @abstractmethod
    async def fetch_rates(self, base: str, symbols: Sequence[str]) -> ExchangeRateSet:
        """Fetch exchange rates for base against symbols.

        Raises:
            MissingParamsError: If base or symbols are empty.
            FetchFailedError: If the provider or the network fails.
        """

    async def close(self) -> None:
        """Release any network resources."""

    async def __aenter__(self) -> "Endpoint":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()
