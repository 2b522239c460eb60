"""
OpenWeatherMap client.

Resolves a city name to coordinates with the geocoding API, then fetches
current conditions for those coordinates in metric units.
"""

import logging
from typing import Any, Optional

import aiohttp

from weatherfx.collectors.base import Collector
from weatherfx.core.config import DEFAULT_TIMEOUT
from weatherfx.core.exceptions import CityNotFoundError, ProviderError
from weatherfx.core.models import WeatherSnapshot

logger = logging.getLogger(__name__)


class OpenWeatherClient(Collector):
    """Async client for the OpenWeatherMap geocoding and weather APIs."""

    BASE_URL = "https://api.openweathermap.org"
    GEO_URL = f"{BASE_URL}/geo/1.0/direct"
    WEATHER_URL = f"{BASE_URL}/data/2.5/weather"

    def __init__(
        self,
        api_key: str,
        session: Optional[aiohttp.ClientSession] = None,
        timeout: int = DEFAULT_TIMEOUT,
    ):
        """Initialize the OpenWeatherMap client.

        Args:
            api_key: OpenWeatherMap API key, sent as ``appid``.
            session: Optional aiohttp session.
            timeout: Request timeout in seconds.
        """
        super().__init__(session, timeout)
        self.api_key = api_key

    async def fetch_weather(self, city: str) -> WeatherSnapshot:
        """Fetch current weather for a city.

        Raises:
            CityNotFoundError: If geocoding returns no results.
            ProviderError: If the weather API reports a failure.
            UpstreamUnavailableError: If a request fails or times out.
        """
        lat, lon = await self.geocode(city)
        return await self.current(lat, lon)

    async def geocode(self, city: str) -> tuple[float, float]:
        """Resolve a city name to (lat, lon) using the first match.

        Raises:
            CityNotFoundError: If there is no match.
            ProviderError: If the geocoder rejects the request.
        """
        status, data = await self._get_json(
            self.GEO_URL,
            params={"q": city, "limit": "1", "appid": self.api_key},
        )

        if status != 200:
            raise ProviderError("OpenWeatherMap geocoding", details=_provider_message(data, status))

        if not isinstance(data, list) or not data:
            logger.info("City not found: %s", city)
            raise CityNotFoundError(city)

        try:
            return float(data[0]["lat"]), float(data[0]["lon"])
        except (KeyError, TypeError, ValueError) as e:
            raise ProviderError("OpenWeatherMap geocoding", details=f"unexpected payload: {e}")

    async def current(self, lat: float, lon: float) -> WeatherSnapshot:
        """Fetch current conditions for coordinates.

        Raises:
            ProviderError: If the response code is not 200 or the payload
                lacks the normalized fields.
        """
        _status, data = await self._get_json(
            self.WEATHER_URL,
            params={
                "lat": str(lat),
                "lon": str(lon),
                "units": "metric",
                "appid": self.api_key,
            },
        )

        # The provider reports its own status in the body
        if not isinstance(data, dict) or str(data.get("cod")) != "200":
            message = _provider_message(data, _status)
            logger.error("Error fetching weather data: %s", message)
            raise ProviderError("OpenWeatherMap", details=message)

        return self._parse_current(data)

    def _parse_current(self, data: dict[str, Any]) -> WeatherSnapshot:
        """Normalize a current-conditions response."""
        try:
            conditions = data.get("weather") or [{}]
            return WeatherSnapshot(
                name=str(data["name"]),
                main_temp=float(data["main"]["temp"]),
                description=str(conditions[0].get("description", "")),
                observed_at=int(data["dt"]),
            )
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise ProviderError("OpenWeatherMap", details=f"unexpected payload: {e}")


def _provider_message(data: Any, status: int) -> str:
    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])
    return f"status {status}"
