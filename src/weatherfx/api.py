"""
High-level programmatic API for weatherfx.

This module provides simple, async-friendly functions for one-off lookups.
For a long-lived session, use weatherfx.services.Dashboard directly.

Example:
    import asyncio
    from weatherfx import get_rates, get_weather

    async def main():
        snapshot = await get_weather("Paris")
        print(f"{snapshot.name}: {snapshot.rounded_temp}°C")

        rates = await get_rates("USD")
        print(rates["EUR"])

    asyncio.run(main())
"""

import asyncio

from weatherfx.core.config import Settings
from weatherfx.core.models import ExchangeRateSet, WeatherSnapshot
from weatherfx.services.dashboard import Dashboard


async def get_weather(
    city: str,
    *,
    settings: Settings | None = None,
    direct: bool = False,
) -> WeatherSnapshot:
    """Get current weather for a city.

    Args:
        city: City name (e.g., "Toronto").
        settings: Configuration. Read from the environment if omitted.
        direct: Call the providers directly instead of the proxy server.

    Returns:
        WeatherSnapshot, served from cache when fresh.

    Raises:
        RateLimitedError: If a refresh is needed but not yet allowed.
        CityNotFoundError: If the city is unknown.
        FetchFailedError: If the provider or the network fails.
    """
    settings = settings or Settings.from_env()
    async with Dashboard.from_settings(settings, direct=direct) as dashboard:
        return await dashboard.weather_for(city)


async def get_rates(
    base: str,
    *,
    settings: Settings | None = None,
    direct: bool = False,
) -> ExchangeRateSet:
    """Get exchange rates for a base currency against the target currencies.

    Args:
        base: Base currency code (e.g., "USD").
        settings: Configuration. Read from the environment if omitted.
        direct: Call the providers directly instead of the proxy server.

    Returns:
        Mapping of currency code to rate.

    Example:
        >>> import asyncio
        >>> from weatherfx import get_rates
        >>> rates = asyncio.run(get_rates("CAD"))
        >>> sorted(rates)[:3]
        ['AUD', 'CAD', 'CHF']
    """
    settings = settings or Settings.from_env()
    async with Dashboard.from_settings(settings, direct=direct) as dashboard:
        return await dashboard.rates_for(base)


def get_weather_sync(
    city: str,
    *,
    settings: Settings | None = None,
    direct: bool = False,
) -> WeatherSnapshot:
    """Synchronous wrapper for get_weather()."""
    return asyncio.run(get_weather(city, settings=settings, direct=direct))


def get_rates_sync(
    base: str,
    *,
    settings: Settings | None = None,
    direct: bool = False,
) -> ExchangeRateSet:
    """Synchronous wrapper for get_rates()."""
    return asyncio.run(get_rates(base, settings=settings, direct=direct))
