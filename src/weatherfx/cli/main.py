"""
Main CLI entry point for weatherfx.

Provides commands for viewing weather and exchange rates, managing the
local cache, and running the proxy server.
"""

import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.logging import RichHandler

from weatherfx import __version__
from weatherfx.cli.output import (
    console,
    print_cache_stats,
    print_error,
    print_info,
    print_rates_table,
    print_success,
    print_warning,
    print_weather,
)
from weatherfx.core.config import Settings
from weatherfx.core.exceptions import (
    CityNotFoundError,
    FetchFailedError,
    RateLimitedError,
    WeatherFXError,
)


def run_async(coro):
    """Run an async coroutine in a fresh event loop."""
    return asyncio.run(coro)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
        force=True,
    )


def _report_failure(error: Exception, what: str) -> int:
    """Render a failed lookup and return the exit code.

    Rate limiting is a warning, not a failure.
    """
    if isinstance(error, RateLimitedError):
        print_warning(f"Rate limit on {what}: {error.details}")
        return 0
    if isinstance(error, CityNotFoundError):
        print_error(f"City not found: {error.city}")
    elif isinstance(error, FetchFailedError):
        print_error(f"Could not fetch {what}. Please try again later.")
        logging.getLogger(__name__).debug("Fetch failure: %s", error)
    elif isinstance(error, WeatherFXError):
        print_error(str(error))
    else:
        print_error(f"Unexpected failure fetching {what}: {error}")
    return 1


@click.group()
@click.version_option(version=__version__, prog_name="weatherfx")
@click.option(
    "--proxy-url",
    envvar="WEATHERFX_PROXY_URL",
    help="Base URL of the weatherfx proxy server.",
)
@click.option(
    "--cache-path",
    envvar="WEATHERFX_CACHE_PATH",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Location of the SQLite cache database.",
)
@click.option(
    "--timeout",
    envvar="WEATHERFX_TIMEOUT",
    type=int,
    help="Request timeout in seconds.",
)
@click.option(
    "--weather-api-key",
    envvar="WEATHER_API_KEY",
    help="Weather provider API key (serve and --direct only).",
)
@click.option(
    "--exchange-api-key",
    envvar="EXCHANGE_API_KEY",
    help="Exchange-rate provider API key (serve and --direct only).",
)
@click.option(
    "--direct",
    is_flag=True,
    help="Call the providers directly instead of going through the proxy.",
)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging.")
@click.pass_context
def cli(
    ctx: click.Context,
    proxy_url: Optional[str],
    cache_path: Optional[Path],
    timeout: Optional[int],
    weather_api_key: Optional[str],
    exchange_api_key: Optional[str],
    direct: bool,
    verbose: bool,
) -> None:
    """weatherfx - Weather and exchange rates at a glance.

    Results are cached locally and refreshes are rate limited:
    weather once per hour per city, exchange rates once per 30 minutes
    per base currency.
    """
    _configure_logging(verbose)

    try:
        settings = Settings.from_env()
    except WeatherFXError as e:
        print_error(str(e))
        sys.exit(1)

    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings.with_overrides(
        proxy_url=proxy_url,
        cache_path=cache_path,
        request_timeout=timeout,
        weather_api_key=weather_api_key,
        exchange_api_key=exchange_api_key,
    )
    ctx.obj["direct"] = direct


@cli.command()
@click.argument("city")
@click.pass_context
def weather(ctx: click.Context, city: str) -> None:
    """Show current weather for CITY.

    \b
    Examples:
        weatherfx weather Toronto
        weatherfx --direct weather "New York"
    """
    from weatherfx.services.dashboard import Dashboard

    settings: Settings = ctx.obj["settings"]

    async def _lookup():
        async with Dashboard.from_settings(settings, direct=ctx.obj["direct"]) as dashboard:
            return await dashboard.weather_for(city)

    try:
        snapshot = run_async(_lookup())
    except Exception as e:
        sys.exit(_report_failure(e, "weather data"))

    print_weather(snapshot)


@cli.command()
@click.argument("base")
@click.option(
    "--amount", "-a",
    type=float,
    help="Amount of BASE to convert into each target currency.",
)
@click.pass_context
def rates(ctx: click.Context, base: str, amount: Optional[float]) -> None:
    """Show exchange rates from BASE to the target currencies.

    \b
    Examples:
        weatherfx rates USD
        weatherfx rates cad --amount 250
    """
    from weatherfx.services.dashboard import Dashboard

    settings: Settings = ctx.obj["settings"]

    async def _lookup():
        async with Dashboard.from_settings(settings, direct=ctx.obj["direct"]) as dashboard:
            return await dashboard.conversions(base, amount)

    try:
        rows = run_async(_lookup())
    except Exception as e:
        sys.exit(_report_failure(e, "exchange rates"))

    print_rates_table(base.strip().upper(), rows, amount)


@cli.command()
@click.option("--clear", is_flag=True, help="Clear all cached data.")
@click.option("--stats", is_flag=True, help="Show cache statistics.")
@click.option("--sweep", is_flag=True, help="Remove expired entries.")
@click.pass_context
def cache(ctx: click.Context, clear: bool, stats: bool, sweep: bool) -> None:
    """Manage the local cache.

    weatherfx caches weather and exchange rates to avoid refetching them
    and to honor the refresh cooldowns.

    \b
    Cache windows:
      - Weather: 1 hour per city
      - Exchange rates: 30 minutes per base currency

    \b
    Examples:
        weatherfx cache --stats    # Show cache statistics
        weatherfx cache --clear    # Clear all cached data
        weatherfx cache --sweep    # Remove only expired entries
    """
    from weatherfx.cache.durable import DurableCache
    from weatherfx.services.dashboard import sweep_expired

    settings: Settings = ctx.obj["settings"]

    try:
        store = DurableCache(settings.cache_path)
        if clear:
            count = store.clear_all()
            print_success(f"Cache cleared. Removed {count} entries.")
        elif sweep:
            count = sweep_expired(store, settings)
            print_success(f"Sweep complete. Removed {count} expired entries.")
        elif stats:
            print_cache_stats(store.stats())
        else:
            click.echo(ctx.get_help())
    except WeatherFXError as e:
        print_error(str(e))
        sys.exit(1)


@cli.command()
@click.option("--host", envvar="WEATHERFX_HOST", help="Interface to bind.")
@click.option("--port", envvar="WEATHERFX_PORT", type=int, help="Port to listen on.")
@click.pass_context
def serve(ctx: click.Context, host: Optional[str], port: Optional[int]) -> None:
    """Run the proxy server.

    Requires WEATHER_API_KEY and EXCHANGE_API_KEY.

    \b
    Examples:
        weatherfx serve
        weatherfx serve --port 8080
    """
    from weatherfx.proxy.server import create_app_from_settings, run

    settings: Settings = ctx.obj["settings"].with_overrides(host=host, port=port)

    try:
        app = create_app_from_settings(settings)
    except WeatherFXError as e:
        print_error(str(e))
        sys.exit(1)

    print_info(f"Server is running on http://{settings.host}:{settings.port}")
    run(app, settings.host, settings.port)


if __name__ == "__main__":
    cli()
