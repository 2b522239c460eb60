"""
aiohttp proxy server.

Exposes ``GET /api/weather`` and ``GET /api/rates`` so dashboard clients can
reach the providers without holding API keys.
"""

import logging

from aiohttp import web

from weatherfx.core.config import Settings
from weatherfx.core.exceptions import (
    CityNotFoundError,
    MissingParamsError,
    WeatherFXError,
)
from weatherfx.core.validation import parse_symbols
from weatherfx.proxy.backend import ProxyBackend

logger = logging.getLogger(__name__)

BACKEND_KEY = web.AppKey("backend", ProxyBackend)

WEATHER_FAILED = "Failed to fetch weather data"
CITY_NOT_FOUND = "City not found"
RATES_FAILED = "Failed to fetch exchange rates"
MISSING_PARAMS = "Missing base or symbols"


async def handle_weather(request: web.Request) -> web.Response:
    """GET /api/weather?city=<name>"""
    backend = request.app[BACKEND_KEY]
    city = request.query.get("city", "")

    try:
        snapshot = await backend.fetch_weather(city)
    except CityNotFoundError:
        logger.warning("City not found: %s", city)
        return web.json_response({"error": CITY_NOT_FOUND}, status=404)
    except WeatherFXError as e:
        logger.error("Error fetching weather data for %s: %s", city, e)
        return web.json_response({"error": WEATHER_FAILED}, status=500)
    except Exception:
        logger.exception("Unexpected error fetching weather data for %s", city)
        return web.json_response({"error": WEATHER_FAILED}, status=500)

    return web.json_response(snapshot.to_dict())


async def handle_rates(request: web.Request) -> web.Response:
    """GET /api/rates?base=<code>&symbols=<CSV>"""
    backend = request.app[BACKEND_KEY]
    base = request.query.get("base")
    symbols = parse_symbols(request.query.get("symbols"))

    try:
        rates = await backend.fetch_rates(base, symbols)
    except MissingParamsError:
        return web.json_response({"error": MISSING_PARAMS}, status=400)
    except WeatherFXError as e:
        logger.error("Fetch failed for base %s: %s", base, e)
        return web.json_response({"error": RATES_FAILED}, status=500)
    except Exception:
        logger.exception("Unexpected error fetching rates for %s", base)
        return web.json_response({"error": RATES_FAILED}, status=500)

    return web.json_response({"rates": rates})


async def _close_backend(app: web.Application) -> None:
    await app[BACKEND_KEY].close()


def create_app(backend: ProxyBackend) -> web.Application:
    """Create the proxy application around backend."""
    app = web.Application()
    app[BACKEND_KEY] = backend
    app.router.add_get("/api/weather", handle_weather)
    app.router.add_get("/api/rates", handle_rates)
    app.on_cleanup.append(_close_backend)
    return app


def create_app_from_settings(settings: Settings) -> web.Application:
    """Create the proxy application with API keys from settings.

    Raises:
        ConfigurationError: If an API key is missing.
    """
    return create_app(ProxyBackend.from_settings(settings))


def run(app: web.Application, host: str, port: int) -> None:
    """Serve app until interrupted."""
    logger.info("Server is running on http://%s:%d", host, port)
    web.run_app(app, host=host, port=port, print=None)
