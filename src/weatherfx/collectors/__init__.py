"""
HTTP clients for the upstream providers and the proxy server.
"""

from weatherfx.collectors.base import Collector
from weatherfx.collectors.exchangerate import ExchangeRateClient
from weatherfx.collectors.openweather import OpenWeatherClient
from weatherfx.collectors.proxy import ProxyClient

__all__ = [
    "Collector",
    "ExchangeRateClient",
    "OpenWeatherClient",
    "ProxyClient",
]
