"""
Server-side proxy that hides provider API keys from dashboard clients.
"""

from weatherfx.proxy.backend import ProxyBackend
from weatherfx.proxy.server import create_app, create_app_from_settings, run

__all__ = ["ProxyBackend", "create_app", "create_app_from_settings", "run"]
