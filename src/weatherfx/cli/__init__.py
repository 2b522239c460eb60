"""
Command-line interface for weatherfx.

Provides Click-based CLI commands for viewing weather and exchange rates,
managing the cache, and running the proxy server.
"""

from weatherfx.cli.main import cli

__all__ = ["cli"]
