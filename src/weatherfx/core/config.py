"""
Runtime configuration for weatherfx.

Settings are read from environment variables. API keys are only needed by
the proxy server (or by direct mode); the dashboard client never sees them.
"""

import os
from dataclasses import dataclass, field, replace
from pathlib import Path

from weatherfx.core.exceptions import ConfigurationError
from weatherfx.core.models import DEFAULT_TARGET_CURRENCIES
from weatherfx.core.validation import parse_symbols

MINUTE_MS = 60 * 1000
HOUR_MS = 60 * MINUTE_MS

DEFAULT_PROXY_URL = "http://localhost:3000"
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 3000
DEFAULT_TIMEOUT = 10  # seconds


def default_cache_path() -> Path:
    return Path.home() / ".weatherfx" / "cache.db"


@dataclass(frozen=True)
class Settings:
    """Configuration shared by the dashboard, the CLI, and the proxy."""

    weather_api_key: str | None = None
    exchange_api_key: str | None = None
    proxy_url: str = DEFAULT_PROXY_URL
    cache_path: Path = field(default_factory=default_cache_path)
    target_currencies: tuple[str, ...] = DEFAULT_TARGET_CURRENCIES
    request_timeout: int = DEFAULT_TIMEOUT
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT

    # Freshness and refetch cooldown are independent controls
    rates_cache_ttl_ms: int = 30 * MINUTE_MS
    rates_min_interval_ms: int = 30 * MINUTE_MS
    weather_cache_ttl_ms: int = HOUR_MS
    weather_min_interval_ms: int = HOUR_MS

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> "Settings":
        """Build settings from environment variables.

        Args:
            environ: Mapping to read from. Defaults to os.environ.

        Returns:
            Settings with every unset variable left at its default.
        """
        env = os.environ if environ is None else environ
        settings = cls(
            weather_api_key=env.get("WEATHER_API_KEY") or None,
            exchange_api_key=env.get("EXCHANGE_API_KEY") or None,
        )

        overrides: dict = {}
        if proxy_url := env.get("WEATHERFX_PROXY_URL"):
            overrides["proxy_url"] = proxy_url
        if cache_path := env.get("WEATHERFX_CACHE_PATH"):
            overrides["cache_path"] = Path(cache_path).expanduser()
        if targets := parse_symbols(env.get("WEATHERFX_TARGET_CURRENCIES")):
            overrides["target_currencies"] = tuple(targets)
        if timeout := env.get("WEATHERFX_TIMEOUT"):
            overrides["request_timeout"] = _parse_int("WEATHERFX_TIMEOUT", timeout)
        if host := env.get("WEATHERFX_HOST"):
            overrides["host"] = host
        if port := env.get("WEATHERFX_PORT"):
            overrides["port"] = _parse_int("WEATHERFX_PORT", port)

        return settings.with_overrides(**overrides)

    def with_overrides(self, **changes) -> "Settings":
        """Return a copy with the non-None values in changes applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


def _parse_int(name: str, value: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise ConfigurationError(name, f"expected an integer, got '{value}'")
