"""
Base class for HTTP clients.

Provides aiohttp session management and maps transport failures onto the
weatherfx error taxonomy.
"""

import asyncio
from typing import Any, Optional

import aiohttp

from weatherfx import __version__
from weatherfx.core.config import DEFAULT_TIMEOUT
from weatherfx.core.exceptions import ProviderError, UpstreamUnavailableError


class Collector:
    """Base class for HTTP clients.

    All clients share session management and error mapping. A timeout
    expiring is reported as UpstreamUnavailableError like any other
    transport failure.
    """

    def __init__(
        self,
        session: aiohttp.ClientSession | None = None,
        timeout: int = DEFAULT_TIMEOUT,
    ):
        """Initialize the collector.

        Args:
            session: Optional aiohttp session. If not provided, one will
                     be created when needed.
            timeout: Request timeout in seconds.
        """
        self._session = session
        self._owns_session = session is None
        self.timeout = aiohttp.ClientTimeout(total=timeout)

    @property
    def session(self) -> aiohttp.ClientSession:
        """Get or create the aiohttp session."""
        if self._session is None:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        """Close the session if we own it."""
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> "Collector":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    def _build_headers(self) -> dict[str, str]:
        """Build common request headers."""
        return {
            "User-Agent": f"weatherfx/{__version__}",
            "Accept": "application/json",
        }

    async def _get_json(
        self,
        url: str,
        params: Optional[dict[str, str]] = None,
        display_url: Optional[str] = None,
    ) -> tuple[int, Any]:
        """GET url and decode the JSON body whatever the status.

        Args:
            url: Request URL.
            params: Query parameters.
            display_url: URL to report in errors, for URLs carrying secrets.

        Returns:
            Tuple of (status, decoded body).

        Raises:
            UpstreamUnavailableError: On connection failure or timeout.
            ProviderError: If the body is not JSON.
        """
        shown = display_url or url
        try:
            async with self.session.get(
                url,
                params=params,
                headers=self._build_headers(),
                timeout=self.timeout,
            ) as resp:
                try:
                    data = await resp.json(content_type=None)
                except ValueError as e:
                    raise ProviderError(shown, details=f"invalid JSON (status {resp.status}): {e}")
                return resp.status, data

        except asyncio.TimeoutError:
            raise UpstreamUnavailableError(shown, details="request timed out")
        except aiohttp.ClientError as e:
            raise UpstreamUnavailableError(shown, details=str(e))
