"""
exchangerate-api.com (v6) client.
"""

import logging
from typing import Optional

import aiohttp

from weatherfx.collectors.base import Collector
from weatherfx.core.config import DEFAULT_TIMEOUT
from weatherfx.core.exceptions import ProviderError, UpstreamUnavailableError
from weatherfx.core.validation import encode_path_segment

logger = logging.getLogger(__name__)


class ExchangeRateClient(Collector):
    """Async client for the exchangerate-api.com ``latest`` endpoint."""

    BASE_URL = "https://v6.exchangerate-api.com/v6"

    def __init__(
        self,
        api_key: str,
        session: Optional[aiohttp.ClientSession] = None,
        timeout: int = DEFAULT_TIMEOUT,
    ):
        """Initialize the exchange-rate client.

        Args:
            api_key: exchangerate-api.com key. It is part of the URL path, so
                it never appears in error messages.
            session: Optional aiohttp session.
            timeout: Request timeout in seconds.
        """
        super().__init__(session, timeout)
        self.api_key = api_key

    async def latest(self, base: str) -> dict[str, float]:
        """Fetch every conversion rate for base.

        Args:
            base: Base currency code.

        Returns:
            The provider's ``conversion_rates`` mapping.

        Raises:
            UpstreamUnavailableError: On a non-200 status or transport failure.
            ProviderError: If the provider reports an error result.
        """
        segment = encode_path_segment(base)
        url = f"{self.BASE_URL}/{encode_path_segment(self.api_key)}/latest/{segment}"
        shown = f"{self.BASE_URL}/***/latest/{segment}"

        status, data = await self._get_json(url, display_url=shown)

        if status != 200:
            logger.error("Exchange rate request for %s failed with status %d", base, status)
            raise UpstreamUnavailableError(shown, status)

        if not isinstance(data, dict) or data.get("result", "success") != "success":
            error_type = data.get("error-type") if isinstance(data, dict) else None
            raise ProviderError("exchangerate-api", details=error_type or "unexpected payload")

        rates = data.get("conversion_rates")
        if not isinstance(rates, dict):
            raise ProviderError("exchangerate-api", details="response has no conversion_rates")
        return rates
