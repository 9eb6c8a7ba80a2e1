"""
Price feed REST client.

Fetches the current BTC spot price from a CryptoCompare-compatible
`/data/price?fsym=BTC&tsyms=USD` endpoint.
"""

from typing import Optional

import httpx

from ..config.logging import get_logger
from ..exceptions import PriceFeedError
from ..utils.coercion import as_float
from ..utils.tracing import get_trace_id

logger = get_logger(__name__)


class PriceFeedClient:
    """Client for the spot price endpoint."""

    def __init__(
        self,
        url: str,
        symbol: str = "BTC",
        currency: str = "USD",
        timeout: float = 10.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize price feed client.

        Args:
            url: Price endpoint URL
            symbol: Base asset symbol
            currency: Quote currency
            timeout: Request timeout in seconds
            http_client: Pre-built client (tests inject one with a mock transport)
        """
        self.url = url
        self.symbol = symbol
        self.currency = currency
        self.timeout = timeout
        self._client = http_client or httpx.AsyncClient(timeout=timeout)

    async def get_current_price(self) -> float:
        """
        Get the current spot price.

        Returns:
            Spot price in the quote currency

        Raises:
            PriceFeedError: If the request fails or the response has no usable price
        """
        params = {"fsym": self.symbol, "tsyms": self.currency}
        trace_id = get_trace_id()

        try:
            response = await self._client.get(self.url, params=params, headers={"Cache-Control": "no-cache"})
            response.raise_for_status()
            data = response.json()
        except httpx.TimeoutException as e:
            logger.warning("price_feed_timeout", url=self.url, timeout=self.timeout, trace_id=trace_id)
            raise PriceFeedError(f"Price feed timed out after {self.timeout}s", trace_id=trace_id) from e
        except httpx.HTTPStatusError as e:
            logger.error(
                "price_feed_http_error",
                url=self.url,
                status_code=e.response.status_code,
                trace_id=trace_id,
            )
            raise PriceFeedError(
                f"Price feed returned HTTP {e.response.status_code}", trace_id=trace_id
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            logger.error("price_feed_request_failed", url=self.url, error=str(e), trace_id=trace_id)
            raise PriceFeedError(f"Price feed request failed: {e}", trace_id=trace_id) from e

        price = as_float(data.get(self.currency)) if isinstance(data, dict) else None
        if price is None or price <= 0:
            logger.error("price_feed_invalid_payload", payload=data, trace_id=trace_id)
            raise PriceFeedError(f"Price feed response has no {self.currency} price", trace_id=trace_id)

        logger.debug("price_feed_price_fetched", symbol=self.symbol, price=price, trace_id=trace_id)
        return price

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()
