"""Public CLOB API client for quote data."""

import logging
from decimal import Decimal

import httpx

logger = logging.getLogger(__name__)

CLOB_BASE_URL = "https://clob.polymarket.com"


class ClobClient:
    def __init__(self, base_url: str = CLOB_BASE_URL, timeout: float = 30.0):
        self.base_url = base_url
        self.timeout = timeout

    def get_price(self, token_id: str, side: str) -> Decimal:
        """Fetch the current best price for a CLOB token on one side of the book."""
        url = f"{self.base_url}/price"
        params = {"token_id": token_id, "side": side}
        try:
            resp = httpx.get(url, params=params, timeout=self.timeout)
            resp.raise_for_status()
            data = resp.json()
        except (httpx.HTTPStatusError, httpx.RequestError) as e:
            logger.error("CLOB price error for token=%s: %s", token_id, e)
            raise
        return Decimal(str(data["price"]))
