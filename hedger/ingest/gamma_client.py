"""Gamma API client for Polymarket market metadata."""

import logging

import httpx

logger = logging.getLogger(__name__)

GAMMA_BASE_URL = "https://gamma-api.polymarket.com"


class GammaClient:
    def __init__(self, base_url: str = GAMMA_BASE_URL, timeout: float = 30.0):
        self.base_url = base_url
        self.timeout = timeout

    def get_market_by_slug(self, slug: str) -> dict | None:
        """Fetch a single market by slug. Returns None if not found."""
        url = f"{self.base_url}/markets/slug/{slug}"
        try:
            resp = httpx.get(url, timeout=self.timeout)
            if resp.status_code == 404:
                return None
            resp.raise_for_status()
            data = resp.json()
            if isinstance(data, list):
                return data[0] if data else None
            return data
        except httpx.HTTPStatusError as e:
            logger.error("Gamma API error for slug=%s: %s", slug, e)
            raise
        except httpx.RequestError as e:
            logger.error("Gamma API request failed for slug=%s: %s", slug, e)
            raise
