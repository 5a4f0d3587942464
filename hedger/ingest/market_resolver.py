"""Resolve an up/down window to its two CLOB token ids via Gamma."""

import json
import logging

import httpx

from hedger.execution.errors import GatewayError, MarketResolutionError
from hedger.ingest.gamma_client import GammaClient
from hedger.models.common import Asset
from hedger.models.market import Market, window_slug

logger = logging.getLogger(__name__)


def parse_token_ids(raw: object) -> list[str]:
    """Parse Gamma's clobTokenIds, which arrives as a JSON-encoded list string."""
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Unparseable clobTokenIds: %r", raw)
            return []
    if not isinstance(raw, list):
        return []
    return [str(t).strip() for t in raw if str(t).strip()]


class GammaMarketResolver:
    def __init__(self, client: GammaClient | None = None):
        self.client = client or GammaClient()

    def resolve_window(self, asset: Asset, window_ts: int) -> Market:
        slug = window_slug(asset, window_ts)
        try:
            data = self.client.get_market_by_slug(slug)
        except httpx.HTTPStatusError as e:
            raise GatewayError(str(e), e.response.status_code) from e
        except httpx.RequestError as e:
            raise GatewayError(f"Request failed: {e}") from e

        if data is None:
            raise MarketResolutionError(f"No market for slug {slug}", 404)

        token_ids = parse_token_ids(data.get("clobTokenIds"))
        if len(token_ids) < 2:
            raise MarketResolutionError(
                f"Market {slug} has {len(token_ids)} token ids, expected 2"
            )

        logger.info("Resolved %s -> %s / %s", slug, token_ids[0], token_ids[1])
        return Market(
            asset=asset,
            timestamp=window_ts,
            slug=slug,
            first_token_id=token_ids[0],
            second_token_id=token_ids[1],
        )
