"""Market data models for Polymarket up/down windows."""

from dataclasses import dataclass

from hedger.execution.errors import HedgeStateError
from hedger.models.common import Asset, TokenId


@dataclass(frozen=True)
class Market:
    asset: Asset
    timestamp: int  # window start, unix seconds
    slug: str
    first_token_id: TokenId
    second_token_id: TokenId

    def other_token(self, token_id: TokenId) -> TokenId:
        if token_id == self.first_token_id:
            return self.second_token_id
        if token_id == self.second_token_id:
            return self.first_token_id
        raise HedgeStateError(f"Token {token_id} is not part of market {self.slug}")


def window_slug(asset: Asset, timestamp: int) -> str:
    return f"{asset}-updown-15m-{timestamp}"
