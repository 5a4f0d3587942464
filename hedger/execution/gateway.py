"""Capability interfaces the hedging core consumes."""

from decimal import Decimal
from typing import Protocol

from hedger.models.common import Asset, OrderId, TokenId
from hedger.models.market import Market
from hedger.models.order import (
    MarketOrderResult,
    OrderStatusSnapshot,
    OrderType,
    PlacedOrder,
    Side,
)


class OrderGateway(Protocol):
    """Venue order operations. Implementations raise GatewayError on failure.

    ``cancel_order`` must be a no-op (not an error) for orders that are
    already matched or canceled.
    """

    def place_limit_order(
        self,
        token_id: TokenId,
        size: Decimal,
        price: Decimal,
        side: Side,
        order_type: OrderType,
    ) -> PlacedOrder: ...

    def place_market_order(
        self,
        token_id: TokenId,
        size: Decimal,
        price: Decimal,
        side: Side,
    ) -> MarketOrderResult: ...

    def cancel_order(self, order_id: OrderId) -> bool: ...

    def get_order_status(self, order_id: OrderId) -> OrderStatusSnapshot: ...

    def get_price(self, token_id: TokenId, side: Side) -> Decimal: ...


class MarketResolver(Protocol):
    def resolve_window(self, asset: Asset, window_ts: int) -> Market: ...
