"""Dry-run gateway: simulated order book driven by live public quotes."""

import logging
import uuid
from dataclasses import dataclass
from decimal import Decimal

import httpx

from hedger.execution.errors import GatewayError
from hedger.ingest.clob_client import ClobClient
from hedger.models.common import OrderId, TokenId
from hedger.models.order import (
    MarketOrderResult,
    OrderState,
    OrderStatusSnapshot,
    OrderType,
    PlacedOrder,
    Side,
)

logger = logging.getLogger(__name__)


@dataclass
class PaperOrder:
    order: PlacedOrder
    state: OrderState = OrderState.LIVE
    size_matched: Decimal = Decimal("0")


class PaperGateway:
    """Simulates fills against the current public quote; never touches funds.

    A BUY fills in full once the quote is at or below its limit, a SELL once
    the quote is at or above it. FOK orders that do not cross are killed.
    """

    def __init__(self, quotes: ClobClient | None = None):
        self.quotes = quotes or ClobClient()
        self._orders: dict[OrderId, PaperOrder] = {}

    def _quote(self, token_id: TokenId, side: Side) -> Decimal:
        try:
            return self.quotes.get_price(token_id, side.value)
        except httpx.HTTPStatusError as e:
            raise GatewayError(str(e), e.response.status_code) from e
        except (httpx.RequestError, KeyError, ValueError) as e:
            raise GatewayError(f"Quote failed for {token_id}: {e}") from e

    def _crosses(self, order: PlacedOrder, quote: Decimal) -> bool:
        if order.price is None:
            return True
        if order.side == Side.BUY:
            return quote <= order.price
        return quote >= order.price

    def _try_fill(self, paper: PaperOrder) -> None:
        if paper.state != OrderState.LIVE:
            return
        quote = self._quote(paper.order.token_id, paper.order.side)
        if self._crosses(paper.order, quote):
            paper.state = OrderState.MATCHED
            paper.size_matched = paper.order.size
            logger.info(
                "PAPER FILL: %s %s x %s @ %s (quote %s)",
                paper.order.side, paper.order.token_id, paper.order.size,
                paper.order.price, quote,
            )

    def _new_order(
        self,
        token_id: TokenId,
        size: Decimal,
        price: Decimal | None,
        side: Side,
        order_type: OrderType,
    ) -> PaperOrder:
        order = PlacedOrder(
            order_id=f"paper-{uuid.uuid4().hex[:12]}",
            token_id=token_id,
            side=side,
            order_type=order_type,
            size=size,
            price=price,
        )
        paper = PaperOrder(order=order)
        self._orders[order.order_id] = paper
        self._try_fill(paper)
        if order_type == OrderType.FOK and paper.state != OrderState.MATCHED:
            paper.state = OrderState.CANCELED
        return paper

    # --- OrderGateway ---

    def place_limit_order(
        self,
        token_id: TokenId,
        size: Decimal,
        price: Decimal,
        side: Side,
        order_type: OrderType,
    ) -> PlacedOrder:
        logger.info("PAPER: %s %s %s x %s @ %s", order_type, side, token_id, size, price)
        return self._new_order(token_id, size, price, side, order_type).order

    def place_market_order(
        self,
        token_id: TokenId,
        size: Decimal,
        price: Decimal,
        side: Side,
    ) -> MarketOrderResult:
        paper = self._new_order(token_id, size, price, side, OrderType.FOK)
        return MarketOrderResult(
            order_id=paper.order.order_id,
            filled=paper.state == OrderState.MATCHED,
        )

    def cancel_order(self, order_id: OrderId) -> bool:
        paper = self._orders.get(order_id)
        if paper is None:
            raise GatewayError(f"Unknown order {order_id}", 404)
        if paper.state.is_terminal:
            return False
        paper.state = OrderState.CANCELED
        return True

    def get_order_status(self, order_id: OrderId) -> OrderStatusSnapshot:
        paper = self._orders.get(order_id)
        if paper is None:
            raise GatewayError(f"Order {order_id} not found", 404)
        self._try_fill(paper)
        return OrderStatusSnapshot(
            order_id=order_id,
            state=paper.state,
            size_matched=paper.size_matched,
        )

    def get_price(self, token_id: TokenId, side: Side) -> Decimal:
        return self._quote(token_id, side)
