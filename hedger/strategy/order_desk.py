"""Per-window venue access: retried reads, at-most-once cancels, tallies."""

import logging
from decimal import Decimal

from hedger.config.schema import RetryConfig
from hedger.execution.errors import MarketOrderRejectedError
from hedger.execution.gateway import OrderGateway
from hedger.models.common import OrderId, TokenId
from hedger.models.hedge import RetryPolicy
from hedger.models.order import (
    MarketOrderResult,
    OrderStatusSnapshot,
    OrderType,
    PlacedOrder,
    Side,
)
from hedger.models.reporting import WindowTally
from hedger.strategy.clock import Clock
from hedger.strategy.retry import with_retry

logger = logging.getLogger(__name__)


class OrderDesk:
    """Wraps an OrderGateway for the lifetime of one window.

    Remembers which orders it has already cancelled so a second cancel for
    the same id never reaches the venue.
    """

    def __init__(
        self,
        gateway: OrderGateway,
        clock: Clock,
        retry: RetryConfig,
        tally: WindowTally | None = None,
    ):
        self.gateway = gateway
        self.clock = clock
        self.retry = retry
        self.tally = tally if tally is not None else WindowTally()
        self._canceled: set[OrderId] = set()

    def policy(self, attempts: int) -> RetryPolicy:
        return RetryPolicy(max_attempts=attempts, delay_seconds=self.retry.delay_seconds)

    def read_status(self, order_id: OrderId, attempts: int | None = None) -> OrderStatusSnapshot:
        """Fresh status read, retried on venue errors."""
        return with_retry(
            lambda: self.gateway.get_order_status(order_id),
            self.policy(attempts or self.retry.status_read_attempts),
            self.clock.sleep,
            label="get_order",
            tally=self.tally,
        )

    def cancel(self, order_id: OrderId) -> bool:
        """Cancel an order once. Returns False if it was already cancelled here."""
        if self.was_canceled(order_id):
            logger.debug("Order %s already cancelled this window, skipping", order_id)
            return False
        with_retry(
            lambda: self.gateway.cancel_order(order_id),
            self.policy(self.retry.cancel_attempts),
            self.clock.sleep,
            label="cancel_order",
            tally=self.tally,
        )
        self._canceled.add(order_id)
        self.tally.orders_canceled += 1
        logger.info("Cancelled order %s", order_id)
        return True

    def was_canceled(self, order_id: OrderId) -> bool:
        return order_id in self._canceled

    def place_limit(
        self,
        token_id: TokenId,
        size: Decimal,
        price: Decimal,
        order_type: OrderType = OrderType.GTC,
        side: Side = Side.BUY,
    ) -> PlacedOrder:
        """Place a limit order. Not retried: a lost ack could double the position."""
        order = self.gateway.place_limit_order(token_id, size, price, side, order_type)
        self.tally.orders_placed += 1
        logger.info(
            "Placed %s %s %s x %s @ %s -> %s",
            order_type, side, token_id, size, price, order.order_id,
        )
        return order

    def best_price(self, token_id: TokenId, side: Side = Side.BUY) -> Decimal:
        return with_retry(
            lambda: self.gateway.get_price(token_id, side),
            self.policy(self.retry.price_attempts),
            self.clock.sleep,
            label="get_price",
            tally=self.tally,
        )

    def submit_exit(
        self,
        token_id: TokenId,
        size: Decimal,
        price: Decimal,
        side: Side = Side.BUY,
    ) -> MarketOrderResult:
        """Submit a fill-or-kill exit; an error message counts as a failed attempt."""

        def _submit() -> MarketOrderResult:
            result = self.gateway.place_market_order(token_id, size, price, side)
            if not result.ok:
                raise MarketOrderRejectedError(result.error_message)
            return result

        result = with_retry(
            _submit,
            self.policy(self.retry.close_attempts),
            self.clock.sleep,
            label="close_position",
            tally=self.tally,
        )
        self.tally.exit_attempts += 1
        return result
