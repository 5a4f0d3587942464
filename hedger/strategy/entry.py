"""Entry legs: one GTC buy on each side of the binary pair."""

import logging
from decimal import Decimal

from hedger.execution.errors import GatewayError, RetryExhaustedError
from hedger.models.hedge import EntryLegs
from hedger.models.market import Market
from hedger.strategy.order_desk import OrderDesk

logger = logging.getLogger(__name__)


class EntryLegManager:
    def __init__(self, desk: OrderDesk, leg_spacing_seconds: float = 1.0):
        self.desk = desk
        self.leg_spacing_seconds = leg_spacing_seconds

    def open_legs(self, market: Market, size: Decimal, price: Decimal) -> EntryLegs:
        """Place the first leg, wait the spacing, then the second leg.

        If the second placement fails the first leg is cancelled before the
        error propagates, so no lone leg is left resting on the book.
        """
        first = self.desk.place_limit(market.first_token_id, size, price)
        self.desk.clock.sleep(self.leg_spacing_seconds)
        try:
            second = self.desk.place_limit(market.second_token_id, size, price)
        except GatewayError:
            logger.error(
                "Second leg failed for %s, cancelling first leg %s",
                market.slug, first.order_id,
            )
            try:
                self.desk.cancel(first.order_id)
            except RetryExhaustedError:
                logger.exception("Could not cancel orphaned first leg %s", first.order_id)
            raise

        logger.info(
            "Opened legs for %s: first=%s second=%s",
            market.slug, first.order_id, second.order_id,
        )
        return EntryLegs(first=first, second=second)
