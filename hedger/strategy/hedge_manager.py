"""Hedge placement, monitoring and the stop-loss market exit."""

import logging
from decimal import Decimal

from hedger.config.schema import RetryConfig, TimingConfig
from hedger.execution.errors import HedgeStateError
from hedger.models.hedge import HedgeConfig, HedgeOutcome
from hedger.models.order import PlacedOrder
from hedger.strategy.order_desk import OrderDesk
from hedger.strategy.sizing import floor_dp, normalize_size
from hedger.strategy.window_gate import WindowGate

logger = logging.getLogger(__name__)


class HedgeManager:
    """Runs one hedge cycle for a matched leg.

    The outcome is WIN once the hedge fills, LOSS once a stop-loss exit
    fills, and UNDECIDED if the window runs out before either happens.
    """

    def __init__(
        self,
        desk: OrderDesk,
        gate: WindowGate,
        timing: TimingConfig,
        retry: RetryConfig,
    ):
        self.desk = desk
        self.gate = gate
        self.timing = timing
        self.retry = retry

    def manage(self, config: HedgeConfig) -> HedgeOutcome:
        hedge_size = self._settle_sibling(config)
        if hedge_size <= 0:
            logger.info(
                "Sibling %s already offsets the matched size, nothing to hedge",
                config.sibling_order_id,
            )
            return HedgeOutcome.WIN

        hedge = self.desk.place_limit(
            config.hedge_token_id, hedge_size, config.hedge_enter_price,
        )
        self.desk.tally.hedges_placed += 1
        self.desk.clock.sleep(self.timing.settle_delay_seconds)

        while True:
            status = self.desk.read_status(
                hedge.order_id, self.retry.hedge_status_attempts,
            )
            logger.info("Hedge order %s status: %s", hedge.order_id, status.state)
            if status.is_matched:
                self.desk.tally.hedges_matched += 1
                logger.info("Hedge order %s matched", hedge.order_id)
                return HedgeOutcome.WIN

            if self.gate.allow_stop_loss(config.timestamp, config.stop_loss_grace_seconds):
                return self._stop_loss(config, hedge)

            if self.gate.window_expired(config.timestamp):
                logger.error(
                    "Window %d expired with hedge %s unfilled, leaving it",
                    config.timestamp, hedge.order_id,
                )
                return HedgeOutcome.UNDECIDED

            self.desk.clock.sleep(self.timing.poll_interval_seconds)

    def _settle_sibling(self, config: HedgeConfig) -> Decimal:
        """Make sure the sibling leg is dead and correct the hedge size for its fill."""
        sibling = self.desk.read_status(config.sibling_order_id)
        if sibling.is_open:
            logger.info("Cancelling sibling order %s", config.sibling_order_id)
            self.desk.cancel(config.sibling_order_id)
        sibling = self.desk.read_status(config.sibling_order_id)

        hedge_size = config.hedge_size
        if sibling.has_fill:
            self.desk.tally.partial_fills += 1
            sibling_filled = floor_dp(sibling.size_matched)
            hedge_size = abs(sibling_filled - config.hedge_size)
            logger.info(
                "Sibling %s filled %s, hedge size corrected %s -> %s",
                config.sibling_order_id, sibling_filled, config.hedge_size, hedge_size,
            )
        return hedge_size

    def _stop_loss(self, config: HedgeConfig, hedge: PlacedOrder) -> HedgeOutcome:
        self.desk.tally.stop_losses += 1
        logger.warning(
            "Stop loss reached for window %d, cancelling hedge %s and exiting",
            config.timestamp, hedge.order_id,
        )
        self.desk.cancel(hedge.order_id)

        while True:
            if self.gate.window_expired(config.timestamp):
                logger.error(
                    "Window %d expired before the stop-loss exit filled",
                    config.timestamp,
                )
                return HedgeOutcome.UNDECIDED

            price = self.desk.best_price(config.hedge_token_id)
            if price <= 0 or price >= 1:
                logger.warning(
                    "Unusable price %s for %s, re-polling", price, config.hedge_token_id,
                )
                self.desk.clock.sleep(self.timing.poll_interval_seconds)
                continue

            exit_size = normalize_size(
                config.close_size * config.initial_entry_price / (1 - price),
                Decimal("0"),
                self.desk.tally,
            )
            if exit_size <= 0:
                raise HedgeStateError(
                    f"Computed non-positive exit size for close_size={config.close_size}"
                )

            logger.info(
                "Stop-loss exit: FOK %s x %s @ %s", config.hedge_token_id, exit_size, price,
            )
            result = self.desk.submit_exit(config.hedge_token_id, exit_size, price)
            if result.filled:
                logger.info("Stop-loss exit %s filled", result.order_id)
                return HedgeOutcome.LOSS

            if result.order_id:
                self.desk.clock.sleep(self.timing.exit_settle_seconds)
                status = self.desk.read_status(
                    result.order_id, self.retry.hedge_status_attempts,
                )
                if status.is_matched:
                    logger.info("Stop-loss exit %s matched", result.order_id)
                    return HedgeOutcome.LOSS

            logger.info("Stop-loss exit not filled, re-pricing")
