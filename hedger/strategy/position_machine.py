"""State machine over the two entry legs of a window."""

import logging
from decimal import Decimal

from hedger.config.schema import StrategyConfig, TimingConfig
from hedger.models.hedge import EntryLegs, HedgeConfig, HedgeOutcome, WindowPhase
from hedger.models.market import Market
from hedger.models.order import OrderStatusSnapshot, PlacedOrder
from hedger.strategy.hedge_manager import HedgeManager
from hedger.strategy.order_desk import OrderDesk
from hedger.strategy.sizing import normalize_size
from hedger.strategy.window_gate import WindowGate

logger = logging.getLogger(__name__)

_OUTCOME_PHASES = {
    HedgeOutcome.WIN: WindowPhase.WIN,
    HedgeOutcome.LOSS: WindowPhase.LOSS,
    HedgeOutcome.UNDECIDED: WindowPhase.UNDECIDED,
}


class PositionStateMachine:
    """Polls both legs and decides when to cancel, hedge or walk away.

    One instance handles one window. Within a tick a MATCHED read always
    wins over the window-gate decision.
    """

    def __init__(
        self,
        desk: OrderDesk,
        gate: WindowGate,
        hedger: HedgeManager,
        strategy: StrategyConfig,
        timing: TimingConfig,
    ):
        self.desk = desk
        self.gate = gate
        self.hedger = hedger
        self.strategy = strategy
        self.timing = timing
        self.phase = WindowPhase.AWAITING_FILL

    def run(self, market: Market, legs: EntryLegs) -> tuple[WindowPhase, HedgeOutcome]:
        self.desk.clock.sleep(self.timing.settle_delay_seconds)
        while True:
            decision = self.step(market, legs)
            if decision is not None:
                return decision
            self.desk.clock.sleep(self.timing.poll_interval_seconds)

    def step(
        self, market: Market, legs: EntryLegs
    ) -> tuple[WindowPhase, HedgeOutcome] | None:
        """One poll of both legs. Returns the final phase, or None to keep polling."""
        first = self.desk.read_status(legs.first.order_id)
        second = self.desk.read_status(legs.second.order_id)
        logger.info(
            "Legs for %s: first=%s (%s) second=%s (%s)",
            market.slug, first.state, first.size_matched, second.state, second.size_matched,
        )
        observed = ((legs.first, first), (legs.second, second))

        for leg, status in observed:
            if status.is_matched:
                sibling = legs.sibling_of(leg)
                sibling_status = second if leg is legs.first else first
                return self._on_match(market, leg, status, sibling, sibling_status)

        if first.is_canceled and second.is_canceled:
            filled = [(leg, status) for leg, status in observed if status.has_fill]
            if not filled:
                self._transition(WindowPhase.BOTH_CANCELED)
                return WindowPhase.BOTH_CANCELED, HedgeOutcome.UNDECIDED
            leg, status = filled[0]
            return self._on_forced_exit(market, leg, status, legs.sibling_of(leg))

        if not self.gate.allow_trade(market.timestamp, self.strategy.hold_grace_seconds):
            return self._on_gate_closed(market, legs, observed)

        return None

    def _on_match(
        self,
        market: Market,
        leg: PlacedOrder,
        status: OrderStatusSnapshot,
        sibling: PlacedOrder,
        sibling_status: OrderStatusSnapshot,
    ) -> tuple[WindowPhase, HedgeOutcome]:
        self._transition(WindowPhase.ONE_LEG_MATCHED)
        self.desk.tally.orders_matched += 1
        if sibling_status.is_open:
            self.desk.cancel(sibling.order_id)
        size = normalize_size(status.size_matched, leg.size, self.desk.tally)
        return self._hedge(self._hedge_config(market, leg, sibling, size))

    def _on_gate_closed(
        self,
        market: Market,
        legs: EntryLegs,
        observed: tuple[tuple[PlacedOrder, OrderStatusSnapshot], ...],
    ) -> tuple[WindowPhase, HedgeOutcome]:
        for leg, status in observed:
            if status.has_fill:
                return self._on_forced_exit(market, leg, status, legs.sibling_of(leg))

        for leg, status in observed:
            if status.is_open:
                logger.info("Window gate closed, cancelling unfilled leg %s", leg.order_id)
                self.desk.cancel(leg.order_id)
        self._transition(WindowPhase.FLAT)
        return WindowPhase.FLAT, HedgeOutcome.UNDECIDED

    def _on_forced_exit(
        self,
        market: Market,
        leg: PlacedOrder,
        status: OrderStatusSnapshot,
        sibling: PlacedOrder,
    ) -> tuple[WindowPhase, HedgeOutcome]:
        """Hedge a partially filled leg instead of holding it unhedged."""
        self._transition(WindowPhase.FORCED_EXIT)
        self.desk.tally.partial_fills += 1
        if status.is_open:
            self.desk.cancel(leg.order_id)
            status = self.desk.read_status(leg.order_id)
        size = normalize_size(status.size_matched, leg.size, self.desk.tally)
        logger.info(
            "Hedging partial fill of %s on %s with size %s",
            leg.order_id, market.slug, size,
        )
        return self._hedge(self._hedge_config(market, leg, sibling, size))

    def _hedge(self, config: HedgeConfig) -> tuple[WindowPhase, HedgeOutcome]:
        self._transition(WindowPhase.HEDGING)
        outcome = self.hedger.manage(config)
        phase = _OUTCOME_PHASES[outcome]
        self._transition(phase)
        return phase, outcome

    def _hedge_config(
        self, market: Market, leg: PlacedOrder, sibling: PlacedOrder, size: Decimal
    ) -> HedgeConfig:
        return HedgeConfig(
            sibling_order_id=sibling.order_id,
            hedge_token_id=market.other_token(leg.token_id),
            initial_token_id=leg.token_id,
            hedge_size=size,
            hedge_enter_price=self.strategy.hedge_enter_price,
            close_size=size,
            initial_entry_price=leg.price if leg.price is not None else self.strategy.limit_enter_price,
            stop_loss_grace_seconds=self.strategy.stop_loss_grace_seconds,
            timestamp=market.timestamp,
        )

    def _transition(self, phase: WindowPhase) -> None:
        logger.info("Phase %s -> %s", self.phase, phase)
        self.phase = phase
