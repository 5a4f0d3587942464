"""Strategy engine: processes one trading window end to end."""

import logging

from hedger.config.schema import BotConfig
from hedger.execution.errors import GatewayError, HedgeStateError, RetryExhaustedError
from hedger.execution.gateway import MarketResolver, OrderGateway
from hedger.models.hedge import HedgeOutcome, WindowPhase
from hedger.models.market import Market
from hedger.models.reporting import RunState, WindowResult, WindowTally
from hedger.reporting.formatters import format_run_state_text, format_window_result_text
from hedger.strategy.clock import Clock
from hedger.strategy.entry import EntryLegManager
from hedger.strategy.hedge_manager import HedgeManager
from hedger.strategy.order_desk import OrderDesk
from hedger.strategy.position_machine import PositionStateMachine
from hedger.strategy.retry import with_retry
from hedger.strategy.window_gate import WindowGate

logger = logging.getLogger(__name__)


class StrategyEngine:
    """Parametrized window driver shared by every asset.

    Holds no mutable state across windows: the caller passes a RunState in
    and gets the updated one back.
    """

    def __init__(
        self,
        config: BotConfig,
        gateway: OrderGateway,
        resolver: MarketResolver,
        clock: Clock,
    ):
        self.config = config
        self.gateway = gateway
        self.resolver = resolver
        self.clock = clock
        self.gate = WindowGate(clock, config.timing.window_seconds)

    def pending_window(self, run_state: RunState) -> int | None:
        """The next window timestamp if it can still be entered, else None."""
        ts = self.gate.next_window_start()
        if run_state.is_completed(ts):
            return None
        if not self.gate.allow_trade(ts, self.config.strategy.trade_grace_seconds):
            logger.debug("Not time to trade window %d", ts)
            return None
        return ts

    def run_window(self, run_state: RunState) -> tuple[RunState, WindowResult]:
        ts = self.pending_window(run_state)
        if ts is None:
            return run_state, WindowResult(
                timestamp=self.gate.next_window_start(), phase=WindowPhase.SKIPPED,
            )

        logger.info(
            "Window %d for %s | %s",
            ts, self.config.strategy.asset, format_run_state_text(run_state),
        )
        tally = WindowTally()
        desk = OrderDesk(self.gateway, self.clock, self.config.retry, tally)
        try:
            phase, outcome = self._trade(ts, desk)
            result = WindowResult(timestamp=ts, phase=phase, outcome=outcome, tally=tally)
        except (GatewayError, RetryExhaustedError, HedgeStateError) as e:
            logger.exception("Window %d abandoned", ts)
            result = WindowResult(
                timestamp=ts,
                phase=WindowPhase.ABANDONED,
                outcome=HedgeOutcome.UNDECIDED,
                tally=tally,
                error=str(e),
            )

        new_state = run_state.record(result)
        logger.info(format_window_result_text(result))
        logger.info(format_run_state_text(new_state))
        return new_state, result

    def _trade(self, ts: int, desk: OrderDesk) -> tuple[WindowPhase, HedgeOutcome]:
        strategy = self.config.strategy
        market = self._resolve(ts, desk)
        legs = EntryLegManager(desk, self.config.timing.leg_spacing_seconds).open_legs(
            market, strategy.order_size, strategy.limit_enter_price,
        )
        hedger = HedgeManager(desk, self.gate, self.config.timing, self.config.retry)
        machine = PositionStateMachine(
            desk, self.gate, hedger, strategy, self.config.timing,
        )
        return machine.run(market, legs)

    def _resolve(self, ts: int, desk: OrderDesk) -> Market:
        asset = self.config.strategy.asset
        return with_retry(
            lambda: self.resolver.resolve_window(asset, ts),
            desk.policy(self.config.retry.resolve_attempts),
            self.clock.sleep,
            label="resolve_window",
            tally=desk.tally,
        )
