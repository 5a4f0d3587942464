"""Tests for the two-leg position state machine."""

from decimal import Decimal

import pytest

from hedger.config.schema import StrategyConfig
from hedger.models.hedge import EntryLegs, HedgeOutcome, WindowPhase
from hedger.models.order import OrderType, PlacedOrder, Side
from hedger.strategy.hedge_manager import HedgeManager
from hedger.strategy.position_machine import PositionStateMachine
from hedger.strategy.window_gate import WindowGate
from hedger.tests.fakes import DOWN_TOKEN, UP_TOKEN, FakeClock, make_market, snapshot

T = 1_700_000_100


def _leg(order_id: str, token_id: str, size: str = "50") -> PlacedOrder:
    return PlacedOrder(
        order_id=order_id,
        token_id=token_id,
        side=Side.BUY,
        order_type=OrderType.GTC,
        size=Decimal(size),
        price=Decimal("0.45"),
    )


LEGS = EntryLegs(first=_leg("leg-1", UP_TOKEN), second=_leg("leg-2", DOWN_TOKEN))


@pytest.fixture
def machine_factory(desk_factory, timing, retry):
    def _make(clock: FakeClock) -> PositionStateMachine:
        desk = desk_factory(clock)
        gate = WindowGate(clock, timing.window_seconds)
        hedger = HedgeManager(desk, gate, timing, retry)
        return PositionStateMachine(desk, gate, hedger, StrategyConfig(), timing)

    return _make


class TestMatchedLeg:
    def test_first_leg_matched_hedge_fills(self, gateway, machine_factory):
        gateway.script("leg-1", snapshot("leg-1", "MATCHED", "50"))
        gateway.script("leg-2", snapshot("leg-2", "LIVE"), snapshot("leg-2", "CANCELED"))
        gateway.script("order-1", snapshot("order-1", "MATCHED", "50"))
        machine = machine_factory(FakeClock(T - 200))

        phase, outcome = machine.run(make_market(T), LEGS)

        assert (phase, outcome) == (WindowPhase.WIN, HedgeOutcome.WIN)
        assert gateway.cancels == ["leg-2"]
        hedge = gateway.placed[0]
        assert hedge.token_id == DOWN_TOKEN
        assert hedge.size == Decimal("50.00")
        assert hedge.price == Decimal("0.45")
        assert hedge.order_type == OrderType.GTC
        assert machine.desk.tally.hedges_matched == 1

    def test_sibling_cancel_sent_at_most_once(self, gateway, machine_factory):
        # venue keeps reporting the sibling LIVE after the cancel
        gateway.script("leg-1", snapshot("leg-1", "MATCHED", "50"))
        gateway.script("leg-2", snapshot("leg-2", "LIVE"))
        gateway.script("order-1", snapshot("order-1", "MATCHED", "50"))
        machine = machine_factory(FakeClock(T - 200))

        _, outcome = machine.run(make_market(T), LEGS)

        assert outcome == HedgeOutcome.WIN
        assert gateway.cancels == ["leg-2"]

    def test_match_wins_over_closed_gate(self, gateway, machine_factory):
        gateway.script("leg-1", snapshot("leg-1", "LIVE"), snapshot("leg-1", "CANCELED"))
        gateway.script("leg-2", snapshot("leg-2", "MATCHED", "50"))
        gateway.script("order-1", snapshot("order-1", "MATCHED", "50"))
        machine = machine_factory(FakeClock(T - 20))

        phase, _ = machine.run(make_market(T), LEGS)

        assert phase == WindowPhase.WIN
        assert gateway.cancels == ["leg-1"]
        assert gateway.placed[0].token_id == UP_TOKEN

    def test_bad_matched_size_falls_back_to_leg_size(self, gateway, machine_factory):
        gateway.script("leg-1", snapshot("leg-1", "MATCHED", "0"))
        gateway.script("leg-2", snapshot("leg-2", "CANCELED"))
        gateway.script("order-1", snapshot("order-1", "MATCHED"))
        machine = machine_factory(FakeClock(T - 200))

        machine.run(make_market(T), LEGS)

        assert gateway.placed[0].size == Decimal("50")
        assert machine.desk.tally.size_fallbacks == 1


class TestNoFill:
    def test_both_legs_canceled(self, gateway, machine_factory):
        gateway.script("leg-1", snapshot("leg-1", "CANCELED"))
        gateway.script("leg-2", snapshot("leg-2", "CANCELED"))
        machine = machine_factory(FakeClock(T - 200))

        phase, outcome = machine.run(make_market(T), LEGS)

        assert phase == WindowPhase.BOTH_CANCELED
        assert outcome == HedgeOutcome.UNDECIDED
        assert gateway.placed == []
        assert gateway.cancels == []

    def test_gate_closes_with_live_legs(self, gateway, machine_factory):
        clock = FakeClock(T - 50)
        machine = machine_factory(clock)

        phase, outcome = machine.run(make_market(T), LEGS)

        assert phase == WindowPhase.FLAT
        assert outcome == HedgeOutcome.UNDECIDED
        assert gateway.cancels == ["leg-1", "leg-2"]
        assert gateway.placed == []
        # hold grace is 30s: the first tick past T - 30 closes the gate
        assert clock.now() == T - 29

    def test_keeps_polling_while_gate_open(self, gateway, machine_factory):
        machine = machine_factory(FakeClock(T - 200))
        assert machine.step(make_market(T), LEGS) is None
        assert machine.phase == WindowPhase.AWAITING_FILL


class TestForcedExit:
    def test_partial_fill_at_gate_close_is_hedged(self, gateway, machine_factory):
        gateway.script(
            "leg-1",
            snapshot("leg-1", "LIVE", "2.5"),
            snapshot("leg-1", "CANCELED", "3.005"),
        )
        gateway.script("leg-2", snapshot("leg-2", "LIVE"))
        gateway.script("order-1", snapshot("order-1", "MATCHED", "3"))
        machine = machine_factory(FakeClock(T - 35))

        phase, outcome = machine.run(make_market(T), LEGS)

        assert (phase, outcome) == (WindowPhase.WIN, HedgeOutcome.WIN)
        assert gateway.cancels == ["leg-1", "leg-2"]
        assert gateway.placed[0].token_id == DOWN_TOKEN
        assert gateway.placed[0].size == Decimal("3.00")
        assert machine.desk.tally.partial_fills == 1

    def test_both_canceled_with_partial_fill(self, gateway, machine_factory):
        gateway.script("leg-1", snapshot("leg-1", "CANCELED"))
        gateway.script("leg-2", snapshot("leg-2", "CANCELED", "1.5"))
        gateway.script("order-1", snapshot("order-1", "MATCHED", "1.5"))
        machine = machine_factory(FakeClock(T - 200))

        phase, _ = machine.run(make_market(T), LEGS)

        assert phase == WindowPhase.WIN
        assert gateway.cancels == []
        assert gateway.placed[0].token_id == UP_TOKEN
        assert gateway.placed[0].size == Decimal("1.50")
