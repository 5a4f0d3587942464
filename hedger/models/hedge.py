"""Hedge cycle models: entry legs, hedge parameters, outcomes."""

from dataclasses import dataclass
from decimal import Decimal
from enum import IntEnum, StrEnum

from hedger.models.common import OrderId, TokenId
from hedger.models.order import PlacedOrder


class HedgeOutcome(IntEnum):
    LOSS = -1
    UNDECIDED = 0
    WIN = 1


class WindowPhase(StrEnum):
    AWAITING_FILL = "awaiting_fill"
    ONE_LEG_MATCHED = "one_leg_matched"
    BOTH_CANCELED = "both_canceled"
    FORCED_EXIT = "forced_exit"
    HEDGING = "hedging"
    WIN = "win"
    LOSS = "loss"
    FLAT = "flat"
    UNDECIDED = "undecided"
    ABANDONED = "abandoned"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class RetryPolicy:
    max_attempts: int
    delay_seconds: float


@dataclass(frozen=True)
class EntryLegs:
    first: PlacedOrder
    second: PlacedOrder

    def sibling_of(self, leg: PlacedOrder) -> PlacedOrder:
        return self.second if leg.order_id == self.first.order_id else self.first


@dataclass(frozen=True)
class HedgeConfig:
    sibling_order_id: OrderId
    hedge_token_id: TokenId
    initial_token_id: TokenId
    hedge_size: Decimal
    hedge_enter_price: Decimal
    close_size: Decimal
    initial_entry_price: Decimal
    stop_loss_grace_seconds: int
    timestamp: int
