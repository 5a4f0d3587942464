"""Order and order-state models."""

from dataclasses import dataclass
from decimal import Decimal
from enum import StrEnum

from hedger.models.common import OrderId, TokenId


class Side(StrEnum):
    BUY = "BUY"
    SELL = "SELL"


class OrderType(StrEnum):
    GTC = "GTC"
    FOK = "FOK"


class OrderState(StrEnum):
    LIVE = "LIVE"
    MATCHED = "MATCHED"
    CANCELED = "CANCELED"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def parse(cls, raw: str | None) -> "OrderState":
        """Map a venue status string onto a known state."""
        if not raw:
            return cls.UNKNOWN
        value = raw.strip().upper()
        if value == "CANCELLED":
            value = "CANCELED"
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN

    @property
    def is_terminal(self) -> bool:
        return self in (OrderState.MATCHED, OrderState.CANCELED)


@dataclass(frozen=True)
class PlacedOrder:
    order_id: OrderId
    token_id: TokenId
    side: Side
    order_type: OrderType
    size: Decimal
    price: Decimal | None


@dataclass(frozen=True)
class OrderStatusSnapshot:
    order_id: OrderId
    state: OrderState
    size_matched: Decimal

    @property
    def is_matched(self) -> bool:
        return self.state == OrderState.MATCHED

    @property
    def is_canceled(self) -> bool:
        return self.state == OrderState.CANCELED

    @property
    def is_open(self) -> bool:
        return not self.state.is_terminal

    @property
    def has_fill(self) -> bool:
        return self.size_matched > 0


@dataclass(frozen=True)
class MarketOrderResult:
    order_id: OrderId
    filled: bool
    error_message: str = ""

    @property
    def ok(self) -> bool:
        return not self.error_message
