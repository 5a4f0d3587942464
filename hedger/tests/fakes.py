"""In-memory test doubles for the clock, venue gateway and market resolver."""

from decimal import Decimal

from hedger.execution.errors import GatewayError, MarketResolutionError
from hedger.models.common import Asset
from hedger.models.market import Market, window_slug
from hedger.models.order import (
    MarketOrderResult,
    OrderState,
    OrderStatusSnapshot,
    OrderType,
    PlacedOrder,
    Side,
)

UP_TOKEN = "tok-up"
DOWN_TOKEN = "tok-down"


def make_market(ts: int = 1_700_000_100, asset: Asset = Asset.BTC) -> Market:
    return Market(
        asset=asset,
        timestamp=ts,
        slug=window_slug(asset, ts),
        first_token_id=UP_TOKEN,
        second_token_id=DOWN_TOKEN,
    )


def snapshot(order_id: str, state: str, size_matched: str = "0") -> OrderStatusSnapshot:
    return OrderStatusSnapshot(
        order_id=order_id, state=OrderState(state), size_matched=Decimal(size_matched),
    )


class FakeClock:
    """Simulated time: sleep advances now and records the requested duration."""

    def __init__(self, start: float = 0.0):
        self.current = float(start)
        self.sleeps: list[float] = []

    def now(self) -> float:
        return self.current

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.current += seconds


class FakeGateway:
    """Scripted OrderGateway.

    Order ids are handed out as ``order-1``, ``order-2``... in placement
    order. ``statuses[order_id]`` is a list of snapshots or exceptions
    returned one per read; the last entry repeats once the list runs out.
    """

    def __init__(self):
        self.placed: list[PlacedOrder] = []
        self.cancels: list[str] = []
        self.market_orders: list[tuple[str, Decimal, Decimal]] = []
        self.statuses: dict[str, list] = {}
        self.prices: list = []
        self.market_results: list = []
        self.place_errors: dict[int, Exception] = {}
        self.cancel_errors: list[Exception] = []
        self.status_reads: list[str] = []

    def script(self, order_id: str, *entries) -> None:
        self.statuses[order_id] = list(entries)

    def place_limit_order(
        self,
        token_id: str,
        size: Decimal,
        price: Decimal,
        side: Side,
        order_type: OrderType,
    ) -> PlacedOrder:
        index = len(self.placed) + 1
        if index in self.place_errors:
            raise self.place_errors.pop(index)
        order = PlacedOrder(
            order_id=f"order-{index}",
            token_id=token_id,
            side=side,
            order_type=order_type,
            size=size,
            price=price,
        )
        self.placed.append(order)
        return order

    def place_market_order(
        self,
        token_id: str,
        size: Decimal,
        price: Decimal,
        side: Side,
    ) -> MarketOrderResult:
        self.market_orders.append((token_id, size, price))
        entry = self.market_results.pop(0) if len(self.market_results) > 1 else self.market_results[0]
        if isinstance(entry, Exception):
            raise entry
        return entry

    def cancel_order(self, order_id: str) -> bool:
        self.cancels.append(order_id)
        if self.cancel_errors:
            raise self.cancel_errors.pop(0)
        return True

    def get_order_status(self, order_id: str) -> OrderStatusSnapshot:
        self.status_reads.append(order_id)
        entries = self.statuses.get(order_id)
        if not entries:
            return snapshot(order_id, "LIVE")
        entry = entries.pop(0) if len(entries) > 1 else entries[0]
        if isinstance(entry, Exception):
            raise entry
        return entry

    def get_price(self, token_id: str, side: Side) -> Decimal:
        entry = self.prices.pop(0) if len(self.prices) > 1 else self.prices[0]
        if isinstance(entry, Exception):
            raise entry
        return Decimal(str(entry))


class FakeResolver:
    """Returns a fixed market per window, or raises the scripted errors first."""

    def __init__(self, errors: list[Exception] | None = None, missing: bool = False):
        self.errors = list(errors or [])
        self.missing = missing
        self.calls: list[tuple[Asset, int]] = []

    def resolve_window(self, asset: Asset, window_ts: int) -> Market:
        self.calls.append((asset, window_ts))
        if self.errors:
            raise self.errors.pop(0)
        if self.missing:
            raise MarketResolutionError(f"No market for {window_ts}", 404)
        return make_market(window_ts, asset)


def flaky(error_count: int, then) -> list:
    """Status script: ``error_count`` venue errors, then ``then``."""
    return [GatewayError("503 Service Unavailable", 503)] * error_count + [then]
