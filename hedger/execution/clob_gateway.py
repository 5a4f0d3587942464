"""Live order gateway over the Polymarket CLOB via py-clob-client."""

import logging
import os
from decimal import Decimal
from typing import Any

from py_clob_client.client import ClobClient as PyClobClient
from py_clob_client.clob_types import OrderArgs
from py_clob_client.clob_types import OrderType as ClobOrderType
from py_clob_client.exceptions import PolyApiException

from hedger.config.schema import VenueConfig
from hedger.execution.errors import GatewayError
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


def _error_message(exc: PolyApiException) -> str:
    msg = getattr(exc, "error_msg", None)
    if isinstance(msg, dict):
        return str(msg.get("error") or msg)
    return str(msg or exc)


class ClobGateway:
    """OrderGateway backed by an authenticated py-clob-client ClobClient.

    The client is built lazily on first use so dry-run startup never needs a
    key. Signing and API credential derivation are left to the SDK.
    """

    def __init__(
        self,
        venue: VenueConfig,
        private_key: str | None = None,
        client: Any | None = None,
    ):
        self.venue = venue
        self.private_key = private_key or os.environ.get("POLY_PRIVATE_KEY", "")
        self.funder_address = (
            os.environ.get("POLY_FUNDER_ADDRESS", "") or venue.funder_address
        ).strip()
        self._client = client

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = self._bootstrap_client()
        return self._client

    def _bootstrap_client(self) -> Any:
        if not self.private_key:
            raise GatewayError("POLY_PRIVATE_KEY not set")
        client = PyClobClient(
            host=self.venue.clob_url,
            key=self.private_key,
            chain_id=self.venue.chain_id,
            signature_type=self.venue.signature_type,
            funder=self.funder_address or None,
        )
        try:
            client.set_api_creds(client.create_or_derive_api_creds())
        except PolyApiException as e:
            raise GatewayError(
                f"Unable to derive CLOB API credentials: {_error_message(e)}",
                getattr(e, "status_code", None),
            ) from e
        logger.info(
            "CLOB client ready host=%s funder=%s signature_type=%s",
            self.venue.clob_url, self.funder_address or "<signer>", self.venue.signature_type,
        )
        return client

    def _post(
        self,
        token_id: TokenId,
        size: Decimal,
        price: Decimal,
        side: Side,
        order_type: OrderType,
    ) -> dict:
        order_args = OrderArgs(
            token_id=token_id,
            price=float(price),
            size=float(size),
            side=side.value,
        )
        client = self.client
        try:
            signed_order = client.create_order(order_args)
        except PolyApiException:
            raise
        except Exception as e:
            # the SDK raises plain Exception for prices outside the tick range
            logger.error("Could not build order for %s @ %s: %s", token_id, price, e)
            raise GatewayError(f"Order build failed for {token_id}: {e}") from e
        response = client.post_order(signed_order, getattr(ClobOrderType, order_type.value))
        return response if isinstance(response, dict) else {}

    # --- OrderGateway ---

    def place_limit_order(
        self,
        token_id: TokenId,
        size: Decimal,
        price: Decimal,
        side: Side,
        order_type: OrderType,
    ) -> PlacedOrder:
        try:
            response = self._post(token_id, size, price, side, order_type)
        except PolyApiException as e:
            logger.error("post_order failed for %s: %s", token_id, _error_message(e))
            raise GatewayError(_error_message(e), getattr(e, "status_code", None)) from e

        error = response.get("errorMsg") or ""
        order_id = response.get("orderID") or response.get("orderId") or ""
        if error or not order_id:
            raise GatewayError(f"Order rejected for {token_id}: {error or response}")
        return PlacedOrder(
            order_id=order_id,
            token_id=token_id,
            side=side,
            order_type=order_type,
            size=size,
            price=price,
        )

    def place_market_order(
        self,
        token_id: TokenId,
        size: Decimal,
        price: Decimal,
        side: Side,
    ) -> MarketOrderResult:
        """Fill-or-kill at the observed price. Rejections come back as error_message."""
        try:
            response = self._post(token_id, size, price, side, OrderType.FOK)
        except PolyApiException as e:
            return MarketOrderResult(order_id="", filled=False, error_message=_error_message(e))
        except GatewayError as e:
            return MarketOrderResult(order_id="", filled=False, error_message=str(e))

        error = response.get("errorMsg") or ""
        if error:
            return MarketOrderResult(order_id="", filled=False, error_message=error)
        status = OrderState.parse(response.get("status"))
        return MarketOrderResult(
            order_id=response.get("orderID") or "",
            filled=status == OrderState.MATCHED,
        )

    def cancel_order(self, order_id: OrderId) -> bool:
        try:
            response = self.client.cancel(order_id)
        except PolyApiException as e:
            raise GatewayError(_error_message(e), getattr(e, "status_code", None)) from e

        response = response if isinstance(response, dict) else {}
        canceled = response.get("canceled") or []
        if order_id in canceled:
            return True
        not_canceled = response.get("not_canceled") or {}
        logger.info("Cancel of %s was a no-op: %s", order_id, not_canceled.get(order_id, "unknown"))
        return False

    def get_order_status(self, order_id: OrderId) -> OrderStatusSnapshot:
        try:
            data = self.client.get_order(order_id)
        except PolyApiException as e:
            raise GatewayError(_error_message(e), getattr(e, "status_code", None)) from e
        if not isinstance(data, dict) or not data:
            raise GatewayError(f"Order {order_id} not found", 404)
        return OrderStatusSnapshot(
            order_id=order_id,
            state=OrderState.parse(data.get("status")),
            size_matched=Decimal(str(data.get("size_matched") or "0")),
        )

    def get_price(self, token_id: TokenId, side: Side) -> Decimal:
        try:
            data = self.client.get_price(token_id, side.value)
        except PolyApiException as e:
            raise GatewayError(_error_message(e), getattr(e, "status_code", None)) from e
        if not isinstance(data, dict) or data.get("price") is None:
            raise GatewayError(f"No price for {token_id}")
        return Decimal(str(data["price"]))
