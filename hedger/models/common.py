"""Common types and helpers shared across models."""

from datetime import UTC, datetime
from enum import StrEnum
from typing import TypeAlias

OrderId: TypeAlias = str
TokenId: TypeAlias = str


class Asset(StrEnum):
    BTC = "btc"
    ETH = "eth"
    SOL = "sol"
    XRP = "xrp"


def iso_from_timestamp(ts: float) -> str:
    return datetime.fromtimestamp(ts, UTC).isoformat()
