"""Pydantic v2 configuration schema with strict validation."""

from decimal import Decimal
from enum import StrEnum

from pydantic import BaseModel, Field, field_validator

from hedger.models.common import Asset


class ExecutionMode(StrEnum):
    DRY_RUN = "dry-run"
    LIVE = "live"


class StrategyConfig(BaseModel):
    model_config = {"extra": "forbid"}

    asset: Asset = Asset.BTC
    order_size: Decimal = Field(default=Decimal("5"), gt=0)
    limit_enter_price: Decimal = Field(default=Decimal("0.45"), gt=0, lt=1)
    hedge_enter_price: Decimal = Field(default=Decimal("0.45"), gt=0, lt=1)
    max_loss: Decimal = Field(default=Decimal("5"), ge=0)
    trade_grace_seconds: int = Field(default=90, ge=0)
    hold_grace_seconds: int = Field(default=30, ge=0)
    stop_loss_grace_seconds: int = Field(default=20, ge=0)

    @field_validator(
        "order_size", "limit_enter_price", "hedge_enter_price", "max_loss",
        mode="before",
    )
    @classmethod
    def _float_to_decimal(cls, value):
        # YAML hands us binary floats; go through str so 0.45 stays 0.45
        if isinstance(value, float):
            return Decimal(str(value))
        return value


class TimingConfig(BaseModel):
    model_config = {"extra": "forbid"}

    window_seconds: int = Field(default=900, gt=0)
    settle_delay_seconds: float = Field(default=10.0, ge=0.0)
    poll_interval_seconds: float = Field(default=1.0, ge=0.0)
    leg_spacing_seconds: float = Field(default=1.0, ge=0.0)
    exit_settle_seconds: float = Field(default=5.0, ge=0.0)
    idle_poll_seconds: float = Field(default=1.0, ge=0.0)


class RetryConfig(BaseModel):
    model_config = {"extra": "forbid"}

    status_read_attempts: int = Field(default=30, ge=1)
    hedge_status_attempts: int = Field(default=20, ge=1)
    cancel_attempts: int = Field(default=30, ge=1)
    close_attempts: int = Field(default=30, ge=1)
    price_attempts: int = Field(default=30, ge=1)
    resolve_attempts: int = Field(default=5, ge=1)
    delay_seconds: float = Field(default=1.0, ge=0.0)


class VenueConfig(BaseModel):
    model_config = {"extra": "forbid"}

    clob_url: str = "https://clob.polymarket.com"
    gamma_url: str = "https://gamma-api.polymarket.com"
    chain_id: int = 137
    signature_type: int = Field(default=2, ge=0, le=2)
    funder_address: str = ""
    timeout_seconds: float = Field(default=15.0, gt=0.0)


class ExecutionConfig(BaseModel):
    model_config = {"extra": "forbid"}

    mode: ExecutionMode = ExecutionMode.DRY_RUN


class BotConfig(BaseModel):
    model_config = {"extra": "forbid"}

    strategy: StrategyConfig = StrategyConfig()
    timing: TimingConfig = TimingConfig()
    retry: RetryConfig = RetryConfig()
    venue: VenueConfig = VenueConfig()
    execution: ExecutionConfig = ExecutionConfig()
