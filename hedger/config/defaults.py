"""Per-asset strategy presets.

Each asset used to run as its own program with hand-tuned grace periods;
they are now plain StrategyConfig values fed to the same engine.
"""

from decimal import Decimal

from hedger.config.schema import StrategyConfig
from hedger.models.common import Asset

DEFAULT_PRESETS: dict[Asset, StrategyConfig] = {
    Asset.BTC: StrategyConfig(
        asset=Asset.BTC,
        order_size=Decimal("5"),
        limit_enter_price=Decimal("0.45"),
        hedge_enter_price=Decimal("0.45"),
        trade_grace_seconds=90,
        hold_grace_seconds=30,
        stop_loss_grace_seconds=20,
    ),
    Asset.ETH: StrategyConfig(
        asset=Asset.ETH,
        order_size=Decimal("5"),
        limit_enter_price=Decimal("0.45"),
        hedge_enter_price=Decimal("0.45"),
        trade_grace_seconds=90,
        hold_grace_seconds=30,
        stop_loss_grace_seconds=60,
    ),
    Asset.XRP: StrategyConfig(
        asset=Asset.XRP,
        order_size=Decimal("5"),
        limit_enter_price=Decimal("0.45"),
        hedge_enter_price=Decimal("0.45"),
        trade_grace_seconds=90,
        hold_grace_seconds=30,
        stop_loss_grace_seconds=20,
    ),
}


def preset_for(asset: Asset) -> StrategyConfig:
    """Return the preset for an asset, or a default config tagged with it."""
    preset = DEFAULT_PRESETS.get(asset)
    if preset is None:
        return StrategyConfig(asset=asset)
    return preset
