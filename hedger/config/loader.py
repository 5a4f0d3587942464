"""YAML config loader with per-asset presets and runtime get/set."""

import hashlib
import json
from pathlib import Path
from typing import Any

import yaml

from hedger.config.defaults import preset_for
from hedger.config.schema import BotConfig, StrategyConfig
from hedger.models.common import Asset


def load_config(path: str | Path) -> BotConfig:
    """Load and validate config from a YAML file.

    The preset for ``strategy.asset`` is used as the base of the strategy
    section; keys given explicitly in the YAML win over the preset.
    """
    path = Path(path)
    with open(path) as f:
        raw = yaml.safe_load(f) or {}

    strategy = raw.get("strategy") or {}
    asset = Asset(strategy.get("asset", Asset.BTC))
    base = preset_for(asset).model_dump()
    base.update(strategy)
    raw["strategy"] = base

    return BotConfig(**raw)


def with_asset(config: BotConfig, asset: Asset) -> BotConfig:
    """Return a copy of the config trading a different asset.

    Strategy values that differ from the current asset's preset were set
    explicitly and are carried over; everything else comes from the new
    asset's preset.
    """
    current = preset_for(config.strategy.asset).model_dump()
    overrides = {
        key: value
        for key, value in config.strategy.model_dump().items()
        if key != "asset" and value != current[key]
    }
    strategy = preset_for(asset).model_dump()
    strategy.update(overrides)
    strategy["asset"] = asset
    return config.model_copy(update={"strategy": StrategyConfig(**strategy)})


def config_hash(config: BotConfig) -> str:
    """Compute a deterministic SHA256 hash of the config."""
    data = config.model_dump_json(indent=None)
    return hashlib.sha256(data.encode()).hexdigest()[:16]


def get_config_value(config: BotConfig, dotted_key: str) -> Any:
    """Get a config value by dotted key path. E.g. 'strategy.order_size'."""
    parts = dotted_key.split(".")
    obj: Any = config
    for part in parts:
        if hasattr(obj, part):
            obj = getattr(obj, part)
        elif isinstance(obj, dict):
            obj = obj[part]
        else:
            raise KeyError(f"Config key not found: {dotted_key}")
    return obj


def set_config_value(config: BotConfig, dotted_key: str, value: Any) -> BotConfig:
    """Set a config value by dotted key path and re-validate.

    Returns a new BotConfig instance.
    """
    data = json.loads(config.model_dump_json())
    parts = dotted_key.split(".")
    target = data
    for part in parts[:-1]:
        target = target[part]
    if parts[-1] not in target:
        raise KeyError(f"Config key not found: {dotted_key}")
    old_value = target[parts[-1]]
    if isinstance(old_value, bool) and isinstance(value, str):
        value = value.lower() in ("1", "true", "yes", "on")
    elif isinstance(old_value, int) and isinstance(value, str):
        value = int(value)
    elif isinstance(old_value, float) and isinstance(value, str):
        value = float(value)
    target[parts[-1]] = value
    return BotConfig(**data)
