"""Shared test fixtures."""

from pathlib import Path

import pytest
import yaml

from hedger.config.schema import BotConfig, RetryConfig, TimingConfig
from hedger.models.reporting import WindowTally
from hedger.strategy.order_desk import OrderDesk
from hedger.tests.fakes import FakeClock, FakeGateway


@pytest.fixture
def default_config() -> BotConfig:
    """Return a default BotConfig (BTC preset, dry-run)."""
    return BotConfig()


@pytest.fixture
def timing() -> TimingConfig:
    return TimingConfig()


@pytest.fixture
def retry() -> RetryConfig:
    return RetryConfig()


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def tally() -> WindowTally:
    return WindowTally()


@pytest.fixture
def desk_factory(gateway, retry, tally):
    """Build an OrderDesk around the fake gateway for a given clock."""

    def _make(clock: FakeClock) -> OrderDesk:
        return OrderDesk(gateway, clock, retry, tally)

    return _make


@pytest.fixture
def config_yaml_path(tmp_path: Path) -> Path:
    """Write a minimal valid config YAML and return its path."""
    data = {
        "strategy": {"asset": "eth", "order_size": 10, "limit_enter_price": 0.44},
        "timing": {"settle_delay_seconds": 5},
        "execution": {"mode": "dry-run"},
    }
    path = tmp_path / "test_config.yaml"
    with open(path, "w") as f:
        yaml.dump(data, f)
    return path
