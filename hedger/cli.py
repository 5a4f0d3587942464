"""CLI entry point for the up/down hedger."""

import argparse
import logging
from pathlib import Path

from hedger.config.loader import get_config_value, load_config, set_config_value, with_asset
from hedger.config.schema import BotConfig, ExecutionMode
from hedger.daemon import HedgeDaemon
from hedger.execution.clob_gateway import ClobGateway
from hedger.execution.gateway import OrderGateway
from hedger.execution.paper_gateway import PaperGateway
from hedger.ingest.clob_client import ClobClient
from hedger.ingest.gamma_client import GammaClient
from hedger.ingest.market_resolver import GammaMarketResolver
from hedger.models.common import Asset, iso_from_timestamp
from hedger.models.market import window_slug
from hedger.reporting.formatters import format_run_state_json
from hedger.strategy.clock import SystemClock
from hedger.strategy.engine import StrategyEngine
from hedger.strategy.window_gate import WindowGate

DEFAULT_CONFIG = "configs/default.yaml"


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="hedger",
        description="Two-leg entry and hedge bot for Polymarket up/down windows",
    )
    parser.add_argument(
        "--config", default=DEFAULT_CONFIG, help="Config YAML path"
    )

    sub = parser.add_subparsers(dest="command")

    # run
    run_p = sub.add_parser("run", help="Trade windows until stopped")
    run_p.add_argument(
        "--live", action="store_true", help="Place real orders"
    )
    run_p.add_argument(
        "--asset", choices=[a.value for a in Asset], help="Override strategy asset"
    )
    run_p.add_argument(
        "--max-windows", type=int, default=None, help="Stop after N windows"
    )
    run_p.add_argument(
        "--log-dir", default="logs", help="Directory for per-window logs"
    )

    # window
    sub.add_parser("window", help="Show the next window and gate decisions")

    # config show / config set
    config_p = sub.add_parser("config", help="Config operations")
    config_sub = config_p.add_subparsers(dest="config_command")
    config_sub.add_parser("show", help="Display current config")
    set_p = config_sub.add_parser("set", help="Validate a config change")
    set_p.add_argument("keyvalue", help="key=value to set")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = _load(args.config)

    if args.command == "run":
        return _cmd_run(config, args)
    elif args.command == "window":
        return _cmd_window(config)
    elif args.command == "config":
        return _cmd_config(config, args)
    else:
        parser.print_help()
        return 1


def _load(path: str) -> BotConfig:
    if Path(path).exists():
        return load_config(path)
    logging.getLogger(__name__).info("No config at %s, using defaults", path)
    return BotConfig()


def build_gateway(config: BotConfig) -> OrderGateway:
    if config.execution.mode == ExecutionMode.LIVE:
        return ClobGateway(config.venue)
    return PaperGateway(
        ClobClient(base_url=config.venue.clob_url, timeout=config.venue.timeout_seconds)
    )


def _cmd_run(config: BotConfig, args) -> int:
    if args.asset:
        config = with_asset(config, Asset(args.asset))
    if args.live:
        config = set_config_value(config, "execution.mode", ExecutionMode.LIVE.value)
    if config.execution.mode == ExecutionMode.LIVE:
        print("WARNING: Running in LIVE mode")

    resolver = GammaMarketResolver(
        GammaClient(base_url=config.venue.gamma_url, timeout=config.venue.timeout_seconds)
    )
    engine = StrategyEngine(config, build_gateway(config), resolver, SystemClock())
    daemon = HedgeDaemon(engine, max_windows=args.max_windows, log_dir=Path(args.log_dir))
    state = daemon.start()
    print(format_run_state_json(state))
    return 0


def _cmd_window(config: BotConfig) -> int:
    gate = WindowGate(SystemClock(), config.timing.window_seconds)
    strategy = config.strategy
    ts = gate.next_window_start()
    print(f"Next window: {ts} ({iso_from_timestamp(ts)})")
    print(f"Slug: {window_slug(strategy.asset, ts)}")
    print(f"Starts in: {gate.seconds_until(ts):.0f}s")
    print(f"Entry allowed: {gate.allow_trade(ts, strategy.trade_grace_seconds)}")
    print(f"Holding allowed: {gate.allow_trade(ts, strategy.hold_grace_seconds)}")
    return 0


def _cmd_config(config: BotConfig, args) -> int:
    if args.config_command == "show":
        print(config.model_dump_json(indent=2))
        return 0
    elif args.config_command == "set":
        kv = args.keyvalue
        if "=" not in kv:
            print("Error: use key=value format")
            return 1
        key, value = kv.split("=", 1)
        try:
            new_config = set_config_value(config, key.strip(), value.strip())
            print(f"Set {key} = {get_config_value(new_config, key.strip())}")
            return 0
        except Exception as e:
            print(f"Error: {e}")
            return 1
    else:
        print("Use: config show | config set key=value")
        return 1
