"""Hedge daemon: runs the strategy engine window after window.

Usage:
    python -m hedger run --asset btc           # dry-run against live quotes
    python -m hedger run --live --asset eth    # real orders
    python -m hedger run --max-windows 4
"""

import logging
import os
import signal
from pathlib import Path

from hedger.config.loader import config_hash
from hedger.config.schema import ExecutionMode
from hedger.models.hedge import WindowPhase
from hedger.models.reporting import RunState, WindowResult
from hedger.reporting.formatters import format_run_state_text
from hedger.strategy.engine import StrategyEngine

logger = logging.getLogger(__name__)

MAX_BACKOFF = 600  # 10 minutes max backoff after repeated abandoned windows
LOG_DIR = Path("logs")
MAX_LOG_FILES = 100  # Keep last 100 window logs


def _window_of(path: Path) -> int:
    try:
        return int(path.stem.removeprefix("window_"))
    except ValueError:
        return 0


class HedgeDaemon:
    """Runs windows in a loop with backoff, per-window logs and signal handling."""

    def __init__(
        self,
        engine: StrategyEngine,
        max_windows: int | None = None,
        log_dir: Path | None = LOG_DIR,
    ):
        self.engine = engine
        self.config = engine.config
        self.clock = engine.clock
        self.max_windows = max_windows
        self.log_dir = log_dir
        self.run_state = RunState()
        self._running = False
        self._consecutive_failures = 0
        self._windows_processed = 0

    def start(self) -> RunState:
        """Start the daemon loop. Returns the final run state."""
        self._setup_signals()
        self._running = True

        mode_label = "LIVE" if self.config.execution.mode == ExecutionMode.LIVE else "DRY-RUN"
        logger.info(
            "Daemon started: asset=%s mode=%s size=%s max_loss=%s config=%s pid=%d",
            self.config.strategy.asset, mode_label, self.config.strategy.order_size,
            self.config.strategy.max_loss, config_hash(self.config), os.getpid(),
        )
        if self.config.execution.mode == ExecutionMode.LIVE:
            logger.warning("LIVE MODE, real money at stake")

        try:
            self._loop()
        except KeyboardInterrupt:
            logger.info("Daemon interrupted by keyboard")
        finally:
            logger.info("Daemon stopped: %s", format_run_state_text(self.run_state))
        return self.run_state

    def _loop(self) -> None:
        idle = self.config.timing.idle_poll_seconds
        while self._running:
            result = self._run_one_window()

            if result.phase == WindowPhase.SKIPPED:
                wait = idle
            elif result.phase == WindowPhase.ABANDONED:
                self._consecutive_failures += 1
                self._windows_processed += 1
                wait = min(idle * (2 ** self._consecutive_failures), MAX_BACKOFF)
                logger.warning(
                    "Window abandoned (%d consecutive), backing off %.0fs",
                    self._consecutive_failures, wait,
                )
            else:
                self._consecutive_failures = 0
                self._windows_processed += 1
                wait = 0

            if self.max_windows is not None and self._windows_processed >= self.max_windows:
                logger.info("Processed %d windows, stopping", self._windows_processed)
                break

            # Sleep in 1-second increments so we can respond to signals
            remaining = wait
            while self._running and remaining > 0:
                step = min(1.0, remaining)
                self.clock.sleep(step)
                remaining -= step

    def _run_one_window(self) -> WindowResult:
        ts = self.engine.pending_window(self.run_state)
        if ts is None or self.log_dir is None:
            self.run_state, result = self.engine.run_window(self.run_state)
            return result

        self.log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(self.log_dir / f"window_{ts}.log")
        file_handler.setLevel(logging.INFO)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        root_logger = logging.getLogger()
        root_logger.addHandler(file_handler)
        try:
            self.run_state, result = self.engine.run_window(self.run_state)
            return result
        finally:
            root_logger.removeHandler(file_handler)
            file_handler.close()
            self._rotate_logs()

    def _rotate_logs(self) -> None:
        """Keep only the logs of the most recent windows."""
        if self.log_dir is None or not self.log_dir.exists():
            return
        logs = sorted(self.log_dir.glob("window_*.log"), key=_window_of)
        for old in logs[: max(len(logs) - MAX_LOG_FILES, 0)]:
            old.unlink(missing_ok=True)

    def _setup_signals(self) -> None:
        """Handle SIGTERM and SIGINT for graceful shutdown."""
        def _stop(signum: int, frame: object) -> None:
            sig_name = signal.Signals(signum).name
            logger.info("Received %s, finishing current window...", sig_name)
            self._running = False

        signal.signal(signal.SIGTERM, _stop)
        signal.signal(signal.SIGINT, _stop)

    def stop(self) -> None:
        self._running = False
