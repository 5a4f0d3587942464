"""Reporting models: per-window event tally, window results, run state."""

from dataclasses import dataclass, field, replace

from hedger.models.hedge import HedgeOutcome, WindowPhase


@dataclass
class WindowTally:
    orders_placed: int = 0
    orders_matched: int = 0
    orders_canceled: int = 0
    partial_fills: int = 0
    hedges_placed: int = 0
    hedges_matched: int = 0
    stop_losses: int = 0
    exit_attempts: int = 0
    size_fallbacks: int = 0
    retries: dict[str, int] = field(default_factory=dict)

    def record_retry(self, label: str) -> None:
        self.retries[label] = self.retries.get(label, 0) + 1

    @property
    def total_retries(self) -> int:
        return sum(self.retries.values())


@dataclass(frozen=True)
class WindowResult:
    timestamp: int
    phase: WindowPhase
    outcome: HedgeOutcome = HedgeOutcome.UNDECIDED
    tally: WindowTally = field(default_factory=WindowTally)
    error: str = ""


@dataclass(frozen=True)
class RunState:
    """Process-lifetime tallies, threaded through each window call."""

    win_count: int = 0
    loss_count: int = 0
    flat_count: int = 0
    undecided_count: int = 0
    abandoned_count: int = 0
    completed_windows: frozenset[int] = frozenset()

    def is_completed(self, timestamp: int) -> bool:
        return timestamp in self.completed_windows

    def record(self, result: WindowResult) -> "RunState":
        """Return a new RunState with the window result folded in."""
        if result.phase == WindowPhase.SKIPPED:
            return self

        updates: dict[str, object] = {
            "completed_windows": self.completed_windows | {result.timestamp},
        }
        if result.phase == WindowPhase.ABANDONED:
            updates["abandoned_count"] = self.abandoned_count + 1
        elif result.outcome == HedgeOutcome.WIN:
            updates["win_count"] = self.win_count + 1
        elif result.outcome == HedgeOutcome.LOSS:
            updates["loss_count"] = self.loss_count + 1
        elif result.phase == WindowPhase.UNDECIDED:
            updates["undecided_count"] = self.undecided_count + 1
        else:
            updates["flat_count"] = self.flat_count + 1
        return replace(self, **updates)
