"""Output formatters for window results and run state."""

import json

from hedger.models.common import iso_from_timestamp
from hedger.models.reporting import RunState, WindowResult


def format_window_result_text(r: WindowResult) -> str:
    """One-line window summary for logging."""
    t = r.tally
    line = (
        f"Window {r.timestamp} ({iso_from_timestamp(r.timestamp)}): "
        f"{r.phase} outcome={int(r.outcome):+d} | "
        f"orders {t.orders_placed} placed, {t.orders_canceled} cancelled | "
        f"hedges {t.hedges_placed} placed, {t.hedges_matched} matched | "
        f"stop losses {t.stop_losses}, retries {t.total_retries}, "
        f"size fallbacks {t.size_fallbacks}"
    )
    if r.error:
        line += f" | error: {r.error}"
    return line


def format_run_state_text(s: RunState) -> str:
    return (
        f"win count: {s.win_count}, loss count: {s.loss_count}, "
        f"flat: {s.flat_count}, undecided: {s.undecided_count}, "
        f"abandoned: {s.abandoned_count}, windows: {len(s.completed_windows)}"
    )


def format_run_state_json(s: RunState) -> str:
    """JSON run state for programmatic consumption."""
    data = {
        "win_count": s.win_count,
        "loss_count": s.loss_count,
        "flat_count": s.flat_count,
        "undecided_count": s.undecided_count,
        "abandoned_count": s.abandoned_count,
        "completed_windows": sorted(s.completed_windows),
    }
    return json.dumps(data, indent=2)
