"""Tests for the run-state fold and window tally."""

import json

from hedger.models.hedge import HedgeOutcome, WindowPhase
from hedger.models.reporting import RunState, WindowResult, WindowTally
from hedger.reporting.formatters import (
    format_run_state_json,
    format_run_state_text,
    format_window_result_text,
)


class TestRunState:
    def test_win_and_loss_counts(self):
        state = RunState()
        state = state.record(WindowResult(100, WindowPhase.WIN, HedgeOutcome.WIN))
        state = state.record(WindowResult(200, WindowPhase.LOSS, HedgeOutcome.LOSS))
        state = state.record(WindowResult(300, WindowPhase.WIN, HedgeOutcome.WIN))
        assert state.win_count == 2
        assert state.loss_count == 1
        assert state.completed_windows == frozenset({100, 200, 300})

    def test_record_returns_new_instance(self):
        state = RunState()
        new = state.record(WindowResult(100, WindowPhase.WIN, HedgeOutcome.WIN))
        assert state.win_count == 0
        assert new.win_count == 1

    def test_flat_and_both_canceled_count_as_flat(self):
        state = RunState()
        state = state.record(WindowResult(100, WindowPhase.FLAT))
        state = state.record(WindowResult(200, WindowPhase.BOTH_CANCELED))
        assert state.flat_count == 2
        assert state.win_count == 0

    def test_undecided_and_abandoned(self):
        state = RunState()
        state = state.record(WindowResult(100, WindowPhase.UNDECIDED))
        state = state.record(WindowResult(200, WindowPhase.ABANDONED, error="boom"))
        assert state.undecided_count == 1
        assert state.abandoned_count == 1
        assert state.is_completed(200)

    def test_skipped_not_recorded(self):
        state = RunState()
        assert state.record(WindowResult(100, WindowPhase.SKIPPED)) is state
        assert not state.is_completed(100)


class TestWindowTally:
    def test_record_retry(self):
        tally = WindowTally()
        tally.record_retry("get_order")
        tally.record_retry("get_order")
        tally.record_retry("cancel_order")
        assert tally.retries == {"get_order": 2, "cancel_order": 1}
        assert tally.total_retries == 3


class TestFormatters:
    def test_run_state_text(self):
        state = RunState(win_count=3, loss_count=1)
        assert format_run_state_text(state).startswith("win count: 3, loss count: 1")

    def test_run_state_json(self):
        state = RunState(win_count=1, completed_windows=frozenset({900, 0}))
        data = json.loads(format_run_state_json(state))
        assert data["win_count"] == 1
        assert data["completed_windows"] == [0, 900]

    def test_window_result_text_includes_error(self):
        result = WindowResult(900, WindowPhase.ABANDONED, error="get_order failed")
        text = format_window_result_text(result)
        assert "abandoned" in text
        assert "error: get_order failed" in text
