"""Trading-window boundaries and the gates derived from them."""

import math

from hedger.strategy.clock import Clock

DEFAULT_WINDOW_SECONDS = 900


class WindowGate:
    """Answers timing questions about a window identified by its start.

    All checks read the injected clock; nothing is cached.
    """

    def __init__(self, clock: Clock, window_seconds: int = DEFAULT_WINDOW_SECONDS):
        self.clock = clock
        self.window_seconds = window_seconds

    def next_window_start(self) -> int:
        """The first window boundary strictly after now (UTC epoch grid)."""
        now = self.clock.now()
        return (math.floor(now / self.window_seconds) + 1) * self.window_seconds

    def allow_trade(self, window_start: int, grace_seconds: int) -> bool:
        """True while it is still early enough to enter or hold exposure."""
        return self.clock.now() <= window_start - grace_seconds

    def allow_stop_loss(self, window_start: int, grace_seconds: int) -> bool:
        """True once grace has elapsed since window start and the window is live."""
        elapsed = self.clock.now() - window_start
        if elapsed < 0:
            return False
        if elapsed >= self.window_seconds:
            return False
        return elapsed >= grace_seconds

    def window_expired(self, window_start: int) -> bool:
        return self.clock.now() - window_start >= self.window_seconds

    def seconds_until(self, timestamp: int) -> float:
        return timestamp - self.clock.now()
