"""Exception types raised across the venue boundary and the hedging core."""


class GatewayError(Exception):
    """Raised when the venue or the network rejects a request."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class MarketResolutionError(GatewayError):
    """Raised when a window slug cannot be resolved to two instrument ids."""


class MarketOrderRejectedError(Exception):
    """Raised when a fill-or-kill order comes back with an error message."""


class RetryExhaustedError(Exception):
    """Raised when a retried operation failed on every allowed attempt."""

    def __init__(self, label: str, attempts: int, last_error: Exception):
        super().__init__(f"{label} failed after {attempts} attempts: {last_error}")
        self.label = label
        self.attempts = attempts
        self.last_error = last_error


class HedgeStateError(Exception):
    """Programming or state error inside the hedging core. Never retried."""
