"""Bounded fixed-delay retry for venue calls."""

import logging
from collections.abc import Callable
from typing import TypeVar

from hedger.execution.errors import (
    GatewayError,
    MarketOrderRejectedError,
    RetryExhaustedError,
)
from hedger.models.hedge import RetryPolicy
from hedger.models.reporting import WindowTally

logger = logging.getLogger(__name__)

T = TypeVar("T")

RETRYABLE_ERRORS: tuple[type[Exception], ...] = (GatewayError, MarketOrderRejectedError)


def with_retry(
    operation: Callable[[], T],
    policy: RetryPolicy,
    sleep: Callable[[float], None],
    label: str = "operation",
    tally: WindowTally | None = None,
) -> T:
    """Call ``operation`` up to ``policy.max_attempts`` times.

    Sleeps ``policy.delay_seconds`` between consecutive failures, never after
    the last one. Only venue/network errors are retried; anything else
    propagates on the first occurrence. On exhaustion raises
    RetryExhaustedError chained from the last failure.
    """
    if policy.max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    attempt = 0
    while True:
        attempt += 1
        try:
            return operation()
        except RETRYABLE_ERRORS as e:
            if attempt >= policy.max_attempts:
                logger.error(
                    "%s failed (attempt %d/%d), giving up: %s",
                    label, attempt, policy.max_attempts, e,
                )
                raise RetryExhaustedError(label, attempt, e) from e
            logger.warning(
                "%s failed (attempt %d/%d): %s",
                label, attempt, policy.max_attempts, e,
            )
            if tally is not None:
                tally.record_retry(label)
            sleep(policy.delay_seconds)
