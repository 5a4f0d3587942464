"""Decimal size normalization for venue-reported fill quantities."""

import logging
from decimal import ROUND_DOWN, Decimal

from hedger.models.reporting import WindowTally

logger = logging.getLogger(__name__)

SIZE_QUANTUM = Decimal("0.01")


def floor_dp(value: Decimal, quantum: Decimal = SIZE_QUANTUM) -> Decimal:
    """Truncate toward zero to the quantum's precision."""
    return Decimal(value).quantize(quantum, rounding=ROUND_DOWN)


def normalize_size(
    reported: Decimal | float | str,
    fallback: Decimal,
    tally: WindowTally | None = None,
) -> Decimal:
    """Truncate a reported size to 2 dp, substituting fallback if non-positive.

    A substitution means the venue handed back a degraded read; it is logged
    and counted rather than raised.
    """
    size = floor_dp(Decimal(str(reported)))
    if size <= 0:
        logger.warning(
            "Bad size from venue: reported=%s truncated=%s, using fallback %s",
            reported, size, fallback,
        )
        if tally is not None:
            tally.size_fallbacks += 1
        return fallback
    return size
