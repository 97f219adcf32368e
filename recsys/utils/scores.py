"""
Score helpers — age, transition decay, and output rounding.
"""

import math
from datetime import datetime
from typing import Optional

SECONDS_PER_DAY = 86400.0


def age_days(ts: datetime, now: datetime) -> float:
    """Days elapsed from ts to now, never negative."""
    return max(0.0, (now - ts).total_seconds() / SECONDS_PER_DAY)


def _positive(value: Optional[float]) -> bool:
    return value is not None and math.isfinite(value) and value > 0


def transition_decay(age: float, half_life_days: Optional[float]) -> float:
    """0.5 ** (age / half_life); 1.0 (no decay) when half-life is unset or <= 0."""
    if not _positive(half_life_days):
        return 1.0
    return 0.5 ** (age / half_life_days)


def transition_effective_count(
    count: float,
    age: float,
    half_life_days: Optional[float],
    window_days: Optional[float],
) -> float:
    """
    Raw transition count after decay or windowing.

    Window only (window > 0, no half-life): hard cutoff, count if age <= window else 0.
    Otherwise: exponential half-life decay; with neither set counts pass through.
    """
    if _positive(window_days) and not _positive(half_life_days):
        return count if age <= window_days else 0.0
    return count * transition_decay(age, half_life_days)


def round_half_up(value: float, digits: int) -> float:
    """Round like Math.round at the given precision (halves go up, not to even)."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor
