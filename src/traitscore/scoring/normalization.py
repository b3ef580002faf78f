"""Inverse piecewise-linear curves for workstyle telemetry."""

import math
from typing import Optional

# value of the curve at each breakpoint
SCORE_AT_ZERO = 100.0
SCORE_AT_MODERATE = 75.0
SCORE_AT_HIGH = 50.0
NO_SIGNAL_SCORE = 100.0


def normalize_inverse(value: float, threshold_moderate: float, threshold_high: float) -> float:
    """
    Map a "lower is better" count onto 0..100.

    0 -> 100, threshold_moderate -> 75, threshold_high -> 50, and from there
    linearly down to 0 at 2 * threshold_high, clamped at 0 beyond it.
    """
    if value <= 0:
        return SCORE_AT_ZERO
    if value <= threshold_moderate:
        return SCORE_AT_ZERO - (value / threshold_moderate) * (SCORE_AT_ZERO - SCORE_AT_MODERATE)
    if value <= threshold_high:
        position = (value - threshold_moderate) / (threshold_high - threshold_moderate)
        return SCORE_AT_MODERATE - position * (SCORE_AT_MODERATE - SCORE_AT_HIGH)
    max_bad = threshold_high * 2
    if value >= max_bad:
        return 0.0
    position = (value - threshold_high) / (max_bad - threshold_high)
    return SCORE_AT_HIGH - position * SCORE_AT_HIGH


def normalize_optional(
    value: Optional[float], threshold_moderate: float, threshold_high: float
) -> float:
    """Missing telemetry means no negative signal was observed."""
    if value is None:
        return NO_SIGNAL_SCORE
    return normalize_inverse(value, threshold_moderate, threshold_high)


def round_half_up(x: float) -> float:
    """Round to the nearest integer, halves up; NaN/inf pass through."""
    if not math.isfinite(x):
        return x
    return float(math.floor(x + 0.5))
