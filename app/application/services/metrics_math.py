"""Shared arithmetic for every metric family.

One place for the zero-denominator convention: any rate, average or
percentage whose denominator is 0 is 0 (budget efficiency is the one
documented exception and reports 100). Nothing here returns NaN or
infinity.
"""

import math


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def percentage(part: float, whole: float) -> int:
    """part/whole as a whole-number percentage clamped to [0, 100]."""
    if not whole:
        return 0
    return max(0, min(100, _round_half_up(part / whole * 100)))


def ratio(numerator: float, denominator: float, ndigits: int = 2) -> float:
    """numerator/denominator rounded to ndigits; 0.0 when denominator is 0."""
    if not denominator:
        return 0.0
    return round(numerator / denominator, ndigits)


def rounded_average(total: float, count: float) -> int:
    """total/count rounded to the nearest whole number; 0 when count is 0."""
    if not count:
        return 0
    return _round_half_up(total / count)


def variance_percentage(actual: float, estimated: float) -> float:
    """Signed (actual - estimated) relative to estimated, in percent; 0.0 when estimated is 0."""
    if not estimated:
        return 0.0
    return round((actual - estimated) / estimated * 100, 2)


def budget_efficiency(actual: float, estimated: float) -> float:
    """actual/estimated in percent; 100.0 when nothing was estimated."""
    if not estimated:
        return 100.0
    return round(actual / estimated * 100, 2)
