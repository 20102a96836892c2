"""
Numeric helpers shared by the analytics calculators.

Every division is guarded so that empty inputs produce zeros instead of
NaN/Infinity, and rounding is round-half-up everywhere.
"""

import math
import statistics
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Sequence, Union

Number = Union[int, float]

SECONDS_PER_DAY = 86400


def round_half_up(value: Number, ndigits: Optional[int] = None) -> Number:
    """
    Round with ties going away from zero (2.5 -> 3, 0.25 -> 0.3).

    Mirrors the builtin ``round`` signature: an ``int`` is returned when
    ``ndigits`` is None, otherwise a ``float``.
    """
    exponent = Decimal(1).scaleb(-(ndigits or 0))
    rounded = Decimal(str(value)).quantize(exponent, rounding=ROUND_HALF_UP)
    if ndigits is None:
        return int(rounded)
    return float(rounded)


def safe_divide(numerator: Number, denominator: Number, default: float = 0.0) -> float:
    """Divide, returning ``default`` for a zero denominator"""
    if not denominator:
        return default
    return numerator / denominator


def percentage(part: Number, whole: Number) -> int:
    """Whole-number percentage of ``part`` in ``whole``; 0 when whole is 0"""
    if not whole:
        return 0
    return round_half_up(part / whole * 100)


def mean(values: Sequence[Number]) -> float:
    if not values:
        return 0.0
    return statistics.fmean(values)


def population_variance(values: Sequence[Number]) -> float:
    """mean((x - mean)^2) over the whole population"""
    if not values:
        return 0.0
    return float(statistics.pvariance(values))


def std_dev(values: Sequence[Number]) -> float:
    if not values:
        return 0.0
    return statistics.pstdev(values)


def coefficient_of_variation(values: Sequence[Number]) -> float:
    """Standard deviation as a percentage of the mean; 0 when the mean is 0"""
    avg = mean(values)
    if avg == 0:
        return 0.0
    return std_dev(values) / avg * 100


def days_between(start: datetime, end: datetime) -> float:
    """Fractional number of days from ``start`` to ``end`` (negative if end < start)"""
    return (end - start).total_seconds() / SECONDS_PER_DAY


def ceil_days(start: datetime, end: datetime) -> int:
    return math.ceil(days_between(start, end))
