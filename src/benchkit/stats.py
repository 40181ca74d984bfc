"""Statistical functions for benchmark results.

Provides the sample mean, Bessel-corrected sample variance, standard
deviation, 95% margin of error, and operations per second, all as
pure functions of the timing samples. The Student's t critical value
is looked up in the published two-tailed 95% table, interpolating in
``1/df`` between entries.

References:
    Bessel's correction: https://en.wikipedia.org/wiki/Bessel%27s_correction
    t table: NIST/SEMATECH e-Handbook of Statistical Methods, 1.3.6.7.2.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence


# ---------------------------------------------------------------------------
# Student's t critical values
# ---------------------------------------------------------------------------

# Two-tailed 95% (one-tailed 0.975) critical values by degrees of freedom.
_T_TABLE_95: dict[int, float] = {
    1: 12.706,
    2: 4.303,
    3: 3.182,
    4: 2.776,
    5: 2.571,
    6: 2.447,
    7: 2.365,
    8: 2.306,
    9: 2.262,
    10: 2.228,
    11: 2.201,
    12: 2.179,
    13: 2.160,
    14: 2.145,
    15: 2.131,
    16: 2.120,
    17: 2.110,
    18: 2.101,
    19: 2.093,
    20: 2.086,
    21: 2.080,
    22: 2.074,
    23: 2.069,
    24: 2.064,
    25: 2.060,
    26: 2.056,
    27: 2.052,
    28: 2.048,
    29: 2.045,
    30: 2.042,
    40: 2.021,
    50: 2.009,
    60: 2.000,
    80: 1.990,
    100: 1.984,
    120: 1.980,
    1000: 1.962,
}
_T_TABLE_KEYS = sorted(_T_TABLE_95)

# Normal approximation, the limit as df grows without bound.
Z_95 = 1.960


def t_critical_95(degrees_of_freedom: float) -> float:
    """Return the two-tailed 95% critical value of Student's t.

    Exact table values are returned for tabulated degrees of freedom.
    Between entries the value is interpolated linearly in ``1/df``,
    which tracks the true curve far better than interpolating in
    ``df``. Beyond the last entry the value converges to 1.960.

    Args:
        degrees_of_freedom: At least 1. Non-integer values are allowed.

    Raises:
        ValueError: If *degrees_of_freedom* is below 1 or NaN.
    """
    df = degrees_of_freedom
    if math.isnan(df) or df < 1:
        raise ValueError(f"Degrees of freedom must be >= 1 (got {df}).")
    if math.isinf(df):
        return Z_95

    if df == int(df) and int(df) in _T_TABLE_95:
        return _T_TABLE_95[int(df)]

    last = _T_TABLE_KEYS[-1]
    if df > last:
        # Interpolate between the last entry and infinity (1/df -> 0).
        return Z_95 + (_T_TABLE_95[last] - Z_95) * (last / df)

    for lo, hi in zip(_T_TABLE_KEYS, _T_TABLE_KEYS[1:]):
        if lo < df < hi:
            frac = (1 / lo - 1 / df) / (1 / lo - 1 / hi)
            return _T_TABLE_95[lo] + frac * (_T_TABLE_95[hi] - _T_TABLE_95[lo])

    # Unreachable: every df in [1, last] is bracketed above.
    raise AssertionError(f"No table bracket for df={df}")


# ---------------------------------------------------------------------------
# Sample statistics
# ---------------------------------------------------------------------------


def mean(samples: Sequence[float], total: float | None = None) -> float:
    """Arithmetic mean, optionally from a precomputed running total.

    Raises:
        ValueError: If *samples* is empty.
    """
    if not samples:
        raise ValueError("mean requires at least one sample")
    if total is None:
        total = sum(samples)
    return total / len(samples)


def sample_variance(samples: Sequence[float], mean_value: float | None = None) -> float:
    """Unbiased sample variance (Bessel's correction: divide by n - 1).

    Raises:
        ValueError: If fewer than two samples are given.
    """
    n = len(samples)
    if n < 2:
        raise ValueError("sample variance requires at least two samples")
    if mean_value is None:
        mean_value = mean(samples)
    return sum((x - mean_value) ** 2 for x in samples) / (n - 1)


def std_deviation(samples: Sequence[float], mean_value: float | None = None) -> float:
    """Sample standard deviation (square root of the Bessel-corrected variance)."""
    return math.sqrt(sample_variance(samples, mean_value))


def margin_of_error(std_dev: float, n: int) -> float:
    """Half-width of the 95% confidence interval around the mean.

    ``t(0.975, n - 1) * std_dev / sqrt(n)``.
    """
    if n < 2:
        raise ValueError("margin of error requires at least two samples")
    return t_critical_95(n - 1) * std_dev / math.sqrt(n)


def ops_per_second(mean_time_ms: float) -> float:
    """Operations per second for a mean call time in milliseconds."""
    if mean_time_ms == 0:
        return float("inf")
    return 1000 / mean_time_ms


# ---------------------------------------------------------------------------
# Summary
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SampleStats:
    """Statistics derived from one test's timing samples.

    ``std_deviation`` and ``margin_of_error`` are None for a single
    sample, which has no dispersion estimate.
    """

    n: int
    mean_time: float
    ops_per_second: float
    std_deviation: float | None = None
    margin_of_error: float | None = None


def summarize(samples: Sequence[float], total_time: float | None = None) -> SampleStats | None:
    """Compute every statistic for a list of per-call times (ms).

    Args:
        samples: Per-call elapsed times in milliseconds.
        total_time: Running sum of *samples*, if already tracked.

    Returns:
        SampleStats, or None when there are no samples.
    """
    n = len(samples)
    if n == 0:
        return None

    mean_time = mean(samples, total_time)
    if n == 1:
        return SampleStats(n=1, mean_time=mean_time, ops_per_second=ops_per_second(mean_time))

    std_dev = std_deviation(samples, mean_time)
    return SampleStats(
        n=n,
        mean_time=mean_time,
        ops_per_second=ops_per_second(mean_time),
        std_deviation=std_dev,
        margin_of_error=margin_of_error(std_dev, n),
    )
