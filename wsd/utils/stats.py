# wsd/utils/stats.py

"""
Small numeric helpers shared by the analysis modules.
"""

import math
from typing import Sequence


def clamp(value: float, low: float, high: float) -> float:
    """
    Constrain `value` to the closed interval [low, high].
    """
    return max(low, min(high, value))


def mean(samples: Sequence[float]) -> float:
    """
    Arithmetic mean, 0.0 for an empty sequence.
    """
    if not samples:
        return 0.0
    return sum(samples) / len(samples)


def sample_variance(samples: Sequence[float]) -> float:
    """
    Bessel-corrected sample variance.

    Parameters
    ----------
    samples
        Values to summarize.

    Returns
    -------
    float
        Variance with an n-1 denominator, or 0.0 with fewer than two samples.
    """
    n = len(samples)
    if n < 2:
        return 0.0
    m = mean(samples)
    return sum((x - m) ** 2 for x in samples) / (n - 1)


def sample_std(samples: Sequence[float]) -> float:
    return math.sqrt(sample_variance(samples))


def ols_slope(samples: Sequence[float]) -> float:
    """
    Ordinary least-squares slope of sample value against sample index.

    Parameters
    ----------
    samples
        Values ordered oldest first; index i is the x coordinate.

    Returns
    -------
    float
        Slope in value units per sample, or 0.0 with fewer than two samples.
    """
    n = len(samples)
    if n < 2:
        return 0.0
    x_mean = (n - 1) / 2.0
    y_mean = mean(samples)
    num = den = 0.0
    for i, y in enumerate(samples):
        dx = i - x_mean
        num += dx * (y - y_mean)
        den += dx * dx
    return num / den if den > 0 else 0.0


def db_to_linear(db: float) -> float:
    """
    Convert a power level in dB (or dBm) to a linear ratio (or mW).
    """
    return 10 ** (db / 10)
