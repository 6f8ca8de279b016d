"""
SonicState v1 Statistics Helpers.

Total functions over sequences of floats: every empty or zero-denominator
case returns 0.0 instead of NaN or raising.
"""

from typing import Sequence

import numpy as np


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean, 0.0 for an empty sequence."""
    if len(values) == 0:
        return 0.0
    return float(np.mean(np.asarray(values, dtype=np.float64)))


def coefficient_of_variation(values: Sequence[float]) -> float:
    """
    Population standard deviation divided by the mean.

    Returns:
        0.0 if fewer than 2 values or the mean is 0.
    """
    if len(values) < 2:
        return 0.0
    arr = np.asarray(values, dtype=np.float64)
    mu = float(np.mean(arr))
    if mu == 0:
        return 0.0
    return float(np.std(arr) / mu)


def relative_deltas(values: Sequence[float]) -> np.ndarray:
    """
    |v[i] - v[i-1]| / ((v[i] + v[i-1]) / 2) for consecutive pairs.

    Pairs whose average is 0 are dropped.
    """
    arr = np.asarray(values, dtype=np.float64)
    if len(arr) < 2:
        return np.zeros(0, dtype=np.float64)
    diffs = np.abs(np.diff(arr))
    avgs = (arr[1:] + arr[:-1]) / 2
    valid = avgs > 0
    return diffs[valid] / avgs[valid]


def mean_relative_delta(values: Sequence[float]) -> float:
    """Mean of relative_deltas over valid pairs only (0.0 if none)."""
    deltas = relative_deltas(values)
    if len(deltas) == 0:
        return 0.0
    return float(np.mean(deltas))
