"""
Time-domain frame analysis: RMS energy and zero-crossing rate.
"""

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class TimeDomainFrame:
    rms: float
    zcr: float


def compute_rms(frame: np.ndarray) -> float:
    """sqrt(mean(x^2)); 0.0 for an empty frame."""
    if len(frame) == 0:
        return 0.0
    return float(np.sqrt(np.mean(np.square(frame, dtype=np.float64))))


def compute_zero_crossing_rate(frame: np.ndarray) -> float:
    """
    Fraction of adjacent sample pairs whose sign differs.

    Returns:
        ZCR in [0, 1]; 0.0 for fewer than 2 samples.

    Note:
        Zero counts as non-negative, so all-zero input has no crossings.
    """
    if len(frame) < 2:
        return 0.0
    non_negative = np.asarray(frame) >= 0
    crossings = np.count_nonzero(non_negative[1:] != non_negative[:-1])
    return float(crossings / (len(frame) - 1))


def analyze_time_domain(frame: np.ndarray) -> TimeDomainFrame:
    return TimeDomainFrame(
        rms=compute_rms(frame),
        zcr=compute_zero_crossing_rate(frame),
    )
