"""
Pitch tracking.

Responsibilities:
    - Per-frame F0 estimation with the cumulative-mean-normalized
      difference method (YIN-style)
    - Lower-accuracy autocorrelation estimator for substitution
    - Frame-sequence tracking over the shared frame grid

INVARIANTS:
    - Unvoiced frames report pitch 0.0 and confidence 0.0
    - YIN frames are voiced iff confidence > 0.5
    - Lag search stays inside the configured frequency band
    - Silence never produces NaN or floating-point warnings
"""

import math

import numpy as np

from sonicstate.audio import frame_count
from sonicstate.config import FRAME_SIZE, HOP_SIZE, MAX_PITCH_HZ, MIN_PITCH_HZ, PitchConfig
from sonicstate.contracts import UNVOICED, PitchResult, PitchTrack


VOICED_CONFIDENCE = 0.5
AUTOCORRELATION_VOICED_CONFIDENCE = 0.3


# =============================================================================
# Difference Function Method
# =============================================================================


def difference_function(frame: np.ndarray) -> np.ndarray:
    """
    d(tau) = sum_{i=0}^{N-tau-1} (x[i] - x[i+tau])^2 for tau in [0, N).

    Note:
        Expanded as e_head(tau) + e_tail(tau) - 2 * r(tau), where e_* are
        windowed energies from a cumulative sum and r is the raw
        autocorrelation. Tiny negative round-off is clipped to 0.
    """
    x = np.asarray(frame, dtype=np.float64)
    n = len(x)
    if n == 0:
        return np.zeros(0, dtype=np.float64)

    energy = np.concatenate(([0.0], np.cumsum(x * x)))
    tau = np.arange(n)
    head = energy[n - tau]              # sum of x[i]^2, i < N - tau
    tail = energy[n] - energy[tau]      # sum of x[i + tau]^2
    acf = np.correlate(x, x, mode="full")[n - 1:]

    diff = head + tail - 2 * acf
    return np.maximum(diff, 0.0)


def cumulative_mean_normalized(diff: np.ndarray) -> np.ndarray:
    """
    cmnd(0) = 1; cmnd(tau) = d(tau) / ((1/tau) * sum_{t=1}^{tau} d(t)).

    A zero running mean (leading silence) maps to 1.0.
    """
    cmnd = np.ones(len(diff), dtype=np.float64)
    if len(diff) < 2:
        return cmnd

    running_mean = np.cumsum(diff[1:]) / np.arange(1, len(diff))
    nonzero = running_mean > 0
    values = np.ones(len(diff) - 1, dtype=np.float64)
    values[nonzero] = diff[1:][nonzero] / running_mean[nonzero]
    cmnd[1:] = values
    return cmnd


def lag_bounds(sample_rate: int, frame_length: int, config: PitchConfig) -> tuple[int, int]:
    """
    Search range for the lag.

    Returns:
        (min_lag, max_lag) with min_lag = floor(sr / max_freq) (at least 1)
        and max_lag = min(ceil(sr / min_freq), N - 1).
    """
    min_lag = max(1, math.floor(sample_rate / config.max_freq))
    max_lag = min(math.ceil(sample_rate / config.min_freq), frame_length - 1)
    return min_lag, max_lag


def first_minimum(
    cmnd: np.ndarray,
    threshold: float,
    min_lag: int,
    max_lag: int,
) -> tuple[float, float] | None:
    """
    First lag below threshold that is also a strict local minimum.

    Args:
        cmnd: Cumulative-mean-normalized difference
        threshold: Acceptance threshold
        min_lag: First lag to test (inclusive)
        max_lag: Upper lag bound (exclusive)

    Returns:
        (refined_tau, confidence) or None when no lag qualifies.
        refined_tau comes from parabolic interpolation over tau-1..tau+1.
    """
    hi = min(max_lag, len(cmnd) - 1)
    if min_lag >= hi:
        return None

    taus = np.arange(min_lag, hi)
    curr = cmnd[taus]
    prev = cmnd[taus - 1]
    nxt = cmnd[taus + 1]
    candidates = np.flatnonzero((curr < threshold) & (prev > curr) & (nxt > curr))
    if len(candidates) == 0:
        return None

    tau = int(taus[candidates[0]])
    p, c, q = cmnd[tau - 1], cmnd[tau], cmnd[tau + 1]
    delta = (p - q) / (2 * (p - 2 * c + q))
    return tau + float(delta), 1.0 - float(c)


def detect_pitch_yin(
    frame: np.ndarray,
    sample_rate: int,
    config: PitchConfig | None = None,
) -> PitchResult:
    """
    Estimate F0 for one frame.

    Args:
        frame: Frame samples
        sample_rate: Sample rate in Hz
        config: Frequency band and threshold (default: 50-600 Hz, 0.15)

    Returns:
        PitchResult; UNVOICED when no lag qualifies.
    """
    config = config or PitchConfig()

    diff = difference_function(frame)
    cmnd = cumulative_mean_normalized(diff)
    min_lag, max_lag = lag_bounds(sample_rate, len(frame), config)

    minimum = first_minimum(cmnd, config.threshold, min_lag, max_lag)
    if minimum is None:
        return UNVOICED

    tau, confidence = minimum
    return PitchResult(
        pitch_hz=sample_rate / tau,
        confidence=confidence,
        is_voiced=confidence > VOICED_CONFIDENCE,
    )


# =============================================================================
# Autocorrelation Estimator
# =============================================================================


def detect_pitch_autocorrelation(
    frame: np.ndarray,
    sample_rate: int,
    min_freq: float = MIN_PITCH_HZ,
    max_freq: float = MAX_PITCH_HZ,
) -> PitchResult:
    """
    Pick the lag with the largest raw autocorrelation.

    Args:
        frame: Frame samples
        sample_rate: Sample rate in Hz
        min_freq: Lowest accepted F0 (Hz)
        max_freq: Highest accepted F0 (Hz)

    Returns:
        PitchResult with confidence = min(1, best_correlation / N).
        Voiced iff confidence > 0.3 and the pitch lies inside the band.

    Note:
        Faster but less accurate than detect_pitch_yin; not used by
        default.
    """
    x = np.asarray(frame, dtype=np.float64)
    n = len(x)
    min_lag = max(1, math.floor(sample_rate / max_freq))
    max_lag = min(math.ceil(sample_rate / min_freq), n - 1)
    if n == 0 or min_lag > max_lag:
        return UNVOICED

    acf = np.correlate(x, x, mode="full")[n - 1:]
    window = acf[min_lag:max_lag + 1]
    best = int(np.argmax(window))  # first maximum wins ties
    best_lag = min_lag + best
    best_correlation = float(window[best])

    if best_correlation <= 0:
        return UNVOICED

    pitch = sample_rate / best_lag
    confidence = min(1.0, best_correlation / n)
    return PitchResult(
        pitch_hz=pitch,
        confidence=confidence,
        is_voiced=(
            confidence > AUTOCORRELATION_VOICED_CONFIDENCE
            and min_freq <= pitch <= max_freq
        ),
    )


# =============================================================================
# Frame Sequence
# =============================================================================


def track_frames(
    samples: np.ndarray,
    sample_rate: int,
    frame_size: int = FRAME_SIZE,
    hop_size: int = HOP_SIZE,
    config: PitchConfig | None = None,
    method: str = "yin",
) -> PitchTrack:
    """
    Run the pitch estimator over every frame of the grid.

    Args:
        samples: Full buffer
        sample_rate: Sample rate in Hz
        frame_size: Samples per frame (default: 1024)
        hop_size: Samples between frame starts (default: 512)
        config: Pitch settings
        method: "yin" or "autocorrelation"

    Returns:
        PitchTrack with per-frame pitches/confidences and voiced counts.
    """
    config = config or PitchConfig()
    if method == "yin":
        def estimate(frame: np.ndarray) -> PitchResult:
            return detect_pitch_yin(frame, sample_rate, config)
    elif method == "autocorrelation":
        def estimate(frame: np.ndarray) -> PitchResult:
            return detect_pitch_autocorrelation(
                frame, sample_rate, config.min_freq, config.max_freq
            )
    else:
        raise ValueError(f"Unknown pitch method: {method}")

    pitches: list[float] = []
    confidences: list[float] = []
    voiced = 0

    total = frame_count(len(samples), frame_size, hop_size)
    for i in range(total):
        start = i * hop_size
        result = estimate(samples[start:start + frame_size])
        pitches.append(result.pitch_hz)
        confidences.append(result.confidence)
        if result.is_voiced:
            voiced += 1

    return PitchTrack(
        pitches=tuple(pitches),
        confidences=tuple(confidences),
        voiced_frames=voiced,
        total_frames=total,
    )
