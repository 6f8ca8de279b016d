"""
Feature Extraction

Responsibilities:
    - Decompose the buffer into the shared frame grid
    - Run time-domain and spectral analysis per frame
    - Run the pitch tracker once over the whole buffer
    - Aggregate per-frame values into AcousticFeatures

INVARIANTS:
    - Spectral, time-domain and pitch analysis use an identical frame grid
    - All-silence input yields all-zero features
    - duration_seconds comes from buffer metadata only
    - Either complete features are returned or DataError is raised
"""

import logging

import numpy as np

from sonicstate import stats
from sonicstate.analysis.pitch import track_frames
from sonicstate.analysis.spectral import analyze_spectrum
from sonicstate.analysis.time_domain import analyze_time_domain
from sonicstate.audio import frame_count, iter_frames
from sonicstate.config import AnalysisConfig
from sonicstate.contracts import AcousticFeatures, AudioBuffer, DataError


logger = logging.getLogger(__name__)


def validate_buffer(buffer: AudioBuffer, config: AnalysisConfig) -> None:
    """
    Check the buffer preconditions before any frame is analyzed.

    Raises:
        DataError: BUFFER_NOT_MONO, BUFFER_INVALID_RATE or BUFFER_TOO_SHORT
    """
    if buffer.channels != 1 or np.ndim(buffer.samples) != 1:
        raise DataError(
            "BUFFER_NOT_MONO",
            "Buffer must contain a single channel",
            {"channels": buffer.channels},
        )
    if buffer.sample_rate <= 0:
        raise DataError(
            "BUFFER_INVALID_RATE",
            "Sample rate must be positive",
            {"sample_rate": buffer.sample_rate},
        )
    if frame_count(len(buffer.samples), config.frame_size, config.hop_size) == 0:
        raise DataError(
            "BUFFER_TOO_SHORT",
            "Buffer too short to extract any frame",
            {"num_samples": len(buffer.samples), "frame_size": config.frame_size},
        )


def jitter_proxy(voiced_pitches: list[float]) -> float:
    """Mean relative pitch delta over consecutive voiced frames, capped at 1."""
    return min(stats.mean_relative_delta(voiced_pitches), 1.0)


def shimmer_proxy(frame_rms: list[float]) -> float:
    """
    Relative RMS delta over consecutive frames (voiced or not).

    Note:
        Pairs with zero average contribute nothing but still count in the
        denominator (number of consecutive pairs). Not capped.
    """
    if len(frame_rms) < 2:
        return 0.0
    deltas = stats.relative_deltas(frame_rms)
    return float(np.sum(deltas) / (len(frame_rms) - 1))


def extract_features(
    buffer: AudioBuffer,
    config: AnalysisConfig | None = None,
) -> AcousticFeatures:
    """
    Extract buffer-level acoustic features.

    Args:
        buffer: Mono PCM buffer
        config: Framing and pitch settings (default: 1024/512, YIN 50-600 Hz)

    Returns:
        AcousticFeatures for the whole buffer.

    Raises:
        DataError: If the buffer violates a precondition
    """
    config = config or AnalysisConfig()
    validate_buffer(buffer, config)

    samples = buffer.samples
    sr = buffer.sample_rate

    frame_rms: list[float] = []
    frame_zcr: list[float] = []
    frame_centroid: list[float] = []

    for frame in iter_frames(samples, config.frame_size, config.hop_size):
        td = analyze_time_domain(frame)
        frame_rms.append(td.rms)
        frame_zcr.append(td.zcr)
        frame_centroid.append(analyze_spectrum(frame, sr).centroid_hz)

    track = track_frames(
        samples,
        sr,
        frame_size=config.frame_size,
        hop_size=config.hop_size,
        config=config.pitch,
        method=config.pitch_method,
    )

    voiced_pitches = [p for p in track.pitches if p > 0]
    voiced_ratio = (
        track.voiced_frames / track.total_frames if track.total_frames > 0 else 0.0
    )

    features = AcousticFeatures(
        rms=stats.mean(frame_rms),
        pitch_mean=stats.mean(voiced_pitches),
        pitch_variance=stats.coefficient_of_variation(voiced_pitches),
        spectral_centroid=stats.mean(frame_centroid),
        zero_crossing_rate=stats.mean(frame_zcr),
        voiced_ratio=voiced_ratio,
        jitter_proxy=jitter_proxy(voiced_pitches),
        shimmer_proxy=shimmer_proxy(frame_rms),
        duration_seconds=buffer.duration_ms / 1000,
    )

    logger.debug(
        "Extracted features from %d frames (%d voiced)",
        track.total_frames,
        track.voiced_frames,
    )
    return features
