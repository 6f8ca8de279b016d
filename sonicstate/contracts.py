"""
SonicState v1 Data Contracts

Immutable value types exchanged between pipeline stages.

This module provides:
- AudioBuffer: Mono PCM input supplied by the capture collaborator
- AcousticFeatures: Buffer-level statistics produced by feature extraction
- VoiceScores: Bounded Energy / Tension / Clarity scores
- AnalysisResult: Final output consumed by the presentation collaborator
- InsightRule: One entry of the static insight rule table
- PitchResult / PitchTrack: Pitch tracker outputs
- DataError: Structured precondition failure

INVARIANTS:
- All records are frozen dataclasses
- No record outlives one analysis call
- to_dict() output uses the public camelCase field names
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

import numpy as np


# =============================================================================
# Enumerations
# =============================================================================


class Confidence(str, Enum):
    high = "high"
    medium = "medium"
    low = "low"


class InsightCategory(str, Enum):
    warning = "warning"
    positive = "positive"
    neutral = "neutral"


# =============================================================================
# DataError: Structured Precondition Failure
# =============================================================================


class DataError(Exception):
    """
    Raised when a buffer cannot be analyzed at all.

    Attributes:
        code: Error code (e.g., "BUFFER_TOO_SHORT")
        message: Human-readable error message
        detail: Optional additional details
    """

    def __init__(self, code: str, message: str, detail: dict | None = None):
        self.code = code
        self.message = message
        self.detail = detail or {}

        parts = [f"[{code}] {message}"]
        if self.detail:
            parts.append(
                ", ".join(f"{k}={v}" for k, v in sorted(self.detail.items()))
            )

        super().__init__("; ".join(parts))

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message, "detail": self.detail}


# =============================================================================
# AudioBuffer: Pipeline Input
# =============================================================================


@dataclass(frozen=True, eq=False)
class AudioBuffer:
    """
    Mono PCM buffer handed to the pipeline.

    Attributes:
        samples: 1-D float32 samples in [-1, 1]
        sample_rate: Sample rate in Hz
        channels: Channel count (must be 1)
        duration_ms: Duration in milliseconds

    Rules:
        - Produced by the capture collaborator, consumed exactly once
        - duration_ms is metadata; the pipeline never recomputes it
    """
    samples: np.ndarray
    sample_rate: int
    channels: int
    duration_ms: float

    @classmethod
    def from_samples(cls, samples: np.ndarray, sample_rate: int) -> "AudioBuffer":
        """
        Build a mono buffer, deriving duration from the sample count.

        Args:
            samples: 1-D samples (any float dtype)
            sample_rate: Sample rate in Hz

        Returns:
            AudioBuffer with float32 samples and channels=1.
        """
        samples = np.asarray(samples, dtype=np.float32)
        if samples.ndim != 1:
            raise DataError(
                "BUFFER_NOT_MONO",
                "Samples must be a 1-D mono array",
                {"shape": tuple(samples.shape)},
            )
        duration_ms = len(samples) / sample_rate * 1000 if sample_rate > 0 else 0.0
        return cls(
            samples=samples,
            sample_rate=sample_rate,
            channels=1,
            duration_ms=duration_ms,
        )


# =============================================================================
# AcousticFeatures / VoiceScores / AnalysisResult
# =============================================================================


@dataclass(frozen=True)
class AcousticFeatures:
    """
    Buffer-level acoustic statistics.

    Attributes:
        rms: Mean frame RMS amplitude (0..~1)
        pitch_mean: Mean F0 over voiced frames (Hz, 0 if none)
        pitch_variance: Coefficient of variation of voiced F0
        spectral_centroid: Mean per-frame spectral centroid (Hz)
        zero_crossing_rate: Mean per-frame ZCR (0..1)
        voiced_ratio: Fraction of frames classified voiced (0..1)
        jitter_proxy: Mean relative frame-to-frame pitch delta (capped at 1)
        shimmer_proxy: Mean relative frame-to-frame RMS delta (uncapped)
        duration_seconds: Buffer duration (s)
    """
    rms: float
    pitch_mean: float
    pitch_variance: float
    spectral_centroid: float
    zero_crossing_rate: float
    voiced_ratio: float
    jitter_proxy: float
    shimmer_proxy: float
    duration_seconds: float

    @classmethod
    def zero(cls, duration_seconds: float = 0.0) -> "AcousticFeatures":
        """All-zero features (silence or no analysis)."""
        return cls(
            rms=0.0,
            pitch_mean=0.0,
            pitch_variance=0.0,
            spectral_centroid=0.0,
            zero_crossing_rate=0.0,
            voiced_ratio=0.0,
            jitter_proxy=0.0,
            shimmer_proxy=0.0,
            duration_seconds=duration_seconds,
        )

    def to_dict(self) -> dict[str, float]:
        return {
            "rms": self.rms,
            "pitchMean": self.pitch_mean,
            "pitchVariance": self.pitch_variance,
            "spectralCentroid": self.spectral_centroid,
            "zeroCrossingRate": self.zero_crossing_rate,
            "voicedRatio": self.voiced_ratio,
            "jitterProxy": self.jitter_proxy,
            "shimmerProxy": self.shimmer_proxy,
            "durationSeconds": self.duration_seconds,
        }


@dataclass(frozen=True)
class VoiceScores:
    """Energy / Tension / Clarity, each an integer in [0, 100]."""
    energy: int
    tension: int
    clarity: int

    def to_dict(self) -> dict[str, int]:
        return {"energy": self.energy, "tension": self.tension, "clarity": self.clarity}


@dataclass(frozen=True)
class AnalysisResult:
    """Final pipeline output."""
    scores: VoiceScores
    insight: str
    confidence: Confidence
    features: AcousticFeatures

    def to_dict(self) -> dict[str, Any]:
        return {
            "scores": self.scores.to_dict(),
            "insight": self.insight,
            "confidence": self.confidence.value,
            "features": self.features.to_dict(),
        }


# =============================================================================
# InsightRule: Static Rule Table Entry
# =============================================================================


@dataclass(frozen=True)
class InsightRule:
    """
    One rule of the insight table.

    Attributes:
        id: Stable rule identifier (e.g., "too_quiet")
        priority: Higher priority is evaluated first
        condition: Predicate over (features, scores)
        message: Insight text returned when the rule matches
    """
    id: str
    priority: int
    condition: Callable[[AcousticFeatures, VoiceScores], bool]
    message: str


# =============================================================================
# Pitch Tracker Outputs
# =============================================================================


@dataclass(frozen=True)
class PitchResult:
    """Single-frame pitch estimate. pitch_hz is 0 when unvoiced."""
    pitch_hz: float
    confidence: float
    is_voiced: bool


UNVOICED = PitchResult(pitch_hz=0.0, confidence=0.0, is_voiced=False)


@dataclass(frozen=True)
class PitchTrack:
    """
    Pitch estimates over a frame grid.

    Attributes:
        pitches: Per-frame pitch (Hz, 0 for unvoiced)
        confidences: Per-frame confidence (0..1)
        voiced_frames: Number of frames classified voiced
        total_frames: Number of frames analyzed
    """
    pitches: tuple[float, ...]
    confidences: tuple[float, ...]
    voiced_frames: int
    total_frames: int
