"""
SonicState v1 Configuration.

Responsibilities:
- Frozen analysis constants (sample rate, framing, pitch band)
- Immutable configuration records passed through the pipeline

Invariants:
- Defaults are calibration constants, not tunables discovered at runtime
- No environment variables, no config files
- Config objects are frozen and hashable
"""

import math
from dataclasses import dataclass, field


# =============================================================================
# Constants (FROZEN)
# =============================================================================

CANONICAL_SAMPLE_RATE = 16000
FRAME_SIZE = 1024
HOP_SIZE = 512

MIN_PITCH_HZ = 50.0
MAX_PITCH_HZ = 600.0
YIN_THRESHOLD = 0.15

PITCH_METHODS = ("yin", "autocorrelation")


# =============================================================================
# Config Records
# =============================================================================


@dataclass(frozen=True)
class PitchConfig:
    """
    Pitch tracker settings.

    Attributes:
        min_freq: Lowest detectable F0 (Hz)
        max_freq: Highest detectable F0 (Hz)
        threshold: Cumulative-mean-normalized difference threshold
    """
    min_freq: float = MIN_PITCH_HZ
    max_freq: float = MAX_PITCH_HZ
    threshold: float = YIN_THRESHOLD

    def __post_init__(self) -> None:
        if not (0 < self.min_freq < self.max_freq and math.isfinite(self.max_freq)):
            raise ValueError(
                f"Invalid pitch band: {self.min_freq}-{self.max_freq} Hz"
            )
        if not (0 < self.threshold < 1):
            raise ValueError(f"Threshold must be in (0, 1), got {self.threshold}")


@dataclass(frozen=True)
class AnalysisConfig:
    """
    Settings for one analysis run.

    Attributes:
        frame_size: Samples per analysis frame
        hop_size: Samples between frame starts
        pitch: Pitch tracker settings
        pitch_method: "yin" (default) or "autocorrelation"

    Note:
        Spectral, time-domain and pitch analysis all share the same frame grid.
    """
    frame_size: int = FRAME_SIZE
    hop_size: int = HOP_SIZE
    pitch: PitchConfig = field(default_factory=PitchConfig)
    pitch_method: str = "yin"

    def __post_init__(self) -> None:
        if self.frame_size < 2 or self.hop_size < 1:
            raise ValueError(
                f"Invalid framing: frame_size={self.frame_size}, hop_size={self.hop_size}"
            )
        if self.pitch_method not in PITCH_METHODS:
            raise ValueError(
                f"Unknown pitch method: {self.pitch_method}. Valid: {list(PITCH_METHODS)}"
            )
