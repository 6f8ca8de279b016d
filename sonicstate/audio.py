"""
SonicState v1 Audio Utilities

Capture-side helpers that turn a recording into an AudioBuffer, plus the
frame grid shared by every analyzer.

Library Stack:
    - soundfile: WAV I/O (libsndfile-backed)
    - numpy: Array operations
    - scipy.signal.resample_poly: Deterministic resampling

INVARIANTS:
    - All operations are deterministic
    - Nothing is written to disk
    - Output buffers are mono, float32, [-1, 1]
    - Frames never extend past the end of the buffer
"""

import logging
from math import gcd
from pathlib import Path
from typing import Iterator

import numpy as np
import soundfile as sf
from scipy.signal import resample_poly

from sonicstate.config import CANONICAL_SAMPLE_RATE
from sonicstate.contracts import AudioBuffer


logger = logging.getLogger(__name__)


# =============================================================================
# WAV Input
# =============================================================================


def read_wav(path: Path) -> tuple[np.ndarray, int]:
    """
    Read an audio file and return samples with sample rate.

    Args:
        path: Path to WAV (or any libsndfile-readable) file

    Returns:
        Tuple of (samples as float32 in [-1, 1], sample_rate)

    Raises:
        FileNotFoundError: If the file does not exist
        RuntimeError: If libsndfile cannot decode the file
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Input file not found: {path}")
    samples, sr = sf.read(path, dtype="float32", always_2d=False)
    return samples, sr


# =============================================================================
# Canonicalization
# =============================================================================


def normalize_audio(
    samples: np.ndarray,
    sample_rate: int,
    target_rate: int = CANONICAL_SAMPLE_RATE,
) -> np.ndarray:
    """
    Normalize audio to canonical format: mono, target rate, float32.

    Args:
        samples: Input samples (may be multi-channel, any sample rate)
        sample_rate: Input sample rate
        target_rate: Output sample rate (default: 16000)

    Returns:
        Normalized samples (mono, float32)

    Note:
        - Multi-channel → mono by arithmetic mean
        - Resampling uses scipy.signal.resample_poly (deterministic)
        - No amplitude normalization / AGC
    """
    if samples.ndim > 1:
        samples = np.mean(samples, axis=1)

    samples = samples.astype(np.float32)

    if sample_rate != target_rate:
        g = gcd(sample_rate, target_rate)
        samples = resample_poly(samples, target_rate // g, sample_rate // g)
        samples = np.clip(samples, -1.0, 1.0).astype(np.float32)

    return samples


def is_too_quiet(samples: np.ndarray, threshold: float = 0.01) -> bool:
    """True when whole-buffer RMS is below threshold (likely silence)."""
    if len(samples) == 0:
        return True
    rms = float(np.sqrt(np.mean(np.square(samples, dtype=np.float64))))
    return rms < threshold


def load_buffer(path: Path) -> AudioBuffer:
    """
    Read a recording and canonicalize it into an AudioBuffer.

    Args:
        path: Path to input audio file

    Returns:
        Mono 16 kHz AudioBuffer with duration derived from sample count.

    Note:
        A near-silent recording is still returned; it is only logged.
    """
    samples, sr = read_wav(path)
    samples = normalize_audio(samples, sr)
    if is_too_quiet(samples):
        logger.warning("Recording is near-silent: %s", path)
    return AudioBuffer.from_samples(samples, CANONICAL_SAMPLE_RATE)


# =============================================================================
# Framing
# =============================================================================


def frame_count(num_samples: int, frame_size: int, hop_size: int) -> int:
    """
    Number of full frames on the grid.

    Returns:
        floor((num_samples - frame_size) / hop_size) + 1, or 0 when the
        buffer is shorter than one frame.
    """
    if num_samples < frame_size:
        return 0
    return (num_samples - frame_size) // hop_size + 1


def iter_frames(
    samples: np.ndarray,
    frame_size: int,
    hop_size: int,
) -> Iterator[np.ndarray]:
    """
    Yield frame views over samples, in order.

    Note:
        Frames are views, not copies. Callers must not mutate them.
    """
    for i in range(frame_count(len(samples), frame_size, hop_size)):
        start = i * hop_size
        yield samples[start:start + frame_size]
