"""
SonicState v1 Test Configuration

Provides deterministic signal generators, buffers and WAV files.
"""

import subprocess
import sys
from pathlib import Path

import numpy as np
import pytest
import soundfile as sf

from sonicstate.contracts import AcousticFeatures, AudioBuffer, VoiceScores


SAMPLE_RATE = 16000


def generate_sine(
    frequency: float,
    length: int,
    amplitude: float = 0.5,
    rate: int = SAMPLE_RATE,
) -> np.ndarray:
    """Deterministic float32 sine wave."""
    i = np.arange(length)
    return (amplitude * np.sin(2 * np.pi * frequency * i / rate)).astype(np.float32)


def run_cli(*args: str) -> subprocess.CompletedProcess:
    """Run sonicstate CLI as subprocess."""
    return subprocess.run(
        [sys.executable, "-m", "sonicstate", *args],
        capture_output=True,
        text=True,
    )


@pytest.fixture
def sine():
    """Factory fixture: sine(frequency, length, amplitude=0.5)."""
    return generate_sine


@pytest.fixture
def make_buffer():
    """Factory fixture: wrap samples into a mono 16 kHz AudioBuffer."""
    def _make(samples: np.ndarray, rate: int = SAMPLE_RATE) -> AudioBuffer:
        return AudioBuffer.from_samples(samples, rate)
    return _make


@pytest.fixture
def cli():
    return run_cli


@pytest.fixture
def balanced_features() -> AcousticFeatures:
    """Mid-range features of a clean, normal-length recording."""
    return AcousticFeatures(
        rms=0.1,
        pitch_mean=180.0,
        pitch_variance=0.1,
        spectral_centroid=1800.0,
        zero_crossing_rate=0.1,
        voiced_ratio=0.7,
        jitter_proxy=0.02,
        shimmer_proxy=0.05,
        duration_seconds=30.0,
    )


@pytest.fixture
def balanced_scores() -> VoiceScores:
    return VoiceScores(energy=50, tension=50, clarity=50)


@pytest.fixture
def write_wav(tmp_path):
    """Factory fixture: write samples to a PCM-16 WAV and return its path."""
    def _write(samples: np.ndarray, name: str = "input.wav", rate: int = SAMPLE_RATE) -> Path:
        path = tmp_path / name
        sf.write(path, np.clip(samples, -1.0, 1.0), rate, subtype="PCM_16")
        return path
    return _write
