"""
Spectral frame analysis.

Responsibilities:
    - Hann windowing
    - Zero-padding to the next power of two
    - In-place radix-2 Cooley-Tukey FFT
    - Magnitude spectrum and spectral centroid

INVARIANTS:
    - FFT length is always a power of two
    - Frames are zero-padded, never truncated or resampled
    - Silent frames have centroid 0.0
"""

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class SpectralFrame:
    centroid_hz: float


# =============================================================================
# Windowing
# =============================================================================


def hann_window(frame: np.ndarray) -> np.ndarray:
    """
    Return frame * w, w[i] = 0.5 * (1 - cos(2*pi*i / (N - 1))).

    Note:
        Returns a new float64 array; the input is not modified.
        A single-sample frame is returned unwindowed.
    """
    n = len(frame)
    frame = np.asarray(frame, dtype=np.float64)
    if n < 2:
        return frame.copy()
    i = np.arange(n)
    window = 0.5 * (1 - np.cos(2 * np.pi * i / (n - 1)))
    return frame * window


def next_power_of_two(n: int) -> int:
    """Smallest power of two >= n (1 for n <= 1)."""
    if n <= 1:
        return 1
    return 1 << (n - 1).bit_length()


# =============================================================================
# FFT
# =============================================================================


def _bit_reversal_permutation(n: int) -> np.ndarray:
    bits = n.bit_length() - 1
    indices = np.arange(n)
    reversed_indices = np.zeros(n, dtype=np.int64)
    for b in range(bits):
        reversed_indices |= ((indices >> b) & 1) << (bits - 1 - b)
    return reversed_indices


def fft_in_place(real: np.ndarray, imag: np.ndarray) -> None:
    """
    Radix-2 decimation-in-time FFT, computed in place.

    Args:
        real: Real parts (float64, length a power of two); overwritten
        imag: Imaginary parts (same length); overwritten

    Raises:
        ValueError: If lengths differ or are not a power of two

    Note:
        Each butterfly stage is vectorized over all blocks; twiddle factors
        are e^{-2*pi*i*k/len} for the stage's block length.
    """
    n = len(real)
    if len(imag) != n:
        raise ValueError(f"real/imag length mismatch: {n} != {len(imag)}")
    if n <= 1:
        return
    if n & (n - 1):
        raise ValueError(f"FFT length must be a power of two, got {n}")
    if not (real.flags.c_contiguous and imag.flags.c_contiguous):
        raise ValueError("FFT buffers must be contiguous arrays")

    perm = _bit_reversal_permutation(n)
    real[:] = real[perm]
    imag[:] = imag[perm]

    length = 2
    while length <= n:
        half = length // 2
        angle = -2 * np.pi * np.arange(half) / length
        w_real = np.cos(angle)
        w_imag = np.sin(angle)

        # Shape (blocks, half): rows are butterfly groups
        re = real.reshape(-1, length)
        im = imag.reshape(-1, length)
        u_real = re[:, :half].copy()
        u_imag = im[:, :half].copy()
        v_real = re[:, half:] * w_real - im[:, half:] * w_imag
        v_imag = re[:, half:] * w_imag + im[:, half:] * w_real

        re[:, :half] = u_real + v_real
        im[:, :half] = u_imag + v_imag
        re[:, half:] = u_real - v_real
        im[:, half:] = u_imag - v_imag

        length <<= 1


def magnitude_spectrum(real: np.ndarray, imag: np.ndarray) -> np.ndarray:
    """sqrt(re^2 + im^2) over the first half of the bins."""
    half = len(real) // 2
    return np.sqrt(real[:half] ** 2 + imag[:half] ** 2)


def spectral_centroid(mag: np.ndarray, sample_rate: int, fft_size: int) -> float:
    """
    Magnitude-weighted mean frequency.

    Returns:
        Centroid in Hz; 0.0 when the spectrum has no energy.
    """
    total = float(np.sum(mag))
    if total == 0:
        return 0.0
    freqs = np.arange(len(mag)) * sample_rate / fft_size
    return float(np.sum(freqs * mag) / total)


# =============================================================================
# Frame Analysis
# =============================================================================


def analyze_spectrum(frame: np.ndarray, sample_rate: int) -> SpectralFrame:
    """
    Window, zero-pad, transform and summarize one frame.

    Args:
        frame: Frame samples
        sample_rate: Sample rate in Hz

    Returns:
        SpectralFrame with the frame's centroid.
    """
    windowed = hann_window(frame)
    fft_size = next_power_of_two(len(windowed))

    real = np.zeros(fft_size, dtype=np.float64)
    imag = np.zeros(fft_size, dtype=np.float64)
    real[:len(windowed)] = windowed

    fft_in_place(real, imag)
    mag = magnitude_spectrum(real, imag)

    return SpectralFrame(centroid_hz=spectral_centroid(mag, sample_rate, fft_size))
