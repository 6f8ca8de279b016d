"""
Score Calculation

Maps AcousticFeatures to bounded Energy / Tension / Clarity scores and a
confidence label.

Formulas (FROZEN calibration constants):
    energy  = norm(rms, .01, .25)*.7 + norm(centroid, 500, 3500)*.3
    tension = norm(pitch_cv, .05, .25)*.6 + norm(jitter, .01, .08)*.2
              + norm(zcr, .05, .18)*.2
    clarity = (100 - norm(zcr, .05, .2))*.5 + voiced_ratio*100*.3
              + clamp(100 - |centroid - 1800|/1800*50, 0, 100)*.2

Invariants:
    - Pure functions: no clock, no randomness, no hidden state
    - Scores are integers in [0, 100], rounded half-up
    - Low signal quality (< 0.25) attenuates scores and caps them at 35
"""

import math

from sonicstate.contracts import AcousticFeatures, Confidence, VoiceScores


QUALITY_FLOOR = 0.25
LOW_QUALITY_CAP = 35.0

QUIET_RMS = 0.015
LOW_RMS = 0.03
MIN_DURATION_SECONDS = 3.0
MIN_VOICED_RATIO = 0.1
LOW_VOICED_RATIO = 0.3


# =============================================================================
# Helpers
# =============================================================================


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def lerp(value: float, in_min: float, in_max: float, out_min: float, out_max: float) -> float:
    """Linear map from [in_min, in_max] to [out_min, out_max] (unclamped)."""
    normalized = (value - in_min) / (in_max - in_min)
    return out_min + normalized * (out_max - out_min)


def normalize_to_score(value: float, typical_min: float, typical_max: float) -> float:
    """Map value onto 0-100, clamped."""
    return clamp(lerp(value, typical_min, typical_max, 0, 100), 0, 100)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


# =============================================================================
# Raw Scores (unrounded)
# =============================================================================


def raw_energy(features: AcousticFeatures) -> float:
    """RMS (70%) + spectral centroid brightness (30%)."""
    rms_score = normalize_to_score(features.rms, 0.01, 0.25)
    centroid_score = normalize_to_score(features.spectral_centroid, 500, 3500)
    return clamp(rms_score * 0.7 + centroid_score * 0.3, 0, 100)


def raw_tension(features: AcousticFeatures) -> float:
    """Pitch variation (60%) + jitter (20%) + ZCR (20%)."""
    pitch_var_score = normalize_to_score(features.pitch_variance, 0.05, 0.25)
    jitter_score = normalize_to_score(features.jitter_proxy, 0.01, 0.08)
    zcr_score = normalize_to_score(features.zero_crossing_rate, 0.05, 0.18)
    return clamp(pitch_var_score * 0.6 + jitter_score * 0.2 + zcr_score * 0.2, 0, 100)


def raw_clarity(features: AcousticFeatures) -> float:
    """Inverse ZCR (50%) + voiced ratio (30%) + centroid near 1800 Hz (20%)."""
    zcr_clarity = 100 - normalize_to_score(features.zero_crossing_rate, 0.05, 0.2)
    voiced_score = features.voiced_ratio * 100
    centroid_deviation = abs(features.spectral_centroid - 1800) / 1800
    centroid_score = clamp(100 - centroid_deviation * 50, 0, 100)
    return clamp(zcr_clarity * 0.5 + voiced_score * 0.3 + centroid_score * 0.2, 0, 100)


def signal_quality(features: AcousticFeatures) -> float:
    """
    Trust factor in [0, 1] combining loudness and voiced-ness.

    Quiet or mostly-unvoiced clips get a low factor so that their scores
    stay conservative.
    """
    rms_quality = clamp(lerp(features.rms, 0.015, 0.05, 0, 1), 0, 1)
    voiced_quality = clamp(lerp(features.voiced_ratio, 0.1, 0.4, 0, 1), 0, 1)
    return rms_quality * voiced_quality


# =============================================================================
# Public API
# =============================================================================


def calculate_energy(features: AcousticFeatures) -> int:
    return round_half_up(raw_energy(features))


def calculate_tension(features: AcousticFeatures) -> int:
    return round_half_up(raw_tension(features))


def calculate_clarity(features: AcousticFeatures) -> int:
    return round_half_up(raw_clarity(features))


def calculate_scores(features: AcousticFeatures) -> VoiceScores:
    """
    Calculate all three scores.

    Args:
        features: Buffer-level features

    Returns:
        VoiceScores; attenuated and capped at 35 when signal quality < 0.25.
    """
    quality = signal_quality(features)
    raws = (raw_energy(features), raw_tension(features), raw_clarity(features))

    if quality < QUALITY_FLOOR:
        energy, tension, clarity = (
            round_half_up(clamp(raw * quality, 0, LOW_QUALITY_CAP)) for raw in raws
        )
    else:
        energy, tension, clarity = (round_half_up(raw) for raw in raws)

    return VoiceScores(energy=energy, tension=tension, clarity=clarity)


def calculate_confidence(features: AcousticFeatures) -> Confidence:
    """
    Confidence label from signal quality. First matching check wins.
    """
    if features.rms < QUIET_RMS:
        return Confidence.low
    if features.duration_seconds < MIN_DURATION_SECONDS:
        return Confidence.low
    if features.voiced_ratio < MIN_VOICED_RATIO:
        return Confidence.low
    if features.rms < LOW_RMS or features.voiced_ratio < LOW_VOICED_RATIO:
        return Confidence.medium
    return Confidence.high
