"""
SonicState v1 - On-Device Voice State Analysis

Turns one short mono voice recording into three bounded state signals
(Energy, Tension, Clarity), a rule-based insight and a confidence label.

Pipeline (fixed order):
    1. Feature extraction (RMS, ZCR, spectral centroid, pitch track)
    2. Scoring (Energy / Tension / Clarity + signal-quality guardrail)
    3. Insight selection (priority-ordered rule table)
    4. Confidence estimation

Invariants:
    - Same buffer + same version = identical result
    - No persistence, no network, no learned models
    - No state survives a single analysis call
    - Scores are integers in [0, 100]
"""

from sonicstate.contracts import (
    AcousticFeatures,
    AnalysisResult,
    AudioBuffer,
    Confidence,
    DataError,
    InsightCategory,
    VoiceScores,
)
from sonicstate.pipeline import analyze, analyze_or_fallback, fallback_result

__version__ = "1.0.0.dev0"

__all__ = [
    "AcousticFeatures",
    "AnalysisResult",
    "AudioBuffer",
    "Confidence",
    "DataError",
    "InsightCategory",
    "VoiceScores",
    "analyze",
    "analyze_or_fallback",
    "fallback_result",
]
