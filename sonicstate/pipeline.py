"""
SonicState v1 Pipeline Orchestrator

PIPELINE STEPS (FIXED ORDER):

    1. Feature extraction      → sonicstate.analysis.features
    2. Scoring                 → sonicstate.scoring.scores
    3. Insight selection       → sonicstate.scoring.insights
    4. Confidence estimation   → sonicstate.scoring.scores

INVARIANTS:
    - Steps never call each other (only the orchestrator sequences them)
    - No module-level mutable state; safe to call from several threads
    - No reference to the buffer is kept after returning
    - Scores are never computed from partial features
"""

import logging

from sonicstate.analysis.features import extract_features
from sonicstate.config import AnalysisConfig
from sonicstate.contracts import (
    AcousticFeatures,
    AnalysisResult,
    AudioBuffer,
    Confidence,
    DataError,
    VoiceScores,
)
from sonicstate.scoring.insights import generate_insight
from sonicstate.scoring.scores import calculate_confidence, calculate_scores


logger = logging.getLogger(__name__)

FALLBACK_INSIGHT = "Analysis could not be completed. Please try again."


def analyze(buffer: AudioBuffer, config: AnalysisConfig | None = None) -> AnalysisResult:
    """
    Run the full pipeline on one buffer.

    Args:
        buffer: Complete mono PCM buffer
        config: Analysis settings (default: AnalysisConfig())

    Returns:
        AnalysisResult with scores, insight, confidence and features.

    Raises:
        DataError: If the buffer cannot be analyzed (nothing is scored)
    """
    logger.info(
        "analysis_started duration_ms=%.0f sample_rate=%d",
        buffer.duration_ms,
        buffer.sample_rate,
    )

    features = extract_features(buffer, config)
    scores = calculate_scores(features)
    insight = generate_insight(features, scores)
    confidence = calculate_confidence(features)

    logger.info(
        "analysis_completed energy=%d tension=%d clarity=%d confidence=%s",
        scores.energy,
        scores.tension,
        scores.clarity,
        confidence.value,
    )

    return AnalysisResult(
        scores=scores,
        insight=insight,
        confidence=confidence,
        features=features,
    )


def fallback_result() -> AnalysisResult:
    """
    Conservative result shown when no analysis could run.

    Returns:
        Neutral 50/50/50 scores, a "could not be completed" insight,
        low confidence and all-zero features.
    """
    return AnalysisResult(
        scores=VoiceScores(energy=50, tension=50, clarity=50),
        insight=FALLBACK_INSIGHT,
        confidence=Confidence.low,
        features=AcousticFeatures.zero(),
    )


def analyze_or_fallback(
    buffer: AudioBuffer | None,
    config: AnalysisConfig | None = None,
) -> AnalysisResult:
    """
    Analyze a buffer, degrading to fallback_result() instead of failing.

    Args:
        buffer: Captured buffer, or None when capture failed
        config: Analysis settings

    Returns:
        The analysis result, or the fallback when there was no buffer or
        the buffer violated a precondition.
    """
    if buffer is None:
        logger.warning("analysis_failed reason=no_buffer")
        return fallback_result()

    try:
        return analyze(buffer, config)
    except DataError as e:
        logger.warning("analysis_failed code=%s: %s", e.code, e.message)
        return fallback_result()
