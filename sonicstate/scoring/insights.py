"""
Insight Engine

Rule-based, deterministic insight selection.

The rule table is data: an ordered tuple of InsightRule records. Rules are
evaluated from highest to lowest priority; equal priorities keep
declaration order. The last rule is a catch-all, so a match always exists.
"""

from sonicstate.contracts import AcousticFeatures, InsightCategory, InsightRule, VoiceScores


INSIGHT_RULES: tuple[InsightRule, ...] = (
    InsightRule(
        id="too_quiet",
        priority=100,
        condition=lambda features, scores: features.rms < 0.015,
        message="This sample is very quiet — results may be less reliable.",
    ),
    InsightRule(
        id="no_voice",
        priority=95,
        condition=lambda features, scores: features.voiced_ratio < 0.1,
        message="No clear voice signal detected. Try speaking closer to the microphone.",
    ),
    InsightRule(
        id="very_short",
        priority=90,
        condition=lambda features, scores: features.duration_seconds < 5,
        message="Recording was very short — results may be less reliable.",
    ),
    InsightRule(
        id="high_tension",
        priority=80,
        condition=lambda features, scores: scores.tension > 75,
        message="More tension-like signal than typical speech.",
    ),
    InsightRule(
        id="very_high_energy",
        priority=70,
        condition=lambda features, scores: scores.energy > 80,
        message="Higher energy signal in this sample.",
    ),
    InsightRule(
        id="very_low_energy",
        priority=70,
        condition=lambda features, scores: scores.energy < 25,
        message="Lower energy signal — voice may sound subdued.",
    ),
    InsightRule(
        id="low_clarity",
        priority=60,
        condition=lambda features, scores: scores.clarity < 35,
        message="This sample has more noise than typical speech.",
    ),
    InsightRule(
        id="high_clarity",
        priority=50,
        condition=lambda features, scores: scores.clarity > 80 and scores.energy > 50,
        message="Clear, well-projected voice signal detected.",
    ),
    InsightRule(
        id="balanced",
        priority=10,
        condition=lambda features, scores: True,
        message="Voice signal detected within typical range.",
    ),
)

# sorted() is stable: ties keep declaration order
_EVALUATION_ORDER: tuple[InsightRule, ...] = tuple(
    sorted(INSIGHT_RULES, key=lambda rule: -rule.priority)
)


def matching_rules(features: AcousticFeatures, scores: VoiceScores) -> list[InsightRule]:
    """All rules whose condition holds, in evaluation order."""
    return [rule for rule in _EVALUATION_ORDER if rule.condition(features, scores)]


def generate_insight(features: AcousticFeatures, scores: VoiceScores) -> str:
    """
    Return the message of the highest-priority matching rule.

    Args:
        features: Buffer-level features
        scores: Scores computed from the same features

    Returns:
        Insight message. The catch-all rule guarantees a match.
    """
    for rule in _EVALUATION_ORDER:
        if rule.condition(features, scores):
            return rule.message
    raise AssertionError("Insight rule table has no catch-all rule")


def matching_insights(features: AcousticFeatures, scores: VoiceScores) -> list[str]:
    """Every matching message, highest priority first."""
    return [rule.message for rule in matching_rules(features, scores)]


def insight_category(features: AcousticFeatures, scores: VoiceScores) -> InsightCategory:
    """
    Display category, independent of which rule produced the message.
    """
    if (
        features.rms < 0.015
        or features.voiced_ratio < 0.1
        or features.duration_seconds < 5
    ):
        return InsightCategory.warning

    if scores.clarity > 75 and scores.energy > 50 and scores.tension < 50:
        return InsightCategory.positive

    return InsightCategory.neutral
