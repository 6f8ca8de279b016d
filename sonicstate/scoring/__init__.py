"""
SonicState v1 Scoring

    scores    - AcousticFeatures → VoiceScores, confidence label
    insights  - priority-ordered insight rules and display category
"""
