"""
SonicState v1 Pitch Tracker Tests

Covers the difference-function estimator, the autocorrelation estimator
and frame-sequence tracking.
"""

import numpy as np
import pytest

from sonicstate.analysis.pitch import (
    cumulative_mean_normalized,
    detect_pitch_autocorrelation,
    detect_pitch_yin,
    difference_function,
    lag_bounds,
    track_frames,
)
from sonicstate.config import PitchConfig


SAMPLE_RATE = 16000


class TestDifferenceFunction:

    def test_matches_direct_sum(self):
        """Vectorized d(tau) equals the literal double loop."""
        rng = np.random.default_rng(7)
        x = rng.uniform(-1, 1, 64)

        expected = np.array([
            sum((x[i] - x[i + tau]) ** 2 for i in range(len(x) - tau))
            for tau in range(len(x))
        ])
        np.testing.assert_allclose(difference_function(x), expected, atol=1e-9)

    def test_zero_lag_is_zero(self, sine):
        assert difference_function(sine(220, 256))[0] == pytest.approx(0.0, abs=1e-9)

    def test_silence_is_all_zero(self):
        assert np.all(difference_function(np.zeros(128)) == 0.0)


class TestCumulativeMeanNormalized:

    def test_first_value_is_one(self):
        cmnd = cumulative_mean_normalized(np.array([0.0, 2.0, 4.0, 6.0]))
        assert cmnd[0] == 1.0

    def test_values(self):
        # tau=1: 2 / (2/1) = 1; tau=2: 4 / (6/2) = 4/3; tau=3: 6 / (12/3) = 1.5
        cmnd = cumulative_mean_normalized(np.array([0.0, 2.0, 4.0, 6.0]))
        np.testing.assert_allclose(cmnd, [1.0, 1.0, 4 / 3, 1.5])

    def test_zero_energy_maps_to_one(self):
        """Silence must not produce NaN."""
        cmnd = cumulative_mean_normalized(np.zeros(32))
        assert np.all(cmnd == 1.0)


class TestLagBounds:

    def test_default_band(self):
        assert lag_bounds(16000, 1024, PitchConfig()) == (26, 320)

    def test_max_lag_limited_by_frame(self):
        assert lag_bounds(16000, 200, PitchConfig()) == (26, 199)


class TestDetectPitchYin:

    def test_silence_is_unvoiced(self):
        result = detect_pitch_yin(np.zeros(1024, dtype=np.float32), SAMPLE_RATE)
        assert result.pitch_hz == 0
        assert result.confidence == 0
        assert result.is_voiced is False

    @pytest.mark.parametrize("frequency", [100, 220, 440])
    def test_recovers_sine_pitch(self, sine, frequency):
        result = detect_pitch_yin(sine(frequency, 1024), SAMPLE_RATE)
        assert result.pitch_hz == pytest.approx(frequency, rel=0.1)
        assert result.is_voiced is True
        assert result.confidence > 0.5

    def test_custom_band(self, sine):
        config = PitchConfig(min_freq=80, max_freq=400, threshold=0.1)
        result = detect_pitch_yin(sine(220, 1024), SAMPLE_RATE, config)
        assert result.pitch_hz == pytest.approx(220, rel=0.1)

    def test_confidence_bounded(self, sine):
        result = detect_pitch_yin(sine(220, 1024), SAMPLE_RATE)
        assert 0 <= result.confidence <= 1


class TestDetectPitchAutocorrelation:

    def test_silence_is_unvoiced(self):
        result = detect_pitch_autocorrelation(np.zeros(1024, dtype=np.float32), SAMPLE_RATE)
        assert result.pitch_hz == 0
        assert result.confidence == 0
        assert result.is_voiced is False

    def test_detects_sine_pitch(self, sine):
        result = detect_pitch_autocorrelation(sine(200, 1024), SAMPLE_RATE)
        assert 180 < result.pitch_hz < 220
        assert result.confidence > 0.1

    def test_loud_sine_is_voiced(self, sine):
        result = detect_pitch_autocorrelation(sine(200, 1024, amplitude=0.9), SAMPLE_RATE)
        assert result.pitch_hz == pytest.approx(200, rel=0.05)
        assert result.is_voiced is True

    def test_quiet_sine_is_not_voiced(self, sine):
        """Confidence is raw correlation / N, so quiet tones fall under 0.3."""
        result = detect_pitch_autocorrelation(sine(200, 1024, amplitude=0.1), SAMPLE_RATE)
        assert result.is_voiced is False


class TestTrackFrames:

    def test_frame_count_and_voicing(self, sine):
        frame_size, hop_size = 1024, 512
        samples = sine(220, frame_size + hop_size * 2)

        track = track_frames(samples, SAMPLE_RATE, frame_size, hop_size)

        assert track.total_frames == 3
        assert track.voiced_frames == 3
        assert len(track.pitches) == 3
        assert len(track.confidences) == 3
        assert all(p > 0 for p in track.pitches)

    def test_shorter_than_frame_has_no_frames(self, sine):
        track = track_frames(sine(220, 1000), SAMPLE_RATE)
        assert track.total_frames == 0
        assert track.pitches == ()

    def test_silence_has_no_voiced_frames(self):
        track = track_frames(np.zeros(4096, dtype=np.float32), SAMPLE_RATE)
        assert track.total_frames == 7
        assert track.voiced_frames == 0
        assert all(p == 0 for p in track.pitches)

    def test_autocorrelation_substitution(self, sine):
        samples = sine(200, 2048, amplitude=0.9)
        track = track_frames(samples, SAMPLE_RATE, method="autocorrelation")
        assert track.total_frames == 3
        assert track.voiced_frames == 3

    def test_unknown_method_raises(self, sine):
        with pytest.raises(ValueError, match="Unknown pitch method"):
            track_frames(sine(200, 2048), SAMPLE_RATE, method="cepstrum")
