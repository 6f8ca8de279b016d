"""
SonicState v1 Audio Utility Tests

Covers WAV loading, canonicalization and the capture-side helpers.
"""

import logging

import numpy as np
import pytest
import soundfile as sf

from sonicstate import audio
from sonicstate.contracts import AudioBuffer


class TestNormalizeAudio:

    def test_stereo_downmix_is_mean(self):
        stereo = np.stack([np.full(100, 0.2), np.full(100, 0.6)], axis=1).astype(np.float32)
        mono = audio.normalize_audio(stereo, 16000)
        assert mono.ndim == 1
        np.testing.assert_allclose(mono, 0.4, rtol=1e-6)

    def test_output_is_float32(self):
        out = audio.normalize_audio(np.zeros(100, dtype=np.float64), 16000)
        assert out.dtype == np.float32

    def test_resample_8k_to_16k(self, sine):
        samples = sine(200, 8000, rate=8000)
        out = audio.normalize_audio(samples, 8000)
        assert len(out) == 16000

    def test_resample_44k_to_16k(self):
        out = audio.normalize_audio(np.zeros(44100, dtype=np.float32), 44100)
        assert len(out) == 16000

    def test_resampling_deterministic(self, sine):
        samples = sine(300, 22050, rate=22050)
        first = audio.normalize_audio(samples, 22050)
        second = audio.normalize_audio(samples, 22050)
        np.testing.assert_array_equal(first, second)


class TestHelpers:

    def test_is_too_quiet(self, sine):
        assert audio.is_too_quiet(np.zeros(100, dtype=np.float32))
        assert audio.is_too_quiet(np.zeros(0, dtype=np.float32))
        assert not audio.is_too_quiet(sine(220, 1600))
        assert audio.is_too_quiet(sine(220, 1600, amplitude=0.005))


class TestFraming:

    def test_iter_frames_grid(self):
        samples = np.arange(2048, dtype=np.float32)
        frames = list(audio.iter_frames(samples, 1024, 512))
        assert len(frames) == 3
        assert [f[0] for f in frames] == [0, 512, 1024]
        assert all(len(f) == 1024 for f in frames)

    def test_frames_never_overrun(self):
        samples = np.zeros(2047, dtype=np.float32)
        frames = list(audio.iter_frames(samples, 1024, 512))
        assert len(frames) == 2
        assert all(len(f) == 1024 for f in frames)


class TestLoadBuffer:

    def test_mono_16k(self, sine, write_wav):
        path = write_wav(sine(220, 16000))
        buffer = audio.load_buffer(path)

        assert isinstance(buffer, AudioBuffer)
        assert buffer.channels == 1
        assert buffer.sample_rate == 16000
        assert buffer.samples.dtype == np.float32
        assert buffer.duration_ms == pytest.approx(1000.0)

    def test_stereo_44k_is_canonicalized(self, tmp_path, sine):
        tone = sine(220, 44100, rate=44100)
        path = tmp_path / "stereo.wav"
        sf.write(path, np.stack([tone, tone], axis=1), 44100, subtype="PCM_16")

        buffer = audio.load_buffer(path)

        assert buffer.samples.ndim == 1
        assert buffer.sample_rate == 16000
        assert len(buffer.samples) == 16000
        assert buffer.duration_ms == pytest.approx(1000.0)

    def test_near_silent_is_logged(self, write_wav, caplog):
        caplog.set_level(logging.WARNING, logger="sonicstate")
        path = write_wav(np.zeros(16000, dtype=np.float32))

        buffer = audio.load_buffer(path)

        assert len(buffer.samples) == 16000
        assert any("near-silent" in r.getMessage() for r in caplog.records)

    def test_audible_is_not_logged(self, sine, write_wav, caplog):
        caplog.set_level(logging.WARNING, logger="sonicstate")
        audio.load_buffer(write_wav(sine(220, 16000)))
        assert not any("near-silent" in r.getMessage() for r in caplog.records)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            audio.load_buffer(tmp_path / "missing.wav")

    def test_not_audio(self, tmp_path):
        path = tmp_path / "notes.wav"
        path.write_text("not audio")
        with pytest.raises(RuntimeError):
            audio.load_buffer(path)
