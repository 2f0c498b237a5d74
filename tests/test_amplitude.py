import math
from unittest.mock import patch

import pytest

from potato_news.animation.amplitude import (
    DEFAULT_DURATION,
    AmplitudeAnalyzer,
    downsample_amplitudes,
    fit_to_frame_count,
    interpolate_amplitudes,
)
from potato_news.errors import AudioAnalysisError, EncoderError

PROBE = "potato_news.animation.amplitude.probe_duration"


@pytest.mark.parametrize("frame_rate", [24, 30])
@pytest.mark.parametrize("duration", [0.01, 1.0, 2.5, 10.033, 59.99])
def test_synthetic_curve_has_one_value_per_frame(duration, frame_rate):
    analyzer = AmplitudeAnalyzer(frame_rate=frame_rate, seed=1)
    amplitudes = analyzer.generate_synthetic_amplitudes(duration)
    assert len(amplitudes) == math.ceil(duration * frame_rate)
    assert all(0.0 <= a <= 1.0 for a in amplitudes)


def test_synthetic_curve_pauses_every_cycle():
    analyzer = AmplitudeAnalyzer(frame_rate=30, seed=7)
    amplitudes = analyzer.generate_synthetic_amplitudes(5.0)
    # frames 60..74 of each 75-frame cycle are the pause
    pauses = amplitudes[60:75] + amplitudes[135:150]
    assert all(a < 0.2 for a in pauses)
    assert max(amplitudes[:60]) > 0.5


def test_unprobeable_file_duration_estimated_from_size(tmp_path):
    audio = tmp_path / "speech.mp3"
    audio.write_bytes(b"\x00" * (160 * 1024))
    analyzer = AmplitudeAnalyzer(frame_rate=30)

    with patch(PROBE, side_effect=EncoderError("duration probe", 1)):
        assert analyzer.get_duration(str(audio)) == 10.0


def test_unprobeable_file_still_yields_full_amplitude_track(tmp_path):
    audio = tmp_path / "speech.mp3"
    audio.write_bytes(b"\x00" * (160 * 1024))
    analyzer = AmplitudeAnalyzer(frame_rate=30, seed=3)

    with patch(PROBE, side_effect=EncoderError("duration probe", 1)), \
            patch.object(analyzer, "measure_amplitudes", side_effect=AudioAnalysisError("bad audio")):
        amplitudes, duration = analyzer.analyze(str(audio))

    assert duration == 10.0
    assert len(amplitudes) == 300


def test_missing_file_uses_default_duration(tmp_path):
    analyzer = AmplitudeAnalyzer(frame_rate=30)
    with patch(PROBE, side_effect=EncoderError("duration probe", None)):
        assert analyzer.get_duration(str(tmp_path / "missing.mp3")) == DEFAULT_DURATION


def test_empty_file_uses_default_duration(tmp_path):
    audio = tmp_path / "empty.mp3"
    audio.write_bytes(b"")
    analyzer = AmplitudeAnalyzer(frame_rate=30)
    with patch(PROBE, side_effect=EncoderError("duration probe", 1)):
        assert analyzer.get_duration(str(audio)) == DEFAULT_DURATION


def test_measured_amplitudes_follow_the_waveform(speech_wav):
    analyzer = AmplitudeAnalyzer(frame_rate=30)
    amplitudes = analyzer.measure_amplitudes(speech_wav)

    assert len(amplitudes) == 60
    assert all(a == 0.0 for a in amplitudes[:29])
    assert all(a > 0.7 for a in amplitudes[31:])


def test_analyze_fits_measurement_to_probed_duration(speech_wav):
    analyzer = AmplitudeAnalyzer(frame_rate=30)
    with patch(PROBE, return_value=2.5):
        amplitudes, duration = analyzer.analyze(speech_wav)
    assert duration == 2.5
    assert len(amplitudes) == 75


def test_undecodable_audio_raises_analysis_error(tmp_path):
    audio = tmp_path / "noise.wav"
    audio.write_bytes(b"RIFF not really a wav file")
    with pytest.raises(AudioAnalysisError):
        AmplitudeAnalyzer().measure_amplitudes(str(audio))


def test_interpolation_and_downsampling_hit_target_length():
    assert interpolate_amplitudes([0.0, 1.0], 5) == pytest.approx([0.0, 0.4, 0.8, 1.0, 1.0])
    assert downsample_amplitudes(list(range(10)), 5) == [0, 2, 4, 6, 8]
    assert fit_to_frame_count([0.3] * 4, 4) == [0.3] * 4
    assert interpolate_amplitudes([], 3) == [0.0, 0.0, 0.0]
