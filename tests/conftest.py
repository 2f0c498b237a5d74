import subprocess
from unittest.mock import MagicMock, patch

import pytest
from pydub import AudioSegment
from pydub.generators import Sine

from potato_news.animation.assets import AssetBundle
from potato_news.animation.scene import SceneComposer


@pytest.fixture
def speech_wav(tmp_path):
    """2s mono WAV: one second of silence, then one second of a loud tone."""
    silence = AudioSegment.silent(duration=1000, frame_rate=44100).set_channels(1)
    tone = Sine(440, sample_rate=44100).to_audio_segment(duration=1000, volume=-3.0).set_channels(1)
    path = tmp_path / "speech.wav"
    (silence + tone).export(str(path), format="wav")
    return str(path)


@pytest.fixture
def fake_run():
    """Patch subprocess.run as seen by the ffmpeg wrappers; succeeds by default."""
    with patch("potato_news.video.ffmpeg.subprocess.run") as run:
        run.return_value = subprocess.CompletedProcess(args=[], returncode=0, stdout="", stderr="")
        yield run


@pytest.fixture
def failing_run(fake_run):
    fake_run.return_value = subprocess.CompletedProcess(
        args=[], returncode=1, stdout="", stderr="Error opening input file"
    )
    return fake_run


@pytest.fixture
def empty_assets():
    return AssetBundle()


@pytest.fixture
def small_composer(tmp_path):
    """Tiny frames so render tests stay fast."""
    return SceneComposer(width=108, height=192, frame_rate=10, frames_dir=str(tmp_path / "frames"))


@pytest.fixture
def ok_response():
    response = MagicMock()
    response.raise_for_status.return_value = None
    return response
