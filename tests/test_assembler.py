import os
import shutil
import subprocess

import pytest
from pydub import AudioSegment

from potato_news.animation.scene import SceneMetadata
from potato_news.domain.models import FrameSequence
from potato_news.errors import EncoderError
from potato_news.video.assembler import VideoAssembler
from potato_news.video.ffmpeg import probe_duration


@pytest.fixture
def assembler(tmp_path):
    return VideoAssembler(output_dir=str(tmp_path / "videos"), width=1080, height=1920, frame_rate=30, quality=23)


def test_mux_arguments(fake_run, assembler, tmp_path):
    sequence = FrameSequence(directory=str(tmp_path / "seq_1"), frame_rate=24)
    result = assembler.create_video(sequence, "speech.mp3", 42.0, "story.mp4")

    args = fake_run.call_args[0][0]
    assert args[0] == "ffmpeg"
    assert args[args.index("-framerate") + 1] == "24"
    assert args[args.index("-i") + 1] == os.path.join(sequence.directory, "frame_%05d.png")
    assert "speech.mp3" in args
    assert args[args.index("-c:v") + 1] == "libx264"
    assert args[args.index("-profile:v") + 1] == "main"
    assert args[args.index("-crf") + 1] == "23"
    assert args[args.index("-pix_fmt") + 1] == "yuv420p"
    assert args[args.index("-b:a") + 1] == "128k"
    assert args[args.index("-vf") + 1] == (
        "scale=1080:1920:force_original_aspect_ratio=decrease,"
        "pad=1080:1920:(ow-iw)/2:(oh-ih)/2,setsar=1"
    )

    assert result.path == str(tmp_path / "videos" / "story.mp4")
    assert result.url == "/videos/story.mp4"
    assert (result.width, result.height, result.duration) == (1080, 1920, 42.0)
    assert not result.is_short_format


def test_default_filename_and_short_format(fake_run, assembler, tmp_path):
    result = assembler.create_video(str(tmp_path / "frames"), "speech.mp3", 12.0)
    name = os.path.basename(result.path)
    assert name.startswith("video_") and name.endswith(".mp4")
    assert len(name) == len("video_") + 16 + len(".mp4")
    assert result.is_short_format
    args = fake_run.call_args[0][0]
    assert args[args.index("-framerate") + 1] == "30"


def test_mux_failure_is_fatal(failing_run, assembler, tmp_path):
    with pytest.raises(EncoderError) as exc:
        assembler.create_video(str(tmp_path), "speech.mp3", 5.0)
    assert exc.value.stage == "video mux"
    assert "exit code 1" in str(exc.value)


def test_missing_encoder_binary(fake_run, assembler, tmp_path):
    fake_run.side_effect = FileNotFoundError("ffmpeg")
    with pytest.raises(EncoderError) as exc:
        assembler.create_video(str(tmp_path), "speech.mp3", 5.0)
    assert exc.value.returncode is None


def test_probe_duration_parses_ffprobe_output(fake_run):
    fake_run.return_value = subprocess.CompletedProcess(args=[], returncode=0, stdout="12.480000\n", stderr="")
    assert probe_duration("speech.mp3") == pytest.approx(12.48)


@pytest.mark.parametrize("stdout, code", [("N/A\n", 0), ("0.000\n", 0), ("", 1)])
def test_probe_duration_rejects_bad_output(fake_run, stdout, code):
    fake_run.return_value = subprocess.CompletedProcess(args=[], returncode=code, stdout=stdout, stderr="")
    with pytest.raises(EncoderError):
        probe_duration("speech.mp3")


def _decoded_frame_count(video_path):
    result = subprocess.run(
        ["ffprobe", "-v", "error", "-count_frames", "-select_streams", "v:0",
         "-show_entries", "stream=nb_read_frames", "-of", "csv=p=0", video_path],
        capture_output=True, text=True, check=True,
    )
    return int(result.stdout.strip())


@pytest.mark.skipif(
    shutil.which("ffmpeg") is None or shutil.which("ffprobe") is None,
    reason="needs the ffmpeg and ffprobe binaries",
)
def test_rendered_frames_survive_the_mux(small_composer, empty_assets, tmp_path):
    amplitudes = [0.1, 0.5, 0.9] * 7 + [0.2, 0.0]
    sequence = small_composer.render_sequence(amplitudes, empty_assets, SceneMetadata(headline="Round trip"))

    speech = tmp_path / "speech.wav"
    AudioSegment.silent(duration=2300, frame_rate=44100).export(str(speech), format="wav")

    assembler = VideoAssembler(output_dir=str(tmp_path / "videos"), width=108, height=192, frame_rate=10)
    result = assembler.create_video(sequence, str(speech), 2.3, "round_trip.mp4")

    assert sequence.frame_count == 23
    assert _decoded_frame_count(result.path) == 23
