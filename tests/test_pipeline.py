import os
from unittest.mock import MagicMock

import pytest

from potato_news.adapters import default_adapters
from potato_news.application.pipeline import VideoPipeline
from potato_news.domain.models import FrameSequence, VideoResult
from potato_news.errors import EncoderError
from potato_news.ports.interfaces import (
    IAudioAnalyzer,
    INewsImageSource,
    ISequenceRenderer,
    ISoundEffectsService,
    ISubtitleService,
    IVideoAssembler,
)

CONTENT = {"id": "c1", "raw_text": "A potato was elected mayor. Nobody is surprised.", "sentiment": "funny"}
AUDIO = {"path": "speech.mp3", "duration": 20.0}
NEWS = {"id": "n1", "title": "Potato elected mayor", "category": "politics", "image_url": "http://x/img.jpg"}


@pytest.fixture
def ports(tmp_path):
    analyzer = MagicMock(spec=IAudioAnalyzer)
    analyzer.analyze.return_value = ([0.5] * 600, 20.0)

    renderer = MagicMock(spec=ISequenceRenderer)
    renderer.render.return_value = FrameSequence(directory=str(tmp_path / "seq_1"), frame_rate=30)

    assembler = MagicMock(spec=IVideoAssembler)
    assembler.create_video.return_value = VideoResult(
        path=str(tmp_path / "video_1.mp4"), duration=20.0, width=1080, height=1920, url="/videos/video_1.mp4"
    )

    subtitles = MagicMock(spec=ISubtitleService)
    subtitles.create_subtitles.return_value = str(tmp_path / "subtitles_c1.srt")
    subtitles.add_subtitles_to_video.return_value = str(tmp_path / "subtitled_video_1.mp4")

    sound_effects = MagicMock(spec=ISoundEffectsService)
    sound_effects.add_sound_effects_to_video.side_effect = lambda path, *args, **kwargs: path.replace(
        "subtitled_", "withsfx_subtitled_"
    )

    image_source = MagicMock(spec=INewsImageSource)
    image_source.fetch_news_image.return_value = str(tmp_path / "news.jpg")

    return dict(
        analyzer=analyzer,
        renderer=renderer,
        assembler=assembler,
        subtitles=subtitles,
        sound_effects=sound_effects,
        image_source=image_source,
    )


@pytest.fixture
def pipeline(ports, tmp_path):
    return VideoPipeline(**ports, frames_dir=str(tmp_path / "frames"))


def test_full_run_chains_every_stage(pipeline, ports, tmp_path):
    result = pipeline.create_video_for_content(CONTENT, AUDIO, NEWS)

    assert result.path == str(tmp_path / "withsfx_subtitled_video_1.mp4")
    assert result.url == "/videos/withsfx_subtitled_video_1.mp4"

    render_kwargs = ports["renderer"].render.call_args.kwargs
    assert render_kwargs["headline"] == "Potato elected mayor"
    assert render_kwargs["footer_image_path"] == str(tmp_path / "news.jpg")
    assert render_kwargs["is_short_format"] is False

    filename = ports["assembler"].create_video.call_args[0][3]
    assert filename.endswith("_politics_potato-elected-mayor_c1.mp4")
    ports["sound_effects"].add_sound_effects_to_video.assert_called_once_with(
        str(tmp_path / "subtitled_video_1.mp4"), 20.0, False, CONTENT
    )


def test_subtitle_failure_keeps_muxed_video(ports, tmp_path):
    ports["subtitles"].add_subtitles_to_video.side_effect = EncoderError("subtitle burn-in", 1)
    pipeline = VideoPipeline(**{**ports, "sound_effects": None})

    result = pipeline.create_video_for_content(CONTENT, AUDIO)
    assert result.path == str(tmp_path / "video_1.mp4")


def test_sound_effect_failure_keeps_subtitled_video(pipeline, ports, tmp_path):
    ports["sound_effects"].add_sound_effects_to_video.side_effect = EncoderError("sound effect mix", 1)
    result = pipeline.create_video_for_content(CONTENT, AUDIO)
    assert result.path == str(tmp_path / "subtitled_video_1.mp4")


def test_mux_failure_propagates(pipeline, ports):
    ports["assembler"].create_video.side_effect = EncoderError("video mux", 1)
    with pytest.raises(EncoderError):
        pipeline.create_video_for_content(CONTENT, AUDIO)
    ports["subtitles"].add_subtitles_to_video.assert_not_called()


def test_short_audio_uses_short_format(pipeline, ports):
    ports["analyzer"].analyze.return_value = ([0.5] * 300, 10.0)
    pipeline.create_video_for_content(CONTENT, AUDIO, use_compact_subtitles=True)

    assert ports["renderer"].render.call_args.kwargs["is_short_format"] is True
    ports["subtitles"].add_subtitles_to_video.assert_called_once()
    assert ports["subtitles"].add_subtitles_to_video.call_args[0][2:] == (True, True)
    # subtitles are timed against the analysed duration
    assert ports["subtitles"].create_subtitles.call_args[0][1]["duration"] == 10.0


def test_initialize_runs_once(pipeline, ports):
    pipeline.initialize()
    pipeline.create_video_for_content(CONTENT, AUDIO)
    pipeline.create_video_for_content(CONTENT, AUDIO)
    ports["renderer"].initialize.assert_called_once()


def test_batch_skips_failed_items(pipeline, ports, tmp_path):
    good = VideoResult(path=str(tmp_path / "video_1.mp4"), duration=20.0, width=1080, height=1920, url="")
    ports["assembler"].create_video.side_effect = [EncoderError("video mux", 1), good]

    results = pipeline.create_video_batch([
        {"content": CONTENT, "audio": AUDIO},
        {"content": CONTENT, "audio": AUDIO, "news_item": NEWS},
        {"content": CONTENT},
    ])
    assert len(results) == 1


def test_cleanup_sweeps_frames_and_images(pipeline, ports, tmp_path):
    pipeline.cleanup(12)
    ports["image_source"].cleanup_old_images.assert_called_once_with(12)


def test_default_adapters_honours_overrides(ports):
    adapters = default_adapters(**ports)
    assert adapters == ports


def test_metadata_written_next_to_final_video(pipeline, tmp_path):
    result = pipeline.create_video_for_content(CONTENT, AUDIO, NEWS)

    assert os.path.exists(tmp_path / "withsfx_subtitled_video_1.json")
    metadata = pipeline.load_video_metadata(result.path)
    assert metadata["path"] == result.path
    assert metadata["url"] == "/videos/withsfx_subtitled_video_1.mp4"
    assert metadata["content_id"] == "c1"
    assert metadata["news_item_id"] == "n1"
    assert metadata["duration"] == 20.0
