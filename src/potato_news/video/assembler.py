"""
Muxes a rendered PNG sequence with the speech track into an H.264/AAC MP4.
"""

import os
from typing import Optional, Union

from potato_news import config
from potato_news.domain.models import FrameSequence, VideoResult
from potato_news.ports.interfaces import IVideoAssembler
from potato_news.utils.file_manager import generate_id
from potato_news.video.ffmpeg import run_ffmpeg

FRAME_PATTERN = "frame_%05d.png"


class VideoAssembler(IVideoAssembler):
    """Frame sequence + audio -> portrait MP4 in the videos directory."""

    def __init__(
        self,
        output_dir: Optional[str] = None,
        width: int = config.VIDEO_WIDTH,
        height: int = config.VIDEO_HEIGHT,
        frame_rate: int = config.FRAME_RATE,
        quality: int = config.VIDEO_QUALITY,
        short_format_threshold: float = config.SHORT_FORMAT_THRESHOLD,
    ):
        self.output_dir = output_dir or config.VIDEOS_DIR
        self.width = width
        self.height = height
        self.frame_rate = frame_rate
        self.quality = quality
        self.short_format_threshold = short_format_threshold
        os.makedirs(self.output_dir, exist_ok=True)

    def _scale_filter(self) -> str:
        w, h = self.width, self.height
        return (f"scale={w}:{h}:force_original_aspect_ratio=decrease,"
                f"pad={w}:{h}:(ow-iw)/2:(oh-ih)/2,setsar=1")

    def build_mux_args(self, frames_dir: str, audio_path: str, output_path: str, frame_rate: int):
        return [
            "-y",
            "-framerate", str(frame_rate),
            "-i", os.path.join(frames_dir, FRAME_PATTERN),
            "-i", audio_path,
            "-vf", self._scale_filter(),
            "-c:v", "libx264",
            "-profile:v", "main",
            "-preset", "medium",
            "-crf", str(self.quality),
            "-pix_fmt", "yuv420p",
            "-c:a", "aac",
            "-b:a", "128k",
            "-r", str(frame_rate),
            output_path,
        ]

    def create_video(
        self,
        frames: Union[FrameSequence, str],
        audio_path: str,
        duration: float,
        custom_filename: Optional[str] = None,
    ) -> VideoResult:
        """
        Encode `frames` (a FrameSequence or a directory of frame_#####.png files)
        together with `audio_path`. Raises EncoderError if ffmpeg fails.
        """
        if isinstance(frames, FrameSequence):
            frames_dir, frame_rate = frames.directory, frames.frame_rate
        else:
            frames_dir, frame_rate = frames, self.frame_rate

        filename = custom_filename or f"video_{generate_id()}.mp4"
        output_path = os.path.join(self.output_dir, filename)
        is_short = duration <= self.short_format_threshold

        print(f"  🎬 Encoding {'short' if is_short else 'standard'} format video "
              f"({duration:.1f}s, {self.width}x{self.height} @ {frame_rate} FPS)")
        run_ffmpeg(self.build_mux_args(frames_dir, audio_path, output_path, frame_rate), "video mux")
        print(f"  ✅ Video created: {output_path}")

        return VideoResult(
            path=output_path,
            duration=duration,
            width=self.width,
            height=self.height,
            url=f"/videos/{filename}",
            is_short_format=is_short,
        )
