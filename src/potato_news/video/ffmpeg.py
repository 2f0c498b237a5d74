"""Thin wrappers around the ffmpeg / ffprobe command line tools."""

import subprocess
from typing import List, Optional

from potato_news.config import FFMPEG_BINARY, FFPROBE_BINARY
from potato_news.errors import EncoderError


def run_ffmpeg(args: List[str], stage: str, ffmpeg_binary: Optional[str] = None) -> str:
    """
    Run ffmpeg with the given arguments and return its combined output.
    Raises EncoderError when the process can't be started or exits non-zero.
    """
    cmd = [ffmpeg_binary or FFMPEG_BINARY, *args]
    try:
        result = subprocess.run(cmd, capture_output=True, text=True)
    except OSError as e:
        print(f"  ❌ {stage}: could not start ffmpeg: {e}")
        raise EncoderError(stage, None, str(e)) from e

    output = (result.stdout or "") + (result.stderr or "")
    if result.returncode != 0:
        print(f"  ❌ {stage}: ffmpeg exited with code {result.returncode}")
        print(f"     Last output: {output.strip()[-500:]}")
        raise EncoderError(stage, result.returncode, output)
    return output


def probe_duration(media_path: str, ffprobe_binary: Optional[str] = None) -> float:
    """Read a media file's duration in seconds with ffprobe."""
    cmd = [
        ffprobe_binary or FFPROBE_BINARY,
        "-v", "quiet",
        "-show_entries", "format=duration",
        "-of", "csv=p=0",
        media_path,
    ]
    try:
        result = subprocess.run(cmd, capture_output=True, text=True)
    except OSError as e:
        raise EncoderError("duration probe", None, str(e)) from e

    if result.returncode != 0:
        raise EncoderError("duration probe", result.returncode, result.stderr or "")
    try:
        duration = float(result.stdout.strip())
    except ValueError as e:
        raise EncoderError("duration probe", result.returncode, result.stdout or "") from e
    if duration <= 0:
        raise EncoderError("duration probe", result.returncode, f"non-positive duration {duration}")
    return duration
