"""
Subtitle generation and burn-in.

Commentary text is split into short, readable chunks that break at natural
points, each chunk gets a reading-time estimate, and the estimates are scaled
so the subtitles (plus the pauses between them) span exactly the audio.
"""

import os
import re
from typing import Dict, List, Optional

from potato_news.domain.models import AudioResult, GeneratedContent
from potato_news.errors import EncoderError
from potato_news.ports.interfaces import ISubtitleService
from potato_news.video.ffmpeg import run_ffmpeg

# ASS style overrides passed to ffmpeg's subtitles filter via force_style
SUBTITLE_STYLES: Dict[str, Dict[str, object]] = {
    "default": {
        "Fontname": "Arial",
        "Fontsize": 8,
        "PrimaryColour": "&H00FFFFFF",
        "Bold": 1,
        "Alignment": 2,  # bottom centre
        "MarginV": 16,
        "MarginL": 20,
        "Spacing": 0.2,
    },
    "short": {
        "Fontname": "Arial",
        "Fontsize": 8,
        "PrimaryColour": "&H00FFFFFF",
        "Bold": 1,
        "Alignment": 2,
        "MarginV": 14,
        "MarginL": 20,
        "Spacing": 0.2,
    },
    "emphasis": {
        "Fontname": "Arial",
        "Fontsize": 10,
        "PrimaryColour": "&H00F0F0FF",
        "Bold": 1,
        "Alignment": 2,
        "MarginV": 16,
        "MarginL": 20,
        "Spacing": 0.5,
    },
    "compact": {
        "Fontname": "Arial",
        "Fontsize": 8,
        "PrimaryColour": "&H00FFFFFF",
        "Bold": 1,
        "Alignment": 8,  # top centre, clear of the bottom banner
        "MarginV": 5,
        "MarginL": 20,
        "Spacing": 0.2,
    },
}

MIN_SUBTITLE_DURATION = 1.2
MAX_SUBTITLE_DURATION = 3.0
INTER_SUBTITLE_PAUSE = 0.05
BASE_READING_SPEED = 0.06  # seconds per character
SHORT_FORMAT_SPEED_FACTOR = 0.9
EMPHASIS_BONUS = 0.2  # per ALL-CAPS word
DRAMATIC_PAUSE_BONUS = 0.3  # per "..."

EMPHASIZED_WORD_PATTERN = re.compile(r"\b[A-Z]{2,}\b")
CONJUNCTIONS = {"and", "but", "or", "nor", "so", "yet"}
RELATIVE_PRONOUNS = {"who", "whom", "whose", "which", "that"}

_ELLIPSIS_MARKER = "\x00"


def split_into_sentences(text: str) -> List[str]:
    """Split after . ! ? while keeping '...' inside its sentence."""
    processed = re.sub(r"\.{3,}", _ELLIPSIS_MARKER, text)
    processed = re.sub(r"\s*([.!?])\s*", "\\1\n", processed)
    sentences = (s.replace(_ELLIPSIS_MARKER, "...").strip() for s in processed.split("\n"))
    return [s for s in sentences if s]


def is_natural_breakpoint(current_word: str, next_word: Optional[str]) -> bool:
    if not next_word:
        return True
    if re.search(r"[,.;:!?]$", current_word):
        return True
    if current_word.lower() in CONJUNCTIONS:
        return True
    return next_word.lower() in RELATIVE_PRONOUNS


def create_optimal_subtitle_chunks(text: str, target_words_per_chunk: int = 6) -> List[str]:
    """Break each sentence into chunks of about `target_words_per_chunk` words."""
    max_words = target_words_per_chunk + 2
    chunks = []

    for sentence in split_into_sentences(text):
        words = sentence.split()
        if len(words) <= max_words:
            chunks.append(" ".join(words))
            continue

        current: List[str] = []
        for i, word in enumerate(words):
            current.append(word)
            next_word = words[i + 1] if i + 1 < len(words) else None
            reached_target = len(current) >= target_words_per_chunk
            if next_word is None or (
                reached_target and (is_natural_breakpoint(word, next_word) or len(current) >= max_words)
            ):
                chunks.append(" ".join(current))
                current = []

    return chunks


def estimate_chunk_duration(chunk: str, reading_speed: float) -> float:
    duration = len(chunk) * reading_speed
    duration += len(EMPHASIZED_WORD_PATTERN.findall(chunk)) * EMPHASIS_BONUS
    duration += chunk.count("...") * DRAMATIC_PAUSE_BONUS
    return max(MIN_SUBTITLE_DURATION, min(MAX_SUBTITLE_DURATION, duration))


def inter_chunk_pause(chunk_count: int, total_duration: float) -> float:
    """Gap between chunks; shrinks so pauses never take more than half the audio."""
    if chunk_count < 2:
        return 0.0
    return min(INTER_SUBTITLE_PAUSE, total_duration * 0.5 / (chunk_count - 1))


def calculate_time_distribution(chunks: List[str], total_duration: float, reading_speed: float) -> List[float]:
    """
    Per-chunk display durations. Together with the pauses from
    inter_chunk_pause() they add up to `total_duration`.
    """
    if not chunks:
        return []
    raw = [estimate_chunk_duration(chunk, reading_speed) for chunk in chunks]
    pause = inter_chunk_pause(len(chunks), total_duration)
    scale = (total_duration - pause * (len(chunks) - 1)) / sum(raw)
    return [d * scale for d in raw]


def format_srt_time(seconds: float) -> str:
    """HH:MM:SS,mmm"""
    total_ms = int(round(max(0.0, seconds) * 1000))
    hours, rest = divmod(total_ms, 3_600_000)
    minutes, rest = divmod(rest, 60_000)
    secs, ms = divmod(rest, 1000)
    return f"{hours:02d}:{minutes:02d}:{secs:02d},{ms:03d}"


def generate_srt(text: str, total_duration: float, is_short_format: bool = False) -> str:
    reading_speed = BASE_READING_SPEED * (SHORT_FORMAT_SPEED_FACTOR if is_short_format else 1.0)
    chunks = create_optimal_subtitle_chunks(text, 4 if is_short_format else 6)
    durations = calculate_time_distribution(chunks, total_duration, reading_speed)
    pause = inter_chunk_pause(len(chunks), total_duration)

    blocks = []
    start = 0.0
    for index, (chunk, duration) in enumerate(zip(chunks, durations), start=1):
        end = start + duration
        blocks.append(f"{index}\n{format_srt_time(start)} --> {format_srt_time(end)}\n{chunk.strip()}\n")
        start = end + pause
    return "\n".join(blocks) + ("\n" if blocks else "")


def escape_filter_path(path: str) -> str:
    """
    Quote a file path for use as a filter option value inside -vf.

    ffmpeg unescapes twice: once for the option value (':' and "'" are special)
    and once for the filter graph ('\\', "'", '[', ']', ',' and ';').
    """
    value = path.replace("\\", "/")
    value = value.replace(":", "\\:").replace("'", "\\'")
    value = value.replace("\\", "\\\\").replace("'", "\\'")
    for special in "[],;":
        value = value.replace(special, "\\" + special)
    return value


def build_style_string(style: Dict[str, object]) -> str:
    return ",".join(f"{key}={value}" for key, value in style.items())


class SubtitleService(ISubtitleService):
    """Writes SRT files for generated commentary and burns them into videos."""

    def __init__(self, ffmpeg_binary: Optional[str] = None):
        self.ffmpeg_binary = ffmpeg_binary

    def create_subtitles(
        self,
        content: GeneratedContent,
        audio_result: AudioResult,
        output_dir: str,
        is_short_format: bool = False,
    ) -> str:
        """Write subtitles_<content id>.srt into `output_dir` and return its path."""
        print(f"  📝 Creating subtitles for content: {content.get('id')}")
        os.makedirs(output_dir, exist_ok=True)
        srt_path = os.path.join(output_dir, f"subtitles_{content.get('id', 'content')}.srt")
        srt = generate_srt(content.get("raw_text", ""), audio_result["duration"], is_short_format)
        with open(srt_path, "w", encoding="utf-8") as f:
            f.write(srt)
        print(f"  ✅ Subtitle file created: {srt_path}")
        return srt_path

    @staticmethod
    def select_style(is_short_format: bool = False, use_compact_style: bool = False) -> str:
        if use_compact_style:
            return "compact"
        return "short" if is_short_format else "default"

    def _burn(self, video_path: str, subtitle_path: str, style_key: str, output_path: str) -> str:
        style = build_style_string(SUBTITLE_STYLES[style_key])
        subtitle_filter = f"subtitles={escape_filter_path(subtitle_path)}:force_style='{style}'"
        run_ffmpeg(
            ["-y", "-i", video_path, "-vf", subtitle_filter, "-c:a", "copy", output_path],
            "subtitle burn-in",
            self.ffmpeg_binary,
        )
        return output_path

    def add_subtitles_to_video(
        self,
        video_path: str,
        subtitle_path: str,
        is_short_format: bool = False,
        use_compact_style: bool = False,
    ) -> str:
        """Burn `subtitle_path` into a new subtitled_<name> file. Raises EncoderError on failure."""
        print(f"  📝 Adding subtitles to video: {video_path}")
        video_dir, video_name = os.path.split(video_path)
        output_path = os.path.join(video_dir, f"subtitled_{video_name}")
        self._burn(video_path, subtitle_path, self.select_style(is_short_format, use_compact_style), output_path)
        print(f"  ✅ Subtitled video created: {output_path}")
        return output_path

    def create_subtitle_test_versions(self, video_path: str, subtitle_path: str) -> List[str]:
        """One subtitled_<style>_<name> copy per style, for comparing them side by side."""
        video_dir, video_name = os.path.split(video_path)
        outputs = []
        for style_key in SUBTITLE_STYLES:
            output_path = os.path.join(video_dir, f"subtitled_{style_key}_{video_name}")
            try:
                outputs.append(self._burn(video_path, subtitle_path, style_key, output_path))
            except EncoderError as e:
                print(f"  ⚠️  Failed to create {style_key} style version: {e}")
        return outputs
