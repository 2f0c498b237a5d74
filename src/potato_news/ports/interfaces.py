"""
Port interfaces (Dependency Inversion).
The pipeline depends only on these; adapters and the animation/video packages implement them.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Tuple, Union

from potato_news.domain.models import (
    AudioResult,
    FrameSequence,
    GeneratedContent,
    NewsItem,
    VideoResult,
)


class IAudioAnalyzer(ABC):
    """Per-frame loudness and duration of a speech file."""

    @abstractmethod
    def analyze(self, audio_path: str) -> Tuple[List[float], float]:
        """Return (amplitudes, duration); never raises for unreadable audio."""
        pass


class ISequenceRenderer(ABC):
    """Turns an amplitude track into a PNG frame sequence."""

    @abstractmethod
    def initialize(self) -> None:
        """Load assets and warm sprite caches. Safe to call more than once."""
        pass

    @abstractmethod
    def render(
        self,
        amplitudes: List[float],
        headline: str = "",
        commentary: str = "",
        footer_image_path: Optional[str] = None,
        is_short_format: bool = False,
    ) -> FrameSequence:
        pass


class IVideoAssembler(ABC):
    """Frames + audio -> video file."""

    @abstractmethod
    def create_video(
        self,
        frames: Union[FrameSequence, str],
        audio_path: str,
        duration: float,
        custom_filename: Optional[str] = None,
    ) -> VideoResult:
        """Raises EncoderError on failure."""
        pass


class ISubtitleService(ABC):

    @abstractmethod
    def create_subtitles(
        self,
        content: GeneratedContent,
        audio_result: AudioResult,
        output_dir: str,
        is_short_format: bool = False,
    ) -> str:
        """Write an SRT file; return its path."""
        pass

    @abstractmethod
    def add_subtitles_to_video(
        self,
        video_path: str,
        subtitle_path: str,
        is_short_format: bool = False,
        use_compact_style: bool = False,
    ) -> str:
        """Return the path of a new, subtitled video."""
        pass


class ISoundEffectsService(ABC):

    @abstractmethod
    def add_sound_effects_to_video(
        self,
        video_path: str,
        duration: float,
        is_short_format: bool = False,
        content: Optional[GeneratedContent] = None,
    ) -> str:
        """Return the path of the mixed video (the input path if there was nothing to mix)."""
        pass


class INewsImageSource(ABC):

    @abstractmethod
    def fetch_news_image(self, news_item: NewsItem) -> Optional[str]:
        """Local image path for the story, or None."""
        pass

    def cleanup_old_images(self, max_age_hours: float) -> int:
        return 0
