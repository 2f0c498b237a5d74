"""Port interfaces for the video pipeline."""

from potato_news.ports.interfaces import (
    IAudioAnalyzer,
    INewsImageSource,
    ISequenceRenderer,
    ISoundEffectsService,
    ISubtitleService,
    IVideoAssembler,
)

__all__ = [
    "IAudioAnalyzer",
    "INewsImageSource",
    "ISequenceRenderer",
    "ISoundEffectsService",
    "ISubtitleService",
    "IVideoAssembler",
]
