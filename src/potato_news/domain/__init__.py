"""Domain models and value objects."""

from potato_news.domain.models import (
    AnimationState,
    AudioResult,
    EyeState,
    FrameKey,
    FrameSequence,
    GeneratedContent,
    MouthState,
    NewsItem,
    VideoResult,
)

__all__ = [
    "AnimationState",
    "AudioResult",
    "EyeState",
    "FrameKey",
    "FrameSequence",
    "GeneratedContent",
    "MouthState",
    "NewsItem",
    "VideoResult",
]
