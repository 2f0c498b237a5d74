"""Domain models – value types for the animation pipeline, dict-compatible inputs from collaborators."""

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, List, Optional, Tuple, TypedDict


class MouthState(str, Enum):
    CLOSED = "closed"
    HALF_OPEN = "halfOpen"
    OPEN = "open"


class EyeState(str, Enum):
    NEUTRAL = "neutral"
    SQUINT = "squint"
    WIDE = "wide"
    ROLLING = "rolling"
    WINK = "wink"


# Head-tilt angles (degrees) that get a pre-rendered sprite
DEFAULT_ROTATION_LATTICE: Tuple[int, ...] = (-4, -2, 0, 2, 4)
FINE_ROTATION_LATTICE: Tuple[int, ...] = (-8, -6, -4, -2, 0, 2, 4, 6, 8)

# 0 = microphone, 1 = glasses
DEFAULT_ACCESSORIES: FrozenSet[int] = frozenset({0, 1})


@dataclass(frozen=True)
class AnimationState:
    """Character pose for one output frame."""
    eye_state: EyeState
    mouth_state: MouthState
    head_rotation: float
    accessory_indices: FrozenSet[int] = DEFAULT_ACCESSORIES


@dataclass(frozen=True)
class FrameKey:
    """Identity of one cached sprite. `rotation` is always a lattice point."""
    mouth_state: MouthState
    eye_state: EyeState
    rotation: int

    @property
    def filename(self) -> str:
        return f"character_{self.mouth_state.value}_{self.eye_state.value}_rot{self.rotation}.png"


@dataclass
class FrameSequence:
    """One video's rendered frames on disk."""
    directory: str
    frames: List[str] = field(default_factory=list)
    frame_rate: int = 30
    is_short_format: bool = False

    @property
    def frame_count(self) -> int:
        return len(self.frames)


@dataclass(frozen=True)
class VideoResult:
    path: str
    duration: float
    width: int
    height: int
    url: str
    is_short_format: bool = False


class NewsItem(TypedDict, total=False):
    """A novelty news story, as produced by the news service."""
    id: str
    title: str
    source: str
    category: str
    content: str
    url: str
    image_url: Optional[str]
    published_at: str


class GeneratedContent(TypedDict, total=False):
    """Sarcastic commentary generated for one news item."""
    id: str
    news_item_id: str
    raw_text: str
    sentiment: str  # 'weird' | 'funny' | 'mystery' | 'unexplained' | 'neutral'
    image_search_terms: List[str]


class AudioResult(TypedDict, total=False):
    """Synthesized speech for the commentary."""
    path: str
    duration: float
    url: str
