"""
Sound-effect stings mixed under the speech track.

Stings live in the sound directory as <type>.mp3|.wav|.aac|.m4a; category
stings are picked at random from categories/<category>/ or fall back to
<category>.<ext>.
"""

import os
import random
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from potato_news import config
from potato_news.domain.models import GeneratedContent
from potato_news.ports.interfaces import ISoundEffectsService
from potato_news.video.ffmpeg import run_ffmpeg

SOUND_EXTENSIONS = (".mp3", ".wav", ".aac", ".m4a")

# Content sentiment -> sting category
CATEGORY_MAP = {
    "mystery": "mystery",
    "weird": "weird",
    "unexplained": "mystery",
    "funny": "comedy",
    "neutral": "general",
}
DEFAULT_CATEGORY = "general"

# mixes use normalize=0: speech keeps unity gain, intro sits 3:1 under it
INTRO_WEIGHTS = "1 0.333"
STING_VOLUME = 0.7
CATEGORY_VOLUME = 0.6


@dataclass
class EffectTimings:
    transition_time: float
    category_time: float
    outro_time: float


@dataclass
class SoundEffect:
    kind: str  # 'intro' | 'transition' | 'category' | 'outro'
    path: str
    delay: float = 0.0
    volume: float = STING_VOLUME


def calculate_effect_timings(duration: float, is_short_format: bool) -> EffectTimings:
    """Sting offsets in seconds; short videos compress them toward the start."""
    if is_short_format:
        return EffectTimings(
            transition_time=min(duration * 0.3, 2),
            category_time=min(duration * 0.5, 3),
            outro_time=max(duration - 1, 0),
        )
    return EffectTimings(
        transition_time=min(duration * 0.25, 8),
        category_time=min(duration * 0.4, 12),
        outro_time=max(duration - 3, 0),
    )


def build_filter_complex(effects: List[SoundEffect]) -> Tuple[str, str]:
    """
    Chain one amix per sting onto the video's own audio (input 0). Sting i is
    input i + 1. Returns (filter graph, label of the final mixed stream).
    """
    parts = []
    current = "0:a"
    for input_index, effect in enumerate(effects, start=1):
        output = f"aout{input_index}"
        if effect.kind == "intro":
            parts.append(f"[{current}][{input_index}:a]amix=inputs=2:duration=first:normalize=0:weights={INTRO_WEIGHTS}[{output}]")
        else:
            delay_ms = int(round(effect.delay * 1000))
            delayed = f"adelayed{input_index}"
            parts.append(f"[{input_index}:a]adelay={delay_ms}|{delay_ms},volume={effect.volume}[{delayed}]")
            parts.append(f"[{current}][{delayed}]amix=inputs=2:duration=first:normalize=0[{output}]")
        current = output
    return ";".join(parts), current


class SoundEffectsService(ISoundEffectsService):
    """Mixes intro/transition/category/outro stings into a finished video."""

    def __init__(self, sounds_path: Optional[str] = None, seed: Optional[int] = None,
                 ffmpeg_binary: Optional[str] = None):
        self.sounds_path = sounds_path or config.SOUND_EFFECTS_DIR
        self.ffmpeg_binary = ffmpeg_binary
        self._rng = random.Random(seed)
        os.makedirs(os.path.join(self.sounds_path, "categories"), exist_ok=True)

    def get_sound_path(self, sound_type: str) -> Optional[str]:
        for ext in SOUND_EXTENSIONS:
            path = os.path.join(self.sounds_path, f"{sound_type}{ext}")
            if os.path.exists(path):
                return path
        return None

    def get_category_sound_path(self, sentiment: str) -> Optional[str]:
        category = CATEGORY_MAP.get(sentiment, DEFAULT_CATEGORY)
        category_dir = os.path.join(self.sounds_path, "categories", category)
        if os.path.isdir(category_dir):
            files = sorted(f for f in os.listdir(category_dir) if f.lower().endswith(SOUND_EXTENSIONS))
            if files:
                return os.path.join(category_dir, self._rng.choice(files))
        return self.get_sound_path(category)

    def get_sound_effects_for_content(self, sentiment: str, is_short_format: bool) -> Dict[str, Optional[str]]:
        """Sting paths by slot. Short videos only get the intro and the category sting."""
        effects = {
            "intro": self.get_sound_path("intro"),
            "transition": None,
            "category": self.get_category_sound_path(sentiment),
            "outro": None,
        }
        if not is_short_format:
            effects["transition"] = self.get_sound_path("transition")
            effects["outro"] = self.get_sound_path("outro")
        return effects

    def plan_effects(self, duration: float, is_short_format: bool, sentiment: str) -> List[SoundEffect]:
        paths = self.get_sound_effects_for_content(sentiment, is_short_format)
        timings = calculate_effect_timings(duration, is_short_format)
        planned = [
            SoundEffect("intro", paths["intro"], 0.0),
            SoundEffect("transition", paths["transition"], timings.transition_time),
            SoundEffect("category", paths["category"], timings.category_time, CATEGORY_VOLUME),
            SoundEffect("outro", paths["outro"], timings.outro_time),
        ]
        return [effect for effect in planned if effect.path]

    def add_sound_effects_to_video(
        self,
        video_path: str,
        duration: float,
        is_short_format: bool = False,
        content: Optional[GeneratedContent] = None,
    ) -> str:
        """
        Write withsfx_<name> next to `video_path`. Returns `video_path` unchanged
        when no stings are available; raises EncoderError if the mix fails.
        """
        sentiment = (content or {}).get("sentiment") or "neutral"
        effects = self.plan_effects(duration, is_short_format, sentiment)
        if not effects:
            print("  ⚠️  No sound effect files found, skipping sound effects")
            return video_path

        print(f"  🔊 Adding {len(effects)} sound effects ({', '.join(e.kind for e in effects)}) to {video_path}")
        video_dir, video_name = os.path.split(video_path)
        output_path = os.path.join(video_dir, f"withsfx_{video_name}")
        filter_complex, final_label = build_filter_complex(effects)

        args = ["-y", "-i", video_path]
        for effect in effects:
            args += ["-i", effect.path]
        args += [
            "-filter_complex", filter_complex,
            "-map", "0:v",
            "-map", f"[{final_label}]",
            "-c:v", "copy",
            output_path,
        ]
        run_ffmpeg(args, "sound effect mix", self.ffmpeg_binary)
        print(f"  ✅ Video with sound effects created: {output_path}")
        return output_path

    def has_sound_effects(self) -> bool:
        return any(self.get_sound_path(t) for t in ("intro", "transition", "outro"))
