"""
Frame library – pre-renders and caches a character sprite for every
(mouth, eye, rotation) combination so the render loop only has to paste.

Sprites are persisted as PNGs in a cache directory that survives restarts;
later runs load them instead of drawing them again.
"""

import os
from typing import Dict, Optional, Tuple

from PIL import Image

from potato_news import config
from potato_news.animation.assets import AssetBundle
from potato_news.animation.character import render_character_sprite
from potato_news.domain.models import (
    DEFAULT_ACCESSORIES,
    DEFAULT_ROTATION_LATTICE,
    FINE_ROTATION_LATTICE,
    EyeState,
    FrameKey,
    MouthState,
)


class FrameLibrary:
    """Cached character sprites keyed by FrameKey."""

    def __init__(self, cache_path: Optional[str] = None):
        self.cache_path = cache_path or config.FRAME_LIBRARY_DIR
        os.makedirs(self.cache_path, exist_ok=True)
        self.assets: Optional[AssetBundle] = None
        self.rotation_lattice: Tuple[int, ...] = DEFAULT_ROTATION_LATTICE
        self._frames: Dict[FrameKey, Image.Image] = {}
        self.initialized = False
        self.rendered_count = 0  # sprites drawn (not loaded from disk) by the last initialize()

    def __len__(self) -> int:
        return len(self._frames)

    def initialize(self, assets: Optional[AssetBundle] = None, use_finer_rotation_lattice: bool = False) -> None:
        """Load or render every sprite. A second call is a no-op."""
        if self.initialized:
            return

        print("  🎬 Initializing frame library...")
        if assets is not None:
            self.assets = assets
        if self.assets is None:
            self.assets = AssetBundle.load()

        self.rotation_lattice = FINE_ROTATION_LATTICE if use_finer_rotation_lattice else DEFAULT_ROTATION_LATTICE
        total = len(MouthState) * len(EyeState) * len(self.rotation_lattice)
        self.rendered_count = 0
        done = 0
        print(f"  Pre-rendering {total} character state combinations...")

        for mouth_state in MouthState:
            for eye_state in EyeState:
                for rotation in self.rotation_lattice:
                    key = FrameKey(mouth_state, eye_state, rotation)
                    self._frames[key] = self._load_or_render(key)
                    done += 1
                    if done % 10 == 0 or done == total:
                        print(f"    Pre-rendered {done}/{total} character states")

        self.initialized = True
        print(f"  ✅ Frame library ready: {len(self._frames)} states "
              f"({self.rendered_count} rendered, {len(self._frames) - self.rendered_count} from cache)")

    def _load_or_render(self, key: FrameKey) -> Image.Image:
        frame_path = os.path.join(self.cache_path, key.filename)
        if os.path.exists(frame_path):
            try:
                with Image.open(frame_path) as cached:
                    return cached.convert("RGBA")
            except (OSError, ValueError) as e:
                print(f"  ⚠️  Cached sprite {frame_path} is unreadable ({e}), re-rendering")

        sprite = render_character_sprite(
            key.mouth_state, key.eye_state, key.rotation, DEFAULT_ACCESSORIES, self.assets
        )
        sprite.save(frame_path)
        self.rendered_count += 1
        return sprite

    def snap_rotation(self, head_rotation: float) -> int:
        """Nearest lattice rotation; on a tie the first (smaller) lattice point wins."""
        return min(self.rotation_lattice, key=lambda r: abs(r - head_rotation))

    def get_frame(self, mouth_state: MouthState, eye_state: EyeState, head_rotation: float) -> Optional[Image.Image]:
        """Cached sprite for the closest lattice rotation, or None if unavailable."""
        if not self.initialized:
            print("  ⚠️  Attempting to get frame from uninitialized library")
            return None

        key = FrameKey(MouthState(mouth_state), EyeState(eye_state), self.snap_rotation(head_rotation))
        frame = self._frames.get(key)
        if frame is None:
            print(f"  ⚠️  Frame not found in library: {key.filename}")
        return frame

    def clear_memory(self) -> None:
        """Drop in-memory sprites (disk cache is kept)."""
        self._frames.clear()
        self.initialized = False
        print("  Frame library memory cleared")
