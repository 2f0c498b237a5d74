"""
Asset bundle: custom studio and character artwork, loaded once per process.

Every slot is optional. A missing file leaves the slot empty and the renderer
draws a programmatic default of the same role; a file that exists but can't be
decoded is treated the same way, with a warning.
"""

import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Dict, Optional

from PIL import Image, ImageFont

from potato_news import config
from potato_news.domain.models import EyeState, MouthState

# Studio prop slots
PROP_MONITOR = 0
PROP_MUG = 1
PROP_PAPERS = 2

# Character accessory slots
ACCESSORY_MICROPHONE = 0
ACCESSORY_GLASSES = 1

FONT_PATHS = [
    "/System/Library/Fonts/Supplemental/Arial Bold.ttf",
    "/System/Library/Fonts/Helvetica.ttc",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationSans-Bold.ttf",
    "C:\\Windows\\Fonts\\arialbd.ttf",
]


@lru_cache(maxsize=None)
def load_font(size: int):
    """Bold sans-serif font at `size`, falling back to Pillow's built-in font."""
    for path in FONT_PATHS:
        if os.path.exists(path):
            try:
                return ImageFont.truetype(path, size)
            except OSError:
                continue
    return ImageFont.load_default(size=size)


def load_image(path: str) -> Optional[Image.Image]:
    """Load an RGBA image, or None if it's missing or can't be decoded."""
    if not os.path.exists(path):
        return None
    try:
        with Image.open(path) as img:
            return img.convert("RGBA")
    except (OSError, ValueError) as e:
        print(f"  ⚠️  Failed to load asset {path}: {e}, using built-in drawing")
        return None


@dataclass
class AssetBundle:
    background: Optional[Image.Image] = None
    desk: Optional[Image.Image] = None
    body: Optional[Image.Image] = None
    eyes: Dict[EyeState, Optional[Image.Image]] = field(default_factory=dict)
    mouths: Dict[MouthState, Optional[Image.Image]] = field(default_factory=dict)
    props: Dict[int, Optional[Image.Image]] = field(default_factory=dict)
    accessories: Dict[int, Optional[Image.Image]] = field(default_factory=dict)

    @classmethod
    def load(cls, assets_path: Optional[str] = None) -> "AssetBundle":
        """Load whatever custom artwork exists under `assets_path` (default: ASSETS_PATH)."""
        root = assets_path or config.ASSETS_PATH
        character = os.path.join(root, "character")
        studio = os.path.join(root, "studio")

        bundle = cls(
            background=load_image(os.path.join(studio, "backgrounds", "background_0.png")),
            desk=load_image(os.path.join(studio, "props", "desk_0.png")),
            body=load_image(os.path.join(character, "body", "body.png")),
            eyes={state: load_image(os.path.join(character, "eyes", f"{state.value}.png")) for state in EyeState},
            mouths={state: load_image(os.path.join(character, "mouth", f"{state.value}.png")) for state in MouthState},
            props={i: load_image(os.path.join(studio, "props", f"prop_{i}.png")) for i in (PROP_MONITOR, PROP_MUG, PROP_PAPERS)},
            accessories={
                i: load_image(os.path.join(character, "accessories", f"accessory_{i}.png"))
                for i in (ACCESSORY_MICROPHONE, ACCESSORY_GLASSES)
            },
        )
        print(f"  🖼️  Loaded {bundle.custom_count()} custom assets from {root}")
        return bundle

    def custom_count(self) -> int:
        slots = [self.background, self.desk, self.body]
        for group in (self.eyes, self.mouths, self.props, self.accessories):
            slots.extend(group.values())
        return sum(1 for img in slots if img is not None)
