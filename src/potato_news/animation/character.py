"""
Drawing of the potato anchor.

All coordinates are offsets from the character's centre. Each part uses the
custom artwork from the AssetBundle when present and a programmatic default
otherwise. The character is drawn upright and then rotated as a whole.
"""

from typing import Iterable, Optional, Tuple

from PIL import Image, ImageDraw

from potato_news.animation.assets import ACCESSORY_GLASSES, ACCESSORY_MICROPHONE, AssetBundle
from potato_news.domain.models import EyeState, MouthState

SPRITE_SIZE = (400, 500)

POTATO_BROWN = (205, 133, 63, 255)
MOUTH_RED = (139, 0, 0, 255)
BLACK = (0, 0, 0, 255)
WHITE = (255, 255, 255, 255)
MIC_BODY = (44, 62, 80, 255)
MIC_HEAD = (127, 140, 141, 255)

# (x, y, width, height) placement of custom artwork relative to the centre
BODY_BOX = (-150, -180, 300, 360)
EYES_BOX = (-100, -80, 200, 80)
MOUTH_BOX = (-60, 30, 120, 60)
ACCESSORY_BOXES = {
    ACCESSORY_MICROPHONE: (-100, 30, 40, 60),
    ACCESSORY_GLASSES: (-90, -60, 180, 60),
}


class _Painter:
    """ImageDraw wrapper that takes centre-relative coordinates."""

    def __init__(self, canvas: Image.Image, center: Tuple[int, int]):
        self.canvas = canvas
        self.draw = ImageDraw.Draw(canvas)
        self.cx, self.cy = center

    def box(self, x: float, y: float, rx: float, ry: float):
        return [self.cx + x - rx, self.cy + y - ry, self.cx + x + rx, self.cy + y + ry]

    def ellipse(self, x, y, rx, ry, fill=None, outline=None, width=1):
        self.draw.ellipse(self.box(x, y, rx, ry), fill=fill, outline=outline, width=width)

    def line(self, points, fill=BLACK, width=1):
        self.draw.line([(self.cx + px, self.cy + py) for px, py in points], fill=fill, width=width)

    def rect(self, x, y, w, h, fill):
        self.draw.rectangle([self.cx + x, self.cy + y, self.cx + x + w, self.cy + y + h], fill=fill)

    def paste(self, image: Image.Image, placement):
        x, y, w, h = placement
        resized = image.resize((w, h), Image.Resampling.LANCZOS)
        self.canvas.alpha_composite(resized, (int(self.cx + x), int(self.cy + y)))


def _draw_default_body(p: _Painter) -> None:
    p.ellipse(0, 0, 150, 180, fill=POTATO_BROWN)


def _draw_default_eyes(p: _Painter, eye_state: EyeState) -> None:
    eye_ry = 5 if eye_state == EyeState.SQUINT else 30
    p.ellipse(-50, -40, 30, eye_ry, fill=WHITE)
    if eye_state == EyeState.WINK:
        p.line([(20, -40), (80, -40)], width=5)
    else:
        p.ellipse(50, -40, 30, eye_ry, fill=WHITE)

    pupil_y = -40
    pupil_r = 10
    if eye_state == EyeState.ROLLING:
        pupil_y -= 15
    elif eye_state == EyeState.WIDE:
        pupil_r = 15

    p.ellipse(-50, pupil_y, pupil_r, pupil_r, fill=BLACK)
    if eye_state != EyeState.WINK:
        p.ellipse(50, pupil_y, pupil_r, pupil_r, fill=BLACK)


def _draw_default_mouth(p: _Painter, mouth_state: MouthState) -> None:
    if mouth_state == MouthState.CLOSED:
        p.line([(-60, 50), (60, 50)], width=5)
    elif mouth_state == MouthState.HALF_OPEN:
        p.draw.pieslice(p.box(0, 50, 60, 20), start=0, end=180, fill=MOUTH_RED)
    else:
        p.ellipse(0, 50, 60, 40, fill=MOUTH_RED)
        p.ellipse(0, 50, 40, 25, fill=BLACK)


def _draw_default_accessory(p: _Painter, index: int) -> None:
    if index == ACCESSORY_MICROPHONE:
        p.rect(-90, 30, 20, 50, fill=MIC_BODY)
        p.ellipse(-80, 30, 15, 15, fill=MIC_HEAD)
    elif index == ACCESSORY_GLASSES:
        p.ellipse(-50, -40, 35, 35, outline=BLACK, width=3)
        p.ellipse(50, -40, 35, 35, outline=BLACK, width=3)
        p.line([(-15, -40), (15, -40)], width=3)
        p.line([(-85, -40), (-150, -20)], width=3)
        p.line([(85, -40), (150, -20)], width=3)


def draw_character(
    canvas: Image.Image,
    center: Tuple[int, int],
    mouth_state: MouthState,
    eye_state: EyeState,
    accessory_indices: Iterable[int],
    assets: Optional[AssetBundle] = None,
) -> None:
    """Draw the upright character onto an RGBA canvas around `center`."""
    assets = assets or AssetBundle()
    p = _Painter(canvas, center)

    if assets.body is not None:
        p.paste(assets.body, BODY_BOX)
    else:
        _draw_default_body(p)

    eyes_image = assets.eyes.get(eye_state)
    if eyes_image is not None:
        p.paste(eyes_image, EYES_BOX)
    else:
        _draw_default_eyes(p, eye_state)

    mouth_image = assets.mouths.get(mouth_state)
    if mouth_image is not None:
        p.paste(mouth_image, MOUTH_BOX)
    else:
        _draw_default_mouth(p, mouth_state)

    for index in sorted(accessory_indices):
        accessory_image = assets.accessories.get(index)
        if accessory_image is not None and index in ACCESSORY_BOXES:
            p.paste(accessory_image, ACCESSORY_BOXES[index])
        else:
            _draw_default_accessory(p, index)


def render_character_sprite(
    mouth_state: MouthState,
    eye_state: EyeState,
    head_rotation: float,
    accessory_indices: Iterable[int],
    assets: Optional[AssetBundle] = None,
) -> Image.Image:
    """Transparent SPRITE_SIZE image of the character tilted by `head_rotation` degrees (clockwise)."""
    width, height = SPRITE_SIZE
    sprite = Image.new("RGBA", SPRITE_SIZE, (0, 0, 0, 0))
    center = (width // 2, height // 2)
    draw_character(sprite, center, mouth_state, eye_state, accessory_indices, assets)
    if head_rotation:
        # PIL rotates counter-clockwise
        sprite = sprite.rotate(-head_rotation, resample=Image.Resampling.BICUBIC, center=center)
    return sprite
