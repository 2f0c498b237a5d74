"""
Scene composer – draws the studio once, then composites the anchor sprite and
overlay banner onto it for every frame and writes the PNG sequence.
"""

import os
import re
import textwrap
import time
from dataclasses import dataclass
from typing import List, Optional

from PIL import Image, ImageDraw

from potato_news import config
from potato_news.animation.assets import PROP_MONITOR, PROP_MUG, PROP_PAPERS, AssetBundle, load_font, load_image
from potato_news.animation.character import render_character_sprite
from potato_news.animation.frame_library import FrameLibrary
from potato_news.animation.state_machine import compute_state
from potato_news.domain.models import FrameSequence

WALL_TOP = (44, 62, 80)
WALL_BOTTOM = (26, 36, 47)
STUDIO_LIGHT = (255, 255, 200, 178)
BANNER_RED = (231, 76, 60, 255)
DESK_BROWN = (139, 69, 19, 255)
DESK_TOP = (160, 82, 45, 255)
DESK_PANEL = (218, 165, 32, 255)
MONITOR_FILL = (44, 62, 80, 255)
MONITOR_FRAME = (127, 140, 141, 255)
PAPER = (236, 240, 241, 255)
PAPER_LINES = (149, 165, 166, 255)
HEADLINE_BOX = (0, 0, 0, 160)
WHITE = (255, 255, 255, 255)

NETWORK_NAME = "POTATO NEWS NETWORK"

WEIRD_WORDS = ["bizarre", "strange", "unusual", "weird", "odd", "peculiar",
               "unexpected", "mysterious", "unexplained", "curious"]
FUNNY_WORDS = ["funny", "hilarious", "laugh", "comedy", "ridiculous", "absurd",
               "humorous", "joke", "punchline", "amusing"]


def determine_content_type(text: str) -> str:
    """'FUNNY' if funny keywords outnumber weird ones, else 'WEIRD'."""
    lower_text = (text or "").lower()

    def count(words):
        return sum(len(re.findall(rf"\b{word}\b", lower_text)) for word in words)

    return "FUNNY" if count(FUNNY_WORDS) > count(WEIRD_WORDS) else "WEIRD"


def overlay_text_for_frame(index: int, total_frames: int, frame_rate: int,
                           is_short_format: bool, content_type: str) -> Optional[str]:
    if is_short_format:
        return f"{content_type} NEWS"
    if index < frame_rate * 3:
        return "BREAKING NEWS"
    if index > total_frames - frame_rate * 3:
        return "LIKE AND SUBSCRIBE!"
    if index % (frame_rate * 8) == 0:
        return NETWORK_NAME
    if index % (frame_rate * 4) == 0:
        return f"{content_type} NEWS"
    return None


def composite_at(canvas: Image.Image, image: Image.Image, x: int, y: int) -> None:
    """alpha_composite that tolerates placements hanging off the top/left edge."""
    crop_left, crop_top = max(0, -x), max(0, -y)
    if crop_left >= image.width or crop_top >= image.height:
        return
    if crop_left or crop_top:
        image = image.crop((crop_left, crop_top, image.width, image.height))
    canvas.alpha_composite(image, (max(0, x), max(0, y)))


@dataclass
class SceneMetadata:
    """What the studio shows besides the anchor."""
    headline: str = ""
    commentary: str = ""
    footer_image_path: Optional[str] = None
    is_short_format: bool = False


class SceneComposer:
    """Renders one video's frame sequence."""

    def __init__(
        self,
        width: int = config.VIDEO_WIDTH,
        height: int = config.VIDEO_HEIGHT,
        frame_rate: int = config.FRAME_RATE,
        frames_dir: Optional[str] = None,
    ):
        self.width = width
        self.height = height
        self.frame_rate = frame_rate
        self.frames_dir = frames_dir or config.FRAMES_DIR

    # ------------------------------------------------------------------ static layer

    def build_static_layer(self, assets: AssetBundle, metadata: SceneMetadata) -> Image.Image:
        """Background, desk, props, headline and footer image – drawn once per video."""
        layer = Image.new("RGBA", (self.width, self.height), (0, 0, 0, 255))
        self._draw_background(layer, assets)
        self._draw_desk(layer, assets)
        self._draw_props(layer, assets)
        if metadata.headline:
            self._draw_headline(layer, metadata.headline)
        if metadata.footer_image_path:
            self._draw_footer_image(layer, metadata.footer_image_path)
        return layer

    def _paste_scaled(self, layer: Image.Image, image: Image.Image, x: float, y: float, w: float, h: float) -> None:
        resized = image.resize((max(1, int(w)), max(1, int(h))), Image.Resampling.LANCZOS)
        composite_at(layer, resized, int(x), int(y))

    def _draw_background(self, layer: Image.Image, assets: AssetBundle) -> None:
        if assets.background is not None:
            self._paste_scaled(layer, assets.background, 0, 0, self.width, self.height)
            return

        draw = ImageDraw.Draw(layer)
        for y in range(self.height):
            t = y / max(1, self.height - 1)
            color = tuple(int(a + (b - a) * t) for a, b in zip(WALL_TOP, WALL_BOTTOM))
            draw.line([(0, y), (self.width, y)], fill=color + (255,))

        lights = Image.new("RGBA", layer.size, (0, 0, 0, 0))
        lights_draw = ImageDraw.Draw(lights)
        for i in range(3):
            x = self.width * (0.25 + i * 0.25)
            lights_draw.ellipse([x - 30, 20, x + 30, 80], fill=STUDIO_LIGHT)
        layer.alpha_composite(lights)

        draw.text((50, 40), NETWORK_NAME, font=load_font(24), fill=WHITE, anchor="ls")
        draw.rectangle([0, self.height - 60, self.width, self.height], fill=BANNER_RED)

    def _draw_desk(self, layer: Image.Image, assets: AssetBundle) -> None:
        w, h = self.width, self.height
        if assets.desk is not None:
            self._paste_scaled(layer, assets.desk, w * 0.05, h * 0.6, w * 0.9, h * 0.35)
            return

        draw = ImageDraw.Draw(layer)
        draw.rectangle([w * 0.1, h * 0.6, w * 0.9, h * 0.9], fill=DESK_BROWN)
        draw.rectangle([w * 0.05, h * 0.6, w * 0.95, h * 0.65], fill=DESK_TOP)
        draw.rectangle([w * 0.3, h * 0.65, w * 0.7, h * 0.85], fill=DESK_PANEL)
        draw.text((w * 0.5, h * 0.75), "PNN", font=load_font(36), fill=WHITE, anchor="mm")

    def _draw_props(self, layer: Image.Image, assets: AssetBundle) -> None:
        w, h = self.width, self.height
        placements = {
            PROP_MONITOR: (w * 0.7, h * 0.45, w * 0.2, h * 0.15),
            PROP_MUG: (w * 0.2 - 30, h * 0.55 - 20, 60, 60),
            PROP_PAPERS: (w * 0.3, h * 0.55, w * 0.2, h * 0.05),
        }
        draw = ImageDraw.Draw(layer)
        for index, (x, y, pw, ph) in placements.items():
            image = assets.props.get(index)
            if image is not None:
                self._paste_scaled(layer, image, x, y, pw, ph)
            elif index == PROP_MONITOR:
                draw.rectangle([x, y, x + pw, y + ph], fill=MONITOR_FILL, outline=MONITOR_FRAME, width=5)
            elif index == PROP_MUG:
                cx, cy = w * 0.2, h * 0.55
                draw.ellipse([cx - 20, cy - 20, cx + 20, cy + 20], fill=BANNER_RED)
                draw.rectangle([cx - 20, cy, cx + 20, cy + 25], fill=BANNER_RED)
            else:
                draw.rectangle([x, y, x + pw, y + ph], fill=PAPER)
                for i in range(1, 5):
                    line_y = h * (0.55 + i * 0.01)
                    draw.line([(x, line_y), (x + pw, line_y)], fill=PAPER_LINES, width=1)

    def _draw_headline(self, layer: Image.Image, headline: str) -> None:
        font_size = max(16, self.width // 20)
        font = load_font(font_size)
        chars_per_line = max(10, int(self.width * 0.9 / (font_size * 0.55)))
        lines = textwrap.wrap(headline, width=chars_per_line)[:3]
        if not lines:
            return

        line_height = int(font_size * 1.25)
        top = int(self.height * 0.08)
        box_height = line_height * len(lines) + 30
        box = Image.new("RGBA", layer.size, (0, 0, 0, 0))
        box_draw = ImageDraw.Draw(box)
        box_draw.rectangle([self.width * 0.04, top, self.width * 0.96, top + box_height], fill=HEADLINE_BOX)
        for i, line in enumerate(lines):
            box_draw.text((self.width / 2, top + 15 + i * line_height), line, font=font, fill=WHITE, anchor="ma")
        layer.alpha_composite(box)

    def _draw_footer_image(self, layer: Image.Image, image_path: str) -> None:
        image = load_image(image_path)
        if image is None:
            print(f"  ⚠️  Footer image unavailable: {image_path}, skipping")
            return
        box_w, box_h = int(self.width * 0.5), int(self.height * 0.18)
        image.thumbnail((box_w, box_h), Image.Resampling.LANCZOS)
        x = (self.width - image.width) // 2
        y = int(self.height * 0.66) + (box_h - image.height) // 2
        ImageDraw.Draw(layer).rectangle([x - 6, y - 6, x + image.width + 6, y + image.height + 6], fill=WHITE)
        composite_at(layer, image, x, y)

    # ------------------------------------------------------------------ per-frame

    def _draw_overlay_text(self, frame: Image.Image, text: str, is_short_format: bool) -> None:
        draw = ImageDraw.Draw(frame)
        if is_short_format:
            banner_h, font, baseline = 80, load_font(36), 30
        else:
            banner_h, font, baseline = 60, load_font(24), 25
        draw.rectangle([0, self.height - banner_h, self.width, self.height], fill=BANNER_RED)
        draw.text((20, self.height - baseline), text, font=font, fill=WHITE, anchor="ls")

    def _new_output_dir(self) -> str:
        stamp = int(time.time() * 1000)
        while True:
            output_dir = os.path.join(self.frames_dir, f"seq_{stamp}")
            try:
                os.makedirs(output_dir)
                return output_dir
            except FileExistsError:
                stamp += 1

    def render_sequence(
        self,
        amplitudes: List[float],
        assets: AssetBundle,
        metadata: SceneMetadata,
        frame_library: Optional[FrameLibrary] = None,
    ) -> FrameSequence:
        """Render one PNG per amplitude value, in order, into a fresh seq_<timestamp> directory."""
        total_frames = len(amplitudes)
        output_dir = self._new_output_dir()
        content_type = determine_content_type(metadata.commentary)
        print(f"  🎬 Rendering {total_frames} frames at {self.frame_rate} FPS "
              f"({'SHORT' if metadata.is_short_format else 'STANDARD'} format, {content_type} content)")

        static_layer = self.build_static_layer(assets, metadata)
        center_x, center_y = int(self.width * 0.5), int(self.height * 0.4)
        frames = []
        previous = 0.0
        fallback_draws = 0

        for i, amplitude in enumerate(amplitudes):
            state = compute_state(i / self.frame_rate, amplitude, previous)
            previous = amplitude

            frame = static_layer.copy()
            sprite = None
            if frame_library is not None:
                sprite = frame_library.get_frame(state.mouth_state, state.eye_state, state.head_rotation)
            if sprite is None:
                fallback_draws += 1
                sprite = render_character_sprite(
                    state.mouth_state, state.eye_state, state.head_rotation, state.accessory_indices, assets
                )
            composite_at(frame, sprite, center_x - sprite.width // 2, center_y - sprite.height // 2)

            overlay = overlay_text_for_frame(i, total_frames, self.frame_rate, metadata.is_short_format, content_type)
            if overlay:
                self._draw_overlay_text(frame, overlay, metadata.is_short_format)

            frame_path = os.path.join(output_dir, f"frame_{i:05d}.png")
            frame.convert("RGB").save(frame_path)
            frames.append(frame_path)

            if i % (self.frame_rate * 5) == 0:
                print(f"    Rendered {i}/{total_frames} frames")

        if fallback_draws and frame_library is not None:
            print(f"  ⚠️  Drew {fallback_draws} frames directly (sprite lookup failed)")
        print(f"  ✅ Frame sequence complete: {len(frames)} frames in {output_dir}")

        return FrameSequence(
            directory=output_dir,
            frames=frames,
            frame_rate=self.frame_rate,
            is_short_format=metadata.is_short_format,
        )
