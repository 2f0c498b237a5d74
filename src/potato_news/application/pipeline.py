"""
Video pipeline – orchestrates news image → amplitude analysis → frame rendering →
mux → subtitles → sound effects for one piece of commentary.
Depends only on port interfaces; concrete adapters are injected.
"""

import os
from dataclasses import asdict, replace
from typing import Any, Dict, List, Optional

from potato_news import config
from potato_news.domain.models import AudioResult, GeneratedContent, NewsItem, VideoResult
from potato_news.errors import EncoderError, PotatoNewsError
from potato_news.ports.interfaces import (
    IAudioAnalyzer,
    INewsImageSource,
    ISequenceRenderer,
    ISoundEffectsService,
    ISubtitleService,
    IVideoAssembler,
)
from potato_news.utils.file_manager import clean_directory, format_video_filename, load_json, save_json


class VideoPipeline:
    """
    Turns generated commentary plus its speech audio into a finished video.
    All dependencies are injected (ports); no concrete implementations here.
    """

    def __init__(
        self,
        *,
        analyzer: IAudioAnalyzer,
        renderer: ISequenceRenderer,
        assembler: IVideoAssembler,
        subtitles: Optional[ISubtitleService] = None,
        sound_effects: Optional[ISoundEffectsService] = None,
        image_source: Optional[INewsImageSource] = None,
        short_format_threshold: float = config.SHORT_FORMAT_THRESHOLD,
        frames_dir: Optional[str] = None,
    ):
        self._analyzer = analyzer
        self._renderer = renderer
        self._assembler = assembler
        self._subtitles = subtitles
        self._sound_effects = sound_effects
        self._images = image_source
        self._short_format_threshold = short_format_threshold
        self._frames_dir = frames_dir or config.FRAMES_DIR
        self._initialized = False

    def initialize(self) -> None:
        """Load assets and warm the sprite cache. Only the first call does any work."""
        if self._initialized:
            return
        print("🥔 Initializing Potato News video pipeline...")
        self._renderer.initialize()
        self._initialized = True
        print("✅ Video pipeline ready")

    def create_video_for_content(
        self,
        content: GeneratedContent,
        audio: AudioResult,
        news_item: Optional[NewsItem] = None,
        use_compact_subtitles: bool = False,
    ) -> VideoResult:
        """
        Render, encode and enhance one video. Raises EncoderError if the mux
        fails; subtitle and sound-effect failures fall back to the previous output.
        """
        self.initialize()
        print("=" * 60)
        print(f"Creating video for content: {content.get('id', 'unknown')}")
        print("=" * 60)

        print("\n[1/6] Fetching news image...")
        image_path = None
        if news_item and self._images:
            image_path = self._images.fetch_news_image(news_item)
        if not image_path:
            print("  No news image, studio footer will stay empty")

        print("\n[2/6] Analyzing audio for lip sync...")
        amplitudes, duration = self._analyzer.analyze(audio["path"])
        is_short = duration <= self._short_format_threshold
        print(f"  Duration: {duration:.2f}s, {len(amplitudes)} frames, "
              f"{'SHORT' if is_short else 'STANDARD'} format")

        print("\n[3/6] Rendering animation frames...")
        sequence = self._renderer.render(
            amplitudes,
            headline=(news_item or {}).get("title", ""),
            commentary=content.get("raw_text", ""),
            footer_image_path=image_path,
            is_short_format=is_short,
        )

        print("\n[4/6] Encoding video...")
        filename = format_video_filename(news_item, content) if news_item else None
        try:
            result = self._assembler.create_video(sequence, audio["path"], duration, filename)
        except EncoderError as e:
            print(f"\n❌ Failed to encode video from {sequence.directory}: {e}")
            raise
        final_path = result.path

        print("\n[5/6] Adding subtitles...")
        final_path = self._add_subtitles(final_path, content, audio, duration, is_short, use_compact_subtitles)

        print("\n[6/6] Adding sound effects...")
        final_path = self._add_sound_effects(final_path, content, duration, is_short)

        final = replace(result, path=final_path, url=f"/videos/{os.path.basename(final_path)}")
        self._write_metadata(final, content, news_item)
        print(f"\n✅ Success! Video saved to: {final_path}")
        return final

    @staticmethod
    def metadata_path(video_path: str) -> str:
        return os.path.splitext(video_path)[0] + ".json"

    def _write_metadata(self, result: VideoResult, content: GeneratedContent,
                        news_item: Optional[NewsItem]) -> None:
        metadata = {
            **asdict(result),
            "content_id": content.get("id"),
            "news_item_id": (news_item or {}).get("id"),
            "title": (news_item or {}).get("title"),
            "sentiment": content.get("sentiment"),
        }
        video_dir, video_name = os.path.split(self.metadata_path(result.path))
        try:
            save_json(metadata, video_dir or ".", video_name)
        except OSError as e:
            print(f"  ⚠️  Could not write video metadata for {result.path}: {e}")

    def load_video_metadata(self, video_path: str) -> Dict[str, Any]:
        """Metadata written next to a finished video by create_video_for_content."""
        return load_json(self.metadata_path(video_path))

    def _add_subtitles(self, video_path: str, content: GeneratedContent, audio: AudioResult,
                       duration: float, is_short: bool, use_compact: bool) -> str:
        if not self._subtitles:
            print("  Subtitles disabled, skipping")
            return video_path
        if not content.get("raw_text", "").strip():
            print("  ⚠️  Content has no text, skipping subtitles")
            return video_path
        try:
            srt_path = self._subtitles.create_subtitles(
                content, {**audio, "duration": duration}, os.path.dirname(video_path), is_short
            )
            return self._subtitles.add_subtitles_to_video(video_path, srt_path, is_short, use_compact)
        except (PotatoNewsError, OSError) as e:
            print(f"  ⚠️  Subtitle stage failed for {video_path}: {e}")
            print("  ⚠️  Continuing with the video without subtitles")
            return video_path

    def _add_sound_effects(self, video_path: str, content: GeneratedContent,
                           duration: float, is_short: bool) -> str:
        if not self._sound_effects:
            print("  Sound effects disabled, skipping")
            return video_path
        try:
            return self._sound_effects.add_sound_effects_to_video(video_path, duration, is_short, content)
        except (PotatoNewsError, OSError) as e:
            print(f"  ⚠️  Sound effect stage failed for {video_path}: {e}")
            print("  ⚠️  Continuing with the video without sound effects")
            return video_path

    def create_video_batch(self, items: List[Dict[str, Any]]) -> List[VideoResult]:
        """
        Create videos one after another. Each item is a dict with 'content',
        'audio' and optionally 'news_item'. Items that fail are skipped.
        """
        results = []
        for i, item in enumerate(items, 1):
            print(f"\n🎬 Video {i}/{len(items)}")
            try:
                results.append(self.create_video_for_content(
                    item["content"],
                    item["audio"],
                    item.get("news_item"),
                    item.get("use_compact_subtitles", False),
                ))
            except (PotatoNewsError, OSError, KeyError) as e:
                print(f"❌ Skipping item {i}: {e}")
        print(f"\n📊 Created {len(results)}/{len(items)} videos")
        return results

    def cleanup(self, age_hours: float = config.FRAME_RETENTION_HOURS) -> None:
        """Sweep old frame sequences and downloaded images."""
        print(f"🧹 Cleaning up files older than {age_hours} hours...")
        clean_directory(self._frames_dir, age_hours)
        if self._images:
            self._images.cleanup_old_images(age_hours)
