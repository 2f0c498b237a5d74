"""Encoding passes: mux, subtitle burn-in, sound-effect mix."""

from potato_news.video.assembler import VideoAssembler
from potato_news.video.sound_effects import SoundEffectsService
from potato_news.video.subtitles import SubtitleService

__all__ = ["VideoAssembler", "SoundEffectsService", "SubtitleService"]
