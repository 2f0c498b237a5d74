"""
Adapters – concrete implementations of the ports.
Swap any of them (e.g. a different image source) by passing an override to
default_adapters() and injecting the result into VideoPipeline.
"""

from potato_news.adapters.news_image import NewsImageFetcher
from potato_news.adapters.renderer import AnchorSequenceRenderer


def default_adapters(**overrides):
    """
    Build default adapter instances (use package config).
    Overrides: analyzer=..., renderer=..., assembler=..., subtitles=...,
    sound_effects=..., image_source=... for testing or alternative backends.
    """
    from potato_news.animation.amplitude import AmplitudeAnalyzer
    from potato_news.video.assembler import VideoAssembler
    from potato_news.video.sound_effects import SoundEffectsService
    from potato_news.video.subtitles import SubtitleService

    factories = {
        "analyzer": AmplitudeAnalyzer,
        "renderer": AnchorSequenceRenderer,
        "assembler": VideoAssembler,
        "subtitles": SubtitleService,
        "sound_effects": SoundEffectsService,
        "image_source": NewsImageFetcher,
    }
    # only build what isn't overridden, so tests don't touch the default directories
    adapters = {name: factory() for name, factory in factories.items() if name not in overrides}
    adapters.update(overrides)
    return adapters
