"""
Potato News Network – animation and video-assembly pipeline for satirical news shorts.

Typical use:
  from potato_news.application.pipeline import VideoPipeline
  from potato_news.adapters import default_adapters
  pipeline = VideoPipeline(**default_adapters())
  result = pipeline.create_video_for_content(content, audio_result, news_item)

News fetching, commentary generation and speech synthesis happen upstream;
this package turns their output into a finished vertical video.
"""

__version__ = "0.2.0"
