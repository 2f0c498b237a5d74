"""Application layer: pipeline orchestration."""

from potato_news.application.pipeline import VideoPipeline

__all__ = ["VideoPipeline"]
