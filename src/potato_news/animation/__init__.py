"""Lip-sync analysis, character state machine, sprite cache and frame rendering."""

from potato_news.animation.amplitude import AmplitudeAnalyzer
from potato_news.animation.assets import AssetBundle
from potato_news.animation.frame_library import FrameLibrary
from potato_news.animation.scene import SceneComposer, SceneMetadata
from potato_news.animation.state_machine import compute_state, state_track

__all__ = [
    "AmplitudeAnalyzer",
    "AssetBundle",
    "FrameLibrary",
    "SceneComposer",
    "SceneMetadata",
    "compute_state",
    "state_track",
]
