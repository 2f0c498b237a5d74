"""ISequenceRenderer adapter: asset bundle + frame library + scene composer."""

from typing import List, Optional

from potato_news import config
from potato_news.animation.assets import AssetBundle
from potato_news.animation.frame_library import FrameLibrary
from potato_news.animation.scene import SceneComposer, SceneMetadata
from potato_news.domain.models import FrameSequence
from potato_news.ports.interfaces import ISequenceRenderer


class AnchorSequenceRenderer(ISequenceRenderer):
    """Renders the potato anchor in the studio. Assets and sprites are loaded once."""

    def __init__(
        self,
        assets_path: Optional[str] = None,
        frame_library: Optional[FrameLibrary] = None,
        composer: Optional[SceneComposer] = None,
        use_finer_rotations: bool = config.USE_FINER_ROTATIONS,
    ):
        self.assets_path = assets_path
        self.frame_library = frame_library or FrameLibrary()
        self.composer = composer or SceneComposer()
        self.use_finer_rotations = use_finer_rotations
        self.assets: Optional[AssetBundle] = None

    def initialize(self) -> None:
        if self.assets is None:
            self.assets = AssetBundle.load(self.assets_path)
        self.frame_library.initialize(self.assets, use_finer_rotation_lattice=self.use_finer_rotations)

    def render(
        self,
        amplitudes: List[float],
        headline: str = "",
        commentary: str = "",
        footer_image_path: Optional[str] = None,
        is_short_format: bool = False,
    ) -> FrameSequence:
        self.initialize()
        metadata = SceneMetadata(
            headline=headline,
            commentary=commentary,
            footer_image_path=footer_image_path,
            is_short_format=is_short_format,
        )
        return self.composer.render_sequence(amplitudes, self.assets, metadata, self.frame_library)
