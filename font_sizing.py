from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from frame_geometry import GeometryModel


MAX_FONT_SIZE = 255
MIN_FONT_SIZE = 1

TITLE_SIZE_FACTOR = 0.3
CAPTION_SIZE_FACTOR = 0.2
CAPTION_LINES_PER_BLOCK = 3

DEFAULT_FACE = "Helvetica"
DEFAULT_TEXT_COLOR: Tuple[int, int, int] = (192, 192, 192)


def clamp_font_size(size: float) -> int:
    """Round to whole points and saturate to what the rasterizer supports."""
    return max(MIN_FONT_SIZE, min(MAX_FONT_SIZE, int(round(size))))


@dataclass
class FontSpec:
    face_name: str
    size_factor: float
    computed_size: float = 0.0
    color: Tuple[int, int, int] = DEFAULT_TEXT_COLOR

    @property
    def rasterizer_size(self) -> int:
        return clamp_font_size(self.computed_size)


def compute_fonts(
    geometry: GeometryModel,
    title_face: str = DEFAULT_FACE,
    caption_face: str = DEFAULT_FACE,
    title_size_factor: float = TITLE_SIZE_FACTOR,
    caption_size_factor: float = CAPTION_SIZE_FACTOR,
    color: Tuple[int, int, int] = DEFAULT_TEXT_COLOR,
) -> Tuple[FontSpec, FontSpec]:
    """
    Size the title font from the title bar and the caption font from one third of the bottom bar.

    The bottom bar is always split in three lines, whether or not they are populated.
    """
    title = FontSpec(
        face_name=title_face,
        size_factor=title_size_factor,
        computed_size=geometry.title_bar_height * title_size_factor,
        color=color,
    )
    caption = FontSpec(
        face_name=caption_face,
        size_factor=caption_size_factor,
        computed_size=geometry.bottom_bar_height / CAPTION_LINES_PER_BLOCK * caption_size_factor,
        color=color,
    )
    return title, caption
