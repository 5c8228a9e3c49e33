from __future__ import annotations

from frame_geometry import GeometryModel
from font_sizing import FontSpec
from ink_bounds import InkBoundsMeasurer


# Share of the framed width kept free between caption columns
COLUMN_GUTTER_RATIO = 0.02


def caption_budget(framed_width: float, column_count: int) -> float:
    if column_count not in (1, 2, 3):
        raise ValueError(f"column_count must be 1, 2 or 3, got {column_count}")
    return framed_width / column_count - COLUMN_GUTTER_RATIO * framed_width


def title_fits_width(ink_width: int, framed_width: float) -> bool:
    return ink_width < framed_width


def caption_fits_width(ink_width: int, framed_width: float, column_count: int) -> bool:
    return ink_width < caption_budget(framed_width, column_count)


class FitChecker:
    """Decides whether a title or caption line fits its region by measuring its ink.

    Nothing is cached: fonts, geometry and the active column count can change
    between calls.
    """

    def __init__(
        self,
        measurer: InkBoundsMeasurer,
        geometry: GeometryModel,
        title_font: FontSpec,
        caption_font: FontSpec,
    ) -> None:
        self.measurer = measurer
        self.geometry = geometry
        self.title_font = title_font
        self.caption_font = caption_font

    def title_fits(self, text: str) -> bool:
        bounds = self.measurer.measure(text, self.title_font.face_name, self.title_font.computed_size)
        return title_fits_width(bounds.width, self.geometry.framed_image_width)

    def text_fits(self, text: str, column_count: int) -> bool:
        bounds = self.measurer.measure(text, self.caption_font.face_name, self.caption_font.computed_size)
        return caption_fits_width(bounds.width, self.geometry.framed_image_width, column_count)
