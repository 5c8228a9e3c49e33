"""Ink-extent text measurement on a reusable scratch raster."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Tuple

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from font_sizing import clamp_font_size
from frame_geometry import GeometryModel
from utils.timing import StepTimer


# Horizontal headroom so an over-long string is measured to its true width
# instead of being clipped at the raster edge.
SCRATCH_PADDING = 100

BLANK = 0
INK = 255


class RasterTooSmallError(RuntimeError):
    """Raised when a measurement is attempted without a reserved scratch raster."""


@dataclass(frozen=True)
class InkBounds:
    width: int
    height: int


@lru_cache(maxsize=64)
def load_font(face: str, size: int):
    """Load a font by face name; unknown faces silently fall back to Pillow's default font."""
    candidates = [face, face + ".ttf", face.replace(" ", "") + ".ttf"]
    for name in candidates:
        try:
            return ImageFont.truetype(name, size=size)
        except (OSError, ValueError):
            continue
    return ImageFont.load_default(size=size)


class PillowGlyphRasterizer:
    """Renders a single line of text into a raster at a given origin."""

    def render(
        self,
        raster: Image.Image,
        text: str,
        face: str,
        size: float,
        fill=INK,
        origin: Tuple[int, int] = (0, 0),
    ) -> None:
        font = load_font(face, clamp_font_size(size))
        ImageDraw.Draw(raster).text(origin, text, fill=fill, font=font)

    def line_extent(self, text: str, face: str, size: float) -> Tuple[int, int]:
        """Right/bottom edge of the text box Pillow reports for a render at the origin."""
        font = load_font(face, clamp_font_size(size))
        _, _, right, bottom = font.getbbox(text)
        return int(right), int(bottom)


class InkBoundsMeasurer:
    """
    Measures the tight extent of rendered ink for one string at one face/size.

    A single grayscale scratch raster is reused across calls since the pixel
    scan dominates the cost. The raster is blanked after every measurement and
    must be re-reserved (or released) whenever the target geometry changes.
    """

    def __init__(
        self,
        rasterizer: Optional[PillowGlyphRasterizer] = None,
        timer: Optional[StepTimer] = None,
    ) -> None:
        self.rasterizer = rasterizer or PillowGlyphRasterizer()
        self.timer = timer
        self._raster: Optional[Image.Image] = None
        self._requested_width = 0

    @property
    def raster_size(self) -> Optional[Tuple[int, int]]:
        if self._raster is None:
            return None
        return self._raster.size

    def reserve(self, width: int, height: int) -> None:
        """Make sure the raster holds at least (width + padding) x height pixels."""
        width = max(1, int(width))
        height = max(1, int(height))
        self._requested_width = max(self._requested_width, width)
        target_w = self._requested_width + SCRATCH_PADDING
        if self._raster is not None:
            cur_w, cur_h = self._raster.size
            if cur_w >= target_w and cur_h >= height:
                return
            height = max(height, cur_h)
        # Growing replaces the backing image outright.
        self._raster = Image.new("L", (target_w, height), BLANK)

    def reserve_for(self, geometry: GeometryModel) -> None:
        height = max(geometry.title_bar_height, geometry.bottom_bar_height / 3)
        self.reserve(geometry.framed_image_width, int(height))

    def release(self) -> None:
        self._raster = None
        self._requested_width = 0

    def __enter__(self) -> "InkBoundsMeasurer":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()

    def measure(self, text: str, face: str, size: float) -> InkBounds:
        if self._raster is None:
            raise RasterTooSmallError("Scratch raster not reserved; call reserve() before measuring")
        if not text:
            return InkBounds(0, 0)

        # Vertical undersize is fixed by growing, never by truncating.
        _, bottom = self.rasterizer.line_extent(text, face, size)
        if bottom + 1 > self._raster.size[1]:
            self.reserve(self._requested_width, bottom + 1)

        raster = self._raster
        try:
            self.rasterizer.render(raster, text, face, size, fill=INK)
            if self.timer is not None:
                with self.timer.time_step("ink_scan"):
                    return _scan_ink(raster)
            return _scan_ink(raster)
        finally:
            raster.paste(BLANK, (0, 0) + raster.size)


def _scan_ink(raster: Image.Image) -> InkBounds:
    pixels = np.asarray(raster)
    ys, xs = np.nonzero(pixels > BLANK)
    if xs.size == 0:
        return InkBounds(0, 0)
    return InkBounds(int(xs.max()), int(ys.max()))
