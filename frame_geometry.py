from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple
import math


DEFAULT_INNER_FRAME_THICKNESS = 10


class InvalidGeometryError(ValueError):
    """Raised when root inputs cannot produce a valid frame geometry."""


@dataclass
class GeometryModel:
    image_width: int
    image_height: int
    inner_frame_thickness: int
    framed_image_width: int
    framed_image_height: int
    outer_frame_width: float
    outer_frame_height: float
    title_bar_height: int
    bottom_bar_height: int
    placement_factor: float

    @property
    def canvas_size(self) -> Tuple[int, int]:
        """Pixel size of the composed image once the outer frame is applied."""
        return int(round(self.outer_frame_width)), int(round(self.outer_frame_height))

    @property
    def canvas_width(self) -> int:
        return self.canvas_size[0]

    @property
    def canvas_height(self) -> int:
        return self.canvas_size[1]


def _check_finite(value: float, label: str) -> float:
    value = float(value)
    if not math.isfinite(value):
        raise InvalidGeometryError(f"{label} must be a finite number, got {value!r}")
    return value


def validate_root_inputs(
    image_width: int,
    image_height: int,
    inner_frame_thickness: int,
    border_width_pct: float,
    border_height_pct: float,
    placement_pct: float,
) -> None:
    for value, label in (
        (image_width, "image_width"),
        (image_height, "image_height"),
        (inner_frame_thickness, "inner_frame_thickness"),
    ):
        _check_finite(value, label)
    if int(image_width) <= 0 or int(image_height) <= 0:
        raise InvalidGeometryError(
            f"Image dimensions must be positive, got {image_width}x{image_height}"
        )
    if int(inner_frame_thickness) < 0:
        raise InvalidGeometryError("inner_frame_thickness cannot be negative")
    for value, label in (
        (border_width_pct, "border_width_pct"),
        (border_height_pct, "border_height_pct"),
        (placement_pct, "placement_pct"),
    ):
        if _check_finite(value, label) < 0:
            raise InvalidGeometryError(f"{label} cannot be negative")
    if float(placement_pct) > 100:
        raise InvalidGeometryError("placement_pct must be within 0-100")


def placement_factor(placement_pct: float, outer_height: float, framed_height: float) -> float:
    """
    Convert a 0-100% vertical placement into the split factor used for the bars.

    0 puts the framed image at the bottom of the outer frame, 100 at the top,
    50 centers it (factor 0.5). Depends on both heights, so it has to be
    recomputed whenever either of them changes.
    """
    max_move_pixels = outer_height - framed_height
    max_move_factor = max_move_pixels / outer_height
    return 0.5 - max_move_factor / 2 + max_move_factor * (placement_pct / 100)


def compute_geometry(
    image_width: int,
    image_height: int,
    inner_frame_thickness: int = DEFAULT_INNER_FRAME_THICKNESS,
    border_width_pct: float = 3.0,
    border_height_pct: float = 20.0,
    placement_pct: float = 50.0,
) -> GeometryModel:
    """
    Derive every frame and bar dimension from the image size and the percentage parameters.

    Bar heights are truncated, never rounded, so title + bottom never exceeds
    outer_h - framed_h and the bars cannot overlap the framed image.
    """
    validate_root_inputs(
        image_width, image_height, inner_frame_thickness,
        border_width_pct, border_height_pct, placement_pct,
    )
    iw = int(image_width)
    ih = int(image_height)
    thickness = int(inner_frame_thickness)

    framed_w = iw + 2 * thickness
    framed_h = ih + 2 * thickness

    outer_w = framed_w * (1 + border_width_pct / 100)
    outer_h = framed_h * (1 + border_height_pct / 100)

    v = placement_factor(placement_pct, outer_h, framed_h)

    half_gap = outer_h / 2 - framed_h / 2
    title_bar = math.trunc(half_gap - (v - 0.5) * framed_h)
    bottom_bar = math.trunc(half_gap - (0.5 - v) * framed_h)

    return GeometryModel(
        image_width=iw,
        image_height=ih,
        inner_frame_thickness=thickness,
        framed_image_width=framed_w,
        framed_image_height=framed_h,
        outer_frame_width=outer_w,
        outer_frame_height=outer_h,
        title_bar_height=title_bar,
        bottom_bar_height=bottom_bar,
        placement_factor=v,
    )


def describe_geometry(geometry: GeometryModel) -> str:
    cw, ch = geometry.canvas_size
    return (
        f"image {geometry.image_width}x{geometry.image_height} → framed "
        f"{geometry.framed_image_width}x{geometry.framed_image_height} → outer "
        f"{cw}x{ch} (title bar {geometry.title_bar_height}px, "
        f"bottom bar {geometry.bottom_bar_height}px, v={geometry.placement_factor:.3f})"
    )
