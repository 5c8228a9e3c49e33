from typing import Tuple
from PIL import Image, ImageDraw

from font_sizing import clamp_font_size
from frame_geometry import GeometryModel
from ink_bounds import load_font


def crop_or_pad(
    target: Image.Image,
    center_x: float,
    center_y: float,
    width: float,
    height: float,
    fill_color: Tuple[int, int, int],
) -> Image.Image:
    """Return a width x height canvas whose center sits at (center_x, center_y) of target.

    center_x/center_y are relative to the source (0=left/top, 1=right/bottom).
    Areas outside the source are painted with fill_color, so a larger canvas pads
    and a smaller one crops. Targets that are not RGB/RGBA are converted to RGB.
    """
    if target.mode not in ("RGB", "RGBA"):
        target = target.convert("RGB")
    tw = max(1, int(round(width)))
    th = max(1, int(round(height)))
    sw, sh = target.size
    left = int(round(tw / 2 - center_x * sw))
    top = int(round(th / 2 - center_y * sh))
    fill = tuple(fill_color) + ((255,) if target.mode == "RGBA" else ())
    canvas = Image.new(target.mode, (tw, th), fill)
    canvas.paste(target, (left, top))
    return canvas


def paint_text(
    target: Image.Image,
    text: str,
    face: str,
    size: float,
    x: float,
    y: float,
    color: Tuple[int, int, int],
) -> None:
    """Draw one line of text in place with its origin at (x, y)."""
    if not text:
        return
    font = load_font(face, clamp_font_size(size))
    draw = ImageDraw.Draw(target)
    draw.text((int(round(x)), int(round(y))), text, fill=tuple(color), font=font)


def compose_frame(
    image: Image.Image,
    geometry: GeometryModel,
    inner_color: Tuple[int, int, int] = (255, 255, 255),
    outer_color: Tuple[int, int, int] = (0, 0, 0),
) -> Image.Image:
    """Apply the thin inner frame, then the outer frame shifted by the placement factor."""
    framed = crop_or_pad(
        image, 0.5, 0.5,
        geometry.framed_image_width, geometry.framed_image_height,
        inner_color,
    )
    return crop_or_pad(
        framed, 0.5, geometry.placement_factor,
        geometry.outer_frame_width, geometry.outer_frame_height,
        outer_color,
    )
