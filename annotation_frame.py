from __future__ import annotations

import argparse
from dataclasses import replace
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from PIL import Image

from caption_layout import CaptionParameters, plan_caption_position as _plan_caption, plan_title_position as _plan_title
from compositor import compose_frame, paint_text
from font_sizing import FontSpec, compute_fonts
from frame_config import FRAME_COLORS, FrameConfig, embed_in_png, load_config, read_from_png, save_config
from frame_geometry import GeometryModel, compute_geometry, describe_geometry
from ink_bounds import InkBounds, InkBoundsMeasurer
from text_fit import FitChecker
from utils.labels import BLOCK_NAMES, LINES_PER_BLOCK
from utils.timing import StepTimer


REGIONS = ("title", "caption")


class FrameLayoutEngine:
    """
    Owns the current geometry, font specs and scratch raster for one target image.

    Every root-input change goes through recompute_all(), which rebuilds the
    geometry and both fonts from scratch; a failed recompute leaves the previous
    model untouched.
    """

    def __init__(
        self,
        config: Optional[FrameConfig] = None,
        measurer: Optional[InkBoundsMeasurer] = None,
        timer: Optional[StepTimer] = None,
    ) -> None:
        self.config = config or FrameConfig()
        self.config.validate()
        self.measurer = measurer or InkBoundsMeasurer(timer=timer)
        self.image_size: Optional[Tuple[int, int]] = None
        self.geometry: Optional[GeometryModel] = None
        self.title_font: Optional[FontSpec] = None
        self.caption_font: Optional[FontSpec] = None

    # Lifecycle ---------------------------------------------------------------

    def select_image(self, width: int, height: int) -> GeometryModel:
        """Switch to a new target image; the old scratch raster is dropped once the new model is valid."""
        model = self._derive(width, height)
        self.measurer.release()
        geometry, _, _ = self._commit(width, height, *model)
        return geometry

    def apply_config(self, config: FrameConfig) -> None:
        config.validate()
        self.config = config
        if self.image_size is not None:
            self.recompute_all()

    def recompute_all(
        self,
        image_width: Optional[int] = None,
        image_height: Optional[int] = None,
    ) -> Tuple[GeometryModel, FontSpec, FontSpec]:
        if image_width is None or image_height is None:
            if self.image_size is None:
                raise RuntimeError("No target image selected")
            image_width, image_height = self.image_size
        model = self._derive(image_width, image_height)
        return self._commit(image_width, image_height, *model)

    def _derive(self, image_width: int, image_height: int) -> Tuple[GeometryModel, FontSpec, FontSpec]:
        cfg = self.config
        geometry = compute_geometry(
            image_width,
            image_height,
            cfg.inner_frame_thickness,
            cfg.border_width_pct,
            cfg.border_height_pct,
            cfg.placement_pct,
        )
        title_font, caption_font = compute_fonts(
            geometry,
            cfg.title_face,
            cfg.caption_face,
            title_size_factor=cfg.title_size_factor,
            caption_size_factor=cfg.caption_size_factor,
            color=tuple(cfg.text_color),
        )
        return geometry, title_font, caption_font

    def _commit(
        self,
        image_width: int,
        image_height: int,
        geometry: GeometryModel,
        title_font: FontSpec,
        caption_font: FontSpec,
    ) -> Tuple[GeometryModel, FontSpec, FontSpec]:
        self.image_size = (int(image_width), int(image_height))
        self.geometry = geometry
        self.title_font = title_font
        self.caption_font = caption_font
        self.measurer.reserve_for(geometry)
        return geometry, title_font, caption_font

    def close(self) -> None:
        self.measurer.release()

    def __enter__(self) -> "FrameLayoutEngine":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _require_model(self) -> Tuple[GeometryModel, FontSpec, FontSpec]:
        if self.geometry is None or self.title_font is None or self.caption_font is None:
            raise RuntimeError("Geometry not computed; call select_image() first")
        return self.geometry, self.title_font, self.caption_font

    # Measurement and fit -----------------------------------------------------

    def measure_ink(self, text: str, face: str, size: float) -> InkBounds:
        self._require_model()
        return self.measurer.measure(text, face, size)

    def fit_checker(self) -> FitChecker:
        geometry, title_font, caption_font = self._require_model()
        return FitChecker(self.measurer, geometry, title_font, caption_font)

    def check_fits(self, text: str, region: str, column_count: int = 1) -> bool:
        checker = self.fit_checker()
        if region == "title":
            return checker.title_fits(text)
        if region == "caption":
            return checker.text_fits(text, column_count)
        raise ValueError(f"Unknown region '{region}', expected one of {REGIONS}")

    def check_captions(self, captions: CaptionParameters) -> Dict[str, bool]:
        """Fit result for the title and every line of each enabled block, keyed 'title' / 'block:line'."""
        checker = self.fit_checker()
        results: Dict[str, bool] = {"title": checker.title_fits(captions.title)}
        column_count = captions.active_column_count
        for block, line, text in captions.iter_enabled_lines():
            results[f"{block}:{line}"] = checker.text_fits(text, column_count)
        return results

    # Placement ---------------------------------------------------------------

    def plan_caption_position(self, text: str, block: str, line: int, column_count: int) -> Tuple[float, float]:
        """Position of one caption line.

        column_count is only checked to be 1-3; the position depends on the block alone.
        """
        geometry, _, caption_font = self._require_model()
        if column_count not in (1, 2, 3):
            raise ValueError(f"column_count must be 1, 2 or 3, got {column_count}")
        bounds = self.measurer.measure(text, caption_font.face_name, caption_font.computed_size)
        return _plan_caption(
            bounds.width,
            block,
            line,
            geometry,
            caption_font,
            vertical_bias=self.config.caption_vertical_bias,
            line_spacing=self.config.caption_line_spacing,
        )

    def plan_title_position(self, text: str) -> Tuple[float, float]:
        geometry, title_font, _ = self._require_model()
        bounds = self.measurer.measure(text, title_font.face_name, title_font.computed_size)
        return _plan_title(bounds.width, bounds.height, geometry)


def annotate_image(
    image: Image.Image,
    captions: CaptionParameters,
    engine: FrameLayoutEngine,
    verbose: bool = False,
) -> Image.Image:
    """Frame the image and write the title and every enabled caption line onto the frame."""
    geometry = engine.select_image(*image.size)
    title_font, caption_font = engine.title_font, engine.caption_font
    cfg = engine.config
    if verbose:
        print(f"[geometry] {describe_geometry(geometry)}")
        print(f"[fonts] title {title_font.rasterizer_size}pt, caption {caption_font.rasterizer_size}pt")

    canvas = compose_frame(image, geometry, inner_color=cfg.inner_frame_rgb, outer_color=cfg.frame_rgb)

    if captions.title:
        x, y = engine.plan_title_position(captions.title)
        paint_text(canvas, captions.title, title_font.face_name, title_font.computed_size, x, y, title_font.color)

    column_count = captions.active_column_count
    for block, line, text in captions.iter_enabled_lines():
        if not text:
            continue
        x, y = engine.plan_caption_position(text, block, line, column_count)
        paint_text(canvas, text, caption_font.face_name, caption_font.computed_size, x, y, caption_font.color)
        if verbose:
            print(f"[frame] {block}:{line} '{text}' at ({x:.1f}, {y:.1f})")
    return canvas


def _apply_overrides(config: FrameConfig, args: argparse.Namespace) -> FrameConfig:
    mapping = {
        "thickness": "inner_frame_thickness",
        "border_width": "border_width_pct",
        "border_height": "border_height_pct",
        "placement": "placement_pct",
        "title_font": "title_face",
        "caption_font": "caption_face",
        "frame_color": "frame_color",
    }
    changes = {}
    for arg_name, field_name in mapping.items():
        value = getattr(args, arg_name)
        if value is not None:
            changes[field_name] = value
    return replace(config, **changes) if changes else config


def _apply_caption_args(captions: CaptionParameters, args: argparse.Namespace) -> CaptionParameters:
    if args.title is not None:
        captions.title = args.title
    for block in BLOCK_NAMES:
        values: Optional[List[str]] = getattr(args, block)
        if values is not None:
            if len(values) > LINES_PER_BLOCK:
                raise ValueError(f"At most {LINES_PER_BLOCK} lines per block, got {len(values)} for {block}")
            padded = list(values) + [""] * (LINES_PER_BLOCK - len(values))
            for idx, text in enumerate(padded, start=1):
                captions.set_line(block, idx, text)
        if getattr(args, f"no_{block}"):
            captions.set_enabled(block, False)
    return captions


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Add an annotation frame with a title and caption columns to an image.")
    parser.add_argument("--image", required=True, help="Path to the image to frame")
    parser.add_argument("--output", help="Output path (default: <image>_framed.png next to the input)")
    parser.add_argument("--config", help="JSON frame config (root inputs, fonts, captions)")
    parser.add_argument("--save-config", help="Write the effective config to this JSON path")
    parser.add_argument("--from-metadata", action="store_true", help="Reuse root inputs embedded in the input PNG")
    parser.add_argument("--embed-metadata", action="store_true", help="Embed root inputs in the output PNG")
    parser.add_argument("--title", help="Title text")
    for block in BLOCK_NAMES:
        parser.add_argument(f"--{block}", nargs="*", help=f"Up to {LINES_PER_BLOCK} lines for the {block} block")
        parser.add_argument(f"--no-{block}", action="store_true", help=f"Disable the {block} block")
    parser.add_argument("--thickness", type=int, help="Inner frame thickness in pixels (default: 10)")
    parser.add_argument("--border-width", type=float, help="Outer frame width increase in percent (default: 3)")
    parser.add_argument("--border-height", type=float, help="Outer frame height increase in percent (default: 20)")
    parser.add_argument("--placement", type=float, help="Vertical image placement 0 (bottom) to 100 (top) (default: 50)")
    parser.add_argument("--title-font", help="Title font face (name or .ttf path)")
    parser.add_argument("--caption-font", help="Caption font face (name or .ttf path)")
    parser.add_argument("--frame-color", choices=sorted(FRAME_COLORS), help="Outer frame color")
    parser.add_argument("--check-only", action="store_true", help="Only report whether the texts fit; exit 1 if any does not")
    parser.add_argument("--timings", action="store_true", help="Print ink-scan timings")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    image_path = Path(args.image).resolve()
    if not image_path.exists():
        raise FileNotFoundError(f"Image not found: {image_path}")

    config = FrameConfig()
    captions = CaptionParameters()
    with Image.open(image_path) as im:
        image = im.copy()
    if args.from_metadata:
        stored_config, stored_captions = read_from_png(image)
        if stored_config is None:
            print(f"[config] No embedded frame metadata in {image_path.name}; using defaults")
        config = stored_config or config
        captions = stored_captions or captions
    if args.config:
        config, stored_captions = load_config(Path(args.config))
        captions = stored_captions or captions
    config = _apply_overrides(config, args)
    captions = _apply_caption_args(captions, args)

    timer = StepTimer()
    with FrameLayoutEngine(config, timer=timer) as engine:
        engine.select_image(*image.size)
        fits = engine.check_captions(captions)
        too_wide = [key for key, ok in fits.items() if not ok]
        for key, ok in fits.items():
            print(f"[fit] {key}: {'ok' if ok else 'TOO WIDE'}")

        if args.save_config:
            save_config(Path(args.save_config), config, captions)
            print(f"[config] Saved to {args.save_config}")

        if args.check_only:
            if args.timings:
                for line in timer.to_lines():
                    print(f"[TIME] {line}")
            return 1 if too_wide else 0

        if too_wide:
            print(f"[fit] {len(too_wide)} text(s) will overflow their region: {', '.join(too_wide)}")

        out = annotate_image(image, captions, engine, verbose=True)

    out_path = Path(args.output) if args.output else image_path.with_name(f"{image_path.stem}_framed.png")
    if args.embed_metadata and out_path.suffix.lower() == ".png":
        out.save(out_path, pnginfo=embed_in_png(config, captions))
    else:
        out.save(out_path)
    print(f"Framed image saved to: {out_path}")
    if args.timings:
        for line in timer.to_lines():
            print(f"[TIME] {line}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
