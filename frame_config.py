"""Root inputs and style settings for an annotation frame, with JSON and PNG-metadata storage."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Dict, Optional, Tuple
import json

from PIL import Image
from PIL.PngImagePlugin import PngInfo

from caption_layout import CAPTION_LINE_SPACING, CAPTION_VERTICAL_BIAS, CaptionParameters
from font_sizing import CAPTION_SIZE_FACTOR, DEFAULT_FACE, DEFAULT_TEXT_COLOR, TITLE_SIZE_FACTOR
from frame_geometry import DEFAULT_INNER_FRAME_THICKNESS


FRAME_COLORS: Dict[str, Tuple[int, int, int]] = {
    "white": (255, 255, 255),
    "black": (0, 0, 0),
    "silver": (128, 128, 128),
}

SIZE_FACTOR_RANGE = (0.2, 0.36)

PNG_CONFIG_KEY = "annotation_frame:config"
PNG_CAPTIONS_KEY = "annotation_frame:captions"


@dataclass
class FrameConfig:
    inner_frame_thickness: int = DEFAULT_INNER_FRAME_THICKNESS
    border_width_pct: float = 3.0
    border_height_pct: float = 20.0
    placement_pct: float = 50.0
    title_face: str = DEFAULT_FACE
    caption_face: str = DEFAULT_FACE
    title_size_factor: float = TITLE_SIZE_FACTOR
    caption_size_factor: float = CAPTION_SIZE_FACTOR
    caption_vertical_bias: float = CAPTION_VERTICAL_BIAS
    caption_line_spacing: float = CAPTION_LINE_SPACING
    frame_color: str = "black"
    inner_frame_color: str = "white"
    text_color: Tuple[int, int, int] = field(default=DEFAULT_TEXT_COLOR)

    def validate(self) -> None:
        for name in ("frame_color", "inner_frame_color"):
            value = getattr(self, name)
            if value not in FRAME_COLORS:
                raise ValueError(f"{name} must be one of {sorted(FRAME_COLORS)}, got '{value}'")
        lo, hi = SIZE_FACTOR_RANGE
        for name in ("title_size_factor", "caption_size_factor"):
            value = float(getattr(self, name))
            if not lo <= value <= hi:
                raise ValueError(f"{name} must be within {lo}-{hi}, got {value}")
        if len(tuple(self.text_color)) != 3:
            raise ValueError("text_color must be an RGB triple")

    @property
    def frame_rgb(self) -> Tuple[int, int, int]:
        return FRAME_COLORS[self.frame_color]

    @property
    def inner_frame_rgb(self) -> Tuple[int, int, int]:
        return FRAME_COLORS[self.inner_frame_color]

    def to_dict(self) -> Dict:
        data = asdict(self)
        data["text_color"] = [int(c) for c in self.text_color]
        return data

    @classmethod
    def from_dict(cls, data: Dict) -> "FrameConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown frame config keys: {unknown}")
        values = dict(data)
        if "text_color" in values:
            values["text_color"] = tuple(int(c) for c in values["text_color"])
        config = cls(**values)
        config.validate()
        return config


def save_config(path: Path, config: FrameConfig, captions: Optional[CaptionParameters] = None) -> None:
    payload: Dict = {"frame": config.to_dict()}
    if captions is not None:
        payload["captions"] = captions.to_dict()
    Path(path).write_text(json.dumps(payload, indent=2), encoding="utf-8")


def load_config(path: Path) -> Tuple[FrameConfig, Optional[CaptionParameters]]:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Frame config not found: {path}")
    payload = json.loads(path.read_text(encoding="utf-8"))
    config = FrameConfig.from_dict(payload.get("frame", {}))
    captions = None
    if "captions" in payload:
        captions = CaptionParameters.from_dict(payload["captions"])
    return config, captions


def embed_in_png(config: FrameConfig, captions: Optional[CaptionParameters] = None) -> PngInfo:
    """Build PNG text chunks carrying the root inputs, for use as ``img.save(..., pnginfo=...)``."""
    info = PngInfo()
    info.add_text(PNG_CONFIG_KEY, json.dumps(config.to_dict()))
    if captions is not None:
        info.add_text(PNG_CAPTIONS_KEY, json.dumps(captions.to_dict()))
    return info


def read_from_png(image: Image.Image) -> Tuple[Optional[FrameConfig], Optional[CaptionParameters]]:
    text = getattr(image, "text", None) or image.info
    config = None
    captions = None
    if PNG_CONFIG_KEY in text:
        config = FrameConfig.from_dict(json.loads(text[PNG_CONFIG_KEY]))
    if PNG_CAPTIONS_KEY in text:
        captions = CaptionParameters.from_dict(json.loads(text[PNG_CAPTIONS_KEY]))
    return config, captions
