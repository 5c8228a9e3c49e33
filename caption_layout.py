from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Tuple

from frame_geometry import GeometryModel
from font_sizing import FontSpec
from utils.labels import BLOCK_NAMES, LINES_PER_BLOCK, require_block, require_line


# Offset of the first caption line from the top of the bottom bar, as a share of its height
CAPTION_VERTICAL_BIAS = 0.17
# Gap between caption lines relative to the unscaled line height (font size / size factor)
CAPTION_LINE_SPACING = 0.6


def _default_lines() -> Dict[str, List[str]]:
    return {block: [f"Line {i}" for i in range(1, LINES_PER_BLOCK + 1)] for block in BLOCK_NAMES}


def _default_enabled() -> Dict[str, bool]:
    return {block: True for block in BLOCK_NAMES}


@dataclass
class CaptionParameters:
    """Title plus a 3x3 grid of caption lines (left/center/right blocks, three lines each)."""

    title: str = "Image Title"
    lines: Dict[str, List[str]] = field(default_factory=_default_lines)
    enabled: Dict[str, bool] = field(default_factory=_default_enabled)

    @property
    def active_column_count(self) -> int:
        return sum(1 for block in BLOCK_NAMES if self.enabled.get(block, False))

    def set_line(self, block: str, line: int, text: str) -> None:
        block = require_block(block)
        line = require_line(line)
        self.lines.setdefault(block, ["", "", ""])[line - 1] = text

    def get_line(self, block: str, line: int) -> str:
        block = require_block(block)
        line = require_line(line)
        values = self.lines.get(block, [])
        return values[line - 1] if line <= len(values) else ""

    def set_enabled(self, block: str, flag: bool) -> None:
        self.enabled[require_block(block)] = bool(flag)

    def enabled_blocks(self) -> List[str]:
        return [block for block in BLOCK_NAMES if self.enabled.get(block, False)]

    def iter_enabled_lines(self) -> Iterator[Tuple[str, int, str]]:
        for block in self.enabled_blocks():
            for line in range(1, LINES_PER_BLOCK + 1):
                yield block, line, self.get_line(block, line)

    def to_dict(self) -> Dict:
        return {
            "title": self.title,
            "lines": {block: list(self.lines.get(block, [])) for block in BLOCK_NAMES},
            "enabled": {block: bool(self.enabled.get(block, False)) for block in BLOCK_NAMES},
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "CaptionParameters":
        params = cls(title=str(data.get("title", "")))
        for block, values in (data.get("lines") or {}).items():
            for idx, text in enumerate(list(values)[:LINES_PER_BLOCK], start=1):
                params.set_line(block, idx, str(text))
        for block, flag in (data.get("enabled") or {}).items():
            params.set_enabled(block, flag)
        return params


def caption_horizontal_offset(block: str, measured_width: float, framed_width: float) -> float:
    block = require_block(block)
    if block == "left":
        return 0.0
    if block == "center":
        return framed_width / 2 - measured_width / 2
    return framed_width - measured_width


def plan_caption_position(
    measured_width: float,
    block: str,
    line: int,
    geometry: GeometryModel,
    font: FontSpec,
    vertical_bias: float = CAPTION_VERTICAL_BIAS,
    line_spacing: float = CAPTION_LINE_SPACING,
) -> Tuple[float, float]:
    """
    Absolute (x, y) on the composed canvas at which a caption line is drawn.

    Lines are stacked from the top of the bottom bar; the step between lines
    is derived from the unscaled line height so it tracks the bar height.
    """
    line = require_line(line)
    offset = caption_horizontal_offset(block, measured_width, geometry.framed_image_width)
    canvas_w, canvas_h = geometry.canvas_size
    bottom_bar = geometry.bottom_bar_height

    x = (canvas_w - geometry.framed_image_width) / 2 + offset
    y = (
        canvas_h - bottom_bar
        + bottom_bar * vertical_bias
        + (line - 1) * font.computed_size * line_spacing / font.size_factor
    )
    return x, y


def plan_title_position(
    measured_width: float,
    measured_height: float,
    geometry: GeometryModel,
) -> Tuple[float, float]:
    canvas_w = geometry.canvas_width
    x = canvas_w / 2 - measured_width / 2
    y = (geometry.title_bar_height - measured_height) / 2
    return x, y
