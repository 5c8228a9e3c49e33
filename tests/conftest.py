import pytest
from PIL import ImageDraw

from ink_bounds import InkBoundsMeasurer


class BoxRasterizer:
    """Draws each character as a 10px wide, 12px tall solid block."""

    char_width = 10
    line_height = 12

    def __init__(self) -> None:
        self.calls = []

    def line_extent(self, text, face, size):
        return len(text) * self.char_width, self.line_height

    def render(self, raster, text, face, size, fill=255, origin=(0, 0)):
        self.calls.append((text, face, size))
        if not text:
            return
        w, h = self.line_extent(text, face, size)
        x0, y0 = origin
        ImageDraw.Draw(raster).rectangle([x0, y0, x0 + w - 1, y0 + h - 1], fill=fill)


@pytest.fixture
def box_rasterizer():
    return BoxRasterizer()


@pytest.fixture
def box_measurer(box_rasterizer):
    measurer = InkBoundsMeasurer(rasterizer=box_rasterizer)
    yield measurer
    measurer.release()
