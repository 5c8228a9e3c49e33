import pytest

from frame_geometry import compute_geometry
from ink_bounds import (
    SCRATCH_PADDING,
    InkBounds,
    InkBoundsMeasurer,
    RasterTooSmallError,
    load_font,
)
from utils.timing import StepTimer


def test_measure_requires_reserved_raster(box_measurer):
    with pytest.raises(RasterTooSmallError):
        box_measurer.measure("abc", "Helvetica", 12)


def test_reserve_adds_horizontal_padding(box_measurer):
    box_measurer.reserve(200, 50)
    assert box_measurer.raster_size == (200 + SCRATCH_PADDING, 50)


def test_reserve_only_grows(box_measurer):
    box_measurer.reserve(200, 50)
    box_measurer.reserve(100, 80)
    assert box_measurer.raster_size == (300, 80)
    box_measurer.reserve(10, 10)
    assert box_measurer.raster_size == (300, 80)


def test_reserve_for_geometry(box_measurer):
    g = compute_geometry(1000, 800, 10, 3, 25, 50)
    box_measurer.reserve_for(g)
    assert box_measurer.raster_size == (1020 + SCRATCH_PADDING, 102)


def test_measure_reports_max_ink_coordinates(box_measurer):
    box_measurer.reserve(200, 40)
    assert box_measurer.measure("abc", "Helvetica", 12) == InkBounds(29, 11)


def test_empty_string_has_no_ink(box_measurer, box_rasterizer):
    box_measurer.reserve(200, 40)
    assert box_measurer.measure("", "Helvetica", 12) == InkBounds(0, 0)
    assert box_rasterizer.calls == []


def test_scratch_raster_is_blanked_between_measurements(box_measurer):
    box_measurer.reserve(200, 40)
    wide = box_measurer.measure("abcdefghij", "Helvetica", 12)
    narrow = box_measurer.measure("ab", "Helvetica", 12)
    assert wide.width == 99
    assert narrow == InkBounds(19, 11)


def test_padding_headroom_bounds_measurable_width(box_measurer):
    box_measurer.reserve(20, 20)
    # 200px of ink on a 120px raster: clipped at the raster edge
    bounds = box_measurer.measure("x" * 20, "Helvetica", 12)
    assert bounds.width == 20 + SCRATCH_PADDING - 1


def test_short_raster_grows_vertically(box_measurer):
    box_measurer.reserve(50, 5)
    bounds = box_measurer.measure("a", "Helvetica", 12)
    assert bounds == InkBounds(9, 11)
    assert box_measurer.raster_size[1] >= 12


def test_release_drops_raster(box_measurer):
    box_measurer.reserve(50, 20)
    box_measurer.release()
    assert box_measurer.raster_size is None
    with pytest.raises(RasterTooSmallError):
        box_measurer.measure("a", "Helvetica", 12)


def test_context_manager_releases(box_rasterizer):
    with InkBoundsMeasurer(rasterizer=box_rasterizer) as measurer:
        measurer.reserve(50, 20)
        assert measurer.raster_size is not None
    assert measurer.raster_size is None


def test_scan_time_is_recorded(box_rasterizer):
    timer = StepTimer()
    measurer = InkBoundsMeasurer(rasterizer=box_rasterizer, timer=timer)
    measurer.reserve(100, 20)
    measurer.measure("a", "Helvetica", 12)
    measurer.measure("b", "Helvetica", 12)
    assert timer.count("ink_scan") == 2
    assert timer.get("ink_scan") >= 0


def test_pillow_rasterizer_measures_real_glyphs():
    measurer = InkBoundsMeasurer()
    measurer.reserve(400, 60)
    wide = measurer.measure("WWWW", "NoSuchFace-Regular", 24)
    thin = measurer.measure("i", "NoSuchFace-Regular", 24)
    again = measurer.measure("WWWW", "NoSuchFace-Regular", 24)
    assert wide.width > thin.width
    assert wide.height > 0
    assert thin.height > 0
    assert again == wide


def test_unknown_face_falls_back_silently():
    assert load_font("Definitely Not A Font", 20) is not None
