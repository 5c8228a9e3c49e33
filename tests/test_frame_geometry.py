import pytest

from frame_geometry import (
    InvalidGeometryError,
    compute_geometry,
    describe_geometry,
    placement_factor,
)


def test_reference_geometry():
    g = compute_geometry(1000, 800, 10, 3, 25, 50)
    assert g.framed_image_width == 1020
    assert g.framed_image_height == 820
    assert g.outer_frame_width == pytest.approx(1050.6)
    assert g.outer_frame_height == pytest.approx(1025)
    assert g.title_bar_height == 102
    assert g.bottom_bar_height == 102
    assert g.canvas_size == (1051, 1025)


@pytest.mark.parametrize("size", [(1, 1), (640, 480), (1000, 800), (4000, 2500), (333, 1777)])
@pytest.mark.parametrize("border", [(0, 0), (3, 20), (3, 25), (17.5, 60)])
@pytest.mark.parametrize("placement", [0, 12.5, 50, 73, 100])
def test_frame_invariants(size, border, placement):
    g = compute_geometry(size[0], size[1], 10, border[0], border[1], placement)
    assert g.outer_frame_width >= g.framed_image_width >= size[0]
    assert g.outer_frame_height >= g.framed_image_height >= size[1]
    assert g.title_bar_height >= 0
    assert g.bottom_bar_height >= 0
    slack = g.outer_frame_height - (g.title_bar_height + g.bottom_bar_height + g.framed_image_height)
    assert -1e-9 <= slack < 2
    assert 0 <= g.placement_factor <= 1


@pytest.mark.parametrize("size", [(640, 480), (999, 333), (1000, 800)])
def test_centered_placement_gives_equal_bars(size):
    g = compute_geometry(size[0], size[1], 10, 3, 20, 50)
    assert abs(g.title_bar_height - g.bottom_bar_height) <= 1


def test_placement_moves_image_between_bars():
    low = compute_geometry(1000, 800, 10, 3, 25, 0)
    high = compute_geometry(1000, 800, 10, 3, 25, 100)
    # 0 = image at the bottom, so the title bar takes most of the space
    assert low.title_bar_height > low.bottom_bar_height
    assert high.title_bar_height < high.bottom_bar_height


def test_placement_factor_spans_free_space():
    assert placement_factor(50, 1025, 820) == pytest.approx(0.5)
    assert placement_factor(0, 1025, 820) == pytest.approx(0.4)
    assert placement_factor(100, 1025, 820) == pytest.approx(0.6)
    assert placement_factor(100, 820, 820) == pytest.approx(0.5)


def test_geometry_is_deterministic():
    args = (1234, 567, 10, 3, 20, 37.5)
    assert compute_geometry(*args) == compute_geometry(*args)


@pytest.mark.parametrize(
    "args",
    [
        (0, 800, 10, 3, 20, 50),
        (1000, -1, 10, 3, 20, 50),
        (1000, 800, -1, 3, 20, 50),
        (1000, 800, 10, -3, 20, 50),
        (1000, 800, 10, 3, -20, 50),
        (1000, 800, 10, 3, 20, -0.1),
        (1000, 800, 10, 3, 20, 100.5),
        (1000, 800, 10, float("nan"), 20, 50),
        (float("inf"), 800, 10, 3, 20, 50),
        (1000, float("nan"), 10, 3, 20, 50),
        (1000, 800, float("nan"), 3, 20, 50),
        (1000, 800, float("inf"), 3, 20, 50),
    ],
)
def test_invalid_inputs_are_rejected(args):
    with pytest.raises(InvalidGeometryError):
        compute_geometry(*args)


def test_invalid_geometry_is_a_value_error():
    assert issubclass(InvalidGeometryError, ValueError)


def test_describe_geometry_mentions_bars():
    text = describe_geometry(compute_geometry(1000, 800, 10, 3, 25, 50))
    assert "title bar 102px" in text
    assert "1051x1025" in text
