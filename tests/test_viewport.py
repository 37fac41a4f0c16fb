import pytest

from mandelzoom import Viewport


def test_grid_size_follows_resolution():
    assert Viewport(width=640, height=480, resolution=50).grid_size() == (320, 240)
    assert Viewport(width=640, height=480).grid_size() == (640, 480)


def test_grid_size_never_drops_below_one():
    assert Viewport(width=50, height=3, resolution=1).grid_size() == (1, 1)


def test_zoom_at_recenters_on_clicked_point():
    viewport = Viewport(width=100, height=100, zoom=200)
    zoomed = viewport.zoom_at(60, 40, 2)
    assert (zoomed.pos_x, zoomed.pos_y) == (-10, 10)
    assert zoomed.zoom == 400
    assert (viewport.pos_x, viewport.pos_y, viewport.zoom) == (0, 0, 200)


def test_zoom_at_scales_existing_pan_offset():
    zoomed = Viewport(pos_x=3, pos_y=-1, width=100, height=100).zoom_at(50, 50, 2)
    assert (zoomed.pos_x, zoomed.pos_y, zoomed.zoom) == (6, -2, 400)


def test_zoom_at_with_larger_factor():
    zoomed = Viewport(width=100, height=100).zoom_at(60, 40, 3)
    assert (zoomed.pos_x, zoomed.pos_y, zoomed.zoom) == (-20, 20, 600)


def test_zoom_keeps_big_integers_exact():
    viewport = Viewport(width=100, height=100)
    for _ in range(300):
        viewport = viewport.zoom_at(51, 50, 2)
    assert viewport.zoom == 200 * 2 ** 300
    assert viewport.pos_x == -(2 ** 300 - 1)


@pytest.mark.parametrize("factor", [1, 0, -2, 2.0, True])
def test_zoom_at_rejects_bad_factor(factor):
    with pytest.raises(ValueError):
        Viewport(width=100, height=100).zoom_at(10, 10, factor)


def test_zoom_at_rejects_point_outside_grid():
    with pytest.raises(ValueError):
        Viewport(width=100, height=100).zoom_at(100, 10)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"zoom": 0},
        {"zoom": -5},
        {"zoom": 200.0},
        {"zoom": True},
        {"pos_x": 1.5},
        {"pos_y": 2.0},
        {"resolution": 0},
        {"resolution": 101},
        {"resolution": 50.7},
        {"width": 0},
        {"height": -1},
    ],
)
def test_invalid_viewports_are_rejected(kwargs):
    with pytest.raises(ValueError):
        Viewport(**kwargs)


def test_mutators_validate_before_returning():
    viewport = Viewport()
    with pytest.raises(ValueError):
        viewport.with_resolution(0)
    with pytest.raises(ValueError):
        viewport.with_resolution(50.7)
    with pytest.raises(ValueError):
        viewport.resized(0, 10)
    assert viewport == Viewport()


def test_screen_to_grid_scales_by_resolution():
    viewport = Viewport(width=640, height=480, resolution=50)
    assert viewport.screen_to_grid(100, 50) == (50, 25)
    assert viewport.screen_to_grid(639.9, 479.9) == (319, 239)
    with pytest.raises(ValueError):
        viewport.screen_to_grid(640, 0)
    with pytest.raises(ValueError):
        viewport.screen_to_grid(-1, 0)


def test_pan_moves_offset_by_grid_delta():
    viewport = Viewport(width=200, height=100, resolution=50)
    dx, dy = viewport.screen_delta_to_grid(20, -10)
    assert (dx, dy) == (10, -5)
    panned = viewport.pan(dx, dy)
    assert (panned.pos_x, panned.pos_y) == (10, -5)
    assert panned.zoom == viewport.zoom
