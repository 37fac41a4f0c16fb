import math

import pytest

from mandelzoom import BigNumberIterator, Viewport, escape_count, iteration_bound, superlog2


def test_superlog2_matches_log2_for_small_values():
    assert superlog2(1024) == 10.0
    assert superlog2(200) == pytest.approx(math.log2(200))


def test_superlog2_handles_values_beyond_double_range():
    assert superlog2(1 << 4000) == 4000.0
    assert superlog2(3 << 5000) == pytest.approx(5000 + math.log2(3))


def test_superlog2_rejects_non_positive():
    with pytest.raises(ValueError):
        superlog2(0)


def test_iteration_bound_grows_logarithmically():
    assert iteration_bound(200) == 382
    assert iteration_bound(1024) == 500
    assert iteration_bound(2048) == 550
    assert iteration_bound(1) == 0


def test_escape_count_uses_sum_heuristic():
    # x runs 0 -> 300 -> 750 -> 3112, and 3112 > 5 * 200 at loop index 3.
    assert escape_count(300, 0, 200, 382) == 3


def test_escape_count_bounded_orbit_is_zero():
    assert escape_count(0, 0, 200, 382) == 0
    assert escape_count(-100, 0, 200, 382) == 0


def test_escape_count_stops_at_bound():
    assert escape_count(300, 0, 200, 2) == 0


def test_plane_point_subtracts_half_grid_and_pan():
    iterator = BigNumberIterator(Viewport(width=10, height=8))
    assert iterator.plane_point(0) == (-5, -4)
    assert iterator.plane_point(4 * 10 + 5) == (0, 0)

    panned = BigNumberIterator(Viewport(pos_x=3, pos_y=-2, width=10, height=8))
    assert panned.plane_point(0) == (-8, -2)


def test_compute_color_counts_evaluations():
    viewport = Viewport(width=640, height=480)
    iterator = BigNumberIterator(viewport)
    index = 240 * 640 + 320 + 300
    assert iterator.compute_color(index) == 3
    assert iterator.compute_color(index) == 3
    assert iterator.evaluations == 2


def test_deep_zoom_bound_and_center_cell():
    zoom = 200 * 2 ** 200
    iterator = BigNumberIterator(Viewport(zoom=zoom, width=4, height=4))
    assert iterator.bound == 10382
    assert iterator.compute_color(2 * 4 + 2) == 0
