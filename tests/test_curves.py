import pytest
import numpy as np
from ssto_sim import curves


def test_quadratic_bezier_endpoints():
    p0, p1, p2 = (0.0, 0.0), (5.0, 10.0), (10.0, 0.0)
    assert curves.quadratic_bezier(0.0, p0, p1, p2) == pytest.approx(p0)
    assert curves.quadratic_bezier(1.0, p0, p1, p2) == pytest.approx(p2)
    assert curves.quadratic_bezier(0.5, p0, p1, p2) == pytest.approx((5.0, 5.0))


def test_cubic_bezier_straight_line():
    pts = [(0.0, 0.0), (1.0, 1.0), (2.0, 2.0), (3.0, 3.0)]
    x, y = curves.cubic_bezier(0.5, *pts)
    assert x == pytest.approx(1.5)
    assert y == pytest.approx(1.5)


def test_interpolate_spline_passes_through_points():
    points = [(0.0, 0.0), (10.0, 5.0), (20.0, 0.0), (30.0, 5.0)]
    steps = 4
    samples = curves.interpolate_spline(points, steps)
    assert len(samples) == steps * (len(points) - 1) + 1
    for i, p in enumerate(points):
        assert samples[i * steps] == pytest.approx(p)


def test_interpolate_spline_short_input():
    assert curves.interpolate_spline([(1.0, 2.0)], 4) == [(1.0, 2.0)]


def test_invert_monotonic_curve_line():
    def line(t):
        return curves.quadratic_bezier(t, (0.0, 0.0), (50.0, 25.0), (100.0, 50.0))
    for x in (10.0, 37.5, 80.0):
        assert curves.invert_monotonic_curve(line, x) == pytest.approx(x / 2.0, abs=0.1)


def test_side_profile_heights_mid_body():
    profile = curves.SideProfile.default()
    top, bottom = profile.heights_at(400.0)
    assert top == pytest.approx(260.0, abs=0.5)
    assert bottom == pytest.approx(100.0)
    assert top > bottom


def test_planform_half_width():
    planform = curves.TopViewPlanform.default()
    assert planform.half_width_at(300.0) == pytest.approx(100.0, abs=1.0)
    assert planform.half_width_at(900.0) == pytest.approx(50.0)
    assert planform.half_width_at(60.0) < planform.half_width_at(200.0)


def test_planform_is_frozen():
    planform = curves.TopViewPlanform.default()
    with pytest.raises(Exception):
        planform.aircraft_length = 10.0


def test_cross_section_unit_shape_bounds():
    shape = np.array(curves.CrossSection.default().unit_shape())
    assert shape.shape[1] == 2
    assert np.all(np.abs(shape) <= 1.0 + 1e-9)
    # Loop starts on the lower curve
    assert shape[0, 1] < 0.0
    assert np.max(shape[:, 1]) == pytest.approx(1.0)
    assert np.min(shape[:, 1]) == pytest.approx(-1.0)
