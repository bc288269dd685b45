"""
SSTO Spaceplane Simulation - Hull Curve Descriptors

This module defines the three parametric curve descriptions that define a
hull and the curve utilities shared by every geometry consumer:
- Side profile (inlet / engine / nozzle / top Bezier control points)
- Top-view planform (left-side Bezier control points + aircraft length)
- Cross-section (top / bottom spline points)
- Quadratic and cubic Bezier evaluation
- Catmull-Rom style spline interpolation
- Monotonic parametric curve inversion at a given x (bisection)

All points are in canvas units. The planform's aircraft_length (meters) is
the single authoritative scale; canvas-to-meter scaling is isotropic.
"""

from dataclasses import dataclass, field
from typing import Callable, List, Sequence, Tuple

from . import constants as C

Point = Tuple[float, float]


# =============================================================================
# CURVE EVALUATION
# =============================================================================

def quadratic_bezier(t: float, p0: Point, p1: Point, p2: Point) -> Point:
    u = 1.0 - t
    x = u * u * p0[0] + 2.0 * u * t * p1[0] + t * t * p2[0]
    y = u * u * p0[1] + 2.0 * u * t * p1[1] + t * t * p2[1]
    return x, y


def cubic_bezier(t: float, p0: Point, p1: Point, p2: Point, p3: Point) -> Point:
    u = 1.0 - t
    uu = u * u
    tt = t * t
    x = uu * u * p0[0] + 3.0 * uu * t * p1[0] + 3.0 * u * tt * p2[0] + tt * t * p3[0]
    y = uu * u * p0[1] + 3.0 * uu * t * p1[1] + 3.0 * u * tt * p2[1] + tt * t * p3[1]
    return x, y


def catmull_rom_control_points(p0: Point, p1: Point, p2: Point, p3: Point,
                               tension: float = 0.2) -> Tuple[Point, Point]:
    """
    Cubic Bezier control points for the span p1 -> p2.

    Tangents are chord-length weighted so unevenly spaced points do not
    overshoot.

    Args:
        p0, p1, p2, p3: Consecutive spline points (p0/p3 are neighbours)
        tension: Fraction of the tangent used for the handles

    Returns:
        (cp1, cp2) Bezier handles
    """
    d1 = max(1e-4, _distance(p0, p1))
    d2 = max(1e-4, _distance(p1, p2))
    d3 = max(1e-4, _distance(p2, p3))

    m1 = (p2[0] - p1[0] + (p1[0] - p0[0]) * (d2 / d1),
          p2[1] - p1[1] + (p1[1] - p0[1]) * (d2 / d1))
    m2 = (p2[0] - p1[0] + (p3[0] - p2[0]) * (d2 / d3),
          p2[1] - p1[1] + (p3[1] - p2[1]) * (d2 / d3))

    cp1 = (p1[0] + tension * m1[0], p1[1] + tension * m1[1])
    cp2 = (p2[0] - tension * m2[0], p2[1] - tension * m2[1])
    return cp1, cp2


def interpolate_spline(points: Sequence[Point], steps: int) -> List[Point]:
    """Sample a smooth spline through points, `steps` samples per span plus the last point."""
    if len(points) < 2:
        return list(points)

    n = len(points)
    result = []
    for i in range(n - 1):
        p0 = points[max(i - 1, 0)]
        p1 = points[i]
        p2 = points[i + 1]
        p3 = points[min(i + 2, n - 1)]
        cp1, cp2 = catmull_rom_control_points(p0, p1, p2, p3)
        for k in range(steps):
            result.append(cubic_bezier(k / steps, p1, cp1, cp2, p2))
    result.append(tuple(points[-1]))
    return result


def invert_monotonic_curve(curve: Callable[[float], Point], x: float,
                           iterations: int = C.BISECTION_ITERATIONS,
                           tolerance: float = 0.1) -> float:
    """
    Evaluate y on a parametric curve whose x(t) is monotonically increasing.

    Bisection on t until x(t) is within tolerance of the target or the
    iteration budget is spent.

    Args:
        curve: t -> (x, y) for t in [0, 1]
        x: Target abscissa (canvas units)
        iterations: Maximum bisection steps
        tolerance: Acceptable |x(t) - x| (canvas units)

    Returns:
        y at the located parameter
    """
    t_min, t_max = 0.0, 1.0
    t = 0.5
    for _ in range(iterations):
        cx, _ = curve(t)
        if abs(cx - x) < tolerance:
            break
        if cx < x:
            t_min = t
        else:
            t_max = t
        t = 0.5 * (t_min + t_max)
    return curve(t)[1]


def _distance(a: Point, b: Point) -> float:
    return ((b[0] - a[0]) ** 2 + (b[1] - a[1]) ** 2) ** 0.5


# =============================================================================
# DESCRIPTORS
# =============================================================================

@dataclass(frozen=True)
class SideProfile:
    """Fuselage side view. Canvas y points up; bottom line carries inlet, engine and nozzle."""
    front_start: Point = (50.0, 200.0)
    front_control: Point = (150.0, 80.0)
    front_end: Point = (250.0, 100.0)
    engine_end: Point = (490.0, 100.0)
    exhaust_control: Point = (650.0, 80.0)
    exhaust_end: Point = (750.0, 200.0)
    top_start: Point = (50.0, 200.0)
    top_control: Point = (400.0, 320.0)
    top_end: Point = (750.0, 200.0)
    engine_length: float = 240.0
    max_height: float = 120.0

    @classmethod
    def default(cls) -> "SideProfile":
        return cls()

    def heights_at(self, x: float) -> Tuple[float, float]:
        """(top, bottom) canvas heights at longitudinal canvas position x."""
        if x <= self.front_end[0]:
            bottom = invert_monotonic_curve(
                lambda t: quadratic_bezier(t, self.front_start, self.front_control, self.front_end),
                x)
        elif x <= self.engine_end[0]:
            span = max(1e-9, self.engine_end[0] - self.front_end[0])
            frac = (x - self.front_end[0]) / span
            bottom = self.front_end[1] + frac * (self.engine_end[1] - self.front_end[1])
        else:
            bottom = invert_monotonic_curve(
                lambda t: quadratic_bezier(t, self.engine_end, self.exhaust_control, self.exhaust_end),
                x)

        top = invert_monotonic_curve(
            lambda t: quadratic_bezier(t, self.top_start, self.top_control, self.top_end),
            x)
        return top, bottom


@dataclass(frozen=True)
class TopViewPlanform:
    """Left half of the top view, mirrored about y = 0."""
    nose_tip: Point = (50.0, 0.0)
    front_control_left: Point = (150.0, -30.0)
    mid_left: Point = (300.0, -100.0)
    rear_control_left: Point = (500.0, -80.0)
    tail_left: Point = (750.0, -50.0)
    wing_start_position: float = 0.3
    wing_span: float = 0.0
    aircraft_length: float = C.DEFAULT_AIRCRAFT_LENGTH  # m

    @classmethod
    def default(cls) -> "TopViewPlanform":
        return cls()

    def half_width_at(self, x: float) -> float:
        """Half-width (canvas units) at longitudinal canvas position x."""
        if x <= self.mid_left[0]:
            y = invert_monotonic_curve(
                lambda t: quadratic_bezier(t, self.nose_tip, self.front_control_left, self.mid_left),
                x)
        elif x <= self.tail_left[0]:
            y = invert_monotonic_curve(
                lambda t: quadratic_bezier(t, self.mid_left, self.rear_control_left, self.tail_left),
                x)
        else:
            y = self.tail_left[1]
        return abs(y)


def _default_top() -> Tuple[Point, ...]:
    return ((100.0, 250.0), (200.0, 190.0), (400.0, 160.0), (600.0, 200.0), (700.0, 250.0))


def _default_bottom() -> Tuple[Point, ...]:
    return ((100.0, 250.0), (200.0, 280.0), (400.0, 290.0), (600.0, 270.0), (700.0, 250.0))


@dataclass(frozen=True)
class CrossSection:
    """Fuselage cross-section spline points. Canvas y points down (smaller y is higher)."""
    top_points: Tuple[Point, ...] = field(default_factory=_default_top)
    bottom_points: Tuple[Point, ...] = field(default_factory=_default_bottom)

    @classmethod
    def default(cls) -> "CrossSection":
        return cls()

    def unit_shape(self, steps: int = C.SPLINE_STEPS) -> List[Point]:
        """
        Closed unit loop in [-1, 1] x [-1, 1] with +z up.

        Ordered bottom curve left to right, then top curve right to left,
        without repeating the shared endpoints. This winding makes panel
        normals built from consecutive ribs point outward.
        """
        top = interpolate_spline(self.top_points, steps)
        bottom = interpolate_spline(self.bottom_points, steps)
        all_points = top + bottom

        xs = [p[0] for p in all_points]
        ys = [p[1] for p in all_points]
        range_x = max(max(xs) - min(xs), 1.0)
        range_y = max(max(ys) - min(ys), 1.0)
        cx = 0.5 * (max(xs) + min(xs))
        cy = 0.5 * (max(ys) + min(ys))

        def normalise(p: Point) -> Point:
            return (p[0] - cx) / range_x * 2.0, -(p[1] - cy) / range_y * 2.0

        loop = [normalise(p) for p in bottom]
        upper = [normalise(p) for p in reversed(top)]
        if len(upper) > 2:
            upper = upper[1:-1]
        return loop + upper
