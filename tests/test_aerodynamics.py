import pytest
import numpy as np

from ssto_sim import constants as C
from ssto_sim.aerodynamics import AerodynamicSolver, simplified_drag
from ssto_sim.atmosphere import compute_atmosphere_properties
from ssto_sim.geometry import get_geometry


@pytest.fixture(scope="module")
def solver():
    return AerodynamicSolver(get_geometry())


def _cd_at(solver, mach, altitude_ft=30000.0, required_lift=0.0):
    a = compute_atmosphere_properties(altitude_ft * C.FEET_TO_METERS)[3]
    return solver.solve_trim_condition(mach, altitude_ft, mach * a, required_lift).cd


def test_zero_dynamic_pressure_gives_zero_forces(solver):
    forces = solver.solve_trim_condition(0.0, 0.0, 0.0, 1.0e6)
    assert forces.lift == 0.0
    assert forces.drag == 0.0
    assert forces.lift_to_drag == 0.0
    assert len(forces.pressure_coefficients) == solver.geometry.panel_count


def test_transonic_drag_rise(solver):
    cd_subsonic = _cd_at(solver, 0.7)
    cd_transonic = _cd_at(solver, 1.0)
    cd_supersonic = _cd_at(solver, 3.0)
    assert cd_transonic > cd_subsonic
    assert cd_transonic > cd_supersonic


def test_area_rule_only_in_transonic_band(solver):
    assert solver.area_rule_penalty(0.5, 1000.0) == 0.0
    assert solver.area_rule_penalty(2.0, 1000.0) == 0.0
    assert solver.area_rule_penalty(1.1, 1000.0) >= 0.0


def test_drag_breakdown_sums_to_total(solver):
    a = compute_atmosphere_properties(20000.0)[3]
    forces = solver.solve_trim_condition(6.0, 20000.0 * C.METERS_TO_FEET, 6.0 * a, 2.0e6)
    assert forces.breakdown.total == pytest.approx(forces.drag)
    assert forces.breakdown.skin_friction > 0.0
    assert forces.breakdown.induced > 0.0
    assert forces.drag > 0.0


def test_trim_alpha_bounded(solver):
    a = compute_atmosphere_properties(30000.0)[3]
    forces = solver.solve_trim_condition(8.0, 30000.0 * C.METERS_TO_FEET, 8.0 * a, 1.0e9)
    assert np.degrees(C.MIN_ALPHA) <= forces.angle_of_attack <= np.degrees(C.MAX_ALPHA)


def test_lift_increases_with_required_lift(solver):
    a = compute_atmosphere_properties(15000.0)[3]
    altitude_ft = 15000.0 * C.METERS_TO_FEET
    low = solver.solve_trim_condition(3.0, altitude_ft, 3.0 * a, 1.0e5)
    high = solver.solve_trim_condition(3.0, altitude_ft, 3.0 * a, 1.0e6)
    assert high.angle_of_attack > low.angle_of_attack


def test_hypersonic_pressure_coefficients(solver):
    mach = 10.0
    cp = solver.pressure_coefficients(mach, np.radians(5.0))
    cp_max = 2.0 / (C.GAMMA * mach * mach)
    assert np.all(cp >= C.LEEWARD_BASE_CP - 1e-12)
    assert np.all(cp <= cp_max + 1e-12)
    assert np.any(cp == C.LEEWARD_BASE_CP)


def test_supersonic_cp_clipped(solver):
    cp = solver.pressure_coefficients(3.0, np.radians(10.0))
    assert np.all(cp >= C.VACUUM_CP - 1e-12)
    assert np.all(cp <= 2.0 / (C.GAMMA * 9.0) + 1e-12)


def test_lift_curve_slope_regimes(solver):
    assert solver.lift_curve_slope(1.0) == pytest.approx(1.5 * np.pi)
    assert solver.lift_curve_slope(3.0) == pytest.approx(4.0 / np.sqrt(8.0))
    assert solver.lift_curve_slope(10.0) == 2.0
    assert solver.lift_curve_slope(0.5) < 2.0 * np.pi


def test_oswald_efficiency():
    assert AerodynamicSolver.oswald_efficiency(0.5) == 0.85
    assert AerodynamicSolver.oswald_efficiency(1.0) == 0.75
    assert AerodynamicSolver.oswald_efficiency(6.0) == 0.60


def test_simplified_drag():
    expected = 0.5 * 1.225 * 100.0 ** 2 * C.SIZING_DRAG_COEFFICIENT * C.SIZING_REFERENCE_AREA
    assert simplified_drag(0.0, 100.0) == pytest.approx(expected, rel=1e-3)
    assert simplified_drag(0.0, 100.0, 2.0) == pytest.approx(2.0 * simplified_drag(0.0, 100.0))
