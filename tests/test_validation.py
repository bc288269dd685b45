import pytest
import numpy as np
from types import SimpleNamespace

from ssto_sim import validation
from ssto_sim import constants as C
from ssto_sim.design import EngineMode, FlightPlan, Waypoint
from ssto_sim.geometry import get_geometry


@pytest.fixture(scope="module")
def geometry():
    return get_geometry()


def _fake_geometry(normals, areas):
    normals = np.asarray(normals, dtype=float)
    return SimpleNamespace(panel_count=len(normals), normals=normals, areas=np.asarray(areas, dtype=float))


# ============================================================================
# check_geometry tests
# ============================================================================

def test_check_geometry_valid(geometry):
    assert validation.check_geometry(geometry)


def test_check_geometry_no_panels():
    with pytest.raises(validation.ValidationError):
        validation.check_geometry(_fake_geometry(np.empty((0, 3)), []))


def test_check_geometry_non_unit_normal():
    fake = _fake_geometry([[0.0, 0.0, 1.0], [2.0, 0.0, 0.0]], [1.0, 1.0])
    with pytest.raises(validation.ValidationError):
        validation.check_geometry(fake)


def test_check_geometry_custom_tolerance():
    fake = _fake_geometry([[1.001, 0.0, 0.0]], [1.0])
    with pytest.raises(validation.ValidationError):
        validation.check_geometry(fake, tolerance=1e-6)
    assert validation.check_geometry(fake, tolerance=0.01)


def test_check_geometry_negative_area():
    fake = _fake_geometry([[0.0, 0.0, 1.0]], [-1.0])
    with pytest.raises(validation.ValidationError):
        validation.check_geometry(fake)


# ============================================================================
# Flight plan tests
# ============================================================================

def test_check_flight_plan_valid():
    assert validation.check_flight_plan(FlightPlan.orbital_rocket_climb())


def test_check_flight_plan_no_segments():
    with pytest.raises(validation.ValidationError):
        validation.check_flight_plan(FlightPlan())


def test_check_flight_plan_invalid_waypoint():
    plan = FlightPlan([Waypoint(60000.0, 7.0, EngineMode.RAMJET)])
    with pytest.raises(validation.ValidationError, match="Waypoint 1 invalid"):
        validation.check_flight_plan(plan)


def test_validate_flight_plan_no_abort():
    ok, message = validation.validate_flight_plan(FlightPlan(), abort_on_error=False)
    assert not ok
    assert "no segments" in message
    assert validation.validate_flight_plan(FlightPlan.orbital_rocket_climb()) == (True, None)


def test_validate_flight_plan_abort():
    with pytest.raises(validation.ValidationError):
        validation.validate_flight_plan(FlightPlan())


# ============================================================================
# Atmosphere continuity
# ============================================================================

def test_atmosphere_continuity_at_layer_boundaries():
    for boundary in C.US76_ALTITUDES[1:-1]:
        assert validation.check_atmosphere_continuity(boundary=float(boundary))


# ============================================================================
# Jet envelope
# ============================================================================

def test_jet_envelope_altitude_limit():
    is_safe, max_temp, margin, message = validation.validate_jet_envelope(
        Waypoint(0.0, 0.0), Waypoint(100000.0, 3.0))
    assert not is_safe
    assert max_temp == 0.0
    assert margin == pytest.approx(-(100000.0 * C.FEET_TO_METERS - C.JET_MAX_OPERATING_ALTITUDE))
    assert message.startswith("ALTITUDE LIMIT EXCEEDED")


def test_jet_envelope_low_and_slow_is_safe():
    is_safe, max_temp, margin, message = validation.validate_jet_envelope(
        Waypoint(0.0, 0.0), Waypoint(10000.0, 0.5))
    assert is_safe
    assert margin > 0.0
    assert message.startswith("Thermal Check: OK")


def test_jet_envelope_thermal_limit():
    is_safe, max_temp, margin, message = validation.validate_jet_envelope(
        Waypoint(20000.0, 3.0), Waypoint(80000.0, 7.0))
    assert not is_safe
    assert max_temp > 600.0
    assert margin < 0.0
    assert message.startswith("THERMAL LIMIT EXCEEDED")


# ============================================================================
# Suite
# ============================================================================

def test_run_validation_suite_passes(geometry):
    results = validation.run_validation_suite(geometry, FlightPlan.orbital_rocket_climb())
    assert results['all_passed']
    assert results['geometry'] == 'PASS'
    assert results['atmosphere_continuity'] == 'PASS'
    assert results['flight_plan'] == 'PASS'


def test_run_validation_suite_reports_failures(geometry):
    results = validation.run_validation_suite(geometry, FlightPlan())
    assert not results['all_passed']
    assert results['flight_plan'].startswith('FAIL')
    assert results['geometry'] == 'PASS'


def test_run_validation_suite_without_plan(geometry):
    results = validation.run_validation_suite(geometry)
    assert 'flight_plan' not in results
    assert results['all_passed']
