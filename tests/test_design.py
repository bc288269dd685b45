import pytest
from ssto_sim import constants as C
from ssto_sim.design import EngineMode, FlightPlan, PlaneDesign, Waypoint, is_orbit_achieved


# ============================================================================
# EngineMode / Waypoint
# ============================================================================

@pytest.mark.parametrize("name,expected", [
    ("ramjet", EngineMode.RAMJET),
    ("Ejector-Ramjet", EngineMode.EJECTOR_RAMJET),
    ("ejector_ramjet", EngineMode.EJECTOR_RAMJET),
    ("SCRAMJET", EngineMode.SCRAMJET),
    (" auto ", EngineMode.AUTO),
])
def test_engine_mode_from_name(name, expected):
    assert EngineMode.from_name(name) is expected


def test_engine_mode_from_name_unknown():
    with pytest.raises(ValueError):
        EngineMode.from_name("warp")


def test_waypoint_mode_windows():
    assert Waypoint(60000.0, 3.0, EngineMode.RAMJET).is_valid()
    assert not Waypoint(60000.0, 7.0, EngineMode.RAMJET).is_valid()
    assert not Waypoint(90000.0, 4.0, EngineMode.SCRAMJET).is_valid()
    assert Waypoint(90000.0, 16.0, EngineMode.SCRAMJET).is_valid()
    assert Waypoint(0.0, 0.0, EngineMode.ROCKET).is_valid()
    assert Waypoint(0.0, 0.0).is_valid()


def test_waypoint_negative_values_invalid():
    assert not Waypoint(-1.0, 2.0).is_valid()
    assert not Waypoint(1000.0, -0.5).is_valid()


def test_waypoint_altitude_m():
    assert Waypoint(1000.0, 1.0).altitude_m == pytest.approx(304.8)


# ============================================================================
# Orbit predicate (feet / meter boundary)
# ============================================================================

def test_orbit_boundary_exact():
    boundary_ft = C.ORBIT_ALTITUDE / C.FEET_TO_METERS
    assert boundary_ft == pytest.approx(656167.98, abs=0.01)
    assert is_orbit_achieved(656167.98, 24.0)
    assert not is_orbit_achieved(656167.97, 24.0)


def test_orbit_requires_both_conditions():
    assert not is_orbit_achieved(700000.0, 23.9)
    assert not is_orbit_achieved(600000.0, 30.0)
    assert is_orbit_achieved(700000.0, 25.0)


# ============================================================================
# FlightPlan
# ============================================================================

def test_flight_plan_starts_with_ground():
    plan = FlightPlan()
    assert len(plan) == 1
    ground = plan.waypoints[0]
    assert ground.altitude == 0.0
    assert ground.speed == 0.0


def test_flight_plan_ground_only_mode_editable():
    plan = FlightPlan()
    plan.update_waypoint(0, Waypoint(5000.0, 5.0, EngineMode.ROCKET))
    ground = plan.waypoints[0]
    assert ground.altitude == 0.0
    assert ground.speed == 0.0
    assert ground.engine_mode is EngineMode.ROCKET


def test_flight_plan_cannot_remove_or_insert_before_ground():
    plan = FlightPlan([Waypoint(60000.0, 3.0)])
    with pytest.raises(IndexError):
        plan.remove_waypoint(0)
    with pytest.raises(IndexError):
        plan.insert_waypoint(Waypoint(1000.0, 1.0), 0)


def test_flight_plan_edit_operations():
    plan = FlightPlan([Waypoint(60000.0, 3.0)])
    plan.insert_waypoint(Waypoint(30000.0, 1.5), 1)
    assert [wp.altitude for wp in plan.waypoints] == [0.0, 30000.0, 60000.0]
    plan.remove_waypoint(1)
    assert len(plan) == 2
    plan.reset()
    assert len(plan) == 1


def test_waypoints_returns_copy():
    plan = FlightPlan()
    plan.waypoints.append(Waypoint(1.0, 1.0))
    assert len(plan) == 1


def test_orbital_rocket_climb_valid_for_flight():
    plan = FlightPlan.orbital_rocket_climb()
    assert len(plan) == 2
    assert plan.waypoints[-1].engine_mode is EngineMode.ROCKET
    assert plan.is_valid_for_flight()
    assert not FlightPlan().is_valid_for_flight()
    assert not FlightPlan([Waypoint(60000.0, 3.0)]).is_valid_for_flight()


# ============================================================================
# PlaneDesign
# ============================================================================

def test_default_design_multipliers():
    design = PlaneDesign.default()
    assert design.drag_multiplier() == pytest.approx(0.7)
    assert design.thermal_limit_multiplier() == pytest.approx(0.97)
    assert design.heating_rate_multiplier() == pytest.approx(1.0 / 0.97)


def test_optimal_design_tolerates_more_heat():
    optimal = PlaneDesign.optimal()
    assert optimal.thermal_limit_multiplier() == pytest.approx(1.08)
    assert optimal.thermal_limit_multiplier() > PlaneDesign.default().thermal_limit_multiplier()


def test_design_multipliers_clamped():
    extreme = PlaneDesign(tilt_angle=45.0, sweep_angle=180.0, position=500.0)
    assert extreme.thermal_limit_multiplier() == pytest.approx(0.6)
    for tilt in (-45.0, 0.0, 30.0):
        for sweep in (40.0, 92.0, 140.0):
            for position in (0.0, 174.0, 400.0):
                design = PlaneDesign(tilt, sweep, position)
                assert 0.7 <= design.drag_multiplier() <= 2.0
                assert 0.6 <= design.thermal_limit_multiplier() <= 1.3
                assert 0 <= design.score() <= 100


def test_design_summary_format():
    summary = PlaneDesign.default().summary()
    assert summary.startswith("Drag: -30%")
    assert "Thermal Limit:" in summary
