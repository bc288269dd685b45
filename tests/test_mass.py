import pytest
import numpy as np

from ssto_sim import mass, constants as C
from ssto_sim.design import EngineMode, FlightPlan, PlaneDesign, Waypoint
from ssto_sim.geometry import AreaBreakdown, get_geometry


@pytest.fixture(scope="module")
def geometry():
    return get_geometry()


def test_efficiency_multiplier():
    assert mass.aerodynamic_efficiency_multiplier(C.REFERENCE_LIFT_TO_DRAG) == 1.0
    assert mass.aerodynamic_efficiency_multiplier(20.0) == 1.0
    assert mass.aerodynamic_efficiency_multiplier(4.0) == pytest.approx(1.25)
    assert mass.aerodynamic_efficiency_multiplier(0.0) == pytest.approx(1.5)


def test_structural_weight():
    assert mass.calculate_structural_weight(1000.0) == pytest.approx(40.0 * 100.0)
    assert mass.calculate_structural_weight(1000.0, 4.0) == pytest.approx(5000.0)
    assert mass.calculate_structural_weight(-5.0) == 0.0


def test_tps_mass_densities_and_growth():
    areas = AreaBreakdown(1.0, 1.0, 1.0, 1.0, 1.0, 1.0)
    base = 12.0 + 10.0 + 2.0 + 6.0 + 8.0 + 3.0
    assert mass.calculate_tps_mass(areas, 600.0) == pytest.approx(base)
    assert mass.calculate_tps_mass(areas, 500.0) == pytest.approx(base)
    assert mass.calculate_tps_mass(areas, 800.0) == pytest.approx(base * 1.2)


def test_scale_area_breakdown():
    scaled = mass.scale_area_breakdown(AreaBreakdown(1.0, 2.0, 3.0, 4.0, 5.0, 6.0), 2.0)
    assert scaled == AreaBreakdown(2.0, 4.0, 6.0, 8.0, 10.0, 12.0)


def test_engine_weights():
    assert mass.jet_engine_weight(44400.0) == pytest.approx(1000.0)
    assert mass.rocket_engine_weight(180000.0) == pytest.approx(1000.0)


def test_required_thrust_floor():
    weight = 10000.0 * 9.80665
    # Hovering at zero speed: only the thrust-to-weight floor applies
    assert mass.calculate_required_thrust(10000.0, 0.0, 0.0, PlaneDesign.default()) == pytest.approx(0.3 * weight, rel=1e-2)


def test_peak_thrust_resolves_auto():
    waypoints = [Waypoint(0.0, 0.0), Waypoint(656200.0, 24.0, EngineMode.ROCKET)]
    peaks = mass.calculate_peak_thrust_requirements(waypoints, 50000.0, PlaneDesign.default())
    assert peaks["jet"] > 0.0
    assert peaks["rocket"] > 0.0
    assert peaks["ramjet"] == 0.0
    assert peaks["scramjet"] == 0.0


def test_total_engine_weight_fixed_ramjet_scramjet():
    waypoints = [
        Waypoint(60000.0, 3.0, EngineMode.RAMJET),
        Waypoint(100000.0, 8.0, EngineMode.SCRAMJET),
    ]
    assert mass.calculate_total_engine_weight(waypoints, 50000.0, PlaneDesign.default()) == \
        pytest.approx(C.RAMJET_WEIGHT + C.SCRAMJET_WEIGHT)


def test_mass_breakdown_positive(geometry):
    plan = FlightPlan.orbital_rocket_climb()
    breakdown = mass.calculate_mass_breakdown(geometry.volume, plan.waypoints,
                                              PlaneDesign.default(), geometry)
    assert breakdown.structure > 0.0
    assert breakdown.thermal_protection > 0.0
    assert breakdown.engines > 0.0
    assert breakdown.cargo == C.CARGO_MASS
    assert np.isfinite(breakdown.total)
    assert breakdown.total == pytest.approx(breakdown.structure + breakdown.thermal_protection
                                            + breakdown.engines + breakdown.cargo)
    assert "Dry mass" in breakdown.summary()


def test_mass_breakdown_rejects_negative_volume(geometry):
    with pytest.raises(ValueError):
        mass.calculate_mass_breakdown(-1.0, [Waypoint(0.0, 0.0)], PlaneDesign.default(), geometry)


def test_hotter_sizing_temperature_grows_tps(geometry):
    waypoints = FlightPlan.orbital_rocket_climb().waypoints
    cool = mass.calculate_mass_breakdown(geometry.volume, waypoints, PlaneDesign.default(), geometry, 600.0)
    hot = mass.calculate_mass_breakdown(geometry.volume, waypoints, PlaneDesign.default(), geometry, 1000.0)
    assert hot.thermal_protection == pytest.approx(1.4 * cool.thermal_protection)


def test_adjusted_dry_mass():
    assert mass.adjusted_dry_mass(500.0) == C.FALLBACK_DRY_MASS
    assert mass.adjusted_dry_mass(700.0) == pytest.approx(C.FALLBACK_DRY_MASS * 1.003)


def test_generate_aircraft_configuration():
    config = mass.generate_aircraft_configuration(8000.0, 10000.0, 0.0, 300000.0)
    assert config.engine_count == 2
    assert config.length == pytest.approx(3.0 * config.wingspan)
    assert config.height == pytest.approx(0.3 * config.wingspan)
    assert config.jet_fuel_volume == pytest.approx(100.0)
    assert config.total_fuel_mass == pytest.approx(18000.0)
    assert config.total_mass == pytest.approx(config.dry_mass + config.propellant_mass)
