import pytest

from ssto_sim import constants as C
from ssto_sim import thermal
from ssto_sim.atmosphere import compute_atmosphere_properties
from ssto_sim.design import PlaneDesign


def test_stationary_wall_is_ambient():
    assert thermal.calculate_leading_edge_temperature(0.0, 0.0) == pytest.approx(15.0)


def test_temperature_rises_with_speed():
    t_slow = thermal.calculate_leading_edge_temperature(30000.0, 1000.0)
    t_fast = thermal.calculate_leading_edge_temperature(30000.0, 3000.0)
    assert t_fast > t_slow


def test_temperature_capped_at_adiabatic_wall():
    altitude, velocity = 5000.0, 400.0
    ambient, _, _, a = compute_atmosphere_properties(altitude)
    mach = velocity / a
    cap = ambient * (1.0 + 0.2 * mach * mach) - C.KELVIN_OFFSET
    assert thermal.calculate_leading_edge_temperature(altitude, velocity) <= cap + 1e-9


def test_calculate_temperature_uses_feet_and_mach():
    expected = thermal.calculate_leading_edge_temperature(
        80000.0 * C.FEET_TO_METERS, 6.0 * C.SPEED_OF_SOUND_SL)
    assert thermal.calculate_temperature(80000.0, 6.0) == pytest.approx(expected)


def test_sharper_design_runs_hotter():
    blunt = PlaneDesign(sweep_angle=65.0)
    sharp = PlaneDesign(sweep_angle=140.0)
    assert blunt.heating_rate_multiplier() < sharp.heating_rate_multiplier()
    assert (thermal.calculate_leading_edge_temperature(30000.0, 2000.0, sharp)
            > thermal.calculate_leading_edge_temperature(30000.0, 2000.0, blunt))


def test_design_limits():
    design = PlaneDesign.default()
    assert thermal.get_max_temperature(design) == pytest.approx(600.0 * 0.97)
    assert thermal.get_sustained_temperature(design) == pytest.approx(550.0 * 0.97)


def test_check_thermal_limits_margin():
    check = thermal.check_thermal_limits(30000.0, 3000.0)
    limit = thermal.get_max_temperature(PlaneDesign.default())
    assert check.exceeded
    assert check.margin == pytest.approx(limit - check.temperature)
    assert not thermal.check_thermal_limits(0.0, 50.0).exceeded


@pytest.mark.parametrize("temperature,regime", [
    (50.0, "Cool"),
    (200.0, "Warm"),
    (400.0, "Hot"),
    (560.0, "Critical"),
    (2000.0, "OVERHEAT!"),
])
def test_thermal_regime(temperature, regime):
    assert thermal.get_thermal_regime(temperature) == regime


def test_max_safe_velocity_brackets_limit():
    design = PlaneDesign.default()
    limit = thermal.get_max_temperature(design)
    v_safe = thermal.get_max_safe_velocity(30000.0, design)
    assert 0.0 < v_safe < C.MAX_SAFE_VELOCITY_SEARCH
    assert thermal.calculate_leading_edge_temperature(30000.0, v_safe, design) < limit
    assert thermal.calculate_leading_edge_temperature(30000.0, v_safe + 1.0, design) > limit


def test_material_limits():
    assert thermal.get_material_limit("Titanium") == 500.0
    assert thermal.get_material_limit("Unobtainium") == C.BASE_MAX_TEMPERATURE


def test_thermal_stress_factor():
    design = PlaneDesign.default()
    limit = thermal.get_max_temperature(design)
    assert thermal.get_thermal_stress_factor(limit, design) == pytest.approx(1.0)


def test_missing_design_uses_default():
    default = PlaneDesign.default()
    assert thermal.calculate_temperature(80000.0, 6.0, None) == \
        thermal.calculate_temperature(80000.0, 6.0, default)
    assert thermal.get_thermal_regime(450.0, None) == thermal.get_thermal_regime(450.0, default)
    assert thermal.get_thermal_stress_factor(300.0, None) == \
        pytest.approx(thermal.get_thermal_stress_factor(300.0, default))
