import math

import pytest

from ssto_sim.propulsion import RamjetEngine, RocketEngine, ScramjetEngine
from ssto_sim.takeoff import TAKEOFF_SPEED, calculate_takeoff_fuel


def test_takeoff_speed_is_150_knots():
    assert TAKEOFF_SPEED == pytest.approx(77.17, abs=0.01)


def test_zero_static_thrust_is_impossible():
    assert math.isinf(calculate_takeoff_fuel(ScramjetEngine(), 50000.0))
    assert math.isinf(calculate_takeoff_fuel(RamjetEngine(), 50000.0))


def test_rocket_takeoff_finite():
    fuel = calculate_takeoff_fuel(RocketEngine(), 50000.0)
    assert math.isfinite(fuel)
    assert fuel > 0.0


def test_heavier_vehicle_burns_more():
    light = calculate_takeoff_fuel(RocketEngine(), 50000.0)
    heavy = calculate_takeoff_fuel(RocketEngine(), 200000.0)
    assert heavy > light


def test_friction_exceeds_thrust():
    assert math.isinf(calculate_takeoff_fuel(RocketEngine(), 1.0e8))


def test_slow_roll_times_out():
    assert math.isinf(calculate_takeoff_fuel(RocketEngine(), 3.0e6, dt=0.5))
