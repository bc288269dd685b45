import pytest
import numpy as np

from ssto_sim import constants as C
from ssto_sim.design import EngineMode
from ssto_sim.propulsion import (
    EjectorRamjetEngine,
    PropulsionManager,
    RamjetEngine,
    RocketEngine,
    ScramjetEngine,
    create_engines,
    resolve_mode,
    scramjet_pressure_recovery,
    select_engine_mode,
    three_layer_isa,
    two_layer_isa,
)


# ============================================================================
# Rocket
# ============================================================================

def test_rocket_isp_blend():
    rocket = RocketEngine()
    assert rocket.isp(0.0) == pytest.approx(C.ROCKET_ISP_SEA_LEVEL)
    assert rocket.isp(1.0e7) == pytest.approx(C.ROCKET_ISP_VACUUM, rel=1e-6)
    assert rocket.isp(0.0) < rocket.isp(50000.0) < rocket.isp(200000.0)


def test_rocket_thrust_and_mass_flow():
    rocket = RocketEngine()
    assert rocket.thrust(0.0) == pytest.approx(C.ROCKET_SEA_LEVEL_THRUST)
    assert rocket.thrust(200000.0) > rocket.thrust(0.0)
    expected_flow = C.ROCKET_SEA_LEVEL_THRUST / (C.ROCKET_ISP_SEA_LEVEL * C.G0)
    assert rocket.fuel_mass_flow(0.0) == pytest.approx(expected_flow)
    # Mass flow is constant: thrust and Isp scale together
    assert rocket.fuel_mass_flow(200000.0) == pytest.approx(expected_flow)
    assert rocket.fuel_consumption(0.0) > 0.0


# ============================================================================
# Air-breathing cycles
# ============================================================================

def test_no_thrust_below_minimum_mach():
    assert EjectorRamjetEngine().thrust(60000.0, 0.9) == 0.0
    assert RamjetEngine().thrust(60000.0, 1.0) == 0.0
    assert ScramjetEngine().thrust(100000.0, 4.0) == 0.0
    assert ScramjetEngine().fuel_mass_flow(100000.0, 4.0) == 0.0


def test_ramjet_thrust_in_envelope():
    ramjet = RamjetEngine()
    assert ramjet.thrust(60000.0, 3.0) > 0.0
    assert ramjet.fuel_mass_flow(60000.0, 3.0) > 0.0
    assert ramjet.specific_impulse(60000.0, 3.0) > C.ROCKET_ISP_VACUUM


def test_thrust_never_negative():
    for engine in create_engines().values():
        for altitude in (0.0, 60000.0, 120000.0):
            for mach in (0.0, 2.0, 6.0, 12.0, 20.0):
                assert engine.thrust(altitude, mach) >= 0.0


def test_efficiency_zero_outside_envelope():
    assert RamjetEngine().efficiency(10000.0, 3.0) == 0.0
    assert ScramjetEngine().efficiency(100000.0, 20.0) == 0.0
    assert 0.0 < RocketEngine().efficiency(0.0, 0.5) <= 1.0


def test_can_operate_envelope():
    ejector = EjectorRamjetEngine()
    assert ejector.can_operate(60000.0, 4.0)
    assert not ejector.can_operate(40000.0, 4.0)
    assert not ejector.can_operate(60000.0, 11.0)


def test_isa_helpers():
    ta, pa = two_layer_isa(0.0)
    assert ta == pytest.approx(288.15)
    assert pa == pytest.approx(101325.0)
    assert two_layer_isa(15000.0)[0] == pytest.approx(two_layer_isa(11000.0)[0])
    # Above 32 km the three-layer model is capped
    assert three_layer_isa(40000.0) == three_layer_isa(32000.0)


def test_scramjet_pressure_recovery():
    assert scramjet_pressure_recovery(3.0) == 0.05
    assert scramjet_pressure_recovery(6.0) > scramjet_pressure_recovery(12.0)
    assert 0.01 <= scramjet_pressure_recovery(30.0) <= 0.95


# ============================================================================
# Engine selection
# ============================================================================

@pytest.mark.parametrize("altitude,mach,expected", [
    (90000.0, 6.0, EngineMode.SCRAMJET),
    (60000.0, 3.0, EngineMode.RAMJET),
    (10000.0, 0.5, EngineMode.EJECTOR_RAMJET),
    (100000.0, 4.0, EngineMode.ROCKET),
])
def test_select_engine_mode_bands(altitude, mach, expected):
    assert select_engine_mode(altitude, mach) is expected


def test_resolve_mode():
    assert resolve_mode(EngineMode.ROCKET, 90000.0, 6.0) is EngineMode.ROCKET
    assert resolve_mode(EngineMode.AUTO, 90000.0, 6.0) is EngineMode.SCRAMJET


class TestPropulsionManager:

    def test_defaults(self):
        manager = PropulsionManager()
        assert manager.is_auto_mode
        assert manager.current_mode is EngineMode.ROCKET
        assert isinstance(manager.current_engine, RocketEngine)

    def test_rocket_below_mach_two(self):
        manager = PropulsionManager()
        assert manager.select_optimal_engine(0.0, 0.5) is EngineMode.ROCKET
        assert manager.select_optimal_engine(60000.0, 1.9) is EngineMode.ROCKET

    def test_prefers_air_breather_in_envelope(self):
        manager = PropulsionManager()
        manager.update(60000.0, 3.0)
        assert manager.current_mode is not EngineMode.ROCKET
        assert manager.current_engine.can_operate(60000.0, 3.0)

    def test_manual_mode_is_sticky(self):
        manager = PropulsionManager()
        manager.set_manual_engine(EngineMode.RAMJET)
        assert not manager.is_auto_mode
        manager.update(0.0, 0.5)
        assert manager.current_mode is EngineMode.RAMJET
        assert manager.thrust(0.0, 0.5) == 0.0

    def test_manual_auto_enables_auto(self):
        manager = PropulsionManager()
        manager.set_manual_engine(EngineMode.SCRAMJET)
        manager.set_manual_engine(EngineMode.AUTO)
        assert manager.is_auto_mode
        manager.update(0.0, 0.5)
        assert manager.current_mode is EngineMode.ROCKET

    def test_engine_for(self):
        manager = PropulsionManager()
        assert isinstance(manager.engine_for(EngineMode.SCRAMJET), ScramjetEngine)
        assert manager.engine_for(EngineMode.AUTO) is None
