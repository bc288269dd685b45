"""
SSTO Spaceplane Simulation - Propulsion Models

This module implements the four engine models and the engine manager:
- Brayton-cycle approximation shared by the ejector-ramjet, ramjet and scramjet
- Rocket with sea-level / vacuum specific-impulse blend
- Operating envelopes and efficiency ranking
- PropulsionManager (automatic best-engine selection or fixed manual mode)
- select_engine_mode: static band classifier used by every sizing caller

Engine interface units: altitude in feet, speed in Mach, thrust in N,
fuel consumption in liters per second, fuel mass flow in kg/s.
"""

from dataclasses import dataclass
from typing import Dict, Optional, Tuple
import logging

import numpy as np

from . import constants as C
from .design import EngineMode

logger = logging.getLogger(__name__)


# =============================================================================
# BRAYTON CYCLE
# =============================================================================

_T_SL = 288.15
_P_SL = 101325.0
_LAPSE = 0.0065
_H_TROPO = 11000.0
_H_ISOTHERMAL = 20000.0
_H_STRATOPAUSE = 32000.0


def two_layer_isa(altitude: float) -> Tuple[float, float]:
    """(Ta, Pa) from a troposphere + isothermal stratosphere model (altitude in m)."""
    exponent = C.G0 / (_LAPSE * C.R_AIR_ENGINE)
    if altitude <= _H_TROPO:
        ta = _T_SL - _LAPSE * altitude
        return ta, _P_SL * (ta / _T_SL) ** exponent

    ta = _T_SL - _LAPSE * _H_TROPO
    p_tropo = _P_SL * (ta / _T_SL) ** exponent
    return ta, p_tropo * np.exp(-C.G0 * (altitude - _H_TROPO) / (C.R_AIR_ENGINE * ta))


def three_layer_isa(altitude: float) -> Tuple[float, float]:
    """(Ta, Pa) with a warming upper layer; altitude capped at 32 km."""
    h = min(altitude, _H_STRATOPAUSE)
    if h <= _H_ISOTHERMAL:
        return two_layer_isa(h)

    t_base, p_base = two_layer_isa(_H_ISOTHERMAL)
    lapse_upper = -0.001
    ta = t_base - lapse_upper * (h - _H_ISOTHERMAL)
    pa = p_base * (ta / t_base) ** (C.G0 / (lapse_upper * C.R_AIR_ENGINE))
    return ta, pa


@dataclass(frozen=True)
class BraytonCycle:
    """Constants of one air-breathing cycle."""
    min_mach: float  # no thrust at or below (ramjets) / below (scramjet)
    max_stagnation_temperature: float  # K, thermal choking limit
    temperature_rise: float  # K added by the burner
    burner_efficiency: float
    nozzle_efficiency: float
    inlet_efficiency: float = 1.0
    burner_pressure_ratio: float = 1.0
    supersonic_combustion: bool = False

    def ambient(self, altitude: float) -> Tuple[float, float]:
        if self.supersonic_combustion:
            return three_layer_isa(altitude)
        return two_layer_isa(altitude)

    def stagnation_temperature(self, ta: float, mach: float) -> float:
        t02_ideal = ta * (1.0 + (C.GAMMA - 1.0) / 2.0 * mach * mach)
        if self.supersonic_combustion:
            return t02_ideal
        return ta + self.inlet_efficiency * (t02_ideal - ta)

    def inlet_pressure_ratio(self, ta: float, mach: float) -> float:
        ratio_ideal = (1.0 + (C.GAMMA - 1.0) / 2.0 * mach * mach) ** (C.GAMMA / (C.GAMMA - 1.0))
        if self.supersonic_combustion:
            return ratio_ideal * scramjet_pressure_recovery(mach)
        return 1.0 + self.inlet_efficiency * (ratio_ideal - 1.0)

    def fuel_air_ratio(self, altitude: float, mach: float) -> float:
        ta, _ = self.ambient(altitude)
        t02 = self.stagnation_temperature(ta, mach)
        t03 = min(self.max_stagnation_temperature, t02 + self.temperature_rise)
        return C.CP_AIR * (t03 - t02) / (self.burner_efficiency * C.HYDROGEN_HEATING_VALUE)

    def operates_at(self, mach: float) -> bool:
        if self.supersonic_combustion:
            return mach >= self.min_mach
        return mach > self.min_mach

    def specific_thrust(self, altitude: float, mach: float) -> float:
        """
        Net thrust per unit air mass flow, (1 + f)·Ve − Va.

        Args:
            altitude: Geometric altitude (m)
            mach: Flight Mach number

        Returns:
            Specific thrust (N·s/kg), never negative
        """
        if not self.operates_at(mach):
            return 0.0

        ta, pa = self.ambient(altitude)
        va = mach * np.sqrt(C.GAMMA * C.R_AIR_ENGINE * ta)

        t02 = self.stagnation_temperature(ta, mach)
        if t02 >= self.max_stagnation_temperature:
            return 0.0
        t03 = min(self.max_stagnation_temperature, t02 + self.temperature_rise)
        f = C.CP_AIR * (t03 - t02) / (self.burner_efficiency * C.HYDROGEN_HEATING_VALUE)

        p03 = pa * self.inlet_pressure_ratio(ta, mach) * self.burner_pressure_ratio
        pressure_ratio = pa / p03
        if pressure_ratio >= 1.0:
            return 0.0

        ve_squared = 2.0 * self.nozzle_efficiency * C.CP_AIR * t03 * \
            (1.0 - pressure_ratio ** ((C.GAMMA - 1.0) / C.GAMMA))
        if ve_squared < 0.0:
            return 0.0
        return max(0.0, (1.0 + f) * np.sqrt(ve_squared) - va)


def scramjet_pressure_recovery(mach: float) -> float:
    """Inlet total pressure recovery; collapses below Mach 4 and decays with Mach above it."""
    if mach < 4.0:
        return 0.05
    sigma = 0.95 * np.exp(-0.02 * mach ** 1.8) * 0.98
    return float(np.clip(sigma, 0.01, 0.95))


EJECTOR_RAMJET_CYCLE = BraytonCycle(min_mach=1.0, max_stagnation_temperature=2600.0,
                                    temperature_rise=1300.0, burner_efficiency=0.92,
                                    nozzle_efficiency=0.94, inlet_efficiency=0.85)
RAMJET_CYCLE = BraytonCycle(min_mach=1.5, max_stagnation_temperature=2400.0,
                            temperature_rise=1200.0, burner_efficiency=0.95,
                            nozzle_efficiency=0.95, inlet_efficiency=0.90)
SCRAMJET_CYCLE = BraytonCycle(min_mach=4.5, max_stagnation_temperature=2800.0,
                              temperature_rise=1500.0, burner_efficiency=0.85,
                              nozzle_efficiency=0.95, burner_pressure_ratio=0.92,
                              supersonic_combustion=True)


# =============================================================================
# ENGINES
# =============================================================================

class Engine:
    """Common engine interface: thrust, fuel use, envelope and efficiency."""

    mode = EngineMode.AUTO
    mach_range = (0.0, 0.0)
    altitude_range = (0.0, 0.0)  # ft

    @property
    def name(self) -> str:
        return self.mode.value

    def thrust(self, altitude: float, mach: float) -> float:
        raise NotImplementedError

    def fuel_mass_flow(self, altitude: float, mach: float) -> float:
        raise NotImplementedError

    def fuel_consumption(self, altitude: float, mach: float) -> float:
        raise NotImplementedError

    def can_operate(self, altitude: float, mach: float) -> bool:
        return (self.mach_range[0] <= mach <= self.mach_range[1]
                and self.altitude_range[0] <= altitude <= self.altitude_range[1])

    def specific_impulse(self, altitude: float, mach: float) -> float:
        mass_flow = self.fuel_mass_flow(altitude, mach)
        if mass_flow <= 0.0:
            return 0.0
        return self.thrust(altitude, mach) / (mass_flow * C.G0)

    def efficiency(self, altitude: float, mach: float) -> float:
        """Specific impulse normalised to [0, 1]; zero outside the operating envelope."""
        if not self.can_operate(altitude, mach):
            return 0.0
        isp = self.specific_impulse(altitude, mach)
        return float(np.clip(isp / C.EFFICIENCY_ISP_REFERENCE, 0.0, 1.0))

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class AirBreathingEngine(Engine):
    """Brayton-cycle engine burning slush hydrogen."""

    cycle: BraytonCycle = RAMJET_CYCLE
    air_mass_flow = 50.0  # kg/s
    activation_mach = 2.5  # sigmoid centre

    def activation(self, mach: float) -> float:
        return 1.0 / (1.0 + np.exp(-(mach - self.activation_mach) / 0.5))

    def thrust(self, altitude: float, mach: float) -> float:
        specific = self.cycle.specific_thrust(altitude * C.FEET_TO_METERS, mach)
        return specific * self.air_mass_flow * self.activation(mach)

    def fuel_mass_flow(self, altitude: float, mach: float) -> float:
        altitude_m = altitude * C.FEET_TO_METERS
        if self.cycle.specific_thrust(altitude_m, mach) <= 0.0:
            return 0.0
        return self.air_mass_flow * self.cycle.fuel_air_ratio(altitude_m, mach)

    def fuel_consumption(self, altitude: float, mach: float) -> float:
        return self.fuel_mass_flow(altitude, mach) / C.SLUSH_HYDROGEN_DENSITY * 1000.0


class EjectorRamjetEngine(AirBreathingEngine):
    mode = EngineMode.EJECTOR_RAMJET
    mach_range = (3.0, 10.0)
    altitude_range = (50000.0, 150000.0)
    cycle = EJECTOR_RAMJET_CYCLE
    air_mass_flow = 60.0
    activation_mach = 3.5


class RamjetEngine(AirBreathingEngine):
    mode = EngineMode.RAMJET
    mach_range = (2.0, 8.0)
    altitude_range = (60000.0, 120000.0)
    cycle = RAMJET_CYCLE
    air_mass_flow = 50.0
    activation_mach = 2.5


class ScramjetEngine(AirBreathingEngine):
    mode = EngineMode.SCRAMJET
    mach_range = (5.0, 15.0)
    altitude_range = (90000.0, 200000.0)
    cycle = SCRAMJET_CYCLE
    air_mass_flow = 40.0
    activation_mach = 5.0


class RocketEngine(Engine):
    """Kerosene/LOX class rocket; thrust scales with the altitude Isp blend."""

    mode = EngineMode.ROCKET
    mach_range = (0.0, 30.0)
    altitude_range = (0.0, 400000.0)

    def isp(self, altitude: float) -> float:
        pressure_ratio = np.exp(-altitude * C.FEET_TO_METERS / C.ROCKET_PRESSURE_SCALE_HEIGHT)
        return C.ROCKET_ISP_SEA_LEVEL + (C.ROCKET_ISP_VACUUM - C.ROCKET_ISP_SEA_LEVEL) * (1.0 - pressure_ratio)

    def thrust(self, altitude: float, mach: float = 0.0) -> float:
        return C.ROCKET_SEA_LEVEL_THRUST * self.isp(altitude) / C.ROCKET_ISP_SEA_LEVEL

    def fuel_mass_flow(self, altitude: float, mach: float = 0.0) -> float:
        """Fuel plus oxidizer (kg/s)."""
        return self.thrust(altitude) / (self.isp(altitude) * C.G0)

    def fuel_consumption(self, altitude: float, mach: float = 0.0) -> float:
        ratio = C.ROCKET_OF_RATIO
        average_density = (C.KEROSENE_DENSITY + ratio * C.LIQUID_OXYGEN_DENSITY) / (1.0 + ratio)
        return self.fuel_mass_flow(altitude) / average_density * 1000.0

    def specific_impulse(self, altitude: float, mach: float = 0.0) -> float:
        return self.isp(altitude)


def create_engines() -> Dict[EngineMode, Engine]:
    return {
        EngineMode.EJECTOR_RAMJET: EjectorRamjetEngine(),
        EngineMode.RAMJET: RamjetEngine(),
        EngineMode.SCRAMJET: ScramjetEngine(),
        EngineMode.ROCKET: RocketEngine(),
    }


# =============================================================================
# ENGINE SELECTION
# =============================================================================

def select_engine_mode(altitude: float, mach: float) -> EngineMode:
    """
    Band classifier for automatic waypoints.

    Bands are checked in priority order scramjet > ramjet > ejector-ramjet,
    falling back to rocket. Every sizing caller resolves AUTO through here.

    Args:
        altitude: Altitude (ft)
        mach: Speed (Mach)

    Returns:
        Concrete EngineMode (never AUTO)
    """
    altitude_m = altitude * C.FEET_TO_METERS
    if altitude_m >= C.SCRAMJET_MIN_ALTITUDE and mach >= C.SCRAMJET_MIN_SPEED:
        return EngineMode.SCRAMJET
    if (C.RAMJET_MIN_ALTITUDE <= altitude_m <= C.RAMJET_MAX_ALTITUDE
            and C.RAMJET_MIN_SPEED <= mach <= C.RAMJET_MAX_SPEED):
        return EngineMode.RAMJET
    if altitude_m <= C.JET_MAX_ALTITUDE and mach <= C.JET_MAX_SPEED:
        return EngineMode.EJECTOR_RAMJET
    return EngineMode.ROCKET


def resolve_mode(mode: EngineMode, altitude: float, mach: float) -> EngineMode:
    """Concrete mode for a waypoint (AUTO resolved by band)."""
    if mode is EngineMode.AUTO:
        return select_engine_mode(altitude, mach)
    return mode


class PropulsionManager:
    """
    Holds the engine set and the currently active engine.

    In auto mode the active engine is re-chosen on every update() by
    efficiency; in manual mode it stays fixed until changed.
    """

    def __init__(self, engines: Optional[Dict[EngineMode, Engine]] = None):
        self.engines = engines or create_engines()
        self.current_mode = EngineMode.ROCKET
        self.is_auto_mode = True

    @property
    def current_engine(self) -> Engine:
        return self.engines[self.current_mode]

    def select_optimal_engine(self, altitude: float, mach: float) -> EngineMode:
        if mach < C.ROCKET_ONLY_BELOW_MACH:
            return EngineMode.ROCKET

        air_breathers = [mode for mode in self.engines if mode is not EngineMode.ROCKET]
        air_breather_available = any(self.engines[m].can_operate(altitude, mach) for m in air_breathers)

        best_mode = EngineMode.ROCKET
        best_efficiency = 0.0
        for mode, engine in self.engines.items():
            if (mode is EngineMode.ROCKET and altitude < C.AIRBREATHING_CEILING_FT
                    and air_breather_available):
                continue
            efficiency = engine.efficiency(altitude, mach)
            if efficiency > best_efficiency:
                best_efficiency = efficiency
                best_mode = mode

        if best_efficiency <= 0.0:
            return EngineMode.ROCKET
        return best_mode

    def set_manual_engine(self, mode: EngineMode):
        if mode is EngineMode.AUTO:
            self.enable_auto_mode()
            return
        self.is_auto_mode = False
        self.current_mode = mode

    def enable_auto_mode(self):
        self.is_auto_mode = True

    def update(self, altitude: float, mach: float):
        if self.is_auto_mode:
            mode = self.select_optimal_engine(altitude, mach)
            if mode is not self.current_mode:
                logger.debug(f"Engine switch {self.current_mode.value} -> {mode.value} "
                             f"at {altitude:.0f} ft, Mach {mach:.2f}")
            self.current_mode = mode

    def thrust(self, altitude: float, mach: float) -> float:
        return self.current_engine.thrust(altitude, mach)

    def fuel_consumption(self, altitude: float, mach: float) -> float:
        return self.current_engine.fuel_consumption(altitude, mach)

    def fuel_mass_flow(self, altitude: float, mach: float) -> float:
        return self.current_engine.fuel_mass_flow(altitude, mach)

    def can_operate(self, altitude: float, mach: float) -> bool:
        return self.current_engine.can_operate(altitude, mach)

    def engine_for(self, mode: EngineMode) -> Optional[Engine]:
        return self.engines.get(mode)
