"""
SSTO Spaceplane Simulation - Aero-Thermal Model

This module estimates leading-edge heating:
- Sutton-Graves stagnation-point convective heat flux
- Closed-form radiative-equilibrium wall temperature, capped at the
  adiabatic wall temperature
- Per-design temperature limits, thermal regimes and stress factor
- Maximum safe velocity at an altitude (bisection)

Altitudes are geometric meters; temperatures returned in °C.
"""

from typing import NamedTuple, Optional

import numpy as np

from . import constants as C
from .atmosphere import compute_atmosphere_properties
from .design import PlaneDesign


class ThermalCheck(NamedTuple):
    exceeded: bool
    temperature: float  # °C
    margin: float  # °C below the limit (negative when exceeded)


def get_max_temperature(design: PlaneDesign) -> float:
    return C.BASE_MAX_TEMPERATURE * design.thermal_limit_multiplier()


def get_sustained_temperature(design: PlaneDesign) -> float:
    return C.BASE_SUSTAINED_TEMPERATURE * design.thermal_limit_multiplier()


def stagnation_heat_flux(altitude: float, velocity: float, design: PlaneDesign) -> float:
    """Sutton-Graves q = k·sqrt(rho / R_eff)·V^3 (W/m^2); sharper noses shrink R_eff."""
    rho = compute_atmosphere_properties(altitude)[2]
    nose_radius = C.BASE_NOSE_RADIUS / design.heating_rate_multiplier()
    return C.SUTTON_GRAVES_K * np.sqrt(rho / nose_radius) * velocity ** 3


def calculate_leading_edge_temperature(altitude: float, velocity: float,
                                       design: Optional[PlaneDesign] = None) -> float:
    """
    Leading-edge wall temperature from radiative equilibrium.

    Solves q = ε·σ·(Tw⁴ − Ta⁴) for Tw, then caps it at the adiabatic wall
    temperature Ta·(1 + 0.2·M²).

    Args:
        altitude: Geometric altitude (m)
        velocity: Airspeed (m/s)
        design: Plane design (default design when omitted)

    Returns:
        Wall temperature (°C)
    """
    design = design or PlaneDesign.default()
    ambient, _, _, speed_of_sound = compute_atmosphere_properties(altitude)
    if velocity < 1.0:
        return ambient - C.KELVIN_OFFSET

    q = stagnation_heat_flux(altitude, velocity, design)
    wall = (q / (C.TPS_EMISSIVITY * C.STEFAN_BOLTZMANN) + ambient ** 4) ** 0.25

    mach = velocity / speed_of_sound
    adiabatic_wall = ambient * (1.0 + C.ADIABATIC_WALL_FACTOR * mach * mach)
    return float(min(wall, adiabatic_wall) - C.KELVIN_OFFSET)


def calculate_temperature(altitude_ft: float, mach: float, design: Optional[PlaneDesign] = None) -> float:
    """Leading-edge temperature (°C) at a waypoint-style altitude (ft) and Mach number."""
    velocity = mach * C.SPEED_OF_SOUND_SL
    return calculate_leading_edge_temperature(altitude_ft * C.FEET_TO_METERS, velocity, design)


def get_material_limit(material: str) -> float:
    return C.MATERIAL_LIMITS.get(material, C.BASE_MAX_TEMPERATURE)


def check_thermal_limits(altitude: float, velocity: float,
                         design: Optional[PlaneDesign] = None) -> ThermalCheck:
    design = design or PlaneDesign.default()
    temperature = calculate_leading_edge_temperature(altitude, velocity, design)
    limit = get_max_temperature(design)
    return ThermalCheck(temperature > limit, temperature, limit - temperature)


def get_thermal_regime(temperature: float, design: Optional[PlaneDesign] = None) -> str:
    design = design or PlaneDesign.default()
    if temperature < 100.0:
        return "Cool"
    if temperature < 300.0:
        return "Warm"
    if temperature < get_sustained_temperature(design):
        return "Hot"
    if temperature < get_max_temperature(design):
        return "Critical"
    return "OVERHEAT!"


def get_max_safe_velocity(altitude: float, design: Optional[PlaneDesign] = None,
                          iterations: int = C.BISECTION_ITERATIONS) -> float:
    """Highest velocity (m/s) whose leading-edge temperature stays under the design limit."""
    design = design or PlaneDesign.default()
    limit = get_max_temperature(design)
    low, high = 0.0, C.MAX_SAFE_VELOCITY_SEARCH
    for _ in range(iterations):
        mid = 0.5 * (low + high)
        if calculate_leading_edge_temperature(altitude, mid, design) < limit:
            low = mid
        else:
            high = mid
    return low


def get_thermal_stress_factor(temperature: float, design: Optional[PlaneDesign] = None) -> float:
    """Temperature over the design limit; values above 1 indicate overheat."""
    design = design or PlaneDesign.default()
    return temperature / get_max_temperature(design)
