"""
SSTO Spaceplane Simulation - Atmosphere Model

This module implements the US Standard Atmosphere 1976 used by every physics
model in the package:
- Layered temperature / pressure / density (geometric altitude)
- Speed of sound
- Sutherland dynamic viscosity (Reynolds number)
- Inverse-square gravity
"""

import numpy as np

from . import constants as C
from .types import AtmosphereProperties


_US76_H = C.US76_ALTITUDES
_US76_L = C.US76_LAPSE_RATES
_US76_TB = None
_US76_PB = None


def _build_us76_tables():
    """Precompute layer-base temperatures and pressures for US-76."""
    global _US76_TB, _US76_PB
    if _US76_TB is not None and _US76_PB is not None:
        return

    tb = [C.ATM_T0]
    pb = [C.ATM_P0]
    for i, lapse in enumerate(_US76_L):
        dh = _US76_H[i + 1] - _US76_H[i]
        T0 = tb[-1]
        P0 = pb[-1]
        if abs(lapse) > 1e-12:
            T1 = T0 + lapse * dh
            P1 = P0 * (T1 / T0) ** (-C.G0 / (lapse * C.R_GAS))
        else:
            T1 = T0
            P1 = P0 * np.exp(-C.G0 * dh / (C.R_GAS * T0))
        tb.append(float(T1))
        pb.append(float(P1))

    _US76_TB = np.array(tb)
    _US76_PB = np.array(pb)


def compute_atmosphere_properties(altitude: float) -> tuple:
    """
    Compute atmospheric properties (Temperature, Pressure, Density, Speed of Sound).

    Args:
        altitude: Geometric altitude above sea level (m); negative values clamp to 0

    Returns:
        (temperature, pressure, density, speed_of_sound)
        T in K, P in Pa, rho in kg/m^3, a in m/s
    """
    _build_us76_tables()
    h = max(0.0, float(altitude))

    if h <= _US76_H[-1]:
        idx = int(np.searchsorted(_US76_H, h, side='right') - 1)
        idx = max(0, min(idx, len(_US76_L) - 1))
        lapse = _US76_L[idx]
        T0 = _US76_TB[idx]
        P0 = _US76_PB[idx]
        dh = h - _US76_H[idx]

        if abs(lapse) > 1e-12:
            T = T0 + lapse * dh
            P = P0 * (T / T0) ** (-C.G0 / (lapse * C.R_GAS))
        else:
            T = T0
            P = P0 * np.exp(-C.G0 * dh / (C.R_GAS * T0))
    else:
        # Isothermal exponential extension above 84.852 km
        T = _US76_TB[-1]
        P = _US76_PB[-1] * np.exp(-(h - _US76_H[-1]) / C.ATM_UPPER_SCALE_HEIGHT)

    rho = P / (C.R_GAS * T)
    if rho < C.DENSITY_FLOOR:
        rho = 0.0
    speed_of_sound = np.sqrt(C.GAMMA * C.R_GAS * T)
    return float(T), float(P), float(rho), float(speed_of_sound)


def dynamic_viscosity(temperature: float) -> float:
    """
    Sutherland's law for air.

    Args:
        temperature: Static temperature (K)

    Returns:
        Dynamic viscosity (Pa·s)
    """
    T = max(1.0, float(temperature))
    return C.SUTHERLAND_MU_REF * (T / C.SUTHERLAND_T_REF) ** 1.5 \
        * (C.SUTHERLAND_T_REF + C.SUTHERLAND_S) / (T + C.SUTHERLAND_S)


def get_atmospheric_conditions(altitude_ft: float) -> AtmosphereProperties:
    """Atmosphere at a waypoint-style altitude given in feet."""
    T, P, rho, a = compute_atmosphere_properties(altitude_ft * C.FEET_TO_METERS)
    return AtmosphereProperties(
        temperature=T,
        pressure=P,
        density=rho,
        speed_of_sound=a,
        viscosity=dynamic_viscosity(T),
    )


def density(altitude: float) -> float:
    return compute_atmosphere_properties(altitude)[2]


def temperature(altitude: float) -> float:
    return compute_atmosphere_properties(altitude)[0]


def speed_of_sound(altitude: float) -> float:
    return compute_atmosphere_properties(altitude)[3]


def gravity(altitude: float) -> float:
    """Inverse-square gravitational acceleration at geometric altitude (m/s^2)."""
    r = C.R_EARTH + max(0.0, altitude)
    return C.G_CONST * C.EARTH_MASS / (r * r)
