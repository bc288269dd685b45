"""
SSTO Spaceplane Simulation - Rocket Segment Propellant

This module sizes hydrogen/oxygen rocket burns between waypoints:
- Altitude-dependent specific impulse (420 s -> 450 s)
- Segment delta-V (speed change combined with potential-energy climb)
- Tsiolkovsky propellant mass and LOX / hydrogen split
- Burn-profile estimate for display
"""

from dataclasses import dataclass
from typing import List, Sequence, Tuple

import numpy as np

from . import constants as C
from .atmosphere import gravity
from .design import EngineMode, PlaneDesign, Waypoint
from .thermal import calculate_leading_edge_temperature
from .types import RocketSegmentSample


@dataclass(frozen=True)
class PropellantRequirement:
    """Propellant for one rocket segment (masses in kg, altitudes in ft)."""
    delta_v: float  # m/s
    initial_mass: float
    final_mass: float
    total_propellant_mass: float
    lox_mass: float
    hydrogen_mass: float
    start_altitude: float
    end_altitude: float
    start_speed: float  # Mach
    end_speed: float  # Mach
    average_isp: float  # s


@dataclass(frozen=True)
class RocketSegmentResult:
    start_altitude: float
    end_altitude: float
    start_speed: float
    end_speed: float
    fuel_consumed: float  # kg
    time_elapsed: float  # s
    max_temperature: float  # °C
    trajectory: Tuple[RocketSegmentSample, ...]


def calculate_isp(altitude: float) -> float:
    """Specific impulse (s), linear between 50,000 ft and 200,000 ft."""
    if altitude <= C.LH2_ISP_LOW_ALT_FT:
        return C.LH2_ISP_LOW
    if altitude >= C.LH2_ISP_HIGH_ALT_FT:
        return C.LH2_ISP_HIGH
    fraction = (altitude - C.LH2_ISP_LOW_ALT_FT) / (C.LH2_ISP_HIGH_ALT_FT - C.LH2_ISP_LOW_ALT_FT)
    return C.LH2_ISP_LOW + (C.LH2_ISP_HIGH - C.LH2_ISP_LOW) * fraction


def segment_speed_of_sound(altitude: float) -> float:
    """Coarse speed of sound (m/s) for Mach conversion over a segment (altitude in m)."""
    if altitude < 11000.0:
        return np.sqrt(C.GAMMA * C.R_AIR_ENGINE * (288.15 - 0.0065 * altitude))
    if altitude < 25000.0:
        return 295.0
    return 300.0


def calculate_delta_v(start_altitude: float, end_altitude: float,
                      start_speed: float, end_speed: float) -> float:
    """
    Approximate delta-V (m/s) for a segment.

    Args:
        start_altitude, end_altitude: Altitudes (ft)
        start_speed, end_speed: Speeds (Mach)

    Returns:
        sqrt(dv² + 2·g·dh) with the climb term only when dh > 0
    """
    h0 = start_altitude * C.FEET_TO_METERS
    h1 = end_altitude * C.FEET_TO_METERS
    mean_altitude = 0.5 * (h0 + h1)
    a = segment_speed_of_sound(mean_altitude)

    dv = (end_speed - start_speed) * a
    dh = h1 - h0
    dv_gravity = np.sqrt(2.0 * gravity(mean_altitude) * dh) if dh > 0.0 else 0.0
    return float(np.sqrt(dv * dv + dv_gravity * dv_gravity))


def calculate_propellant_mass(delta_v: float, initial_mass: float,
                              average_altitude: float) -> Tuple[float, float, float, float]:
    """
    Tsiolkovsky propellant for a burn.

    Returns:
        (total, lox, hydrogen, isp) masses in kg
    """
    isp = calculate_isp(average_altitude)
    mass_ratio = np.exp(delta_v / (isp * C.G0))
    total = initial_mass - initial_mass / mass_ratio
    hydrogen = total / (C.LH2_MIXTURE_RATIO + 1.0)
    return float(total), float(total - hydrogen), float(hydrogen), isp


def is_rocket_segment(start: Waypoint, end: Waypoint) -> bool:
    return start.engine_mode is EngineMode.ROCKET or end.engine_mode is EngineMode.ROCKET


def analyze_rocket_segments(waypoints: Sequence[Waypoint],
                            initial_mass: float) -> List[PropellantRequirement]:
    """Propellant for every rocket segment, carrying mass forward burn to burn."""
    results = []
    mass = initial_mass
    for start, end in zip(waypoints[:-1], waypoints[1:]):
        if not is_rocket_segment(start, end):
            continue
        delta_v = calculate_delta_v(start.altitude, end.altitude, start.speed, end.speed)
        total, lox, hydrogen, isp = calculate_propellant_mass(
            delta_v, mass, 0.5 * (start.altitude + end.altitude))
        results.append(PropellantRequirement(
            delta_v=delta_v,
            initial_mass=mass,
            final_mass=mass - total,
            total_propellant_mass=total,
            lox_mass=lox,
            hydrogen_mass=hydrogen,
            start_altitude=start.altitude,
            end_altitude=end.altitude,
            start_speed=start.speed,
            end_speed=end.speed,
            average_isp=isp,
        ))
        mass -= total
    return results


def calculate_total_rocket_propellant(waypoints: Sequence[Waypoint],
                                      initial_mass: float) -> Tuple[float, float, float]:
    """(lox, hydrogen, total) propellant mass (kg) across all rocket segments."""
    segments = analyze_rocket_segments(waypoints, initial_mass)
    lox = sum(s.lox_mass for s in segments)
    hydrogen = sum(s.hydrogen_mass for s in segments)
    return lox, hydrogen, lox + hydrogen


def format_propellant_report(requirements: Sequence[PropellantRequirement]) -> str:
    lines = ["ROCKET PROPELLANT ANALYSIS"]
    if not requirements:
        lines.append("No rocket segments found in flight plan.")
        return "\n".join(lines)

    for index, req in enumerate(requirements, 1):
        lines.append(f"Segment {index}: {req.start_altitude:.0f} ft -> {req.end_altitude:.0f} ft, "
                     f"Mach {req.start_speed:.1f} -> {req.end_speed:.1f}")
        lines.append(f"  Delta-V {req.delta_v:.0f} m/s, Isp {req.average_isp:.1f} s")
        lines.append(f"  Mass {req.initial_mass:.0f} -> {req.final_mass:.0f} kg "
                     f"(LOX {req.lox_mass:.0f}, H2 {req.hydrogen_mass:.0f})")
    total_lox = sum(r.lox_mass for r in requirements)
    total_h2 = sum(r.hydrogen_mass for r in requirements)
    lines.append(f"Total: LOX {total_lox:.0f} kg, H2 {total_h2:.0f} kg, "
                 f"propellant {total_lox + total_h2:.0f} kg")
    return "\n".join(lines)


def analyze_segment(start: Waypoint, end: Waypoint, initial_mass: float,
                    design: PlaneDesign, num_points: int = 10) -> RocketSegmentResult:
    """
    Burn estimate for one segment at an average 1.5 g.

    The profile linearly interpolates altitude and Mach over the burn time
    and reports the leading-edge temperature at each sample.
    """
    delta_v = calculate_delta_v(start.altitude, end.altitude, start.speed, end.speed)
    average_altitude = 0.5 * (start.altitude + end.altitude)
    propellant, _, _, isp = calculate_propellant_mass(delta_v, initial_mass, average_altitude)

    average_mass = initial_mass - propellant / 2.0
    average_thrust = average_mass * C.G0 * C.ROCKET_SEGMENT_ACCEL_G
    mass_flow = average_thrust / (isp * C.G0)
    burn_time = propellant / mass_flow if mass_flow > 0.0 else 0.0

    samples = []
    for i in range(num_points + 1):
        fraction = i / num_points
        altitude = start.altitude + (end.altitude - start.altitude) * fraction
        speed = start.speed + (end.speed - start.speed) * fraction
        altitude_m = altitude * C.FEET_TO_METERS
        velocity = speed * segment_speed_of_sound(altitude_m)
        samples.append(RocketSegmentSample(
            time=burn_time * fraction,
            altitude_ft=altitude,
            speed_mach=speed,
            temperature=calculate_leading_edge_temperature(altitude_m, velocity, design),
        ))

    return RocketSegmentResult(
        start_altitude=start.altitude,
        end_altitude=end.altitude,
        start_speed=start.speed,
        end_speed=end.speed,
        fuel_consumed=propellant,
        time_elapsed=burn_time,
        max_temperature=max(s["temperature"] for s in samples),
        trajectory=tuple(samples),
    )
