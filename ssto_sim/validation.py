"""
SSTO Spaceplane Simulation - Validation Checks

This module implements pre-flight and physics validation checks:
- Panel normals unit length, panel areas non-negative
- Flight plan structure and per-waypoint validity
- Atmosphere continuity at the tropopause and monotonic decay with altitude
- Jet-class envelope check: altitude ceiling and sampled leading-edge temperature

check_* helpers raise ValidationError; validate_* wrappers turn failures
into (False, message) when abort_on_error is False.
"""

import numpy as np
from typing import Optional, Tuple

from . import constants as C
from .atmosphere import compute_atmosphere_properties
from .design import FlightPlan, PlaneDesign, Waypoint
from .geometry import AerodynamicGeometry
from .thermal import calculate_temperature, get_max_temperature


class ValidationError(Exception):
    """Raised when a physics or input validation check fails."""
    pass


def check_geometry(geometry: AerodynamicGeometry, tolerance: float = 1e-3) -> bool:
    """
    Verify every panel normal is unit length and every area is non-negative.

    Args:
        geometry: Extracted geometry
        tolerance: Allowable deviation of |n| from 1.0

    Returns:
        True if valid, raises ValidationError otherwise
    """
    if geometry.panel_count == 0:
        raise ValidationError("Geometry has no panels")

    norms = np.linalg.norm(geometry.normals, axis=1)
    worst = int(np.argmax(np.abs(norms - 1.0)))
    if abs(norms[worst] - 1.0) > tolerance:
        raise ValidationError(
            f"Panel normal not unit length: |n| = {norms[worst]:.6f} at panel {worst}, "
            f"tolerance = {tolerance:.1e}"
        )

    if np.any(geometry.areas < 0.0):
        index = int(np.argmin(geometry.areas))
        raise ValidationError(f"Negative panel area {geometry.areas[index]:.3e} m² at panel {index}")
    return True


def check_flight_plan(flight_plan: FlightPlan) -> bool:
    """At least one segment and every waypoint inside its mode's window."""
    waypoints = flight_plan.waypoints
    if len(waypoints) < 2:
        raise ValidationError("Flight plan has no segments")

    for index, wp in enumerate(waypoints):
        if not wp.is_valid():
            raise ValidationError(
                f"Waypoint {index} invalid: {wp.altitude:.0f} ft, Mach {wp.speed:g}, "
                f"{wp.engine_mode.value}"
            )
    return True


def check_atmosphere_continuity(boundary: float = 11000.0, top: float = 80000.0,
                                tolerance: float = 1e-3) -> bool:
    """
    Density and temperature are continuous across a layer boundary and
    density decreases strictly up to the top altitude.
    """
    eps = 1e-3
    below = compute_atmosphere_properties(boundary - eps)
    above = compute_atmosphere_properties(boundary + eps)
    for name, lo, hi in (("temperature", below[0], above[0]), ("density", below[2], above[2])):
        if abs(hi - lo) > tolerance * max(abs(lo), 1e-12):
            raise ValidationError(
                f"Atmosphere {name} discontinuous at {boundary:.0f} m: {lo:.6g} vs {hi:.6g}"
            )

    altitudes = np.linspace(0.0, top, 161)
    densities = np.array([compute_atmosphere_properties(h)[2] for h in altitudes])
    if np.any(np.diff(densities) >= 0.0):
        index = int(np.argmax(np.diff(densities) >= 0.0))
        raise ValidationError(f"Density not decreasing near {altitudes[index]:.0f} m")
    return True


def validate_jet_envelope(start: Waypoint, end: Waypoint,
                          design: Optional[PlaneDesign] = None,
                          samples: int = 10) -> Tuple[bool, float, float, str]:
    """
    Check a jet-class segment against its altitude ceiling and thermal limit.

    Temperatures are sampled at samples + 1 points linearly interpolated
    between the waypoints.

    Returns:
        (is_safe, max_temperature °C, margin, message). Margin is in meters
        below the ceiling when the altitude check fails, otherwise °C below
        the thermal limit.
    """
    design = design or PlaneDesign.default()
    highest = max(start.altitude_m, end.altitude_m)
    if highest > C.JET_MAX_OPERATING_ALTITUDE:
        excess = highest - C.JET_MAX_OPERATING_ALTITUDE
        message = (f"ALTITUDE LIMIT EXCEEDED: jet engines cannot operate above "
                   f"{C.JET_MAX_OPERATING_ALTITUDE:.0f} m; waypoint reaches {highest:.0f} m "
                   f"(exceeded by {excess:.0f} m)")
        return False, 0.0, -excess, message

    max_temperature = 0.0
    worst_altitude = start.altitude
    worst_speed = start.speed
    for fraction in np.linspace(0.0, 1.0, samples + 1):
        altitude = start.altitude + (end.altitude - start.altitude) * fraction
        speed = start.speed + (end.speed - start.speed) * fraction
        temperature = calculate_temperature(altitude, speed, design)
        if temperature > max_temperature:
            max_temperature = temperature
            worst_altitude, worst_speed = altitude, speed

    limit = get_max_temperature(design)
    margin = limit - max_temperature
    if max_temperature > limit:
        message = (f"THERMAL LIMIT EXCEEDED: {max_temperature:.0f}°C at {worst_altitude:.0f} ft, "
                   f"Mach {worst_speed:.1f} (limit {limit:.0f}°C, over by {-margin:.0f}°C)")
        return False, max_temperature, margin, message
    message = f"Thermal Check: OK, max {max_temperature:.0f}°C, limit {limit:.0f}°C, margin {margin:.0f}°C"
    return True, max_temperature, margin, message


def validate_flight_plan(flight_plan: FlightPlan,
                         abort_on_error: bool = True) -> Tuple[bool, Optional[str]]:
    """
    Validate flight plan structure.

    Args:
        flight_plan: Plan to validate
        abort_on_error: If True, re-raise the first ValidationError
    """
    try:
        check_flight_plan(flight_plan)
        return True, None
    except ValidationError as e:
        if abort_on_error:
            raise
        return False, str(e)


def run_validation_suite(geometry: AerodynamicGeometry,
                         flight_plan: Optional[FlightPlan] = None,
                         verbose: bool = False) -> dict:
    """
    Run all validation checks and return results.

    Args:
        geometry: Geometry to check
        flight_plan: Optional plan to check
        verbose: Print results

    Returns:
        Dictionary of check name -> 'PASS' or 'FAIL: <reason>'
    """
    checks = {
        'geometry': lambda: check_geometry(geometry),
        'atmosphere_continuity': check_atmosphere_continuity,
    }
    if flight_plan is not None:
        checks['flight_plan'] = lambda: check_flight_plan(flight_plan)

    results = {'all_passed': True}
    for name, check in checks.items():
        try:
            check()
            results[name] = 'PASS'
            if verbose:
                print(f"  ✓ {name}")
        except ValidationError as e:
            results[name] = f'FAIL: {e}'
            results['all_passed'] = False
            if verbose:
                print(f"  ✗ {name}: {e}")

    return results
