"""
SSTO Spaceplane Simulation - Panel Method Aerodynamics

This module implements the regime-switching aerodynamic solver:
- Trim angle of attack from a regime-dependent lift-curve slope
- Per-panel pressure coefficients (subsonic Prandtl-Glauert, transonic
  blend, supersonic Ackeret with sweep correction, hypersonic modified
  Newtonian)
- Pressure integration into lift, drag and pitch moment
- Skin friction, induced, base and transonic area-rule drag

All per-panel work is vectorized over the contiguous panel arrays of an
AerodynamicGeometry.
"""

from dataclasses import dataclass
from typing import NamedTuple

import numpy as np

from . import constants as C
from .atmosphere import compute_atmosphere_properties, dynamic_viscosity
from .geometry import AerodynamicGeometry


class DragBreakdown(NamedTuple):
    """Drag components (N)."""
    skin_friction: float
    pressure: float
    induced: float
    base: float
    area_rule: float

    @property
    def total(self) -> float:
        return self.skin_friction + self.pressure + self.induced + self.base + self.area_rule


@dataclass(frozen=True, eq=False)
class AerodynamicForces:
    """Solver output at one trim condition."""
    lift: float  # N
    drag: float  # N
    pitch_moment: float  # N·m about mid-length
    cl: float
    cd: float
    angle_of_attack: float  # degrees
    pressure_coefficients: np.ndarray
    breakdown: DragBreakdown

    @property
    def lift_to_drag(self) -> float:
        return self.lift / self.drag if self.drag > 0.0 else 0.0

    @classmethod
    def zero(cls, panel_count: int) -> "AerodynamicForces":
        return cls(0.0, 0.0, 0.0, 0.0, 0.0, 0.0, np.zeros(panel_count),
                   DragBreakdown(0.0, 0.0, 0.0, 0.0, 0.0))


class AerodynamicSolver:
    """
    Panel-method solver bound to one geometry snapshot.

    The geometry is shared, never copied; build it once per design
    (see geometry.GeometryCache) and reuse the solver for every step of
    a segment.
    """

    def __init__(self, geometry: AerodynamicGeometry):
        self.geometry = geometry
        self.gamma = C.GAMMA

    def solve_trim_condition(self, mach: float, altitude: float, velocity: float,
                             required_lift: float) -> AerodynamicForces:
        """
        Lift, drag and moment at trim.

        Args:
            mach: Flight Mach number
            altitude: Altitude (ft)
            velocity: True airspeed (m/s)
            required_lift: Lift needed to hold the flight path (N)

        Returns:
            AerodynamicForces
        """
        geo = self.geometry
        temperature, _, rho, _ = compute_atmosphere_properties(altitude * C.FEET_TO_METERS)
        q = 0.5 * rho * velocity * velocity
        if q < C.MIN_DYNAMIC_PRESSURE:
            return AerodynamicForces.zero(geo.panel_count)

        s_ref = geo.planform_area
        required_cl = required_lift / (q * s_ref)
        alpha = self.estimate_alpha(mach, required_cl)

        cp = self.pressure_coefficients(mach, alpha)
        lift, pressure_drag, moment = self._integrate(cp, q, alpha)

        skin_friction = self.skin_friction_drag(velocity, temperature, rho, q)
        induced = required_cl ** 2 / (np.pi * geo.aspect_ratio * self.oswald_efficiency(mach)) * q * s_ref
        base = C.BASE_DRAG_CD * C.BASE_AREA_FRACTION * s_ref * q
        area_rule = self.area_rule_penalty(mach, q)

        breakdown = DragBreakdown(float(skin_friction), float(pressure_drag), float(induced),
                                  float(base), float(area_rule))
        drag = breakdown.total

        return AerodynamicForces(
            lift=float(lift),
            drag=drag,
            pitch_moment=float(moment),
            cl=float(lift / (q * s_ref)),
            cd=drag / (q * s_ref),
            angle_of_attack=float(np.degrees(alpha)),
            pressure_coefficients=cp,
            breakdown=breakdown,
        )

    def lift_to_drag(self, mach: float, altitude: float, required_lift: float) -> float:
        """L/D at a Mach number and altitude (ft), airspeed from the local speed of sound."""
        speed_of_sound = compute_atmosphere_properties(altitude * C.FEET_TO_METERS)[3]
        forces = self.solve_trim_condition(mach, altitude, mach * speed_of_sound, required_lift)
        return forces.lift_to_drag

    # -------------------------------------------------------------------------
    # Trim
    # -------------------------------------------------------------------------

    def lift_curve_slope(self, mach: float) -> float:
        """CL_alpha per radian."""
        if mach < C.SUBSONIC_LIMIT:
            return 2.0 * np.pi / (1.0 + 2.0 / self.geometry.aspect_ratio)
        if mach < C.SUPERSONIC_LIMIT:
            return 1.5 * np.pi
        if mach < C.HYPERSONIC_LIMIT:
            return 4.0 / np.sqrt(mach * mach - 1.0)
        return 2.0

    def estimate_alpha(self, mach: float, target_cl: float) -> float:
        alpha = target_cl / self.lift_curve_slope(mach)
        return float(np.clip(alpha, C.MIN_ALPHA, C.MAX_ALPHA))

    # -------------------------------------------------------------------------
    # Pressure distribution
    # -------------------------------------------------------------------------

    def panel_angles(self, alpha: float) -> np.ndarray:
        """Inclination of each panel to the freestream (rad, positive windward)."""
        freestream = np.array([np.cos(alpha), 0.0, np.sin(alpha)])
        dot = np.clip(self.geometry.normals @ freestream, -1.0, 1.0)
        return np.arccos(dot) - np.pi / 2.0

    def pressure_coefficients(self, mach: float, alpha: float) -> np.ndarray:
        if mach < C.SUBSONIC_LIMIT:
            return self._subsonic(mach, alpha)
        if mach < C.SUPERSONIC_LIMIT:
            return self._transonic(mach, alpha)
        if mach < C.HYPERSONIC_LIMIT:
            return self._supersonic(mach, alpha)
        return self._hypersonic(mach, alpha)

    def _subsonic(self, mach, alpha):
        # Prandtl-Glauert corrected thin-panel estimate
        beta = np.sqrt(1.0 - mach * mach)
        return 2.0 * np.sin(self.panel_angles(alpha)) / beta

    def _transonic(self, mach, alpha):
        cp_sub = self._subsonic(C.SUBSONIC_LIMIT, alpha)
        cp_sup = self._supersonic(C.SUPERSONIC_LIMIT, alpha)
        t = (mach - C.SUBSONIC_LIMIT) / (C.SUPERSONIC_LIMIT - C.SUBSONIC_LIMIT)
        divergence = 1.0 + 2.0 * np.sin(np.pi * t)
        return (cp_sub + (cp_sup - cp_sub) * t) * divergence

    def _supersonic(self, mach, alpha):
        theta = self.panel_angles(alpha)
        beta = np.sqrt(mach * mach - 1.0)
        mach_normal = mach * np.cos(np.radians(self.geometry.leading_edge_sweep))
        if mach_normal > 1.0:
            beta = np.sqrt(mach_normal * mach_normal - 1.0)
        cp = 2.0 * theta / beta

        stagnation = 2.0 / (self.gamma * mach * mach)
        return np.where(theta < 0.0, np.maximum(cp, C.VACUUM_CP), np.minimum(cp, stagnation))

    def _hypersonic(self, mach, alpha):
        theta = self.panel_angles(alpha)
        cp_max = 2.0 / (self.gamma * mach * mach)
        return np.where(theta > 0.0, cp_max * np.sin(theta) ** 2, C.LEEWARD_BASE_CP)

    def _integrate(self, cp: np.ndarray, q: float, alpha: float):
        """Sum panel pressure forces into (lift, drag, pitch moment) in wind axes."""
        geo = self.geometry
        # Pressure acts against the outward normal
        forces = -(cp * q * geo.areas)[:, None] * geo.normals
        ca, sa = np.cos(alpha), np.sin(alpha)
        drag = forces[:, 0] * ca + forces[:, 2] * sa
        lift = -forces[:, 0] * sa + forces[:, 2] * ca
        arm = geo.centroids[:, 0] - 0.5 * geo.aircraft_length
        return float(np.sum(lift)), float(np.sum(drag)), float(np.sum(lift * arm))

    # -------------------------------------------------------------------------
    # Drag build-up
    # -------------------------------------------------------------------------

    def reynolds_number(self, velocity: float, temperature: float, rho: float) -> float:
        return rho * velocity * self.geometry.aircraft_length / dynamic_viscosity(temperature)

    def skin_friction_drag(self, velocity: float, temperature: float, rho: float, q: float) -> float:
        """Turbulent flat-plate friction on the wetted area."""
        reynolds = self.reynolds_number(velocity, temperature, rho)
        cf = 0.455 / np.log10(max(C.MIN_REYNOLDS, reynolds)) ** 2.58
        return cf * self.geometry.wetted_area * q

    @staticmethod
    def oswald_efficiency(mach: float) -> float:
        if mach < C.SUBSONIC_LIMIT:
            return 0.85
        if mach < C.SUPERSONIC_LIMIT:
            return 0.75
        return 0.60

    def area_rule_penalty(self, mach: float, q: float) -> float:
        """Transonic wave-drag penalty from cross-section area curvature."""
        if mach <= C.AREA_RULE_MIN_MACH or mach >= C.AREA_RULE_MAX_MACH:
            return 0.0
        areas = self.geometry.volume_distribution
        if len(areas) < 3:
            return 0.0
        curvature = float(np.sum(np.abs(areas[:-2] - 2.0 * areas[1:-1] + areas[2:])))
        curvature /= max(self.geometry.max_cross_section_area, 1.0)
        envelope = np.sin(np.pi * (mach - C.AREA_RULE_MIN_MACH)
                          / (C.AREA_RULE_MAX_MACH - C.AREA_RULE_MIN_MACH))
        return curvature * C.AREA_RULE_COEFF * envelope * self.geometry.planform_area * q


def simplified_drag(altitude: float, velocity: float, drag_multiplier: float = 1.0) -> float:
    """
    Fixed-coefficient drag used for thrust sizing and quick G-limit estimates.

    Args:
        altitude: Geometric altitude (m)
        velocity: Airspeed (m/s)
        drag_multiplier: PlaneDesign.drag_multiplier()

    Returns:
        Drag (N)
    """
    rho = compute_atmosphere_properties(altitude)[2]
    return 0.5 * rho * velocity * velocity * C.SIZING_DRAG_COEFFICIENT \
        * drag_multiplier * C.SIZING_REFERENCE_AREA
