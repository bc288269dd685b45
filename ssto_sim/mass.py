"""
SSTO Spaceplane Simulation - Mass Model

This module computes the vehicle dry mass:
- Structure scaled by volume^(2/3) with an aerodynamic-efficiency penalty
- Thermal protection mass from the panel area breakdown
- Engine mass sized to peak thrust per engine class over the flight plan
- Fixed cargo mass

Also provides the propellant-driven aircraft configuration generator and
the temperature-adjusted fallback dry mass.
"""

from dataclasses import dataclass
from typing import Optional, Sequence
import logging
import math

import numpy as np

from . import constants as C
from .aerodynamics import AerodynamicSolver, simplified_drag
from .atmosphere import compute_atmosphere_properties, gravity
from .design import EngineMode, PlaneDesign, Waypoint
from .geometry import AerodynamicGeometry, AreaBreakdown, get_geometry
from .propulsion import resolve_mode
from .types import PeakThrust

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MassBreakdown:
    """Dry mass components (kg)."""
    structure: float
    thermal_protection: float
    engines: float
    cargo: float
    lift_to_drag: float

    @property
    def total(self) -> float:
        return self.structure + self.thermal_protection + self.engines + self.cargo

    def summary(self) -> str:
        return (f"Dry mass {self.total:,.0f} kg (structure {self.structure:,.0f}, "
                f"TPS {self.thermal_protection:,.0f}, engines {self.engines:,.0f}, "
                f"cargo {self.cargo:,.0f}; L/D {self.lift_to_drag:.2f})")


# =============================================================================
# STRUCTURE & THERMAL PROTECTION
# =============================================================================

def aerodynamic_efficiency_multiplier(lift_to_drag: float) -> float:
    """1.0 at the reference L/D, growing linearly as L/D degrades, capped at 1.5."""
    deficit = max(0.0, (C.REFERENCE_LIFT_TO_DRAG - lift_to_drag) / C.REFERENCE_LIFT_TO_DRAG)
    return min(1.0 + C.MAX_LD_PENALTY, 1.0 + C.MAX_LD_PENALTY * deficit)


def calculate_structural_weight(volume_m3: float, lift_to_drag: float = C.REFERENCE_LIFT_TO_DRAG,
                                coefficient: float = C.STRUCTURE_AREAL_COEFF) -> float:
    """Airframe structure (kg); volume^(2/3) tracks skin area."""
    return coefficient * max(0.0, volume_m3) ** (2.0 / 3.0) * aerodynamic_efficiency_multiplier(lift_to_drag)


def reference_lift_to_drag(geometry: AerodynamicGeometry, mass: float) -> float:
    """L/D from the panel solver at Mach 6 / 80,000 ft carrying the given mass."""
    solver = AerodynamicSolver(geometry)
    lift = mass * gravity(C.LD_REFERENCE_ALTITUDE_FT * C.FEET_TO_METERS)
    return solver.lift_to_drag(C.LD_REFERENCE_MACH, C.LD_REFERENCE_ALTITUDE_FT, lift)


def scale_area_breakdown(areas: AreaBreakdown, factor: float) -> AreaBreakdown:
    return AreaBreakdown(*(value * factor for value in areas))


def calculate_tps_mass(areas: AreaBreakdown, max_temperature: float = C.DEFAULT_MAX_TEMPERATURE) -> float:
    """
    Thermal protection mass (kg).

    Each zone carries its own areal density; all densities grow by 10% per
    100 °C of sizing temperature above the 600 °C base limit.
    """
    base = (areas.nose * C.TPS_NOSE_DENSITY
            + areas.leading_edge * C.TPS_LEADING_EDGE_DENSITY
            + areas.upper * C.TPS_TOP_DENSITY
            + areas.lower * C.TPS_BOTTOM_DENSITY
            + areas.inlet * C.TPS_INLET_DENSITY
            + areas.tail * C.TPS_TAIL_DENSITY)
    excess = max(0.0, max_temperature - C.BASE_MAX_TEMPERATURE)
    return base * (1.0 + C.TPS_GROWTH_PER_100C * excess / 100.0)


# =============================================================================
# ENGINES
# =============================================================================

def jet_engine_weight(thrust: float) -> float:
    return thrust / C.JET_THRUST_TO_WEIGHT


def rocket_engine_weight(thrust: float) -> float:
    return thrust / C.ROCKET_THRUST_TO_WEIGHT


def calculate_required_thrust(mass: float, altitude: float, mach: float,
                              design: PlaneDesign) -> float:
    """
    Thrust (N) needed at a waypoint: 1.2x drag plus a 10% weight climb
    allowance, never below a thrust-to-weight of 0.3.

    Args:
        mass: Vehicle mass (kg)
        altitude: Geometric altitude (m)
        mach: Speed (Mach)
        design: Plane design (drag multiplier)
    """
    speed_of_sound = compute_atmosphere_properties(altitude)[3]
    drag = simplified_drag(altitude, mach * speed_of_sound, design.drag_multiplier())
    weight = mass * gravity(altitude)
    return max(drag * 1.2 + weight * 0.1, weight * 0.3)


def calculate_peak_thrust_requirements(waypoints: Sequence[Waypoint], estimated_mass: float,
                                       design: PlaneDesign) -> PeakThrust:
    """Largest required thrust per engine class across the plan (AUTO resolved by band)."""
    peaks = PeakThrust(jet=0.0, ramjet=0.0, scramjet=0.0, rocket=0.0)
    keys = {
        EngineMode.EJECTOR_RAMJET: "jet",
        EngineMode.RAMJET: "ramjet",
        EngineMode.SCRAMJET: "scramjet",
        EngineMode.ROCKET: "rocket",
    }
    for wp in waypoints:
        thrust = calculate_required_thrust(estimated_mass, wp.altitude_m, wp.speed, design)
        key = keys[resolve_mode(wp.engine_mode, wp.altitude, wp.speed)]
        peaks[key] = max(peaks[key], thrust)
    return peaks


def calculate_total_engine_weight(waypoints: Sequence[Waypoint], estimated_mass: float,
                                  design: PlaneDesign) -> float:
    peaks = calculate_peak_thrust_requirements(waypoints, estimated_mass, design)
    total = 0.0
    if peaks["jet"] > 0.0:
        total += jet_engine_weight(peaks["jet"])
    if peaks["ramjet"] > 0.0:
        total += C.RAMJET_WEIGHT
    if peaks["scramjet"] > 0.0:
        total += C.SCRAMJET_WEIGHT
    if peaks["rocket"] > 0.0:
        total += rocket_engine_weight(peaks["rocket"])
    return total


# =============================================================================
# DRY MASS
# =============================================================================

def calculate_mass_breakdown(volume_m3: float, waypoints: Sequence[Waypoint], design: PlaneDesign,
                             geometry: Optional[AerodynamicGeometry] = None,
                             max_temperature: float = C.DEFAULT_MAX_TEMPERATURE,
                             cargo_mass: float = C.CARGO_MASS,
                             structure_coefficient: float = C.STRUCTURE_AREAL_COEFF) -> MassBreakdown:
    """
    Dry mass components for a hull of the given internal volume.

    The geometry supplies the TPS area split and the reference L/D. When the
    requested volume differs from the geometry's own, areas are scaled by
    (V / V_geometry)^(2/3).
    """
    if volume_m3 < 0.0:
        raise ValueError(f"volume must be non-negative, got {volume_m3}")
    geometry = geometry or get_geometry()

    areas = geometry.area_breakdown()
    if geometry.volume > 0.0 and not math.isclose(volume_m3, geometry.volume, rel_tol=1e-9):
        areas = scale_area_breakdown(areas, (volume_m3 / geometry.volume) ** (2.0 / 3.0))
    tps = calculate_tps_mass(areas, max_temperature)

    base_structure = structure_coefficient * volume_m3 ** (2.0 / 3.0)
    lift_to_drag = reference_lift_to_drag(geometry, base_structure + tps + cargo_mass)
    if not np.isfinite(lift_to_drag):
        lift_to_drag = 0.0
    structure = calculate_structural_weight(volume_m3, lift_to_drag, structure_coefficient)

    fuel_capacity = volume_m3 * C.SLUSH_HYDROGEN_DENSITY
    estimated_mass = structure + tps + 0.5 * fuel_capacity
    engines = calculate_total_engine_weight(waypoints, estimated_mass, design)

    breakdown = MassBreakdown(structure, tps, engines, cargo_mass, lift_to_drag)
    logger.debug(breakdown.summary())
    return breakdown


def calculate_dry_mass(volume_m3: float, waypoints: Sequence[Waypoint], design: PlaneDesign,
                       geometry: Optional[AerodynamicGeometry] = None,
                       max_temperature: float = C.DEFAULT_MAX_TEMPERATURE) -> float:
    """Total dry mass (kg): structure + TPS + engines + cargo."""
    return calculate_mass_breakdown(volume_m3, waypoints, design, geometry, max_temperature).total


def adjusted_dry_mass(max_temperature: float, dry_mass: float = C.FALLBACK_DRY_MASS) -> float:
    """Dry mass grown by 0.003% per °C above 600 °C."""
    if max_temperature <= C.BASE_MAX_TEMPERATURE:
        return dry_mass
    excess = max_temperature - C.BASE_MAX_TEMPERATURE
    return dry_mass * (1.0 + C.DRY_MASS_GROWTH_PER_DEGREE * excess)


# =============================================================================
# AIRCRAFT CONFIGURATION GENERATOR
# =============================================================================

JET_FUEL_DENSITY = 80.0  # kg/m^3
LIQUID_METHANE_DENSITY = 422.0  # kg/m^3
TANK_STRUCTURE_FRACTION = 0.15
AIRFRAME_FRACTION = 0.25


@dataclass(frozen=True)
class AircraftConfiguration:
    """Propellant-driven vehicle sizing (volumes m^3, masses kg, lengths m)."""
    engine_count: int
    length: float
    wingspan: float
    height: float
    jet_fuel_volume: float
    hydrogen_volume: float
    methane_volume: float
    dry_mass: float
    propellant_mass: float
    total_mass: float
    reference_area: float

    @property
    def total_volume(self) -> float:
        return self.jet_fuel_volume + self.hydrogen_volume + self.methane_volume

    @property
    def total_fuel_mass(self) -> float:
        return (self.jet_fuel_volume * JET_FUEL_DENSITY
                + self.hydrogen_volume * C.SLUSH_HYDROGEN_DENSITY
                + self.methane_volume * LIQUID_METHANE_DENSITY)


def calculate_engine_count(required_thrust: float) -> int:
    return max(1, int(math.ceil(required_thrust / C.ENGINE_THRUST_UNIT)))


def calculate_aircraft_dimensions(propellant_volume: float):
    """(length, wingspan, height) for tanks filling 40% of the hull."""
    hull_volume = propellant_volume / 0.4
    wingspan = (hull_volume / 0.54) ** (1.0 / 3.0)
    return 3.0 * wingspan, wingspan, 0.3 * wingspan


def calculate_configuration_structure(propellant_mass: float, engine_count: int) -> float:
    tank_mass = propellant_mass * TANK_STRUCTURE_FRACTION
    engine_mass = engine_count * C.ENGINE_UNIT_MASS
    airframe_mass = (propellant_mass + tank_mass + engine_mass) * AIRFRAME_FRACTION
    return tank_mass + engine_mass + airframe_mass


def generate_aircraft_configuration(jet_fuel_kg: float, hydrogen_fuel_kg: float,
                                    methane_fuel_kg: float, required_thrust: float) -> AircraftConfiguration:
    engine_count = calculate_engine_count(required_thrust)
    jet_volume = jet_fuel_kg / JET_FUEL_DENSITY
    hydrogen_volume = hydrogen_fuel_kg / C.SLUSH_HYDROGEN_DENSITY
    methane_volume = methane_fuel_kg / LIQUID_METHANE_DENSITY

    length, wingspan, height = calculate_aircraft_dimensions(jet_volume + hydrogen_volume + methane_volume)
    propellant = jet_fuel_kg + hydrogen_fuel_kg + methane_fuel_kg
    dry_mass = calculate_configuration_structure(propellant, engine_count)

    return AircraftConfiguration(
        engine_count=engine_count,
        length=length,
        wingspan=wingspan,
        height=height,
        jet_fuel_volume=jet_volume,
        hydrogen_volume=hydrogen_volume,
        methane_volume=methane_volume,
        dry_mass=dry_mass,
        propellant_mass=propellant,
        total_mass=dry_mass + propellant,
        reference_area=wingspan * height * 0.7,
    )
