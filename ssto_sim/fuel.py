"""
SSTO Spaceplane Simulation - Mission Fuel and Volume Estimates

This module provides the fast (non-integrating) mission estimates used by
the sizing loop:
- Per-segment fuel from the engine models (air-breathing) or Tsiolkovsky (rocket)
- Whole-mission fuel with mass carried forward
- Required internal volume (payload, crew, propellant tanks, engines)
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

from . import constants as C
from .design import EngineMode, FlightPlan, PlaneDesign, Waypoint
from .geometry import AerodynamicGeometry
from .mass import calculate_dry_mass, calculate_total_engine_weight
from .propulsion import PropulsionManager, resolve_mode
from .rocket import calculate_delta_v, calculate_propellant_mass
from .types import FuelRequirements


@dataclass(frozen=True)
class SegmentEstimate:
    index: int  # index of the segment's start waypoint
    mode: EngineMode
    fuel: float  # kg
    time: float  # s


@dataclass(frozen=True)
class FuelEstimate:
    total_fuel: float  # kg
    total_time: float  # s
    segments: Tuple[SegmentEstimate, ...]


@dataclass(frozen=True)
class VolumeRequirement:
    """Required internal volume by item (m^3)."""
    payload: float
    crew: float
    air_breathing_fuel: float
    rocket_fuel: float
    rocket_oxidizer: float
    engines: float
    fuel: FuelRequirements

    @property
    def total(self) -> float:
        return (self.payload + self.crew + self.air_breathing_fuel + self.rocket_fuel
                + self.rocket_oxidizer + self.engines)

    def summary(self) -> str:
        return "\n".join([
            "Required volume breakdown",
            f"  Payload:               {self.payload:8.1f} m³",
            f"  Crew:                  {self.crew:8.1f} m³",
            f"  Air-breathing fuel:    {self.air_breathing_fuel:8.1f} m³ ({self.fuel['air_breathing_fuel']:.0f} kg)",
            f"  Rocket fuel (LH2):     {self.rocket_fuel:8.1f} m³ ({self.fuel['rocket_fuel']:.0f} kg)",
            f"  Rocket oxidizer (LOX): {self.rocket_oxidizer:8.1f} m³ ({self.fuel['rocket_oxidizer']:.0f} kg)",
            f"  Engines:               {self.engines:8.1f} m³",
            f"  Total:                 {self.total:8.1f} m³",
        ])


def estimate_segment_time(start: Waypoint, end: Waypoint) -> float:
    """Rough segment duration (s): climb plus one minute of cruise at the mean speed."""
    climb = abs(end.altitude - start.altitude) * C.FEET_TO_METERS
    mean_velocity = 0.5 * (start.speed + end.speed) * C.SPEED_OF_SOUND_SL
    distance = np.hypot(climb, mean_velocity * 60.0)
    return max(1.0, float(distance / max(100.0, mean_velocity)))


class FuelEstimator:
    """Mission fuel estimates backed by the propulsion models."""

    def __init__(self, propulsion_manager: Optional[PropulsionManager] = None):
        self.propulsion_manager = propulsion_manager or PropulsionManager()

    def estimate_segment(self, start: Waypoint, end: Waypoint,
                         current_mass: float) -> SegmentEstimate:
        """
        Fuel (kg) and time (s) for one segment.

        The segment's engine is the end waypoint's mode, AUTO resolved by band.
        Rocket segments use the rocket equation; air-breathing segments use
        the engine's fuel rate at the mean altitude and speed.
        """
        mode = resolve_mode(end.engine_mode, end.altitude, end.speed)
        time = estimate_segment_time(start, end)
        mean_altitude = 0.5 * (start.altitude + end.altitude)

        if mode is EngineMode.ROCKET:
            delta_v = calculate_delta_v(start.altitude, end.altitude, start.speed, end.speed)
            propellant = calculate_propellant_mass(delta_v, current_mass, mean_altitude)[0]
            return SegmentEstimate(-1, mode, propellant, time)

        engine = self.propulsion_manager.engine_for(mode)
        if engine is None:
            return SegmentEstimate(-1, mode, 0.0, time)
        mean_speed = 0.5 * (start.speed + end.speed)
        rate = engine.fuel_consumption(mean_altitude, mean_speed) * C.KG_PER_LITER
        return SegmentEstimate(-1, mode, rate * time, time)

    def estimate_mission_fuel(self, waypoints: Sequence[Waypoint],
                              initial_mass: float) -> FuelEstimate:
        mass = initial_mass
        segments: List[SegmentEstimate] = []
        for index, (start, end) in enumerate(zip(waypoints[:-1], waypoints[1:])):
            estimate = self.estimate_segment(start, end, mass)
            segments.append(SegmentEstimate(index, estimate.mode, estimate.fuel, estimate.time))
            mass -= estimate.fuel
        return FuelEstimate(
            total_fuel=sum(s.fuel for s in segments),
            total_time=sum(s.time for s in segments),
            segments=tuple(segments),
        )

    def estimate_fuel_requirements(self, waypoints: Sequence[Waypoint],
                                   initial_mass: float) -> FuelRequirements:
        """Fuel split by tank: slush H2 for air-breathers, LH2 plus 8:1 LOX for rockets."""
        estimate = self.estimate_mission_fuel(waypoints, initial_mass)
        air_breathing = sum(s.fuel for s in estimate.segments if s.mode is not EngineMode.ROCKET)
        rocket = sum(s.fuel for s in estimate.segments if s.mode is EngineMode.ROCKET)
        return FuelRequirements(
            air_breathing_fuel=air_breathing,
            rocket_fuel=rocket,
            rocket_oxidizer=rocket * C.OXYGEN_TO_HYDROGEN_RATIO,
        )

    def calculate_required_volume(self, flight_plan: FlightPlan, design: PlaneDesign,
                                  geometry: Optional[AerodynamicGeometry] = None) -> VolumeRequirement:
        """Internal volume needed to carry payload, crew, engines and the mission's propellant."""
        waypoints = flight_plan.waypoints
        dry_guess = calculate_dry_mass(C.VOLUME_GUESS, waypoints, design, geometry)
        fuel = self.estimate_fuel_requirements(waypoints, dry_guess + C.FUEL_MASS_GUESS)

        engine_weight = calculate_total_engine_weight(waypoints, C.ENGINE_MASS_GUESS, design)
        return VolumeRequirement(
            payload=C.PAYLOAD_VOLUME,
            crew=C.CREW_VOLUME,
            air_breathing_fuel=fuel["air_breathing_fuel"] / C.SLUSH_HYDROGEN_DENSITY,
            rocket_fuel=fuel["rocket_fuel"] / C.LIQUID_HYDROGEN_DENSITY,
            rocket_oxidizer=fuel["rocket_oxidizer"] / C.LIQUID_OXYGEN_DENSITY,
            engines=engine_weight / C.ENGINE_DENSITY,
            fuel=fuel,
        )
