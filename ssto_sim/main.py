"""
SSTO Spaceplane Simulation - Main Entry Point

This module wires the engine together for one end-to-end run:
- Optional Newton-Raphson length sizing
- Geometry extraction (memoized) and validation
- Dry mass build-up
- Mission integration over the flight plan
- Flat telemetry log with CSV export
"""

import csv
import logging
import os
import time
from dataclasses import dataclass, field, replace
from typing import List, Optional

from .config import SimulationConfig, create_default_config
from .curves import CrossSection, SideProfile, TopViewPlanform
from .design import FlightPlan, PlaneDesign
from .flight import FlightSimulator, MissionResult, TrajectoryPoint
from .fuel import FuelEstimator, VolumeRequirement
from .geometry import AerodynamicGeometry, get_geometry
from .mass import MassBreakdown, calculate_mass_breakdown
from .optimizer import OptimizationResult, apply_optimized_length, optimize_length
from .validation import check_geometry, validate_flight_plan

# Configure module logger
logger = logging.getLogger(__name__)


@dataclass
class MissionLog:
    """Container for logged trajectory data."""
    time: List[float] = field(default_factory=list)
    altitude_ft: List[float] = field(default_factory=list)
    mach: List[float] = field(default_factory=list)
    fuel_remaining_l: List[float] = field(default_factory=list)
    temperature_c: List[float] = field(default_factory=list)
    engine_mode: List[str] = field(default_factory=list)
    lift_coefficient: List[float] = field(default_factory=list)
    drag_coefficient: List[float] = field(default_factory=list)
    angle_of_attack_deg: List[float] = field(default_factory=list)
    segment: List[int] = field(default_factory=list)
    # Optimizer history, empty unless sizing ran
    opt_length: List[float] = field(default_factory=list)
    opt_error: List[float] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.time)

    def append(self, point: TrajectoryPoint, segment: int):
        """Log one trajectory sample (mission time already applied)."""
        self.time.append(point.time)
        self.altitude_ft.append(point.altitude)
        self.mach.append(point.speed)
        self.fuel_remaining_l.append(point.fuel_remaining)
        self.temperature_c.append(point.temperature)
        self.engine_mode.append(point.engine_mode.value)
        # Boundary samples carry no aero diagnostics
        nan = float('nan')
        self.lift_coefficient.append(nan if point.lift_coefficient is None else point.lift_coefficient)
        self.drag_coefficient.append(nan if point.drag_coefficient is None else point.drag_coefficient)
        self.angle_of_attack_deg.append(nan if point.angle_of_attack is None else point.angle_of_attack)
        self.segment.append(segment)

    @classmethod
    def from_mission(cls, mission: MissionResult,
                     optimization: Optional[OptimizationResult] = None) -> "MissionLog":
        log = cls()
        offset = 0.0
        for index, segment in enumerate(mission.segments):
            for point in segment.trajectory:
                log.append(replace(point, time=point.time + offset), index)
            offset += segment.duration
        if optimization is not None:
            log.opt_length = list(optimization.length_history)
            log.opt_error = list(optimization.error_history)
        return log

    def to_csv(self, filename: str):
        """Write logged trajectory to CSV for offline analysis."""
        os.makedirs(os.path.dirname(filename) or '.', exist_ok=True)
        header = [
            'time', 'segment', 'altitude_ft', 'mach', 'fuel_remaining_L',
            'temperature_C', 'engine_mode', 'cl', 'cd', 'aoa_deg',
        ]

        with open(filename, 'w', newline='') as fh:
            writer = csv.writer(fh)
            writer.writerow(header)
            for i in range(len(self.time)):
                writer.writerow([
                    self.time[i], self.segment[i], self.altitude_ft[i], self.mach[i],
                    self.fuel_remaining_l[i], self.temperature_c[i], self.engine_mode[i],
                    self.lift_coefficient[i], self.drag_coefficient[i], self.angle_of_attack_deg[i],
                ])


@dataclass
class MissionRun:
    """Everything produced by one end-to-end run."""
    geometry: AerodynamicGeometry
    planform: TopViewPlanform
    mass: MassBreakdown
    fuel_mass: float  # kg loaded at takeoff
    volume_requirement: VolumeRequirement
    mission: MissionResult
    log: MissionLog
    optimization: Optional[OptimizationResult] = None
    wall_time_s: float = 0.0

    @property
    def dry_mass(self) -> float:
        return self.mass.total

    def summary(self) -> str:
        lines = [
            f"Aircraft length: {self.geometry.aircraft_length:.1f} m, "
            f"internal volume {self.geometry.volume:,.1f} m³ "
            f"(required {self.volume_requirement.total:,.1f} m³)",
            f"Dry mass: {self.dry_mass:,.0f} kg, fuel loaded: {self.fuel_mass:,.0f} kg",
            self.mission.summary(),
        ]
        if self.optimization is not None:
            lines.insert(0, self.optimization.summary())
        return "\n".join(lines)


def run_mission(flight_plan: Optional[FlightPlan] = None,
                design: Optional[PlaneDesign] = None,
                profile: Optional[SideProfile] = None,
                planform: Optional[TopViewPlanform] = None,
                cross_section: Optional[CrossSection] = None,
                optimize: bool = False,
                config: Optional[SimulationConfig] = None) -> MissionRun:
    """
    Size (optionally), build and fly one spaceplane.

    Args:
        flight_plan: Mission; defaults to a single rocket climb to orbit
        design: Leading-edge design knobs
        profile: Side profile curve
        planform: Top-view planform (carries aircraft length)
        cross_section: Fuselage cross-section
        optimize: Run length sizing before flying
        config: SimulationConfig (default created if None)

    Returns:
        MissionRun
    """
    if config is None:
        config = create_default_config()
    flight_plan = flight_plan or FlightPlan.orbital_rocket_climb()
    design = design or PlaneDesign.default()
    profile = profile or SideProfile.default()
    planform = planform or TopViewPlanform.default()
    cross_section = cross_section or CrossSection.default()

    if len(flight_plan) < 2:
        raise ValueError("Flight plan needs at least one segment")
    ok, message = validate_flight_plan(flight_plan, abort_on_error=False)
    if not ok:
        logger.warning(f"Flight plan check failed: {message}")

    start_wall = time.time()

    optimization = None
    if optimize:
        optimization = optimize_length(planform.aircraft_length, flight_plan, design,
                                       profile, planform, cross_section, config)
        planform = apply_optimized_length(optimization, planform)
        logger.info(f"Applied optimized length: {planform.aircraft_length:.2f} m")

    geometry = get_geometry(profile, planform, cross_section, config.spline_steps, config.num_ribs)
    check_geometry(geometry)
    logger.info(f"Geometry: {geometry.panel_count} panels, length {geometry.aircraft_length:.1f} m, "
                f"volume {geometry.volume:,.1f} m³")

    waypoints = flight_plan.waypoints
    mass = calculate_mass_breakdown(geometry.volume, waypoints, design, geometry,
                                    config.max_temperature, config.cargo_mass,
                                    config.structure_coefficient)
    requirement = FuelEstimator().calculate_required_volume(flight_plan, design, geometry)
    logger.info(f"Dry mass {mass.total:,.0f} kg, required volume {requirement.total:,.1f} m³")

    simulator = FlightSimulator(geometry, design, mass.total, config=config)
    fuel_mass = simulator.initial_fuel_mass
    mission = simulator.simulate_mission(flight_plan)
    logger.info(mission.summary().replace("\n", " | "))

    return MissionRun(
        geometry=geometry,
        planform=planform,
        mass=mass,
        fuel_mass=fuel_mass,
        volume_requirement=requirement,
        mission=mission,
        log=MissionLog.from_mission(mission, optimization),
        optimization=optimization,
        wall_time_s=time.time() - start_wall,
    )
