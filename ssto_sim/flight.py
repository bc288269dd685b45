"""
SSTO Spaceplane Simulation - Flight Segment Integrator

This module time-steps the point-mass equations of motion between waypoints:
- Automatic or manual engine selection every step
- Throttle caps: overspeed energy management, rocket max-G, max dynamic pressure
- Trim lift from the weight / centrifugal balance on a fixed 5° climb path
- Panel-method drag, explicit Euler velocity / altitude / fuel update
- Trajectory sampling roughly once per simulated second
- Mission chaining, scoring and summary

Internal state is SI (m, m/s, kg); trajectory output uses ft and Mach.
"""

from dataclasses import dataclass, replace
from typing import List, Optional, Tuple
import logging

import numpy as np

from . import constants as C
from .aerodynamics import AerodynamicSolver, DragBreakdown, simplified_drag
from .atmosphere import compute_atmosphere_properties, gravity
from .config import SimulationConfig, create_default_config
from .design import EngineMode, FlightPlan, PlaneDesign, Waypoint, is_orbit_achieved
from .geometry import AerodynamicGeometry
from .propulsion import PropulsionManager
from .thermal import calculate_leading_edge_temperature

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TrajectoryPoint:
    time: float  # s
    altitude: float  # ft
    speed: float  # Mach
    fuel_remaining: float  # L
    engine_mode: EngineMode
    temperature: float  # leading edge, °C
    lift_coefficient: Optional[float] = None
    drag_coefficient: Optional[float] = None
    angle_of_attack: Optional[float] = None  # degrees
    reynolds_number: Optional[float] = None
    drag_breakdown: Optional[DragBreakdown] = None


@dataclass(frozen=True)
class FlightSegmentResult:
    trajectory: Tuple[TrajectoryPoint, ...]
    fuel_used: float  # L
    final_altitude: float  # ft
    final_speed: float  # Mach
    duration: float  # s
    engine_used: EngineMode
    termination: str = ""

    @property
    def max_temperature(self) -> float:
        return max((p.temperature for p in self.trajectory), default=0.0)


@dataclass(frozen=True)
class MissionResult:
    segments: Tuple[FlightSegmentResult, ...]
    total_fuel_used: float  # L
    total_duration: float  # s
    success: bool
    final_altitude: float  # ft
    final_speed: float  # Mach
    score: int
    max_temperature: float  # °C

    @property
    def efficiency(self) -> float:
        return 1.0e6 / max(1.0, self.total_fuel_used) if self.success else 0.0

    def complete_trajectory(self) -> List[TrajectoryPoint]:
        """All segment trajectories with cumulative mission time."""
        points = []
        offset = 0.0
        for segment in self.segments:
            points.extend(replace(p, time=p.time + offset) for p in segment.trajectory)
            offset += segment.duration
        return points

    def summary(self) -> str:
        if self.success:
            return (f"SUCCESS! Orbit achieved at {self.final_altitude:.0f} ft, Mach {self.final_speed:.1f}\n"
                    f"Fuel: {self.total_fuel_used:.0f}L, Time: {self.total_duration:.0f}s, Score: {self.score}")
        return (f"FAILED. Final: {self.final_altitude:.0f} ft, Mach {self.final_speed:.1f}\n"
                f"Fuel: {self.total_fuel_used:.0f}L, Time: {self.total_duration:.0f}s")


def calculate_mission_score(success: bool, fuel_used: float, duration: float) -> int:
    """Base score plus fuel and time bonuses; zero when orbit was not reached."""
    if not success:
        return 0
    fuel_bonus = max(0.0, C.SCORE_FUEL_REFERENCE - fuel_used)
    time_bonus = max(0.0, (C.SCORE_TIME_REFERENCE - duration) * 2.0)
    return int(C.SCORE_BASE + fuel_bonus + time_bonus)


class FlightSimulator:
    """
    Point-mass integrator for one vehicle.

    Altitude, velocity and fuel mass persist across segments until reset().
    """

    def __init__(self, geometry: AerodynamicGeometry, design: PlaneDesign, dry_mass: float,
                 fuel_mass: Optional[float] = None, config: Optional[SimulationConfig] = None):
        if dry_mass <= 0.0:
            raise ValueError(f"dry_mass must be positive, got {dry_mass}")
        self.geometry = geometry
        self.design = design
        self.dry_mass = dry_mass
        self.config = config or create_default_config()
        self.solver = AerodynamicSolver(geometry)

        if fuel_mass is None:
            fuel_mass = geometry.volume * 1000.0 * C.KG_PER_LITER
        self.initial_fuel_mass = fuel_mass
        self.fuel_mass = fuel_mass
        self.altitude = 0.0
        self.velocity = 0.0

        logger.info(f"Simulator ready: {geometry.panel_count} panels, volume {geometry.volume:.1f} m³, "
                    f"fuel {fuel_mass:,.0f} kg, dry mass {dry_mass:,.0f} kg")

    @property
    def fuel_remaining(self) -> float:
        """Remaining fuel (L)."""
        return max(0.0, self.fuel_mass / C.KG_PER_LITER)

    def reset(self, fuel_mass: Optional[float] = None):
        self.altitude = 0.0
        self.velocity = 0.0
        self.fuel_mass = self.initial_fuel_mass if fuel_mass is None else fuel_mass

    def _temperature(self, altitude: float, velocity: float) -> float:
        return calculate_leading_edge_temperature(altitude, velocity, self.design)

    def _point(self, time: float, h: float, v: float, mode: EngineMode, **diagnostics) -> TrajectoryPoint:
        return TrajectoryPoint(
            time=time,
            altitude=h * C.METERS_TO_FEET,
            speed=v / C.SPEED_OF_SOUND_SL,
            fuel_remaining=self.fuel_remaining,
            engine_mode=mode,
            temperature=self._temperature(h, v),
            **diagnostics,
        )

    def _limit_thrust(self, thrust: float, h: float, v: float, mass: float, mode: EngineMode,
                      target_h: float, target_v: float, max_g: float, sin_gamma: float) -> float:
        cfg = self.config

        # Energy management: coast up when fast but low, cut when well over speed
        if v > target_v and h < target_h:
            thrust *= cfg.overspeed_throttle
        elif v > target_v * cfg.overspeed_cutoff:
            thrust = 0.0

        if mode is EngineMode.ROCKET:
            drag_estimate = simplified_drag(h, v, self.design.drag_multiplier())
            max_thrust = mass * (max_g * C.G0 + gravity(h) * sin_gamma) + drag_estimate
            thrust = min(thrust, max_thrust)

        rho = compute_atmosphere_properties(h)[2]
        q = 0.5 * rho * v * v
        q_limit = cfg.max_dynamic_pressure(mode)
        if q > q_limit:
            thrust *= q_limit / q

        return max(0.0, thrust)

    def simulate_segment(self, start: Waypoint, end: Waypoint,
                         propulsion: PropulsionManager) -> FlightSegmentResult:
        """
        Integrate from start to end waypoint.

        Ends when fuel runs out, when both altitude and speed are within
        tolerance of the target, when the vehicle is stuck slow after the
        stuck timeout, or at the configured time ceiling.
        """
        cfg = self.config
        h = start.altitude_m
        v = start.speed * C.SPEED_OF_SOUND_SL
        target_h = end.altitude_m
        target_v = end.speed * C.SPEED_OF_SOUND_SL

        if end.engine_mode is EngineMode.AUTO:
            propulsion.enable_auto_mode()
        else:
            propulsion.set_manual_engine(end.engine_mode)

        gamma = np.radians(cfg.flight_path_angle_deg)
        sin_gamma, cos_gamma = np.sin(gamma), np.cos(gamma)
        dt = cfg.dt

        sample_every = max(1, int(round(cfg.sample_interval / dt)))
        time = 0.0
        step = 0
        fuel_used = 0.0
        termination = "time limit"
        trajectory = [self._point(0.0, h, v, propulsion.current_mode)]

        while time < cfg.max_time:
            altitude_ft = h * C.METERS_TO_FEET
            mach = v / C.SPEED_OF_SOUND_SL
            propulsion.update(altitude_ft, mach)
            mode = propulsion.current_mode
            mass = self.dry_mass + self.fuel_mass

            available = propulsion.thrust(altitude_ft, mach) * cfg.engine_count
            thrust = self._limit_thrust(available, h, v, mass, mode, target_h, target_v,
                                        end.max_g, sin_gamma)
            throttle = thrust / available if available > 0.0 else 0.0

            g = gravity(h)
            centrifugal = mass * v * v / (C.R_EARTH + h)
            required_lift = max(0.0, mass * g * cos_gamma - centrifugal)
            aero = self.solver.solve_trim_condition(mach, altitude_ft, v, required_lift)

            acceleration = (thrust - aero.drag - mass * g * sin_gamma) / mass
            v = max(0.0, v + acceleration * dt)
            h = max(0.0, h + v * sin_gamma * dt)

            burn_rate = propulsion.fuel_mass_flow(altitude_ft, mach) * cfg.engine_count * throttle
            burned = min(burn_rate * dt, max(0.0, self.fuel_mass))
            self.fuel_mass -= burned
            # Same liters basis as fuel_remaining
            fuel_used += burned / C.KG_PER_LITER

            time += dt
            step += 1

            if step % sample_every == 0:
                temperature_k, _, rho, _ = compute_atmosphere_properties(h)
                trajectory.append(self._point(
                    time, h, v, mode,
                    lift_coefficient=aero.cl,
                    drag_coefficient=aero.cd,
                    angle_of_attack=aero.angle_of_attack,
                    reynolds_number=self.solver.reynolds_number(v, temperature_k, rho),
                    drag_breakdown=aero.breakdown,
                ))

            if self.fuel_mass <= 0.0:
                self.fuel_mass = 0.0
                termination = "fuel exhausted"
                break
            if abs(h - target_h) < cfg.altitude_tolerance and abs(v - target_v) < cfg.velocity_tolerance:
                termination = "target reached"
                break
            if time > cfg.stuck_time and v < cfg.stuck_velocity:
                termination = "stuck"
                break

        self.altitude = h
        self.velocity = v
        trajectory.append(self._point(time, h, v, propulsion.current_mode))

        result = FlightSegmentResult(
            trajectory=tuple(trajectory),
            fuel_used=fuel_used,
            final_altitude=h * C.METERS_TO_FEET,
            final_speed=v / C.SPEED_OF_SOUND_SL,
            duration=time,
            engine_used=propulsion.current_mode,
            termination=termination,
        )
        logger.info(f"Segment ended ({termination}) after {time:.1f}s: "
                    f"{result.final_altitude:,.0f} ft, Mach {result.final_speed:.2f}, "
                    f"fuel used {fuel_used:,.0f} L")
        return result

    def simulate_mission(self, flight_plan: FlightPlan,
                         propulsion: Optional[PropulsionManager] = None) -> MissionResult:
        """
        Fly every segment of the plan in order.

        Each segment starts from the state the previous one ended in; the
        mission stops early once fuel is exhausted.
        """
        waypoints = flight_plan.waypoints
        if len(waypoints) < 2:
            raise ValueError("Flight plan needs at least one segment")
        propulsion = propulsion or PropulsionManager()

        segments = []
        start = waypoints[0]
        for end in waypoints[1:]:
            segment = self.simulate_segment(start, end, propulsion)
            segments.append(segment)
            if self.fuel_mass <= 0.0:
                break
            start = Waypoint(segment.final_altitude, segment.final_speed, end.engine_mode, end.max_g)

        last = segments[-1]
        fuel_used = sum(s.fuel_used for s in segments)
        duration = sum(s.duration for s in segments)
        success = is_orbit_achieved(last.final_altitude, last.final_speed)

        return MissionResult(
            segments=tuple(segments),
            total_fuel_used=fuel_used,
            total_duration=duration,
            success=success,
            final_altitude=last.final_altitude,
            final_speed=last.final_speed,
            score=calculate_mission_score(success, fuel_used, duration),
            max_temperature=max(s.max_temperature for s in segments),
        )
