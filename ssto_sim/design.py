"""
SSTO Spaceplane Simulation - Mission and Design Inputs

This module defines the user-authored inputs consumed by the engine:
- Engine modes
- Waypoints and the ordered flight plan
- Plane design knobs (drag / thermal multipliers from the leading-edge design step)
- Orbit achievement predicate
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from . import constants as C


class EngineMode(Enum):
    AUTO = "Auto"
    EJECTOR_RAMJET = "Ejector-Ramjet"
    RAMJET = "Ramjet"
    SCRAMJET = "Scramjet"
    ROCKET = "Rocket"

    @classmethod
    def from_name(cls, name: str) -> "EngineMode":
        """Parse a mode from its enum name or display value (case-insensitive)."""
        key = name.strip().lower().replace("_", "-")
        for mode in cls:
            if key in (mode.value.lower(), mode.name.lower().replace("_", "-")):
                return mode
        raise ValueError(f"Unknown engine mode: {name!r}")


# Mach windows in which a manually selected engine is considered usable
_MODE_MACH_WINDOWS = {
    EngineMode.EJECTOR_RAMJET: (3.0, 10.0),
    EngineMode.RAMJET: (2.5, 6.5),
    EngineMode.SCRAMJET: (5.0, 16.0),
}


@dataclass(frozen=True)
class Waypoint:
    """Target state at the end of a flight segment."""
    altitude: float  # ft
    speed: float  # Mach
    engine_mode: EngineMode = EngineMode.AUTO
    max_g: float = 3.0

    def is_valid(self) -> bool:
        if self.altitude < 0 or self.speed < 0:
            return False
        window = _MODE_MACH_WINDOWS.get(self.engine_mode)
        if window is None:
            return True
        return window[0] <= self.speed <= window[1]

    @property
    def altitude_m(self) -> float:
        return self.altitude * C.FEET_TO_METERS


def is_orbit_achieved(altitude_ft: float, mach: float) -> bool:
    """Orbit requires >= 200,000 m AND >= Mach 24 simultaneously."""
    return altitude_ft * C.FEET_TO_METERS >= C.ORBIT_ALTITUDE and mach >= C.ORBIT_SPEED


class FlightPlan:
    """
    Ordered, non-empty sequence of waypoints.

    Index 0 is always the ground/initial state; only its engine mode
    may be edited.
    """

    def __init__(self, waypoints: Optional[List[Waypoint]] = None):
        self._waypoints = [Waypoint(0.0, 0.0, EngineMode.AUTO)]
        for wp in waypoints or []:
            self.add_waypoint(wp)

    @property
    def waypoints(self) -> List[Waypoint]:
        return list(self._waypoints)

    def __len__(self) -> int:
        return len(self._waypoints)

    def add_waypoint(self, waypoint: Waypoint):
        self._waypoints.append(waypoint)

    def insert_waypoint(self, waypoint: Waypoint, index: int):
        if not 1 <= index <= len(self._waypoints):
            raise IndexError(f"Insert index {index} out of range 1..{len(self._waypoints)}")
        self._waypoints.insert(index, waypoint)

    def remove_waypoint(self, index: int):
        if not 0 < index < len(self._waypoints):
            raise IndexError(f"Cannot remove waypoint {index}")
        del self._waypoints[index]

    def update_waypoint(self, index: int, waypoint: Waypoint):
        if not 0 <= index < len(self._waypoints):
            raise IndexError(f"Waypoint index {index} out of range")
        if index == 0:
            ground = self._waypoints[0]
            self._waypoints[0] = Waypoint(ground.altitude, ground.speed,
                                          waypoint.engine_mode, ground.max_g)
        else:
            self._waypoints[index] = waypoint

    def reset(self):
        self._waypoints = [Waypoint(0.0, 0.0, EngineMode.AUTO)]

    def is_valid_for_flight(self) -> bool:
        """At least one segment, every waypoint valid, and the last one at orbit."""
        if len(self._waypoints) < 2:
            return False
        if not all(wp.is_valid() for wp in self._waypoints):
            return False
        last = self._waypoints[-1]
        return is_orbit_achieved(last.altitude, last.speed)

    def summary(self) -> str:
        last = self._waypoints[-1]
        return (f"Flight plan with {len(self._waypoints)} waypoints, "
                f"targeting {last.altitude:.0f} ft at Mach {last.speed:g}")

    @classmethod
    def orbital_rocket_climb(cls) -> "FlightPlan":
        """Ground start followed by one rocket climb to orbit."""
        return cls([Waypoint(656200.0, C.ORBIT_SPEED, EngineMode.ROCKET)])


@dataclass(frozen=True)
class PlaneDesign:
    """Leading-edge design knobs (degrees / canvas units)."""
    tilt_angle: float = 0.0
    sweep_angle: float = 92.0
    position: float = 0.0

    OPTIMAL_TILT = 0.0
    OPTIMAL_SWEEP = 80.0
    OPTIMAL_POSITION = 174.0
    SWEEP_NEUTRAL_MIN = 90.0
    SWEEP_NEUTRAL_MAX = 100.0

    @classmethod
    def default(cls) -> "PlaneDesign":
        return cls()

    @classmethod
    def optimal(cls) -> "PlaneDesign":
        return cls(cls.OPTIMAL_TILT, cls.OPTIMAL_SWEEP, cls.OPTIMAL_POSITION)

    def drag_multiplier(self) -> float:
        """Legacy drag scale used by the simplified sizing drag estimate, in [0.7, 2.0]."""
        multiplier = 0.3
        multiplier += abs(self.position - self.OPTIMAL_POSITION) / 150.0 * 0.3

        if self.sweep_angle < self.SWEEP_NEUTRAL_MIN:
            multiplier += (self.SWEEP_NEUTRAL_MIN - self.sweep_angle) / 25.0 * 0.4
        elif self.sweep_angle > self.SWEEP_NEUTRAL_MAX:
            multiplier += (self.sweep_angle - self.SWEEP_NEUTRAL_MAX) / 40.0 * 0.4
        else:
            span = self.SWEEP_NEUTRAL_MAX - self.SWEEP_NEUTRAL_MIN
            multiplier += (self.sweep_angle - self.SWEEP_NEUTRAL_MIN) / span * 0.1

        multiplier += abs(self.tilt_angle) / 45.0 * 0.15
        return max(0.7, min(2.0, multiplier))

    def thermal_limit_multiplier(self) -> float:
        """Scale on the 600 °C base limit, in [0.6, 1.3]. Blunter edges tolerate more heat."""
        multiplier = 1.0
        if self.SWEEP_NEUTRAL_MIN <= self.sweep_angle <= self.SWEEP_NEUTRAL_MAX:
            span = self.SWEEP_NEUTRAL_MAX - self.SWEEP_NEUTRAL_MIN
            multiplier -= (self.sweep_angle - self.SWEEP_NEUTRAL_MIN) / span * 0.15
        elif self.sweep_angle < self.SWEEP_NEUTRAL_MIN:
            multiplier += (self.SWEEP_NEUTRAL_MIN - self.sweep_angle) / 25.0 * 0.2
        else:
            multiplier -= (self.sweep_angle - self.SWEEP_NEUTRAL_MAX) / 40.0 * 0.25

        multiplier -= abs(self.tilt_angle) / 45.0 * 0.1
        return max(0.6, min(1.3, multiplier))

    def heating_rate_multiplier(self) -> float:
        return 1.0 / self.thermal_limit_multiplier()

    def summary(self) -> str:
        drag_pct = int((self.drag_multiplier() - 1.0) * 100)
        thermal_pct = int((self.thermal_limit_multiplier() - 1.0) * 100)
        return f"Drag: {drag_pct:+d}%, Thermal Limit: {thermal_pct:+d}%"

    def score(self) -> int:
        """Design quality 0-100 (60% drag, 40% thermal)."""
        drag_score = max(0.0, 100.0 - (self.drag_multiplier() - 0.7) * 100.0 / 1.3)
        thermal_score = (self.thermal_limit_multiplier() - 0.6) * 100.0 / 0.7
        return int(drag_score * 0.6 + thermal_score * 0.4)
