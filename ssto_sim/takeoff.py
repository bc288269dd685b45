"""
SSTO Spaceplane Simulation - Takeoff Roll

This module integrates the runway acceleration from rest to rotation speed
(150 kt) and reports the fuel burned. An infeasible takeoff is reported as
math.inf rather than raised.
"""

import logging
import math
from typing import Optional

from . import constants as C
from .aerodynamics import simplified_drag
from .design import PlaneDesign
from .propulsion import Engine

logger = logging.getLogger(__name__)

TAKEOFF_SPEED = C.TAKEOFF_SPEED_KNOTS * C.KNOTS_TO_MPS  # m/s


def calculate_takeoff_fuel(engine: Engine, mass: float, design: Optional[PlaneDesign] = None,
                           dt: float = 0.1) -> float:
    """
    Fuel (liters) used to accelerate from rest to rotation speed at sea level.

    Lift ramps as (v / v_rotate)^2 times weight, unloading the wheels;
    rolling friction acts on the remaining normal force.

    Args:
        engine: Engine used for the roll
        mass: Takeoff mass (kg)
        design: Plane design (drag multiplier)
        dt: Integration step (s)

    Returns:
        Liters of fuel, or math.inf when the engine cannot start the roll
        or the roll exceeds 300 s
    """
    design = design or PlaneDesign.default()
    weight = mass * C.G0
    velocity = 0.0
    time = 0.0
    fuel = 0.0

    while velocity < TAKEOFF_SPEED:
        mach = velocity / C.SPEED_OF_SOUND_SL
        thrust = max(0.0, engine.thrust(0.0, mach))
        if velocity < 1.0 and thrust < C.MIN_STATIC_THRUST:
            logger.warning(f"Takeoff impossible: insufficient static thrust for {engine.name}")
            return math.inf

        drag = simplified_drag(0.0, velocity, design.drag_multiplier())
        lift = weight * (velocity / TAKEOFF_SPEED) ** 2
        friction = C.ROLLING_FRICTION * max(0.0, weight - lift)
        acceleration = (thrust - drag - friction) / mass

        if acceleration <= 0.0 and velocity < 1.0:
            logger.warning("Takeoff impossible: thrust cannot overcome rolling friction")
            return math.inf

        velocity += acceleration * dt
        time += dt
        fuel += engine.fuel_consumption(0.0, mach) * dt

        if time > C.MAX_TAKEOFF_TIME:
            logger.warning("Takeoff timeout: acceleration too slow")
            return math.inf

    return fuel
