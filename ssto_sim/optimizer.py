"""
SSTO Spaceplane Simulation - Newton-Raphson Length Sizing

Treats aircraft length as the single decision variable. The residual is
the fuel-equivalent margin between the internal volume available at that
length and the volume the mission needs:

    f(L) = capacity(L) - required        (plan ends at orbit, enough volume)
    f(L) = -(deficit + extra propellant) (otherwise)

Internal volume is assumed to scale isotropically as (L / L0)^3. The
derivative is a centered finite difference; every iteration's (L, f(L))
pair is kept for diagnostics.
"""

from dataclasses import dataclass, field, replace
from typing import List, Optional, Tuple
import logging

from . import constants as C
from .config import SimulationConfig, create_default_config
from .curves import CrossSection, SideProfile, TopViewPlanform
from .design import FlightPlan, PlaneDesign, is_orbit_achieved
from .fuel import FuelEstimator
from .geometry import AerodynamicGeometry, get_geometry
from .mass import calculate_dry_mass
from .rocket import calculate_delta_v, calculate_propellant_mass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MissionEvaluation:
    """Residual evaluation at one candidate length."""
    length: float  # m
    fuel_error: float  # kg, positive is excess
    fuel_capacity: float  # kg
    fuel_required: float  # kg
    success: bool


@dataclass
class OptimizationResult:
    optimal_length: float  # m
    fuel_error: float  # kg
    fuel_capacity: float  # kg
    fuel_required: float  # kg
    iterations: int
    converged: bool
    length_history: List[float] = field(default_factory=list)
    error_history: List[float] = field(default_factory=list)

    @property
    def history(self) -> List[Tuple[float, float]]:
        """(length, error) for every evaluated iteration."""
        return list(zip(self.length_history, self.error_history))

    @property
    def error_fraction(self) -> float:
        return abs(self.fuel_error) / max(1.0, self.fuel_capacity)

    def summary(self) -> str:
        status = "CONVERGED" if self.converged else "NOT CONVERGED"
        lines = [
            f"Length optimization: {status} after {self.iterations} iterations",
            f"  Optimal length: {self.optimal_length:.2f} m",
            f"  Fuel capacity:  {self.fuel_capacity:,.0f} kg",
            f"  Fuel required:  {self.fuel_required:,.0f} kg",
            f"  Final error:    {self.fuel_error:,.0f} kg ({self.error_fraction * 100:.1f}% of capacity)",
        ]
        if self.fuel_error > 0:
            lines.append(f"  Mission achievable with {self.fuel_error:,.0f} kg excess fuel")
        else:
            lines.append(f"  Need {-self.fuel_error:,.0f} kg additional fuel")
        return "\n".join(lines)


def fuel_equivalent(volume_m3: float) -> float:
    """Volume expressed as kg of tank-averaged fuel."""
    return volume_m3 * 1000.0 * C.KG_PER_LITER


def evaluate_mission(length: float, flight_plan: FlightPlan, design: PlaneDesign,
                     base_geometry: AerodynamicGeometry,
                     required_volume: Optional[float] = None,
                     max_temperature: float = C.DEFAULT_MAX_TEMPERATURE) -> MissionEvaluation:
    """
    Fuel margin of the hull scaled to a candidate length.

    Args:
        length: Candidate aircraft length (m)
        flight_plan: Mission to size for
        design: Plane design
        base_geometry: Geometry at the reference length
        required_volume: Precomputed mission volume (m^3); estimated when None
        max_temperature: TPS sizing temperature (°C)

    Returns:
        MissionEvaluation
    """
    if required_volume is None:
        required_volume = FuelEstimator().calculate_required_volume(
            flight_plan, design, base_geometry).total

    scale = (length / base_geometry.aircraft_length) ** 3
    volume = base_geometry.volume * scale
    capacity = fuel_equivalent(volume)
    required = fuel_equivalent(required_volume)

    waypoints = flight_plan.waypoints
    final = waypoints[-1]
    reached_orbit = is_orbit_achieved(final.altitude, final.speed)

    if required <= capacity and reached_orbit:
        return MissionEvaluation(length, capacity - required, capacity, required, True)

    deficit = required - capacity
    if reached_orbit:
        return MissionEvaluation(length, -deficit, capacity, required, False)

    # Propellant still needed to finish the ascent from the last waypoint
    dry_mass = calculate_dry_mass(volume, waypoints, design, base_geometry, max_temperature)
    current_mass = dry_mass + capacity - required
    orbit_altitude_ft = C.ORBIT_ALTITUDE * C.METERS_TO_FEET
    delta_v = calculate_delta_v(final.altitude, orbit_altitude_ft, final.speed, C.ORBIT_SPEED)
    mean_altitude = 0.5 * (final.altitude + orbit_altitude_ft)
    extra = calculate_propellant_mass(delta_v, max(current_mass, 1.0), mean_altitude)[0]
    return MissionEvaluation(length, -(deficit + extra), capacity, required, False)


def optimize_length(initial_length: float, flight_plan: FlightPlan, design: PlaneDesign,
                    profile: Optional[SideProfile] = None,
                    planform: Optional[TopViewPlanform] = None,
                    cross_section: Optional[CrossSection] = None,
                    config: Optional[SimulationConfig] = None) -> OptimizationResult:
    """
    Newton-Raphson search for the length at which fuel capacity matches need.

    Stops when |f| falls below the convergence fraction of capacity, when the
    clamped step is negligible, when |f'| vanishes (not converged), or at the
    iteration cap (not converged).
    """
    if initial_length <= 0.0:
        raise ValueError(f"initial_length must be positive, got {initial_length}")
    if len(flight_plan) < 2:
        raise ValueError("Flight plan needs at least one segment to size for")

    config = config or create_default_config()
    base_geometry = get_geometry(profile, planform, cross_section,
                                 config.spline_steps, config.num_ribs)
    required_volume = FuelEstimator().calculate_required_volume(
        flight_plan, design, base_geometry).total
    h = config.opt_derivative_step

    def residual(length: float) -> MissionEvaluation:
        return evaluate_mission(length, flight_plan, design, base_geometry,
                                required_volume, config.max_temperature)

    logger.info(f"Length optimization from {initial_length:.2f} m "
                f"(bounds {config.opt_min_length:.0f}-{config.opt_max_length:.0f} m, "
                f"required volume {required_volume:.1f} m³)")

    length = initial_length
    lengths: List[float] = []
    errors: List[float] = []
    converged = False
    evaluation = residual(length)
    iteration = 0

    while iteration < config.opt_max_iterations:
        iteration += 1
        lengths.append(length)
        errors.append(evaluation.fuel_error)

        logger.info(f"Iteration {iteration}: L={length:.2f} m, capacity={evaluation.fuel_capacity:,.0f} kg, "
                    f"required={evaluation.fuel_required:,.0f} kg, error={evaluation.fuel_error:,.0f} kg")

        if abs(evaluation.fuel_error) / max(1.0, evaluation.fuel_capacity) < config.opt_convergence_threshold:
            converged = True
            break

        derivative = (residual(length + h).fuel_error - residual(length - h).fuel_error) / (2.0 * h)
        logger.debug(f"  f'(L) = {derivative:.2f} kg/m")
        if abs(derivative) < C.OPT_MIN_DERIVATIVE:
            logger.warning("Derivative too small, stopping iteration")
            break

        new_length = min(config.opt_max_length,
                         max(config.opt_min_length, length - evaluation.fuel_error / derivative))
        if abs(new_length - length) < C.OPT_MIN_STEP:
            # Pinned against a bound is a stall, not a root
            converged = config.opt_min_length < new_length < config.opt_max_length
            length = new_length
            evaluation = residual(length)
            break
        length = new_length
        evaluation = residual(length)

    result = OptimizationResult(
        optimal_length=length,
        fuel_error=evaluation.fuel_error,
        fuel_capacity=evaluation.fuel_capacity,
        fuel_required=evaluation.fuel_required,
        iterations=iteration,
        converged=converged,
        length_history=lengths,
        error_history=errors,
    )
    if converged:
        logger.info(f"Converged: optimal length {length:.2f} m after {iteration} iterations")
    else:
        logger.warning(f"Optimization did not converge after {iteration} iterations "
                       f"(last length {length:.2f} m)")
    return result


def apply_optimized_length(result: OptimizationResult, planform: TopViewPlanform) -> TopViewPlanform:
    """New planform carrying the optimized length."""
    return replace(planform, aircraft_length=result.optimal_length)
