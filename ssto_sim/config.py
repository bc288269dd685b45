"""
SSTO Spaceplane Simulation - Configuration

This module provides a SimulationConfig dataclass for dependency injection,
allowing integrator, guidance, mass-model and optimizer parameters to be
passed explicitly instead of being read from shared state.
"""

from dataclasses import dataclass

from . import constants as C


@dataclass(frozen=True)
class SimulationConfig:
    """
    Immutable configuration for simulation and sizing parameters.

    Using frozen=True ensures configs cannot be accidentally modified.
    Create new configs via dataclass replace() if needed.

    Section grouping:
      1. Segment integration timing
      2. Guidance / throttle management
      3. Dynamic pressure ceilings
      4. Geometry sampling
      5. Mass model
      6. Sizing optimizer
    """

    # ── 1. Segment integration timing ────────────────────────────────────
    dt: float = C.DT
    max_time: float = C.MAX_SEGMENT_TIME
    sample_interval: float = 1.0  # s between trajectory points

    # ── 2. Guidance / throttle management ────────────────────────────────
    flight_path_angle_deg: float = C.FLIGHT_PATH_ANGLE_DEG
    altitude_tolerance: float = C.ALTITUDE_TOLERANCE
    velocity_tolerance: float = C.VELOCITY_TOLERANCE
    overspeed_throttle: float = C.OVERSPEED_THROTTLE
    overspeed_cutoff: float = C.OVERSPEED_CUTOFF
    stuck_time: float = C.STUCK_TIME
    stuck_velocity: float = C.STUCK_VELOCITY
    engine_count: int = 1

    # ── 3. Dynamic pressure ceilings (Pa) ────────────────────────────────
    max_q_ejector_ramjet: float = C.MAX_Q_EJECTOR_RAMJET
    max_q_ramjet: float = C.MAX_Q_RAMJET
    max_q_scramjet: float = C.MAX_Q_SCRAMJET
    max_q_rocket: float = C.MAX_Q_ROCKET

    # ── 4. Geometry sampling ─────────────────────────────────────────────
    spline_steps: int = C.SPLINE_STEPS
    num_ribs: int = C.NUM_RIBS

    # ── 5. Mass model ────────────────────────────────────────────────────
    max_temperature: float = C.DEFAULT_MAX_TEMPERATURE
    cargo_mass: float = C.CARGO_MASS
    structure_coefficient: float = C.STRUCTURE_AREAL_COEFF

    # ── 6. Sizing optimizer ──────────────────────────────────────────────
    opt_max_iterations: int = C.OPT_MAX_ITERATIONS
    opt_convergence_threshold: float = C.OPT_CONVERGENCE_THRESHOLD
    opt_derivative_step: float = C.OPT_DERIVATIVE_STEP
    opt_min_length: float = C.OPT_MIN_LENGTH
    opt_max_length: float = C.OPT_MAX_LENGTH

    def max_dynamic_pressure(self, mode) -> float:
        """Dynamic pressure ceiling for an engine mode (auto falls back to the most conservative)."""
        from .design import EngineMode

        limits = {
            EngineMode.EJECTOR_RAMJET: self.max_q_ejector_ramjet,
            EngineMode.RAMJET: self.max_q_ramjet,
            EngineMode.SCRAMJET: self.max_q_scramjet,
            EngineMode.ROCKET: self.max_q_rocket,
        }
        return limits.get(mode, self.max_q_ejector_ramjet)


def create_default_config() -> SimulationConfig:
    """Create configuration with default values from constants."""
    return SimulationConfig()


def create_test_config(dt: float = 0.1, max_time: float = 200.0, **overrides) -> SimulationConfig:
    """
    Create configuration suitable for quick unit tests.

    Args:
        dt: Time step (s)
        max_time: Maximum simulated time per segment (s)
        **overrides: Any other SimulationConfig field

    Returns:
        SimulationConfig for short test runs
    """
    defaults = dict(dt=dt, max_time=max_time)
    defaults.update(overrides)
    return SimulationConfig(**defaults)
