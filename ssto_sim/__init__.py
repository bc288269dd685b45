"""
SSTO Spaceplane Simulation Package

Physics and sizing engine for a single-stage-to-orbit spaceplane whose
hull is drawn as three 2-D curves.

Modules:
    - constants: Physical constants and vehicle parameters
    - curves: Side profile, planform and cross-section descriptors
    - atmosphere: US Standard Atmosphere 1976
    - design: Engine modes, waypoints, flight plan, plane design
    - geometry: Panel mesh extraction and memoization
    - aerodynamics: Regime-switching panel-method solver
    - propulsion: Air-breathing cycles, rocket, engine manager
    - thermal: Leading-edge heating and limits
    - rocket / fuel / takeoff: Propellant, volume and takeoff estimates
    - mass: Structural, TPS and engine mass model
    - flight: Segment integrator and mission results
    - optimizer: Newton-Raphson length sizing
    - validation: Geometry, flight plan and envelope checks
    - main: End-to-end run entry point
"""

from .design import EngineMode, Waypoint, FlightPlan, PlaneDesign, is_orbit_achieved
from .curves import SideProfile, TopViewPlanform, CrossSection
from .geometry import AerodynamicGeometry, GeometryCache, extract_geometry, get_geometry
from .aerodynamics import AerodynamicSolver
from .propulsion import PropulsionManager, select_engine_mode
from .flight import FlightSimulator, MissionResult
from .optimizer import OptimizationResult, optimize_length, apply_optimized_length
from .main import run_mission, MissionRun, MissionLog
from .config import SimulationConfig, create_default_config, create_test_config

__version__ = "1.0.0"
__author__ = "SSTO Simulation Team"

__all__ = [
    'EngineMode',
    'Waypoint',
    'FlightPlan',
    'PlaneDesign',
    'is_orbit_achieved',
    'SideProfile',
    'TopViewPlanform',
    'CrossSection',
    'AerodynamicGeometry',
    'GeometryCache',
    'extract_geometry',
    'get_geometry',
    'AerodynamicSolver',
    'PropulsionManager',
    'select_engine_mode',
    'FlightSimulator',
    'MissionResult',
    'OptimizationResult',
    'optimize_length',
    'apply_optimized_length',
    'run_mission',
    'MissionRun',
    'MissionLog',
    'SimulationConfig',
    'create_default_config',
    'create_test_config',
]
