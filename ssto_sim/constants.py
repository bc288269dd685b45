"""
SSTO Spaceplane Simulation - Physical Constants and Vehicle Parameters

This module defines the physical constants, Earth parameters, atmosphere tables,
propellant properties, engine reference data and sizing defaults used throughout
the physics and sizing engine.
"""

import numpy as np

# =============================================================================
# EARTH PARAMETERS
# =============================================================================

G_CONST = 6.674e-11  # Gravitational constant (N·m²/kg²)
EARTH_MASS = 5.972e24  # kg
R_EARTH = 6371000.0  # Mean radius (m)

# Standard gravitational acceleration at sea level (m/s^2)
G0 = 9.80665

# =============================================================================
# UNIT CONVERSIONS
# =============================================================================

FEET_TO_METERS = 0.3048
METERS_TO_FEET = 3.28084
SPEED_OF_SOUND_SL = 340.29  # m/s at 15 °C, used for Mach <-> m/s at the waypoint level
KNOTS_TO_MPS = 0.514444
KELVIN_OFFSET = 273.15

# =============================================================================
# ATMOSPHERE (US Standard Atmosphere 1976)
# =============================================================================

ATM_T0 = 288.15  # Sea level temperature (K)
ATM_P0 = 101325.0  # Sea level pressure (Pa)
ATM_RHO0 = 1.225  # Sea level density (kg/m^3)
R_GAS = 287.058  # Specific gas constant for dry air (J/(kg·K))
GAMMA = 1.4  # Ratio of specific heats
ATM_UPPER_SCALE_HEIGHT = 7000.0  # Scale height above 84.852 km (m)
DENSITY_FLOOR = 1e-15  # kg/m^3, treated as vacuum below this

# Sutherland's law for dynamic viscosity
SUTHERLAND_MU_REF = 1.716e-5  # Pa·s
SUTHERLAND_T_REF = 273.15  # K
SUTHERLAND_S = 110.4  # K

# Layer boundaries and lapse rates (geometric altitude, K/m)
US76_ALTITUDES = np.array([0.0, 11000.0, 20000.0, 32000.0, 47000.0, 51000.0, 71000.0, 84852.0])
US76_LAPSE_RATES = np.array([-0.0065, 0.0, 0.0010, 0.0028, 0.0, -0.0028, -0.0020])

# =============================================================================
# MISSION TARGET
# =============================================================================

ORBIT_ALTITUDE = 200000.0  # m (low Earth orbit)
ORBIT_SPEED = 24.0  # Mach

# =============================================================================
# PROPELLANTS
# =============================================================================

KG_PER_LITER = 0.08  # Tank-averaged fuel density (80 kg/m^3)
SLUSH_HYDROGEN_DENSITY = 86.0  # kg/m^3 (air-breathing fuel)
LIQUID_HYDROGEN_DENSITY = 70.0  # kg/m^3 (rocket fuel)
LIQUID_OXYGEN_DENSITY = 1141.0  # kg/m^3
KEROSENE_DENSITY = 810.0  # kg/m^3 (sea-level rocket engine fuel)
OXYGEN_TO_HYDROGEN_RATIO = 8.0  # LOX:LH2 mass ratio for tank sizing

HYDROGEN_HEATING_VALUE = 1.2e8  # J/kg
CP_AIR = 1005.0  # J/(kg·K)
R_AIR_ENGINE = 287.05  # J/(kg·K), engine cycle gas constant

# =============================================================================
# PROPULSION - ROCKET (sea-level thrust class)
# =============================================================================

ROCKET_SEA_LEVEL_THRUST = 845000.0  # N
ROCKET_ISP_SEA_LEVEL = 300.0  # s
ROCKET_ISP_VACUUM = 345.0  # s
ROCKET_OF_RATIO = 2.36  # oxidizer:fuel mass ratio
ROCKET_PRESSURE_SCALE_HEIGHT = 8500.0  # m

# Hydrogen/oxygen rocket used for mission propellant estimates
LH2_ISP_LOW = 420.0  # s, at or below 50,000 ft
LH2_ISP_HIGH = 450.0  # s, at or above 200,000 ft
LH2_ISP_LOW_ALT_FT = 50000.0
LH2_ISP_HIGH_ALT_FT = 200000.0
LH2_MIXTURE_RATIO = 6.0  # O/F for propellant split
ROCKET_SEGMENT_ACCEL_G = 1.5  # Average burn acceleration for segment analysis

# =============================================================================
# PROPULSION - ENGINE SELECTION BANDS (altitude in meters, speed in Mach)
# =============================================================================

SCRAMJET_MIN_ALTITUDE = 24000.0
SCRAMJET_MIN_SPEED = 5.0
RAMJET_MIN_ALTITUDE = 15000.0
RAMJET_MAX_ALTITUDE = 30000.0
RAMJET_MIN_SPEED = 2.0
RAMJET_MAX_SPEED = 5.0
JET_MAX_ALTITUDE = 25000.0
JET_MAX_SPEED = 3.2

EFFICIENCY_ISP_REFERENCE = 10000.0  # s, normalises specific impulse into [0, 1]
ROCKET_ONLY_BELOW_MACH = 2.0
AIRBREATHING_CEILING_FT = 150000.0

# =============================================================================
# ENGINE WEIGHT MODEL
# =============================================================================

JET_THRUST_TO_WEIGHT = 44.4  # N/kg (J58 class)
ROCKET_THRUST_TO_WEIGHT = 180.0  # N/kg (Merlin 1D class)
RAMJET_WEIGHT = 800.0  # kg
SCRAMJET_WEIGHT = 1200.0  # kg
ENGINE_DENSITY = 2500.0  # kg/m^3
ENGINE_THRUST_UNIT = 150000.0  # N per installed engine
ENGINE_UNIT_MASS = 2400.0  # kg per installed engine

# =============================================================================
# STRUCTURE & THERMAL PROTECTION
# =============================================================================

STRUCTURE_AREAL_COEFF = 40.0  # kg per (m^3)^(2/3)
REFERENCE_LIFT_TO_DRAG = 8.0
MAX_LD_PENALTY = 0.5  # structural multiplier capped at 1 + this
LD_REFERENCE_MACH = 6.0
LD_REFERENCE_ALTITUDE_FT = 80000.0
CARGO_MASS = 5000.0  # kg

TPS_NOSE_DENSITY = 12.0  # kg/m^2
TPS_LEADING_EDGE_DENSITY = 10.0
TPS_BOTTOM_DENSITY = 6.0
TPS_TOP_DENSITY = 2.0
TPS_INLET_DENSITY = 8.0
TPS_TAIL_DENSITY = 3.0
TPS_GROWTH_PER_100C = 0.1  # fractional growth per 100 °C above the base limit

DEFAULT_MAX_TEMPERATURE = 800.0  # °C, sizing temperature
FALLBACK_DRY_MASS = 15000.0  # kg
DRY_MASS_GROWTH_PER_DEGREE = 0.00003  # per °C above 600 °C

# Simplified drag used for thrust sizing and takeoff
SIZING_DRAG_COEFFICIENT = 0.02
SIZING_REFERENCE_AREA = 50.0  # m^2

# =============================================================================
# THERMAL
# =============================================================================

BASE_MAX_TEMPERATURE = 600.0  # °C
BASE_SUSTAINED_TEMPERATURE = 550.0  # °C
SUTTON_GRAVES_K = 1.7415e-4  # kg^0.5/m
STEFAN_BOLTZMANN = 5.670374419e-8  # W/(m^2·K^4)
TPS_EMISSIVITY = 0.8
BASE_NOSE_RADIUS = 0.1  # m
ADIABATIC_WALL_FACTOR = 0.2  # (gamma - 1) / 2
MAX_SAFE_VELOCITY_SEARCH = 10000.0  # m/s

MATERIAL_LIMITS = {
    "Aluminum": 150.0,
    "Titanium": 500.0,
    "Inconel": 700.0,
    "Carbon-Carbon": 1600.0,
}

JET_MAX_OPERATING_ALTITUDE = 25001.0  # m

# =============================================================================
# AERODYNAMICS
# =============================================================================

MIN_DYNAMIC_PRESSURE = 0.001  # Pa
MIN_ALPHA = np.radians(-20.0)
MAX_ALPHA = np.radians(30.0)
SUBSONIC_LIMIT = 0.8
SUPERSONIC_LIMIT = 1.2
HYPERSONIC_LIMIT = 5.0
LEEWARD_BASE_CP = -0.2
VACUUM_CP = -1.0
BASE_DRAG_CD = 0.03
BASE_AREA_FRACTION = 0.02
AREA_RULE_MIN_MACH = 0.8
AREA_RULE_MAX_MACH = 1.4
AREA_RULE_COEFF = 0.05
MIN_REYNOLDS = 1e5

# =============================================================================
# GEOMETRY
# =============================================================================

NUM_RIBS = 41
SPLINE_STEPS = 4  # samples per spline segment and side
NOSE_FRACTION = 0.05
TAIL_FRACTION = 0.90
NORMAL_Z_THRESHOLD = 0.2
DIMENSION_FLOOR = 0.1  # canvas units
VOLUME_STATIONS = 21  # 20 intervals
BISECTION_ITERATIONS = 20
DEFAULT_AIRCRAFT_LENGTH = 70.0  # m

# =============================================================================
# FLIGHT SEGMENT INTEGRATION
# =============================================================================

DT = 0.1  # s
MAX_SEGMENT_TIME = 1000.0  # s
FLIGHT_PATH_ANGLE_DEG = 5.0
ALTITUDE_TOLERANCE = 1000.0  # m
VELOCITY_TOLERANCE = 50.0  # m/s
STUCK_TIME = 600.0  # s
STUCK_VELOCITY = 100.0  # m/s
OVERSPEED_THROTTLE = 0.1
OVERSPEED_CUTOFF = 1.1

MAX_Q_EJECTOR_RAMJET = 50000.0  # Pa
MAX_Q_RAMJET = 75000.0
MAX_Q_SCRAMJET = 100000.0
MAX_Q_ROCKET = 150000.0

# =============================================================================
# TAKEOFF
# =============================================================================

TAKEOFF_SPEED_KNOTS = 150.0
ROLLING_FRICTION = 0.02
MIN_STATIC_THRUST = 1000.0  # N
MAX_TAKEOFF_TIME = 300.0  # s

# =============================================================================
# SIZING OPTIMIZER
# =============================================================================

OPT_MAX_ITERATIONS = 20
OPT_CONVERGENCE_THRESHOLD = 0.01  # fraction of fuel capacity
OPT_DERIVATIVE_STEP = 0.5  # m
OPT_MIN_LENGTH = 30.0  # m
OPT_MAX_LENGTH = 1000.0  # m
OPT_MIN_DERIVATIVE = 0.01
OPT_MIN_STEP = 0.01  # m

PAYLOAD_VOLUME = 500.0  # m^3 (20 x 5 x 5)
CREW_VOLUME = 108.0  # m^3 (6 x 6 x 3)
VOLUME_GUESS = 1000.0  # m^3
FUEL_MASS_GUESS = 10000.0  # kg
ENGINE_MASS_GUESS = 1000.0 * 50.0  # kg

# =============================================================================
# MISSION SCORING
# =============================================================================

SCORE_BASE = 10000
SCORE_FUEL_REFERENCE = 50000.0  # L
SCORE_TIME_REFERENCE = 1000.0  # s
