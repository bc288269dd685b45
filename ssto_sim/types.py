"""
SSTO Spaceplane Simulation - Type Definitions

This module provides TypedDict definitions for structured return types,
improving type safety and IDE support.
"""

from typing import TypedDict


class AtmosphereProperties(TypedDict):
    """Return type for atmosphere model output."""
    temperature: float  # Temperature (K)
    pressure: float  # Pressure (Pa)
    density: float  # Density (kg/m³)
    speed_of_sound: float  # Speed of sound (m/s)
    viscosity: float  # Dynamic viscosity (Pa·s)


class FuelRequirements(TypedDict):
    """Mission propellant split by tank type."""
    air_breathing_fuel: float  # Slush hydrogen for ejector-ramjet/ramjet/scramjet (kg)
    rocket_fuel: float  # Liquid hydrogen for rocket segments (kg)
    rocket_oxidizer: float  # Liquid oxygen for rocket segments (kg)


class PeakThrust(TypedDict):
    """Peak required thrust per engine class across a flight plan (N)."""
    jet: float
    ramjet: float
    scramjet: float
    rocket: float


class RocketSegmentSample(TypedDict):
    """One sample of a rocket burn profile."""
    time: float  # s since segment start
    altitude_ft: float
    speed_mach: float
    temperature: float  # leading edge, °C
