"""
SSTO Spaceplane Simulation - Trajectory Visualization

This module renders a MissionLog to PNG files:
- Altitude and Mach histories colored by engine mode
- Flight envelope (altitude vs Mach) with the orbit target
- Fuel remaining and leading-edge temperature
- Drag coefficient vs Mach
- Newton-Raphson sizing history when the run was optimized
"""

import logging
import os
from dataclasses import dataclass
from typing import Dict, List

import matplotlib
matplotlib.use("Agg")  # Non-interactive backend for batch processing
import matplotlib.pyplot as plt
import numpy as np

from . import constants as C
from .design import EngineMode

logger = logging.getLogger(__name__)

MODE_COLORS: Dict[str, str] = {
    EngineMode.EJECTOR_RAMJET.value: '#2ca02c',
    EngineMode.RAMJET.value: '#1f77b4',
    EngineMode.SCRAMJET.value: '#9467bd',
    EngineMode.ROCKET.value: '#d62728',
    EngineMode.AUTO.value: '#7f7f7f',
}


@dataclass
class TrajectoryData:
    """Log columns as numpy arrays."""
    time: np.ndarray
    altitude_kft: np.ndarray
    mach: np.ndarray
    fuel: np.ndarray  # L
    temperature: np.ndarray  # °C
    drag_coefficient: np.ndarray
    engine_mode: List[str]
    opt_length: np.ndarray
    opt_error: np.ndarray


def configure_plot_style() -> None:
    """Configure matplotlib defaults for report-quality plots."""
    plt.rcParams.update({
        'figure.figsize': (10, 6),
        'savefig.dpi': 150,
        'axes.grid': True,
        'axes.axisbelow': True,
        'grid.alpha': 0.3,
        'grid.linewidth': 0.5,
        'font.size': 11,
        'axes.titlesize': 13,
        'axes.labelsize': 12,
        'legend.fontsize': 10,
        'legend.framealpha': 0.95,
        'lines.linewidth': 1.8,
        'xtick.direction': 'in',
        'ytick.direction': 'in',
    })


def extract_log_data(log) -> TrajectoryData:
    return TrajectoryData(
        time=np.asarray(log.time, dtype=float),
        altitude_kft=np.asarray(log.altitude_ft, dtype=float) / 1000.0,
        mach=np.asarray(log.mach, dtype=float),
        fuel=np.asarray(log.fuel_remaining_l, dtype=float),
        temperature=np.asarray(log.temperature_c, dtype=float),
        drag_coefficient=np.asarray(log.drag_coefficient, dtype=float),
        engine_mode=list(log.engine_mode),
        opt_length=np.asarray(log.opt_length, dtype=float),
        opt_error=np.asarray(log.opt_error, dtype=float),
    )


def _save(fig, output_dir: str, name: str) -> str:
    plt.tight_layout()
    path = os.path.join(output_dir, name)
    fig.savefig(path, bbox_inches='tight')
    plt.close(fig)
    return path


def _scatter_by_mode(ax, data: TrajectoryData, x: np.ndarray, y: np.ndarray):
    modes = np.asarray(data.engine_mode)
    for mode in dict.fromkeys(data.engine_mode):
        mask = modes == mode
        ax.scatter(x[mask], y[mask], s=8, color=MODE_COLORS.get(mode, 'k'), label=mode, zorder=3)


def plot_altitude_profile(data: TrajectoryData, output_dir: str) -> str:
    """Altitude vs time, colored by the active engine.

    Returns:
        Path to saved plot file
    """
    fig, ax = plt.subplots()
    ax.plot(data.time, data.altitude_kft, 'k-', linewidth=1.0, alpha=0.5)
    _scatter_by_mode(ax, data, data.time, data.altitude_kft)
    ax.axhline(C.ORBIT_ALTITUDE * C.METERS_TO_FEET / 1000.0, color='gray', linestyle='--',
               label='Orbit altitude')
    ax.set_xlabel('Time (s)')
    ax.set_ylabel('Altitude (kft)')
    ax.set_title('Altitude Profile', fontweight='bold')
    ax.legend(loc='lower right')
    ax.set_ylim(0, None)
    return _save(fig, output_dir, '01_altitude_profile.png')


def plot_mach_profile(data: TrajectoryData, output_dir: str) -> str:
    fig, ax = plt.subplots()
    ax.plot(data.time, data.mach, 'k-', linewidth=1.0, alpha=0.5)
    _scatter_by_mode(ax, data, data.time, data.mach)
    ax.axhline(C.ORBIT_SPEED, color='gray', linestyle='--', label='Orbit speed')
    ax.set_xlabel('Time (s)')
    ax.set_ylabel('Mach')
    ax.set_title('Speed Profile', fontweight='bold')
    ax.legend(loc='lower right')
    ax.set_ylim(0, None)
    return _save(fig, output_dir, '02_mach_profile.png')


def plot_flight_envelope(data: TrajectoryData, output_dir: str) -> str:
    """Altitude vs Mach with the orbit target corner."""
    fig, ax = plt.subplots()
    _scatter_by_mode(ax, data, data.mach, data.altitude_kft)
    ax.scatter([C.ORBIT_SPEED], [C.ORBIT_ALTITUDE * C.METERS_TO_FEET / 1000.0],
               c='gold', s=150, marker='*', edgecolors='k', zorder=5, label='Orbit target')
    ax.set_xlabel('Mach')
    ax.set_ylabel('Altitude (kft)')
    ax.set_title('Flight Envelope', fontweight='bold')
    ax.legend(loc='upper left')
    return _save(fig, output_dir, '03_flight_envelope.png')


def plot_fuel_remaining(data: TrajectoryData, output_dir: str) -> str:
    fig, ax = plt.subplots()
    ax.plot(data.time, data.fuel / 1000.0, 'b-')
    ax.set_xlabel('Time (s)')
    ax.set_ylabel('Fuel remaining (kL)')
    ax.set_title('Fuel Remaining', fontweight='bold')
    ax.set_ylim(0, None)
    return _save(fig, output_dir, '04_fuel_remaining.png')


def plot_leading_edge_temperature(data: TrajectoryData, output_dir: str) -> str:
    fig, ax = plt.subplots()
    ax.plot(data.time, data.temperature, 'r-', label='Leading edge')
    ax.axhline(C.BASE_MAX_TEMPERATURE, color='darkred', linestyle='--',
               label=f'Base limit ({C.BASE_MAX_TEMPERATURE:.0f}°C)')
    ax.set_xlabel('Time (s)')
    ax.set_ylabel('Temperature (°C)')
    ax.set_title('Leading-Edge Temperature', fontweight='bold')
    ax.legend(loc='upper left')
    return _save(fig, output_dir, '05_leading_edge_temperature.png')


def plot_drag_coefficient_vs_mach(data: TrajectoryData, output_dir: str) -> str:
    fig, ax = plt.subplots()
    valid = np.isfinite(data.drag_coefficient)
    ax.plot(data.mach[valid], data.drag_coefficient[valid], 'o', markersize=3)
    ax.axvspan(C.SUBSONIC_LIMIT, C.SUPERSONIC_LIMIT, color='orange', alpha=0.15, label='Transonic')
    ax.set_xlabel('Mach')
    ax.set_ylabel('$C_D$')
    ax.set_title('Drag Coefficient vs Mach', fontweight='bold')
    ax.legend(loc='upper right')
    return _save(fig, output_dir, '06_drag_coefficient_vs_mach.png')


def plot_optimization_history(data: TrajectoryData, output_dir: str) -> str:
    """Length and fuel error per Newton-Raphson iteration."""
    iterations = np.arange(1, len(data.opt_length) + 1)
    fig, (ax1, ax2) = plt.subplots(2, 1, sharex=True)
    ax1.plot(iterations, data.opt_length, 'bo-')
    ax1.set_ylabel('Length (m)')
    ax1.set_title('Length Sizing History', fontweight='bold')
    ax2.plot(iterations, data.opt_error / 1000.0, 'ro-')
    ax2.axhline(0.0, color='k', linewidth=0.8)
    ax2.set_xlabel('Iteration')
    ax2.set_ylabel('Fuel error (t)')
    return _save(fig, output_dir, '07_optimization_history.png')


def generate_all_plots(log, output_dir: str = "plots") -> List[str]:
    """Generate all trajectory plots.

    Args:
        log: MissionLog from a run
        output_dir: Directory to save plots (created if doesn't exist)

    Returns:
        List of paths to saved plot files
    """
    os.makedirs(output_dir, exist_ok=True)
    configure_plot_style()
    data = extract_log_data(log)

    plot_functions = [
        plot_altitude_profile,
        plot_mach_profile,
        plot_flight_envelope,
        plot_fuel_remaining,
        plot_leading_edge_temperature,
        plot_drag_coefficient_vs_mach,
    ]
    if len(data.opt_length) > 0:
        plot_functions.append(plot_optimization_history)

    saved_files = []
    if len(data.time) == 0:
        logger.warning("Empty log, no plots generated")
        return saved_files

    for plot_func in plot_functions:
        try:
            saved_files.append(plot_func(data, output_dir))
        except Exception as e:
            logger.warning(f"Failed to generate {plot_func.__name__}: {e}")

    return saved_files
