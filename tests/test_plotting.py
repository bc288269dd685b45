"""
Unit tests for plot generation functionality.

Plots are rendered from a synthetic MissionLog into a temporary directory.
"""

import os
import shutil
import tempfile
import unittest

import numpy as np

from ssto_sim.design import EngineMode
from ssto_sim.main import MissionLog
from ssto_sim.plotting import (
    MODE_COLORS,
    TrajectoryData,
    extract_log_data,
    generate_all_plots,
)


def make_log(n_points: int = 60) -> MissionLog:
    """MissionLog with a ramjet leg followed by a rocket leg."""
    log = MissionLog()
    half = n_points // 2
    log.time = list(np.linspace(0.0, 600.0, n_points))
    log.altitude_ft = list(np.linspace(0.0, 656200.0, n_points))
    log.mach = list(np.linspace(0.0, 24.0, n_points))
    log.fuel_remaining_l = list(np.linspace(2.0e6, 1.0e5, n_points))
    log.temperature_c = list(np.linspace(15.0, 900.0, n_points))
    log.engine_mode = ['Ramjet'] * half + ['Rocket'] * (n_points - half)
    log.lift_coefficient = [float('nan')] + list(np.linspace(0.05, 0.01, n_points - 1))
    log.drag_coefficient = [float('nan')] + list(np.linspace(0.03, 0.005, n_points - 1))
    log.angle_of_attack_deg = [float('nan')] + [2.0] * (n_points - 1)
    log.segment = [0] * half + [1] * (n_points - half)
    return log


class TestPlotGeneration(unittest.TestCase):
    """Test suite for plot generation functionality."""

    def setUp(self):
        self.log = make_log()
        self.temp_dir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_generate_all_plots_creates_files(self):
        saved = generate_all_plots(self.log, self.temp_dir)
        self.assertEqual(len(saved), 6)
        for path in saved:
            self.assertTrue(os.path.exists(path), f"Plot file not found: {path}")
            self.assertTrue(path.startswith(self.temp_dir))
        names = sorted(os.path.basename(p) for p in saved)
        self.assertEqual(names[0], '01_altitude_profile.png')
        self.assertEqual(names[-1], '06_drag_coefficient_vs_mach.png')

    def test_optimization_history_plot(self):
        self.log.opt_length = [70.0, 64.0, 62.5]
        self.log.opt_error = [-4.0e5, -3.0e4, 200.0]
        saved = generate_all_plots(self.log, self.temp_dir)
        self.assertEqual(len(saved), 7)
        self.assertTrue(any(p.endswith('07_optimization_history.png') for p in saved))

    def test_output_directory_created(self):
        new_dir = os.path.join(self.temp_dir, 'new_subdir', 'nested')
        saved = generate_all_plots(self.log, new_dir)
        self.assertTrue(os.path.isdir(new_dir))
        self.assertGreater(len(saved), 0)

    def test_empty_log_generates_nothing(self):
        self.assertEqual(generate_all_plots(MissionLog(), self.temp_dir), [])


class TestDataExtraction(unittest.TestCase):
    """Test suite for log-to-array conversion."""

    def test_extract_log_data(self):
        data = extract_log_data(make_log(50))
        self.assertIsInstance(data, TrajectoryData)
        self.assertEqual(data.time.shape, (50,))
        self.assertAlmostEqual(data.altitude_kft[-1], 656.2)
        self.assertEqual(len(data.engine_mode), 50)
        self.assertTrue(np.isnan(data.drag_coefficient[0]))
        self.assertEqual(len(data.opt_length), 0)

    def test_every_engine_mode_has_a_color(self):
        for mode in EngineMode:
            self.assertIn(mode.value, MODE_COLORS)


if __name__ == '__main__':
    unittest.main()
