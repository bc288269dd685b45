"""
SSTO Spaceplane Simulation - CLI

The single entry point for sizing and flying a spaceplane, exporting
telemetry and generating plots.
"""

import argparse
import logging
import os
import sys
from dataclasses import replace

from .design import EngineMode, FlightPlan, Waypoint
from .curves import TopViewPlanform
from .main import run_mission
from .plotting import generate_all_plots

logger = logging.getLogger(__name__)


def _waypoint(values) -> Waypoint:
    altitude, mach, mode = values
    return Waypoint(float(altitude), float(mach), EngineMode.from_name(mode))


def parse_args(argv=None):
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="SSTO Spaceplane Physics and Sizing Engine",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser.add_argument(
        "--length", "-l",
        type=float,
        default=None,
        help="Aircraft length in meters (default hull is 70 m)"
    )
    parser.add_argument(
        "--optimize",
        action="store_true",
        help="Size the aircraft length with Newton-Raphson before flying"
    )
    parser.add_argument(
        "--waypoint", "-w",
        nargs=3,
        action="append",
        metavar=("ALT_FT", "MACH", "MODE"),
        help="Append a waypoint (repeatable); MODE is auto, ejector-ramjet, ramjet, scramjet or rocket. "
             "Without waypoints a single rocket climb to orbit is flown"
    )
    parser.add_argument(
        "--csv",
        type=str,
        default=None,
        help="Write the trajectory log to this CSV file"
    )
    parser.add_argument(
        "--output-dir", "-o",
        type=str,
        default="plots",
        help="Directory to save output plots"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Suppress verbose output"
    )
    parser.add_argument(
        "--no-plots",
        action="store_true",
        help="Skip plot generation"
    )
    args = parser.parse_args(argv)

    if args.length is not None and args.length <= 0:
        parser.error("--length must be positive")
    try:
        args.waypoints = [_waypoint(values) for values in args.waypoint or []]
    except ValueError as e:
        parser.error(str(e))
    return args


def main(argv=None):
    """Main execution flow."""
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.WARNING if args.quiet else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    flight_plan = FlightPlan(args.waypoints) if args.waypoints else FlightPlan.orbital_rocket_climb()
    planform = TopViewPlanform.default()
    if args.length is not None:
        planform = replace(planform, aircraft_length=args.length)

    print(f"\n{'='*70}\nSSTO SPACEPLANE: SIZING AND MISSION RUN\n{'='*70}\n")
    print(flight_plan.summary())

    try:
        run = run_mission(flight_plan=flight_plan, planform=planform, optimize=args.optimize)

        print("\n" + "="*60)
        print("MISSION SUMMARY")
        print("="*60)
        print(run.summary())
        print(run.mass.summary())
        print(run.volume_requirement.summary())
        print("="*60 + "\n")

        if args.csv:
            run.log.to_csv(args.csv)
            logger.info(f"Trajectory written to {args.csv}")

        if not args.no_plots and len(run.log) > 0:
            if os.path.isabs(args.output_dir):
                plot_dir = args.output_dir
            else:
                plot_dir = os.path.join(os.getcwd(), args.output_dir)

            logger.info(f"Generating plots in {plot_dir}")
            saved = generate_all_plots(run.log, plot_dir)
            print(f">> {len(saved)} plots written to: {plot_dir}")

    except Exception as e:
        logger.error(f"Simulation failed: {e}", exc_info=True)
        print(f"\n[ERROR] Simulation failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
