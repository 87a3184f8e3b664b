"""
Main entry point when running the diffdrive_sim module with python -m.
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from .config import DEFAULT_DURATION
from .path import default_path, default_target, parse_waypoint
from .runner import SimulationRunner, report, run_with_signals, setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Differential-drive vehicle simulation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Drive in a circle with unequal voltages
  python -m diffdrive_sim --mode manual --left 200 --right 250 --duration 5

  # Follow the default square path
  python -m diffdrive_sim --mode path

  # Follow a custom path (x, y in metres, heading in degrees)
  python -m diffdrive_sim --mode path --waypoint 1,0,0 --waypoint 1,1,90

  # Drive to a pose in real time
  python -m diffdrive_sim --mode goto --target 2,2,45 --realtime
        """,
    )
    parser.add_argument(
        "--mode",
        choices=["manual", "path", "goto"],
        default="manual",
        help="Control mode to run (default: manual)",
    )
    parser.add_argument("--left", type=float, default=0.0, help="Left wheel voltage (V)")
    parser.add_argument("--right", type=float, default=0.0, help="Right wheel voltage (V)")
    parser.add_argument(
        "--waypoint",
        action="append",
        default=[],
        metavar="X,Y,DEG",
        help="Path waypoint; repeat for each (default: built-in square)",
    )
    parser.add_argument(
        "--target",
        default=None,
        metavar="X,Y,DEG",
        help="Navigation target pose (default: built-in target)",
    )
    parser.add_argument(
        "--duration",
        type=float,
        default=DEFAULT_DURATION,
        help=f"Maximum simulated time in seconds (default: {DEFAULT_DURATION})",
    )
    parser.add_argument(
        "--realtime", action="store_true", help="Pace ticks against the wall clock"
    )
    parser.add_argument(
        "--output-dir",
        default=".",
        help="Base directory for results (default: current directory)",
    )
    parser.add_argument("--no-record", action="store_true", help="Do not write CSV files")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose logging with timestamps"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Run a simulation from command-line arguments.

    Returns:
        Process exit code.
    """
    args = build_parser().parse_args(argv)

    # Setup logging based on verbose flag
    setup_logging(args.verbose)

    try:
        with SimulationRunner(output_dir=args.output_dir, record=not args.no_record) as runner:
            if args.mode == "manual":
                runner.set_voltages(args.left, args.right)
            elif args.mode == "path":
                waypoints = (
                    [parse_waypoint(text) for text in args.waypoint]
                    if args.waypoint
                    else list(default_path())
                )
                runner.program_path(waypoints)
            else:
                target = parse_waypoint(args.target) if args.target else default_target()
                runner.go_to(target)

            until_idle = args.mode != "manual"
            if args.realtime:
                asyncio.run(run_with_signals(runner, args.duration, until_idle))
            else:
                runner.run(args.duration, until_idle=until_idle)

            report(runner)
    except ValueError as e:
        logging.error(f"Error: {e}")
        return 1
    except KeyboardInterrupt:
        logging.info("\nExiting...")

    return 0


if __name__ == "__main__":
    sys.exit(main())
