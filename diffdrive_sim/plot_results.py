#!/usr/bin/env python3
"""
Plot a recorded simulation run.

Runs live under results/run_YYYYMMDD_HHMMSS/ (see DataCollector). Without
arguments the newest run is plotted; --list shows what is available.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import RESULTS_DIR, TERM_BLUE, TERM_RESET
from .visualization import plot_run_summary


def run_directories(results_dir: Path) -> List[Path]:
    """Run directories under results_dir, oldest first.

    Timestamped names sort chronologically.

    Raises:
        FileNotFoundError: If results_dir does not exist.
    """
    if not results_dir.is_dir():
        raise FileNotFoundError(f"No results directory at {results_dir}")
    return sorted(d for d in results_dir.iterdir() if d.is_dir() and d.name.startswith("run_"))


def find_latest_run(results_dir: Path) -> Path:
    """Return the newest run directory.

    Raises:
        FileNotFoundError: If there is no results directory or it holds no runs.
    """
    runs = run_directories(results_dir)
    if not runs:
        raise FileNotFoundError(f"No recorded runs in {results_dir}")
    return runs[-1]


def resolve_run(results_dir: Path, name: Optional[str]) -> Path:
    """Pick the run to plot: the named one, or the newest when name is None.

    Raises:
        FileNotFoundError: If the requested run does not exist.
    """
    if name is None:
        return find_latest_run(results_dir)
    run_dir = results_dir / name
    if not run_dir.is_dir():
        raise FileNotFoundError(f"Run {name} not found in {results_dir}")
    return run_dir


def list_available_runs(results_dir: Path) -> None:
    runs = run_directories(results_dir)
    if not runs:
        logging.info(f"No recorded runs in {results_dir}")
        return
    logging.info(f"{len(runs)} recorded run(s) in {results_dir}:")
    for run_dir in runs:
        logging.info(f"  {run_dir.name}")


def main(argv: Optional[List[str]] = None) -> int:
    """Plot a recorded run. Returns the process exit code."""
    logging.basicConfig(level=logging.INFO, format="%(message)s")

    parser = argparse.ArgumentParser(
        description="Plot the trajectory and motion history of a recorded simulation run",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m diffdrive_sim.plot_results
  python -m diffdrive_sim.plot_results --run run_20251114_184704 --save --no-show
  python -m diffdrive_sim.plot_results --list
        """,
    )
    parser.add_argument("--run", default=None, help="Run directory name (default: newest run)")
    parser.add_argument(
        "--results-dir",
        default=RESULTS_DIR,
        help=f"Directory holding the runs (default: {RESULTS_DIR})",
    )
    parser.add_argument(
        "--save", action="store_true", help="Write trajectory.png and motion.png into the run"
    )
    parser.add_argument("--no-show", action="store_true", help="Do not open plot windows")
    parser.add_argument("--list", action="store_true", help="List recorded runs and exit")

    args = parser.parse_args(argv)
    results_dir = Path(args.results_dir)

    try:
        if args.list:
            list_available_runs(results_dir)
            return 0

        run_dir = resolve_run(results_dir, args.run)
        logging.info(f"{TERM_BLUE}Plotting {run_dir}{TERM_RESET}")
        plot_run_summary(run_dir=run_dir, save_plots=args.save, show_plots=not args.no_show)
    except (FileNotFoundError, ValueError) as e:
        logging.error(f"Error: {e}")
        return 1

    if args.save:
        logging.info(f"{TERM_BLUE}✓ Saved plots to {run_dir}{TERM_RESET}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
