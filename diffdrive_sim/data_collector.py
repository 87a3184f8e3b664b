"""Data collection and CSV logging for simulation runs.

This module provides CSV data logging for:
- Pose and velocity samples (one row per tick)
- Notification events (waypoints reached, path complete, arrival)
- Submitted waypoints and navigation targets
- The final trajectory log snapshot
"""

import csv
import os
from datetime import datetime
from pathlib import Path
from typing import Any, Optional, Sequence, TextIO

import numpy as np

from .config import RESULTS_DIR, TERM_BLUE, TERM_RESET
from .state import Notification, SimulationState, Waypoint

POSE_COLUMNS = [
    "tick",
    "time",
    "x",
    "y",
    "heading",
    "linear_velocity",
    "angular_velocity",
    "left_wheel_velocity",
    "right_wheel_velocity",
    "mode",
]

EVENT_COLUMNS = ["tick", "time", "kind", "message"]

WAYPOINT_COLUMNS = ["role", "index", "x", "y", "theta"]

TRAJECTORY_COLUMNS = ["x", "y"]


class DataCollector:
    """Manages CSV file creation and logging for simulation data.

    Attributes:
        run_dir: Directory path for this run's output files.
        pose_csv_file: File handle for per-tick pose data.
        events_csv_file: File handle for notifications.
        waypoints_csv_file: File handle for submitted waypoints and targets.
        trajectory_output_path: Path of the trajectory snapshot written on cleanup.
    """

    def __init__(self, output_dir: str = ".", run_dir: Optional[str] = None) -> None:
        """Initialize the data collector.

        Args:
            output_dir: Base directory for output files (default: current directory).
            run_dir: Optional specific run directory. If None, creates timestamped
                directory. Can also be set via RUN_DIR environment variable.

        Raises:
            ValueError: If output_dir is not a valid directory.
        """
        output_path = Path(output_dir)
        if output_path.exists() and not output_path.is_dir():
            raise ValueError(f"Output path exists but is not a directory: {output_dir}")

        self.pose_csv_file: Optional[TextIO] = None
        self.pose_csv_writer: Any = None
        self.events_csv_file: Optional[TextIO] = None
        self.events_csv_writer: Any = None
        self.waypoints_csv_file: Optional[TextIO] = None
        self.waypoints_csv_writer: Any = None

        if run_dir:
            self.run_dir: Path = Path(run_dir)
        elif env_run_dir := os.environ.get("RUN_DIR"):
            self.run_dir = Path(env_run_dir)
        else:
            # results/run_YYYYMMDD_HHMMSS/
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            self.run_dir = output_path / RESULTS_DIR / f"run_{timestamp}"

        self.run_dir.mkdir(parents=True, exist_ok=True)

        self.pose_output_path: Path = self.run_dir / "pose_data.csv"
        self.events_output_path: Path = self.run_dir / "events.csv"
        self.waypoints_output_path: Path = self.run_dir / "waypoints.csv"
        self.trajectory_output_path: Path = self.run_dir / "trajectory.csv"

    def setup(self) -> None:
        """Create the CSV files and write their headers.

        Must be called before writing data.
        """
        self.pose_csv_file = open(self.pose_output_path, "w", newline="")
        self.pose_csv_writer = csv.writer(self.pose_csv_file)
        self.pose_csv_writer.writerow(POSE_COLUMNS)
        self.pose_csv_file.flush()

        self.events_csv_file = open(self.events_output_path, "w", newline="")
        self.events_csv_writer = csv.writer(self.events_csv_file)
        self.events_csv_writer.writerow(EVENT_COLUMNS)
        self.events_csv_file.flush()

        self.waypoints_csv_file = open(self.waypoints_output_path, "w", newline="")
        self.waypoints_csv_writer = csv.writer(self.waypoints_csv_file)
        self.waypoints_csv_writer.writerow(WAYPOINT_COLUMNS)
        self.waypoints_csv_file.flush()

        print(f"{TERM_BLUE}✓ Initialized data collection to {self.run_dir}{TERM_RESET}")

    def log_state(self, state: SimulationState, mode: str) -> None:
        """Log the pose and velocities after a tick.

        Args:
            state: Simulation state after the tick.
            mode: Name of the mode that drove the tick.
        """
        pose = state.pose
        self.pose_csv_writer.writerow(
            [
                state.tick,
                state.time,
                pose.x,
                pose.y,
                pose.heading,
                state.linear_velocity,
                state.angular_velocity,
                state.left_wheel_velocity,
                state.right_wheel_velocity,
                mode,
            ]
        )
        if self.pose_csv_file:
            self.pose_csv_file.flush()

    def log_event(self, tick: int, time: float, notification: Notification) -> None:
        """Log a notification.

        Args:
            tick: Tick count when the notification was raised.
            time: Simulated time (seconds).
            notification: The notification.
        """
        self.events_csv_writer.writerow([tick, time, notification.kind.value, notification.message])
        if self.events_csv_file:
            self.events_csv_file.flush()

    def log_waypoints(self, role: str, waypoints: Sequence[Waypoint]) -> None:
        """Log submitted waypoints.

        Args:
            role: "path" for a programmed path, "target" for a go-to target.
            waypoints: Waypoints in visiting order.
        """
        for i, wp in enumerate(waypoints):
            self.waypoints_csv_writer.writerow([role, i, wp.x, wp.y, wp.theta])
        if self.waypoints_csv_file:
            self.waypoints_csv_file.flush()

    def save_trajectory(self, trajectory: np.ndarray) -> None:
        """Write a trajectory snapshot.

        Args:
            trajectory: (n, 2) array of x, y samples.
        """
        with open(self.trajectory_output_path, "w", newline="") as f:
            writer = csv.writer(f)
            writer.writerow(TRAJECTORY_COLUMNS)
            writer.writerows(trajectory.tolist())

    def cleanup(self) -> None:
        """Close all CSV files and report the output location."""
        if self.pose_csv_file:
            self.pose_csv_file.close()
        if self.events_csv_file:
            self.events_csv_file.close()
        if self.waypoints_csv_file:
            self.waypoints_csv_file.close()

        print(f"{TERM_BLUE}✓ Saved simulation data to {self.run_dir}{TERM_RESET}")

    def __enter__(self) -> "DataCollector":
        self.setup()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.cleanup()
