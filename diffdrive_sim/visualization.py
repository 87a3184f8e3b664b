"""
Visualization utilities for recorded simulation runs.

This module provides functions to load the CSV files written by the
DataCollector and plot the vehicle trajectory against the programmed path
and navigation target, plus pose and velocity histories over time.
"""

from pathlib import Path
from typing import Dict, List, Optional, Sequence

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.figure import Figure

from .data_collector import WAYPOINT_COLUMNS
from .model import rad_per_sec_to_rpm
from .path import path_polyline
from .plot_styles import (
    ACCENT_RED,
    ACTIVE_ORANGE,
    DARK_GRAY,
    PATH_BLUE,
    SILVER,
    TARGET_RED,
    TIME_CMAP,
    add_legend,
    read_columns,
    read_rows,
    style_axis,
)
from .state import Waypoint

TARGET_ARROW_LENGTH = 0.3


def parse_waypoints(filepath: Path) -> Dict[str, List[Waypoint]]:
    """Parse waypoints.csv into path and target lists.

    Args:
        filepath: Path to the waypoints CSV file.

    Returns:
        Dictionary with keys 'path' and 'target', each a list of Waypoints.

    Raises:
        FileNotFoundError: If the CSV file does not exist.
        ValueError: If CSV format is invalid.
    """
    rows = read_rows(filepath)
    if rows and set(WAYPOINT_COLUMNS) - rows[0].keys():
        raise ValueError(f"Unexpected waypoint CSV headers: {list(rows[0].keys())}")

    parsed: Dict[str, List[Waypoint]] = {"path": [], "target": []}
    for row in rows:
        if row["role"] not in parsed:
            continue
        try:
            waypoint = Waypoint(float(row["x"]), float(row["y"]), float(row["theta"]))
        except (TypeError, ValueError):
            # Truncated or non-finite row
            continue
        parsed[row["role"]].append(waypoint)

    return parsed


def plot_trajectory(
    trajectory: np.ndarray,
    waypoints: Sequence[Waypoint] = (),
    target: Optional[Waypoint] = None,
    times: Optional[np.ndarray] = None,
    active_index: Optional[int] = None,
    title: str = "Vehicle Trajectory",
    save_path: Optional[Path] = None,
) -> Figure:
    """Plot the driven trajectory (x vs y) with path and target overlays.

    Args:
        trajectory: (n, 2) array of x, y samples, oldest first.
        waypoints: Programmed path to overlay, in visiting order.
        target: Navigation target to overlay with its heading arrow.
        times: Optional per-sample times for colouring the samples.
        active_index: Waypoint to highlight as the one being tracked.
        title: Plot title.
        save_path: Optional path to save the figure.

    Returns:
        Matplotlib figure object.
    """
    fig, ax = plt.subplots(figsize=(10, 8), facecolor=DARK_GRAY)
    style_axis(ax, title=title, xlabel="X Position (m)", ylabel="Y Position (m)")

    if len(trajectory) > 0:
        x = trajectory[:, 0]
        y = trajectory[:, 1]
        ax.plot(x, y, "-", color=ACCENT_RED, linewidth=1.5, alpha=0.8, label="Trajectory", zorder=2)

        if times is not None and len(times) == len(x):
            scatter = ax.scatter(
                x, y, c=times, cmap=TIME_CMAP, s=8, alpha=0.8, linewidths=0, zorder=3
            )
            plt.colorbar(scatter, ax=ax, label="Time (s)")

        ax.plot(
            x[0],
            y[0],
            "o",
            color=SILVER,
            markersize=8,
            label="Start",
            zorder=5,
            markeredgecolor="black",
        )
        ax.plot(
            x[-1],
            y[-1],
            "s",
            color=ACCENT_RED,
            markersize=8,
            label="End",
            zorder=5,
            markeredgecolor="black",
        )

    if waypoints:
        polyline = path_polyline(waypoints)
        ax.plot(
            polyline["x"],
            polyline["y"],
            "--",
            color=PATH_BLUE,
            linewidth=1.5,
            alpha=0.9,
            label="Programmed Path",
            zorder=1,
        )
        colors = [
            ACTIVE_ORANGE if i == active_index else PATH_BLUE for i in range(len(waypoints))
        ]
        ax.scatter(polyline["x"], polyline["y"], c=colors, s=120, alpha=0.7, zorder=4)
        for i, wp in enumerate(waypoints):
            ax.annotate(
                str(i + 1),
                (wp.x, wp.y),
                textcoords="offset points",
                xytext=(0, 10),
                ha="center",
                color=SILVER,
            )

    if target is not None:
        ax.plot(
            target.x,
            target.y,
            "o",
            markersize=14,
            markerfacecolor="none",
            markeredgecolor=TARGET_RED,
            markeredgewidth=2.0,
            label="Target",
            zorder=4,
        )
        ax.arrow(
            target.x,
            target.y,
            TARGET_ARROW_LENGTH * np.cos(target.theta),
            TARGET_ARROW_LENGTH * np.sin(target.theta),
            color=TARGET_RED,
            width=0.01,
            head_width=0.08,
            length_includes_head=True,
            zorder=4,
        )

    ax.set_aspect("equal", adjustable="datalim")
    add_legend(ax)
    plt.tight_layout()

    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches="tight")

    return fig


def plot_motion(
    pose_data: Dict[str, np.ndarray], title: str = "Motion", save_path: Optional[Path] = None
) -> Figure:
    """Plot heading, body velocities and wheel speeds over time.

    Args:
        pose_data: Columns of pose_data.csv as arrays.
        title: Plot title prefix.
        save_path: Optional path to save the figure.

    Returns:
        Matplotlib figure object.
    """
    fig, (ax1, ax2, ax3) = plt.subplots(3, 1, figsize=(12, 10), sharex=True, facecolor=DARK_GRAY)

    t = pose_data["time"]

    ax1.plot(t, np.degrees(pose_data["heading"]), color=ACCENT_RED, label="Heading")
    style_axis(ax1, title=f"{title} - Heading", ylabel="Heading (deg)")
    add_legend(ax1)

    ax2.plot(t, pose_data["linear_velocity"], color=ACCENT_RED, label="v (m/s)")
    ax2.plot(t, pose_data["angular_velocity"], color=PATH_BLUE, label="ω (rad/s)")
    style_axis(ax2, title=f"{title} - Body Velocity", ylabel="Velocity")
    add_legend(ax2)

    ax3.plot(t, rad_per_sec_to_rpm(pose_data["left_wheel_velocity"]), color=ACCENT_RED, label="Left")
    ax3.plot(t, rad_per_sec_to_rpm(pose_data["right_wheel_velocity"]), color=PATH_BLUE, label="Right")
    style_axis(ax3, title=f"{title} - Wheel Speed", xlabel="Time (s)", ylabel="Wheel (RPM)")
    add_legend(ax3)

    plt.tight_layout()

    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches="tight")

    return fig


def plot_run_summary(run_dir: Path, save_plots: bool = False, show_plots: bool = True) -> None:
    """Generate summary plots for a recorded run.

    Args:
        run_dir: Directory containing pose_data.csv and waypoints.csv.
        save_plots: If True, save plots to run directory.
        show_plots: If True, display plots interactively.

    Raises:
        FileNotFoundError: If required CSV files are not found.
    """
    pose_data = read_columns(run_dir / "pose_data.csv")
    submitted = parse_waypoints(run_dir / "waypoints.csv")

    trajectory = np.column_stack([pose_data["x"], pose_data["y"]])
    target = submitted["target"][-1] if submitted["target"] else None

    run_name = run_dir.name
    plot_trajectory(
        trajectory,
        waypoints=submitted["path"],
        target=target,
        times=pose_data["time"],
        title=f"Trajectory - {run_name}",
        save_path=run_dir / "trajectory.png" if save_plots else None,
    )
    plot_motion(
        pose_data,
        title=run_name,
        save_path=run_dir / "motion.png" if save_plots else None,
    )

    if show_plots:
        plt.show()
    else:
        plt.close("all")
