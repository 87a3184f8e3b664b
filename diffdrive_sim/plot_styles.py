"""Shared plot theme and run-file loading for the visualization modules.

Every figure uses the same dark theme so trajectory and motion plots from a
run look alike when saved side by side.
"""

import csv
from pathlib import Path
from typing import Dict, List

import numpy as np
from matplotlib.axes import Axes
from matplotlib.colors import LinearSegmentedColormap

from .config import (
    ACCENT_RED,
    ACTIVE_ORANGE,
    DARK_GRAY,
    LIGHT_GRAY,
    PATH_BLUE,
    SILVER,
    TARGET_RED,
)

__all__ = [
    "ACCENT_RED",
    "ACTIVE_ORANGE",
    "DARK_GRAY",
    "LIGHT_GRAY",
    "PATH_BLUE",
    "SILVER",
    "TARGET_RED",
    "TIME_CMAP",
    "read_rows",
    "read_columns",
    "style_axis",
    "add_legend",
]

# Blue (early) -> red (late)
TIME_CMAP = LinearSegmentedColormap.from_list("sim_time", [PATH_BLUE, ACCENT_RED])
"""Colormap for colouring samples by simulated time."""


def read_rows(csv_path: Path) -> List[Dict[str, str]]:
    """Read a run CSV file as one dict per row, keyed by header.

    Raises:
        FileNotFoundError: If the file is missing from the run directory.
    """
    if not csv_path.exists():
        raise FileNotFoundError(f"{csv_path.name} not found in {csv_path.parent}")

    with open(csv_path, newline="") as f:
        return list(csv.DictReader(f))


def read_columns(csv_path: Path) -> Dict[str, np.ndarray]:
    """Read a run CSV file column-wise.

    Columns whose every value parses as a number become float arrays;
    anything else (the pose log's mode names, event messages) stays a
    string array.

    Args:
        csv_path: CSV file written by the DataCollector.

    Returns:
        Column name to array; arrays are empty when the file has no rows.

    Example:
        >>> columns = read_columns(run_dir / "pose_data.csv")
        >>> columns["x"].dtype, columns["mode"].dtype.kind
        (dtype('float64'), 'U')
    """
    if not csv_path.exists():
        raise FileNotFoundError(f"{csv_path.name} not found in {csv_path.parent}")

    with open(csv_path, newline="") as f:
        reader = csv.reader(f)
        header = next(reader, [])
        rows = [row for row in reader if len(row) == len(header)]

    columns: Dict[str, np.ndarray] = {}
    for i, name in enumerate(header):
        values = [row[i] for row in rows]
        try:
            columns[name] = np.array(values, dtype=float)
        except ValueError:
            columns[name] = np.array(values, dtype=str)
    return columns


def style_axis(ax: Axes, title: str = "", xlabel: str = "", ylabel: str = "") -> None:
    """Apply the dark theme, labels and a dashed grid to an axis."""
    ax.set_facecolor(DARK_GRAY)
    ax.tick_params(colors=SILVER, which="both")
    for spine in ax.spines.values():
        spine.set_edgecolor(SILVER)
    ax.grid(True, color=LIGHT_GRAY, alpha=0.3, linestyle="--", linewidth=0.5)

    if title:
        ax.set_title(title, fontweight="bold", color=SILVER)
    if xlabel:
        ax.set_xlabel(xlabel, color=SILVER)
    if ylabel:
        ax.set_ylabel(ylabel, color=SILVER)


def add_legend(ax: Axes, loc: str = "best") -> None:
    """Add a legend in the dark theme, if the axis has labelled artists."""
    handles, labels = ax.get_legend_handles_labels()
    if not handles:
        return
    ax.legend(
        handles,
        labels,
        loc=loc,
        framealpha=0.9,
        facecolor=DARK_GRAY,
        edgecolor=SILVER,
        labelcolor=SILVER,
    )
