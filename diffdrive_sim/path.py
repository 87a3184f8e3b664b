"""Programmed paths and operator-input conversion.

This module defines the waypoint sequence consumed by the path follower and
the boundary helpers that turn operator input (headings in degrees) into
validated waypoints in radians.
"""

import math
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Sequence, Tuple

import numpy as np
import numpy.typing as npt

from .config import DEFAULT_PATH_DEGREES, DEFAULT_TARGET_DEGREES
from .state import Waypoint


def waypoint_from_degrees(x: float, y: float, theta_deg: float) -> Waypoint:
    """Build a waypoint from operator input with the heading in degrees.

    Args:
        x: X coordinate (m)
        y: Y coordinate (m)
        theta_deg: Desired heading (degrees)

    Returns:
        Waypoint with theta in radians

    Raises:
        ValueError: If any value is NaN or infinite.
    """
    return Waypoint(float(x), float(y), math.radians(float(theta_deg)))


def waypoints_from_degrees(rows: Iterable[Sequence[float]]) -> Tuple[Waypoint, ...]:
    """Convert (x, y, theta_degrees) rows into waypoints.

    Raises:
        ValueError: If a row does not have three values or holds a non-finite value.
    """
    waypoints = []
    for i, row in enumerate(rows):
        if len(row) != 3:
            raise ValueError(f"Waypoint {i + 1} must have 3 values (x, y, theta), got {len(row)}")
        waypoints.append(waypoint_from_degrees(*row))
    return tuple(waypoints)


def parse_waypoint(text: str) -> Waypoint:
    """Parse an "X,Y,DEG" string as typed on the command line.

    Example:
        >>> parse_waypoint("1,-1,90")
        Waypoint(x=1.0, y=-1.0, theta=1.5707963267948966)
    """
    parts = [p.strip() for p in text.split(",")]
    if len(parts) != 3:
        raise ValueError(f"Expected X,Y,DEG but got: {text!r}")
    try:
        values = [float(p) for p in parts]
    except ValueError:
        raise ValueError(f"Non-numeric waypoint value in: {text!r}") from None
    return waypoint_from_degrees(*values)


def default_path() -> Tuple[Waypoint, ...]:
    """The square path offered to the operator by default."""
    return waypoints_from_degrees(DEFAULT_PATH_DEGREES)


def default_target() -> Waypoint:
    """The go-to target offered to the operator by default."""
    return waypoint_from_degrees(*DEFAULT_TARGET_DEGREES)


@dataclass
class Path:
    """Ordered waypoints plus the cursor of the waypoint being tracked.

    Attributes:
        waypoints: Waypoints in visiting order; never modified after creation.
        index: Index of the waypoint currently being tracked.
    """

    waypoints: Tuple[Waypoint, ...] = ()
    index: int = 0

    @property
    def current(self) -> Optional[Waypoint]:
        if 0 <= self.index < len(self.waypoints):
            return self.waypoints[self.index]
        return None

    @property
    def is_last(self) -> bool:
        return self.index == len(self.waypoints) - 1

    def advance(self) -> None:
        self.index += 1

    def reset(self) -> None:
        """Discard the waypoints and rewind the cursor."""
        self.waypoints = ()
        self.index = 0

    def __len__(self) -> int:
        return len(self.waypoints)


def path_polyline(waypoints: Sequence[Waypoint]) -> Dict[str, npt.NDArray[np.float64]]:
    """Waypoint coordinates as arrays for plotting.

    Args:
        waypoints: Waypoints in visiting order

    Returns:
        Dictionary containing:
            'x': X coordinates (m)
            'y': Y coordinates (m)
            'theta': Headings (rad)
    """
    return {
        "x": np.array([wp.x for wp in waypoints], dtype=float),
        "y": np.array([wp.y for wp in waypoints], dtype=float),
        "theta": np.array([wp.theta for wp in waypoints], dtype=float),
    }
