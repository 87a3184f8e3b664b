"""Simulation state and value types.

All mutable simulation state lives in a single `SimulationState` owned by the
mode arbiter and handed to whichever controller is active on a tick.
"""

import math
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Deque, Dict, Optional, Tuple, Union

import numpy as np

from .config import DEGREES_PER_RADIAN, TRAJECTORY_CAPACITY


def _require_finite(**values: float) -> None:
    for name, value in values.items():
        if not math.isfinite(value):
            raise ValueError(f"{name} must be a finite number, got {value!r}")


@dataclass
class Pose:
    """Vehicle pose in the world frame.

    Heading is a free-running accumulator in radians. It is never wrapped;
    only heading errors are.
    """

    x: float = 0.0
    y: float = 0.0
    heading: float = 0.0

    def as_tuple(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.heading)


@dataclass
class WheelCommand:
    """Per-wheel motor voltages for manual mode (volts)."""

    left_voltage: float = 0.0
    right_voltage: float = 0.0

    def __post_init__(self) -> None:
        _require_finite(left_voltage=self.left_voltage, right_voltage=self.right_voltage)


@dataclass(frozen=True)
class Waypoint:
    """Target pose with desired heading theta (radians).

    Raises:
        ValueError: If any coordinate is NaN or infinite.
    """

    x: float
    y: float
    theta: float = 0.0

    def __post_init__(self) -> None:
        _require_finite(x=self.x, y=self.y, theta=self.theta)


class TrajectoryLog:
    """Bounded FIFO of recorded (x, y) positions.

    Once `capacity` samples are held, each append evicts the oldest one.
    Readers get copies via `snapshot()`; no reader should hold on to the
    internal buffer across ticks.
    """

    def __init__(self, capacity: int = TRAJECTORY_CAPACITY) -> None:
        if capacity <= 0:
            raise ValueError(f"Trajectory capacity must be positive, got {capacity}")
        self.capacity = capacity
        self._samples: Deque[Tuple[float, float]] = deque(maxlen=capacity)

    def append(self, x: float, y: float) -> None:
        self._samples.append((x, y))

    def snapshot(self) -> np.ndarray:
        """Return the samples as an (n, 2) float array, oldest first."""
        if not self._samples:
            return np.empty((0, 2))
        return np.array(self._samples, dtype=float)

    def latest(self) -> Optional[Tuple[float, float]]:
        return self._samples[-1] if self._samples else None

    def clear(self) -> None:
        self._samples.clear()

    def __len__(self) -> int:
        return len(self._samples)


# ============================================================================
# Mode variants
# ============================================================================


@dataclass(frozen=True)
class Manual:
    """Operator voltages drive the vehicle."""

    name = "manual"


@dataclass(frozen=True)
class FollowingPath:
    """Path follower is tracking waypoint `index` of the programmed path."""

    index: int
    name = "following_path"


@dataclass(frozen=True)
class GoingToPosition:
    """Navigator is steering to `target`."""

    target: Waypoint
    name = "going_to_position"


Mode = Union[Manual, FollowingPath, GoingToPosition]


# ============================================================================
# Notifications
# ============================================================================


class NotificationKind(Enum):
    WAYPOINT_REACHED = "waypoint_reached"
    PATH_COMPLETE = "path_complete"
    DESTINATION_REACHED = "destination_reached"
    PATH_PROGRAMMED = "path_programmed"
    NAVIGATION_STARTED = "navigation_started"


@dataclass(frozen=True)
class Notification:
    """Discrete event for the presentation layer.

    Attributes:
        kind: Event type.
        message: Human-readable summary, suitable for a toast.
        payload: Event details (indices, coordinates).
    """

    kind: NotificationKind
    message: str
    payload: Dict[str, Any] = field(default_factory=dict)


# ============================================================================
# Shared simulation state
# ============================================================================


@dataclass
class SimulationState:
    """Everything a controller reads or writes during a tick.

    Attributes:
        pose: Current vehicle pose.
        trajectory: Recorded positions for visualization.
        left_wheel_velocity: Left wheel angular velocity of the last tick (rad/s).
        right_wheel_velocity: Right wheel angular velocity of the last tick (rad/s).
        linear_velocity: Body forward velocity of the last tick (m/s).
        angular_velocity: Body yaw rate of the last tick (rad/s).
        tick: Number of completed ticks.
        time: Simulated time (seconds).
    """

    pose: Pose = field(default_factory=Pose)
    trajectory: TrajectoryLog = field(default_factory=TrajectoryLog)
    left_wheel_velocity: float = 0.0
    right_wheel_velocity: float = 0.0
    linear_velocity: float = 0.0
    angular_velocity: float = 0.0
    tick: int = 0
    time: float = 0.0

    def set_motion(
        self, left_wheel: float, right_wheel: float, linear: float, angular: float
    ) -> None:
        self.left_wheel_velocity = left_wheel
        self.right_wheel_velocity = right_wheel
        self.linear_velocity = linear
        self.angular_velocity = angular

    def record_position(self) -> None:
        self.trajectory.append(self.pose.x, self.pose.y)


@dataclass(frozen=True)
class Telemetry:
    """Per-tick readout for display.

    Attributes:
        x: Position x (m).
        y: Position y (m).
        heading_deg: Unwrapped heading (degrees).
        linear_velocity: Forward velocity (m/s).
        angular_velocity: Yaw rate (rad/s).
        left_rpm: Left wheel speed (RPM).
        right_rpm: Right wheel speed (RPM).
        mode: Mode name.
        waypoint_index: Index of the waypoint being tracked, None outside path mode.
        time: Simulated time (s).
    """

    x: float
    y: float
    heading_deg: float
    linear_velocity: float
    angular_velocity: float
    left_rpm: float
    right_rpm: float
    mode: str
    waypoint_index: Optional[int]
    time: float

    def __str__(self) -> str:
        return (
            f"t={self.time:6.2f}s  pos=({self.x:.3f}, {self.y:.3f})  "
            f"heading={self.heading_deg:.1f}°  v={self.linear_velocity:.3f}m/s  "
            f"ω={self.angular_velocity:.3f}rad/s  "
            f"rpm=({self.left_rpm:.0f}, {self.right_rpm:.0f})  mode={self.mode}"
        )


def heading_degrees(heading: float) -> float:
    return heading * DEGREES_PER_RADIAN
