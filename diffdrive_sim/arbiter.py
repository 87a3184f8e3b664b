"""Mode arbitration and the fixed-step simulation loop.

The ModeArbiter owns the shared simulation state and the three controllers.
Each call to `advance()` is one tick: exactly one controller reads and writes
the pose and trajectory, chosen by precedence:

    navigation target set  -> GoToController
    path being followed    -> PathFollower
    otherwise              -> ManualController

Operator requests (new voltages, path, target, cancellations) are plain
method calls between ticks, so they always take effect at the next tick
boundary.
"""

import logging
import math
from typing import Callable, Iterable, List, Optional, Sequence, Tuple, Union

import numpy as np

from .config import TICK_PERIOD, TRAJECTORY_CAPACITY
from .follower import PathFollower
from .manual_controller import ManualController
from .model import rad_per_sec_to_rpm
from .navigator import GoToController
from .state import (
    FollowingPath,
    GoingToPosition,
    Manual,
    Mode,
    Notification,
    NotificationKind,
    Pose,
    SimulationState,
    Telemetry,
    TrajectoryLog,
    Waypoint,
    heading_degrees,
)

NotificationListener = Callable[[Notification], None]


def _check_dt(dt: float) -> float:
    if not math.isfinite(dt) or dt <= 0:
        raise ValueError(f"Time step must be a positive finite number, got {dt!r}")
    return dt


def check_duration(duration: float) -> float:
    if not math.isfinite(duration) or duration < 0:
        raise ValueError(f"Duration must be a non-negative finite number, got {duration!r}")
    return duration


def _as_waypoint(item: Union[Waypoint, Sequence[float]], number: int) -> Waypoint:
    if isinstance(item, Waypoint):
        return item
    if len(item) != 3:
        raise ValueError(f"Waypoint {number} must have 3 values (x, y, theta), got {len(item)}")
    return Waypoint(*(float(v) for v in item))


class ModeArbiter:
    """Single owner of the simulation state and the active-controller choice.

    Attributes:
        state: Shared simulation state (pose, trajectory, last velocities).
        manual: Manual voltage controller.
        follower: Waypoint path follower.
        navigator: Go-to-position controller.
        dt: Default tick length (s).
    """

    def __init__(
        self,
        manual: Optional[ManualController] = None,
        follower: Optional[PathFollower] = None,
        navigator: Optional[GoToController] = None,
        dt: float = TICK_PERIOD,
        initial_pose: Optional[Pose] = None,
        trajectory_capacity: int = TRAJECTORY_CAPACITY,
    ):
        """Initialize the arbiter.

        Args:
            manual: Manual controller (default: built from config).
            follower: Path follower (default: built from config).
            navigator: Go-to controller (default: built from config).
            dt: Tick length used when `advance()` is called without one (s).
            initial_pose: Starting pose (default: origin, heading 0).
            trajectory_capacity: Maximum trajectory samples kept.

        Raises:
            ValueError: If dt is not positive.
        """
        self.manual = manual or ManualController()
        self.follower = follower or PathFollower()
        self.navigator = navigator or GoToController()
        self.dt = _check_dt(dt)

        self.state = SimulationState(
            pose=initial_pose or Pose(),
            trajectory=TrajectoryLog(trajectory_capacity),
        )
        self.state.record_position()

        self._listeners: List[NotificationListener] = []
        self._pending: List[Notification] = []

    # ------------------------------------------------------------------
    # Mode
    # ------------------------------------------------------------------

    @property
    def mode(self) -> Mode:
        """The controller that will drive the next tick."""
        if self.navigator.target is not None:
            return GoingToPosition(self.navigator.target)
        if self.follower.following:
            return FollowingPath(self.follower.index)
        return Manual()

    # ------------------------------------------------------------------
    # Operator inputs
    # ------------------------------------------------------------------

    def set_voltages(self, left_voltage: float, right_voltage: float) -> None:
        """Set manual wheel voltages. Ignored for motion while an autonomous mode runs.

        Raises:
            ValueError: If either voltage is NaN or infinite.
        """
        self.manual.set_voltages(left_voltage, right_voltage)

    def program_path(self, waypoints: Iterable[Union[Waypoint, Sequence[float]]]) -> bool:
        """Submit a path and start following it.

        Items may be Waypoints or (x, y, theta_radians) sequences. The whole
        path is validated before anything changes. While a navigation target
        is active the path is stored but waits until the target clears.

        Args:
            waypoints: Waypoints in visiting order

        Returns:
            True if the path is non-empty and now following

        Raises:
            ValueError: If an item is not three values or holds a NaN or
                infinite value.
        """
        validated = tuple(_as_waypoint(wp, i + 1) for i, wp in enumerate(waypoints))
        started = self.follower.start(validated)
        if started:
            self._emit(
                Notification(
                    NotificationKind.PATH_PROGRAMMED,
                    f"{len(validated)} waypoints added to path",
                    {"waypoints": len(validated)},
                )
            )
            if self.navigator.active:
                logging.info("Path queued until the current navigation target is reached")
        return started

    def go_to(self, x: float, y: float, theta: float = 0.0) -> Waypoint:
        """Submit a navigation target; preempts path following.

        A path that was being followed is suspended and resumes from its
        current waypoint once the target clears.

        Args:
            x: Target x (m)
            y: Target y (m)
            theta: Final heading (rad)

        Returns:
            The accepted target

        Raises:
            ValueError: If any value is NaN or infinite.
        """
        target = Waypoint(float(x), float(y), float(theta))
        self.navigator.set_target(target)
        self._emit(
            Notification(
                NotificationKind.NAVIGATION_STARTED,
                f"Navigating to position ({target.x:.2f}, {target.y:.2f}, "
                f"{heading_degrees(target.theta):.1f}°)",
                {"x": target.x, "y": target.y, "theta": target.theta},
            )
        )
        return target

    def stop_path_following(self) -> None:
        if self.follower.following:
            logging.info("Path following stopped")
        self.follower.stop()

    def cancel_navigation(self) -> None:
        if self.navigator.active:
            logging.info("Navigation cancelled")
        self.navigator.cancel()

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------

    def subscribe(self, listener: NotificationListener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: NotificationListener) -> None:
        self._listeners.remove(listener)

    def drain_notifications(self) -> List[Notification]:
        """Return and clear notifications emitted since the last drain."""
        pending, self._pending = self._pending, []
        return pending

    def _emit(self, notification: Notification) -> None:
        logging.info(notification.message)
        self._pending.append(notification)
        for listener in list(self._listeners):
            try:
                listener(notification)
            except Exception as e:
                logging.error(f"Notification listener failed: {e}", exc_info=True)

    # ------------------------------------------------------------------
    # Simulation loop
    # ------------------------------------------------------------------

    def advance(self, dt: Optional[float] = None) -> List[Notification]:
        """Run exactly one tick with the active controller.

        Args:
            dt: Tick length (s); defaults to `self.dt`

        Returns:
            Notifications raised by the controller on this tick

        Raises:
            ValueError: If dt is not positive.
        """
        dt = self.dt if dt is None else _check_dt(dt)
        mode = self.mode

        if isinstance(mode, GoingToPosition):
            events = self.navigator.update(self.state, dt)
        elif isinstance(mode, FollowingPath):
            events = self.follower.update(self.state, dt)
        else:
            self.manual.update(self.state, dt)
            events = []

        self.state.tick += 1
        self.state.time += dt

        for event in events:
            self._emit(event)
        return events

    def run(
        self, duration: float, dt: Optional[float] = None, until_idle: bool = False
    ) -> List[Notification]:
        """Advance for a simulated duration.

        Args:
            duration: Simulated time to cover (s)
            dt: Tick length (s); defaults to `self.dt`
            until_idle: Stop early once no autonomous mode is active

        Returns:
            All controller notifications raised during the run

        Raises:
            ValueError: If duration or dt is not finite, or out of range.
        """
        dt = self.dt if dt is None else _check_dt(dt)
        ticks = int(round(check_duration(duration) / dt))
        events: List[Notification] = []
        for _ in range(ticks):
            if until_idle and self.is_idle:
                break
            events.extend(self.advance(dt))
        return events

    # ------------------------------------------------------------------
    # Outputs
    # ------------------------------------------------------------------

    @property
    def is_idle(self) -> bool:
        return isinstance(self.mode, Manual)

    @property
    def pose(self) -> Pose:
        """Copy of the current pose."""
        return Pose(*self.state.pose.as_tuple())

    @property
    def wheel_velocities(self) -> Tuple[float, float]:
        """(left, right) wheel angular velocities of the last tick (rad/s)."""
        return self.state.left_wheel_velocity, self.state.right_wheel_velocity

    def trajectory(self) -> np.ndarray:
        """Snapshot of the recorded trajectory as an (n, 2) array."""
        return self.state.trajectory.snapshot()

    def telemetry(self) -> Telemetry:
        mode = self.mode
        return Telemetry(
            x=self.state.pose.x,
            y=self.state.pose.y,
            heading_deg=heading_degrees(self.state.pose.heading),
            linear_velocity=self.state.linear_velocity,
            angular_velocity=self.state.angular_velocity,
            left_rpm=rad_per_sec_to_rpm(self.state.left_wheel_velocity),
            right_rpm=rad_per_sec_to_rpm(self.state.right_wheel_velocity),
            mode=mode.name,
            waypoint_index=mode.index if isinstance(mode, FollowingPath) else None,
            time=self.state.time,
        )
