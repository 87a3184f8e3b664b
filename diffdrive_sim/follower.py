"""Waypoint-sequence path follower.

This module implements a proportional go-to-point follower that:
- Steers towards the current waypoint with saturated heading feedback
- Slows down proportionally to the remaining distance
- Advances to the next waypoint once within the arrival threshold
"""

import logging
import math
from typing import List, Sequence

from .config import (
    ARRIVAL_THRESHOLD,
    DISTANCE_GAIN,
    MAX_SPEED,
    MAX_TURN_RATE,
    TRACK_WIDTH,
    TURN_GAIN,
    WHEEL_RADIUS,
)
from .model import clamp, integrate, inverse_kinematics, wrap_to_pi
from .path import Path
from .state import Notification, NotificationKind, SimulationState, Waypoint


class PathFollower:
    """Follows a programmed path one waypoint at a time.

    States: Idle (no path) -> Following(index) -> Idle, on completion or
    on `stop()`. Only the distance to a waypoint gates advancement; the
    waypoint's theta is carried but never checked.

    Attributes:
        path: Programmed path and cursor.
        following: True while the follower is in the Following state.
    """

    def __init__(
        self,
        turn_gain: float = TURN_GAIN,
        distance_gain: float = DISTANCE_GAIN,
        max_turn_rate: float = MAX_TURN_RATE,
        max_speed: float = MAX_SPEED,
        arrival_threshold: float = ARRIVAL_THRESHOLD,
        wheel_radius: float = WHEEL_RADIUS,
        track_width: float = TRACK_WIDTH,
    ):
        """Initialize the path follower.

        Args:
            turn_gain: Heading error (rad) to turn rate (rad/s) gain.
            distance_gain: Distance (m) to speed (m/s) gain.
            max_turn_rate: Turn rate saturation (rad/s).
            max_speed: Speed saturation (m/s).
            arrival_threshold: Distance at which a waypoint counts as reached (m).
            wheel_radius: Wheel radius for wheel-speed telemetry (m).
            track_width: Distance between the wheels (m).
        """
        self.turn_gain = turn_gain
        self.distance_gain = distance_gain
        self.max_turn_rate = max_turn_rate
        self.max_speed = max_speed
        self.arrival_threshold = arrival_threshold
        self.wheel_radius = wheel_radius
        self.track_width = track_width

        self.path = Path()
        self.following: bool = False

    @property
    def index(self) -> int:
        return self.path.index

    def start(self, waypoints: Sequence[Waypoint]) -> bool:
        """Load a new path and start following it from the first waypoint.

        An empty path is ignored: whatever path is loaded, and whether it is
        being followed, stays as it was.

        Args:
            waypoints: Waypoints in visiting order

        Returns:
            True if the new path was loaded and is now being followed
        """
        if not waypoints:
            logging.warning("Ignoring empty path; path follower unchanged")
            return False
        self.path = Path(tuple(waypoints))
        self.following = True
        return True

    def stop(self) -> None:
        """Abandon the current path and return to Idle."""
        self.following = False
        self.path.reset()

    def compute_control(self, state: SimulationState, waypoint: Waypoint):
        """Compute speed and turn rate towards a waypoint.

        Args:
            state: Shared simulation state (only the pose is read)
            waypoint: Waypoint being tracked

        Returns:
            Tuple of (speed, turn_rate, distance, heading_error)
        """
        dx = waypoint.x - state.pose.x
        dy = waypoint.y - state.pose.y
        distance = math.hypot(dx, dy)
        target_heading = math.atan2(dy, dx)

        heading_error = wrap_to_pi(target_heading - state.pose.heading)

        turn_rate = clamp(heading_error * self.turn_gain, -self.max_turn_rate, self.max_turn_rate)
        speed = min(distance * self.distance_gain, self.max_speed)
        return speed, turn_rate, distance, heading_error

    def update(self, state: SimulationState, dt: float) -> List[Notification]:
        """Run one control tick while following.

        Args:
            state: Shared simulation state, modified in place
            dt: Tick length (s)

        Returns:
            Notifications raised on this tick, in order
        """
        waypoint = self.path.current
        if not self.following or waypoint is None:
            return []

        speed, turn_rate, distance, _ = self.compute_control(state, waypoint)

        left_omega, right_omega = inverse_kinematics(
            speed, turn_rate, self.wheel_radius, self.track_width
        )
        state.pose = integrate(state.pose, speed, turn_rate, dt)
        state.set_motion(left_omega, right_omega, speed, turn_rate)
        state.record_position()

        # Arrival uses the distance measured before this tick's motion
        if distance >= self.arrival_threshold:
            return []

        number = self.path.index + 1
        total = len(self.path)
        events = [
            Notification(
                NotificationKind.WAYPOINT_REACHED,
                f"Waypoint {number} reached ({number} of {total})",
                {"index": self.path.index, "x": waypoint.x, "y": waypoint.y},
            )
        ]

        if self.path.is_last:
            self.following = False
            self.path.index = 0
            events.append(
                Notification(
                    NotificationKind.PATH_COMPLETE,
                    "Successfully completed the programmed path",
                    {"waypoints": total},
                )
            )
        else:
            self.path.advance()

        return events
