"""Single-target go-to-position controller.

Steers towards a target position while facing it, then, inside the approach
radius, turns to the target's commanded heading with gentler gains.
"""

import logging
import math
from typing import List, Optional

from .config import (
    APPROACH_MAX_SPEED,
    APPROACH_RADIUS,
    APPROACH_SPEED_GAIN,
    APPROACH_TURN_GAIN,
    ARRIVAL_THRESHOLD,
    DISTANCE_GAIN,
    HEADING_THRESHOLD,
    MAX_SPEED,
    MAX_TURN_RATE,
    TRACK_WIDTH,
    TURN_GAIN,
    WHEEL_RADIUS,
)
from .model import clamp, integrate, inverse_kinematics, wrap_to_pi
from .state import Notification, NotificationKind, SimulationState, Waypoint, heading_degrees


class GoToController:
    """Point-and-heading navigator.

    Far from the target the controller steers along the bearing to the
    target. Within `approach_radius` it steers to the target's theta instead,
    with the approach gains and speed cap. The target is cleared once both
    the distance and the heading error are under their thresholds; that
    check runs before any motion is integrated on the tick.

    Attributes:
        target: Active navigation target, None when idle.
    """

    def __init__(
        self,
        turn_gain: float = TURN_GAIN,
        speed_gain: float = DISTANCE_GAIN,
        max_speed: float = MAX_SPEED,
        approach_radius: float = APPROACH_RADIUS,
        approach_turn_gain: float = APPROACH_TURN_GAIN,
        approach_speed_gain: float = APPROACH_SPEED_GAIN,
        approach_max_speed: float = APPROACH_MAX_SPEED,
        max_turn_rate: float = MAX_TURN_RATE,
        arrival_threshold: float = ARRIVAL_THRESHOLD,
        heading_threshold: float = HEADING_THRESHOLD,
        wheel_radius: float = WHEEL_RADIUS,
        track_width: float = TRACK_WIDTH,
    ):
        self.turn_gain = turn_gain
        self.speed_gain = speed_gain
        self.max_speed = max_speed
        self.approach_radius = approach_radius
        self.approach_turn_gain = approach_turn_gain
        self.approach_speed_gain = approach_speed_gain
        self.approach_max_speed = approach_max_speed
        self.max_turn_rate = max_turn_rate
        self.arrival_threshold = arrival_threshold
        self.heading_threshold = heading_threshold
        self.wheel_radius = wheel_radius
        self.track_width = track_width

        self.target: Optional[Waypoint] = None

    @property
    def active(self) -> bool:
        return self.target is not None

    def set_target(self, target: Waypoint) -> None:
        self.target = target

    def cancel(self) -> None:
        self.target = None

    def compute_control(self, state: SimulationState, target: Waypoint):
        """Compute speed and turn rate towards the target.

        Args:
            state: Shared simulation state (only the pose is read)
            target: Navigation target

        Returns:
            Tuple of (speed, turn_rate, distance, heading_error)
        """
        dx = target.x - state.pose.x
        dy = target.y - state.pose.y
        distance = math.hypot(dx, dy)

        close_to_target = distance < self.approach_radius
        target_heading = target.theta if close_to_target else math.atan2(dy, dx)
        heading_error = wrap_to_pi(target_heading - state.pose.heading)

        if close_to_target:
            turn_gain, speed_gain, speed_cap = (
                self.approach_turn_gain,
                self.approach_speed_gain,
                self.approach_max_speed,
            )
        else:
            turn_gain, speed_gain, speed_cap = self.turn_gain, self.speed_gain, self.max_speed

        turn_rate = clamp(heading_error * turn_gain, -self.max_turn_rate, self.max_turn_rate)
        speed = min(distance * speed_gain, speed_cap)
        return speed, turn_rate, distance, heading_error

    def update(self, state: SimulationState, dt: float) -> List[Notification]:
        """Run one control tick towards the target.

        Args:
            state: Shared simulation state, modified in place
            dt: Tick length (s)

        Returns:
            A DestinationReached notification on arrival, otherwise empty
        """
        target = self.target
        if target is None:
            return []

        speed, turn_rate, distance, heading_error = self.compute_control(state, target)

        if distance < self.arrival_threshold and abs(heading_error) < self.heading_threshold:
            self.target = None
            state.set_motion(0.0, 0.0, 0.0, 0.0)
            logging.debug(
                f"Arrived: distance={distance:.4f}m heading_error={heading_error:.4f}rad"
            )
            return [
                Notification(
                    NotificationKind.DESTINATION_REACHED,
                    f"Arrived at position ({target.x:.2f}, {target.y:.2f}) "
                    f"with heading {heading_degrees(target.theta):.1f}°",
                    {"x": target.x, "y": target.y, "theta": target.theta},
                )
            ]

        left_omega, right_omega = inverse_kinematics(
            speed, turn_rate, self.wheel_radius, self.track_width
        )
        state.pose = integrate(state.pose, speed, turn_rate, dt)
        state.set_motion(left_omega, right_omega, speed, turn_rate)
        state.record_position()
        return []
