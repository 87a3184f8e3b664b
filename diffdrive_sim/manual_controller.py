"""Manual (teleoperation) controller.

Maps the operator's per-wheel motor voltages to continuous pose updates
through the motor model and forward kinematics.
"""

from typing import Tuple

from .config import (
    MAX_RPM,
    MAX_VOLTAGE,
    MOTION_THRESHOLD,
    TRACK_WIDTH,
    WHEEL_RADIUS,
)
from .model import body_velocities, step, wheel_angular_velocity
from .state import SimulationState, WheelCommand


class ManualController:
    """Open-loop voltage controller.

    The latest WheelCommand is applied on every tick the arbiter hands
    control to this controller. A trajectory sample is recorded only when
    the vehicle is actually moving, so an idle vehicle does not flood the log.

    Attributes:
        command: Current wheel voltages.
        max_voltage: Motor voltage at full speed (V).
        max_rpm: Motor speed at full voltage (RPM).
        wheel_radius: Wheel radius (m).
        track_width: Distance between the wheels (m).
        motion_threshold: Minimum |v| or |omega| for a trajectory sample.
    """

    def __init__(
        self,
        max_voltage: float = MAX_VOLTAGE,
        max_rpm: float = MAX_RPM,
        wheel_radius: float = WHEEL_RADIUS,
        track_width: float = TRACK_WIDTH,
        motion_threshold: float = MOTION_THRESHOLD,
    ):
        self.max_voltage = max_voltage
        self.max_rpm = max_rpm
        self.wheel_radius = wheel_radius
        self.track_width = track_width
        self.motion_threshold = motion_threshold
        self.command = WheelCommand()

    def set_voltages(self, left_voltage: float, right_voltage: float) -> None:
        """Replace the wheel command.

        Args:
            left_voltage: Left motor voltage (V), nominally within ±max_voltage
            right_voltage: Right motor voltage (V), nominally within ±max_voltage

        Raises:
            ValueError: If either voltage is NaN or infinite.
        """
        self.command = WheelCommand(float(left_voltage), float(right_voltage))

    def wheel_velocities(self) -> Tuple[float, float]:
        """Wheel angular velocities (rad/s) the current command produces."""
        left = wheel_angular_velocity(self.command.left_voltage, self.max_voltage, self.max_rpm)
        right = wheel_angular_velocity(self.command.right_voltage, self.max_voltage, self.max_rpm)
        return left, right

    def update(self, state: SimulationState, dt: float) -> None:
        """Apply the current command to the shared state for one tick.

        Args:
            state: Shared simulation state, modified in place
            dt: Tick length (s)
        """
        left_omega, right_omega = self.wheel_velocities()
        v, omega = body_velocities(left_omega, right_omega, self.wheel_radius, self.track_width)

        state.pose = step(
            state.pose, left_omega, right_omega, self.wheel_radius, self.track_width, dt
        )
        state.set_motion(left_omega, right_omega, v, omega)

        if abs(v) > self.motion_threshold or abs(omega) > self.motion_threshold:
            state.record_position()
