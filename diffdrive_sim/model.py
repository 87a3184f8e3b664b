"""Differential drive vehicle model.

This module provides the motor model and the forward and inverse kinematics
for a differential drive vehicle:
- Motor voltage to wheel angular velocity
- Wheel angular velocities to body linear and angular velocity
- First-order pose integration
- Body velocities back to wheel angular velocities
"""

import math
from typing import Tuple

from .config import MAX_RPM, MAX_VOLTAGE, TRACK_WIDTH, WHEEL_RADIUS
from .state import Pose

RPM_TO_RAD_PER_SEC = math.pi / 30.0


def rpm_to_rad_per_sec(rpm: float) -> float:
    return rpm * RPM_TO_RAD_PER_SEC


def rad_per_sec_to_rpm(omega: float) -> float:
    return omega / RPM_TO_RAD_PER_SEC


def wheel_angular_velocity(
    voltage: float, max_voltage: float = MAX_VOLTAGE, max_rpm: float = MAX_RPM
) -> float:
    """Convert a commanded motor voltage to wheel angular velocity.

    The motor is modelled as an ideal linear speed source:
        omega = (V / V_max) * rpm_max * (pi / 30)

    Voltages outside [-max_voltage, max_voltage] are not clamped and
    extrapolate linearly.

    Args:
        voltage: Commanded voltage (V)
        max_voltage: Voltage at which the motor reaches max_rpm (V)
        max_rpm: Motor speed at max_voltage (RPM)

    Returns:
        Wheel angular velocity in rad/s

    Example:
        >>> wheel_angular_velocity(400.0, 400.0, 18000.0)
        1884.9555921538758
    """
    return (voltage / max_voltage) * rpm_to_rad_per_sec(max_rpm)


def body_velocities(
    left_omega: float,
    right_omega: float,
    wheel_radius: float = WHEEL_RADIUS,
    track_width: float = TRACK_WIDTH,
) -> Tuple[float, float]:
    """Compute body velocities from wheel angular velocities.

    For a differential drive vehicle:
        v = (omega_left + omega_right) / 2 * r
        omega = (omega_right - omega_left) * r / L

    where r is the wheel radius and L the track width.

    Args:
        left_omega: Left wheel angular velocity (rad/s)
        right_omega: Right wheel angular velocity (rad/s)
        wheel_radius: Wheel radius (m)
        track_width: Distance between the wheels (m)

    Returns:
        tuple[float, float]: (linear_velocity m/s, angular_velocity rad/s).
                             Positive angular velocity turns counter-clockwise.
    """
    linear_velocity = (left_omega + right_omega) / 2.0 * wheel_radius
    angular_velocity = (right_omega - left_omega) * wheel_radius / track_width
    return linear_velocity, angular_velocity


def integrate(pose: Pose, linear_velocity: float, angular_velocity: float, dt: float) -> Pose:
    """Advance a pose by one Euler step.

    Heading is advanced first and the position update uses the new heading:
        theta' = theta + omega * dt
        x' = x + v * cos(theta') * dt
        y' = y + v * sin(theta') * dt

    Args:
        pose: Pose at the start of the step
        linear_velocity: Forward velocity (m/s)
        angular_velocity: Yaw rate (rad/s)
        dt: Step length (s)

    Returns:
        New Pose; the input pose is not modified
    """
    heading = pose.heading + angular_velocity * dt
    x = pose.x + linear_velocity * math.cos(heading) * dt
    y = pose.y + linear_velocity * math.sin(heading) * dt
    return Pose(x, y, heading)


def step(
    pose: Pose,
    left_omega: float,
    right_omega: float,
    wheel_radius: float,
    track_width: float,
    dt: float,
) -> Pose:
    """Integrate a pose over dt from wheel angular velocities.

    Equal wheel velocities drive straight along the heading; opposite
    velocities rotate in place. Both zero leaves the pose unchanged.

    Args:
        pose: Pose at the start of the step
        left_omega: Left wheel angular velocity (rad/s)
        right_omega: Right wheel angular velocity (rad/s)
        wheel_radius: Wheel radius (m)
        track_width: Distance between the wheels (m)
        dt: Step length (s), a small constant supplied by the caller

    Returns:
        New Pose after dt
    """
    linear_velocity, angular_velocity = body_velocities(
        left_omega, right_omega, wheel_radius, track_width
    )
    return integrate(pose, linear_velocity, angular_velocity, dt)


def inverse_kinematics(
    speed: float,
    turn_rate: float,
    wheel_radius: float = WHEEL_RADIUS,
    track_width: float = TRACK_WIDTH,
) -> Tuple[float, float]:
    """Compute wheel angular velocities from desired body velocities.

        v_left = v - (L/2) * omega
        v_right = v + (L/2) * omega

    and each rim speed is divided by the wheel radius.

    Args:
        speed: Desired forward velocity (m/s)
        turn_rate: Desired yaw rate (rad/s)
        wheel_radius: Wheel radius (m)
        track_width: Distance between the wheels (m)

    Returns:
        tuple[float, float]: (left_omega, right_omega) in rad/s
    """
    left_linear = speed - turn_rate * track_width / 2.0
    right_linear = speed + turn_rate * track_width / 2.0
    return left_linear / wheel_radius, right_linear / wheel_radius


def wrap_to_pi(angle: float) -> float:
    """Wrap an angle difference into (-pi, pi].

    The angle is reduced with an exact IEEE remainder, so the cost does not
    grow with its magnitude.

    Args:
        angle: Angle in radians

    Returns:
        Equivalent angle in (-pi, pi]
    """
    wrapped = math.remainder(angle, 2.0 * math.pi)
    # remainder() lands in [-pi, pi]; -pi belongs to the other end
    return math.pi if wrapped <= -math.pi else wrapped


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))
