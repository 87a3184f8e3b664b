"""Configuration parameters for the differential-drive simulation.

This module centralizes all configuration parameters including:
- Physical vehicle parameters
- Motor model parameters
- Controller gains and arrival thresholds
- Simulation timing
- Default path and navigation target
- Visualization and output settings

All parameters are documented with their purpose, units and origin.
"""

import math

# ============================================================================
# Physical Vehicle Parameters
# ============================================================================

WHEEL_RADIUS = 0.15
"""Drive wheel radius (meters)."""

TRACK_WIDTH = 0.4
"""Distance between the left and right wheel contact points (meters).

Equal to the chassis width. Used as the lever arm in the kinematics."""


# ============================================================================
# Motor Parameters
# ============================================================================

MAX_VOLTAGE = 400.0
"""Maximum motor supply voltage (volts).

Commanded voltages are expected in [-MAX_VOLTAGE, MAX_VOLTAGE] but are
not clamped by the motor model."""

MAX_RPM = 18000.0
"""Motor speed at MAX_VOLTAGE (revolutions per minute)."""


# ============================================================================
# Path Following / Navigation Parameters
# ============================================================================

TURN_GAIN = 2.0
"""Proportional gain from heading error (rad) to turn rate (rad/s)."""

DISTANCE_GAIN = 1.0
"""Proportional gain from distance to target (m) to forward speed (m/s)."""

MAX_TURN_RATE = 2.0
"""Turn rate saturation (rad/s)."""

MAX_SPEED = 1.0
"""Forward speed saturation (m/s)."""

ARRIVAL_THRESHOLD = 0.05
"""Distance below which a waypoint or target counts as reached (meters)."""

HEADING_THRESHOLD = 0.05
"""Heading error below which a navigation target's final heading is met (rad)."""

APPROACH_RADIUS = 0.3
"""Distance at which the navigator switches to final-heading control (meters).

Inside this radius the navigator steers to the target's commanded heading
instead of the bearing to the target, with the approach gains below."""

APPROACH_TURN_GAIN = 2.5
"""Turn gain used inside APPROACH_RADIUS."""

APPROACH_SPEED_GAIN = 0.5
"""Speed gain used inside APPROACH_RADIUS."""

APPROACH_MAX_SPEED = 0.3
"""Speed cap used inside APPROACH_RADIUS (m/s)."""


# ============================================================================
# Simulation Timing and Recording
# ============================================================================

TICK_PERIOD = 0.016
"""Fixed integration step (seconds), one 16 ms tick (~60 Hz)."""

TRAJECTORY_CAPACITY = 500
"""Maximum number of (x, y) samples held in the trajectory log."""

MOTION_THRESHOLD = 0.01
"""Minimum |v| (m/s) or |omega| (rad/s) for manual mode to record a sample."""


# ============================================================================
# Default Operator Inputs
# ============================================================================

DEFAULT_PATH_DEGREES = [
    (1.0, 1.0, 0.0),
    (1.0, -1.0, 90.0),
    (-1.0, -1.0, 180.0),
    (-1.0, 1.0, 270.0),
]
"""Default programmed path as (x, y, theta_degrees) rows.

A 2 m square around the origin, visited clockwise starting top right."""

DEFAULT_TARGET_DEGREES = (2.0, 2.0, 45.0)
"""Default go-to target as (x, y, theta_degrees)."""

DEFAULT_DURATION = 30.0
"""Default simulated duration for command-line runs (seconds)."""


# ============================================================================
# Visualization Colors
# ============================================================================

ACCENT_RED = "#E82127"
"""Primary accent color - actual trajectory, active markers."""

SILVER = "#E8E8E8"
"""Light color for text and labels on dark backgrounds."""

DARK_GRAY = "#222222"
"""Dark background color for plots."""

LIGHT_GRAY = "#F4F4F4"
"""Light neutral for grids and guides."""

PATH_BLUE = "#2196F3"
"""Programmed path and waypoint markers."""

ACTIVE_ORANGE = "#FF9800"
"""Highlight for the waypoint currently being tracked."""

TARGET_RED = "#F44336"
"""Navigation target marker and heading arrow."""

# Terminal color codes (ANSI escape sequences)
TERM_RED = "\033[38;2;232;33;39m"
"""Terminal color code for the accent red (RGB: 232, 33, 39)."""

TERM_BLUE = "\033[38;2;33;150;243m"
"""Terminal color code for the path blue (RGB: 33, 150, 243)."""

TERM_RESET = "\033[0m"
"""Terminal color reset code."""


# ============================================================================
# Output Configuration
# ============================================================================

RESULTS_DIR = "results"
"""Directory (relative to the output dir) where run folders are created."""

DEGREES_PER_RADIAN = 180.0 / math.pi
"""Conversion factor used when presenting headings."""
