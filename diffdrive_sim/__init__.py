"""Differential-Drive Vehicle Simulation

A fixed-step kinematic simulator for a two-wheeled differential-drive vehicle
driven by wheel voltages, with manual, waypoint-following and go-to-position
control modes.

## Architecture Overview

Every tick one controller advances the shared pose:

### Motor Model & Kinematics (model.py)
Maps wheel voltage linearly to wheel angular velocity and integrates the
unicycle model with explicit Euler steps.
- Motor: ω = V / V_max · RPM_max · π/30 (no saturation)
- Kinematics: heading updated first, position uses the new heading

### Controllers
- `manual_controller.py` - Operator-set voltages drive the wheels directly
- `follower.py` - Proportional heading/speed control through a waypoint list
- `navigator.py` - Proportional go-to-pose with a slower approach phase

### Mode Arbitration (arbiter.py)
Selects exactly one controller per tick by precedence (go-to target, then
path, then manual), owns the trajectory log, and publishes notifications.

## Modules

### Core
- `config.py` - Vehicle, motor, gain and timing parameters
- `state.py` - Pose, waypoints, trajectory log, modes, notifications
- `path.py` - Waypoint parsing and default routes
- `runner.py` - Headless and real-time loops, logging setup

### Data & Visualization
- `data_collector.py` - CSV logging of poses, events and waypoints
- `plot_styles.py` - Shared plotting utilities and color scheme
- `visualization.py` - Trajectory and motion plots for recorded runs
- `plot_results.py` - CLI for visualization tools

## Quick Start

```python
from diffdrive_sim import ModeArbiter

sim = ModeArbiter()
sim.program_path([(1.0, 0.0, 0.0), (1.0, 1.0, 1.57)])
sim.run(30.0, until_idle=True)
print(sim.telemetry())
```

Or use the command-line interface:
```bash
python -m diffdrive_sim --mode path
```
"""

__version__ = "0.1.0"

# Export key classes for convenience
from .arbiter import ModeArbiter
from .data_collector import DataCollector
from .follower import PathFollower
from .manual_controller import ManualController
from .navigator import GoToController
from .state import (
    FollowingPath,
    GoingToPosition,
    Manual,
    Notification,
    NotificationKind,
    Pose,
    Telemetry,
    TrajectoryLog,
    Waypoint,
)

__all__ = [
    "ModeArbiter",
    "ManualController",
    "PathFollower",
    "GoToController",
    "DataCollector",
    "Pose",
    "Waypoint",
    "TrajectoryLog",
    "Manual",
    "FollowingPath",
    "GoingToPosition",
    "Notification",
    "NotificationKind",
    "Telemetry",
]
