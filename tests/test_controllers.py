"""Tests for the manual, path-following and go-to controllers"""

import math

import pytest

from diffdrive_sim.follower import PathFollower
from diffdrive_sim.manual_controller import ManualController
from diffdrive_sim.navigator import GoToController
from diffdrive_sim.state import (
    NotificationKind,
    Pose,
    SimulationState,
    TrajectoryLog,
    Waypoint,
)

DT = 0.016


def make_state(x=0.0, y=0.0, heading=0.0):
    return SimulationState(pose=Pose(x, y, heading), trajectory=TrajectoryLog(500))


def run_until(controller, state, ticks):
    events = []
    for _ in range(ticks):
        events.extend(controller.update(state, DT) or [])
    return events


# ============================================================================
# ManualController
# ============================================================================


def test_manual_full_voltage_one_tick():
    """Test one tick at full voltage moves by max wheel speed times radius times dt"""
    controller = ManualController(max_voltage=400.0, max_rpm=18000.0, wheel_radius=0.15)
    controller.set_voltages(400.0, 400.0)
    state = make_state()

    controller.update(state, DT)

    expected = 18000.0 * math.pi / 30.0 * 0.15 * DT
    assert state.pose.x == pytest.approx(expected)
    assert state.pose.y == 0.0
    assert state.pose.heading == 0.0
    assert state.linear_velocity == pytest.approx(expected / DT)


def test_manual_opposite_voltages_spin_in_place():
    controller = ManualController()
    controller.set_voltages(-100.0, 100.0)
    state = make_state(1.0, 1.0)

    controller.update(state, DT)

    assert (state.pose.x, state.pose.y) == (1.0, 1.0)
    assert state.pose.heading > 0.0
    assert state.left_wheel_velocity == pytest.approx(-state.right_wheel_velocity)


def test_manual_idle_records_no_samples():
    """Test a stationary vehicle does not add trajectory samples"""
    controller = ManualController()
    state = make_state()

    for _ in range(10):
        controller.update(state, DT)

    assert len(state.trajectory) == 0
    assert state.pose == Pose()


def test_manual_motion_records_samples():
    controller = ManualController()
    controller.set_voltages(10.0, 10.0)
    state = make_state()

    for _ in range(10):
        controller.update(state, DT)

    assert len(state.trajectory) == 10


def test_manual_rejects_nan_and_keeps_command():
    controller = ManualController()
    controller.set_voltages(50.0, 60.0)

    with pytest.raises(ValueError):
        controller.set_voltages(math.nan, 0.0)

    assert controller.command.left_voltage == 50.0
    assert controller.command.right_voltage == 60.0


# ============================================================================
# PathFollower
# ============================================================================


def test_follower_single_waypoint_completes():
    """Test one waypoint ahead yields exactly one reached event and then completion"""
    follower = PathFollower()
    assert follower.start([Waypoint(1.0, 0.0, 0.0)])
    state = make_state()

    events = run_until(follower, state, 1000)
    kinds = [e.kind for e in events]

    assert kinds == [NotificationKind.WAYPOINT_REACHED, NotificationKind.PATH_COMPLETE]
    assert not follower.following
    assert follower.index == 0
    assert math.hypot(state.pose.x - 1.0, state.pose.y) < 0.06


def test_follower_visits_waypoints_in_order():
    follower = PathFollower()
    follower.start([Waypoint(1.0, 0.0, 0.0), Waypoint(1.0, 1.0, math.pi / 2)])
    state = make_state()

    events = run_until(follower, state, 3000)
    reached = [e.payload["index"] for e in events if e.kind == NotificationKind.WAYPOINT_REACHED]

    assert reached == [0, 1]
    assert events[-1].kind == NotificationKind.PATH_COMPLETE
    assert math.hypot(state.pose.x - 1.0, state.pose.y - 1.0) < 0.06


def test_follower_ignores_waypoint_heading():
    """Test waypoint theta does not steer the follower"""
    follower = PathFollower()
    follower.start([Waypoint(1.0, 0.0, 3.0)])
    state = make_state()

    run_until(follower, state, 1000)

    assert not follower.following
    assert abs(state.pose.heading) < 0.1


def test_follower_empty_path_stays_idle():
    follower = PathFollower()
    assert not follower.start([])
    assert not follower.following

    state = make_state()
    assert follower.update(state, DT) == []
    assert state.pose == Pose()


def test_follower_arrival_uses_distance_before_motion():
    """Test a waypoint already within the threshold is reached on the first tick"""
    follower = PathFollower()
    follower.start([Waypoint(0.01, 0.0, 0.0), Waypoint(5.0, 0.0, 0.0)])
    state = make_state()

    events = follower.update(state, DT)

    assert [e.kind for e in events] == [NotificationKind.WAYPOINT_REACHED]
    assert follower.index == 1
    assert len(state.trajectory) == 1


def test_follower_saturates_speed_and_turn_rate():
    follower = PathFollower(max_speed=1.0, max_turn_rate=2.0)
    state = make_state()

    speed, turn_rate, distance, error = follower.compute_control(state, Waypoint(-10.0, 0.1))

    assert speed == 1.0
    assert turn_rate == pytest.approx(2.0)
    assert distance == pytest.approx(math.hypot(10.0, 0.1))
    assert error == pytest.approx(math.atan2(0.1, -10.0))


def test_follower_stop_discards_path():
    follower = PathFollower()
    follower.start([Waypoint(1.0, 0.0)])
    follower.stop()

    assert not follower.following
    assert len(follower.path) == 0


# ============================================================================
# GoToController
# ============================================================================


def test_goto_at_target_arrives_without_moving():
    """Test a target at the current pose arrives on the first tick"""
    navigator = GoToController()
    navigator.set_target(Waypoint(0.0, 0.0, 0.0))
    state = make_state()

    events = navigator.update(state, DT)

    assert [e.kind for e in events] == [NotificationKind.DESTINATION_REACHED]
    assert state.pose == Pose()
    assert not navigator.active
    assert len(state.trajectory) == 0


def test_goto_reaches_pose():
    navigator = GoToController()
    navigator.set_target(Waypoint(1.0, 0.0, 0.0))
    state = make_state()

    events = run_until(navigator, state, 2000)

    assert [e.kind for e in events] == [NotificationKind.DESTINATION_REACHED]
    assert math.hypot(state.pose.x - 1.0, state.pose.y) < 0.05
    assert state.linear_velocity == 0.0


def test_goto_requires_heading_alignment():
    """Test being on the spot with the wrong heading is not arrival"""
    navigator = GoToController()
    navigator.set_target(Waypoint(0.0, 0.0, math.pi / 2))
    state = make_state()

    assert navigator.update(state, DT) == []
    assert navigator.active
    assert state.pose.heading > 0.0


def test_goto_approach_gains_inside_radius():
    """Test the slower approach gains and cap apply near the target"""
    navigator = GoToController()
    state = make_state()

    far_speed, _, _, _ = navigator.compute_control(state, Waypoint(0.5, 0.0, 0.0))
    near_speed, _, _, _ = navigator.compute_control(state, Waypoint(0.2, 0.0, 0.0))

    assert far_speed == pytest.approx(0.5)
    assert near_speed == pytest.approx(0.2 * navigator.approach_speed_gain)


def test_goto_faces_target_heading_when_close():
    navigator = GoToController()
    state = make_state()

    _, _, _, error = navigator.compute_control(state, Waypoint(0.1, 0.1, 1.0))

    assert error == pytest.approx(1.0)


def test_goto_cancel():
    navigator = GoToController()
    navigator.set_target(Waypoint(1.0, 1.0))
    navigator.cancel()

    assert not navigator.active
    assert navigator.update(make_state(), DT) == []
