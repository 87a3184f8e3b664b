"""Tests for CSV recording and the simulation runner"""

import asyncio
import csv
import logging
import math

import numpy as np
import pytest

from diffdrive_sim.__main__ import main
from diffdrive_sim.data_collector import (
    EVENT_COLUMNS,
    POSE_COLUMNS,
    WAYPOINT_COLUMNS,
    DataCollector,
)
from diffdrive_sim.runner import CustomFormatter, SimulationRunner
from diffdrive_sim.state import (
    Notification,
    NotificationKind,
    Pose,
    SimulationState,
    TrajectoryLog,
    Waypoint,
)


def read_rows(path):
    with open(path, newline="") as f:
        return list(csv.reader(f))


@pytest.fixture(autouse=True)
def no_run_dir_env(monkeypatch):
    monkeypatch.delenv("RUN_DIR", raising=False)


# ============================================================================
# DataCollector
# ============================================================================


def test_collector_writes_headers_and_rows(tmp_path):
    state = SimulationState(pose=Pose(1.0, 2.0, 0.5), trajectory=TrajectoryLog(5))
    state.tick = 3
    notification = Notification(NotificationKind.PATH_COMPLETE, "done")

    with DataCollector(run_dir=str(tmp_path / "run")) as collector:
        collector.log_state(state, "manual")
        collector.log_event(3, 0.048, notification)
        collector.log_waypoints("path", [Waypoint(1.0, 0.0), Waypoint(1.0, 1.0, 1.5)])
        collector.save_trajectory(np.array([[0.0, 0.0], [1.0, 2.0]]))

    run_dir = tmp_path / "run"
    pose_rows = read_rows(run_dir / "pose_data.csv")
    assert pose_rows[0] == POSE_COLUMNS
    assert pose_rows[1][0] == "3"
    assert pose_rows[1][-1] == "manual"

    event_rows = read_rows(run_dir / "events.csv")
    assert event_rows[0] == EVENT_COLUMNS
    assert event_rows[1][2:] == ["path_complete", "done"]

    waypoint_rows = read_rows(run_dir / "waypoints.csv")
    assert waypoint_rows[0] == WAYPOINT_COLUMNS
    assert [row[:2] for row in waypoint_rows[1:]] == [["path", "0"], ["path", "1"]]

    trajectory_rows = read_rows(run_dir / "trajectory.csv")
    assert trajectory_rows == [["x", "y"], ["0.0", "0.0"], ["1.0", "2.0"]]


def test_collector_timestamped_run_dir(tmp_path):
    collector = DataCollector(output_dir=str(tmp_path))

    assert collector.run_dir.parent == tmp_path / "results"
    assert collector.run_dir.name.startswith("run_")
    assert collector.run_dir.is_dir()


def test_collector_run_dir_from_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("RUN_DIR", str(tmp_path / "from_env"))
    collector = DataCollector(output_dir=str(tmp_path))
    assert collector.run_dir == tmp_path / "from_env"


def test_collector_rejects_file_as_output_dir(tmp_path):
    not_a_dir = tmp_path / "file.txt"
    not_a_dir.write_text("")

    with pytest.raises(ValueError):
        DataCollector(output_dir=str(not_a_dir))


# ============================================================================
# SimulationRunner
# ============================================================================


def test_runner_records_navigation(tmp_path):
    run_dir = tmp_path / "run"
    with SimulationRunner(run_dir=str(run_dir)) as runner:
        runner.go_to(Waypoint(0.5, 0.0, 0.0))
        runner.run(30.0, until_idle=True)

    assert runner.arbiter.is_idle
    assert [n.kind for n in runner.notifications] == [
        NotificationKind.NAVIGATION_STARTED,
        NotificationKind.DESTINATION_REACHED,
    ]

    pose_rows = read_rows(run_dir / "pose_data.csv")
    assert len(pose_rows) - 1 == runner.arbiter.state.tick
    assert pose_rows[1][-1] == "going_to_position"

    event_kinds = [row[2] for row in read_rows(run_dir / "events.csv")[1:]]
    assert event_kinds == ["navigation_started", "destination_reached"]

    waypoint_rows = read_rows(run_dir / "waypoints.csv")
    assert waypoint_rows[1][0] == "target"
    assert (run_dir / "trajectory.csv").exists()


def test_runner_without_recording():
    runner = SimulationRunner(record=False)
    with runner:
        runner.set_voltages(10.0, 10.0)
        runner.run(0.16)

    assert runner.data_collector is None
    assert runner.arbiter.state.tick == 10


def test_runner_stop_prevents_further_ticks():
    runner = SimulationRunner(record=False)
    runner.stop()
    runner.run(1.0)
    assert runner.arbiter.state.tick == 0


def test_runner_realtime():
    runner = SimulationRunner(record=False)
    runner.set_voltages(10.0, 10.0)

    asyncio.run(runner.run_realtime(0.08))

    assert runner.arbiter.state.tick == 5
    assert runner.arbiter.pose.x > 0.0


@pytest.mark.parametrize("duration", [math.inf, math.nan, -0.5])
def test_runner_rejects_invalid_duration(duration):
    runner = SimulationRunner(record=False)
    with pytest.raises(ValueError):
        runner.run(duration)
    with pytest.raises(ValueError):
        asyncio.run(runner.run_realtime(duration))
    assert runner.arbiter.state.tick == 0


def test_runner_summary():
    runner = SimulationRunner(record=False)
    runner.run(0.032)
    assert "Final pose" in runner.summary()
    assert "2 ticks" in runner.summary()


def test_custom_formatter_drops_timestamp_for_info():
    formatter = CustomFormatter()
    info = logging.LogRecord("test", logging.INFO, __file__, 1, "hello", None, None)
    warning = logging.LogRecord("test", logging.WARNING, __file__, 1, "careful", None, None)

    assert formatter.format(info) == "hello"
    assert formatter.format(warning).endswith("WARNING - careful")


# ============================================================================
# Command line
# ============================================================================


def test_cli_path_run(tmp_path):
    exit_code = main(
        ["--mode", "path", "--waypoint", "1,0,0", "--duration", "20", "--output-dir", str(tmp_path)]
    )

    assert exit_code == 0
    run_dirs = list((tmp_path / "results").iterdir())
    assert len(run_dirs) == 1
    event_kinds = [row[2] for row in read_rows(run_dirs[0] / "events.csv")[1:]]
    assert event_kinds[-1] == "path_complete"


def test_cli_manual_without_recording(tmp_path):
    exit_code = main(
        ["--left", "100", "--right", "-100", "--duration", "0.1", "--no-record",
         "--output-dir", str(tmp_path)]
    )

    assert exit_code == 0
    assert not (tmp_path / "results").exists()


def test_cli_rejects_bad_target(tmp_path):
    exit_code = main(["--mode", "goto", "--target", "1,nan,0", "--no-record"])
    assert exit_code == 1


def test_cli_rejects_non_finite_duration():
    assert main(["--duration", "inf", "--no-record"]) == 1
