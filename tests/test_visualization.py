"""Tests for plotting recorded runs"""

import matplotlib

matplotlib.use("Agg")

import numpy as np  # noqa: E402
import pytest  # noqa: E402
from matplotlib.figure import Figure  # noqa: E402

from diffdrive_sim import plot_results  # noqa: E402
from diffdrive_sim.runner import SimulationRunner  # noqa: E402
from diffdrive_sim.state import Waypoint  # noqa: E402
from diffdrive_sim.visualization import (  # noqa: E402
    parse_waypoints,
    plot_run_summary,
    plot_trajectory,
)


@pytest.fixture
def recorded_run(tmp_path, monkeypatch):
    monkeypatch.delenv("RUN_DIR", raising=False)
    run_dir = tmp_path / "results" / "run_20250101_120000"
    with SimulationRunner(run_dir=str(run_dir)) as runner:
        runner.program_path([Waypoint(1.0, 0.0), Waypoint(1.0, 1.0)])
        runner.run(5.0)
        runner.go_to(Waypoint(0.0, 1.0, 3.14))
        runner.run(1.0)
    return run_dir


def test_parse_waypoints(recorded_run):
    submitted = parse_waypoints(recorded_run / "waypoints.csv")

    assert submitted["path"] == [Waypoint(1.0, 0.0), Waypoint(1.0, 1.0)]
    assert submitted["target"] == [Waypoint(0.0, 1.0, 3.14)]


def test_plot_trajectory_returns_figure():
    trajectory = np.array([[0.0, 0.0], [0.5, 0.1], [1.0, 0.0]])
    fig = plot_trajectory(
        trajectory,
        waypoints=[Waypoint(1.0, 0.0)],
        target=Waypoint(2.0, 2.0, 0.7),
        times=np.array([0.0, 0.1, 0.2]),
        active_index=0,
    )
    assert isinstance(fig, Figure)


def test_plot_trajectory_empty():
    assert isinstance(plot_trajectory(np.empty((0, 2))), Figure)


def test_plot_run_summary_saves_images(recorded_run):
    plot_run_summary(recorded_run, save_plots=True, show_plots=False)

    assert (recorded_run / "trajectory.png").exists()
    assert (recorded_run / "motion.png").exists()


def test_plot_results_cli(recorded_run):
    results_dir = recorded_run.parent

    assert plot_results.main(["--results-dir", str(results_dir), "--save", "--no-show"]) == 0
    assert (recorded_run / "trajectory.png").exists()


def test_plot_results_missing_run(tmp_path):
    assert plot_results.main(["--results-dir", str(tmp_path), "--run", "run_missing"]) == 1


def test_find_latest_run(tmp_path):
    (tmp_path / "run_20250101_000000").mkdir()
    (tmp_path / "run_20250102_000000").mkdir()
    (tmp_path / "notes").mkdir()

    assert plot_results.find_latest_run(tmp_path).name == "run_20250102_000000"


def test_find_latest_run_empty(tmp_path):
    with pytest.raises(FileNotFoundError):
        plot_results.find_latest_run(tmp_path)
