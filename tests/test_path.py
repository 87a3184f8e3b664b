"""Tests for paths and waypoint parsing"""

import math

import pytest

from diffdrive_sim.path import (
    Path,
    default_path,
    default_target,
    parse_waypoint,
    path_polyline,
    waypoints_from_degrees,
)
from diffdrive_sim.state import Waypoint


def test_parse_waypoint_converts_degrees():
    wp = parse_waypoint("1, -2, 90")
    assert wp.x == 1.0
    assert wp.y == -2.0
    assert wp.theta == pytest.approx(math.pi / 2)


@pytest.mark.parametrize("text", ["1,2", "1,2,3,4", "a,b,c", "nan,0,0", "inf,0,0"])
def test_parse_waypoint_rejects_bad_input(text):
    with pytest.raises(ValueError):
        parse_waypoint(text)


def test_waypoints_from_degrees_requires_three_values():
    with pytest.raises(ValueError):
        waypoints_from_degrees([(1.0, 2.0)])


def test_default_path_and_target():
    path = default_path()
    assert len(path) > 0
    assert all(isinstance(wp, Waypoint) for wp in path)
    assert default_target().theta == pytest.approx(math.pi / 4)


def test_path_cursor():
    """Test the cursor walks the waypoints in order"""
    path = Path((Waypoint(1.0, 0.0), Waypoint(2.0, 0.0)))
    assert path.current == Waypoint(1.0, 0.0)
    assert not path.is_last

    path.advance()
    assert path.current == Waypoint(2.0, 0.0)
    assert path.is_last

    path.reset()
    assert len(path) == 0
    assert path.current is None


def test_path_polyline():
    polyline = path_polyline([Waypoint(0.0, 1.0, 0.5), Waypoint(2.0, 3.0, 1.0)])
    assert polyline["x"].tolist() == [0.0, 2.0]
    assert polyline["y"].tolist() == [1.0, 3.0]
    assert polyline["theta"].tolist() == [0.5, 1.0]
