"""
===============================================================================
ORRERY - Trail Buffer Test Suite
===============================================================================
Tests for the bounded trail history: count cap, age truncation, reset on
start and on long gaps, start/stop semantics and polyline output.
===============================================================================
"""

import logging
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import numpy as np
import pytest
from numpy.testing import assert_allclose

from orrery.dynamics.trail import TrailBuffer


def pos(t):
    return np.array([t, 0.0, 0.0])


@pytest.fixture
def trail():
    buf = TrailBuffer(spacing=1.0, max_points=5)
    buf.start(True)
    return buf


def times(buf):
    return [p.time for p in buf.points]


class TestStartStop:

    def test_new_buffer_is_disabled(self):
        buf = TrailBuffer(spacing=1.0, max_points=5)
        assert not buf.enabled
        buf.update(0.0, pos(0.0))
        assert len(buf) == 0

    def test_start_requires_orbit(self):
        buf = TrailBuffer(spacing=1.0, max_points=5)
        buf.start(True, orbit_defined=False)
        assert not buf.enabled
        assert buf.awaiting_first_point

    def test_stop_keeps_history(self, trail):
        for t in range(4):
            trail.update(float(t), pos(t))
        trail.start(False)
        trail.update(10.0, pos(10.0))
        assert not trail.enabled
        assert times(trail) == [3.0, 2.0, 1.0, 0.0]

    def test_restart_clears_on_next_update(self, trail):
        for t in range(4):
            trail.update(float(t), pos(t))
        trail.start(True)
        assert len(trail) == 4
        trail.update(4.2, pos(4.2))
        assert times(trail) == [4.2]
        assert not trail.awaiting_first_point

    def test_invalid_parameters(self):
        with pytest.raises(ValueError):
            TrailBuffer(spacing=0.0)
        with pytest.raises(ValueError):
            TrailBuffer(max_points=0)


class TestWindowing:

    def test_first_update_records_a_point(self, trail):
        trail.update(100.0, pos(100.0))
        assert times(trail) == [100.0]
        assert trail.last_time == 100.0

    def test_points_closer_than_spacing_are_skipped(self, trail):
        trail.update(0.0, pos(0.0))
        for k in range(1, 10):
            trail.update(k * 0.1, pos(k * 0.1))
        assert times(trail) == [0.0]

    def test_count_never_exceeds_max_points(self, trail):
        for t in range(50):
            trail.update(float(t), pos(t))
            assert len(trail) <= 5
        assert times(trail) == [49.0, 48.0, 47.0, 46.0, 45.0]

    def test_old_points_truncated_by_age(self, trail):
        for t in range(4):
            trail.update(float(t), pos(t))
        trail.update(5.5, pos(5.5))

        # 5.5 days after t=0 exceeds the 5-day window, 4.5 after t=1 does not.
        assert times(trail) == [5.5, 3.0, 2.0, 1.0]
        assert len(trail) < trail.max_points

    def test_long_gap_resets(self, trail):
        for t in range(4):
            trail.update(float(t), pos(t))
        trail.update(100.0, pos(100.0))
        assert times(trail) == [100.0]

    def test_reset_is_logged(self, trail, caplog):
        caplog.set_level(logging.DEBUG, logger="orrery.dynamics.trail")
        for t in range(4):
            trail.update(float(t), pos(t))
        trail.update(100.0, pos(100.0))
        assert "trail reset at JD 100.000000 (4 points dropped)" in caplog.messages

    def test_backward_time_records_points(self, trail):
        trail.update(10.0, pos(10.0))
        trail.update(8.0, pos(8.0))
        assert times(trail) == [8.0, 10.0]


class TestPolyline:

    def test_empty_before_first_point(self, trail):
        assert trail.polyline(pos(0.0)).shape == (0, 3)

    def test_oldest_to_newest_then_current(self, trail):
        for t in range(3):
            trail.update(float(t), pos(t))
        line = trail.polyline(pos(2.4))
        assert line.shape == (4, 3)
        assert_allclose(line[:, 0], [0.0, 1.0, 2.0, 2.4])

    def test_recorded_position_is_a_copy(self, trail):
        p = pos(0.0)
        trail.update(0.0, p)
        p[0] = 99.0
        assert trail.points[0].position[0] == 0.0
