"""
===============================================================================
ORRERY - Navigator Test Suite
===============================================================================
Tests for Greenwich mean sidereal time, observer-centred equatorial
positions, the local horizon frame and the body report built on them.
===============================================================================
"""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import numpy as np
import pytest
from numpy.testing import assert_allclose

from orrery.core.constants import J2000, J2000_OBLIQUITY, PI
from orrery.core.frames import Rx, rect_to_sphe
from orrery.dynamics.body import Body
from orrery.dynamics.ephemeris import fixed_position
from orrery.navigation.observer import Navigator, greenwich_sidereal_time


def unit_vector(lon, lat):
    return np.array([np.cos(lon) * np.cos(lat),
                     np.sin(lon) * np.cos(lat),
                     np.sin(lat)])


@pytest.fixture
def sun():
    return Body("Sun", radius=0.00465)


@pytest.fixture
def home(sun):
    body = Body("Home", parent=sun, position_func=fixed_position([1.0, 0.0, 0.0]))
    sun.compute_position(J2000)
    body.compute_position(J2000)
    return body


class TestSiderealTime:

    def test_gmst_at_j2000(self):
        assert greenwich_sidereal_time(J2000) == pytest.approx(280.46061837)

    def test_gmst_advances_one_sidereal_day(self):
        a = greenwich_sidereal_time(J2000 + 10.0)
        b = greenwich_sidereal_time(J2000 + 10.0 + 0.99726958)
        assert (b - a) % 360.0 == pytest.approx(0.0, abs=1e-3)

    def test_gmst_range(self):
        for jd in (J2000 - 5000.3, J2000 + 0.1, J2000 + 36525.7):
            assert 0.0 <= greenwich_sidereal_time(jd) < 360.0


class TestNavigator:

    def test_rejects_bad_latitude(self, home):
        with pytest.raises(ValueError):
            Navigator(home, latitude=91.0)

    def test_set_jday(self, home):
        nav = Navigator(home)
        nav.set_jday(J2000 + 1.5)
        assert nav.jday == J2000 + 1.5

    def test_observer_is_home_body_centre(self, home):
        nav = Navigator(home)
        assert_allclose(nav.observer_helio_pos(), [1.0, 0.0, 0.0])

    def test_helio_to_equatorial(self, home):
        nav = Navigator(home)
        v = nav.helio_to_earth_pos_equ([1.0, 0.0, 1.0])
        assert_allclose(v, [0.0, -np.sin(J2000_OBLIQUITY), np.cos(J2000_OBLIQUITY)],
                        atol=1e-15)

    def test_meridian_object_at_zenith_on_equator(self, home):
        nav = Navigator(home, latitude=0.0, longitude=30.0, jday=J2000 + 0.3)
        lst = nav.local_sidereal_time()
        local = nav.earth_equ_to_local(unit_vector(lst, 0.0))
        assert_allclose(local, [0.0, 0.0, 1.0], atol=1e-12)

    def test_pole_at_zenith_from_pole(self, home):
        nav = Navigator(home, latitude=90.0)
        local = nav.earth_equ_to_local([0.0, 0.0, 1.0])
        assert_allclose(local, [0.0, 0.0, 1.0], atol=1e-12)

    def test_celestial_pole_altitude_equals_latitude(self, home):
        nav = Navigator(home, latitude=40.0, jday=J2000 + 12.7)
        _, alt = rect_to_sphe(nav.earth_equ_to_local([0.0, 0.0, 1.0]))
        assert alt == pytest.approx(40.0 * PI / 180.0)

    def test_rising_object_is_east(self, home):
        nav = Navigator(home, latitude=0.0, jday=J2000 + 3.1)
        lst = nav.local_sidereal_time()
        local = nav.earth_equ_to_local(unit_vector(lst + PI / 2, 0.0))
        assert_allclose(local, [0.0, 1.0, 0.0], atol=1e-12)


class TestBodyReport:

    def test_report_of_body_above_ecliptic_pole(self, sun, home):
        target = Body("Target", parent=sun, radius=1e-4, albedo=0.3,
                      position_func=fixed_position([1.0, 0.0, 1.0]))
        target.compute_position(J2000)
        nav = Navigator(home)

        report = target.info(nav)
        assert report.ra == pytest.approx(3 * PI / 2)
        assert report.dec == pytest.approx(PI / 2 - J2000_OBLIQUITY)
        assert report.distance == pytest.approx(1.0)
        assert 0.0 <= report.azimuth < 2 * PI
        assert np.isfinite(report.magnitude)
        observer = nav.observer_helio_pos()
        assert report.magnitude == target.compute_magnitude(observer)
        assert 0.0 < target.phase(observer) < 1.0

        text = target.info_string(nav)
        assert text.splitlines()[0] == "Name : Target"
        assert text.splitlines()[1] == "RA : 18h00m00.00s"
        assert target.short_info_string(nav).startswith("Target: mag ")

    def test_photometry_takes_observer_position(self, sun, home):
        target = Body("Target", parent=sun, radius=1e-4, albedo=0.3,
                      position_func=fixed_position([1.0, 0.0, 1.0]))
        target.compute_position(J2000)
        nav = Navigator(home)
        with pytest.raises(TypeError):
            target.phase(nav)
        with pytest.raises(TypeError):
            target.compute_magnitude(nav)

    def test_azimuth_of_east_point(self, sun, home):
        nav = Navigator(home, latitude=0.0, jday=J2000 + 3.1)
        lst = nav.local_sidereal_time()
        east_equ = unit_vector(lst + PI / 2, 0.0)
        # Observer-centred direction due east.
        offset = Rx(J2000_OBLIQUITY) @ east_equ
        target = Body("East", parent=sun,
                      position_func=fixed_position(home.ecliptic_pos + offset))
        target.compute_position(J2000)

        report = target.info(nav)
        assert report.azimuth == pytest.approx(PI / 2)
        assert report.altitude == pytest.approx(0.0, abs=1e-12)

    def test_fov_helpers(self, sun, home):
        jupiter = Body("Jupiter", parent=sun, radius=4.78e-4,
                       position_func=fixed_position([5.0, 0.0, 0.0]),
                       satellites_fov_extent=0.005)
        jupiter.compute_position(J2000)
        nav = Navigator(home)
        assert jupiter.get_close_fov(nav) > 0.0
        assert jupiter.get_satellites_fov(nav) > jupiter.get_close_fov(nav)
        assert home.get_satellites_fov(nav) == -1.0
