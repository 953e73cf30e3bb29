"""
===============================================================================
ORRERY - Position Function Test Suite
===============================================================================
Tests for Kepler's equation, the two-body orbit position function and
catalogue parsing of orbit models.
===============================================================================
"""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import numpy as np
import pytest
from numpy.testing import assert_allclose

from orrery.core.constants import J2000, PI
from orrery.core.exceptions import ConfigurationError
from orrery.dynamics import ephemeris


class TestKeplerEquation:

    def test_circular_orbit(self):
        assert ephemeris.solve_kepler(1.234, 0.0) == pytest.approx(1.234)

    @pytest.mark.parametrize("e", [0.0167, 0.2056, 0.5, 0.95])
    def test_solution_satisfies_equation(self, e):
        M = 2.1
        E = ephemeris.solve_kepler(M, e)
        assert E - e * np.sin(E) == pytest.approx(M, abs=1e-10)

    def test_rejects_hyperbolic(self):
        with pytest.raises(ValueError):
            ephemeris.solve_kepler(1.0, 1.2)


class TestKeplerOrbit:

    def test_circular_quarter_period(self):
        f = ephemeris.kepler_orbit(a=1.0, e=0.0, i=0.0, node=0.0,
                                   arg_perihelion=0.0, mean_anomaly=0.0,
                                   period=360.0)
        assert_allclose(f(J2000), [1.0, 0.0, 0.0], atol=1e-12)
        assert_allclose(f(J2000 + 90.0), [0.0, 1.0, 0.0], atol=1e-12)

    def test_polar_orbit_leaves_ecliptic(self):
        f = ephemeris.kepler_orbit(a=2.0, e=0.0, i=PI / 2, node=0.0,
                                   arg_perihelion=0.0, mean_anomaly=0.0,
                                   period=360.0)
        assert_allclose(f(J2000 + 90.0), [0.0, 0.0, 2.0], atol=1e-12)

    def test_perihelion_and_aphelion_distance(self):
        a, e = 1.5237, 0.0934
        f = ephemeris.kepler_orbit(a=a, e=e, i=0.03, node=0.86,
                                   arg_perihelion=5.0, mean_anomaly=0.0,
                                   period=687.0)
        assert np.linalg.norm(f(J2000)) == pytest.approx(a * (1 - e))
        assert np.linalg.norm(f(J2000 + 343.5)) == pytest.approx(a * (1 + e))

    def test_periodic(self):
        f = ephemeris.kepler_orbit(a=5.2, e=0.048, i=0.02, node=1.75,
                                   arg_perihelion=4.78, mean_anomaly=0.34,
                                   period=4332.589)
        assert_allclose(f(J2000 + 4332.589), f(J2000), atol=1e-9)

    def test_invalid_elements(self):
        with pytest.raises(ValueError):
            ephemeris.kepler_orbit(a=-1.0, e=0.0, i=0.0, node=0.0,
                                   arg_perihelion=0.0, mean_anomaly=0.0,
                                   period=1.0)


class TestFromConfig:

    def test_fixed_default_is_origin(self):
        f = ephemeris.from_config({})
        assert_allclose(f(J2000), [0.0, 0.0, 0.0])

    def test_fixed_returns_copies(self):
        f = ephemeris.from_config({"model": "fixed", "position": [1.0, 2.0, 3.0]})
        p = f(J2000)
        p[0] = 99.0
        assert_allclose(f(J2000 + 1.0), [1.0, 2.0, 3.0])

    def test_kepler_angles_in_degrees(self):
        f = ephemeris.from_config({"model": "kepler", "a": 1.0, "period": 360.0,
                                   "mean_anomaly": 90.0})
        assert_allclose(f(J2000), [0.0, 1.0, 0.0], atol=1e-12)

    def test_unknown_model(self):
        with pytest.raises(ConfigurationError):
            ephemeris.from_config({"model": "vsop87"})

    def test_missing_element(self):
        with pytest.raises(ConfigurationError):
            ephemeris.from_config({"model": "kepler", "a": 1.0})

    def test_invalid_element(self):
        with pytest.raises(ConfigurationError):
            ephemeris.from_config({"model": "kepler", "a": 1.0, "period": 1.0,
                                   "e": 1.5})
