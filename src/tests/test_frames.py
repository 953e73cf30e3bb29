"""
===============================================================================
ORRERY - Frame Transformation Test Suite
===============================================================================
Tests for the passive 3x3 rotations, the active 4x4 homogeneous transforms
and the ecliptic-to-equatorial and rectangular-to-spherical conversions.
===============================================================================
"""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import numpy as np
import pytest
from numpy.testing import assert_allclose

from orrery.core.constants import J2000_OBLIQUITY, PI
from orrery.core.frames import (
    Rx, Ry, Rz,
    ecliptic_to_equatorial, homogeneous, identity, rect_to_sphe,
    translation, xrotation, zrotation,
)


class TestElementaryRotations:

    @pytest.mark.parametrize("R", [Rx, Ry, Rz])
    def test_orthonormal(self, R):
        M = R(0.7)
        assert_allclose(M @ M.T, np.eye(3), atol=1e-15)
        assert np.linalg.det(M) == pytest.approx(1.0)

    def test_rz_is_passive(self):
        # Rotating the axes by +90 deg puts the old Y-axis on the new X-axis.
        assert_allclose(Rz(PI / 2) @ [0.0, 1.0, 0.0], [1.0, 0.0, 0.0], atol=1e-15)


class TestHomogeneous:

    def test_active_rotation_sign(self):
        assert_allclose(xrotation(0.3)[:3, :3], Rx(-0.3))
        assert_allclose(zrotation(PI / 2)[:3, :3] @ [1.0, 0.0, 0.0], [0.0, 1.0, 0.0],
                        atol=1e-15)

    def test_xrotation_tilts_pole_toward_minus_y(self):
        eps = 0.4
        pole = xrotation(eps)[:3, :3] @ [0.0, 0.0, 1.0]
        assert_allclose(pole, [0.0, -np.sin(eps), np.cos(eps)], atol=1e-15)

    def test_translation_moves_points_not_directions(self):
        T = translation([1.0, 2.0, 3.0])
        assert_allclose(T @ [1.0, 1.0, 1.0, 1.0], [2.0, 3.0, 4.0, 1.0])
        assert_allclose(T @ [1.0, 1.0, 1.0, 0.0], [1.0, 1.0, 1.0, 0.0])

    def test_composition_rotates_then_translates(self):
        M = translation([1.0, 0.0, 0.0]) @ zrotation(PI / 2)
        assert_allclose(M @ [1.0, 0.0, 0.0, 1.0], [1.0, 1.0, 0.0, 1.0],
                        atol=1e-15)

    def test_homogeneous_layout(self):
        M = homogeneous(np.eye(3), [4.0, 5.0, 6.0])
        assert_allclose(M[3], [0.0, 0.0, 0.0, 1.0])
        assert_allclose(M[:3, 3], [4.0, 5.0, 6.0])
        assert_allclose(identity(), np.eye(4))


class TestEclipticEquatorial:

    def test_ecliptic_pole_in_equatorial(self):
        v = ecliptic_to_equatorial([0.0, 0.0, 1.0])
        assert_allclose(v, [0.0, -np.sin(J2000_OBLIQUITY), np.cos(J2000_OBLIQUITY)],
                        atol=1e-15)

    def test_equinox_direction_is_shared(self):
        assert_allclose(ecliptic_to_equatorial([1.0, 0.0, 0.0]), [1.0, 0.0, 0.0])

    def test_custom_obliquity(self):
        v = ecliptic_to_equatorial([0.0, 1.0, 0.0], obliquity=PI / 2)
        assert_allclose(v, [0.0, 0.0, 1.0], atol=1e-15)


class TestSpherical:

    def test_longitude_wraps_to_positive(self):
        lon, lat = rect_to_sphe([0.0, -2.0, 0.0])
        assert lon == pytest.approx(3 * PI / 2)
        assert lat == pytest.approx(0.0)

    def test_pole(self):
        lon, lat = rect_to_sphe([0.0, 0.0, 5.0])
        assert lat == pytest.approx(PI / 2)

    def test_zero_vector(self):
        assert rect_to_sphe([0.0, 0.0, 0.0]) == (0.0, 0.0)

    def test_length_discarded(self):
        lon, lat = rect_to_sphe([3.0, 3.0, 0.0])
        assert lon == pytest.approx(PI / 4)
        assert lat == pytest.approx(0.0)
