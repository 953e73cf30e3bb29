"""
===============================================================================
ORRERY - Reference Frame Transformations
===============================================================================
Supports: heliocentric ecliptic (VSOP87-like), parent-centred ecliptic,
          body-local (equatorial of the body), earth-relative equatorial,
          local horizon.

Every body position is produced in the ecliptic frame of its parent.  To
compose a body with its ancestors, or to hand a position to an observer,
the engine needs two kinds of matrices:

    3x3 elementary rotations   -> direction-only frame changes
                                  (ecliptic -> equatorial, horizon)
    4x4 homogeneous transforms -> rotation + translation of a body frame
                                  relative to its parent

Two sign conventions live side by side and must not be mixed up:

    Rx, Rz             passive (frame) rotations, as used in the classical
                       astrodynamics texts: they rotate the *axes* by +angle
    xrotation,         active rotations in homogeneous form: they rotate the
    zrotation          *vector* by +angle (right-hand rule); used to build
                       local-to-parent transforms

    xrotation(a)[:3, :3] == Rx(-a)

All functions operate on NumPy arrays and return NumPy arrays.  Angles are
in radians unless noted otherwise.

References
----------
    [1] Meeus, "Astronomical Algorithms", 2nd ed., Ch. 12-13.
    [2] Vallado, "Fundamentals of Astrodynamics and Applications", 4th ed.
===============================================================================
"""

from typing import Tuple

import numpy as np

from orrery.core.constants import J2000_OBLIQUITY, TWO_PI


# =============================================================================
# ELEMENTARY ROTATION MATRICES (passive)
# =============================================================================

def Rx(angle: float) -> np.ndarray:
    """
    Elementary rotation matrix about the X-axis.

        Rx(a) = | 1    0       0     |
                | 0   cos(a)  sin(a)  |
                | 0  -sin(a)  cos(a)  |

    Parameters
    ----------
    angle : float
        Rotation angle in radians.

    Returns
    -------
    np.ndarray
        3x3 rotation matrix.
    """
    c = np.cos(angle)
    s = np.sin(angle)
    return np.array([
        [1.0,  0.0,  0.0],
        [0.0,    c,    s],
        [0.0,   -s,    c],
    ], dtype=np.float64)


def Ry(angle: float) -> np.ndarray:
    """
    Elementary rotation matrix about the Y-axis.

        Ry(a) = | cos(a)  0  -sin(a) |
                |   0     1     0     |
                | sin(a)  0   cos(a)  |

    Parameters
    ----------
    angle : float
        Rotation angle in radians.

    Returns
    -------
    np.ndarray
        3x3 rotation matrix.
    """
    c = np.cos(angle)
    s = np.sin(angle)
    return np.array([
        [  c,  0.0,   -s],
        [0.0,  1.0,  0.0],
        [  s,  0.0,    c],
    ], dtype=np.float64)


def Rz(angle: float) -> np.ndarray:
    """
    Elementary rotation matrix about the Z-axis.

        Rz(a) = |  cos(a)  sin(a)  0 |
                | -sin(a)  cos(a)  0 |
                |    0       0     1 |

    Parameters
    ----------
    angle : float
        Rotation angle in radians.

    Returns
    -------
    np.ndarray
        3x3 rotation matrix.
    """
    c = np.cos(angle)
    s = np.sin(angle)
    return np.array([
        [  c,    s,  0.0],
        [ -s,    c,  0.0],
        [0.0,  0.0,  1.0],
    ], dtype=np.float64)


# =============================================================================
# HOMOGENEOUS TRANSFORMS (active)
# =============================================================================

def identity() -> np.ndarray:
    """Return the 4x4 identity transform."""
    return np.eye(4, dtype=np.float64)


def homogeneous(rotation: np.ndarray, offset=None) -> np.ndarray:
    """
    Embed a 3x3 rotation and an optional translation into a 4x4 transform.

    Parameters
    ----------
    rotation : np.ndarray
        3x3 rotation matrix.
    offset : array-like, optional
        3-element translation applied after the rotation.

    Returns
    -------
    np.ndarray
        4x4 homogeneous transform.
    """
    mat = np.eye(4, dtype=np.float64)
    mat[:3, :3] = rotation
    if offset is not None:
        mat[:3, 3] = np.asarray(offset, dtype=np.float64)
    return mat


def translation(offset) -> np.ndarray:
    """Return the 4x4 transform translating by *offset*."""
    return homogeneous(np.eye(3), offset)


def xrotation(angle: float) -> np.ndarray:
    """Return the 4x4 transform rotating vectors by *angle* about X."""
    return homogeneous(Rx(-angle))


def zrotation(angle: float) -> np.ndarray:
    """Return the 4x4 transform rotating vectors by *angle* about Z."""
    return homogeneous(Rz(-angle))


# =============================================================================
# ECLIPTIC -> EQUATORIAL
# =============================================================================

def ecliptic_to_equatorial(v, obliquity: float = J2000_OBLIQUITY) -> np.ndarray:
    """
    Rotate an ecliptic vector into the equatorial frame.

    The two frames share the X-axis (vernal equinox); the equator is tilted
    by the obliquity with respect to the ecliptic:

        x_eq = x
        y_eq = y cos(eps) - z sin(eps)
        z_eq = y sin(eps) + z cos(eps)

    Parameters
    ----------
    v : array-like
        3-element ecliptic vector.
    obliquity : float, optional
        Obliquity of the ecliptic in radians (default J2000 mean value).

    Returns
    -------
    np.ndarray
        3-element equatorial vector.
    """
    return Rx(-obliquity) @ np.asarray(v, dtype=np.float64)


# =============================================================================
# RECTANGULAR -> SPHERICAL
# =============================================================================

def rect_to_sphe(v) -> Tuple[float, float]:
    """
    Convert a rectangular vector to (longitude, latitude) in radians.

    Longitude is returned in [0, 2*pi), latitude in [-pi/2, pi/2].  The
    vector length is discarded.
    """
    x, y, z = np.asarray(v, dtype=np.float64)
    r = np.sqrt(x * x + y * y + z * z)
    if r == 0.0:
        return 0.0, 0.0
    lon = float(np.arctan2(y, x)) % TWO_PI
    lat = float(np.arcsin(np.clip(z / r, -1.0, 1.0)))
    return lon, lat
