"""
===============================================================================
ORRERY - Position Functions
===============================================================================
Pluggable ``PositionFunction`` factories.  A position function maps a time
(JD) to the body's position (AU) in the ecliptic frame of its parent:

    position_func(jd) -> np.ndarray(3,)

The engine never looks inside one; bodies plug in whatever theory they
need.  Two simple families are provided so a catalogue can be run without
an external ephemeris:

    fixed_position  -- constant point (the Sun at the origin)
    kepler_orbit    -- unperturbed two-body ellipse from mean elements

References
----------
    [1] Vallado, "Fundamentals of Astrodynamics and Applications", 4th ed.,
        Algorithms 2 and 10.
    [2] Meeus, "Astronomical Algorithms", 2nd ed., Ch. 30.
===============================================================================
"""

from typing import Any, Callable, Dict

import numpy as np

from orrery.core.constants import DEG2RAD, J2000, TWO_PI
from orrery.core.exceptions import ConfigurationError

PositionFunction = Callable[[float], np.ndarray]


def fixed_position(position=(0.0, 0.0, 0.0)) -> PositionFunction:
    """Position function returning the same point at every time."""
    point = np.asarray(position, dtype=np.float64)
    if point.shape != (3,):
        raise ValueError(f"position must have 3 elements, got shape {point.shape}")

    def position_func(jd: float) -> np.ndarray:
        return point.copy()

    return position_func


def solve_kepler(M: float, e: float, tolerance: float = 1e-12,
                 max_iterations: int = 50) -> float:
    """
    Solve Kepler's equation ``M = E - e sin(E)`` for the eccentric anomaly.

    Newton-Raphson starting from ``E0 = M + e sin(M)`` (``pi`` for highly
    eccentric orbits).  Returns the last iterate if the tolerance is not
    reached; for elliptic orbits that does not happen in practice.

    Parameters
    ----------
    M : float
        Mean anomaly (rad).
    e : float
        Eccentricity, 0 <= e < 1.

    Returns
    -------
    float
        Eccentric anomaly (rad).
    """
    if not 0.0 <= e < 1.0:
        raise ValueError(f"eccentricity must be in [0, 1), got {e}")
    M = M % TWO_PI
    E = M + e * np.sin(M) if e < 0.8 else np.pi
    for _ in range(max_iterations):
        delta = (E - e * np.sin(E) - M) / (1.0 - e * np.cos(E))
        E -= delta
        if abs(delta) < tolerance:
            break
    return float(E)


def kepler_orbit(
    a: float,
    e: float,
    i: float,
    node: float,
    arg_perihelion: float,
    mean_anomaly: float,
    period: float,
    epoch: float = J2000,
) -> PositionFunction:
    """
    Two-body elliptic orbit in the parent's ecliptic frame.

    The position in the perifocal (PQW) frame,

        x_pqw = a (cos E - e)
        y_pqw = a sqrt(1 - e^2) sin E

    is rotated into the ecliptic by the 3-1-3 sequence
    (node, inclination, argument of perihelion).

    Parameters
    ----------
    a : float
        Semi-major axis (AU).
    e : float
        Eccentricity.
    i, node, arg_perihelion : float
        Inclination, longitude of ascending node, argument of perihelion
        (rad).
    mean_anomaly : float
        Mean anomaly at *epoch* (rad).
    period : float
        Orbital period (days).
    epoch : float
        Epoch of the elements (JD).
    """
    if a <= 0.0:
        raise ValueError(f"semi-major axis must be positive, got {a}")
    if period <= 0.0:
        raise ValueError(f"period must be positive, got {period}")
    if not 0.0 <= e < 1.0:
        raise ValueError(f"eccentricity must be in [0, 1), got {e}")

    cos_O, sin_O = np.cos(node), np.sin(node)
    cos_i, sin_i = np.cos(i), np.sin(i)
    cos_w, sin_w = np.cos(arg_perihelion), np.sin(arg_perihelion)

    # PQW -> ecliptic; only the first two columns are needed (z_pqw = 0).
    R = np.array([
        [cos_O * cos_w - sin_O * sin_w * cos_i,
         -cos_O * sin_w - sin_O * cos_w * cos_i],
        [sin_O * cos_w + cos_O * sin_w * cos_i,
         -sin_O * sin_w + cos_O * cos_w * cos_i],
        [sin_w * sin_i,
         cos_w * sin_i],
    ], dtype=np.float64)

    b = a * np.sqrt(1.0 - e * e)
    mean_motion = TWO_PI / period

    def position_func(jd: float) -> np.ndarray:
        M = mean_anomaly + mean_motion * (jd - epoch)
        E = solve_kepler(M, e)
        r_pqw = np.array([a * (np.cos(E) - e), b * np.sin(E)], dtype=np.float64)
        return R @ r_pqw

    return position_func


def from_config(cfg: Dict[str, Any]) -> PositionFunction:
    """
    Build a position function from a catalogue entry.

    Expected keys::

        model: fixed            # or kepler
        position: [0, 0, 0]     # fixed only (AU)

        model: kepler
        a: 1.0000011            # AU
        e: 0.01671022
        i: 0.00005              # degrees
        node: -11.26064         # degrees
        arg_perihelion: 114.20783
        mean_anomaly: 357.51716 # degrees, at epoch
        period: 365.256363      # days
        epoch: 2451545.0        # optional

    Raises
    ------
    ConfigurationError
        If the model is unknown or a required element is missing.
    """
    model = str(cfg.get("model", "fixed")).lower()
    try:
        if model == "fixed":
            return fixed_position(cfg.get("position", (0.0, 0.0, 0.0)))
        if model == "kepler":
            return kepler_orbit(
                a=float(cfg["a"]),
                e=float(cfg.get("e", 0.0)),
                i=float(cfg.get("i", 0.0)) * DEG2RAD,
                node=float(cfg.get("node", 0.0)) * DEG2RAD,
                arg_perihelion=float(cfg.get("arg_perihelion", 0.0)) * DEG2RAD,
                mean_anomaly=float(cfg.get("mean_anomaly", 0.0)) * DEG2RAD,
                period=float(cfg["period"]),
                epoch=float(cfg.get("epoch", J2000)),
            )
    except KeyError as exc:
        raise ConfigurationError(f"orbit model '{model}' is missing element {exc}") from exc
    except ValueError as exc:
        raise ConfigurationError(f"invalid orbit elements: {exc}") from exc
    raise ConfigurationError(f"unknown orbit model '{model}'")
