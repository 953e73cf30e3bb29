"""
===============================================================================
ORRERY - Rotation Elements
===============================================================================
Per-body rotation and orbital-period parameters.  They are fixed when the
body is configured and drive three things:

    - the sidereal (spin) angle of the body about its own axis,
    - the orientation of the body's equator relative to its parent's
      ecliptic (ascending node, obliquity, nodal precession),
    - the time spacing of the cached orbit samples (sidereal period).
===============================================================================
"""

import math
from dataclasses import dataclass
from typing import Any, Dict

from orrery.core.constants import DEG2RAD, J2000


@dataclass(frozen=True)
class RotationElements:
    """
    Rotation and orbital-period parameters of a body.

    Attributes
    ----------
    period : float
        Rotation period (days).  Negative for retrograde rotators; zero
        marks a body without spin (its angle stays at ``offset``).
    offset : float
        Rotation phase at ``epoch`` (degrees).
    epoch : float
        Reference time (JD).
    obliquity : float
        Axial tilt relative to the parent's ecliptic (rad).
    ascending_node : float
        Longitude of the equator's ascending node (rad).
    precession_rate : float
        Nodal precession rate (rad/day).
    sidereal_period : float
        Orbital period (days).  Zero means there is no orbit to cache,
        draw, or trail.
    """
    period: float = 1.0
    offset: float = 0.0
    epoch: float = J2000
    obliquity: float = 0.0
    ascending_node: float = 0.0
    precession_rate: float = 0.0
    sidereal_period: float = 0.0

    @property
    def has_orbit(self) -> bool:
        """``True`` when the body has an orbit worth caching."""
        return self.sidereal_period > 0.0

    def sidereal_angle(self, jd: float) -> float:
        """
        Rotation angle (degrees) of the body about its own axis at *jd*.

        Only the fractional part of the number of elapsed rotations is kept,
        taken with ``floor`` so it is never negative, even before the epoch:

            angle = frac((jd - epoch) / period) * 360 + offset
        """
        if self.period == 0.0:
            return self.offset
        rotations = (jd - self.epoch) / self.period
        remainder = rotations - math.floor(rotations)
        return remainder * 360.0 + self.offset

    def node_angle(self, jd: float) -> float:
        """Ascending node (rad) at *jd*, corrected for precession since epoch."""
        return self.ascending_node - self.precession_rate * (jd - self.epoch)

    def orbit_sample_interval(self, segments: int) -> float:
        """Time between two cached orbit samples (days); 0 without an orbit."""
        if segments <= 0:
            raise ValueError(f"segments must be positive, got {segments}")
        if not self.has_orbit:
            return 0.0
        return self.sidereal_period / segments

    @classmethod
    def from_config(cls, cfg: Dict[str, Any]) -> "RotationElements":
        """
        Build elements from a catalogue entry.

        Angles are given in degrees in the catalogue (``obliquity``,
        ``ascending_node``) and degrees per day for ``precession_rate``.
        Missing keys fall back to the defaults.
        """
        return cls(
            period=float(cfg.get("period", 1.0)),
            offset=float(cfg.get("offset", 0.0)),
            epoch=float(cfg.get("epoch", J2000)),
            obliquity=float(cfg.get("obliquity", 0.0)) * DEG2RAD,
            ascending_node=float(cfg.get("ascending_node", 0.0)) * DEG2RAD,
            precession_rate=float(cfg.get("precession_rate", 0.0)) * DEG2RAD,
            sidereal_period=float(cfg.get("sidereal_period", 0.0)),
        )
