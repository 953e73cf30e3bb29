"""
===============================================================================
ORRERY - Body
===============================================================================
A celestial body in the parent/child tree: the Sun at the root, planets
below it, satellites below planets.  A body owns its orbit sample window,
its trail and its animation state, and composes its frame with its
ancestors'.

Per simulation step the caller must, parents before children:

    1. compute_position(jd)       refresh the orbit window, resample the
                                  position in the parent's ecliptic frame
    2. compute_trans_matrix(jd)   rebuild the local-to-parent transform
    3. update_trail(navigator)    and any photometry for visible bodies

Tree depth is limited to root -> planet -> satellite.  The limit is
checked whenever the chain is walked; a deeper tree is a configuration
fault and raises ConfigurationError instead of producing a wrong position.

Conventions
-----------
    - Times are JD, distances AU.
    - ``ecliptic_pos`` is in the parent's ecliptic frame.
    - Transforms are 4x4 homogeneous matrices with active rotations.
===============================================================================
"""

from __future__ import annotations

import logging
import math
import weakref
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional, Tuple

import numpy as np

from orrery.core.constants import (
    JD_SECOND,
    MAX_BODY_DEPTH,
    ORBIT_SEGMENTS,
    PI,
    RAD2DEG,
    TRAIL_MAX_POINTS,
    TRAIL_SPACING,
    TWO_PI,
)
from orrery.core.exceptions import ConfigurationError
from orrery.core.fader import LinearFader
from orrery.core.frames import (
    identity,
    rect_to_sphe,
    translation,
    xrotation,
    zrotation,
)
from orrery.dynamics import photometry
from orrery.dynamics.ephemeris import PositionFunction, fixed_position
from orrery.dynamics.orbit_cache import OrbitSampleCache
from orrery.dynamics.rotation import RotationElements
from orrery.dynamics.trail import TrailBuffer

logger = logging.getLogger(__name__)

SiderealTimeProvider = Callable[[float], float]


# ============================================================================
#  REPORT
# ============================================================================

def format_hms(angle: float) -> str:
    """Format an angle in radians as hours, e.g. ``'05h34m31.94s'``."""
    hours = (angle % TWO_PI) * RAD2DEG / 15.0
    h = int(hours)
    minutes = (hours - h) * 60.0
    m = int(minutes)
    s = (minutes - m) * 60.0
    if s >= 59.995:
        s = 0.0
        m += 1
    if m == 60:
        m = 0
        h = (h + 1) % 24
    return f"{h:02d}h{m:02d}m{s:05.2f}s"


def format_dms(angle: float) -> str:
    """Format an angle in radians as signed degrees, e.g. ``'+22°00'52"'``."""
    sign = "-" if angle < 0 else "+"
    degrees = abs(angle) * RAD2DEG
    d = int(degrees)
    minutes = (degrees - d) * 60.0
    m = int(minutes)
    s = int(round((minutes - m) * 60.0))
    if s == 60:
        s = 0
        m += 1
    if m == 60:
        m = 0
        d += 1
    return f"{sign}{d}°{m:02d}'{s:02d}\""


@dataclass
class BodyReport:
    """
    Human-readable position report of a body for one observer.

    Angles in radians; ``azimuth`` counts from North (0) through East
    (pi/2).
    """
    name: str
    ra: float
    dec: float
    magnitude: float
    distance: float          # AU
    azimuth: float
    altitude: float
    sphere_scale: float = 1.0

    def __str__(self) -> str:
        name = self.name
        if self.sphere_scale != 1.0:
            name = f"{name}{self.sphere_scale:.1f}"
        return "\n".join([
            f"Name : {name}",
            f"RA : {format_hms(self.ra)}",
            f"DE : {format_dms(self.dec)}",
            f"Magnitude : {self.magnitude:.2f}",
            f"Distance : {self.distance:.8f}AU",
            f"Az  : {format_dms(self.azimuth)}",
            f"Alt : {format_dms(self.altitude)}",
        ])


# ============================================================================
#  BODY
# ============================================================================

class Body:
    """
    A node of the body tree with cached orbit, trail and frame state.

    Parameters
    ----------
    name : str
        English name of the body.
    parent : Body, optional
        Body this one orbits; ``None`` for the root.  The body appends
        itself to ``parent.satellites``.  Only a weak reference to the
        parent is kept.
    radius : float
        Equatorial radius (AU).
    oblateness : float
        Polar flattening.
    color : tuple of float
        RGB colour in [0, 1] for whoever draws the body.
    albedo : float
        Geometric albedo.
    position_func : callable, optional
        ``PositionFunction``; defaults to a body fixed at the origin.
    rotation : RotationElements, optional
        Rotation and orbital-period parameters.
    halo, lighting : bool
        Presentation flags carried for the renderer.
    sidereal_time_func : callable, optional
        ``(jd) -> degrees``.  Given only to the reference body (Earth),
        whose spin follows the apparent sidereal time instead of its
        rotation elements.
    orbit_segments : int
        Number of samples in the orbit window.
    position_refresh_threshold : float
        Minimum time (days) between two position samples when the orbit
        window does not need refreshing.
    trail_spacing : float
        Days between trail points.
    trail_max_points : int
        Trail length in points.
    satellites_fov_extent : float, optional
        Angular extent (AU at the body) of the satellite system, used to
        frame the body together with its satellites.
    """

    def __init__(
        self,
        name: str,
        parent: Optional[Body] = None,
        radius: float = 0.0,
        oblateness: float = 0.0,
        color: Tuple[float, float, float] = (1.0, 1.0, 1.0),
        albedo: float = 0.0,
        position_func: Optional[PositionFunction] = None,
        rotation: Optional[RotationElements] = None,
        halo: bool = False,
        lighting: bool = True,
        sidereal_time_func: Optional[SiderealTimeProvider] = None,
        orbit_segments: int = ORBIT_SEGMENTS,
        position_refresh_threshold: float = JD_SECOND,
        trail_spacing: float = TRAIL_SPACING,
        trail_max_points: int = TRAIL_MAX_POINTS,
        satellites_fov_extent: Optional[float] = None,
    ) -> None:
        if radius < 0.0:
            raise ValueError(f"radius must be >= 0, got {radius}")
        if position_refresh_threshold < 0.0:
            raise ValueError(
                f"position_refresh_threshold must be >= 0, got {position_refresh_threshold}"
            )

        self.name: str = name
        self.radius: float = float(radius)
        self.oblateness: float = float(oblateness)
        self.color: Tuple[float, float, float] = tuple(color)
        self.albedo: float = float(albedo)
        self.halo: bool = bool(halo)
        self.lighting: bool = bool(lighting)
        self.sphere_scale: float = 1.0
        self.satellites_fov_extent: Optional[float] = satellites_fov_extent

        self._position_func: PositionFunction = position_func or fixed_position()
        self._sidereal_time_func = sidereal_time_func
        self._rotation: RotationElements = rotation or RotationElements()

        # --- Tree ---
        self._parent = weakref.ref(parent) if parent is not None else None
        self.satellites: List[Body] = []
        if parent is not None:
            parent.satellites.append(self)

        # --- Position and frames ---
        self.ecliptic_pos: np.ndarray = np.zeros(3, dtype=np.float64)
        self.last_position_time: Optional[float] = None
        self.position_refresh_threshold: float = float(position_refresh_threshold)
        self.axis_rotation: float = 0.0          # degrees
        self.rot_local_to_parent: np.ndarray = identity()
        self.mat_local_to_parent: np.ndarray = identity()
        self.distance: float = 0.0

        # --- Owned caches ---
        self.orbit_cache = OrbitSampleCache(
            self._rotation.orbit_sample_interval(orbit_segments), orbit_segments
        )
        self.trail = TrailBuffer(trail_spacing, trail_max_points)

        # --- Animation state ---
        self.hint_fader = LinearFader()
        self.orbit_fader = LinearFader()
        self.trail_fader = LinearFader()

    # ------------------------------------------------------------------ #
    #  Tree
    # ------------------------------------------------------------------ #
    @property
    def parent(self) -> Optional[Body]:
        return self._parent() if self._parent is not None else None

    def ancestors(self) -> Iterator[Body]:
        """
        Yield the parent, grandparent, ... up to the root.

        Raises
        ------
        ConfigurationError
            When the chain is deeper than root -> planet -> satellite.
        """
        depth = 0
        p = self.parent
        while p is not None:
            depth += 1
            if depth > MAX_BODY_DEPTH:
                raise ConfigurationError(
                    f"{self.name}: satellite of a satellite is not supported "
                    f"(parent chain deeper than {MAX_BODY_DEPTH} levels)"
                )
            yield p
            p = p.parent

    # ------------------------------------------------------------------ #
    #  Rotation elements
    # ------------------------------------------------------------------ #
    @property
    def rotation(self) -> RotationElements:
        return self._rotation

    def get_sidereal_time(self, jd: float) -> float:
        """Spin angle of the body about its axis at *jd* (degrees)."""
        if self._sidereal_time_func is not None:
            return float(self._sidereal_time_func(jd))
        return self._rotation.sidereal_angle(jd)

    # ------------------------------------------------------------------ #
    #  Position propagation
    # ------------------------------------------------------------------ #
    def _sample_orbit(self, jd: float) -> np.ndarray:
        self.compute_trans_matrix(jd)
        self.ecliptic_pos = np.asarray(self._position_func(jd), dtype=np.float64)
        return self.heliocentric_position()

    def compute_position(self, jd: float) -> None:
        """
        Update the orbit window and the position in the parent's frame.

        The orbit window is refreshed when it is stale; whenever that
        happens the position is resampled at *jd*.  Otherwise the position
        is resampled only once ``position_refresh_threshold`` has elapsed
        since the last sample.

        Sampling the orbit moves the body through the window's sample
        times; its position and frame are restored afterwards, also when
        the position function raises.
        """
        saved = (self.ecliptic_pos, self.axis_rotation,
                 self.rot_local_to_parent, self.mat_local_to_parent)
        try:
            refreshed = self.orbit_cache.refresh(jd, self._sample_orbit)
        finally:
            (self.ecliptic_pos, self.axis_rotation,
             self.rot_local_to_parent, self.mat_local_to_parent) = saved

        if refreshed:
            self.ecliptic_pos = np.asarray(self._position_func(jd), dtype=np.float64)
            self.last_position_time = jd
        elif (self.last_position_time is None
              or abs(self.last_position_time - jd) > self.position_refresh_threshold):
            self.ecliptic_pos = np.asarray(self._position_func(jd), dtype=np.float64)
            self.last_position_time = jd

    # ------------------------------------------------------------------ #
    #  Frame composition
    # ------------------------------------------------------------------ #
    def compute_trans_matrix(self, jd: float) -> np.ndarray:
        """
        Rebuild the local-to-parent transform for *jd*.

        The rotational part tilts the body's equator onto the parent's
        ecliptic (precessing ascending node, then obliquity).  The root
        keeps an identity rotation: heliocentric coordinates are defined
        on the ecliptic, not on the solar equator.

        Returns
        -------
        np.ndarray
            Copy of ``mat_local_to_parent`` (4x4).
        """
        self.axis_rotation = self.get_sidereal_time(jd)
        if self.parent is not None:
            self.rot_local_to_parent = (
                zrotation(self._rotation.node_angle(jd))
                @ xrotation(self._rotation.obliquity)
            )
        self.mat_local_to_parent = translation(self.ecliptic_pos) @ self.rot_local_to_parent
        return self.mat_local_to_parent.copy()

    def heliocentric_position(self) -> np.ndarray:
        """
        Position relative to the root, summing ecliptic offsets up the tree.

        Raises
        ------
        ConfigurationError
            For a satellite of a satellite.
        """
        pos = self.ecliptic_pos.copy()
        for p in self.ancestors():
            pos += p.ecliptic_pos
        return pos

    def rotation_to_reference_frame(self) -> np.ndarray:
        """
        Rotation from the body's equatorial frame to the root ecliptic frame.

        The body's rotation is applied first, then each ancestor's moving
        outward.  Translations are ignored.
        """
        rot = self.rot_local_to_parent.copy()
        for p in self.ancestors():
            rot = p.rot_local_to_parent @ rot
        return rot

    def earth_equatorial_position(self, navigator) -> np.ndarray:
        """Position in the observer-centred equatorial frame."""
        return navigator.helio_to_earth_pos_equ(self.heliocentric_position())

    def compute_distance(self, observer_helio_pos) -> float:
        """Distance (AU) to the observer; also stored in ``distance``."""
        obs = np.asarray(observer_helio_pos, dtype=np.float64)
        self.distance = float(np.linalg.norm(obs - self.heliocentric_position()))
        return self.distance

    # ------------------------------------------------------------------ #
    #  Photometry
    # ------------------------------------------------------------------ #
    def phase(self, observer_helio_pos) -> float:
        """Phase function value seen from the observer's heliocentric position."""
        return photometry.phase_from_geometry(
            self.heliocentric_position(),
            np.asarray(observer_helio_pos, dtype=np.float64),
        )

    def compute_magnitude(self, observer_helio_pos) -> float:
        """Apparent magnitude seen from the observer's heliocentric position."""
        return photometry.magnitude(
            self.heliocentric_position(),
            np.asarray(observer_helio_pos, dtype=np.float64),
            self.radius,
            self.albedo,
        )

    # ------------------------------------------------------------------ #
    #  Orbit and trail
    # ------------------------------------------------------------------ #
    def orbit_path(self) -> np.ndarray:
        """Closed heliocentric orbit polyline; empty without an orbit."""
        if not self._rotation.has_orbit:
            return np.empty((0, 3), dtype=np.float64)
        return self.orbit_cache.polyline(self.heliocentric_position())

    def start_trail(self, enable: bool) -> None:
        """Start (clearing on the next update) or stop the trail."""
        self.trail.start(enable, self._rotation.has_orbit)

    def update_trail(self, navigator) -> None:
        """Record a trail point for the navigator's current time if due."""
        if not self.trail.enabled:
            return
        self.trail.update(navigator.jday, self.earth_equatorial_position(navigator))

    def trail_path(self, navigator) -> np.ndarray:
        """Trail polyline ending on the body's current equatorial position."""
        return self.trail.polyline(self.earth_equatorial_position(navigator))

    # ------------------------------------------------------------------ #
    #  Observer-facing helpers
    # ------------------------------------------------------------------ #
    def get_close_fov(self, navigator) -> float:
        """Field of view (degrees) that frames the body comfortably."""
        dist = np.linalg.norm(self.earth_equatorial_position(navigator))
        return math.atan(self.radius * self.sphere_scale * 2.0 / dist) * RAD2DEG * 4.0

    def get_satellites_fov(self, navigator) -> float:
        """Field of view (degrees) framing the satellite system, -1 if none."""
        if self.satellites_fov_extent is None:
            return -1.0
        dist = np.linalg.norm(self.earth_equatorial_position(navigator))
        return math.atan(self.satellites_fov_extent / dist) * RAD2DEG * 4.0

    def info(self, navigator) -> BodyReport:
        """Build the position report of the body for *navigator*."""
        equ_pos = self.earth_equatorial_position(navigator)
        ra, dec = rect_to_sphe(equ_pos)

        local_pos = navigator.earth_equ_to_local(equ_pos)
        az, alt = rect_to_sphe(local_pos)
        az = (3.0 * PI - az) % TWO_PI        # N is zero, E is 90 degrees

        return BodyReport(
            name=self.name,
            ra=ra,
            dec=dec,
            magnitude=self.compute_magnitude(navigator.observer_helio_pos()),
            distance=float(np.linalg.norm(equ_pos)),
            azimuth=az,
            altitude=alt,
            sphere_scale=self.sphere_scale,
        )

    def info_string(self, navigator) -> str:
        return str(self.info(navigator))

    def short_info_string(self, navigator) -> str:
        name = self.name
        if self.sphere_scale != 1.0:
            name = f"{name}{self.sphere_scale:.1f}"
        mag = self.compute_magnitude(navigator.observer_helio_pos())
        return f"{name}: mag {mag:.1f}"

    # ------------------------------------------------------------------ #
    #  Animation
    # ------------------------------------------------------------------ #
    def update(self, delta_ms: int) -> None:
        """Advance the hint, orbit and trail faders."""
        self.hint_fader.update(delta_ms)
        self.orbit_fader.update(delta_ms)
        self.trail_fader.update(delta_ms)

    def __repr__(self) -> str:
        parent = self.parent.name if self.parent is not None else None
        return (
            f"Body({self.name!r}, parent={parent!r}, "
            f"satellites={len(self.satellites)})"
        )
