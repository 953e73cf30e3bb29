"""
===============================================================================
ORRERY - Observer / Navigator
===============================================================================
Minimal observer collaborator: where the observer is, what time it is, and
how heliocentric positions look from there.

    heliocentric ecliptic  --(translate to observer, tilt by obliquity)-->
    earth-relative equatorial  --(local sidereal time, latitude)-->
    local horizon (x south, y east, z zenith)

The observer is placed at the centre of its home body; topocentric
parallax and nutation are ignored.

References
----------
    [1] Meeus, "Astronomical Algorithms", 2nd ed., eq. 12.4 and Ch. 13.
===============================================================================
"""

import numpy as np

from orrery.core.constants import DEG2RAD, J2000, JULIAN_CENTURY, PI
from orrery.core.frames import Ry, Rz, ecliptic_to_equatorial


def greenwich_sidereal_time(jd: float) -> float:
    """
    Greenwich mean sidereal time (degrees, in [0, 360)) at *jd*.

        theta = 280.46061837 + 360.98564736629 (JD - 2451545)
                + 0.000387933 T^2 - T^3 / 38710000

    with T in Julian centuries from J2000.  Used as the sidereal-time
    provider of the reference body.
    """
    d = jd - J2000
    t = d / JULIAN_CENTURY
    theta = (280.46061837 + 360.98564736629 * d
             + 0.000387933 * t * t - t * t * t / 38710000.0)
    return theta % 360.0


class Navigator:
    """
    Observer standing on a home body.

    Parameters
    ----------
    home_body : Body
        Body the observer stands on (its centre is used).
    latitude : float
        Geographic latitude (degrees, north positive).
    longitude : float
        Geographic longitude (degrees, east positive).
    jday : float
        Initial time (JD).
    """

    def __init__(self, home_body, latitude: float = 0.0,
                 longitude: float = 0.0, jday: float = J2000) -> None:
        if not -90.0 <= latitude <= 90.0:
            raise ValueError(f"latitude must be in [-90, 90], got {latitude}")
        self.home_body = home_body
        self.latitude = float(latitude)
        self.longitude = float(longitude)
        self._jday = float(jday)

    @property
    def jday(self) -> float:
        return self._jday

    def set_jday(self, jd: float) -> None:
        self._jday = float(jd)

    def observer_helio_pos(self) -> np.ndarray:
        """Heliocentric ecliptic position of the observer (AU)."""
        return self.home_body.heliocentric_position()

    def local_sidereal_time(self) -> float:
        """Local mean sidereal time (rad)."""
        return (greenwich_sidereal_time(self._jday) + self.longitude) * DEG2RAD

    def helio_to_earth_pos_equ(self, v) -> np.ndarray:
        """Heliocentric ecliptic -> observer-centred equatorial."""
        rel = np.asarray(v, dtype=np.float64) - self.observer_helio_pos()
        return ecliptic_to_equatorial(rel)

    def earth_equ_to_local(self, v) -> np.ndarray:
        """
        Observer-centred equatorial -> local horizon frame.

        Rotating by the local sidereal time brings the meridian onto the
        X-axis (Y toward east); tilting by the colatitude then brings the
        pole down to its altitude so that Z points to the zenith and X to
        the south point of the horizon.
        """
        phi = self.latitude * DEG2RAD
        return Ry(PI / 2.0 - phi) @ Rz(self.local_sidereal_time()) @ np.asarray(
            v, dtype=np.float64
        )

    def __repr__(self) -> str:
        return (
            f"Navigator(home={getattr(self.home_body, 'name', None)!r}, "
            f"lat={self.latitude:.4f}, lon={self.longitude:.4f}, jd={self._jday:.5f})"
        )
