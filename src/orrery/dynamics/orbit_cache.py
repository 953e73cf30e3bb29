"""
===============================================================================
ORRERY - Orbit Sample Cache
===============================================================================
Fixed-size window of pre-computed heliocentric orbit samples used to draw a
body's orbit as a closed polyline.

The window holds N samples spaced one ``sample_interval`` (sidereal period
/ N) apart and centred on ``last_sample_time``:

    sample[i]  ~  position(last_sample_time + (i - N/2) * sample_interval)

Recomputing all N samples every frame is wasteful while simulation time
moves smoothly, so a refresh shifts the window by whole slots instead and
only evaluates the slots that fall outside the previous window.  When time
jumps by a full window or more nothing overlaps and the whole window is
rebuilt, so both paths always leave a fully populated window.

Memory layout
-------------
``_samples`` -- ``float64[segments, 3]``, replaced as a whole on every
successful refresh.

Time complexity
---------------
+----------------------------+-----------------------------+
| Operation                  | Cost                        |
+============================+=============================+
| refresh, fresh enough      | O(1)                        |
| refresh, shift by k slots  | O(N) copy + k sampler calls |
| refresh, full rebuild      | N sampler calls             |
+----------------------------+-----------------------------+
===============================================================================
"""

import logging
import math
from typing import Callable

import numpy as np

from orrery.core.constants import ORBIT_SEGMENTS

logger = logging.getLogger(__name__)

Sampler = Callable[[float], np.ndarray]


class OrbitSampleCache:
    """
    Sliding window of orbit samples with incremental reuse.

    Parameters
    ----------
    sample_interval : float
        Time between samples (days).  Zero disables the cache.
    segments : int
        Number of samples in the window.
    """

    def __init__(self, sample_interval: float, segments: int = ORBIT_SEGMENTS) -> None:
        if segments <= 0:
            raise ValueError(f"segments must be positive, got {segments}")
        if sample_interval < 0.0:
            raise ValueError(f"sample_interval must be >= 0, got {sample_interval}")

        self._segments: int = int(segments)
        self._interval: float = float(sample_interval)
        self._samples: np.ndarray = np.zeros((self._segments, 3), dtype=np.float64)
        self._last_sample_time: float = 0.0
        self._populated: bool = False

    # -- state -------------------------------------------------------------

    @property
    def segments(self) -> int:
        return self._segments

    @property
    def sample_interval(self) -> float:
        return self._interval

    @property
    def last_sample_time(self) -> float:
        """Time the window is currently centred on."""
        return self._last_sample_time

    @property
    def populated(self) -> bool:
        return self._populated

    @property
    def is_enabled(self) -> bool:
        """``False`` for bodies without an orbit (zero sample interval)."""
        return self._interval > 0.0

    @property
    def samples(self) -> np.ndarray:
        """Copy of the sample window, shape ``(segments, 3)``."""
        return self._samples.copy()

    def sample_times(self) -> np.ndarray:
        """Nominal time of every slot of the current window."""
        offsets = np.arange(self._segments) - self._segments // 2
        return self._last_sample_time + offsets * self._interval

    def invalidate(self) -> None:
        """Forget the window; the next refresh rebuilds it."""
        self._populated = False

    def is_stale(self, time: float) -> bool:
        """Whether :meth:`refresh` at *time* would touch the window."""
        if not self.is_enabled:
            return False
        return (not self._populated
                or abs(self._last_sample_time - time) > self._interval)

    # -- refresh -----------------------------------------------------------

    def refresh(self, time: float, sampler: Sampler) -> bool:
        """
        Bring the window up to date for *time*.

        Parameters
        ----------
        time : float
            Current simulation time (JD).
        sampler : callable
            ``sampler(t) -> ndarray(3,)`` heliocentric position of the
            owning body at ``t``.

        Returns
        -------
        bool
            ``True`` if the window was refreshed (the owner must then
            resample its current position), ``False`` if it was fresh
            enough and nothing happened.
        """
        if not self.is_stale(time):
            return False

        n = self._segments
        half = n // 2
        step = self._interval
        shift = (time - self._last_sample_time) / step

        # Round half away from the anchor in the direction of travel.
        if time > self._last_sample_time:
            delta_points = math.floor(0.5 + shift)
        else:
            delta_points = math.ceil(-0.5 + shift)
        anchored = self._last_sample_time + delta_points * step

        # The window is filled in a scratch array and committed only once
        # every sample succeeded; a raising sampler leaves the old one intact.
        window = np.empty_like(self._samples)

        if self._populated and 0 < delta_points < n:
            window[:n - delta_points] = self._samples[delta_points:]
            for d in range(n - delta_points, n):
                window[d] = sampler(anchored + (d - half) * step)
            center = anchored
            logger.debug(f"orbit window shifted +{delta_points} slots "
                         f"({n - delta_points} reused)")

        elif self._populated and -n < delta_points < 0:
            window[-delta_points:] = self._samples[:n + delta_points]
            for d in range(-delta_points - 1, -1, -1):
                window[d] = sampler(anchored + (d - half) * step)
            center = anchored
            logger.debug(f"orbit window shifted {delta_points} slots "
                         f"({n + delta_points} reused)")

        else:
            for d in range(n):
                window[d] = sampler(time + (d - half) * step)
            center = time
            logger.debug(f"orbit window rebuilt at JD {time:.6f} ({n} samples)")

        self._samples = window
        self._last_sample_time = center
        self._populated = True
        return True

    # -- output ------------------------------------------------------------

    def polyline(self, current_position) -> np.ndarray:
        """
        Closed orbit polyline passing through the body's true position.

        The centre slot is replaced by *current_position* so the line never
        misses the body between two samples, and the first point is
        repeated at the end to close the loop.

        Returns
        -------
        np.ndarray
            Shape ``(segments + 1, 3)``, or ``(0, 3)`` when the window is
            empty or the cache disabled.
        """
        if not (self.is_enabled and self._populated):
            return np.empty((0, 3), dtype=np.float64)
        points = self._samples.copy()
        points[self._segments // 2] = np.asarray(current_position, dtype=np.float64)
        return np.vstack([points, points[:1]])

    def __len__(self) -> int:
        return self._segments if self._populated else 0

    def __repr__(self) -> str:
        return (
            f"OrbitSampleCache(segments={self._segments}, "
            f"interval={self._interval:.6g}, populated={self._populated}, "
            f"last={self._last_sample_time:.6f})"
        )
