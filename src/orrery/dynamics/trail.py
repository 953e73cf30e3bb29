"""
===============================================================================
ORRERY - Trail Buffer
===============================================================================
Time-windowed history of a body's true position as seen from the observer's
equatorial frame.

Points are stored most-recent first.  The history is bounded twice:

    - by count     -- at most ``max_points`` entries,
    - by age       -- no entry older than ``max_points * spacing``.

The second bound matters because a new point is only recorded once a full
``spacing`` has elapsed since the previous one; how often that happens
depends on simulation speed and frame rate, so a count bound alone can let
stale points linger when time runs slowly and then jumps.
===============================================================================
"""

import logging
from collections import deque
from dataclasses import dataclass
from typing import Deque, Tuple

import numpy as np

from orrery.core.constants import TRAIL_MAX_POINTS, TRAIL_SPACING

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TrailPoint:
    """A recorded position (earth-relative equatorial) and its time (JD)."""
    position: np.ndarray
    time: float


class TrailBuffer:
    """
    Bounded, most-recent-first trail of a body.

    Parameters
    ----------
    spacing : float
        Minimum time (days) between two recorded points.
    max_points : int
        Maximum number of points; also the trail length in ``spacing``
        units.
    """

    def __init__(self, spacing: float = TRAIL_SPACING,
                 max_points: int = TRAIL_MAX_POINTS) -> None:
        if spacing <= 0.0:
            raise ValueError(f"spacing must be positive, got {spacing}")
        if max_points <= 0:
            raise ValueError(f"max_points must be positive, got {max_points}")

        self.spacing: float = float(spacing)
        self.max_points: int = int(max_points)
        self._points: Deque[TrailPoint] = deque()
        self._last_time: float = 0.0
        self._enabled: bool = False
        self._first_point: bool = True

    # -- control -----------------------------------------------------------

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def awaiting_first_point(self) -> bool:
        """``True`` until the first point after :meth:`start` is taken."""
        return self._first_point

    def start(self, enable: bool, orbit_defined: bool = True) -> None:
        """
        Start or stop accumulating points.

        Starting re-arms the reset so the next update clears the old
        history; it only takes effect for bodies with a defined orbit.
        Stopping keeps the history as it is.
        """
        if enable:
            self._first_point = True
            if orbit_defined:
                self._enabled = True
        else:
            self._enabled = False

    def clear(self) -> None:
        self._points.clear()

    # -- update ------------------------------------------------------------

    def update(self, time: float, position) -> None:
        """
        Record *position* at *time* if a full spacing has elapsed.

        Parameters
        ----------
        time : float
            Current simulation time (JD).
        position : array-like
            Body position in the observer's equatorial frame.
        """
        if not self._enabled:
            return

        ticks = 0
        if not self._first_point:
            ticks = abs(int((time - self._last_time) / self.spacing))

        if self._first_point or ticks > self.max_points:
            logger.debug(f"trail reset at JD {time:.6f} "
                         f"({len(self._points)} points dropped)")
            self._points.clear()
            self._first_point = False
            ticks = 1

        if ticks:
            self._last_time = time
            self._points.appendleft(
                TrailPoint(np.array(position, dtype=np.float64), float(time)))
            if len(self._points) > self.max_points:
                self._points.pop()

        self._truncate_older_than(time)

    def _truncate_older_than(self, time: float) -> None:
        """Drop, in one cut, the first point too old and everything behind it."""
        for index, point in enumerate(self._points):
            if abs(point.time - time) / self.spacing > self.max_points:
                for _ in range(len(self._points) - index):
                    self._points.pop()
                break

    # -- output ------------------------------------------------------------

    @property
    def points(self) -> Tuple[TrailPoint, ...]:
        """Recorded points, most recent first."""
        return tuple(self._points)

    @property
    def last_time(self) -> float:
        """Time of the last recorded point."""
        return self._last_time

    def polyline(self, current_position) -> np.ndarray:
        """
        Trail vertices from the oldest point to the body.

        The recorded points are followed by *current_position* so the trail
        always ends on the body.  Returns shape ``(k + 1, 3)``, or
        ``(0, 3)`` before the first point is taken.
        """
        if self._first_point or not self._points:
            return np.empty((0, 3), dtype=np.float64)
        vertices = [p.position for p in reversed(self._points)]
        vertices.append(np.asarray(current_position, dtype=np.float64))
        return np.vstack(vertices)

    def __len__(self) -> int:
        return len(self._points)

    def __repr__(self) -> str:
        return (
            f"TrailBuffer(points={len(self._points)}/{self.max_points}, "
            f"spacing={self.spacing:g}, enabled={self._enabled})"
        )
