"""
Linear fade-in / fade-out animation state.

A body carries one fader per optional overlay (name hint, orbit line,
trail).  Toggling a fader starts a linear transition whose progress is
advanced by the caller once per frame with the elapsed wall-clock time.
The engine never reads the fader; it is bookkeeping for whoever draws.
"""

from orrery.core.constants import FADER_DURATION_MS


class LinearFader:
    """
    Linear interpolation between an off value and an on value.

    Parameters
    ----------
    duration : int
        Length of a full transition in milliseconds.
    start, end : float
        Values reported when fully off / fully on.
    state : bool
        Initial target state.
    """

    def __init__(self, duration: int = FADER_DURATION_MS,
                 start: float = 0.0, end: float = 1.0,
                 state: bool = False) -> None:
        if duration <= 0:
            raise ValueError(f"duration must be positive, got {duration}")
        self.duration = int(duration)
        self.start = float(start)
        self.end = float(end)
        self.state = bool(state)
        self._interstate = self.end if self.state else self.start
        self._counter = self.duration

    def set(self, state: bool) -> None:
        """Start a transition toward *state* (no-op if already targeted)."""
        state = bool(state)
        if state == self.state:
            return
        self.state = state
        # Reverse mid-flight transitions from where they are.
        self._counter = self.duration - min(self._counter, self.duration)

    def update(self, delta_ms: int) -> None:
        """Advance the transition by *delta_ms* milliseconds."""
        if self._counter >= self.duration:
            self._interstate = self.end if self.state else self.start
            return
        self._counter = min(self._counter + int(delta_ms), self.duration)
        progress = self._counter / self.duration
        if self.state:
            self._interstate = self.start + (self.end - self.start) * progress
        else:
            self._interstate = self.end + (self.start - self.end) * progress

    @property
    def interstate(self) -> float:
        """Current interpolated value."""
        return self._interstate

    def __bool__(self) -> bool:
        return self.state

    def __repr__(self) -> str:
        return f"LinearFader(state={self.state}, interstate={self._interstate:.3f})"
