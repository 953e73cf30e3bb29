"""
===============================================================================
ORRERY - Solar System
===============================================================================
Builds the body tree from a catalogue and steps it through time in a safe
order.

Catalogue format (YAML)::

    engine:                         # optional overrides
        orbit_segments: 360
        position_refresh_threshold: 1.1574074e-05   # days
        trail_spacing: 1.0                          # days
        trail_max_points: 60
    bodies:
        - name: Sun
          radius: 0.00465           # AU
          orbit: {model: fixed}
        - name: Earth
          parent: Sun
          reference: true           # spin follows sidereal time
          radius: 4.2635e-05
          albedo: 0.367
          orbit: {model: kepler, a: 1.0, e: 0.0167, period: 365.256363}
          rotation: {period: 0.99726968, obliquity: 23.44,
                     sidereal_period: 365.256363}

Bodies must be listed parent first.  That order is also the update order,
so every ancestor has settled its position for the step before any of its
descendants samples its own orbit.
===============================================================================
"""

import logging
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Union

import yaml

from orrery.core.constants import (
    JD_SECOND,
    ORBIT_SEGMENTS,
    TRAIL_MAX_POINTS,
    TRAIL_SPACING,
)
from orrery.core.exceptions import ConfigurationError
from orrery.dynamics import ephemeris
from orrery.dynamics.body import Body
from orrery.dynamics.rotation import RotationElements
from orrery.navigation.observer import greenwich_sidereal_time

logger = logging.getLogger(__name__)


def load_config(config_path: Union[str, Path]) -> Dict[str, Any]:
    """
    Load a body catalogue from a YAML file.

    Raises
    ------
    ConfigurationError
        If the file is missing, unreadable, or not a mapping.
    """
    path = Path(config_path)
    logger.info(f"Loading configuration from: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except OSError as exc:
        raise ConfigurationError(f"cannot read configuration {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"invalid YAML in {path}: {exc}") from exc

    if not isinstance(config, dict):
        raise ConfigurationError(f"{path}: top level must be a mapping")
    return config


class SolarSystem:
    """
    Ordered collection of bodies forming a single tree.

    Parameters
    ----------
    config : dict
        Catalogue (see module docstring).
    sidereal_time_func : callable, optional
        Sidereal-time provider handed to the body marked ``reference``.
    """

    def __init__(self, config: Dict[str, Any],
                 sidereal_time_func=greenwich_sidereal_time) -> None:
        engine = config.get("engine", {}) or {}
        self.orbit_segments = int(engine.get("orbit_segments", ORBIT_SEGMENTS))
        self.position_refresh_threshold = float(
            engine.get("position_refresh_threshold", JD_SECOND)
        )
        self.trail_spacing = float(engine.get("trail_spacing", TRAIL_SPACING))
        self.trail_max_points = int(engine.get("trail_max_points", TRAIL_MAX_POINTS))

        self._bodies: List[Body] = []
        self._by_name: Dict[str, Body] = {}
        self._sidereal_time_func = sidereal_time_func

        entries = config.get("bodies")
        if not entries:
            raise ConfigurationError("catalogue defines no bodies")
        for entry in entries:
            self._add_body(entry)

        roots = [b for b in self._bodies if b.parent is None]
        if len(roots) != 1:
            raise ConfigurationError(
                f"catalogue must have exactly one root body, found {len(roots)}"
            )
        self.root: Body = roots[0]
        logger.info(f"Solar system built: {len(self._bodies)} bodies, root {self.root.name}")

    # ------------------------------------------------------------------ #
    def _add_body(self, entry: Dict[str, Any]) -> Body:
        name = entry.get("name")
        if not name:
            raise ConfigurationError(f"body entry without a name: {entry!r}")
        if name in self._by_name:
            raise ConfigurationError(f"duplicate body name '{name}'")

        parent: Optional[Body] = None
        parent_name = entry.get("parent")
        if parent_name is not None:
            if parent_name not in self._by_name:
                raise ConfigurationError(
                    f"{name}: parent '{parent_name}' is unknown or listed after its satellite"
                )
            parent = self._by_name[parent_name]

        sidereal = self._sidereal_time_func if entry.get("reference", False) else None
        try:
            body = Body(
                name=name,
                parent=parent,
                radius=float(entry.get("radius", 0.0)),
                oblateness=float(entry.get("oblateness", 0.0)),
                color=tuple(entry.get("color", (1.0, 1.0, 1.0))),
                albedo=float(entry.get("albedo", 0.0)),
                position_func=ephemeris.from_config(entry.get("orbit", {})),
                rotation=RotationElements.from_config(entry.get("rotation", {})),
                halo=bool(entry.get("halo", False)),
                lighting=bool(entry.get("lighting", True)),
                sidereal_time_func=sidereal,
                orbit_segments=self.orbit_segments,
                position_refresh_threshold=self.position_refresh_threshold,
                trail_spacing=self.trail_spacing,
                trail_max_points=self.trail_max_points,
                satellites_fov_extent=entry.get("satellites_fov_extent"),
            )
        except ValueError as exc:
            raise ConfigurationError(f"{name}: {exc}") from exc

        body.sphere_scale = float(entry.get("sphere_scale", 1.0))
        self._bodies.append(body)
        self._by_name[name] = body
        logger.debug(f"Added body {name} (parent {parent_name})")
        return body

    # ------------------------------------------------------------------ #
    #  Time stepping
    # ------------------------------------------------------------------ #
    def compute_positions(self, jd: float) -> None:
        """Refresh orbit windows and positions, parents first."""
        for body in self._bodies:
            body.compute_position(jd)

    def compute_trans_matrices(self, jd: float) -> None:
        """Rebuild every local-to-parent transform for *jd*."""
        for body in self._bodies:
            body.compute_trans_matrix(jd)

    def update(self, jd: float, navigator=None) -> None:
        """
        Advance the whole system to *jd*.

        Positions first, then transforms, then (when a navigator is given)
        trails, which depend on the settled positions of every body
        including the observer's home body.
        """
        self.compute_positions(jd)
        self.compute_trans_matrices(jd)
        if navigator is not None:
            navigator.set_jday(jd)
            for body in self._bodies:
                body.update_trail(navigator)

    def update_animation(self, delta_ms: int) -> None:
        for body in self._bodies:
            body.update(delta_ms)

    def start_trails(self, enable: bool) -> None:
        for body in self._bodies:
            body.start_trail(enable)

    # ------------------------------------------------------------------ #
    #  Lookup
    # ------------------------------------------------------------------ #
    def get(self, name: str) -> Body:
        try:
            return self._by_name[name]
        except KeyError:
            raise KeyError(f"no body named '{name}'") from None

    @property
    def names(self) -> List[str]:
        return [b.name for b in self._bodies]

    def __contains__(self, name: str) -> bool:
        return name in self._by_name

    def __iter__(self) -> Iterator[Body]:
        return iter(self._bodies)

    def __len__(self) -> int:
        return len(self._bodies)

    def __repr__(self) -> str:
        return f"SolarSystem(bodies={len(self._bodies)}, root={self.root.name!r})"
