"""
Tabulated position reports for a range of dates.

Steps a SolarSystem through ``[start_jd, stop_jd]`` and collects one row
per (date, body) with the same quantities as the body info report, in
degrees, into a pandas DataFrame that can be exported to CSV.
"""

import logging
import math
from pathlib import Path
from typing import Iterable, Optional, Union

import numpy as np
import pandas as pd

from orrery.core.constants import RAD2DEG

logger = logging.getLogger(__name__)

COLUMNS = [
    "jd", "body", "ra_deg", "dec_deg", "magnitude", "distance_au",
    "azimuth_deg", "altitude_deg", "phase",
]


def build_table(system, navigator, start_jd: float, stop_jd: float,
                step: float = 1.0,
                names: Optional[Iterable[str]] = None) -> pd.DataFrame:
    """
    Step *system* from *start_jd* to *stop_jd* and tabulate body reports.

    The observer's home body is skipped.  ``phase`` is NaN for the root
    body, which sits at the light source.

    Parameters
    ----------
    system : SolarSystem
    navigator : Navigator
    start_jd, stop_jd : float
        Inclusive date range (JD).
    step : float
        Days between rows.
    names : iterable of str, optional
        Bodies to include (default: all).

    Returns
    -------
    pd.DataFrame
        Columns listed in ``COLUMNS``.
    """
    if step <= 0.0:
        raise ValueError(f"step must be positive, got {step}")
    if stop_jd < start_jd:
        raise ValueError("stop_jd must not precede start_jd")

    bodies = [system.get(n) for n in names] if names else list(system)
    bodies = [b for b in bodies if b is not navigator.home_body]

    count = int(math.floor((stop_jd - start_jd) / step + 1e-9)) + 1
    rows = []
    for k in range(count):
        jd = start_jd + k * step
        system.update(jd, navigator)
        for body in bodies:
            report = body.info(navigator)
            phase = (np.nan if body.parent is None
                     else body.phase(navigator.observer_helio_pos()))
            rows.append({
                "jd": jd,
                "body": body.name,
                "ra_deg": report.ra * RAD2DEG,
                "dec_deg": report.dec * RAD2DEG,
                "magnitude": report.magnitude,
                "distance_au": report.distance,
                "azimuth_deg": report.azimuth * RAD2DEG,
                "altitude_deg": report.altitude * RAD2DEG,
                "phase": phase,
            })

    logger.info(f"Ephemeris table: {count} dates x {len(bodies)} bodies")
    return pd.DataFrame(rows, columns=COLUMNS)


def export_csv(table: pd.DataFrame, path: Union[str, Path]) -> Path:
    """Write *table* to CSV and return the path."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    table.to_csv(path, index=False)
    logger.info(f"Ephemeris table saved to {path}")
    return path
