"""
===============================================================================
ORRERY - Photometry
===============================================================================
Phase and apparent magnitude of a body lit by a source at the heliocentric
origin and seen by an observer elsewhere.

Geometry (all heliocentric, AU):

    R = |body|             source -> body distance
    p = |observer - body|  body -> observer distance
    s = |observer|         source -> observer distance

The phase angle chi is the source-body-observer angle; by the law of
cosines

    cos(chi) = (p^2 + R^2 - s^2) / (2 p R)

The phase function of a Lambertian sphere is

    phi(chi) = (1 - chi/pi) cos(chi) + sin(chi) / pi

and the reflected flux, relative to the source's flux at the observer, is

    F = 2/3 * albedo * (radius * s / (R * p))^2 * phi

giving an apparent magnitude of -26.73 - 2.5 log10(F).

These are deterministic functions of geometry; nothing is cached.
===============================================================================
"""

import numpy as np

from orrery.core.constants import ORIGIN_EPSILON, SUN_APPARENT_MAGNITUDE


def phase_angle_cosine(helio_pos, observer_pos) -> float:
    """
    Cosine of the source-body-observer angle.

    Parameters
    ----------
    helio_pos : array-like
        Heliocentric position of the body.  Must not be at the origin.
    observer_pos : array-like
        Heliocentric position of the observer.

    Returns
    -------
    float
        cos(chi) clamped to [-1, 1].

    Raises
    ------
    ValueError
        If the body sits at the origin or on the observer, where the angle
        is undefined.
    """
    body = np.asarray(helio_pos, dtype=np.float64)
    obs = np.asarray(observer_pos, dtype=np.float64)
    R = np.linalg.norm(body)
    p = np.linalg.norm(obs - body)
    s = np.linalg.norm(obs)
    if R < ORIGIN_EPSILON or p < ORIGIN_EPSILON:
        raise ValueError("phase angle is undefined for a body at the origin "
                         "or at the observer")
    cos_chi = (p * p + R * R - s * s) / (2.0 * p * R)
    return float(np.clip(cos_chi, -1.0, 1.0))


def phase(cos_chi: float) -> float:
    """Lambertian phase function for a given cos(chi)."""
    cos_chi = float(np.clip(cos_chi, -1.0, 1.0))
    return float((1.0 - np.arccos(cos_chi) / np.pi) * cos_chi
                 + np.sqrt(1.0 - cos_chi * cos_chi) / np.pi)


def phase_from_geometry(helio_pos, observer_pos) -> float:
    """Phase function value for a body and observer position."""
    return phase(phase_angle_cosine(helio_pos, observer_pos))


def magnitude(helio_pos, observer_pos, radius: float, albedo: float) -> float:
    """
    Apparent visual magnitude of a body.

    A body at the heliocentric origin (the source itself) returns the fixed
    ``SUN_APPARENT_MAGNITUDE``.  A geometry with no reflected flux returns
    ``+inf`` (invisible) instead of raising.

    Parameters
    ----------
    helio_pos : array-like
        Heliocentric position of the body (AU).
    observer_pos : array-like
        Heliocentric position of the observer (AU).
    radius : float
        Body radius (AU).
    albedo : float
        Geometric albedo.

    Returns
    -------
    float
        Apparent magnitude.
    """
    body = np.asarray(helio_pos, dtype=np.float64)
    obs = np.asarray(observer_pos, dtype=np.float64)
    R = np.linalg.norm(body)
    if R < ORIGIN_EPSILON:
        return SUN_APPARENT_MAGNITUDE

    p = np.linalg.norm(obs - body)
    s = np.linalg.norm(obs)
    if p < ORIGIN_EPSILON:
        return float("inf")

    phi = phase_from_geometry(body, obs)
    ratio = radius * s / (R * p)
    flux = (2.0 / 3.0) * albedo * ratio * ratio * phi
    if flux <= 0.0:
        return float("inf")
    return float(SUN_APPARENT_MAGNITUDE - 2.5 * np.log10(flux))
