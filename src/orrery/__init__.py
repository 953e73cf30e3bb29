"""
===============================================================================
ORRERY - Body Position Propagation Engine
===============================================================================
Positions, frames, orbit polylines, trails and brightness of the bodies of
a solar system, stepped through time for an observer on a home body.

Subpackages:
    core        -- Constants, exceptions, frame algebra, animation faders
    dynamics    -- Bodies, orbit sample windows, trails, photometry
    navigation  -- Observer on a home body, sidereal time
    simulation  -- Catalogue loading, system stepping, ephemeris tables
===============================================================================
"""

__version__ = "0.1.0"
