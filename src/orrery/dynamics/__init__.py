"""
===============================================================================
ORRERY - Dynamics Package
===============================================================================
Bodies and the per-body state they own.

Submodules:
    rotation     -- RotationElements (spin, tilt, node precession, period)
    ephemeris    -- Position functions: fixed point, Keplerian orbit
    orbit_cache  -- Sliding window of orbit samples with incremental reuse
    trail        -- Bounded, time-windowed position history
    photometry   -- Phase angle, phase function, apparent magnitude
    body         -- Body tree node tying the above together
===============================================================================
"""
