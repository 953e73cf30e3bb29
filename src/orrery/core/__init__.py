"""
===============================================================================
ORRERY - Core Package
===============================================================================
Shared building blocks with no knowledge of bodies or time stepping.

Modules:
    constants   -- Mathematical, astronomical and engine constants
    exceptions  -- ConfigurationError
    frames      -- Rotation/translation matrices and frame conversions
    fader       -- LinearFader animation state
===============================================================================
"""
