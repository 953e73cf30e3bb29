"""
===============================================================================
ORRERY - Mathematical, Astronomical and Engine Constants
===============================================================================
Central repository for the constants used by the position propagation and
caching engine.  Times are Julian Days (JD), distances astronomical units
(AU), angles radians unless the name says otherwise.
===============================================================================
"""

import numpy as np


# =============================================================================
# MATHEMATICAL CONSTANTS
# =============================================================================
PI = np.pi
TWO_PI = 2.0 * np.pi
DEG2RAD = PI / 180.0
RAD2DEG = 180.0 / PI

# =============================================================================
# TIME
# =============================================================================
J2000 = 2451545.0                      # JD of 2000-01-01 12:00 TT
JD_SECOND = 1.0 / 86400.0              # one second expressed in days
JULIAN_CENTURY = 36525.0               # days

# =============================================================================
# ASTRONOMY
# =============================================================================
J2000_OBLIQUITY = 23.4392911 * DEG2RAD  # Mean obliquity of the ecliptic (rad)

# Apparent visual magnitude of the Sun, also returned for any body sitting
# at the heliocentric origin.
SUN_APPARENT_MAGNITUDE = -26.73
ORIGIN_EPSILON = 1e-16                 # AU; "at the origin" threshold

# =============================================================================
# ENGINE DEFAULTS
# =============================================================================
ORBIT_SEGMENTS = 360                   # samples in the orbit window
TRAIL_SPACING = 1.0                    # days between trail points
TRAIL_MAX_POINTS = 60                  # 60-day trails
FADER_DURATION_MS = 1000               # default animation fade duration

# Furthest satellite-to-parent nesting supported: root -> planet -> satellite
MAX_BODY_DEPTH = 2
