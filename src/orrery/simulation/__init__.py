"""
===============================================================================
ORRERY - Simulation Package
===============================================================================
Whole-system stepping on top of individual bodies.

Modules:
    solar_system     -- YAML catalogue loading and ordered time stepping
    ephemeris_table  -- Date-range position reports as a pandas DataFrame
===============================================================================
"""
