"""
===============================================================================
ORRERY - Navigation Package
===============================================================================
The observer and the time it lives in.

Modules:
    observer  -- Navigator and Greenwich mean sidereal time
===============================================================================
"""
