#!/usr/bin/env python3
"""
===============================================================================
ORRERY - MAIN ENTRY POINT
===============================================================================
Loads a body catalogue, steps it through a date range for an observer and
prints (or exports) the position report of every body.

USAGE:
    orrery                                   # All bodies at J2000 from Earth
    orrery --jd 2460000.5 --days 30          # 30 daily reports
    orrery --bodies Moon Mars --step 0.25    # Selected bodies, 6 h steps
    orrery --lat 25.76 --lon -80.19          # Observer in Miami
    orrery --days 365 --csv output/eph.csv   # Export the table to CSV
    orrery --trails                          # Also report trail lengths

OUTPUTS:
    stdout            - Body reports for the last date
    --csv PATH        - Ephemeris table (one row per date and body)

DEPENDENCIES:
    numpy, pandas, pyyaml
    Install: pip install -e .
===============================================================================
"""

import sys
import argparse
import logging
import time
from pathlib import Path

from orrery.core.constants import J2000
from orrery.core.exceptions import ConfigurationError
from orrery.navigation.observer import Navigator
from orrery.simulation.ephemeris_table import build_table, export_csv
from orrery.simulation.solar_system import SolarSystem, load_config

PROJECT_ROOT = Path(__file__).resolve().parents[2]
DEFAULT_CONFIG = PROJECT_ROOT / 'config' / 'solar_system.yaml'

logger = logging.getLogger('ORRERY_MAIN')


def setup_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='orrery',
        description='Solar system body positions seen from an observer',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  orrery --jd 2451545.0                 Reports at J2000
  orrery --days 30 --csv out/eph.csv    One month of daily rows to CSV
  orrery --observer Mars                Observer at the centre of Mars
        """
    )
    parser.add_argument('--config', type=str, default=None,
                        help=f'Body catalogue YAML (default: {DEFAULT_CONFIG})')
    parser.add_argument('--jd', type=float, default=J2000,
                        help='Start date as Julian Day (default: J2000)')
    parser.add_argument('--days', type=float, default=0.0,
                        help='Length of the date range in days (default: 0)')
    parser.add_argument('--step', type=float, default=1.0,
                        help='Days between reports (default: 1)')
    parser.add_argument('--observer', type=str, default='Earth',
                        help='Home body of the observer (default: Earth)')
    parser.add_argument('--lat', type=float, default=0.0,
                        help='Observer latitude in degrees (default: 0)')
    parser.add_argument('--lon', type=float, default=0.0,
                        help='Observer longitude in degrees, east positive')
    parser.add_argument('--bodies', nargs='+', default=None,
                        help='Bodies to report (default: all)')
    parser.add_argument('--csv', type=str, default=None,
                        help='Write the ephemeris table to this CSV file')
    parser.add_argument('--trails', action='store_true',
                        help='Record trails while stepping and report their length')
    parser.add_argument('--verbose', action='store_true',
                        help='Debug logging')
    return parser


def main(argv=None) -> int:
    """
    Main entry point.  Returns the process exit status: 0 on success,
    2 for catalogue or argument problems.
    """
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    config_path = Path(args.config) if args.config else DEFAULT_CONFIG
    try:
        system = SolarSystem(load_config(config_path))
        home = system.get(args.observer)
        navigator = Navigator(home, latitude=args.lat, longitude=args.lon, jday=args.jd)
        if args.bodies:
            for name in args.bodies:
                system.get(name)
    except (ConfigurationError, KeyError, ValueError) as exc:
        logger.error(f"Cannot set up the simulation: {exc}", exc_info=args.verbose)
        return 2

    if args.trails:
        system.start_trails(True)

    started = time.time()
    try:
        table = build_table(system, navigator, args.jd, args.jd + args.days,
                            step=args.step, names=args.bodies)
    except (ConfigurationError, ValueError) as exc:
        logger.error(f"Propagation failed: {exc}", exc_info=True)
        return 2
    logger.info(f"Propagated {len(table)} rows in {time.time() - started:.2f} s")

    names = args.bodies or [b.name for b in system if b is not home]
    print("=" * 70)
    print(f"  ORRERY - observer on {home.name} at JD {navigator.jday:.5f}")
    print("=" * 70)
    for name in names:
        body = system.get(name)
        if body is home:
            continue
        print(body.info_string(navigator))
        if args.trails:
            print(f"Trail : {len(body.trail)} points")
        print("-" * 70)

    if args.csv:
        path = export_csv(table, args.csv)
        print(f"  Ephemeris table saved to: {path}")

    return 0


if __name__ == '__main__':
    sys.exit(main())
