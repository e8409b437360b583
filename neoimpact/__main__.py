"""
Command-line interface for neoimpact.

Usage:
    # Full scenario from a JSON file (see neoimpact.scenario.ImpactScenario)
    python -m neoimpact simulate scenario.json

    # Encounter from orbital elements (plain or SBDB "orbit" JSON)
    python -m neoimpact encounter --elements elements.json --time 2029-04-13T21:46:00

    # Heliocentric trajectory samples between two Julian dates
    python -m neoimpact trajectory --elements elements.json --start-jd 2461000.5 --end-jd 2461365.5 --num 50

    # Effect scalers on their own
    python -m neoimpact crater --mass-kg 1e9 --velocity-kms 20 --angle-deg 45
    python -m neoimpact atmosphere --energy-mt 1000 --ejecta-volume-km3 5
"""

import argparse
import json
import logging
import math
import sys
from datetime import datetime
from pathlib import Path

import numpy as np

from neoimpact.orbital_elements import OrbitalElements
from neoimpact.astrodynamics import propagate_trajectory
from neoimpact.ephemerides import earth_trajectory
from neoimpact.encounter import resolve_encounter
from neoimpact.surface_effects import crater_profile, atmospheric_effects
from neoimpact.scenario import OrbitRecord, ImpactScenario, run_scenario
from neoimpact.constants import ROCK_DENSITY
from neoimpact.config import SimulationConfig

logger = logging.getLogger("neoimpact")


def encounter_time_type(value):
    """Parse an encounter time: ISO-8601 timestamp or unix seconds."""
    try:
        seconds = float(value)
    except ValueError:
        pass
    else:
        if not math.isfinite(seconds):
            raise argparse.ArgumentTypeError(f"Encounter time must be finite, got {value}")
        return seconds
    # fromisoformat only accepts a trailing Z from Python 3.11
    if value.endswith(('Z', 'z')):
        value = value[:-1] + '+00:00'
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Encounter time must be ISO-8601 or unix seconds, got {value}")


def _read_json_object(path) -> dict:
    data = json.loads(Path(path).read_text())
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a JSON object, got {type(data).__name__}")
    return data


def load_elements(path) -> OrbitalElements:
    """
    Load orbital elements from a JSON file.

    Accepts either the OrbitRecord field names or an SBDB ``orbit`` block
    (a mapping with an ``elements`` list), optionally wrapped in
    ``{"orbit": ...}``.
    """
    data = _read_json_object(path)
    if 'orbit' in data:
        data = data['orbit']
        if not isinstance(data, dict):
            raise ValueError(f"{path}: 'orbit' must be a JSON object")
    if 'elements' in data:
        return OrbitalElements.from_sbdb(data)
    return OrbitRecord(**data).to_elements()


def _cmd_simulate(args):
    data = _read_json_object(args.scenario)
    scenario = ImpactScenario(**data)
    config = SimulationConfig(kepler_tol=args.kepler_tol, kepler_max_iter=args.kepler_max_iter)
    return run_scenario(scenario, config)


def _cmd_encounter(args):
    elements = load_elements(args.elements)
    result = resolve_encounter(elements, args.time, tol=args.kepler_tol, max_iter=args.kepler_max_iter)
    return result.to_payload()


def _cmd_trajectory(args):
    if args.num < 2:
        raise ValueError("--num must be at least 2")
    elements = load_elements(args.elements)
    jds = np.linspace(args.start_jd, args.end_jd, args.num)
    neo = propagate_trajectory(elements, jds, tol=args.kepler_tol, max_iter=args.kepler_max_iter)
    earth = earth_trajectory(jds)
    return {
        'jd': np.asarray(jds).tolist(),
        'neo_position_km': np.asarray(neo.r).tolist(),
        'neo_velocity_kms': np.asarray(neo.v).tolist(),
        'earth_position_km': np.asarray(earth.r).tolist(),
        'earth_velocity_kms': np.asarray(earth.v).tolist(),
    }


def _cmd_crater(args):
    profile = crater_profile(args.mass_kg, args.velocity_kms * 1000.0, np.deg2rad(args.angle_deg),
                             args.target_density)
    return profile._asdict()


def _cmd_atmosphere(args):
    return atmospheric_effects(args.energy_mt, args.burst_altitude_km, args.ejecta_volume_km3)._asdict()


def _add_solver_options(parser):
    parser.add_argument('--kepler-tol', type=float, default=1e-8,
                        help='Kepler solver tolerance in radians (default: 1e-8)')
    parser.add_argument('--kepler-max-iter', type=int, default=50,
                        help='Kepler solver iteration cap (default: 50)')


def build_parser():
    parser = argparse.ArgumentParser(
        prog='python -m neoimpact',
        description='Near-Earth object encounter and impact effects.'
    )
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')
    subparsers = parser.add_subparsers(dest='command', required=True)

    simulate = subparsers.add_parser('simulate', help='Run a full impact scenario from a JSON file')
    simulate.add_argument('scenario', type=str, help='Path to the scenario JSON file')
    _add_solver_options(simulate)
    simulate.set_defaults(func=_cmd_simulate)

    encounter = subparsers.add_parser('encounter', help='Resolve an Earth encounter from orbital elements')
    encounter.add_argument('--elements', type=str, required=True, help='Path to the orbital elements JSON file')
    encounter.add_argument('--time', type=encounter_time_type, default=None,
                           help='Encounter time, ISO-8601 (UTC when naive) or unix seconds (default: now)')
    _add_solver_options(encounter)
    encounter.set_defaults(func=_cmd_encounter)

    trajectory = subparsers.add_parser('trajectory', help='Sample body and Earth states between two dates')
    trajectory.add_argument('--elements', type=str, required=True, help='Path to the orbital elements JSON file')
    trajectory.add_argument('--start-jd', type=float, required=True, help='First Julian date')
    trajectory.add_argument('--end-jd', type=float, required=True, help='Last Julian date')
    trajectory.add_argument('--num', type=int, default=100, help='Number of samples (default: 100)')
    _add_solver_options(trajectory)
    trajectory.set_defaults(func=_cmd_trajectory)

    crater = subparsers.add_parser('crater', help='Crater dimensions from impactor mass and speed')
    crater.add_argument('--mass-kg', type=float, required=True, help='Impactor mass (kg)')
    crater.add_argument('--velocity-kms', type=float, required=True, help='Impact speed (km/s)')
    crater.add_argument('--angle-deg', type=float, default=45.0, help='Impact angle from horizontal (default: 45)')
    crater.add_argument('--target-density', type=float, default=ROCK_DENSITY,
                        help=f'Target density in kg/m^3 (default: {ROCK_DENSITY})')
    crater.set_defaults(func=_cmd_crater)

    atmosphere = subparsers.add_parser('atmosphere', help='Atmospheric and climate proxies')
    atmosphere.add_argument('--energy-mt', type=float, required=True, help='Released energy (Mt TNT)')
    atmosphere.add_argument('--burst-altitude-km', type=float, default=0.0, help='Burst altitude (km)')
    atmosphere.add_argument('--ejecta-volume-km3', type=float, default=0.0, help='Ejecta volume (km^3)')
    atmosphere.set_defaults(func=_cmd_atmosphere)

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s  %(levelname)-7s  %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )

    try:
        output = args.func(args)
    except (ValueError, OSError, OverflowError) as e:
        logger.error("%s failed: %s", args.command, e)
        return 1

    print(json.dumps(output, indent=2))
    return 0


if __name__ == '__main__':
    sys.exit(main())
