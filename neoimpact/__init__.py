# Configure JAX to use double precision (64-bit floats) throughout the package
import jax
jax.config.update("jax_enable_x64", True)

from .orbital_elements import OrbitalElements
from .state_vector import StateVector

from .constants import (
    # Constants
    AU_KM,
    SUN_MU,
    EARTH_RADIUS_KM,
    DAY,
    J2000_JD,
    ROCK_DENSITY,
    WATER_DENSITY,
    JOULES_PER_MEGATON,
)

from .config import SimulationConfig, DEFAULT_CONFIG

from .astrodynamics import (
    # Functions
    solve_kepler,
    solve_kepler_status,
    solve_kepler_vec,
    mean_motion_deg_per_day,
    orbital_period_days,
    perifocal_state,
    rotate_to_ecliptic,
    propagate_body,
    propagate_trajectory,
)

from .ephemerides import (
    propagate_earth,
    earth_trajectory,
)

from .timescales import (
    datetime_to_jd,
    unix_to_jd,
    jd_to_datetime,
    gmst_rad,
)

from .encounter import (
    # Encounter models
    ImpactGeometry,
    EncounterResult,
    impact_geometry,
    resolve_states,
    resolve_encounter,
)

from .surface_effects import (
    # Effect models
    CraterProfile,
    AtmosphericEffects,
    crater_profile,
    atmospheric_effects,
)

from .scenario import (
    # Scenario models
    OrbitRecord,
    ImpactScenario,
    run_scenario,
)

__all__ = [
    # Constants
    "AU_KM",
    "SUN_MU",
    "EARTH_RADIUS_KM",
    "DAY",
    "J2000_JD",
    "ROCK_DENSITY",
    "WATER_DENSITY",
    "JOULES_PER_MEGATON",

    # Configuration
    "SimulationConfig",
    "DEFAULT_CONFIG",

    # Named tuples
    "OrbitalElements",
    "StateVector",
    "ImpactGeometry",
    "EncounterResult",
    "CraterProfile",
    "AtmosphericEffects",

    # Functions
    "solve_kepler",
    "solve_kepler_status",
    "solve_kepler_vec",
    "mean_motion_deg_per_day",
    "orbital_period_days",
    "perifocal_state",
    "rotate_to_ecliptic",
    "propagate_body",
    "propagate_trajectory",
    "propagate_earth",
    "earth_trajectory",
    "datetime_to_jd",
    "unix_to_jd",
    "jd_to_datetime",
    "gmst_rad",
    "impact_geometry",
    "resolve_states",
    "resolve_encounter",
    "crater_profile",
    "atmospheric_effects",

    # Scenario models
    "OrbitRecord",
    "ImpactScenario",
    "run_scenario",
]
