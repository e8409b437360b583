from __future__ import annotations

from dataclasses import dataclass

from neoimpact.constants import ROCK_DENSITY, WATER_DENSITY

# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------
DEFAULT_KEPLER_TOL = 1e-8
DEFAULT_KEPLER_MAX_ITER = 50
DEFAULT_OCEAN_DEPTH_THRESHOLD_M = 50.0  # shallower water is treated as land
DEFAULT_DISTANCE_DECIMALS = 2  # km, km/s
DEFAULT_ANGLE_DECIMALS = 2  # impact angle, azimuth
DEFAULT_COORDINATE_DECIMALS = 4  # latitude, longitude
DEFAULT_TRACK_LENGTH_M = 500_000.0
DEFAULT_TRACK_STEPS = 32
DEFAULT_TRACK_ALTITUDE_STEP_KM = 15.0
DEFAULT_DETECTION_RANGE_AU = 0.05


@dataclass(frozen=True, slots=True)
class SimulationConfig:
    kepler_tol: float = DEFAULT_KEPLER_TOL
    kepler_max_iter: int = DEFAULT_KEPLER_MAX_ITER
    ocean_depth_threshold_m: float = DEFAULT_OCEAN_DEPTH_THRESHOLD_M
    rock_density: float = ROCK_DENSITY
    water_density: float = WATER_DENSITY
    distance_decimals: int = DEFAULT_DISTANCE_DECIMALS
    angle_decimals: int = DEFAULT_ANGLE_DECIMALS
    coordinate_decimals: int = DEFAULT_COORDINATE_DECIMALS
    track_length_m: float = DEFAULT_TRACK_LENGTH_M
    track_steps: int = DEFAULT_TRACK_STEPS
    track_altitude_step_km: float = DEFAULT_TRACK_ALTITUDE_STEP_KM
    detection_range_au: float = DEFAULT_DETECTION_RANGE_AU

    def __post_init__(self) -> None:
        if self.kepler_tol <= 0:
            raise ValueError("kepler_tol must be > 0")
        if self.kepler_max_iter <= 0:
            raise ValueError("kepler_max_iter must be > 0")
        if self.track_steps <= 0:
            raise ValueError("track_steps must be > 0")
        if self.rock_density <= 0 or self.water_density <= 0:
            raise ValueError("target densities must be > 0")


DEFAULT_CONFIG = SimulationConfig()
