"""
Impact energy and threat assessment helpers.
"""
import math
from typing import List, Optional

from .constants import AU_KM, EARTH_RADIUS_KM, MOON_DISTANCE_KM, JOULES_PER_MEGATON
from .config import DEFAULT_DETECTION_RANGE_AU

# (upper bound in Mt, label); the last level has no upper bound
THREAT_LEVELS = (
    (1.0, "MINIMAL"),
    (10.0, "MINOR"),
    (100.0, "LOCAL"),
    (1000.0, "REGIONAL"),
    (10000.0, "CONTINENTAL"),
)


def impactor_mass_kg(diameter_m: float, density_kg_m3: float) -> float:
    """Mass of a spherical impactor."""
    return (4.0 / 3.0) * math.pi * (diameter_m / 2.0)**3 * density_kg_m3


def kinetic_energy_j(mass_kg: float, velocity_ms: float) -> float:
    return 0.5 * mass_kg * velocity_ms**2


def joules_to_megatons(energy_j: float) -> float:
    return energy_j / JOULES_PER_MEGATON


def threat_level(energy_mt: float) -> str:
    for upper, label in THREAT_LEVELS:
        if energy_mt < upper:
            return label
    return "EXTINCTION"


def near_miss_threat(miss_distance_km: float) -> str:
    """Qualitative threat of a close approach from its miss distance."""
    if miss_distance_km <= EARTH_RADIUS_KM * 2:
        return "EXTREME - Within 2 Earth radii"
    if miss_distance_km <= EARTH_RADIUS_KM * 10:
        return "VERY HIGH - Within 10 Earth radii"
    if miss_distance_km <= MOON_DISTANCE_KM * 0.5:
        return "HIGH - Within half lunar distance"
    if miss_distance_km <= MOON_DISTANCE_KM:
        return "MODERATE - Within lunar distance"
    return "LOW - Beyond lunar distance"


def global_effects(energy_mt: float,
                   nuclear_winter_risk: float = 0.0,
                   ozone_depletion_percent: float = 0.0,
                   tsunami_1000km_m: Optional[float] = None) -> List[str]:
    """
    Descriptive flags for the wider consequences of an impact.

    tsunami_1000km_m is the far-field wave height supplied by an external
    tsunami model, if any.
    """
    effects = []
    if energy_mt < 10:
        effects.append("Local damage only")
    if energy_mt >= 100:
        effects.append("Regional climate impact")
    if energy_mt >= 1000:
        effects.append("Global cooling possible")
    if nuclear_winter_risk > 0.5:
        effects.append("Nuclear winter risk")
    if energy_mt >= 10_000:
        effects.append("Mass extinction threat")
    if ozone_depletion_percent > 10:
        effects.append("Ozone depletion")
    if tsunami_1000km_m is not None and tsunami_1000km_m > 5:
        effects.append("Global tsunami")
    return effects


def warning_time_hours(velocity_kms: float, detection_range_au: float = DEFAULT_DETECTION_RANGE_AU) -> float:
    """
    Time between detection and impact for an object first seen at
    detection_range_au and closing at velocity_kms.
    """
    if velocity_kms <= 0.0:
        raise ValueError("velocity_kms must be > 0")
    return detection_range_au * AU_KM / velocity_kms / 3600.0
