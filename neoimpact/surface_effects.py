"""
Surface and atmospheric effect scaling.

This module converts impact energy into crater dimensions and into rough
atmospheric/climate proxies using simple empirical power laws. Both
functions are pure and total; inputs are not validated here.
"""
import math
from typing import NamedTuple

import jax.numpy as jnp
from jax import jit

from .constants import ROCK_DENSITY
from .vector_math import clamp


class CraterProfile(NamedTuple):
    """
    Crater dimensions, all in meters.

    Attributes:
        transient_diameter_m: Diameter of the transient cavity
        final_diameter_m: Rim-to-rim diameter after collapse
        depth_m: Floor depth below the original surface
        rim_height_m: Rim height above the original surface
        central_peak_m: Height of the central peak
    """
    transient_diameter_m: float
    final_diameter_m: float
    depth_m: float
    rim_height_m: float
    central_peak_m: float

    @property
    def rim_radius_km(self) -> float:
        return self.final_diameter_m / 2000.0

    @property
    def bowl_volume_km3(self) -> float:
        """Cylindrical volume of the crater bowl (km^3), a proxy for ejected material."""
        return math.pi * (self.final_diameter_m / 2.0)**2 * self.depth_m / 1e9


class AtmosphericEffects(NamedTuple):
    """
    Atmospheric and climate proxies.

    Attributes:
        ozone_depletion_percent: Ozone column loss in [0, 35] (%)
        aerosol_optical_depth: Stratospheric aerosol optical depth in [0, 3]
        nuclear_winter_risk: Relative risk in [0, 1]
    """
    ozone_depletion_percent: float
    aerosol_optical_depth: float
    nuclear_winter_risk: float


@jit
def _crater(mass_kg, velocity_ms, angle_rad, target_density):
    # Only the velocity component normal to the surface excavates
    v_n = velocity_ms * jnp.sin(angle_rad)
    ke_n = 0.5 * mass_kg * v_n**2

    transient = 1.8 * ke_n**0.25

    # Low-density targets (water) give smaller final craters
    density_factor = clamp(target_density / ROCK_DENSITY, 0.35, 1.0)
    final = transient * 1.25 * density_factor
    return transient, final


def crater_profile(mass_kg: float, velocity_ms: float, angle_rad: float,
                   target_density: float) -> CraterProfile:
    """
    Crater dimensions from a pi-scaling style energy relation.

    Args:
        mass_kg: Impactor mass at the surface (kg)
        velocity_ms: Impact speed (m/s)
        angle_rad: Impact angle from the horizontal (radians)
        target_density: Target density (kg/m^3), 2650 for rock, ~1030 for water

    Returns:
        CraterProfile
    """
    transient, final = _crater(float(mass_kg), float(velocity_ms), float(angle_rad), float(target_density))
    final = float(final)
    return CraterProfile(
        transient_diameter_m=float(transient),
        final_diameter_m=final,
        depth_m=0.2 * final,
        rim_height_m=0.04 * final,
        central_peak_m=0.05 * final,
    )


@jit
def _atmospheric(energy_mt, ejecta_volume_km3):
    ozone = clamp(2.0 * jnp.log10(energy_mt + 1.0), 0.0, 35.0)
    aod = clamp(0.01 * energy_mt**0.6 + 0.02 * ejecta_volume_km3**0.5, 0.0, 3.0)
    risk = clamp(aod / 3.0, 0.0, 1.0)
    return ozone, aod, risk


def atmospheric_effects(energy_mt: float, burst_altitude_km: float = 0.0,
                        ejecta_volume_km3: float = 0.0) -> AtmosphericEffects:
    """
    Ozone depletion, aerosol loading and nuclear-winter proxies.

    Args:
        energy_mt: Released energy (megatons TNT)
        burst_altitude_km: Burst altitude (km); accepted for interface
            compatibility, the proxies do not depend on it
        ejecta_volume_km3: Ejected material volume (km^3)

    Returns:
        AtmosphericEffects, all zero when energy_mt <= 0
    """
    if energy_mt <= 0.0:
        return AtmosphericEffects(0.0, 0.0, 0.0)

    ozone, aod, risk = _atmospheric(float(energy_mt), float(ejecta_volume_km3))
    return AtmosphericEffects(
        ozone_depletion_percent=float(ozone),
        aerosol_optical_depth=float(aod),
        nuclear_winter_risk=float(risk),
    )
