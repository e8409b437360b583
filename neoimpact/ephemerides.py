"""
Approximate ephemeris of the Earth.

The Earth is placed on a circular orbit of radius 1 AU in the ecliptic
plane, moving at a fixed 29.78 km/s. Its true eccentricity (0.0167) is
ignored.
"""
import jax.numpy as jnp
from jax import jit

from .state_vector import StateVector
from .constants import (
    AU_KM, J2000_JD,
    EARTH_MEAN_LONGITUDE_J2000_DEG, EARTH_MEAN_MOTION_DEG_PER_DAY, EARTH_ORBITAL_SPEED_KMS,
)
from .vector_math import deg2rad


@jit
def earth_mean_longitude(jd):
    """Earth's mean longitude (radians) at the given Julian date(s)."""
    days_since_j2000 = jd - J2000_JD
    L_deg = jnp.mod(EARTH_MEAN_LONGITUDE_J2000_DEG + EARTH_MEAN_MOTION_DEG_PER_DAY * days_since_j2000, 360.0)
    return deg2rad(L_deg)


@jit
def _earth_state(jd):
    L = earth_mean_longitude(jd)
    cos_L = jnp.cos(L)
    sin_L = jnp.sin(L)
    zero = jnp.zeros_like(L)
    r = AU_KM * jnp.stack([cos_L, sin_L, zero], axis=-1)
    v = EARTH_ORBITAL_SPEED_KMS * jnp.stack([-sin_L, cos_L, zero], axis=-1)
    return r, v


def propagate_earth(jd: float) -> StateVector:
    """
    Heliocentric ecliptic state of the Earth at a Julian date.

    Returns:
        StateVector with position in km and velocity in km/s
    """
    r, v = _earth_state(jnp.asarray(jd, dtype=float))
    return StateVector(r=r, v=v, jd=float(jd))


def earth_trajectory(jds) -> StateVector:
    """Earth states at many Julian dates; r and v have shape (n_times, 3)."""
    jds = jnp.atleast_1d(jnp.asarray(jds, dtype=float))
    r, v = _earth_state(jds)
    return StateVector(r=r, v=v, jd=jds)
