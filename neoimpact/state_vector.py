"""
State vector representation in Cartesian coordinates.
"""
from typing import NamedTuple
import jax.numpy as jnp


class StateVector(NamedTuple):
    """
    Cartesian state of a near-Earth object or of the Earth.

    This represents the position and velocity in heliocentric ecliptic
    J2000 coordinates at a single instant. A new state is produced for
    every query time; states are never reused across times.

    Attributes:
        r: Position vector [x, y, z] in km
        v: Velocity vector [vx, vy, vz] in km/s
        jd: Julian date at which the state is valid

    Examples:
        >>> import jax.numpy as jnp
        >>> state = StateVector(
        ...     r=jnp.array([1.5e8, 0.0, 0.0]),  # 1 AU from sun
        ...     v=jnp.array([0.0, 30.0, 0.0]),   # ~30 km/s orbital velocity
        ...     jd=2451545.0,
        ... )
    """
    r: jnp.ndarray  # position [x, y, z] (km)
    v: jnp.ndarray  # velocity [vx, vy, vz] (km/s)
    jd: float  # Julian date
