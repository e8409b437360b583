"""
Angle conversions and small 3-vector operations.

All functions are pure and work on scalars or JAX arrays of shape (3,).
"""
import jax.numpy as jnp
from jax import jit


def deg2rad(degrees):
    return degrees * jnp.pi / 180.0


def rad2deg(radians):
    return radians * 180.0 / jnp.pi


def clamp(value, lo, hi):
    return jnp.minimum(jnp.maximum(value, lo), hi)


def vector_subtract(v1: jnp.ndarray, v2: jnp.ndarray) -> jnp.ndarray:
    return jnp.asarray(v1, dtype=float) - jnp.asarray(v2, dtype=float)


def vector_scale(v: jnp.ndarray, scalar: float) -> jnp.ndarray:
    return jnp.asarray(v, dtype=float) * scalar


def vector_dot(v1: jnp.ndarray, v2: jnp.ndarray) -> float:
    return jnp.dot(jnp.asarray(v1, dtype=float), jnp.asarray(v2, dtype=float))


def vector_magnitude(v: jnp.ndarray) -> float:
    v = jnp.asarray(v, dtype=float)
    return jnp.sqrt(jnp.dot(v, v))


@jit
def vector_normalize(v: jnp.ndarray) -> jnp.ndarray:
    """
    Unit vector along v.

    A zero-length input returns the zero vector instead of dividing by zero.
    """
    v = jnp.asarray(v, dtype=float)
    mag = vector_magnitude(v)
    safe_mag = jnp.where(mag == 0.0, 1.0, mag)
    return jnp.where(mag == 0.0, jnp.zeros_like(v), v / safe_mag)
