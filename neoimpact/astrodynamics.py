import logging
from typing import Tuple

import jax
import jax.numpy as jnp
from jax import jit

from .orbital_elements import OrbitalElements
from .state_vector import StateVector
from .constants import AU_KM, SUN_MU, DAY
from .config import DEFAULT_KEPLER_TOL, DEFAULT_KEPLER_MAX_ITER
from .vector_math import deg2rad, rad2deg

logger = logging.getLogger(__name__)


def solve_kepler_status(M: float, e: float, tol: float = DEFAULT_KEPLER_TOL,
                        max_iter: int = DEFAULT_KEPLER_MAX_ITER) -> Tuple[float, bool, int]:
    """
    Solve Kepler's equation M = E - e*sin(E) for eccentric anomaly E
    using Newton-Raphson iteration started from E = M.

    Iteration stops as soon as the Newton step is smaller than tol. If
    max_iter is reached first, the last estimate is returned and the
    converged flag is False.

    Returns:
        (E, converged, iterations)
    """
    M = jnp.asarray(M, dtype=float)
    e = jnp.asarray(e, dtype=float)

    def cond_fn(carry):
        _, delta, it = carry
        return (jnp.abs(delta) >= tol) & (it < max_iter)

    def body_fn(carry):
        E, _, it = carry
        f = E - e * jnp.sin(E) - M
        fp = 1.0 - e * jnp.cos(E)
        delta = f / fp
        return E - delta, delta, it + 1

    init = (M, jnp.full_like(M, jnp.inf), jnp.zeros((), dtype=jnp.int32))
    E, delta, iterations = jax.lax.while_loop(cond_fn, body_fn, init)
    return E, jnp.abs(delta) < tol, iterations


def solve_kepler(M: float, e: float, tol: float = DEFAULT_KEPLER_TOL,
                 max_iter: int = DEFAULT_KEPLER_MAX_ITER) -> float:
    """
    Solve Kepler's equation for the eccentric anomaly (radians).

    Non-convergence is not an error: the best estimate after max_iter
    iterations is returned. Use solve_kepler_status to inspect convergence.
    """
    E, _, _ = solve_kepler_status(M, e, tol, max_iter)
    return E


# One solve per (M, e) pair; tol and max_iter are shared
_solve_kepler_vec = jax.vmap(solve_kepler, in_axes=(0, 0, None, None))


def solve_kepler_vec(M, e, tol=DEFAULT_KEPLER_TOL, max_iter=DEFAULT_KEPLER_MAX_ITER):
    """
    Batch form of solve_kepler for equal-length arrays of mean anomaly
    (radians) and eccentricity. Returns the eccentric anomalies (radians)
    elementwise; unconverged entries hold their last Newton iterate.
    """
    return _solve_kepler_vec(jnp.asarray(M, dtype=float), jnp.asarray(e, dtype=float), tol, max_iter)


def mean_motion_deg_per_day(a_au: float) -> float:
    """Mean motion about the Sun (deg/day) from Kepler's third law."""
    a_km = a_au * AU_KM
    n_rad_per_sec = jnp.sqrt(SUN_MU / a_km**3)
    return rad2deg(n_rad_per_sec) * DAY


def orbital_period_days(elements: OrbitalElements) -> float:
    """Orbital period in days, using the supplied mean motion when present."""
    n = elements.n if elements.n is not None else mean_motion_deg_per_day(elements.a)
    return float(360.0 / n)


def perifocal_state(e: float, a_au: float, E: float) -> Tuple[jnp.ndarray, jnp.ndarray, float]:
    """
    Position and velocity in the orbital plane for a given eccentric anomaly.

    The x axis points at perihelion. Position is in km, velocity in km/s;
    the in-plane velocity is built from the specific angular momentum
    h = sqrt(mu * a * (1 - e^2)).

    Returns:
        (r, v, true_anomaly)
    """
    # True anomaly
    nu = 2.0 * jnp.arctan2(
        jnp.sqrt(1.0 + e) * jnp.sin(E / 2.0),
        jnp.sqrt(1.0 - e) * jnp.cos(E / 2.0)
    )

    # Distance from the Sun
    r_km = a_au * (1.0 - e * jnp.cos(E)) * AU_KM

    h = jnp.sqrt(SUN_MU * a_au * AU_KM * (1.0 - e**2))

    r = jnp.stack([r_km * jnp.cos(nu), r_km * jnp.sin(nu), jnp.zeros_like(r_km)])
    v = jnp.stack([-h * jnp.sin(nu) / r_km, h * (e + jnp.cos(nu)) / r_km, jnp.zeros_like(r_km)])
    return r, v, nu


def rotate_to_ecliptic(vec: jnp.ndarray, omega: float, i: float, Omega: float) -> jnp.ndarray:
    """
    Rotate an orbital-plane vector into the ecliptic frame.

    Applies, in order, a rotation by the argument of perihelion about z,
    by the inclination about x, and by the longitude of the ascending
    node about z. All angles in radians.
    """
    x, y, z = vec[0], vec[1], vec[2]

    # Argument of perihelion
    x1 = x * jnp.cos(omega) - y * jnp.sin(omega)
    y1 = x * jnp.sin(omega) + y * jnp.cos(omega)
    z1 = z

    # Inclination
    x2 = x1
    y2 = y1 * jnp.cos(i) - z1 * jnp.sin(i)
    z2 = y1 * jnp.sin(i) + z1 * jnp.cos(i)

    # Longitude of ascending node
    x3 = x2 * jnp.cos(Omega) - y2 * jnp.sin(Omega)
    y3 = x2 * jnp.sin(Omega) + y2 * jnp.cos(Omega)
    z3 = z2

    return jnp.stack([x3, y3, z3])


@jit
def _body_state(e, a, i, Omega, omega, M0, n, dt_days, tol, max_iter):
    # Mean anomaly at time t
    M_deg = jnp.mod(M0 + n * dt_days, 360.0)
    E, converged, _ = solve_kepler_status(deg2rad(M_deg), e, tol, max_iter)

    r_pf, v_pf, _ = perifocal_state(e, a, E)

    i_rad = deg2rad(i)
    omega_rad = deg2rad(omega)
    Omega_rad = deg2rad(Omega)

    r = rotate_to_ecliptic(r_pf, omega_rad, i_rad, Omega_rad)
    v = rotate_to_ecliptic(v_pf, omega_rad, i_rad, Omega_rad)
    return r, v, converged


_body_state_vec = jax.vmap(_body_state, in_axes=(None, None, None, None, None, None, None, 0, None, None))


def _mean_motion(elements: OrbitalElements) -> float:
    if elements.n is not None:
        return elements.n
    return mean_motion_deg_per_day(elements.a)


def propagate_body(elements: OrbitalElements, jd: float,
                   tol: float = DEFAULT_KEPLER_TOL,
                   max_iter: int = DEFAULT_KEPLER_MAX_ITER) -> StateVector:
    """
    Convert orbital elements to a heliocentric ecliptic J2000 Cartesian state.

    Args:
        elements: Keplerian elements of the body
        jd: Julian date at which the state is requested
        tol: Kepler solver tolerance (radians)
        max_iter: Kepler solver iteration cap

    Returns:
        StateVector with position in km and velocity in km/s
    """
    dt_days = jd - elements.epoch_jd
    r, v, converged = _body_state(
        elements.e, elements.a, elements.i, elements.Omega, elements.omega, elements.M0,
        _mean_motion(elements), dt_days, tol, max_iter
    )
    if not bool(converged):
        logger.warning("Kepler solver did not converge within %d iterations (e=%.6f, JD %.5f); "
                       "using best estimate", max_iter, elements.e, jd)
    return StateVector(r=r, v=v, jd=float(jd))


def propagate_trajectory(elements: OrbitalElements, jds,
                         tol: float = DEFAULT_KEPLER_TOL,
                         max_iter: int = DEFAULT_KEPLER_MAX_ITER) -> StateVector:
    """
    Evaluate the body's state at many Julian dates in one vectorized call.

    Returns:
        StateVector whose r and v have shape (n_times, 3) and whose jd is
        the array of requested dates.
    """
    jds = jnp.atleast_1d(jnp.asarray(jds, dtype=float))
    dt_days = jds - elements.epoch_jd
    r, v, converged = _body_state_vec(
        elements.e, elements.a, elements.i, elements.Omega, elements.omega, elements.M0,
        _mean_motion(elements), dt_days, tol, max_iter
    )
    n_failed = int(jnp.sum(~converged))
    if n_failed:
        logger.warning("Kepler solver did not converge at %d of %d epochs (e=%.6f)",
                       n_failed, jds.shape[0], elements.e)
    return StateVector(r=r, v=v, jd=jds)
