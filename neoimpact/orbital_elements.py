"""
Orbital elements representation for near-Earth objects.
"""
from typing import NamedTuple, Optional


class OrbitalElements(NamedTuple):
    """
    Heliocentric Keplerian orbital elements of a near-Earth object.

    These elements define an unperturbed orbit about the Sun in the
    ecliptic J2000 frame. All angular quantities are in degrees.

    Attributes:
        e: Eccentricity (dimensionless, 0 ≤ e < 1 for bound orbits)
        a: Semi-major axis (AU)
        i: Inclination relative to the ecliptic (deg)
        Omega: Longitude of the ascending node (deg)
        omega: Argument of perihelion (deg)
        M0: Mean anomaly at epoch (deg)
        epoch_jd: Julian date at which M0 is valid
        n: Mean motion (deg/day). When None it is derived from a
           through Kepler's third law.

    Note:
        - Parabolic and hyperbolic orbits (e ≥ 1) are not supported.
    """
    e: float  # eccentricity
    a: float  # semi-major axis (AU)
    i: float  # inclination (deg)
    Omega: float  # longitude of ascending node (deg)
    omega: float  # argument of perihelion (deg)
    M0: float  # mean anomaly at epoch (deg)
    epoch_jd: float  # epoch (JD)
    n: Optional[float] = None  # mean motion (deg/day)

    @classmethod
    def from_sbdb(cls, orbit: dict) -> 'OrbitalElements':
        """
        Build elements from the ``orbit`` block of a JPL SBDB response.

        Args:
            orbit: Mapping with an ``epoch`` (JD) and an ``elements`` list of
                ``{"name": ..., "value": ...}`` entries using the SBDB names
                e, a, i, om, w, ma and (optionally) n.

        Returns:
            OrbitalElements

        Raises:
            ValueError: If the epoch or a required element is missing, or an
                element entry is malformed.
        """
        if not isinstance(orbit, dict):
            raise ValueError(f"SBDB orbit must be a mapping, got {type(orbit).__name__}")
        values = {}
        for entry in orbit.get('elements', []):
            name = entry.get('name') if isinstance(entry, dict) else None
            if not name:
                raise ValueError(f"SBDB orbit element has no name: {entry!r}")
            value = entry.get('value')
            if value is not None:
                try:
                    values[name] = float(value)
                except (TypeError, ValueError):
                    raise ValueError(f"SBDB element {name} has a non-numeric value: {value!r}")

        missing = [key for key in ('e', 'a', 'i', 'om', 'w', 'ma') if key not in values]
        if missing:
            raise ValueError(f"SBDB orbit is missing elements: {', '.join(missing)}")
        if orbit.get('epoch') is None:
            raise ValueError("SBDB orbit is missing its epoch")

        return cls(
            e=values['e'],
            a=values['a'],
            i=values['i'],
            Omega=values['om'],
            omega=values['w'],
            M0=values['ma'],
            epoch_jd=float(orbit['epoch']),
            n=values.get('n'),
        )
