"""
Earth encounter resolution.

Decides whether a body on a Keplerian orbit strikes the Earth at a given
time and, on impact, where it lands and from which direction it arrives.
"""
import logging
from datetime import datetime
from typing import NamedTuple, Optional, Tuple, Union

import jax.numpy as jnp

from .orbital_elements import OrbitalElements
from .state_vector import StateVector
from .astrodynamics import propagate_body
from .ephemerides import propagate_earth
from .timescales import to_jd, jd_to_datetime, gmst_rad
from .geodesy import normalize_lon
from .constants import (
    EARTH_RADIUS_KM, MIN_IMPACT_ANGLE_DEG, MAX_IMPACT_ANGLE_DEG, AZIMUTH_UNDEFINED_THRESHOLD,
)
from .config import (
    DEFAULT_KEPLER_TOL, DEFAULT_KEPLER_MAX_ITER,
    DEFAULT_DISTANCE_DECIMALS, DEFAULT_ANGLE_DECIMALS, DEFAULT_COORDINATE_DECIMALS,
)
from .vector_math import (
    deg2rad, rad2deg, clamp,
    vector_subtract, vector_scale, vector_dot, vector_magnitude, vector_normalize,
)

logger = logging.getLogger(__name__)


class ImpactGeometry(NamedTuple):
    """
    Where and how an impactor meets the Earth's surface.

    Attributes:
        latitude_deg: Geographic latitude of the impact point (deg)
        longitude_deg: Geographic longitude in [-180, 180) (deg)
        impact_angle_deg: Entry angle in [5, 90] (deg)
        azimuth_deg: Direction of approach, clockwise from north, in [0, 360) (deg)
    """
    latitude_deg: float
    longitude_deg: float
    impact_angle_deg: float
    azimuth_deg: float


class EncounterResult(NamedTuple):
    """
    Outcome of an Earth encounter at a single instant.

    Positions are heliocentric ecliptic J2000 in km, velocities in km/s.
    The relative quantities are those of the body with respect to the Earth.
    geometry is present exactly when is_impact is True.
    """
    is_impact: bool
    miss_distance_km: float
    relative_velocity_kms: float
    encounter_time: datetime
    encounter_jd: float
    neo: StateVector
    earth: StateVector
    relative_position: jnp.ndarray
    relative_velocity: jnp.ndarray
    geometry: Optional[ImpactGeometry] = None

    def to_payload(self,
                   distance_decimals: int = DEFAULT_DISTANCE_DECIMALS,
                   angle_decimals: int = DEFAULT_ANGLE_DECIMALS,
                   coordinate_decimals: int = DEFAULT_COORDINATE_DECIMALS) -> dict:
        """JSON-ready dictionary with scalar results rounded for display."""
        payload = {
            'impact': self.is_impact,
            'miss_distance_km': round(self.miss_distance_km, distance_decimals),
            'velocity_kms': round(self.relative_velocity_kms, distance_decimals),
            'encounter_time': self.encounter_time.isoformat(),
            'encounter_jd': self.encounter_jd,
            'neo_position_km': _as_list(self.neo.r),
            'neo_velocity_kms': _as_list(self.neo.v),
            'earth_position_km': _as_list(self.earth.r),
            'earth_velocity_kms': _as_list(self.earth.v),
            'relative_position_km': _as_list(self.relative_position),
            'relative_velocity_kms': _as_list(self.relative_velocity),
        }
        if self.geometry is not None:
            payload.update(
                lat=round(self.geometry.latitude_deg, coordinate_decimals),
                lng=round(self.geometry.longitude_deg, coordinate_decimals),
                impact_angle_deg=round(self.geometry.impact_angle_deg, angle_decimals),
                azimuth_deg=round(self.geometry.azimuth_deg, angle_decimals),
            )
        return payload


def _as_list(vec) -> list:
    return [float(x) for x in vec]


def earth_fixed_lat_lon(unit_vector: jnp.ndarray, jd: float) -> Tuple[float, float]:
    """
    Latitude and longitude (deg) of an inertial unit vector at a Julian date.

    The vector is rotated about the z axis by -GMST to go from the inertial
    frame to the Earth-fixed frame.
    """
    x, y, z = unit_vector[0], unit_vector[1], unit_vector[2]
    gmst = gmst_rad(jd)

    x_fixed = x * jnp.cos(gmst) + y * jnp.sin(gmst)
    y_fixed = -x * jnp.sin(gmst) + y * jnp.cos(gmst)
    z_fixed = z

    lat = float(rad2deg(jnp.arcsin(clamp(z_fixed, -1.0, 1.0))))
    lng = normalize_lon(float(rad2deg(jnp.arctan2(y_fixed, x_fixed))))
    return lat, lng


def impact_angle(relative_velocity: jnp.ndarray, impact_normal: jnp.ndarray) -> float:
    """
    Impact angle (deg) from the angle between the velocity and the
    impact-point normal: 90 minus that angle, clamped to [5, 90].
    """
    v_hat = vector_normalize(relative_velocity)
    cos_angle = clamp(vector_dot(v_hat, impact_normal), -1.0, 1.0)
    angle_from_vertical = rad2deg(jnp.arccos(cos_angle))
    return float(clamp(90.0 - angle_from_vertical, MIN_IMPACT_ANGLE_DEG, MAX_IMPACT_ANGLE_DEG))


def approach_azimuth(relative_velocity: jnp.ndarray, impact_normal: jnp.ndarray,
                     lat_deg: float, lng_deg: float) -> float:
    """
    Direction of approach (deg clockwise from north, in [0, 360)).

    The velocity direction is projected onto the local horizontal plane. A
    near-vertical approach has no defined azimuth and yields 0.
    """
    v_hat = vector_normalize(relative_velocity)
    vertical_component = vector_dot(v_hat, impact_normal)
    horizontal = vector_subtract(v_hat, vector_scale(impact_normal, vertical_component))

    if float(vector_magnitude(horizontal)) < AZIMUTH_UNDEFINED_THRESHOLD:
        return 0.0

    lat = deg2rad(lat_deg)
    lng = deg2rad(lng_deg)

    # Local east and north basis vectors
    east = jnp.array([-jnp.sin(lng), jnp.cos(lng), 0.0])
    north = jnp.array([-jnp.sin(lat) * jnp.cos(lng), -jnp.sin(lat) * jnp.sin(lng), jnp.cos(lat)])

    v_east = vector_dot(horizontal, east)
    v_north = vector_dot(horizontal, north)

    azimuth = float(rad2deg(jnp.arctan2(v_east, v_north)))
    return (azimuth + 360.0) % 360.0


def impact_geometry(relative_position: jnp.ndarray, relative_velocity: jnp.ndarray,
                    jd: float) -> ImpactGeometry:
    """
    Impact point and approach geometry for an Earth-relative state.

    Args:
        relative_position: Body position relative to the Earth's center (km)
        relative_velocity: Body velocity relative to the Earth (km/s)
        jd: Julian date of the impact

    Returns:
        ImpactGeometry
    """
    impact_normal = vector_normalize(relative_position)
    lat, lng = earth_fixed_lat_lon(impact_normal, jd)
    return ImpactGeometry(
        latitude_deg=lat,
        longitude_deg=lng,
        impact_angle_deg=impact_angle(relative_velocity, impact_normal),
        azimuth_deg=approach_azimuth(relative_velocity, impact_normal, lat, lng),
    )


def resolve_states(neo: StateVector, earth: StateVector, jd: float,
                   encounter_time: Optional[datetime] = None) -> EncounterResult:
    """
    Classify an encounter from body and Earth states valid at the same time.

    The body impacts when its distance from the Earth's center is at most
    one Earth radius.
    """
    relative_position = vector_subtract(neo.r, earth.r)
    relative_velocity = vector_subtract(neo.v, earth.v)

    miss_distance_km = float(vector_magnitude(relative_position))
    relative_velocity_kms = float(vector_magnitude(relative_velocity))
    is_impact = miss_distance_km <= EARTH_RADIUS_KM

    geometry = None
    if is_impact:
        geometry = impact_geometry(relative_position, relative_velocity, jd)

    return EncounterResult(
        is_impact=is_impact,
        miss_distance_km=miss_distance_km,
        relative_velocity_kms=relative_velocity_kms,
        encounter_time=encounter_time if encounter_time is not None else jd_to_datetime(jd),
        encounter_jd=float(jd),
        neo=neo,
        earth=earth,
        relative_position=relative_position,
        relative_velocity=relative_velocity,
        geometry=geometry,
    )


def resolve_encounter(elements: OrbitalElements,
                      encounter_time: Optional[Union[datetime, float]] = None,
                      tol: float = DEFAULT_KEPLER_TOL,
                      max_iter: int = DEFAULT_KEPLER_MAX_ITER) -> EncounterResult:
    """
    Propagate a body and the Earth to the encounter time and resolve the encounter.

    Args:
        elements: Keplerian elements of the body
        encounter_time: datetime (naive values are UTC), unix seconds, or
            None for the current time
        tol: Kepler solver tolerance
        max_iter: Kepler solver iteration cap

    Returns:
        EncounterResult
    """
    jd = to_jd(encounter_time)
    if not isinstance(encounter_time, datetime):
        encounter_time = jd_to_datetime(jd)

    neo = propagate_body(elements, jd, tol=tol, max_iter=max_iter)
    earth = propagate_earth(jd)
    result = resolve_states(neo, earth, jd, encounter_time=encounter_time)

    if result.is_impact:
        logger.info("Impact at (%.4f, %.4f), %.2f km/s",
                    result.geometry.latitude_deg, result.geometry.longitude_deg,
                    result.relative_velocity_kms)
    else:
        logger.info("Miss: %.2f km from Earth's center at %.2f km/s",
                    result.miss_distance_km, result.relative_velocity_kms)
    return result
