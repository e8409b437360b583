"""
Time scale conversions: calendar time, Julian dates and sidereal time.
"""
from datetime import datetime, timezone, timedelta
from typing import Optional, Union

import jax.numpy as jnp

from .constants import (
    DAY, J2000_JD, UNIX_EPOCH_JD, DAYS_PER_CENTURY,
    GMST_J2000_DEG, GMST_RATE_DEG_PER_DAY, GMST_T2_COEFF, GMST_T3_DIVISOR,
)
from .vector_math import deg2rad

_UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def unix_to_jd(unix_seconds: float) -> float:
    return UNIX_EPOCH_JD + unix_seconds / DAY


def datetime_to_jd(when: datetime) -> float:
    """
    Julian date of a datetime. Naive datetimes are taken to be UTC.
    """
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    return unix_to_jd(when.timestamp())


def jd_to_datetime(jd: float) -> datetime:
    """Timezone-aware UTC datetime for a Julian date."""
    return _UNIX_EPOCH + timedelta(seconds=(jd - UNIX_EPOCH_JD) * DAY)


def to_jd(when: Optional[Union[datetime, float, int]] = None) -> float:
    """
    Julian date of an encounter time.

    Args:
        when: A datetime, unix seconds, or None for the current time.
    """
    if when is None:
        when = datetime.now(timezone.utc)
    if isinstance(when, datetime):
        return datetime_to_jd(when)
    return unix_to_jd(float(when))


def gmst_rad(jd):
    """
    Greenwich Mean Sidereal Time (radians, in [0, 2*pi)) at a Julian date.
    """
    d = jd - J2000_JD
    T = d / DAYS_PER_CENTURY
    gmst_deg = GMST_J2000_DEG + GMST_RATE_DEG_PER_DAY * d + GMST_T2_COEFF * T**2 - T**3 / GMST_T3_DIVISOR
    return deg2rad(jnp.mod(gmst_deg, 360.0))
