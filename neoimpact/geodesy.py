"""
Spherical-Earth geodesy helpers.
"""
import math
from typing import List, Tuple

from .constants import EARTH_RADIUS_M
from .config import DEFAULT_TRACK_LENGTH_M, DEFAULT_TRACK_STEPS, DEFAULT_TRACK_ALTITUDE_STEP_KM


def normalize_lon(lon: float) -> float:
    """Wrap a longitude (deg) into [-180, 180)."""
    return ((lon + 180.0) % 360.0) - 180.0


def arc_from_meters(meters: float) -> float:
    """Central angle (radians) subtended by a surface distance on the sphere."""
    return meters / EARTH_RADIUS_M


def gc_destination(lat_deg: float, lon_deg: float, bearing_deg: float, arc_rad: float) -> Tuple[float, float]:
    """
    Great-circle destination from a start point, bearing and arc length.

    Args:
        lat_deg: Start latitude (deg)
        lon_deg: Start longitude (deg)
        bearing_deg: Initial bearing, clockwise from north (deg)
        arc_rad: Central angle to travel (radians). Negative values travel
            backwards along the bearing.

    Returns:
        (lat, lon) of the destination in degrees, lon in [-180, 180)
    """
    lat1 = math.radians(lat_deg)
    lon1 = math.radians(lon_deg)
    brg = math.radians(bearing_deg)

    lat2 = math.asin(math.sin(lat1) * math.cos(arc_rad) + math.cos(lat1) * math.sin(arc_rad) * math.cos(brg))
    lon2 = lon1 + math.atan2(
        math.sin(brg) * math.sin(arc_rad) * math.cos(lat1),
        math.cos(arc_rad) - math.sin(lat1) * math.sin(lat2)
    )
    return math.degrees(lat2), normalize_lon(math.degrees(lon2))


def approach_track(lat_deg: float, lng_deg: float, azimuth_deg: float,
                   length_m: float = DEFAULT_TRACK_LENGTH_M,
                   steps: int = DEFAULT_TRACK_STEPS,
                   altitude_step_km: float = DEFAULT_TRACK_ALTITUDE_STEP_KM) -> List[dict]:
    """
    Polyline of the incoming path, walked back from the impact point.

    Points are spaced evenly along the great circle through the impact
    point opposite to the approach azimuth, with altitude growing linearly.
    The first point is the impact point itself.
    """
    bearing = azimuth_deg + 180.0
    spacing = length_m / steps
    track = []
    for k in range(steps + 1):
        lat, lng = gc_destination(lat_deg, lng_deg, bearing, arc_from_meters(k * spacing))
        track.append({'lat': lat, 'lng': lng, 'altitude_km': k * altitude_step_km})
    return track
