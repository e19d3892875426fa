# geo_utils.py
# Pure mathematical / geographic helper functions.
# No side effects; only depends on the Coord model.

import math
from typing import Sequence

import numpy as np

from .models import Coord


EARTH_RADIUS_KM = 6371.0


def haversine_distance(a: Coord, b: Coord) -> float:
    """
    Great-circle distance between two points in kilometres.

    Args:
        a: Origin.
        b: Destination.

    Returns:
        Distance in kilometres. NaN inputs give NaN.
    """
    d_lat = math.radians(b.lat - a.lat)
    d_lon = math.radians(b.lon - a.lon)
    h = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(a.lat))
        * math.cos(math.radians(b.lat))
        * math.sin(d_lon / 2) ** 2
    )
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def interpolate(a: Coord, b: Coord, t: float) -> Coord:
    """Linear interpolation of lat and lon at fraction t (not clamped)."""
    return Coord(
        a.lat + (b.lat - a.lat) * t,
        a.lon + (b.lon - a.lon) * t,
    )


def calculate_bearing(a: Coord, b: Coord) -> float:
    """
    Forward azimuth (bearing) from a to b in degrees [0, 360).

    Args:
        a: Origin.
        b: Destination.

    Returns:
        Bearing in degrees, clockwise from north.
    """
    rlat1, rlon1 = math.radians(a.lat), math.radians(a.lon)
    rlat2, rlon2 = math.radians(b.lat), math.radians(b.lon)
    d_lon = rlon2 - rlon1
    y = math.sin(d_lon) * math.cos(rlat2)
    x = math.cos(rlat1) * math.sin(rlat2) - math.sin(rlat1) * math.cos(rlat2) * math.cos(d_lon)
    return (math.degrees(math.atan2(y, x)) + 360) % 360


def normalize_angle(angle: float) -> float:
    """Fold an angle in degrees into (-180, 180]."""
    diff = angle % 360
    if diff > 180:
        diff -= 360
    return diff


def turn_angle(prev: Coord, curr: Coord, nxt: Coord) -> float:
    """
    Signed heading change at `curr`, in degrees (-180, 180].

    Negative values are left turns, positive values right turns.
    """
    b1 = calculate_bearing(prev, curr)
    b2 = calculate_bearing(curr, nxt)
    return normalize_angle(b2 - b1)


def polyline_length_km(coords: Sequence[Coord]) -> float:
    """Total haversine length of a polyline in kilometres."""
    if len(coords) < 2:
        return 0.0
    pts = np.radians(np.array([(c.lat, c.lon) for c in coords], dtype=float))
    lat1, lat2 = pts[:-1, 0], pts[1:, 0]
    d_lat = lat2 - lat1
    d_lon = pts[1:, 1] - pts[:-1, 1]
    h = np.sin(d_lat / 2) ** 2 + np.cos(lat1) * np.cos(lat2) * np.sin(d_lon / 2) ** 2
    legs = EARTH_RADIUS_KM * 2 * np.arctan2(np.sqrt(h), np.sqrt(1 - h))
    return float(legs.sum())


def round_half_up(x: float) -> int:
    """Nearest integer with halves rounded up (2.5 -> 3, -2.5 -> -2)."""
    return math.floor(x + 0.5)


def format_distance(km: float) -> str:
    """'240m' below one kilometre, '1.3km' otherwise."""
    if km < 1:
        return f"{round_half_up(km * 1000)}m"
    return f"{km:.1f}km"
