"""Great-circle helpers."""
from __future__ import annotations

from math import atan2, cos, degrees, radians, sin, sqrt

from wayfinder.core.models import Coordinate

EARTH_RADIUS_M = 6_371_000.0


def haversine_m(a: Coordinate, b: Coordinate) -> float:
    """Great-circle distance in metres between two WGS-84 points."""
    lat1r, lon1r, lat2r, lon2r = map(radians, [a.lat, a.lon, b.lat, b.lon])
    dlat = lat2r - lat1r
    dlon = lon2r - lon1r
    h = sin(dlat / 2) ** 2 + cos(lat1r) * cos(lat2r) * sin(dlon / 2) ** 2
    return 2 * EARTH_RADIUS_M * atan2(sqrt(h), sqrt(1 - h))


def bearing_deg(a: Coordinate, b: Coordinate) -> float:
    """Initial bearing (degrees clockwise from true north)."""
    lat1r, lon1r, lat2r, lon2r = map(radians, [a.lat, a.lon, b.lat, b.lon])
    dlon = lon2r - lon1r
    x = sin(dlon) * cos(lat2r)
    y = cos(lat1r) * sin(lat2r) - sin(lat1r) * cos(lat2r) * cos(dlon)
    return (degrees(atan2(x, y)) + 360.0) % 360.0


def bearing_to_compass(bearing: float) -> str:
    directions = ["north", "northeast", "east", "southeast",
                  "south", "southwest", "west", "northwest"]
    return directions[round(bearing / 45) % 8]
