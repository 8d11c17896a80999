import math
from math import radians, sin, cos, sqrt, atan2
from typing import Iterable, Tuple

# Earth's radius in kilometers
EARTH_RADIUS_KM = 6371.0

Coordinate = Tuple[float, float]


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """
    Calculate the great circle distance between two points on Earth.

    Args:
        lat1, lng1: Coordinates of the first point (degrees)
        lat2, lng2: Coordinates of the second point (degrees)

    Returns:
        Distance in kilometers
    """
    lat1_rad = radians(lat1)
    lat2_rad = radians(lat2)

    # Haversine formula
    dlat = radians(lat2 - lat1)
    dlng = radians(lng2 - lng1)

    a = sin(dlat / 2)**2 + cos(lat1_rad) * cos(lat2_rad) * sin(dlng / 2)**2
    # Float error can push a a hair past 1 for antipodal points
    a = min(1.0, max(0.0, a))
    c = 2 * atan2(sqrt(a), sqrt(1 - a))

    return EARTH_RADIUS_KM * c


def cumulative_distance(points: Iterable[Coordinate]) -> float:
    """
    Sum the distances between consecutive points.

    Points must already be in chronological order. Only neighbours are
    measured, so the result is the length of the path travelled, not a sum
    over all pairs. The total is left unrounded.
    """
    total = 0.0
    previous = None
    for point in points:
        if previous is not None:
            total += haversine_km(previous[0], previous[1], point[0], point[1])
        previous = point
    return total


def round_km(distance_km: float) -> int:
    """Round a distance half-up to whole kilometres for responses."""
    return int(math.floor(distance_km + 0.5))
