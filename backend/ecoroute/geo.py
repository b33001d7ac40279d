# Pure geographic helpers: distances, durations, interpolation and bounds.
# No side effects, no I/O.

from __future__ import annotations

import math
from collections.abc import Sequence

from .models import Bounds, Coordinate

EARTH_RADIUS_M = 6_371_000.0
DEFAULT_URBAN_SPEED_KMH = 40.0


def haversine_m(origin: Coordinate, destination: Coordinate) -> float:
    """
    Great-circle distance between two points in metres.

    Args:
        origin: Start point.
        destination: End point.

    Returns:
        Distance in metres; exactly 0.0 for identical points.
    """
    d_lat = math.radians(destination.lat - origin.lat)
    d_lng = math.radians(destination.lng - origin.lng)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(origin.lat))
        * math.cos(math.radians(destination.lat))
        * math.sin(d_lng / 2) ** 2
    )
    # rounding can push a just past 1 near antipodal points
    a = min(1.0, max(0.0, a))
    return EARTH_RADIUS_M * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def estimate_duration_s(distance_m: float, speed_kmh: float = DEFAULT_URBAN_SPEED_KMH) -> float:
    """
    Travel time in seconds for a distance at a constant average speed.

    Args:
        distance_m: Distance in metres (non-negative).
        speed_kmh: Average speed in km/h; the urban default is 40 km/h.

    Returns:
        ``distance_m / (speed_kmh / 3.6)``.
    """
    if distance_m < 0:
        raise ValueError(f"distance must be non-negative, got {distance_m}")
    if speed_kmh <= 0:
        raise ValueError(f"speed must be positive, got {speed_kmh}")
    return distance_m / (speed_kmh / 3.6)


def path_length_m(path: Sequence[Coordinate]) -> float:
    """Sum of the haversine distances between consecutive points."""
    return sum(haversine_m(a, b) for a, b in zip(path, path[1:]))


def interpolate(origin: Coordinate, destination: Coordinate, fraction: float) -> Coordinate:
    """
    Linear interpolation in lat/lng space; fraction 0 is origin, 1 is destination.

    Longitude takes the shorter way round, so a pair straddling the
    antimeridian interpolates across it rather than around the globe.
    """
    d_lng = destination.lng - origin.lng
    if d_lng > 180:
        d_lng -= 360
    elif d_lng < -180:
        d_lng += 360
    lng = origin.lng + d_lng * fraction
    if lng > 180:
        lng -= 360
    elif lng < -180:
        lng += 360
    return Coordinate(origin.lat + (destination.lat - origin.lat) * fraction, lng)


def bounds_of(path: Sequence[Coordinate]) -> Bounds:
    if not path:
        raise ValueError("cannot compute bounds of an empty path")
    lats = [point.lat for point in path]
    lngs = [point.lng for point in path]
    return Bounds(
        south_west=Coordinate(min(lats), min(lngs)),
        north_east=Coordinate(max(lats), max(lngs)),
    )


__all__ = [
    "DEFAULT_URBAN_SPEED_KMH",
    "EARTH_RADIUS_M",
    "bounds_of",
    "estimate_duration_s",
    "haversine_m",
    "interpolate",
    "path_length_m",
]
