"""
Local route synthesis used when the routing provider has nothing for us.

Tier 1 draws a four-point path through the 1/3 and 2/3 points between origin
and destination and reports the piecewise length of that path, so the
distance always matches what is drawn. Tier 2 is a bare straight line and
must never fail for two valid coordinates.
"""

from __future__ import annotations

import math

from .errors import FallbackError
from .geo import DEFAULT_URBAN_SPEED_KMH, estimate_duration_s, haversine_m, interpolate, path_length_m
from .models import Coordinate, Provenance, ResolvedRoute

CURVE_FRACTIONS = (1 / 3, 2 / 3)


def curved_route(
    origin: Coordinate,
    destination: Coordinate,
    *,
    speed_kmh: float = DEFAULT_URBAN_SPEED_KMH,
) -> ResolvedRoute:
    """
    Tier-1 fallback: origin, two interpolated midpoints, destination.

    Raises:
        FallbackError: If the synthesized path or its metrics are unusable.
    """
    try:
        midpoints = [interpolate(origin, destination, fraction) for fraction in CURVE_FRACTIONS]
        path = (origin, *midpoints, destination)
        distance = path_length_m(path)
        duration = estimate_duration_s(distance, speed_kmh)
    except (ArithmeticError, ValueError) as exc:
        raise FallbackError(f"curved fallback failed: {exc}") from exc

    if not (math.isfinite(distance) and math.isfinite(duration)):
        raise FallbackError(f"curved fallback produced non-finite metrics ({distance}, {duration})")

    return ResolvedRoute(
        distance_m=distance,
        duration_s=duration,
        path=path,
        provenance=Provenance.FALLBACK_CURVE,
    )


def straight_route(
    origin: Coordinate,
    destination: Coordinate,
    *,
    speed_kmh: float = DEFAULT_URBAN_SPEED_KMH,
) -> ResolvedRoute:
    """Tier-2 fallback: the direct great-circle hop from origin to destination."""
    distance = haversine_m(origin, destination)
    return ResolvedRoute(
        distance_m=distance,
        duration_s=estimate_duration_s(distance, speed_kmh),
        path=(origin, destination),
        provenance=Provenance.FALLBACK_LINE,
    )


__all__ = ["CURVE_FRACTIONS", "curved_route", "straight_route"]
