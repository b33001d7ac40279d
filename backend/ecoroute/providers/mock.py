"""
Offline routing provider for demos and tests.

Paths bow away from the straight origin-destination line along a half sine
wave. Each request seeds its own generator from the provider seed and the
request itself, so the same question always gets the same answer.
"""

from __future__ import annotations

import asyncio
import math
import random

from ..geo import estimate_duration_s, path_length_m
from ..models import Coordinate, RouteCandidate
from ..settings import settings

PATH_SEGMENTS = 10
SHARED_RIDE_CURVE = 0.005
DEFAULT_CURVE = 0.015
CURVE_JITTER = 0.25


def mode_speed_kmh(mode: str) -> float:
    if mode == "walking":
        return settings.WALKING_SPEED_KMH
    if mode in ("cycling", "bike-share"):
        return settings.CYCLING_SPEED_KMH
    return settings.URBAN_SPEED_KMH


def curved_path(
    origin: Coordinate,
    destination: Coordinate,
    curve_factor: float,
    segments: int = PATH_SEGMENTS,
) -> tuple[Coordinate, ...]:
    points = [origin]
    for i in range(1, segments):
        ratio = i / segments
        lat = origin.lat + (destination.lat - origin.lat) * ratio
        lng = origin.lng + (destination.lng - origin.lng) * ratio
        curve = math.sin(ratio * math.pi) * curve_factor
        points.append(
            Coordinate(
                lat + curve * (origin.lng - destination.lng),
                lng + curve * (destination.lat - origin.lat),
            )
        )
    points.append(destination)
    return tuple(points)


class MockRoutingProvider:
    """
    Seeded stand-in for a real routing engine.

    Args:
        mode: Travel mode; picks the curvature and the speed used for durations.
        alternatives: Number of extra candidates to return after the main one.
        seed: Base seed; defaults to MOCK_SEED from settings.
        latency_s: Simulated network delay before answering.
    """

    name = "mock"

    def __init__(
        self,
        mode: str = "driving",
        *,
        alternatives: int = 0,
        seed: int | None = None,
        latency_s: float = 0.0,
    ):
        self.mode = mode
        self.alternatives = max(0, alternatives)
        self.seed = settings.MOCK_SEED if seed is None else seed
        self.latency_s = latency_s

    def _rng(self, origin: Coordinate, destination: Coordinate) -> random.Random:
        key = f"{self.seed}:{self.mode}:{origin.lat},{origin.lng}:{destination.lat},{destination.lng}"
        return random.Random(key)

    async def fetch_routes(
        self, origin: Coordinate, destination: Coordinate
    ) -> list[RouteCandidate]:
        if self.latency_s:
            await asyncio.sleep(self.latency_s)

        rng = self._rng(origin, destination)
        base_curve = SHARED_RIDE_CURVE if self.mode == "shared-ride" else DEFAULT_CURVE
        speed = mode_speed_kmh(self.mode)

        candidates = []
        for index in range(self.alternatives + 1):
            # alternates bow to alternating sides, each a little wider
            side = -1 if index % 2 else 1
            factor = side * base_curve * (1 + index) * (1 + rng.uniform(-CURVE_JITTER, CURVE_JITTER))
            path = curved_path(origin, destination, factor)
            distance = path_length_m(path)
            candidates.append(
                RouteCandidate(
                    distance_m=distance,
                    duration_s=estimate_duration_s(distance, speed),
                    path=path,
                    summary=f"{self.mode} #{index + 1}",
                )
            )
        return candidates


__all__ = ["MockRoutingProvider", "curved_path", "mode_speed_kmh"]
