"""Offline geocoder used by demos to turn typed addresses into waypoints."""

from __future__ import annotations

import asyncio
import random

from .models import Coordinate
from .settings import settings

LANDMARKS: dict[str, Coordinate] = {
    "times square": Coordinate(40.7580, -73.9855),
    "central park": Coordinate(40.7812, -73.9665),
    "brooklyn": Coordinate(40.6782, -73.9442),
    "queens": Coordinate(40.7282, -73.7949),
}

DEFAULT_CENTER = Coordinate(40.7128, -74.0060)
SCATTER_DEG = 0.05


class MockGeocoder:
    """
    Resolves known landmarks by substring match; anything else lands at a
    seeded pseudo-random point near lower Manhattan.
    """

    def __init__(self, seed: int | None = None, latency_s: float = 0.0) -> None:
        self.seed = settings.MOCK_SEED if seed is None else seed
        self.latency_s = latency_s

    def lookup(self, address: str) -> Coordinate:
        query = (address or "").strip().lower()
        if not query:
            raise ValueError("address must not be blank")
        for name, coordinate in LANDMARKS.items():
            if name in query:
                return coordinate
        rng = random.Random(f"{self.seed}:{query}")
        return Coordinate(
            DEFAULT_CENTER.lat + (rng.random() - 0.5) * SCATTER_DEG,
            DEFAULT_CENTER.lng + (rng.random() - 0.5) * SCATTER_DEG,
        )

    async def geocode(self, address: str) -> Coordinate:
        if self.latency_s:
            await asyncio.sleep(self.latency_s)
        return self.lookup(address)


__all__ = ["LANDMARKS", "MockGeocoder"]
