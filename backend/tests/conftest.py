import asyncio
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from backend.ecoroute.models import Coordinate, RouteCandidate  # noqa: E402


class StubProvider:
    """Provider double: returns canned candidates or raises a canned error."""

    name = "stub"

    def __init__(self, candidates=None, error=None, delay=0.0):
        self.candidates = candidates if candidates is not None else []
        self.error = error
        self.delay = delay
        self.calls = []

    async def fetch_routes(self, origin, destination):
        self.calls.append((origin, destination))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.candidates


@pytest.fixture
def times_square() -> Coordinate:
    return Coordinate(40.7580, -73.9855)


@pytest.fixture
def central_park() -> Coordinate:
    return Coordinate(40.7812, -73.9665)


@pytest.fixture
def stub_provider():
    """Factory fixture building StubProvider instances."""
    return StubProvider


@pytest.fixture
def candidate(times_square, central_park):
    """Factory for candidates between the two sample points."""

    def _make(distance_m, duration_s, summary=None):
        return RouteCandidate(
            distance_m=distance_m,
            duration_s=duration_s,
            path=(times_square, central_park),
            summary=summary,
        )

    return _make
