from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from ..models import Coordinate, RouteCandidate


class RoutingProvider(Protocol):
    """
    Anything that can offer candidate routes between two points.

    Implementations may raise any exception or return an empty sequence;
    the resolver treats both as "provider has nothing" and falls back.
    """

    name: str

    async def fetch_routes(
        self, origin: Coordinate, destination: Coordinate
    ) -> Sequence[RouteCandidate]: ...
