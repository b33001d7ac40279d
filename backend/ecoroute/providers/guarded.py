from __future__ import annotations

from collections.abc import Sequence

from ..circuit_breaker import CircuitBreaker, get_circuit_breaker
from ..errors import NoRouteFound
from ..models import Coordinate, RouteCandidate
from ..settings import settings
from .base import RoutingProvider


class GuardedProvider:
    """
    Wraps a provider in a circuit breaker.

    While the breaker is open, fetches fail immediately with CircuitOpenError so
    the resolver goes straight to its fallback. A NoRouteFound answer means the
    provider is healthy and does not count against it.
    """

    def __init__(self, provider: RoutingProvider, breaker: CircuitBreaker | None = None):
        self.provider = provider
        self.name = f"guarded:{provider.name}"
        self.breaker = breaker or get_circuit_breaker(
            f"routing:{provider.name}",
            failure_threshold=settings.CIRCUIT_FAILURE_THRESHOLD,
            cooldown_seconds=settings.CIRCUIT_COOLDOWN_SECONDS,
            enabled=settings.CIRCUIT_BREAKER_ENABLED,
            ignored_exceptions=(NoRouteFound,),
        )

    async def fetch_routes(
        self, origin: Coordinate, destination: Coordinate
    ) -> Sequence[RouteCandidate]:
        return await self.breaker.call(self.provider.fetch_routes, origin, destination)


__all__ = ["GuardedProvider"]
