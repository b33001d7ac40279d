"""
Route resolution with graceful fallback.

A resolution walks a small state machine:

    PROVIDER ──(failure / timeout / nothing usable)──> FALLBACK_CURVE
    FALLBACK_CURVE ──(synthesis failed)──> FALLBACK_LINE

Each state is handled by one step function that either produces a
ResolvedRoute or names the next state. FALLBACK_LINE always produces a
route, so every resolution of two valid coordinates ends with exactly one
ResolvedRoute and exactly one callback.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import replace
from enum import Enum
from typing import Any
from uuid import uuid4

from .errors import InvalidWaypoints, NoRouteFound, ProviderUnavailable
from .fallback import curved_route, straight_route
from .hints import build_hints
from .logging_config import get_logger, resolution_id_ctx
from .metrics import provider_failures_total, provider_latency_seconds, route_resolutions_total
from .models import Coordinate, Provenance, ResolvedRoute, RouteCandidate
from .providers.base import RoutingProvider
from .selection import select_shortest
from .settings import Settings, settings

logger = get_logger(__name__)

RouteCallback = Callable[[ResolvedRoute], None]


class ResolutionState(Enum):
    PROVIDER = "provider"
    FALLBACK_CURVE = "fallback_curve"
    FALLBACK_LINE = "fallback_line"


StepOutcome = ResolvedRoute | ResolutionState


def normalize_waypoints(waypoints: Sequence[Any]) -> tuple[Coordinate, Coordinate]:
    """
    Validate a waypoint list and return its first two points as Coordinates.

    Raises:
        InvalidWaypoints: Fewer than two waypoints.
        InvalidCoordinate: One of the first two points is not a valid coordinate.
    """
    if waypoints is None or len(waypoints) < 2:
        count = 0 if waypoints is None else len(waypoints)
        raise InvalidWaypoints(f"need at least two waypoints, got {count}")
    return Coordinate.parse(waypoints[0]), Coordinate.parse(waypoints[1])


def coerce_candidates(raw: Any) -> list[RouteCandidate]:
    """
    Turn whatever the provider returned into valid RouteCandidates.

    Items that are RouteCandidates pass through; mappings shaped like
    ``{"distance", "duration", "coordinates"}`` are converted; anything else
    is dropped.

    Raises:
        ProviderUnavailable: The response is not a sequence of candidates at all.
    """
    if raw is None:
        return []
    if isinstance(raw, (str, bytes, Mapping)) or not isinstance(raw, Iterable):
        raise ProviderUnavailable(f"provider returned {type(raw).__name__}, expected a sequence")

    candidates: list[RouteCandidate] = []
    for index, item in enumerate(raw):
        if isinstance(item, RouteCandidate):
            candidates.append(item)
            continue
        try:
            candidates.append(
                RouteCandidate(
                    distance_m=item["distance"],
                    duration_s=item["duration"],
                    path=tuple(item["coordinates"]),
                )
            )
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("candidate_dropped", index=index, reason=str(exc))
    return candidates


class RouteResolver:
    """
    Turns a two-point waypoint list into exactly one ResolvedRoute.

    Args:
        provider: Routing provider queried once per resolution.
        on_route_resolved: Called once with every route this resolver produces.
        timeout_s: Bound on the provider fetch; defaults to PROVIDER_TIMEOUT_SECONDS.
        speed_kmh: Speed for fallback durations; defaults to URBAN_SPEED_KMH.
        config: Settings used for rendering hints.
    """

    def __init__(
        self,
        provider: RoutingProvider,
        *,
        on_route_resolved: RouteCallback | None = None,
        timeout_s: float | None = None,
        speed_kmh: float | None = None,
        config: Settings | None = None,
    ):
        self.provider = provider
        self.on_route_resolved = on_route_resolved
        self.config = config or settings
        self.timeout_s = timeout_s if timeout_s is not None else self.config.PROVIDER_TIMEOUT_SECONDS
        self.speed_kmh = speed_kmh if speed_kmh is not None else self.config.URBAN_SPEED_KMH
        self._steps: dict[ResolutionState, Callable[[Coordinate, Coordinate], Any]] = {
            ResolutionState.PROVIDER: self._fetch_from_provider,
            ResolutionState.FALLBACK_CURVE: self._synthesize_curve,
            ResolutionState.FALLBACK_LINE: self._synthesize_line,
        }

    async def resolve(self, waypoints: Sequence[Any]) -> ResolvedRoute:
        origin, destination = normalize_waypoints(waypoints)
        if len(waypoints) > 2:
            logger.debug("extra_waypoints_ignored", count=len(waypoints) - 2)

        ctx_token = resolution_id_ctx.set(uuid4().hex[:12])
        try:
            # a zero-length trip never needs the provider
            state = (
                ResolutionState.FALLBACK_CURVE
                if origin == destination
                else ResolutionState.PROVIDER
            )
            route = await self._run(state, origin, destination)
            route = replace(route, hints=build_hints(route.provenance, route.path, self.config))

            route_resolutions_total.labels(provenance=route.provenance.value).inc()
            logger.info(
                "route_resolved",
                provenance=route.provenance.value,
                distance_m=round(route.distance_m, 1),
                duration_s=round(route.duration_s, 1),
                points=len(route.path),
            )
            if self.on_route_resolved is not None:
                self.on_route_resolved(route)
            return route
        finally:
            resolution_id_ctx.reset(ctx_token)

    async def _run(
        self, state: ResolutionState, origin: Coordinate, destination: Coordinate
    ) -> ResolvedRoute:
        while True:
            outcome = self._steps[state](origin, destination)
            if asyncio.iscoroutine(outcome):
                outcome = await outcome
            if isinstance(outcome, ResolvedRoute):
                return outcome
            logger.info("fallback_engaged", from_state=state.value, to_state=outcome.value)
            state = outcome

    async def _fetch_from_provider(self, origin: Coordinate, destination: Coordinate) -> StepOutcome:
        started = time.perf_counter()
        try:
            raw = await asyncio.wait_for(
                self.provider.fetch_routes(origin, destination), timeout=self.timeout_s
            )
            candidates = coerce_candidates(raw)
            best = select_shortest(candidates)
            if best is None:
                raise NoRouteFound("provider returned no usable candidates")
        except asyncio.TimeoutError:
            provider_failures_total.labels(reason="timeout").inc()
            logger.warning("provider_failed", reason="timeout", timeout_s=self.timeout_s)
            return ResolutionState.FALLBACK_CURVE
        except NoRouteFound as exc:
            provider_failures_total.labels(reason="no_route").inc()
            logger.warning("provider_failed", reason="no_route", error=str(exc))
            return ResolutionState.FALLBACK_CURVE
        except Exception as exc:  # noqa: BLE001 - any provider failure means fall back
            provider_failures_total.labels(reason="unavailable").inc()
            logger.warning(
                "provider_failed",
                reason="unavailable",
                error=str(exc),
                error_type=type(exc).__name__,
            )
            return ResolutionState.FALLBACK_CURVE
        finally:
            provider_latency_seconds.observe(time.perf_counter() - started)

        logger.debug(
            "candidates_received",
            count=len(candidates),
            provider=getattr(self.provider, "name", type(self.provider).__name__),
        )
        return ResolvedRoute(
            distance_m=best.distance_m,
            duration_s=best.duration_s,
            path=best.path,
            provenance=Provenance.PROVIDER,
        )

    def _synthesize_curve(self, origin: Coordinate, destination: Coordinate) -> StepOutcome:
        try:
            return curved_route(origin, destination, speed_kmh=self.speed_kmh)
        except Exception as exc:  # noqa: BLE001 - the straight line is the last resort
            logger.error("curved_fallback_failed", error=str(exc), exc_info=True)
            return ResolutionState.FALLBACK_LINE

    def _synthesize_line(self, origin: Coordinate, destination: Coordinate) -> StepOutcome:
        return straight_route(origin, destination, speed_kmh=self.speed_kmh)


async def resolve_route(
    origin: Any,
    destination: Any,
    provider: RoutingProvider,
    *,
    on_route_resolved: RouteCallback | None = None,
    timeout_s: float | None = None,
) -> ResolvedRoute:
    """One-shot helper: resolve a single origin/destination pair."""
    resolver = RouteResolver(
        provider, on_route_resolved=on_route_resolved, timeout_s=timeout_s
    )
    return await resolver.resolve([origin, destination])


__all__ = [
    "ResolutionState",
    "RouteResolver",
    "coerce_candidates",
    "normalize_waypoints",
    "resolve_route",
]
