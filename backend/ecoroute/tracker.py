"""
Keeps "the currently displayed route" in step with the latest waypoints.

Every waypoint change gets a new token. A resolution that finishes after a
newer change has been issued is discarded instead of overwriting the newer
route. With ``cancel_stale`` set, the superseded in-flight resolution is
also cancelled.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Sequence
from typing import Any

from .logging_config import get_logger
from .metrics import stale_routes_discarded_total
from .models import ResolvedRoute
from .resolver import RouteResolver, normalize_waypoints

logger = get_logger(__name__)

RouteListener = Callable[[ResolvedRoute | None], None]


class RouteTracker:
    """
    Owns the displayed route for one map view.

    Usage:
        tracker = RouteTracker(RouteResolver(provider))
        tracker.on_route_applied(redraw)

        # whenever the user moves a marker:
        tracker.update_waypoints([origin, destination])
        route = await tracker.wait()
    """

    def __init__(self, resolver: RouteResolver, *, cancel_stale: bool = True) -> None:
        self.resolver = resolver
        self.cancel_stale = cancel_stale
        self._token = 0
        self._task: asyncio.Task[ResolvedRoute] | None = None
        self._current: ResolvedRoute | None = None
        self._listeners: list[RouteListener] = []

    @property
    def current_route(self) -> ResolvedRoute | None:
        return self._current

    @property
    def token(self) -> int:
        return self._token

    def on_route_applied(self, listener: RouteListener) -> None:
        """Register a listener called whenever the displayed route changes."""
        self._listeners.append(listener)

    def update_waypoints(self, waypoints: Sequence[Any] | None) -> asyncio.Task[ResolvedRoute] | None:
        """
        Start resolving a new waypoint list; must be called inside a running loop.

        Fewer than two waypoints clears the displayed route and returns None.
        Invalid coordinates raise immediately and leave the current route alone.
        """
        if waypoints is not None and len(waypoints) >= 2:
            normalize_waypoints(waypoints)

        self._token += 1
        token = self._token
        if self.cancel_stale and self._task is not None and not self._task.done():
            self._task.cancel()
            logger.info("resolution_cancelled", superseded_by=token)

        if waypoints is None or len(waypoints) < 2:
            self._task = None
            self._apply(None)
            return None

        self._task = asyncio.create_task(self._resolve(token, list(waypoints)))
        return self._task

    async def wait(self) -> ResolvedRoute | None:
        """Wait for the latest resolution and return the displayed route."""
        while self._task is not None:
            task = self._task
            try:
                await task
            except asyncio.CancelledError:
                if task is self._task:
                    raise
                continue
            if task is self._task:
                break
        return self._current

    async def close(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        self._task = None

    async def _resolve(self, token: int, waypoints: list[Any]) -> ResolvedRoute:
        route = await self.resolver.resolve(waypoints)
        if token != self._token:
            stale_routes_discarded_total.inc()
            logger.info("stale_route_discarded", token=token, latest=self._token)
            return route
        self._apply(route)
        return route

    def _apply(self, route: ResolvedRoute | None) -> None:
        self._current = route
        for listener in self._listeners:
            listener(route)


__all__ = ["RouteTracker"]
