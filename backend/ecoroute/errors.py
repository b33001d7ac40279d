"""Error taxonomy for route resolution."""

from __future__ import annotations


class RoutingError(Exception):
    """Base class for every error raised by this package."""


class InvalidCoordinate(RoutingError, ValueError):
    """A latitude/longitude pair is out of range, non-finite or unparsable."""


class InvalidWaypoints(RoutingError, ValueError):
    """Fewer than two waypoints were supplied for a resolution."""


class ProviderUnavailable(RoutingError):
    """The routing provider failed: transport error, bad status, bad body or timeout."""


class NoRouteFound(RoutingError):
    """The provider answered but offered no usable candidate."""


class FallbackError(RoutingError):
    """A fallback tier could not produce a usable route."""


__all__ = [
    "RoutingError",
    "InvalidCoordinate",
    "InvalidWaypoints",
    "ProviderUnavailable",
    "NoRouteFound",
    "FallbackError",
]
