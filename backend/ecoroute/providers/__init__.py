from .base import RoutingProvider
from .guarded import GuardedProvider
from .mock import MockRoutingProvider
from .osrm import OsrmProvider

__all__ = ["GuardedProvider", "MockRoutingProvider", "OsrmProvider", "RoutingProvider"]
