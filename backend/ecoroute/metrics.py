"""Prometheus metrics for route resolution."""

from __future__ import annotations

from prometheus_client import Counter, Histogram, Info

# ==============================================================================
# APPLICATION INFO
# ==============================================================================

app_info = Info("ecoroute", "Route resolution core information")
app_info.info({"version": "0.1.0", "service": "ecoroute"})

# ==============================================================================
# RESOLUTION METRICS
# ==============================================================================

route_resolutions_total = Counter(
    "ecoroute_resolutions_total",
    "Resolved routes by provenance",
    ["provenance"],
)

provider_failures_total = Counter(
    "ecoroute_provider_failures_total",
    "Routing provider failures that triggered a fallback",
    ["reason"],  # unavailable | timeout | no_route
)

provider_latency_seconds = Histogram(
    "ecoroute_provider_latency_seconds",
    "Routing provider fetch latency",
    buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)

stale_routes_discarded_total = Counter(
    "ecoroute_stale_routes_discarded_total",
    "Resolutions that finished after a newer waypoint change",
)


__all__ = [
    "provider_failures_total",
    "provider_latency_seconds",
    "route_resolutions_total",
    "stale_routes_discarded_total",
]
