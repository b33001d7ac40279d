"""Pick the route to display among the candidates a provider returned."""

from __future__ import annotations

from collections.abc import Sequence

from .models import RouteCandidate


def select_shortest(candidates: Sequence[RouteCandidate]) -> RouteCandidate | None:
    """
    Return the candidate with the smallest total distance.

    Equal distances fall back to the smaller duration; a full tie keeps the
    earliest candidate. Returns None for an empty sequence.
    """
    best: RouteCandidate | None = None
    for candidate in candidates:
        if best is None:
            best = candidate
            continue
        # strict comparison keeps the first-seen minimum
        if (candidate.distance_m, candidate.duration_s) < (best.distance_m, best.duration_s):
            best = candidate
    return best


__all__ = ["select_shortest"]
