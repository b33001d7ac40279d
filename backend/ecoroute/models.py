from __future__ import annotations

import math
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .errors import InvalidCoordinate


def _to_float(value: Any, name: str) -> float:
    if isinstance(value, bool):
        raise InvalidCoordinate(f"{name} must be a number, got {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidCoordinate(f"{name} must be a number, got {value!r}") from exc
    if not math.isfinite(number):
        raise InvalidCoordinate(f"{name} must be finite, got {value!r}")
    return number


@dataclass(frozen=True, slots=True)
class Coordinate:
    """WGS84 latitude/longitude in degrees. Range-checked on construction."""

    lat: float
    lng: float

    def __post_init__(self) -> None:
        lat = _to_float(self.lat, "latitude")
        lng = _to_float(self.lng, "longitude")
        if not (-90 <= lat <= 90):
            raise InvalidCoordinate(f"latitude must be between -90 and 90, got {lat}")
        if not (-180 <= lng <= 180):
            raise InvalidCoordinate(f"longitude must be between -180 and 180, got {lng}")
        object.__setattr__(self, "lat", lat)
        object.__setattr__(self, "lng", lng)

    @classmethod
    def parse(cls, value: Any) -> Coordinate:
        """
        Accept the shapes callers hand us for a point.

        Supported: a Coordinate, a ``(lat, lng)`` pair, a mapping with ``lat`` and
        ``lng``/``lon`` keys, or a ``"lat,lng"`` string.
        """
        if isinstance(value, Coordinate):
            return value
        if isinstance(value, str):
            parts = value.split(",")
            if len(parts) != 2:
                raise InvalidCoordinate(f"expected 'lat,lng', got {value!r}")
            return cls(parts[0].strip(), parts[1].strip())
        if isinstance(value, Mapping):
            lng = value.get("lng", value.get("lon"))
            if "lat" not in value or lng is None:
                raise InvalidCoordinate(f"mapping needs lat and lng keys, got {dict(value)!r}")
            return cls(value["lat"], lng)
        if isinstance(value, Sequence) and len(value) == 2:
            return cls(value[0], value[1])
        raise InvalidCoordinate(f"cannot interpret {value!r} as a coordinate")

    def as_tuple(self) -> tuple[float, float]:
        return (self.lat, self.lng)


def parse_path(points: Iterable[Any]) -> tuple[Coordinate, ...]:
    return tuple(Coordinate.parse(point) for point in points)


@dataclass(frozen=True, slots=True)
class RouteCandidate:
    """One route offered by a provider."""

    distance_m: float
    duration_s: float
    path: tuple[Coordinate, ...]
    summary: str | None = None

    def __post_init__(self) -> None:
        distance = float(self.distance_m)
        duration = float(self.duration_s)
        if not math.isfinite(distance) or distance < 0:
            raise ValueError(f"candidate distance must be a non-negative number, got {distance}")
        if not math.isfinite(duration) or duration < 0:
            raise ValueError(f"candidate duration must be a non-negative number, got {duration}")
        path = parse_path(self.path)
        if len(path) < 2:
            raise ValueError("candidate path needs at least two points")
        object.__setattr__(self, "distance_m", distance)
        object.__setattr__(self, "duration_s", duration)
        object.__setattr__(self, "path", path)


class Provenance(Enum):
    """Where a resolved route came from."""

    PROVIDER = "provider"
    FALLBACK_CURVE = "fallback-tier-1"  # curved interpolation
    FALLBACK_LINE = "fallback-tier-2"  # straight line

    @property
    def tier(self) -> int | None:
        return {Provenance.FALLBACK_CURVE: 1, Provenance.FALLBACK_LINE: 2}.get(self)

    @property
    def is_fallback(self) -> bool:
        return self is not Provenance.PROVIDER


@dataclass(frozen=True, slots=True)
class Bounds:
    south_west: Coordinate
    north_east: Coordinate

    def to_list(self) -> list[list[float]]:
        return [list(self.south_west.as_tuple()), list(self.north_east.as_tuple())]


@dataclass(frozen=True, slots=True)
class LineStyle:
    color: str
    weight: int = 6
    opacity: float = 0.9
    dash_array: str | None = None


@dataclass(frozen=True, slots=True)
class MarkerIcon:
    icon_url: str
    shadow_url: str
    icon_size: tuple[int, int] = (25, 41)
    icon_anchor: tuple[int, int] = (12, 41)


@dataclass(frozen=True, slots=True)
class RenderHints:
    """How a map collaborator should frame and draw a resolved route."""

    padding_px: int
    max_zoom: int
    bounds: Bounds
    line: LineStyle
    marker: MarkerIcon

    def to_dict(self) -> dict[str, Any]:
        return {
            "padding": [self.padding_px, self.padding_px],
            "maxZoom": self.max_zoom,
            "bounds": self.bounds.to_list(),
            "line": {
                "color": self.line.color,
                "weight": self.line.weight,
                "opacity": self.line.opacity,
                "dashArray": self.line.dash_array,
            },
            "marker": {
                "iconUrl": self.marker.icon_url,
                "shadowUrl": self.marker.shadow_url,
                "iconSize": list(self.marker.icon_size),
                "iconAnchor": list(self.marker.icon_anchor),
            },
        }


@dataclass(frozen=True, slots=True)
class ResolvedRoute:
    """The single route handed back to the presentation layer."""

    distance_m: float
    duration_s: float
    path: tuple[Coordinate, ...]
    provenance: Provenance
    hints: RenderHints | None = None

    @property
    def distance_km(self) -> float:
        return round(self.distance_m / 1000.0, 3)

    @property
    def duration_minutes(self) -> int:
        # half-up rounding to whole minutes, shared with every tier
        return int(math.floor(self.duration_s / 60.0 + 0.5))

    @property
    def origin(self) -> Coordinate:
        return self.path[0]

    @property
    def destination(self) -> Coordinate:
        return self.path[-1]

    def to_dict(self) -> dict[str, Any]:
        return {
            "distance": self.distance_m,
            "duration": self.duration_s,
            "durationMinutes": self.duration_minutes,
            "coordinates": [list(point.as_tuple()) for point in self.path],
            "provenance": self.provenance.value,
            "tier": self.provenance.tier,
            "hints": self.hints.to_dict() if self.hints else None,
        }


__all__ = [
    "Bounds",
    "Coordinate",
    "LineStyle",
    "MarkerIcon",
    "Provenance",
    "RenderHints",
    "ResolvedRoute",
    "RouteCandidate",
    "parse_path",
]
