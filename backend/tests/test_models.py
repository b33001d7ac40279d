"""Tests for coordinates, candidates and resolved routes."""

from __future__ import annotations

import math

import pytest
from backend.ecoroute.errors import InvalidCoordinate
from backend.ecoroute.models import (
    Coordinate,
    Provenance,
    ResolvedRoute,
    RouteCandidate,
)


class TestCoordinate:
    """Coordinate construction and parsing."""

    def test_valid_coordinate(self):
        point = Coordinate(40.758, -73.9855)
        assert point.as_tuple() == (40.758, -73.9855)

    def test_integers_become_floats(self):
        point = Coordinate(10, 20)
        assert isinstance(point.lat, float)
        assert isinstance(point.lng, float)

    @pytest.mark.parametrize(
        "lat, lng, word",
        [
            (91.0, 0.0, "latitude"),
            (-90.5, 0.0, "latitude"),
            (0.0, 180.1, "longitude"),
            (0.0, -181.0, "longitude"),
        ],
    )
    def test_out_of_range_rejected(self, lat, lng, word):
        with pytest.raises(InvalidCoordinate) as exc_info:
            Coordinate(lat, lng)
        assert word in str(exc_info.value)

    def test_boundaries_accepted(self):
        assert Coordinate(90, 180).lat == 90
        assert Coordinate(-90, -180).lng == -180

    @pytest.mark.parametrize("bad", [math.nan, math.inf, "north", None, True])
    def test_non_numbers_rejected(self, bad):
        with pytest.raises(InvalidCoordinate):
            Coordinate(bad, 0)

    def test_invalid_coordinate_is_value_error(self):
        with pytest.raises(ValueError):
            Coordinate(100, 0)

    @pytest.mark.parametrize(
        "raw",
        [
            (40.758, -73.9855),
            [40.758, -73.9855],
            {"lat": 40.758, "lng": -73.9855},
            {"lat": 40.758, "lon": -73.9855},
            "40.758, -73.9855",
        ],
    )
    def test_parse_shapes(self, raw):
        assert Coordinate.parse(raw) == Coordinate(40.758, -73.9855)

    def test_parse_passes_coordinate_through(self, times_square):
        assert Coordinate.parse(times_square) is times_square

    @pytest.mark.parametrize("raw", ["40.7", {"lat": 1}, (1, 2, 3), 42])
    def test_parse_rejects_unknown_shapes(self, raw):
        with pytest.raises(InvalidCoordinate):
            Coordinate.parse(raw)


class TestRouteCandidate:
    def test_path_is_normalized(self):
        candidate = RouteCandidate(
            distance_m=10, duration_s=2, path=[(0, 0), {"lat": 0, "lng": 0.001}]
        )
        assert candidate.path == (Coordinate(0, 0), Coordinate(0, 0.001))
        assert candidate.distance_m == 10.0

    def test_negative_distance_rejected(self, times_square, central_park):
        with pytest.raises(ValueError):
            RouteCandidate(distance_m=-1, duration_s=0, path=(times_square, central_park))

    def test_nan_duration_rejected(self, times_square, central_park):
        with pytest.raises(ValueError):
            RouteCandidate(distance_m=1, duration_s=math.nan, path=(times_square, central_park))

    def test_single_point_path_rejected(self, times_square):
        with pytest.raises(ValueError):
            RouteCandidate(distance_m=0, duration_s=0, path=(times_square,))


class TestResolvedRoute:
    def _route(self, times_square, central_park, duration_s):
        return ResolvedRoute(
            distance_m=3035.4,
            duration_s=duration_s,
            path=(times_square, central_park),
            provenance=Provenance.FALLBACK_LINE,
        )

    def test_minute_rounding_half_up(self, times_square, central_park):
        assert self._route(times_square, central_park, 89).duration_minutes == 1
        assert self._route(times_square, central_park, 90).duration_minutes == 2
        assert self._route(times_square, central_park, 0).duration_minutes == 0

    def test_distance_km(self, times_square, central_park):
        assert self._route(times_square, central_park, 60).distance_km == 3.035

    def test_to_dict(self, times_square, central_park):
        payload = self._route(times_square, central_park, 60).to_dict()
        assert payload["coordinates"] == [[40.758, -73.9855], [40.7812, -73.9665]]
        assert payload["provenance"] == "fallback-tier-2"
        assert payload["tier"] == 2
        assert payload["durationMinutes"] == 1
        assert payload["hints"] is None

    def test_origin_and_destination(self, times_square, central_park):
        route = self._route(times_square, central_park, 60)
        assert route.origin == times_square
        assert route.destination == central_park


class TestProvenance:
    def test_tiers(self):
        assert Provenance.PROVIDER.tier is None
        assert Provenance.FALLBACK_CURVE.tier == 1
        assert Provenance.FALLBACK_LINE.tier == 2

    def test_is_fallback(self):
        assert not Provenance.PROVIDER.is_fallback
        assert Provenance.FALLBACK_CURVE.is_fallback
        assert Provenance.FALLBACK_LINE.is_fallback
