"""Tests for choosing among provider alternatives."""

from __future__ import annotations

from backend.ecoroute.selection import select_shortest


class TestSelectShortest:
    def test_empty_returns_none(self):
        assert select_shortest([]) is None

    def test_single_candidate(self, candidate):
        only = candidate(1000, 120)
        assert select_shortest([only]) is only

    def test_minimum_distance_wins(self, candidate):
        routes = [candidate(3200, 300), candidate(2900, 400), candidate(3100, 200)]
        assert select_shortest(routes) is routes[1]

    def test_distance_beats_duration(self, candidate):
        """A shorter but slower route still wins."""
        routes = [candidate(2000, 100), candidate(1999, 900)]
        assert select_shortest(routes) is routes[1]

    def test_equal_distance_prefers_shorter_duration(self, candidate):
        routes = [candidate(2500, 400), candidate(2500, 350)]
        assert select_shortest(routes) is routes[1]

    def test_exact_tie_keeps_first_seen(self, candidate):
        routes = [
            candidate(2500, 300, summary="first"),
            candidate(2500, 300, summary="second"),
            candidate(2500, 300, summary="third"),
        ]
        assert select_shortest(routes).summary == "first"

    def test_accepts_any_iterable_sequence(self, candidate):
        routes = (candidate(5, 5), candidate(4, 4))
        assert select_shortest(routes).distance_m == 4
