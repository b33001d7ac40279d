"""Tests for rendering hints, settings and logging helpers."""

from __future__ import annotations

import asyncio

import pytest
from backend.ecoroute.hints import LINE_STYLES, build_hints, marker_icon
from backend.ecoroute.logging_config import (
    add_app_context,
    add_resolution_id,
    configure_structlog,
    get_logger,
    resolution_id_ctx,
)
from backend.ecoroute.models import Coordinate, Provenance
from backend.ecoroute.resolver import RouteResolver
from backend.ecoroute.settings import Settings
from pydantic import ValidationError


class TestRenderHints:
    @pytest.mark.parametrize(
        "provenance, padding, zoom",
        [
            (Provenance.PROVIDER, 50, 15),
            (Provenance.FALLBACK_CURVE, 50, 15),
            (Provenance.FALLBACK_LINE, 150, 13),
        ],
    )
    def test_padding_and_zoom_by_provenance(self, provenance, padding, zoom, times_square, central_park):
        hints = build_hints(provenance, [times_square, central_park], Settings())
        assert hints.padding_px == padding
        assert hints.max_zoom == zoom
        assert hints.line == LINE_STYLES[provenance]

    def test_straight_line_zooms_out_further(self, times_square, central_park):
        config = Settings()
        tight = build_hints(Provenance.FALLBACK_CURVE, [times_square, central_park], config)
        wide = build_hints(Provenance.FALLBACK_LINE, [times_square, central_park], config)
        assert wide.padding_px > tight.padding_px
        assert wide.max_zoom < tight.max_zoom

    def test_bounds_cover_path(self, times_square, central_park):
        detour = Coordinate(40.79, -73.99)
        hints = build_hints(Provenance.PROVIDER, [times_square, detour, central_park], Settings())
        assert hints.bounds.south_west == Coordinate(40.7580, -73.99)
        assert hints.bounds.north_east == Coordinate(40.79, -73.9665)

    def test_marker_icon_comes_from_config(self):
        config = Settings(MARKER_ICON_URL="https://cdn.test/pin.png", MARKER_SHADOW_URL="https://cdn.test/s.png")
        icon = marker_icon(config)
        assert icon.icon_url == "https://cdn.test/pin.png"
        assert icon.shadow_url == "https://cdn.test/s.png"

    def test_to_dict_shape(self, times_square, central_park):
        payload = build_hints(Provenance.FALLBACK_LINE, [times_square, central_park], Settings()).to_dict()
        assert payload["padding"] == [150, 150]
        assert payload["maxZoom"] == 13
        assert payload["line"]["dashArray"] == "10,10"
        assert payload["bounds"] == [[40.758, -73.9855], [40.7812, -73.9665]]

    def test_resolver_uses_its_config(self, stub_provider, times_square, central_park):
        config = Settings(FIT_PADDING_PX=20, FIT_MAX_ZOOM=17)
        resolver = RouteResolver(stub_provider(), config=config)
        route = asyncio.run(resolver.resolve([times_square, central_park]))
        assert route.hints.padding_px == 20
        assert route.hints.max_zoom == 17


class TestSettings:
    def test_defaults(self):
        config = Settings()
        assert config.URBAN_SPEED_KMH == 40.0
        assert config.OSRM_BASE_URL == "https://router.project-osrm.org"
        assert config.OSRM_PROFILE == "driving"

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("URBAN_SPEED_KMH", "30")
        monkeypatch.setenv("OSRM_PROFILE", "foot")
        config = Settings()
        assert config.URBAN_SPEED_KMH == 30.0
        assert config.OSRM_PROFILE == "foot"

    @pytest.mark.parametrize("field", ["URBAN_SPEED_KMH", "PROVIDER_TIMEOUT_SECONDS"])
    def test_non_positive_values_rejected(self, field):
        with pytest.raises(ValidationError):
            Settings(**{field: 0})

    def test_resolver_speed_from_config(self, stub_provider, times_square, central_park):
        resolver = RouteResolver(stub_provider(), config=Settings(URBAN_SPEED_KMH=20))
        route = asyncio.run(resolver.resolve([times_square, central_park]))
        assert route.duration_s == pytest.approx(route.distance_m / (20 / 3.6))


class TestLogging:
    def test_resolution_id_added_when_set(self):
        token = resolution_id_ctx.set("abc123")
        try:
            event = add_resolution_id(None, "info", {"event": "x"})
        finally:
            resolution_id_ctx.reset(token)
        assert event["resolution_id"] == "abc123"

    def test_resolution_id_absent_outside_resolution(self):
        assert "resolution_id" not in add_resolution_id(None, "info", {"event": "x"})

    def test_app_context(self):
        event = add_app_context(None, "info", {"event": "x"})
        assert event["service"] == "ecoroute"

    def test_resolution_id_bound_during_callback(self, stub_provider, times_square, central_park):
        seen = []
        resolver = RouteResolver(
            stub_provider(), on_route_resolved=lambda route: seen.append(resolution_id_ctx.get())
        )
        asyncio.run(resolver.resolve([times_square, central_park]))
        asyncio.run(resolver.resolve([times_square, central_park]))
        assert all(seen)
        assert seen[0] != seen[1]
        assert resolution_id_ctx.get() == ""

    def test_configure_and_log(self):
        configure_structlog(json_logs=True)
        get_logger("ecoroute.test").info("configured", ok=True)
        configure_structlog(json_logs=False)
        get_logger("ecoroute.test").info("configured", ok=True)
