"""Map framing and styling hints that travel alongside a resolved route."""

from __future__ import annotations

from collections.abc import Sequence

from .geo import bounds_of
from .models import Coordinate, LineStyle, MarkerIcon, Provenance, RenderHints
from .settings import Settings, settings

LINE_STYLES: dict[Provenance, LineStyle] = {
    Provenance.PROVIDER: LineStyle(color="#22c55e", weight=6, opacity=0.9),
    Provenance.FALLBACK_CURVE: LineStyle(color="#0073FF", weight=6, opacity=0.8),
    Provenance.FALLBACK_LINE: LineStyle(
        color="#F00", weight=6, opacity=0.8, dash_array="10,10"
    ),
}


def marker_icon(config: Settings | None = None) -> MarkerIcon:
    """Marker icon configuration for the rendering collaborator."""
    config = config or settings
    return MarkerIcon(icon_url=config.MARKER_ICON_URL, shadow_url=config.MARKER_SHADOW_URL)


def build_hints(
    provenance: Provenance,
    path: Sequence[Coordinate],
    config: Settings | None = None,
) -> RenderHints:
    config = config or settings
    if provenance is Provenance.FALLBACK_LINE:
        padding, max_zoom = config.FALLBACK_LINE_PADDING_PX, config.FALLBACK_LINE_MAX_ZOOM
    else:
        padding, max_zoom = config.FIT_PADDING_PX, config.FIT_MAX_ZOOM
    return RenderHints(
        padding_px=padding,
        max_zoom=max_zoom,
        bounds=bounds_of(path),
        line=LINE_STYLES[provenance],
        marker=marker_icon(config),
    )


__all__ = ["LINE_STYLES", "build_hints", "marker_icon"]
