"""Zoom-dependent pixel sizes that keep course symbols map-scale accurate."""

from __future__ import annotations

import math

from ..config import (
    DEFAULT_REFERENCE_LATITUDE,
    LABEL_TARGET_HEIGHT_M,
    LINE_MAX_WIDTH_PX,
    LINE_MIN_WIDTH_PX,
    LINE_TARGET_WIDTH_M,
    METERS_PER_DEGREE_LAT,
    WEB_MERCATOR_RESOLUTION_M,
)

# Largest power of two a float can hold.
_MAX_FLOAT_EXPONENT = 1023.0


def _zoom0_resolution(latitude: float) -> float:
    return WEB_MERCATOR_RESOLUTION_M * math.cos(math.radians(latitude))


def _pixel_exponent(ground_m: float, zoom: float, latitude: float) -> float:
    """Return log2 of how many pixels ``ground_m`` metres span at ``zoom``."""

    return math.log2(ground_m / _zoom0_resolution(latitude)) + zoom


def resolution(zoom: float, latitude: float = DEFAULT_REFERENCE_LATITUDE) -> float:
    """Return Web Mercator ground resolution in metres per pixel.

    Zooms far outside the tile range saturate to ``0.0`` or ``inf`` instead
    of raising.
    """

    if -zoom > _MAX_FLOAT_EXPONENT:
        return math.inf
    return _zoom0_resolution(latitude) * 2.0 ** -zoom


def line_width_px(zoom: float, latitude: float = DEFAULT_REFERENCE_LATITUDE) -> float:
    """Return the course line width in pixels for ``zoom``.

    The width tracks ``LINE_TARGET_WIDTH_M`` on the ground, clamped so lines
    stay visible when zoomed far out and do not swamp the map when zoomed in.
    The clamp holds for every finite zoom.
    """

    exponent = min(
        _pixel_exponent(LINE_TARGET_WIDTH_M, zoom, latitude), math.log2(LINE_MAX_WIDTH_PX)
    )
    pixel_width = 2.0**exponent
    return max(LINE_MIN_WIDTH_PX, min(LINE_MAX_WIDTH_PX, pixel_width))


def label_font_size_px(
    zoom: float, latitude: float = DEFAULT_REFERENCE_LATITUDE
) -> float:
    """Return the control number font size in pixels (unclamped)."""

    exponent = _pixel_exponent(LABEL_TARGET_HEIGHT_M, zoom, latitude)
    if exponent > _MAX_FLOAT_EXPONENT:
        return math.inf
    return 2.0**exponent


def meters_per_degree_lng(latitude: float) -> float:
    return METERS_PER_DEGREE_LAT * math.cos(math.radians(latitude))


__all__ = [
    "METERS_PER_DEGREE_LAT",
    "resolution",
    "line_width_px",
    "label_font_size_px",
    "meters_per_degree_lng",
]
