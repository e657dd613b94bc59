"""Bearings, distances and circle-boundary points between course positions.

Two distance flavours live here on purpose. ``distance_meters`` is a flat
local approximation that matches the maths used to trim lines and place
labels, so collision checks agree with the geometry they test.
``haversine_m`` is the great-circle distance the visit tracker needs for GPS
proximity at any latitude.
"""

from __future__ import annotations

import logging
import math
from typing import Tuple

from ..errors import DegenerateGeometryError
from ..models import Position
from .scale import METERS_PER_DEGREE_LAT, meters_per_degree_lng

LOGGER = logging.getLogger(__name__)

EARTH_RADIUS_M = 6_371_000.0  # mean Earth radius


def bearing(origin: Position, target: Position) -> float:
    """Initial great-circle bearing from ``origin`` to ``target``, degrees [0, 360)."""

    phi1 = math.radians(origin.lat)
    phi2 = math.radians(target.lat)
    d_lambda = math.radians(target.lng - origin.lng)

    y = math.sin(d_lambda) * math.cos(phi2)
    x = math.cos(phi1) * math.sin(phi2) - math.sin(phi1) * math.cos(phi2) * math.cos(
        d_lambda
    )
    return (math.degrees(math.atan2(y, x)) + 360.0) % 360.0


def haversine_m(a: Position, b: Position) -> float:
    """Compute Haversine distance in meters between two positions."""

    phi1 = math.radians(a.lat)
    phi2 = math.radians(b.lat)
    d_phi = math.radians(b.lat - a.lat)
    d_lambda = math.radians(b.lng - a.lng)

    h = (
        math.sin(d_phi / 2.0) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2.0) ** 2
    )
    c = 2.0 * math.atan2(math.sqrt(h), math.sqrt(1.0 - h))
    return EARTH_RADIUS_M * c


def _local_delta_m(origin: Position, target: Position) -> Tuple[float, float]:
    """Return the (east, north) offset in metres, scaled at ``target``'s latitude."""

    dx = (target.lng - origin.lng) * meters_per_degree_lng(target.lat)
    dy = (target.lat - origin.lat) * METERS_PER_DEGREE_LAT
    return dx, dy


def _unit_vector(dx: float, dy: float) -> Tuple[float, float]:
    length = math.hypot(dx, dy)
    if length == 0.0:
        raise DegenerateGeometryError("Cannot take a direction from a zero-length vector")
    return dx / length, dy / length


def distance_meters(a: Position, b: Position) -> float:
    """Planar distance in metres between ``a`` and ``b`` (local approximation)."""

    dx, dy = _local_delta_m(a, b)
    return math.hypot(dx, dy)


def circle_edge_point(origin: Position, center: Position, radius_m: float) -> Position:
    """Return where the line from ``origin`` to ``center`` meets the circle boundary.

    Args:
        origin: Point the line is coming from.
        center: Centre of the circle.
        radius_m: Circle radius in metres.

    Returns:
        The boundary point on the ``origin`` side of the circle, or ``center``
        itself when both points coincide and there is no direction to trim
        along.
    """

    dx, dy = _local_delta_m(origin, center)
    try:
        ux, uy = _unit_vector(dx, dy)
    except DegenerateGeometryError:
        LOGGER.debug("Edge point requested from the circle centre %s", center)
        return center
    offset_lng = ux * radius_m / meters_per_degree_lng(center.lat)
    offset_lat = uy * radius_m / METERS_PER_DEGREE_LAT
    return Position(center.lat - offset_lat, center.lng - offset_lng)


def offset_position(origin: Position, bearing_deg: float, distance_m: float) -> Position:
    """Move ``distance_m`` metres from ``origin`` along ``bearing_deg``."""

    theta = math.radians(bearing_deg)
    east = distance_m * math.sin(theta)
    north = distance_m * math.cos(theta)
    return Position(
        origin.lat + north / METERS_PER_DEGREE_LAT,
        origin.lng + east / meters_per_degree_lng(origin.lat),
    )


def average_angle(a: float, b: float) -> float:
    """Return the mean of two bearings along the shorter arc between them.

    ``average_angle(350, 10)`` is 0, not 180. For exactly opposite bearings
    the result is ``a - 90``.
    """

    delta = ((b - a + 540.0) % 360.0) - 180.0
    return (a + delta / 2.0) % 360.0


__all__ = [
    "EARTH_RADIUS_M",
    "bearing",
    "haversine_m",
    "distance_meters",
    "circle_edge_point",
    "offset_position",
    "average_angle",
]
