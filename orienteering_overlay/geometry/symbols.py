"""Build control circles, start triangles and finish double circles."""

from __future__ import annotations

import logging
import math
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from ..config import (
    CONTROL_RADIUS_M,
    DEFAULT_REFERENCE_LATITUDE,
    FINISH_INNER_RADIUS_M,
    FINISH_OUTER_RADIUS_M,
    START_TRIANGLE_SIDE_M,
    SYMBOL_COLOR,
    VISITED_COLOR,
)
from ..errors import InvalidPositionError
from ..models import Position, validate_position
from .bearing import bearing, offset_position
from .models import (
    CircleShape,
    ControlSymbol,
    FinishSymbol,
    PolygonShape,
    StartSymbol,
    UniqueControl,
    UniqueFinish,
    UniqueStart,
)
from .scale import line_width_px

LOGGER = logging.getLogger(__name__)

VisitedPredicate = Callable[[Iterable[str]], bool]

# Distance from the triangle centre to each vertex.
START_VERTEX_RADIUS_M = START_TRIANGLE_SIDE_M / math.sqrt(3.0)

# Aim used when there is no single next control (e.g. the all-courses view).
DEFAULT_START_BEARING_DEG = 0.0


def start_aim_bearing(start: Position, first_control: Optional[Position]) -> float:
    """Return the bearing the start triangle points along."""

    if first_control is None or first_control == start:
        return DEFAULT_START_BEARING_DEG
    return bearing(start, first_control)


def start_triangle_vertices(
    start: Position, first_control: Optional[Position] = None
) -> Tuple[Position, Position, Position]:
    """Return the triangle vertices, aimed vertex first."""

    aim = start_aim_bearing(start, first_control)
    aimed, right, left = (
        offset_position(start, (aim + turn) % 360.0, START_VERTEX_RADIUS_M)
        for turn in (0.0, 120.0, 240.0)
    )
    return aimed, right, left


def start_aim_vertex(start: Position, first_control: Optional[Position] = None) -> Position:
    return start_triangle_vertices(start, first_control)[0]


def build_control_symbol(
    control: UniqueControl,
    zoom: float,
    latitude: float = DEFAULT_REFERENCE_LATITUDE,
    is_visited: Optional[VisitedPredicate] = None,
) -> ControlSymbol:
    """Return the circle for a shared control, coloured by visit state.

    Raises:
        InvalidPositionError: If the control position is not a usable coordinate.
    """

    validate_position(control.position)
    visited = bool(is_visited is not None and is_visited(control.control_ids))
    circle = CircleShape(
        center=control.position,
        radius_m=CONTROL_RADIUS_M,
        stroke_width_px=line_width_px(zoom, latitude),
        color=VISITED_COLOR if visited else SYMBOL_COLOR,
    )
    return ControlSymbol(control=control, circle=circle, visited=visited)


def build_start_symbol(
    start: UniqueStart,
    zoom: float,
    latitude: float = DEFAULT_REFERENCE_LATITUDE,
    first_control: Optional[Position] = None,
) -> StartSymbol:
    validate_position(start.position)
    if first_control is not None and not first_control.is_valid:
        LOGGER.warning(
            "Ignoring invalid first control %s when aiming start triangle", first_control
        )
        first_control = None
    triangle = PolygonShape(
        vertices=start_triangle_vertices(start.position, first_control),
        stroke_width_px=line_width_px(zoom, latitude),
        color=SYMBOL_COLOR,
    )
    return StartSymbol(
        start=start,
        triangle=triangle,
        aim_bearing_deg=start_aim_bearing(start.position, first_control),
    )


def build_finish_symbol(
    finish: UniqueFinish,
    zoom: float,
    latitude: float = DEFAULT_REFERENCE_LATITUDE,
) -> FinishSymbol:
    validate_position(finish.position)
    stroke = line_width_px(zoom, latitude)
    return FinishSymbol(
        finish=finish,
        outer=CircleShape(finish.position, FINISH_OUTER_RADIUS_M, stroke, SYMBOL_COLOR),
        inner=CircleShape(finish.position, FINISH_INNER_RADIUS_M, stroke, SYMBOL_COLOR),
    )


def build_control_symbols(
    controls: Sequence[UniqueControl],
    zoom: float,
    latitude: float = DEFAULT_REFERENCE_LATITUDE,
    is_visited: Optional[VisitedPredicate] = None,
) -> List[ControlSymbol]:
    """Build every control circle, skipping controls with unusable positions."""

    symbols: List[ControlSymbol] = []
    for control in controls:
        try:
            symbols.append(build_control_symbol(control, zoom, latitude, is_visited))
        except InvalidPositionError as exc:
            LOGGER.warning("Skipping control %s: %s", control.code, exc)
    return symbols


__all__ = [
    "START_VERTEX_RADIUS_M",
    "DEFAULT_START_BEARING_DEG",
    "VisitedPredicate",
    "start_aim_bearing",
    "start_triangle_vertices",
    "start_aim_vertex",
    "build_control_symbol",
    "build_start_symbol",
    "build_finish_symbol",
    "build_control_symbols",
]
