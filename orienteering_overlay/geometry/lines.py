"""Split a course into line segments that stop at each symbol boundary."""

from __future__ import annotations

import logging
from typing import List, Tuple

from ..config import (
    CONTROL_RADIUS_M,
    COURSE_LINE_OPACITY,
    DEFAULT_REFERENCE_LATITUDE,
    FINISH_OUTER_RADIUS_M,
)
from ..models import Control, Course, Position, validate_position
from .bearing import circle_edge_point
from .models import PolylineShape
from .scale import line_width_px
from .symbols import start_aim_vertex

LOGGER = logging.getLogger(__name__)


def usable_controls(course: Course) -> List[Control]:
    """Return the course controls whose positions can be drawn, in order."""

    usable: List[Control] = []
    for control in course.controls:
        if control.position.is_valid:
            usable.append(control)
        else:
            LOGGER.warning(
                "Course %s: skipping control %s (number %s) with invalid position",
                course.name,
                control.code,
                control.number,
            )
    return usable


def course_leg_endpoints(
    course: Course, *, aim_north: bool = False
) -> List[Tuple[Position, Position]]:
    """Return (start, end) points for each leg of ``course``.

    A course with ``k`` drawable controls has ``k + 1`` legs; one with none
    has a single leg from the north-aimed start vertex to the finish. With
    ``aim_north`` the first leg leaves from the north vertex of the start
    triangle, matching a shared start drawn without a single target.

    Raises:
        InvalidPositionError: If the start or finish position is unusable.
    """

    start = validate_position(course.start)
    finish = validate_position(course.finish)
    controls = usable_controls(course)

    if not controls:
        return [(start_aim_vertex(start, None), finish)]

    first = controls[0].position
    if aim_north:
        begin = start_aim_vertex(start, None)
        legs = [(begin, circle_edge_point(begin, first, CONTROL_RADIUS_M))]
    else:
        begin = start_aim_vertex(start, first)
        legs = [(begin, circle_edge_point(start, first, CONTROL_RADIUS_M))]

    for current, following in zip(controls, controls[1:]):
        exit_edge = circle_edge_point(following.position, current.position, CONTROL_RADIUS_M)
        entry_edge = circle_edge_point(current.position, following.position, CONTROL_RADIUS_M)
        legs.append((exit_edge, entry_edge))

    last = controls[-1].position
    legs.append(
        (
            circle_edge_point(finish, last, CONTROL_RADIUS_M),
            circle_edge_point(last, finish, FINISH_OUTER_RADIUS_M),
        )
    )
    return legs


def segment_course(
    course: Course,
    zoom: float,
    latitude: float = DEFAULT_REFERENCE_LATITUDE,
    *,
    aim_north: bool = False,
) -> List[PolylineShape]:
    """Return the drawable course line, one polyline per leg."""

    stroke = line_width_px(zoom, latitude)
    return [
        PolylineShape(
            vertices=(begin, end),
            stroke_width_px=stroke,
            color=course.color,
            opacity=COURSE_LINE_OPACITY,
        )
        for begin, end in course_leg_endpoints(course, aim_north=aim_north)
    ]


__all__ = ["usable_controls", "course_leg_endpoints", "segment_course"]
