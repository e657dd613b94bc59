"""Place control number labels for one course without overlapping each other.

Placement is a deterministic search. Controls are visited in running order,
each tries a fixed list of angles around its circle, and a candidate is kept
when it is clear of every label already placed (including any passed in by
the caller, in the order given) and of the start and finish symbols. When
nothing fits, the preferred position is used and the overlap accepted.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
import math
from typing import List, Optional, Sequence, Tuple

import numpy as np

from ..config import (
    CONTROL_RADIUS_M,
    DEFAULT_REFERENCE_LATITUDE,
    FINISH_OUTER_RADIUS_M,
    LABEL_CHAR_WIDTH_RATIO,
    LABEL_DEFAULT_ANGLE_DEG,
    LABEL_MARGIN_M,
    LABEL_MIN_SEPARATION_M,
    SYMBOL_COLOR,
)
from ..models import Course, Position
from .bearing import average_angle, bearing, distance_meters, offset_position
from .lines import usable_controls
from .models import LabelShape
from .scale import (
    METERS_PER_DEGREE_LAT,
    label_font_size_px,
    meters_per_degree_lng,
    resolution,
)
from .symbols import START_VERTEX_RADIUS_M

LOGGER = logging.getLogger(__name__)

# Offsets from the preferred angle, tried in this order.
_CANDIDATE_TURNS_DEG: Tuple[float, ...] = (0.0, 180.0, 90.0, -90.0, 45.0, -45.0, 135.0, -135.0)


@dataclass(slots=True)
class LabelPlacement:
    control_id: str
    text: str
    anchor: Position
    angle_deg: float
    preferred_angle_deg: float
    fallback: bool = False


def label_offset_m(digit_count: int, label_height_m: float) -> float:
    """Distance from the control centre that keeps the label box off the circle."""

    width = LABEL_CHAR_WIDTH_RATIO * label_height_m * max(1, digit_count)
    half_diagonal = math.hypot(width / 2.0, label_height_m / 2.0)
    return CONTROL_RADIUS_M + LABEL_MARGIN_M + half_diagonal


def preferred_label_angle(
    previous: Optional[Position],
    current: Position,
    following: Optional[Position],
) -> float:
    """Return the bearing on the open side of the course at ``current``."""

    if previous is not None and following is not None:
        incoming = bearing(previous, current)
        outgoing = bearing(current, following)
        mean = average_angle(incoming, outgoing)
        turn = (outgoing - incoming) % 360.0
        # Label goes on the outside of the turn.
        if turn < 180.0:
            return (mean - 90.0) % 360.0
        return (mean + 90.0) % 360.0
    neighbour = previous if previous is not None else following
    if neighbour is not None:
        return (bearing(current, neighbour) + 90.0) % 360.0
    return LABEL_DEFAULT_ANGLE_DEG


def candidate_angles(preferred: float) -> Tuple[float, ...]:
    return tuple((preferred + turn) % 360.0 for turn in _CANDIDATE_TURNS_DEG)


def _planar_distances(candidate: Position, placed: np.ndarray) -> np.ndarray:
    """Vectorised ``distance_meters(placed[i], candidate)``."""

    if placed.size == 0:
        return np.empty(0, dtype=float)
    dx = (candidate.lng - placed[:, 1]) * meters_per_degree_lng(candidate.lat)
    dy = (candidate.lat - placed[:, 0]) * METERS_PER_DEGREE_LAT
    return np.hypot(dx, dy)


def _is_clear(
    candidate: Position,
    placed: np.ndarray,
    start: Position,
    finish: Position,
) -> bool:
    distances = _planar_distances(candidate, placed)
    if distances.size and float(np.min(distances)) < LABEL_MIN_SEPARATION_M:
        return False
    if distance_meters(candidate, finish) < FINISH_OUTER_RADIUS_M + LABEL_MARGIN_M:
        return False
    if distance_meters(candidate, start) < START_VERTEX_RADIUS_M + LABEL_MARGIN_M:
        return False
    return True


def solve_label_positions(
    course: Course,
    zoom: float,
    latitude: float = DEFAULT_REFERENCE_LATITUDE,
    placed: Sequence[Position] = (),
) -> List[LabelPlacement]:
    """Return one placement per drawable control of ``course``, in running order."""

    controls = usable_controls(course)
    label_height_m = label_font_size_px(zoom, latitude) * resolution(zoom, latitude)
    occupied: List[Tuple[float, float]] = [(p.lat, p.lng) for p in placed]
    placements: List[LabelPlacement] = []

    for index, control in enumerate(controls):
        previous = controls[index - 1].position if index > 0 else None
        following = controls[index + 1].position if index + 1 < len(controls) else None
        text = str(control.number)
        offset = label_offset_m(len(text), label_height_m)
        preferred = preferred_label_angle(previous, control.position, following)

        occupied_array = np.asarray(occupied, dtype=float).reshape(-1, 2)
        chosen: Optional[Tuple[float, Position]] = None
        for angle in candidate_angles(preferred):
            candidate = offset_position(control.position, angle, offset)
            if _is_clear(candidate, occupied_array, course.start, course.finish):
                chosen = (angle, candidate)
                break

        fallback = chosen is None
        if chosen is None:
            LOGGER.debug(
                "Course %s: no clear label spot for control %s, using preferred angle",
                course.name,
                text,
            )
            chosen = (preferred, offset_position(control.position, preferred, offset))

        angle, anchor = chosen
        occupied.append((anchor.lat, anchor.lng))
        placements.append(
            LabelPlacement(
                control_id=control.id,
                text=text,
                anchor=anchor,
                angle_deg=angle,
                preferred_angle_deg=preferred,
                fallback=fallback,
            )
        )
    return placements


def place_course_labels(
    course: Course,
    zoom: float,
    latitude: float = DEFAULT_REFERENCE_LATITUDE,
    placed: Sequence[Position] = (),
) -> List[LabelShape]:
    """Return control number labels for a single selected course."""

    font_size = label_font_size_px(zoom, latitude)
    return [
        LabelShape(
            anchor=placement.anchor,
            text=placement.text,
            font_size_px=font_size,
            color=SYMBOL_COLOR,
            control_id=placement.control_id,
        )
        for placement in solve_label_positions(course, zoom, latitude, placed)
    ]


__all__ = [
    "LabelPlacement",
    "label_offset_m",
    "preferred_label_angle",
    "candidate_angles",
    "solve_label_positions",
    "place_course_labels",
]
