"""Compose symbols, course lines and labels into one overlay description."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence, Set

from ..config import DEFAULT_REFERENCE_LATITUDE
from ..errors import InvalidPositionError
from ..models import CoordinateReference, Course, Position
from .dedupe import extract_unique_controls, extract_unique_finishes, extract_unique_starts
from .labels import place_course_labels
from .lines import segment_course, usable_controls
from .models import (
    CourseOverlay,
    FinishSymbol,
    OverlayGeometry,
    StartSymbol,
    UniqueFinish,
    UniqueStart,
)
from .projection import ensure_supported
from .symbols import (
    VisitedPredicate,
    build_control_symbols,
    build_finish_symbol,
    build_start_symbol,
)

LOGGER = logging.getLogger(__name__)


def reference_latitude(courses: Sequence[Course]) -> float:
    """Return the mean start latitude, used to size pixels for this event."""

    latitudes = [course.start.lat for course in courses if course.start.is_valid]
    if not latitudes:
        return DEFAULT_REFERENCE_LATITUDE
    return sum(latitudes) / len(latitudes)


def _first_control(course: Course) -> Optional[Position]:
    controls = usable_controls(course)
    return controls[0].position if controls else None


def _start_aim_target(
    start: UniqueStart, courses_by_id: Dict[str, Course]
) -> Optional[Position]:
    """Return the control a shared start should point at, if there is only one."""

    targets = {_first_control(courses_by_id[course_id]) for course_id in start.course_ids}
    if len(targets) == 1:
        return targets.pop()
    return None


def build_overlay(
    courses: Sequence[Course],
    zoom: float,
    *,
    latitude: Optional[float] = None,
    reference: Optional[CoordinateReference] = None,
    is_visited: Optional[VisitedPredicate] = None,
    selected_course_id: Optional[str] = None,
) -> OverlayGeometry:
    """Return drawable geometry for ``courses`` at ``zoom``.

    Controls of every course are drawn so officials always see the whole
    control set. Lines, starts and finishes are drawn for visible courses, or
    only for ``selected_course_id`` when given; control number labels are only
    produced for a selected course.

    A start shared by courses with different first controls points north, and
    each of those courses leaves from that north vertex.

    Entities with unusable positions are skipped and listed in
    ``OverlayGeometry.skipped``; the rest of the map still builds.

    Raises:
        UnsupportedProjectionError: If ``reference`` is not geographic. The
            caller should keep the base map and withhold course overlays.
    """

    ensure_supported(reference)
    lat = reference_latitude(courses) if latitude is None else latitude
    overlay = OverlayGeometry(zoom=zoom, reference_latitude=lat)

    unique_controls = extract_unique_controls(courses)
    overlay.controls = build_control_symbols(unique_controls, zoom, lat, is_visited)
    drawn_ids = {id(symbol.control) for symbol in overlay.controls}
    overlay.skipped.extend(
        f"control {unique.code}" for unique in unique_controls if id(unique) not in drawn_ids
    )

    if selected_course_id is not None:
        drawn = [course for course in courses if course.id == selected_course_id]
        if not drawn:
            LOGGER.warning("Selected course %s not found", selected_course_id)
    else:
        drawn = [course for course in courses if course.visible]
    courses_by_id = {course.id: course for course in drawn}
    north_aimed: Set[str] = set()

    for start in extract_unique_starts(drawn):
        target = _start_aim_target(start, courses_by_id)
        if target is None:
            north_aimed.update(start.course_ids)
        symbol = _build_start(start, zoom, lat, target, overlay.skipped)
        if symbol is not None:
            overlay.starts.append(symbol)
    for finish in extract_unique_finishes(drawn):
        finish_symbol = _build_finish(finish, zoom, lat, overlay.skipped)
        if finish_symbol is not None:
            overlay.finishes.append(finish_symbol)

    for course in drawn:
        course_overlay = CourseOverlay(course_id=course.id, course_name=course.name)
        try:
            course_overlay.lines = segment_course(
                course, zoom, lat, aim_north=course.id in north_aimed
            )
            if selected_course_id is not None:
                course_overlay.labels = place_course_labels(course, zoom, lat)
        except InvalidPositionError as exc:
            LOGGER.warning("Skipping lines for course %s: %s", course.name, exc)
            overlay.skipped.append(f"course {course.name}")
        overlay.courses.append(course_overlay)

    LOGGER.debug(
        "Built overlay: %d controls, %d starts, %d finishes, %d courses, %d skipped",
        len(overlay.controls),
        len(overlay.starts),
        len(overlay.finishes),
        len(overlay.courses),
        len(overlay.skipped),
    )
    return overlay


def _build_start(
    start: UniqueStart,
    zoom: float,
    latitude: float,
    target: Optional[Position],
    skipped: List[str],
) -> Optional[StartSymbol]:
    try:
        return build_start_symbol(start, zoom, latitude, target)
    except InvalidPositionError as exc:
        LOGGER.warning("Skipping start for %s: %s", ", ".join(start.course_names), exc)
        skipped.append(f"start {', '.join(start.course_names)}")
        return None


def _build_finish(
    finish: UniqueFinish, zoom: float, latitude: float, skipped: List[str]
) -> Optional[FinishSymbol]:
    try:
        return build_finish_symbol(finish, zoom, latitude)
    except InvalidPositionError as exc:
        LOGGER.warning("Skipping finish for %s: %s", ", ".join(finish.course_names), exc)
        skipped.append(f"finish {', '.join(finish.course_names)}")
        return None


__all__ = ["reference_latitude", "build_overlay"]
