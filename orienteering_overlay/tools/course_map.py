"""Generate an interactive HTML course map for an event file."""

from __future__ import annotations

import argparse
import logging
import re
from pathlib import Path
from typing import Collection, Optional, Sequence, Tuple, Union

import folium

from ..course_io import load_event
from ..errors import CourseFormatError, UnsupportedProjectionError
from ..geometry.models import OverlayGeometry
from ..geometry.overlay import build_overlay
from ..models import Course, Event, Position, PositionSample, VisitState
from ..rendering import render_overlay
from ..services.visit_tracker import VisitTracker

PathLike = Union[str, Path]


def build_course_map(
    event: Event,
    zoom: float,
    *,
    selected_course_id: Optional[str] = None,
    visited_ids: Collection[str] = (),
    gps: Optional[PositionSample] = None,
    output_html: Optional[PathLike] = None,
) -> Tuple[folium.Map, OverlayGeometry]:
    """Build overlay geometry for ``event`` and draw it with folium.

    Args:
        event: Event whose courses should be drawn.
        zoom: Map zoom level used to size lines and labels.
        selected_course_id: Optional course to draw alone, with numbered labels.
        visited_ids: Control ids to colour as visited.
        gps: Optional position sample drawn as the current location.
        output_html: Optional path where the rendered HTML map is saved.

    Returns:
        Tuple of the :class:`folium.Map` and the :class:`OverlayGeometry` it
        was drawn from.

    Raises:
        UnsupportedProjectionError: If the event map is not geographic.
    """

    tracker = VisitTracker(VisitState(visited_control_ids=set(visited_ids)))
    overlay = build_overlay(
        event.courses,
        zoom,
        reference=event.coordinate_reference,
        is_visited=tracker.any_visited,
        selected_course_id=selected_course_id,
    )
    map_object = render_overlay(overlay, gps=gps, output_html_path=output_html)
    return map_object, overlay


def _select_course(courses: Sequence[Course], identifier: str) -> Course:
    """Return the event course matching an id or (case-insensitive) name."""

    for course in courses:
        if course.id == identifier:
            return course
    target = identifier.strip().lower()
    matches = [course for course in courses if course.name.lower() == target]
    if not matches:
        raise ValueError(f"No course found with id or name '{identifier}'")
    if len(matches) > 1:
        raise ValueError(f"Course name '{identifier}' is ambiguous; specify the id")
    return matches[0]


def _slugify(value: str) -> str:
    """Return a filesystem-friendly slug."""

    normalized = value.strip().lower()
    slug = re.sub(r"[^a-z0-9]+", "-", normalized)
    slug = slug.strip("-")
    return slug or "map"


def _default_output_path(event: Event, course: Optional[Course]) -> Path:
    suffix = f"-{_slugify(course.name)}" if course is not None else "-all-courses"
    return Path("maps") / f"{_slugify(event.name)}{suffix}.html"


def _parse_position(value: str) -> Position:
    try:
        lat_text, lng_text = value.split(",", 1)
        return Position(float(lat_text), float(lng_text))
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Expected LAT,LNG but got '{value}'") from exc


def _build_parser() -> argparse.ArgumentParser:
    """Return the CLI argument parser for the course map tool."""

    parser = argparse.ArgumentParser(
        description="Generate an interactive HTML map of an event's courses."
    )
    parser.add_argument("--event", type=Path, required=True, help="Event JSON file")
    parser.add_argument(
        "--zoom",
        type=float,
        default=15.0,
        help="Zoom level used to size lines and labels (default: 15)",
    )
    parser.add_argument("--course", help="Course id or name to draw with numbered labels")
    parser.add_argument(
        "--visited",
        default="",
        help="Comma separated control ids to show as visited",
    )
    parser.add_argument("--gps", type=_parse_position, help="Current position as LAT,LNG")
    parser.add_argument("--gps-accuracy-m", type=float, default=None)
    parser.add_argument(
        "--output",
        type=Path,
        help="Optional output HTML path; defaults to maps/<slug>.html",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """CLI entry point used via ``python -m orienteering_overlay.tools.course_map``."""

    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
    )

    try:
        event = load_event(args.event)
    except (CourseFormatError, FileNotFoundError) as exc:
        logging.error("Failed to load event '%s': %s", args.event, exc)
        return 1

    course: Optional[Course] = None
    if args.course:
        try:
            course = _select_course(event.courses, args.course)
        except ValueError as exc:
            logging.error("%s", exc)
            return 1

    visited_ids = {item.strip() for item in args.visited.split(",") if item.strip()}
    gps = PositionSample(args.gps, accuracy_m=args.gps_accuracy_m) if args.gps else None
    output_path = args.output or _default_output_path(event, course)

    try:
        _map, overlay = build_course_map(
            event,
            args.zoom,
            selected_course_id=course.id if course is not None else None,
            visited_ids=visited_ids,
            gps=gps,
            output_html=output_path,
        )
    except UnsupportedProjectionError as exc:
        logging.error("Cannot draw courses for '%s': %s", event.name, exc)
        return 1

    if overlay.skipped:
        logging.warning("Skipped %d entities: %s", len(overlay.skipped), "; ".join(overlay.skipped))
    logging.info(
        "Drew %d controls across %d course(s)", len(overlay.controls), len(overlay.courses)
    )
    logging.info("Course map written to %s", output_path)
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
