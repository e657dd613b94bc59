#!/usr/bin/env python3
"""Replay a recorded position stream through the visit tracker.

Useful for checking which controls a competitor (or a control hanger) came
within the visit distance of, and for tuning the distance setting.

Usage examples:

    # Report visited controls as JSON on stdout
    python -m orienteering_overlay.tools.replay_positions \
        --event event.json --positions track.csv

    # Only consider one course and a 20 m visit distance, and draw a map
    python -m orienteering_overlay.tools.replay_positions \
        --event event.json --positions track.csv \
        --course course-1 --threshold-m 20 --map maps/replay.html
"""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Any, Collection, Dict, Iterable, Optional, Sequence

from ..course_io import load_event, read_position_samples
from ..errors import CourseFormatError, UnsupportedProjectionError
from ..models import Event, PositionSample, VisitState
from ..services.visit_tracker import VisitTracker, accuracy_level, visible_controls
from .course_map import build_course_map

LOGGER = logging.getLogger("replay_positions")


def replay_samples(
    event: Event,
    samples: Iterable[PositionSample],
    *,
    threshold_m: Optional[float] = None,
    visible_course_ids: Optional[Collection[str]] = None,
    tracker: Optional[VisitTracker] = None,
) -> VisitTracker:
    """Feed ``samples`` in order through a visit tracker and return it."""

    tracker = tracker or VisitTracker(VisitState())
    if threshold_m is not None:
        tracker.set_distance_threshold(threshold_m)
    controls = visible_controls(event.courses, visible_course_ids)
    low_accuracy = 0
    for sample in samples:
        if accuracy_level(sample.accuracy_m) != "good":
            low_accuracy += 1
        tracker.on_position(sample, controls)
    if low_accuracy:
        LOGGER.warning("%d position sample(s) had low GPS accuracy", low_accuracy)
    return tracker


def summarize_visits(event: Event, tracker: VisitTracker) -> Dict[str, Any]:
    """Return a JSON-friendly per-course summary of visited controls."""

    courses = []
    for course in event.courses:
        visited = [c for c in course.controls if tracker.is_visited(c.id)]
        courses.append(
            {
                "course_id": course.id,
                "course_name": course.name,
                "controls": len(course.controls),
                "visited": [
                    {"id": c.id, "code": c.code, "number": c.number} for c in visited
                ],
            }
        )
    return {
        "event": event.name,
        "distance_threshold_m": tracker.state.distance_threshold_m,
        "visited_count": tracker.visited_count,
        "courses": courses,
    }


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Replay a recorded position CSV and report visited controls."
    )
    parser.add_argument("--event", type=Path, required=True, help="Event JSON file")
    parser.add_argument(
        "--positions",
        type=Path,
        required=True,
        help="CSV with lat,lng and optional accuracy_m,heading_deg,timestamp_ms",
    )
    parser.add_argument(
        "--threshold-m",
        type=float,
        default=None,
        help="Visit distance in metres (one of the configured options)",
    )
    parser.add_argument(
        "--course",
        action="append",
        default=None,
        help="Course id to track (repeatable); defaults to visible courses",
    )
    parser.add_argument("--zoom", type=float, default=15.0)
    parser.add_argument("--map", type=Path, help="Optional HTML map output path")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """CLI entry point used via ``python -m orienteering_overlay.tools.replay_positions``."""

    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
    )

    try:
        event = load_event(args.event)
        samples = read_position_samples(args.positions)
    except (CourseFormatError, FileNotFoundError) as exc:
        logging.error("Failed to load inputs: %s", exc)
        return 1

    try:
        tracker = replay_samples(
            event,
            samples,
            threshold_m=args.threshold_m,
            visible_course_ids=args.course,
        )
    except ValueError as exc:
        logging.error("%s", exc)
        return 1

    LOGGER.info("Replayed %d samples, %d control(s) visited", len(samples), tracker.visited_count)
    print(json.dumps(summarize_visits(event, tracker), indent=2))

    if args.map is not None:
        last_fix = next((s for s in reversed(samples) if s.position is not None), None)
        try:
            build_course_map(
                event,
                args.zoom,
                visited_ids=tracker.state.visited_control_ids,
                gps=last_fix,
                output_html=args.map,
            )
        except UnsupportedProjectionError as exc:
            logging.error("Cannot draw courses for '%s': %s", event.name, exc)
            return 1
        LOGGER.info("Replay map written to %s", args.map)
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
