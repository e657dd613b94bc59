"""Benchmark overlay composition and label placement on large synthetic events."""

from __future__ import annotations

import argparse
import math
import statistics
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# Late imports rely on the adjusted sys.path above.
from orienteering_overlay.geometry.overlay import build_overlay  # noqa: E402
from orienteering_overlay.models import Control, Course, Position  # noqa: E402

_BASE_LAT = 51.5
_BASE_LNG = -0.1
_STEP_DEG = 0.002


@dataclass(slots=True)
class StageDurations:
    """Timing measurements (in seconds) for one overlay build."""

    all_courses: float
    selected_course: float

    @property
    def total(self) -> float:
        return self.all_courses + self.selected_course


@dataclass(slots=True)
class BenchmarkSummary:
    """Aggregated statistics for multiple benchmark iterations."""

    course_count: int
    controls_per_course: int
    iterations: int
    mean_all_courses_ms: float
    mean_selected_course_ms: float
    mean_total_ms: float
    worst_total_ms: float


def _control_grid(count: int) -> List[Position]:
    """Return ``count`` candidate control sites on a square grid."""

    side = max(1, math.ceil(math.sqrt(count)))
    return [
        Position(_BASE_LAT + (idx // side) * _STEP_DEG, _BASE_LNG + (idx % side) * _STEP_DEG)
        for idx in range(count)
    ]


def _build_courses(course_count: int, controls_per_course: int) -> List[Course]:
    """Build courses that share a start, a finish and many controls."""

    sites = _control_grid(controls_per_course * 2)
    courses: List[Course] = []
    for course_idx in range(course_count):
        controls = []
        for number in range(1, controls_per_course + 1):
            site_idx = (course_idx * 3 + number * 7) % len(sites)
            controls.append(
                Control(
                    id=f"c{course_idx}-{number}",
                    code=str(100 + site_idx),
                    number=number,
                    position=sites[site_idx],
                )
            )
        courses.append(
            Course(
                id=f"course-{course_idx}",
                name=f"Course {course_idx}",
                color="#FF0000",
                start=Position(_BASE_LAT - _STEP_DEG, _BASE_LNG),
                finish=Position(_BASE_LAT - _STEP_DEG, _BASE_LNG + _STEP_DEG),
                controls=controls,
            )
        )
    return courses


def _run_iteration(courses: List[Course], zoom: float) -> StageDurations:
    start = time.perf_counter()
    build_overlay(courses, zoom)
    all_courses = time.perf_counter() - start

    start = time.perf_counter()
    build_overlay(courses, zoom, selected_course_id=courses[0].id)
    selected_course = time.perf_counter() - start

    return StageDurations(all_courses=all_courses, selected_course=selected_course)


def run_benchmark(
    course_count: int,
    controls_per_course: int,
    iterations: int,
    zoom: float = 15.0,
) -> BenchmarkSummary:
    """Benchmark overlay building and return aggregated timings."""

    if course_count <= 0 or controls_per_course <= 0:
        raise ValueError("course_count and controls_per_course must be positive")
    if iterations <= 0:
        raise ValueError("iterations must be positive")

    courses = _build_courses(course_count, controls_per_course)
    durations = [_run_iteration(courses, zoom) for _ in range(iterations)]

    return BenchmarkSummary(
        course_count=course_count,
        controls_per_course=controls_per_course,
        iterations=iterations,
        mean_all_courses_ms=statistics.fmean(d.all_courses for d in durations) * 1000.0,
        mean_selected_course_ms=statistics.fmean(d.selected_course for d in durations)
        * 1000.0,
        mean_total_ms=statistics.fmean(d.total for d in durations) * 1000.0,
        worst_total_ms=max(d.total for d in durations) * 1000.0,
    )


def _format_summary(summary: BenchmarkSummary) -> Dict[str, float]:
    return {
        "course_count": summary.course_count,
        "controls_per_course": summary.controls_per_course,
        "iterations": summary.iterations,
        "mean_all_courses_ms": summary.mean_all_courses_ms,
        "mean_selected_course_ms": summary.mean_selected_course_ms,
        "mean_total_ms": summary.mean_total_ms,
        "worst_total_ms": summary.worst_total_ms,
    }


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Benchmark overlay building for events with many courses",
    )
    parser.add_argument("--courses", type=int, default=20, help="Number of courses")
    parser.add_argument(
        "--controls",
        type=int,
        default=30,
        help="Controls per course",
    )
    parser.add_argument(
        "--iterations",
        type=int,
        default=5,
        help="Number of repetitions for averaging",
    )
    parser.add_argument("--zoom", type=float, default=15.0)
    return parser.parse_args()


def main() -> None:
    """Entry point when running the module as a script."""

    args = _parse_args()
    summary = run_benchmark(args.courses, args.controls, args.iterations, args.zoom)
    for key, value in _format_summary(summary).items():
        if key in {"course_count", "controls_per_course", "iterations"}:
            print(f"{key}: {value}")
        else:
            print(f"{key}: {value:.3f}")


if __name__ == "__main__":
    main()
