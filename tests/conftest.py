"""Global pytest fixtures & helpers.

Adds project root to path and provides reusable course builders so the
geometry, tracking and tooling tests share the same small events.
"""
from __future__ import annotations

import json
import os
import sys
from typing import Iterable, Tuple

import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from orienteering_overlay.geometry.projection import clear_crs_cache
from orienteering_overlay.models import Control, Course, Event, Position


# --- Factory helpers -------------------------------------------------
def make_control(cid: str, code: str, number: int, lat: float, lng: float) -> Control:
    return Control(id=cid, code=code, number=number, position=Position(lat, lng))


def make_course(
    cid: str,
    controls: Iterable[Tuple[str, str, float, float]] = (),
    *,
    name: str | None = None,
    color: str = "#FF0000",
    start: Tuple[float, float] = (51.500, -0.100),
    finish: Tuple[float, float] = (51.510, -0.110),
    visible: bool = True,
) -> Course:
    """Build a course from ``(control_id, code, lat, lng)`` tuples, numbered in order."""

    return Course(
        id=cid,
        name=name or cid,
        color=color,
        start=Position(*start),
        finish=Position(*finish),
        controls=[
            make_control(ctrl_id, code, index + 1, lat, lng)
            for index, (ctrl_id, code, lat, lng) in enumerate(controls)
        ],
        visible=visible,
    )


# --- Fixtures --------------------------------------------------------
@pytest.fixture
def three_control_course() -> Course:
    """Course A: S=(51.500,-0.100), 101, 102, 103, F=(51.510,-0.110)."""

    return make_course(
        "course-a",
        [
            ("c1", "101", 51.502, -0.102),
            ("c2", "102", 51.504, -0.104),
            ("c3", "103", 51.506, -0.106),
        ],
        name="Course A",
    )


@pytest.fixture
def shared_control_courses() -> list[Course]:
    """Two courses sharing control 101 at the same position and the same start."""

    course_a = make_course(
        "course-a",
        [("a1", "101", 51.502, -0.102), ("a2", "102", 51.504, -0.104)],
        name="Course A",
    )
    course_b = make_course(
        "course-b",
        [("b1", "101", 51.502, -0.102), ("b2", "105", 51.503, -0.098)],
        name="Course B",
        color="#0000FF",
    )
    return [course_a, course_b]


@pytest.fixture
def sample_event(shared_control_courses) -> Event:
    return Event(id="event-1", name="Spring Middle", courses=shared_control_courses)


@pytest.fixture
def event_payload() -> dict:
    """Decoded event JSON with two courses sharing control 101."""

    return {
        "id": "event-1",
        "name": "Spring Middle",
        "date": "2025-04-12",
        "coordinate_reference": {"kind": "geographic", "definition": "EPSG:4326"},
        "courses": [
            {
                "id": "course-a",
                "name": "Course A",
                "color": "#FF0000",
                "start": {"lat": 51.500, "lng": -0.100},
                "finish": {"lat": 51.510, "lng": -0.110},
                "controls": [
                    {"id": "a1", "code": "101", "number": 1,
                     "position": {"lat": 51.505, "lng": -0.105}},
                    {"id": "a2", "code": "102", "number": 2,
                     "position": {"lat": 51.507, "lng": -0.107}},
                ],
            },
            {
                "id": "course-b",
                "name": "Course B",
                "color": "#0000FF",
                "visible": False,
                "start": {"lat": 51.500, "lng": -0.100},
                "finish": {"lat": 51.510, "lng": -0.110},
                "controls": [
                    {"id": "b1", "code": "101", "number": 1,
                     "position": {"lat": 51.505, "lng": -0.105}},
                ],
            },
        ],
    }


@pytest.fixture
def event_file(tmp_path, event_payload):
    path = tmp_path / "event.json"
    path.write_text(json.dumps(event_payload), encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def _reset_crs_cache():
    clear_crs_cache()
    yield
    clear_crs_cache()
