"""End-to-end tests for composing the course overlay."""

from __future__ import annotations

import pytest

from conftest import make_course

from orienteering_overlay.config import SYMBOL_COLOR, VISITED_COLOR
from orienteering_overlay.errors import UnsupportedProjectionError
from orienteering_overlay.geometry.bearing import bearing
from orienteering_overlay.geometry.overlay import build_overlay, reference_latitude
from orienteering_overlay.models import CoordinateReference, Position, VisitState
from orienteering_overlay.services.visit_tracker import VisitTracker


def test_single_control_course_end_to_end() -> None:
    course = make_course(
        "a",
        [("c1", "101", 51.505, -0.105)],
        start=(51.50, -0.10),
        finish=(51.51, -0.11),
    )

    overlay = build_overlay([course], 15.0, latitude=51.5)

    assert len(overlay.controls) == 1
    assert len(overlay.starts) == 1
    assert len(overlay.finishes) == 1
    assert len(overlay.courses) == 1
    assert len(overlay.courses[0].lines) == 2
    expected = bearing(course.start, course.controls[0].position)
    assert overlay.starts[0].aim_bearing_deg == pytest.approx(expected)
    assert overlay.skipped == []


def test_shared_control_drawn_once(shared_control_courses) -> None:
    overlay = build_overlay(shared_control_courses, 15.0)

    codes = [symbol.control.code for symbol in overlay.controls]
    assert codes == ["101", "102", "105"]
    assert len(overlay.controls[0].control.courses) == 2


def test_shared_start_aims_at_common_first_control(shared_control_courses) -> None:
    overlay = build_overlay(shared_control_courses, 15.0)

    (start,) = overlay.starts
    target = shared_control_courses[0].controls[0].position
    assert start.aim_bearing_deg == pytest.approx(bearing(start.start.position, target))


def test_shared_start_with_different_first_controls_points_north() -> None:
    course_a = make_course("a", [("a1", "101", 51.502, -0.102)])
    course_b = make_course("b", [("b1", "102", 51.503, -0.098)])

    overlay = build_overlay([course_a, course_b], 15.0)

    assert overlay.starts[0].aim_bearing_deg == 0.0


def test_hidden_course_keeps_controls_but_drops_lines() -> None:
    shown = make_course("a", [("a1", "101", 51.502, -0.102)])
    hidden = make_course(
        "b",
        [("b1", "102", 51.503, -0.098)],
        start=(51.520, -0.120),
        finish=(51.530, -0.130),
        visible=False,
    )

    overlay = build_overlay([shown, hidden], 15.0)

    assert {symbol.control.code for symbol in overlay.controls} == {"101", "102"}
    assert [course.course_id for course in overlay.courses] == ["a"]
    assert len(overlay.starts) == 1
    assert len(overlay.finishes) == 1


def test_selected_course_gets_labels(shared_control_courses) -> None:
    overlay = build_overlay(shared_control_courses, 15.0, selected_course_id="course-b")

    assert [course.course_id for course in overlay.courses] == ["course-b"]
    assert [label.text for label in overlay.courses[0].labels] == ["1", "2"]


def test_all_courses_view_has_no_labels(shared_control_courses) -> None:
    overlay = build_overlay(shared_control_courses, 15.0)

    assert all(course.labels == [] for course in overlay.courses)


def test_unknown_selected_course_draws_no_lines(shared_control_courses) -> None:
    overlay = build_overlay(shared_control_courses, 15.0, selected_course_id="missing")

    assert overlay.courses == []
    assert len(overlay.controls) == 3


def test_visited_controls_use_visited_colour(shared_control_courses) -> None:
    tracker = VisitTracker(VisitState(visited_control_ids={"b1"}))

    overlay = build_overlay(shared_control_courses, 15.0, is_visited=tracker.any_visited)

    colours = {symbol.control.code: symbol.circle.color for symbol in overlay.controls}
    assert colours == {"101": VISITED_COLOR, "102": SYMBOL_COLOR, "105": SYMBOL_COLOR}


def test_bad_course_does_not_block_the_rest() -> None:
    good = make_course("good", [("g1", "101", 51.502, -0.102)], name="Good")
    bad = make_course(
        "bad",
        [("x1", "999", float("nan"), -0.1), ("x2", "201", 51.503, -0.098)],
        name="Bad",
        start=(float("nan"), -0.1),
    )

    overlay = build_overlay([good, bad], 15.0, latitude=51.5)

    assert {symbol.control.code for symbol in overlay.controls} == {"101", "201"}
    assert "control 999" in overlay.skipped
    assert "course Bad" in overlay.skipped
    assert "start Bad" in overlay.skipped
    lines = {course.course_id: course.lines for course in overlay.courses}
    assert len(lines["good"]) == 2
    assert lines["bad"] == []


def test_projected_reference_refuses_overlay(shared_control_courses) -> None:
    with pytest.raises(UnsupportedProjectionError):
        build_overlay(
            shared_control_courses,
            15.0,
            reference=CoordinateReference("projected", "EPSG:32630"),
        )


def test_reference_latitude_is_mean_start_latitude() -> None:
    courses = [
        make_course("a", start=(51.0, 0.0)),
        make_course("b", start=(52.0, 0.0)),
        make_course("c", start=(float("nan"), 0.0)),
    ]

    assert reference_latitude(courses) == pytest.approx(51.5)
    assert reference_latitude([]) == 51.0


def test_empty_event_builds_empty_overlay() -> None:
    overlay = build_overlay([], 14.0)

    assert overlay.controls == []
    assert overlay.courses == []
    assert overlay.reference_latitude == 51.0


def test_string_coordinates_skip_only_that_control() -> None:
    good = make_course("good", [("g1", "101", 51.502, -0.102)], name="Good")
    bad = make_course("bad", [("g2", "102", 51.504, -0.104)], name="Bad")
    bad.controls[0].position = Position("51.504", "-0.104")

    overlay = build_overlay([good, bad], 15.0, latitude=51.5)

    assert [symbol.control.code for symbol in overlay.controls] == ["101"]
    assert overlay.skipped == ["control 102"]
    lines = {course.course_id: course.lines for course in overlay.courses}
    assert len(lines["good"]) == 2
    # Without its only control the course runs straight from start to finish.
    assert len(lines["bad"]) == 1


def test_north_pointing_shared_start_feeds_every_first_leg() -> None:
    """Each course leaves from a vertex of the triangle actually drawn."""

    course_a = make_course("a", [("a1", "101", 51.502, -0.102)])
    course_b = make_course("b", [("b1", "102", 51.503, -0.098)])

    overlay = build_overlay([course_a, course_b], 15.0)

    drawn_vertices = overlay.starts[0].triangle.vertices
    for course in overlay.courses:
        first_leg_begin = course.lines[0].vertices[0]
        assert first_leg_begin == drawn_vertices[0]
