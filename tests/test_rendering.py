"""Tests for drawing overlay geometry with folium."""

from __future__ import annotations

from collections import Counter
from pathlib import Path

import folium

from orienteering_overlay.geometry.overlay import build_overlay
from orienteering_overlay.models import Position, PositionSample
from orienteering_overlay.rendering import render_overlay


def _child_types(map_object: folium.Map) -> Counter:
    return Counter(type(child).__name__ for child in map_object._children.values())


def test_render_overlay_writes_html(tmp_path: Path, shared_control_courses) -> None:
    """Ensure the renderer produces an interactive map and saves output."""

    overlay = build_overlay(shared_control_courses, 15.0)
    output_path = tmp_path / "maps" / "overlay.html"

    map_object = render_overlay(overlay, output_html_path=output_path)

    assert isinstance(map_object, folium.Map)
    assert output_path.exists(), "Expected HTML output to be written"
    html = output_path.read_text(encoding="utf-8")
    assert "#9333ea" in html


def test_render_overlay_draws_every_symbol(shared_control_courses) -> None:
    overlay = build_overlay(shared_control_courses, 15.0)

    counts = _child_types(render_overlay(overlay))

    # Three shared controls plus the two finish circles.
    assert counts["Circle"] == 5
    assert counts["Polygon"] == 1
    assert counts["PolyLine"] == sum(len(course.lines) for course in overlay.courses)
    assert counts["Marker"] == 0


def test_render_overlay_draws_labels_for_selected_course(shared_control_courses) -> None:
    overlay = build_overlay(shared_control_courses, 15.0, selected_course_id="course-a")

    counts = _child_types(render_overlay(overlay))

    assert counts["Marker"] == 2


def test_render_overlay_draws_gps_fix(shared_control_courses) -> None:
    overlay = build_overlay(shared_control_courses, 15.0)
    sample = PositionSample(Position(51.503, -0.101), accuracy_m=75.0)

    counts = _child_types(render_overlay(overlay, gps=sample))

    assert counts["CircleMarker"] == 1
    assert counts["Circle"] == 6


def test_render_overlay_without_fix_skips_gps(shared_control_courses) -> None:
    overlay = build_overlay(shared_control_courses, 15.0)

    counts = _child_types(render_overlay(overlay, gps=PositionSample(None)))

    assert counts["CircleMarker"] == 0
