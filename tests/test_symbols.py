"""Tests for control, start and finish symbol geometry."""

from __future__ import annotations

import math

import pytest

from orienteering_overlay.config import SYMBOL_COLOR, VISITED_COLOR
from orienteering_overlay.errors import InvalidPositionError
from orienteering_overlay.geometry.bearing import bearing, distance_meters
from orienteering_overlay.geometry.models import UniqueControl, UniqueFinish, UniqueStart
from orienteering_overlay.geometry.scale import line_width_px
from orienteering_overlay.geometry.symbols import (
    START_VERTEX_RADIUS_M,
    build_control_symbol,
    build_control_symbols,
    build_finish_symbol,
    build_start_symbol,
    start_triangle_vertices,
)
from orienteering_overlay.models import Position

START = Position(51.500, -0.100)
CONTROL = Position(51.505, -0.105)


def _unique_control(code: str = "101", position: Position = CONTROL) -> UniqueControl:
    return UniqueControl(code=code, position=position, control_ids={"a1", "b1"})


def test_control_symbol_defaults_to_symbol_colour() -> None:
    symbol = build_control_symbol(_unique_control(), 15.0, 51.5)

    assert symbol.visited is False
    assert symbol.circle.color == SYMBOL_COLOR
    assert symbol.circle.radius_m == 37.5
    assert symbol.circle.center == CONTROL
    assert symbol.circle.stroke_width_px == pytest.approx(line_width_px(15.0, 51.5))


def test_control_symbol_visited_when_any_instance_visited() -> None:
    visited_ids = {"b1"}

    symbol = build_control_symbol(
        _unique_control(), 15.0, 51.5, lambda ids: any(i in visited_ids for i in ids)
    )

    assert symbol.visited is True
    assert symbol.circle.color == VISITED_COLOR


def test_control_symbol_rejects_invalid_position() -> None:
    with pytest.raises(InvalidPositionError):
        build_control_symbol(_unique_control(position=Position(float("nan"), 0.0)), 15.0)


def test_build_control_symbols_skips_bad_controls() -> None:
    controls = [
        _unique_control("101"),
        _unique_control("102", Position(95.0, 0.0)),
        _unique_control("103", Position(51.506, -0.106)),
    ]

    symbols = build_control_symbols(controls, 15.0, 51.5)

    assert [symbol.control.code for symbol in symbols] == ["101", "103"]


def test_start_triangle_aims_at_first_control() -> None:
    vertices = start_triangle_vertices(START, CONTROL)

    assert len(vertices) == 3
    assert bearing(START, vertices[0]) == pytest.approx(bearing(START, CONTROL), abs=0.1)
    for vertex in vertices:
        assert distance_meters(START, vertex) == pytest.approx(START_VERTEX_RADIUS_M, abs=0.01)


def test_start_vertex_radius_matches_triangle_side() -> None:
    assert START_VERTEX_RADIUS_M == pytest.approx(90.0 / math.sqrt(3.0))
    assert START_VERTEX_RADIUS_M == pytest.approx(51.96, abs=0.01)


def test_start_triangle_is_equilateral() -> None:
    a, b, c = start_triangle_vertices(START, CONTROL)
    sides = [distance_meters(a, b), distance_meters(b, c), distance_meters(c, a)]
    for side in sides:
        assert side == pytest.approx(90.0, abs=0.05)


@pytest.mark.parametrize("first_control", [None, START])
def test_start_triangle_points_north_without_target(first_control) -> None:
    aimed = start_triangle_vertices(START, first_control)[0]

    assert aimed.lat > START.lat
    assert aimed.lng == pytest.approx(START.lng)


def test_start_symbol_records_aim_bearing() -> None:
    start = UniqueStart(position=START, course_ids=["a"], course_names=["A"])

    symbol = build_start_symbol(start, 15.0, 51.5, CONTROL)

    assert symbol.aim_bearing_deg == pytest.approx(bearing(START, CONTROL))
    assert symbol.triangle.color == SYMBOL_COLOR
    assert len(symbol.triangle.vertices) == 3


def test_start_symbol_ignores_invalid_first_control() -> None:
    start = UniqueStart(position=START)

    symbol = build_start_symbol(start, 15.0, 51.5, Position(float("inf"), 0.0))

    assert symbol.aim_bearing_deg == 0.0


def test_finish_symbol_has_two_concentric_circles() -> None:
    finish = UniqueFinish(position=Position(51.51, -0.11))

    symbol = build_finish_symbol(finish, 15.0, 51.5)

    assert symbol.outer.radius_m == 10.0
    assert symbol.inner.radius_m == 6.0
    assert symbol.outer.center == symbol.inner.center == finish.position


def test_finish_symbol_rejects_invalid_position() -> None:
    with pytest.raises(InvalidPositionError):
        build_finish_symbol(UniqueFinish(position=Position(0.0, 200.0)), 15.0)


@pytest.mark.parametrize("position", [Position("51.505", "-0.105"), Position(None, 0.0)])
def test_non_numeric_coordinates_are_invalid(position: Position) -> None:
    assert not position.is_valid
    with pytest.raises(InvalidPositionError):
        build_control_symbol(_unique_control(position=position), 15.0)
