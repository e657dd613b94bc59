"""Draw overlay geometry on an interactive Leaflet map using folium."""

from __future__ import annotations

from html import escape
from pathlib import Path
from typing import List, Optional, Tuple, Union

import folium  # Using folium to build an interactive Leaflet map.

from .geometry.models import (
    ControlSymbol,
    FinishSymbol,
    LabelShape,
    OverlayGeometry,
    StartSymbol,
)
from .models import Position, PositionSample
from .services.visit_tracker import accuracy_level

LatLon = Tuple[float, float]
PathLike = Union[str, Path]

_GPS_COLOR = "#3b82f6"
_GPS_OUTLINE_COLOR = "#ffffff"
_DEFAULT_CENTER: LatLon = (51.0, 0.0)


def _latlon(position: Position) -> LatLon:
    return (position.lat, position.lng)


def _map_center(overlay: OverlayGeometry, gps: Optional[PositionSample]) -> LatLon:
    if overlay.starts:
        return _latlon(overlay.starts[0].start.position)
    if overlay.controls:
        return _latlon(overlay.controls[0].circle.center)
    if gps is not None and gps.position is not None:
        return _latlon(gps.position)
    return _DEFAULT_CENTER


def _control_popup(symbol: ControlSymbol) -> folium.Popup:
    rows = "".join(
        f'<div><span style="display:inline-block;width:12px;height:12px;'
        f'background-color:{escape(visit.course_color)};border-radius:2px"></span> '
        f"{escape(visit.course_name)} - Control {visit.control_number}</div>"
        for visit in symbol.control.courses
    )
    status = " (visited)" if symbol.visited else ""
    html = (
        f"<strong>Control {escape(symbol.control.code)}</strong>{status}"
        f'<div style="font-size:11px;color:#666">Courses:</div>{rows}'
    )
    return folium.Popup(html=html, max_width=300)


def _add_control(symbol: ControlSymbol, target: folium.Map) -> None:
    circle = symbol.circle
    folium.Circle(
        location=_latlon(circle.center),
        radius=circle.radius_m,
        color=circle.color,
        weight=circle.stroke_width_px,
        fill=False,
        popup=_control_popup(symbol),
    ).add_to(target)


def _add_start(symbol: StartSymbol, target: folium.Map) -> None:
    triangle = symbol.triangle
    names = ", ".join(symbol.start.course_names)
    folium.Polygon(
        locations=[_latlon(vertex) for vertex in triangle.vertices],
        color=triangle.color,
        weight=triangle.stroke_width_px,
        fill=False,
        tooltip="Start",
        popup=folium.Popup(html=f"<strong>Start</strong><br>Course: {escape(names)}"),
    ).add_to(target)


def _add_finish(symbol: FinishSymbol, target: folium.Map) -> None:
    names = ", ".join(symbol.finish.course_names)
    for circle in (symbol.outer, symbol.inner):
        folium.Circle(
            location=_latlon(circle.center),
            radius=circle.radius_m,
            color=circle.color,
            weight=circle.stroke_width_px,
            fill=False,
            tooltip="Finish",
            popup=folium.Popup(html=f"<strong>Finish</strong><br>Course: {escape(names)}"),
        ).add_to(target)


def _add_label(label: LabelShape, target: folium.Map) -> None:
    html = (
        f'<div style="font-size:{label.font_size_px:.1f}px;color:{label.color};'
        f'font-weight:bold;font-family:Arial,sans-serif;white-space:nowrap;'
        f'transform:translate(-50%,-50%)">{escape(label.text)}</div>'
    )
    folium.Marker(location=_latlon(label.anchor), icon=folium.DivIcon(html=html)).add_to(
        target
    )


def _add_gps(sample: PositionSample, target: folium.Map) -> None:
    if sample.position is None or not sample.position.is_valid:
        return
    location = _latlon(sample.position)
    if sample.accuracy_m is not None and sample.accuracy_m > 0:
        folium.Circle(
            location=location,
            radius=sample.accuracy_m,
            color=_GPS_COLOR,
            weight=1,
            opacity=0.4,
            fill=True,
            fill_color=_GPS_COLOR,
            fill_opacity=0.15,
            tooltip=f"GPS accuracy {sample.accuracy_m:.0f} m ({accuracy_level(sample.accuracy_m)})",
        ).add_to(target)
    folium.CircleMarker(
        location=location,
        radius=8,
        color=_GPS_OUTLINE_COLOR,
        weight=3,
        fill=True,
        fill_color=_GPS_COLOR,
        fill_opacity=1.0,
        tooltip="Current position",
    ).add_to(target)


def render_overlay(
    overlay: OverlayGeometry,
    *,
    gps: Optional[PositionSample] = None,
    output_html_path: Optional[PathLike] = None,
) -> folium.Map:
    """Create an interactive map showing the course overlay.

    Args:
        overlay: Geometry produced by :func:`build_overlay`.
        gps: Optional latest position sample to mark on the map.
        output_html_path: Optional path to persist the map as an HTML file.

    Returns:
        A :class:`folium.Map` instance containing the overlay.
    """

    folium_map = folium.Map(
        location=_map_center(overlay, gps),
        zoom_start=int(round(overlay.zoom)),
        control_scale=True,
    )

    for course in overlay.courses:
        for line in course.lines:
            folium.PolyLine(
                [_latlon(vertex) for vertex in line.vertices],
                color=line.color,
                weight=line.stroke_width_px,
                opacity=line.opacity,
                line_cap="round",
                line_join="round",
                tooltip=course.course_name,
            ).add_to(folium_map)
    for symbol in overlay.controls:
        _add_control(symbol, folium_map)
    for start in overlay.starts:
        _add_start(start, folium_map)
    for finish in overlay.finishes:
        _add_finish(finish, folium_map)
    labels: List[LabelShape] = [label for course in overlay.courses for label in course.labels]
    for label in labels:
        _add_label(label, folium_map)
    if gps is not None:
        _add_gps(gps, folium_map)

    if output_html_path is not None:
        output_path = Path(output_html_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        folium_map.save(str(output_path))

    return folium_map


__all__ = ["render_overlay"]
