"""Course symbol geometry: scale, bearings, symbols, course lines and labels.

This package turns course records into renderer-neutral geometry
descriptors. Nothing here touches a drawing surface.
"""

from .models import (
    CircleShape,
    ControlSymbol,
    CourseOverlay,
    CourseVisit,
    FinishSymbol,
    LabelShape,
    OverlayGeometry,
    PolygonShape,
    PolylineShape,
    StartSymbol,
    UniqueControl,
    UniqueFinish,
    UniqueStart,
)
from .scale import label_font_size_px, line_width_px, meters_per_degree_lng, resolution
from .bearing import (
    average_angle,
    bearing,
    circle_edge_point,
    distance_meters,
    haversine_m,
    offset_position,
)
from .projection import ensure_supported
from .dedupe import extract_unique_controls, extract_unique_finishes, extract_unique_starts
from .symbols import (
    build_control_symbol,
    build_finish_symbol,
    build_start_symbol,
    start_triangle_vertices,
)
from .lines import segment_course
from .labels import place_course_labels, solve_label_positions
from .overlay import build_overlay

__all__ = [
    "CircleShape",
    "ControlSymbol",
    "CourseOverlay",
    "CourseVisit",
    "FinishSymbol",
    "LabelShape",
    "OverlayGeometry",
    "PolygonShape",
    "PolylineShape",
    "StartSymbol",
    "UniqueControl",
    "UniqueFinish",
    "UniqueStart",
    "label_font_size_px",
    "line_width_px",
    "meters_per_degree_lng",
    "resolution",
    "average_angle",
    "bearing",
    "circle_edge_point",
    "distance_meters",
    "haversine_m",
    "offset_position",
    "ensure_supported",
    "extract_unique_controls",
    "extract_unique_finishes",
    "extract_unique_starts",
    "build_control_symbol",
    "build_finish_symbol",
    "build_start_symbol",
    "start_triangle_vertices",
    "segment_course",
    "place_course_labels",
    "solve_label_positions",
    "build_overlay",
]
