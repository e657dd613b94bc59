"""Orienteering course overlay engine package."""

from .models import (
    Control,
    CoordinateReference,
    Course,
    Event,
    Position,
    PositionSample,
    VisitState,
)
from .errors import (
    CourseFormatError,
    DegenerateGeometryError,
    InvalidPositionError,
    UnsupportedProjectionError,
)
from .geometry import build_overlay
from .services import VisitTracker

__all__ = [
    "Control",
    "CoordinateReference",
    "Course",
    "Event",
    "Position",
    "PositionSample",
    "VisitState",
    "CourseFormatError",
    "DegenerateGeometryError",
    "InvalidPositionError",
    "UnsupportedProjectionError",
    "build_overlay",
    "VisitTracker",
]
