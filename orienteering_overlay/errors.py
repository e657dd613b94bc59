"""Central error types used across the application."""

from __future__ import annotations


class CourseFormatError(ValueError):
    """Raised when an event file is missing required course fields."""


class CourseGeometryError(RuntimeError):
    """Base error for course geometry failures."""


class UnsupportedProjectionError(CourseGeometryError):
    """Raised when course coordinates are not in a geographic reference system."""


class DegenerateGeometryError(CourseGeometryError):
    """Raised when a direction is requested between two identical points."""


class InvalidPositionError(CourseGeometryError, ValueError):
    """Raised when a latitude/longitude pair is not finite or out of range."""


__all__ = [
    "CourseFormatError",
    "CourseGeometryError",
    "UnsupportedProjectionError",
    "DegenerateGeometryError",
    "InvalidPositionError",
]
