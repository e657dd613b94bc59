"""Dataclasses describing derived course entities and drawable geometry."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Set, Tuple

from ..models import Position


@dataclass(slots=True)
class CourseVisit:
    """One course passing through a shared control."""

    course_id: str
    course_name: str
    course_color: str
    control_number: int


@dataclass(slots=True)
class UniqueControl:
    """A physical control shared by every course that uses the same code and position."""

    code: str
    position: Position
    control_ids: Set[str] = field(default_factory=set)
    courses: List[CourseVisit] = field(default_factory=list)


@dataclass(slots=True)
class UniqueStart:
    position: Position
    course_ids: List[str] = field(default_factory=list)
    course_names: List[str] = field(default_factory=list)


@dataclass(slots=True)
class UniqueFinish:
    position: Position
    course_ids: List[str] = field(default_factory=list)
    course_names: List[str] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class CircleShape:
    center: Position
    radius_m: float
    stroke_width_px: float
    color: str


@dataclass(frozen=True, slots=True)
class PolygonShape:
    vertices: Tuple[Position, ...]
    stroke_width_px: float
    color: str


@dataclass(frozen=True, slots=True)
class PolylineShape:
    vertices: Tuple[Position, ...]
    stroke_width_px: float
    color: str
    opacity: float = 1.0


@dataclass(frozen=True, slots=True)
class LabelShape:
    anchor: Position
    text: str
    font_size_px: float
    color: str
    control_id: Optional[str] = None


@dataclass(slots=True)
class ControlSymbol:
    control: UniqueControl
    circle: CircleShape
    visited: bool = False


@dataclass(slots=True)
class StartSymbol:
    start: UniqueStart
    triangle: PolygonShape
    aim_bearing_deg: float


@dataclass(slots=True)
class FinishSymbol:
    finish: UniqueFinish
    outer: CircleShape
    inner: CircleShape


@dataclass(slots=True)
class CourseOverlay:
    """Drawable line and label geometry belonging to a single course."""

    course_id: str
    course_name: str
    lines: List[PolylineShape] = field(default_factory=list)
    labels: List[LabelShape] = field(default_factory=list)


@dataclass(slots=True)
class OverlayGeometry:
    """Everything a renderer needs to draw the visible courses at one zoom."""

    zoom: float
    reference_latitude: float
    controls: List[ControlSymbol] = field(default_factory=list)
    starts: List[StartSymbol] = field(default_factory=list)
    finishes: List[FinishSymbol] = field(default_factory=list)
    courses: List[CourseOverlay] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
