from __future__ import annotations

from dataclasses import dataclass, field
import math
from typing import List, Literal, Optional, Set

from .config import VISIT_DISTANCE_DEFAULT_M, VISIT_TRACKING_ENABLED_DEFAULT
from .errors import InvalidPositionError

CoordinateKind = Literal["geographic", "projected"]


def _is_real(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


@dataclass(frozen=True, slots=True)
class Position:
    lat: float
    lng: float

    @property
    def is_valid(self) -> bool:
        """True for finite real-number coordinates within WGS84 range."""

        if not (_is_real(self.lat) and _is_real(self.lng)):
            return False
        return (
            math.isfinite(self.lat)
            and math.isfinite(self.lng)
            and -90.0 <= self.lat <= 90.0
            and -180.0 <= self.lng <= 180.0
        )


@dataclass(slots=True)
class Control:
    id: str
    code: str
    number: int
    position: Position


@dataclass(slots=True)
class Course:
    id: str
    name: str
    color: str
    start: Position
    finish: Position
    controls: List[Control] = field(default_factory=list)
    visible: bool = True


@dataclass(slots=True)
class PositionSample:
    """One reading from the host's location provider.

    Only ``position`` drives visit tracking; accuracy and heading are passed
    through to renderers. ``position`` is ``None`` until the first fix.
    """

    position: Optional[Position]
    accuracy_m: Optional[float] = None
    heading_deg: Optional[float] = None
    timestamp_ms: Optional[int] = None


@dataclass(frozen=True, slots=True)
class CoordinateReference:
    """Declared coordinate system of the map the courses are drawn on.

    ``definition`` is anything ``pyproj.CRS.from_user_input`` accepts
    (``"EPSG:4326"``, WKT, a PROJ string). ``None`` means plain WGS84.
    """

    kind: CoordinateKind = "geographic"
    definition: Optional[str] = None


@dataclass(slots=True)
class Event:
    id: str
    name: str
    courses: List[Course] = field(default_factory=list)
    coordinate_reference: CoordinateReference = field(default_factory=CoordinateReference)
    date: Optional[str] = None


@dataclass(slots=True)
class VisitState:
    visited_control_ids: Set[str] = field(default_factory=set)
    distance_threshold_m: float = VISIT_DISTANCE_DEFAULT_M
    tracking_enabled: bool = VISIT_TRACKING_ENABLED_DEFAULT


def validate_position(position: object) -> Position:
    """Return ``position`` if it is a usable WGS84 coordinate, else raise."""

    if not isinstance(position, Position):
        raise InvalidPositionError(f"Expected a Position, got {type(position).__name__}")
    if not position.is_valid:
        raise InvalidPositionError(
            f"Position out of range or not finite: lat={position.lat} lng={position.lng}"
        )
    return position
