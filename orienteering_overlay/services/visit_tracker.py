"""Control visit tracking from a live position stream.

The tracker owns no global state. Callers create a :class:`VisitState` (one
per open event, say), hand it to a :class:`VisitTracker`, and call
:meth:`VisitTracker.on_position` whenever the host receives a location fix.
Visited membership only grows until :meth:`VisitTracker.reset`, so duplicate
or out-of-order fixes are harmless.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Collection, Iterable, List, Literal, Optional, Sequence, Tuple, Union

from ..config import (
    GPS_LOW_ACCURACY_M,
    GPS_VERY_LOW_ACCURACY_M,
    VISIT_DISTANCE_OPTIONS_M,
)
from ..errors import InvalidPositionError
from ..geometry.bearing import haversine_m
from ..models import Control, Course, Position, PositionSample, VisitState, validate_position

AccuracyLevel = Literal["good", "low", "very_low"]
PositionInput = Union[Position, PositionSample, None]


@dataclass(slots=True)
class VisitTrackerConfig:
    distance_options_m: Tuple[float, ...] = VISIT_DISTANCE_OPTIONS_M
    logger: logging.Logger | None = None


class VisitTracker:
    def __init__(
        self,
        state: VisitState | None = None,
        config: VisitTrackerConfig | None = None,
    ):
        self.state = state if state is not None else VisitState()
        self.config = config or VisitTrackerConfig()
        self._log = self.config.logger or logging.getLogger(self.__class__.__name__)

    @property
    def visited_count(self) -> int:
        return len(self.state.visited_control_ids)

    def set_distance_threshold(self, meters: float) -> None:
        """Replace the visit distance. Already visited controls stay visited."""

        value = float(meters)
        if value not in self.config.distance_options_m:
            options = ", ".join(f"{opt:g}" for opt in self.config.distance_options_m)
            raise ValueError(f"Visit distance must be one of {options} metres, got {meters}")
        self.state.distance_threshold_m = value

    def set_tracking_enabled(self, enabled: bool) -> None:
        self.state.tracking_enabled = bool(enabled)

    def is_visited(self, control_id: str) -> bool:
        return control_id in self.state.visited_control_ids

    def any_visited(self, control_ids: Iterable[str]) -> bool:
        """Return True when any instance of a shared control has been visited."""

        return any(control_id in self.state.visited_control_ids for control_id in control_ids)

    def on_position(
        self, position: PositionInput, visible_controls: Iterable[Control]
    ) -> List[str]:
        """Mark controls within the visit distance of ``position`` as visited.

        Args:
            position: Latest fix, either a bare :class:`Position` or a
                :class:`PositionSample`. ``None`` (no fix yet) is ignored.
            visible_controls: Controls of the courses currently shown.

        Returns:
            Ids of controls newly marked visited by this fix, in input order.
        """

        if not self.state.tracking_enabled:
            return []
        if isinstance(position, PositionSample):
            position = position.position
        if position is None:
            return []
        try:
            fix = validate_position(position)
        except InvalidPositionError as exc:
            self._log.debug("Ignoring position fix: %s", exc)
            return []

        visited = self.state.visited_control_ids
        threshold = self.state.distance_threshold_m
        newly_visited: List[str] = []
        for control in visible_controls:
            if control.id in visited:
                continue
            if not control.position.is_valid:
                continue
            distance = haversine_m(fix, control.position)
            if distance <= threshold:
                visited.add(control.id)
                newly_visited.append(control.id)
                self._log.info(
                    "Control %s (id=%s) visited at %.1f m", control.code, control.id, distance
                )
        return newly_visited

    def reset(self) -> int:
        """Forget every visited control. Returns how many were cleared."""

        cleared = len(self.state.visited_control_ids)
        self.state.visited_control_ids.clear()
        if cleared:
            self._log.info("Reset %d visited control(s)", cleared)
        return cleared


def visible_controls(
    courses: Sequence[Course], visible_course_ids: Optional[Collection[str]] = None
) -> List[Control]:
    """Return the controls of visible courses, in course order.

    ``visible_course_ids`` overrides each course's own ``visible`` flag.
    """

    if visible_course_ids is None:
        shown = [course for course in courses if course.visible]
    else:
        shown = [course for course in courses if course.id in visible_course_ids]
    return [control for course in shown for control in course.controls]


def accuracy_level(accuracy_m: Optional[float]) -> AccuracyLevel:
    """Classify a fix's reported accuracy for user-facing warnings."""

    if accuracy_m is None or accuracy_m <= GPS_LOW_ACCURACY_M:
        return "good"
    if accuracy_m > GPS_VERY_LOW_ACCURACY_M:
        return "very_low"
    return "low"


__all__ = [
    "AccuracyLevel",
    "VisitTracker",
    "VisitTrackerConfig",
    "visible_controls",
    "accuracy_level",
]
