"""Collapse per-course control, start and finish instances into shared entities.

Output order is the order in which each entity is first seen while walking
``courses`` (and each course's controls) in sequence. Label placement relies
on that order being stable.
"""

from __future__ import annotations

from typing import Dict, List, Sequence, Tuple

from ..models import Course, Position
from .models import CourseVisit, UniqueControl, UniqueFinish, UniqueStart

_ControlKey = Tuple[str, Position]


def extract_unique_controls(courses: Sequence[Course]) -> List[UniqueControl]:
    """Group controls sharing an identical code and position."""

    controls: Dict[_ControlKey, UniqueControl] = {}
    for course in courses:
        for control in course.controls:
            key = (control.code, control.position)
            unique = controls.get(key)
            if unique is None:
                unique = UniqueControl(code=control.code, position=control.position)
                controls[key] = unique
            unique.control_ids.add(control.id)
            unique.courses.append(
                CourseVisit(
                    course_id=course.id,
                    course_name=course.name,
                    course_color=course.color,
                    control_number=control.number,
                )
            )
    return list(controls.values())


def extract_unique_starts(courses: Sequence[Course]) -> List[UniqueStart]:
    starts: Dict[Position, UniqueStart] = {}
    for course in courses:
        unique = starts.setdefault(course.start, UniqueStart(position=course.start))
        unique.course_ids.append(course.id)
        unique.course_names.append(course.name)
    return list(starts.values())


def extract_unique_finishes(courses: Sequence[Course]) -> List[UniqueFinish]:
    finishes: Dict[Position, UniqueFinish] = {}
    for course in courses:
        unique = finishes.setdefault(course.finish, UniqueFinish(position=course.finish))
        unique.course_ids.append(course.id)
        unique.course_names.append(course.name)
    return list(finishes.values())


__all__ = [
    "extract_unique_controls",
    "extract_unique_starts",
    "extract_unique_finishes",
]
