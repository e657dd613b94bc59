"""Event file reading layer (pure reads + validation).

Events are JSON documents shaped like the application's stored events::

    {
      "id": "event-1",
      "name": "Spring Middle",
      "coordinate_reference": {"kind": "geographic", "definition": "EPSG:4326"},
      "courses": [
        {
          "id": "course-1", "name": "Course A", "color": "#FF0000",
          "visible": true,
          "start": {"lat": 51.5, "lng": -0.1},
          "finish": {"lat": 51.51, "lng": -0.11},
          "controls": [
            {"id": "ctrl-1", "code": "101", "number": 1,
             "position": {"lat": 51.505, "lng": -0.105}}
          ]
        }
      ]
    }

Missing required fields raise :class:`CourseFormatError` here, once, so the
geometry engine only ever sees well-shaped records.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, List, Mapping, Union

import pandas as pd

from .errors import CourseFormatError
from .models import Control, CoordinateReference, Course, Event, Position, PositionSample

PathLike = Union[str, Path]

_DEFAULT_COURSE_COLOR = "#9333ea"
_REQUIRED_SAMPLE_COLS = {"lat", "lng"}
_NUMERIC_SAMPLE_COLS = ("lat", "lng", "accuracy_m", "heading_deg", "timestamp_ms")


def _require(payload: Mapping[str, Any], key: str, where: str) -> Any:
    if not isinstance(payload, Mapping):
        raise CourseFormatError(f"Expected an object for {where}")
    if key not in payload or payload[key] is None:
        raise CourseFormatError(f"Missing '{key}' in {where}")
    return payload[key]


def _parse_position(payload: Any, where: str) -> Position:
    lat = _require(payload, "lat", where)
    lng = _require(payload, "lng", where)
    try:
        return Position(float(lat), float(lng))
    except (TypeError, ValueError) as exc:
        raise CourseFormatError(f"Non-numeric coordinate in {where}: {payload}") from exc


def _parse_control(payload: Any, where: str) -> Control:
    raw_number = _require(payload, "number", where)
    try:
        number = int(raw_number)
    except (TypeError, ValueError) as exc:
        raise CourseFormatError(f"Invalid control number '{raw_number}' in {where}") from exc
    return Control(
        id=str(_require(payload, "id", where)),
        code=str(_require(payload, "code", where)).strip(),
        number=number,
        position=_parse_position(_require(payload, "position", where), f"{where} position"),
    )


def _parse_course(payload: Any, index: int) -> Course:
    where = f"course #{index + 1}"
    course_id = str(_require(payload, "id", where))
    name = str(payload.get("name") or course_id)
    where = f"course '{name}'"
    raw_controls = payload.get("controls") or []
    if not isinstance(raw_controls, list):
        raise CourseFormatError(f"'controls' must be a list in {where}")
    controls = [
        _parse_control(item, f"{where} control #{pos + 1}")
        for pos, item in enumerate(raw_controls)
    ]
    return Course(
        id=course_id,
        name=name,
        color=str(payload.get("color") or _DEFAULT_COURSE_COLOR),
        start=_parse_position(_require(payload, "start", where), f"{where} start"),
        finish=_parse_position(_require(payload, "finish", where), f"{where} finish"),
        controls=controls,
        visible=bool(payload.get("visible", True)),
    )


def parse_coordinate_reference(payload: Any) -> CoordinateReference:
    if payload is None:
        return CoordinateReference()
    if not isinstance(payload, Mapping):
        raise CourseFormatError("'coordinate_reference' must be an object")
    kind = str(payload.get("kind") or "geographic").strip().lower()
    if kind not in {"geographic", "projected"}:
        raise CourseFormatError(f"Unknown coordinate reference kind '{kind}'")
    definition = payload.get("definition")
    return CoordinateReference(
        kind=kind,  # type: ignore[arg-type]
        definition=str(definition) if definition else None,
    )


def parse_courses(payload: Any) -> List[Course]:
    """Build course records from a decoded ``courses`` list."""

    if not isinstance(payload, list):
        raise CourseFormatError("'courses' must be a list")
    return [_parse_course(item, index) for index, item in enumerate(payload)]


def parse_event(payload: Any) -> Event:
    if not isinstance(payload, Mapping):
        raise CourseFormatError("Event file must contain a JSON object")
    event_id = str(payload.get("id") or payload.get("name") or "event")
    return Event(
        id=event_id,
        name=str(payload.get("name") or event_id),
        courses=parse_courses(_require(payload, "courses", "event")),
        coordinate_reference=parse_coordinate_reference(payload.get("coordinate_reference")),
        date=payload.get("date"),
    )


def load_event(path: PathLike) -> Event:
    """Read and validate an event JSON file.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        CourseFormatError: If the file is not valid JSON or misses required fields.
    """

    file_path = Path(path)
    text = file_path.read_text(encoding="utf-8")
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise CourseFormatError(f"Event file '{file_path}' is not valid JSON: {exc}") from exc
    return parse_event(payload)


def _optional_float(value: object) -> float | None:
    if pd.isna(value):
        return None
    return float(value)  # type: ignore[arg-type]


def _numeric_column(df: pd.DataFrame, column: str, path: PathLike) -> pd.Series:
    """Return ``column`` as numbers, rejecting cells that are present but not numeric."""

    converted = pd.to_numeric(df[column], errors="coerce")
    bad = converted.isna() & df[column].notna()
    if bad.any():
        index = bad.idxmax()
        # Line numbers count the header as line 1.
        raise CourseFormatError(
            f"Position file '{path}' line {index + 2}: "
            f"non-numeric {column} '{df.at[index, column]}'"
        )
    return converted


def read_position_samples(path: PathLike) -> List[PositionSample]:
    """Read a recorded position stream from CSV.

    Required columns are ``lat`` and ``lng``; ``accuracy_m``, ``heading_deg``
    and ``timestamp_ms`` are optional. Rows without coordinates become samples
    with no fix, which the visit tracker ignores.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        CourseFormatError: If the file is empty, lacks ``lat``/``lng`` columns or
            holds a non-numeric value in a numeric column.
    """

    try:
        df = pd.read_csv(path)
    except pd.errors.EmptyDataError as exc:
        raise CourseFormatError(f"Position file '{path}' is empty") from exc
    except pd.errors.ParserError as exc:
        raise CourseFormatError(f"Position file '{path}' is not valid CSV: {exc}") from exc
    missing = _REQUIRED_SAMPLE_COLS - set(df.columns)
    if missing:
        raise CourseFormatError(
            f"Position file '{path}' missing columns: {', '.join(sorted(missing))}"
        )
    for column in _NUMERIC_SAMPLE_COLS:
        if column in df.columns:
            df[column] = _numeric_column(df, column, path)
    if "timestamp_ms" in df.columns:
        df = df.sort_values("timestamp_ms", kind="stable")

    samples: List[PositionSample] = []
    for row in df.to_dict(orient="records"):
        lat = _optional_float(row.get("lat"))
        lng = _optional_float(row.get("lng"))
        timestamp = _optional_float(row.get("timestamp_ms"))
        samples.append(
            PositionSample(
                position=Position(lat, lng) if lat is not None and lng is not None else None,
                accuracy_m=_optional_float(row.get("accuracy_m")),
                heading_deg=_optional_float(row.get("heading_deg")),
                timestamp_ms=int(timestamp) if timestamp is not None else None,
            )
        )
    return samples


__all__ = [
    "parse_coordinate_reference",
    "parse_courses",
    "parse_event",
    "load_event",
    "read_position_samples",
]
